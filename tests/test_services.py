"""Tests for the Web API services and HTTP error handling."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from spotilink import (
    AuthenticationError,
    ItemType,
    NetworkError,
    NotFoundError,
    OAuthClientConfig,
    OAuthProviderError,
    RateLimitError,
    ServerError,
    SpotifyClient,
    TimeoutError as ApiTimeoutError,
    TokenFetchError,
)

API = "https://api.spotify.com/v1"
TOKEN_URL = "https://accounts.spotify.com/api/token"


async def test_get_current_profile(
    client: SpotifyClient,
    mock_responses: Any,
    sample_profile: dict[str, Any],
) -> None:
    route = mock_responses.get(f"{API}/me").mock(
        return_value=httpx.Response(200, json=sample_profile)
    )

    profile = await client.users.get_current_profile()

    assert profile.id == "user123"
    assert profile.display_name == "Test User"
    assert route.calls.last.request.headers["Authorization"] == "Bearer test-access-token"


async def test_search_artists(
    client: SpotifyClient,
    mock_responses: Any,
    sample_search_response: dict[str, Any],
) -> None:
    route = mock_responses.get(f"{API}/search").mock(
        return_value=httpx.Response(200, json=sample_search_response)
    )

    result = await client.search.search("artist:Miles Davis", [ItemType.ARTIST])

    params = route.calls.last.request.url.params
    assert params["q"] == "artist:Miles Davis"
    assert params["type"] == "artist"
    assert params["market"] == "US"
    assert params["limit"] == "10"
    assert params["offset"] == "0"

    assert result.artists is not None
    assert [a.name for a in result.artists.items] == ["Miles Davis", "Miles Davis Quintet"]
    first = result.artists.items[0]
    assert first.followers is not None and first.followers.total == 1234567
    assert first.images[0].url == "https://i.scdn.co/image/0kbYTNQb4Pb1rPbbaF0pT4"


async def test_search_without_market(client: SpotifyClient, mock_responses: Any) -> None:
    route = mock_responses.get(f"{API}/search").mock(
        return_value=httpx.Response(200, json={})
    )

    result = await client.search.search("Nina", ["artist", "track"], market=None)

    params = route.calls.last.request.url.params
    assert "market" not in params
    assert params["type"] == "artist,track"
    assert result.artists is None


@pytest.mark.parametrize(
    ("types", "limit"),
    [([], 10), ([ItemType.ARTIST], 0), ([ItemType.ARTIST], 51)],
)
async def test_search_argument_validation(
    client: SpotifyClient, types: list[ItemType], limit: int
) -> None:
    with pytest.raises(ValueError):
        await client.search.search("q", types, limit=limit)


async def test_web_api_error_is_mapped(
    client: SpotifyClient,
    mock_responses: Any,
    sample_error_response: dict[str, Any],
) -> None:
    mock_responses.get(f"{API}/me").mock(
        return_value=httpx.Response(401, json=sample_error_response)
    )

    with pytest.raises(AuthenticationError) as exc_info:
        await client.users.get_current_profile()

    assert exc_info.value.message == "The access token expired"
    assert exc_info.value.status_code == 401


async def test_not_found_with_plain_text_body(
    client: SpotifyClient, mock_responses: Any
) -> None:
    mock_responses.get(f"{API}/me").mock(return_value=httpx.Response(404, text="nope"))

    with pytest.raises(NotFoundError) as exc_info:
        await client.users.get_current_profile()

    assert exc_info.value.message == "nope"


async def test_rate_limit_carries_retry_after(
    client: SpotifyClient, mock_responses: Any
) -> None:
    route = mock_responses.get(f"{API}/me").mock(
        return_value=httpx.Response(
            429,
            headers={"Retry-After": "7"},
            json={"error": {"status": 429, "message": "API rate limit exceeded"}},
        )
    )

    with pytest.raises(RateLimitError) as exc_info:
        await client.users.get_current_profile()

    assert exc_info.value.retry_after == 7
    assert route.call_count == 1


async def test_server_error_is_retried(
    client: SpotifyClient,
    mock_responses: Any,
    sample_profile: dict[str, Any],
) -> None:
    route = mock_responses.get(f"{API}/me").mock(
        side_effect=[
            httpx.Response(503, json={"error": {"status": 503, "message": "busy"}}),
            httpx.Response(200, json=sample_profile),
        ]
    )

    profile = await client.users.get_current_profile()

    assert profile.id == "user123"
    assert route.call_count == 2


async def test_server_error_after_retries(
    oauth_config: OAuthClientConfig, mock_responses: Any
) -> None:
    mock_responses.get(f"{API}/me").mock(
        return_value=httpx.Response(500, json={"error": {"status": 500, "message": "boom"}})
    )

    async with SpotifyClient(oauth_config, access_token="t", retries=0) as client:
        with pytest.raises(ServerError) as exc_info:
            await client.users.get_current_profile()

    assert exc_info.value.status_code == 500


async def test_network_error(oauth_config: OAuthClientConfig, mock_responses: Any) -> None:
    mock_responses.get(f"{API}/me").mock(side_effect=httpx.ConnectError("refused"))

    async with SpotifyClient(oauth_config, access_token="t", retries=0) as client:
        with pytest.raises(NetworkError):
            await client.users.get_current_profile()


async def test_fetch_token(
    client: SpotifyClient,
    mock_responses: Any,
    sample_token_response: dict[str, Any],
) -> None:
    route = mock_responses.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json=sample_token_response)
    )

    token = await client.oauth.fetch_token("ABC123")

    assert token is not None
    assert token.access_token == "BQD-test-access-token"
    assert token.refresh_token == "AQD-test-refresh-token"
    assert token.expires_in == 3600
    request = route.calls.last.request
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert "Authorization" not in request.headers


async def test_fetch_token_without_access_token(
    client: SpotifyClient, mock_responses: Any
) -> None:
    mock_responses.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"token_type": "Bearer"})
    )

    assert await client.oauth.fetch_token("ABC123") is None


async def test_fetch_token_is_not_retried(
    client: SpotifyClient, mock_responses: Any
) -> None:
    route = mock_responses.post(TOKEN_URL).mock(
        return_value=httpx.Response(502, text="Bad Gateway")
    )

    with pytest.raises(OAuthProviderError) as exc_info:
        await client.oauth.fetch_token("ABC123")

    assert exc_info.value.status_code == 502
    assert route.call_count == 1


@pytest.mark.parametrize(
    ("failure", "cause"),
    [
        (httpx.ConnectError("down"), NetworkError),
        (httpx.ReadTimeout("slow"), ApiTimeoutError),
    ],
)
async def test_fetch_token_transport_failure(
    client: SpotifyClient,
    mock_responses: Any,
    failure: Exception,
    cause: type[Exception],
) -> None:
    route = mock_responses.post(TOKEN_URL).mock(side_effect=failure)

    with pytest.raises(TokenFetchError) as exc_info:
        await client.oauth.fetch_token("ABC123")

    assert isinstance(exc_info.value.__cause__, cause)
    assert exc_info.value.status_code is None
    assert route.call_count == 1


async def test_fetch_token_rejects_non_json_body(
    client: SpotifyClient, mock_responses: Any
) -> None:
    mock_responses.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, text="<html>oops</html>")
    )

    with pytest.raises(TokenFetchError) as exc_info:
        await client.oauth.fetch_token("ABC123")

    assert exc_info.value.details == {"reason": "invalid_json"}
