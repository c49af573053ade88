"""Test configuration and common utilities.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import socket
from typing import TYPE_CHECKING, Any

import pytest
import respx

from spotilink import OAuthClientConfig, SpotifyClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator


@pytest.fixture
def free_port() -> int:
    """Return a loopback port that is free at the time of the call.

    Returns:
        int: An unused TCP port on 127.0.0.1.

    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def redirect_uri(free_port: int) -> str:
    """Return a loopback redirect URI on a free port.

    Returns:
        str: The redirect URI for testing.

    """
    return f"http://127.0.0.1:{free_port}/callback"


@pytest.fixture
def oauth_config(redirect_uri: str) -> OAuthClientConfig:
    """Return OAuth client configuration for testing.

    Returns:
        OAuthClientConfig: Configuration with a short callback timeout.

    """
    return OAuthClientConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri=redirect_uri,
        scopes=["user-read-private", "playlist-modify-public"],
        callback_timeout=5.0,
    )


@pytest.fixture
async def client(
    oauth_config: OAuthClientConfig,
) -> AsyncGenerator[SpotifyClient, None]:
    """Create an authenticated test client.

    Yields:
        SpotifyClient: Configured test client.

    """
    async with SpotifyClient(
        oauth_config,
        access_token="test-access-token",
        timeout=5.0,
        retries=1,
    ) as client:
        yield client


@pytest.fixture
def mock_responses() -> Generator[Any, None, None]:
    """Mock HTTP responses; loopback traffic passes through to real sockets.

    Yields:
        The mock router for HTTP requests.

    """
    with respx.mock(assert_all_called=False) as router:
        router.route(host="127.0.0.1").pass_through()
        yield router


@pytest.fixture
def sample_token_response() -> dict[str, Any]:
    """Sample token endpoint response.

    Returns:
        dict[str, Any]: Sample token response data.

    """
    return {
        "access_token": "BQD-test-access-token",
        "token_type": "Bearer",
        "scope": "playlist-modify-public user-read-private",
        "expires_in": 3600,
        "refresh_token": "AQD-test-refresh-token",
    }


@pytest.fixture
def sample_profile() -> dict[str, Any]:
    """Sample ``/me`` response.

    Returns:
        dict[str, Any]: Sample user profile data.

    """
    return {
        "id": "user123",
        "display_name": "Test User",
        "country": "US",
        "product": "premium",
        "uri": "spotify:user:user123",
        "external_urls": {"spotify": "https://open.spotify.com/user/user123"},
        "followers": {"href": None, "total": 4},
        "images": [],
    }


def make_artist(artist_id: str, name: str, **overrides: Any) -> dict[str, Any]:
    """Build an artist payload as returned by the search endpoint."""
    artist = {
        "id": artist_id,
        "name": name,
        "genres": ["jazz", "cool jazz"],
        "popularity": 70,
        "followers": {"href": None, "total": 1234567},
        "external_urls": {"spotify": f"https://open.spotify.com/artist/{artist_id}"},
        "images": [
            {"url": f"https://i.scdn.co/image/{artist_id}", "height": 640, "width": 640}
        ],
        "type": "artist",
        "uri": f"spotify:artist:{artist_id}",
    }
    artist.update(overrides)
    return artist


@pytest.fixture
def sample_search_response() -> dict[str, Any]:
    """Sample search response with two artists.

    Returns:
        dict[str, Any]: Sample search response data.

    """
    return {
        "artists": {
            "href": "https://api.spotify.com/v1/search?query=artist%3AMiles",
            "items": [
                make_artist("0kbYTNQb4Pb1rPbbaF0pT4", "Miles Davis"),
                make_artist("1xYzAbCdEf", "Miles Davis Quintet", genres=[], popularity=40),
            ],
            "limit": 10,
            "offset": 0,
            "total": 2,
            "next": None,
            "previous": None,
        },
    }


@pytest.fixture
def sample_error_response() -> dict[str, Any]:
    """Sample Web API error response.

    Returns:
        dict[str, Any]: Sample error response data.

    """
    return {"error": {"status": 401, "message": "The access token expired"}}


@pytest.fixture
def artist_factory() -> Any:
    """Return the artist payload builder.

    Returns:
        Callable building artist payloads.

    """
    return make_artist
