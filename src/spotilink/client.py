"""Spotify client composed of OAuth, user and search services.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

from typing import Self
from urllib.parse import urlsplit

from ._base import BaseClient
from ._config import OAuthClientConfig
from ._oauth import AuthorizationCodeManager
from ._search import SearchService
from ._user import UsersService
from .models import OAuthToken


class SpotifyClient:
    """Spotify client; carrying an access token makes it an authenticated session."""

    def __init__(
        self,
        config: OAuthClientConfig,
        *,
        access_token: str | None = None,
        timeout: float = 30.0,
        retries: int = 3,
    ) -> None:
        """Initialize Spotify client.

        Args:
            config: OAuth client configuration
            access_token: Bearer token for Web API calls
            timeout: Request timeout in seconds
            retries: Number of retry attempts for failed requests

        """
        self.config = config
        self._timeout = timeout
        self._retries = retries

        token_url = urlsplit(config.token_url)
        self._accounts = BaseClient(
            base_url=f"{token_url.scheme}://{token_url.netloc}",
            timeout=timeout,
            retries=retries,
        )
        self._client = BaseClient(
            base_url=config.api_base_url,
            timeout=timeout,
            retries=retries,
            access_token=access_token,
        )

        # Initialize service clients
        self.oauth = AuthorizationCodeManager(config, self._accounts)
        self.users = UsersService(self._client)
        self.search = SearchService(self._client)

    async def __aenter__(self) -> Self:
        """Async context manager entry.

        Returns:
            The client instance.

        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the client and clean up resources."""
        await self._accounts.close()
        await self._client.close()

    def with_token(self, token: OAuthToken | str) -> SpotifyClient:
        """Return a new client that authenticates with ``token``.

        Args:
            token: Token response or raw access token

        """
        access_token = token if isinstance(token, str) else token.access_token
        return type(self)(
            self.config,
            access_token=access_token,
            timeout=self._timeout,
            retries=self._retries,
        )

    def get_access_token(self) -> str | None:
        """Get the current access token.

        Returns:
            Current access token or None if not set.

        """
        return self._client.get_access_token()

    @property
    def is_authenticated(self) -> bool:
        """Whether the client carries an access token."""
        return self._client.get_access_token() is not None
