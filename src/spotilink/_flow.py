"""Authorization code flow coordinator.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from ._browser import open_browser
from ._callback import CallbackListener
from ._config import OAuthClientConfig
from .client import SpotifyClient
from .exceptions import AuthorizationDeniedError, TokenFetchError
from .models import CallbackError

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    """Lifecycle of a single authorization flow."""

    IDLE = "idle"
    LISTENER_FAILED = "listener_failed"
    AWAITING_CALLBACK = "awaiting_callback"
    CODE_RECEIVED = "code_received"
    EXCHANGING_TOKEN = "exchanging_token"
    AUTHENTICATED = "authenticated"
    CALLBACK_FAILED = "callback_failed"
    TOKEN_FETCH_FAILED = "token_fetch_failed"


class AuthorizationFlow:
    """Runs one authorization code flow and returns an authenticated client.

    The listener is bound before the browser is launched, so a fast redirect
    cannot arrive ahead of the socket. Failures propagate to the caller and
    are never retried.
    """

    def __init__(
        self,
        config: OAuthClientConfig,
        *,
        client_factory: Callable[[OAuthClientConfig], SpotifyClient] = SpotifyClient,
        browser: Callable[[str], bool] = open_browser,
        on_authorization_url: Callable[[str, bool], None] | None = None,
    ) -> None:
        """Initialize the flow.

        Args:
            config: OAuth client configuration
            client_factory: Builds the unauthenticated client used for the exchange
            browser: Launches the consent URL; returns whether it succeeded
            on_authorization_url: Called with the consent URL and the browser
                result, e.g. to print the URL when no browser opened

        """
        self.config = config
        self.state = FlowState.IDLE
        self._client_factory = client_factory
        self._browser = browser
        self._on_authorization_url = on_authorization_url

    def _transition(self, state: FlowState) -> None:
        logger.debug("Authorization flow: %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self) -> SpotifyClient:
        """Run the flow.

        Returns:
            A client carrying the freshly obtained access token.

        Raises:
            ConfigurationError: If no callback port can be resolved.
            ListenerBindError: If the callback port cannot be bound.
            CallbackTimeoutError: If the user never completes consent.
            AuthorizationDeniedError: If the redirect carried no code.
            OAuthProviderError: If the token endpoint rejects the code.
            TokenFetchError: If no usable access token was returned.

        """
        if self.state is not FlowState.IDLE:
            msg = "An AuthorizationFlow can only be run once"
            raise RuntimeError(msg)

        logger.info("Starting OAuth flow...")
        async with self._client_factory(self.config) as client:
            request = client.oauth.build_authorization_url()

            listener = CallbackListener(
                self.config.redirect_uri, default_port=self.config.default_port
            )
            try:
                try:
                    await listener.start()
                except BaseException:
                    self._transition(FlowState.LISTENER_FAILED)
                    raise
                self._transition(FlowState.AWAITING_CALLBACK)
                opened = await asyncio.to_thread(self._browser, request.url)
                logger.info("Authorization URL: %s", request.url)
                if self._on_authorization_url is not None:
                    self._on_authorization_url(request.url, opened)
                outcome = await listener.wait(self.config.callback_timeout)
            except BaseException:
                if self.state is FlowState.AWAITING_CALLBACK:
                    self._transition(FlowState.CALLBACK_FAILED)
                raise
            finally:
                await listener.close()

            if isinstance(outcome, CallbackError):
                self._transition(FlowState.CALLBACK_FAILED)
                raise AuthorizationDeniedError(
                    "No authorization code in callback",
                    provider_error=outcome.provider_error,
                    details=outcome.model_dump(mode="json"),
                )

            self._transition(FlowState.CODE_RECEIVED)
            logger.info("Received authorization code. Fetching access token...")

            self._transition(FlowState.EXCHANGING_TOKEN)
            try:
                token = await client.oauth.fetch_token(outcome.code)
            except BaseException:
                self._transition(FlowState.TOKEN_FETCH_FAILED)
                raise
            if token is None:
                self._transition(FlowState.TOKEN_FETCH_FAILED)
                raise TokenFetchError("Failed to fetch token")

            session = client.with_token(token)

        self._transition(FlowState.AUTHENTICATED)
        logger.info("Access token obtained")
        return session


async def authenticate(
    config: OAuthClientConfig,
    *,
    client_factory: Callable[[OAuthClientConfig], SpotifyClient] = SpotifyClient,
    browser: Callable[[str], bool] = open_browser,
    on_authorization_url: Callable[[str, bool], None] | None = None,
) -> SpotifyClient:
    """Run the authorization code flow and return an authenticated client."""
    flow = AuthorizationFlow(
        config,
        client_factory=client_factory,
        browser=browser,
        on_authorization_url=on_authorization_url,
    )
    return await flow.run()
