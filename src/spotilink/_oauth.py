"""Authorization code manager: consent URL construction and token exchange.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode, urlsplit

from pydantic import ValidationError as ModelValidationError

from ._base import BaseClient, RequestConfig
from .exceptions import (
    ApiError,
    NetworkError,
    OAuthProviderError,
    TimeoutError as ApiTimeoutError,
    TokenFetchError,
)
from .models import AuthorizationRequest, OAuthToken

if TYPE_CHECKING:
    from ._config import OAuthClientConfig

logger = logging.getLogger(__name__)

SCOPE_SEPARATOR = " "


def build_authorization_url(config: OAuthClientConfig) -> AuthorizationRequest:
    """Build the provider consent URL for ``config``.

    Scopes are de-duplicated and sorted so equal configs give byte-identical
    URLs. All values are percent-encoded, including the scope separator.
    """
    scopes = tuple(sorted(set(config.scopes)))
    query = urlencode(
        {
            "client_id": config.client_id,
            "response_type": "code",
            "redirect_uri": config.redirect_uri,
            "scope": SCOPE_SEPARATOR.join(scopes),
        },
        quote_via=quote,
        safe="",
    )
    separator = "&" if urlsplit(config.authorize_url).query else "?"
    return AuthorizationRequest(
        url=f"{config.authorize_url}{separator}{query}",
        client_id=config.client_id,
        redirect_uri=config.redirect_uri,
        scopes=scopes,
    )


class AuthorizationCodeManager:
    """Authorization code grant operations against the Accounts service."""

    def __init__(self, config: OAuthClientConfig, client: BaseClient) -> None:
        """Initialize the manager.

        Args:
            config: OAuth client configuration
            client: HTTP client rooted at the token endpoint's origin

        """
        self._config = config
        self._client = client
        self._token_path = urlsplit(config.token_url).path or "/"

    def build_authorization_url(self) -> AuthorizationRequest:
        """Return the consent URL for this manager's configuration."""
        return build_authorization_url(self._config)

    async def fetch_token(self, code: str) -> OAuthToken | None:
        """Exchange an authorization code for an access token.

        Authorization codes are single-use, so the exchange is never retried.

        Args:
            code: The authorization code received on the redirect

        Returns:
            The token, or None if the response carried no access token.

        Raises:
            OAuthProviderError: If the token endpoint rejects the exchange.
            TokenFetchError: If the endpoint is unreachable or its response
                is not a usable token document.

        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._config.redirect_uri,
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
        }
        config = RequestConfig(form_data=data, retries=0)

        try:
            response = await self._client.make_request(
                "POST", self._token_path, config=config
            )
        except (NetworkError, ApiTimeoutError) as e:
            logger.error("Token endpoint unreachable (%s): %s", e.code, e.message)
            raise TokenFetchError(
                "Token endpoint unreachable", details={"cause": e.code}
            ) from e
        except ApiError as e:
            provider_code = e.details.get("error") if isinstance(e.details, dict) else None
            code_str = str(provider_code or e.code)
            logger.error("Token exchange rejected (%s): %s", code_str, e.message)
            raise OAuthProviderError(e.message, code_str, e.details, e.status_code) from e
        except ValueError as e:
            logger.error("Token endpoint returned a non-JSON body")
            raise TokenFetchError(
                "Token endpoint returned a malformed response",
                details={"reason": "invalid_json"},
            ) from e

        if not isinstance(response, dict):
            logger.error("Token endpoint returned %s, not an object", type(response).__name__)
            raise TokenFetchError(
                "Token endpoint returned a malformed response",
                details={"reason": "not_an_object"},
            )

        access_token = str(response.get("access_token") or "").strip()
        if not access_token:
            logger.error("Token endpoint response carried no access_token")
            return None

        try:
            return OAuthToken.model_validate({**response, "access_token": access_token})
        except ModelValidationError as e:
            logger.error("Token endpoint response failed validation: %s", e)
            raise TokenFetchError(
                "Token endpoint returned a malformed response",
                details={"reason": "invalid_token"},
            ) from e
