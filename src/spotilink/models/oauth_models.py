"""OAuth models for spotilink.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict


class AuthorizationRequest(BaseModel):
    """Fully-formed consent URL derived from client configuration."""

    model_config = ConfigDict(frozen=True)

    url: str
    client_id: str
    redirect_uri: str
    scopes: tuple[str, ...]


class CallbackErrorKind(str, Enum):
    """Why a redirect callback did not yield an authorization code."""

    NO_CODE_IN_CALLBACK = "no_code_in_callback"


class AuthorizationCode(BaseModel):
    """Callback outcome carrying the authorization code."""

    model_config = ConfigDict(frozen=True)

    code: str


class CallbackError(BaseModel):
    """Callback outcome for a redirect without a usable code."""

    model_config = ConfigDict(frozen=True)

    reason: CallbackErrorKind = CallbackErrorKind.NO_CODE_IN_CALLBACK
    provider_error: str | None = None
    provider_error_description: str | None = None


CallbackOutcome = Union[AuthorizationCode, CallbackError]


class OAuthTokenResponse(BaseModel):
    """OAuth token response model."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None


OAuthToken = OAuthTokenResponse
