"""
spotilink

Sign in to Spotify from a terminal with the OAuth2 authorization code grant.
A loopback HTTP listener catches the browser redirect, the code is exchanged
for an access token, and the resulting client makes authenticated Web API
calls.
"""

from ._browser import open_browser
from ._callback import CallbackListener, await_callback, resolve_listen_address
from ._config import OAuthClientConfig, OAuthScope
from ._flow import AuthorizationFlow, FlowState, authenticate
from ._oauth import build_authorization_url
from .client import SpotifyClient
from .exceptions import *
from .models import *

__version__ = "0.1.0"

__all__ = [
    "SpotifyClient",
    "OAuthClientConfig",
    "OAuthScope",
    # Authorization code flow
    "AuthorizationFlow",
    "FlowState",
    "authenticate",
    "build_authorization_url",
    "CallbackListener",
    "await_callback",
    "resolve_listen_address",
    "open_browser",
    # Exceptions
    "SpotilinkError",
    "ConfigurationError",
    "AuthFlowError",
    "ListenerBindError",
    "AuthorizationDeniedError",
    "CallbackTimeoutError",
    "TokenFetchError",
    "OAuthProviderError",
    "ApiError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
    "TimeoutError",
    # Models
    "AuthorizationRequest",
    "AuthorizationCode",
    "CallbackError",
    "CallbackErrorKind",
    "CallbackOutcome",
    "OAuthToken",
    "OAuthTokenResponse",
    "UserProfile",
    "Artist",
    "ArtistsPage",
    "ExternalUrls",
    "Followers",
    "Image",
    "ItemType",
    "SearchResult",
]
