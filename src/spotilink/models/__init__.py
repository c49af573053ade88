"""spotilink models package.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from .artist_models import (
    Artist,
    ArtistsPage,
    ExternalUrls,
    Followers,
    Image,
    ItemType,
    SearchResult,
)
from .oauth_models import (
    AuthorizationCode,
    AuthorizationRequest,
    CallbackError,
    CallbackErrorKind,
    CallbackOutcome,
    OAuthToken,
    OAuthTokenResponse,
)
from .user_models import UserProfile

__all__ = [
    # OAuth models
    "AuthorizationRequest",
    "AuthorizationCode",
    "CallbackError",
    "CallbackErrorKind",
    "CallbackOutcome",
    "OAuthToken",
    "OAuthTokenResponse",
    # User models
    "UserProfile",
    # Artist models
    "Artist",
    "ArtistsPage",
    "ExternalUrls",
    "Followers",
    "Image",
    "ItemType",
    "SearchResult",
]
