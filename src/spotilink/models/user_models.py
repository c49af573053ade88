"""User models for spotilink.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from pydantic import BaseModel, ConfigDict

from .artist_models import ExternalUrls, Followers, Image


class UserProfile(BaseModel):
    """Current user's profile as returned by ``GET /me``."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    display_name: str | None = None
    email: str | None = None
    country: str | None = None
    product: str | None = None
    uri: str | None = None
    external_urls: ExternalUrls | None = None
    followers: Followers | None = None
    images: list[Image] = []
