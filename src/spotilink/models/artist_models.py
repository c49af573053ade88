"""Artist and search models for spotilink.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ItemType(str, Enum):
    """Searchable item types."""

    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    TRACK = "track"
    SHOW = "show"
    EPISODE = "episode"
    AUDIOBOOK = "audiobook"


class ExternalUrls(BaseModel):
    """Known external URLs for an object."""

    spotify: str | None = None


class Followers(BaseModel):
    """Follower information."""

    href: str | None = None
    total: int | None = None


class Image(BaseModel):
    """Cover art or profile image."""

    url: str
    height: int | None = None
    width: int | None = None


class Artist(BaseModel):
    """Artist object."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = ""
    genres: list[str] = []
    popularity: int | None = None
    followers: Followers | None = None
    external_urls: ExternalUrls | None = None
    images: list[Image] = []
    uri: str | None = None


class ArtistsPage(BaseModel):
    """Paged artist search results."""

    model_config = ConfigDict(extra="ignore")

    href: str | None = None
    items: list[Artist] = []
    limit: int | None = None
    offset: int | None = None
    total: int | None = None
    next: str | None = None
    previous: str | None = None


class SearchResult(BaseModel):
    """Search response; only the artist page is modelled."""

    model_config = ConfigDict(extra="ignore")

    artists: ArtistsPage | None = None
