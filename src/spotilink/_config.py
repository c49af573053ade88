"""Client configuration for the authorization code flow.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError

DEFAULT_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
DEFAULT_TOKEN_URL = "https://accounts.spotify.com/api/token"
DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_CALLBACK_PORT = 4000
DEFAULT_CALLBACK_TIMEOUT = 300.0


class OAuthScope(str, Enum):
    """Spotify scopes requested by the artist walkthrough."""

    PLAYLIST_MODIFY_PRIVATE = "playlist-modify-private"
    PLAYLIST_MODIFY_PUBLIC = "playlist-modify-public"
    USER_READ_PRIVATE = "user-read-private"
    USER_READ_EMAIL = "user-read-email"


DEFAULT_SCOPES = frozenset(
    {
        OAuthScope.PLAYLIST_MODIFY_PRIVATE.value,
        OAuthScope.PLAYLIST_MODIFY_PUBLIC.value,
        OAuthScope.USER_READ_PRIVATE.value,
    }
)


class OAuthClientConfig(BaseModel):
    """Immutable OAuth client settings, built once at process start."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str = Field(repr=False)
    redirect_uri: str
    scopes: frozenset[str] = DEFAULT_SCOPES
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    token_url: str = DEFAULT_TOKEN_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    callback_timeout: float | None = DEFAULT_CALLBACK_TIMEOUT
    default_port: int | None = DEFAULT_CALLBACK_PORT

    @field_validator("client_id")
    @classmethod
    def _client_id_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("client_id must not be empty")
        return value

    @field_validator("redirect_uri")
    @classmethod
    def _redirect_uri_absolute(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"redirect_uri must be an absolute http(s) URL: {value!r}")
        # Accessing .port raises ValueError for out-of-range ports.
        _ = parts.port
        return value

    @field_validator("callback_timeout")
    @classmethod
    def _timeout_not_negative(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError(f"callback_timeout must not be negative: {value}")
        return value

        return value

    @field_validator("scopes", mode="before")
    @classmethod
    def _normalize_scopes(cls, value: object) -> frozenset[str]:
        if isinstance(value, str):
            value = value.split()
        scopes = frozenset(
            str(getattr(scope, "value", scope)).strip() for scope in value  # type: ignore[union-attr]
        )
        if not scopes or "" in scopes:
            raise ValueError("scopes must be a non-empty set of non-blank strings")
        return scopes

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> OAuthClientConfig:
        """Build a config from ``SPOTIFY_*`` environment variables.

        A ``.env`` file is loaded first (``env_file`` or the one found by
        python-dotenv); values already in the environment win.

        Raises:
            ConfigurationError: If a required variable is missing or a value
                is invalid.

        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        missing = [
            key
            for key in (
                "SPOTIFY_CLIENT_ID",
                "SPOTIFY_CLIENT_SECRET",
                "SPOTIFY_REDIRECT_URI",
            )
            if not os.getenv(key, "").strip()
        ]
        if missing:
            msg = f"Missing required environment variable(s): {', '.join(missing)}"
            raise ConfigurationError(msg, details={"missing": missing})

        settings: dict[str, object] = {
            "client_id": os.environ["SPOTIFY_CLIENT_ID"].strip(),
            "client_secret": os.environ["SPOTIFY_CLIENT_SECRET"].strip(),
            "redirect_uri": os.environ["SPOTIFY_REDIRECT_URI"].strip(),
        }

        raw_scopes = os.getenv("SPOTIFY_SCOPES", "").strip()
        if raw_scopes:
            settings["scopes"] = [s for s in re.split(r"[\s,]+", raw_scopes) if s]

        raw_timeout = os.getenv("SPOTIFY_CALLBACK_TIMEOUT", "").strip().lower()
        if raw_timeout:
            settings["callback_timeout"] = _parse_timeout(raw_timeout)

        try:
            return cls(**settings)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid OAuth configuration: {exc}") from exc


def _parse_timeout(raw: str) -> float | None:
    if raw in ("0", "none", "off"):
        return None
    try:
        timeout = float(raw)
    except ValueError as exc:
        msg = f"SPOTIFY_CALLBACK_TIMEOUT must be a number of seconds, got {raw!r}"
        raise ConfigurationError(msg) from exc
    if timeout < 0:
        msg = "SPOTIFY_CALLBACK_TIMEOUT must not be negative"
        raise ConfigurationError(msg)
    return timeout or None
