"""User profile service for spotilink.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

from ._base import BaseClient
from .models import UserProfile


class UsersService:
    """Service for user profile operations."""

    def __init__(self, client: BaseClient) -> None:
        """Initialize users service.

        Args:
            client: The base HTTP client

        """
        self._client = client

    async def get_current_profile(self) -> UserProfile:
        """Get the profile of the user who granted the access token.

        Returns:
            Current user's profile.

        """
        response = await self._client.make_request("GET", "/me")
        return UserProfile.model_validate(response)
