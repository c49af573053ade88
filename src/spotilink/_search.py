"""Search service for spotilink.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

from collections.abc import Iterable

from ._base import BaseClient, RequestConfig
from .models import ItemType, SearchResult

MAX_SEARCH_LIMIT = 50


class SearchService:
    """Service for catalog search."""

    def __init__(self, client: BaseClient) -> None:
        """Initialize search service.

        Args:
            client: The base HTTP client

        """
        self._client = client

    async def search(
        self,
        query: str,
        types: Iterable[ItemType | str],
        market: str | None = "US",
        limit: int = 10,
        offset: int = 0,
    ) -> SearchResult:
        """Search the catalog.

        Args:
            query: Search query, e.g. ``artist:Miles Davis``
            types: Item types to search for
            market: ISO 3166-1 alpha-2 country code
            limit: Maximum results per type (1-50)
            offset: Index of the first result

        Returns:
            Search results; only requested types are populated.

        Raises:
            ValueError: If ``types`` is empty or ``limit`` is out of range.

        """
        type_values = [ItemType(t).value for t in types]
        if not type_values:
            msg = "At least one item type is required"
            raise ValueError(msg)
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            msg = f"limit must be between 1 and {MAX_SEARCH_LIMIT}"
            raise ValueError(msg)

        params: dict[str, str | int] = {
            "q": query,
            "type": ",".join(type_values),
            "limit": limit,
            "offset": offset,
        }
        if market:
            params["market"] = market

        config = RequestConfig(params=params)
        response = await self._client.make_request("GET", "/search", config=config)
        return SearchResult.model_validate(response)
