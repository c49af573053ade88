"""Base HTTP client for Spotify Web API and Accounts service calls.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, NamedTuple

import httpx

from .exceptions import (
    NetworkError,
    SpotilinkError,
    TimeoutError as ApiTimeoutError,
    create_error_from_response,
    is_retryable_error,
)

logger = logging.getLogger(__name__)

# HTTP Error Status Constants
HTTP_SUCCESS_THRESHOLD = 400


class RequestConfig(NamedTuple):
    """Configuration for HTTP requests."""

    json_data: dict[str, Any] | None = None
    form_data: dict[str, str] | None = None
    params: dict[str, Any] | None = None
    timeout: float | None = None
    retries: int | None = None


class BaseClient:
    """Base HTTP client for making API requests."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retries: int = 3,
        access_token: str | None = None,
    ) -> None:
        """Initialize base HTTP client.

        Args:
            base_url: The base URL of the API
            timeout: Request timeout in seconds
            retries: Number of retry attempts for failed requests
            access_token: Optional bearer token for authenticated requests

        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = retries
        self._access_token = access_token

        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": "Spotilink-Python/0.1.0"},
        )

    async def __aenter__(self) -> BaseClient:
        """Async context manager entry.

        Returns:
            The client instance.

        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self._client.aclose()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def get_access_token(self) -> str | None:
        """Get the current access token.

        Returns:
            Current access token or None if not set.

        """
        return self._access_token

    async def _make_request_generic(
        self,
        method: str,
        endpoint: str,
        parser: Callable[[httpx.Response], Any],
        *,
        config: RequestConfig | None = None,
    ) -> Any:
        """Make an HTTP request with retry logic using a generic parser.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            parser: Function to parse the response
            config: Request configuration

        Returns:
            Parsed response data.

        Raises:
            ApiError: For error responses from the API
            NetworkError: For network-related errors
            ApiTimeoutError: For timeout errors

        """
        if config is None:
            config = RequestConfig()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        request_timeout = config.timeout or self.timeout
        request_retries = config.retries if config.retries is not None else self.retries

        headers: dict[str, str] = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        for attempt in range(request_retries + 1):
            try:
                return await self._attempt_request(
                    method, url, headers, config, request_timeout, parser
                )
            except SpotilinkError as exc:
                if attempt >= request_retries or not is_retryable_error(exc):
                    raise
                delay = min(2**attempt, 10)
                logger.warning(
                    "%s %s failed (%s); retrying in %ss", method, url, exc.code, delay
                )
                await asyncio.sleep(delay)

        # range() always runs at least once, so this is unreachable
        raise SpotilinkError("Max retries exceeded")

    async def make_request(
        self,
        method: str,
        endpoint: str,
        *,
        config: RequestConfig | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request with retry logic.

        Returns:
            Parsed JSON response data.

        """
        return await self._make_request_generic(
            method, endpoint, parser=lambda r: r.json(), config=config
        )

    async def _attempt_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        config: RequestConfig,
        timeout: float,
        parser: Callable[[httpx.Response], Any],
    ) -> Any:
        """Attempt a single HTTP request.

        Returns:
            Parsed response if successful.

        Raises:
            Various errors for failed requests.

        """
        try:
            response = await self._execute_request(
                method, url, dict(headers), config, timeout
            )
        except httpx.TimeoutException as e:
            raise ApiTimeoutError("Request timeout") from e
        except httpx.NetworkError as e:
            raise NetworkError("Network error") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code < HTTP_SUCCESS_THRESHOLD:
            return parser(response)

        error_info = self._parse_error_response(response)
        raise create_error_from_response(response.status_code, error_info)

    async def _execute_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        config: RequestConfig,
        timeout: float,
    ) -> httpx.Response:
        """Execute the actual HTTP request.

        Returns:
            The HTTP response.

        """
        if config.form_data:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            return await self._client.request(
                method,
                url,
                data=config.form_data,
                params=config.params,
                headers=headers,
                timeout=timeout,
            )

        return await self._client.request(
            method,
            url,
            json=config.json_data,
            params=config.params,
            headers=headers,
            timeout=timeout,
        )

    @staticmethod
    def _parse_error_response(response: httpx.Response) -> dict[str, Any]:
        """Parse an error response from the Web API or the Accounts service.

        The Web API nests ``{"status", "message"}`` under ``error``; the
        Accounts service uses the OAuth ``error``/``error_description`` pair.

        Returns:
            Parsed error data.

        """
        try:
            payload = response.json()
        except ValueError:
            return {"message": response.text, "code": "UNKNOWN_ERROR"}

        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict):
            info: dict[str, Any] = {
                "message": error.get("message"),
                "code": str(error.get("status", "UNKNOWN_ERROR")),
                "details": error,
            }
        elif isinstance(error, str):
            info = {
                "message": payload.get("error_description") or error,
                "code": error,
                "details": payload,
            }
        else:
            info = {"message": response.text, "code": "UNKNOWN_ERROR"}

        retry_after = response.headers.get("Retry-After")
        if retry_after and retry_after.isdigit():
            info["retry_after"] = int(retry_after)
        return info
