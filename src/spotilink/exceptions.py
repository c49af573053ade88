"""
Exception classes for spotilink.

Authentication-phase failures derive from ``AuthFlowError``; failures raised by
the Web API after sign-in derive from ``ApiError``.
"""

from __future__ import annotations

from typing import Any


class SpotilinkError(Exception):
    """Base exception for spotilink errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status_code = status_code


class ConfigurationError(SpotilinkError):
    """Raised when client configuration is missing or unusable."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", details)


# ---------------------------------------------------------------------------
# Authentication phase
# ---------------------------------------------------------------------------


class AuthFlowError(SpotilinkError):
    """Base exception for failures while obtaining an access token."""


class ListenerBindError(AuthFlowError):
    """Raised when the loopback callback listener cannot bind its port."""

    def __init__(
        self,
        message: str = "Could not bind callback listener",
        details: Any | None = None,
    ) -> None:
        super().__init__(message, "LISTENER_BIND_ERROR", details)


class AuthorizationDeniedError(AuthFlowError):
    """Raised when the redirect carried no authorization code."""

    def __init__(
        self,
        message: str = "No authorization code in callback",
        provider_error: str | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, "NO_CODE_IN_CALLBACK", details, 400)
        self.provider_error = provider_error


class CallbackTimeoutError(AuthFlowError):
    """Raised when the user never completes the browser consent step."""

    def __init__(
        self,
        message: str = "Timed out waiting for authorization callback",
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, "CALLBACK_TIMEOUT")
        self.timeout = timeout


class TokenFetchError(AuthFlowError):
    """Raised when the token endpoint returns no usable access token."""

    def __init__(
        self, message: str = "Failed to fetch token", details: Any | None = None
    ) -> None:
        super().__init__(message, "TOKEN_FETCH_FAILED", details)


class OAuthProviderError(AuthFlowError):
    """Raised when the token endpoint rejects the exchange."""

    def __init__(
        self,
        message: str,
        code: str = "OAUTH_PROVIDER_ERROR",
        details: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, code, details, status_code)


# ---------------------------------------------------------------------------
# Web API
# ---------------------------------------------------------------------------


class ApiError(SpotilinkError):
    """Base exception for errors returned by the Web API."""


class ValidationError(ApiError):
    """Raised when request validation fails."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", details, 400)


class AuthenticationError(ApiError):
    """Raised when the access token is missing, invalid or expired."""

    def __init__(
        self, message: str = "Authentication failed", details: Any | None = None
    ) -> None:
        super().__init__(message, "AUTHENTICATION_ERROR", details, 401)


class AuthorizationError(ApiError):
    """Raised when the token lacks a required scope."""

    def __init__(
        self, message: str = "Insufficient permissions", details: Any | None = None
    ) -> None:
        super().__init__(message, "AUTHORIZATION_ERROR", details, 403)


class NotFoundError(ApiError):
    """Raised when a resource is not found."""

    def __init__(
        self, message: str = "Resource not found", details: Any | None = None
    ) -> None:
        super().__init__(message, "NOT_FOUND_ERROR", details, 404)


class RateLimitError(ApiError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, "RATE_LIMIT_ERROR", details, 429)
        self.retry_after = retry_after


class ServerError(ApiError):
    """Raised when a server error occurs."""

    def __init__(
        self,
        message: str = "Internal server error",
        details: Any | None = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message, "SERVER_ERROR", details, status_code)


class NetworkError(ApiError):
    """Raised when a network error occurs."""

    def __init__(
        self, message: str = "Network error", details: Any | None = None
    ) -> None:
        super().__init__(message, "NETWORK_ERROR", details)


class TimeoutError(ApiError):  # noqa: A001
    """Raised when a request times out."""

    def __init__(
        self, message: str = "Request timeout", details: Any | None = None
    ) -> None:
        super().__init__(message, "TIMEOUT_ERROR", details)


def create_error_from_response(
    status_code: int,
    error_response: dict[str, Any | None] | None = None,
    default_message: str | None = None,
) -> ApiError:
    """Create an appropriate error instance based on HTTP status code and error response."""
    message = (error_response or {}).get(
        "message", default_message or "An error occurred"
    )
    code = (error_response or {}).get("code", "UNKNOWN_ERROR")
    details = (error_response or {}).get("details")

    message_str = str(message) if message is not None else "An error occurred"
    code_str = str(code) if code is not None else "UNKNOWN_ERROR"

    if status_code == 400:
        return ValidationError(message_str, details)
    elif status_code == 401:
        return AuthenticationError(message_str, details)
    elif status_code == 403:
        return AuthorizationError(message_str, details)
    elif status_code == 404:
        return NotFoundError(message_str, details)
    elif status_code == 429:
        retry_after = (error_response or {}).get("retry_after")
        return RateLimitError(
            message_str, int(retry_after) if retry_after else None, details
        )
    elif status_code >= 500:
        return ServerError(message_str, details, status_code)
    else:
        return ApiError(message_str, code_str, details, status_code)


def is_retryable_error(error: Exception) -> bool:
    """Check if an error is retryable (network errors and 5xx server errors)."""
    if isinstance(error, (NetworkError, TimeoutError)):
        return True

    if isinstance(error, ApiError) and error.status_code:
        return error.status_code >= 500

    return False
