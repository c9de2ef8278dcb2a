"""
Custom exceptions and error handling for the meeting task tool client.

Provides:
- Typed exception hierarchy for API, auth provider and store failures
- Error context preservation for debugging
- Mapping from httpx transport/status errors into the hierarchy
"""

from typing import Any

import httpx


class MeetingTasksError(Exception):
    """Base exception for all meeting task tool errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(MeetingTasksError):
    """Base class for errors raised by outbound clients."""

    pass


class ApiError(ClientError):
    """Error from the backend REST API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code


class ApiRequestError(ApiError):
    """Backend rejected the request (4xx), or answered with an unfollowed redirect (3xx)."""

    pass


class ApiUnauthorizedError(ApiRequestError):
    """Missing or expired bearer token (401)."""

    pass


class ApiNotFoundError(ApiRequestError):
    """Requested resource does not exist (404)."""

    pass


class ApiServerError(ApiError):
    """Backend failed to handle the request (5xx)."""

    pass


class ApiConnectionError(ApiError):
    """Backend could not be reached or timed out."""

    pass


class DecodeError(ApiError):
    """Response body did not match the expected envelope schema."""

    pass


class AuthProviderError(ClientError):
    """Auth provider rejected credentials or failed to answer."""

    pass


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(MeetingTasksError):
    """Base class for client-side store errors."""

    pass


class PreconditionError(StoreError):
    """Store action called without the state it requires (e.g. no team)."""

    pass


# =============================================================================
# Error Handling Utilities
# =============================================================================


def _error_detail(response: httpx.Response) -> str | None:
    """Pull the backend's `error` field out of a JSON error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        detail = body.get('error') or body.get('message')
        return str(detail) if detail else None
    return None


def wrap_http_error(exc: Exception, context: dict[str, Any] | None = None) -> ApiError:
    """
    Wrap an httpx exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        Typed ApiError subclass
    """
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        detail = _error_detail(exc.response)
        if detail:
            ctx['detail'] = detail
        message = f"HTTP {status}: {detail or exc.response.reason_phrase}"

        if status == 401:
            return ApiUnauthorizedError(message, status_code=status, context=ctx)
        elif status == 404:
            return ApiNotFoundError(message, status_code=status, context=ctx)
        elif status >= 500:
            return ApiServerError(message, status_code=status, context=ctx)
        else:
            # Other 4xx, and 3xx since redirects are not followed
            return ApiRequestError(message, status_code=status, context=ctx)
    elif isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return ApiConnectionError(
            f"Backend unreachable: {type(exc).__name__}: {exc}",
            context=ctx,
        )
    else:
        return ApiError(f"API error: {exc}", context=ctx)
