"""Exception classes for the Quome Platform API binding."""

from __future__ import annotations

from typing import Any


class QuomeError(Exception):
    """Base exception for all Quome CLI errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotLoggedInError(QuomeError):
    """No stored credential and no QUOME_TOKEN in the environment."""

    def __init__(self, message: str = "Not logged in. Run `quome login` first.") -> None:
        super().__init__(message)


class NoLinkedOrgError(QuomeError):
    """The current directory is not linked to an organization."""

    def __init__(
        self, message: str = "No linked organization. Run `quome link` to connect."
    ) -> None:
        super().__init__(message)


class NoLinkedAppError(QuomeError):
    """The current directory is not linked to an application."""

    def __init__(
        self, message: str = "No linked application. Run `quome link` to connect."
    ) -> None:
        super().__init__(message)


class ConfigError(QuomeError):
    """Local configuration or settings could not be read or are invalid."""


class TransportError(QuomeError):
    """The request never produced a usable API response.

    Raised when:
    - The API host is unreachable
    - The request times out
    - The response body cannot be decoded
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class InvalidResponseError(TransportError):
    """The server answered 2xx with a body that does not match the model."""

    def __init__(
        self,
        message: str = "Invalid response from server",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)


class APIError(QuomeError):
    """Error returned from the Quome API.

    Attributes:
        status_code: HTTP status code from the API.
        message: Error message.
        details: Additional error details from the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"


class UnauthorizedError(APIError):
    """The stored credential is missing, invalid or expired."""

    def __init__(
        self,
        message: str = "Unauthorized. Your session may have expired. Run `quome login`.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(401, message, details)


class NotFoundError(APIError):
    """The addressed resource does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(404, message, details)


class RateLimitedError(APIError):
    """Too many requests. Nothing retries automatically; re-run later."""

    def __init__(
        self,
        message: str = "Rate limited. Please wait and try again.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(429, message, details)


def raise_for_status(
    status_code: int,
    response_data: dict[str, Any] | None = None,
) -> None:
    """Raise an appropriate exception for an HTTP status code.

    Args:
        status_code: HTTP status code.
        response_data: Parsed JSON error body, if any.

    Raises:
        UnauthorizedError: For 401 status.
        NotFoundError: For 404 status.
        RateLimitedError: For 429 status.
        APIError: For other 4xx/5xx status codes.
    """
    if status_code < 400:
        return

    data = response_data or {}
    message = data.get("message") or data.get("detail")
    if message is not None and not isinstance(message, str):
        message = str(message)
    details = data.get("details")
    if not isinstance(details, dict):
        details = None

    if status_code == 401:
        raise UnauthorizedError(details=details)
    elif status_code == 404:
        raise NotFoundError(message or "Resource not found", details)
    elif status_code == 429:
        raise RateLimitedError(details=details)
    else:
        raise APIError(
            status_code,
            message or f"Request failed with status {status_code}",
            details,
        )


class UpgradeError(QuomeError):
    """Self-upgrade could not determine or install the latest release."""
