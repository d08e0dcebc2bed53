"""
Exception hierarchy for Asana CLI Tree.

Every error raised by the package derives from AsanaTreeError, so the
command-line entry point can turn any of them into a clean exit.
"""

from __future__ import annotations

from typing import Any


class AsanaTreeError(Exception):
    """Base exception for all package errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Remote API Errors
# =============================================================================


class AsanaAPIError(AsanaTreeError):
    """The Asana API could not be reached or returned an error response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body


class AsanaAuthenticationError(AsanaAPIError):
    """The access token was rejected (401/403)."""


class AsanaNotFoundError(AsanaAPIError):
    """A workspace, tag, project, section or task does not exist (404)."""


class AsanaRateLimitError(AsanaAPIError):
    """The API rate limit was exceeded (429). Requests are never retried."""

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class AsanaValidationError(AsanaTreeError):
    """A response body did not match the expected record shape."""


# =============================================================================
# Local Errors
# =============================================================================


class ConfigurationError(AsanaTreeError):
    """Required configuration is missing or invalid."""


class CacheError(AsanaTreeError):
    """Base class for snapshot cache failures."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, {"path": path} if path else None)
        self.path = path


class CacheMissingError(CacheError):
    """No snapshot file exists at the cache path."""


class CacheCorruptError(CacheError):
    """The snapshot file exists but cannot be decoded."""
