"""Exception hierarchy for IMSLP API access.

Parsing never raises; these errors come only from the HTTP layer and the
services that sit on top of it. Every error carries a machine-readable
``code`` and optional :class:`ErrorDetails` with a suggestion for the user.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

RESPONSE_PREVIEW_LENGTH = 200


@dataclass(frozen=True)
class ErrorDetails:
    """Context attached to an ImslpError."""

    url: str | None = None
    status_code: int | None = None
    response_body: str | None = None
    suggestion: str | None = None


class ImslpError(Exception):
    """Base exception for all IMSLP client errors."""

    def __init__(self, message: str, code: str, details: ErrorDetails | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or ErrorDetails()

    def to_detailed_string(self) -> str:
        """Multi-line description including URL, status, suggestion and body preview."""
        parts = [f"{type(self).__name__}: {self.message}", f"Code: {self.code}"]

        if self.details.url:
            parts.append(f"URL: {self.details.url}")
        if self.details.status_code:
            parts.append(f"Status: {self.details.status_code}")
        if self.details.suggestion:
            parts.append(f"Suggestion: {self.details.suggestion}")
        if self.details.response_body:
            body = self.details.response_body
            if len(body) > RESPONSE_PREVIEW_LENGTH:
                body = body[:RESPONSE_PREVIEW_LENGTH] + "..."
            parts.append(f"Response: {body}")

        return "\n".join(parts)


def _with_suggestion(details: ErrorDetails | None, suggestion: str) -> ErrorDetails:
    details = details or ErrorDetails()
    if details.suggestion:
        return details
    return replace(details, suggestion=suggestion)


class NetworkError(ImslpError):
    """Transport failure or unexpected HTTP status."""

    def __init__(self, message: str, details: ErrorDetails | None = None) -> None:
        super().__init__(message, "NETWORK_ERROR", details)


class RequestTimeoutError(NetworkError):
    """Request exceeded the configured timeout (seconds)."""

    def __init__(self, message: str, timeout: float, details: ErrorDetails | None = None) -> None:
        super().__init__(
            message,
            _with_suggestion(
                details,
                f"Request timed out after {timeout}s. "
                "Try increasing the timeout or check your connection.",
            ),
        )
        self.code = "TIMEOUT_ERROR"
        self.timeout = timeout


class RateLimitError(ImslpError):
    """Server answered 429 Too Many Requests."""

    def __init__(
        self,
        message: str,
        details: ErrorDetails | None = None,
        retry_after: int | None = None,
    ) -> None:
        wait = retry_after if retry_after is not None else "a few"
        super().__init__(
            message,
            "RATE_LIMIT_ERROR",
            _with_suggestion(details, f"Wait {wait} seconds before retrying."),
        )
        self.retry_after = retry_after


class NotFoundError(ImslpError):
    """Page, category or file does not exist."""

    def __init__(self, message: str, details: ErrorDetails | None = None) -> None:
        super().__init__(
            message,
            "NOT_FOUND",
            _with_suggestion(details, "Check the slug format. Use find_work() for fuzzy matching."),
        )


class ParseError(ImslpError):
    """Response body could not be decoded."""

    def __init__(
        self,
        message: str,
        details: ErrorDetails | None = None,
        raw_data: Any = None,
    ) -> None:
        super().__init__(
            message,
            "PARSE_ERROR",
            _with_suggestion(
                details, "The IMSLP data format may have changed. Please report this issue."
            ),
        )
        self.raw_data = raw_data
