"""Errors raised by the page synchronization layer.

Every failure kind terminates the current test: none of these is retried
by the consistency loop.
"""

from __future__ import annotations

from typing import Optional


class PageSyncError(Exception):
    """Base exception for page synchronization failures."""

    pass


class PageConfigurationError(PageSyncError):
    """Raised when a page must be navigated to directly but has no URL."""

    def __init__(self, page_name: str, message: Optional[str] = None) -> None:
        self.page_name = page_name
        super().__init__(
            message
            or f"Cannot initiate a page get without an URL (page={page_name})"
        )


class PageLoadTimeoutError(PageSyncError):
    """Raised when a staleness or readiness wait runs out of time."""

    def __init__(self, what: str, timeout: float) -> None:
        self.what = what
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for {what}")


class ConsistencyRetryLimitExceeded(PageSyncError):
    """Raised when a page never reached its eventually-consistent state.

    Attributes:
        key: Logical page key that was being loaded
        attempts: Number of load attempts made
        limit: The configured ceiling
    """

    def __init__(self, key: str, attempts: int, limit: int) -> None:
        self.key = key
        self.attempts = attempts
        self.limit = limit
        super().__init__(
            f"Load retry limit exceeded for page '{key}' "
            f"(attempts={attempts}, limit={limit})"
        )

    def __repr__(self) -> str:
        return (
            f"ConsistencyRetryLimitExceeded(key={self.key!r}, "
            f"attempts={self.attempts}, limit={self.limit})"
        )


class PageAssertionError(AssertionError):
    """Raised when a page-specific readiness assertion does not hold."""

    pass


class BrowserSessionError(Exception):
    """Raised when a shared browser session is misused (e.g. closed by a test)."""

    pass
