"""Page Sync Domain Events.

Published by the page readiness resolver so that listeners (the keyword
library, tests) can follow a load without parsing log output.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class PageLoadRetried:
    """A fetched store-backed page was not yet consistent and is re-fetched.

    Attributes:
        key: Logical page key of the page being loaded.
        attempt: The attempt that observed the inconsistent page.
        url: The URL that is re-fetched (the browser's current URL).
        expect_changed: Whether the caller expected changed content.
    """

    key: str
    attempt: int
    url: str
    expect_changed: bool
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "event_type": "PageLoadRetried",
            "key": self.key,
            "attempt": self.attempt,
            "url": self.url,
            "expect_changed": self.expect_changed,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PageLoadCompleted:
    """A page finished loading (and is consistent, if store-backed)."""

    key: str
    attempts: int
    expect_changed: Optional[bool] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "event_type": "PageLoadCompleted",
            "key": self.key,
            "attempts": self.attempts,
            "expect_changed": self.expect_changed,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class RetryLimitExceeded:
    """A page never became consistent within the retry ceiling."""

    key: str
    attempts: int
    limit: int
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "event_type": "RetryLimitExceeded",
            "key": self.key,
            "attempts": self.attempts,
            "limit": self.limit,
            "timestamp": self.timestamp.isoformat(),
        }
