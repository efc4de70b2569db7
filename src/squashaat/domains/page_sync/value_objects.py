"""Page Sync Domain Value Objects."""

from dataclasses import dataclass
from enum import Enum


class ResolutionState(Enum):
    """Phases a single page load passes through."""

    IDLE = "idle"
    NAVIGATING = "navigating"
    AWAITING_MARKER_STALE = "awaiting_marker_stale"
    AWAITING_READY = "awaiting_ready"
    CHECKING_CONSISTENCY = "checking_consistency"
    RETRYING = "retrying"
    DONE = "done"


@dataclass(frozen=True)
class SyncSettings:
    """Timing constants for page synchronization.

    Attributes:
        explicit_wait: Timeout in seconds for every staleness/readiness wait.
        retry_limit: Maximum number of load attempts made while waiting for
            a store-backed page to become consistent.
        retry_backoff: Seconds to pause before each re-fetch.

    Examples:
        >>> SyncSettings().retry_limit
        20
        >>> SyncSettings(retry_backoff=0.0).retry_backoff
        0.0
    """

    explicit_wait: float = 30.0
    retry_limit: int = 20
    retry_backoff: float = 0.5

    def __post_init__(self) -> None:
        if self.explicit_wait < 0:
            raise ValueError(f"Explicit wait cannot be negative, got {self.explicit_wait}")
        if self.retry_limit < 1:
            raise ValueError(f"Retry limit must be at least 1, got {self.retry_limit}")
        if self.retry_backoff < 0:
            raise ValueError(f"Retry backoff cannot be negative, got {self.retry_backoff}")
