"""Page Sync Context - deciding when the browser shows the intended page.

This bounded context manages:
- Consistency tokens observed per logical page key
- Marker elements used to detect page replacement
- The bounded load/re-fetch loop for eventually-consistent pages

Example usage:
    from squashaat.domains.page_sync import (
        ConsistencyTokenRegistry,
        PageReadinessResolver,
        StaleElementGate,
        SyncSettings,
    )

    markers = StaleElementGate()
    resolver = PageReadinessResolver(driver, markers, SyncSettings(retry_limit=10))
    resolver.resolve(page, expect_changed=False)
"""

# Value Objects
from squashaat.domains.page_sync.value_objects import (
    ResolutionState,
    SyncSettings,
)

# Repositories
from squashaat.domains.page_sync.repository import (
    ConsistencyTokenRegistry,
    MarkerStore,
    StaleElementGate,
    TokenStore,
)

# Domain Events
from squashaat.domains.page_sync.events import (
    PageLoadCompleted,
    PageLoadRetried,
    RetryLimitExceeded,
)

# Services
from squashaat.domains.page_sync.services import (
    PageReadinessResolver,
    SyncablePage,
    TokenConsistencyPolicy,
)

__all__ = [
    # Value Objects
    "ResolutionState",
    "SyncSettings",
    # Repositories
    "ConsistencyTokenRegistry",
    "MarkerStore",
    "StaleElementGate",
    "TokenStore",
    # Events
    "PageLoadCompleted",
    "PageLoadRetried",
    "RetryLimitExceeded",
    # Services
    "PageReadinessResolver",
    "SyncablePage",
    "TokenConsistencyPolicy",
]
