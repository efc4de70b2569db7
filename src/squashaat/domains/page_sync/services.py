"""Page Sync Domain Services.

PageReadinessResolver decides when the browser shows the page that was
asked for. Two effects are raced against:

- client-side page transitions, whose completion is not observable
  directly. A marker element from the outgoing page is awaited until it
  goes stale before the incoming page's readiness is checked.
- an eventually-consistent store behind some pages. After loading, the
  page compares its embedded consistency token with the last one seen
  and the resolver re-fetches the current URL until it matches what
  the caller expects, up to a fixed number of attempts.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from squashaat.domains.page_sync.events import (
    PageLoadCompleted,
    PageLoadRetried,
    RetryLimitExceeded,
)
from squashaat.domains.page_sync.repository import MarkerStore, TokenStore
from squashaat.domains.page_sync.value_objects import ResolutionState, SyncSettings
from squashaat.errors import ConsistencyRetryLimitExceeded, PageConfigurationError

if TYPE_CHECKING:
    from squashaat.adapters.browser_adapter import BrowserDriver

logger = logging.getLogger(__name__)


class SyncablePage(Protocol):
    """Hooks the resolver drives while loading a page."""

    def logical_key(self) -> str:
        ...

    def canonical_url(self) -> Optional[str]:
        ...

    def await_ready(self) -> None:
        ...

    def capture_marker(self) -> Optional[Any]:
        ...

    def is_consistent(self, expect_changed: bool) -> bool:
        ...


class PageReadinessResolver:
    """Loads pages so that assertions only ever see the intended page state.

    One resolver belongs to one browser session and shares that session's
    marker store, so a marker captured by one page object is available
    to the next one.

    Examples:
        >>> resolver = PageReadinessResolver(driver, markers, SyncSettings())
        >>> resolver.resolve(page, already_navigating=True,
        ...                  marker=old_marker, expect_changed=True)
    """

    def __init__(
        self,
        driver: "BrowserDriver",
        markers: MarkerStore,
        settings: Optional[SyncSettings] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            driver: Browser driver adapter of the session.
            markers: The session's stale element gate.
            settings: Timing constants; defaults to SyncSettings().
            event_publisher: Optional callback for publishing domain events.
        """
        self._driver = driver
        self._markers = markers
        self.settings = settings or SyncSettings()
        self._event_publisher = event_publisher
        self._wake = threading.Event()
        self.state = ResolutionState.IDLE
        self.attempts = 0

    def resolve(
        self,
        page: SyncablePage,
        already_navigating: bool = False,
        marker: Optional[Any] = None,
        expect_changed: Optional[bool] = None,
    ) -> None:
        """Load ``page`` and return once it is ready (and consistent).

        Args:
            page: The page object to load.
            already_navigating: True when navigation was triggered elsewhere
                (e.g. by clicking a button); no URL is fetched first.
            marker: Element of the outgoing page to wait out before the
                readiness wait starts.
            expect_changed: Only for store-backed pages: whether the page
                content is expected to have changed since it was last seen.

        Raises:
            PageConfigurationError: The page has no URL and nothing else
                is navigating to it.
            PageLoadTimeoutError: A staleness or readiness wait timed out.
            ConsistencyRetryLimitExceeded: The page was still inconsistent
                after ``settings.retry_limit`` attempts.
        """
        self.attempts = 0
        while True:
            self.attempts += 1

            if not already_navigating:
                self.state = ResolutionState.NAVIGATING
                url = page.canonical_url()
                if not url:
                    raise PageConfigurationError(type(page).__name__)
                self._driver.navigate(url)

            if marker is not None:
                self.state = ResolutionState.AWAITING_MARKER_STALE
                self._driver.wait_until_stale(marker, self.settings.explicit_wait)

            self.state = ResolutionState.AWAITING_READY
            page.await_ready()

            key = page.logical_key()
            marker = page.capture_marker()
            if marker is not None:
                self._markers.capture(key, marker)

            if expect_changed is None:
                break

            self.state = ResolutionState.CHECKING_CONSISTENCY
            if page.is_consistent(expect_changed):
                break

            if self.attempts >= self.settings.retry_limit:
                self._publish_event(
                    RetryLimitExceeded(
                        key=key,
                        attempts=self.attempts,
                        limit=self.settings.retry_limit,
                    )
                )
                raise ConsistencyRetryLimitExceeded(
                    key, self.attempts, self.settings.retry_limit
                )

            # Re-get the current url rather than the canonical one: it may
            # carry query params (e.g. the booking date) that must be kept.
            self.state = ResolutionState.RETRYING
            url = self._driver.current_url()
            logger.info(
                f"Page '{key}' not yet consistent on attempt {self.attempts} "
                f"(expect_changed={expect_changed}); re-fetching {url}"
            )
            self._publish_event(
                PageLoadRetried(
                    key=key,
                    attempt=self.attempts,
                    url=url,
                    expect_changed=expect_changed,
                )
            )
            self._pause()
            self._driver.navigate(url)
            already_navigating = True

        self.state = ResolutionState.DONE
        self._publish_event(
            PageLoadCompleted(key=key, attempts=self.attempts, expect_changed=expect_changed)
        )
        logger.debug(f"Page '{key}' loaded after {self.attempts} attempt(s)")
        self.attempts = 0

    def interrupt_backoff(self) -> None:
        """Wake a resolver that is pausing between re-fetches.

        Called from outside the resolving thread, e.g. by the session
        manager when it shuts a session down.
        """
        self._wake.set()

    def _pause(self) -> None:
        if self._wake.wait(self.settings.retry_backoff):
            logger.warning("Pause before re-fetching for consistency was interrupted")
        self._wake.clear()

    def _publish_event(self, event: object) -> None:
        if self._event_publisher is not None:
            self._event_publisher(event)


class TokenConsistencyPolicy:
    """Decides whether a freshly fetched store-backed page is the consistent one.

    The decision compares the token embedded in the fetched page with the
    token last recorded for the page's key:

    - nothing recorded yet: the page can only be judged by its content.
      The caller supplies whether the page shows its empty/initial state;
      an empty page is consistent when no change is expected and a
      non-empty page is consistent when a change is expected.
    - a token recorded: the page is consistent when "token differs" agrees
      with ``expect_changed``. An unexpected change counts as not yet
      consistent, so the load waits rather than passing on a stale copy.

    The observed token is recorded whenever the page is judged consistent.
    """

    def __init__(self, tokens: TokenStore) -> None:
        self._tokens = tokens

    def evaluate(
        self,
        key: str,
        observed_token: Optional[str],
        expect_changed: bool,
        is_empty_state: Callable[[], bool],
    ) -> bool:
        recorded = self._tokens.lookup(key)

        if recorded is None:
            empty = is_empty_state()
            if empty == expect_changed:
                logger.info(
                    f"No token recorded for '{key}' and page is "
                    f"{'empty' if empty else 'not empty'} with "
                    f"expect_changed={expect_changed}: not consistent"
                )
                return False
            logger.info(
                f"No token recorded for '{key}'; page content matches "
                f"expect_changed={expect_changed}, recording token {observed_token!r}"
            )
            if observed_token is not None:
                self._tokens.update(key, observed_token)
            return True

        changed = observed_token != recorded
        if changed != expect_changed:
            logger.info(
                f"Token for '{key}' is {recorded!r}, page token is {observed_token!r} "
                f"and expect_changed={expect_changed}: not consistent"
            )
            return False

        logger.info(
            f"Token for '{key}' is {recorded!r}, page token is {observed_token!r} "
            f"and expect_changed={expect_changed}: consistent"
        )
        if changed and observed_token is not None:
            self._tokens.update(key, observed_token)
        return True
