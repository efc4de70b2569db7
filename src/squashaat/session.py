"""Browser sessions shared across test cases.

A BrowserSession bundles a driver adapter with the state that describes
what that browser has shown: the consistency token registry and the
stale element gate. Page objects take the session they run in, so two
browser sessions never see each other's tokens or markers.

Usage:
    from squashaat.session import get_session_manager

    session = get_session_manager().acquire(config)
    page = CourtAndTimeSlotChooserPage(session).get()
"""

from __future__ import annotations

import atexit
import logging
import threading
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from squashaat.adapters import BrowserDriver, SeleniumDriverAdapter, create_webdriver
from squashaat.config import SuiteConfig
from squashaat.domains.page_sync import (
    ConsistencyTokenRegistry,
    PageReadinessResolver,
    StaleElementGate,
    TokenConsistencyPolicy,
)
from squashaat.errors import BrowserSessionError

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[object], None]

# Singleton manager instance
_manager: Optional["SessionManager"] = None


class BrowserSession:
    """One browser plus the page synchronization state that belongs to it.

    Attributes:
        driver: Browser driver adapter.
        config: Suite configuration the session was created for.
        tokens: Consistency tokens observed in this browser.
        markers: Marker elements captured in this browser.
        resolver: Page readiness resolver bound to this browser.
        consistency: Token comparison policy over ``tokens``.
        events: Most recent domain events published by the resolver.
    """

    def __init__(
        self,
        driver: BrowserDriver,
        config: Optional[SuiteConfig] = None,
        max_events: int = 100,
    ) -> None:
        self.driver = driver
        self.config = config or SuiteConfig()
        self.tokens = ConsistencyTokenRegistry()
        self.markers = StaleElementGate()
        self.events: Deque[object] = deque(maxlen=max_events)
        self._subscribers: List[EventSubscriber] = []
        self.resolver = PageReadinessResolver(
            driver,
            self.markers,
            self.config.sync_settings,
            event_publisher=self._publish,
        )
        self.consistency = TokenConsistencyPolicy(self.tokens)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Receive every domain event published in this session."""
        self._subscribers.append(subscriber)

    def delete_all_cookies(self) -> None:
        self.driver.delete_all_cookies()

    def screenshot(self) -> Optional[bytes]:
        """Return a PNG of the current window, or None when unsupported."""
        if not self.config.capture_screenshots:
            return None
        return self.driver.take_screenshot()

    def close(self) -> None:
        """Sessions are shared between test cases and cannot be closed by one."""
        raise BrowserSessionError(
            "Browser sessions are shared between tests; "
            "they are quit by the session manager at exit"
        )

    def _quit(self) -> None:
        self.driver.quit()

    def _publish(self, event: object) -> None:
        self.events.append(event)
        for subscriber in list(self._subscribers):
            subscriber(event)


class SessionManager:
    """Keeps one shared browser session per driver type.

    Creating a browser per test is slow, so a session outlives the test
    that created it. Only one driver type runs at a time: acquiring a
    session for another type quits the current ones.
    """

    def __init__(
        self,
        driver_factory: Callable[[SuiteConfig], WebDriver] = create_webdriver,
    ) -> None:
        self._driver_factory = driver_factory
        self._sessions: Dict[str, BrowserSession] = {}
        self._lock = threading.Lock()

    @property
    def active_driver_types(self) -> List[str]:
        return list(self._sessions)

    def acquire(self, config: SuiteConfig) -> BrowserSession:
        """Return the shared session for ``config.driver_type``, creating it if needed."""
        with self._lock:
            session = self._sessions.get(config.driver_type)
            if session is not None:
                return session

            # Only one driver type may be live at once
            for driver_type in list(self._sessions):
                logger.info(f"Quitting {driver_type} session before switching driver type")
                self._quit_session(driver_type)

            webdriver = self._driver_factory(config)
            session = BrowserSession(
                SeleniumDriverAdapter(
                    webdriver, supports_screenshots=config.capture_screenshots
                ),
                config,
            )
            self._sessions[config.driver_type] = session
            logger.info(f"Started shared {config.driver_type} session")
            return session

    def attach(
        self, webdriver: WebDriver, config: Optional[SuiteConfig] = None
    ) -> BrowserSession:
        """Wrap a WebDriver opened elsewhere (e.g. by SeleniumLibrary).

        The returned session has its own registries and is not quit by
        this manager; the opener stays responsible for the browser.
        """
        config = config or SuiteConfig()
        return BrowserSession(
            SeleniumDriverAdapter(
                webdriver, supports_screenshots=config.capture_screenshots
            ),
            config,
        )

    def shutdown_all(self) -> None:
        """Quit every session this manager started."""
        with self._lock:
            for driver_type in list(self._sessions):
                self._quit_session(driver_type)

    def _quit_session(self, driver_type: str) -> None:
        session = self._sessions.pop(driver_type)
        # Wake a load that is pausing before its next re-fetch
        session.resolver.interrupt_backoff()
        try:
            session._quit()
        except WebDriverException as e:
            logger.warning(f"Failed to quit {driver_type} session: {e.msg}")


def get_session_manager() -> SessionManager:
    """Get the process-wide session manager.

    The first call registers an exit handler that quits every browser.
    """
    global _manager
    if _manager is None:
        _manager = SessionManager()
        atexit.register(_manager.shutdown_all)
    return _manager


def reset_session_manager() -> None:
    """Forget the process-wide manager (for testing). Browsers are not quit."""
    global _manager
    _manager = None
