"""Base page object.

Subclasses override only the hooks they need:

| hook                          | default                          |
| ``logical_key()``             | the page class name              |
| ``canonical_url()``           | None (reached by a click only)   |
| ``await_ready()``             | returns immediately              |
| ``capture_marker()``          | None                             |
| ``is_consistent(expected)``   | True                             |
| ``assert_ready()``            | no assertions                    |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
)
from selenium.webdriver.support import expected_conditions

from squashaat.errors import PageAssertionError

if TYPE_CHECKING:
    from squashaat.session import BrowserSession

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="BasePage")


class BasePage:
    """A page of the site under test, loaded through the session's resolver."""

    def __init__(self, session: "BrowserSession") -> None:
        self.session = session
        self.driver = session.driver
        self.config = session.config

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def logical_key(self) -> str:
        return type(self).__name__

    def canonical_url(self) -> Optional[str]:
        return None

    def await_ready(self) -> None:
        pass

    def capture_marker(self) -> Optional[Any]:
        return None

    def is_consistent(self, expect_changed: bool) -> bool:
        return True

    def assert_ready(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def get(
        self: P,
        already_navigating: bool = False,
        marker: Optional[Any] = None,
        expect_changed: Optional[bool] = None,
    ) -> P:
        """Load the page and verify it is fully loaded.

        Args:
            already_navigating: The browser is already on its way to this
                page (a button was clicked), so no URL is fetched.
            marker: Element of the previous page to wait out first.
            expect_changed: For store-backed pages, whether the content
                should differ from what was last seen. A direct fetch
                defaults to False: the page must show what was last seen.

        Returns:
            self, for chaining.

        Raises:
            PageAssertionError: The page loaded but its readiness
                assertions do not hold.
        """
        if expect_changed is None and not already_navigating:
            expect_changed = False
        self.session.resolver.resolve(
            self,
            already_navigating=already_navigating,
            marker=marker,
            expect_changed=expect_changed,
        )
        if not self.is_loaded():
            raise PageAssertionError("Page should be fully loaded")
        return self

    def is_loaded(self) -> bool:
        try:
            self.assert_ready()
        except (
            AssertionError,
            NoSuchElementException,
            StaleElementReferenceException,
        ) as e:
            logger.info(f"{type(self).__name__} is not loaded: {e}")
            return False
        return True

    def cached_marker(self) -> Optional[Any]:
        """Marker captured the last time this page was loaded in the session."""
        return self.session.markers.fetch(self.logical_key())

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def wait_for_visible(self, by: str, value: str) -> Any:
        return self.driver.wait_until(
            expected_conditions.visibility_of_element_located((by, value)),
            self.session.resolver.settings.explicit_wait,
            description=f"{value} to be visible",
        )

    def wait_for_title(self, title: str) -> Any:
        return self.driver.wait_until(
            expected_conditions.title_is(title),
            self.session.resolver.settings.explicit_wait,
            description=f"page title to be '{title}'",
        )

    def element_exists(self, by: str, value: str) -> bool:
        return len(self.driver.find_elements(by, value)) > 0

    def text_of(self, by: str, value: str) -> str:
        return self.driver.find_element(by, value).text
