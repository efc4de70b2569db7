"""Selenium WebDriver Adapter.

Implements the BrowserDriver protocol on top of a Selenium WebDriver
(a driver created by squashaat.adapters.driver_factory, or one opened by
Robot Framework's SeleniumLibrary).

Selenium TimeoutException is translated to PageLoadTimeoutError here so
that nothing above the adapter depends on Selenium's exception types for
wait failures.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions
from selenium.webdriver.support.ui import WebDriverWait

from squashaat.adapters.browser_adapter import WaitCondition
from squashaat.errors import PageLoadTimeoutError

logger = logging.getLogger(__name__)


class SeleniumDriverAdapter:
    """Adapter for a Selenium WebDriver instance.

    Attributes:
        webdriver: The wrapped Selenium WebDriver.
        supports_screenshots: Whether screenshot capture is attempted.
    """

    def __init__(self, webdriver: WebDriver, supports_screenshots: bool = True) -> None:
        self.webdriver = webdriver
        self.supports_screenshots = supports_screenshots

    def navigate(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        self.webdriver.get(url)

    def current_url(self) -> str:
        return self.webdriver.current_url

    def title(self) -> str:
        return self.webdriver.title

    def wait_until_stale(self, element: Any, timeout: float) -> None:
        self.wait_until(
            expected_conditions.staleness_of(element),
            timeout,
            description="previous page element to become stale",
        )

    def wait_until(
        self,
        condition: WaitCondition,
        timeout: float,
        description: str = "condition",
    ) -> Any:
        try:
            return WebDriverWait(self.webdriver, timeout).until(condition)
        except TimeoutException as e:
            raise PageLoadTimeoutError(description, timeout) from e

    def find_element(self, by: str, value: str) -> Any:
        return self.webdriver.find_element(by, value)

    def find_elements(self, by: str, value: str) -> List[Any]:
        return self.webdriver.find_elements(by, value)

    def take_screenshot(self) -> Optional[bytes]:
        if not self.supports_screenshots:
            return None
        try:
            return self.webdriver.get_screenshot_as_png()
        except WebDriverException as e:
            # Some platforms do not support screenshots
            logger.warning(f"Screenshot failed: {e.msg}")
            return None

    def delete_all_cookies(self) -> None:
        self.webdriver.delete_all_cookies()

    def quit(self) -> None:
        logger.debug("Quitting Selenium WebDriver")
        self.webdriver.quit()
