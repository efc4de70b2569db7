"""WebDriver Factory.

Creates the Selenium WebDriver for the configured browser type, applying
the suite's headless and JavaScript settings.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

from selenium import webdriver
from selenium.webdriver.common.options import ArgOptions
from selenium.webdriver.remote.webdriver import WebDriver

if TYPE_CHECKING:
    from squashaat.config import SuiteConfig

logger = logging.getLogger(__name__)

# Capabilities used for the remote (Appium) driver when none are configured
DEFAULT_REMOTE_CAPABILITIES: Dict[str, Any] = {
    "platformName": "iOS",
    "browserName": "safari",
    "appium:deviceName": "iPad 2",
    "appium:platformVersion": "9.2",
}


class DriverType(Enum):
    """Enumeration of supported browser driver types."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"
    REMOTE = "remote"

    @classmethod
    def normalize(cls, driver_type: str) -> "DriverType":
        """Map a configured driver name (case-insensitive, with aliases) to an enum.

        Raises:
            ValueError: If the name is not a supported driver type.
        """
        type_mapping = {
            "chrome": cls.CHROME,
            "chromium": cls.CHROME,
            "firefox": cls.FIREFOX,
            "gecko": cls.FIREFOX,
            "edge": cls.EDGE,
            "safari": cls.SAFARI,
            "remote": cls.REMOTE,
            "appium": cls.REMOTE,
            "ipad": cls.REMOTE,
        }
        key = (driver_type or "").lower().strip()
        if key not in type_mapping:
            raise ValueError(
                f"Invalid driver type: {driver_type}. "
                f"Supported types: {', '.join(t.value for t in cls)}"
            )
        return type_mapping[key]


class WebDriverFactory:
    """Factory for Selenium WebDrivers.

    Usage:
        driver = WebDriverFactory.create(config)
    """

    @classmethod
    def create(cls, config: "SuiteConfig") -> WebDriver:
        """Create a WebDriver for ``config.driver_type``."""
        driver_type = DriverType.normalize(config.driver_type)

        if driver_type == DriverType.CHROME:
            driver = webdriver.Chrome(options=cls._chrome_options(config))
        elif driver_type == DriverType.FIREFOX:
            driver = webdriver.Firefox(options=cls._firefox_options(config))
        elif driver_type == DriverType.EDGE:
            driver = webdriver.Edge(options=cls._edge_options(config))
        elif driver_type == DriverType.SAFARI:
            driver = webdriver.Safari()
        else:
            driver = webdriver.Remote(
                command_executor=config.remote_url,
                options=cls._remote_options(config),
            )

        logger.info(f"Created {driver_type.value} WebDriver")
        return driver

    @staticmethod
    def _chrome_options(config: "SuiteConfig") -> webdriver.ChromeOptions:
        options = webdriver.ChromeOptions()
        if config.headless:
            options.add_argument("--headless=new")
        if not config.javascript_enabled:
            options.add_experimental_option(
                "prefs", {"profile.managed_default_content_settings.javascript": 2}
            )
        return options

    @staticmethod
    def _firefox_options(config: "SuiteConfig") -> webdriver.FirefoxOptions:
        options = webdriver.FirefoxOptions()
        if config.headless:
            options.add_argument("-headless")
        if not config.javascript_enabled:
            options.set_preference("javascript.enabled", False)
        return options

    @staticmethod
    def _edge_options(config: "SuiteConfig") -> webdriver.EdgeOptions:
        options = webdriver.EdgeOptions()
        if config.headless:
            options.add_argument("--headless=new")
        if not config.javascript_enabled:
            options.add_experimental_option(
                "prefs", {"profile.managed_default_content_settings.javascript": 2}
            )
        return options

    @staticmethod
    def _remote_options(config: "SuiteConfig") -> ArgOptions:
        options = ArgOptions()
        capabilities = config.remote_capabilities or DEFAULT_REMOTE_CAPABILITIES
        for name, value in capabilities.items():
            options.set_capability(name, value)
        return options


def create_webdriver(config: "SuiteConfig") -> WebDriver:
    """Convenience wrapper around WebDriverFactory.create."""
    return WebDriverFactory.create(config)
