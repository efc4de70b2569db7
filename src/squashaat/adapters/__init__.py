"""Browser Driver Adapters - Anti-Corruption Layer.

Page objects and the readiness resolver depend on the BrowserDriver
protocol only. The Selenium adapter implements it for a WebDriver that
either the driver factory created or SeleniumLibrary opened.

Key Components:
    BrowserDriver: Protocol defining the adapter interface
    SeleniumDriverAdapter: Adapter for a Selenium WebDriver
    WebDriverFactory: Creates WebDrivers for the supported browser types

Usage:
    from squashaat.adapters import SeleniumDriverAdapter, WebDriverFactory

    adapter = SeleniumDriverAdapter(WebDriverFactory.create(config))
    adapter.navigate("http://squashwebsite.example.com/")
"""

from .browser_adapter import BrowserDriver, WaitCondition
from .driver_factory import (
    DEFAULT_REMOTE_CAPABILITIES,
    DriverType,
    WebDriverFactory,
    create_webdriver,
)
from .selenium_adapter import SeleniumDriverAdapter

__all__ = [
    # Protocol
    "BrowserDriver",
    "WaitCondition",
    # Implementations
    "SeleniumDriverAdapter",
    # Factory
    "DEFAULT_REMOTE_CAPABILITIES",
    "DriverType",
    "WebDriverFactory",
    "create_webdriver",
]
