"""Suite configuration.

Values can come from Robot Framework library import arguments, a YAML
file or environment variables:

| *** Settings ***
| Library    squashaat.lib.BookingLibrary
| ...    base_url=%{SQUASH_WEBSITE_BASE_URL}
| ...    driver_type=firefox
| ...    retry_backoff=500ms
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from squashaat.adapters.driver_factory import DriverType
from squashaat.domains.page_sync.value_objects import SyncSettings

_TRUE_STRINGS = ("true", "yes", "on", "1")


@dataclass
class SuiteConfig:
    """Configuration for a booking acceptance-test run."""

    base_url: Optional[str] = None
    driver_type: str = "chrome"
    javascript_enabled: bool = True
    headless: bool = False
    explicit_wait: float = 30.0
    load_retry_limit: int = 20
    retry_backoff: float = 0.5
    remote_url: str = "http://127.0.0.1:4723/wd/hub"
    remote_capabilities: Dict[str, Any] = field(default_factory=dict)
    delete_cookies: bool = True
    capture_screenshots: bool = True
    error_page_redirects: bool = False
    default_password: str = "pAssw0rd"
    default_players: str = "A.Shabana/J.Power"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.driver_type = DriverType.normalize(self.driver_type).value

    @property
    def sync_settings(self) -> SyncSettings:
        """Timing constants handed to the page readiness resolver."""
        return SyncSettings(
            explicit_wait=self.explicit_wait,
            retry_limit=self.load_retry_limit,
            retry_backoff=self.retry_backoff,
        )

    @classmethod
    def from_kwargs(cls, **kwargs) -> "SuiteConfig":
        """Create config from keyword arguments (RF library import args)."""
        config = cls()

        if kwargs.get("base_url"):
            config.base_url = cls._resolve_env(kwargs["base_url"])

        if "driver_type" in kwargs:
            config.driver_type = str(kwargs["driver_type"]).lower()

        for flag in (
            "javascript_enabled",
            "headless",
            "delete_cookies",
            "capture_screenshots",
            "error_page_redirects",
        ):
            if flag in kwargs:
                setattr(config, flag, cls._parse_bool(kwargs[flag]))

        # Time values accept RF time strings ("30s", "500ms")
        if "explicit_wait" in kwargs:
            config.explicit_wait = cls._parse_time(kwargs["explicit_wait"])
        if "retry_backoff" in kwargs:
            config.retry_backoff = cls._parse_time(kwargs["retry_backoff"])

        if "load_retry_limit" in kwargs:
            config.load_retry_limit = int(kwargs["load_retry_limit"])

        if kwargs.get("remote_url"):
            config.remote_url = kwargs["remote_url"]
        if kwargs.get("remote_capabilities"):
            config.remote_capabilities = dict(kwargs["remote_capabilities"])

        if kwargs.get("default_password"):
            config.default_password = cls._resolve_env(kwargs["default_password"])
        if kwargs.get("default_players"):
            config.default_players = kwargs["default_players"]

        if "log_level" in kwargs:
            config.log_level = str(kwargs["log_level"]).upper()

        config.__post_init__()
        return config

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "SuiteConfig":
        """Load configuration from a YAML file.

        Keys mirror the dataclass fields; a ``driver`` section may hold the
        browser settings:

            base_url: http://squashwebsite.example.com/
            driver:
              type: firefox
              headless: true
        """
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        driver_settings = data.pop("driver", {}) or {}
        if "type" in driver_settings:
            data.setdefault("driver_type", driver_settings["type"])
        for key in ("javascript_enabled", "headless", "remote_url", "remote_capabilities"):
            if key in driver_settings:
                data.setdefault(key, driver_settings[key])

        return cls.from_kwargs(**data)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "SuiteConfig":
        """Create config from the environment of the test run."""
        return cls.from_kwargs(**cls.env_kwargs(environ))

    @staticmethod
    def env_kwargs(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Return the settings given by environment variables, as keyword arguments."""
        env = os.environ if environ is None else environ
        kwargs: Dict[str, Any] = {}
        if env.get("SQUASH_WEBSITE_BASE_URL"):
            kwargs["base_url"] = env["SQUASH_WEBSITE_BASE_URL"]
        if env.get("WEBDRIVER_TYPE"):
            kwargs["driver_type"] = env["WEBDRIVER_TYPE"]
        if env.get("WEBDRIVER_JAVASCRIPT_ENABLED"):
            kwargs["javascript_enabled"] = env["WEBDRIVER_JAVASCRIPT_ENABLED"]
        if env.get("WEBDRIVER_HEADLESS"):
            kwargs["headless"] = env["WEBDRIVER_HEADLESS"]
        return kwargs

    @staticmethod
    def _resolve_env(value: str) -> Optional[str]:
        """Resolve %{VAR} / ${VAR} references to environment values."""
        if value.startswith("%{") and value.endswith("}"):
            return os.environ.get(value[2:-1])
        if value.startswith("${") and value.endswith("}"):
            return os.environ.get(value[2:-1])
        return value

    @staticmethod
    def _parse_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_STRINGS

    @staticmethod
    def _parse_time(value: Any) -> float:
        """Parse Robot Framework time string to seconds."""
        if not isinstance(value, str):
            return float(value)

        time_str = value.strip().lower()

        if time_str.endswith("ms"):
            return float(time_str[:-2]) / 1000
        elif time_str.endswith("s"):
            return float(time_str[:-1])
        elif time_str.endswith("m"):
            return float(time_str[:-1]) * 60
        else:
            return float(time_str)
