"""Tests for SuiteConfig."""

import os
from unittest.mock import patch

import pytest

from squashaat.config import SuiteConfig


class TestSuiteConfig:
    """Tests for SuiteConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = SuiteConfig()

        assert config.base_url is None
        assert config.driver_type == "chrome"
        assert config.javascript_enabled is True
        assert config.headless is False
        assert config.explicit_wait == 30.0
        assert config.load_retry_limit == 20
        assert config.retry_backoff == 0.5
        assert config.default_password == "pAssw0rd"
        assert config.default_players == "A.Shabana/J.Power"

    def test_from_kwargs_basic(self):
        """Test creating config from keyword arguments."""
        config = SuiteConfig.from_kwargs(
            base_url="http://squash.example/",
            driver_type="Firefox",
            load_retry_limit="5",
        )

        assert config.base_url == "http://squash.example/"
        assert config.driver_type == "firefox"
        assert config.load_retry_limit == 5

    def test_from_kwargs_env_var_syntax(self):
        """Test environment variable syntax for the base URL."""
        with patch.dict(os.environ, {"SQUASH_URL": "http://from-env/"}):
            assert SuiteConfig.from_kwargs(base_url="%{SQUASH_URL}").base_url == "http://from-env/"
            assert SuiteConfig.from_kwargs(base_url="${SQUASH_URL}").base_url == "http://from-env/"

    def test_from_kwargs_time_formats(self):
        """Test parsing Robot Framework time strings."""
        config = SuiteConfig.from_kwargs(explicit_wait="1m", retry_backoff="250ms")

        assert config.explicit_wait == 60.0
        assert config.retry_backoff == 0.25
        assert SuiteConfig.from_kwargs(explicit_wait="12s").explicit_wait == 12.0
        assert SuiteConfig.from_kwargs(explicit_wait=5).explicit_wait == 5.0

    @pytest.mark.parametrize(
        "value,expected",
        [("True", True), ("yes", True), ("1", True), ("false", False), ("off", False), (False, False)],
    )
    def test_from_kwargs_boolean_strings(self, value, expected):
        """Test boolean flags given as RF strings."""
        assert SuiteConfig.from_kwargs(javascript_enabled=value).javascript_enabled is expected

    def test_driver_aliases(self):
        """Test driver type aliases map to supported types."""
        assert SuiteConfig(driver_type="iPad").driver_type == "remote"
        assert SuiteConfig(driver_type="chromium").driver_type == "chrome"

    def test_invalid_driver_type(self):
        """Test unsupported driver types are rejected."""
        with pytest.raises(ValueError, match="Invalid driver type"):
            SuiteConfig.from_kwargs(driver_type="htmlunit")

    def test_sync_settings(self):
        """Test resolver settings follow the config."""
        settings = SuiteConfig.from_kwargs(
            explicit_wait="10s", load_retry_limit=3, retry_backoff="100ms"
        ).sync_settings

        assert settings.explicit_wait == 10.0
        assert settings.retry_limit == 3
        assert settings.retry_backoff == 0.1

    def test_from_yaml(self, tmp_path):
        """Test loading configuration from a YAML file."""
        path = tmp_path / "booking.yaml"
        path.write_text(
            "base_url: http://squash.example/\n"
            "retry_backoff: 1s\n"
            "error_page_redirects: true\n"
            "driver:\n"
            "  type: remote\n"
            "  headless: true\n"
            "  remote_capabilities:\n"
            "    browserName: safari\n"
        )

        config = SuiteConfig.from_yaml(str(path))

        assert config.base_url == "http://squash.example/"
        assert config.retry_backoff == 1.0
        assert config.error_page_redirects is True
        assert config.driver_type == "remote"
        assert config.headless is True
        assert config.remote_capabilities == {"browserName": "safari"}

    def test_from_empty_yaml(self, tmp_path):
        """Test an empty YAML file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert SuiteConfig.from_yaml(str(path)) == SuiteConfig()

    def test_from_env(self):
        """Test reading the run settings from the environment."""
        config = SuiteConfig.from_env(
            {
                "SQUASH_WEBSITE_BASE_URL": "http://squash.example/",
                "WEBDRIVER_TYPE": "edge",
                "WEBDRIVER_JAVASCRIPT_ENABLED": "false",
                "WEBDRIVER_HEADLESS": "true",
            }
        )

        assert config.base_url == "http://squash.example/"
        assert config.driver_type == "edge"
        assert config.javascript_enabled is False
        assert config.headless is True

    def test_env_kwargs_ignores_unset_variables(self):
        assert SuiteConfig.env_kwargs({}) == {}
