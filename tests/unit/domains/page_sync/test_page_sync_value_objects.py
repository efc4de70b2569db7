"""Tests for page sync value objects and events."""

import pytest

from squashaat.domains.page_sync import (
    PageLoadCompleted,
    PageLoadRetried,
    RetryLimitExceeded,
    SyncSettings,
)


class TestSyncSettings:
    """Tests for SyncSettings."""

    def test_defaults(self):
        settings = SyncSettings()

        assert settings.explicit_wait == 30.0
        assert settings.retry_limit == 20
        assert settings.retry_backoff == 0.5

    @pytest.mark.parametrize(
        "kwargs",
        [{"explicit_wait": -1}, {"retry_limit": 0}, {"retry_backoff": -0.1}],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SyncSettings(**kwargs)


class TestEvents:
    """Tests for page sync domain events."""

    def test_retried_to_dict(self):
        event = PageLoadRetried(key="BookingPage", attempt=2, url="http://x/", expect_changed=True)
        data = event.to_dict()

        assert data["event_type"] == "PageLoadRetried"
        assert data["attempt"] == 2
        assert data["url"] == "http://x/"
        assert "timestamp" in data

    def test_completed_to_dict(self):
        data = PageLoadCompleted(key="ErrorPage", attempts=1).to_dict()

        assert data["event_type"] == "PageLoadCompleted"
        assert data["expect_changed"] is None

    def test_limit_exceeded_to_dict(self):
        data = RetryLimitExceeded(key="BookingPage", attempts=20, limit=20).to_dict()

        assert data["event_type"] == "RetryLimitExceeded"
        assert data["limit"] == 20
