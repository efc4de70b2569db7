"""Tests for the page sync keyed stores."""

from squashaat.domains.page_sync import (
    ConsistencyTokenRegistry,
    MarkerStore,
    StaleElementGate,
    TokenStore,
)
from tests.unit.helpers.fake_driver import FakeElement


class TestConsistencyTokenRegistry:
    """Tests for ConsistencyTokenRegistry."""

    def test_lookup_of_unknown_key_is_none(self):
        assert ConsistencyTokenRegistry().lookup("BookingPage") is None

    def test_update_replaces_token(self):
        registry = ConsistencyTokenRegistry()
        registry.update("BookingPage", "v1")
        registry.update("BookingPage", "v2")

        assert registry.lookup("BookingPage") == "v2"
        assert len(registry) == 1

    def test_keys_are_independent(self):
        registry = ConsistencyTokenRegistry()
        registry.update("BookingPage2016-01-05", "a")
        registry.update("BookingPage2016-01-06", "b")

        assert registry.lookup("BookingPage2016-01-05") == "a"
        assert sorted(registry) == ["BookingPage2016-01-05", "BookingPage2016-01-06"]

    def test_satisfies_token_store_protocol(self):
        assert isinstance(ConsistencyTokenRegistry(), TokenStore)


class TestStaleElementGate:
    """Tests for StaleElementGate."""

    def test_fetch_of_unknown_key_is_none(self):
        assert StaleElementGate().fetch("BookingPage") is None

    def test_capture_replaces_marker(self):
        gate = StaleElementGate()
        old, new = FakeElement(name="old"), FakeElement(name="new")
        gate.capture("BookingPage", old)
        gate.capture("BookingPage", new)

        assert gate.fetch("BookingPage") is new
        assert "BookingPage" in gate

    def test_satisfies_marker_store_protocol(self):
        assert isinstance(StaleElementGate(), MarkerStore)

    def test_gates_do_not_share_state(self):
        """Test two sessions' gates never see each other's markers."""
        first, second = StaleElementGate(), StaleElementGate()
        first.capture("BookingPage", FakeElement())

        assert second.fetch("BookingPage") is None
