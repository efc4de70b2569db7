"""Pytest configuration for the squashaat test suite."""

from __future__ import annotations

import logging

import pytest

from squashaat.session import reset_session_manager


@pytest.fixture(autouse=True)
def fresh_session_manager():
    """Each test gets its own process-wide session manager."""
    reset_session_manager()
    yield
    reset_session_manager()


@pytest.fixture(autouse=True)
def restore_package_log_level():
    """BookingLibrary sets the package log level on import; undo it after each test."""
    squash_logger = logging.getLogger("squashaat")
    level = squash_logger.level
    yield
    squash_logger.setLevel(level)
