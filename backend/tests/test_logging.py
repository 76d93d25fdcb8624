"""
Tests for logging setup.
"""

import logging

import pytest

from chronify.logging import NOISY_LOGGERS, get_logger, setup_logging


@pytest.fixture
def restore_levels():
    names = ("chronify", *NOISY_LOGGERS)
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_library_loggers_held_at_warning(self, restore_levels):
        app_logger = setup_logging(debug=False)

        assert app_logger.name == "chronify"
        assert app_logger.level == logging.INFO
        assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)

    def test_debug_lets_library_logs_through(self, restore_levels):
        setup_logging(debug=True)

        assert logging.getLogger("chronify").level == logging.DEBUG
        assert logging.getLogger("aiosqlite").level == logging.DEBUG

    def test_module_loggers_are_namespaced(self):
        assert get_logger("services.events").name == "chronify.services.events"
