"""Tests for core/logging_config.py."""

import logging

import pytest

from core.logging_config import configure_logging, get_logger, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()
    configure_logging("WARNING")


class TestLogging:

    def test_namespace(self):
        assert get_logger("core.pricing").name == "furniture_quote.core.pricing"

    def test_single_handler(self):
        configure_logging("INFO")
        configure_logging("DEBUG")
        root = logging.getLogger("furniture_quote")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        root = configure_logging("chatty")
        assert root.level == logging.INFO

    def test_reset(self):
        configure_logging()
        reset_logging()
        assert logging.getLogger("furniture_quote").handlers == []
