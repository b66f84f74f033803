"""Tests for root logger setup."""

import logging

from shared.logging_config import configure_logging


def test_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)


def test_quiets_httpx():
    configure_logging("INFO")
    assert logging.getLogger("httpx").level == logging.WARNING
