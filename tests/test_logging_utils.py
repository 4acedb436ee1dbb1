"""Tests for script logging setup."""

from __future__ import annotations

import logging

import pytest

from stream_vad.utils.logging_utils import WINDOW_LOGGERS, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_window_loggers():
    saved = {name: logging.getLogger(name).level for name in WINDOW_LOGGERS}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_resolve_level_names():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("WARNING") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_resolve_level_unknown():
    with pytest.raises(ValueError, match="Unknown log level"):
        resolve_level("chatty")


def test_debug_keeps_window_loggers_at_info():
    setup_logging("DEBUG")

    for name in WINDOW_LOGGERS:
        assert logging.getLogger(name).level == logging.INFO


def test_window_debug_opens_window_loggers():
    setup_logging("DEBUG", window_debug=True)

    for name in WINDOW_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_quieter_levels_apply_to_window_loggers():
    setup_logging(logging.WARNING)

    for name in WINDOW_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
