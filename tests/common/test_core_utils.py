# tests/common/test_core_utils.py
# -*- coding: utf-8 -*-
"""
Tests for the logging formatter and root logger setup.
"""

import logging
import sys

import pytest

from common.core_utils import SymbolFormatter, build_formatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def _record(level, msg="message"):
    return logging.LogRecord("test", level, __file__, 1, msg, None, None)


@pytest.mark.parametrize(
    "level, symbol",
    [
        (logging.DEBUG, "D"),
        (logging.INFO, ""),
        (logging.WARNING, "W"),
        (logging.ERROR, "E"),
        (logging.CRITICAL, "C"),
    ],
)
def test_symbol_formatter(level, symbol):
    formatter = SymbolFormatter(
        fmt="%(symbol)s|%(message)s",
        symbols={"debug": "D", "warning": "W", "error": "E", "critical": "C"},
    )
    assert formatter.format(_record(level)) == f"{symbol}|message"


def test_build_formatter_with_prefix():
    formatter = build_formatter(log_prefix="[MAINT]")
    assert formatter._fmt.startswith("[MAINT] ")


def test_build_formatter_with_placeholder():
    formatter = build_formatter(log_format_str="{log_prefix}%(message)s", log_prefix="[X]")
    assert formatter._fmt == "[X] %(message)s"


def test_setup_logging_replaces_root_handlers(restore_root_logger):
    stale = logging.NullHandler()
    restore_root_logger.addHandler(stale)

    formatter = setup_logging(log_level=logging.DEBUG, log_prefix="[MAINT]")

    assert stale not in restore_root_logger.handlers
    assert len(restore_root_logger.handlers) == 1
    handler = restore_root_logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stdout
    assert handler.formatter is formatter
    assert restore_root_logger.level == logging.DEBUG


def test_setup_logging_twice_does_not_duplicate(restore_root_logger):
    setup_logging()
    setup_logging()
    assert len(restore_root_logger.handlers) == 1
