#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core logging utilities for the maintenance orchestrator.

This module provides:
- A formatter that prefixes records with a level-dependent symbol.
- Root logger setup for console output (the transcript file handler is
  attached separately by common.transcript).
"""

import logging
import sys
from typing import Dict, List, Optional

from maintenance.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

DETAILED_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"
SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER = (
    "{log_prefix}%(asctime)s - %(symbol)s %(message)s"
)
SIMPLE_LOG_FORMAT_NO_PREFIX = "%(asctime)s - %(symbol)s %(message)s"


class SymbolFormatter(logging.Formatter):
    """
    A custom formatter that adds symbols to log messages based on the log level.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = "%",
        validate: bool = True,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt, style, validate)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == logging.INFO:
            record.symbol = ""
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        return super().format(record)


def build_formatter(
    log_format_str: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> SymbolFormatter:
    """
    Build the formatter shared by the console handler and the transcript.

    Args:
        log_format_str: A custom format string. May contain a ``{log_prefix}``
            placeholder; otherwise the prefix is prepended.
        log_prefix: Optional prefix for each line.
        symbols: Level symbols; defaults to SYMBOLS_DEFAULT.
    """
    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )

    if log_format_str:
        if "{log_prefix}" in log_format_str:
            final_format_str = log_format_str.format(log_prefix=actual_prefix)
        else:
            final_format_str = actual_prefix + log_format_str
    elif actual_prefix:
        final_format_str = SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER.format(
            log_prefix=actual_prefix
        )
    else:
        final_format_str = SIMPLE_LOG_FORMAT_NO_PREFIX

    return SymbolFormatter(
        fmt=final_format_str,
        datefmt="%Y-%m-%d %H:%M:%S",
        symbols=symbols,
    )


def setup_logging(
    log_level: int = logging.INFO,
    log_to_console: bool = True,
    log_format_str: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> SymbolFormatter:
    """
    Configures the root logger for console output.

    Existing root handlers are removed so repeated calls do not duplicate
    output. The formatter is returned so that the transcript handler can
    render lines exactly as the console does.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_to_console: bool
        Whether to log to the console (stdout). Defaults to True.
    log_format_str: Optional[str]
        A custom log format string.
    log_prefix: Optional[str]
        An optional string to prefix log messages with.
    symbols: Optional[Dict[str, str]]
        Level symbols used by the formatter.

    Returns:
    SymbolFormatter
        The formatter attached to the configured handlers.
    """
    handlers: List[logging.Handler] = []

    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if not handlers:  # pragma: no cover
        handlers.append(logging.StreamHandler(sys.stdout))
        if log_level > logging.INFO:
            log_level = logging.INFO

    formatter = build_formatter(log_format_str, log_prefix, symbols)

    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}."
    )
    return formatter
