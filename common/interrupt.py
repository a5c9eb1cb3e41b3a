# common/interrupt.py
# -*- coding: utf-8 -*-
"""
Process-wide cancellation handling.

A single handler is registered at startup. When the user cancels (Ctrl+C,
or Ctrl+Break on Windows) it records the cancellation, asks the transcript
sink to close, and terminates the process with exit code 0.
"""

import logging
import signal
import threading
from typing import Any, Callable, List, Optional

from common.command_utils import get_symbols, log_message
from common.transcript import TranscriptSink
from maintenance.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class InterruptHandler:
    """Cancellation channel shared by the workflow and the signal handler."""

    def __init__(
        self,
        sink: TranscriptSink,
        app_settings: Optional[AppSettings] = None,
        current_logger: Optional[logging.Logger] = None,
        exit_code: int = 0,
    ):
        self.sink = sink
        self.app_settings = app_settings
        self.logger = current_logger or module_logger
        self.exit_code = exit_code
        self.cancelled = threading.Event()
        self._installed = False
        self._previous: List[Any] = []

    def install(
        self, register: Callable[[int, Any], Any] = signal.signal
    ) -> None:
        """Register the handler once for SIGINT (and SIGBREAK where it exists)."""
        if self._installed:
            return
        signals = [signal.SIGINT]
        sigbreak = getattr(signal, "SIGBREAK", None)
        if sigbreak is not None:
            signals.append(sigbreak)
        for signum in signals:
            self._previous.append((signum, register(signum, self.handle_signal)))
        self._installed = True

    def handle_signal(self, signum: int, frame: Any) -> None:
        """Begin shutdown: close the transcript and terminate the process."""
        first = not self.cancelled.is_set()
        self.cancelled.set()
        if first:
            log_message(
                f"\n{get_symbols(self.app_settings).get('warning', '!')} Maintenance interrupted by user. Exiting.",
                "warning",
                self.logger,
                self.app_settings,
            )
        self.sink.close()
        raise SystemExit(self.exit_code)

    def raise_if_cancelled(self) -> None:
        if self.cancelled.is_set():
            self.sink.close()
            raise SystemExit(self.exit_code)

    def uninstall(
        self, register: Callable[[int, Any], Any] = signal.signal
    ) -> None:
        """Restore the handlers that were active before ``install``."""
        while self._previous:
            signum, previous = self._previous.pop()
            register(signum, previous)
        self._installed = False
