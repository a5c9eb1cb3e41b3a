# common/transcript.py
# -*- coding: utf-8 -*-
"""
Transcript sink: mirrors everything the run displays into a log file.

The sink attaches a file handler to the root logger, so every message that
reaches the console through ``log_message`` is also written to the file.
``close`` may be called from the normal exit path and from the interrupt
handler, in either order and any number of times.
"""

import datetime
import logging
import sys
import threading
from pathlib import Path
from typing import Optional

from common.command_utils import get_symbols, log_message
from maintenance.config_models import AppSettings
from maintenance.session import SessionState

module_logger = logging.getLogger(__name__)


class TranscriptSink:
    """Owns the transcript file handler and the ``transcript_open`` flag."""

    def __init__(
        self,
        session: SessionState,
        app_settings: Optional[AppSettings] = None,
        formatter: Optional[logging.Formatter] = None,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.app_settings = app_settings
        self.formatter = formatter
        self.logger = current_logger or module_logger
        self._handler: Optional[logging.FileHandler] = None
        self._path: Optional[Path] = None
        # Reentrant: the interrupt handler runs on the main thread and may
        # fire while close() already holds the lock.
        self._lock = threading.RLock()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._handler is not None

    def open(self, path: Path, overwrite: bool = False) -> None:
        """
        Start mirroring output to ``path``.

        Args:
            path: Transcript file location. Parent directories are created.
            overwrite: Truncate an existing file instead of appending to it.
        """
        with self._lock:
            if self._handler is not None:
                return
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(
                path, mode="w" if overwrite else "a", encoding="utf-8"
            )
            if self.formatter is not None:
                handler.setFormatter(self.formatter)
            logging.getLogger().addHandler(handler)
            self._handler = handler
            self._path = path
            self.session.transcript_open = True

        started = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_message(
            f"{get_symbols(self.app_settings).get('info', 'ℹ️')} Transcript started {started}, output file is {path}",
            "info",
            self.logger,
            self.app_settings,
        )

    def close(self) -> bool:
        """
        Flush and close the transcript.

        Safe to call repeatedly and from the interrupt handler. A partially
        written final line is left as it is.

        Returns:
            True if this call closed the transcript, False if it was not open.
        """
        with self._lock:
            handler = self._handler
            if handler is None:
                return False
            self._handler = None

            stopped = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            try:
                if handler.stream is not None and not handler.stream.closed:
                    handler.stream.write(f"Transcript stopped {stopped}\n")
                handler.flush()
            except (OSError, ValueError) as e:
                print(
                    f"Warning: Could not flush transcript {self._path}: {e}",
                    file=sys.stderr,
                )
            logging.getLogger().removeHandler(handler)
            handler.close()
            self.session.transcript_open = False
            return True
