# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing external commands and logging their output.
"""

import codecs
import locale
import logging
import shutil
import subprocess
import threading
from typing import Dict, List, Optional, Sequence, Union

from maintenance.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a user-facing message at the given level.

    Every line the orchestrator shows goes through here, so the console and
    the transcript file receive the same text.

    Args:
        message (str): The log message to be recorded.
        level (str): "debug", "info", "success", "warning", "error" or
            "critical". Unknown levels are logged at info.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to
            the module logger.
        app_settings (Optional[AppSettings]): Application settings, accepted
            for symmetry with the other helpers.
        exc_info (bool): Include exception details.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    if app_settings and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def detect_encoding(payload: bytes) -> str:
    """
    Name of the codec that decodes ``payload``.

    A byte order mark wins; otherwise a NUL second byte means UTF-16LE (what
    DISM and PowerShell redirection write), then UTF-8, the ANSI code page
    and cp1252 are tried in turn.
    """
    if payload.startswith(codecs.BOM_UTF16_LE):
        return "utf-16-le"
    if payload.startswith(codecs.BOM_UTF16_BE):
        return "utf-16-be"
    if payload.startswith(codecs.BOM_UTF8):
        return "utf-8"
    if len(payload) >= 2 and payload[1:2] == b"\x00":
        return "utf-16-le"
    for encoding in ("utf-8", locale.getpreferredencoding(False), "cp1252"):
        try:
            payload.decode(encoding)
        except (LookupError, UnicodeDecodeError):
            continue
        return encoding
    return "utf-8"


def normalize_output(payload: Union[bytes, str, None]) -> str:
    """Decode tool output that may be UTF-8, UTF-16 or the ANSI code page."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    text = payload.decode(detect_encoding(payload), errors="replace")
    return text[1:] if text.startswith("\ufeff") else text


def _log_output_line(
    line: str,
    level: str,
    prefix: str,
    logger: logging.Logger,
    app_settings: Optional[AppSettings],
) -> None:
    line = line.lstrip("\ufeff").rstrip()
    if line.strip():
        log_message(f"   {prefix}{line}", level, logger, app_settings)


def run_command(
    command: Sequence[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    log_output: bool = True,
) -> subprocess.CompletedProcess:
    """
    Executes an external command from an argument vector and logs the
    invocation and its output.

    The call blocks until the process exits. Standard output is logged line
    by line while the process runs, so long DISM, sfc or winget runs show
    progress; standard error is logged once the process has exited. Both
    are decoded with ``normalize_output`` so that tools writing UTF-16 are
    readable in the transcript.

    Args:
        command: The argument vector; the first element is the executable.
        app_settings: Application settings, used for log symbols.
        current_logger: Logger to use for progress messages.
        log_output: Log stdout/stderr line by line.

    Returns:
        subprocess.CompletedProcess with ``stdout``/``stderr`` as text.

    Raises:
        FileNotFoundError: The executable does not exist.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    command_to_run: List[str] = [str(part) for part in command]
    command_to_log_str = subprocess.list2cmdline(command_to_run)

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str}",
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        process = subprocess.Popen(
            command_to_run,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename or command_to_run[0]}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    with process:
        # stderr is drained on its own thread so a chatty tool cannot block
        # on a full pipe while stdout is being read.
        stderr_chunks: List[bytes] = []
        stderr_reader = threading.Thread(
            target=lambda: stderr_chunks.append(process.stderr.read()),
            daemon=True,
        )
        stderr_reader.start()

        stdout_raw = bytearray()
        decoder = None
        pending = ""
        for chunk in iter(process.stdout.readline, b""):
            stdout_raw.extend(chunk)
            if not log_output:
                continue
            if decoder is None:
                decoder = codecs.getincrementaldecoder(detect_encoding(bytes(stdout_raw)))(
                    errors="replace"
                )
            pending += decoder.decode(chunk)
            *complete, pending = pending.split("\n")
            for line in complete:
                _log_output_line(line, "info", "", effective_logger, app_settings)
        if decoder is not None:
            pending += decoder.decode(b"", final=True)
            _log_output_line(pending, "info", "", effective_logger, app_settings)

        returncode = process.wait()
        stderr_reader.join()

    result = subprocess.CompletedProcess(
        args=command_to_run,
        returncode=returncode,
        stdout=normalize_output(bytes(stdout_raw)),
        stderr=normalize_output(b"".join(chunk for chunk in stderr_chunks if chunk)),
    )

    if log_output and result.stderr.strip():
        stderr_level = "info" if result.returncode == 0 else "warning"
        for line in result.stderr.splitlines():
            _log_output_line(line, stderr_level, "stderr: ", effective_logger, app_settings)
    return result


def find_command(command_name: str) -> Optional[str]:
    """
    Return the full path of ``command_name`` on the system's PATH.

    Parameters:
        command_name (str): The name of the command to look up.

    Returns:
        Optional[str]: The resolved path, or None if it is not on PATH.
    """
    return shutil.which(command_name)
