# maintenance/checkers.py
# -*- coding: utf-8 -*-
"""
Read-only state queries used to skip remediation that is already done.

Every checker returns a ``CheckState``. UNKNOWN means the query itself could
not run (the tool is missing, the file is unreadable); callers treat it like
ABSENT so that remediation is still offered, but it is logged differently.
Checkers never elevate and never change the host.
"""

import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from common.command_utils import (
    detect_encoding,
    get_symbols,
    log_message,
    normalize_output,
    run_command,
)
from common.elevation import SHELL_BASE_ARGS, quote_powershell_literal
from maintenance.config_models import AppSettings

module_logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

RESTORE_REGISTRY_KEY = r"HKLM:\SOFTWARE\Microsoft\Windows NT\CurrentVersion\SystemRestore"
RESTORE_REGISTRY_VALUE = "RPSessionInterval"


class CheckState(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    UNKNOWN = "UNKNOWN"

    @property
    def present(self) -> bool:
        return self is CheckState.PRESENT

    @property
    def needs_remediation(self) -> bool:
        return self is not CheckState.PRESENT


def profile_contains(text: str, marker: str) -> bool:
    """True if any line of ``text`` equals ``marker`` or contains it."""
    wanted = marker.strip()
    if not wanted:
        return False
    for line in text.splitlines():
        stripped = line.strip()
        if stripped == wanted or wanted in stripped:
            return True
    return False


def read_profile(profile_path: Path) -> Tuple[str, str]:
    """
    Text of a profile file and the encoding it is stored in.

    Windows PowerShell 5.1 profiles are often UTF-16LE with a byte order
    mark. An empty file reads as UTF-8.
    """
    raw = Path(profile_path).read_bytes()
    if not raw:
        return "", "utf-8"
    return normalize_output(raw), detect_encoding(raw)


class StateChecker:
    """
    The family of idempotence checks run before each remediation.

    Args:
        app_settings: Settings providing the catalogs and the log symbols.
        shell_path: The preferred command interpreter, used for queries that
            only exist as shell cmdlets.
        current_logger: Logger to use.
        runner: Command runner, ``run_command`` unless a test injects one.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        shell_path: str,
        current_logger: Optional[logging.Logger] = None,
        runner: Runner = run_command,
    ):
        self.app_settings = app_settings
        self.shell_path = shell_path
        self.logger = current_logger or module_logger
        self.runner = runner

    def _query(self, command, subject: str) -> Optional[subprocess.CompletedProcess]:
        try:
            return self.runner(
                command,
                self.app_settings,
                current_logger=self.logger,
                log_output=False,
            )
        except OSError as e:
            self._log_unknown(subject, f"query could not run ({e})")
            return None

    def _query_shell(self, script: str, subject: str) -> Optional[subprocess.CompletedProcess]:
        return self._query([self.shell_path, *SHELL_BASE_ARGS, "-Command", script], subject)

    def _log_unknown(self, subject: str, reason: str) -> None:
        symbols = get_symbols(self.app_settings)
        log_message(
            f"{symbols.get('warning', '!')} Could not determine whether {subject} is present: {reason}. Treating it as absent.",
            "warning",
            self.logger,
            self.app_settings,
        )

    def _report(self, subject: str, state: CheckState) -> CheckState:
        if state is CheckState.PRESENT:
            log_message(
                f"{get_symbols(self.app_settings).get('success', '✅')} {subject} is present.",
                "info",
                self.logger,
                self.app_settings,
            )
        elif state is CheckState.ABSENT:
            log_message(f"{subject} is not present.", "info", self.logger, self.app_settings)
        return state

    def restore_enabled(self) -> CheckState:
        """System restore is configured when the session interval is non-zero."""
        subject = "System Restore"
        script = (
            f"(Get-ItemProperty -Path {quote_powershell_literal(RESTORE_REGISTRY_KEY)} "
            f"-Name {RESTORE_REGISTRY_VALUE} -ErrorAction Stop).{RESTORE_REGISTRY_VALUE}"
        )
        result = self._query_shell(script, subject)
        if result is None:
            return CheckState.UNKNOWN
        if result.returncode != 0:
            self._log_unknown(subject, f"registry query failed (exit code {result.returncode})")
            return CheckState.UNKNOWN
        value = result.stdout.strip()
        if not value.isdigit():
            self._log_unknown(subject, f"unexpected registry value '{value}'")
            return CheckState.UNKNOWN
        return self._report(subject, CheckState.PRESENT if int(value) != 0 else CheckState.ABSENT)

    def package_installed(self, identifier: str, display_name: Optional[str] = None) -> CheckState:
        """``winget list --id <id> -e`` lists the package when it is installed."""
        subject = display_name or identifier
        result = self._query(
            ["winget", "list", "--id", identifier, "-e", "--accept-source-agreements"],
            subject,
        )
        if result is None:
            return CheckState.UNKNOWN
        listed = identifier.lower() in result.stdout.lower()
        if result.returncode == 0 and listed:
            return self._report(subject, CheckState.PRESENT)
        return self._report(subject, CheckState.ABSENT)

    def runtime_available(self) -> CheckState:
        """The runtime answers its version query."""
        runtime = self.app_settings.runtime
        subject = f"Runtime '{runtime.command}'"
        result = self._query([runtime.command, runtime.version_flag], subject)
        if result is None:
            return CheckState.UNKNOWN
        if result.returncode == 0 and (result.stdout.strip() or result.stderr.strip()):
            log_message(
                f"{subject} reports {(result.stdout.strip() or result.stderr.strip()).splitlines()[0]}",
                "info",
                self.logger,
                self.app_settings,
            )
            return self._report(subject, CheckState.PRESENT)
        return self._report(subject, CheckState.ABSENT)

    def module_available(self, module_name: str) -> CheckState:
        """``Get-Module -ListAvailable`` prints the module when installed."""
        subject = f"Module '{module_name}'"
        script = (
            f"Get-Module -ListAvailable -Name {quote_powershell_literal(module_name)} "
            "| Select-Object -ExpandProperty Name -First 1"
        )
        result = self._query_shell(script, subject)
        if result is None:
            return CheckState.UNKNOWN
        if result.returncode != 0:
            self._log_unknown(subject, f"module query failed (exit code {result.returncode})")
            return CheckState.UNKNOWN
        names = [line.strip().lower() for line in result.stdout.splitlines()]
        state = CheckState.PRESENT if module_name.lower() in names else CheckState.ABSENT
        return self._report(subject, state)

    def profile_has_marker(self, profile_path: Path, marker: str) -> CheckState:
        """A missing profile file cannot contain the marker."""
        subject = f"Profile line '{marker}' in {profile_path}"
        path = Path(profile_path)
        if not path.exists():
            return self._report(subject, CheckState.ABSENT)
        try:
            text, _ = read_profile(path)
        except OSError as e:
            self._log_unknown(subject, str(e))
            return CheckState.UNKNOWN
        return self._report(
            subject, CheckState.PRESENT if profile_contains(text, marker) else CheckState.ABSENT
        )
