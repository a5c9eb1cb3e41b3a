# common/elevation.py
# -*- coding: utf-8 -*-
"""
Privileged-execution gateway.

Every operation that needs administrative rights is described as a
``WorkItem`` and handed to ``PrivilegedExecutionGateway.run_elevated``,
which picks the least invasive way to run it:

1. an elevation helper tool on PATH (e.g. gsudo) runs the preferred shell
   with the work item's command text;
2. a process that is already administrative runs the work item directly;
3. otherwise the command text is encoded (base64 over UTF-16LE) and a new
   shell instance is started with the ``RunAs`` verb and
   ``-EncodedCommand``, and the gateway waits for it to exit.

A dismissed elevation prompt is reported as ``elevation_declined`` on the
result, never raised.
"""

import base64
import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from common.command_utils import get_symbols, log_message, run_command
from common.privilege import PrivilegeContext
from maintenance import config as static_config
from maintenance.config_models import AppSettings

module_logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

SHELL_BASE_ARGS: Tuple[str, ...] = ("-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass")


class ExecutionPath(str, Enum):
    """The mechanism that actually ran a work item."""

    DIRECT = "DIRECT"
    IN_PROCESS = "IN_PROCESS"
    HELPER_TOOL = "HELPER_TOOL"
    NATIVE_ELEVATION = "NATIVE_ELEVATION"


def quote_powershell_literal(value: str) -> str:
    """Quote ``value`` as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def render_invocation(argv: Sequence[str]) -> str:
    """
    Render an argument vector as PowerShell text that runs the program and
    propagates its exit code.
    """
    call = "& " + " ".join(quote_powershell_literal(part) for part in argv)
    return f"{call}\nexit $LASTEXITCODE"


def encode_command(command_text: str) -> str:
    """Encode command text for ``-EncodedCommand`` (base64 over UTF-16LE)."""
    return base64.b64encode(command_text.encode("utf-16-le")).decode("ascii")


def decode_command(encoded: str) -> str:
    return base64.b64decode(encoded).decode("utf-16-le")


@dataclass(frozen=True)
class WorkItem:
    """
    A unit of work plus its human-readable label.

    Exactly one of ``argv`` (an external program and its arguments),
    ``script`` (shell command text) or ``action`` (an in-process callable
    returning an exit code) is set. ``success_codes`` lists the exit codes
    that count as success for this particular tool.
    """

    label: str
    argv: Tuple[str, ...] = ()
    script: Optional[str] = None
    action: Optional[Callable[[], int]] = field(default=None, compare=False)
    success_codes: FrozenSet[int] = frozenset({0})

    def __post_init__(self) -> None:
        provided = sum(1 for part in (self.argv, self.script, self.action) if part)
        if provided != 1:
            raise ValueError(
                f"WorkItem '{self.label}' needs exactly one of argv, script or action."
            )

    @classmethod
    def from_argv(
        cls,
        label: str,
        argv: Sequence[str],
        success_codes: Sequence[int] = (0,),
    ) -> "WorkItem":
        return cls(label=label, argv=tuple(argv), success_codes=frozenset(success_codes))

    @classmethod
    def from_script(
        cls,
        label: str,
        script: str,
        success_codes: Sequence[int] = (0,),
    ) -> "WorkItem":
        return cls(label=label, script=script, success_codes=frozenset(success_codes))

    @property
    def command_text(self) -> str:
        """The textual form used whenever the work must cross into a shell."""
        if self.script is not None:
            return self.script
        if self.argv:
            return render_invocation(self.argv)
        raise ValueError(f"WorkItem '{self.label}' is an in-process action with no command text.")


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running one work item."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    succeeded: bool = False
    path: ExecutionPath = ExecutionPath.DIRECT
    elevation_declined: bool = False

    @classmethod
    def from_process(
        cls,
        process: subprocess.CompletedProcess,
        work: WorkItem,
        path: ExecutionPath,
    ) -> "ExecutionResult":
        return cls(
            exit_code=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
            succeeded=process.returncode in work.success_codes,
            path=path,
        )

    @classmethod
    def declined(cls, path: ExecutionPath, reason: str, exit_code: int) -> "ExecutionResult":
        return cls(
            exit_code=exit_code,
            stderr=reason,
            succeeded=False,
            path=path,
            elevation_declined=True,
        )


def build_shell_command(shell_path: str, command_text: str) -> List[str]:
    return [shell_path, *SHELL_BASE_ARGS, "-Command", command_text]


def build_elevation_launcher(shell_path: str, encoded_command: str) -> str:
    """
    PowerShell text that starts ``shell_path`` elevated with the encoded
    payload, waits for it and exits with its exit code. A refused or failed
    launch exits with ERROR_CANCELLED and a marker on stderr.
    """
    arguments = ",".join(
        quote_powershell_literal(arg)
        for arg in (*SHELL_BASE_ARGS, "-EncodedCommand", encoded_command)
    )
    marker = static_config.ELEVATION_FAILED_MARKER
    cancelled = static_config.ELEVATION_CANCELLED_EXIT_CODE
    return (
        "try {\n"
        f"    $p = Start-Process -FilePath {quote_powershell_literal(shell_path)} "
        f"-Verb RunAs -Wait -PassThru -ArgumentList {arguments} -ErrorAction Stop\n"
        "} catch {\n"
        f"    [Console]::Error.WriteLine('{marker} ' + $_.Exception.Message)\n"
        f"    exit {cancelled}\n"
        "}\n"
        "if ($null -eq $p) {\n"
        f"    [Console]::Error.WriteLine('{marker} elevated process did not start')\n"
        f"    exit {cancelled}\n"
        "}\n"
        "exit $p.ExitCode"
    )


class PrivilegedExecutionGateway:
    """Runs work items, elevated or not, and reports an ExecutionResult."""

    def __init__(
        self,
        privilege: PrivilegeContext,
        app_settings: AppSettings,
        current_logger: Optional[logging.Logger] = None,
        runner: Runner = run_command,
    ):
        self.privilege = privilege
        self.app_settings = app_settings
        self.logger = current_logger or module_logger
        self.runner = runner

    def run(self, work: WorkItem) -> ExecutionResult:
        """Run ``work`` with the current process's own rights."""
        return self._run_direct(work)

    def run_elevated(self, work: WorkItem) -> ExecutionResult:
        """
        Run ``work`` with administrative rights via the first available
        mechanism: helper tool, already elevated, or native elevation prompt.
        """
        symbols = get_symbols(self.app_settings)
        log_message(
            f"{symbols.get('shield', '🛡️')} [elevated] {work.label}",
            "info",
            self.logger,
            self.app_settings,
        )

        if self.privilege.helper_tool_path and work.action is None:
            result = self._run_with_helper(work)
        elif self.privilege.current_user_is_admin:
            result = self._run_as_admin(work)
        elif work.action is not None:
            result = ExecutionResult.declined(
                ExecutionPath.IN_PROCESS,
                f"'{work.label}' can only run in an elevated process.",
                static_config.ELEVATION_CANCELLED_EXIT_CODE,
            )
        else:
            result = self._run_with_native_elevation(work)

        self._report(work, result)
        return result

    def _run_direct(self, work: WorkItem) -> ExecutionResult:
        if work.action is not None:
            exit_code = int(work.action())
            return ExecutionResult(
                exit_code=exit_code,
                succeeded=exit_code in work.success_codes,
                path=ExecutionPath.IN_PROCESS,
            )
        if work.argv:
            command = list(work.argv)
        else:
            command = build_shell_command(
                self.privilege.preferred_shell_path, work.command_text
            )
        process = self.runner(command, self.app_settings, current_logger=self.logger)
        return ExecutionResult.from_process(process, work, ExecutionPath.DIRECT)

    def _run_as_admin(self, work: WorkItem) -> ExecutionResult:
        # Reported like the helper and native paths: a program that cannot
        # start is a failed result, not an exception.
        try:
            return self._run_direct(work)
        except OSError as e:
            return ExecutionResult(
                exit_code=static_config.FILE_NOT_FOUND_EXIT_CODE,
                stderr=f"'{work.label}' could not be started: {e}",
                succeeded=False,
                path=ExecutionPath.IN_PROCESS if work.action is not None else ExecutionPath.DIRECT,
            )

    def _run_with_helper(self, work: WorkItem) -> ExecutionResult:
        # The command text stays a single argv element; subprocess quotes it
        # for the helper's command-line parser.
        command = [
            self.privilege.helper_tool_path,
            *build_shell_command(self.privilege.preferred_shell_path, work.command_text),
        ]
        try:
            process = self.runner(command, self.app_settings, current_logger=self.logger)
        except FileNotFoundError as e:
            return ExecutionResult.declined(
                ExecutionPath.HELPER_TOOL,
                f"Elevation helper could not be started: {e}",
                static_config.ELEVATION_CANCELLED_EXIT_CODE,
            )
        return ExecutionResult.from_process(process, work, ExecutionPath.HELPER_TOOL)

    def _run_with_native_elevation(self, work: WorkItem) -> ExecutionResult:
        shell_path = self.privilege.preferred_shell_path
        launcher = build_elevation_launcher(shell_path, encode_command(work.command_text))
        try:
            process = self.runner(
                build_shell_command(shell_path, launcher),
                self.app_settings,
                current_logger=self.logger,
            )
        except FileNotFoundError as e:
            return ExecutionResult.declined(
                ExecutionPath.NATIVE_ELEVATION,
                f"Elevated shell could not be started: {e}",
                static_config.ELEVATION_CANCELLED_EXIT_CODE,
            )

        stderr = process.stderr or ""
        if (
            process.returncode == static_config.ELEVATION_CANCELLED_EXIT_CODE
            and static_config.ELEVATION_FAILED_MARKER in stderr
        ):
            return ExecutionResult.declined(
                ExecutionPath.NATIVE_ELEVATION,
                stderr.strip(),
                process.returncode,
            )
        note = "Command ran in a separate elevated window; its output is not captured here."
        stdout = f"{process.stdout}\n{note}" if process.stdout else note
        return ExecutionResult(
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr,
            succeeded=process.returncode in work.success_codes,
            path=ExecutionPath.NATIVE_ELEVATION,
        )

    def _report(self, work: WorkItem, result: ExecutionResult) -> None:
        symbols = get_symbols(self.app_settings)
        if result.elevation_declined:
            log_message(
                f"{symbols.get('warning', '!')} Elevation declined or failed for '{work.label}': {result.stderr}",
                "warning",
                self.logger,
                self.app_settings,
            )
        elif result.succeeded:
            log_message(
                f"{symbols.get('success', '✅')} {work.label} finished (exit code {result.exit_code}).",
                "info",
                self.logger,
                self.app_settings,
            )
        else:
            log_message(
                f"{symbols.get('error', '❌')} {work.label} failed (exit code {result.exit_code}).",
                "error",
                self.logger,
                self.app_settings,
            )
