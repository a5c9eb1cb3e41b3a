# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Shared fixtures: settings pointing at temporary files, and recording fakes
for the confirmation gate, the elevation gateway and the state checker.
"""

import logging
import subprocess
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest

from common.elevation import ExecutionPath, ExecutionResult, WorkItem
from maintenance.checkers import CheckState, StateChecker
from maintenance.cli_handler import is_affirmative
from maintenance.config_models import AppSettings, ProfileSettings, ToolRequirement
from maintenance.session import SessionState
from maintenance.step_executor import StageContext


class ScriptedGate:
    """Answers prompts from a list, then with ``fallback`` (None means the default)."""

    def __init__(self, answers: Union[str, Sequence[str], None] = None, fallback: Optional[str] = None):
        if isinstance(answers, str):
            fallback, answers = answers, []
        self.answers = list(answers or [])
        self.fallback = fallback
        self.prompts: List[str] = []

    def ask(self, prompt: str, default: str = "N") -> str:
        self.prompts.append(prompt)
        if self.answers:
            return self.answers.pop(0)
        return default if self.fallback is None else self.fallback

    def confirm(self, prompt: str, default: str = "N") -> bool:
        return is_affirmative(self.ask(prompt, default))


class RecordingGateway:
    """
    Records every work item instead of running it.

    In-process actions are executed so that file-level effects are real.
    A ``missing`` label raises FileNotFoundError from ``run`` and comes back
    as a failed result from ``run_elevated``, as with the real gateway.
    """

    def __init__(
        self,
        exit_codes: Optional[Dict[str, int]] = None,
        declined: Sequence[str] = (),
        missing: Sequence[str] = (),
    ):
        self.calls: List[Tuple[str, WorkItem]] = []
        self.exit_codes = exit_codes or {}
        self.declined = set(declined)
        self.missing = set(missing)

    def _execute(self, mode: str, work: WorkItem) -> ExecutionResult:
        self.calls.append((mode, work))
        if work.label in self.missing:
            if mode == "elevated":
                return ExecutionResult(exit_code=2, stderr=f"'{work.label}' could not be started")
            raise FileNotFoundError(2, "No such file", work.label)
        if work.label in self.declined:
            return ExecutionResult.declined(ExecutionPath.NATIVE_ELEVATION, "declined", 1223)
        if work.action is not None:
            code = int(work.action())
            path = ExecutionPath.IN_PROCESS
        else:
            code = self.exit_codes.get(work.label, 0)
            path = ExecutionPath.DIRECT
        return ExecutionResult(exit_code=code, succeeded=code in work.success_codes, path=path)

    def run(self, work: WorkItem) -> ExecutionResult:
        return self._execute("direct", work)

    def run_elevated(self, work: WorkItem) -> ExecutionResult:
        return self._execute("elevated", work)

    @property
    def labels(self) -> List[str]:
        return [work.label for _, work in self.calls]


class FakeChecker(StateChecker):
    """Reports configured states; profile markers are read from the real files."""

    def __init__(self, app_settings: AppSettings, default: CheckState = CheckState.ABSENT, states=None):
        super().__init__(app_settings, "pwsh", runner=self._no_runner)
        self.default = default
        self.states = dict(states or {})
        self.queries: List[str] = []

    @staticmethod
    def _no_runner(*args, **kwargs):
        raise AssertionError("FakeChecker must not run commands")

    def _state(self, key: str) -> CheckState:
        self.queries.append(key)
        return self.states.get(key, self.default)

    def restore_enabled(self) -> CheckState:
        return self._state("restore")

    def package_installed(self, identifier, display_name=None) -> CheckState:
        return self._state(identifier)

    def runtime_available(self) -> CheckState:
        return self._state("runtime")

    def module_available(self, module_name) -> CheckState:
        return self._state(module_name)


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(
        log_file_name="test-maintenance.log",
        tools=[ToolRequirement(identifier="X", display_name="X-Tool")],
        profile=ProfileSettings(
            candidates=[tmp_path / "ps7" / "profile.ps1", tmp_path / "ps5" / "profile.ps1"],
        ),
    )


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def make_context(app_settings, session):
    """Build a StageContext around fakes: ``make_context(gate, checker=..., gateway=...)``."""

    def _make(gate=None, checker=None, gateway=None):
        return StageContext(
            app_settings=app_settings,
            session=session,
            gate=gate if gate is not None else ScriptedGate("y"),
            gateway=gateway if gateway is not None else RecordingGateway(),
            checker=checker if checker is not None else FakeChecker(app_settings),
            logger=logging.getLogger("tests.maintenance"),
        )

    return _make


@pytest.fixture
def completed():
    """Factory for CompletedProcess results returned by fake runners."""

    def _completed(returncode=0, stdout="", stderr="", args=("cmd",)):
        return subprocess.CompletedProcess(
            args=list(args), returncode=returncode, stdout=stdout, stderr=stderr
        )

    return _completed
