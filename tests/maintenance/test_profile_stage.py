# tests/maintenance/test_profile_stage.py
# -*- coding: utf-8 -*-
"""
Tests for shell profile augmentation.
"""

import codecs

import pytest

from conftest import RecordingGateway, ScriptedGate
from maintenance.stages import run_profile_stage
from maintenance.stages.profile import append_profile_line, profile_candidates
from maintenance.step_executor import StageOutcome

IMPORT = "Import-Module Terminal-Icons"
INITIALIZER = "Set-PSReadLineOption -PredictionSource History"


@pytest.fixture
def profiles(app_settings):
    first, second = app_settings.profile.candidates
    for path in (first, second):
        path.parent.mkdir(parents=True)
        path.write_text("# existing profile\n", encoding="utf-8")
    return first, second


def _count(path, line):
    return path.read_text(encoding="utf-8").splitlines().count(line)


def test_import_goes_to_first_profile_initializer_to_all(make_context, profiles):
    first, second = profiles

    outcome = run_profile_stage(make_context())

    assert _count(first, IMPORT) == 1
    assert _count(second, IMPORT) == 0
    assert _count(first, INITIALIZER) == 1
    assert _count(second, INITIALIZER) == 1
    assert outcome is StageOutcome.COMPLETED


def test_second_run_does_not_duplicate(make_context, profiles):
    first, second = profiles
    run_profile_stage(make_context())
    gateway = RecordingGateway()
    gate = ScriptedGate("y")

    outcome = run_profile_stage(make_context(gate=gate, gateway=gateway))

    assert gateway.calls == []
    assert gate.prompts == []
    assert outcome is StageOutcome.SKIPPED
    for path in (first, second):
        assert _count(path, INITIALIZER) == 1
    assert _count(first, IMPORT) == 1


def test_import_already_in_first_profile_leaves_second_alone(make_context, profiles):
    first, second = profiles
    first.write_text(f"{IMPORT}\n{INITIALIZER}\n", encoding="utf-8")

    run_profile_stage(make_context())

    assert _count(second, IMPORT) == 0
    assert _count(second, INITIALIZER) == 1


def test_only_second_profile_exists(make_context, app_settings):
    first, second = app_settings.profile.candidates
    second.parent.mkdir(parents=True)
    second.write_text("", encoding="utf-8")

    run_profile_stage(make_context())

    assert not first.exists()
    assert _count(second, IMPORT) == 1
    assert _count(second, INITIALIZER) == 1


def test_no_profile_creates_first_candidate(make_context, app_settings):
    first, second = app_settings.profile.candidates

    assert profile_candidates(make_context()) == [first]
    run_profile_stage(make_context())

    assert _count(first, IMPORT) == 1
    assert _count(first, INITIALIZER) == 1
    assert not second.exists()


def test_declining_one_line_keeps_the_other(make_context, profiles):
    first, second = profiles
    gate = ScriptedGate(["n", "n"], fallback="y")

    outcome = run_profile_stage(make_context(gate=gate))

    assert _count(first, IMPORT) == 0
    assert _count(second, IMPORT) == 0
    assert _count(first, INITIALIZER) == 1
    assert _count(second, INITIALIZER) == 1
    assert outcome is StageOutcome.COMPLETED


def test_append_adds_missing_newline(make_context, tmp_path):
    profile = tmp_path / "profile.ps1"
    profile.write_text("Set-Alias ll ls", encoding="utf-8")

    assert append_profile_line(make_context(), profile, IMPORT) == 0

    assert profile.read_text(encoding="utf-8") == f"Set-Alias ll ls\n{IMPORT}\n"


def test_append_failure_returns_error_code(make_context, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    assert append_profile_line(make_context(), blocker / "profile.ps1", IMPORT) == 1


def test_utf16_profile_is_appended_in_utf16_and_only_once(make_context, app_settings):
    first, _ = app_settings.profile.candidates
    first.parent.mkdir(parents=True)
    first.write_bytes(codecs.BOM_UTF16_LE + f"# existing profile\r\n{IMPORT}\r\n".encode("utf-16-le"))

    run_profile_stage(make_context())
    outcome = run_profile_stage(make_context())

    raw = first.read_bytes()
    assert raw.startswith(codecs.BOM_UTF16_LE)
    assert IMPORT.encode("utf-8") not in raw
    text = raw[len(codecs.BOM_UTF16_LE):].decode("utf-16-le")
    assert text.count(IMPORT) == 1
    assert text.count(INITIALIZER) == 1
    assert outcome is StageOutcome.SKIPPED


def test_append_keeps_utf16_encoding(make_context, tmp_path):
    profile = tmp_path / "profile.ps1"
    profile.write_bytes(codecs.BOM_UTF16_LE + "Set-Alias ll ls".encode("utf-16-le"))

    assert append_profile_line(make_context(), profile, IMPORT) == 0

    text = profile.read_bytes()[len(codecs.BOM_UTF16_LE):].decode("utf-16-le")
    assert text.splitlines() == ["Set-Alias ll ls", IMPORT]
