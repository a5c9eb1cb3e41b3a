# tests/maintenance/test_checkers.py
# -*- coding: utf-8 -*-
"""
Tests for the idempotence checkers.
"""

import codecs
import logging
from unittest.mock import MagicMock

import pytest

from maintenance.checkers import CheckState, StateChecker, profile_contains, read_profile
from maintenance.config_models import AppSettings


@pytest.fixture
def make_checker():
    def _make(runner):
        return StateChecker(AppSettings(), "pwsh.exe", logging.getLogger("tests.checkers"), runner)

    return _make


def test_check_state_properties():
    assert CheckState.PRESENT.present
    assert not CheckState.PRESENT.needs_remediation
    assert CheckState.ABSENT.needs_remediation
    assert CheckState.UNKNOWN.needs_remediation
    assert not CheckState.UNKNOWN.present


class TestPackageInstalled:
    def test_listed_package_is_present(self, make_checker, completed):
        runner = MagicMock(return_value=completed(0, "Name    Id  Version\n-----\nX-Tool  X   1.0\n"))

        assert make_checker(runner).package_installed("X", "X-Tool") is CheckState.PRESENT
        command = runner.call_args.args[0]
        assert command[:5] == ["winget", "list", "--id", "X", "-e"]

    def test_not_listed_is_absent(self, make_checker, completed):
        runner = MagicMock(return_value=completed(1, "No installed package found matching input criteria.\n"))
        assert make_checker(runner).package_installed("X", "X-Tool") is CheckState.ABSENT

    def test_missing_package_manager_is_unknown(self, make_checker, caplog):
        caplog.set_level(logging.INFO)
        runner = MagicMock(side_effect=FileNotFoundError(2, "missing", "winget"))

        state = make_checker(runner).package_installed("X", "X-Tool")

        assert state is CheckState.UNKNOWN
        assert state.needs_remediation
        assert "Could not determine whether X-Tool is present" in caplog.text


class TestRestoreEnabled:
    @pytest.mark.parametrize(
        "returncode, stdout, expected",
        [
            (0, "1440\n", CheckState.PRESENT),
            (0, "0\n", CheckState.ABSENT),
            (1, "", CheckState.UNKNOWN),
            (0, "n/a", CheckState.UNKNOWN),
        ],
    )
    def test_states(self, make_checker, completed, returncode, stdout, expected):
        runner = MagicMock(return_value=completed(returncode, stdout))
        assert make_checker(runner).restore_enabled() is expected

    def test_query_runs_through_shell(self, make_checker, completed):
        runner = MagicMock(return_value=completed(0, "1"))
        make_checker(runner).restore_enabled()
        command = runner.call_args.args[0]
        assert command[0] == "pwsh.exe"
        assert "RPSessionInterval" in command[-1]


class TestRuntimeAvailable:
    def test_version_output_is_present(self, make_checker, completed):
        runner = MagicMock(return_value=completed(0, "Python 3.12.4\n"))
        assert make_checker(runner).runtime_available() is CheckState.PRESENT
        assert runner.call_args.args[0] == ["python", "--version"]

    def test_store_alias_without_output_is_absent(self, make_checker, completed):
        runner = MagicMock(return_value=completed(9009, ""))
        assert make_checker(runner).runtime_available() is CheckState.ABSENT

    def test_missing_runtime_is_unknown(self, make_checker):
        runner = MagicMock(side_effect=FileNotFoundError(2, "missing", "python"))
        assert make_checker(runner).runtime_available() is CheckState.UNKNOWN


class TestModuleAvailable:
    def test_listed_module(self, make_checker, completed):
        runner = MagicMock(return_value=completed(0, "Terminal-Icons\n"))
        assert make_checker(runner).module_available("Terminal-Icons") is CheckState.PRESENT

    def test_unlisted_module(self, make_checker, completed):
        runner = MagicMock(return_value=completed(0, ""))
        assert make_checker(runner).module_available("Terminal-Icons") is CheckState.ABSENT

    def test_failed_query_is_unknown(self, make_checker, completed):
        runner = MagicMock(return_value=completed(1, "", "Get-Module failed"))
        assert make_checker(runner).module_available("Terminal-Icons") is CheckState.UNKNOWN


class TestProfileMarker:
    def test_missing_file_is_absent(self, make_checker, tmp_path):
        checker = make_checker(MagicMock())
        assert checker.profile_has_marker(tmp_path / "none.ps1", "Import-Module X") is CheckState.ABSENT

    def test_exact_line(self, make_checker, tmp_path):
        profile = tmp_path / "profile.ps1"
        profile.write_text("# profile\nImport-Module Terminal-Icons\n", encoding="utf-8")
        checker = make_checker(MagicMock())
        assert checker.profile_has_marker(profile, "Import-Module Terminal-Icons") is CheckState.PRESENT

    def test_substring_match(self, make_checker, tmp_path):
        profile = tmp_path / "profile.ps1"
        profile.write_text("if ($host) { Import-Module Terminal-Icons }\n", encoding="utf-8")
        checker = make_checker(MagicMock())
        assert checker.profile_has_marker(profile, "Import-Module Terminal-Icons") is CheckState.PRESENT

    def test_utf16_profile_with_bom(self, make_checker, tmp_path):
        profile = tmp_path / "profile.ps1"
        profile.write_bytes(
            codecs.BOM_UTF16_LE + "# profile\r\nImport-Module Terminal-Icons\r\n".encode("utf-16-le")
        )
        checker = make_checker(MagicMock())
        assert checker.profile_has_marker(profile, "Import-Module Terminal-Icons") is CheckState.PRESENT

    def test_read_profile_reports_encoding(self, tmp_path):
        profile = tmp_path / "profile.ps1"
        profile.write_bytes(codecs.BOM_UTF16_LE + "Set-Alias ll ls\r\n".encode("utf-16-le"))

        assert read_profile(profile) == ("Set-Alias ll ls\r\n", "utf-16-le")

    def test_unreadable_is_unknown(self, make_checker, tmp_path):
        directory = tmp_path / "profile.ps1"
        directory.mkdir()
        checker = make_checker(MagicMock())
        assert checker.profile_has_marker(directory, "Import-Module X") is CheckState.UNKNOWN

    def test_checker_runs_no_commands(self, make_checker, tmp_path):
        runner = MagicMock()
        make_checker(runner).profile_has_marker(tmp_path / "p.ps1", "x")
        runner.assert_not_called()


def test_profile_contains_ignores_blank_marker():
    assert not profile_contains("anything", "   ")
