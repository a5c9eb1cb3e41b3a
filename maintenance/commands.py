# maintenance/commands.py
# -*- coding: utf-8 -*-
"""
Work items for the external tools the stages drive.

Programs that accept an argument vector are built with
``WorkItem.from_argv``; only cmdlets and pipelines are expressed as shell
script text.
"""

from typing import List

from common.elevation import WorkItem, quote_powershell_literal
from maintenance import config as static_config
from maintenance.config_models import AppSettings, ToolRequirement

DISM_SUCCESS_CODES = (0, static_config.REBOOT_REQUIRED_EXIT_CODE)
# chkdsk: 0 clean, 1 errors fixed, 2 cleanup done, 3 check scheduled/needed.
CHKDSK_SUCCESS_CODES = (0, 1, 2, 3)


def _dism(*operation: str) -> List[str]:
    return ["DISM.exe", "/Online", "/Cleanup-Image", *operation]


def enable_restore(app_settings: AppSettings) -> WorkItem:
    drive = app_settings.integrity.system_drive
    return WorkItem.from_script(
        f"Enable System Restore on {drive}",
        f"Enable-ComputerRestore -Drive {quote_powershell_literal(drive)} -ErrorAction Stop",
    )


def create_restore_point(app_settings: AppSettings) -> WorkItem:
    description = app_settings.integrity.restore_point_description
    return WorkItem.from_script(
        "Create restore point",
        f"Checkpoint-Computer -Description {quote_powershell_literal(description)} "
        "-RestorePointType MODIFY_SETTINGS -ErrorAction Stop",
    )


def image_repair_sequence(app_settings: AppSettings) -> List[WorkItem]:
    """Health check, scan, repair, system file check, component cleanup."""
    return [
        WorkItem.from_argv("DISM CheckHealth", _dism("/CheckHealth"), DISM_SUCCESS_CODES),
        WorkItem.from_argv("DISM ScanHealth", _dism("/ScanHealth"), DISM_SUCCESS_CODES),
        WorkItem.from_argv("DISM RestoreHealth", _dism("/RestoreHealth"), DISM_SUCCESS_CODES),
        WorkItem.from_argv("System File Checker", ["sfc.exe", "/scannow"]),
        WorkItem.from_argv(
            "DISM StartComponentCleanup", _dism("/StartComponentCleanup"), DISM_SUCCESS_CODES
        ),
    ]


def schedule_disk_check(app_settings: AppSettings) -> WorkItem:
    # chkdsk asks whether to schedule the check at next boot for the system
    # volume; the piped answer accepts.
    volume = app_settings.integrity.disk_check_volume
    return WorkItem.from_script(
        f"Schedule disk check on {volume}",
        f"'Y' | chkdsk.exe {quote_powershell_literal(volume)} /f\nexit $LASTEXITCODE",
        CHKDSK_SUCCESS_CODES,
    )


def install_tool(tool: ToolRequirement) -> WorkItem:
    return WorkItem.from_argv(
        f"Install {tool.display_name}",
        ["winget", "install", "--id", tool.identifier, "-e", *static_config.WINGET_AGREEMENT_FLAGS],
    )


def preview_upgrades() -> WorkItem:
    return WorkItem.from_argv(
        "List available upgrades", ["winget", "upgrade", "--accept-source-agreements"]
    )


def apply_upgrades() -> WorkItem:
    return WorkItem.from_argv(
        "Apply all upgrades",
        ["winget", "upgrade", "--all", *static_config.WINGET_AGREEMENT_FLAGS],
    )


def install_runtime(app_settings: AppSettings) -> WorkItem:
    runtime = app_settings.runtime
    return WorkItem.from_argv(
        f"Install {runtime.package_id}",
        ["winget", "install", "--id", runtime.package_id, "-e", *static_config.WINGET_AGREEMENT_FLAGS],
    )


def upgrade_runtime_packages(app_settings: AppSettings) -> WorkItem:
    runtime = app_settings.runtime
    packages = [p.package_name for p in runtime.packages]
    return WorkItem.from_argv(
        "Upgrade pip and runtime packages",
        [runtime.command, "-m", "pip", "install", "--upgrade", "pip", *packages],
    )


def runtime_version(app_settings: AppSettings) -> WorkItem:
    runtime = app_settings.runtime
    return WorkItem.from_argv("Runtime version", [runtime.command, runtime.version_flag])


def install_module(module_name: str, dry_run: bool) -> WorkItem:
    script = (
        f"Install-Module -Name {quote_powershell_literal(module_name)} "
        "-Repository PSGallery -Scope CurrentUser -ErrorAction Stop"
    )
    if dry_run:
        return WorkItem.from_script(f"Simulate install of {module_name}", f"{script} -WhatIf")
    return WorkItem.from_script(f"Install {module_name}", f"{script} -Force -AllowClobber")


def verification_sequence(app_settings: AppSettings) -> List[WorkItem]:
    return [
        WorkItem.from_argv("DISM CheckHealth", _dism("/CheckHealth"), DISM_SUCCESS_CODES),
        WorkItem.from_argv("System File Checker (verify only)", ["sfc.exe", "/verifyonly"]),
    ]


def restart_host(app_settings: AppSettings) -> WorkItem:
    return WorkItem.from_argv(
        "Restart computer",
        ["shutdown.exe", "/r", "/t", str(app_settings.restart_delay_seconds)],
    )
