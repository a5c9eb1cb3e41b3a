# maintenance/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the maintenance run configuration.

This module defines the structured settings for the orchestrator: the
static catalogs of tools, runtime packages and shell modules, the profile
markers, and the integrity-check parameters. Values can be overridden from
the environment (prefix ``MAINT_``), a YAML file and the command line.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_FILE_NAME_DEFAULT: str = "host-maintenance.log"
LOG_PREFIX_DEFAULT: str = "[MAINT]"
HELPER_TOOL_DEFAULT: str = "gsudo"
PREFERRED_SHELLS_DEFAULT: List[str] = ["pwsh", "powershell"]
RESTART_DELAY_SECONDS_DEFAULT: int = 5

SYSTEM_DRIVE_DEFAULT: str = "C:\\"
DISK_CHECK_VOLUME_DEFAULT: str = "C:"
RESTORE_POINT_DESCRIPTION_DEFAULT: str = "Host maintenance restore point"

RUNTIME_COMMAND_DEFAULT: str = "python"
RUNTIME_PACKAGE_ID_DEFAULT: str = "Python.Python.3.12"

IMPORT_MARKER_DEFAULT: str = "Import-Module Terminal-Icons"
INITIALIZER_MARKER_DEFAULT: str = "Set-PSReadLineOption -PredictionSource History"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛", "shield": "🛡️",
    "question": "❓",
}


def _default_profile_candidates() -> List[Path]:
    documents = Path.home() / "Documents"
    return [
        documents / "PowerShell" / "Microsoft.PowerShell_profile.ps1",
        documents / "WindowsPowerShell" / "Microsoft.PowerShell_profile.ps1",
    ]


class ToolRequirement(BaseModel):
    """An installable dependency known to the host package manager."""

    identifier: str = Field(description="Package-manager id, e.g. 'Git.Git'.")
    display_name: str = Field(description="Human label used in prompts and logs.")


class PackageRequirement(BaseModel):
    """A language-ecosystem package kept up to date for the runtime."""

    package_name: str


class ModuleRequirement(BaseModel):
    """A shell extension module installed from the module registry."""

    module_name: str


class RuntimeSettings(BaseModel):
    """Language runtime detection and package set."""

    command: str = Field(default=RUNTIME_COMMAND_DEFAULT, description="Runtime executable.")
    version_flag: str = Field(default="--version")
    package_id: str = Field(
        default=RUNTIME_PACKAGE_ID_DEFAULT,
        description="Package-manager id used to install the runtime when absent.",
    )
    packages: List[PackageRequirement] = Field(
        default_factory=lambda: [
            PackageRequirement(package_name="setuptools"),
            PackageRequirement(package_name="wheel"),
            PackageRequirement(package_name="virtualenv"),
        ]
    )


class ProfileSettings(BaseModel):
    """Shell profile augmentation: candidate files and marker lines."""

    candidates: List[Path] = Field(default_factory=_default_profile_candidates)
    import_marker: str = Field(default=IMPORT_MARKER_DEFAULT)
    initializer_marker: str = Field(default=INITIALIZER_MARKER_DEFAULT)


class IntegritySettings(BaseModel):
    """System image, file and disk integrity parameters."""

    system_drive: str = Field(default=SYSTEM_DRIVE_DEFAULT)
    disk_check_volume: str = Field(default=DISK_CHECK_VOLUME_DEFAULT)
    restore_point_description: str = Field(default=RESTORE_POINT_DESCRIPTION_DEFAULT)


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_prefix="MAINT_", extra="ignore")

    log_file_name: str = Field(
        default=LOG_FILE_NAME_DEFAULT,
        description="Transcript file name, created beside the entry script.",
    )
    log_file_path: Optional[Path] = Field(
        default=None, description="Explicit transcript path; overrides log_file_name."
    )
    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT)
    log_level: str = Field(default="INFO")

    helper_tool: str = Field(
        default=HELPER_TOOL_DEFAULT,
        description="Optional elevation helper looked up on PATH.",
    )
    preferred_shells: List[str] = Field(
        default_factory=lambda: list(PREFERRED_SHELLS_DEFAULT),
        description="Command interpreters in order of preference.",
    )
    restart_delay_seconds: int = Field(default=RESTART_DELAY_SECONDS_DEFAULT, ge=0)

    tools: List[ToolRequirement] = Field(
        default_factory=lambda: [
            ToolRequirement(identifier="Git.Git", display_name="Git"),
            ToolRequirement(identifier="Microsoft.PowerShell", display_name="PowerShell 7"),
            ToolRequirement(
                identifier="Microsoft.WindowsTerminal", display_name="Windows Terminal"
            ),
        ]
    )
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    modules: List[ModuleRequirement] = Field(
        default_factory=lambda: [
            ModuleRequirement(module_name="Terminal-Icons"),
            ModuleRequirement(module_name="PSReadLine"),
        ]
    )
    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    integrity: IntegritySettings = Field(default_factory=IntegritySettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
