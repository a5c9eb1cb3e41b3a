# maintenance/config.py
"""
Static constants for the maintenance run.

This module defines the script version, the answer tokens used by the
confirmation gate, the default answer of every prompt, and the named
per-stage policies. The policies intentionally differ between stages
(bulk installation for tools, two confirmations for shell modules, one
profile file versus all profile files) and are read by the stages at run
time.
"""

import re
from enum import Enum
from pathlib import Path

SCRIPT_VERSION: str = "2.4.0"

# Root directory of the project; the transcript lives beside the entry script.
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_FILE_NAME: str = "maintenance.yaml"

# --- Confirmation gate ---
YES: str = "Y"
NO: str = "N"
AFFIRMATIVE_PATTERN = re.compile(r"^\s*(y|yes)\s*$", re.IGNORECASE)

# Default answers (what --auto-confirm answers on the user's behalf).
OVERWRITE_LOG_DEFAULT: str = NO
CONTINUE_DEFAULT: str = YES
ENABLE_RESTORE_DEFAULT: str = YES
CREATE_RESTORE_POINT_DEFAULT: str = YES
APPLY_UPGRADES_DEFAULT: str = YES
INSTALL_RUNTIME_DEFAULT: str = YES
SIMULATE_MODULE_DEFAULT: str = YES
INSTALL_MODULE_DEFAULT: str = YES
PROFILE_LINE_DEFAULT: str = YES
RESTART_DEFAULT: str = NO


class InstallPolicy(str, Enum):
    """How a stage decides whether to act on a missing requirement."""

    BULK_AUTOMATIC = "BULK_AUTOMATIC"
    CONFIRM_EACH = "CONFIRM_EACH"
    TWO_PHASE_CONFIRM = "TWO_PHASE_CONFIRM"


class ProfileUpdatePolicy(str, Enum):
    """Which candidate profile files receive a missing marker line."""

    FIRST_MATCH_ONLY = "FIRST_MATCH_ONLY"
    ALL_CANDIDATES = "ALL_CANDIDATES"


INTEGRITY_POLICY: InstallPolicy = InstallPolicy.BULK_AUTOMATIC
TOOL_INSTALL_POLICY: InstallPolicy = InstallPolicy.BULK_AUTOMATIC
RUNTIME_INSTALL_POLICY: InstallPolicy = InstallPolicy.CONFIRM_EACH
RUNTIME_PACKAGE_POLICY: InstallPolicy = InstallPolicy.BULK_AUTOMATIC
MODULE_INSTALL_POLICY: InstallPolicy = InstallPolicy.TWO_PHASE_CONFIRM
PROFILE_IMPORT_POLICY: ProfileUpdatePolicy = ProfileUpdatePolicy.FIRST_MATCH_ONLY
PROFILE_INITIALIZER_POLICY: ProfileUpdatePolicy = ProfileUpdatePolicy.ALL_CANDIDATES

# --- Exit codes ---
EXIT_OK: int = 0
EXIT_PRECONDITION_FAILED: int = 1

# --- Well-known external exit codes ---
REBOOT_REQUIRED_EXIT_CODE: int = 3010
ELEVATION_CANCELLED_EXIT_CODE: int = 1223
FILE_NOT_FOUND_EXIT_CODE: int = 2
ELEVATION_FAILED_MARKER: str = "ELEVATION_FAILED:"

WINGET_AGREEMENT_FLAGS = (
    "--accept-source-agreements",
    "--accept-package-agreements",
)
