# maintenance/stages/__init__.py
# -*- coding: utf-8 -*-
"""
The workflow stages, in execution order.

Each stage is a function taking a ``StageContext`` and returning a
``StageOutcome``.
"""

from .integrity import run_disk_check_stage, run_image_repair_stage
from .modules import run_modules_stage
from .profile import run_profile_stage
from .restart import run_restart_stage
from .restore_point import run_restore_point_stage
from .runtime import run_runtime_stage
from .tools import run_tools_stage
from .upgrades import run_upgrades_stage
from .verification import run_verification_stage

__all__ = [
    "run_restore_point_stage",
    "run_image_repair_stage",
    "run_disk_check_stage",
    "run_tools_stage",
    "run_upgrades_stage",
    "run_runtime_stage",
    "run_modules_stage",
    "run_profile_stage",
    "run_verification_stage",
    "run_restart_stage",
]
