# maintenance/stages/upgrades.py
# -*- coding: utf-8 -*-
"""
Package upgrades: show what is available, then apply everything on one
confirmation.
"""

import subprocess

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import StageContext, StageOutcome, outcome_of


def run_upgrades_stage(context: StageContext) -> StageOutcome:
    symbols = context.symbols

    # The preview is informational; the confirmation below is offered even
    # when it cannot run.
    try:
        preview = context.gateway.run(commands.preview_upgrades())
        if not preview.succeeded:
            context.log(
                f"{symbols.get('warning', '!')} Upgrade preview exited with code {preview.exit_code}.",
                "warning",
            )
    except (FileNotFoundError, subprocess.SubprocessError) as e:
        context.log(
            f"{symbols.get('warning', '!')} Could not list available upgrades: {e}",
            "warning",
        )

    if not context.gate.confirm(
        "Apply all available package upgrades?", static_config.APPLY_UPGRADES_DEFAULT
    ):
        context.log(f"{symbols.get('info', 'ℹ️')} Upgrades skipped by user.")
        return StageOutcome.DECLINED

    try:
        result = context.gateway.run(commands.apply_upgrades())
    except FileNotFoundError:
        context.log(
            f"{symbols.get('error', '❌')} Package manager is not available; cannot apply upgrades.",
            "error",
        )
        return StageOutcome.FAILED
    return outcome_of([result])
