# maintenance/stages/verification.py
# -*- coding: utf-8 -*-
"""
Final verification: runtime version (best effort) and integrity re-checks.
"""

from maintenance import commands
from maintenance.step_executor import StageContext, StageOutcome, outcome_of


def run_verification_stage(context: StageContext) -> StageOutcome:
    symbols = context.symbols

    try:
        version = context.gateway.run(commands.runtime_version(context.app_settings))
        if not version.succeeded:
            context.log(
                f"{symbols.get('warning', '!')} Runtime version query exited with code {version.exit_code}.",
                "warning",
            )
    except FileNotFoundError:
        context.log(
            f"{symbols.get('warning', '!')} '{context.app_settings.runtime.command}' is not on PATH in this session.",
            "warning",
        )

    results = [
        context.gateway.run_elevated(work)
        for work in commands.verification_sequence(context.app_settings)
    ]
    return outcome_of(results)
