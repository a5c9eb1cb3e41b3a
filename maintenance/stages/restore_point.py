# maintenance/stages/restore_point.py
# -*- coding: utf-8 -*-
"""
System Restore: enable it when it is off, then offer a restore point.

The restore point is offered whether or not System Restore was already
enabled.
"""

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import StageContext, StageOutcome, outcome_of


def run_restore_point_stage(context: StageContext) -> StageOutcome:
    symbols = context.symbols
    results = []
    user_declined = False

    state = context.checker.restore_enabled()
    if state.needs_remediation:
        if context.gate.confirm(
            f"System Restore is not enabled on {context.app_settings.integrity.system_drive}. Enable it?",
            static_config.ENABLE_RESTORE_DEFAULT,
        ):
            results.append(
                context.gateway.run_elevated(commands.enable_restore(context.app_settings))
            )
        else:
            user_declined = True
            context.log(f"{symbols.get('info', 'ℹ️')} Leaving System Restore disabled.")

    if context.gate.confirm(
        "Create a system restore point before making changes?",
        static_config.CREATE_RESTORE_POINT_DEFAULT,
    ):
        results.append(
            context.gateway.run_elevated(commands.create_restore_point(context.app_settings))
        )
    else:
        user_declined = True
        context.log(f"{symbols.get('info', 'ℹ️')} Restore point skipped by user.")

    return outcome_of(results, user_declined)
