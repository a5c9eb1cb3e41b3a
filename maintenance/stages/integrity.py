# maintenance/stages/integrity.py
# -*- coding: utf-8 -*-
"""
Image and file integrity repair, and disk check scheduling.

These run unconditionally once the user has agreed to the run as a whole;
each command is its own elevated invocation and a failure in one does not
stop the next.
"""

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import (
    StageContext,
    StageOutcome,
    outcome_of,
    policy_allows,
)


def run_image_repair_stage(context: StageContext) -> StageOutcome:
    results = []
    user_declined = False
    for work in commands.image_repair_sequence(context.app_settings):
        if not policy_allows(
            context, static_config.INTEGRITY_POLICY, f"Run {work.label}?", static_config.YES
        ):
            user_declined = True
            continue
        results.append(context.gateway.run_elevated(work))
    return outcome_of(results, user_declined)


def run_disk_check_stage(context: StageContext) -> StageOutcome:
    work = commands.schedule_disk_check(context.app_settings)
    if not policy_allows(
        context, static_config.INTEGRITY_POLICY, f"{work.label}?", static_config.YES
    ):
        return StageOutcome.DECLINED
    result = context.gateway.run_elevated(work)
    if result.succeeded:
        context.log(
            f"{context.symbols.get('info', 'ℹ️')} The disk check runs at the next restart if the volume was in use."
        )
    return outcome_of([result])
