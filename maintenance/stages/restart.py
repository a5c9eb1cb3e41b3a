# maintenance/stages/restart.py
# -*- coding: utf-8 -*-
"""Offer to restart the computer; the restart itself is elevated."""

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import StageContext, StageOutcome, outcome_of


def run_restart_stage(context: StageContext) -> StageOutcome:
    if not context.gate.confirm(
        "Restart the computer now to finish pending repairs?",
        static_config.RESTART_DEFAULT,
    ):
        context.log(
            f"{context.symbols.get('info', 'ℹ️')} Restart later to complete any scheduled disk check."
        )
        return StageOutcome.DECLINED
    return outcome_of([context.gateway.run_elevated(commands.restart_host(context.app_settings))])
