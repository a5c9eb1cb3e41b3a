# maintenance/stages/runtime.py
# -*- coding: utf-8 -*-
"""
Language runtime: install it when missing, otherwise bring its package
manager and the catalog packages up to date.
"""

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import (
    StageContext,
    StageOutcome,
    outcome_of,
    policy_allows,
)


def run_runtime_stage(context: StageContext) -> StageOutcome:
    symbols = context.symbols
    runtime = context.app_settings.runtime

    state = context.checker.runtime_available()
    if state.needs_remediation:
        if not policy_allows(
            context,
            static_config.RUNTIME_INSTALL_POLICY,
            f"'{runtime.command}' was not found. Install {runtime.package_id}?",
            static_config.INSTALL_RUNTIME_DEFAULT,
        ):
            context.log(f"{symbols.get('info', 'ℹ️')} Runtime installation skipped by user.")
            return StageOutcome.DECLINED
        try:
            result = context.gateway.run(commands.install_runtime(context.app_settings))
        except FileNotFoundError:
            context.log(
                f"{symbols.get('error', '❌')} Package manager is not available; cannot install {runtime.package_id}.",
                "error",
            )
            return StageOutcome.FAILED
        if result.succeeded:
            context.log(
                f"{symbols.get('info', 'ℹ️')} Open a new terminal so that '{runtime.command}' is on PATH."
            )
        return outcome_of([result])

    if not policy_allows(
        context,
        static_config.RUNTIME_PACKAGE_POLICY,
        "Upgrade pip and the runtime packages?",
        static_config.YES,
    ):
        return StageOutcome.DECLINED
    return outcome_of(
        [context.gateway.run_elevated(commands.upgrade_runtime_packages(context.app_settings))]
    )
