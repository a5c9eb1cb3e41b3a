# maintenance/stages/modules.py
# -*- coding: utf-8 -*-
"""
Shell modules: every missing module is first installed as a dry run, and
really installed only after a second confirmation.
"""

from maintenance import commands
from maintenance import config as static_config
from maintenance.config_models import ModuleRequirement
from maintenance.step_executor import (
    StageContext,
    StageOutcome,
    outcome_of,
    policy_allows,
)


def _install_module(context: StageContext, module: ModuleRequirement, results: list) -> bool:
    """Returns False when the user declined."""
    symbols = context.symbols
    name = module.module_name
    policy = static_config.MODULE_INSTALL_POLICY

    if policy is static_config.InstallPolicy.TWO_PHASE_CONFIRM:
        if not context.gate.confirm(
            f"Module '{name}' is not installed. Simulate its installation first?",
            static_config.SIMULATE_MODULE_DEFAULT,
        ):
            context.log(f"{symbols.get('info', 'ℹ️')} Module '{name}' skipped by user.")
            return False
        simulation = context.gateway.run(commands.install_module(name, dry_run=True))
        if not simulation.succeeded:
            context.log(
                f"{symbols.get('error', '❌')} Simulated installation of '{name}' failed; not installing it.",
                "error",
            )
            results.append(simulation)
            return True

    if not policy_allows(
        context,
        policy,
        f"Install module '{name}' for the current user?",
        static_config.INSTALL_MODULE_DEFAULT,
    ):
        context.log(f"{symbols.get('info', 'ℹ️')} Module '{name}' not installed (declined).")
        return False
    results.append(context.gateway.run(commands.install_module(name, dry_run=False)))
    return True


def run_modules_stage(context: StageContext) -> StageOutcome:
    results = []
    user_declined = False
    for module in context.app_settings.modules:
        state = context.checker.module_available(module.module_name)
        if state.present:
            continue
        try:
            if not _install_module(context, module, results):
                user_declined = True
        except FileNotFoundError:
            context.log(
                f"{context.symbols.get('error', '❌')} Shell not available; cannot install '{module.module_name}'.",
                "error",
            )
            return StageOutcome.FAILED
    return outcome_of(results, user_declined)
