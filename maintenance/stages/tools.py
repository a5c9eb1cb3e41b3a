# maintenance/stages/tools.py
# -*- coding: utf-8 -*-
"""
Required tools: install every catalog entry the package manager does not
list as installed.
"""

from maintenance import commands
from maintenance import config as static_config
from maintenance.step_executor import (
    StageContext,
    StageOutcome,
    outcome_of,
    policy_allows,
)


def run_tools_stage(context: StageContext) -> StageOutcome:
    symbols = context.symbols
    results = []
    user_declined = False

    for tool in context.app_settings.tools:
        state = context.checker.package_installed(tool.identifier, tool.display_name)
        if state.present:
            continue
        if not policy_allows(
            context,
            static_config.TOOL_INSTALL_POLICY,
            f"{tool.display_name} is not installed. Install it?",
            static_config.YES,
        ):
            user_declined = True
            continue
        context.log(
            f"{symbols.get('package', '📦')} Installing {tool.display_name} ({tool.identifier})..."
        )
        try:
            results.append(context.gateway.run(commands.install_tool(tool)))
        except FileNotFoundError:
            context.log(
                f"{symbols.get('error', '❌')} Package manager is not available; cannot install {tool.display_name}.",
                "error",
            )
            return StageOutcome.FAILED

    if not results and not user_declined:
        context.log(f"{symbols.get('success', '✅')} All required tools are installed.")
    return outcome_of(results, user_declined)
