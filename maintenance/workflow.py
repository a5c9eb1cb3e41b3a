# maintenance/workflow.py
# -*- coding: utf-8 -*-
"""
The maintenance pipeline.

Stages run strictly in order through the Orchestrator. Each stage is wrapped
by ``execute_stage``, so a failing stage is reported and the next one still
runs. Cancellation is checked between stages.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from common.orchestrator import Orchestrator
from maintenance import stages
from maintenance.step_executor import (
    StageContext,
    StageFunction,
    StageOutcome,
    execute_stage,
)

module_logger = logging.getLogger(__name__)

StagePlan = List[Tuple[str, str, StageFunction]]


def default_stage_plan() -> StagePlan:
    return [
        ("restore_point", "System restore point", stages.run_restore_point_stage),
        ("image_repair", "Image and file integrity repair", stages.run_image_repair_stage),
        ("disk_check", "Disk check scheduling", stages.run_disk_check_stage),
        ("tools", "Required tools", stages.run_tools_stage),
        ("upgrades", "Package upgrades", stages.run_upgrades_stage),
        ("runtime", "Language runtime", stages.run_runtime_stage),
        ("modules", "Shell modules", stages.run_modules_stage),
        ("profile", "Shell profile", stages.run_profile_stage),
        ("verification", "Final verification", stages.run_verification_stage),
        ("restart", "Restart", stages.run_restart_stage),
    ]


def log_run_summary(
    context: StageContext, outcomes: Dict[str, StageOutcome], plan: StagePlan
) -> None:
    symbols = context.symbols
    context.log(f"{symbols.get('sparkles', '✨')} Maintenance summary:")
    for tag, description, _ in plan:
        outcome = outcomes.get(tag)
        if outcome is None:
            continue
        context.log(f"   {description:<34}{outcome.value}")
    counts = {o: list(outcomes.values()).count(o) for o in StageOutcome}
    context.log(
        "   "
        + ", ".join(f"{o.value.lower()}: {n}" for o, n in counts.items() if n)
    )


def run_workflow(
    context: StageContext,
    cancel_check: Optional[Callable[[], None]] = None,
    plan: Optional[StagePlan] = None,
) -> Dict[str, StageOutcome]:
    """
    Run every stage of ``plan`` (the default pipeline when omitted).

    Returns:
        The outcome of each stage keyed by its tag, in execution order.
    """
    plan = plan if plan is not None else default_stage_plan()
    orchestrator = Orchestrator(
        context.app_settings,
        orchestrator_logger=context.logger,
        cancel_check=cancel_check,
    )
    for tag, description, function in plan:
        orchestrator.add_task(
            tag, execute_stage, args=[tag, description, function, context]
        )

    orchestrator.run()

    outcomes: Dict[str, StageOutcome] = {}
    for tag, _, _ in plan:
        result = orchestrator.context.get(f"{tag}_result")
        if isinstance(result, StageOutcome):
            outcomes[tag] = result
        elif result is not None:
            outcomes[tag] = StageOutcome.FAILED

    log_run_summary(context, outcomes, plan)
    return outcomes
