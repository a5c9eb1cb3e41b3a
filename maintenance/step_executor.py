# maintenance/step_executor.py
# -*- coding: utf-8 -*-
"""
Runs one workflow stage and turns whatever it does into a StageOutcome.

A stage function receives the shared ``StageContext`` and returns a
``StageOutcome``. Any exception raised by the stage is logged here and
reported as FAILED so the next stage still runs. KeyboardInterrupt and
SystemExit are left to propagate.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from common.command_utils import log_message
from common.elevation import ExecutionResult, PrivilegedExecutionGateway
from maintenance import config as static_config
from maintenance.checkers import StateChecker
from maintenance.cli_handler import ConfirmationGate
from maintenance.config_models import AppSettings
from maintenance.session import SessionState

module_logger = logging.getLogger(__name__)


class StageOutcome(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"
    DECLINED = "DECLINED"


@dataclass
class StageContext:
    """Collaborators shared by every stage of one run."""

    app_settings: AppSettings
    session: SessionState
    gate: ConfirmationGate
    gateway: PrivilegedExecutionGateway
    checker: StateChecker
    logger: logging.Logger = module_logger

    @property
    def symbols(self):
        return self.app_settings.symbols

    def log(self, message: str, level: str = "info", exc_info: bool = False) -> None:
        log_message(message, level, self.logger, self.app_settings, exc_info=exc_info)


StageFunction = Callable[[StageContext], Optional[StageOutcome]]


def outcome_of(results, user_declined: bool = False) -> StageOutcome:
    """
    Summarise the execution results of a stage.

    Elevation declined anywhere wins over plain failure, which wins over
    success. With no results the stage was DECLINED if the user refused a
    prompt, otherwise SKIPPED (nothing needed doing).
    """
    results = [r for r in results if isinstance(r, ExecutionResult)]
    if not results:
        return StageOutcome.DECLINED if user_declined else StageOutcome.SKIPPED
    if any(r.elevation_declined for r in results):
        return StageOutcome.DECLINED
    if all(r.succeeded for r in results):
        return StageOutcome.COMPLETED
    return StageOutcome.FAILED


def policy_allows(
    context: StageContext,
    policy: static_config.InstallPolicy,
    prompt: str,
    default: str,
) -> bool:
    """
    Decide whether a single remediation may proceed under ``policy``.

    BULK_AUTOMATIC acts without asking. CONFIRM_EACH asks once. Stages with
    TWO_PHASE_CONFIRM handle their own extra gate and use this for the final
    confirmation only.
    """
    if policy is static_config.InstallPolicy.BULK_AUTOMATIC:
        return True
    return context.gate.confirm(prompt, default)


def execute_stage(
    stage_tag: str,
    stage_description: str,
    stage_function: StageFunction,
    context: StageContext,
) -> StageOutcome:
    """
    Execute a single stage.

    Args:
        stage_tag: A unique string identifier for the stage.
        stage_description: A human-readable description of the stage.
        stage_function: The stage body. Returning None counts as COMPLETED.
        context: The shared collaborators.

    Returns:
        The stage's outcome; FAILED if it raised.
    """
    symbols = context.symbols
    context.log(f"--- {symbols.get('step', '➡️')} {stage_description} ({stage_tag}) ---")
    try:
        outcome = stage_function(context)
    except Exception as e:
        context.log(
            f"{symbols.get('error', '❌')} FAILED: {stage_description} ({stage_tag})",
            "error",
        )
        context.log(f"   Error details: {e}", "error", exc_info=True)
        return StageOutcome.FAILED

    if outcome is None:
        outcome = StageOutcome.COMPLETED

    if outcome is StageOutcome.COMPLETED:
        context.log(f"--- {symbols.get('success', '✅')} Completed: {stage_description} ---")
    elif outcome is StageOutcome.FAILED:
        context.log(
            f"--- {symbols.get('error', '❌')} Finished with errors: {stage_description} ---",
            "error",
        )
    else:
        context.log(
            f"--- {symbols.get('info', 'ℹ️')} {stage_description}: {outcome.value.lower()} ---"
        )
    return outcome
