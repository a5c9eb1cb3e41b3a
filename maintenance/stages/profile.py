# maintenance/stages/profile.py
# -*- coding: utf-8 -*-
"""
Shell profile augmentation.

Two marker lines are ensured, each with its own policy: the module import
line goes into the first candidate profile only, the initializer line into
every candidate profile. Lines are only ever appended, and only when the
marker is not already there.
"""

import functools
from pathlib import Path
from typing import List

from common.elevation import ExecutionResult, WorkItem
from maintenance import config as static_config
from maintenance.checkers import read_profile
from maintenance.step_executor import StageContext, StageOutcome, outcome_of


def profile_candidates(context: StageContext) -> List[Path]:
    """Existing candidate profiles, or the first candidate when none exists yet."""
    candidates = [Path(p) for p in context.app_settings.profile.candidates]
    existing = [p for p in candidates if p.exists()]
    if existing:
        return existing
    return candidates[:1]


def append_profile_line(context: StageContext, profile_path: Path, line: str) -> int:
    """Append ``line`` on its own line, in the file's existing encoding. Returns an exit code."""
    try:
        profile_path.parent.mkdir(parents=True, exist_ok=True)
        text, encoding = ("", "utf-8")
        if profile_path.exists():
            text, encoding = read_profile(profile_path)
        with open(profile_path, "a", encoding=encoding) as f:
            if text and not text.endswith(("\n", "\r")):
                f.write("\n")
            f.write(line + "\n")
    except (OSError, UnicodeError) as e:
        context.log(
            f"{context.symbols.get('error', '❌')} Could not update {profile_path}: {e}",
            "error",
        )
        return 1
    return 0


def ensure_marker(
    context: StageContext,
    marker: str,
    policy: static_config.ProfileUpdatePolicy,
    results: List[ExecutionResult],
) -> bool:
    """
    Ensure ``marker`` is in the candidate profiles according to ``policy``.

    Under FIRST_MATCH_ONLY the pass ends at the first candidate that already
    has the marker or was just updated. Returns False if the user declined.
    """
    symbols = context.symbols
    declined = False

    for path in profile_candidates(context):
        state = context.checker.profile_has_marker(path, marker)
        if state.present:
            if policy is static_config.ProfileUpdatePolicy.FIRST_MATCH_ONLY:
                break
            continue

        if not context.gate.confirm(
            f"Add '{marker}' to {path}?", static_config.PROFILE_LINE_DEFAULT
        ):
            declined = True
            context.log(f"{symbols.get('info', 'ℹ️')} {path} left unchanged.")
            continue

        result = context.gateway.run(
            WorkItem(
                label=f"Append profile line to {path.name}",
                action=functools.partial(append_profile_line, context, path, marker),
            )
        )
        results.append(result)
        if result.succeeded and policy is static_config.ProfileUpdatePolicy.FIRST_MATCH_ONLY:
            break

    return not declined


def run_profile_stage(context: StageContext) -> StageOutcome:
    profile = context.app_settings.profile
    results: List[ExecutionResult] = []

    import_ok = ensure_marker(
        context, profile.import_marker, static_config.PROFILE_IMPORT_POLICY, results
    )
    initializer_ok = ensure_marker(
        context, profile.initializer_marker, static_config.PROFILE_INITIALIZER_POLICY, results
    )
    return outcome_of(results, not (import_ok and initializer_ok))
