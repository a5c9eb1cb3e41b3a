# tests/maintenance/test_workflow.py
# -*- coding: utf-8 -*-
"""
Tests for the ordered maintenance pipeline.
"""

import logging
import signal

import pytest

from common.interrupt import InterruptHandler
from common.transcript import TranscriptSink
from conftest import RecordingGateway
from maintenance.cli_handler import ConfirmationGate
from maintenance.step_executor import StageOutcome
from maintenance.workflow import default_stage_plan, run_workflow


def test_default_plan_order():
    assert [tag for tag, _, _ in default_stage_plan()] == [
        "restore_point",
        "image_repair",
        "disk_check",
        "tools",
        "upgrades",
        "runtime",
        "modules",
        "profile",
        "verification",
        "restart",
    ]


def test_full_auto_confirm_run_never_reads_input(make_context, session, app_settings):
    session.auto_confirm = True
    gate = ConfirmationGate(session, app_settings, input_func=pytest.fail)
    gateway = RecordingGateway()

    outcomes = run_workflow(make_context(gate=gate, gateway=gateway))

    assert list(outcomes) == [tag for tag, _, _ in default_stage_plan()]
    assert outcomes["restart"] is StageOutcome.DECLINED
    assert outcomes["image_repair"] is StageOutcome.COMPLETED
    assert "Restart computer" not in gateway.labels
    assert "Install X-Tool" in gateway.labels


def test_failing_stage_does_not_stop_later_stages(make_context):
    ran = []

    def broken(context):
        raise RuntimeError("boom")

    plan = [
        ("first", "First", lambda ctx: ran.append("first")),
        ("broken", "Broken", broken),
        ("last", "Last", lambda ctx: ran.append("last") or StageOutcome.SKIPPED),
    ]

    outcomes = run_workflow(make_context(), plan=plan)

    assert ran == ["first", "last"]
    assert outcomes == {
        "first": StageOutcome.COMPLETED,
        "broken": StageOutcome.FAILED,
        "last": StageOutcome.SKIPPED,
    }


def test_summary_is_logged(make_context, caplog):
    caplog.set_level(logging.INFO)
    run_workflow(make_context(), plan=[("only", "Only stage", lambda ctx: None)])
    assert "Maintenance summary" in caplog.text
    assert "completed: 1" in caplog.text


def test_interrupt_mid_stage_halts_and_closes_transcript(make_context, session, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    sink = TranscriptSink(session, current_logger=logging.getLogger("tests.workflow"))
    interrupt = InterruptHandler(sink)
    log_path = tmp_path / "run.log"
    sink.open(log_path)
    handler = sink._handler
    ran = []

    def interrupted(context):
        ran.append("interrupted")
        interrupt.handle_signal(signal.SIGINT, None)

    plan = [
        ("first", "First", lambda ctx: ran.append("first")),
        ("second", "Second", interrupted),
        ("third", "Third", lambda ctx: ran.append("third")),
    ]

    with pytest.raises(SystemExit) as exc_info:
        run_workflow(make_context(), cancel_check=interrupt.raise_if_cancelled, plan=plan)

    assert exc_info.value.code == 0
    assert ran == ["first", "interrupted"]
    assert not sink.is_open
    assert session.transcript_open is False
    assert handler not in logging.getLogger().handlers
    assert handler.stream is None
    assert "Transcript stopped" in log_path.read_text(encoding="utf-8")
