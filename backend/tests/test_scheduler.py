import threading
from datetime import datetime, timedelta

import pytest

from tutorial_cms.models.content import Page
from tutorial_cms.services import schedule_service
from tutorial_cms.services.schedule_service import ExecutionResult
from tutorial_cms.services.scheduler import ScheduledContentRunner
from tests.conftest import TestingSession

FIXED_NOW = datetime(2026, 5, 1, 12, 0, 0)


def test_run_once_uses_clock(db, seed_page):
    schedule_service.schedule_content(
        db, content_type="page", content_id=seed_page.id, action="publish", due_at=FIXED_NOW,
    )
    early = ScheduledContentRunner(TestingSession, 60, clock=lambda: FIXED_NOW - timedelta(seconds=1))
    assert early.run_once().executed_count == 0

    runner = ScheduledContentRunner(TestingSession, 60, clock=lambda: FIXED_NOW)
    result = runner.run_once()
    assert result.executed_count == 1
    db.expire_all()
    assert db.get(Page, seed_page.id).published is True


def test_start_and_stop():
    runner = ScheduledContentRunner(TestingSession, 0.05, clock=lambda: FIXED_NOW)
    runner.start()
    try:
        assert runner.running
        with pytest.raises(RuntimeError):
            runner.start()
    finally:
        runner.stop()
    assert not runner.running


def test_stop_when_not_running_is_noop():
    runner = ScheduledContentRunner(TestingSession, 1)
    runner.stop()
    assert not runner.running


def test_invalid_interval():
    with pytest.raises(ValueError):
        ScheduledContentRunner(TestingSession, 0)


def test_loop_keeps_running_after_unexpected_error(monkeypatch):
    runner = ScheduledContentRunner(TestingSession, 0.01, clock=lambda: FIXED_NOW)
    calls = []
    second_call = threading.Event()

    def flaky_run_once():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("unexpected failure")
        second_call.set()
        return ExecutionResult()

    monkeypatch.setattr(runner, "run_once", flaky_run_once)
    runner.start()
    try:
        assert second_call.wait(5)
        assert runner.running
    finally:
        runner.stop()
    assert len(calls) >= 2
