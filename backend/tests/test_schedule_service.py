from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from tutorial_cms.errors import InvalidArgumentError, NotFoundError, StoreUnavailableError
from tutorial_cms.models.content import Page, Tutorial
from tutorial_cms.models.scheduled_content import ScheduledContent
from tutorial_cms.services import schedule_service

NOW = datetime(2026, 3, 2, 9, 0, 0)


def _schedule(db, content_id, action="publish", due_at=None, content_type="tutorial"):
    return schedule_service.schedule_content(
        db,
        content_type=content_type,
        content_id=content_id,
        action=action,
        due_at=due_at or NOW - timedelta(seconds=1),
    )


def test_publish_due_action_runs_once(db):
    db.add(Tutorial(id="T1", title="T1", slug="t1", content="", published=False))
    db.commit()
    _schedule(db, "T1", "publish", NOW - timedelta(seconds=1))

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 1
    assert result.failures == []
    assert db.get(Tutorial, "T1").published is True

    again = schedule_service.execute_scheduled_content(db, NOW)
    assert again.executed_count == 0


def test_due_time_equal_to_now_is_due(db, seed_page):
    seed_page.published = True
    db.commit()
    _schedule(db, seed_page.id, "unpublish", NOW, content_type="page")

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 1
    db.refresh(seed_page)
    assert seed_page.published is False


def test_future_action_is_not_executed(db, seed_tutorial):
    row = _schedule(db, seed_tutorial.id, "publish", NOW + timedelta(minutes=5))

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 0
    assert [r.id for r in schedule_service.list_scheduled_content(db)] == [row.id]


def test_executed_action_is_marked_with_timestamp(db, seed_tutorial):
    row = _schedule(db, seed_tutorial.id)
    schedule_service.execute_scheduled_content(db, NOW)

    stored = schedule_service.get_scheduled_content(db, row.id)
    db.refresh(stored)
    assert stored.executed is True
    assert stored.executed_at == NOW
    assert schedule_service.list_scheduled_content(db) == []


def test_delete_action_removes_record(db, seed_tutorial):
    tutorial_id = seed_tutorial.id
    _schedule(db, tutorial_id, "delete")

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 1
    db.expire_all()
    assert db.get(Tutorial, tutorial_id) is None


def test_failure_is_isolated_and_retried(db, seed_tutorial):
    missing = _schedule(db, "missing", "publish")
    _schedule(db, seed_tutorial.id, "publish")

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 1
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.scheduled_id == missing.id
    assert failure.content_id == "missing"
    assert result.errors[0].startswith("Failed to execute publish for tutorial missing")

    # 실패한 작업은 대기 상태로 남아 다음 실행 때 다시 시도된다.
    pending = schedule_service.list_scheduled_content(db)
    assert [r.id for r in pending] == [missing.id]

    db.add(Tutorial(id="missing", title="늦게 생성", slug="late", content=""))
    db.commit()
    retry = schedule_service.execute_scheduled_content(db, NOW)
    assert retry.executed_count == 1
    assert retry.failures == []


def test_delete_on_missing_content_is_reported(db):
    _schedule(db, "nope", "delete", content_type="page")
    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 0
    assert result.failures[0].action == "delete"


def test_actions_apply_in_due_order(db, seed_tutorial):
    _schedule(db, seed_tutorial.id, "unpublish", NOW - timedelta(minutes=1))
    _schedule(db, seed_tutorial.id, "publish", NOW - timedelta(minutes=2))

    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 2
    db.refresh(seed_tutorial)
    assert seed_tutorial.published is False


def test_stale_claim_is_skipped(db, seed_tutorial, monkeypatch):
    _schedule(db, seed_tutorial.id, "publish")
    stale_rows = schedule_service._select_due(db, NOW)
    db.rollback()
    schedule_service.execute_scheduled_content(db, NOW)

    # 이미 다른 실행 패스가 처리한 목록을 다시 받아도 재실행하지 않는다.
    monkeypatch.setattr(schedule_service, "_select_due", lambda session, now: stale_rows)
    result = schedule_service.execute_scheduled_content(db, NOW)
    assert result.executed_count == 0
    assert result.failures == []


def test_store_failure_on_select_raises(db, monkeypatch):
    def broken(session, now):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(schedule_service, "_select_due", broken)
    with pytest.raises(StoreUnavailableError):
        schedule_service.execute_scheduled_content(db, NOW)


def test_schedule_accepts_iso_string_and_aware_datetime(db, seed_tutorial):
    from_string = _schedule(db, seed_tutorial.id, due_at="2026-03-02T10:00:00Z")
    aware = _schedule(
        db,
        seed_tutorial.id,
        due_at=datetime(2026, 3, 2, 19, 0, tzinfo=timezone(timedelta(hours=9))),
    )
    assert from_string.due_at == datetime(2026, 3, 2, 10, 0)
    assert aware.due_at == datetime(2026, 3, 2, 10, 0)


def test_schedule_accepts_past_due_time(db, seed_tutorial):
    row = _schedule(db, seed_tutorial.id, due_at=NOW - timedelta(days=3))
    assert row.executed is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"due_at": "not-a-date"},
        {"action": "archive"},
        {"content_type": "video"},
    ],
)
def test_schedule_rejects_invalid_input(db, kwargs):
    params = {"content_type": "tutorial", "content_id": "c1", "action": "publish", "due_at": NOW}
    params.update(kwargs)
    with pytest.raises(InvalidArgumentError):
        schedule_service.schedule_content(db, **params)
    assert db.query(ScheduledContent).count() == 0


def test_cancel_pending_action(db, seed_page):
    row = _schedule(db, seed_page.id, content_type="page")
    assert schedule_service.cancel_scheduled_content(db, row.id) is True
    assert db.query(ScheduledContent).count() == 0


def test_cancel_executed_or_missing_is_noop(db, seed_page):
    row = _schedule(db, seed_page.id, content_type="page")
    schedule_service.execute_scheduled_content(db, NOW)

    assert schedule_service.cancel_scheduled_content(db, row.id) is False
    assert schedule_service.cancel_scheduled_content(db, 9999) is False
    assert db.query(ScheduledContent).count() == 1


def test_get_scheduled_content_missing_raises(db):
    with pytest.raises(NotFoundError):
        schedule_service.get_scheduled_content(db, 42)


def test_multiple_schedules_for_same_content_are_kept(db, seed_page):
    _schedule(db, seed_page.id, "publish", NOW + timedelta(hours=1), content_type="page")
    _schedule(db, seed_page.id, "publish", NOW + timedelta(hours=2), content_type="page")
    assert len(schedule_service.list_scheduled_content(db)) == 2
