"""예약 게시/게시중단/삭제 작업 큐를 관리하는 도메인 서비스입니다.

실행 패스는 항목마다 ``executed = false`` 조건부 UPDATE로 작업을 선점(claim)한 뒤
같은 트랜잭션 안에서 콘텐츠 레코드에 적용합니다. 적용이 실패하면 롤백되어 선점도
취소되므로 다음 실행 패스에서 자동으로 재시도됩니다.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from tutorial_cms.errors import (
    InvalidArgumentError,
    LifecycleError,
    NotFoundError,
    PartialExecutionFailure,
    StoreUnavailableError,
)
from tutorial_cms.models.enums import ScheduledActionKind
from tutorial_cms.models.scheduled_content import ScheduledContent
from tutorial_cms.services.content_types import get_handler, parse_content_type
from tutorial_cms.utils.helpers import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    executed_count: int = 0
    failures: List[PartialExecutionFailure] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [failure.describe() for failure in self.failures]


def _parse_action(value) -> ScheduledActionKind:
    try:
        return ScheduledActionKind(value)
    except ValueError:
        raise InvalidArgumentError(f"지원하지 않는 예약 작업입니다: {value}")


def schedule_content(
    db: Session,
    *,
    content_type,
    content_id: str,
    action,
    due_at,
    created_by: Optional[int] = None,
) -> ScheduledContent:
    kind = parse_content_type(content_type)
    action_kind = _parse_action(action)
    if not content_id:
        raise InvalidArgumentError("content_id가 필요합니다.")
    try:
        due = parse_timestamp(due_at)
    except ValueError:
        raise InvalidArgumentError(f"예약 시각 형식이 올바르지 않습니다: {due_at!r}")

    # 과거 시각도 허용한다. 다음 실행 패스에서 즉시 처리된다.
    row = ScheduledContent(
        content_type=kind.value,
        content_id=content_id,
        action=action_kind.value,
        due_at=due,
        executed=False,
        created_by=created_by,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("scheduled %s for %s %s at %s", row.action, row.content_type, row.content_id, row.due_at.isoformat())
    return row


def list_scheduled_content(db: Session) -> List[ScheduledContent]:
    return (
        db.query(ScheduledContent)
        .filter(ScheduledContent.executed == False)
        .order_by(ScheduledContent.due_at.asc(), ScheduledContent.id.asc())
        .all()
    )


def get_scheduled_content(db: Session, scheduled_id: int) -> ScheduledContent:
    row = db.query(ScheduledContent).filter(ScheduledContent.id == scheduled_id).first()
    if not row:
        raise NotFoundError(f"예약 작업을 찾을 수 없습니다: {scheduled_id}")
    return row


def cancel_scheduled_content(db: Session, scheduled_id: int) -> bool:
    """대기 중인 예약 작업을 삭제합니다. 이미 실행되었거나 없으면 아무것도 하지 않습니다."""
    stmt = (
        delete(ScheduledContent)
        .where(ScheduledContent.id == scheduled_id, ScheduledContent.executed == False)
        .execution_options(synchronize_session=False)
    )
    removed = db.execute(stmt).rowcount
    db.commit()
    if removed:
        logger.info("canceled scheduled action %s", scheduled_id)
    return bool(removed)


def _select_due(db: Session, now: datetime) -> list:
    stmt = (
        select(
            ScheduledContent.id,
            ScheduledContent.content_type,
            ScheduledContent.content_id,
            ScheduledContent.action,
        )
        .where(ScheduledContent.executed == False, ScheduledContent.due_at <= now)
        .order_by(ScheduledContent.due_at.asc(), ScheduledContent.id.asc())
    )
    return db.execute(stmt).all()


def _claim(db: Session, scheduled_id: int, now: datetime) -> bool:
    stmt = (
        update(ScheduledContent)
        .where(ScheduledContent.id == scheduled_id, ScheduledContent.executed == False)
        .values(executed=True, executed_at=now)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1


def _apply(db: Session, content_type: str, content_id: str, action: str) -> None:
    handler = get_handler(content_type)
    kind = _parse_action(action)
    if kind is ScheduledActionKind.PUBLISH:
        affected = handler.set_published(db, content_id, True)
    elif kind is ScheduledActionKind.UNPUBLISH:
        affected = handler.set_published(db, content_id, False)
    else:
        affected = handler.delete(db, content_id)
    if not affected:
        raise NotFoundError(f"콘텐츠를 찾을 수 없습니다: {content_type} {content_id}")


def execute_scheduled_content(db: Session, now: datetime) -> ExecutionResult:
    now = parse_timestamp(now)
    try:
        due_rows = _select_due(db, now)
        db.rollback()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreUnavailableError(f"예약 작업을 조회하지 못했습니다: {exc}") from exc

    result = ExecutionResult()
    for scheduled_id, content_type, content_id, action in due_rows:
        try:
            if not _claim(db, scheduled_id, now):
                # 다른 실행 패스가 이미 처리했다.
                db.rollback()
                continue
            _apply(db, content_type, content_id, action)
            db.commit()
        except (LifecycleError, SQLAlchemyError) as exc:
            db.rollback()
            if isinstance(exc, DBAPIError) and exc.connection_invalidated:
                raise StoreUnavailableError(f"저장소 연결이 끊어졌습니다: {exc}") from exc
            message = exc.message if isinstance(exc, LifecycleError) else str(exc)
            failure = PartialExecutionFailure(
                scheduled_id=scheduled_id,
                content_type=content_type,
                content_id=content_id,
                action=action,
                message=message,
            )
            result.failures.append(failure)
            logger.warning("scheduled action %s failed: %s", scheduled_id, failure.describe())
            continue

        result.executed_count += 1
        logger.info("executed scheduled %s for %s %s", action, content_type, content_id)

    if due_rows:
        logger.info(
            "execute pass at %s: %d executed, %d failed",
            now.isoformat(), result.executed_count, len(result.failures),
        )
    return result
