"""예약 작업 API 라우터입니다. 예약 등록/조회/취소와 수동 실행 패스를 제공합니다."""

from fastapi import APIRouter, Depends
from typing import List
from tutorial_cms.schemas.scheduled_content import (
    ExecutionResultOut,
    ScheduledContentCreate,
    ScheduledContentOut,
)
from tutorial_cms.middleware.auth_middleware import require_roles
from tutorial_cms.models.scheduled_content import ScheduledContent
from tutorial_cms.models.user import User
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator, get_coordinator
from tutorial_cms.utils.helpers import utcnow
from tutorial_cms.utils.permissions import ADMIN, CONTENT_EDITORS

router = APIRouter(prefix="/api/admin/scheduled-content", tags=["scheduled-content"])


def _to_out(row: ScheduledContent, content_title: str | None = None) -> ScheduledContentOut:
    return ScheduledContentOut(
        id=row.id,
        content_type=row.content_type,
        content_id=row.content_id,
        action=row.action,
        scheduled_for=row.due_at,
        executed=row.executed,
        executed_at=row.executed_at,
        created_by=row.created_by,
        created_at=row.created_at,
        content_title=content_title,
    )


@router.get("", response_model=List[ScheduledContentOut])
def list_scheduled_content(
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    rows = coordinator.list_scheduled()
    titles = coordinator.resolve_titles((row.content_type, row.content_id) for row in rows)
    return [_to_out(row, titles.get(row.content_id)) for row in rows]


@router.post("", response_model=ScheduledContentOut)
def schedule_content(
    data: ScheduledContentCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    row = coordinator.schedule(
        data.content_type,
        data.content_id,
        data.action,
        data.scheduled_for,
        created_by=current_user.user_id,
    )
    titles = coordinator.resolve_titles([(row.content_type, row.content_id)])
    return _to_out(row, titles.get(row.content_id))


@router.post("/execute", response_model=ExecutionResultOut)
def execute_scheduled_content(
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(ADMIN)),
):
    result = coordinator.run_due_actions(utcnow())
    message = f"{result.executed_count}건의 예약 작업을 실행했습니다."
    if result.failures:
        message += f" {len(result.failures)}건은 실패하여 다음 실행 때 재시도합니다."
    return ExecutionResultOut(
        executed=result.executed_count,
        failures=[vars(failure) for failure in result.failures],
        errors=result.errors,
        message=message,
    )


@router.delete("/{scheduled_id}")
def cancel_scheduled_content(
    scheduled_id: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    removed = coordinator.cancel_scheduled(scheduled_id)
    return {"message": "예약이 취소되었습니다.", "canceled": removed}
