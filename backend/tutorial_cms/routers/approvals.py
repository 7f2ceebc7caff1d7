"""콘텐츠 검토 요청 API 라우터입니다. 제출/대기 목록/승인/반려를 코디네이터로 위임합니다."""

from fastapi import APIRouter, Depends
from typing import List
from tutorial_cms.schemas.approval import (
    ApprovalDecision,
    ApprovalRejection,
    ApprovalSubmit,
    ContentApprovalOut,
)
from tutorial_cms.middleware.auth_middleware import require_roles
from tutorial_cms.models.content_approval import ContentApproval
from tutorial_cms.models.user import User
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator, get_coordinator
from tutorial_cms.utils.permissions import CONTENT_EDITORS, CONTENT_REVIEWERS, STAFF_ROLES

router = APIRouter(prefix="/api/admin", tags=["approvals"])


def _with_titles(coordinator: LifecycleCoordinator, rows: List[ContentApproval]) -> List[ContentApprovalOut]:
    titles = coordinator.resolve_titles((row.content_type, row.content_id) for row in rows)
    out = []
    for row in rows:
        item = ContentApprovalOut.model_validate(row)
        item.content_title = titles.get(row.content_id)
        out.append(item)
    return out


@router.post("/approvals", response_model=ContentApprovalOut)
def submit_for_approval(
    data: ApprovalSubmit,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    row = coordinator.submit_for_review(data.content_type, data.content_id, submitted_by=current_user.user_id)
    return _with_titles(coordinator, [row])[0]


@router.get("/approvals/pending", response_model=List[ContentApprovalOut])
def list_pending_approvals(
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
):
    return _with_titles(coordinator, coordinator.pending_approvals())


@router.get("/approvals/{approval_id}", response_model=ContentApprovalOut)
def get_approval(
    approval_id: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
):
    return _with_titles(coordinator, [coordinator.get_approval(approval_id)])[0]


@router.get("/content/{content_id}/approvals", response_model=List[ContentApprovalOut])
def list_content_approvals(
    content_id: str,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
):
    return _with_titles(coordinator, coordinator.approval_history(content_id))


@router.post("/approvals/{approval_id}/approve", response_model=ContentApprovalOut)
def approve_content(
    approval_id: int,
    data: ApprovalDecision,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_REVIEWERS)),
):
    row = coordinator.approve(approval_id, current_user.user_id, data.notes, publish=data.publish)
    return _with_titles(coordinator, [row])[0]


@router.post("/approvals/{approval_id}/reject", response_model=ContentApprovalOut)
def reject_content(
    approval_id: int,
    data: ApprovalRejection,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_REVIEWERS)),
):
    row = coordinator.reject(
        approval_id,
        current_user.user_id,
        data.notes,
        restore_version=data.restore_version,
    )
    return _with_titles(coordinator, [row])[0]
