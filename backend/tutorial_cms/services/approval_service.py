"""콘텐츠 검토 요청(승인/반려) 워크플로를 관리하는 도메인 서비스입니다."""

import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutorial_cms.errors import (
    AlreadyPendingError,
    InvalidArgumentError,
    InvalidStateTransitionError,
    NotFoundError,
)
from tutorial_cms.models.content_approval import ContentApproval
from tutorial_cms.models.enums import ApprovalStatus
from tutorial_cms.services.content_types import parse_content_type
from tutorial_cms.utils.helpers import utcnow

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[ApprovalStatus, FrozenSet[ApprovalStatus]] = {
    ApprovalStatus.PENDING: frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}),
    ApprovalStatus.APPROVED: frozenset(),
    ApprovalStatus.REJECTED: frozenset(),
}


def can_transition(current, target) -> bool:
    return ApprovalStatus(target) in ALLOWED_TRANSITIONS[ApprovalStatus(current)]


def _find_pending(db: Session, content_id: str) -> Optional[ContentApproval]:
    return (
        db.query(ContentApproval)
        .filter(
            ContentApproval.content_id == content_id,
            ContentApproval.status == ApprovalStatus.PENDING.value,
        )
        .first()
    )


def submit_for_approval(
    db: Session,
    *,
    content_type,
    content_id: str,
    submitted_by: Optional[int] = None,
) -> ContentApproval:
    kind = parse_content_type(content_type)
    if _find_pending(db, content_id):
        raise AlreadyPendingError(f"이미 검토 대기 중인 콘텐츠입니다: {content_id}")

    now = utcnow()
    row = ContentApproval(
        content_type=kind.value,
        content_id=content_id,
        status=ApprovalStatus.PENDING.value,
        pending_key=content_id,
        submitted_by=submitted_by,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # 동시 제출은 pending_key 유니크 인덱스가 막는다.
        db.rollback()
        raise AlreadyPendingError(f"이미 검토 대기 중인 콘텐츠입니다: {content_id}")
    db.refresh(row)
    logger.info("submitted %s %s for approval (request %s)", row.content_type, row.content_id, row.id)
    return row


def get_approval(db: Session, approval_id: int) -> ContentApproval:
    row = db.query(ContentApproval).filter(ContentApproval.id == approval_id).first()
    if not row:
        raise NotFoundError(f"검토 요청을 찾을 수 없습니다: {approval_id}")
    return row


def stage_decision(
    db: Session,
    approval_id: int,
    target: ApprovalStatus,
    reviewer_id: int,
    notes: Optional[str],
) -> None:
    """pending 상태에서만 전이되도록 조건부 UPDATE를 실행합니다. 커밋하지 않습니다."""
    sources = [status.value for status, targets in ALLOWED_TRANSITIONS.items() if target in targets]
    stmt = (
        update(ContentApproval)
        .where(ContentApproval.id == approval_id, ContentApproval.status.in_(sources))
        .values(
            status=target.value,
            pending_key=None,
            reviewer_id=reviewer_id,
            reviewer_notes=notes,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    if not db.execute(stmt).rowcount:
        current = get_approval(db, approval_id)
        raise InvalidStateTransitionError(
            f"'{current.status}' 상태의 검토 요청은 '{target.value}'(으)로 변경할 수 없습니다."
        )


def clean_approve_notes(notes: Optional[str]) -> Optional[str]:
    return (notes or "").strip() or None


def clean_reject_notes(notes: Optional[str]) -> str:
    cleaned = (notes or "").strip()
    if not cleaned:
        raise InvalidArgumentError("반려 사유를 입력해야 합니다.")
    return cleaned


def _decide(
    db: Session,
    approval_id: int,
    target: ApprovalStatus,
    reviewer_id: int,
    notes: Optional[str],
) -> ContentApproval:
    try:
        stage_decision(db, approval_id, target, reviewer_id, notes)
    except (InvalidStateTransitionError, NotFoundError):
        db.rollback()
        raise
    db.commit()
    logger.info("approval %s %s by reviewer %s", approval_id, target.value, reviewer_id)
    return get_approval(db, approval_id)


def approve_content(
    db: Session,
    approval_id: int,
    reviewer_id: int,
    notes: Optional[str] = None,
) -> ContentApproval:
    return _decide(db, approval_id, ApprovalStatus.APPROVED, reviewer_id, clean_approve_notes(notes))


def reject_content(
    db: Session,
    approval_id: int,
    reviewer_id: int,
    notes: str,
) -> ContentApproval:
    return _decide(db, approval_id, ApprovalStatus.REJECTED, reviewer_id, clean_reject_notes(notes))

def get_pending_approvals(db: Session) -> List[ContentApproval]:
    return (
        db.query(ContentApproval)
        .filter(ContentApproval.status == ApprovalStatus.PENDING.value)
        .order_by(ContentApproval.created_at.asc(), ContentApproval.id.asc())
        .all()
    )


def list_approvals(db: Session, content_id: str) -> List[ContentApproval]:
    return (
        db.query(ContentApproval)
        .filter(ContentApproval.content_id == content_id)
        .order_by(ContentApproval.created_at.desc(), ContentApproval.id.desc())
        .all()
    )
