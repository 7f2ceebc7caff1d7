"""콘텐츠 라이프사이클(버전/예약 작업/검토) 진입점 역할을 하는 코디네이터입니다.

라우터와 스케줄러는 개별 서비스 모듈 대신 ``LifecycleCoordinator``를 통해
버전 기록, 복원, 예약 실행, 검토 결정을 요청합니다. 저장소(Session)는 호출자가
주입하며 코디네이터는 전역 상태를 갖지 않습니다.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from tutorial_cms.config import settings
from tutorial_cms.database import get_db
from tutorial_cms.errors import LifecycleError, NotFoundError
from tutorial_cms.models.content_approval import ContentApproval
from tutorial_cms.models.content_version import ContentVersion
from tutorial_cms.models.enums import ApprovalStatus
from tutorial_cms.models.scheduled_content import ScheduledContent
from tutorial_cms.services import approval_service, schedule_service, version_service
from tutorial_cms.services.content_types import CONTENT_HANDLERS, get_handler, parse_content_type
from tutorial_cms.services.schedule_service import ExecutionResult

logger = logging.getLogger(__name__)


class LifecycleCoordinator:
    def __init__(self, db: Session, *, snapshot_before_restore: Optional[bool] = None):
        self.db = db
        if snapshot_before_restore is None:
            snapshot_before_restore = settings.SNAPSHOT_BEFORE_RESTORE
        self.snapshot_before_restore = snapshot_before_restore

    # ---- versions -------------------------------------------------------

    def record_edit(
        self,
        content_type,
        content_id: str,
        *,
        title: str,
        body: str,
        metadata: Optional[Dict[str, Any]] = None,
        author_id: Optional[int] = None,
    ) -> ContentVersion:
        return version_service.create_version(
            self.db,
            content_type=content_type,
            content_id=content_id,
            title=title,
            body=body,
            metadata=metadata,
            author_id=author_id,
        )

    def list_versions(self, content_id: str) -> List[ContentVersion]:
        return version_service.list_versions(self.db, content_id)

    def get_version(self, content_id: str, version_number: int) -> ContentVersion:
        return version_service.get_version(self.db, content_id, version_number)

    def save_edit(
        self,
        content_type,
        apply: Callable[[Session], Any],
        *,
        metadata: Optional[Dict[str, Any]] = None,
        author_id: Optional[int] = None,
    ) -> ContentVersion:
        """``apply``가 반영(flush)한 콘텐츠 레코드와 그 스냅샷 버전을 한 트랜잭션으로 저장합니다."""
        kind = parse_content_type(content_type)

        def stage(db: Session) -> Dict[str, Any]:
            record = apply(db)
            return {"content_type": kind, "content_id": record.id, "title": record.title, "body": record.content}

        return version_service.write_with_version(self.db, stage, metadata=metadata, author_id=author_id)

    def _stage_restore(self, db: Session, content_id: str, version_number: int) -> Dict[str, Any]:
        target = version_service.get_version(db, content_id, version_number)
        current = get_handler(target.content_type).load(db, content_id)
        if current is None:
            raise NotFoundError(f"복원할 콘텐츠를 찾을 수 없습니다: {target.content_type} {content_id}")
        # 복원 직전 상태를 먼저 읽어 두어야 스냅샷 버전이 덮어쓰기 전 내용을 담는다.
        snapshot = {
            "content_type": target.content_type,
            "content_id": content_id,
            "title": current.title,
            "body": current.content,
        }
        version_service.stage_restore(db, content_id, version_number)
        return snapshot

    def _commit_restore(
        self,
        stage: Callable[[Session], Dict[str, Any]],
        version_number: int,
        actor_id: Optional[int],
    ) -> None:
        if self.snapshot_before_restore:
            version_service.write_with_version(
                self.db,
                stage,
                metadata={"reason": "pre_restore", "restored_version": version_number},
                author_id=actor_id,
            )
            return
        try:
            stage(self.db)
        except Exception:
            self.db.rollback()
            raise
        self.db.commit()

    def restore(self, content_id: str, version_number: int, actor_id: Optional[int] = None) -> ContentVersion:
        self._commit_restore(
            lambda db: self._stage_restore(db, content_id, version_number),
            version_number,
            actor_id,
        )
        logger.info("restored %s to version %d", content_id, version_number)
        return version_service.get_version(self.db, content_id, version_number)

    # ---- scheduled actions ----------------------------------------------

    def schedule(
        self,
        content_type,
        content_id: str,
        action,
        due_at,
        created_by: Optional[int] = None,
    ) -> ScheduledContent:
        return schedule_service.schedule_content(
            self.db,
            content_type=content_type,
            content_id=content_id,
            action=action,
            due_at=due_at,
            created_by=created_by,
        )

    def list_scheduled(self) -> List[ScheduledContent]:
        return schedule_service.list_scheduled_content(self.db)

    def cancel_scheduled(self, scheduled_id: int) -> bool:
        return schedule_service.cancel_scheduled_content(self.db, scheduled_id)

    def run_due_actions(self, now: datetime) -> ExecutionResult:
        return schedule_service.execute_scheduled_content(self.db, now)

    # ---- approvals ------------------------------------------------------

    def submit_for_review(self, content_type, content_id: str, submitted_by: Optional[int] = None) -> ContentApproval:
        handler = get_handler(content_type)
        if not handler.exists(self.db, content_id):
            raise NotFoundError(f"콘텐츠를 찾을 수 없습니다: {handler.content_type.value} {content_id}")
        return approval_service.submit_for_approval(
            self.db,
            content_type=handler.content_type,
            content_id=content_id,
            submitted_by=submitted_by,
        )

    def approve(
        self,
        approval_id: int,
        reviewer_id: int,
        notes: Optional[str] = None,
        *,
        publish: bool = False,
    ) -> ContentApproval:
        if not publish:
            return approval_service.approve_content(self.db, approval_id, reviewer_id, notes)
        # 승인과 게시를 한 트랜잭션으로 처리한다. 콘텐츠가 없으면 승인도 취소된다.
        try:
            approval_service.stage_decision(
                self.db,
                approval_id,
                ApprovalStatus.APPROVED,
                reviewer_id,
                approval_service.clean_approve_notes(notes),
            )
            row = approval_service.get_approval(self.db, approval_id)
            if not get_handler(row.content_type).set_published(self.db, row.content_id, True):
                raise NotFoundError(f"게시할 콘텐츠를 찾을 수 없습니다: {row.content_type} {row.content_id}")
        except LifecycleError:
            self.db.rollback()
            raise
        self.db.commit()
        logger.info("approved and published %s on request %s", row.content_id, approval_id)
        return approval_service.get_approval(self.db, approval_id)

    def reject(
        self,
        approval_id: int,
        reviewer_id: int,
        notes: str,
        *,
        restore_version: Optional[int] = None,
    ) -> ContentApproval:
        if restore_version is None:
            return approval_service.reject_content(self.db, approval_id, reviewer_id, notes)
        cleaned = approval_service.clean_reject_notes(notes)

        # 반려와 복원을 한 트랜잭션으로 처리한다. 복원이 실패하면 요청은 pending으로 남는다.
        def stage(db: Session) -> Dict[str, Any]:
            approval_service.stage_decision(db, approval_id, ApprovalStatus.REJECTED, reviewer_id, cleaned)
            pending = approval_service.get_approval(db, approval_id)
            return self._stage_restore(db, pending.content_id, restore_version)

        self._commit_restore(stage, restore_version, reviewer_id)
        logger.info("rejected request %s and restored version %d", approval_id, restore_version)
        return approval_service.get_approval(self.db, approval_id)

    def pending_approvals(self) -> List[ContentApproval]:
        return approval_service.get_pending_approvals(self.db)

    def approval_history(self, content_id: str) -> List[ContentApproval]:
        return approval_service.list_approvals(self.db, content_id)

    def get_approval(self, approval_id: int) -> ContentApproval:
        return approval_service.get_approval(self.db, approval_id)

    # ---- display helpers ------------------------------------------------

    def resolve_titles(self, pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
        """(content_type, content_id) 목록을 content id → 제목 사전으로 변환합니다."""
        grouped: Dict[str, List[str]] = {}
        for content_type, content_id in pairs:
            grouped.setdefault(parse_content_type(content_type).value, []).append(content_id)
        titles: Dict[str, str] = {}
        for kind, handler in CONTENT_HANDLERS.items():
            titles.update(handler.titles(self.db, grouped.get(kind.value, [])))
        return titles


def get_coordinator(db: Session = Depends(get_db)) -> LifecycleCoordinator:
    return LifecycleCoordinator(db)
