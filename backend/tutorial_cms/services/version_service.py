"""콘텐츠 버전 저장/조회/복원 기능을 제공하는 도메인 서비스입니다.

버전 INSERT는 커밋하지 않는 ``insert_version``과, 호출자의 변경(stage)과 버전
INSERT를 한 트랜잭션으로 묶어 커밋하는 ``write_with_version``으로 나뉩니다.
콘텐츠 편집과 그 스냅샷은 함께 저장되거나 함께 취소됩니다.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutorial_cms.config import settings
from tutorial_cms.errors import ConcurrencyConflictError, InvalidArgumentError, NotFoundError
from tutorial_cms.models.content_version import ContentVersion
from tutorial_cms.services.content_types import get_handler, parse_content_type
from tutorial_cms.utils.helpers import utcnow

logger = logging.getLogger(__name__)

# stage 함수는 변경을 세션에 반영(flush)하고 스냅샷 필드를 돌려준다.
StageFn = Callable[[Session], Dict[str, Any]]


def _next_version_number(content_id: str):
    table = ContentVersion.__table__
    return (
        select(func.coalesce(func.max(table.c.version_number), 0) + 1)
        .where(table.c.content_id == content_id)
        .scalar_subquery()
    )


def clean_metadata(metadata) -> Dict[str, Any]:
    if metadata is None:
        return {}
    if not isinstance(metadata, Mapping):
        raise InvalidArgumentError(f"버전 메타데이터는 객체여야 합니다: {type(metadata).__name__}")
    return dict(metadata)


def insert_version(
    db: Session,
    *,
    content_type,
    content_id: str,
    title: str,
    body: str,
    metadata: Optional[Dict[str, Any]] = None,
    author_id: Optional[int] = None,
) -> int:
    """현재 트랜잭션 안에서 다음 번호로 버전을 INSERT하고 id를 돌려줍니다. 커밋하지 않습니다."""
    kind = parse_content_type(content_type)
    # 번호 계산과 삽입을 한 문장으로 처리하고, 경합 시 유니크 제약이 중복을 막는다.
    stmt = insert(ContentVersion.__table__).values(
        content_type=kind.value,
        content_id=content_id,
        version_number=_next_version_number(content_id),
        title=title or "",
        body=body or "",
        metadata=clean_metadata(metadata),
        created_by=author_id,
        created_at=utcnow(),
    )
    return db.execute(stmt).inserted_primary_key[0]


def write_with_version(
    db: Session,
    stage: StageFn,
    *,
    metadata: Optional[Dict[str, Any]] = None,
    author_id: Optional[int] = None,
    max_attempts: Optional[int] = None,
) -> ContentVersion:
    """``stage``의 변경과 버전 INSERT를 한 번에 커밋합니다.

    버전 번호 충돌(IntegrityError)이면 전체를 롤백하고 ``stage``부터 다시 실행합니다.
    그 밖의 예외는 롤백 후 그대로 전달되므로 어떤 변경도 남지 않습니다.
    """
    metadata = clean_metadata(metadata)
    attempts = max_attempts or settings.VERSION_ALLOCATION_ATTEMPTS
    content_id = None

    for attempt in range(1, attempts + 1):
        try:
            fields = stage(db)
            content_id = fields["content_id"]
            version_id = insert_version(db, metadata=metadata, author_id=author_id, **fields)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "version number conflict for %s (attempt %d/%d)", content_id, attempt, attempts,
            )
            continue
        except Exception:
            db.rollback()
            raise

        row = db.get(ContentVersion, version_id)
        logger.info("created version %d for %s %s", row.version_number, row.content_type, row.content_id)
        return row

    raise ConcurrencyConflictError(f"버전 번호를 할당하지 못했습니다: {content_id}")


def create_version(
    db: Session,
    *,
    content_type,
    content_id: str,
    title: str,
    body: str,
    metadata: Optional[Dict[str, Any]] = None,
    author_id: Optional[int] = None,
    max_attempts: Optional[int] = None,
) -> ContentVersion:
    fields = {
        "content_type": parse_content_type(content_type),
        "content_id": content_id,
        "title": title,
        "body": body,
    }
    return write_with_version(
        db,
        lambda session: fields,
        metadata=metadata,
        author_id=author_id,
        max_attempts=max_attempts,
    )


def list_versions(db: Session, content_id: str) -> List[ContentVersion]:
    return (
        db.query(ContentVersion)
        .filter(ContentVersion.content_id == content_id)
        .order_by(ContentVersion.version_number.desc())
        .all()
    )


def get_version(db: Session, content_id: str, version_number: int) -> ContentVersion:
    row = (
        db.query(ContentVersion)
        .filter(
            ContentVersion.content_id == content_id,
            ContentVersion.version_number == version_number,
        )
        .first()
    )
    if not row:
        raise NotFoundError(f"버전 이력을 찾을 수 없습니다: {content_id} v{version_number}")
    return row


def stage_restore(db: Session, content_id: str, version_number: int) -> ContentVersion:
    """버전의 제목/본문을 콘텐츠 레코드에 덮어쓰는 UPDATE만 실행합니다. 커밋하지 않습니다."""
    row = get_version(db, content_id, version_number)
    handler = get_handler(row.content_type)
    if not handler.restore(db, content_id, row.title, row.body):
        raise NotFoundError(f"복원할 콘텐츠를 찾을 수 없습니다: {row.content_type} {content_id}")
    return row


def restore_version(db: Session, content_id: str, version_number: int) -> ContentVersion:
    """저장된 버전의 제목/본문을 콘텐츠 레코드에 덮어씁니다.

    메타데이터와 게시 상태는 건드리지 않으며, 복원 자체로 새 버전을 만들지 않습니다.
    """
    try:
        row = stage_restore(db, content_id, version_number)
    except NotFoundError:
        db.rollback()
        raise
    db.commit()
    logger.info("restored %s %s to version %d", row.content_type, content_id, version_number)
    return row


def to_response(row: ContentVersion, *, content_title: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": row.id,
        "content_type": row.content_type,
        "content_id": row.content_id,
        "version_number": row.version_number,
        "title": row.title,
        "body": row.body,
        "metadata": row.meta or {},
        "created_by": row.created_by,
        "created_at": row.created_at,
        "content_title": content_title,
    }
