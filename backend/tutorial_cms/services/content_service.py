"""튜토리얼/페이지 CRUD 서비스 레이어입니다. 저장할 때마다 라이프사이클 코디네이터로 버전을 남깁니다."""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutorial_cms.models.enums import ContentType
from tutorial_cms.models.user import User
from tutorial_cms.services.content_types import get_handler
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator

logger = logging.getLogger(__name__)

_LABELS = {
    ContentType.TUTORIAL: "튜토리얼",
    ContentType.PAGE: "페이지",
}


def _not_found(content_type: ContentType) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{_LABELS[content_type]}을(를) 찾을 수 없습니다.")


def list_content(db: Session, content_type: ContentType, published_only: bool = False) -> List:
    model = get_handler(content_type).model
    q = db.query(model)
    if published_only:
        q = q.filter(model.published == True)
    return q.order_by(model.created_at.desc()).all()


def get_content(db: Session, content_type: ContentType, content_id: str):
    record = get_handler(content_type).load(db, content_id)
    if not record:
        raise _not_found(content_type)
    return record


def get_published_by_slug(db: Session, content_type: ContentType, slug: str):
    model = get_handler(content_type).model
    record = db.query(model).filter(model.slug == slug, model.published == True).first()
    if not record:
        raise _not_found(content_type)
    return record


def _flush_unique(db: Session, content_type: ContentType) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"이미 사용 중인 {_LABELS[content_type]} 슬러그입니다.")


def create_content(
    coordinator: LifecycleCoordinator,
    content_type: ContentType,
    payload: dict,
    current_user: User,
):
    metadata = payload.pop("version_metadata", None) or {}
    model = get_handler(content_type).model

    def apply(db: Session):
        record = model(**payload, published=False)
        db.add(record)
        _flush_unique(db, content_type)
        return record

    version = coordinator.save_edit(
        content_type,
        apply,
        metadata={"change_type": "create", **metadata},
        author_id=current_user.user_id,
    )
    logger.info("%s %s created by user %s", content_type.value, version.content_id, current_user.user_id)
    return get_content(coordinator.db, content_type, version.content_id)


def update_content(
    coordinator: LifecycleCoordinator,
    content_type: ContentType,
    content_id: str,
    payload: dict,
    current_user: User,
):
    metadata = payload.pop("version_metadata", None) or {}

    def apply(db: Session):
        record = get_content(db, content_type, content_id)
        for k, v in payload.items():
            setattr(record, k, v)
        _flush_unique(db, content_type)
        return record

    coordinator.save_edit(
        content_type,
        apply,
        metadata={"change_type": "update", **metadata},
        author_id=current_user.user_id,
    )
    return get_content(coordinator.db, content_type, content_id)



def delete_content(db: Session, content_type: ContentType, content_id: str) -> None:
    record = get_content(db, content_type, content_id)
    db.delete(record)
    db.commit()
    # 버전/검토/예약 이력은 감사 기록으로 남겨 둔다.
    logger.info("%s %s deleted", content_type.value, content_id)
