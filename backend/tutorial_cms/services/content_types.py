"""콘텐츠 유형(tutorial/page)별 레코드 조작을 한 곳에서 디스패치하는 테이블입니다.

라이프사이클 엔진은 콘텐츠 테이블의 ``published``/``title``/``content`` 컬럼만
건드리며, 모든 쓰기는 content id 범위의 단일 UPDATE/DELETE 문으로 수행합니다.
"""

from dataclasses import dataclass
from typing import Dict, Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from tutorial_cms.errors import InvalidArgumentError
from tutorial_cms.models.content import Page, Tutorial
from tutorial_cms.models.enums import ContentType
from tutorial_cms.utils.helpers import utcnow


@dataclass(frozen=True)
class ContentHandler:
    content_type: ContentType
    model: type

    def load(self, db: Session, content_id: str):
        return db.get(self.model, content_id)

    def exists(self, db: Session, content_id: str) -> bool:
        stmt = select(self.model.id).where(self.model.id == content_id)
        return db.execute(stmt).first() is not None

    def set_published(self, db: Session, content_id: str, published: bool) -> int:
        stmt = (
            update(self.model)
            .where(self.model.id == content_id)
            .values(published=published, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def delete(self, db: Session, content_id: str) -> int:
        stmt = (
            delete(self.model)
            .where(self.model.id == content_id)
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def restore(self, db: Session, content_id: str, title: str, body: str) -> int:
        stmt = (
            update(self.model)
            .where(self.model.id == content_id)
            .values(title=title, content=body, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def titles(self, db: Session, content_ids: Iterable[str]) -> Dict[str, str]:
        ids = list({cid for cid in content_ids if cid})
        if not ids:
            return {}
        rows = db.execute(select(self.model.id, self.model.title).where(self.model.id.in_(ids))).all()
        return {row[0]: row[1] for row in rows}


CONTENT_HANDLERS: Dict[ContentType, ContentHandler] = {
    ContentType.TUTORIAL: ContentHandler(ContentType.TUTORIAL, Tutorial),
    ContentType.PAGE: ContentHandler(ContentType.PAGE, Page),
}


def parse_content_type(value) -> ContentType:
    try:
        return ContentType(value)
    except ValueError:
        raise InvalidArgumentError(f"지원하지 않는 콘텐츠 유형입니다: {value}")


def get_handler(content_type) -> ContentHandler:
    return CONTENT_HANDLERS[parse_content_type(content_type)]
