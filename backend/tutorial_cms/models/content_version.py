"""튜토리얼/페이지 편집 이력을 불변 스냅샷으로 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Index, UniqueConstraint

from tutorial_cms.database import Base
from tutorial_cms.utils.helpers import utcnow


class ContentVersion(Base):
    __tablename__ = "content_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(String(20), nullable=False)  # tutorial/page
    content_id = Column(String(32), nullable=False)
    version_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    meta = Column("metadata", JSON, nullable=False, default=dict)
    # 작성자 참조만 기록한다. 사용자 삭제와 무관하게 이력은 보존된다.
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("content_id", "version_number", name="uq_content_version_number"),
        Index("idx_content_version_content", "content_type", "content_id"),
    )
