"""예약된 게시/게시중단/삭제 작업을 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Index

from tutorial_cms.database import Base
from tutorial_cms.utils.helpers import utcnow


class ScheduledContent(Base):
    __tablename__ = "scheduled_content"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(String(20), nullable=False)
    content_id = Column(String(32), nullable=False)
    action = Column(String(20), nullable=False)  # publish/unpublish/delete
    due_at = Column(DateTime, nullable=False)
    executed = Column(Boolean, nullable=False, default=False)
    executed_at = Column(DateTime, nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_scheduled_content_due", "executed", "due_at"),
    )
