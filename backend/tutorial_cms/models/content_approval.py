"""콘텐츠 검토 요청(pending/approved/rejected)을 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Index

from tutorial_cms.database import Base
from tutorial_cms.utils.helpers import utcnow


class ContentApproval(Base):
    __tablename__ = "content_approvals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(String(20), nullable=False)
    content_id = Column(String(32), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending/approved/rejected
    # pending 동안만 content_id를, 결정 후에는 NULL을 담는다.
    pending_key = Column(String(32), nullable=True)
    submitted_by = Column(Integer, nullable=True)
    reviewer_id = Column(Integer, nullable=True)
    reviewer_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        # 콘텐츠당 pending 요청은 하나만 허용한다. NULL은 중복으로 보지 않으므로
        # 부분 인덱스가 없는 MySQL에서도 같은 규칙이 적용된다.
        Index("uq_content_approval_pending_key", "pending_key", unique=True),
        Index("idx_content_approval_status", "status", "created_at"),
    )
