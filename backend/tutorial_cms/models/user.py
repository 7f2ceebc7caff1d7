"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from tutorial_cms.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    emp_id = Column(String(20), unique=True, nullable=False)
    name = Column(String(50), nullable=False)
    email = Column(String(100))
    role = Column(String(20), nullable=False)  # admin/editor/reviewer
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
