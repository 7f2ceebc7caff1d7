"""독자에게 제공되는 튜토리얼/페이지 콘텐츠 레코드의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON
from sqlalchemy.sql import func

from tutorial_cms.database import Base
from tutorial_cms.utils.helpers import new_content_id


class Tutorial(Base):
    __tablename__ = "tutorials"

    id = Column(String(32), primary_key=True, default=new_content_id)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    content = Column(Text, nullable=False, default="")
    difficulty = Column(String(20), default="Beginner")  # Beginner/Intermediate/Advanced
    duration = Column(String(50))
    tags = Column(JSON, nullable=False, default=list)
    author = Column(String(100))
    published = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Page(Base):
    __tablename__ = "pages"

    id = Column(String(32), primary_key=True, default=new_content_id)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    content = Column(Text, nullable=False, default="")
    meta_description = Column(String(500))
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
