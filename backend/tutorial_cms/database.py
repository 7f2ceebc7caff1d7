"""SQLAlchemy 엔진/세션 팩토리와 FastAPI 세션 의존성을 제공합니다."""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from tutorial_cms.config import settings


class Base(DeclarativeBase):
    pass


def build_engine(url: str | None = None) -> Engine:
    db_url = url or settings.DATABASE_URL
    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS,
        }
    return create_engine(db_url, future=True, echo=False, connect_args=connect_args)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, class_=Session, autocommit=False, autoflush=False)


engine = build_engine()
SessionLocal = build_session_factory(engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
