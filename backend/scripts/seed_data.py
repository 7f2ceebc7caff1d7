"""Seed the database with staff accounts and sample content."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import timedelta
from tutorial_cms.database import SessionLocal, engine, Base
import tutorial_cms.models  # noqa: F401

from tutorial_cms.models.user import User
from tutorial_cms.models.content import Tutorial, Page
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator
from tutorial_cms.utils.helpers import utcnow


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [
            User(emp_id="admin001", name="관리자 김철수", role="admin", email="admin@company.com"),
            User(emp_id="editor001", name="편집자 이영희", role="editor", email="editor1@company.com"),
            User(emp_id="reviewer001", name="검토자 박민준", role="reviewer", email="reviewer1@company.com"),
        ]
        db.add_all(users)
        db.commit()
        editor = users[1]

        tutorial = Tutorial(
            title="FastAPI 시작하기",
            slug="fastapi-getting-started",
            description="라우터와 의존성 주입으로 첫 API를 만듭니다.",
            content="# FastAPI 시작하기\n\n첫 번째 엔드포인트를 작성해 봅니다.",
            difficulty="Beginner",
            duration="30분",
            tags=["python", "fastapi"],
            author=editor.name,
        )
        page = Page(
            title="소개",
            slug="about",
            content="튜토리얼 CMS 소개 페이지입니다.",
            meta_description="튜토리얼 CMS 소개",
        )
        db.add_all([tutorial, page])
        db.commit()

        coordinator = LifecycleCoordinator(db)
        for content_type, record in (("tutorial", tutorial), ("page", page)):
            coordinator.record_edit(
                content_type,
                record.id,
                title=record.title,
                body=record.content,
                metadata={"change_type": "create", "source": "seed"},
                author_id=editor.user_id,
            )
        coordinator.submit_for_review("tutorial", tutorial.id, submitted_by=editor.user_id)
        coordinator.schedule("page", page.id, "publish", utcnow() + timedelta(hours=1), created_by=editor.user_id)

        print("Seed data created successfully.")
        print(f"  Users: {len(users)}")
        print(f"  Tutorial: {tutorial.slug} (검토 대기)")
        print(f"  Page: {page.slug} (1시간 뒤 게시 예약)")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
