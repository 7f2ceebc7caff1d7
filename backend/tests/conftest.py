import pytest
from fastapi.testclient import TestClient
from tutorial_cms.database import Base, build_engine, build_session_factory, get_db
from tutorial_cms.main import app
from tutorial_cms.models.content import Page, Tutorial
from tutorial_cms.models.user import User
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator

TEST_DB_URL = "sqlite:///./test_tutorial_cms.db"

engine = build_engine(TEST_DB_URL)
TestingSession = build_session_factory(engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def coordinator(db):
    return LifecycleCoordinator(db, snapshot_before_restore=True)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(emp_id="admin001", name="Admin", role="admin"),
        "editor": User(emp_id="editor001", name="Editor", role="editor"),
        "reviewer": User(emp_id="reviewer001", name="Reviewer", role="reviewer"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_tutorial(db):
    tutorial = Tutorial(
        title="Python 입문",
        slug="python-intro",
        content="print('hello')",
        tags=["python"],
    )
    db.add(tutorial)
    db.commit()
    db.refresh(tutorial)
    return tutorial


@pytest.fixture
def seed_page(db):
    page = Page(title="소개", slug="about", content="소개 페이지")
    db.add(page)
    db.commit()
    db.refresh(page)
    return page


def get_token(client, emp_id: str) -> str:
    resp = client.post("/api/auth/login", json={"emp_id": emp_id})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, emp_id: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, emp_id)}"}
