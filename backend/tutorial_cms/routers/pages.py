"""Pages 기능 API 라우터입니다. 공개 조회와 관리자 편집을 서비스 레이어로 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from tutorial_cms.database import get_db
from tutorial_cms.schemas.content import PageCreate, PageUpdate, PageOut
from tutorial_cms.middleware.auth_middleware import require_roles
from tutorial_cms.models.enums import ContentType
from tutorial_cms.models.user import User
from tutorial_cms.services import content_service
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator, get_coordinator
from tutorial_cms.utils.permissions import CONTENT_EDITORS

router = APIRouter(tags=["pages"])

PAGE = ContentType.PAGE


@router.get("/api/pages/{slug}", response_model=PageOut)
def get_published_page(slug: str, db: Session = Depends(get_db)):
    return content_service.get_published_by_slug(db, PAGE, slug)


@router.get("/api/admin/pages", response_model=List[PageOut])
def list_pages(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.list_content(db, PAGE)


@router.post("/api/admin/pages", response_model=PageOut)
def create_page(
    data: PageCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.create_content(coordinator, PAGE, data.model_dump(), current_user)


@router.get("/api/admin/pages/{page_id}", response_model=PageOut)
def get_page(
    page_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.get_content(db, PAGE, page_id)


@router.put("/api/admin/pages/{page_id}", response_model=PageOut)
def update_page(
    page_id: str,
    data: PageUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    payload = data.model_dump(exclude_none=True)
    return content_service.update_content(coordinator, PAGE, page_id, payload, current_user)


@router.delete("/api/admin/pages/{page_id}")
def delete_page(
    page_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    content_service.delete_content(db, PAGE, page_id)
    return {"message": "삭제되었습니다."}
