"""Tutorials 기능 API 라우터입니다. 공개 조회와 관리자 편집을 서비스 레이어로 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from tutorial_cms.database import get_db
from tutorial_cms.schemas.content import TutorialCreate, TutorialUpdate, TutorialOut
from tutorial_cms.middleware.auth_middleware import require_roles
from tutorial_cms.models.enums import ContentType
from tutorial_cms.models.user import User
from tutorial_cms.services import content_service
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator, get_coordinator
from tutorial_cms.utils.permissions import CONTENT_EDITORS

router = APIRouter(tags=["tutorials"])

TUTORIAL = ContentType.TUTORIAL


@router.get("/api/tutorials", response_model=List[TutorialOut])
def list_published_tutorials(db: Session = Depends(get_db)):
    return content_service.list_content(db, TUTORIAL, published_only=True)


@router.get("/api/tutorials/{slug}", response_model=TutorialOut)
def get_published_tutorial(slug: str, db: Session = Depends(get_db)):
    tutorial = content_service.get_published_by_slug(db, TUTORIAL, slug)
    tutorial.view_count = (tutorial.view_count or 0) + 1
    db.commit()
    db.refresh(tutorial)
    return tutorial


@router.get("/api/admin/tutorials", response_model=List[TutorialOut])
def list_tutorials(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.list_content(db, TUTORIAL)


@router.post("/api/admin/tutorials", response_model=TutorialOut)
def create_tutorial(
    data: TutorialCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.create_content(coordinator, TUTORIAL, data.model_dump(), current_user)


@router.get("/api/admin/tutorials/{tutorial_id}", response_model=TutorialOut)
def get_tutorial(
    tutorial_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    return content_service.get_content(db, TUTORIAL, tutorial_id)


@router.put("/api/admin/tutorials/{tutorial_id}", response_model=TutorialOut)
def update_tutorial(
    tutorial_id: str,
    data: TutorialUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    payload = data.model_dump(exclude_none=True)
    return content_service.update_content(coordinator, TUTORIAL, tutorial_id, payload, current_user)


@router.delete("/api/admin/tutorials/{tutorial_id}")
def delete_tutorial(
    tutorial_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    content_service.delete_content(db, TUTORIAL, tutorial_id)
    return {"message": "삭제되었습니다."}
