"""콘텐츠 버전 이력 API 라우터입니다. 목록/단건 조회와 복원을 코디네이터로 위임합니다."""

from fastapi import APIRouter, Depends
from typing import List
from tutorial_cms.schemas.version import ContentRestoreResult, ContentVersionOut
from tutorial_cms.middleware.auth_middleware import require_roles
from tutorial_cms.models.user import User
from tutorial_cms.services import version_service
from tutorial_cms.services.lifecycle_service import LifecycleCoordinator, get_coordinator
from tutorial_cms.utils.permissions import CONTENT_EDITORS, STAFF_ROLES

router = APIRouter(prefix="/api/admin/content/{content_id}/versions", tags=["versions"])


@router.get("", response_model=List[ContentVersionOut])
def list_content_versions(
    content_id: str,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
):
    versions = coordinator.list_versions(content_id)
    titles = coordinator.resolve_titles((row.content_type, row.content_id) for row in versions)
    return [version_service.to_response(row, content_title=titles.get(row.content_id)) for row in versions]


@router.get("/{version_number}", response_model=ContentVersionOut)
def get_content_version(
    content_id: str,
    version_number: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
):
    row = coordinator.get_version(content_id, version_number)
    titles = coordinator.resolve_titles([(row.content_type, row.content_id)])
    return version_service.to_response(row, content_title=titles.get(row.content_id))


@router.post("/{version_number}/restore", response_model=ContentRestoreResult)
def restore_content_version(
    content_id: str,
    version_number: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
    current_user: User = Depends(require_roles(*CONTENT_EDITORS)),
):
    coordinator.restore(content_id, version_number, actor_id=current_user.user_id)
    return ContentRestoreResult(
        message="버전을 복원했습니다.",
        content_id=content_id,
        restored_version=version_number,
        snapshot_created=coordinator.snapshot_before_restore,
    )
