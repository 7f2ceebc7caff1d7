"""서비스 레이어 패키지 초기화 모듈입니다."""

from tutorial_cms.services import (
    auth_service,
    version_service,
    schedule_service,
    approval_service,
    lifecycle_service,
    content_service,
)
