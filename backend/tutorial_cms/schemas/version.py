"""콘텐츠 버전 이력 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ContentVersionOut(BaseModel):
    id: int
    content_type: str
    content_id: str
    version_number: int
    title: str
    body: str
    metadata: Dict[str, Any]
    created_by: Optional[int] = None
    created_at: datetime
    content_title: Optional[str] = None


class ContentRestoreResult(BaseModel):
    message: str
    content_id: str
    restored_version: int
    snapshot_created: bool
