"""콘텐츠 검토 요청 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class ApprovalSubmit(BaseModel):
    content_type: Literal["tutorial", "page"]
    content_id: str


class ApprovalDecision(BaseModel):
    notes: Optional[str] = None
    publish: bool = False


class ApprovalRejection(BaseModel):
    notes: str = ""
    restore_version: Optional[int] = None


class ContentApprovalOut(BaseModel):
    id: int
    content_type: str
    content_id: str
    status: str
    submitted_by: Optional[int] = None
    reviewer_id: Optional[int] = None
    reviewer_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    content_title: Optional[str] = None

    model_config = {"from_attributes": True}
