"""예약 작업 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class ScheduledContentCreate(BaseModel):
    content_type: Literal["tutorial", "page"]
    content_id: str
    action: Literal["publish", "unpublish", "delete"]
    scheduled_for: datetime


class ScheduledContentOut(BaseModel):
    id: int
    content_type: str
    content_id: str
    action: str
    scheduled_for: datetime
    executed: bool
    executed_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: datetime
    content_title: Optional[str] = None


class ExecutionFailureOut(BaseModel):
    scheduled_id: int
    content_type: str
    content_id: str
    action: str
    message: str


class ExecutionResultOut(BaseModel):
    executed: int
    failures: List[ExecutionFailureOut]
    errors: List[str]
    message: str
