"""라이프사이클 엔티티가 공유하는 열거형 값 정의입니다."""

from enum import Enum


class ContentType(str, Enum):
    TUTORIAL = "tutorial"
    PAGE = "page"


class ScheduledActionKind(str, Enum):
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    DELETE = "delete"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
