"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from tutorial_cms.models.user import User
from tutorial_cms.models.content import Tutorial, Page
from tutorial_cms.models.content_version import ContentVersion
from tutorial_cms.models.scheduled_content import ScheduledContent
from tutorial_cms.models.content_approval import ContentApproval

__all__ = [
    "User",
    "Tutorial", "Page",
    "ContentVersion",
    "ScheduledContent",
    "ContentApproval",
]
