"""튜토리얼/페이지 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class TutorialBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    content: str = ""
    difficulty: Optional[str] = "Beginner"
    duration: Optional[str] = None
    tags: List[str] = []
    author: Optional[str] = None


class TutorialCreate(TutorialBase):
    version_metadata: Dict[str, Any] = {}


class TutorialUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    content: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[str] = None
    tags: Optional[List[str]] = None
    author: Optional[str] = None
    version_metadata: Dict[str, Any] = {}


class TutorialOut(TutorialBase):
    id: str
    published: bool
    view_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PageBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    content: str = ""
    meta_description: Optional[str] = None


class PageCreate(PageBase):
    version_metadata: Dict[str, Any] = {}


class PageUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    meta_description: Optional[str] = None
    version_metadata: Dict[str, Any] = {}


class PageOut(PageBase):
    id: str
    published: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
