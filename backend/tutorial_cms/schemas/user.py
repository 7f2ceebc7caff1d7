"""로그인 요청과 사용자/토큰 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime


class UserOut(BaseModel):
    user_id: int
    emp_id: str
    name: str
    email: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MeOut(UserOut):
    capabilities: Dict[str, bool] = {}


class LoginRequest(BaseModel):
    emp_id: str = Field(min_length=1, max_length=20)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut
