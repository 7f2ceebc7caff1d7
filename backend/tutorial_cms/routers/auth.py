"""로그인/로그아웃/내 정보 API 라우터입니다. 토큰 발급과 역할별 기능 목록을 제공합니다."""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tutorial_cms.database import get_db
from tutorial_cms.schemas.user import LoginRequest, MeOut, TokenResponse, UserOut
from tutorial_cms.services.auth_service import (
    authenticate_employee,
    capabilities_for,
    create_access_token,
    token_ttl_seconds,
)
from tutorial_cms.middleware.auth_middleware import get_current_user
from tutorial_cms.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_employee(db, request.emp_id)
    return TokenResponse(
        access_token=create_access_token(user),
        expires_in=token_ttl_seconds(),
        user=UserOut.model_validate(user),
    )


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # 토큰은 상태가 없으므로 클라이언트가 폐기한다.
    logger.info("user %s logged out", current_user.user_id)
    return {"message": "로그아웃 되었습니다."}


@router.get("/me", response_model=MeOut)
def me(current_user: User = Depends(get_current_user)):
    out = MeOut.model_validate(current_user)
    out.capabilities = capabilities_for(current_user)
    return out
