"""직원 사번 기반 로그인과 JWT 발급, 역할별 기능 목록 계산을 담당하는 서비스 레이어입니다."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from tutorial_cms.models.user import User
from tutorial_cms.config import settings
from tutorial_cms.utils.permissions import ADMIN, CONTENT_EDITORS, CONTENT_REVIEWERS

ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


def token_ttl_seconds() -> int:
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(seconds=token_ttl_seconds())
    payload = {"sub": str(user.user_id), "emp_id": user.emp_id, "role": user.role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def authenticate_employee(db: Session, emp_id: str) -> User:
    user = db.query(User).filter(User.emp_id == emp_id.strip(), User.is_active == True).first()
    if not user:
        logger.warning("login rejected for emp_id %s", emp_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"사번 '{emp_id}'에 해당하는 활성 사용자를 찾을 수 없습니다.",
        )
    logger.info("user %s (%s) logged in", user.user_id, user.role)
    return user


def capabilities_for(user: User) -> Dict[str, bool]:
    return {
        "edit_content": user.role in CONTENT_EDITORS,
        "review_content": user.role in CONTENT_REVIEWERS,
        "run_scheduled_actions": user.role == ADMIN,
    }
