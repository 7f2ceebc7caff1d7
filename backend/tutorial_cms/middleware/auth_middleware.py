"""Bearer 토큰을 검증해 현재 사용자와 역할 요구사항을 주입하는 FastAPI 의존성입니다."""

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from tutorial_cms.database import get_db
from tutorial_cms.models.user import User
from tutorial_cms.config import settings
from tutorial_cms.services.auth_service import ALGORITHM

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_token(token: str) -> int:
    """토큰을 검증하고 사용자 id(sub)를 돌려줍니다."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise _unauthorized("Invalid token payload")
    return int(subject)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    user_id = decode_token(credentials.credentials)
    # 역할은 토큰이 아니라 현재 DB 값을 기준으로 판단한다.
    user = db.query(User).filter(User.user_id == user_id, User.is_active == True).first()
    if not user:
        raise _unauthorized("User not found or inactive")
    return user


def require_roles(*roles: str):
    allowed = frozenset(roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning("user %s (%s) denied; requires %s", current_user.user_id, current_user.role, roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user

    return role_checker
