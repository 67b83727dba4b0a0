# app/utils/jwt_handler.py
from datetime import timedelta
from typing import Optional
import logging

from jose import JWTError, jwt

from app.config import settings
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

APPLICANT_COOKIE = "applicant-jwt"
ADMIN_COOKIE = "admin-jwt"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token
    """
    to_encode = data.copy()
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access"
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify JWT token, returning its payload or None
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return None


def set_auth_cookie(response, cookie_name: str, token: str) -> None:
    response.set_cookie(
        key=cookie_name,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


def clear_auth_cookie(response, cookie_name: str) -> None:
    response.delete_cookie(key=cookie_name, path="/")
