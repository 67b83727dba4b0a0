# app/auth/dependencies.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.admin import Admin, AdminRole
from app.models.application import Application
from app.utils.jwt_handler import ADMIN_COOKIE, APPLICANT_COOKIE, verify_token

import logging
logger = logging.getLogger(__name__)

APPLICANT_ROLE = "applicant"
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Identity:
    """Who is calling. Resolved from the session cookie and passed into services."""
    subject: str
    email: str
    role: str
    admin_role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def is_super_admin(self) -> bool:
        return self.is_admin and self.admin_role == AdminRole.SUPER


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _decode(token: Optional[str], expected_role: str) -> dict:
    if not token:
        raise _unauthorized("Not authenticated")
    payload = verify_token(token)
    if not payload or payload.get("role") != expected_role or not payload.get("sub"):
        logger.warning(f"Rejected {expected_role} session token")
        raise _unauthorized("Invalid or expired session")
    return payload


def get_current_applicant(
    token: Optional[str] = Cookie(default=None, alias=APPLICANT_COOKIE),
    db: Session = Depends(get_db),
) -> Identity:
    payload = _decode(token, APPLICANT_ROLE)
    application = db.query(Application).filter(Application.email == payload.get("email")).first()
    if not application or str(application.id) != payload["sub"]:
        raise _unauthorized("Applicant not found")
    if not application.is_verified:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Please verify your email before continuing")
    return Identity(subject=str(application.id), email=application.email, role=APPLICANT_ROLE)


def get_current_admin(
    token: Optional[str] = Cookie(default=None, alias=ADMIN_COOKIE),
    db: Session = Depends(get_db),
) -> Identity:
    payload = _decode(token, ADMIN_ROLE)
    admin = db.query(Admin).filter(Admin.id == payload["sub"]).first()
    if not admin or not admin.is_active:
        raise _unauthorized("Admin not found or inactive")
    return Identity(subject=admin.id, email=admin.email, role=ADMIN_ROLE, admin_role=admin.role)


def require_super_admin(identity: Identity = Depends(get_current_admin)) -> Identity:
    if not identity.is_super_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Super admin access required")
    return identity
