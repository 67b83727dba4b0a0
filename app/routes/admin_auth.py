from fastapi import APIRouter, Depends, Form, Response
from sqlalchemy.orm import Session
from typing import List
import logging

from app.auth.dependencies import ADMIN_ROLE, Identity, get_current_admin, require_super_admin
from app.database import get_db
from app.schemas.admin import AdminCreate, AdminResponse
from app.services import admin_service
from app.utils.jwt_handler import ADMIN_COOKIE, clear_auth_cookie, create_access_token, set_auth_cookie

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin Authentication"]
)

logger = logging.getLogger(__name__)


@router.post("/login")
def admin_login(
    response: Response,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    admin = admin_service.authenticate_admin(db, email, password)
    token = create_access_token({
        "sub": admin.id,
        "email": admin.email,
        "role": ADMIN_ROLE,
        "admin_role": admin.role,
    })
    set_auth_cookie(response, ADMIN_COOKIE, token)
    logger.info(f"Admin {admin.email} logged in")
    return {"success": True, "message": "Login successful", "redirect_url": "/dashboard"}


@router.post("/logout")
def admin_logout(response: Response):
    clear_auth_cookie(response, ADMIN_COOKIE)
    return {"success": True, "message": "Logged out", "redirect_url": "/ayute/admin/login"}


@router.post("/create")
def create_admin(
    data: AdminCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_super_admin),
):
    admin = admin_service.create_admin(db, data)
    logger.info(f"Admin {admin.email} created by {identity.email}")
    return {
        "success": True,
        "message": "Admin created successfully",
        "admin": AdminResponse.model_validate(admin),
        "redirect_url": "/dashboard",
    }


@router.get("/admins", response_model=List[AdminResponse])
def list_admins(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    return admin_service.list_admins(db)


@router.get("/me", response_model=AdminResponse)
def current_admin(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    return admin_service.get_admin(db, identity.subject)
