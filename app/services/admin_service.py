# app/services/admin_service.py
import logging
import math
from datetime import datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import AuthenticationFailed, Conflict, NotFound, PortalError, ValidationError
from app.models.admin import Admin
from app.models.application import Application, ApplicationStatus
from app.schemas.admin import AdminCreate
from app.schemas.application import ApplicationListItem, ApplicationPage, ApplicationStats
from app.services.application_service import get_owned_application
from app.utils.hash import hash_password, verify_password
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

GENDER_BUCKETS = ("male", "female", "other")


def _percent(part: int, total: int) -> float:
    return round(part * 100.0 / total, 1) if total else 0.0


# ---------------- Dashboard ----------------

def application_stats(db: Session) -> ApplicationStats:
    """Counts and one-decimal percentages by status and gender."""
    total = db.query(func.count(Application.id)).scalar() or 0

    today_start = datetime.combine(utcnow().date(), time.min)
    today = db.query(func.count(Application.id)).filter(
        Application.created_at >= today_start,
        Application.created_at < today_start + timedelta(days=1),
    ).scalar() or 0

    by_status = {status: 0 for status in ApplicationStatus.ALL}
    for status, count in db.query(Application.status, func.count(Application.id)).group_by(Application.status):
        by_status[status] = by_status.get(status, 0) + count

    # anything not male/female, including blank, counts as "other"
    by_gender = {gender: 0 for gender in GENDER_BUCKETS}
    for gender, count in db.query(Application.gender, func.count(Application.id)).group_by(Application.gender):
        key = (gender or "").strip().lower()
        by_gender[key if key in ("male", "female") else "other"] += count

    return ApplicationStats(
        total=total,
        today=today,
        awaiting_review=by_status[ApplicationStatus.SUBMITTED] + by_status[ApplicationStatus.REVIEWING],
        by_status=by_status,
        by_gender=by_gender,
        status_percentages={k: _percent(v, total) for k, v in by_status.items()},
        gender_percentages={k: _percent(v, total) for k, v in by_gender.items()},
        approval_rate=_percent(by_status[ApplicationStatus.APPROVED], total),
        rejection_rate=_percent(by_status[ApplicationStatus.REJECTED], total),
    )


def list_applications(
    db: Session,
    page: int = 1,
    search: Optional[str] = None,
    status: Optional[str] = None,
    page_size: Optional[int] = None,
) -> ApplicationPage:
    page_size = page_size or settings.ADMIN_PAGE_SIZE
    search = (search or "").strip()
    status = (status or "").strip().lower()

    query = db.query(Application)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Application.first_name.ilike(pattern),
            Application.last_name.ilike(pattern),
            Application.email.ilike(pattern),
            Application.phone.ilike(pattern),
            Application.startup_name.ilike(pattern),
            Application.reference_number.ilike(pattern),
        ))
    if status:
        query = query.filter(Application.status == status)

    total = query.count()
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(1, page or 1), total_pages)

    rows = (
        query.order_by(Application.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return ApplicationPage(
        applications=[ApplicationListItem.model_validate(row) for row in rows],
        total_applications=total,
        current_page=page,
        total_pages=total_pages,
        page_size=page_size,
        search=search,
        status_filter=status,
    )


def get_application_detail(db: Session, application_id) -> Application:
    return get_owned_application(db, application_id)


def update_status(db: Session, application_id, new_status: str, notes: Optional[str] = None) -> Application:
    """Move an application forward: submitted -> reviewing -> approved | rejected."""
    new_status = (new_status or "").strip().lower()
    if new_status not in ApplicationStatus.ALL:
        raise ValidationError.single("status", "Invalid status")

    application = get_owned_application(db, application_id)
    current = application.status
    # draft -> submitted only happens when the applicant completes step nine
    allowed = () if current == ApplicationStatus.DRAFT else ApplicationStatus.TRANSITIONS.get(current, ())
    if new_status not in allowed:
        raise Conflict.on_field("status", f"Cannot change status from {current} to {new_status}")

    application.status = new_status
    application.updated_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating status of {application.reference_number}: {str(e)}")
        raise PortalError("Error updating status")
    db.refresh(application)

    logger.info(
        f"Application {application.reference_number} moved {current} -> {new_status}"
        + (f" ({notes})" if notes else "")
    )
    return application


# ---------------- Admin accounts ----------------

def create_admin(db: Session, data: AdminCreate) -> Admin:
    if db.query(Admin.id).filter(Admin.email == data.email).first():
        raise Conflict.on_field("email", "Email already exists")

    admin = Admin(
        full_name=data.full_name,
        email=data.email,
        hashed_password=hash_password(data.password),
        role=data.role,
        is_active=data.is_active,
    )
    db.add(admin)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating admin {data.email}: {str(e)}")
        raise PortalError("An error occurred while creating admin")
    db.refresh(admin)
    logger.info(f"Admin created: {admin.email} ({admin.role})")
    return admin


def authenticate_admin(db: Session, email: str, password: str) -> Admin:
    if not email or not password:
        raise AuthenticationFailed("Email and password are required")

    admin = db.query(Admin).filter(Admin.email == email.strip().lower()).first()
    if admin is None or not verify_password(password, admin.hashed_password):
        logger.warning(f"Failed admin login for {email}")
        raise AuthenticationFailed("Invalid email or password")
    if not admin.is_active:
        raise AuthenticationFailed("Account is inactive")

    admin.last_login = utcnow()
    db.commit()
    return admin


def list_admins(db: Session) -> List[Admin]:
    return db.query(Admin).order_by(Admin.created_at.desc()).all()


def get_admin(db: Session, admin_id: str) -> Admin:
    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if admin is None:
        raise NotFound("Admin not found")
    return admin
