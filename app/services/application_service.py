# app/services/application_service.py
"""
Application lifecycle: step one creates the record, steps two to nine fill it in,
step nine submits it. Verification-link handling for applicants lives here too.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.dependencies import Identity
from app.config import settings
from app.exceptions import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    PortalError,
    ValidationError,
)
from app.models.application import Application, ApplicationStatus
from app.models.email_verification import EmailVerificationToken
from app.schemas.application import ApplicationResponse, StepResult
from app.services import email_service, verification_service
from app.services.application_steps import (
    FIRST_STEP,
    LAST_STEP,
    STEP_RULES,
    step_route,
    success_route,
    validate_step,
)
from app.utils.hash import hash_password, verify_password
from app.utils.reference import generate_reference_number
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "An application with this email already exists"
INVALID_TOKEN_MESSAGE = "Invalid or expired verification link"
USED_TOKEN_MESSAGE = "This verification link has already been used"


def _parse_id(application_id) -> Optional[uuid.UUID]:
    if isinstance(application_id, uuid.UUID):
        return application_id
    try:
        return uuid.UUID(str(application_id))
    except (TypeError, ValueError):
        return None


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while {action}: {str(e)}")
        raise PortalError()


def _verification_url(token: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
    return f"{base}/verify-email?token={token}"


def get_owned_application(db: Session, application_id, identity: Optional[Identity] = None) -> Application:
    """
    Load an application. With an applicant identity, an application owned by someone
    else is reported exactly like a missing one.
    """
    parsed = _parse_id(application_id)
    application = db.get(Application, parsed) if parsed else None
    if application is None:
        raise NotFound("Application not found")
    if identity is not None and not identity.is_admin and identity.subject != str(application.id):
        logger.warning(f"Applicant {identity.subject} tried to access application {application_id}")
        raise NotFound("Application not found")
    return application


def get_application(db: Session, application_id, identity: Optional[Identity] = None) -> ApplicationResponse:
    return ApplicationResponse.model_validate(get_owned_application(db, application_id, identity))


def resume_route(application: Application) -> str:
    """Page an applicant lands on after logging in."""
    if application.status != ApplicationStatus.DRAFT:
        return success_route(application.id)
    return step_route(application.application_step, application.id)


async def create_application(db: Session, data: Dict[str, Any], base_url: Optional[str] = None) -> StepResult:
    """Step one: create the draft record and send the verification link."""
    payload = validate_step(FIRST_STEP, data)

    if db.query(Application.id).filter(Application.email == payload.email).first():
        raise Conflict.on_field("email", DUPLICATE_EMAIL_MESSAGE)

    application = Application(
        reference_number=generate_reference_number(),
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=hash_password(payload.password),
        phone=payload.phone,
        gender=payload.gender,
        dob=payload.dob,
        marketing_consent=payload.marketing_consent,
        is_verified=False,
        application_step=FIRST_STEP + 1,
        status=ApplicationStatus.DRAFT,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict.on_field("email", DUPLICATE_EMAIL_MESSAGE)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while creating application for {payload.email}: {str(e)}")
        raise PortalError("An error occurred while saving your information. Please try again.")
    db.refresh(application)
    logger.info(f"Application {application.reference_number} created for {application.email}")

    token = verification_service.issue_token(db, application.id)
    sent = await email_service.send_verification_email(
        application.email, application.first_name, _verification_url(token, base_url)
    )
    if not sent:
        logger.error(f"Verification email for {application.reference_number} was not delivered")

    return StepResult(
        message=STEP_RULES[FIRST_STEP].message,
        application_id=application.id,
        step=FIRST_STEP,
        next_step=FIRST_STEP + 1,
        redirect_url=f"/verify?email={application.email}",
    )


async def submit_step(
    db: Session,
    step: int,
    application_id,
    data: Optional[Dict[str, Any]],
    identity: Optional[Identity] = None,
) -> StepResult:
    """Steps two to nine. Nothing is written unless the whole payload is accepted."""
    if step == FIRST_STEP or step not in STEP_RULES:
        raise ValidationError.single("step", f"Unknown application step: {step}")

    application = get_owned_application(db, application_id, identity)
    if not application.is_editable:
        raise Conflict.on_field("status", "Application has already been submitted and can no longer be edited")

    rule = STEP_RULES[step]
    payload = validate_step(step, data)

    rule.apply(application, payload)
    application.application_step = max(application.application_step or FIRST_STEP, step)
    application.updated_at = utcnow()
    _commit(db, f"saving step {step} of {application.reference_number}")
    logger.info(f"Application {application.reference_number} saved step {step}")

    if step == LAST_STEP:
        sent = await email_service.send_submission_email(
            application.email, application.first_name, application.reference_number
        )
        if not sent:
            logger.error(f"Submission email for {application.reference_number} was not delivered")
        return StepResult(
            message=rule.message,
            application_id=application.id,
            step=step,
            next_step=None,
            redirect_url=success_route(application.id),
        )

    return StepResult(
        message=rule.message,
        application_id=application.id,
        step=step,
        next_step=step + 1,
        redirect_url=step_route(step + 1, application.id),
    )


def verify_email(db: Session, token: Optional[str]) -> Application:
    """Consume a verification link and mark its owner verified in one commit."""
    if not verification_service.validate_token(db, token):
        record = verification_service.lookup_token(db, token)
        if record is not None and record.is_used:
            raise Conflict.on_field("token", USED_TOKEN_MESSAGE)
        raise ValidationError.single("token", INVALID_TOKEN_MESSAGE)

    record: EmailVerificationToken = verification_service.lookup_token(db, token)
    application = get_owned_application(db, record.user_id)

    if not verification_service.consume_token(db, token, commit=False):
        db.rollback()
        raise Conflict.on_field("token", USED_TOKEN_MESSAGE)

    application.is_verified = True
    _commit(db, f"verifying {application.email}")
    logger.info(f"Email verified for application {application.reference_number}")
    return application


async def resend_verification(db: Session, email: str, base_url: Optional[str] = None) -> bool:
    """
    Issue a fresh verification link. Unknown or already verified addresses are
    answered the same way so the endpoint does not reveal which emails applied.
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError.single("email", "Email is required")

    application = db.query(Application).filter(Application.email == email).first()
    if application is None or application.is_verified:
        logger.info(f"Verification resend skipped for {email}")
        return False

    token = verification_service.issue_token(db, application.id)
    return await email_service.send_verification_email(
        application.email, application.first_name, _verification_url(token, base_url)
    )


def authenticate_applicant(db: Session, email: str, password: str) -> Application:
    if not email or not password:
        raise AuthenticationFailed("Email and password are required")

    application = db.query(Application).filter(Application.email == email.strip().lower()).first()
    if application is None or not verify_password(password, application.password):
        raise AuthenticationFailed("Invalid email or password")
    if not application.is_verified:
        raise AuthenticationFailed("Email not verified. Check your email or contact support")

    application.last_login = utcnow()
    _commit(db, f"recording login for {application.email}")
    return application
