# app/services/verification_service.py
"""
Email verification tokens.

A token is a single-use capability for one owner. Issuing a new token removes the
owner's unused ones, so at most one live token exists per owner. Consumption is a
single conditional UPDATE: of two concurrent consumers exactly one sees a changed row.
"""
import logging
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.config import settings
from app.models.email_verification import EmailVerificationToken
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


def _new_token() -> str:
    # 32 random bytes, url-safe, well under the 100 char column limit
    return secrets.token_urlsafe(32)


def issue_token(db: Session, owner_id) -> str:
    owner_id = str(owner_id)
    now = utcnow()

    db.query(EmailVerificationToken).filter(
        EmailVerificationToken.user_id == owner_id,
        EmailVerificationToken.is_used.is_(False),
    ).delete(synchronize_session=False)

    record = EmailVerificationToken(
        user_id=owner_id,
        token=_new_token(),
        created_at=now,
        expires_at=now + timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS),
        is_used=False,
    )
    db.add(record)
    db.commit()

    logger.info(f"Issued verification token for owner {owner_id}")
    return record.token


def validate_token(db: Session, token: Optional[str]) -> bool:
    """True iff the token exists, is unused and has not expired. Never writes."""
    if not token:
        return False
    record = lookup_token(db, token)
    if record is None or record.is_used:
        return False
    return record.expires_at > utcnow()


def consume_token(db: Session, token: Optional[str], commit: bool = True) -> bool:
    """
    Mark the token used. Succeeds iff this call flipped it from unused to used.
    Expiry is checked by validate_token, not here.
    """
    if not token:
        return False
    result = db.execute(
        update(EmailVerificationToken)
        .where(
            EmailVerificationToken.token == token,
            EmailVerificationToken.is_used.is_(False),
        )
        .values(is_used=True, used_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if commit:
        db.commit()
    return result.rowcount == 1


def lookup_token(db: Session, token: Optional[str]) -> Optional[EmailVerificationToken]:
    if not token:
        return None
    return db.query(EmailVerificationToken).filter(EmailVerificationToken.token == token).first()
