# app/models/email_verification.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from app.database import Base
from app.utils.timeutils import utcnow

class EmailVerificationToken(Base):
    __tablename__ = "email_verification_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # one live token per owner is enforced at issuance, not by a constraint
    user_id = Column(String(64), nullable=False, index=True)
    token = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    used_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<EmailVerificationToken user_id={self.user_id} used={self.is_used}>"
