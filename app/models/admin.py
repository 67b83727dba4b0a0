# app/models/admin.py
from sqlalchemy import Column, String, Boolean, DateTime
from app.database import Base
from app.utils.timeutils import utcnow
import uuid


class AdminRole:
    SUPER = "super"
    PORTAL = "portal"

    ALL = (SUPER, PORTAL)


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(String(20), default=AdminRole.PORTAL, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_login = Column(DateTime, nullable=True)

    @property
    def is_superuser(self) -> bool:
        return self.role == AdminRole.SUPER
