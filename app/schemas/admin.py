import re

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from app.models.admin import AdminRole


class AdminCreate(BaseModel):
    full_name: Optional[str] = None
    email: EmailStr
    password: str
    role: str = AdminRole.PORTAL
    is_active: bool = True

    model_config = ConfigDict(title="AdminCreate")

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def strong_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", v) or not re.search(r"[a-z]", v) or not re.search(r"[0-9]", v):
            raise ValueError("Password must contain an upper-case letter, a lower-case letter and a digit")
        return v

    @field_validator('role')
    @classmethod
    def known_role(cls, v):
        if v not in AdminRole.ALL:
            raise ValueError("Role must be one of: " + ", ".join(AdminRole.ALL))
        return v


class AdminLogin(BaseModel):
    email: str
    password: str

    model_config = ConfigDict(title="AdminLogin")


class AdminResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: str
    role: str
    is_superuser: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(title="AdminResponse", from_attributes=True)
