# app/models/__init__.py

from .admin import Admin, AdminRole
from .application import Application, ApplicationStatus, SocialMedia
from .email_verification import EmailVerificationToken

__all__ = ["Admin", "AdminRole", "Application", "ApplicationStatus", "SocialMedia", "EmailVerificationToken"]
