from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
import os

class Settings(BaseSettings):
    # === DATABASE ===
    DATABASE_URL: str = Field(default=os.environ.get("DATABASE_URL", "sqlite:///./portal.db"), description="SQLAlchemy database URL")

    # === JWT AUTH ===
    SECRET_KEY: str = Field(default=os.environ.get("SECRET_KEY", "change-me"), description="Secret key for JWT token signing")
    ALGORITHM: str = Field(default=os.environ.get("ALGORITHM", "HS256"), description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60)), description="Session cookie lifetime in minutes")
    COOKIE_SECURE: bool = Field(default=os.environ.get("COOKIE_SECURE", "True").lower() == "true", description="Send auth cookies over HTTPS only")

    # === PUBLIC URLS ===
    PUBLIC_BASE_URL: str = Field(default=os.environ.get("PUBLIC_BASE_URL", "http://localhost:8000"), description="Absolute base URL used in emails and upload links")
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ],
        description="Allowed CORS origins",
    )

    # === EMAIL (SMTP) ===
    EMAIL_HOST: str = Field(default=os.environ.get("EMAIL_HOST", ""), description="SMTP host")
    EMAIL_PORT: int = Field(default=int(os.environ.get("EMAIL_PORT", 587)), description="SMTP port")
    EMAIL_HOST_USER: str = Field(default=os.environ.get("EMAIL_HOST_USER", ""), description="SMTP username")
    EMAIL_HOST_PASSWORD: str = Field(default=os.environ.get("EMAIL_HOST_PASSWORD", ""), description="SMTP password")
    EMAIL_FROM: str = Field(default=os.environ.get("EMAIL_FROM", ""), description="Email sender address")

    # === EMAIL (BREVO API) ===
    BREVO_API_KEY: str = Field(default=os.environ.get("BREVO_API_KEY", ""), description="Brevo transactional email API key")
    BREVO_SENDER_EMAIL: str = Field(default=os.environ.get("BREVO_SENDER_EMAIL", ""), description="Brevo sender address")
    BREVO_SENDER_NAME: str = Field(default=os.environ.get("BREVO_SENDER_NAME", "AYuTe Africa Challenge Nigeria"), description="Brevo sender display name")

    # === UPLOADS ===
    UPLOAD_DIR: str = Field(default=os.environ.get("UPLOAD_DIR", "uploads"), description="Directory for uploaded documents")
    MAX_UPLOAD_SIZE: int = Field(default=int(os.environ.get("MAX_UPLOAD_SIZE", 10 * 1024 * 1024)), description="Maximum upload size in bytes")

    # === VERIFICATION / ADMIN ===
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = Field(default=int(os.environ.get("VERIFICATION_TOKEN_EXPIRE_HOURS", 24)), description="Email verification link lifetime")
    ADMIN_PAGE_SIZE: int = Field(default=int(os.environ.get("ADMIN_PAGE_SIZE", 10)), description="Rows per page in the admin listing")

    # === DEBUG MODE ===
    DEBUG: bool = Field(default=os.environ.get("DEBUG", "False").lower() == "true", description="Debug mode")

    class Config:
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
