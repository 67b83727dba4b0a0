from pydantic import BaseModel, EmailStr


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class ResendVerificationResponse(BaseModel):
    success: bool = True
    message: str = "If an unverified application exists for this email, a new verification link has been sent"
