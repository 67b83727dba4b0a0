# app/routes/email_verification.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.schemas.email_verification import ResendVerificationRequest, ResendVerificationResponse
from app.services import application_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Email Verification"])


@router.get("/verify-email")
def verify_email(token: str = Query(""), db: Session = Depends(get_db)):
    application = application_service.verify_email(db, token)
    return {
        "success": True,
        "message": "Email Verified. Kindly login to continue",
        "email": application.email,
        "redirect_url": "/login",
    }


@router.post("/api/application/resend-verification", response_model=ResendVerificationResponse)
async def resend_verification(
    data: ResendVerificationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    await application_service.resend_verification(db, data.email, base_url=str(request.base_url).rstrip("/"))
    return ResendVerificationResponse()
