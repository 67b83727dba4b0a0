# app/schemas/__init__.py
from .admin import AdminCreate, AdminLogin, AdminResponse
from .application import (
    StepOneRequest,
    StepTwoRequest,
    StepThreeRequest,
    StepFourRequest,
    StepFiveRequest,
    StepSixRequest,
    StepSevenRequest,
    StepEightRequest,
    StepNineRequest,
    StepResult,
    ApplicationResponse,
    ApplicationListItem,
    ApplicationPage,
    ApplicationStats,
    StatusUpdateRequest,
    UploadResult,
)
from .email_verification import ResendVerificationRequest, ResendVerificationResponse

__all__ = [
    "AdminCreate",
    "AdminLogin",
    "AdminResponse",
    "StepOneRequest",
    "StepTwoRequest",
    "StepThreeRequest",
    "StepFourRequest",
    "StepFiveRequest",
    "StepSixRequest",
    "StepSevenRequest",
    "StepEightRequest",
    "StepNineRequest",
    "StepResult",
    "ApplicationResponse",
    "ApplicationListItem",
    "ApplicationPage",
    "ApplicationStats",
    "StatusUpdateRequest",
    "UploadResult",
    "ResendVerificationRequest",
    "ResendVerificationResponse",
]
