# app/routes/application.py
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile
from sqlalchemy.orm import Session
import logging

from app.auth.dependencies import APPLICANT_ROLE, Identity, get_current_applicant
from app.database import get_db
from app.exceptions import NotFound
from app.schemas.application import ApplicationResponse, StepResult, UploadResult
from app.services import application_service, upload_service
from app.services.application_steps import FIRST_STEP, STEP_NAMES
from app.utils.jwt_handler import APPLICANT_COOKIE, clear_auth_cookie, create_access_token, set_auth_cookie

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/application",
    tags=["Application Form"]
)

STEP_NUMBERS = {name: number for number, name in STEP_NAMES.items() if number != FIRST_STEP}


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.post("/step-one", response_model=StepResult)
async def step_one(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: Session = Depends(get_db),
):
    return await application_service.create_application(db, payload or {}, base_url=_base_url(request))


@router.post("/login")
def login(
    response: Response,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    application = application_service.authenticate_applicant(db, email, password)
    token = create_access_token({
        "sub": str(application.id),
        "email": application.email,
        "role": APPLICANT_ROLE,
    })
    set_auth_cookie(response, APPLICANT_COOKIE, token)
    logger.info(f"Applicant {application.reference_number} logged in")
    return {
        "success": True,
        "message": "Login successful",
        "application_id": str(application.id),
        "redirect_url": application_service.resume_route(application),
    }


@router.post("/logout")
def logout(response: Response):
    clear_auth_cookie(response, APPLICANT_COOKIE)
    return {"success": True, "message": "Logged out", "redirect_url": "/login"}


@router.post("/upload-document", response_model=UploadResult)
async def upload_document(
    application_id: UUID = Form(...),
    field_name: str = Form(...),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_applicant),
):
    stored = await upload_service.upload_document(db, application_id, field_name, file, identity=identity)
    return UploadResult(url=stored.url, file_name=stored.file_name)


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_applicant),
):
    return application_service.get_application(db, application_id, identity)


@router.post("/{step_name}/{application_id}", response_model=StepResult)
async def submit_step(
    step_name: str,
    application_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_applicant),
):
    step = STEP_NUMBERS.get(step_name)
    if step is None:
        raise NotFound(f"Unknown step: {step_name}")
    return await application_service.submit_step(db, step, application_id, payload, identity=identity)
