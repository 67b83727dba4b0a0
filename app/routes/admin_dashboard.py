from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
import logging

from app.auth.dependencies import Identity, get_current_admin
from app.database import get_db
from app.schemas.application import (
    ApplicationPage,
    ApplicationResponse,
    ApplicationStats,
    StatusUpdateRequest,
)
from app.services import admin_service, export_service, pdf_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin Dashboard"]
)

logger = logging.getLogger(__name__)


def _attachment(content: bytes, media_type: str, file_name: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/dashboard", response_model=ApplicationStats)
def dashboard(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    return admin_service.application_stats(db)


@router.get("/applications", response_model=ApplicationPage)
def list_applications(
    page: int = Query(1),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    return admin_service.list_applications(db, page=page, search=search, status=status)


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def application_detail(
    application_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    return admin_service.get_application_detail(db, application_id)


@router.put("/applications/{application_id}/status")
def update_status(
    application_id: UUID,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    application = admin_service.update_status(db, application_id, data.status, data.notes)
    logger.info(f"{identity.email} set {application.reference_number} to {application.status}")
    return {
        "success": True,
        "message": "Status updated successfully",
        "new_status": application.status,
    }


@router.get("/applications/{application_id}/download")
def download_application(
    application_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    application = admin_service.get_application_detail(db, application_id)
    content = pdf_service.generate_application_pdf(application)
    return _attachment(content, "application/pdf", pdf_service.application_pdf_filename(application))


@router.get("/export")
def export_applications(
    format: str = Query("csv"),
    status: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_admin),
):
    export = export_service.export_applications(db, format, status, start_date, end_date)
    return _attachment(export.content, export.media_type, export.file_name)
