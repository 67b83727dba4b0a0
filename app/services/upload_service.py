# app/services/upload_service.py
import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.auth.dependencies import Identity
from app.config import settings
from app.exceptions import Conflict, ValidationError
from app.services.application_service import get_owned_application
from app.services.storage import LocalStorage, StoredFile, get_storage

logger = logging.getLogger(__name__)

# registration certificate is "cac", tax identification is "tin"
DOCUMENT_FIELDS = ("pitch_deck", "cac", "tin", "others")
PDF_CONTENT_TYPES = ("application/pdf", "application/x-pdf")
PDF_MAGIC = b"%PDF-"
CHUNK_SIZE = 64 * 1024


def _reject(message: str, field: str = "file"):
    logger.warning(f"Upload rejected: {message}")
    raise ValidationError({field: [message]}, message)


def _too_large_message() -> str:
    return f"File size must be less than {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    data = bytearray()
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > limit:
            _reject(_too_large_message())
    return bytes(data)


async def upload_document(
    db: Session,
    application_id,
    field_name: str,
    file: Optional[UploadFile],
    identity: Optional[Identity] = None,
    storage: Optional[LocalStorage] = None,
) -> StoredFile:
    """Validate one PDF for an application and store it. Does not touch the record."""
    if field_name not in DOCUMENT_FIELDS:
        _reject("Invalid document type", field="field_name")

    application = get_owned_application(db, application_id, identity)
    if not application.is_editable:
        raise Conflict.on_field("status", "Application has already been submitted and can no longer be edited")

    if file is None or not file.filename:
        _reject("No file uploaded")
    if file.size is not None and file.size == 0:
        _reject("No file uploaded")
    if not file.filename.lower().endswith(".pdf"):
        _reject("Only PDF files are allowed")
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in PDF_CONTENT_TYPES:
        _reject("Only PDF files are allowed")
    if file.size is not None and file.size > settings.MAX_UPLOAD_SIZE:
        _reject(_too_large_message())

    data = await _read_limited(file, settings.MAX_UPLOAD_SIZE)
    if not data:
        _reject("No file uploaded")
    if not data.startswith(PDF_MAGIC):
        _reject("File content is not a valid PDF")

    storage = storage or get_storage()
    stored = storage.store(data, field_name, f"{application.id}_{field_name}")
    logger.info(f"Uploaded {field_name} for application {application.reference_number}")
    return stored
