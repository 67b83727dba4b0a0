"""Tests for document uploads and local storage."""
import io
import uuid

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.auth.dependencies import APPLICANT_ROLE, Identity
from app.config import settings
from app.exceptions import Conflict, NotFound, StorageFailure, ValidationError
from app.models.application import ApplicationStatus
from app.services import upload_service
from app.services.storage import LocalStorage

from conftest import PDF_BYTES


def make_upload(data: bytes = PDF_BYTES, filename: str = "deck.pdf", content_type: str = "application/pdf", size=None):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if size is None else size,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
async def test_upload_stores_pdf_and_returns_absolute_url(db, application, identity, upload_dir):
    stored = await upload_service.upload_document(db, application.id, "pitch_deck", make_upload(), identity)

    assert stored.file_name == f"{application.id}_pitch_deck.pdf"
    assert stored.url == f"{settings.PUBLIC_BASE_URL}/uploads/pitch_deck/{stored.file_name}"
    assert (upload_dir / "pitch_deck" / stored.file_name).read_bytes() == PDF_BYTES


@pytest.mark.asyncio
async def test_second_upload_gets_a_new_name(db, application, identity, upload_dir):
    first = await upload_service.upload_document(db, application.id, "cac", make_upload(), identity)
    second = await upload_service.upload_document(db, application.id, "cac", make_upload(), identity)

    assert first.file_name == f"{application.id}_cac.pdf"
    assert second.file_name == f"{application.id}_cac_1.pdf"
    assert (upload_dir / "cac" / first.file_name).exists()


@pytest.mark.asyncio
async def test_upload_does_not_change_application(db, application, identity, upload_dir):
    await upload_service.upload_document(db, application.id, "tin", make_upload(), identity)

    db.expire_all()
    assert application.tin_url is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "upload, message",
    [
        (lambda: make_upload(data=b""), "No file uploaded"),
        (lambda: make_upload(filename="deck.docx"), "Only PDF files are allowed"),
        (lambda: make_upload(content_type="image/png"), "Only PDF files are allowed"),
        (lambda: make_upload(data=b"GIF89a not a pdf"), "File content is not a valid PDF"),
    ],
)
async def test_upload_rejections(db, application, identity, upload_dir, upload, message):
    with pytest.raises(ValidationError) as exc:
        await upload_service.upload_document(db, application.id, "pitch_deck", upload(), identity)

    assert exc.value.errors == {"file": [message]}
    assert not (upload_dir / "pitch_deck").exists()


@pytest.mark.asyncio
async def test_upload_size_limit(db, application, identity, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 1024 * 1024)
    big = PDF_BYTES + b"0" * (1024 * 1024)

    with pytest.raises(ValidationError) as exc:
        await upload_service.upload_document(db, application.id, "pitch_deck", make_upload(data=big), identity)
    assert exc.value.errors == {"file": ["File size must be less than 1MB"]}

    # a client that under-declares the size is still stopped while reading
    with pytest.raises(ValidationError):
        await upload_service.upload_document(
            db, application.id, "pitch_deck", make_upload(data=big, size=10), identity
        )


@pytest.mark.asyncio
async def test_upload_accepts_x_pdf_content_type(db, application, identity, upload_dir):
    stored = await upload_service.upload_document(
        db, application.id, "others", make_upload(content_type="application/x-pdf"), identity
    )
    assert stored.file_name.endswith(".pdf")


@pytest.mark.asyncio
async def test_upload_unknown_field(db, application, identity, upload_dir):
    with pytest.raises(ValidationError) as exc:
        await upload_service.upload_document(db, application.id, "passport", make_upload(), identity)
    assert "field_name" in exc.value.errors


@pytest.mark.asyncio
async def test_upload_for_someone_elses_application(db, application, upload_dir):
    stranger = Identity(subject=str(uuid.uuid4()), email="x@example.com", role=APPLICANT_ROLE)

    with pytest.raises(NotFound):
        await upload_service.upload_document(db, application.id, "pitch_deck", make_upload(), stranger)


@pytest.mark.asyncio
async def test_upload_after_submission(db, application, identity, upload_dir):
    application.status = ApplicationStatus.SUBMITTED
    db.commit()

    with pytest.raises(Conflict):
        await upload_service.upload_document(db, application.id, "pitch_deck", make_upload(), identity)


def test_storage_write_failure(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where a directory should be")
    storage = LocalStorage(root=str(blocker), base_url="http://testserver")

    with pytest.raises(StorageFailure):
        storage.store(PDF_BYTES, "pitch_deck", "abc_pitch_deck")


def test_storage_falls_back_to_timestamp(tmp_path, monkeypatch):
    monkeypatch.setattr("app.services.storage.MAX_NAME_ATTEMPTS", 2)
    storage = LocalStorage(root=str(tmp_path), base_url="http://testserver")

    names = [storage.store(PDF_BYTES, "cac", "abc_cac").file_name for _ in range(4)]

    assert names[:3] == ["abc_cac.pdf", "abc_cac_1.pdf", "abc_cac_2.pdf"]
    assert names[3].startswith("abc_cac_") and names[3] not in names[:3]
