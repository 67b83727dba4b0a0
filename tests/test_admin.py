"""Tests for admin aggregation, status changes, export and admin accounts."""
import csv
import io
import json
import uuid
from datetime import date, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import AuthenticationFailed, Conflict, NotFound, ValidationError
from app.models.admin import AdminRole
from app.models.application import Application, ApplicationStatus
from app.schemas.admin import AdminCreate
from app.services import admin_service, export_service, pdf_service
from app.utils.reference import generate_reference_number
from app.utils.timeutils import utcnow

from conftest import PASSWORD, make_admin


def add_application(db, first_name="Ada", gender="female", status=ApplicationStatus.SUBMITTED,
                    startup_name=None, created_at=None, email=None):
    record = Application(
        reference_number=generate_reference_number(),
        first_name=first_name,
        last_name="Test",
        email=email or f"{first_name.lower()}-{uuid.uuid4().hex[:6]}@example.com",
        phone="08031234567",
        gender=gender,
        dob=date(1990, 1, 1),
        status=status,
        startup_name=startup_name,
        created_at=created_at or utcnow(),
    )
    db.add(record)
    db.commit()
    return record


# ---------------- Stats ----------------

def test_stats_on_empty_database(db):
    stats = admin_service.application_stats(db)

    assert stats.total == 0
    assert stats.approval_rate == 0.0
    assert stats.status_percentages[ApplicationStatus.DRAFT] == 0.0


def test_stats_counts_and_percentages(db):
    add_application(db, gender="male", status=ApplicationStatus.APPROVED)
    add_application(db, gender="female", status=ApplicationStatus.SUBMITTED)
    add_application(db, gender=None, status=ApplicationStatus.REVIEWING)
    add_application(db, gender="", status=ApplicationStatus.REJECTED,
                    created_at=utcnow() - timedelta(days=3))
    add_application(db, gender="other", status=ApplicationStatus.DRAFT)
    add_application(db, gender="female", status=ApplicationStatus.SUBMITTED)

    stats = admin_service.application_stats(db)

    assert stats.total == 6
    assert stats.today == 5
    assert stats.awaiting_review == 3
    assert stats.by_gender == {"male": 1, "female": 2, "other": 3}
    assert stats.gender_percentages == {"male": 16.7, "female": 33.3, "other": 50.0}
    assert stats.by_status[ApplicationStatus.SUBMITTED] == 2
    assert stats.status_percentages[ApplicationStatus.SUBMITTED] == 33.3
    assert stats.approval_rate == 16.7
    assert stats.rejection_rate == 16.7


# ---------------- Listing ----------------

def test_list_is_paginated_newest_first(db):
    now = utcnow()
    for i in range(12):
        add_application(db, first_name=f"Applicant{i:02d}", created_at=now - timedelta(minutes=i))

    first = admin_service.list_applications(db, page=1)
    second = admin_service.list_applications(db, page=2)

    assert first.total_applications == 12
    assert first.total_pages == 2
    assert len(first.applications) == 10
    assert first.applications[0].first_name == "Applicant00"
    assert [a.first_name for a in second.applications] == ["Applicant10", "Applicant11"]


def test_list_clamps_page(db):
    add_application(db)

    assert admin_service.list_applications(db, page=99).current_page == 1
    assert admin_service.list_applications(db, page=-3).current_page == 1


def test_list_search_is_case_insensitive(db):
    add_application(db, first_name="Chidi", startup_name="FarmFresh")
    target = add_application(db, first_name="Ngozi", startup_name="AgroLink")

    by_startup = admin_service.list_applications(db, search="agrol")
    by_reference = admin_service.list_applications(db, search=target.reference_number.lower())

    assert [a.first_name for a in by_startup.applications] == ["Ngozi"]
    assert [a.id for a in by_reference.applications] == [target.id]


def test_list_filters_by_status(db):
    add_application(db, status=ApplicationStatus.DRAFT)
    add_application(db, status=ApplicationStatus.APPROVED)

    page = admin_service.list_applications(db, status="approved")
    assert page.total_applications == 1
    assert page.applications[0].status == ApplicationStatus.APPROVED


# ---------------- Status transitions ----------------

def test_status_moves_forward(db):
    record = add_application(db, status=ApplicationStatus.SUBMITTED)

    admin_service.update_status(db, record.id, "reviewing")
    updated = admin_service.update_status(db, record.id, "approved")

    assert updated.status == ApplicationStatus.APPROVED


@pytest.mark.parametrize(
    "current, target",
    [
        (ApplicationStatus.DRAFT, ApplicationStatus.SUBMITTED),
        (ApplicationStatus.SUBMITTED, ApplicationStatus.APPROVED),
        (ApplicationStatus.REVIEWING, ApplicationStatus.SUBMITTED),
        (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED),
    ],
)
def test_status_rejects_other_moves(db, current, target):
    record = add_application(db, status=current)

    with pytest.raises(Conflict):
        admin_service.update_status(db, record.id, target)
    db.expire_all()
    assert record.status == current


def test_status_unknown_value_and_application(db):
    record = add_application(db)

    with pytest.raises(ValidationError):
        admin_service.update_status(db, record.id, "archived")
    with pytest.raises(NotFound):
        admin_service.update_status(db, uuid.uuid4(), "reviewing")


# ---------------- Export ----------------

def test_export_csv_has_every_section(db):
    add_application(db, first_name="Older", created_at=utcnow() - timedelta(days=1))
    add_application(db, first_name="Newer", startup_name="AgroLink")

    export = export_service.export_applications(db, "csv")

    assert export.media_type == "text/csv"
    assert export.file_name.endswith(".csv")
    rows = list(csv.reader(io.StringIO(export.content.decode("utf-8-sig"))))
    header = rows[0]
    assert header[:3] == ["Reference Number", "Status", "First Name"]
    assert "LinkedIn" in header and "Agree To Heifer ToS" in header
    assert len(header) == len(export_service.EXPORT_COLUMNS)
    assert [row[header.index("First Name")] for row in rows[1:]] == ["Newer", "Older"]


def test_export_json_with_filters(db):
    add_application(db, first_name="Kept", status=ApplicationStatus.APPROVED)
    add_application(db, first_name="Skipped", status=ApplicationStatus.DRAFT)

    export = export_service.export_applications(db, "JSON", status="approved")

    records = json.loads(export.content)
    assert export.media_type == "application/json"
    assert [r["first_name"] for r in records] == ["Kept"]
    assert set(records[0]["social_media"]) == {"linkedin", "x", "instagram", "facebook"}


def test_export_unknown_format(db):
    with pytest.raises(ValidationError) as exc:
        export_service.export_applications(db, "xlsx")
    assert exc.value.errors == {"format": ["Invalid format"]}


def test_application_pdf_summary(db):
    record = add_application(db, startup_name="AgroLink & Sons <Ltd>")

    content = pdf_service.generate_application_pdf(record)

    assert content.startswith(b"%PDF-")
    assert pdf_service.application_pdf_filename(record).startswith(f"application_{record.reference_number}_")


# ---------------- Admin accounts ----------------

def test_create_and_authenticate_admin(db):
    admin = admin_service.create_admin(
        db, AdminCreate(full_name="Reviewer", email="Reviewer@Example.com", password=PASSWORD)
    )

    assert admin.email == "reviewer@example.com"
    assert admin.role == AdminRole.PORTAL
    assert admin.hashed_password != PASSWORD
    assert admin_service.authenticate_admin(db, "reviewer@example.com", PASSWORD).id == admin.id

    with pytest.raises(AuthenticationFailed):
        admin_service.authenticate_admin(db, "reviewer@example.com", "wrong-password")


def test_create_admin_duplicate_email(db):
    make_admin(db, email="admin@example.com")

    with pytest.raises(Conflict):
        admin_service.create_admin(db, AdminCreate(email="admin@example.com", password=PASSWORD))


@pytest.mark.parametrize("password", ["Short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
def test_admin_password_policy(password):
    with pytest.raises(PydanticValidationError):
        AdminCreate(email="new@example.com", password=password)


def test_inactive_admin_cannot_log_in(db):
    admin = make_admin(db)
    admin.is_active = False
    db.commit()

    with pytest.raises(AuthenticationFailed):
        admin_service.authenticate_admin(db, admin.email, PASSWORD)
