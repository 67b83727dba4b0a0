"""
Test configuration: in-memory SQLite, captured email, uploads under a temp dir.
"""
import os
import tempfile

# must be set before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["COOKIE_SECURE"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="portal-uploads-"))
os.environ["BREVO_API_KEY"] = ""
os.environ["EMAIL_HOST"] = ""

from datetime import date
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from app.auth.dependencies import APPLICANT_ROLE, Identity
from app.config import settings
from app.database import Base, SessionLocal, engine, get_db
from app.models.admin import Admin, AdminRole
from app.models.application import Application, ApplicationStatus
from app.services import email_service
from app.utils.hash import hash_password
from app.utils.reference import generate_reference_number

PASSWORD = "Str0ngPassw0rd"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<<>>\n%%EOF\n"


def step_payloads() -> Dict[int, Dict[str, Any]]:
    """One valid payload per step."""
    return {
        1: {
            "first_name": "Amaka",
            "last_name": "Obi",
            "email": "amaka@example.com",
            "password": PASSWORD,
            "phone": "+234 803 123 4567",
            "gender": "female",
            "dob": "1994-03-12",
            "marketing_consent": True,
        },
        2: {
            "startup_name": "AgroLink",
            "url": "https://agrolink.ng",
            "description": "Marketplace connecting smallholder farmers to buyers",
            "locations": "Lagos, Kaduna",
            "legally_registered": True,
            "year_of_incorporation": 2021,
            "cac_reg_number": "RC1234567",
            "social_media": {"linkedin": "https://linkedin.com/company/agrolink"},
        },
        3: {
            "farmer_challenges": "Post-harvest losses and poor market access",
            "solution_description": "Cold-chain logistics with a buyer marketplace",
            "product_stage": "Growth",
            "product_link": "https://app.agrolink.ng",
            "innovation_highlight": "Solar-powered cold rooms",
            "primary_users": "Smallholder farmers",
            "no_of_active_users": 1200,
        },
        4: {
            "business_model": "Commission on each sale",
            "is_revenue_generation": True,
            "go_to_market_strategy": "Cooperative partnerships",
            "no_of_customers": 340,
            "average_cac": "12.50",
            "competitors": "Traditional middlemen",
        },
        5: {
            "farmers_served_previous_year": 800,
            "farmers_served_total": 2500,
            "impact_on_farmers": "Incomes up 30%",
            "sustainability_promotion": "Less food waste",
            "impact_evidence": "Partner survey 2024",
        },
        6: {
            "gender_inclusion": "60% of onboarded farmers are women",
            "jobs_created": 25,
            "environmental_sustainability": "Solar power",
            "data_protection_measures": "Encrypted storage",
        },
        7: {
            "no_of_founders": 2,
            "no_of_employees": 12,
            "founders_details": "Agronomist and software engineer",
            "team_skill": "Agriculture, logistics, software",
        },
        8: {
            "milestone": "Expand to three new states",
            "biggest_risk_facing": "Fuel prices",
            "twelve_month_revenue_projection": "NGN 120m",
            "long_term_vision": "Pan-African cold chain",
        },
        9: {
            "pitch_deck_url": "https://files.example.com/pitch.pdf",
            "cac_url": "https://files.example.com/cac.pdf",
            "tin_url": "https://files.example.com/tin.pdf",
            "agree_to_tos_ayute": True,
            "agree_to_tos_heifer": True,
        },
    }


@pytest.fixture
def payloads():
    return step_payloads()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def outbox(monkeypatch) -> List[Dict[str, str]]:
    """Captures every email instead of sending it."""
    sent: List[Dict[str, str]] = []

    async def fake_send_email(to_email, to_name, subject, html):
        sent.append({"to": to_email, "name": to_name, "subject": subject, "html": html})
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def application(db) -> Application:
    """A verified draft application that has completed step one."""
    data = step_payloads()[1]
    record = Application(
        reference_number=generate_reference_number(),
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=data["email"],
        password=hash_password(PASSWORD),
        phone=data["phone"],
        gender=data["gender"],
        dob=date(1994, 3, 12),
        is_verified=True,
        application_step=2,
        status=ApplicationStatus.DRAFT,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def identity(application) -> Identity:
    return Identity(subject=str(application.id), email=application.email, role=APPLICANT_ROLE)


def make_admin(db, email="admin@example.com", role=AdminRole.SUPER, password=PASSWORD) -> Admin:
    admin = Admin(full_name="Portal Admin", email=email, hashed_password=hash_password(password), role=role)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def client(db, outbox, upload_dir):
    from app.main import app

    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
