"""HTTP-level tests: sessions, status codes and error bodies."""
import re

from app.models.admin import AdminRole
from app.models.application import Application, ApplicationStatus
from app.utils.jwt_handler import ADMIN_COOKIE, APPLICANT_COOKIE

from conftest import PASSWORD, PDF_BYTES, make_admin


def login_applicant(client, email="amaka@example.com"):
    return client.post("/api/application/login", data={"email": email, "password": PASSWORD})


def login_admin(client, email="admin@example.com"):
    return client.post("/api/admin/login", data={"email": email, "password": PASSWORD})


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["database"]["status"] == "connected"


def test_signup_verify_login_and_submit(client, db, outbox, payloads):
    response = client.post("/api/application/step-one", json=payloads[1])
    assert response.status_code == 200
    body = response.json()
    application_id = body["application_id"]
    assert body["next_step"] == 2

    # not verified yet
    assert login_applicant(client).status_code == 401

    token = re.search(r"token=([A-Za-z0-9_\-]+)", outbox[0]["html"]).group(1)
    verified = client.get("/verify-email", params={"token": token})
    assert verified.status_code == 200
    assert verified.json()["success"] is True

    reused = client.get("/verify-email", params={"token": token})
    assert reused.status_code == 409
    assert reused.json()["errors"]["token"]

    login = login_applicant(client)
    assert login.status_code == 200
    assert APPLICANT_COOKIE in login.cookies
    assert login.json()["redirect_url"] == f"/application/step-two/{application_id}"

    step_names = ["two", "three", "four", "five", "six", "seven", "eight", "nine"]
    for number, name in enumerate(step_names, start=2):
        response = client.post(f"/api/application/step-{name}/{application_id}", json=payloads[number])
        assert response.status_code == 200, response.json()

    assert response.json()["redirect_url"] == f"/application/success/{application_id}"
    record = client.get(f"/api/application/{application_id}").json()
    assert record["status"] == ApplicationStatus.SUBMITTED
    assert record["social_media"]["linkedin"] == payloads[2]["social_media"]["linkedin"]

    locked = client.post(f"/api/application/step-two/{application_id}", json=payloads[2])
    assert locked.status_code == 409


def test_step_validation_error_body(client, application, payloads):
    login_applicant(client)

    response = client.post(
        f"/api/application/step-seven/{application.id}",
        json=dict(payloads[7], no_of_founders=0),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {"no_of_founders": ["Number of founders must be between 1 and 10"]}


def test_step_one_errors(client, payloads):
    invalid = client.post("/api/application/step-one", json={"email": "bad"})
    assert invalid.status_code == 400
    assert "first_name" in invalid.json()["errors"]

    assert client.post("/api/application/step-one", json=payloads[1]).status_code == 200
    duplicate = client.post("/api/application/step-one", json=payloads[1])
    assert duplicate.status_code == 409
    assert "email" in duplicate.json()["errors"]


def test_steps_require_a_session(client, application, payloads):
    response = client.post(f"/api/application/step-two/{application.id}", json=payloads[2])
    assert response.status_code == 401


def test_unknown_step_and_unknown_application(client, application, payloads):
    login_applicant(client)

    assert client.post(f"/api/application/step-ten/{application.id}", json={}).status_code == 404
    missing = client.post(
        "/api/application/step-two/00000000-0000-0000-0000-000000000000", json=payloads[2]
    )
    assert missing.status_code == 404


def test_invalid_verification_token(client):
    response = client.get("/verify-email", params={"token": "nope"})
    assert response.status_code == 400
    assert response.json()["errors"] == {"token": ["Invalid or expired verification link"]}


def test_upload_endpoint(client, application, upload_dir):
    login_applicant(client)

    response = client.post(
        "/api/application/upload-document",
        data={"application_id": str(application.id), "field_name": "pitch_deck"},
        files={"file": ("deck.pdf", PDF_BYTES, "application/pdf")},
    )
    assert response.status_code == 200
    assert response.json()["url"].endswith(f"/uploads/pitch_deck/{application.id}_pitch_deck.pdf")

    rejected = client.post(
        "/api/application/upload-document",
        data={"application_id": str(application.id), "field_name": "pitch_deck"},
        files={"file": ("deck.pdf", b"not a pdf", "application/pdf")},
    )
    assert rejected.status_code == 400


def test_resend_verification_does_not_reveal_accounts(client, outbox):
    response = client.post("/api/application/resend-verification", json={"email": "nobody@example.com"})
    assert response.status_code == 200
    assert outbox == []


def test_admin_dashboard_requires_admin(client, application):
    assert client.get("/api/admin/dashboard").status_code == 401

    # an applicant session is not an admin session
    login_applicant(client)
    assert client.get("/api/admin/dashboard").status_code == 401


def test_admin_flow(client, db, application):
    make_admin(db)
    application.status = ApplicationStatus.SUBMITTED
    db.commit()

    login = login_admin(client)
    assert login.status_code == 200
    assert ADMIN_COOKIE in login.cookies

    stats = client.get("/api/admin/dashboard").json()
    assert stats["total"] == 1
    assert stats["awaiting_review"] == 1

    listing = client.get("/api/admin/applications", params={"search": "amaka"}).json()
    assert listing["total_applications"] == 1

    detail = client.get(f"/api/admin/applications/{application.id}")
    assert detail.json()["reference_number"] == application.reference_number

    moved = client.put(f"/api/admin/applications/{application.id}/status", json={"status": "reviewing"})
    assert moved.status_code == 200
    assert moved.json()["new_status"] == "reviewing"

    backwards = client.put(f"/api/admin/applications/{application.id}/status", json={"status": "submitted"})
    assert backwards.status_code == 409

    csv_export = client.get("/api/admin/export", params={"format": "csv"})
    assert csv_export.status_code == 200
    assert csv_export.headers["content-type"].startswith("text/csv")
    assert "attachment" in csv_export.headers["content-disposition"]

    assert client.get("/api/admin/export", params={"format": "xml"}).status_code == 400

    pdf = client.get(f"/api/admin/applications/{application.id}/download")
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF-")


def test_only_super_admin_creates_admins(client, db):
    make_admin(db, email="portal@example.com", role=AdminRole.PORTAL)
    make_admin(db, email="super@example.com", role=AdminRole.SUPER)
    new_admin = {"email": "new@example.com", "password": PASSWORD}

    login_admin(client, "portal@example.com")
    assert client.post("/api/admin/create", json=new_admin).status_code == 403

    login_admin(client, "super@example.com")
    created = client.post("/api/admin/create", json=new_admin)
    assert created.status_code == 200
    assert created.json()["admin"]["email"] == "new@example.com"

    weak = client.post("/api/admin/create", json={"email": "weak@example.com", "password": "weak"})
    assert weak.status_code == 400
    assert "password" in weak.json()["errors"]

    admins = client.get("/api/admin/admins").json()
    assert {a["email"] for a in admins} == {"portal@example.com", "super@example.com", "new@example.com"}


def test_admin_logout_clears_session(client, db):
    make_admin(db)
    login_admin(client)
    assert client.get("/api/admin/dashboard").status_code == 200

    client.post("/api/admin/logout")
    assert client.get("/api/admin/dashboard").status_code == 401
