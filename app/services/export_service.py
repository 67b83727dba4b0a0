# app/services/export_service.py
import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.exceptions import ValidationError
from app.models.application import Application
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "csv": "text/csv",
    "json": "application/json",
}


def _attr(name: str) -> Callable[[Application], Any]:
    return lambda app: getattr(app, name)


def _social(name: str) -> Callable[[Application], Any]:
    return lambda app: getattr(app.social_media, name)


# (section title, [(column header, key, getter)])
EXPORT_SECTIONS: List[Tuple[str, List[Tuple[str, str, Callable[[Application], Any]]]]] = [
    ("Application", [
        ("Reference Number", "reference_number", _attr("reference_number")),
        ("Status", "status", _attr("status")),
    ]),
    ("Founder Information", [
        ("First Name", "first_name", _attr("first_name")),
        ("Last Name", "last_name", _attr("last_name")),
        ("Email", "email", _attr("email")),
        ("Phone", "phone", _attr("phone")),
        ("Gender", "gender", _attr("gender")),
        ("Date of Birth", "dob", _attr("dob")),
        ("Is Verified", "is_verified", _attr("is_verified")),
    ]),
    ("Startup Information", [
        ("Startup Name", "startup_name", _attr("startup_name")),
        ("Website URL", "url", _attr("url")),
        ("Description", "description", _attr("description")),
        ("Locations", "locations", _attr("locations")),
        ("Legally Registered", "legally_registered", _attr("legally_registered")),
        ("Year of Incorporation", "year_of_incorporation", _attr("year_of_incorporation")),
        ("CAC Registration Number", "cac_reg_number", _attr("cac_reg_number")),
        ("LinkedIn", "social_media.linkedin", _social("linkedin")),
        ("X (Twitter)", "social_media.x", _social("x")),
        ("Instagram", "social_media.instagram", _social("instagram")),
        ("Facebook", "social_media.facebook", _social("facebook")),
    ]),
    ("Problem & Solution", [
        ("Farmer Challenges", "farmer_challenges", _attr("farmer_challenges")),
        ("Solution Description", "solution_description", _attr("solution_description")),
        ("Product Stage", "product_stage", _attr("product_stage")),
        ("Product Link", "product_link", _attr("product_link")),
        ("Innovation Highlight", "innovation_highlight", _attr("innovation_highlight")),
        ("Primary Users", "primary_users", _attr("primary_users")),
        ("Number of Active Users", "no_of_active_users", _attr("no_of_active_users")),
    ]),
    ("Business Model", [
        ("Business Model", "business_model", _attr("business_model")),
        ("Revenue Generating", "is_revenue_generation", _attr("is_revenue_generation")),
        ("Go To Market Strategy", "go_to_market_strategy", _attr("go_to_market_strategy")),
        ("Number of Customers", "no_of_customers", _attr("no_of_customers")),
        ("Average CAC", "average_cac", _attr("average_cac")),
        ("Competitors", "competitors", _attr("competitors")),
    ]),
    ("Impact", [
        ("Farmers Served (Previous Year)", "farmers_served_previous_year", _attr("farmers_served_previous_year")),
        ("Farmers Served (Total)", "farmers_served_total", _attr("farmers_served_total")),
        ("Impact on Farmers", "impact_on_farmers", _attr("impact_on_farmers")),
        ("Sustainability Promotion", "sustainability_promotion", _attr("sustainability_promotion")),
        ("Impact Evidence", "impact_evidence", _attr("impact_evidence")),
    ]),
    ("Inclusion & Sustainability", [
        ("Gender Inclusion", "gender_inclusion", _attr("gender_inclusion")),
        ("Jobs Created", "jobs_created", _attr("jobs_created")),
        ("Environmental Sustainability", "environmental_sustainability", _attr("environmental_sustainability")),
        ("Data Protection Measures", "data_protection_measures", _attr("data_protection_measures")),
    ]),
    ("Team", [
        ("Number of Founders", "no_of_founders", _attr("no_of_founders")),
        ("Founders Details", "founders_details", _attr("founders_details")),
        ("Number of Employees", "no_of_employees", _attr("no_of_employees")),
        ("Team Skill", "team_skill", _attr("team_skill")),
    ]),
    ("Growth & Vision", [
        ("Milestone", "milestone", _attr("milestone")),
        ("Biggest Risk", "biggest_risk_facing", _attr("biggest_risk_facing")),
        ("Twelve Month Revenue Projection", "twelve_month_revenue_projection", _attr("twelve_month_revenue_projection")),
        ("Long Term Vision", "long_term_vision", _attr("long_term_vision")),
    ]),
    ("Documents & Agreements", [
        ("Pitch Deck URL", "pitch_deck_url", _attr("pitch_deck_url")),
        ("CAC Document URL", "cac_url", _attr("cac_url")),
        ("TIN Document URL", "tin_url", _attr("tin_url")),
        ("Other Documents URL", "others_url", _attr("others_url")),
        ("Agree To Ayute ToS", "agree_to_tos_ayute", _attr("agree_to_tos_ayute")),
        ("Agree To Heifer ToS", "agree_to_tos_heifer", _attr("agree_to_tos_heifer")),
    ]),
    ("Auditing", [
        ("Created At", "created_at", _attr("created_at")),
        ("Updated At", "updated_at", _attr("updated_at")),
        ("Submitted At", "submitted_at", _attr("submitted_at")),
    ]),
]

EXPORT_COLUMNS = [column for _, columns in EXPORT_SECTIONS for column in columns]


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    media_type: str
    file_name: str


def format_value(value: Any) -> str:
    """Text form used by CSV cells and PDF tables."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def application_rows(application: Application) -> List[Tuple[str, str]]:
    return [(header, format_value(getter(application))) for header, _, getter in EXPORT_COLUMNS]


def query_applications(
    db: Session,
    status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[Application]:
    query = db.query(Application)
    if status:
        query = query.filter(Application.status == status)
    if start_date:
        query = query.filter(Application.created_at >= start_date)
    if end_date:
        query = query.filter(Application.created_at <= end_date)
    return query.order_by(Application.created_at.desc()).all()


def to_csv(applications: List[Application]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)
    writer.writerow([header for header, _, _ in EXPORT_COLUMNS])
    for application in applications:
        writer.writerow([format_value(getter(application)) for _, _, getter in EXPORT_COLUMNS])
    # BOM so spreadsheet tools pick up UTF-8
    return buffer.getvalue().encode("utf-8-sig")


def to_json(applications: List[Application]) -> bytes:
    records = []
    for application in applications:
        record = {}
        for _, key, getter in EXPORT_COLUMNS:
            value = _json_value(getter(application))
            if key.startswith("social_media."):
                record.setdefault("social_media", {})[key.split(".", 1)[1]] = value
            else:
                record[key] = value
        records.append(record)
    return json.dumps(records, ensure_ascii=False, indent=2).encode("utf-8")


def export_applications(
    db: Session,
    format: str = "csv",
    status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> ExportFile:
    fmt = (format or "").strip().lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError.single("format", "Invalid format")

    applications = query_applications(db, status, start_date, end_date)
    content = to_csv(applications) if fmt == "csv" else to_json(applications)
    file_name = f"applications_{utcnow().strftime('%Y%m%d%H%M%S')}.{fmt}"

    logger.info(f"Exported {len(applications)} applications as {fmt}")
    return ExportFile(content=content, media_type=EXPORT_FORMATS[fmt], file_name=file_name)
