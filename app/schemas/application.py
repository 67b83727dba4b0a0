# app/schemas/application.py
from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from app.schemas.fields import (
    Accepted,
    BirthDate,
    Choice,
    Email,
    Flag,
    Money,
    Phone,
    Text,
    Url,
    WholeNumber,
    Year,
)

GENDERS = ("male", "female", "other")


class StepPayload(BaseModel):
    """Base for step payloads: defaults are validated so required fields report when absent."""

    model_config = ConfigDict(validate_default=True, str_strip_whitespace=True)


# ---------------- SECTION A: Founder Information ----------------

class StepOneRequest(StepPayload):
    first_name: Text("First name", 100, required=True) = None
    last_name: Text("Last name", 100, required=True) = None
    email: Email() = None
    password: Text(
        "Password",
        required=True,
        min_length=8,
        too_short_message="Password must be at least 8 characters",
    ) = None
    phone: Phone() = None
    gender: Choice(GENDERS, "Please select a valid gender") = None
    dob: BirthDate() = None
    marketing_consent: Flag = False

    model_config = ConfigDict(title="StepOneRequest")


# ---------------- SECTION B: Startup Information ----------------

class SocialMediaRequest(StepPayload):
    linkedin: Url("Please enter a valid LinkedIn URL") = None
    x: Url("Please enter a valid Twitter/X URL") = None
    instagram: Url("Please enter a valid Instagram URL") = None
    facebook: Url("Please enter a valid Facebook URL") = None


class StepTwoRequest(StepPayload):
    startup_name: Text("Company name", 200) = None
    url: Url() = None
    description: Text("Description", 1000) = None
    locations: Text("Locations", 500) = None
    legally_registered: Flag = False
    year_of_incorporation: Year() = None
    cac_reg_number: Text("Registration number", 50) = None
    social_media: Optional[SocialMediaRequest] = None


# ---------------- SECTION C: Problem & Solution ----------------

class StepThreeRequest(StepPayload):
    farmer_challenges: Text(
        "Farmer challenges", 2000, required=True,
        required_message="Farmer challenges description is required",
    ) = None
    solution_description: Text("Solution description", 2000, required=True) = None
    product_stage: Text("Product stage", 100, required=True) = None
    product_link: Url() = None
    innovation_highlight: Text("Innovation highlight", 1500, required=True) = None
    primary_users: Text(
        "Primary users description", 1000, required=True,
    ) = None
    no_of_active_users: WholeNumber(
        "Please enter a valid number for active users",
        required_message="Number of active users is required",
        minimum=0,
        range_message="Number of active users cannot be negative",
    ) = None


# ---------------- SECTION D: Business Model ----------------

class StepFourRequest(StepPayload):
    business_model: Text(
        "Business model", 1500, required=True,
        required_message="Business model description is required",
    ) = None
    is_revenue_generation: Flag = False
    go_to_market_strategy: Text("Go-to-market strategy", 1500, required=True) = None
    no_of_customers: WholeNumber(
        "Please enter a valid number for customers",
        required_message="Number of customers is required",
        minimum=0,
        range_message="Number of customers cannot be negative",
    ) = None
    average_cac: Money(
        "Please enter a valid amount for average CAC",
        "Average CAC cannot be negative",
        "Average CAC is too large",
    ) = None
    competitors: Text("Competitors description", 1500) = None


# ---------------- SECTION E: Impact ----------------

class StepFiveRequest(StepPayload):
    farmers_served_previous_year: WholeNumber(
        "Please enter a valid number for farmers served (previous year)",
        required_message="Farmers served (previous year) is required",
        minimum=0,
        maximum=10_000_000,
        range_message="Farmers served must be between 0 and 10,000,000",
    ) = None
    farmers_served_total: WholeNumber(
        "Please enter a valid number for total farmers served",
        required_message="Total farmers served is required",
        minimum=0,
        maximum=10_000_000,
        range_message="Total farmers served must be between 0 and 10,000,000",
    ) = None
    impact_on_farmers: Text(
        "Impact on farmers", 1500, required=True,
        required_message="Impact on farmers description is required",
    ) = None
    sustainability_promotion: Text(
        "Sustainability promotion", 1500, required=True,
        required_message="Sustainability promotion description is required",
    ) = None
    impact_evidence: Text("Impact evidence", 1000, required=True) = None


# ---------------- SECTION F: Inclusion & Sustainability ----------------

class StepSixRequest(StepPayload):
    gender_inclusion: Text(
        "Gender inclusion", 1500, required=True,
        required_message="Gender inclusion description is required",
    ) = None
    jobs_created: WholeNumber(
        "Please enter a valid number for jobs created",
        required_message="Number of jobs created is required",
        minimum=0,
        maximum=10_000,
        range_message="Jobs created must be between 0 and 10,000",
    ) = None
    environmental_sustainability: Text(
        "Environmental sustainability", 1500, required=True,
        required_message="Environmental sustainability description is required",
    ) = None
    data_protection_measures: Text(
        "Data protection measures", 1500, required=True,
        required_message="Data protection measures description is required",
    ) = None


# ---------------- SECTION G: Team ----------------

class StepSevenRequest(StepPayload):
    no_of_founders: WholeNumber(
        "Please enter a valid number for founders",
        required_message="Number of founders is required",
        minimum=1,
        maximum=10,
        range_message="Number of founders must be between 1 and 10",
    ) = None
    no_of_employees: WholeNumber(
        "Please enter a valid number for employees",
        required_message="Number of employees is required",
        minimum=1,
        maximum=1000,
        range_message="Number of employees must be between 1 and 1000",
    ) = None
    founders_details: Text(
        "Founders details", 2000, required=True,
        required_message="Founders details are required",
    ) = None
    team_skill: Text(
        "Team skills", 1500, required=True,
        required_message="Team skills description is required",
    ) = None


# ---------------- SECTION H: Growth & Vision ----------------

class StepEightRequest(StepPayload):
    milestone: Text(
        "Milestones", 1500, required=True,
        required_message="Milestones description is required",
    ) = None
    biggest_risk_facing: Text(
        "Risk assessment", 1500, required=True,
    ) = None
    twelve_month_revenue_projection: Text("Revenue projection", 1500, required=True) = None
    long_term_vision: Text("Long-term vision", 1500, required=True) = None


# ---------------- SECTION I: Documents & Agreements ----------------

class StepNineRequest(StepPayload):
    pitch_deck_url: Url("Please provide a valid URL", required_message="Pitch Deck is required") = None
    cac_url: Url("Please provide a valid URL", required_message="CAC Certificate is required") = None
    tin_url: Url("Please provide a valid URL") = None
    others_url: Url("Please provide a valid URL") = None
    agree_to_tos_ayute: Accepted("You must agree to Ayute Terms of Service") = False
    agree_to_tos_heifer: Accepted("You must agree to Heifer International Terms") = False


# ---------------- Responses ----------------

class StepResult(BaseModel):
    success: bool = True
    message: str
    application_id: UUID
    step: int
    next_step: Optional[int] = None
    redirect_url: str

    model_config = ConfigDict(title="StepResult")


class SocialMediaResponse(BaseModel):
    linkedin: Optional[str] = None
    x: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationResponse(BaseModel):
    # Meta Information
    id: UUID
    reference_number: str
    application_step: int
    status: str
    is_verified: bool
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None

    # SECTION A: Founder Information
    first_name: str
    last_name: str
    email: str
    phone: str
    gender: Optional[str] = None
    dob: date
    marketing_consent: bool = False

    # SECTION B: Startup Information
    startup_name: Optional[str] = None
    url: Optional[str] = None
    social_media: SocialMediaResponse
    description: Optional[str] = None
    locations: Optional[str] = None
    legally_registered: bool = False
    year_of_incorporation: Optional[int] = None
    cac_reg_number: Optional[str] = None

    # SECTION C: Problem & Solution
    farmer_challenges: Optional[str] = None
    solution_description: Optional[str] = None
    product_stage: Optional[str] = None
    product_link: Optional[str] = None
    innovation_highlight: Optional[str] = None
    primary_users: Optional[str] = None
    no_of_active_users: int = 0

    # SECTION D: Business Model
    business_model: Optional[str] = None
    is_revenue_generation: bool = False
    go_to_market_strategy: Optional[str] = None
    no_of_customers: int = 0
    average_cac: Optional[Decimal] = None
    competitors: Optional[str] = None

    # SECTION E: Impact
    farmers_served_previous_year: int = 0
    farmers_served_total: int = 0
    impact_on_farmers: Optional[str] = None
    sustainability_promotion: Optional[str] = None
    impact_evidence: Optional[str] = None

    # SECTION F: Inclusion & Sustainability
    gender_inclusion: Optional[str] = None
    jobs_created: int = 0
    environmental_sustainability: Optional[str] = None
    data_protection_measures: Optional[str] = None

    # SECTION G: Team
    no_of_founders: Optional[int] = None
    founders_details: Optional[str] = None
    no_of_employees: Optional[int] = None
    team_skill: Optional[str] = None

    # SECTION H: Growth & Vision
    milestone: Optional[str] = None
    biggest_risk_facing: Optional[str] = None
    twelve_month_revenue_projection: Optional[str] = None
    long_term_vision: Optional[str] = None

    # SECTION I: Documents & Agreements
    pitch_deck_url: Optional[str] = None
    cac_url: Optional[str] = None
    tin_url: Optional[str] = None
    others_url: Optional[str] = None
    agree_to_tos_ayute: bool = False
    agree_to_tos_heifer: bool = False

    model_config = ConfigDict(from_attributes=True, title="ApplicationResponse")


class ApplicationListItem(BaseModel):
    id: UUID
    reference_number: str
    first_name: str
    last_name: str
    email: str
    phone: str
    gender: Optional[str] = None
    startup_name: Optional[str] = None
    status: str
    application_step: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, title="ApplicationListItem")


class ApplicationPage(BaseModel):
    applications: List[ApplicationListItem]
    total_applications: int
    current_page: int
    total_pages: int
    page_size: int
    search: str = ""
    status_filter: str = ""


class ApplicationStats(BaseModel):
    total: int = 0
    today: int = 0
    awaiting_review: int = 0
    by_status: Dict[str, int]
    by_gender: Dict[str, int]
    status_percentages: Dict[str, float]
    gender_percentages: Dict[str, float]
    approval_rate: float = 0.0
    rejection_rate: float = 0.0


class StatusUpdateRequest(BaseModel):
    status: str
    notes: Optional[str] = None


class UploadResult(BaseModel):
    success: bool = True
    url: str
    file_name: str
    message: str = "File uploaded successfully"
