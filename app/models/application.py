from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Text, Numeric, Uuid
from app.database import Base
from app.utils.timeutils import utcnow
import uuid


class ApplicationStatus:
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWING = "reviewing"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (DRAFT, SUBMITTED, REVIEWING, APPROVED, REJECTED)

    # Forward-only lifecycle; draft -> submitted happens only through step nine
    TRANSITIONS = {
        DRAFT: (SUBMITTED,),
        SUBMITTED: (REVIEWING,),
        REVIEWING: (APPROVED, REJECTED),
        APPROVED: (),
        REJECTED: (),
    }


@dataclass
class SocialMedia:
    """Owned value object; lives in the parent row, no identity of its own."""
    linkedin: Optional[str] = None
    x: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class Application(Base):
    __tablename__ = "applications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    reference_number = Column(String(20), unique=True, nullable=False)

    application_step = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default=ApplicationStatus.DRAFT, index=True)

    # SECTION A: Founder Information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=False)
    gender = Column(String(20), nullable=True)
    dob = Column(Date, nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    marketing_consent = Column(Boolean, nullable=False, default=False)

    # SECTION B: Startup Information
    startup_name = Column(String(200), nullable=True)
    url = Column(String(500), nullable=True)
    social_linkedin = Column(String(500), nullable=True)
    social_x = Column(String(500), nullable=True)
    social_instagram = Column(String(500), nullable=True)
    social_facebook = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    locations = Column(Text, nullable=True)
    legally_registered = Column(Boolean, nullable=False, default=False)
    year_of_incorporation = Column(Integer, nullable=True)
    cac_reg_number = Column(String(50), nullable=True)

    # SECTION C: Problem & Solution
    farmer_challenges = Column(Text, nullable=True)
    solution_description = Column(Text, nullable=True)
    product_stage = Column(String(100), nullable=True)
    product_link = Column(String(500), nullable=True)
    innovation_highlight = Column(Text, nullable=True)
    primary_users = Column(Text, nullable=True)
    no_of_active_users = Column(Integer, nullable=False, default=0)

    # SECTION D: Business Model
    business_model = Column(Text, nullable=True)
    is_revenue_generation = Column(Boolean, nullable=False, default=False)
    go_to_market_strategy = Column(Text, nullable=True)
    no_of_customers = Column(Integer, nullable=False, default=0)
    average_cac = Column(Numeric(14, 2), nullable=True)
    competitors = Column(Text, nullable=True)

    # SECTION E: Impact
    farmers_served_previous_year = Column(Integer, nullable=False, default=0)
    farmers_served_total = Column(Integer, nullable=False, default=0)
    impact_on_farmers = Column(Text, nullable=True)
    sustainability_promotion = Column(Text, nullable=True)
    impact_evidence = Column(String(1000), nullable=True)

    # SECTION F: Inclusion & Sustainability
    gender_inclusion = Column(Text, nullable=True)
    jobs_created = Column(Integer, nullable=False, default=0)
    environmental_sustainability = Column(Text, nullable=True)
    data_protection_measures = Column(Text, nullable=True)

    # SECTION G: Team
    no_of_founders = Column(Integer, nullable=True)
    founders_details = Column(Text, nullable=True)
    no_of_employees = Column(Integer, nullable=True)
    team_skill = Column(Text, nullable=True)

    # SECTION H: Growth & Vision
    milestone = Column(Text, nullable=True)
    biggest_risk_facing = Column(Text, nullable=True)
    twelve_month_revenue_projection = Column(Text, nullable=True)
    long_term_vision = Column(Text, nullable=True)

    # SECTION I: Documents & Agreements
    pitch_deck_url = Column(String(500), nullable=True)
    cac_url = Column(String(500), nullable=True)
    tin_url = Column(String(500), nullable=True)
    others_url = Column(String(500), nullable=True)
    agree_to_tos_ayute = Column(Boolean, nullable=False, default=False)
    agree_to_tos_heifer = Column(Boolean, nullable=False, default=False)

    # Meta Information
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    submitted_at = Column(DateTime, nullable=True)
    last_login = Column(DateTime, nullable=True)

    @property
    def social_media(self) -> SocialMedia:
        return SocialMedia(
            linkedin=self.social_linkedin,
            x=self.social_x,
            instagram=self.social_instagram,
            facebook=self.social_facebook,
        )

    @social_media.setter
    def social_media(self, value: Optional[SocialMedia]) -> None:
        value = value or SocialMedia()
        self.social_linkedin = value.linkedin
        self.social_x = value.x
        self.social_instagram = value.instagram
        self.social_facebook = value.facebook

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_editable(self) -> bool:
        return self.status == ApplicationStatus.DRAFT

    def __repr__(self):
        return f"<Application ref={self.reference_number} step={self.application_step} status={self.status}>"
