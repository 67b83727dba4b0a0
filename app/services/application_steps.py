# app/services/application_steps.py
"""
Per-step rules for the nine-step application form.

Each step is one StepRule: the pydantic payload model (field-level checks), optional
cross-field checks run on the parsed payload, and an ``apply`` that copies the
accepted values onto the Application row.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import FieldErrors, ValidationError
from app.models.application import Application, ApplicationStatus, SocialMedia
from app.schemas.application import (
    StepOneRequest,
    StepTwoRequest,
    StepThreeRequest,
    StepFourRequest,
    StepFiveRequest,
    StepSixRequest,
    StepSevenRequest,
    StepEightRequest,
    StepNineRequest,
)
from app.schemas.fields import field_errors
from app.utils.timeutils import utcnow

FIRST_STEP = 1
LAST_STEP = 9

STEP_NAMES = {
    1: "step-one",
    2: "step-two",
    3: "step-three",
    4: "step-four",
    5: "step-five",
    6: "step-six",
    7: "step-seven",
    8: "step-eight",
    9: "step-nine",
}

Check = Callable[[BaseModel], FieldErrors]


def step_route(step: int, application_id) -> str:
    """Front-end page for a step; unknown cursors fall back to step two."""
    return f"/application/{STEP_NAMES.get(step, STEP_NAMES[2])}/{application_id}"


def success_route(application_id) -> str:
    return f"/application/success/{application_id}"


# ---------------- Cross-field checks ----------------

def _registration_details(payload: StepTwoRequest) -> FieldErrors:
    errors: FieldErrors = {}
    if payload.legally_registered:
        if not payload.cac_reg_number:
            errors["cac_reg_number"] = ["Registration number is required for registered businesses"]
        if payload.year_of_incorporation is None:
            errors["year_of_incorporation"] = ["Year of incorporation is required for registered businesses"]
    return errors


def _founders_within_headcount(payload: StepSevenRequest) -> FieldErrors:
    if (
        payload.no_of_founders is not None
        and payload.no_of_employees is not None
        and payload.no_of_founders > payload.no_of_employees
    ):
        return {"no_of_founders": ["Number of founders cannot exceed total number of employees"]}
    return {}


# ---------------- Apply ----------------

def _copy_fields(application: Application, payload: BaseModel, exclude=()) -> None:
    for name, value in payload.model_dump(exclude=set(exclude)).items():
        setattr(application, name, value)


def _apply_startup(application: Application, payload: StepTwoRequest) -> None:
    _copy_fields(application, payload, exclude=("social_media",))
    links = payload.social_media.model_dump() if payload.social_media else {}
    application.social_media = SocialMedia(**links)


def _apply_documents(application: Application, payload: StepNineRequest) -> None:
    _copy_fields(application, payload)
    application.status = ApplicationStatus.SUBMITTED
    application.submitted_at = utcnow()


@dataclass(frozen=True)
class StepRule:
    number: int
    schema: Type[BaseModel]
    message: str
    checks: List[Check] = field(default_factory=list)
    apply: Callable[[Application, Any], None] = _copy_fields


STEP_RULES: Dict[int, StepRule] = {
    1: StepRule(1, StepOneRequest, "Personal information saved successfully"),
    2: StepRule(
        2, StepTwoRequest, "Company information saved successfully",
        checks=[_registration_details], apply=_apply_startup,
    ),
    3: StepRule(3, StepThreeRequest, "Problem & Solution information saved successfully"),
    4: StepRule(4, StepFourRequest, "Business model information saved successfully"),
    5: StepRule(5, StepFiveRequest, "Impact information saved successfully"),
    6: StepRule(6, StepSixRequest, "Inclusion & Sustainability information saved successfully"),
    7: StepRule(
        7, StepSevenRequest, "Team information saved successfully",
        checks=[_founders_within_headcount],
    ),
    8: StepRule(8, StepEightRequest, "Growth & Vision information saved successfully"),
    9: StepRule(9, StepNineRequest, "Application submitted successfully!", apply=_apply_documents),
}


def get_rule(step: int) -> StepRule:
    rule = STEP_RULES.get(step)
    if rule is None:
        raise ValidationError.single("step", f"Unknown application step: {step}")
    return rule


def validate_step(step: int, data: Optional[Dict[str, Any]]) -> BaseModel:
    """
    Parse a raw payload for ``step``. Every field message is collected in one pass;
    cross-field checks only run once the fields themselves are valid.
    Raises ValidationError with the full ``{field: [messages]}`` map.
    """
    rule = get_rule(step)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError.single("payload", "Invalid request data")

    try:
        payload = rule.schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(field_errors(e))

    errors: FieldErrors = {}
    for check in rule.checks:
        for name, messages in check(payload).items():
            errors.setdefault(name, []).extend(messages)
    if errors:
        raise ValidationError(errors)
    return payload
