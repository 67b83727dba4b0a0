# app/schemas/fields.py
"""
Reusable annotated field types for the application form.

Every validator raises ``PydanticCustomError`` with the exact message shown to the
applicant, so a failed ``model_validate`` can be turned straight into a
``{field: [messages]}`` map by :func:`field_errors`.
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BeforeValidator, ValidationError
from pydantic_core import PydanticCustomError

from app.utils.timeutils import age_on

MINIMUM_AGE = 18
PHONE_PATTERN = re.compile(r"^\+?[0-9(][0-9 ().\-]{5,19}$")
URL_MAX_LENGTH = 500
MONEY_MAX = Decimal("999999999999.99")


def _fail(message: str):
    raise PydanticCustomError("field_error", message)


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def Text(
    label: str,
    max_length: Optional[int] = None,
    required: bool = False,
    required_message: Optional[str] = None,
    too_long_message: Optional[str] = None,
    min_length: Optional[int] = None,
    too_short_message: Optional[str] = None,
):
    def check(value: Any) -> Optional[str]:
        value = _clean_text(value)
        if value is None:
            if required:
                _fail(required_message or f"{label} is required")
            return None
        if max_length is not None and len(value) > max_length:
            _fail(too_long_message or f"{label} cannot exceed {max_length} characters")
        if min_length is not None and len(value) < min_length:
            _fail(too_short_message or f"{label} must be at least {min_length} characters")
        return value

    return Annotated[Optional[str], BeforeValidator(check)]


def Url(
    message: str = "Please enter a valid URL",
    required_message: Optional[str] = None,
    too_long_message: str = f"URL cannot exceed {URL_MAX_LENGTH} characters",
):
    def check(value: Any) -> Optional[str]:
        value = _clean_text(value)
        if value is None:
            if required_message:
                _fail(required_message)
            return None
        if len(value) > URL_MAX_LENGTH:
            _fail(too_long_message)
        if not _is_absolute_url(value):
            _fail(message)
        return value

    return Annotated[Optional[str], BeforeValidator(check)]


def WholeNumber(
    invalid_message: str,
    required_message: Optional[str] = None,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
    range_message: Optional[str] = None,
):
    """Integer field that also accepts numeric strings from loosely typed forms."""

    def check(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            _fail(invalid_message)
        if isinstance(value, str):
            value = value.strip().replace(",", "") or None
        if value is None:
            if required_message:
                _fail(required_message)
            return None
        try:
            number = int(value)
        except (TypeError, ValueError):
            _fail(invalid_message)
        if isinstance(value, float) and not value.is_integer():
            _fail(invalid_message)
        if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
            _fail(range_message or invalid_message)
        return number

    return Annotated[Optional[int], BeforeValidator(check)]


def Money(invalid_message: str, negative_message: str, too_large_message: Optional[str] = None):
    def check(value: Any) -> Optional[Decimal]:
        if isinstance(value, str):
            value = value.strip().replace(",", "") or None
        if value is None:
            return None
        if isinstance(value, bool):
            _fail(invalid_message)
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            _fail(invalid_message)
        if not amount.is_finite():
            _fail(invalid_message)
        if amount < 0:
            _fail(negative_message)
        # Numeric(14, 2) column
        if amount > MONEY_MAX:
            _fail(too_large_message or invalid_message)
        return amount

    return Annotated[Optional[Decimal], BeforeValidator(check)]


def _blank_to_false(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return False
    return value


Flag = Annotated[bool, BeforeValidator(_blank_to_false)]


def Accepted(message: str):
    """Boolean consent that must be true."""

    def check(value: bool) -> bool:
        if value is not True:
            _fail(message)
        return value

    return Annotated[bool, BeforeValidator(_blank_to_false), AfterValidator(check)]


def Email(required_message: str = "Email is required", invalid_message: str = "Please enter a valid email address"):
    def check(value: Any) -> Optional[str]:
        value = _clean_text(value)
        if value is None:
            _fail(required_message)
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            _fail(invalid_message)
        return value.lower()

    return Annotated[Optional[str], BeforeValidator(check)]


def Phone(required_message: str = "Phone number is required", invalid_message: str = "Please enter a valid phone number"):
    def check(value: Any) -> Optional[str]:
        value = _clean_text(value)
        if value is None:
            _fail(required_message)
        digits = re.sub(r"\D", "", value)
        if not PHONE_PATTERN.match(value) or not 7 <= len(digits) <= 15:
            _fail(invalid_message)
        return value

    return Annotated[Optional[str], BeforeValidator(check)]


def BirthDate(
    today: Callable[[], date] = date.today,
    required_message: str = "Date of birth is required",
    invalid_message: str = "Please enter a valid date (YYYY-MM-DD)",
    underage_message: str = "You must be 18 years or older to apply",
):
    def check(value: Any) -> Optional[date]:
        if isinstance(value, datetime):
            value = value.date()
        if isinstance(value, str):
            text = value.strip()
            if not text:
                value = None
            else:
                try:
                    value = datetime.strptime(text[:10], "%Y-%m-%d").date()
                except ValueError:
                    _fail(invalid_message)
        if value is None:
            _fail(required_message)
        if not isinstance(value, date):
            _fail(invalid_message)
        if age_on(value, today()) < MINIMUM_AGE:
            _fail(underage_message)
        return value

    return Annotated[Optional[date], BeforeValidator(check)]


def Year(
    minimum: int = 1900,
    maximum: int = 2100,
    invalid_message: str = "Please enter a valid year",
    future_message: str = "Year of incorporation cannot be in the future",
):
    def check(value: Any) -> Optional[int]:
        if isinstance(value, str):
            value = value.strip() or None
        if value is None:
            return None
        if isinstance(value, bool):
            _fail(invalid_message)
        try:
            year = int(value)
        except (TypeError, ValueError):
            _fail(invalid_message)
        if year < minimum or year > maximum:
            _fail(invalid_message)
        if year > date.today().year:
            _fail(future_message)
        return year

    return Annotated[Optional[int], BeforeValidator(check)]


def Choice(options, message: str):
    def check(value: Any) -> Optional[str]:
        value = _clean_text(value)
        if value is None:
            return None
        value = value.lower()
        if value not in options:
            _fail(message)
        return value

    return Annotated[Optional[str], BeforeValidator(check)]


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Flatten a pydantic ValidationError into ``{"field.sub": [messages]}`` keeping error order."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "__root__"]
        field = ".".join(loc) or "payload"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors
