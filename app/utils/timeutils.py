from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how every DateTime column is stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def age_on(dob: date, today: date) -> int:
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years
