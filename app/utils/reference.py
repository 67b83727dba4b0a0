# app/utils/reference.py
import uuid

REFERENCE_PREFIX = "AYT-"


def generate_reference_number() -> str:
    """AYT- followed by ten upper-case hex characters."""
    return f"{REFERENCE_PREFIX}{uuid.uuid4().hex[:10].upper()}"
