"""Redaction helpers so demographics and free text never reach logs raw."""

import hashlib
import re
from typing import Any


# Patterns scrubbed from free-text values
_SENSITIVE_PATTERNS = [
    re.compile(r"\b\d{6}-\d{2}-\d{4}\b"),  # National ID (MyKad)
    re.compile(r"\b\d{10,11}\b"),  # Phone numbers
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b"),  # Email
]

# Keys whose values are replaced by a hash
_SENSITIVE_KEYS = {"name", "full_name", "email", "phone", "ic_number", "address",
                   "date_of_birth", "dob", "occupation", "user_id"}


def redact_value(value: str) -> str:
    """Hash a sensitive string value for safe storage."""
    return f"REDACTED:{hashlib.sha256(value.encode()).hexdigest()[:12]}"


def _scrub_text(value: str) -> str:
    for pattern in _SENSITIVE_PATTERNS:
        value = pattern.sub("[REDACTED]", value)
    return value


def redact_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive fields from a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in _SENSITIVE_KEYS:
            result[key] = redact_value(str(value)) if value else None
        elif isinstance(value, dict):
            result[key] = redact_dict(value)
        elif isinstance(value, list):
            result[key] = [
                redact_dict(v) if isinstance(v, dict)
                else _scrub_text(v) if isinstance(v, str)
                else v
                for v in value
            ]
        elif isinstance(value, str):
            result[key] = _scrub_text(value)
        else:
            result[key] = value
    return result


def age_band(age: int) -> str:
    """Coarse age bucket for logs, e.g. 34 -> '30-39'."""
    lower = (age // 10) * 10
    return f"{lower}-{lower + 9}"


def redact_demographics(demographics: dict[str, Any]) -> dict[str, Any]:
    """Redact a demographics payload and replace exact age with a band."""
    result = redact_dict(demographics)
    age = demographics.get("age")
    if isinstance(age, int) and not isinstance(age, bool):
        result["age"] = age_band(age)
    return result
