"""Redaction helpers for safe logging of guest records.

Pre-registrations and reservations carry names, phones, e-mails, CPF
numbers and license plates. Logs keep ids, day keys and counts only;
anything else passes through here first.
"""

import re
from typing import Any

# Never starts inside a number, never on an ISO day key (2024-06-01)
_PHONE_PATTERN = re.compile(r"(?<![\d-])(?!\d{4}-\d{2}-\d{2}(?!\d))\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# 123.456.789-09 or 12345678909
_CPF_PATTERN = re.compile(r"\b\d{3}\.?\d{3}\.?\d{3}-?\d{2}\b")
# Mercosul (ABC1D23) and legacy (ABC-1234) plates
_PLATE_PATTERN = re.compile(r"\b[A-Z]{3}-?\d[A-Z0-9]\d{2}\b")

# Record fields whose values are never logged, whatever they contain
PII_FIELDS = frozenset(
    {
        "guest_name",
        "name",
        "email",
        "phone",
        "contact",
        "guests",
        "vehicles",
        "license_plate",
        "document",
    }
)

_REDACTED = "[REDACTED]"


def redact_string(value: str) -> str:
    """Redact PII patterns from a string."""
    result = _CPF_PATTERN.sub(_REDACTED, value)
    result = _PHONE_PATTERN.sub(_REDACTED, result)
    result = _EMAIL_PATTERN.sub(_REDACTED, result)
    result = _PLATE_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # Structure only, never values
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging.

    Keys listed in PII_FIELDS are replaced wholesale; other values are
    pattern-redacted.
    """
    return {
        k: _REDACTED if k in PII_FIELDS else redact_value(v)
        for k, v in kwargs.items()
    }
