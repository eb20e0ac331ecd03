from __future__ import annotations

import re
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"Invalid {field_name.lower()} format")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def parse_status(value: str) -> AttendanceStatus:
    try:
        return AttendanceStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError("Invalid attendance status")
