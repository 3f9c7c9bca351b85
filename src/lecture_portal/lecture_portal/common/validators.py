from __future__ import annotations

import re
from typing import Any, Iterable

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_email(value: str, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid email address")
    return email


def require_choice(value: Any, choices: Iterable[Any], field_name: str):
    allowed = tuple(choices)
    if value not in allowed:
        names = ", ".join(str(getattr(c, "value", c)) for c in allowed)
        raise ValidationError(f"{field_name} must be one of {names}")
    return value
