from __future__ import annotations

from ..core.constants import UNKNOWN
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def is_specified(value: str | None) -> bool:
    """False for empty text and for the "Unknown" placeholder of bare-id scans."""
    text = (value or "").strip()
    return bool(text) and text != UNKNOWN
