import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError


def require_text(value: Any, field: str) -> str:
    """
    '  Food ' -> 'Food'
    Non-strings and blank strings are rejected.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def parse_positive_amount(value: Any, field: str) -> float:
    """Accept numbers or numeric strings; the result is a finite float > 0."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a positive number")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a positive number") from exc

    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be a positive number")

    result = float(amount)
    if not math.isfinite(result):
        raise ValidationError(f"{field} must be a positive number")
    return result


def parse_timestamp(value: Any, field: str = "date") -> str:
    """Validate an ISO-8601 date or datetime and return it as stored text."""
    if isinstance(value, datetime):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be an ISO-8601 date")

    text = value.strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"{field} must be an ISO-8601 date") from exc
    return text


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
