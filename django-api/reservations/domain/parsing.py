"""Parsing of user-entered numeric fields into domain values."""

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation

from reservations.domain.errors import ValidationError


def parse_amount(value: object, field: str) -> Decimal:
    """Parse a non-negative decimal amount.

    Accepts numbers and numeric strings. Booleans, blanks, non-finite and
    negative values are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("A number is required", field=field)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError("A number is required", field=field)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Must be a number", field=field) from None
    if not amount.is_finite():
        raise ValidationError("Must be a number", field=field)
    if amount < 0:
        raise ValidationError("Must not be negative", field=field)
    return amount


def parse_count(value: object, field: str, minimum: int = 0) -> int:
    """Parse a whole-number count no smaller than ``minimum``."""
    amount = parse_amount(value, field)
    if amount != amount.to_integral_value():
        raise ValidationError("Must be a whole number", field=field)
    count = int(amount)
    if count < minimum:
        raise ValidationError(f"Must be at least {minimum}", field=field)
    return count


def parse_expiry(value: object, field: str = "expiry_date") -> datetime | None:
    """Parse an optional expiry into an aware datetime.

    Blank values mean "no expiry". Plain dates expire at the start of that day
    in UTC, and naive datetimes are taken as UTC.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError("Must be an ISO-8601 date or datetime", field=field) from None
    else:
        raise ValidationError("Must be an ISO-8601 date or datetime", field=field)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
