"""Gift instrument rules: code generation, value invariants, derived status.

Expiry is a read-time projection. ``derived_status`` never changes the stored
status, and every read path goes through it.
"""

import secrets
import string
import time as _time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from reservations.domain.errors import ValidationError
from reservations.domain.models import GiftInstrument, InstrumentStatus, InstrumentType
from reservations.domain.parsing import parse_amount, parse_count

PERCENTAGE_CEILING = Decimal("100")
CODE_ALPHABET = string.ascii_uppercase + string.digits

# Only these persisted statuses are overlaid by expiry; terminal ones win.
_EXPIRABLE = frozenset({InstrumentStatus.ACTIVE, InstrumentStatus.INACTIVE})


def generate_code(prefix: str = "GC", now_ms: int | None = None) -> str:
    """Return a code like ``GC-K3F9QZ-4821``.

    Six random base-36 characters followed by the last four digits of the
    millisecond clock. Uniqueness is checked by the caller against the store.
    """
    if now_ms is None:
        now_ms = _time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(CODE_ALPHABET) for _ in range(6))
    return f"{prefix}-{random_part}-{str(now_ms)[-4:]:0>4}"


@dataclass(frozen=True)
class InstrumentValues:
    """Validated monetary fields of an instrument."""

    type: InstrumentType
    initial_value: Decimal
    balance: Decimal
    max_usage: int


def validate_values(
    type: InstrumentType | str,
    initial_value: object,
    balance: object,
    max_usage: object,
) -> InstrumentValues:
    """Parse and cross-check the value fields of an instrument.

    ``balance`` may be None, in which case it starts at ``initial_value``.

    Raises:
        ValidationError: Naming the first field that fails.
    """
    try:
        instrument_type = InstrumentType(type)
    except ValueError:
        raise ValidationError("Type must be fixed or percentage", field="type") from None
    initial = parse_amount(initial_value, "initial_value")
    current = initial if balance is None else parse_amount(balance, "balance")
    usage = parse_count(max_usage, "max_usage", minimum=1)

    if instrument_type == InstrumentType.PERCENTAGE:
        if initial > PERCENTAGE_CEILING:
            raise ValidationError(
                "Percentage value cannot exceed 100", field="initial_value"
            )
        if current > PERCENTAGE_CEILING:
            raise ValidationError("Percentage balance cannot exceed 100", field="balance")
    elif current > initial:
        raise ValidationError("Balance cannot exceed the initial value", field="balance")
    return InstrumentValues(
        type=instrument_type,
        initial_value=initial,
        balance=current,
        max_usage=usage,
    )


def is_expired(instrument: GiftInstrument, now: datetime) -> bool:
    return instrument.expiry_date is not None and instrument.expiry_date < now


def derived_status(instrument: GiftInstrument, now: datetime) -> InstrumentStatus:
    """Status to show at ``now``."""
    if instrument.deleted:
        return InstrumentStatus.DELETED
    if instrument.status in _EXPIRABLE and is_expired(instrument, now):
        return InstrumentStatus.EXPIRED
    return instrument.status


def is_redeemable(instrument: GiftInstrument, now: datetime) -> bool:
    return (
        derived_status(instrument, now) == InstrumentStatus.ACTIVE
        and instrument.balance.amount > 0
    )
