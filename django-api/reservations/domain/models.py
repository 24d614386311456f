"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in reservations/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from reservations.domain.value_objects import (
    AttractionId,
    BookingId,
    Capacity,
    Money,
    PurchaseId,
)

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class PricingMode(str, Enum):
    PER_UNIT = "per_unit"
    FIXED = "fixed"
    GROUP = "group"


class AttractionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PurchaseStatus(str, Enum):
    CONFIRMED = "confirmed"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    CARD = "card"
    CASH = "cash"
    PAY_LATER = "paylater"


RESERVATION_PAYMENT_METHODS = frozenset({PaymentMethod.CREDIT_CARD, PaymentMethod.PAYPAL})
COUNTER_PAYMENT_METHODS = frozenset(
    {PaymentMethod.CASH, PaymentMethod.CARD, PaymentMethod.PAY_LATER}
)


class InstrumentType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class InstrumentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    REDEEMED = "redeemed"
    CANCELLED = "cancelled"
    DELETED = "deleted"


@dataclass(frozen=True)
class Attraction:
    """Domain representation of a bookable Attraction.

    ``availability`` maps lowercase weekday names to a bookable flag; days
    missing from the map are closed.
    """

    id: AttractionId
    name: str
    description: str
    location: str
    duration: int
    duration_unit: str
    max_capacity: Capacity
    price: Money
    pricing_mode: PricingMode
    availability: Mapping[str, bool] = field(hash=False)
    time_slots: tuple[time, ...]
    status: AttractionStatus = AttractionStatus.ACTIVE

    def __post_init__(self) -> None:
        if self.max_capacity.value < 1:
            raise ValueError("Attraction capacity must be at least 1")
        unknown = set(self.availability) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown weekday names: {', '.join(sorted(unknown))}")
        object.__setattr__(
            self, "availability", MappingProxyType(dict(self.availability))
        )
        object.__setattr__(self, "time_slots", tuple(self.time_slots))

    @property
    def duration_label(self) -> str:
        return f"{self.duration} {self.duration_unit}"

    @property
    def is_active(self) -> bool:
        return self.status == AttractionStatus.ACTIVE


@dataclass(frozen=True)
class CustomerContact:
    """Contact details captured by a workflow."""

    name: str
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Booking:
    """Domain representation of a committed reservation."""

    id: BookingId
    attraction_id: AttractionId
    attraction_name: str
    customer: CustomerContact
    reserved_date: date
    reserved_time: time
    participants: int
    total_amount: Money
    payment_method: PaymentMethod
    duration_label: str
    created_at: datetime
    idempotency_key: str
    status: BookingStatus = BookingStatus.CONFIRMED


@dataclass(frozen=True)
class Purchase:
    """Domain representation of a committed counter sale."""

    id: PurchaseId
    attraction_id: AttractionId
    attraction_name: str
    customer: CustomerContact
    quantity: int
    subtotal: Money
    discount: Money
    total_amount: Money
    amount_paid: Money
    payment_method: PaymentMethod
    notes: str
    created_at: datetime
    idempotency_key: str
    status: PurchaseStatus = PurchaseStatus.CONFIRMED


@dataclass(frozen=True)
class GiftInstrument:
    """Domain representation of a stored-value or percentage gift instrument."""

    code: str
    type: InstrumentType
    initial_value: Money
    balance: Money
    max_usage: int
    description: str
    status: InstrumentStatus
    created_by: str
    created_at: datetime
    updated_at: datetime
    expiry_date: datetime | None = None
    deleted: bool = False
