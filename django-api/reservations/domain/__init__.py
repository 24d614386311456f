from reservations.domain.models import (
    Attraction,
    AttractionStatus,
    Booking,
    BookingStatus,
    CustomerContact,
    GiftInstrument,
    InstrumentStatus,
    InstrumentType,
    PaymentMethod,
    PricingMode,
    Purchase,
    PurchaseStatus,
)
from reservations.domain.value_objects import (
    AttractionId,
    BookingId,
    Capacity,
    Money,
    PurchaseId,
)

__all__ = [
    "Attraction",
    "AttractionStatus",
    "Booking",
    "BookingStatus",
    "CustomerContact",
    "GiftInstrument",
    "InstrumentStatus",
    "InstrumentType",
    "PaymentMethod",
    "PricingMode",
    "Purchase",
    "PurchaseStatus",
    "AttractionId",
    "BookingId",
    "PurchaseId",
    "Money",
    "Capacity",
]
