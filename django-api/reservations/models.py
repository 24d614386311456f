"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.utils import timezone

from reservations.domain import (
    AttractionStatus,
    BookingStatus,
    InstrumentStatus,
    InstrumentType,
    PaymentMethod,
    PricingMode,
    PurchaseStatus,
)


def _choices(enum) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").title()) for member in enum]


class Attraction(models.Model):
    """Persistence model for attractions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    duration = models.PositiveIntegerField(default=60)
    duration_unit = models.CharField(max_length=20, default="minutes")
    max_capacity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    pricing_mode = models.CharField(
        max_length=20, choices=_choices(PricingMode), default=PricingMode.PER_UNIT.value
    )
    availability = models.JSONField(default=dict, blank=True)
    time_slots = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=_choices(AttractionStatus),
        default=AttractionStatus.ACTIVE.value,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Booking(models.Model):
    """Persistence model for committed reservations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    attraction = models.ForeignKey(
        Attraction, on_delete=models.PROTECT, related_name="bookings"
    )
    attraction_name = models.CharField(max_length=255)
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField(max_length=255)
    customer_phone = models.CharField(max_length=50, blank=True)
    reserved_date = models.DateField()
    reserved_time = models.TimeField()
    participants = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20, choices=_choices(BookingStatus), default=BookingStatus.CONFIRMED.value
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=_choices(PaymentMethod))
    duration_label = models.CharField(max_length=50, blank=True)
    idempotency_key = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["attraction", "reserved_date"], name="booking_attraction_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.attraction_name} - {self.reserved_date} {self.reserved_time}"


class Purchase(models.Model):
    """Persistence model for counter sales."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    attraction = models.ForeignKey(
        Attraction, on_delete=models.PROTECT, related_name="purchases"
    )
    attraction_name = models.CharField(max_length=255)
    customer_name = models.CharField(max_length=255)
    customer_email = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    quantity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20, choices=_choices(PurchaseStatus), default=PurchaseStatus.CONFIRMED.value
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_method = models.CharField(max_length=20, choices=_choices(PaymentMethod))
    notes = models.TextField(blank=True)
    idempotency_key = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.attraction_name} x{self.quantity}"


class GiftInstrument(models.Model):
    """Persistence model for gift instruments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=32, unique=True)
    type = models.CharField(max_length=20, choices=_choices(InstrumentType))
    initial_value = models.DecimalField(max_digits=10, decimal_places=2)
    balance = models.DecimalField(max_digits=10, decimal_places=2)
    max_usage = models.PositiveIntegerField(default=1)
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=_choices(InstrumentStatus),
        default=InstrumentStatus.ACTIVE.value,
    )
    expiry_date = models.DateTimeField(blank=True, null=True)
    created_by = models.CharField(max_length=64)
    deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="gift_instrument_status_idx"),
        ]

    def __str__(self) -> str:
        return self.code
