"""Django ORM implementation of the store interfaces.

Database faults are raised as PersistenceError. Gift instrument deletion is
a hard delete here.
"""

import logging
from datetime import time

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from reservations import models as orm
from reservations.domain import (
    Attraction,
    AttractionId,
    AttractionStatus,
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    CustomerContact,
    GiftInstrument,
    InstrumentStatus,
    InstrumentType,
    Money,
    PaymentMethod,
    PricingMode,
    Purchase,
    PurchaseId,
    PurchaseStatus,
)
from reservations.domain.errors import CodeCollisionError, PersistenceError
from reservations.stores.interfaces import (
    AttractionCatalog,
    BookingStore,
    GiftInstrumentStore,
    PurchaseStore,
)

logger = logging.getLogger(__name__)


def attraction_to_domain(row: orm.Attraction) -> Attraction:
    return Attraction(
        id=AttractionId(row.id),
        name=row.name,
        description=row.description,
        location=row.location,
        duration=row.duration,
        duration_unit=row.duration_unit,
        max_capacity=Capacity(row.max_capacity),
        price=Money(row.price),
        pricing_mode=PricingMode(row.pricing_mode),
        availability={day.lower(): bool(flag) for day, flag in row.availability.items()},
        time_slots=tuple(sorted(time.fromisoformat(slot) for slot in row.time_slots)),
        status=AttractionStatus(row.status),
    )


def booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        attraction_id=AttractionId(row.attraction_id),
        attraction_name=row.attraction_name,
        customer=CustomerContact(
            name=row.customer_name, email=row.customer_email, phone=row.customer_phone
        ),
        reserved_date=row.reserved_date,
        reserved_time=row.reserved_time,
        participants=row.participants,
        total_amount=Money(row.total_amount),
        payment_method=PaymentMethod(row.payment_method),
        duration_label=row.duration_label,
        created_at=row.created_at,
        idempotency_key=row.idempotency_key,
        status=BookingStatus(row.status),
    )


def purchase_to_domain(row: orm.Purchase) -> Purchase:
    return Purchase(
        id=PurchaseId(row.id),
        attraction_id=AttractionId(row.attraction_id),
        attraction_name=row.attraction_name,
        customer=CustomerContact(
            name=row.customer_name, email=row.customer_email, phone=row.customer_phone
        ),
        quantity=row.quantity,
        subtotal=Money(row.subtotal),
        discount=Money(row.discount),
        total_amount=Money(row.total_amount),
        amount_paid=Money(row.amount_paid),
        payment_method=PaymentMethod(row.payment_method),
        notes=row.notes,
        created_at=row.created_at,
        idempotency_key=row.idempotency_key,
        status=PurchaseStatus(row.status),
    )


def instrument_to_domain(row: orm.GiftInstrument) -> GiftInstrument:
    return GiftInstrument(
        code=row.code,
        type=InstrumentType(row.type),
        initial_value=Money(row.initial_value),
        balance=Money(row.balance),
        max_usage=row.max_usage,
        description=row.description,
        status=InstrumentStatus(row.status),
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
        expiry_date=row.expiry_date,
        deleted=row.deleted,
    )


def _instrument_fields(instrument: GiftInstrument) -> dict:
    return {
        "type": instrument.type.value,
        "initial_value": instrument.initial_value.amount,
        "balance": instrument.balance.amount,
        "max_usage": instrument.max_usage,
        "description": instrument.description,
        "status": instrument.status.value,
        "expiry_date": instrument.expiry_date,
        "created_by": instrument.created_by,
        "deleted": instrument.deleted,
        "created_at": instrument.created_at,
        "updated_at": instrument.updated_at,
    }


class DjangoAttractionCatalog(AttractionCatalog):
    """Attraction catalog backed by the ORM."""

    def get_attraction(self, attraction_id: AttractionId) -> Attraction | None:
        row = orm.Attraction.objects.filter(id=attraction_id.value).first()
        return attraction_to_domain(row) if row is not None else None

    def list_attractions(self) -> list[Attraction]:
        return [attraction_to_domain(row) for row in orm.Attraction.objects.order_by("name")]


class DjangoBookingStore(BookingStore):
    """PostgreSQL-backed booking store using Django ORM."""

    def create_booking(self, booking: Booking) -> Booking:
        existing = orm.Booking.objects.filter(idempotency_key=booking.idempotency_key).first()
        if existing is not None:
            logger.info("Booking replay for key %s", booking.idempotency_key)
            return booking_to_domain(existing)
        try:
            with transaction.atomic():
                row = orm.Booking.objects.create(
                    id=booking.id.value,
                    attraction_id=booking.attraction_id.value,
                    attraction_name=booking.attraction_name,
                    customer_name=booking.customer.name,
                    customer_email=booking.customer.email,
                    customer_phone=booking.customer.phone,
                    reserved_date=booking.reserved_date,
                    reserved_time=booking.reserved_time,
                    participants=booking.participants,
                    status=booking.status.value,
                    total_amount=booking.total_amount.amount,
                    payment_method=booking.payment_method.value,
                    duration_label=booking.duration_label,
                    idempotency_key=booking.idempotency_key,
                    created_at=booking.created_at,
                )
        except IntegrityError:
            row = orm.Booking.objects.filter(idempotency_key=booking.idempotency_key).first()
            if row is None:
                logger.exception("Booking insert rejected")
                raise PersistenceError()
        except DatabaseError as exc:
            logger.exception("Booking insert failed")
            raise PersistenceError() from exc
        return booking_to_domain(row)


class DjangoPurchaseStore(PurchaseStore):
    """Purchase store using Django ORM."""

    def create_purchase(self, purchase: Purchase) -> Purchase:
        existing = orm.Purchase.objects.filter(idempotency_key=purchase.idempotency_key).first()
        if existing is not None:
            logger.info("Purchase replay for key %s", purchase.idempotency_key)
            return purchase_to_domain(existing)
        try:
            with transaction.atomic():
                row = orm.Purchase.objects.create(
                    id=purchase.id.value,
                    attraction_id=purchase.attraction_id.value,
                    attraction_name=purchase.attraction_name,
                    customer_name=purchase.customer.name,
                    customer_email=purchase.customer.email,
                    customer_phone=purchase.customer.phone,
                    quantity=purchase.quantity,
                    status=purchase.status.value,
                    subtotal=purchase.subtotal.amount,
                    discount=purchase.discount.amount,
                    total_amount=purchase.total_amount.amount,
                    amount_paid=purchase.amount_paid.amount,
                    payment_method=purchase.payment_method.value,
                    notes=purchase.notes,
                    idempotency_key=purchase.idempotency_key,
                    created_at=purchase.created_at,
                )
        except IntegrityError:
            row = orm.Purchase.objects.filter(idempotency_key=purchase.idempotency_key).first()
            if row is None:
                logger.exception("Purchase insert rejected")
                raise PersistenceError()
        except DatabaseError as exc:
            logger.exception("Purchase insert failed")
            raise PersistenceError() from exc
        return purchase_to_domain(row)


class DjangoGiftInstrumentStore(GiftInstrumentStore):
    """Gift instrument store using Django ORM."""

    def create_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        try:
            with transaction.atomic():
                row = orm.GiftInstrument.objects.create(
                    code=instrument.code, **_instrument_fields(instrument)
                )
        except IntegrityError:
            logger.warning(
                "Gift instrument code %s taken by a concurrent insert", instrument.code
            )
            raise CodeCollisionError(1) from None
        except DatabaseError as exc:
            logger.exception("Gift instrument insert failed")
            raise PersistenceError() from exc
        return instrument_to_domain(row)

    def get_instrument(self, code: str) -> GiftInstrument | None:
        row = orm.GiftInstrument.objects.filter(code=code, deleted=False).first()
        return instrument_to_domain(row) if row is not None else None

    def list_instruments(
        self,
        type: InstrumentType | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[GiftInstrument]:
        rows = orm.GiftInstrument.objects.filter(deleted=False)
        if type is not None:
            rows = rows.filter(type=type.value)
        if search:
            rows = rows.filter(Q(code__icontains=search) | Q(description__icontains=search))
        rows = rows.order_by(f"-{sort_by}" if descending else sort_by)
        return [instrument_to_domain(row) for row in rows]

    def update_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        try:
            updated = orm.GiftInstrument.objects.filter(code=instrument.code).update(
                **_instrument_fields(instrument)
            )
        except DatabaseError as exc:
            logger.exception("Gift instrument update failed")
            raise PersistenceError() from exc
        if not updated:
            raise PersistenceError("Gift instrument no longer exists")
        return instrument

    def delete_instrument(self, code: str) -> None:
        try:
            orm.GiftInstrument.objects.filter(code=code).delete()
        except DatabaseError as exc:
            logger.exception("Gift instrument delete failed")
            raise PersistenceError() from exc

    def code_exists(self, code: str) -> bool:
        return orm.GiftInstrument.objects.filter(code=code).exists()
