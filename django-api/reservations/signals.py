"""Domain event signals.

Services send these after a record is committed or an instrument changes.
Downstream consumers (notifications, analytics) connect their own receivers.
"""

import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# sender: service class; kwargs: booking
booking_committed = Signal()
# sender: service class; kwargs: purchase
purchase_committed = Signal()
# sender: service class; kwargs: instrument, action
gift_instrument_changed = Signal()


@receiver(booking_committed)
def log_booking_committed(sender, booking, **kwargs):
    logger.info(
        "Booking committed",
        extra={
            "booking_id": str(booking.id),
            "attraction_id": str(booking.attraction_id),
            "total_amount": str(booking.total_amount),
        },
    )


@receiver(purchase_committed)
def log_purchase_committed(sender, purchase, **kwargs):
    logger.info(
        "Purchase committed",
        extra={
            "purchase_id": str(purchase.id),
            "attraction_id": str(purchase.attraction_id),
            "total_amount": str(purchase.total_amount),
        },
    )


@receiver(gift_instrument_changed)
def log_gift_instrument_changed(sender, instrument, action, **kwargs):
    logger.info(
        "Gift instrument %s",
        action,
        extra={"code": instrument.code, "status": instrument.status.value},
    )
