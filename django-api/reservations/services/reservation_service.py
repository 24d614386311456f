"""Reservation service: starts workflows and commits their bookings.

Commits are guarded per workflow and deduplicated by the store on the
workflow's idempotency key. A failed commit leaves the selection untouched
so the caller can retry.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from reservations.domain import Booking, BookingId
from reservations.domain.availability import DEFAULT_WINDOW_DAYS
from reservations.domain.errors import PersistenceError, ValidationError
from reservations.domain.workflow import ReservationWorkflow
from reservations.services.attraction_service import AttractionService
from reservations.signals import booking_committed
from reservations.stores.interfaces import AttractionCatalog, BookingStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReservationService:
    """Service for the guided reservation workflow."""

    def __init__(
        self,
        catalog: AttractionCatalog,
        store: BookingStore,
        clock: Callable[[], datetime] = utc_now,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._attractions = AttractionService(catalog)
        self._store = store
        self._clock = clock
        self._window_days = window_days

    def start(
        self,
        attraction_id: str,
        today: date | None = None,
        idempotency_key: str | None = None,
    ) -> ReservationWorkflow:
        """Open a workflow for an attraction.

        Raises:
            InvalidAttractionIdError: If the attraction_id is not a valid UUID.
            AttractionNotFoundError: If the attraction does not exist.
            ValidationError: If the attraction is inactive.
        """
        attraction = self._attractions.get_attraction(attraction_id)
        if not attraction.is_active:
            raise ValidationError("Attraction is not open for booking", field="attraction")
        return ReservationWorkflow(
            attraction,
            today=today or self._clock().date(),
            window_days=self._window_days,
            idempotency_key=idempotency_key,
        )

    def complete(self, workflow: ReservationWorkflow) -> Booking:
        """Commit the booking and move the workflow to CONFIRMATION.

        Raises:
            CommitInProgressError: If this workflow's previous commit is unresolved.
            WorkflowTransitionError: If the workflow is not on the payment step.
            ValidationError: If any step's gate fails.
            PersistenceError: If the store fails; safe to retry.
        """
        with workflow.guard.committing():
            booking = workflow.build_booking(BookingId.new(), self._clock())
            try:
                saved = self._store.create_booking(booking)
            except PersistenceError:
                logger.warning(
                    "Booking commit failed for attraction %s", booking.attraction_id
                )
                raise
        workflow.confirm(saved)
        logger.info(
            "Booking %s confirmed for %s on %s %s",
            saved.id,
            saved.attraction_name,
            saved.reserved_date.isoformat(),
            saved.reserved_time.strftime("%H:%M"),
        )
        booking_committed.send(sender=self.__class__, booking=saved)
        return saved
