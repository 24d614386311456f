"""Reservation workflow: a linear, guarded state machine.

Steps only move along the transition tables below. Going back never clears
data, and CONFIRMATION is reachable only through ``confirm``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import IntEnum
from typing import Callable

from reservations.domain.availability import (
    DEFAULT_WINDOW_DAYS,
    resolve_dates,
    resolve_times,
)
from reservations.domain.commit_guard import CommitGuard
from reservations.domain.errors import ValidationError, WorkflowTransitionError
from reservations.domain.models import (
    RESERVATION_PAYMENT_METHODS,
    Attraction,
    Booking,
    BookingStatus,
    CustomerContact,
    PaymentMethod,
)
from reservations.domain.pricing import compute_subtotal, compute_total
from reservations.domain.value_objects import BookingId, Money


class ReservationStep(IntEnum):
    DATE_TIME = 1
    PARTICIPANTS = 2
    CUSTOMER_INFO = 3
    PAYMENT = 4
    CONFIRMATION = 5


FORWARD_TRANSITIONS = {
    ReservationStep.DATE_TIME: ReservationStep.PARTICIPANTS,
    ReservationStep.PARTICIPANTS: ReservationStep.CUSTOMER_INFO,
    ReservationStep.CUSTOMER_INFO: ReservationStep.PAYMENT,
}

BACKWARD_TRANSITIONS = {
    ReservationStep.PARTICIPANTS: ReservationStep.DATE_TIME,
    ReservationStep.CUSTOMER_INFO: ReservationStep.PARTICIPANTS,
    ReservationStep.PAYMENT: ReservationStep.CUSTOMER_INFO,
}


@dataclass
class ReservationSelection:
    """In-memory selection state owned by one workflow instance."""

    selected_date: date | None = None
    selected_time: time | None = None
    participants: int = 1
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    payment_method: PaymentMethod | None = None


class ReservationWorkflow:
    """Collects date/time, party size, contact and payment, then confirms."""

    def __init__(
        self,
        attraction: Attraction,
        today: date,
        window_days: int = DEFAULT_WINDOW_DAYS,
        idempotency_key: str | None = None,
    ) -> None:
        self.attraction = attraction
        self.selection = ReservationSelection()
        self.guard = CommitGuard(idempotency_key)
        self.booking: Booking | None = None
        self._step = ReservationStep.DATE_TIME
        self._available_dates = resolve_dates(attraction, today, window_days)

    @property
    def step(self) -> ReservationStep:
        return self._step

    @property
    def available_dates(self) -> list[date]:
        return list(self._available_dates)

    @property
    def available_times(self) -> list[time]:
        if self.selection.selected_date is None:
            return []
        return resolve_times(self.attraction, self.selection.selected_date)

    # ------------------------------------------------------------------
    # Selection edits
    # ------------------------------------------------------------------

    def select_date(self, day: date) -> None:
        self._require_editable()
        if day not in self._available_dates:
            raise ValidationError("Date is not available for booking", field="date")
        self.selection.selected_date = day
        if self.selection.selected_time not in self.available_times:
            self.selection.selected_time = None

    def select_time(self, slot: time) -> None:
        self._require_editable()
        if self.selection.selected_date is None:
            raise ValidationError("Select a date first", field="date")
        if slot not in self.available_times:
            raise ValidationError("Time is not available on this date", field="time")
        self.selection.selected_time = slot

    def set_participants(self, count: int) -> None:
        self._require_editable()
        if not 1 <= count <= self.attraction.max_capacity.value:
            raise ValidationError(
                f"Participants must be between 1 and {self.attraction.max_capacity.value}",
                field="participants",
            )
        self.selection.participants = count

    def increment_participants(self) -> int:
        self._require_editable()
        self.selection.participants = min(
            self.selection.participants + 1, self.attraction.max_capacity.value
        )
        return self.selection.participants

    def decrement_participants(self) -> int:
        self._require_editable()
        self.selection.participants = max(self.selection.participants - 1, 1)
        return self.selection.participants

    def set_customer_info(
        self, first_name: str, last_name: str, email: str, phone: str = ""
    ) -> None:
        self._require_editable()
        self.selection.first_name = (first_name or "").strip()
        self.selection.last_name = (last_name or "").strip()
        self.selection.email = (email or "").strip()
        self.selection.phone = (phone or "").strip()

    def select_payment_method(self, method: PaymentMethod | str) -> None:
        self._require_editable()
        try:
            method = PaymentMethod(method)
        except ValueError:
            raise ValidationError("Unknown payment method", field="payment_method") from None
        if method not in RESERVATION_PAYMENT_METHODS:
            raise ValidationError(
                "Payment method is not accepted for reservations",
                field="payment_method",
            )
        self.selection.payment_method = method

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def gate_errors(self, step: ReservationStep) -> dict[str, str]:
        """Return the failing fields of ``step``'s own data, empty when it passes."""
        return _GATES.get(step, _no_gate)(self)

    def _errors_up_to(self, target: ReservationStep) -> dict[str, str]:
        errors: dict[str, str] = {}
        for step in ReservationStep:
            if step >= target:
                break
            errors.update(self.gate_errors(step))
        return errors

    def can_advance(self) -> bool:
        target = FORWARD_TRANSITIONS.get(self._step)
        return target is not None and not self.gate_errors(self._step)

    def advance(self) -> ReservationStep:
        """Move to the next step if the current step's data passes its gate.

        Raises:
            WorkflowTransitionError: From PAYMENT (use ``confirm``) or CONFIRMATION.
            ValidationError: If the gate fails; the step does not change.
        """
        target = FORWARD_TRANSITIONS.get(self._step)
        if target is None:
            raise WorkflowTransitionError(
                f"Cannot advance from {self._step.name.lower()}"
            )
        _raise_first(self._errors_up_to(target))
        self._step = target
        return self._step

    def back(self) -> ReservationStep:
        target = BACKWARD_TRANSITIONS.get(self._step)
        if target is None:
            raise WorkflowTransitionError(
                f"Cannot go back from {self._step.name.lower()}"
            )
        self._step = target
        return self._step

    # ------------------------------------------------------------------
    # Totals and confirmation
    # ------------------------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return compute_subtotal(
            self.attraction.price,
            self.attraction.pricing_mode,
            self.selection.participants,
        )

    @property
    def total(self) -> Money:
        return compute_total(
            self.attraction.price,
            self.attraction.pricing_mode,
            self.selection.participants,
        )

    def build_booking(self, booking_id: BookingId, created_at: datetime) -> Booking:
        """Build the confirmed Booking this workflow would commit.

        Raises:
            WorkflowTransitionError: If the workflow is not on the PAYMENT step.
            ValidationError: If any gate before CONFIRMATION fails.
        """
        if self._step != ReservationStep.PAYMENT:
            raise WorkflowTransitionError("Bookings are completed from the payment step")
        _raise_first(self._errors_up_to(ReservationStep.CONFIRMATION))
        selection = self.selection
        return Booking(
            id=booking_id,
            attraction_id=self.attraction.id,
            attraction_name=self.attraction.name,
            customer=CustomerContact(
                name=f"{selection.first_name} {selection.last_name}",
                email=selection.email,
                phone=selection.phone,
            ),
            reserved_date=selection.selected_date,
            reserved_time=selection.selected_time,
            participants=selection.participants,
            total_amount=self.total,
            payment_method=selection.payment_method,
            duration_label=self.attraction.duration_label,
            created_at=created_at,
            idempotency_key=self.guard.idempotency_key,
            status=BookingStatus.CONFIRMED,
        )

    def confirm(self, booking: Booking) -> None:
        """Enter CONFIRMATION with the booking the store accepted."""
        if self._step != ReservationStep.PAYMENT:
            raise WorkflowTransitionError("Bookings are completed from the payment step")
        self.booking = booking
        self._step = ReservationStep.CONFIRMATION

    def _require_editable(self) -> None:
        if self._step == ReservationStep.CONFIRMATION:
            raise WorkflowTransitionError("Booking is already confirmed")


def _raise_first(errors: dict[str, str]) -> None:
    if errors:
        field, message = next(iter(errors.items()))
        raise ValidationError(message, field=field)


def _no_gate(workflow: ReservationWorkflow) -> dict[str, str]:
    return {}


def _date_time_gate(workflow: ReservationWorkflow) -> dict[str, str]:
    errors = {}
    selection = workflow.selection
    if selection.selected_date is None or selection.selected_date not in workflow.available_dates:
        errors["date"] = "Select an available date"
    if selection.selected_time is None or selection.selected_time not in workflow.available_times:
        errors["time"] = "Select an available time"
    return errors


def _participants_gate(workflow: ReservationWorkflow) -> dict[str, str]:
    capacity = workflow.attraction.max_capacity.value
    if not 1 <= workflow.selection.participants <= capacity:
        return {"participants": f"Participants must be between 1 and {capacity}"}
    return {}


def _customer_info_gate(workflow: ReservationWorkflow) -> dict[str, str]:
    errors = {}
    for field in ("first_name", "last_name", "email"):
        if not getattr(workflow.selection, field):
            errors[field] = f"{field.replace('_', ' ').capitalize()} is required"
    return errors


def _payment_gate(workflow: ReservationWorkflow) -> dict[str, str]:
    if workflow.selection.payment_method not in RESERVATION_PAYMENT_METHODS:
        return {"payment_method": "Select a payment method"}
    return {}


_GATES: dict[ReservationStep, Callable[[ReservationWorkflow], dict[str, str]]] = {
    ReservationStep.DATE_TIME: _date_time_gate,
    ReservationStep.PARTICIPANTS: _participants_gate,
    ReservationStep.CUSTOMER_INFO: _customer_info_gate,
    ReservationStep.PAYMENT: _payment_gate,
}
