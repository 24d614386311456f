"""Counter sale workflow for immediate on-site purchases.

Fields may be edited in any order. Completing needs only a selected item.
"""

from datetime import datetime

from reservations.domain.commit_guard import CommitGuard
from reservations.domain.errors import ValidationError
from reservations.domain.models import (
    COUNTER_PAYMENT_METHODS,
    Attraction,
    CustomerContact,
    PaymentMethod,
    PricingMode,
    Purchase,
    PurchaseStatus,
)
from reservations.domain.parsing import parse_amount
from reservations.domain.pricing import clamp_discount, compute_subtotal, compute_total
from reservations.domain.value_objects import Money, PurchaseId

WALK_IN_CUSTOMER_NAME = "Walk-in Customer"
DEFAULT_PAYMENT_METHOD = PaymentMethod.CASH


class CounterSale:
    """Transient state of one point-of-sale transaction."""

    def __init__(
        self,
        walk_in_name: str = WALK_IN_CUSTOMER_NAME,
        idempotency_key: str | None = None,
    ) -> None:
        self.walk_in_name = walk_in_name
        self.guard = CommitGuard(idempotency_key)
        self.reset()

    def reset(self) -> None:
        """Return every transient field to its initial value."""
        self.item: Attraction | None = None
        self.quantity = 1
        self.discount = Money.zero()
        self.cash_received = Money.zero()
        self.notes = ""
        self.payment_method = DEFAULT_PAYMENT_METHOD
        self.customer_name = ""
        self.customer_email = ""
        self.customer_phone = ""

    def select_item(self, attraction: Attraction) -> None:
        self.item = attraction

    def clear_item(self) -> None:
        self.item = None

    def set_quantity(self, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", field="quantity")
        self.quantity = quantity

    def increment_quantity(self) -> int:
        self.quantity += 1
        return self.quantity

    def decrement_quantity(self) -> int:
        self.quantity = max(self.quantity - 1, 1)
        return self.quantity

    def set_discount(self, value: object) -> None:
        amount = parse_amount(value, "discount")
        if self.item is not None and amount > self.subtotal.amount:
            raise ValidationError("Discount cannot exceed the subtotal", field="discount")
        self.discount = Money(amount)

    def set_cash_received(self, value: object) -> None:
        """Record the cash handed over; only counts when paying cash."""
        self.cash_received = Money(parse_amount(value, "amount_paid"))

    def set_notes(self, notes: str) -> None:
        self.notes = (notes or "").strip()

    def set_customer(self, name: str = "", email: str = "", phone: str = "") -> None:
        self.customer_name = (name or "").strip()
        self.customer_email = (email or "").strip()
        self.customer_phone = (phone or "").strip()

    def select_payment_method(self, method: PaymentMethod | str) -> None:
        try:
            method = PaymentMethod(method)
        except ValueError:
            raise ValidationError("Unknown payment method", field="payment_method") from None
        if method not in COUNTER_PAYMENT_METHODS:
            raise ValidationError(
                "Payment method is not accepted at the counter",
                field="payment_method",
            )
        self.payment_method = method

    @property
    def can_complete(self) -> bool:
        return self.item is not None

    @property
    def subtotal(self) -> Money:
        if self.item is None:
            return Money.zero()
        return compute_subtotal(self.item.price, PricingMode.PER_UNIT, self.quantity)

    @property
    def applied_discount(self) -> Money:
        return clamp_discount(self.discount, self.subtotal)

    @property
    def total(self) -> Money:
        if self.item is None:
            return Money.zero()
        return compute_total(
            self.item.price, PricingMode.PER_UNIT, self.quantity, self.discount
        )

    @property
    def amount_paid(self) -> Money:
        """Amount settled at the counter for the selected payment method."""
        if self.payment_method == PaymentMethod.PAY_LATER:
            return Money.zero()
        if self.payment_method == PaymentMethod.CARD:
            return self.total
        return self.cash_received

    def build_purchase(self, purchase_id: PurchaseId, created_at: datetime) -> Purchase | None:
        """Build the Purchase this sale would commit, or None without an item."""
        if self.item is None:
            return None
        return Purchase(
            id=purchase_id,
            attraction_id=self.item.id,
            attraction_name=self.item.name,
            customer=CustomerContact(
                name=self.customer_name or self.walk_in_name,
                email=self.customer_email,
                phone=self.customer_phone,
            ),
            quantity=self.quantity,
            subtotal=self.subtotal,
            discount=self.applied_discount,
            total_amount=self.total,
            amount_paid=self.amount_paid,
            payment_method=self.payment_method,
            notes=self.notes or self._default_notes(),
            created_at=created_at,
            idempotency_key=self.guard.idempotency_key,
            status=PurchaseStatus.CONFIRMED,
        )

    def _default_notes(self) -> str:
        tickets = "ticket" if self.quantity == 1 else "tickets"
        return f"Attraction Purchase: {self.item.name} ({self.quantity} {tickets})"
