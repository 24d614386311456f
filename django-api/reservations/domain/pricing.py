"""Pricing calculator.

All amounts are non-negative and rounded to cents. There is no tax or
currency handling here.
"""

from decimal import Decimal

from reservations.domain.errors import ValidationError
from reservations.domain.models import PricingMode
from reservations.domain.value_objects import Money

# GROUP has no tier rules of its own and prices like FIXED.
_QUANTITY_INDEPENDENT = frozenset({PricingMode.FIXED, PricingMode.GROUP})


def _amount(value: Money | Decimal | int) -> Decimal:
    if isinstance(value, Money):
        return value.amount
    return Decimal(value)


def compute_subtotal(
    base_price: Money | Decimal | int,
    pricing_mode: PricingMode,
    quantity: int,
) -> Money:
    """Price before discount for ``quantity`` participants or units."""
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1", field="quantity")
    price = _amount(base_price)
    if PricingMode(pricing_mode) in _QUANTITY_INDEPENDENT:
        return Money(price)
    return Money(price * quantity)


def clamp_discount(discount: Money | Decimal | int, subtotal: Money) -> Money:
    """Clamp ``discount`` into ``[0, subtotal]``."""
    value = _amount(discount)
    if value < 0:
        return Money.zero()
    return Money(min(value, subtotal.amount))


def compute_total(
    base_price: Money | Decimal | int,
    pricing_mode: PricingMode,
    quantity: int,
    discount: Money | Decimal | int = 0,
) -> Money:
    """Total due: ``max(0, subtotal - discount)``, discount clamped first."""
    subtotal = compute_subtotal(base_price, pricing_mode, quantity)
    return Money(subtotal.amount - clamp_discount(discount, subtotal).amount)
