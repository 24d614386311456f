"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from decimal import Decimal
from uuid import UUID

import pytest

from factories import make_attraction
from reservations.domain import AttractionId, Capacity, Money


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("12.50")).amount == Decimal("12.50")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money.zero().amount == Decimal("0.00")

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("7"))) == "7.00"

    def test_money_rounds_to_cents(self):
        assert Money(Decimal("1.005")).amount == Decimal("1.01")

    def test_money_accepts_int(self):
        assert Money(40).amount == Decimal("40.00")


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        assert Capacity(10).value == 10

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-1)


class TestAttractionId:
    """Tests for AttractionId value object."""

    def test_from_string_valid_uuid(self):
        """AttractionId.from_string parses valid UUID."""
        raw = "6f1c2a7e-8d0b-4a53-9d4e-3f1b2c3d4e5f"
        assert AttractionId.from_string(raw).value == UUID(raw)

    def test_from_string_invalid_uuid(self):
        """AttractionId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            AttractionId.from_string("not-a-uuid")


class TestAttraction:
    """Tests for Attraction invariants."""

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            make_attraction(max_capacity=Capacity(0))

    def test_rejects_unknown_weekday(self):
        with pytest.raises(ValueError):
            make_attraction(availability={"funday": True})

    def test_availability_is_read_only(self):
        attraction = make_attraction()
        with pytest.raises(TypeError):
            attraction.availability["tuesday"] = True

    def test_duration_label(self):
        assert make_attraction(duration=2, duration_unit="hours").duration_label == "2 hours"
