"""Tests for the counter sale workflow and its service."""

from decimal import Decimal

import pytest

from factories import NOW, FlakyStore, make_attraction
from reservations.domain import (
    AttractionStatus,
    Money,
    PaymentMethod,
    PricingMode,
    PurchaseId,
    PurchaseStatus,
)
from reservations.domain.counter_sale import CounterSale
from reservations.domain.errors import PersistenceError, ValidationError
from reservations.services import CounterSaleService
from reservations.stores import InMemoryStore


@pytest.fixture
def item():
    return make_attraction(name="Arcade Card", price=Money(40), pricing_mode=PricingMode.FIXED)


@pytest.fixture
def sale() -> CounterSale:
    return CounterSale()


class TestCounterSale:
    """Tests for CounterSale state."""

    def test_subtotal_and_total(self, sale, item):
        sale.select_item(item)
        sale.set_quantity(2)
        sale.set_discount(15)

        assert sale.subtotal.amount == Decimal("80.00")
        assert sale.total.amount == Decimal("65.00")

    def test_prices_per_unit_regardless_of_mode(self, sale, item):
        sale.select_item(item)
        sale.set_quantity(3)
        assert sale.subtotal.amount == Decimal("120.00")

    def test_fields_may_be_set_before_item(self, sale, item):
        sale.set_discount("10")
        sale.set_notes("birthday")
        sale.select_payment_method("card")
        sale.select_item(item)

        assert sale.total.amount == Decimal("30.00")
        assert sale.payment_method == PaymentMethod.CARD

    def test_no_item_totals_are_zero(self, sale):
        assert sale.can_complete is False
        assert sale.total == Money.zero()

    def test_discount_above_subtotal_rejected(self, sale, item):
        sale.select_item(item)
        with pytest.raises(ValidationError) as excinfo:
            sale.set_discount(41)
        assert excinfo.value.field == "discount"

    @pytest.mark.parametrize("value", ["abc", "-5", "", None])
    def test_discount_must_be_non_negative_number(self, sale, value):
        with pytest.raises(ValidationError) as excinfo:
            sale.set_discount(value)
        assert excinfo.value.field == "discount"

    def test_discount_reclamped_when_quantity_drops(self, sale, item):
        sale.select_item(item)
        sale.set_quantity(2)
        sale.set_discount(60)

        sale.set_quantity(1)

        assert sale.applied_discount.amount == Decimal("40.00")
        assert sale.total.amount == Decimal("0.00")

    def test_quantity_decrement_clamps_at_one(self, sale):
        assert sale.decrement_quantity() == 1

    def test_quantity_below_one_rejected(self, sale):
        with pytest.raises(ValidationError):
            sale.set_quantity(0)

    def test_default_payment_method_is_cash(self, sale):
        assert sale.payment_method == PaymentMethod.CASH

    def test_reservation_only_method_rejected(self, sale):
        with pytest.raises(ValidationError):
            sale.select_payment_method("paypal")


class TestAmountPaid:
    """The amount settled at the counter depends on the payment method."""

    @pytest.fixture
    def priced(self, sale, item):
        sale.select_item(item)
        sale.set_quantity(2)
        sale.set_discount(15)
        sale.set_cash_received("70")
        return sale

    def test_cash_records_amount_received(self, priced):
        assert priced.amount_paid.amount == Decimal("70.00")

    def test_card_records_total(self, priced):
        priced.select_payment_method("card")
        assert priced.amount_paid.amount == Decimal("65.00")

    def test_pay_later_records_nothing(self, priced):
        priced.select_payment_method("paylater")
        assert priced.amount_paid == Money.zero()

    @pytest.mark.parametrize("value", ["abc", "-1"])
    def test_cash_received_must_be_non_negative_number(self, sale, value):
        with pytest.raises(ValidationError) as excinfo:
            sale.set_cash_received(value)
        assert excinfo.value.field == "amount_paid"

    def test_purchase_carries_amount_paid(self, priced):
        priced.select_payment_method("paylater")
        purchase = priced.build_purchase(PurchaseId.new(), NOW)

        assert purchase.amount_paid == Money.zero()
        assert purchase.total_amount.amount == Decimal("65.00")

    def test_reset_clears_cash_received(self, priced):
        priced.reset()
        assert priced.cash_received == Money.zero()


class TestCounterSaleService:
    """Tests for CounterSaleService.complete."""

    def test_complete_without_item_is_noop(self, clock):
        store = InMemoryStore()
        service = CounterSaleService(store, store, clock=clock)
        sale = service.start()
        sale.set_quantity(3)

        assert service.complete(sale) is None
        assert store.purchases == {}
        assert sale.quantity == 3

    def test_complete_persists_and_resets(self, clock, item, sent_events):
        store = InMemoryStore([item])
        service = CounterSaleService(store, store, clock=clock)
        sale = service.start()
        service.select_item(sale, str(item.id))
        sale.set_quantity(2)
        sale.set_discount(15)

        purchase = service.complete(sale)

        assert purchase.status == PurchaseStatus.CONFIRMED
        assert purchase.subtotal.amount == Decimal("80.00")
        assert purchase.discount.amount == Decimal("15.00")
        assert purchase.total_amount.amount == Decimal("65.00")
        assert purchase.amount_paid == Money.zero()
        assert purchase.customer.name == "Walk-in Customer"
        assert purchase.notes == "Attraction Purchase: Arcade Card (2 tickets)"
        assert purchase.created_at == NOW
        assert list(store.purchases.values()) == [purchase]
        assert sale.item is None
        assert sale.quantity == 1
        assert sale.discount == Money.zero()
        assert sale.payment_method == PaymentMethod.CASH
        assert sent_events == [("purchase_committed", {"purchase": purchase})]

    def test_named_customer_and_notes_are_kept(self, clock, item):
        store = InMemoryStore([item])
        service = CounterSaleService(store, store, clock=clock, walk_in_name="Guest")
        sale = service.start()
        service.select_item(sale, str(item.id))
        sale.set_customer("Grace Hopper", "grace@example.com")
        sale.set_notes("VIP")

        purchase = service.complete(sale)

        assert purchase.customer.name == "Grace Hopper"
        assert purchase.notes == "VIP"

    def test_consecutive_sales_get_distinct_keys(self, clock, item):
        store = InMemoryStore([item])
        service = CounterSaleService(store, store, clock=clock)
        sale = service.start()

        for _ in range(2):
            service.select_item(sale, str(item.id))
            service.complete(sale)

        assert len(store.purchases) == 2

    def test_persistence_failure_keeps_state_and_allows_retry(self, clock, item):
        store = FlakyStore([item], failures=1)
        service = CounterSaleService(store, store, clock=clock)
        sale = service.start()
        service.select_item(sale, str(item.id))
        sale.set_quantity(2)

        with pytest.raises(PersistenceError):
            service.complete(sale)

        assert sale.item == item
        assert sale.quantity == 2
        assert sale.guard.commit_in_progress is False

        purchase = service.complete(sale)
        assert purchase.quantity == 2
        assert len(store.purchases) == 1

    def test_inactive_item_cannot_be_sold(self, clock):
        closed = make_attraction(status=AttractionStatus.INACTIVE)
        store = InMemoryStore([closed])
        service = CounterSaleService(store, store, clock=clock)

        with pytest.raises(ValidationError) as excinfo:
            service.select_item(service.start(), str(closed.id))
        assert excinfo.value.field == "attraction"
