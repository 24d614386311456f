"""Tests for gift instrument rules and the ledger service."""

import re
from datetime import timedelta
from decimal import Decimal
from itertools import count

import pytest

from factories import NOW
from reservations.domain import InstrumentStatus
from reservations.domain.errors import (
    CodeCollisionError,
    InstrumentNotFoundError,
    ValidationError,
)
from reservations.domain.gift_instruments import generate_code, validate_values
from reservations.services import GiftInstrumentLedger
from reservations.stores import InMemoryStore

CODE_PATTERN = re.compile(r"^GC-[A-Z0-9]{6}-\d{4}$")


class Clock:
    """Settable clock so expiry can be observed without sleeping."""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def instrument_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ledger_clock() -> Clock:
    return Clock()


@pytest.fixture
def ledger(instrument_store, ledger_clock) -> GiftInstrumentLedger:
    return GiftInstrumentLedger(instrument_store, clock=ledger_clock)


class TestCodes:
    def test_generated_code_format(self):
        assert CODE_PATTERN.match(generate_code())

    def test_suffix_uses_last_four_clock_digits(self):
        assert generate_code("GC", now_ms=1_700_000_004_821).endswith("-4821")

    def test_prefix_is_configurable(self):
        assert generate_code("XM", now_ms=1234).startswith("XM-")


class TestValueRules:
    """Tests for validate_values."""

    def test_balance_defaults_to_initial_value(self):
        values = validate_values("fixed", "50", None, 1)
        assert values.balance == Decimal("50")

    def test_fixed_balance_cannot_exceed_initial(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_values("fixed", 50, 60, 1)
        assert excinfo.value.field == "balance"

    def test_percentage_capped_at_one_hundred(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_values("percentage", 120, None, 1)
        assert excinfo.value.field == "initial_value"

    def test_percentage_balance_capped_at_one_hundred(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_values("percentage", 20, 101, 1)
        assert excinfo.value.field == "balance"

    @pytest.mark.parametrize("max_usage", [0, "abc", "1.5"])
    def test_max_usage_must_be_positive_integer(self, max_usage):
        with pytest.raises(ValidationError) as excinfo:
            validate_values("fixed", 10, None, max_usage)
        assert excinfo.value.field == "max_usage"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_values("voucher", 10, None, 1)
        assert excinfo.value.field == "type"


class TestLifecycle:
    """Tests for create, activate, deactivate and delete."""

    def test_create_deactivate_activate(self, ledger, sent_events):
        instrument = ledger.create(
            type="fixed", initial_value="50.00", max_usage=1, expiry_date=None
        )

        assert CODE_PATTERN.match(instrument.code)
        assert instrument.status == InstrumentStatus.ACTIVE
        assert instrument.balance.amount == Decimal("50.00")
        assert instrument.created_at == NOW

        assert ledger.deactivate(instrument.code).status == InstrumentStatus.INACTIVE
        assert ledger.activate(instrument.code).status == InstrumentStatus.ACTIVE
        assert [kwargs["action"] for _, kwargs in sent_events] == [
            "created",
            "deactivated",
            "activated",
        ]

    def test_non_numeric_value_stores_nothing(self, ledger, instrument_store):
        with pytest.raises(ValidationError) as excinfo:
            ledger.create(type="fixed", initial_value="abc")

        assert excinfo.value.field == "initial_value"
        assert instrument_store.instruments == {}

    def test_code_collision_retries(self, instrument_store, ledger_clock):
        codes = iter(["GC-AAAAAA-0001", "GC-AAAAAA-0001", "GC-BBBBBB-0002"])
        ledger = GiftInstrumentLedger(
            instrument_store, clock=ledger_clock, code_factory=lambda prefix: next(codes)
        )

        first = ledger.create(type="fixed", initial_value=10)
        second = ledger.create(type="fixed", initial_value=10)

        assert first.code == "GC-AAAAAA-0001"
        assert second.code == "GC-BBBBBB-0002"

    def test_code_collision_gives_up(self, instrument_store, ledger_clock):
        ledger = GiftInstrumentLedger(
            instrument_store,
            clock=ledger_clock,
            max_code_attempts=3,
            code_factory=lambda prefix: "GC-AAAAAA-0001",
        )
        ledger.create(type="fixed", initial_value=10)

        with pytest.raises(CodeCollisionError) as excinfo:
            ledger.create(type="fixed", initial_value=10)
        assert excinfo.value.attempts == 3

    def test_deleted_instrument_disappears(self, ledger, instrument_store):
        instrument = ledger.create(type="fixed", initial_value=10)

        ledger.soft_delete(instrument.code)

        assert ledger.list_instruments().total == 0
        with pytest.raises(InstrumentNotFoundError):
            ledger.get(instrument.code)
        with pytest.raises(InstrumentNotFoundError):
            ledger.activate(instrument.code)
        assert instrument_store.code_exists(instrument.code)

    def test_unknown_code_not_found(self, ledger):
        with pytest.raises(InstrumentNotFoundError):
            ledger.deactivate("GC-NOPE00-0000")


class TestEdit:
    def test_edit_rechecks_balance(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50)

        with pytest.raises(ValidationError) as excinfo:
            ledger.edit(instrument.code, balance=75)
        assert excinfo.value.field == "balance"

    def test_edit_updates_fields(self, ledger, ledger_clock):
        instrument = ledger.create(type="fixed", initial_value=50)
        ledger_clock.now = NOW + timedelta(hours=1)

        edited = ledger.edit(instrument.code, balance="20", description=" Spa day ")

        assert edited.balance.amount == Decimal("20.00")
        assert edited.description == "Spa day"
        assert edited.updated_at == NOW + timedelta(hours=1)
        assert edited.created_at == NOW

    def test_edit_cannot_delete(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50)
        with pytest.raises(ValidationError) as excinfo:
            ledger.edit(instrument.code, status="deleted")
        assert excinfo.value.field == "status"

    def test_edit_rejects_unknown_field(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50)
        with pytest.raises(ValidationError) as excinfo:
            ledger.edit(instrument.code, code="GC-OTHER0-0000")
        assert excinfo.value.field == "code"

    def test_edit_cannot_clear_balance(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50, balance=10)

        with pytest.raises(ValidationError) as excinfo:
            ledger.edit(instrument.code, balance=None)

        assert excinfo.value.field == "balance"
        assert ledger.get(instrument.code).balance.amount == Decimal("10.00")

    @pytest.mark.parametrize("field", ["initial_value", "max_usage"])
    def test_edit_rejects_blank_values(self, ledger, field):
        instrument = ledger.create(type="fixed", initial_value=50)
        with pytest.raises(ValidationError) as excinfo:
            ledger.edit(instrument.code, **{field: ""})
        assert excinfo.value.field == field


class TestExpiry:
    """Expiry is derived on read and never written back."""

    def test_active_instrument_shows_expired_after_expiry(self, ledger, ledger_clock):
        instrument = ledger.create(
            type="fixed", initial_value=50, expiry_date=(NOW + timedelta(days=1)).isoformat()
        )
        assert ledger.derived_status(instrument) == InstrumentStatus.ACTIVE
        assert ledger.is_redeemable(instrument)

        ledger_clock.now = NOW + timedelta(days=2)

        assert ledger.derived_status(instrument) == InstrumentStatus.EXPIRED
        assert ledger.get(instrument.code).status == InstrumentStatus.ACTIVE
        assert not ledger.is_redeemable(instrument)

    def test_expired_filter_matches_derived_status(self, ledger, ledger_clock):
        ledger.create(type="fixed", initial_value=50, expiry_date=NOW + timedelta(days=1))
        ledger.create(type="fixed", initial_value=50)
        ledger_clock.now = NOW + timedelta(days=2)

        assert ledger.list_instruments(status="expired").total == 1
        assert ledger.list_instruments(status="active").total == 1

    def test_zero_balance_not_redeemable(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50, balance=0)
        assert not ledger.is_redeemable(instrument)

    def test_inactive_not_redeemable(self, ledger):
        instrument = ledger.create(type="fixed", initial_value=50)
        assert not ledger.is_redeemable(ledger.deactivate(instrument.code))


class TestListing:
    @pytest.fixture
    def populated(self, instrument_store):
        ticks = count()
        ledger = GiftInstrumentLedger(
            instrument_store, clock=lambda: NOW + timedelta(minutes=next(ticks))
        )
        ledger.create(type="fixed", initial_value=10, description="Birthday")
        ledger.create(type="percentage", initial_value=15, description="Staff")
        ledger.create(type="fixed", initial_value=30, description="Corporate")
        return ledger

    def test_newest_first_by_default(self, populated):
        page = populated.list_instruments()
        assert [i.description for i in page.items] == ["Corporate", "Staff", "Birthday"]

    def test_filter_by_type(self, populated):
        page = populated.list_instruments(type="percentage")
        assert [i.description for i in page.items] == ["Staff"]

    def test_search_is_case_insensitive(self, populated):
        page = populated.list_instruments(search="birth")
        assert [i.description for i in page.items] == ["Birthday"]

    def test_sort_by_initial_value(self, populated):
        page = populated.list_instruments(sort_by="initial_value", sort_order="asc")
        assert [i.initial_value.amount for i in page.items] == [10, 15, 30]

    def test_pagination(self, populated):
        page = populated.list_instruments(page=2, per_page=2)
        assert page.total == 3
        assert page.last_page == 2
        assert [i.description for i in page.items] == ["Birthday"]

    def test_page_past_the_end_rejected(self, populated):
        with pytest.raises(ValidationError) as excinfo:
            populated.list_instruments(page=3, per_page=2)
        assert excinfo.value.field == "page"

    def test_empty_listing_has_one_page(self, ledger):
        page = ledger.list_instruments()
        assert (page.total, page.last_page, page.items) == (0, 1, [])

    def test_filters_combine(self, populated):
        page = populated.list_instruments(type="fixed", search="CORP")
        assert [i.description for i in page.items] == ["Corporate"]

    def test_unsupported_sort_field(self, populated):
        with pytest.raises(ValidationError) as excinfo:
            populated.list_instruments(sort_by="status")
        assert excinfo.value.field == "sort_by"
