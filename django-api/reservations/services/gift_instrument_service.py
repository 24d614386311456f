"""Gift instrument ledger.

Creation, activation, deactivation, edits and deletion of gift instruments.
Value invariants are enforced on every create and edit. Expiry is never
written back; reads go through ``derived_status``.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from django.core.paginator import InvalidPage, Paginator

from reservations.domain import GiftInstrument, InstrumentStatus, InstrumentType, Money
from reservations.domain import gift_instruments as rules
from reservations.domain.errors import (
    CodeCollisionError,
    InstrumentNotFoundError,
    ValidationError,
)
from reservations.domain.parsing import parse_expiry
from reservations.services.reservation_service import utc_now
from reservations.signals import gift_instrument_changed
from reservations.stores.interfaces import INSTRUMENT_SORT_FIELDS, GiftInstrumentStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"type", "initial_value", "balance", "max_usage", "description", "expiry_date", "status"}
)


@dataclass(frozen=True)
class InstrumentPage:
    items: list[GiftInstrument]
    page: int
    per_page: int
    total: int
    last_page: int


class GiftInstrumentLedger:
    """Service for gift instrument lifecycle operations."""

    def __init__(
        self,
        store: GiftInstrumentStore,
        clock: Callable[[], datetime] = utc_now,
        code_prefix: str = "GC",
        max_code_attempts: int = 5,
        code_factory: Callable[[str], str] = rules.generate_code,
    ) -> None:
        self._store = store
        self._clock = clock
        self._code_prefix = code_prefix
        self._max_code_attempts = max_code_attempts
        self._code_factory = code_factory

    def create(
        self,
        type: InstrumentType | str,
        initial_value: object,
        balance: object = None,
        max_usage: object = 1,
        description: str = "",
        expiry_date: object = None,
        created_by: str = "",
    ) -> GiftInstrument:
        """Issue a new active instrument.

        Raises:
            ValidationError: If any value field is missing, non-numeric,
                negative or breaks the balance ceiling. Nothing is stored.
            CodeCollisionError: If every generated code was already taken.
        """
        values = rules.validate_values(type, initial_value, balance, max_usage)
        expiry = parse_expiry(expiry_date)
        now = self._clock()
        instrument = GiftInstrument(
            code=self._unused_code(),
            type=values.type,
            initial_value=Money(values.initial_value),
            balance=Money(values.balance),
            max_usage=values.max_usage,
            description=(description or "").strip(),
            status=InstrumentStatus.ACTIVE,
            created_by=created_by,
            created_at=now,
            updated_at=now,
            expiry_date=expiry,
        )
        saved = self._store.create_instrument(instrument)
        logger.info("Gift instrument %s issued (%s)", saved.code, saved.type.value)
        self._emit(saved, "created")
        return saved

    def get(self, code: str) -> GiftInstrument:
        """Return a live instrument by code.

        Raises:
            InstrumentNotFoundError: If the code is unknown or deleted.
        """
        instrument = self._store.get_instrument(code)
        if instrument is None:
            raise InstrumentNotFoundError(code)
        return instrument

    def activate(self, code: str) -> GiftInstrument:
        return self._set_status(code, InstrumentStatus.ACTIVE, "activated")

    def deactivate(self, code: str) -> GiftInstrument:
        return self._set_status(code, InstrumentStatus.INACTIVE, "deactivated")

    def soft_delete(self, code: str) -> None:
        """Remove an instrument from every listing.

        Raises:
            InstrumentNotFoundError: If the code is unknown or already deleted.
        """
        instrument = self.get(code)
        self._store.delete_instrument(code)
        logger.info("Gift instrument %s deleted", code)
        self._emit(
            replace(instrument, status=InstrumentStatus.DELETED, deleted=True), "deleted"
        )

    def edit(self, code: str, /, **changes) -> GiftInstrument:
        """Change any editable field, re-checking the value invariants.

        Raises:
            InstrumentNotFoundError: If the code is unknown or deleted.
            ValidationError: On unknown fields or invalid values.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError("Field cannot be edited", field=sorted(unknown)[0])
        if "balance" in changes and changes["balance"] is None:
            raise ValidationError("A number is required", field="balance")
        instrument = self.get(code)

        values = rules.validate_values(
            changes.get("type", instrument.type),
            changes.get("initial_value", instrument.initial_value.amount),
            changes.get("balance", instrument.balance.amount),
            changes.get("max_usage", instrument.max_usage),
        )
        status = instrument.status
        if "status" in changes:
            try:
                status = InstrumentStatus(changes["status"])
            except ValueError:
                raise ValidationError("Unknown status", field="status") from None
            if status == InstrumentStatus.DELETED:
                raise ValidationError("Delete the instrument instead", field="status")
        expiry = instrument.expiry_date
        if "expiry_date" in changes:
            expiry = parse_expiry(changes["expiry_date"])
        description = instrument.description
        if "description" in changes:
            description = (changes["description"] or "").strip()

        updated = replace(
            instrument,
            type=values.type,
            initial_value=Money(values.initial_value),
            balance=Money(values.balance),
            max_usage=values.max_usage,
            description=description,
            status=status,
            expiry_date=expiry,
            updated_at=self._clock(),
        )
        saved = self._store.update_instrument(updated)
        logger.info("Gift instrument %s edited: %s", code, ", ".join(sorted(changes)))
        self._emit(saved, "edited")
        return saved

    def derived_status(self, instrument: GiftInstrument) -> InstrumentStatus:
        return rules.derived_status(instrument, self._clock())

    def is_redeemable(self, instrument: GiftInstrument) -> bool:
        return rules.is_redeemable(instrument, self._clock())

    def list_instruments(
        self,
        status: InstrumentStatus | str | None = None,
        type: InstrumentType | str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        per_page: int = 20,
    ) -> InstrumentPage:
        """Return one page of live instruments.

        ``status`` matches the derived status, so ``expired`` finds instruments
        past their expiry whatever their stored status. Type, search and sort
        are applied by the store.

        Raises:
            ValidationError: On an unknown filter or sort value, or a page
                outside ``1..last_page``.
        """
        if sort_by not in INSTRUMENT_SORT_FIELDS:
            raise ValidationError("Unsupported sort field", field="sort_by")
        if sort_order not in ("asc", "desc"):
            raise ValidationError("Sort order must be asc or desc", field="sort_order")
        if per_page < 1:
            raise ValidationError("Page size must be at least 1", field="per_page")
        wanted_type = None
        if type:
            try:
                wanted_type = InstrumentType(type)
            except ValueError:
                raise ValidationError("Unknown type", field="type") from None

        items = self._store.list_instruments(
            type=wanted_type,
            search=(search or "").strip() or None,
            sort_by=sort_by,
            descending=sort_order == "desc",
        )
        if status:
            try:
                wanted = InstrumentStatus(status)
            except ValueError:
                raise ValidationError("Unknown status", field="status") from None
            now = self._clock()
            items = [i for i in items if rules.derived_status(i, now) == wanted]

        paginator = Paginator(items, per_page)
        try:
            current = paginator.page(page)
        except InvalidPage:
            raise ValidationError(
                f"Page must be between 1 and {paginator.num_pages}", field="page"
            ) from None
        return InstrumentPage(
            items=list(current.object_list),
            page=current.number,
            per_page=per_page,
            total=paginator.count,
            last_page=paginator.num_pages,
        )

    def _set_status(self, code: str, status: InstrumentStatus, action: str) -> GiftInstrument:
        instrument = self.get(code)
        updated = replace(instrument, status=status, updated_at=self._clock())
        saved = self._store.update_instrument(updated)
        logger.info("Gift instrument %s %s", code, action)
        self._emit(saved, action)
        return saved

    def _unused_code(self) -> str:
        for _ in range(self._max_code_attempts):
            code = self._code_factory(self._code_prefix)
            if not self._store.code_exists(code):
                return code
            logger.warning("Gift instrument code %s already taken, retrying", code)
        raise CodeCollisionError(self._max_code_attempts)

    def _emit(self, instrument: GiftInstrument, action: str) -> None:
        gift_instrument_changed.send(
            sender=self.__class__, instrument=instrument, action=action
        )
