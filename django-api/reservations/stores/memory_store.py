"""In-process store for client-side use and tests.

Deletion here is soft: the instrument is flagged and kept, so its code stays
reserved.
"""

from dataclasses import replace

from reservations.domain import (
    Attraction,
    AttractionId,
    Booking,
    GiftInstrument,
    InstrumentStatus,
    InstrumentType,
    Purchase,
)
from reservations.stores.interfaces import (
    AttractionCatalog,
    BookingStore,
    GiftInstrumentStore,
    PurchaseStore,
)

_SORT_KEYS = {
    "code": lambda i: i.code,
    "initial_value": lambda i: i.initial_value.amount,
    "balance": lambda i: i.balance.amount,
    "created_at": lambda i: i.created_at,
}


class InMemoryStore(AttractionCatalog, BookingStore, PurchaseStore, GiftInstrumentStore):
    """Dict-backed implementation of every store interface."""

    def __init__(self, attractions: list[Attraction] | None = None) -> None:
        self.attractions = {a.id: a for a in attractions or []}
        self.bookings: dict[str, Booking] = {}
        self.purchases: dict[str, Purchase] = {}
        self.instruments: dict[str, GiftInstrument] = {}

    def add_attraction(self, attraction: Attraction) -> None:
        self.attractions[attraction.id] = attraction

    def get_attraction(self, attraction_id: AttractionId) -> Attraction | None:
        return self.attractions.get(attraction_id)

    def list_attractions(self) -> list[Attraction]:
        return sorted(self.attractions.values(), key=lambda a: a.name)

    def create_booking(self, booking: Booking) -> Booking:
        return self.bookings.setdefault(booking.idempotency_key, booking)

    def create_purchase(self, purchase: Purchase) -> Purchase:
        return self.purchases.setdefault(purchase.idempotency_key, purchase)

    def create_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        self.instruments[instrument.code] = instrument
        return instrument

    def get_instrument(self, code: str) -> GiftInstrument | None:
        instrument = self.instruments.get(code)
        if instrument is None or instrument.deleted:
            return None
        return instrument

    def list_instruments(
        self,
        type: InstrumentType | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[GiftInstrument]:
        live = [i for i in self.instruments.values() if not i.deleted]
        if type is not None:
            live = [i for i in live if i.type == type]
        if search:
            needle = search.lower()
            live = [
                i for i in live if needle in i.code.lower() or needle in i.description.lower()
            ]
        return sorted(live, key=_SORT_KEYS[sort_by], reverse=descending)

    def update_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        self.instruments[instrument.code] = instrument
        return instrument

    def delete_instrument(self, code: str) -> None:
        instrument = self.instruments.get(code)
        if instrument is not None:
            self.instruments[code] = replace(
                instrument, deleted=True, status=InstrumentStatus.DELETED
            )

    def code_exists(self, code: str) -> bool:
        return code in self.instruments
