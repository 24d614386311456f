"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Write failures are
raised as PersistenceError.
"""

from abc import ABC, abstractmethod

from reservations.domain import (
    Attraction,
    AttractionId,
    Booking,
    GiftInstrument,
    InstrumentType,
    Purchase,
)

INSTRUMENT_SORT_FIELDS = ("code", "initial_value", "balance", "created_at")


class AttractionCatalog(ABC):
    """Read-only lookup of attractions."""

    @abstractmethod
    def get_attraction(self, attraction_id: AttractionId) -> Attraction | None:
        """Return an attraction by ID, or None if not found."""
        ...

    @abstractmethod
    def list_attractions(self) -> list[Attraction]:
        """Return all attractions ordered by name."""
        ...


class BookingStore(ABC):
    """Interface for committing bookings."""

    @abstractmethod
    def create_booking(self, booking: Booking) -> Booking:
        """Persist a booking.

        If a booking with the same idempotency key already exists, return it
        instead of creating another one.
        """
        ...


class PurchaseStore(ABC):
    """Interface for committing counter purchases."""

    @abstractmethod
    def create_purchase(self, purchase: Purchase) -> Purchase:
        """Persist a purchase, deduplicating on its idempotency key."""
        ...


class GiftInstrumentStore(ABC):
    """Interface for gift instrument persistence operations."""

    @abstractmethod
    def create_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        ...

    @abstractmethod
    def get_instrument(self, code: str) -> GiftInstrument | None:
        """Return a non-deleted instrument by code, or None."""
        ...

    @abstractmethod
    def list_instruments(
        self,
        type: InstrumentType | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[GiftInstrument]:
        """Return non-deleted instruments of ``type`` whose code or description
        contains ``search`` (case-insensitive), ordered by ``sort_by``, one of
        INSTRUMENT_SORT_FIELDS.
        """
        ...

    @abstractmethod
    def update_instrument(self, instrument: GiftInstrument) -> GiftInstrument:
        ...

    @abstractmethod
    def delete_instrument(self, code: str) -> None:
        """Remove an instrument from all listings."""
        ...

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        """Check a code against every instrument ever stored, deleted included."""
        ...
