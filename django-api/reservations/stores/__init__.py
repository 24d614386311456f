from reservations.stores.interfaces import (
    AttractionCatalog,
    BookingStore,
    GiftInstrumentStore,
    PurchaseStore,
)
from reservations.stores.memory_store import InMemoryStore

__all__ = [
    "AttractionCatalog",
    "BookingStore",
    "PurchaseStore",
    "GiftInstrumentStore",
    "InMemoryStore",
]
