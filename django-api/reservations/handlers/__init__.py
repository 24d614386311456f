from reservations.handlers.views import (
    AttractionDatesView,
    AttractionDetailView,
    AttractionListView,
    AttractionQuoteView,
    AttractionTimesView,
    BookingCreateView,
    GiftInstrumentActivateView,
    GiftInstrumentDeactivateView,
    GiftInstrumentDetailView,
    GiftInstrumentListView,
    PurchaseCreateView,
)

__all__ = [
    "AttractionListView",
    "AttractionDetailView",
    "AttractionDatesView",
    "AttractionTimesView",
    "AttractionQuoteView",
    "BookingCreateView",
    "PurchaseCreateView",
    "GiftInstrumentListView",
    "GiftInstrumentDetailView",
    "GiftInstrumentActivateView",
    "GiftInstrumentDeactivateView",
]
