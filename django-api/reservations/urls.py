from django.urls import path

from reservations.handlers import (
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

urlpatterns = [
    path("attractions", AttractionListView.as_view(), name="attraction-list"),
    path(
        "attractions/<str:attraction_id>",
        AttractionDetailView.as_view(),
        name="attraction-detail",
    ),
    path(
        "attractions/<str:attraction_id>/dates",
        AttractionDatesView.as_view(),
        name="attraction-dates",
    ),
    path(
        "attractions/<str:attraction_id>/times",
        AttractionTimesView.as_view(),
        name="attraction-times",
    ),
    path(
        "attractions/<str:attraction_id>/quote",
        AttractionQuoteView.as_view(),
        name="attraction-quote",
    ),
    path("bookings", BookingCreateView.as_view(), name="booking-create"),
    path("purchases", PurchaseCreateView.as_view(), name="purchase-create"),
    path("gift-instruments", GiftInstrumentListView.as_view(), name="gift-instrument-list"),
    path(
        "gift-instruments/<str:code>",
        GiftInstrumentDetailView.as_view(),
        name="gift-instrument-detail",
    ),
    path(
        "gift-instruments/<str:code>/activate",
        GiftInstrumentActivateView.as_view(),
        name="gift-instrument-activate",
    ),
    path(
        "gift-instruments/<str:code>/deactivate",
        GiftInstrumentDeactivateView.as_view(),
        name="gift-instrument-deactivate",
    ),
]
