from reservations.services.attraction_service import AttractionService, Quote
from reservations.services.counter_sale_service import CounterSaleService
from reservations.services.gift_instrument_service import GiftInstrumentLedger, InstrumentPage
from reservations.services.reservation_service import ReservationService

__all__ = [
    "AttractionService",
    "Quote",
    "CounterSaleService",
    "GiftInstrumentLedger",
    "InstrumentPage",
    "ReservationService",
]
