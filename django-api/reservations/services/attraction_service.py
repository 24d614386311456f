"""Attraction lookups plus the live availability and price figures built on them."""

from dataclasses import dataclass
from datetime import date, time

from reservations.domain import Attraction, AttractionId, Money
from reservations.domain.availability import (
    DEFAULT_WINDOW_DAYS,
    resolve_dates,
    resolve_times,
)
from reservations.domain.errors import AttractionNotFoundError, InvalidAttractionIdError
from reservations.domain.pricing import compute_subtotal, compute_total
from reservations.stores.interfaces import AttractionCatalog


@dataclass(frozen=True)
class Quote:
    subtotal: Money
    discount: Money
    total: Money


class AttractionService:
    """Service for catalog-backed availability and pricing queries."""

    def __init__(self, catalog: AttractionCatalog) -> None:
        self._catalog = catalog

    def get_attraction(self, attraction_id: str) -> Attraction:
        """Return an attraction by ID.

        Raises:
            InvalidAttractionIdError: If the attraction_id is not a valid UUID.
            AttractionNotFoundError: If the attraction does not exist.
        """
        try:
            parsed = AttractionId.from_string(attraction_id)
        except (TypeError, ValueError, AttributeError):
            raise InvalidAttractionIdError() from None
        attraction = self._catalog.get_attraction(parsed)
        if attraction is None:
            raise AttractionNotFoundError(attraction_id)
        return attraction

    def list_attractions(self) -> list[Attraction]:
        return self._catalog.list_attractions()

    def bookable_dates(
        self,
        attraction_id: str,
        window_start: date,
        window_length_days: int = DEFAULT_WINDOW_DAYS,
    ) -> list[date]:
        return resolve_dates(
            self.get_attraction(attraction_id), window_start, window_length_days
        )

    def bookable_times(self, attraction_id: str, selected_date: date) -> list[time]:
        return resolve_times(self.get_attraction(attraction_id), selected_date)

    def quote(self, attraction_id: str, quantity: int, discount=0) -> Quote:
        """Subtotal, applied discount and total for ``quantity`` at the attraction's price."""
        attraction = self.get_attraction(attraction_id)
        subtotal = compute_subtotal(attraction.price, attraction.pricing_mode, quantity)
        total = compute_total(
            attraction.price, attraction.pricing_mode, quantity, discount
        )
        return Quote(
            subtotal=subtotal,
            discount=Money(subtotal.amount - total.amount),
            total=total,
        )
