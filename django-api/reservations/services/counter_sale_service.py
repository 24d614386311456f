"""Counter sale service: on-site purchases committed in one action."""

import logging
from datetime import datetime
from typing import Callable

from reservations.domain import Attraction, Purchase, PurchaseId
from reservations.domain.counter_sale import WALK_IN_CUSTOMER_NAME, CounterSale
from reservations.domain.errors import PersistenceError, ValidationError
from reservations.services.attraction_service import AttractionService
from reservations.services.reservation_service import utc_now
from reservations.signals import purchase_committed
from reservations.stores.interfaces import AttractionCatalog, PurchaseStore

logger = logging.getLogger(__name__)


class CounterSaleService:
    """Service for point-of-sale purchases."""

    def __init__(
        self,
        catalog: AttractionCatalog,
        store: PurchaseStore,
        clock: Callable[[], datetime] = utc_now,
        walk_in_name: str = WALK_IN_CUSTOMER_NAME,
    ) -> None:
        self._attractions = AttractionService(catalog)
        self._store = store
        self._clock = clock
        self._walk_in_name = walk_in_name

    def start(self, idempotency_key: str | None = None) -> CounterSale:
        return CounterSale(walk_in_name=self._walk_in_name, idempotency_key=idempotency_key)

    def select_item(self, sale: CounterSale, attraction_id: str) -> Attraction:
        """Look up and select the item being sold.

        Raises:
            InvalidAttractionIdError: If the attraction_id is not a valid UUID.
            AttractionNotFoundError: If the attraction does not exist.
            ValidationError: If the attraction is inactive.
        """
        attraction = self._attractions.get_attraction(attraction_id)
        if not attraction.is_active:
            raise ValidationError("Attraction is not on sale", field="attraction")
        sale.select_item(attraction)
        return attraction

    def complete(self, sale: CounterSale) -> Purchase | None:
        """Commit the purchase and reset the sale.

        Returns None, persisting nothing, when no item is selected.

        Raises:
            CommitInProgressError: If this sale's previous commit is unresolved.
            PersistenceError: If the store fails; the sale keeps its state.
        """
        if not sale.can_complete:
            logger.debug("Counter sale completed without an item, ignoring")
            return None
        with sale.guard.committing():
            purchase = sale.build_purchase(PurchaseId.new(), self._clock())
            try:
                saved = self._store.create_purchase(purchase)
            except PersistenceError:
                logger.warning(
                    "Purchase commit failed for attraction %s", purchase.attraction_id
                )
                raise
        sale.reset()
        sale.guard.rotate_key()
        logger.info(
            "Purchase %s confirmed: %s x%d, total %s",
            saved.id,
            saved.attraction_name,
            saved.quantity,
            saved.total_amount,
        )
        purchase_committed.send(sender=self.__class__, purchase=saved)
        return saved
