"""Inventory reacts to catalogue stock events.

Listens for StockDecremented, raised by the checkout workflow and dispatched
once the order has committed. A product alerts when a decrement crosses its
threshold (above before, at/below after), so further sales below the
threshold do not pile up duplicate alerts.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from eshop.catalogue.events import StockDecremented
from eshop.domain import eshop
from eshop.inventory.alert import StockAlert

logger = structlog.get_logger(__name__)


@eshop.event_handler(part_of=StockAlert, stream_category="eshop::product")
class StockLevelEventHandler:
    """Raises low-stock alerts from committed stock decrements."""

    @handle(StockDecremented)
    def on_stock_decremented(self, event: StockDecremented) -> None:
        if not event.crossed_threshold:
            return

        # The order is already committed; a failed alert must not be reported as a failed order
        try:
            alert = StockAlert.trigger(
                product_id=event.product_id,
                product_name=event.product_name,
                quantity=event.new_quantity,
                triggered_at=event.occurred_at,
            )
            current_domain.repository_for(StockAlert).add(alert)
        except Exception:
            logger.exception(
                "Could not raise low stock alert",
                product_id=event.product_id,
                order_id=str(event.order_id),
            )
            return

        logger.warning(
            "Low stock alert raised",
            product_id=event.product_id,
            quantity=event.new_quantity,
            threshold=event.low_stock_threshold,
            order_id=str(event.order_id),
        )
