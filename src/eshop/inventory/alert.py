"""StockAlert — raised when a product's stock falls to or below its low-stock threshold."""

from datetime import UTC, datetime

from protean.fields import Auto, Boolean, DateTime, Integer, String

from eshop.domain import eshop


@eshop.aggregate
class StockAlert:
    id = Auto(identifier=True, increment=True)
    # Snapshot of the product at trigger time; the product may be deleted later
    product_id = Integer(required=True)
    product_name = String(required=True, max_length=200)
    quantity_at_trigger = Integer(required=True)
    triggered_at = DateTime(required=True)
    is_acknowledged = Boolean(default=False)

    @classmethod
    def trigger(cls, product_id, product_name, quantity, triggered_at=None):
        return cls(
            product_id=product_id,
            product_name=product_name,
            quantity_at_trigger=quantity,
            triggered_at=triggered_at or datetime.now(UTC),
            is_acknowledged=False,
        )

    def acknowledge(self):
        self.is_acknowledged = True
