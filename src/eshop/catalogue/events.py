"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from eshop.domain import eshop


@eshop.event(part_of="Product")
class StockDecremented:
    """A product's stock was reduced by an order placement."""

    __version__ = 1

    product_id = Integer(required=True)
    product_name = String(required=True, max_length=200)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    low_stock_threshold = Integer(required=True)
    occurred_at = DateTime(required=True)

    @property
    def crossed_threshold(self) -> bool:
        """True when this decrement moved stock from above to at/below the threshold."""
        return self.previous_quantity > self.low_stock_threshold >= self.new_quantity
