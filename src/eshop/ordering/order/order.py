"""Order aggregate — an immutable record of a completed checkout.

Orders are only ever created (by the checkout workflow) and read. Each line
carries the unit price captured at checkout time, so later catalogue price
changes never alter historical orders.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Decimal, HasMany, Integer, String

from eshop.domain import eshop
from eshop.shared.money import line_total, sum_money, to_money


@eshop.entity(part_of="Order")
class OrderItem:
    """A line of an order: product, quantity and the price paid per unit."""

    product_id = Integer(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Decimal(required=True, min_value=0, precision=10, scale=2)
    position = Integer(default=0)

    @property
    def line_total(self):
        return line_total(self.unit_price, self.quantity)


@eshop.aggregate
class Order:
    user_id = String(required=True, max_length=255)
    order_date = DateTime(required=True)
    total_price = Decimal(required=True, min_value=0, precision=12, scale=2)
    items = HasMany(OrderItem)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines, order_date=None):
        """Create a new order from priced lines.

        Args:
            user_id: The user placing the order.
            lines: Iterable of ``(product_id, quantity, unit_price)`` tuples,
                   with ``unit_price`` already snapshotted by the caller.
            order_date: Defaults to now (UTC).
        """
        items = [
            OrderItem(product_id=product_id, quantity=quantity, unit_price=to_money(unit_price), position=position)
            for position, (product_id, quantity, unit_price) in enumerate(lines, start=1)
        ]
        order = cls(
            user_id=user_id,
            order_date=order_date or datetime.now(UTC),
            total_price=sum_money(item.line_total for item in items),
        )
        if items:
            order.add_items(items)
        return order

    @property
    def lines(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: item.position or 0)
