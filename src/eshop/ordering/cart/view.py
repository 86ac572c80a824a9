"""Cart view — current cart state for display.

Product names and prices are joined at read time. They are not snapshots:
the price shown here may differ from the price captured when the order is
eventually placed.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from eshop.shared.money import ZERO, line_total, sum_money


@dataclass(frozen=True)
class CartLineView:
    product_id: int
    product_name: str
    price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return line_total(self.price, self.quantity)


@dataclass(frozen=True)
class CartView:
    user_id: str
    cart_id: str | None = None
    items: list[CartLineView] = field(default_factory=list)

    @classmethod
    def empty(cls, user_id: str) -> "CartView":
        return cls(user_id=user_id)

    @classmethod
    def from_cart(cls, cart, products) -> "CartView":
        """Build a view from a cart and a ``{product_id: Product}`` lookup."""
        lines = []
        for item in cart.lines:
            product = products.get(item.product_id)
            lines.append(
                CartLineView(
                    product_id=item.product_id,
                    product_name=product.name if product else "",
                    price=product.price if product else ZERO,
                    quantity=item.quantity,
                )
            )
        return cls(user_id=cart.user_id, cart_id=str(cart.id), items=lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum_money(line.line_total for line in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
