"""Shopping Cart aggregate — one cart per user, converted to an Order at checkout.

The cart only references products; it never snapshots their price or checks
stock. Quantities may exceed current stock and are re-validated at checkout.
Line items keep insertion order (``position``) so checkout validation and its
error messages are reproducible.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Integer, String

from eshop.domain import eshop
from eshop.shared.errors import ErrorKind, StorefrontError


@eshop.entity(part_of="ShoppingCart")
class CartItem:
    # No reference to Product: a cart may outlive a product; checkout reports ProductNotFound
    product_id = Integer(required=True)
    quantity = Integer(required=True)
    position = Integer(default=0)
    added_at = DateTime()


@eshop.aggregate
class ShoppingCart:
    user_id = String(required=True, max_length=255, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartItem]:
        """Line items in the order they were first added."""
        return sorted(self.items, key=lambda item: item.position or 0)

    def item_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    def add_item(self, product_id, quantity):
        """Add a product to the cart (or increase quantity if already present)."""
        if quantity < 1:
            raise StorefrontError(ErrorKind.INVALID_INPUT, "Quantity must be at least 1.")

        now = datetime.now(UTC)
        existing = self.item_for(product_id)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            position = max((i.position or 0 for i in self.items), default=0) + 1
            item = CartItem(product_id=product_id, quantity=quantity, position=position, added_at=now)
            self.add_items(item)

        self.updated_at = now
        return item

    def decrease_item(self, product_id, amount):
        """Reduce a line's quantity; the line is removed once it reaches zero.

        Returns the remaining quantity (0 when the line was removed).
        """
        if amount < 1:
            raise StorefrontError(ErrorKind.INVALID_INPUT, "Amount to decrease must be at least 1.")

        item = self.item_for(product_id)
        if item is None:
            raise StorefrontError(ErrorKind.ITEM_NOT_FOUND, "Item not found in cart.", product_id=product_id)

        remaining = item.quantity - amount
        if remaining <= 0:
            self.remove_items(item)
            remaining = 0
        else:
            item.quantity = remaining

        self.updated_at = datetime.now(UTC)
        return remaining

    def clear(self):
        """Remove every line item. The cart itself is kept."""
        if self.items:
            self.remove_items(list(self.items))
        self.updated_at = datetime.now(UTC)

    @property
    def is_empty(self) -> bool:
        return not self.items
