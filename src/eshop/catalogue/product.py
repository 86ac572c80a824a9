"""Product and Category — the catalogue records the ordering workflow reads.

Product lifecycle (create/update/delete, images) belongs to catalogue
management. The storefront core only reads ``price`` and decrements
``stock_quantity`` when an order is placed.

Every persisted change to a product is guarded by its ``_version``: the
UPDATE only matches the version that was loaded, so a concurrent change by
another transaction surfaces as ``ExpectedVersionError`` instead of a lost
update.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Auto, Decimal, Integer, String, Text

from eshop.catalogue.events import StockDecremented
from eshop.domain import eshop
from eshop.shared.errors import ErrorKind, StorefrontError

DEFAULT_LOW_STOCK_THRESHOLD = 5


@eshop.aggregate
class Category:
    id = Auto(identifier=True, increment=True)
    name = String(required=True, max_length=100, unique=True)
    description = Text(default="")


@eshop.aggregate
class Product:
    id = Auto(identifier=True, increment=True)
    name = String(required=True, max_length=200)
    description = Text(default="")
    price = Decimal(required=True, min_value=0, precision=10, scale=2)
    stock_quantity = Integer(required=True, min_value=0, default=0)
    low_stock_threshold = Integer(min_value=0, default=DEFAULT_LOW_STOCK_THRESHOLD)
    category_id = Integer(required=True)

    @invariant.post
    def stock_cannot_go_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock cannot be negative"]})

    @property
    def is_low_on_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold

    def can_fulfil(self, quantity: int) -> bool:
        return 0 < quantity <= self.stock_quantity

    def decrement_stock(self, quantity: int, order_id, occurred_at) -> int:
        """Remove ``quantity`` units sold on ``order_id`` and return the previous level.

        Raises ``StockDecremented`` so inventory can react once the sale commits.
        """
        if quantity <= 0:
            raise StorefrontError(
                ErrorKind.INVALID_QUANTITY,
                f"Invalid quantity for product {self.name}.",
                product_id=self.id,
            )
        if not self.can_fulfil(quantity):
            raise StorefrontError(
                ErrorKind.INSUFFICIENT_STOCK,
                f"Not enough stock for '{self.name}'.",
                product_id=self.id,
            )

        previous = self.stock_quantity
        self.stock_quantity = previous - quantity

        self.raise_(
            StockDecremented(
                product_id=self.id,
                product_name=self.name,
                order_id=str(order_id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
                low_stock_threshold=self.low_stock_threshold,
                occurred_at=occurred_at,
            )
        )
        return previous
