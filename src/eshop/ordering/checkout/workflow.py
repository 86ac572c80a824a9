"""Order placement workflow — converts a user's cart into an order atomically.

Flow (one unit of work, all-or-nothing):
    1. Load the cart with items and their products
    2. Reject an empty or missing cart
    3. Validate every line (product exists → quantity positive → stock suffices),
       failing fast on the first violation in insertion order
    4. Snapshot unit prices and create the order
    5. Decrement and persist each product in ascending product id order; a
       version conflict or a lock conflict aborts the whole checkout
    6. Persist the order, empty the cart, commit

Validation finishes before any mutation, so a failing line never leaves an
earlier line's stock decremented. Every checkout locks product rows in the
same order, so two checkouts over overlapping products queue behind each
other instead of deadlocking.

Each decrement raises ``StockDecremented``. Protean dispatches the events
after the commit (low-stock alerting); an alerting failure never affects the
placed order.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from eshop.ordering.checkout.store import CheckoutUnitOfWork
from eshop.ordering.order.order import Order
from eshop.shared.errors import ErrorKind, StorefrontError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderResult:
    """Outcome of a checkout attempt."""

    success: bool
    message: str
    order_id: str | None = None
    error: ErrorKind | None = None
    product_id: int | None = None

    @classmethod
    def placed(cls, order_id: str) -> "OrderResult":
        return cls(success=True, message="Order placed successfully", order_id=order_id)

    @classmethod
    def failed(cls, error: ErrorKind, message: str, product_id: int | None = None) -> "OrderResult":
        return cls(success=False, message=message, error=error, product_id=product_id)


class OrderWorkflow:
    def __init__(self, unit_of_work_factory: Callable[[], CheckoutUnitOfWork]):
        self._unit_of_work_factory = unit_of_work_factory

    # -------------------------------------------------------------------
    # CreateOrder
    # -------------------------------------------------------------------
    def create_order(self, user_id: str) -> OrderResult:
        if not user_id or not user_id.strip():
            return OrderResult.failed(ErrorKind.INVALID_INPUT, "Invalid user ID.")

        log = logger.bind(user_id=user_id)
        try:
            uow = self._unit_of_work_factory()
        except Exception as exc:
            log.exception("Could not open checkout unit of work")
            return OrderResult.failed(ErrorKind.UNEXPECTED_ERROR, f"Error placing order: {exc}")

        try:
            order = self._place_order(uow, user_id)
            uow.commit()
        except StorefrontError as exc:
            uow.rollback()
            log.info("Order rejected", error=exc.kind.value, reason=exc.message, product_id=exc.product_id)
            return OrderResult.failed(exc.kind, exc.message, exc.product_id)
        except Exception as exc:
            uow.rollback()
            log.exception("Order placement failed unexpectedly")
            return OrderResult.failed(ErrorKind.UNEXPECTED_ERROR, f"Error placing order: {exc}")
        finally:
            uow.close()

        log.info("Order placed", order_id=str(order.id), lines=len(order.items))
        return OrderResult.placed(str(order.id))

    def _place_order(self, uow: CheckoutUnitOfWork, user_id: str) -> Order:
        checkout = uow.load_cart_with_items(user_id)
        if checkout is None or checkout.is_empty:
            raise StorefrontError(ErrorKind.EMPTY_CART, "Cart is empty or does not exist.")

        lines = checkout.lines
        for line in lines:
            self._validate_line(line, checkout.product_for(line))

        # Prices are captured as read, before any stock mutation
        now = datetime.now(UTC)
        order = Order.create(
            user_id=user_id,
            lines=[(line.product_id, line.quantity, checkout.product_for(line).price) for line in lines],
            order_date=now,
        )

        for line in sorted(lines, key=lambda line: line.product_id):
            product = checkout.product_for(line)
            product.decrement_stock(line.quantity, order_id=order.id, occurred_at=now)
            uow.update_product(product)

        uow.add_order(order)

        checkout.cart.clear()
        uow.update_cart(checkout.cart)
        return order

    @staticmethod
    def _validate_line(line, product):
        if product is None:
            raise StorefrontError(
                ErrorKind.PRODUCT_NOT_FOUND,
                f"Product {line.product_id} not found.",
                product_id=line.product_id,
            )
        if line.quantity is None or line.quantity <= 0:
            raise StorefrontError(
                ErrorKind.INVALID_QUANTITY,
                f"Invalid quantity for product {product.name}.",
                product_id=product.id,
            )
        if not product.can_fulfil(line.quantity):
            raise StorefrontError(
                ErrorKind.INSUFFICIENT_STOCK,
                f"Not enough stock for '{product.name}'.",
                product_id=product.id,
            )
