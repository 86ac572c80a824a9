"""Checkout unit of work (port) and its Protean adapter.

The checkout workflow needs exactly four capabilities from storage — load a
cart with its items and their products, update a product, add an order and
update a cart — plus explicit ``commit``/``rollback``. Nothing else leaks in,
so the workflow can run against any adapter that honours this contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import structlog
from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import DBAPIError

from eshop.catalogue.product import Product
from eshop.ordering.cart.cart import CartItem, ShoppingCart
from eshop.ordering.order.order import Order
from eshop.shared.errors import ErrorKind, StorefrontError

logger = structlog.get_logger(__name__)

# PostgreSQL deadlock_detected and serialization_failure
LOCK_CONFLICT_SQLSTATES = frozenset({"40P01", "40001"})


@dataclass
class CheckoutCart:
    """A cart together with the products its lines refer to, read in one transaction."""

    cart: ShoppingCart
    products: dict[int, Product] = field(default_factory=dict)

    @property
    def lines(self) -> list[CartItem]:
        return self.cart.lines

    @property
    def is_empty(self) -> bool:
        return self.cart.is_empty

    def product_for(self, line: CartItem) -> Product | None:
        return self.products.get(line.product_id)


def is_lock_conflict(exc: DBAPIError) -> bool:
    """True when the database aborted the statement to resolve a lock conflict."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return code in LOCK_CONFLICT_SQLSTATES


def concurrent_update(product: Product) -> StorefrontError:
    return StorefrontError(
        ErrorKind.CONCURRENT_STOCK_CONFLICT,
        f"Product '{product.name}' was updated by another user. Please try again.",
        product_id=product.id,
    )


class CheckoutUnitOfWork(ABC):
    """One atomic checkout transaction."""

    @abstractmethod
    def load_cart_with_items(self, user_id: str) -> CheckoutCart | None:
        """Load the user's cart, its items and each item's product in one consistent read."""
        ...

    @abstractmethod
    def update_product(self, product: Product) -> None:
        """Persist a product change.

        Raises ``StorefrontError(CONCURRENT_STOCK_CONFLICT)`` when the product
        was modified by another transaction since it was loaded, or when the
        database gave up on the write to break a deadlock.
        """
        ...

    @abstractmethod
    def add_order(self, order: Order) -> Order:
        """Persist a new order."""
        ...

    @abstractmethod
    def update_cart(self, cart: ShoppingCart) -> None:
        """Persist cart changes."""
        ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

    @abstractmethod
    def close(self) -> None:
        """Release resources; an uncommitted transaction is discarded."""
        ...


class ProteanCheckoutUnitOfWork(CheckoutUnitOfWork):
    """Checkout transaction backed by a Protean ``UnitOfWork``.

    Lost updates on products are prevented by the aggregate version guard:
    each product UPDATE only matches the version that was read.
    """

    def __init__(self):
        self._uow = UnitOfWork()
        self._uow.start()

    def load_cart_with_items(self, user_id):
        cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
        if cart is None:
            return None
        products = current_domain.repository_for(Product).get_many(item.product_id for item in cart.items)
        return CheckoutCart(cart=cart, products=products)

    def update_product(self, product):
        try:
            current_domain.repository_for(Product).save_stock_change(product)
        except ExpectedVersionError as exc:
            logger.warning("Concurrent stock update detected", product_id=product.id)
            raise concurrent_update(product) from exc
        except DBAPIError as exc:
            if not is_lock_conflict(exc):
                raise
            logger.warning("Stock update aborted by the database", product_id=product.id, reason=str(exc.orig))
            raise concurrent_update(product) from exc

    def add_order(self, order):
        current_domain.repository_for(Order).add(order)
        return order

    def update_cart(self, cart):
        current_domain.repository_for(ShoppingCart).add(cart)

    def commit(self):
        try:
            self._uow.commit()
        except ExpectedVersionError as exc:
            logger.warning("Concurrent update detected at commit")
            raise StorefrontError(
                ErrorKind.CONCURRENT_STOCK_CONFLICT,
                "Stock was updated by another user. Please try again.",
            ) from exc
        except TransactionError as exc:
            cause = exc.__cause__
            if not (isinstance(cause, DBAPIError) and is_lock_conflict(cause)):
                raise
            logger.warning("Checkout commit aborted by the database", reason=str(cause.orig))
            raise StorefrontError(
                ErrorKind.CONCURRENT_STOCK_CONFLICT,
                "Stock was updated by another user. Please try again.",
            ) from exc

    def rollback(self):
        if self._uow.in_progress:
            self._uow.rollback()

    def close(self):
        if self._uow.in_progress:
            self._uow.rollback()
