"""Cart service — add, decrease, read and clear a user's cart.

Each operation is its own short unit of work, separate from checkout. Cart
operations never touch product rows, so they do not contend with order
placement.
"""

from dataclasses import dataclass

import structlog
from protean import Q, UnitOfWork
from protean.utils.globals import current_domain

from eshop.catalogue.product import Product
from eshop.ordering.cart.cart import ShoppingCart
from eshop.ordering.cart.view import CartView
from eshop.shared.errors import ErrorKind, StorefrontError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart mutation."""

    success: bool
    message: str
    error: ErrorKind | None = None

    @classmethod
    def ok(cls, message: str) -> "CartResult":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, error: ErrorKind, message: str) -> "CartResult":
        return cls(success=False, message=message, error=error)


def _require_user(user_id):
    if not user_id or not str(user_id).strip():
        raise StorefrontError(ErrorKind.INVALID_INPUT, "User ID is required.")


def _require_cart(user_id) -> ShoppingCart:
    cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
    if cart is None:
        raise StorefrontError(ErrorKind.CART_NOT_FOUND, "Cart not found.")
    return cart


class CartService:
    def _run(self, operation, user_id, **context):
        """Run ``operation()`` in a unit of work and map failures to a CartResult."""
        log = logger.bind(user_id=user_id, **context)
        try:
            with UnitOfWork():
                message = operation()
        except StorefrontError as exc:
            log.info("Cart operation rejected", error=exc.kind.value, reason=exc.message)
            return CartResult.failed(exc.kind, exc.message)
        except Exception as exc:
            log.exception("Cart operation failed unexpectedly")
            return CartResult.failed(ErrorKind.UNEXPECTED_ERROR, f"Error updating cart: {exc}")

        log.debug("Cart updated", result=message)
        return CartResult.ok(message)

    # -------------------------------------------------------------------
    # AddItem
    # -------------------------------------------------------------------
    def add_item(self, user_id: str, product_id: int, quantity: int = 1) -> CartResult:
        """Add ``quantity`` of a product, creating the cart on first use.

        Stock is deliberately not checked here; checkout re-validates it.
        """

        def operation():
            _require_user(user_id)
            if product_id is None or product_id <= 0:
                raise StorefrontError(ErrorKind.INVALID_INPUT, "Valid Product ID is required.")
            if quantity is None or quantity < 1:
                raise StorefrontError(ErrorKind.INVALID_INPUT, "Quantity must be at least 1.")
            if not current_domain.repository_for(Product).exists(Q(id=product_id)):
                raise StorefrontError(ErrorKind.PRODUCT_NOT_FOUND, "Product not found.")

            repo = current_domain.repository_for(ShoppingCart)
            cart = repo.find_for_user(user_id)
            if cart is None:
                cart = ShoppingCart.create(user_id=user_id)
                logger.info("Cart created", user_id=user_id)

            cart.add_item(product_id=product_id, quantity=quantity)
            repo.add(cart)
            return "Item added to cart successfully."

        return self._run(operation, user_id, product_id=product_id, quantity=quantity)

    # -------------------------------------------------------------------
    # DecreaseItem
    # -------------------------------------------------------------------
    def decrease_item(self, user_id: str, product_id: int, amount: int = 1) -> CartResult:
        def operation():
            _require_user(user_id)
            cart = _require_cart(user_id)

            remaining = cart.decrease_item(product_id=product_id, amount=amount)
            current_domain.repository_for(ShoppingCart).add(cart)
            if remaining == 0:
                return "Item removed from cart."
            return "Item quantity updated successfully."

        return self._run(operation, user_id, product_id=product_id, amount=amount)

    # -------------------------------------------------------------------
    # ClearCart
    # -------------------------------------------------------------------
    def clear_cart(self, user_id: str) -> CartResult:
        def operation():
            _require_user(user_id)
            cart = _require_cart(user_id)
            cart.clear()
            current_domain.repository_for(ShoppingCart).add(cart)
            return "Cart cleared."

        return self._run(operation, user_id)

    # -------------------------------------------------------------------
    # GetCart
    # -------------------------------------------------------------------
    def get_cart(self, user_id: str) -> CartView:
        """Return the user's cart; an empty view when the user has none yet."""
        _require_user(user_id)
        cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
        if cart is None:
            return CartView.empty(user_id)
        products = current_domain.repository_for(Product).get_many(item.product_id for item in cart.items)
        return CartView.from_cart(cart, products)
