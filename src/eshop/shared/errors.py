"""Error taxonomy shared by every storefront operation.

Domain code raises ``StorefrontError``; service boundaries catch it and turn it
into a typed result object, so none of these escape to callers as faults.
"""

from enum import Enum


class ErrorKind(Enum):
    EMPTY_CART = "EmptyCart"
    PRODUCT_NOT_FOUND = "ProductNotFound"
    INVALID_QUANTITY = "InvalidQuantity"
    INSUFFICIENT_STOCK = "InsufficientStock"
    CONCURRENT_STOCK_CONFLICT = "ConcurrentStockConflict"
    INVALID_INPUT = "InvalidInput"
    CART_NOT_FOUND = "CartNotFound"
    ITEM_NOT_FOUND = "ItemNotFound"
    UNEXPECTED_ERROR = "UnexpectedError"


class StorefrontError(Exception):
    """A named, recoverable failure of a storefront operation."""

    def __init__(self, kind: ErrorKind, message: str, product_id: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.product_id = product_id

    def __repr__(self) -> str:
        return f"StorefrontError({self.kind.value}, {self.message!r})"
