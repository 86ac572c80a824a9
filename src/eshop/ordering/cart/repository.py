"""Repository for the ShoppingCart aggregate."""

from eshop.domain import eshop
from eshop.ordering.cart.cart import ShoppingCart


@eshop.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_user(self, user_id) -> ShoppingCart | None:
        """The user's cart, or None when they have never added an item."""
        return self._dao.query.filter(user_id=user_id).all().first
