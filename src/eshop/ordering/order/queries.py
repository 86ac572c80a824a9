"""Order read side — single order lookup and paged order history."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

import structlog
from protean.utils.globals import current_domain

from eshop.catalogue.product import Product
from eshop.ordering.order.order import Order
from eshop.shared.errors import ErrorKind, StorefrontError
from eshop.shared.money import line_total

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class OrderItemView:
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


@dataclass(frozen=True)
class OrderView:
    id: str
    user_id: str
    order_date: datetime
    total_price: Decimal
    items: list[OrderItemView] = field(default_factory=list)


@dataclass(frozen=True)
class OrderPage:
    total_count: int
    page: int
    page_size: int
    items: list[OrderView] = field(default_factory=list)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back; stored values are always UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _product_names(orders) -> dict[int, str]:
    product_ids = {item.product_id for order in orders for item in order.items}
    products = current_domain.repository_for(Product).get_many(product_ids)
    return {pid: p.name for pid, p in products.items()}


def _to_view(order: Order, product_names: dict[int, str]) -> OrderView:
    return OrderView(
        id=str(order.id),
        user_id=order.user_id,
        order_date=_as_utc(order.order_date),
        total_price=order.total_price,
        items=[
            OrderItemView(
                product_id=item.product_id,
                product_name=product_names.get(item.product_id, ""),
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.lines
        ],
    )


class OrderQueries:
    def __init__(self, max_page_size: int = 100):
        self._max_page_size = max_page_size

    def get_order(self, order_id: str) -> OrderView | None:
        order = current_domain.repository_for(Order)._dao.query.filter(id=order_id).all().first
        if order is None:
            return None
        return _to_view(order, _product_names([order]))

    def get_orders_by_user(self, user_id: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> OrderPage:
        """Orders placed by ``user_id``, newest first."""
        if not user_id or not user_id.strip():
            raise StorefrontError(ErrorKind.INVALID_INPUT, "User ID is required.")
        return self._page({"user_id": user_id}, page, page_size)

    def get_all_orders(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> OrderPage:
        """Every user's orders, newest first."""
        return self._page({}, page, page_size)

    def _page(self, criteria: dict, page: int, page_size: int) -> OrderPage:
        if page < 1 or page_size < 1:
            raise StorefrontError(ErrorKind.INVALID_INPUT, "Page and page size must be positive.")
        page_size = min(page_size, self._max_page_size)

        query = current_domain.repository_for(Order)._dao.query
        if criteria:
            query = query.filter(**criteria)

        result = (
            query.order_by(["-order_date", "-id"])
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        orders = result.items
        names = _product_names(orders)

        return OrderPage(
            total_count=result.total or 0,
            page=page,
            page_size=page_size,
            items=[_to_view(order, names) for order in orders],
        )
