from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from protean import current_domain

from eshop.ordering.order.order import Order
from eshop.shared.errors import ErrorKind, StorefrontError

START = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def place_orders(make_product):
    """Persist ``count`` orders for a user, one day apart, oldest first."""
    product = make_product("Product A", price="10.00")

    def _place(user_id, count, start=START):
        ids = []
        for n in range(count):
            order = Order.create(
                user_id=user_id,
                lines=[(product.id, n + 1, Decimal("10.00"))],
                order_date=start + timedelta(days=n),
            )
            current_domain.repository_for(Order).add(order)
            ids.append(order.id)
        return ids

    return _place


class TestGetOrder:
    def test_existing_order(self, storefront, place_orders):
        (order_id,) = place_orders("user-001", 1)

        view = storefront.orders.get_order(order_id)

        assert view.id == order_id
        assert view.user_id == "user-001"
        assert view.order_date == START
        assert view.total_price == Decimal("10.00")
        assert view.items[0].product_name == "Product A"

    def test_missing_order(self, storefront):
        assert storefront.orders.get_order("no-such-order") is None


class TestOrdersByUser:
    def test_newest_first(self, storefront, place_orders):
        ids = place_orders("user-001", 3)

        page = storefront.orders.get_orders_by_user("user-001")

        assert page.total_count == 3
        assert [o.id for o in page.items] == list(reversed(ids))

    def test_paging(self, storefront, place_orders):
        ids = place_orders("user-001", 5)

        page = storefront.orders.get_orders_by_user("user-001", page=2, page_size=2)

        assert page.total_count == 5
        assert (page.page, page.page_size) == (2, 2)
        assert [o.id for o in page.items] == [ids[2], ids[1]]

    def test_page_past_the_end_is_empty(self, storefront, place_orders):
        place_orders("user-001", 2)

        page = storefront.orders.get_orders_by_user("user-001", page=3, page_size=2)

        assert page.total_count == 2
        assert page.items == []

    def test_same_timestamp_has_a_stable_order(self, storefront, place_orders):
        first = place_orders("user-001", 1)[0]
        second = place_orders("user-001", 1)[0]

        page = storefront.orders.get_orders_by_user("user-001")

        assert [o.id for o in page.items] == sorted([first, second], reverse=True)

    def test_only_the_users_orders(self, storefront, place_orders):
        place_orders("user-001", 2)
        place_orders("user-002", 1)

        assert storefront.orders.get_orders_by_user("user-002").total_count == 1

    def test_page_size_is_capped(self, storefront, place_orders):
        place_orders("user-001", 3)
        storefront.orders._max_page_size = 2

        page = storefront.orders.get_orders_by_user("user-001", page_size=50)

        assert page.page_size == 2
        assert len(page.items) == 2

    def test_blank_user_is_rejected(self, storefront):
        with pytest.raises(StorefrontError) as exc_info:
            storefront.orders.get_orders_by_user(" ")
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.message == "User ID is required."

    @pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_paging(self, storefront, page, page_size):
        with pytest.raises(StorefrontError) as exc_info:
            storefront.orders.get_orders_by_user("user-001", page=page, page_size=page_size)
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT


class TestAllOrders:
    def test_every_users_orders_newest_first(self, storefront, place_orders):
        alice = place_orders("user-001", 2)
        bob = place_orders("user-002", 2, start=START + timedelta(hours=1))

        page = storefront.orders.get_all_orders()

        assert page.total_count == 4
        # Day 2 (bob, then alice), then day 1 (bob, then alice)
        assert [o.id for o in page.items] == [bob[1], alice[1], bob[0], alice[0]]
        assert {o.user_id for o in page.items} == {"user-001", "user-002"}

    def test_paging(self, storefront, place_orders):
        ids = place_orders("user-001", 3)

        page = storefront.orders.get_all_orders(page=2, page_size=2)

        assert (page.total_count, page.page, page.page_size) == (3, 2, 2)
        assert [o.id for o in page.items] == [ids[0]]

    def test_no_orders(self, storefront):
        page = storefront.orders.get_all_orders()

        assert page.total_count == 0
        assert page.items == []

    def test_page_size_uses_domain_limit(self, storefront, place_orders):
        place_orders("user-001", 2)

        page = storefront.orders.get_all_orders(page_size=10_000)

        assert page.page_size == 100

    @pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0)])
    def test_invalid_paging(self, storefront, page, page_size):
        with pytest.raises(StorefrontError) as exc_info:
            storefront.orders.get_all_orders(page=page, page_size=page_size)
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.message == "Page and page size must be positive."
