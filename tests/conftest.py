import os
import tempfile
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay and a throwaway database, then activates the domain by pushing
    the associated domain_context. The activated domain can then be referred to elsewhere as
    `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    # File-backed so a second connection sees committed writes
    os.environ["DATABASE_URL"] = f"sqlite:///{Path(tempfile.mkdtemp()) / 'eshop-test.db'}"

    from eshop.utils.logging import configure_logging

    configure_logging("WARNING", log_dir=None)

    from eshop.storefront import init_domain

    eshop = init_domain()
    eshop.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from eshop.domain import eshop
    from eshop.utils.db import drop_db, setup_db

    setup_db(eshop)

    yield

    drop_db(eshop)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from eshop.storefront import reset_storefront

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_storefront()


@pytest.fixture()
def storefront():
    from eshop.domain import eshop
    from eshop.storefront import Storefront, set_storefront

    storefront = Storefront(eshop)
    set_storefront(storefront)
    return storefront


@pytest.fixture()
def category():
    from protean import current_domain

    from eshop.catalogue.product import Category

    category = Category(name="General", description="Everything else")
    current_domain.repository_for(Category).add(category)
    return category


@pytest.fixture()
def make_product(category):
    """Factory: persist a product and return it."""
    from decimal import Decimal

    from protean import current_domain

    from eshop.catalogue.product import DEFAULT_LOW_STOCK_THRESHOLD, Product

    def _make(name="Product", price="10.00", stock=10, threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        product = Product(
            name=name,
            description="",
            price=Decimal(price),
            stock_quantity=stock,
            low_stock_threshold=threshold,
            category_id=category.id,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def load_product():
    """Fetch the committed state of a product (None if it was deleted)."""
    from protean import current_domain

    from eshop.catalogue.product import Product

    def _load(product_id):
        return current_domain.repository_for(Product)._dao.query.filter(id=product_id).all().first

    return _load


@pytest.fixture()
def cart_lines():
    """Return ``{product_id: quantity}`` for a user's cart, or None if there is no cart."""
    from protean import current_domain

    from eshop.ordering.cart.cart import ShoppingCart

    def _lines(user_id):
        cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
        if cart is None:
            return None
        return {item.product_id: item.quantity for item in cart.items}

    return _lines


@pytest.fixture()
def stock_alerts():
    """Return every persisted stock alert, oldest first."""
    from protean import current_domain

    from eshop.inventory.alert import StockAlert

    def _alerts():
        return current_domain.repository_for(StockAlert)._dao.query.order_by("id").limit(None).all().items

    return _alerts
