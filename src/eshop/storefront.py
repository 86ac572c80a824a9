"""Storefront wiring — the initialized domain and the services built on it.

Domain elements live two package levels below ``eshop.domain``, deeper than
Protean's folder traversal reaches, so they are imported here explicitly and
the domain is initialized without traversal.

Provides get_storefront() / set_storefront() / reset_storefront() so the web
app, the management CLI and tests share a single configured instance.
"""

import structlog
from protean.domain import Domain

from eshop.domain import eshop
from eshop.inventory.service import StockAlertService
from eshop.ordering.cart.service import CartService
from eshop.ordering.checkout.store import ProteanCheckoutUnitOfWork
from eshop.ordering.checkout.workflow import OrderWorkflow
from eshop.ordering.order.queries import OrderQueries

logger = structlog.get_logger(__name__)

_initialized = False


def _import_elements():
    # Registers every aggregate, entity, event, repository and handler with the domain
    import eshop.catalogue.product  # noqa: F401
    import eshop.catalogue.repository  # noqa: F401
    import eshop.inventory.alert  # noqa: F401
    import eshop.inventory.stock_events  # noqa: F401
    import eshop.ordering.cart.cart  # noqa: F401
    import eshop.ordering.cart.repository  # noqa: F401
    import eshop.ordering.order.order  # noqa: F401


def init_domain(force: bool = False) -> Domain:
    """Register all elements and initialize the domain (once per process)."""
    global _initialized
    if force or not _initialized:
        _import_elements()
        eshop.init(traverse=False)
        _initialized = True
    return eshop


class Storefront:
    def __init__(self, domain: Domain):
        self.domain = domain
        self.carts = CartService()
        self.orders = OrderQueries(max_page_size=getattr(domain, "ORDERS_MAX_PAGE_SIZE", 100))
        self.stock_alerts = StockAlertService()
        self.checkout = OrderWorkflow(unit_of_work_factory=ProteanCheckoutUnitOfWork)


_current_storefront: Storefront | None = None


def get_storefront() -> Storefront:
    """Return the active storefront, initializing the domain on first use."""
    global _current_storefront
    if _current_storefront is None:
        logger.info("Initializing storefront", domain=eshop.name)
        _current_storefront = Storefront(init_domain())
    return _current_storefront


def set_storefront(storefront: Storefront) -> None:
    """Override the active storefront (useful for tests)."""
    global _current_storefront
    _current_storefront = storefront


def reset_storefront() -> None:
    """Forget the active storefront."""
    global _current_storefront
    _current_storefront = None
