from eshop.api.errors import register_error_handlers
from eshop.api.routes import cart_router, order_router, stock_alert_router

__all__ = ["cart_router", "order_router", "stock_alert_router", "register_error_handlers"]
