"""EShop storefront core.

Bounded contexts:
    catalogue  — products and categories (read and stock decrement only)
    ordering   — shopping carts, order placement workflow, order queries
    inventory  — low-stock alerts raised from stock decrements
"""

__version__ = "0.1.0"
