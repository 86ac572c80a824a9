"""Ordering bounded context — Shopping Cart and Order placement.

Handles cart mutation, the checkout workflow that converts a cart into an
order while decrementing stock atomically, and order history queries.
"""
