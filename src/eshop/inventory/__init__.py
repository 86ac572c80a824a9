"""Inventory bounded context — low-stock alerts."""
