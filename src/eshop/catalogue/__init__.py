"""Catalogue bounded context — products, categories and stock levels."""
