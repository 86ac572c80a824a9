"""Initial catalogue data for development databases."""

from decimal import Decimal

import structlog
from protean import UnitOfWork
from protean.utils.globals import current_domain

from eshop.catalogue.product import Category, Product

logger = structlog.get_logger(__name__)

CATEGORIES = [
    {"name": "Electronics", "description": "Electronic items"},
    {"name": "Books", "description": "All kinds of books"},
    {"name": "Clothing", "description": "Apparel and garments"},
]

PRODUCTS = [
    {
        "name": "Smartphone",
        "description": "A high-end smartphone",
        "price": Decimal("699.99"),
        "stock_quantity": 50,
        "category": "Electronics",
    },
    {
        "name": "Headphones",
        "description": "Noise-cancelling headphones",
        "price": Decimal("199.99"),
        "stock_quantity": 20,
        "category": "Electronics",
    },
    {
        "name": "Field Guide to Birds",
        "description": "Illustrated handbook",
        "price": Decimal("24.50"),
        "stock_quantity": 8,
        "category": "Books",
    },
    {
        "name": "Rain Jacket",
        "description": "Waterproof shell",
        "price": Decimal("89.00"),
        "stock_quantity": 3,
        "category": "Clothing",
    },
]


def seed_catalogue() -> int:
    """Insert demo categories and products if the catalogue is empty.

    Returns the number of products created (0 when already seeded).
    """
    with UnitOfWork():
        category_repo = current_domain.repository_for(Category)
        product_repo = current_domain.repository_for(Product)

        categories = {c.name: c for c in category_repo._dao.query.limit(None).all().items}
        for data in CATEGORIES:
            if data["name"] not in categories:
                category = Category(**data)
                category_repo.add(category)
                categories[category.name] = category

        created = 0
        if product_repo._dao.query.count() == 0:
            for data in PRODUCTS:
                data = dict(data)
                category = categories[data.pop("category")]
                product_repo.add(Product(category_id=category.id, **data))
                created += 1

    logger.info("Catalogue seeded", products_created=created)
    return created
