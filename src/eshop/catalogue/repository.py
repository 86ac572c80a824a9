"""Repository for the Product aggregate."""

from eshop.catalogue.product import Product
from eshop.domain import eshop


@eshop.repository(part_of=Product)
class ProductRepository:
    def get_many(self, product_ids) -> dict[int, Product]:
        """Products keyed by id; ids with no product are simply absent."""
        ids = list(set(product_ids))
        if not ids:
            return {}
        products = self._dao.query.filter(id__in=ids).limit(len(ids)).all().items
        return {product.id: product for product in products}

    def low_on_stock(self) -> list[Product]:
        """Products at or below their own low-stock threshold."""
        products = self._dao.query.order_by("id").limit(None).all().items
        return [product for product in products if product.is_low_on_stock]

    def save_stock_change(self, product: Product) -> Product:
        """Persist a stock change inside the active unit of work and flush it at once.

        A concurrent update of the same product surfaces here, as
        ``ExpectedVersionError``, rather than later at commit.
        """
        self.add(product)
        self._dao._flush()
        return product
