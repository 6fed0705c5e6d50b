"""Reference product catalog"""

import logging
from typing import Optional

from ..models.product import Product

logger = logging.getLogger(__name__)

# Seed catalog
PRODUCTS: dict[str, Product] = {
    "1": Product(
        id="1",
        name="Modern Chair",
        description="Upholstered lounge chair with solid oak legs.",
        price=149.99,
        discount_percentage=10,
        category="Furniture",
    ),
    "2": Product(
        id="2",
        name="Designer Lamp",
        description="Brushed brass table lamp with a linen shade.",
        price=89.99,
        category="Lighting",
    ),
    "3": Product(
        id="3",
        name="Wooden Table",
        description="Six-seat dining table in reclaimed walnut.",
        price=249.99,
        discount_percentage=15,
        category="Furniture",
    ),
    "4": Product(
        id="4",
        name="Ceramic Vase",
        description="Hand-glazed stoneware vase, 30 cm.",
        price=59.99,
        category="Decor",
    ),
}

INITIAL_STOCK: dict[str, int] = {
    "1": 15,
    "2": 8,
    "3": 5,
    "4": 20,
}


class ProductCatalog:
    """In-memory product catalog"""

    def __init__(
        self,
        products: Optional[dict[str, Product]] = None,
        initial_stock: Optional[dict[str, int]] = None,
    ):
        if products is None:
            products = PRODUCTS
            initial_stock = INITIAL_STOCK if initial_stock is None else initial_stock
        self.products = {pid: p.model_copy() for pid, p in products.items()}
        self.initial_stock = dict(initial_stock or {})

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        product = self.products.get(str(product_id))
        return product.model_copy() if product else None

    def get_all_products(self) -> list[Product]:
        return [p.model_copy() for p in self.products.values()]

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> list[Product]:
        """Search products by text, category and price range"""
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if (p.category or "").lower() == category.lower()]

        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]

        return [p.model_copy() for p in results]

    def upsert_product(self, product: Product, initial_stock: Optional[int] = None) -> Product:
        """Add or replace a product. Carts keep the prices they already snapshotted."""
        self.products[product.id] = product.model_copy()
        if initial_stock is not None:
            self.initial_stock[product.id] = initial_stock
        return product

    def delete_product(self, product_id: str) -> bool:
        product_id = str(product_id)
        if product_id in self.products:
            del self.products[product_id]
            self.initial_stock.pop(product_id, None)
            return True
        return False

    def seed_inventory(self, inventory) -> int:
        """Initialize stock for every product; existing records are kept"""
        seeded = 0
        for product_id in self.products:
            created = not inventory.has_product(product_id)
            if inventory.initialize(product_id, self.initial_stock.get(product_id, 0)) and created:
                seeded += 1
        logger.info(f"Seeded inventory for {seeded} new products")
        return seeded
