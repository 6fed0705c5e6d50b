# State containers

from .storage import (
    Storage,
    StorageError,
    MemoryStorage,
    JSONFileStorage,
    create_storage,
    PRODUCT_STOCK_KEY,
    CART_ITEMS_KEY,
    CART_AGGREGATES_KEY,
)
from .inventory import InventoryLedger
from .carts import Cart
from .products import ProductCatalog

__all__ = [
    "Storage",
    "StorageError",
    "MemoryStorage",
    "JSONFileStorage",
    "create_storage",
    "PRODUCT_STOCK_KEY",
    "CART_ITEMS_KEY",
    "CART_AGGREGATES_KEY",
    "InventoryLedger",
    "Cart",
    "ProductCatalog",
]
