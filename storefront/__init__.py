"""Inventory-aware cart and checkout core for a single-client storefront"""

from .database import Cart, InventoryLedger, ProductCatalog, MemoryStorage, JSONFileStorage
from .services import CheckoutSettlement
from .main import Storefront, configure_logging, create_storefront

__version__ = "1.0.0"

__all__ = [
    "Cart",
    "InventoryLedger",
    "ProductCatalog",
    "MemoryStorage",
    "JSONFileStorage",
    "CheckoutSettlement",
    "Storefront",
    "configure_logging",
    "create_storefront",
]
