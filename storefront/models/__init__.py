# Storefront Models

from .product import Product, StockRecord, StockLevel, ProductPricing, PriceDisplay
from .cart import CartItem, CartTotals, CartResult
from .checkout import (
    Order,
    OrderStatus,
    OrderTotals,
    StockRequest,
    InsufficientItem,
    BulkDeductResult,
    CheckoutResult,
)

__all__ = [
    "Product",
    "StockRecord",
    "StockLevel",
    "ProductPricing",
    "PriceDisplay",
    "CartItem",
    "CartTotals",
    "CartResult",
    "Order",
    "OrderStatus",
    "OrderTotals",
    "StockRequest",
    "InsufficientItem",
    "BulkDeductResult",
    "CheckoutResult",
]
