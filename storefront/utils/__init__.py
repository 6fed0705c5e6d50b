# Utilities

from .pricing import (
    round2,
    discounted_price,
    original_price_from_discounted,
    savings,
    format_price,
    format_price_range,
    format_discount,
    format_savings,
    price_product,
    product_price_display,
)

__all__ = [
    "round2",
    "discounted_price",
    "original_price_from_discounted",
    "savings",
    "format_price",
    "format_price_range",
    "format_discount",
    "format_savings",
    "price_product",
    "product_price_display",
]
