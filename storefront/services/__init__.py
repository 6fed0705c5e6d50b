# Services

from .checkout import CheckoutSettlement, make_order_id

__all__ = ["CheckoutSettlement", "make_order_id"]
