"""
Checkout settlement

The one transition from cart to committed order. Stock is deducted for the
whole cart or not at all; on failure neither the cart nor the inventory
changes and the caller gets the shortfall for every product.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from ..core.config import Settings
from ..database.carts import Cart
from ..database.inventory import InventoryLedger
from ..models.checkout import CheckoutResult, Order, OrderTotals, StockRequest
from ..utils.pricing import round2

logger = logging.getLogger(__name__)


def make_order_id(prefix: str = "ORD") -> str:
    """Timestamp-derived order token, e.g. ORD-20240501T120301-3FA2"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    return f"{prefix}-{stamp}-{uuid.uuid4().hex[:4].upper()}"


class CheckoutSettlement:
    """Validates the cart against inventory and commits the order"""

    def __init__(
        self,
        inventory: InventoryLedger,
        cart: Cart,
        settings: Optional[Settings] = None,
        order_id_factory: Optional[Callable[[], str]] = None,
    ):
        self.inventory = inventory
        self.cart = cart
        self.settings = settings if settings is not None else Settings()
        self._order_id_factory = order_id_factory or (
            lambda: make_order_id(self.settings.order_id_prefix)
        )

    def quote(self) -> OrderTotals:
        """
        Price breakdown for the current cart without committing anything.

        Shipping is free once the subtotal exceeds the configured threshold.
        """
        subtotal = self.cart.get_subtotal()
        original_subtotal = self.cart.get_original_subtotal()

        if self.cart.is_empty or subtotal > self.settings.free_shipping_threshold:
            shipping = 0.0
        else:
            shipping = round2(self.settings.shipping_fee)

        tax = round2(subtotal * self.settings.tax_rate)

        return OrderTotals(
            subtotal=subtotal,
            original_subtotal=original_subtotal,
            savings=round2(original_subtotal - subtotal),
            shipping=shipping,
            tax=tax,
            total=round2(subtotal + shipping + tax),
            currency=self.settings.currency,
        )

    def checkout(self) -> CheckoutResult:
        """Deduct stock for every cart line and empty the cart"""
        items = self.cart.items
        if not items:
            return CheckoutResult(success=False, message="Your cart is empty")

        # Priced before the cart is cleared
        totals = self.quote()
        total_items = self.cart.get_item_count()

        deduction = self.inventory.bulk_deduct([
            StockRequest(
                product_id=item.product_id,
                quantity=item.quantity,
                name=item.product_name or None,
            )
            for item in items
        ])

        if not deduction:
            message = "; ".join(i.message for i in deduction.insufficient_items) or deduction.message
            logger.warning(f"Checkout rejected: {message}")
            return CheckoutResult(
                success=False,
                message=message,
                insufficient_items=deduction.insufficient_items,
            )

        order = Order(
            order_id=self._order_id_factory(),
            items=items,
            total_items=total_items,
            totals=totals,
            created_at=datetime.now(timezone.utc),
        )

        self.cart.clear()

        logger.info(
            f"Order {order.order_id} placed: {total_items} items, "
            f"{totals.total:.2f} {totals.currency}"
        )

        return CheckoutResult(
            success=True,
            message=f"Order {order.order_id} placed successfully",
            order_id=order.order_id,
            order=order,
        )
