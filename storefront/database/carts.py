"""Cart storage for the storefront"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from ..core.events import EventEmitter, CART_UPDATED, Listener
from ..models.cart import CartItem, CartResult, CartTotals
from ..models.product import Product
from ..utils.pricing import discounted_price, price_product, round2
from .inventory import InventoryLedger, normalize_product_id, is_count
from .storage import MemoryStorage, Storage, StorageError, CART_ITEMS_KEY, CART_AGGREGATES_KEY

logger = logging.getLogger(__name__)


class Cart:
    """
    The current shopper's cart.

    Additions and quantity changes are checked against the inventory ledger
    at the time of the change. Nothing is reserved: checkout checks stock
    again before deducting.
    """

    def __init__(self, inventory: InventoryLedger, storage: Optional[Storage] = None):
        self.inventory = inventory
        self.storage = storage if storage is not None else MemoryStorage()
        self.events = EventEmitter("cart")
        self._items: dict[str, CartItem] = {}
        self._totals = CartTotals()
        self._load()

    # Persistence

    def _load(self) -> None:
        try:
            raw_items = self.storage.load(CART_ITEMS_KEY, [])
            raw_totals = self.storage.load(CART_AGGREGATES_KEY)
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to load cart, starting empty: {e}")
            return

        if not isinstance(raw_items, list):
            logger.error(f"Corrupted cart data ({type(raw_items).__name__}), starting empty")
            raw_items = []

        for raw in raw_items:
            try:
                item = CartItem.model_validate(raw)
            except ValidationError as e:
                logger.error(f"Discarding invalid cart line: {e}")
                continue

            existing = self._items.get(item.product_id)
            if existing:
                logger.warning(f"Merging duplicate cart lines for {item.product_id}")
                existing.quantity += item.quantity
            else:
                self._items[item.product_id] = item

        self._recalculate_totals()

        if raw_totals is not None:
            try:
                stored = CartTotals.model_validate(raw_totals)
            except ValidationError:
                stored = None
            if stored != self._totals:
                logger.warning(
                    f"Stored cart aggregates {raw_totals} do not match line items, "
                    f"using {self._totals.model_dump(by_alias=True)}"
                )

    def _recalculate_totals(self) -> None:
        """Recalculate cart totals"""
        self._totals = CartTotals(
            total_items=sum(item.quantity for item in self._items.values()),
            subtotal=round2(sum(item.total_price for item in self._items.values())),
        )

    def _commit(self, action: str, product_id: Optional[str] = None) -> None:
        self._recalculate_totals()
        try:
            self.storage.save(
                CART_ITEMS_KEY,
                [item.model_dump(by_alias=True) for item in self._items.values()],
            )
            self.storage.save(CART_AGGREGATES_KEY, self._totals.model_dump(by_alias=True))
        except StorageError as e:
            logger.error(f"Failed to persist cart after {action}: {e}")

        self.events.emit(CART_UPDATED, {
            "action": action,
            "product_id": product_id,
            "total_items": self._totals.total_items,
            "subtotal": self._totals.subtotal,
        })

    def on_change(self, callback: Listener) -> Callable[[], None]:
        """Subscribe to cart-updated events; returns an unsubscribe function"""
        return self.events.on_change(callback)

    # Mutations

    def _shortfall_message(self, product_id: str, name: str, requested: int) -> str:
        if not self.inventory.has_product(product_id):
            return f"{name} is out of stock"
        available = self.inventory.get_stock(product_id)
        return f"Only {available} units of {name} available, {requested} requested"

    def add_item(
        self,
        product: Union[Product, Mapping, None],
        quantity: int = 1,
    ) -> CartResult:
        """
        Add a product to the cart.

        An existing line is incremented; a new line snapshots the product's
        current final price, original price and discount.
        """
        if isinstance(product, Mapping):
            try:
                product = Product.model_validate(product)
            except ValidationError as e:
                logger.error(f"Cannot add invalid product to cart: {e}")
                return CartResult(success=False, message="Invalid product")

        product_id = normalize_product_id(product.id) if product is not None else None
        if product_id is None:
            logger.error("Cannot add a product without an ID to the cart")
            return CartResult(success=False, message="Cannot add a product without an ID")

        name = product.name or product_id

        if not is_count(quantity) or quantity <= 0:
            logger.error(f"Cannot add invalid quantity {quantity!r} of {product_id}")
            return CartResult(success=False, message=f"Invalid quantity for {name}: {quantity}")

        existing = self._items.get(product_id)
        new_quantity = existing.quantity + quantity if existing else quantity

        if not self.inventory.is_in_stock(product_id, new_quantity):
            message = self._shortfall_message(product_id, name, new_quantity)
            logger.error(f"Cannot add {product_id} to cart: {message}")
            return CartResult(success=False, message=message)

        if existing:
            existing.quantity = new_quantity
            item = existing
            message = f"Updated {name} quantity in cart"
        else:
            pricing = price_product(product)
            item = CartItem(
                product_id=product_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=pricing.final_price,
                original_unit_price=pricing.original_price,
                discount_percentage=pricing.discount_percentage,
            )
            self._items[product_id] = item
            message = f"Added {name} to cart"

        self._commit("add_item", product_id)
        logger.info(message)
        return CartResult(success=True, message=message, item=item.model_copy())

    def remove_item(self, product_id: Any) -> CartResult:
        """Delete a line. Missing lines leave the cart unchanged."""
        pid = normalize_product_id(product_id)
        item = self._items.pop(pid, None) if pid is not None else None
        if item is None:
            return CartResult(success=False, message=f"{product_id} is not in the cart")

        self._commit("remove_item", pid)
        message = f"Removed {item.product_name or pid} from cart"
        logger.info(message)
        return CartResult(success=True, message=message, item=item)

    def update_quantity(self, product_id: Any, quantity: int) -> CartResult:
        """Set a line's quantity exactly. Zero or less removes the line."""
        if is_count(quantity) and quantity <= 0:
            return self.remove_item(product_id)

        pid = normalize_product_id(product_id)
        item = self._items.get(pid) if pid is not None else None
        if item is None:
            return CartResult(success=False, message=f"{product_id} is not in the cart")

        name = item.product_name or pid
        if not is_count(quantity):
            logger.error(f"Cannot set invalid quantity {quantity!r} for {pid}")
            return CartResult(success=False, message=f"Invalid quantity for {name}: {quantity}")

        if not self.inventory.is_in_stock(pid, quantity):
            message = self._shortfall_message(pid, name, quantity)
            logger.error(f"Cannot update {pid} quantity: {message}")
            return CartResult(success=False, message=message)

        item.quantity = quantity
        self._commit("update_quantity", pid)
        return CartResult(
            success=True,
            message=f"Updated {name} quantity to {quantity}",
            item=item.model_copy(),
        )

    def update_discount(self, product_id: Any, discount_percentage: int) -> CartResult:
        """Reprice a line from its stored original price and a new discount"""
        pid = normalize_product_id(product_id)
        item = self._items.get(pid) if pid is not None else None
        if item is None:
            return CartResult(success=False, message=f"{product_id} is not in the cart")

        if not is_count(discount_percentage) or not 0 <= discount_percentage <= 100:
            logger.error(f"Cannot apply invalid discount {discount_percentage!r} to {pid}")
            return CartResult(
                success=False,
                message=f"Invalid discount for {item.product_name or pid}: {discount_percentage}",
            )

        item.discount_percentage = discount_percentage
        item.unit_price = discounted_price(item.original_unit_price, discount_percentage)
        self._commit("update_discount", pid)
        return CartResult(
            success=True,
            message=f"Applied {discount_percentage}% discount to {item.product_name or pid}",
            item=item.model_copy(),
        )

    def clear(self) -> CartResult:
        """Clear all items from cart"""
        self._items = {}
        self._commit("clear")
        logger.info("Cart cleared")
        return CartResult(success=True, message="Cart cleared")

    # Accessors

    @property
    def items(self) -> list[CartItem]:
        return [item.model_copy() for item in self._items.values()]

    @property
    def totals(self) -> CartTotals:
        return self._totals.model_copy()

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: Any) -> Optional[CartItem]:
        pid = normalize_product_id(product_id)
        item = self._items.get(pid) if pid is not None else None
        return item.model_copy() if item else None

    def get_item_count(self) -> int:
        return self._totals.total_items

    def get_subtotal(self) -> float:
        return self._totals.subtotal

    def get_original_subtotal(self) -> float:
        return round2(sum(item.original_total_price for item in self._items.values()))

    def get_savings(self) -> float:
        return round2(self.get_original_subtotal() - self.get_subtotal())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: Any) -> bool:
        return normalize_product_id(product_id) in self._items
