"""
Inventory ledger

Single source of truth for how many units of each product remain.
Stock never goes negative: any call that would push it below zero is
rejected and leaves the ledger unchanged.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional

from pydantic import ValidationError

from ..core.events import EventEmitter, INVENTORY_UPDATED, Listener
from ..models.checkout import BulkDeductResult, InsufficientItem, StockRequest
from ..models.product import StockLevel, StockRecord
from .storage import MemoryStorage, Storage, StorageError, PRODUCT_STOCK_KEY

logger = logging.getLogger(__name__)


def normalize_product_id(product_id: Any) -> Optional[str]:
    if product_id is None:
        return None
    product_id = str(product_id).strip()
    return product_id or None


def is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class InventoryLedger:
    """Per-product stock counts, persisted after every mutation"""

    def __init__(
        self,
        storage: Optional[Storage] = None,
        low_stock_threshold: int = 5,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.low_stock_threshold = low_stock_threshold
        self.events = EventEmitter("inventory")
        self._stock: dict[str, int] = {}
        self._load()

    # Persistence

    def _load(self) -> None:
        try:
            raw = self.storage.load(PRODUCT_STOCK_KEY, {})
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to load inventory, starting empty: {e}")
            return

        if not isinstance(raw, dict):
            logger.error(f"Corrupted inventory data ({type(raw).__name__}), starting empty")
            return

        for product_id, record in raw.items():
            try:
                self._stock[str(product_id)] = StockRecord.model_validate(record).stock
            except ValidationError as e:
                logger.error(f"Discarding invalid stock record for {product_id}: {e}")

        logger.info(f"Loaded stock for {len(self._stock)} products")

    def _commit(self, action: str, product_ids: list[str]) -> None:
        """Persist the full ledger and notify listeners"""
        try:
            self.storage.save(
                PRODUCT_STOCK_KEY,
                {pid: {"stock": stock} for pid, stock in self._stock.items()},
            )
        except StorageError as e:
            logger.error(f"Failed to persist inventory after {action}: {e}")

        self.events.emit(
            INVENTORY_UPDATED,
            {"action": action, "product_ids": product_ids},
        )

    def on_change(self, callback: Listener) -> Callable[[], None]:
        """Subscribe to inventory-updated events; returns an unsubscribe function"""
        return self.events.on_change(callback)

    # Single-record operations

    def initialize(self, product_id: Any, initial_stock: Optional[int] = None) -> bool:
        """Create a stock record if absent. Existing records are never overwritten."""
        pid = normalize_product_id(product_id)
        if pid is None:
            logger.error("Cannot initialize product: invalid product ID")
            return False

        stock = 0 if initial_stock is None else initial_stock
        if not is_count(stock) or stock < 0:
            logger.error(f"Cannot initialize product {pid} with invalid stock: {initial_stock!r}")
            return False

        if pid in self._stock:
            logger.debug(f"Product {pid} already initialized with stock {self._stock[pid]}")
            return True

        self._stock[pid] = stock
        logger.info(f"Initialized product {pid} with stock {stock}")
        self._commit("initialize", [pid])
        return True

    def set_stock(self, product_id: Any, new_stock: Any) -> bool:
        """Overwrite the stock for a product"""
        pid = normalize_product_id(product_id)
        if pid is None:
            logger.error("Cannot set stock: invalid product ID")
            return False

        if not is_count(new_stock) or new_stock < 0:
            logger.error(f"Cannot set invalid stock value for {pid}: {new_stock!r}")
            return False

        self._stock[pid] = new_stock
        logger.info(f"Set stock for product {pid} to {new_stock}")
        self._commit("set_stock", [pid])
        return True

    def has_product(self, product_id: Any) -> bool:
        """True if the product has a stock record, even a depleted one"""
        pid = normalize_product_id(product_id)
        return pid is not None and pid in self._stock

    def get_stock(self, product_id: Any) -> int:
        """Current stock, or 0 for unknown products"""
        pid = normalize_product_id(product_id)
        if pid is None:
            return 0
        if pid not in self._stock:
            logger.warning(f"Product {pid} not found in inventory")
            return 0
        return self._stock[pid]

    def is_in_stock(self, product_id: Any, quantity: int = 1) -> bool:
        """Unknown products count as out of stock"""
        pid = normalize_product_id(product_id)
        if pid is None:
            return False
        if pid not in self._stock:
            logger.warning(f"Product {pid} not found in inventory")
            return False
        return self._stock[pid] >= quantity

    def deduct(self, product_id: Any, quantity: int = 1) -> bool:
        """Remove units from stock; rejected if it would go below zero"""
        pid = normalize_product_id(product_id)
        if pid is None:
            logger.error("Cannot deduct stock: invalid product ID")
            return False

        if not is_count(quantity) or quantity <= 0:
            logger.error(f"Cannot deduct invalid quantity for {pid}: {quantity!r}")
            return False

        current = self.get_stock(pid)
        if current < quantity:
            logger.error(
                f"Not enough stock for product {pid}: requested {quantity}, available {current}"
            )
            return False

        self._stock[pid] = current - quantity
        logger.info(f"Deducted {quantity} from product {pid}. New stock: {self._stock[pid]}")
        self._commit("deduct", [pid])
        return True

    def add(self, product_id: Any, quantity: int = 1) -> bool:
        """Return units to stock (restocks and returns)"""
        pid = normalize_product_id(product_id)
        if pid is None:
            logger.error("Cannot add stock: invalid product ID")
            return False

        if not is_count(quantity) or quantity <= 0:
            logger.error(f"Cannot add invalid quantity for {pid}: {quantity!r}")
            return False

        self._stock[pid] = self._stock.get(pid, 0) + quantity
        logger.info(f"Added {quantity} to product {pid}. New stock: {self._stock[pid]}")
        self._commit("add", [pid])
        return True

    # Batch operations

    @staticmethod
    def _to_request(item: Any) -> Optional[StockRequest]:
        if isinstance(item, StockRequest):
            # model_construct() skips validation, so check again
            product_id = item.product_id
            quantity = item.quantity
            name = item.name
        elif isinstance(item, Mapping):
            product_id = item.get("product_id", item.get("id"))
            quantity = item.get("quantity")
            name = item.get("name") or item.get("product_name")
        else:
            product_id = getattr(item, "product_id", None)
            quantity = getattr(item, "quantity", None)
            name = getattr(item, "product_name", None)

        pid = normalize_product_id(product_id)
        if pid is None or not is_count(quantity) or quantity <= 0:
            return None
        return StockRequest(product_id=pid, quantity=quantity, name=name or None)

    def check_availability(self, items: Iterable[Any]) -> list[InsufficientItem]:
        """
        Compare requested quantities against current stock.

        Quantities for the same product are summed before comparing.
        Returns one entry per product whose request cannot be covered.
        """
        requested: dict[str, int] = {}
        names: dict[str, str] = {}
        for item in items:
            request = self._to_request(item)
            if request is None:
                continue
            requested[request.product_id] = requested.get(request.product_id, 0) + request.quantity
            if request.name:
                names[request.product_id] = request.name

        insufficient = []
        for pid, quantity in requested.items():
            label = names.get(pid, pid)
            if pid not in self._stock:
                insufficient.append(InsufficientItem(
                    product_id=pid,
                    name=names.get(pid),
                    requested=quantity,
                    available=0,
                    message=f"{label} is not available in inventory",
                ))
                continue

            available = self._stock[pid]
            if available < quantity:
                insufficient.append(InsufficientItem(
                    product_id=pid,
                    name=names.get(pid),
                    requested=quantity,
                    available=available,
                    message=f"Only {available} units of {label} available, {quantity} requested",
                ))
        return insufficient

    def bulk_deduct(self, items: Iterable[Any]) -> BulkDeductResult:
        """
        Deduct several products at once, all or nothing.

        Every item is validated and checked against stock before any
        deduction happens, so a failure leaves the ledger untouched.
        """
        items = list(items)
        if not items:
            logger.error("Cannot process bulk deduction: no items provided")
            return BulkDeductResult(success=False, message="No items to deduct")

        requests = []
        invalid = []
        for item in items:
            request = self._to_request(item)
            if request is None:
                invalid.append(item if isinstance(item, dict) else {"item": repr(item)})
            else:
                requests.append(request)

        if invalid:
            logger.error(f"Cannot process bulk deduction: invalid items {invalid}")
            return BulkDeductResult(
                success=False,
                message="Some items are invalid",
                invalid_items=invalid,
            )

        insufficient = self.check_availability(requests)
        if insufficient:
            logger.error(
                "Cannot process bulk deduction: "
                + "; ".join(i.message for i in insufficient)
            )
            return BulkDeductResult(
                success=False,
                message="Some items are out of stock",
                insufficient_items=insufficient,
            )

        for request in requests:
            self._stock[request.product_id] -= request.quantity

        product_ids = sorted({r.product_id for r in requests})
        logger.info(f"Bulk deduction processed for {len(requests)} items")
        self._commit("bulk_deduct", product_ids)
        return BulkDeductResult(success=True, message="Stock deducted")

    # Admin views

    def low_stock(self, threshold: Optional[int] = None) -> list[StockLevel]:
        """Products whose stock is below threshold"""
        if threshold is None:
            threshold = self.low_stock_threshold
        return [
            StockLevel(product_id=pid, stock=stock)
            for pid, stock in sorted(self._stock.items())
            if stock < threshold
        ]

    def snapshot(self) -> dict[str, int]:
        return dict(self._stock)

    def reset(self, stock: Optional[Mapping[Any, int]] = None) -> bool:
        """Drop every record, optionally replacing them with the given counts"""
        new_stock: dict[str, int] = {}
        for product_id, count in (stock or {}).items():
            pid = normalize_product_id(product_id)
            if pid is None or not is_count(count) or count < 0:
                logger.error(f"Cannot reset inventory: invalid entry {product_id!r}: {count!r}")
                return False
            new_stock[pid] = count

        self._stock = new_stock
        logger.warning(f"Inventory reset ({len(new_stock)} products)")
        self._commit("reset", sorted(new_stock))
        return True

    def __contains__(self, product_id: Any) -> bool:
        return self.has_product(product_id)

    def __len__(self) -> int:
        return len(self._stock)
