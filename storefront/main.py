"""
Storefront

Wires the inventory ledger, cart and checkout settlement together over a
shared persistence backend and rehydrates them from it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .core.config import Settings, get_settings
from .database.carts import Cart
from .database.inventory import InventoryLedger
from .database.products import ProductCatalog
from .database.storage import Storage, create_storage
from .services.checkout import CheckoutSettlement

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure logging"""
    logging.basicConfig(level=settings.effective_log_level, format=LOG_FORMAT)


@dataclass
class Storefront:
    """The storefront's state containers"""
    settings: Settings
    storage: Storage
    catalog: ProductCatalog
    inventory: InventoryLedger
    cart: Cart
    checkout: CheckoutSettlement


def create_storefront(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    catalog: Optional[ProductCatalog] = None,
    seed: bool = True,
) -> Storefront:
    """Build a storefront, loading persisted state and seeding catalog stock"""
    if settings is None:
        load_dotenv()
        settings = get_settings()

    storage = storage if storage is not None else create_storage(settings)
    catalog = catalog if catalog is not None else ProductCatalog()

    if not storage.check_writable():
        logger.warning("Storage is not writable - state will only last for this session")

    inventory = InventoryLedger(storage, low_stock_threshold=settings.low_stock_threshold)
    if seed:
        catalog.seed_inventory(inventory)

    cart = Cart(inventory, storage)
    checkout = CheckoutSettlement(inventory, cart, settings)

    logger.info(
        f"{settings.app_name} ready: {len(inventory)} products tracked, "
        f"{cart.get_item_count()} items in cart"
    )

    return Storefront(
        settings=settings,
        storage=storage,
        catalog=catalog,
        inventory=inventory,
        cart=cart,
        checkout=checkout,
    )
