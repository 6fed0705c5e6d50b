# Core modules

from .config import Settings, get_settings
from .events import EventEmitter, INVENTORY_UPDATED, CART_UPDATED

__all__ = ["Settings", "get_settings", "EventEmitter", "INVENTORY_UPDATED", "CART_UPDATED"]
