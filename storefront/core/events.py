"""Change notifications for storefront state containers"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

INVENTORY_UPDATED = "inventory-updated"
CART_UPDATED = "cart-updated"

Listener = Callable[[str, dict], Any]


class EventEmitter:
    """
    Explicit subscription point owned by a state container.

    Usage:
        unsubscribe = ledger.events.on_change(lambda event, payload: ...)
        ...
        unsubscribe()
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: list[Listener] = []

    def on_change(self, callback: Listener) -> Callable[[], None]:
        """Register a callback; returns a function that removes it"""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: Optional[dict] = None) -> None:
        """Notify every listener. A failing listener does not stop the others."""
        payload = payload or {}
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"{self.name}: listener for '{event}' failed")

    def __len__(self) -> int:
        return len(self._listeners)
