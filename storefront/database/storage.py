"""
Key-value persistence for storefront state.

Each state container serializes its full state under a fixed key after every
mutation and rehydrates from it at startup.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)

PRODUCT_STOCK_KEY = "product-stock"
CART_ITEMS_KEY = "cart-items"
CART_AGGREGATES_KEY = "cart-aggregates"

_PROBE_KEY = "_storage_probe"


class StorageError(Exception):
    """Raised when the persistence backend cannot read or write"""
    pass


class Storage(ABC):
    """Persistence strategy injected into the state containers"""

    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default"""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present"""

    def check_writable(self) -> bool:
        """Write and remove a probe key to confirm the backend accepts writes"""
        try:
            self.save(_PROBE_KEY, {"ok": True})
            readable = self.load(_PROBE_KEY) == {"ok": True}
            self.delete(_PROBE_KEY)
        except StorageError as e:
            logger.error(f"Storage write check failed: {e}")
            return False
        return readable


class MemoryStorage(Storage):
    """In-memory storage, used by default and in tests"""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        # Stored as text so callers never share mutable state with the store
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize value for '{key}': {e}") from e

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JSONFileStorage(Storage):
    """All keys kept in a single JSON document on disk"""

    def __init__(self, filepath: str = "storefront-data.json"):
        self._filepath = filepath
        self._cache: dict[str, Any] = {}
        self._load()

    @property
    def filepath(self) -> str:
        return self._filepath

    def _load(self):
        if not os.path.exists(self._filepath):
            return
        try:
            with open(self._filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {self._filepath}, starting empty: {e}")
            return
        if not isinstance(data, dict):
            logger.error(f"Unexpected document in {self._filepath}, starting empty")
            return
        self._cache = data

    def _flush(self):
        tmp_path = f"{self._filepath}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._cache, f, indent=2)
            os.replace(tmp_path, self._filepath)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {self._filepath}: {e}") from e

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._cache:
            return default
        # Round-trip through JSON to hand out a copy
        return json.loads(json.dumps(self._cache[key]))

    def save(self, key: str, value: Any) -> None:
        try:
            self._cache[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize value for '{key}': {e}") from e
        self._flush()

    def delete(self, key: str) -> None:
        if key in self._cache:
            del self._cache[key]
            self._flush()


def create_storage(settings) -> Storage:
    """Build the storage backend selected in settings"""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return JSONFileStorage(settings.storage_path)
