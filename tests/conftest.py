"""Shared fixtures"""
import pytest
from storefront.core.config import Settings
from storefront.database import Cart, InventoryLedger, MemoryStorage
from storefront.models import Product
from storefront.services import CheckoutSettlement


@pytest.fixture
def settings():
    return Settings(storage_backend="memory", _env_file=None)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def inventory(storage):
    ledger = InventoryLedger(storage)
    ledger.initialize("lamp", 10)
    ledger.initialize("chair", 5)
    ledger.initialize("vase", 3)
    return ledger


@pytest.fixture
def cart(inventory, storage):
    return Cart(inventory, storage)


@pytest.fixture
def checkout(inventory, cart, settings):
    return CheckoutSettlement(inventory, cart, settings, order_id_factory=lambda: "ORD-TEST")


@pytest.fixture
def lamp():
    return Product(id="lamp", name="Lamp", price=20.00)


@pytest.fixture
def chair():
    return Product(id="chair", name="Chair", price=100.00, discount_percentage=25)
