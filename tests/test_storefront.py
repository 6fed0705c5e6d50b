"""Tests for configuration, the catalog and storefront wiring."""
import logging

from storefront import create_storefront, configure_logging
from storefront.core.config import Settings
from storefront.core.events import EventEmitter
from storefront.database import JSONFileStorage, MemoryStorage, ProductCatalog, create_storage
from storefront.models import Product


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("STOREFRONT_CURRENCY", "EUR")
    monkeypatch.setenv("STOREFRONT_TAX_RATE", "0.2")
    monkeypatch.setenv("STOREFRONT_STORAGE_BACKEND", "memory")
    settings = Settings(_env_file=None)
    assert settings.currency == "EUR"
    assert settings.tax_rate == 0.2
    assert settings.storage_backend == "memory"


def test_settings_log_level():
    assert Settings(_env_file=None, debug=True).effective_log_level == "DEBUG"
    assert Settings(_env_file=None, log_level="warning").effective_log_level == "WARNING"


def test_create_storage(tmp_path):
    assert isinstance(create_storage(Settings(_env_file=None, storage_backend="memory")), MemoryStorage)
    json_settings = Settings(_env_file=None, storage_backend="json", storage_path=str(tmp_path / "s.json"))
    assert isinstance(create_storage(json_settings), JSONFileStorage)


def test_configure_logging(settings):
    configure_logging(settings)
    assert logging.getLogger().level in (logging.INFO, logging.WARNING, logging.DEBUG)


def test_event_emitter_unsubscribe():
    emitter = EventEmitter("test")
    calls = []
    unsubscribe = emitter.on_change(lambda name, payload: calls.append(payload))
    emitter.emit("changed", {"n": 1})
    unsubscribe()
    unsubscribe()
    emitter.emit("changed", {"n": 2})
    assert calls == [{"n": 1}]
    assert len(emitter) == 0


def test_catalog_search():
    catalog = ProductCatalog()
    assert [p.id for p in catalog.search_products(category="furniture")] == ["1", "3"]
    assert [p.id for p in catalog.search_products(query="lamp")] == ["2"]
    assert [p.id for p in catalog.search_products(max_price=90)] == ["2", "4"]


def test_catalog_returns_copies():
    catalog = ProductCatalog()
    catalog.get_product("1").price = 1.0
    assert catalog.get_product("1").price == 149.99


def test_catalog_upsert_and_delete():
    catalog = ProductCatalog(products={})
    catalog.upsert_product(Product(id="p", name="Pen", price=2), initial_stock=4)
    assert catalog.get_product("p").name == "Pen"
    assert catalog.delete_product("p")
    assert not catalog.delete_product("p")


def test_create_storefront_seeds_inventory(settings):
    store = create_storefront(settings=settings, storage=MemoryStorage())
    assert store.inventory.snapshot() == {"1": 15, "2": 8, "3": 5, "4": 20}
    assert store.cart.is_empty


def test_seeding_keeps_existing_stock(settings):
    storage = MemoryStorage()
    first = create_storefront(settings=settings, storage=storage)
    first.inventory.deduct("3", 4)

    second = create_storefront(settings=settings, storage=storage)
    assert second.inventory.get_stock("3") == 1


def test_end_to_end_purchase(settings):
    store = create_storefront(settings=settings, storage=MemoryStorage())
    chair = store.catalog.get_product("1")

    assert store.cart.add_item(chair, 2)
    assert store.cart.get_subtotal() == 269.98

    # later catalog repricing does not touch the cart line
    store.catalog.upsert_product(chair.model_copy(update={"price": 10.0}))
    assert store.cart.get_item("1").unit_price == 134.99

    result = store.checkout.checkout()
    assert result.success
    assert store.inventory.get_stock("1") == 13
    assert store.cart.is_empty
    assert result.order.totals.total == round(269.98 + 21.6, 2)


def test_storefront_survives_restart(tmp_path):
    settings = Settings(_env_file=None, storage_backend="json", storage_path=str(tmp_path / "store.json"))
    store = create_storefront(settings=settings)
    store.cart.add_item(store.catalog.get_product("2"), 3)

    restored = create_storefront(settings=settings)
    assert restored.cart.get_item_count() == 3
    assert restored.inventory.get_stock("2") == 8
