"""Tests for checkout settlement."""
import re

from storefront.models import OrderStatus, Product
from storefront.services import CheckoutSettlement, make_order_id


def test_simple_add_and_checkout(inventory, cart, checkout):
    inventory.set_stock("X", 10)
    cart.add_item(Product(id="X", name="Widget", price=20), 2)
    assert cart.get_subtotal() == 40.00
    assert cart.get_item_count() == 2

    result = checkout.checkout()

    assert result.success
    assert result.order_id == "ORD-TEST"
    assert inventory.get_stock("X") == 8
    assert cart.is_empty
    assert cart.get_item_count() == 0


def test_order_snapshot(cart, checkout, lamp, chair):
    cart.add_item(lamp, 2)
    cart.add_item(chair, 1)

    result = checkout.checkout()

    order = result.order
    assert order.status == OrderStatus.COMPLETED
    assert [i.product_id for i in order.items] == ["lamp", "chair"]
    assert order.total_items == 3
    assert order.totals.subtotal == 115.00
    assert order.totals.original_subtotal == 140.00
    assert order.totals.savings == 25.00
    assert order.totals.shipping == 0.0
    assert order.totals.tax == 9.20
    assert order.totals.total == 124.20


def test_checkout_is_atomic(inventory, cart, checkout):
    inventory.set_stock("A", 5)
    inventory.set_stock("B", 200)
    cart.add_item(Product(id="A", name="Alpha", price=1), 2)
    cart.add_item(Product(id="B", name="Beta", price=1), 100)
    # stock drops after B was added to the cart
    inventory.set_stock("B", 3)

    result = checkout.checkout()

    assert not result.success
    assert result.order_id is None
    assert inventory.get_stock("A") == 5
    assert inventory.get_stock("B") == 3
    assert cart.get_item("A").quantity == 2
    assert cart.get_item("B").quantity == 100
    assert len(result.insufficient_items) == 1
    shortfall = result.insufficient_items[0]
    assert (shortfall.product_id, shortfall.requested, shortfall.available) == ("B", 100, 3)
    assert result.message == "Only 3 units of Beta available, 100 requested"


def test_checkout_can_retry_after_reducing_quantity(inventory, cart, checkout, lamp):
    cart.add_item(lamp, 4)
    inventory.set_stock("lamp", 2)
    assert not checkout.checkout()

    cart.update_quantity("lamp", 2)
    result = checkout.checkout()
    assert result
    assert inventory.get_stock("lamp") == 0


def test_empty_cart(checkout):
    result = checkout.checkout()
    assert not result.success
    assert result.message == "Your cart is empty"


def test_quote_charges_shipping_below_threshold(cart, checkout, lamp):
    cart.add_item(lamp, 1)
    totals = checkout.quote()
    assert totals.subtotal == 20.00
    assert totals.shipping == 10.00
    assert totals.tax == 1.60
    assert totals.total == 31.60
    assert totals.currency == "TND"
    assert not cart.is_empty


def test_quote_for_empty_cart(checkout):
    totals = checkout.quote()
    assert totals.total == 0
    assert totals.shipping == 0


def test_checkout_emits_events(inventory, cart, checkout, lamp):
    seen = []
    inventory.on_change(lambda name, payload: seen.append(name))
    cart.on_change(lambda name, payload: seen.append(name))
    cart.add_item(lamp, 1)
    seen.clear()

    checkout.checkout()
    assert seen == ["inventory-updated", "cart-updated"]


def test_default_order_id(inventory, cart, settings, lamp):
    settlement = CheckoutSettlement(inventory, cart, settings)
    cart.add_item(lamp, 1)
    result = settlement.checkout()
    assert re.fullmatch(r"ORD-\d{8}T\d{6}-[0-9A-F]{4}", result.order_id)


def test_make_order_id_prefix():
    assert make_order_id("WEB").startswith("WEB-")
