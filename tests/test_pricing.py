"""Tests for price utilities."""
import pytest
from storefront.models import Product
from storefront.utils.pricing import (
    discounted_price,
    format_discount,
    format_price,
    format_price_range,
    format_savings,
    original_price_from_discounted,
    price_product,
    product_price_display,
    round2,
    savings,
)


def test_round2_rounds_half_up():
    assert round2(0.125) == 0.13
    assert round2(2.675) == 2.68
    assert round2(1.004) == 1.0


def test_discounted_price():
    assert discounted_price(100, 25) == 75.00
    assert discounted_price(59.99, 10) == 53.99


def test_no_discount_returns_price_unchanged():
    assert discounted_price(19.99, 0) == 19.99
    assert discounted_price(19.99, None) == 19.99


def test_discount_out_of_range():
    with pytest.raises(ValueError):
        discounted_price(10, 120)
    with pytest.raises(ValueError):
        discounted_price(10, -5)


@pytest.mark.parametrize("price,percent", [
    (100.00, 25),
    (80.00, 20),
    (19.99, 10),
    (149.99, 10),
    (249.99, 15),
    (0.00, 50),
])
def test_original_price_recovers_discounted(price, percent):
    recovered = original_price_from_discounted(discounted_price(price, percent), percent)
    assert abs(recovered - price) <= 0.01


def test_original_price_at_full_discount():
    with pytest.raises(ValueError):
        original_price_from_discounted(0, 100)


def test_savings():
    assert savings(100, 75) == 25
    assert savings(59.99, 53.99) == 6.0


def test_format_price():
    assert format_price(59.99) == "59.99 TND"
    assert format_price(59.5, include_decimals=False) == "60 TND"
    assert format_price(None) == ""
    assert format_price(10, currency="USD") == "10.00 USD"


def test_format_helpers():
    assert format_discount(20) == "-20%"
    assert format_savings(12) == "Save 12.00 TND"
    assert format_price_range(5, 10) == "5.00 TND - 10.00 TND"


def test_price_product_without_discount():
    pricing = price_product(Product(id="p", price=30))
    assert pricing.final_price == 30
    assert pricing.original_price == 30
    assert not pricing.has_discount


def test_price_product_with_discount():
    pricing = price_product(Product(id="p", price=200, discount_percentage=15))
    assert pricing.final_price == 170.00
    assert pricing.original_price == 200
    assert pricing.has_discount
    assert pricing.discount_percentage == 15


def test_product_price_display():
    display = product_price_display(Product(id="p", price=100, discount_percentage=20))
    assert display.current_price == "80.00 TND"
    assert display.original_price == "100.00 TND"
    assert display.discount_label == "-20%"
    assert display.savings_amount == "Save 20.00 TND"

    plain = product_price_display(Product(id="q", price=5))
    assert plain.current_price == "5.00 TND"
    assert plain.original_price is None
    assert not plain.has_discount


def test_price_product_rounds_catalog_price():
    pricing = price_product(Product(id="p", price=19.999))
    assert pricing.final_price == 20.00
    assert pricing.original_price == 20.00

    discounted = price_product(Product(id="q", price=10.004, discount_percentage=50))
    assert discounted.original_price == 10.00
    assert discounted.final_price == 5.00


def test_product_accepts_numeric_id():
    assert Product(id=7, price=1).id == "7"
