"""
Price utilities

Stateless discount and savings math shared by the cart and product display.
Every derived price is rounded to 2 decimal places, half-up, right after the
multiplication or division that produced it.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..models.product import Product, ProductPricing, PriceDisplay

DEFAULT_CURRENCY = "TND"

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimal places using half-up rounding"""
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def _check_percent(discount_percent: float) -> None:
    if discount_percent < 0 or discount_percent > 100:
        raise ValueError(f"Discount must be between 0 and 100, got {discount_percent}")


def discounted_price(original_price: float, discount_percent: Optional[float] = None) -> float:
    """Price after applying a percentage discount"""
    if not discount_percent:
        return original_price
    _check_percent(discount_percent)
    return round2(original_price * (1 - discount_percent / 100))


def original_price_from_discounted(
    discounted: float,
    discount_percent: Optional[float] = None,
) -> float:
    """
    Recover the pre-discount price.

    Rounding error in ``discounted`` is amplified by 1 / (1 - d/100), so the
    result is exact to the cent only for moderate discounts.

    Raises:
        ValueError: for a 100% discount, where the original is unrecoverable
    """
    if not discount_percent:
        return discounted
    _check_percent(discount_percent)
    if discount_percent == 100:
        raise ValueError("Cannot recover an original price from a 100% discount")
    return round2(discounted / (1 - discount_percent / 100))


def savings(original: float, discounted: float) -> float:
    """Amount saved by a discount"""
    return round2(original - discounted)


def format_price(
    price: Optional[float],
    include_decimals: bool = True,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Format a price with its currency code, e.g. ``59.99 TND``"""
    if price is None:
        return ""
    if include_decimals:
        return f"{round2(price):.2f} {currency}"
    return f"{int(Decimal(repr(price)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))} {currency}"


def format_price_range(
    min_price: float,
    max_price: float,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    return f"{format_price(min_price, currency=currency)} - {format_price(max_price, currency=currency)}"


def format_discount(percentage: int) -> str:
    return f"-{percentage}%"


def format_savings(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    return f"Save {format_price(amount, currency=currency)}"


def price_product(product: Product) -> ProductPricing:
    """Standardize a product's price into final/original/discount fields, to the cent"""
    price = round2(product.price)
    if not product.discount_percentage:
        return ProductPricing(
            final_price=price,
            original_price=price,
            has_discount=False,
            discount_percentage=0,
        )

    return ProductPricing(
        final_price=discounted_price(price, product.discount_percentage),
        original_price=price,
        has_discount=True,
        discount_percentage=product.discount_percentage,
    )


def product_price_display(product: Product, currency: str = DEFAULT_CURRENCY) -> PriceDisplay:
    """All formatted price information for a product listing"""
    pricing = price_product(product)

    if not pricing.has_discount:
        return PriceDisplay(current_price=format_price(pricing.final_price, currency=currency))

    return PriceDisplay(
        current_price=format_price(pricing.final_price, currency=currency),
        original_price=format_price(pricing.original_price, currency=currency),
        discount_label=format_discount(pricing.discount_percentage),
        savings_amount=format_savings(
            savings(pricing.original_price, pricing.final_price),
            currency=currency,
        ),
        has_discount=True,
    )
