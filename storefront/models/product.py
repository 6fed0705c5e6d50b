"""Product and stock models for the storefront"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional


class Product(BaseModel):
    """Product in the catalog.

    Reference data only: the cart snapshots prices from it and the
    inventory ledger tracks its stock by ``id``.
    """
    id: str
    name: str = ""
    description: str = ""
    price: float = Field(ge=0)
    discount_percentage: int = Field(default=0, ge=0, le=100)
    category: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value):
        # Catalog ids may arrive as numbers; the ledger keys them by str()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class StockRecord(BaseModel):
    """Persisted stock for a single product"""
    stock: int = Field(ge=0)


class StockLevel(BaseModel):
    """Stock row returned by inventory reports"""
    product_id: str
    stock: int


class ProductPricing(BaseModel):
    """Standardized price structure for a product"""
    final_price: float
    original_price: float
    has_discount: bool
    discount_percentage: int = 0


class PriceDisplay(BaseModel):
    """Formatted price strings for product listings"""
    current_price: str
    original_price: Optional[str] = None
    discount_label: Optional[str] = None
    savings_amount: Optional[str] = None
    has_discount: bool = False
