"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class CartItem(BaseModel):
    """Line item in the shopping cart.

    Prices are a snapshot taken when the product was added; they do not
    follow later catalog changes.
    """
    product_id: str
    product_name: str = ""
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    original_unit_price: float = Field(ge=0)
    discount_percentage: int = Field(default=0, ge=0, le=100)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity

    @property
    def original_total_price(self) -> float:
        return self.original_unit_price * self.quantity


class CartTotals(BaseModel):
    """Cached cart aggregates, always recomputed from the line items"""
    total_items: int = Field(default=0, ge=0)
    subtotal: float = Field(default=0.0, ge=0)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CartResult(BaseModel):
    """Outcome of a cart mutation"""
    success: bool
    message: str
    item: Optional[CartItem] = None

    def __bool__(self) -> bool:
        return self.success
