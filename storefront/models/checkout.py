"""Checkout models for the storefront"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from .cart import CartItem


class OrderStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class StockRequest(BaseModel):
    """Quantity of a product requested from the inventory"""
    product_id: str
    quantity: int = Field(gt=0)
    name: Optional[str] = None


class InsufficientItem(BaseModel):
    """A requested quantity the inventory cannot cover"""
    product_id: str
    name: Optional[str] = None
    requested: int
    available: int
    message: str


class BulkDeductResult(BaseModel):
    """Outcome of an all-or-nothing stock deduction"""
    success: bool
    message: str
    insufficient_items: list[InsufficientItem] = []
    invalid_items: list[dict] = []

    def __bool__(self) -> bool:
        return self.success


class OrderTotals(BaseModel):
    """Price breakdown for an order"""
    subtotal: float
    original_subtotal: float
    savings: float
    shipping: float
    tax: float
    total: float
    currency: str = "TND"


class Order(BaseModel):
    """Order snapshot built at checkout.

    Owned by the caller; the core does not keep an order history.
    """
    order_id: str
    status: OrderStatus = OrderStatus.COMPLETED
    items: list[CartItem]
    total_items: int = Field(ge=0)
    totals: OrderTotals
    created_at: datetime


class CheckoutResult(BaseModel):
    """Response from checkout"""
    success: bool
    message: str
    order_id: Optional[str] = None
    order: Optional[Order] = None
    insufficient_items: list[InsufficientItem] = []

    def __bool__(self) -> bool:
        return self.success
