"""
Marketplace contracts.

Stable shapes returned by the domain services. The backend payloads vary
(camelCase vs snake_case keys, nested `product`/`buyer` objects, `order_status`
vs `status`); policy/response_wrappers.py maps them onto these models so
callers never touch raw dicts.

Models are frozen: a value built from one response is a read-through copy and
is not meant to be mutated or cached across requests.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Contract(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Farmers
# ---------------------------------------------------------------------------

class Farmer(_Contract):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    location: str = "Not specified"
    role: str = "farmer"
    has_phone: bool = False


class FarmerProduct(_Contract):
    id: int
    name: str
    description: str = ""
    price: float = Field(ge=0)
    formatted_price: Optional[str] = None   # display only, never parsed back into price
    image: str = ""
    category: str = ""
    location: str = ""
    stock_quantity: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Buyer orders
# ---------------------------------------------------------------------------

class OrderItem(_Contract):
    id: int
    product_name: str = "Unknown"
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class Order(_Contract):
    id: int
    total_amount: float = Field(ge=0)
    status: str                          # passed through; independent of payment_status
    payment_status: str
    items_count: int = Field(default=0, ge=0)
    items: List[OrderItem] = Field(default_factory=list)
    created_at: Optional[str] = None


# ---------------------------------------------------------------------------
# Farmer (seller-side) orders
# ---------------------------------------------------------------------------

class FarmerOrderItem(_Contract):
    id: int
    product_name: str = "Unknown Product"
    quantity: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)


class FarmerOrder(_Contract):
    id: int
    buyer_name: str = "Unknown Customer"
    buyer_phone: str = ""
    buyer_location: str = ""
    total_amount: float = Field(ge=0)
    status: str = "pending"
    payment_status: str = "unpaid"
    items_count: int = Field(default=0, ge=0)
    items: List[FarmerOrderItem] = Field(default_factory=list)
    created_at: str
    updated_at: str
    is_new: bool = False


class FarmerStats(_Contract):
    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    total_earnings: float = 0.0


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------

class CartItem(_Contract):
    id: int
    name: str
    price: float = Field(ge=0)
    cart_quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

class OperationResult(_Contract):
    """Outcome of a write that reports instead of raising."""

    success: bool
    message: str


class MessageResult(_Contract):
    message: str


class PlaceOrderResult(_Contract):
    message: str
    order: Optional[Order] = None
