"""
Contracts (data models).

This folder defines the shapes exchanged with the backend and with the image
providers:
- Farmer, product, order and cart models returned by the domain services
- The category image set and the image-search provider interface
- The signed-in user and auth session

Both mock and real clients must use these contracts, so callers rely on
stable models rather than ad-hoc dicts.
"""

from .accounts import ACCOUNT_ROLES, AuthSession, User
from .images import (
    CANONICAL_CATEGORIES,
    Category,
    CategoryImageSet,
    ImageSearchProvider,
)
from .marketplace import (
    CartItem,
    Farmer,
    FarmerOrder,
    FarmerOrderItem,
    FarmerProduct,
    FarmerStats,
    MessageResult,
    OperationResult,
    Order,
    OrderItem,
    PlaceOrderResult,
)

__all__ = [
    "ACCOUNT_ROLES",
    "AuthSession",
    "User",
    "CANONICAL_CATEGORIES",
    "Category",
    "CategoryImageSet",
    "ImageSearchProvider",
    "CartItem",
    "Farmer",
    "FarmerOrder",
    "FarmerOrderItem",
    "FarmerProduct",
    "FarmerStats",
    "MessageResult",
    "OperationResult",
    "Order",
    "OrderItem",
    "PlaceOrderResult",
]
