from __future__ import annotations

import functools
import json
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from mconnect.integrations.contracts.accounts import AuthSession, User
from mconnect.integrations.contracts.marketplace import (
    CartItem,
    Farmer,
    FarmerOrder,
    FarmerOrderItem,
    FarmerProduct,
    Order,
    OrderItem,
)
from mconnect.integrations.errors import IntegrationResponseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()
NEW_ORDER_WINDOW = timedelta(hours=24)

MESSAGE_FIRST = ("message", "error")
ERROR_FIRST = ("error", "message")


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------

def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body, tolerating the UTF-8 BOM some backend routes emit."""
    if not response.content:
        return {}
    text = response.content.decode("utf-8-sig", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def require_object(data: Any, label: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise IntegrationResponseError(f"Expected {label} object, got {type(data).__name__}")
    return data


def is_success(envelope: Any) -> bool:
    if not isinstance(envelope, dict):
        return False
    if "success" in envelope:
        return _truthy_flag(envelope["success"])
    return str(envelope.get("status", "")).lower() == "success"


def is_rejection(envelope: Any) -> bool:
    """A body that explicitly says the call did not go through."""
    if not isinstance(envelope, dict):
        return False
    if "success" in envelope and not _truthy_flag(envelope["success"]):
        return True
    return str(envelope.get("status", "")).lower() == "error"


def extract_api_data(envelope: Any) -> Any:
    """Unwrap the payload from the handful of envelope styles the backend uses."""
    if not envelope:
        return None
    if not isinstance(envelope, dict):
        return envelope
    if "data" in envelope:
        return envelope["data"]
    return envelope


def backend_message(payload: Any, fallback: str, keys: Sequence[str] = MESSAGE_FIRST) -> str:
    """
    Best human-readable message in a backend payload: `keys` in order (message
    then error by default), then the first validation error.
    """
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        errors = payload.get("errors")
        if isinstance(errors, dict) and errors:
            first = next(iter(errors.values()))
            if isinstance(first, list) and first:
                return str(first[0])
            if first:
                return str(first)
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()
    return fallback


def _contract_mapper(label: str):
    """Every malformed-shape failure inside a normalizer surfaces as IntegrationResponseError."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(raw, *args, **kwargs):
            if not isinstance(raw, dict):
                raise IntegrationResponseError(f"Expected {label} object, got {type(raw).__name__}")
            try:
                return func(raw, *args, **kwargs)
            except IntegrationResponseError:
                raise
            except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as exc:
                raise IntegrationResponseError(f"Malformed {label} record: {exc}", payload=raw) from exc

        return wrapper

    return decorator


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

@_contract_mapper("user")
def normalize_user(raw: Dict[str, Any]) -> User:
    return _build_model(
        User,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "name": str(_first_non_empty(raw, "name")),
            "email": str(_first_non_empty(raw, "email")),
            "role": str(_first_non_empty(raw, "role")),
            "avatar": _optional_str(_first_non_empty(raw, "avatar", default=None)),
            "phone": _optional_str(_first_non_empty(raw, "phone", default=None)),
            "location": _optional_str(_first_non_empty(raw, "location", default=None)),
            "created_at": _optional_str(_first_non_empty(raw, "created_at", default=None)),
            "updated_at": _optional_str(_first_non_empty(raw, "updated_at", default=None)),
        },
        raw,
    )


@_contract_mapper("auth response")
def normalize_auth_session(raw: Dict[str, Any], success_message: str = "Authentication successful") -> AuthSession:
    """Login/register body: `user` plus `accessToken` (older builds send `token`)."""
    refresh = _first_non_empty(raw, "refreshToken", "refresh_token", default=None)
    return _build_model(
        AuthSession,
        {
            "message": backend_message(raw, success_message),
            "user": normalize_user(require_object(raw.get("user"), "user")),
            "access_token": str(_first_non_empty(raw, "accessToken", "access_token", "token")),
            "refresh_token": _optional_str(refresh),
            "token_type": str(_first_non_empty(raw, "token_type", default="bearer")),
            "expires_in": _coerce_count(_first_non_empty(raw, "expires_in", default=3600), "expires_in"),
        },
        raw,
    )


# ---------------------------------------------------------------------------
# Farmers
# ---------------------------------------------------------------------------

@_contract_mapper("farmer")
def normalize_farmer(raw: Dict[str, Any]) -> Farmer:
    raw = _unwrap(raw, "farmer")
    phone = _first_non_empty(raw, "phone", "phone_number", default=None)
    has_phone = raw.get("has_phone", raw.get("hasPhone"))
    return _build_model(
        Farmer,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "name": str(_first_non_empty(raw, "name")),
            "email": str(_first_non_empty(raw, "email", default="")),
            "phone": str(phone) if phone is not None else None,
            "location": str(_first_non_empty(raw, "location", default="Not specified")),
            "role": str(_first_non_empty(raw, "role", default="farmer")),
            "has_phone": _truthy_flag(has_phone) if has_phone is not None else phone is not None,
        },
        raw,
    )


@_contract_mapper("farmer product")
def normalize_farmer_product(raw: Dict[str, Any]) -> FarmerProduct:
    raw = _unwrap(raw, "product")
    formatted = _first_non_empty(raw, "formatted_price", "formattedPrice", default=None)
    return _build_model(
        FarmerProduct,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "name": str(_first_non_empty(raw, "name")),
            "description": str(_first_non_empty(raw, "description", default="")),
            "price": _coerce_amount(_first_non_empty(raw, "price"), "product price"),
            "formatted_price": str(formatted) if formatted is not None else None,
            "image": str(_first_non_empty(raw, "image", "image_url", default="")),
            "category": str(_first_non_empty(raw, "category", default="")),
            "location": str(_first_non_empty(raw, "location", default="")),
            "stock_quantity": _coerce_count(
                _first_non_empty(raw, "stock_quantity", "stockQuantity", "stock", default=0), "stock quantity"
            ),
        },
        raw,
    )


# ---------------------------------------------------------------------------
# Buyer orders
# ---------------------------------------------------------------------------

@_contract_mapper("order item")
def normalize_order_item(raw: Dict[str, Any]) -> OrderItem:
    return _build_model(
        OrderItem,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "product_name": _product_name(raw, default="Unknown"),
            "price": _coerce_amount(_first_non_empty(raw, "price"), "item price"),
            "quantity": _coerce_count(_first_non_empty(raw, "quantity"), "item quantity"),
        },
        raw,
    )


@_contract_mapper("order")
def normalize_order(raw: Dict[str, Any]) -> Order:
    items = [normalize_order_item(item) for item in _nested_records(raw, "items")]
    items_count = _first_non_empty(raw, "items_count", "itemsCount", default=len(items))
    return _build_model(
        Order,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "total_amount": _coerce_amount(_first_non_empty(raw, "total_amount", "totalAmount"), "order total"),
            "status": str(_first_non_empty(raw, "status", "order_status")),
            "payment_status": str(_first_non_empty(raw, "payment_status", "paymentStatus")),
            "items_count": _coerce_count(items_count, "items count"),
            "items": items,
            "created_at": _optional_str(_first_non_empty(raw, "created_at", "createdAt", default=None)),
        },
        raw,
    )


# ---------------------------------------------------------------------------
# Farmer orders
# ---------------------------------------------------------------------------

@_contract_mapper("farmer order item")
def normalize_farmer_order_item(raw: Dict[str, Any]) -> FarmerOrderItem:
    return _build_model(
        FarmerOrderItem,
        {
            "id": _coerce_id(_first_non_empty(raw, "id")),
            "product_name": _product_name(raw, default="Unknown Product"),
            "quantity": _coerce_count(raw.get("quantity") or 0, "item quantity"),
            "price": _coerce_amount(raw.get("price") or 0, "item price"),
            "total": _coerce_amount(raw.get("total") or 0, "item total"),
        },
        raw,
    )


@_contract_mapper("farmer order")
def normalize_farmer_order(raw: Dict[str, Any], now: Optional[datetime] = None) -> FarmerOrder:
    """
    Map a seller-side order record. The backend reports `order_status`, nests
    buyer details under `buyer`, and may omit timestamps; missing timestamps
    default to `now`.
    """
    if raw.get("id") in (None, "") or raw.get("total_amount") is None:
        raise IntegrationResponseError("Farmer order is missing id or total_amount.", payload=raw)

    now = now or datetime.now(timezone.utc)
    buyer = raw.get("buyer") if isinstance(raw.get("buyer"), dict) else {}
    items = [normalize_farmer_order_item(item) for item in _nested_records(raw, "items")]
    created_raw = _first_non_empty(raw, "created_at", default=None)
    created_at = str(created_raw) if created_raw is not None else now.isoformat()
    updated_at = str(_first_non_empty(raw, "updated_at", default=now.isoformat()))

    return _build_model(
        FarmerOrder,
        {
            "id": _coerce_id(raw["id"]),
            "buyer_name": str(buyer.get("name") or "Unknown Customer"),
            "buyer_phone": str(buyer.get("phone") or ""),
            "buyer_location": str(buyer.get("location") or ""),
            "total_amount": _coerce_amount(raw.get("total_amount") or 0, "order total"),
            "status": str(_first_non_empty(raw, "order_status", "status", default="pending")).lower(),
            "payment_status": str(_first_non_empty(raw, "payment_status", default="unpaid")).lower(),
            "items_count": _coerce_count(raw.get("items_count") or len(items), "items count"),
            "items": items,
            "created_at": created_at,
            "updated_at": updated_at,
            "is_new": created_raw is not None and _is_recent(str(created_raw), now),
        },
        raw,
    )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------

@_contract_mapper("cart item")
def normalize_cart_item(raw: Dict[str, Any]) -> CartItem:
    product = raw.get("product") if isinstance(raw.get("product"), dict) else {}
    return _build_model(
        CartItem,
        {
            "id": _coerce_id(_first_non_empty(product, "id")),
            "name": str(_first_non_empty(product, "name")),
            "price": _coerce_amount(_first_non_empty(raw, "price"), "cart price"),
            "cart_quantity": _coerce_count(_first_non_empty(raw, "quantity"), "cart quantity"),
        },
        raw,
    )


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

def normalize_many(records: Any, normalizer: Callable[[Dict[str, Any]], T], label: str) -> List[T]:
    """Normalize each record, skipping (and logging) the ones that do not fit the contract."""
    if not isinstance(records, list):
        if records not in (None, {}):
            logger.error("Invalid %s payload: expected a list, got %s", label, type(records).__name__)
        return []

    result: List[T] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping non-object %s record: %r", label, record)
            continue
        try:
            result.append(normalizer(record))
        except IntegrationResponseError as exc:
            logger.warning("Skipping invalid %s record: %s", label, exc)
    return result


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _truthy_flag(value: Any) -> bool:
    # Booleans plus their numeric and string spellings.
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return False


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not _MISSING:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _nested_records(raw: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    records = raw.get(key) or []
    if not isinstance(records, list):
        raise IntegrationResponseError(f"Expected `{key}` to be a list, got {type(records).__name__}", payload=raw)
    for record in records:
        if not isinstance(record, dict):
            raise IntegrationResponseError(f"Non-object entry in `{key}`: {record!r}", payload=raw)
    return records


def _unwrap(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    nested = raw.get(key)
    if isinstance(nested, dict):
        return nested
    plural = raw.get(f"{key}s")
    if isinstance(plural, list) and plural and isinstance(plural[0], dict):
        return plural[0]
    return raw


def _product_name(item: Dict[str, Any], default: str) -> str:
    name = item.get("product_name")
    if not name and isinstance(item.get("product"), dict):
        name = item["product"].get("name")
    return str(name) if name else default


def _coerce_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid id: {value!r}") from exc


def _coerce_amount(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise IntegrationResponseError(f"Invalid {label}: {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid {label}: {value!r}") from exc
    if not math.isfinite(amount):
        raise IntegrationResponseError(f"Invalid {label}: {value!r}")
    if amount < 0:
        raise IntegrationResponseError(f"{label.capitalize()} must be >= 0; got {amount}.")
    return amount


def _coerce_count(value: Any, label: str) -> int:
    amount = _coerce_amount(value, label)
    if not amount.is_integer():
        raise IntegrationResponseError(f"{label.capitalize()} must be a whole number; got {value!r}.")
    return int(amount)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _is_recent(timestamp: str, now: datetime) -> bool:
    try:
        created = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return False
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return now - created < NEW_ORDER_WINDOW


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc


__all__ = [
    "ERROR_FIRST",
    "MESSAGE_FIRST",
    "decode_body",
    "is_success",
    "is_rejection",
    "require_object",
    "extract_api_data",
    "backend_message",
    "normalize_user",
    "normalize_auth_session",
    "normalize_farmer",
    "normalize_farmer_product",
    "normalize_order",
    "normalize_order_item",
    "normalize_farmer_order",
    "normalize_farmer_order_item",
    "normalize_cart_item",
    "normalize_many",
]
