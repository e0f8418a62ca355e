"""
Farmer Order Service

Seller-side view of incoming orders (/farmer/orders). Listing degrades to []
except when the backend says the caller is not allowed to see orders (401/403);
those are surfaced so the UI can send the user back to login.
"""

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Callable, List, Optional

from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.marketplace import FarmerOrder, FarmerStats, OperationResult
from mconnect.integrations.errors import OperationFailed
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy, raise_if_rejected
from mconnect.integrations.policy.response_wrappers import (
    backend_message,
    normalize_farmer_order,
    normalize_many,
    require_object,
)

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."
FORBIDDEN_MESSAGE = "You don't have permission to view orders. Please ensure you're logged in as a farmer."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FarmerOrderService:
    def __init__(self, client: RequestClient, clock: Callable[[], datetime] = _utcnow):
        self.client = client
        self.clock = clock

    @failure_policy(
        FailurePolicy.ABSORB,
        fallback=list,
        propagate_statuses={401: SESSION_EXPIRED_MESSAGE, 403: FORBIDDEN_MESSAGE},
    )
    async def get_farmer_orders(self, status: Optional[str] = None) -> List[FarmerOrder]:
        params = {"status": status} if status else None
        body = await self.client.get("/farmer/orders", params=params)
        if not isinstance(body, dict):
            return []
        records = body.get("orders") or body.get("data") or []
        return normalize_many(records, partial(normalize_farmer_order, now=self.clock()), "farmer order")

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to fetch order details")
    async def get_farmer_order_details(self, order_id: int) -> Optional[FarmerOrder]:
        body = require_object(await self.client.get(f"/farmer/orders/{order_id}"), "order response")
        order = body.get("order") or body.get("data")
        if not order:
            return None
        return normalize_farmer_order(require_object(order, "order"), now=self.clock())

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to update order status")
    async def update_order_status(self, order_id: int, status: str) -> OperationResult:
        if status not in ORDER_STATUSES:
            raise OperationFailed(f"Invalid order status '{status}'. Expected one of: {', '.join(ORDER_STATUSES)}")
        body = await self.client.put(f"/farmer/orders/{order_id}/status", json={"status": status})
        raise_if_rejected(body, "Failed to update order status")
        return OperationResult(success=True, message=backend_message(body, "Order status updated successfully"))

    @failure_policy(FailurePolicy.ABSORB, fallback=FarmerStats)
    async def get_farmer_stats(self) -> FarmerStats:
        orders = await self.get_farmer_orders()
        completed = [order for order in orders if order.status == "completed"]
        return FarmerStats(
            total_orders=len(orders),
            pending_orders=sum(1 for order in orders if order.status == "pending"),
            completed_orders=len(completed),
            total_earnings=sum(order.total_amount for order in completed),
        )
