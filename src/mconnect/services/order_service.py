"""
Order Service

Buyer-side orders. Mutations fail loud, reads fail quiet:
- place_order / cancel_order raise OperationFailed with the backend's reason
- get_orders returns [] when the backend is unreachable or errors
"""

import logging
from typing import List

from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.marketplace import MessageResult, Order, PlaceOrderResult
from mconnect.integrations.errors import IntegrationResponseError
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy, raise_if_rejected
from mconnect.integrations.policy.response_wrappers import backend_message, normalize_many, normalize_order

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, client: RequestClient):
        self.client = client

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to place order")
    async def place_order(self) -> PlaceOrderResult:
        body = await self.client.post("/orders/place")
        raise_if_rejected(body, "Failed to place order")

        order = None
        raw_order = body.get("order") if isinstance(body, dict) else None
        if isinstance(raw_order, dict):
            # Placement already succeeded; an unreadable order only leaves `order` empty.
            try:
                order = normalize_order(raw_order)
            except IntegrationResponseError as exc:
                logger.warning("Placed order could not be normalized: %s", exc)

        return PlaceOrderResult(message=backend_message(body, "Order placed successfully"), order=order)

    @failure_policy(FailurePolicy.ABSORB, fallback=list)
    async def get_orders(self) -> List[Order]:
        body = await self.client.get("/orders")
        if not isinstance(body, dict):
            return []
        records = body.get("orders") if body.get("orders") is not None else body.get("data")
        return normalize_many(records, normalize_order, "order")

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to cancel order")
    async def cancel_order(self, order_id: int) -> MessageResult:
        body = await self.client.post(f"/orders/{order_id}/cancel")
        raise_if_rejected(body, "Failed to cancel order")
        return MessageResult(message=backend_message(body, "Order cancelled successfully"))

