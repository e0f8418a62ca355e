"""
Cart Service

Reading the cart degrades to []; every cart mutation raises OperationFailed.
"""

from typing import List

from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.marketplace import CartItem, MessageResult
from mconnect.integrations.errors import OperationFailed
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy, raise_if_rejected
from mconnect.integrations.policy.response_wrappers import backend_message, normalize_cart_item, normalize_many


class CartService:
    def __init__(self, client: RequestClient):
        self.client = client

    @failure_policy(FailurePolicy.ABSORB, fallback=list)
    async def get_cart(self) -> List[CartItem]:
        body = await self.client.get("/cart")
        if not isinstance(body, dict):
            return []
        return normalize_many(body.get("items") or [], normalize_cart_item, "cart item")

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to add to cart")
    async def add_to_cart(self, product_id: int, quantity: int = 1) -> MessageResult:
        if quantity < 1:
            raise OperationFailed("Quantity must be at least 1")
        body = await self.client.post("/cart/add", json={"product_id": product_id, "quantity": quantity})
        raise_if_rejected(body, "Failed to add to cart")
        return MessageResult(message=backend_message(body, "Added to cart"))

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to update cart")
    async def update_cart_quantity(self, product_id: int, change: int) -> MessageResult:
        body = await self.client.put("/cart/update", json={"product_id": product_id, "change": change})
        raise_if_rejected(body, "Failed to update cart")
        return MessageResult(message=backend_message(body, "Cart updated"))

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to remove item")
    async def remove_from_cart(self, product_id: int) -> MessageResult:
        body = await self.client.delete(f"/cart/remove/{product_id}")
        raise_if_rejected(body, "Failed to remove item")
        return MessageResult(message=backend_message(body, "Item removed"))

    @failure_policy(FailurePolicy.PROPAGATE, message="Failed to clear cart")
    async def clear_cart(self) -> MessageResult:
        body = await self.client.post("/cart/clear")
        raise_if_rejected(body, "Failed to clear cart")
        return MessageResult(message=backend_message(body, "Cart cleared"))
