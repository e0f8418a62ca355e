import httpx
import pytest

from mconnect.integrations.errors import HttpError, NetworkUnavailable, OperationFailed
from mconnect.services import OrderService

ORDER = {
    "id": 501,
    "total_amount": 7400,
    "status": "pending",
    "payment_status": "unpaid",
    "items": [{"id": 1, "product_name": "Tomatoes", "price": 2500, "quantity": 2}],
    "created_at": "2024-06-01T09:00:00Z",
}


@pytest.mark.asyncio
async def test_place_order_returns_created_order(client, backend):
    backend.on("POST", "/orders/place", json={"success": True, "message": "Order placed successfully", "order": ORDER})

    result = await OrderService(client).place_order()

    assert result.message == "Order placed successfully"
    assert result.order.id == 501
    assert result.order.items[0].product_name == "Tomatoes"


@pytest.mark.asyncio
async def test_place_order_keeps_success_when_order_shape_is_unexpected(client, backend):
    backend.on("POST", "/orders/place", json={"success": True, "order": {"id": "not-a-number"}})

    result = await OrderService(client).place_order()

    assert result.order is None
    assert result.message == "Order placed successfully"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "order",
    [
        {**ORDER, "items": [None]},
        {**ORDER, "items_count": "several"},
        {**ORDER, "items": "Tomatoes x2"},
    ],
    ids=["null-item", "non-numeric-count", "items-not-a-list"],
)
async def test_place_order_keeps_success_when_items_are_malformed(client, backend, order):
    backend.on("POST", "/orders/place", json={"success": True, "message": "Order placed successfully", "order": order})

    result = await OrderService(client).place_order()

    assert result.order is None
    assert result.message == "Order placed successfully"


@pytest.mark.asyncio
async def test_place_order_raises_with_backend_message(client, backend):
    backend.on("POST", "/orders/place", json={"success": False, "message": "Your cart is empty"}, status=400)

    with pytest.raises(OperationFailed) as exc_info:
        await OrderService(client).place_order()

    assert exc_info.value.message == "Your cart is empty"
    assert exc_info.value.status == 400
    assert isinstance(exc_info.value.cause, HttpError)


@pytest.mark.asyncio
async def test_place_order_rejected_in_2xx_body_still_raises(client, backend):
    backend.on("POST", "/orders/place", json={"success": False, "message": "Insufficient stock for Mangoes"})

    with pytest.raises(OperationFailed, match="Insufficient stock"):
        await OrderService(client).place_order()


@pytest.mark.asyncio
async def test_place_order_raises_on_every_failure_kind(client, backend, failure):
    backend.fail("POST", "/orders/place", failure)

    with pytest.raises(OperationFailed) as exc_info:
        await OrderService(client).place_order()

    assert exc_info.value.message


@pytest.mark.asyncio
async def test_place_order_without_network_uses_generic_message(client, backend):
    backend.fail("POST", "/orders/place", httpx.ConnectError)

    with pytest.raises(OperationFailed) as exc_info:
        await OrderService(client).place_order()

    assert exc_info.value.message == "Failed to place order"
    assert isinstance(exc_info.value.cause, NetworkUnavailable)


@pytest.mark.asyncio
async def test_get_orders_reads_orders_or_data_key(client, backend):
    service = OrderService(client)

    backend.on("GET", "/orders", json={"success": True, "orders": [ORDER]})
    assert [o.id for o in await service.get_orders()] == [501]

    backend.on("GET", "/orders", json={"success": True, "data": [ORDER, {**ORDER, "id": 502}]})
    assert [o.id for o in await service.get_orders()] == [501, 502]


@pytest.mark.asyncio
async def test_get_orders_skips_only_the_malformed_order(client, backend):
    broken = {**ORDER, "id": 502, "items": ["Tomatoes"], "items_count": "2.5"}
    backend.on("GET", "/orders", json={"success": True, "orders": [ORDER, broken]})

    assert [o.id for o in await OrderService(client).get_orders()] == [501]


@pytest.mark.asyncio
async def test_get_orders_returns_empty_list_on_failure(client, backend, failure):
    backend.fail("GET", "/orders", failure)

    assert await OrderService(client).get_orders() == []


@pytest.mark.asyncio
async def test_cancel_order(client, backend):
    backend.on("POST", "/orders/501/cancel", json={"success": True, "message": "Order cancelled"})

    result = await OrderService(client).cancel_order(501)

    assert result.message == "Order cancelled"


@pytest.mark.asyncio
async def test_cancel_order_raises_on_every_failure_kind(client, backend, failure):
    backend.fail("POST", "/orders/501/cancel", failure)

    with pytest.raises(OperationFailed) as exc_info:
        await OrderService(client).cancel_order(501)

    assert exc_info.value.message
