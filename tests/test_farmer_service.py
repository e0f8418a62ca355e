import json

import pytest

from mconnect.integrations.contracts.marketplace import Farmer, OperationResult
from mconnect.services import FarmerService

FARMER = {"id": 42, "name": "Asha Mushi", "email": "asha@example.com", "phone": "0712345678", "location": "Moshi"}

PRODUCTS = [
    {"id": 1, "name": "Tomatoes", "price": 2500, "formatted_price": "TSh 2,500", "image": "", "category": "Vegetables"},
    {"id": 2, "name": "Mangoes", "price": 1200, "image_url": "http://img/mango.jpg", "stock_quantity": 40},
]


@pytest.mark.asyncio
async def test_get_farmer_by_id_sends_one_authorized_request(client, backend):
    backend.on("GET", "/farmers/42", json={"success": True, "data": FARMER})

    farmer = await FarmerService(client).get_farmer_by_id(42)

    assert isinstance(farmer, Farmer)
    assert farmer.name == "Asha Mushi"
    assert farmer.has_phone is True
    assert len(backend.requests) == 1
    assert backend.last.headers["Authorization"] == "Bearer tok-123"


@pytest.mark.asyncio
async def test_get_farmer_by_id_returns_none_when_backend_declines(client, backend):
    backend.on("GET", "/farmers/42", json={"success": False, "message": "Farmer not found"})

    assert await FarmerService(client).get_farmer_by_id(42) is None


@pytest.mark.asyncio
async def test_get_farmer_by_id_absorbs_failures(client, backend, failure):
    backend.fail("GET", "/farmers/42", failure)

    assert await FarmerService(client).get_farmer_by_id(42) is None


@pytest.mark.asyncio
async def test_get_farmer_products_maps_listings(client, backend):
    backend.on("GET", "/farmers/42/products", json={"success": True, "data": PRODUCTS})

    products = await FarmerService(client).get_farmer_products(42)

    assert [p.name for p in products] == ["Tomatoes", "Mangoes"]
    assert products[0].formatted_price == "TSh 2,500"
    assert products[1].image == "http://img/mango.jpg"
    assert products[1].stock_quantity == 40


@pytest.mark.asyncio
async def test_get_farmer_products_returns_empty_list_on_failure(client, backend, failure):
    backend.fail("GET", "/farmers/42/products", failure)

    assert await FarmerService(client).get_farmer_products(42) == []


@pytest.mark.asyncio
async def test_get_farmer_products_ignores_malformed_payload(client, backend):
    backend.on("GET", "/farmers/42/products", json={"success": True, "data": {"unexpected": "shape"}})

    assert await FarmerService(client).get_farmer_products(42) == []


@pytest.mark.asyncio
async def test_update_farmer_phone_success(client, backend):
    backend.on("PUT", "/farmers/42/phone", json={"success": True, "message": "Phone number saved"})

    result = await FarmerService(client).update_farmer_phone(42, "0712000111")

    assert result == OperationResult(success=True, message="Phone number saved")
    assert json.loads(backend.last.content) == {"phone": "0712000111"}


@pytest.mark.asyncio
async def test_update_farmer_phone_reports_backend_rejection(client, backend):
    backend.on("PUT", "/farmers/42/phone", json={"success": False})

    result = await FarmerService(client).update_farmer_phone(42, "bad")

    assert result.success is False
    assert result.message == "Failed to update phone number"


@pytest.mark.asyncio
async def test_update_farmer_phone_never_raises(client, backend, failure):
    backend.fail("PUT", "/farmers/42/phone", failure)

    result = await FarmerService(client).update_farmer_phone(42, "0712")

    assert result.success is False
    assert result.message


@pytest.mark.asyncio
async def test_update_farmer_phone_surfaces_validation_message(client, backend):
    backend.on("PUT", "/farmers/42/phone", json={"errors": {"phone": ["The phone has already been taken."]}}, status=422)

    result = await FarmerService(client).update_farmer_phone(42, "0712")

    assert result.message == "The phone has already been taken."


@pytest.mark.asyncio
async def test_get_all_farmers(client, backend):
    backend.on("GET", "/farmers", json={"success": True, "data": [FARMER, {"id": 43, "name": "Juma", "email": "j@x"}]})

    farmers = await FarmerService(client).get_all_farmers()

    assert [f.id for f in farmers] == [42, 43]
    assert farmers[1].location == "Not specified"


@pytest.mark.asyncio
async def test_get_all_farmers_absorbs_failures(client, backend, failure):
    backend.fail("GET", "/farmers", failure)

    assert await FarmerService(client).get_all_farmers() == []
