import json

import pytest

from mconnect.integrations.errors import OperationFailed
from mconnect.services import UserService

USER = {"id": 12, "name": "Neema", "email": "neema@example.com", "role": "buyer", "location": "Moshi"}


@pytest.mark.asyncio
async def test_get_user_profile(client, backend):
    backend.on("GET", "/users/12", json={"status": "success", "user": USER})

    user = await UserService(client).get_user_profile(12)

    assert (user.name, user.location, user.phone) == ("Neema", "Moshi", None)


@pytest.mark.asyncio
async def test_get_user_profile_without_user_is_none(client, backend):
    backend.on("GET", "/users/12", json={"status": "error", "message": "User not found"})

    assert await UserService(client).get_user_profile(12) is None


@pytest.mark.asyncio
async def test_get_user_profile_absorbs_failures(client, backend, failure):
    backend.fail("GET", "/users/12", failure)

    assert await UserService(client).get_user_profile(12) is None


@pytest.mark.asyncio
async def test_update_profile_sends_only_given_fields(client, backend):
    backend.on("PUT", "/users/12", json={"status": "success", "user": {**USER, "phone": "0712345678"}})

    user = await UserService(client).update_profile(12, phone="0712345678", avatar=None)

    assert user.phone == "0712345678"
    assert backend.last.method == "PUT"
    assert json.loads(backend.last.content) == {"phone": "0712345678"}


@pytest.mark.asyncio
async def test_update_profile_reads_data_envelope(client, backend):
    backend.on("PUT", "/users/12", json={"success": True, "data": {**USER, "name": "Neema J."}})

    user = await UserService(client).update_profile(12, name="Neema J.")

    assert user.name == "Neema J."


@pytest.mark.asyncio
async def test_update_profile_rejects_unknown_or_empty_changes_without_network(client, backend):
    service = UserService(client)

    with pytest.raises(OperationFailed, match="role"):
        await service.update_profile(12, role="farmer")
    with pytest.raises(OperationFailed, match="Nothing to update"):
        await service.update_profile(12, phone=None)

    assert backend.requests == []


@pytest.mark.asyncio
async def test_update_profile_prefers_backend_error(client, backend):
    backend.on("PUT", "/users/12", json={"error": "Email already in use", "message": "Unprocessable"}, status=422)

    with pytest.raises(OperationFailed, match="Email already in use"):
        await UserService(client).update_profile(12, email="taken@example.com")


@pytest.mark.asyncio
async def test_update_profile_with_unreadable_user_uses_generic_message(client, backend):
    backend.on("PUT", "/users/12", json={"status": "success", "user": {"id": 12}})

    with pytest.raises(OperationFailed) as exc_info:
        await UserService(client).update_profile(12, name="Neema")

    assert exc_info.value.message == "Update failed"


@pytest.mark.asyncio
async def test_update_profile_raises_on_every_failure_kind(client, backend, failure):
    backend.fail("PUT", "/users/12", failure)

    with pytest.raises(OperationFailed) as exc_info:
        await UserService(client).update_profile(12, name="Neema")

    assert exc_info.value.message
