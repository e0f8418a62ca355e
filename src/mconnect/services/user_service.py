"""
User Service

Profile reads degrade to None; profile updates raise OperationFailed.
"""

import logging
from typing import Optional

from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.accounts import User
from mconnect.integrations.errors import OperationFailed
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy, raise_if_rejected
from mconnect.integrations.policy.response_wrappers import (
    ERROR_FIRST,
    backend_message,
    extract_api_data,
    is_success,
    normalize_user,
    require_object,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "avatar", "phone", "location")


class UserService:
    def __init__(self, client: RequestClient):
        self.client = client

    @failure_policy(FailurePolicy.ABSORB, fallback=None)
    async def get_user_profile(self, user_id: int) -> Optional[User]:
        body = await self.client.get(f"/users/{user_id}")
        if not is_success(body) or not isinstance(body.get("user"), dict):
            logger.info("Profile %s not returned: %s", user_id, backend_message(body, "no reason given"))
            return None
        return normalize_user(body["user"])

    @failure_policy(FailurePolicy.PROPAGATE, message="Update failed", message_keys=ERROR_FIRST)
    async def update_profile(self, user_id: int, **changes: Optional[str]) -> User:
        unknown = sorted(set(changes) - set(PROFILE_FIELDS))
        if unknown:
            raise OperationFailed(f"Cannot update profile field(s): {', '.join(unknown)}")
        update = {key: value for key, value in changes.items() if value is not None}
        if not update:
            raise OperationFailed("Nothing to update")

        body = await self.client.put(f"/users/{user_id}", json=update)
        raise_if_rejected(body, "Update failed", ERROR_FIRST)
        raw_user = body.get("user") if isinstance(body, dict) and "user" in body else extract_api_data(body)
        return normalize_user(require_object(raw_user, "user"))
