"""
Auth Service

Session lifecycle over /auth:
- register / login: raise OperationFailed; on success both tokens are written
  to the credential store so the next request is authenticated
- logout: best-effort server call, then the local credentials are cleared
- get_current_user: the signed-in User, None when signed out or unreachable
- change_password: raises OperationFailed with the backend's reason

Auth endpoints put the useful reason in `error` more often than `message`, so
failures prefer `error`.
"""

import logging
from typing import Optional, Sequence

from mconnect.credentials.resolver import ACCESS_TOKEN_KEY, DEFAULT_TOKEN_KEYS, REFRESH_TOKEN_KEY
from mconnect.credentials.store import KeyValueStore
from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.accounts import ACCOUNT_ROLES, AuthSession, User
from mconnect.integrations.contracts.marketplace import MessageResult
from mconnect.integrations.errors import DataAccessError, OperationFailed
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy, raise_if_rejected
from mconnect.integrations.policy.response_wrappers import (
    ERROR_FIRST,
    backend_message,
    is_success,
    normalize_auth_session,
    normalize_user,
)

logger = logging.getLogger(__name__)

REGISTER_FAILED = "Registration failed. Please try again."
LOGIN_FAILED = "Login failed. Please check your credentials."
CHANGE_PASSWORD_FAILED = "Failed to change password. Please try again."


class AuthService:
    def __init__(self, client: RequestClient, store: KeyValueStore, token_keys: Sequence[str] = DEFAULT_TOKEN_KEYS):
        self.client = client
        self.store = store
        self.token_keys = tuple(token_keys)

    @failure_policy(FailurePolicy.PROPAGATE, message=REGISTER_FAILED, message_keys=ERROR_FIRST)
    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str = "buyer",
        password_confirmation: Optional[str] = None,
    ) -> AuthSession:
        if role not in ACCOUNT_ROLES:
            raise OperationFailed(f"Role must be one of: {', '.join(ACCOUNT_ROLES)}")
        body = await self.client.post(
            "/auth/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password if password_confirmation is None else password_confirmation,
                "role": role,
            },
        )
        raise_if_rejected(body, REGISTER_FAILED, ERROR_FIRST)
        session = normalize_auth_session(body, "Registration successful")
        await self._store_session(session)
        logger.info("Registered user %s (%s)", session.user.id, session.user.role)
        return session

    @failure_policy(FailurePolicy.PROPAGATE, message=LOGIN_FAILED, message_keys=ERROR_FIRST)
    async def login(self, email: str, password: str) -> AuthSession:
        body = await self.client.post("/auth/login", json={"email": email, "password": password})
        raise_if_rejected(body, LOGIN_FAILED, ERROR_FIRST)
        session = normalize_auth_session(body, "Login successful")
        await self._store_session(session)
        logger.info("Signed in user %s", session.user.id)
        return session

    async def logout(self) -> None:
        try:
            await self.client.post("/auth/logout")
        except DataAccessError as exc:
            logger.warning("Logout request failed, clearing local credentials anyway: %s", exc)

        for key in dict.fromkeys(self.token_keys + (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY)):
            await self.store.remove_item(key)
        logger.info("Local credentials cleared")

    @failure_policy(FailurePolicy.ABSORB, fallback=None)
    async def get_current_user(self) -> Optional[User]:
        body = await self.client.get("/auth/me")
        if not is_success(body) or not isinstance(body.get("user"), dict):
            logger.info("No current user: %s", backend_message(body, "no reason given"))
            return None
        return normalize_user(body["user"])

    @failure_policy(FailurePolicy.PROPAGATE, message=CHANGE_PASSWORD_FAILED, message_keys=ERROR_FIRST)
    async def change_password(
        self, old_password: str, new_password: str, new_password_confirmation: Optional[str] = None
    ) -> MessageResult:
        confirmation = new_password if new_password_confirmation is None else new_password_confirmation
        body = await self.client.post(
            "/auth/change-password",
            json={
                "oldPassword": old_password,
                "newPassword": new_password,
                "newPassword_confirmation": confirmation,
            },
        )
        if not is_success(body):
            payload = body if isinstance(body, dict) else None
            raise OperationFailed(backend_message(body, CHANGE_PASSWORD_FAILED, ERROR_FIRST), payload=payload)
        return MessageResult(message=backend_message(body, "Password updated successfully"))

    async def _store_session(self, session: AuthSession) -> None:
        pairs = [(ACCESS_TOKEN_KEY, session.access_token)]
        if session.refresh_token:
            pairs.append((REFRESH_TOKEN_KEY, session.refresh_token))
        await self.store.multi_set(pairs)
