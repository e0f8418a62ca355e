"""
Backend Request Client.

Purpose:
- The single shared HTTP client every domain service talks through
- Attaches the current bearer credential before each request
- Converts every transport or HTTP failure into the package's failure taxonomy

Interception:
- Outbound: an httpx request hook awaits CredentialResolver.resolve_token() and
  sets `Authorization: Bearer <token>` when one is found. Resolution is bounded
  and never fails the request; without a token the call goes out anonymous and
  the server decides.
- Inbound: successful responses pass through. Failures are logged with their
  diagnostic context (url, method, status, backend payload or raw message) and
  re-raised as NetworkUnavailable, RequestTimeout or HttpError.

Important:
- No automatic retries and no token refresh here. Whether a failure becomes an
  empty result or an error is decided per operation by the domain services.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from mconnect.credentials.resolver import CredentialResolver
from mconnect.integrations.errors import HttpError, NetworkUnavailable, RequestTimeout
from mconnect.integrations.policy.response_wrappers import backend_message, decode_body

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class RequestClient:
    def __init__(
        self,
        base_url: str,
        resolver: Optional[CredentialResolver] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.resolver = resolver
        self.timeout_seconds = timeout_seconds

        headers: Dict[str, str] = {"Content-Type": "application/json", "Accept": "application/json"}
        headers.update(default_headers or {})

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            transport=transport,
            event_hooks={"request": [self._attach_credentials]},
        )

    async def __aenter__(self) -> "RequestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- Interceptors ----------------------------------------------------------

    async def _attach_credentials(self, request: httpx.Request) -> None:
        if self.resolver is None:
            return
        try:
            token = await self.resolver.resolve_token()
        except Exception as exc:
            logger.warning("Credential lookup failed for %s %s: %s", request.method, request.url, exc)
            return
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def _log_failure(self, method: str, url: str, **context: Any) -> None:
        logger.error("API error: %s", {"method": method, "url": url, **context})

    # --- Requests --------------------------------------------------------------

    async def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a request and return the raw response, raising the normalized failure kinds."""
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            self._log_failure(method, url, message=str(exc) or exc.__class__.__name__)
            raise RequestTimeout(payload={"url": url}) from exc
        except httpx.TransportError as exc:
            self._log_failure(method, url, message=str(exc) or exc.__class__.__name__)
            raise NetworkUnavailable(payload={"url": url}) from exc

        if response.is_error:
            body = decode_body(response)
            payload = body if isinstance(body, dict) else {"raw": body}
            self._log_failure(method, str(response.request.url), status=response.status_code, data=payload)
            raise HttpError(response.status_code, backend_message(payload, "") or None, payload=payload)

        logger.debug("API success [%s %s]: status=%s", method, path, response.status_code)
        return response

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body."""
        response = await self.send(method, path, **kwargs)
        return decode_body(response)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)
