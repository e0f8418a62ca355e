"""
Failure taxonomy for the data-access layer.

Every failure that crosses the Request Client boundary is one of these types,
so domain services (and the UI behind them) never have to inspect raw httpx
exceptions or backend payloads.

Non-fatal kinds:
- CredentialUnavailable: a credential source could not be read; the resolver skips it
- RemoteImageProviderUnavailable: image search failed; the static catalogue is used

Transport kinds (raised by the Request Client):
- NetworkUnavailable: no response was received
- RequestTimeout: the per-request timeout elapsed
- HttpError: a response arrived with a non-success status

Caller-facing kind:
- OperationFailed: a write operation did not take effect
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DataAccessError(Exception):
    """Base class for every failure raised by this package."""

    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload or {}


class CredentialUnavailable(DataAccessError):
    pass


class NetworkUnavailable(DataAccessError):
    def __init__(self, message: str = "Cannot connect to server. Check your network connection.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class RequestTimeout(DataAccessError):
    def __init__(self, message: str = "The server took too long to respond.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class HttpError(DataAccessError):
    def __init__(
        self,
        status: int,
        backend_message: Optional[str] = None,
        *,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(backend_message or f"Request failed with status {status}", payload=payload)
        self.status = status
        self.backend_message = backend_message


class RemoteImageProviderUnavailable(DataAccessError):
    pass


class IntegrationResponseError(DataAccessError, ValueError):
    """Raised when a backend payload cannot be normalized into a contract model."""


class OperationFailed(DataAccessError):
    """A mutation was rejected or could not be sent; `message` is user-presentable."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.status = status
        self.cause = cause


__all__ = [
    "DataAccessError",
    "CredentialUnavailable",
    "NetworkUnavailable",
    "RequestTimeout",
    "HttpError",
    "RemoteImageProviderUnavailable",
    "IntegrationResponseError",
    "OperationFailed",
]
