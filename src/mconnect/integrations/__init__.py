"""
Integrations layer.
This package contains all code used to communicate with external systems:
- The m-connect marketplace backend (farmers, products, orders, cart)
- Remote image search (Pexels / Unsplash)

Key rule:
- Domain services MUST NOT build HTTP requests themselves.
- Services call the shared RequestClient (under integrations/clients/real_http).
- Image search uses MOCK providers in development and REAL_HTTP providers once keys exist.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (mconnect.container).
"""

from .errors import (
    CredentialUnavailable,
    DataAccessError,
    HttpError,
    IntegrationResponseError,
    NetworkUnavailable,
    OperationFailed,
    RemoteImageProviderUnavailable,
    RequestTimeout,
)

__all__ = [
    "CredentialUnavailable",
    "DataAccessError",
    "HttpError",
    "IntegrationResponseError",
    "NetworkUnavailable",
    "OperationFailed",
    "RemoteImageProviderUnavailable",
    "RequestTimeout",
]
