"""
Real HTTP integration clients.

These clients talk to real systems over HTTP:
- the marketplace backend (RequestClient)
- Pexels / Unsplash image search

Important:
- Image providers implement the same ImageSearchProvider interface as the mocks
- Payloads are normalized into src/mconnect/integrations/contracts/* shapes

Switching:
The selection of mock vs real clients happens in mconnect.container only.
"""

from .image_search import PexelsImageProvider, UnsplashImageProvider
from .request_client import DEFAULT_TIMEOUT_SECONDS, RequestClient

__all__ = ["DEFAULT_TIMEOUT_SECONDS", "PexelsImageProvider", "RequestClient", "UnsplashImageProvider"]
