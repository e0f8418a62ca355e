"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any
external API. They are used when no image-search key is configured, and in
tests to simulate partial, failing or slow providers.

Important:
- Mock clients follow the SAME interface as the real HTTP clients.

Switching to real:
mconnect.container picks clients/real_http/* once credentials are configured.
"""

from .image_search import MockImageSearchProvider

__all__ = ["MockImageSearchProvider"]
