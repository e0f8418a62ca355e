"""
Provider composition for the image engine.

`UnavailableImageProvider` is the engine's default: with no provider injected,
every remote attempt fails immediately and the static catalogue is used.
`ChainedImageProvider` tries providers in order, asking each later provider
only for the categories the earlier ones missed.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from mconnect.integrations.contracts.images import CategoryImageSet, ImageSearchProvider
from mconnect.integrations.errors import RemoteImageProviderUnavailable

logger = logging.getLogger(__name__)


class UnavailableImageProvider(ImageSearchProvider):
    name = "unavailable"

    async def search_category_images(self, queries: Dict[str, str]) -> CategoryImageSet:
        raise RemoteImageProviderUnavailable("No remote image provider configured.")


class ChainedImageProvider(ImageSearchProvider):
    name = "chain"

    def __init__(self, providers: Iterable[ImageSearchProvider]) -> None:
        self.providers: List[ImageSearchProvider] = list(providers)

    async def search_category_images(self, queries: Dict[str, str]) -> CategoryImageSet:
        images: CategoryImageSet = {}
        remaining = dict(queries)
        for provider in self.providers:
            if not remaining:
                break
            try:
                found = await provider.search_category_images(remaining)
            except Exception as exc:
                logger.warning("Image provider %s failed, trying next: %s", provider.name, exc)
                continue
            for key, url in found.items():
                if key in remaining and url:
                    images[key] = url
                    remaining.pop(key)

        if not images:
            raise RemoteImageProviderUnavailable("All image providers failed.")
        return images
