"""
Image Resolution Engine.

Resolves category and product imagery through an ordered fallback chain:

1. remote image-search provider (one batch for all six categories, bounded by
   `remote_timeout_seconds`; any failure means "no remote results")
2. bundled static catalogue, overlaid key by key with whatever the remote
   step returned
3. per-item keyword heuristic on a free-text category label
4. a random pick from the generic fallback pool

Nothing raised by a provider escapes this module.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from mconnect.images.catalog import (
    CATEGORY_DEFINITIONS,
    CATEGORY_KEYWORDS,
    CATEGORY_QUERIES,
    GENERIC_FALLBACK_IMAGES,
    STATIC_CATEGORY_IMAGES,
)
from mconnect.images.providers import UnavailableImageProvider
from mconnect.integrations.contracts.images import (
    CANONICAL_CATEGORIES,
    Category,
    CategoryImageSet,
    ImageSearchProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_TIMEOUT_SECONDS = 8.0


def merge_category_images(static: Mapping[str, str], remote: Optional[Mapping[str, str]]) -> CategoryImageSet:
    """Remote entries override static ones key by key; empty remote values never win."""
    merged: CategoryImageSet = dict(static)
    for key, url in (remote or {}).items():
        if url:
            merged[key] = url
    return merged


class ImageResolutionEngine:
    def __init__(
        self,
        provider: Optional[ImageSearchProvider] = None,
        static_images: Optional[Mapping[str, str]] = None,
        fallback_pool: Sequence[str] = GENERIC_FALLBACK_IMAGES,
        rng: Optional[random.Random] = None,
        remote_timeout_seconds: float = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        category_queries: Optional[Mapping[str, str]] = None,
        keyword_groups: Sequence[Tuple[Tuple[str, ...], str]] = tuple(CATEGORY_KEYWORDS),
    ) -> None:
        self.provider = provider or UnavailableImageProvider()
        self.static_images: CategoryImageSet = dict(static_images if static_images is not None else STATIC_CATEGORY_IMAGES)
        self.fallback_pool: List[str] = list(fallback_pool)
        self.rng = rng or random.Random()
        self.remote_timeout_seconds = remote_timeout_seconds
        self.category_queries: Dict[str, str] = dict(category_queries or CATEGORY_QUERIES)
        self.keyword_groups = list(keyword_groups)

        missing = [key for key in CANONICAL_CATEGORIES if not self.static_images.get(key)]
        if missing:
            raise ValueError(f"Static image set is missing canonical categories: {', '.join(missing)}")
        if not self.fallback_pool:
            raise ValueError("Generic fallback image pool must not be empty")

    # --- Remote + merge -------------------------------------------------------

    async def fetch_remote_images(self) -> CategoryImageSet:
        """One bounded batch call to the provider; `{}` on any failure."""
        try:
            remote = await asyncio.wait_for(
                self.provider.search_category_images(dict(self.category_queries)),
                timeout=self.remote_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Remote image provider %s timed out after %.1fs; using static images",
                self.provider.name,
                self.remote_timeout_seconds,
            )
            return {}
        except Exception as exc:
            logger.info("Using static category images (%s unavailable: %s)", self.provider.name, exc)
            return {}

        if not isinstance(remote, dict):
            logger.warning("Remote image provider %s returned %s; ignoring", self.provider.name, type(remote).__name__)
            return {}
        return {key: url for key, url in remote.items() if isinstance(url, str) and url}

    async def load_category_images(self) -> CategoryImageSet:
        remote = await self.fetch_remote_images()
        merged = merge_category_images(self.static_images, remote)
        logger.info("Category images resolved: %d remote, %d static", len(remote), len(merged) - len(remote))
        return merged

    async def get_categories(self) -> List[Category]:
        """The six category cards, imaged from the merged set."""
        images = await self.load_category_images()
        return [
            Category(
                id=index,
                key=item["key"],
                name=item["name"],
                description=item["description"],
                image=images[item["key"]],
                query=self.category_queries.get(item["key"], item["query"]),
            )
            for index, item in enumerate(CATEGORY_DEFINITIONS, start=1)
        ]

    # --- Per-item fallback ----------------------------------------------------

    def get_random_fallback_image(self) -> str:
        return self.rng.choice(self.fallback_pool)

    def get_fallback_image_for_category(self, label: Optional[str]) -> str:
        lowered = (label or "").lower()
        for keywords, category in self.keyword_groups:
            if any(keyword in lowered for keyword in keywords):
                return self.static_images[category]
        return self.get_random_fallback_image()

    def resolve_product_image(self, image: Optional[str], category: Optional[str]) -> str:
        """A product's own image when it has one, else the category fallback."""
        if image and image.strip():
            return image
        return self.get_fallback_image_for_category(category)
