"""
Mock image-search client.

Purpose:
- Stands in for Pexels/Unsplash during development and tests
- Does NOT make any network calls
- Returns deterministic URLs, or simulates a failing / slow provider

Swap:
Replace with clients/real_http/image_search.py once an API key is configured.
"""

import asyncio
import logging
from typing import Dict, Iterable, Optional

from mconnect.integrations.contracts.images import CategoryImageSet, ImageSearchProvider
from mconnect.integrations.errors import RemoteImageProviderUnavailable

logger = logging.getLogger(__name__)

MOCK_IMAGE_HOST = "https://images.mock.m-connect.local"


class MockImageSearchProvider(ImageSearchProvider):
    name = "mock"

    def __init__(
        self,
        images: Optional[Dict[str, str]] = None,
        missing: Iterable[str] = (),
        fail: bool = False,
        delay_seconds: float = 0.0,
    ) -> None:
        self.images = images
        self.missing = set(missing)
        self.fail = fail
        self.delay_seconds = delay_seconds
        self.calls = 0

    async def search_category_images(self, queries: Dict[str, str]) -> CategoryImageSet:
        self.calls += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.fail:
            raise RemoteImageProviderUnavailable("mock image provider configured to fail")

        result: CategoryImageSet = {}
        for key in queries:
            if key in self.missing:
                continue
            if self.images is not None:
                if key in self.images:
                    result[key] = self.images[key]
                continue
            result[key] = f"{MOCK_IMAGE_HOST}/{key}.jpg"
        logger.info("[MOCK] category images: %d/%d", len(result), len(queries))
        return result
