"""
Real image-search HTTP clients.

Used when a Pexels and/or Unsplash key is configured. Both search one image per
category query and return only the keys that produced a hit. A provider fails
as a unit (RemoteImageProviderUnavailable) when it is not configured, rejects
the key, is rate limited, or finds nothing at all.
"""

from __future__ import annotations

import asyncio
import logging
import os
from abc import abstractmethod
from typing import Any, Dict, Optional

import httpx

from mconnect.integrations.contracts.images import CategoryImageSet, ImageSearchProvider
from mconnect.integrations.errors import RemoteImageProviderUnavailable

logger = logging.getLogger(__name__)


class _HttpImageSearchProvider(ImageSearchProvider):
    base_url: str = ""
    search_path: str = "/search"
    api_key_env: str = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        orientation: str = "landscape",
        size: str = "medium",
        timeout_seconds: float = 10.0,
        request_delay_seconds: float = 0.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv(self.api_key_env, "")
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.orientation = orientation
        self.size = size
        self.timeout_seconds = timeout_seconds
        self.request_delay_seconds = request_delay_seconds
        self._transport = transport

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        ...

    @abstractmethod
    def _search_params(self, query: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _extract_url(self, data: Dict[str, Any]) -> Optional[str]:
        ...

    async def search_image(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        response = await client.get(self.search_path, params=self._search_params(query))

        if response.status_code in (401, 403):
            raise RemoteImageProviderUnavailable(f"{self.name} API key may be invalid or expired")
        if response.status_code == 429:
            raise RemoteImageProviderUnavailable(f"{self.name} API rate limit exceeded")
        response.raise_for_status()

        url = self._extract_url(response.json())
        if url:
            logger.debug("%s found image for: %s", self.name, query)
        else:
            logger.info("%s found no images for: %s", self.name, query)
        return url

    async def search_category_images(self, queries: Dict[str, str]) -> CategoryImageSet:
        if not self.api_key:
            raise RemoteImageProviderUnavailable(f"{self.api_key_env} is not configured.")

        images: CategoryImageSet = {}
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._auth_headers(),
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            for index, (key, query) in enumerate(queries.items()):
                if index and self.request_delay_seconds:
                    await asyncio.sleep(self.request_delay_seconds)
                try:
                    url = await self.search_image(client, query)
                except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
                    logger.warning("%s search failed for %r: %s", self.name, query, exc)
                    continue
                if url:
                    images[key] = url

        logger.info("%s category images fetched: %d/%d", self.name, len(images), len(queries))
        if not images:
            raise RemoteImageProviderUnavailable(f"{self.name} returned no images")
        return images


class PexelsImageProvider(_HttpImageSearchProvider):
    name = "pexels"
    base_url = "https://api.pexels.com/v1"
    search_path = "/search"
    api_key_env = "PEXELS_API_KEY"

    _SIZES = {"small": "small", "medium": "medium", "large": "large"}

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": self.api_key}

    def _search_params(self, query: str) -> Dict[str, Any]:
        return {"query": query, "orientation": self.orientation, "per_page": 1}

    def _extract_url(self, data: Dict[str, Any]) -> Optional[str]:
        photos = data.get("photos") or []
        if not photos:
            return None
        return photos[0]["src"][self._SIZES.get(self.size, "medium")]


class UnsplashImageProvider(_HttpImageSearchProvider):
    name = "unsplash"
    base_url = "https://api.unsplash.com"
    search_path = "/search/photos"
    api_key_env = "UNSPLASH_ACCESS_KEY"

    _SIZES = {"small": "small", "medium": "regular", "large": "full"}

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Client-ID {self.api_key}", "Accept-Version": "v1"}

    def _search_params(self, query: str) -> Dict[str, Any]:
        orientation = "squarish" if self.orientation == "square" else self.orientation
        return {"query": query, "orientation": orientation, "per_page": 1}

    def _extract_url(self, data: Dict[str, Any]) -> Optional[str]:
        results = data.get("results") or []
        if not results:
            return None
        return results[0]["urls"][self._SIZES.get(self.size, "regular")]
