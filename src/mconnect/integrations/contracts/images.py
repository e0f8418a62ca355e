"""
Image contracts.

Defines the category image set shared by the static catalogue, the remote
image-search providers and the resolution engine, plus the provider interface
every image-search client (mock or real) implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict

# Category key -> image URL.
CategoryImageSet = Dict[str, str]

CANONICAL_CATEGORIES: Tuple[str, ...] = (
    "vegetables",
    "fruits",
    "cereals",
    "livestock",
    "poultry",
    "seeds",
)


class Category(BaseModel):
    """One category card as shown on the market home screen."""

    model_config = ConfigDict(frozen=True)

    id: int
    key: str
    name: str
    description: str
    image: str
    query: str                           # remote image-search query for this category


class ImageSearchProvider(ABC):
    """A best-effort remote image-by-keyword lookup."""

    name: str = "provider"

    @abstractmethod
    async def search_category_images(self, queries: Dict[str, str]) -> CategoryImageSet:
        """
        Look up one image per query.

        `queries` maps category key -> search string. The result may be partial;
        keys with no hit are simply left out. Raise when the lookup failed as a
        whole (bad credentials, provider down, nothing found at all).
        """
