"""
Category and product image resolution.
"""

from .catalog import CATEGORY_QUERIES, GENERIC_FALLBACK_IMAGES, STATIC_CATEGORY_IMAGES
from .engine import ImageResolutionEngine, merge_category_images
from .providers import ChainedImageProvider, UnavailableImageProvider

__all__ = [
    "CATEGORY_QUERIES",
    "GENERIC_FALLBACK_IMAGES",
    "STATIC_CATEGORY_IMAGES",
    "ImageResolutionEngine",
    "merge_category_images",
    "ChainedImageProvider",
    "UnavailableImageProvider",
]
