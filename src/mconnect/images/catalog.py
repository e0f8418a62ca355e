"""
Bundled image catalogue: always available, no I/O.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from mconnect.integrations.contracts.images import CategoryImageSet

STATIC_CATEGORY_IMAGES: CategoryImageSet = {
    "vegetables": "https://images.unsplash.com/photo-1517817748493-49ec54a32465?w=400&q=80",
    "fruits": "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=400&q=80",
    "cereals": "https://images.unsplash.com/photo-1505253668822-42074d58a7c6?w=400&q=80",
    "livestock": "https://images.unsplash.com/photo-1500479694472-551d1fb6258d?w=400&q=80",
    "poultry": "https://images.unsplash.com/photo-1560763228-1c5ee0c55d7c?w=400&q=80",
    "seeds": "https://images.unsplash.com/photo-1592921870789-04563d55041c?w=400&q=80",
}

GENERIC_FALLBACK_IMAGES: Tuple[str, ...] = (
    "https://images.unsplash.com/photo-1592924357228-91a4daadcfea?w=400&q=80",  # tomatoes
    "https://images.unsplash.com/photo-1581089781785-603411fa81f5?w=400&q=80",  # onions
    "https://images.unsplash.com/photo-1553279768-865429fa0078?w=400&q=80",  # mangoes
    "https://images.unsplash.com/photo-1590189182194-89d6cdf81bc4?w=400&q=80",  # maize
    "https://images.unsplash.com/photo-1523049673857-eb18f1d7b578?w=400&q=80",  # avocados
    "https://images.unsplash.com/photo-1603833665858-e61d17a86224?w=400&q=80",  # bananas
    "https://images.unsplash.com/photo-1589984662646-e7b2e4962f18?w=400&q=80",  # watermelon
)

# Ordered: the first group whose keyword appears in the label wins.
CATEGORY_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
    (("vegetable",), "vegetables"),
    (("fruit",), "fruits"),
    (("cereal", "grain"), "cereals"),
    (("livestock", "meat"), "livestock"),
    (("poultry", "chicken"), "poultry"),
    (("seed",), "seeds"),
]

# Remote search query and card copy per canonical category.
CATEGORY_DEFINITIONS: List[Dict[str, str]] = [
    {
        "key": "vegetables",
        "name": "Vegetables",
        "description": "Fresh vegetables from East Africa",
        "query": "fresh vegetables market Tanzania",
    },
    {
        "key": "fruits",
        "name": "Fruits",
        "description": "Sweet and fresh seasonal fruits",
        "query": "tropical fruits market Africa",
    },
    {
        "key": "cereals",
        "name": "Cereals",
        "description": "Common cereals in the Tanzanian market",
        "query": "grains cereals agriculture Tanzania",
    },
    {
        "key": "livestock",
        "name": "Livestock",
        "description": "Cattle, goats, sheep & more",
        "query": "cattle farming Tanzania",
    },
    {
        "key": "poultry",
        "name": "Poultry",
        "description": "Locally raised poultry",
        "query": "chicken farming poultry Africa",
    },
    {
        "key": "seeds",
        "name": "Seeds",
        "description": "Agricultural seeds for planting",
        "query": "agricultural seeds planting",
    },
]

CATEGORY_QUERIES: Dict[str, str] = {item["key"]: item["query"] for item in CATEGORY_DEFINITIONS}
