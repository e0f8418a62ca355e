import random

import pytest

from mconnect.images import (
    GENERIC_FALLBACK_IMAGES,
    STATIC_CATEGORY_IMAGES,
    ChainedImageProvider,
    ImageResolutionEngine,
    UnavailableImageProvider,
    merge_category_images,
)
from mconnect.integrations.clients.mocks import MockImageSearchProvider
from mconnect.integrations.clients.mocks.image_search import MOCK_IMAGE_HOST
from mconnect.integrations.contracts.images import CANONICAL_CATEGORIES
from mconnect.integrations.errors import RemoteImageProviderUnavailable


class ExplodingProvider(MockImageSearchProvider):
    name = "exploding"

    async def search_category_images(self, queries):
        raise ValueError("unexpected payload")


def test_merge_with_empty_remote_is_static():
    assert merge_category_images(STATIC_CATEGORY_IMAGES, {}) == STATIC_CATEGORY_IMAGES
    assert merge_category_images(STATIC_CATEGORY_IMAGES, None) == STATIC_CATEGORY_IMAGES


def test_merge_with_full_remote_is_remote():
    remote = {key: f"https://remote/{key}.jpg" for key in CANONICAL_CATEGORIES}

    assert merge_category_images(STATIC_CATEGORY_IMAGES, remote) == remote


def test_merge_ignores_empty_remote_values():
    merged = merge_category_images(STATIC_CATEGORY_IMAGES, {"fruits": "", "seeds": "https://remote/seeds.jpg"})

    assert merged["fruits"] == STATIC_CATEGORY_IMAGES["fruits"]
    assert merged["seeds"] == "https://remote/seeds.jpg"


@pytest.mark.asyncio
async def test_categories_use_remote_images_when_available():
    provider = MockImageSearchProvider()
    engine = ImageResolutionEngine(provider=provider)

    categories = await engine.get_categories()

    assert [c.key for c in categories] == list(CANONICAL_CATEGORIES)
    assert [c.id for c in categories] == [1, 2, 3, 4, 5, 6]
    assert all(c.image.startswith(MOCK_IMAGE_HOST) for c in categories)
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_partial_remote_results_are_filled_from_static():
    engine = ImageResolutionEngine(provider=MockImageSearchProvider(missing=["livestock", "seeds"]))

    images = await engine.load_category_images()

    assert images["livestock"] == STATIC_CATEGORY_IMAGES["livestock"]
    assert images["seeds"] == STATIC_CATEGORY_IMAGES["seeds"]
    assert images["fruits"] == f"{MOCK_IMAGE_HOST}/fruits.jpg"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider",
    [
        UnavailableImageProvider(),
        MockImageSearchProvider(fail=True),
        ExplodingProvider(),
        MockImageSearchProvider(delay_seconds=1),
    ],
    ids=["unconfigured", "unavailable", "raises", "hangs"],
)
async def test_categories_fall_back_to_static_images(provider):
    engine = ImageResolutionEngine(provider=provider, remote_timeout_seconds=0.05)

    categories = await engine.get_categories()

    assert {c.key: c.image for c in categories} == STATIC_CATEGORY_IMAGES


@pytest.mark.asyncio
async def test_engine_without_provider_serves_static_images():
    images = await ImageResolutionEngine().load_category_images()

    assert images == STATIC_CATEGORY_IMAGES


@pytest.mark.parametrize(
    "label, category",
    [
        ("Fresh Vegetables", "vegetables"),
        ("Tropical FRUIT", "fruits"),
        ("Whole grains", "cereals"),
        ("Goat meat", "livestock"),
        ("Kienyeji chicken", "poultry"),
        ("Hybrid maize seeds", "seeds"),
    ],
)
def test_category_fallback_matches_keywords(label, category):
    engine = ImageResolutionEngine()

    assert engine.get_fallback_image_for_category(label) == STATIC_CATEGORY_IMAGES[category]


@pytest.mark.parametrize("label", ["Assorted", "", None])
def test_unmatched_label_uses_generic_pool(label):
    engine = ImageResolutionEngine()

    assert engine.get_fallback_image_for_category(label) in GENERIC_FALLBACK_IMAGES


def test_first_matching_keyword_group_wins():
    engine = ImageResolutionEngine()

    assert engine.get_fallback_image_for_category("vegetable seeds") == STATIC_CATEGORY_IMAGES["vegetables"]


def test_seeded_random_source_is_reproducible():
    picks_a = [ImageResolutionEngine(rng=random.Random(7)).get_random_fallback_image() for _ in range(3)]
    picks_b = [ImageResolutionEngine(rng=random.Random(7)).get_random_fallback_image() for _ in range(3)]

    assert picks_a == picks_b


def test_resolve_product_image_prefers_own_image():
    engine = ImageResolutionEngine()

    assert engine.resolve_product_image("https://cdn/p.jpg", "Fruits") == "https://cdn/p.jpg"
    assert engine.resolve_product_image("  ", "Fruits") == STATIC_CATEGORY_IMAGES["fruits"]


def test_engine_requires_complete_static_set_and_pool():
    incomplete = dict(STATIC_CATEGORY_IMAGES)
    incomplete.pop("poultry")

    with pytest.raises(ValueError, match="poultry"):
        ImageResolutionEngine(static_images=incomplete)
    with pytest.raises(ValueError):
        ImageResolutionEngine(fallback_pool=[])


@pytest.mark.asyncio
async def test_chained_provider_asks_next_provider_only_for_missing_keys():
    first = MockImageSearchProvider(images={"vegetables": "https://a/veg.jpg"})
    second = MockImageSearchProvider()
    chain = ChainedImageProvider([first, second])

    images = await chain.search_category_images({"vegetables": "q1", "fruits": "q2"})

    assert images == {"vegetables": "https://a/veg.jpg", "fruits": f"{MOCK_IMAGE_HOST}/fruits.jpg"}


@pytest.mark.asyncio
async def test_chained_provider_skips_failing_provider():
    chain = ChainedImageProvider([MockImageSearchProvider(fail=True), MockImageSearchProvider()])

    images = await chain.search_category_images({"seeds": "q"})

    assert images == {"seeds": f"{MOCK_IMAGE_HOST}/seeds.jpg"}


@pytest.mark.asyncio
async def test_chained_provider_raises_when_all_fail():
    chain = ChainedImageProvider([MockImageSearchProvider(fail=True), UnavailableImageProvider()])

    with pytest.raises(RemoteImageProviderUnavailable):
        await chain.search_category_images({"seeds": "q"})
