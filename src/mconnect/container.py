"""
Wiring for the data-access layer.

build_services() turns a ClientConfig into one shared RequestClient, its
credential chain, the domain services on top of it and the image engine.
Real vs mock integrations are chosen the same way everywhere:
INTEGRATIONS_MODE=real|mock wins, otherwise real integrations are used when a
backend URL or Redis URL is present in the environment.
"""

from __future__ import annotations

import logging
import os
import random
import sys
from dataclasses import dataclass
from typing import List, Mapping, Optional

import httpx

from mconnect.credentials import (
    CredentialResolver,
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    StaticTokenStrategy,
    build_storage_resolver,
)
from mconnect.images import ChainedImageProvider, ImageResolutionEngine, UnavailableImageProvider
from mconnect.integrations.clients.mocks import MockImageSearchProvider
from mconnect.integrations.clients.real_http import PexelsImageProvider, RequestClient, UnsplashImageProvider
from mconnect.integrations.contracts.images import ImageSearchProvider
from mconnect.services import AuthService, CartService, FarmerOrderService, FarmerService, OrderService, UserService
from mconnect.utils.config_loader import ClientConfig, ImagesConfig, load_client_config

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def should_use_real_integrations(config: ClientConfig, env: Optional[Mapping[str, str]] = None) -> bool:
    if config.integrations_mode == "real":
        return True
    if config.integrations_mode == "mock":
        return False
    env = os.environ if env is None else env
    return bool(env.get("MCONNECT_API_BASE_URL") or env.get("REDIS_URL"))


def select_credential_store(config: ClientConfig, use_real: bool) -> KeyValueStore:
    if use_real and config.credentials.redis_url:
        return RedisKeyValueStore(config.credentials.redis_url)
    return InMemoryKeyValueStore()


def _remote_providers(images: ImagesConfig, names: List[str]) -> List[ImageSearchProvider]:
    common = {
        "orientation": images.orientation,
        "size": images.size,
        "request_delay_seconds": images.request_delay_seconds,
    }
    providers: List[ImageSearchProvider] = []
    for name in names:
        if name == "pexels":
            providers.append(PexelsImageProvider(api_key=images.pexels_api_key, **common))
        elif name == "unsplash":
            providers.append(UnsplashImageProvider(api_key=images.unsplash_access_key, **common))
    return providers


def select_image_provider(config: ClientConfig, use_real: bool) -> ImageSearchProvider:
    images = config.images
    choice = images.provider

    if choice == "none":
        return UnavailableImageProvider()
    if choice == "mock":
        return MockImageSearchProvider()
    if choice in {"pexels", "unsplash"}:
        return _remote_providers(images, [choice])[0]
    if choice == "chain":
        return ChainedImageProvider(_remote_providers(images, ["pexels", "unsplash"]))

    # auto
    if not use_real:
        return UnavailableImageProvider()
    configured = []
    if images.pexels_api_key:
        configured.append("pexels")
    if images.unsplash_access_key:
        configured.append("unsplash")
    if not configured:
        logger.info("No image provider keys configured; serving static category images")
        return UnavailableImageProvider()
    providers = _remote_providers(images, configured)
    return providers[0] if len(providers) == 1 else ChainedImageProvider(providers)


@dataclass
class ServiceContainer:
    config: ClientConfig
    store: KeyValueStore
    resolver: CredentialResolver
    client: RequestClient
    auth: AuthService
    users: UserService
    farmers: FarmerService
    orders: OrderService
    farmer_orders: FarmerOrderService
    cart: CartService
    images: ImageResolutionEngine

    async def aclose(self) -> None:
        await self.client.aclose()
        if isinstance(self.store, RedisKeyValueStore):
            await self.store.aclose()

    async def __aenter__(self) -> "ServiceContainer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def build_services(
    config: Optional[ClientConfig] = None,
    *,
    store: Optional[KeyValueStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    image_provider: Optional[ImageSearchProvider] = None,
    rng: Optional[random.Random] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ServiceContainer:
    """
    Build the shared client and every service over it.

    Args:
        config: Loaded configuration; load_client_config() when omitted
        store: Credential store override (tests pass an InMemoryKeyValueStore)
        transport: httpx transport override for the backend client
        image_provider: Remote image provider override
        rng: Random source for generic fallback images
        env: Environment consulted when integrations_mode is auto
    """
    config = config or load_client_config()
    use_real = should_use_real_integrations(config, env)
    logger.info("Building services (integrations=%s)", "real" if use_real else "mock")

    store = store or select_credential_store(config, use_real)

    extra = []
    if config.credentials.dev_token:
        if use_real:
            logger.warning("Ignoring dev token: real integrations are enabled")
        else:
            extra.append(StaticTokenStrategy(config.credentials.dev_token, name="dev-token"))
    resolver = build_storage_resolver(
        store,
        config.credentials.token_keys,
        extra_strategies=extra,
        timeout_seconds=config.credentials.resolve_timeout_seconds,
    )

    client = RequestClient(
        config.backend.base_url,
        resolver=resolver,
        timeout_seconds=config.backend.timeout_seconds,
        transport=transport,
    )

    if rng is None:
        seed = config.images.fallback_seed
        rng = random.Random(seed) if seed is not None else random.Random()

    engine = ImageResolutionEngine(
        provider=image_provider or select_image_provider(config, use_real),
        rng=rng,
        remote_timeout_seconds=config.images.remote_timeout_seconds,
    )

    return ServiceContainer(
        config=config,
        store=store,
        resolver=resolver,
        client=client,
        auth=AuthService(client, store, config.credentials.token_keys),
        users=UserService(client),
        farmers=FarmerService(client),
        orders=OrderService(client),
        farmer_orders=FarmerOrderService(client),
        cart=CartService(client),
        images=engine,
    )
