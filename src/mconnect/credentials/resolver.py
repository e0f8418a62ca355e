"""
Credential resolution.

Resolves the bearer token for the next outbound request from an ordered list of
strategies. The first strategy that yields a non-empty value wins. Storage keys
(primary then legacy) and a fixed development token are all just strategies, so
adding a new source means appending to the list.

Resolution never raises. A strategy that cannot reach its source raises
CredentialUnavailable, which counts as "absent", and the chain moves on. A
failing or slow chain resolves to None and the request goes out anonymous.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from mconnect.credentials.store import KeyValueStore
from mconnect.integrations.errors import CredentialUnavailable

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
LEGACY_TOKEN_KEYS = ("userToken", "token", "auth_token")
DEFAULT_TOKEN_KEYS = (ACCESS_TOKEN_KEY,) + LEGACY_TOKEN_KEYS
# Written at login, never sent as a bearer token.
REFRESH_TOKEN_KEY = "refreshToken"


class CredentialStrategy(ABC):
    name: str = "strategy"

    @abstractmethod
    async def lookup(self) -> Optional[str]:
        """Return a token or None."""


class StorageKeyStrategy(CredentialStrategy):
    def __init__(self, store: KeyValueStore, key: str) -> None:
        self.store = store
        self.key = key
        self.name = f"storage:{key}"

    async def lookup(self) -> Optional[str]:
        try:
            return await self.store.get_item(self.key)
        except Exception as exc:
            raise CredentialUnavailable(f"Credential key {self.key!r} could not be read: {exc}") from exc


class StaticTokenStrategy(CredentialStrategy):
    """Serves a fixed token, e.g. a development token from configuration."""

    def __init__(self, token: Optional[str], name: str = "static") -> None:
        self.token = token
        self.name = name

    async def lookup(self) -> Optional[str]:
        return self.token


class CredentialResolver:
    def __init__(self, strategies: Iterable[CredentialStrategy], timeout_seconds: float = 2.0) -> None:
        self.strategies: List[CredentialStrategy] = list(strategies)
        self.timeout_seconds = timeout_seconds

    async def resolve_token(self) -> Optional[str]:
        try:
            token = await asyncio.wait_for(self._walk_chain(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Credential resolution exceeded %.1fs; sending request unauthenticated", self.timeout_seconds)
            return None
        except Exception as exc:
            logger.warning("Credential storage unavailable (%s); sending request unauthenticated", exc)
            return None

        if token is None:
            logger.warning("No credential found in %d source(s); request will be anonymous", len(self.strategies))
        return token

    async def _walk_chain(self) -> Optional[str]:
        for strategy in self.strategies:
            try:
                value = await strategy.lookup()
            except CredentialUnavailable as exc:
                logger.debug("Credential source %s unavailable: %s", strategy.name, exc)
                continue
            except Exception as exc:
                logger.warning("Credential source %s failed: %s", strategy.name, exc)
                continue
            if value is None:
                continue
            value = str(value).strip()
            if value:
                logger.debug("Credential resolved from %s", strategy.name)
                return value
        return None


def build_storage_resolver(
    store: KeyValueStore,
    keys: Sequence[str] = DEFAULT_TOKEN_KEYS,
    *,
    extra_strategies: Iterable[CredentialStrategy] = (),
    timeout_seconds: float = 2.0,
) -> CredentialResolver:
    """Resolver over `keys` in priority order, followed by any extra strategies."""
    strategies: List[CredentialStrategy] = [StorageKeyStrategy(store, key) for key in keys]
    strategies.extend(extra_strategies)
    return CredentialResolver(strategies, timeout_seconds=timeout_seconds)
