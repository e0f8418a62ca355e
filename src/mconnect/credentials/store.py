"""
Key-value storage surfaces that hold credentials.

`InMemoryKeyValueStore` is the development/test stand-in; `RedisKeyValueStore`
is used when REDIS_URL is configured. Both expose the same async interface so
the credential resolver does not care which one it reads from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError


class KeyValueStore(ABC):
    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is not set."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value under key."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key this store owns."""

    async def multi_set(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for key, value in pairs:
            await self.set_item(key, value)


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def clear(self) -> None:
        self._items.clear()


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed credential storage. Keys are namespaced so `clear()` only
    touches entries written through this store.
    """

    def __init__(self, url: str, namespace: str = "mconnect:auth", client: Optional[redis.Redis] = None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get_item(self, key: str) -> Optional[str]:
        value = await self._client.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set_item(self, key: str, value: str) -> None:
        await self._client.set(self._key(key), value)

    async def remove_item(self, key: str) -> None:
        await self._client.delete(self._key(key))

    async def clear(self) -> None:
        keys = [k async for k in self._client.scan_iter(match=f"{self._namespace}:*")]
        if keys:
            await self._client.delete(*keys)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def aclose(self) -> None:
        await self._client.aclose()
