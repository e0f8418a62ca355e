"""
Credential storage and resolution.

The Request Client asks a CredentialResolver for a token before every request;
the resolver walks an ordered chain of strategies backed by a KeyValueStore.
"""

from .resolver import (
    ACCESS_TOKEN_KEY,
    DEFAULT_TOKEN_KEYS,
    LEGACY_TOKEN_KEYS,
    REFRESH_TOKEN_KEY,
    CredentialResolver,
    CredentialStrategy,
    StaticTokenStrategy,
    StorageKeyStrategy,
    build_storage_resolver,
)
from .store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore

__all__ = [
    "ACCESS_TOKEN_KEY",
    "DEFAULT_TOKEN_KEYS",
    "LEGACY_TOKEN_KEYS",
    "REFRESH_TOKEN_KEY",
    "CredentialResolver",
    "CredentialStrategy",
    "StaticTokenStrategy",
    "StorageKeyStrategy",
    "build_storage_resolver",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
]
