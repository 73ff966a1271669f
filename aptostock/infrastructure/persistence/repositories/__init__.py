"""Implementaciones de IKeyValueStore."""

from aptostock.infrastructure.persistence.repositories.kv_store_impl import (
    InMemoryKeyValueStore,
    SqlKeyValueStore,
)

__all__ = [
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
]
