"""
Key/Value Store Implementations.

Implementaciones concretas de IKeyValueStore:

- InMemoryKeyValueStore: dict en proceso (por defecto y en tests).
- SqlKeyValueStore:      tabla `kv_blobs` vía SQLAlchemy (db_enabled=True).

Clean Architecture: estas clases están en infrastructure y dependen del
puerto de application. Los ledgers solo conocen el SnapshotStore.
"""

from __future__ import annotations

from typing import Dict, Optional

from aptostock.application.ports.key_value_store import IKeyValueStore
from aptostock.infrastructure.persistence.database import DatabaseManager
from aptostock.infrastructure.persistence.models import KeyValueBlobModel
from aptostock.shared.logging.logger import get_logger

logger = get_logger("kv_store")


class InMemoryKeyValueStore(IKeyValueStore):
    """Store en memoria. Se pierde al terminar el proceso."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore(IKeyValueStore):
    """
    Store respaldado por SQLAlchemy.

    Cada set() es un upsert en su propia transacción. El esquema se crea
    en la primera operación, no al construir: una base inaccesible falla
    dentro de get/set/remove, donde el SnapshotStore loguea e ignora.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    def _session(self):
        self._db.initialize()
        return self._db.session()

    def get(self, key: str) -> Optional[bytes]:
        with self._session() as session:
            row = session.get(KeyValueBlobModel, key)
            return None if row is None else bytes(row.value)

    def set(self, key: str, value: bytes) -> None:
        with self._session() as session:
            row = session.get(KeyValueBlobModel, key)
            if row is None:
                session.add(KeyValueBlobModel(key=key, value=bytes(value)))
            else:
                row.value = bytes(value)
        logger.debug("Blob '%s' guardado (%d bytes)", key, len(value))

    def remove(self, key: str) -> None:
        with self._session() as session:
            row = session.get(KeyValueBlobModel, key)
            if row is not None:
                session.delete(row)
