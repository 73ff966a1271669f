"""
AptoStock – Application Port: Key-Value Store
===============================================
Interfaz del almacén de blobs donde cada ledger guarda su snapshot.

Cada ledger usa una clave propia (balances, pools, precios, historial).
La infraestructura decide DÓNDE viven los bytes (memoria, SQL, ...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStore(ABC):
    """
    Almacén clave → bytes.

    IMPLEMENTACIONES:
    - InMemoryKeyValueStore (default / tests)
    - SqlKeyValueStore (SQLAlchemy)

    Las implementaciones pueden lanzar excepciones; quien las consume
    (SnapshotStore) es responsable de absorberlas.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Bytes guardados bajo `key`, o None si no existe."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Guardar (o reemplazar) el blob de `key`."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Eliminar `key`. No falla si no existe."""
