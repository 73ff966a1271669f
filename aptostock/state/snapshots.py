"""
AptoStock – Snapshot Store
============================
Frontera de persistencia de los ledgers.

Cada ledger guarda UN blob JSON independiente en el IKeyValueStore:

    apto_balances_v1       {"USDA": .., "TLSA": .., "CRCL": ..}
    apto_pools_v1          {"TLSA_USDA": {"tokenA", "tokenB", "reserveA", "reserveB"}, ..}
    apto_oracle_prices_v1  {"TLSA": .., "CRCL": ..}
    apto_price_history_v1  {"TLSA": [{"t": .., "p": ..}], "CRCL": [..]}

POLÍTICA DE FALLOS:
- Lectura: blob ausente, corrupto o inválido → None (el ledger usa semillas).
- Escritura: cualquier error se loguea y se ignora.
- Nunca se propaga una excepción al caller ni se aborta la operación lógica.

Los blobs se validan con modelos Pydantic para que un snapshot con
valores imposibles (reservas negativas, precios ≤ 0) se trate como corrupto.
"""

from __future__ import annotations

from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aptostock.application.ports.key_value_store import IKeyValueStore
from aptostock.domain.value_objects.units import Asset
from aptostock.shared.logging.logger import get_logger

logger = get_logger("snapshots")

BALANCES_KEY = "apto_balances_v1"
POOLS_KEY = "apto_pools_v1"
PRICES_KEY = "apto_oracle_prices_v1"
HISTORY_KEY = "apto_price_history_v1"

M = TypeVar("M", bound=BaseModel)


# ─── Blobs ──────────────────────────────────────────────────────────────

class BalancesBlob(BaseModel):
    model_config = ConfigDict(extra="ignore")

    USDA: float = Field(ge=0)
    TLSA: float = Field(ge=0)
    CRCL: float = Field(ge=0)


class PoolBlob(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    token_a: Asset = Field(alias="tokenA")
    token_b: str = Field(default="USDA", alias="tokenB")
    reserve_a: float = Field(ge=0, alias="reserveA")
    reserve_b: float = Field(ge=0, alias="reserveB")


class PoolsBlob(BaseModel):
    model_config = ConfigDict(extra="ignore")

    TLSA_USDA: PoolBlob
    CRCL_USDA: PoolBlob


class PricesBlob(BaseModel):
    model_config = ConfigDict(extra="ignore")

    TLSA: float = Field(gt=0)
    CRCL: float = Field(gt=0)


class PointBlob(BaseModel):
    t: int
    p: float = Field(gt=0)


class HistoryBlob(BaseModel):
    model_config = ConfigDict(extra="ignore")

    TLSA: List[PointBlob] = Field(default_factory=list)
    CRCL: List[PointBlob] = Field(default_factory=list)


# ─── Store ──────────────────────────────────────────────────────────────

class SnapshotStore:
    """
    Lectura/escritura best-effort de blobs de ledgers.

    Uso:
        store = SnapshotStore(InMemoryKeyValueStore())
        blob = store.load(BALANCES_KEY, BalancesBlob)   # None si no hay/corrupto
        store.save(BALANCES_KEY, blob)                   # False si falló
    """

    def __init__(self, kv_store: IKeyValueStore) -> None:
        self._kv = kv_store

    @property
    def kv_store(self) -> IKeyValueStore:
        return self._kv

    def load(self, key: str, model: Type[M]) -> Optional[M]:
        """Leer y validar un blob. Cualquier fallo → None."""
        try:
            raw = self._kv.get(key)
        except Exception as e:
            logger.warning("No se pudo leer '%s' del store: %s", key, e)
            return None

        if raw is None:
            return None

        try:
            return model.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning("Snapshot '%s' corrupto, se usan valores semilla: %s", key, e)
            return None

    def save(self, key: str, blob: BaseModel) -> bool:
        """Serializar y guardar un blob. Fire-and-forget."""
        try:
            payload = blob.model_dump_json(by_alias=True).encode("utf-8")
            self._kv.set(key, payload)
            return True
        except Exception as e:
            logger.warning("No se pudo guardar '%s' (ignorado): %s", key, e)
            return False

    def remove(self, key: str) -> bool:
        try:
            self._kv.remove(key)
            return True
        except Exception as e:
            logger.warning("No se pudo eliminar '%s' (ignorado): %s", key, e)
            return False
