"""
AptoStock – Pool Ledger
=========================
Reservas de los dos pools AMM (TLSA/USDA y CRCL/USDA).

INVARIANTES:
  - Ninguna reserva queda negativa tras apply_swap(). Si el caller pasa un
    amount_out mayor que la reserva disponible se lanza ReserveInvariantError
    y el pool queda intacto.
  - Cotizar y aplicar con las MISMAS reservas (sin await entre medio) garantiza
    que el piso max(0, ...) del Quote Engine nunca produce ese caso.
  - Reservas redondeadas a 6 decimales en cada mutación y en el snapshot.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple

from aptostock.domain.entities.pool import Pool
from aptostock.domain.exceptions.domain_errors import InvalidAmountError, ReserveInvariantError
from aptostock.domain.services.precision import round_amount
from aptostock.domain.value_objects.units import Asset, PoolKey, STABLE_UNIT, SwapDirection
from aptostock.shared.logging.logger import get_logger
from aptostock.state.snapshots import POOLS_KEY, PoolBlob, PoolsBlob, SnapshotStore

logger = get_logger("pool_ledger")

DEFAULT_SEED_POOLS: Dict[PoolKey, Pool] = {
    PoolKey.TLSA_USDA: Pool(asset=Asset.TLSA, reserve_asset=1000.0, reserve_stable=120_000.0),
    PoolKey.CRCL_USDA: Pool(asset=Asset.CRCL, reserve_asset=1000.0, reserve_stable=240_000.0),
}


class PoolLedger:
    """Estado de los pools con persistencia best-effort."""

    def __init__(
        self,
        store: SnapshotStore,
        seed: Optional[Mapping[PoolKey, Pool]] = None,
    ) -> None:
        self._store = store
        self._seed: Dict[PoolKey, Pool] = dict(seed or DEFAULT_SEED_POOLS)
        self._pools = self._load()

    def _load(self) -> Dict[PoolKey, Pool]:
        blob = self._store.load(POOLS_KEY, PoolsBlob)
        if blob is None:
            return dict(self._seed)
        pools: Dict[PoolKey, Pool] = {}
        for key in PoolKey:
            entry: PoolBlob = getattr(blob, key.value)
            if entry.token_a is not key.asset:
                logger.warning("Snapshot de pools inconsistente en %s, se usan semillas", key.value)
                return dict(self._seed)
            pools[key] = Pool(
                asset=key.asset,
                reserve_asset=round_amount(entry.reserve_a),
                reserve_stable=round_amount(entry.reserve_b),
            )
        logger.info("Pools restaurados desde snapshot")
        return pools

    def _save(self) -> None:
        blob = PoolsBlob(**{
            key.value: PoolBlob(
                token_a=pool.asset,
                token_b=STABLE_UNIT.value,
                reserve_a=pool.reserve_asset,
                reserve_b=pool.reserve_stable,
            )
            for key, pool in self._pools.items()
        })
        self._store.save(POOLS_KEY, blob)

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def pools(self) -> Dict[PoolKey, Pool]:
        return dict(self._pools)

    def get(self, key: PoolKey) -> Pool:
        return self._pools[key]

    def get_reserves(self, key: PoolKey) -> Tuple[float, float]:
        """(reserve_asset, reserve_stable)."""
        pool = self._pools[key]
        return pool.reserve_asset, pool.reserve_stable

    def reserves_for(self, key: PoolKey, direction: SwapDirection) -> Tuple[float, float]:
        """(reserve_in, reserve_out) orientado para el Quote Engine."""
        return self._pools[key].oriented(direction)

    def to_dict(self) -> Dict[str, dict]:
        return {key.value: pool.to_dict() for key, pool in self._pools.items()}

    # ════════════════════════════════════════════════════════════════
    #  ESCRITURA
    # ════════════════════════════════════════════════════════════════

    def apply_swap(
        self,
        key: PoolKey,
        direction: SwapDirection,
        amount_in_after_fee: float,
        amount_out: float,
    ) -> Pool:
        """
        Sumar amount_in_after_fee a la reserva de entrada y restar amount_out
        de la de salida.

        Raises:
            InvalidAmountError si algún monto es negativo o no finito.
            ReserveInvariantError si alguna reserva quedaría negativa.
        """
        for amount in (amount_in_after_fee, amount_out):
            if not math.isfinite(amount) or amount < 0:
                raise InvalidAmountError(f"Monto inválido para {key.value}: {amount}", value=amount)
        current = self._pools[key]
        updated = current.after_swap(direction, amount_in_after_fee, amount_out)
        if updated.reserve_asset < 0 or updated.reserve_stable < 0:
            raise ReserveInvariantError(
                f"Swap dejaría reservas negativas en {key.value}: "
                f"asset={updated.reserve_asset} stable={updated.reserve_stable}",
                pool=key.value,
            )
        self._pools[key] = updated
        self._save()

        if updated.is_exhausted:
            logger.warning("Pool %s agotado tras swap", key.value)
        logger.debug(
            "Pool %s %s: asset %.6f → %.6f | stable %.6f → %.6f",
            key.value, direction.value,
            current.reserve_asset, updated.reserve_asset,
            current.reserve_stable, updated.reserve_stable,
        )
        return updated

    def set(self, pools: Mapping[PoolKey, Pool]) -> None:
        """Reemplazar reservas (los pools omitidos conservan su estado)."""
        updated = dict(self._pools)
        for key, pool in pools.items():
            if pool.asset is not key.asset:
                raise ValueError(f"Pool {key.value} no puede contener {pool.asset.value}")
            if pool.reserve_asset < 0 or pool.reserve_stable < 0:
                raise ReserveInvariantError(f"Reservas negativas en {key.value}", pool=key.value)
            updated[key] = Pool(
                asset=pool.asset,
                reserve_asset=round_amount(pool.reserve_asset),
                reserve_stable=round_amount(pool.reserve_stable),
            )
        self._pools = updated
        self._save()

    def reset(self) -> None:
        """Volver a las reservas semilla. Idempotente."""
        self._pools = dict(self._seed)
        self._save()
        logger.info("Pools reiniciados a semilla")
