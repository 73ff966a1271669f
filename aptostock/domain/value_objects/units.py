"""
AptoStock – Domain Value Objects: Units & Pools
=================================================
Enumeraciones cerradas de todo lo que se puede indexar en el sistema.

- Unit:          unidades con saldo (USDA estable + dos tokens).
- Asset:         tokens con precio de oráculo y pool propio.
- PoolKey:       un pool por token, siempre emparejado contra USDA.
- SwapDirection: sentido del swap dentro de un pool.

Todas las búsquedas (saldos, reservas, precios) usan estas claves,
así no existe el caso "clave inexistente" en tiempo de ejecución.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from aptostock.domain.exceptions.domain_errors import UnsupportedPairError


class Unit(str, Enum):
    """Unidades con saldo en la sesión."""
    USDA = "USDA"
    TLSA = "TLSA"
    CRCL = "CRCL"


class Asset(str, Enum):
    """Tokens cotizados por el oráculo."""
    TLSA = "TLSA"
    CRCL = "CRCL"

    @property
    def unit(self) -> Unit:
        return Unit(self.value)

    @property
    def pool_key(self) -> "PoolKey":
        return _POOL_BY_ASSET[self]


class PoolKey(str, Enum):
    """Pools AMM disponibles."""
    TLSA_USDA = "TLSA_USDA"
    CRCL_USDA = "CRCL_USDA"

    @property
    def asset(self) -> Asset:
        return _ASSET_BY_POOL[self]


class SwapDirection(str, Enum):
    """Sentido del swap respecto al pool."""
    STABLE_TO_ASSET = "STABLE_TO_ASSET"
    ASSET_TO_STABLE = "ASSET_TO_STABLE"


STABLE_UNIT = Unit.USDA

_POOL_BY_ASSET = {
    Asset.TLSA: PoolKey.TLSA_USDA,
    Asset.CRCL: PoolKey.CRCL_USDA,
}
_ASSET_BY_POOL = {pool: asset for asset, pool in _POOL_BY_ASSET.items()}


def resolve_pair(from_unit: Unit, to_unit: Unit) -> Optional[Tuple[PoolKey, SwapDirection]]:
    """
    Resolver un par de swap a (pool, dirección).

    Pares válidos: USDA→TLSA, TLSA→USDA, USDA→CRCL, CRCL→USDA.
    Cualquier otra combinación (misma unidad, token→token) retorna None.
    """
    if from_unit == STABLE_UNIT and to_unit != STABLE_UNIT:
        return Asset(to_unit.value).pool_key, SwapDirection.STABLE_TO_ASSET
    if to_unit == STABLE_UNIT and from_unit != STABLE_UNIT:
        return Asset(from_unit.value).pool_key, SwapDirection.ASSET_TO_STABLE
    return None


def require_pair(from_unit: Unit, to_unit: Unit) -> Tuple[PoolKey, SwapDirection]:
    """Como resolve_pair, pero lanza UnsupportedPairError si el par no existe."""
    pair = resolve_pair(from_unit, to_unit)
    if pair is None:
        raise UnsupportedPairError(
            f"Par no soportado: {from_unit.value} → {to_unit.value}",
            from_unit=from_unit.value,
            to_unit=to_unit.value,
        )
    return pair
