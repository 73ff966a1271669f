"""
AptoStock – Domain Entity: Pool
=================================
Pool AMM de producto constante: un token contra USDA.

INVARIANTE:
  Tras cualquier operación completada ambas reservas deben ser > 0.
  Si no, el pool está agotado y toda cotización contra él da cero.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from aptostock.domain.services.precision import round_amount
from aptostock.domain.value_objects.units import Asset, STABLE_UNIT, SwapDirection


@dataclass(frozen=True, slots=True)
class Pool:
    """Reservas de un pool token/USDA."""

    asset: Asset
    reserve_asset: float
    reserve_stable: float

    @property
    def is_exhausted(self) -> bool:
        return self.reserve_asset <= 0 or self.reserve_stable <= 0

    @property
    def spot_price(self) -> float:
        """USDA por token implícito en las reservas."""
        if self.is_exhausted:
            return 0.0
        return self.reserve_stable / self.reserve_asset

    def oriented(self, direction: SwapDirection) -> Tuple[float, float]:
        """(reserve_in, reserve_out) según el sentido del swap."""
        if direction is SwapDirection.STABLE_TO_ASSET:
            return self.reserve_stable, self.reserve_asset
        return self.reserve_asset, self.reserve_stable

    def after_swap(
        self,
        direction: SwapDirection,
        amount_in_after_fee: float,
        amount_out: float,
    ) -> "Pool":
        """Nuevo Pool con el swap aplicado (sin validar invariantes)."""
        if direction is SwapDirection.STABLE_TO_ASSET:
            return replace(
                self,
                reserve_stable=round_amount(self.reserve_stable + amount_in_after_fee),
                reserve_asset=round_amount(self.reserve_asset - amount_out),
            )
        return replace(
            self,
            reserve_asset=round_amount(self.reserve_asset + amount_in_after_fee),
            reserve_stable=round_amount(self.reserve_stable - amount_out),
        )

    def to_dict(self) -> dict:
        return {
            "asset": self.asset.value,
            "stable": STABLE_UNIT.value,
            "reserve_asset": self.reserve_asset,
            "reserve_stable": self.reserve_stable,
            "spot_price": round(self.spot_price, 6),
        }
