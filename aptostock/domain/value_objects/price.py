"""
AptoStock – Domain Value Objects: Prices
==========================================
- PriceSnapshot: precio de ambos tokens en un instante (emitido por el oráculo).
- PricePoint:    una observación (t, p) de un símbolo en el historial.

frozen=True → inmutables, seguros para pasar entre coroutines.
Timestamps en milisegundos epoch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from aptostock.domain.value_objects.units import Asset


@dataclass(frozen=True)
class PriceSnapshot:
    """Precios de todos los Asset en un mismo instante."""

    prices: Mapping[Asset, float]
    timestamp: int = 0  # epoch ms

    def __post_init__(self) -> None:
        missing = [a.value for a in Asset if a not in self.prices]
        if missing:
            raise ValueError(f"PriceSnapshot incompleto, faltan: {missing}")
        # Copia defensiva para que nadie mute el snapshot desde fuera
        object.__setattr__(self, "prices", {a: float(self.prices[a]) for a in Asset})

    def price(self, asset: Asset) -> float:
        return self.prices[asset]

    def to_dict(self) -> dict:
        """Serialización para WebSocket / API."""
        data: dict = {a.value: self.prices[a] for a in Asset}
        data["timestamp"] = self.timestamp
        return data


@dataclass(frozen=True, slots=True)
class PricePoint:
    """Observación individual de precio."""

    t: int      # epoch ms
    p: float

    def to_dict(self) -> dict:
        return {"t": self.t, "p": self.p}
