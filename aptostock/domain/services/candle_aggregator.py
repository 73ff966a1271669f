"""
AptoStock – Domain Service: Candle Aggregator
===============================================
Convierte una secuencia de PricePoint en velas OHLC de ancho fijo.

ALGORITMO:
  1. bucket = floor(t / frame_ms) · frame_ms
  2. El primer punto de un bucket abre la vela (open).
  3. Cada punto actualiza high/low (máx/mín) y close (último en llegar).
     Se respeta el orden de llegada, no se reordenan los puntos.
  4. Los buckets se ordenan por inicio ascendente.
  5. Se devuelven solo los `limit` más recientes.

INVARIANTE: low ≤ open, close ≤ high en toda vela producida.

Las velas no se almacenan: se derivan bajo demanda del historial.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List

from aptostock.domain.entities.candle import Candle
from aptostock.domain.value_objects.price import PricePoint

DEFAULT_CANDLE_LIMIT = 60


@dataclass
class _BuildingCandle:
    """Vela mutable en construcción (solo uso interno)."""

    symbol: str
    open_time: int
    interval: int
    open: float = 0.0
    high: float = -math.inf
    low: float = math.inf
    close: float = 0.0
    tick_count: int = 0

    def update(self, price: float) -> None:
        """Actualizar OHLC con un nuevo precio."""
        if self.tick_count == 0:
            self.open = price
        self.high = max(self.high, price)
        self.low = min(self.low, price)
        self.close = price
        self.tick_count += 1

    def freeze(self) -> Candle:
        """Convertir en Candle inmutable."""
        return Candle(
            symbol=self.symbol,
            timestamp=self.open_time,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            tick_count=self.tick_count,
            interval=self.interval,
        )


def bucket_start(timestamp: int, frame_ms: int) -> int:
    """Alinear un timestamp al inicio de su bucket."""
    return (int(timestamp) // frame_ms) * frame_ms


def to_candles(
    points: Iterable[PricePoint],
    frame_ms: int,
    limit: int = DEFAULT_CANDLE_LIMIT,
    symbol: str = "",
) -> List[Candle]:
    """Agrupar puntos en velas de frame_ms, quedándose con las últimas `limit`."""
    if frame_ms <= 0:
        raise ValueError(f"frame_ms debe ser positivo, recibido {frame_ms}")

    buckets: Dict[int, _BuildingCandle] = {}
    for point in points:
        start = bucket_start(point.t, frame_ms)
        building = buckets.get(start)
        if building is None:
            building = _BuildingCandle(symbol=symbol, open_time=start, interval=frame_ms)
            buckets[start] = building
        building.update(point.p)

    ordered = [buckets[start].freeze() for start in sorted(buckets)]
    if limit > 0:
        return ordered[-limit:]
    return ordered
