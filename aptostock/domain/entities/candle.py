"""
AptoStock – Domain Entity: Candle
===================================
Vela OHLC inmutable derivada del historial de precios.

Decisiones de diseño:
- frozen=True → una vela calculada no se modifica; se recalcula bajo demanda.
- Se usa dataclass por rendimiento (más ligera que Pydantic para hot-path).
- timestamp = inicio del bucket (epoch ms, alineado al ancho de frame).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLC con timestamp de apertura del bucket."""

    symbol: str          # e.g. "TLSA"
    timestamp: int       # inicio del bucket (epoch ms)
    open: float
    high: float
    low: float
    close: float
    tick_count: int      # puntos de precio que componen esta vela
    interval: int        # ancho del bucket en ms

    def to_dict(self) -> dict:
        """Serialización para WebSocket / frontend."""
        return {
            "symbol": self.symbol,
            "timestamp": self.timestamp,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "tick_count": self.tick_count,
            "interval": self.interval,
        }
