"""
AptoStock – Domain Events
============================
Eventos de dominio publicados en el EventBus.

Los eventos representan HECHOS que ya ocurrieron en la sesión.
Son inmutables y llevan timestamp.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class DomainEvent:
    """Evento base de dominio."""

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.__class__.__name__,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PricesUpdated(DomainEvent):
    """Evento: el oráculo emitió un nuevo snapshot de precios."""

    prices: Dict[str, float] = field(default_factory=dict)
    price_timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "prices": dict(self.prices),
            "price_timestamp": self.price_timestamp,
        })
        return base


@dataclass(frozen=True)
class MintExecuted(DomainEvent):
    """Evento: se acuñaron tokens con USDA."""

    asset: str = ""
    stable_in: float = 0.0
    amount_out: float = 0.0
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "asset": self.asset,
            "stable_in": self.stable_in,
            "amount_out": self.amount_out,
            "price": self.price,
        })
        return base


@dataclass(frozen=True)
class SwapExecuted(DomainEvent):
    """Evento: se ejecutó un swap contra un pool."""

    pool: str = ""
    from_unit: str = ""
    to_unit: str = ""
    amount_in: float = 0.0
    amount_out: float = 0.0
    fee_paid: float = 0.0
    price_impact_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "pool": self.pool,
            "from_unit": self.from_unit,
            "to_unit": self.to_unit,
            "amount_in": self.amount_in,
            "amount_out": self.amount_out,
            "fee_paid": self.fee_paid,
            "price_impact_pct": self.price_impact_pct,
        })
        return base


@dataclass(frozen=True)
class DemoReset(DomainEvent):
    """Evento: saldos y pools volvieron a sus valores semilla."""
