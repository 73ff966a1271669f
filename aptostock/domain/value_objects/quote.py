"""
AptoStock – Domain Value Object: SwapQuote
============================================
Resultado del Quote Engine. Inmutable y ya redondeado.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SwapQuote:
    """Cotización de un swap contra un pool de producto constante."""

    amount_in_after_fee: float
    amount_out: float
    fee_paid: float
    price_impact_pct: float

    @classmethod
    def zero(cls) -> "SwapQuote":
        """Resultado para entradas degeneradas (no es un error)."""
        return cls(
            amount_in_after_fee=0.0,
            amount_out=0.0,
            fee_paid=0.0,
            price_impact_pct=0.0,
        )

    @property
    def is_actionable(self) -> bool:
        """Solo una salida positiva puede ejecutarse."""
        return self.amount_out > 0

    def to_dict(self) -> dict:
        return {
            "amount_in_after_fee": self.amount_in_after_fee,
            "amount_out": self.amount_out,
            "fee_paid": self.fee_paid,
            "price_impact_pct": self.price_impact_pct,
        }
