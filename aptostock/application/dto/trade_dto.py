"""
AptoStock – Application DTO: Mint / Swap
==========================================
Resultados de los casos de uso de mint y swap.

Un rechazo esperado (monto inválido, saldo insuficiente, ...) NO es una
excepción: se devuelve accepted=False con un `reason` legible por máquina.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from aptostock.domain.events.domain_events import MintExecuted, SwapExecuted
from aptostock.domain.value_objects.quote import SwapQuote


class RejectionReason(str, Enum):
    """Motivos por los que una operación no modificó el estado."""
    INVALID_AMOUNT = "invalid_amount"
    PRICE_UNAVAILABLE = "price_unavailable"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NO_OUTPUT = "no_output"
    UNSUPPORTED_PAIR = "unsupported_pair"


@dataclass
class MintResult:
    """Resultado de un mint USDA → token."""

    asset: str
    stable_in: float
    amount_out: float = 0.0
    price: float = 0.0
    accepted: bool = False
    reason: Optional[RejectionReason] = None
    error: Optional[str] = None
    event: Optional[MintExecuted] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepted": self.accepted,
            "reason": self.reason.value if self.reason else None,
            "error": self.error,
            "asset": self.asset,
            "stable_in": self.stable_in,
            "amount_out": self.amount_out,
            "price": self.price,
        }


@dataclass
class SwapQuoteResult:
    """Cotización de un swap sin efectos sobre el estado."""

    from_unit: str
    to_unit: str
    amount_in: float
    quote: SwapQuote
    pool: Optional[str] = None
    supported: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "supported": self.supported,
            "pool": self.pool,
            "from_unit": self.from_unit,
            "to_unit": self.to_unit,
            "amount_in": self.amount_in,
        }
        data.update(self.quote.to_dict())
        return data


@dataclass
class SwapResult:
    """Resultado de un swap ejecutado (o rechazado)."""

    from_unit: str
    to_unit: str
    amount_in: float
    quote: SwapQuote
    pool: Optional[str] = None
    accepted: bool = False
    reason: Optional[RejectionReason] = None
    error: Optional[str] = None
    event: Optional[SwapExecuted] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "accepted": self.accepted,
            "reason": self.reason.value if self.reason else None,
            "error": self.error,
            "pool": self.pool,
            "from_unit": self.from_unit,
            "to_unit": self.to_unit,
            "amount_in": self.amount_in,
        }
        data.update(self.quote.to_dict())
        return data
