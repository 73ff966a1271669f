"""
AptoStock – Domain Service: Precision
=======================================
Política única de redondeo para todo estado monetario.

Se aplica igual al cotizar, al actualizar reservas/saldos y al persistir,
de modo que operaciones repetidas no acumulen deriva de precisión.
"""

from __future__ import annotations

from typing import Final

AMOUNT_DECIMALS: Final[int] = 6
PRICE_DECIMALS: Final[int] = 2
PERCENT_DECIMALS: Final[int] = 4


def round_amount(value: float) -> float:
    """Saldos, reservas y montos de swap/mint."""
    return round(float(value), AMOUNT_DECIMALS) + 0.0


def round_price(value: float) -> float:
    """Precios del oráculo."""
    return round(float(value), PRICE_DECIMALS) + 0.0


def round_percent(value: float) -> float:
    """Porcentajes (price impact)."""
    return round(float(value), PERCENT_DECIMALS) + 0.0


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
