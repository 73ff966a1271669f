"""
AptoStock – Domain Service: Quote Engine
==========================================
Matemática AMM de producto constante. Funciones puras, sin estado.

FÓRMULA (x·y = k, antes de fee):
    fee_paid            = amount_in · fee_rate
    amount_in_after_fee = amount_in − fee_paid
    k                   = reserve_in · reserve_out
    amount_out          = max(0, reserve_out − k / (reserve_in + amount_in_after_fee))

PRICE IMPACT:
    price_before = reserve_out / reserve_in
    price_after  = (reserve_out − amount_out) / (reserve_in + amount_in_after_fee)
    impact_pct   = max(0, (price_after − price_before) / price_before) · 100

    Siempre se reporta como magnitud no negativa, sin distinguir si el
    movimiento favorece o no al usuario.

SALIDA ACOTADA:
    amount_out < reserve_out siempre. Si el redondeo a 6 decimales alcanzara
    la reserva, se trunca hacia abajo; un pool reducido a polvo cotiza 0.

ENTRADAS DEGENERADAS:
    amount_in ≤ 0 o alguna reserva ≤ 0 → SwapQuote.zero(). No es un error;
    el caller debe comprobar amount_out > 0 antes de ejecutar.
"""

from __future__ import annotations

import math

from aptostock.domain.services.precision import AMOUNT_DECIMALS, round_amount, round_percent
from aptostock.domain.value_objects.quote import SwapQuote

DEFAULT_FEE_RATE = 0.003


def quote(
    reserve_in: float,
    reserve_out: float,
    amount_in: float,
    fee_rate: float = DEFAULT_FEE_RATE,
) -> SwapQuote:
    """Cotizar un swap de amount_in contra un pool (reserve_in, reserve_out)."""
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return SwapQuote.zero()

    fee_paid = amount_in * fee_rate
    amount_in_after_fee = amount_in - fee_paid
    k = reserve_in * reserve_out
    new_reserve_in = reserve_in + amount_in_after_fee
    amount_out = max(0.0, reserve_out - k / new_reserve_in)

    price_before = reserve_out / reserve_in
    price_after = (reserve_out - amount_out) / new_reserve_in
    if price_after > 0:
        price_impact_pct = max(0.0, (price_after - price_before) / price_before) * 100
    else:
        price_impact_pct = 0.0

    return SwapQuote(
        amount_in_after_fee=round_amount(amount_in_after_fee),
        amount_out=_bounded_amount_out(amount_out, reserve_out),
        fee_paid=round_amount(fee_paid),
        price_impact_pct=round_percent(price_impact_pct),
    )


def _bounded_amount_out(raw: float, reserve_out: float) -> float:
    """Redondear amount_out manteniéndolo estrictamente por debajo de reserve_out."""
    rounded = round_amount(raw)
    if rounded < reserve_out:
        return rounded
    scale = 10 ** AMOUNT_DECIMALS
    floored = math.floor(raw * scale) / scale
    if floored >= reserve_out:
        floored = math.floor(reserve_out * scale - 1) / scale
    return max(0.0, round_amount(floored))


def quote_mint(stable_in: float, price: float) -> float:
    """Tokens obtenidos al acuñar con stable_in USDA al precio spot."""
    if stable_in <= 0 or price <= 0:
        return 0.0
    return round_amount(stable_in / price)
