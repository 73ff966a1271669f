"""
Swap Use Case.

Intercambia USDA ↔ token contra el pool AMM correspondiente.

Orden de validación (ninguna rama de rechazo toca el estado):
1. par soportado (antes de cotizar)    → unsupported_pair
2. amount_in > 0 y finito              → invalid_amount
3. saldo de from_unit ≥ amount_in      → insufficient_balance
4. amount_out > 0 (pool no agotado)    → no_output

Si se acepta:
- balance[from] -= amount_in, balance[to] += amount_out
- reserva de entrada += amount_in_after_fee, de salida -= amount_out
La cotización y la aplicación usan las MISMAS reservas: todo ocurre en
una llamada síncrona sin ceder el event loop.
"""

from __future__ import annotations

import math

from aptostock.application.dto.trade_dto import RejectionReason, SwapQuoteResult, SwapResult
from aptostock.domain.events.domain_events import SwapExecuted
from aptostock.domain.exceptions.domain_errors import UnsupportedPairError
from aptostock.domain.services.quote_engine import DEFAULT_FEE_RATE, quote
from aptostock.domain.value_objects.quote import SwapQuote
from aptostock.domain.value_objects.units import Unit, require_pair, resolve_pair
from aptostock.shared.logging.logger import get_logger
from aptostock.state.balance_ledger import BalanceLedger
from aptostock.state.pool_ledger import PoolLedger

logger = get_logger("swap_usecase")


class SwapUseCase:
    """Caso de uso: swap de producto constante con fee."""

    def __init__(
        self,
        balances: BalanceLedger,
        pools: PoolLedger,
        fee_rate: float = DEFAULT_FEE_RATE,
    ) -> None:
        self._balances = balances
        self._pools = pools
        self._fee_rate = fee_rate

    @property
    def fee_rate(self) -> float:
        return self._fee_rate

    def quote(self, from_unit: Unit, to_unit: Unit, amount_in: float) -> SwapQuoteResult:
        """Cotizar sin modificar estado. Par no soportado → cotización cero."""
        pair = resolve_pair(from_unit, to_unit)
        if pair is None:
            return SwapQuoteResult(
                from_unit=from_unit.value,
                to_unit=to_unit.value,
                amount_in=amount_in,
                quote=SwapQuote.zero(),
                supported=False,
            )
        key, direction = pair
        reserve_in, reserve_out = self._pools.reserves_for(key, direction)
        amount = amount_in if math.isfinite(amount_in) else 0.0
        return SwapQuoteResult(
            from_unit=from_unit.value,
            to_unit=to_unit.value,
            amount_in=amount_in,
            quote=quote(reserve_in, reserve_out, amount, self._fee_rate),
            pool=key.value,
        )

    def execute(self, from_unit: Unit, to_unit: Unit, amount_in: float) -> SwapResult:
        result = SwapResult(
            from_unit=from_unit.value,
            to_unit=to_unit.value,
            amount_in=amount_in,
            quote=SwapQuote.zero(),
        )

        try:
            key, direction = require_pair(from_unit, to_unit)
        except UnsupportedPairError as e:
            return self._reject(result, RejectionReason.UNSUPPORTED_PAIR, e.message)
        result.pool = key.value

        if not math.isfinite(amount_in) or amount_in <= 0:
            return self._reject(result, RejectionReason.INVALID_AMOUNT, "El monto debe ser positivo")

        if not self._balances.can_afford(from_unit, amount_in):
            return self._reject(
                result,
                RejectionReason.INSUFFICIENT_BALANCE,
                f"Saldo {from_unit.value} insuficiente: {self._balances.get(from_unit)} < {amount_in}",
            )

        reserve_in, reserve_out = self._pools.reserves_for(key, direction)
        swap_quote = quote(reserve_in, reserve_out, amount_in, self._fee_rate)
        result.quote = swap_quote
        if not swap_quote.is_actionable:
            return self._reject(result, RejectionReason.NO_OUTPUT, f"El pool {key.value} no produce salida")

        self._pools.apply_swap(key, direction, swap_quote.amount_in_after_fee, swap_quote.amount_out)
        self._balances.add(from_unit, -amount_in)
        self._balances.add(to_unit, swap_quote.amount_out)

        result.accepted = True
        result.event = SwapExecuted(
            pool=key.value,
            from_unit=from_unit.value,
            to_unit=to_unit.value,
            amount_in=amount_in,
            amount_out=swap_quote.amount_out,
            fee_paid=swap_quote.fee_paid,
            price_impact_pct=swap_quote.price_impact_pct,
        )
        logger.info(
            "Swap %s: %.6f %s → %.6f %s (fee=%.6f)",
            key.value, amount_in, from_unit.value,
            swap_quote.amount_out, to_unit.value, swap_quote.fee_paid,
        )
        return result

    @staticmethod
    def _reject(result: SwapResult, reason: RejectionReason, error: str) -> SwapResult:
        result.reason = reason
        result.error = error
        logger.info("Swap rechazado (%s): %s", reason.value, error)
        return result
