"""
Mint Use Case.

Acuña TLSA o CRCL pagando USDA al precio spot del oráculo.

Orden de validación (ninguna rama de rechazo toca el estado):
1. stable_in > 0 y finito           → invalid_amount
2. precio del oráculo > 0           → price_unavailable
3. saldo USDA ≥ stable_in           → insufficient_balance
4. tokens resultantes > 0           → no_output

El caso de uso es síncrono: se ejecuta completo sin ceder el event loop,
así el timer del oráculo no puede cambiar el precio entre cotizar y aplicar.
"""

from __future__ import annotations

import math

from aptostock.application.dto.trade_dto import MintResult, RejectionReason
from aptostock.application.ports.price_source import IPriceSource
from aptostock.domain.events.domain_events import MintExecuted
from aptostock.domain.services.quote_engine import quote_mint
from aptostock.domain.value_objects.units import STABLE_UNIT, Asset
from aptostock.shared.logging.logger import get_logger
from aptostock.state.balance_ledger import BalanceLedger

logger = get_logger("mint_usecase")


class MintUseCase:
    """Caso de uso: USDA → token al precio del oráculo."""

    def __init__(self, balances: BalanceLedger, oracle: IPriceSource) -> None:
        self._balances = balances
        self._oracle = oracle

    def preview(self, asset: Asset, stable_in: float) -> float:
        """Tokens que se obtendrían ahora mismo (0.0 si no es ejecutable)."""
        return quote_mint(stable_in, self._oracle.price(asset))

    def execute(self, asset: Asset, stable_in: float) -> MintResult:
        result = MintResult(asset=asset.value, stable_in=stable_in)

        if not math.isfinite(stable_in) or stable_in <= 0:
            return self._reject(result, RejectionReason.INVALID_AMOUNT, "El monto debe ser positivo")

        price = self._oracle.price(asset)
        result.price = price
        if not math.isfinite(price) or price <= 0:
            return self._reject(result, RejectionReason.PRICE_UNAVAILABLE, f"Sin precio para {asset.value}")

        if not self._balances.can_afford(STABLE_UNIT, stable_in):
            return self._reject(
                result,
                RejectionReason.INSUFFICIENT_BALANCE,
                f"Saldo {STABLE_UNIT.value} insuficiente: {self._balances.get(STABLE_UNIT)} < {stable_in}",
            )

        amount_out = quote_mint(stable_in, price)
        if amount_out <= 0:
            return self._reject(result, RejectionReason.NO_OUTPUT, "El mint no produce tokens")

        self._balances.add(STABLE_UNIT, -stable_in)
        self._balances.add(asset.unit, amount_out)

        result.amount_out = amount_out
        result.accepted = True
        result.event = MintExecuted(
            asset=asset.value,
            stable_in=stable_in,
            amount_out=amount_out,
            price=price,
        )
        logger.info("Mint: %.6f USDA → %.6f %s @ %.2f", stable_in, amount_out, asset.value, price)
        return result

    @staticmethod
    def _reject(result: MintResult, reason: RejectionReason, error: str) -> MintResult:
        result.reason = reason
        result.error = error
        logger.info("Mint rechazado (%s): %s", reason.value, error)
        return result
