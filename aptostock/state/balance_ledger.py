"""
AptoStock – Balance Ledger
============================
Saldos de la sesión local para USDA, TLSA y CRCL.

DISEÑO:
  - Un único dueño (la sesión). Se muta solo aplicando deltas firmados.
  - Cada mutación se redondea a 6 decimales y se persiste como snapshot plano.
  - Un delta que dejaría el saldo negativo se rechaza con
    InsufficientBalanceError sin tocar el estado. Los casos de uso comprueban
    can_afford() antes, así que en flujos válidos nunca ocurre.

THREADING:
  Todo corre en un solo event-loop asyncio. No se necesitan locks.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional

from aptostock.domain.exceptions.domain_errors import InsufficientBalanceError, InvalidAmountError
from aptostock.domain.services.precision import round_amount
from aptostock.domain.value_objects.units import Unit
from aptostock.shared.logging.logger import get_logger
from aptostock.state.snapshots import BALANCES_KEY, BalancesBlob, SnapshotStore

logger = get_logger("balance_ledger")

DEFAULT_SEED_BALANCES: Dict[Unit, float] = {
    Unit.USDA: 10_000.0,
    Unit.TLSA: 0.0,
    Unit.CRCL: 0.0,
}


class BalanceLedger:
    """Saldos por unidad con persistencia best-effort."""

    def __init__(
        self,
        store: SnapshotStore,
        seed: Optional[Mapping[Unit, float]] = None,
    ) -> None:
        self._store = store
        self._seed: Dict[Unit, float] = {
            unit: round_amount((seed or DEFAULT_SEED_BALANCES).get(unit, 0.0))
            for unit in Unit
        }
        self._balances = self._load()

    def _load(self) -> Dict[Unit, float]:
        blob = self._store.load(BALANCES_KEY, BalancesBlob)
        if blob is None:
            return dict(self._seed)
        logger.info("Saldos restaurados desde snapshot")
        return {unit: round_amount(getattr(blob, unit.value)) for unit in Unit}

    def _save(self) -> None:
        self._store.save(
            BALANCES_KEY,
            BalancesBlob(**{unit.value: amount for unit, amount in self._balances.items()}),
        )

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def balances(self) -> Dict[Unit, float]:
        return dict(self._balances)

    def get(self, unit: Unit) -> float:
        return self._balances[unit]

    def can_afford(self, unit: Unit, amount: float) -> bool:
        return self._balances[unit] >= amount

    def to_dict(self) -> Dict[str, float]:
        return {unit.value: amount for unit, amount in self._balances.items()}

    # ════════════════════════════════════════════════════════════════
    #  ESCRITURA
    # ════════════════════════════════════════════════════════════════

    def add(self, unit: Unit, delta: float) -> float:
        """
        Aplicar balance[unit] += delta (redondeado a 6 decimales).

        Returns: nuevo saldo.
        Raises:
            InvalidAmountError si delta no es finito.
            InsufficientBalanceError si el resultado sería negativo.
        """
        if not math.isfinite(delta):
            raise InvalidAmountError(f"Delta no finito para {unit.value}: {delta}", value=delta)
        current = self._balances[unit]
        updated = round_amount(current + delta)
        if updated < 0:
            raise InsufficientBalanceError(
                f"Saldo insuficiente de {unit.value}: {current} + ({delta}) < 0",
                unit=unit.value,
                balance=current,
                delta=delta,
            )
        self._balances[unit] = updated
        self._save()
        logger.debug("Saldo %s: %.6f → %.6f", unit.value, current, updated)
        return updated

    def set(self, balances: Mapping[Unit, float]) -> None:
        """Reemplazar todos los saldos (las unidades omitidas quedan en 0)."""
        updated = {unit: round_amount(balances.get(unit, 0.0)) for unit in Unit}
        negative = [unit.value for unit, amount in updated.items() if amount < 0]
        if negative:
            raise InsufficientBalanceError(f"Saldos negativos no permitidos: {negative}")
        self._balances = updated
        self._save()

    def reset(self) -> None:
        """Volver a los saldos semilla. Idempotente."""
        self._balances = dict(self._seed)
        self._save()
        logger.info("Saldos reiniciados a semilla: %s", self.to_dict())
