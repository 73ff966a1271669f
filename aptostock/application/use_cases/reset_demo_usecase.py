"""
Reset Demo Use Case.

Devuelve saldos y pools a sus valores semilla. Los precios del oráculo
y el historial tienen sus propios resets.
"""

from __future__ import annotations

from aptostock.domain.events.domain_events import DemoReset
from aptostock.shared.logging.logger import get_logger
from aptostock.state.balance_ledger import BalanceLedger
from aptostock.state.pool_ledger import PoolLedger

logger = get_logger("reset_demo_usecase")


class ResetDemoUseCase:
    def __init__(self, balances: BalanceLedger, pools: PoolLedger) -> None:
        self._balances = balances
        self._pools = pools

    def execute(self) -> DemoReset:
        self._balances.reset()
        self._pools.reset()
        logger.info("Demo reiniciada (saldos + pools)")
        return DemoReset()
