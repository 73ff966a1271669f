"""Shared test fixtures for pytest.

Builds ledgers, oracle and history on top of an in-memory key-value store
so every test starts from seed state with no disk I/O.
"""

from __future__ import annotations

import random

import pytest

from aptostock.container import Container
from aptostock.infrastructure.persistence.repositories.kv_store_impl import InMemoryKeyValueStore
from aptostock.market_data.price_oracle import OracleState, PriceOracle
from aptostock.shared.config.settings import Settings
from aptostock.state.balance_ledger import BalanceLedger
from aptostock.state.pool_ledger import PoolLedger
from aptostock.state.price_history import PriceHistory
from aptostock.state.snapshots import SnapshotStore


class FixedClock:
    """Reloj manual en segundos epoch."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def snapshot_store(kv_store: InMemoryKeyValueStore) -> SnapshotStore:
    return SnapshotStore(kv_store)


@pytest.fixture
def balances(snapshot_store: SnapshotStore) -> BalanceLedger:
    return BalanceLedger(snapshot_store)


@pytest.fixture
def pools(snapshot_store: SnapshotStore) -> PoolLedger:
    return PoolLedger(snapshot_store)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def oracle(snapshot_store: SnapshotStore, clock: FixedClock) -> PriceOracle:
    """Oráculo determinista: sin volatilidad, drift por defecto."""
    return PriceOracle(
        snapshot_store,
        volatility_bps=0.0,
        rng=random.Random(42),
        clock=clock,
    )


@pytest.fixture
def paused_oracle(snapshot_store: SnapshotStore, clock: FixedClock) -> PriceOracle:
    return PriceOracle(
        snapshot_store,
        volatility_bps=0.0,
        initial_state=OracleState.PAUSED,
        rng=random.Random(42),
        clock=clock,
    )


@pytest.fixture
def history(snapshot_store: SnapshotStore, clock: FixedClock) -> PriceHistory:
    return PriceHistory(snapshot_store, rng=random.Random(7), clock=clock)


@pytest.fixture
def app_settings() -> Settings:
    """Settings para la app: oráculo pausado y snapshots en memoria."""
    return Settings(
        oracle_start_paused=True,
        oracle_rng_seed=1234,
        db_enabled=False,
    )


@pytest.fixture
def container(app_settings: Settings) -> Container:
    return Container(settings=app_settings)
