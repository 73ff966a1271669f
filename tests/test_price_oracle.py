"""Tests for the price oracle state machine and random walk."""

from __future__ import annotations

import asyncio
import random

import pytest

from aptostock.domain.value_objects.units import Asset
from aptostock.infrastructure.external.event_bus_adapter import EventBus
from aptostock.market_data.price_oracle import OracleState, PriceOracle
from aptostock.state.snapshots import PRICES_KEY


def test_oracle_starts_from_seed_prices(oracle):
    assert oracle.price(Asset.TLSA) == 120.0
    assert oracle.price(Asset.CRCL) == 240.0
    assert oracle.state is OracleState.RUNNING


def test_tick_with_zero_volatility_applies_drift(oracle):
    snapshot = oracle.tick()

    assert snapshot is not None
    assert snapshot.price(Asset.TLSA) == 120.02
    assert snapshot.price(Asset.CRCL) == 240.05
    assert oracle.prices == snapshot


def test_tick_emits_single_timestamp_for_both_assets(oracle, clock):
    clock.advance(3)
    snapshot = oracle.tick()

    assert snapshot.timestamp == int(clock.now * 1000)
    assert set(snapshot.to_dict()) == {"TLSA", "CRCL", "timestamp"}


def test_tick_stays_within_volatility_band(snapshot_store):
    oracle = PriceOracle(snapshot_store, volatility_bps=20.0, drift=0.0, rng=random.Random(3))
    previous = oracle.price(Asset.TLSA)

    for _ in range(50):
        current = oracle.tick().price(Asset.TLSA)
        assert abs(current - previous) <= previous * 0.002 + 0.01
        previous = current


def test_prices_are_clamped(snapshot_store):
    oracle = PriceOracle(
        snapshot_store,
        volatility_bps=0.0,
        drift=-0.9,
        seed_prices={Asset.TLSA: 0.02, Asset.CRCL: 0.02},
    )
    for _ in range(3):
        oracle.tick()

    assert oracle.price(Asset.TLSA) == 0.01
    assert oracle.price(Asset.CRCL) == 0.01


def test_paused_oracle_does_not_tick(paused_oracle):
    assert paused_oracle.tick() is None
    assert paused_oracle.price(Asset.TLSA) == 120.0


def test_pause_and_resume_are_idempotent(oracle):
    oracle.pause()
    oracle.pause()
    assert oracle.is_paused

    oracle.resume()
    oracle.resume()
    assert oracle.state is OracleState.RUNNING


def test_subscribers_receive_each_snapshot(oracle):
    received = []
    oracle.subscribe(received.append)

    oracle.tick()
    oracle.tick()

    assert len(received) == 2
    assert received[-1] == oracle.prices


def test_failing_subscriber_does_not_break_tick(oracle):
    def broken(_snapshot):
        raise RuntimeError("boom")

    received = []
    oracle.subscribe(broken)
    oracle.subscribe(received.append)

    assert oracle.tick() is not None
    assert len(received) == 1


def test_reset_and_set_prices(oracle):
    oracle.tick()
    oracle.set_prices({Asset.TLSA: 99.999})
    assert oracle.price(Asset.TLSA) == 100.0
    assert oracle.price(Asset.CRCL) == 240.05

    oracle.reset()
    assert oracle.price(Asset.TLSA) == 120.0
    assert oracle.price(Asset.CRCL) == 240.0


def test_reset_twice_matches_single_reset(kv_store, oracle):
    oracle.tick()

    oracle.reset()
    once_blob = kv_store.get(PRICES_KEY)
    oracle.reset()

    assert kv_store.get(PRICES_KEY) == once_blob
    assert oracle.price(Asset.TLSA) == 120.0
    assert oracle.price(Asset.CRCL) == 240.0


def test_prices_survive_restart(snapshot_store, oracle):
    oracle.tick()

    restored = PriceOracle(snapshot_store, volatility_bps=0.0)
    assert restored.price(Asset.TLSA) == 120.02


def test_corrupt_prices_blob_falls_back_to_seed(kv_store, snapshot_store):
    kv_store.set(PRICES_KEY, b'{"TLSA": 0, "CRCL": 240}')
    assert PriceOracle(snapshot_store).price(Asset.TLSA) == 120.0


@pytest.mark.asyncio
async def test_no_tick_after_pause_returns(snapshot_store):
    oracle = PriceOracle(snapshot_store, interval_ms=10, volatility_bps=0.0)
    oracle.start()
    await asyncio.sleep(0.08)
    oracle.pause()
    ticks_at_pause = oracle.stats["ticks"]
    prices_at_pause = oracle.prices

    await asyncio.sleep(0.08)

    assert ticks_at_pause > 0
    assert oracle.stats["ticks"] == ticks_at_pause
    assert oracle.prices == prices_at_pause
    assert not oracle.is_ticking

    oracle.resume()
    await asyncio.sleep(0.08)
    assert oracle.stats["ticks"] > ticks_at_pause

    await oracle.stop()
    assert not oracle.is_ticking


@pytest.mark.asyncio
async def test_start_while_paused_waits_for_resume(snapshot_store):
    oracle = PriceOracle(snapshot_store, interval_ms=10, initial_state=OracleState.PAUSED)
    oracle.start()
    await asyncio.sleep(0.05)

    assert oracle.stats["ticks"] == 0
    assert not oracle.is_ticking

    oracle.resume()
    assert oracle.is_ticking
    await oracle.stop()


@pytest.mark.asyncio
async def test_timer_publishes_prices_topic(snapshot_store):
    bus = EventBus()
    queue = await bus.subscribe("prices", "test")
    oracle = PriceOracle(snapshot_store, interval_ms=10, volatility_bps=0.0, publisher=bus)

    oracle.start()
    message = await asyncio.wait_for(queue.get(), timeout=1.0)
    await oracle.stop()

    assert message["event_type"] == "PricesUpdated"
    assert set(message["prices"]) == {"TLSA", "CRCL"}
