"""Tests for price history ingestion, backfill and candle derivation."""

from __future__ import annotations

import random

import pytest

from aptostock.domain.services.candle_aggregator import bucket_start, to_candles
from aptostock.domain.value_objects.price import PricePoint, PriceSnapshot
from aptostock.domain.value_objects.units import Asset
from aptostock.state.price_history import PriceHistory
from aptostock.state.snapshots import HISTORY_KEY


def _snapshot(tlsa: float, crcl: float, ts: int) -> PriceSnapshot:
    return PriceSnapshot(prices={Asset.TLSA: tlsa, Asset.CRCL: crcl}, timestamp=ts)


# ─── Ingesta ───────────────────────────────────────────────────────────

def test_record_skips_unchanged_price(history):
    assert history.record(Asset.TLSA, 120.0, 1_000)
    assert not history.record(Asset.TLSA, 120.0, 2_000)
    assert history.record(Asset.TLSA, 120.5, 3_000)

    assert [pt.to_dict() for pt in history.points(Asset.TLSA)] == [
        {"t": 1_000, "p": 120.0},
        {"t": 3_000, "p": 120.5},
    ]


def test_on_price_snapshot_dedups_per_asset(history):
    history.on_price_snapshot(_snapshot(120.0, 240.0, 1_000))
    history.on_price_snapshot(_snapshot(120.0, 241.0, 2_000))

    assert len(history.points(Asset.TLSA)) == 1
    assert len(history.points(Asset.CRCL)) == 2


def test_history_is_capped_fifo(snapshot_store):
    history = PriceHistory(snapshot_store, max_points=3)
    for i in range(5):
        history.record(Asset.CRCL, 100.0 + i, i * 1_000)

    assert [pt.p for pt in history.points(Asset.CRCL)] == [102.0, 103.0, 104.0]


def test_default_cap_is_600(history):
    for i in range(650):
        history.record(Asset.TLSA, 100.0 + i * 0.01, i)

    points = history.points(Asset.TLSA)
    assert len(points) == 600
    assert points[0].t == 50


def test_points_count(history):
    for i in range(5):
        history.record(Asset.TLSA, 1.0 + i, i)

    assert len(history.points(Asset.TLSA, 2)) == 2
    assert history.points(Asset.TLSA, 0) == []


def test_history_survives_restart(snapshot_store):
    history = PriceHistory(snapshot_store)
    history.on_price_snapshot(_snapshot(120.0, 240.0, 1_000))

    restored = PriceHistory(snapshot_store)
    assert restored.has_history
    # La memoria de deduplicación se restaura con el último punto
    assert not restored.record(Asset.TLSA, 120.0, 2_000)


def test_reset_clears_points_and_dedup(history):
    history.on_price_snapshot(_snapshot(120.0, 240.0, 1_000))
    history.reset()

    assert not history.has_history
    assert history.record(Asset.TLSA, 120.0, 2_000)


def test_reset_twice_matches_single_reset(kv_store, history):
    history.on_price_snapshot(_snapshot(120.0, 240.0, 1_000))
    history.on_price_snapshot(_snapshot(121.0, 241.0, 2_000))

    history.reset()
    once_blob = kv_store.get(HISTORY_KEY)
    history.reset()

    assert kv_store.get(HISTORY_KEY) == once_blob
    assert history.to_dict() == {"TLSA": [], "CRCL": []}
    assert history.record(Asset.CRCL, 240.0, 3_000)


def test_corrupt_history_blob_is_ignored(kv_store, snapshot_store):
    kv_store.set(HISTORY_KEY, b'{"TLSA": [{"t": 1, "p": -3}], "CRCL": []}')
    assert not PriceHistory(snapshot_store).has_history


# ─── Backfill ──────────────────────────────────────────────────────────

def test_backfill_seeds_points_walking_backward(history):
    snapshot = _snapshot(120.0, 240.0, 0)
    generated = history.seed_backfill(snapshot, now_ms=10_000_000)

    assert generated == 240
    points = history.points(Asset.TLSA)
    assert len(points) == 240
    assert points[-1] == PricePoint(t=10_000_000, p=120.0)
    assert points[0].t == 10_000_000 - 239 * 5_000
    assert all(b.t - a.t == 5_000 for a, b in zip(points, points[1:]))
    assert all(abs(b.p - a.p) <= a.p * 0.0041 + 0.01 for a, b in zip(points, points[1:]))


def test_backfill_uses_injected_clock(history, clock):
    history.seed_backfill(_snapshot(120.0, 240.0, 0))

    assert history.points(Asset.CRCL)[-1] == PricePoint(t=int(clock.now * 1000), p=240.0)


def test_backfill_runs_once_per_session(history):
    snapshot = _snapshot(120.0, 240.0, 0)
    history.seed_backfill(snapshot, now_ms=10_000_000)
    history.reset()

    assert history.seed_backfill(snapshot, now_ms=20_000_000) == 0
    assert not history.has_history


def test_backfill_skipped_when_history_was_stored(snapshot_store):
    PriceHistory(snapshot_store).on_price_snapshot(_snapshot(120.0, 240.0, 1_000))

    restored = PriceHistory(snapshot_store)
    assert restored.seed_backfill(_snapshot(120.0, 240.0, 0), now_ms=10_000_000) == 0
    assert len(restored.points(Asset.TLSA)) == 1


def test_backfill_bounded_by_cap(snapshot_store):
    history = PriceHistory(snapshot_store, max_points=50, rng=random.Random(1))
    assert history.seed_backfill(_snapshot(120.0, 240.0, 0), now_ms=1_000_000) == 50


def test_next_tick_after_backfill_is_deduplicated(history):
    snapshot = _snapshot(120.0, 240.0, 0)
    history.seed_backfill(snapshot, now_ms=10_000_000)
    history.on_price_snapshot(_snapshot(120.0, 240.0, 10_003_000))

    assert len(history.points(Asset.TLSA)) == 240


# ─── Velas ─────────────────────────────────────────────────────────────

def test_bucket_start():
    assert bucket_start(0, 10_000) == 0
    assert bucket_start(9_999, 10_000) == 0
    assert bucket_start(10_000, 10_000) == 10_000


def test_two_points_in_one_bucket():
    candles = to_candles([PricePoint(1_000, 10.0), PricePoint(6_000, 12.0)], 10_000)

    assert len(candles) == 1
    candle = candles[0]
    assert (candle.timestamp, candle.open, candle.high, candle.low, candle.close) == (0, 10.0, 12.0, 10.0, 12.0)
    assert candle.tick_count == 2


def test_candles_follow_arrival_order_within_bucket():
    points = [PricePoint(5_000, 11.0), PricePoint(1_000, 9.0), PricePoint(3_000, 10.0)]
    candle = to_candles(points, 10_000)[0]

    assert candle.open == 11.0
    assert candle.close == 10.0
    assert candle.low == 9.0
    assert candle.high == 11.0


def test_candles_sorted_and_limited_to_last_sixty():
    points = [PricePoint(t * 10_000, 100.0 + (t % 7)) for t in reversed(range(80))]
    candles = to_candles(points, 10_000)

    assert len(candles) == 60
    assert [c.timestamp for c in candles] == [t * 10_000 for t in range(20, 80)]
    for c in candles:
        assert c.low <= min(c.open, c.close) <= max(c.open, c.close) <= c.high


def test_to_candles_empty_and_invalid_frame():
    assert to_candles([], 10_000) == []
    with pytest.raises(ValueError):
        to_candles([PricePoint(0, 1.0)], 0)


def test_history_candles_use_default_frame(history):
    history.record(Asset.TLSA, 10.0, 1_000)
    history.record(Asset.TLSA, 12.0, 6_000)
    history.record(Asset.TLSA, 11.0, 12_000)

    assert [c.timestamp for c in history.candles(Asset.TLSA)] == [0, 10_000]
    assert [c.timestamp for c in history.candles(Asset.TLSA, 60_000)] == [0]
    assert history.candles(Asset.TLSA)[0].symbol == "TLSA"
