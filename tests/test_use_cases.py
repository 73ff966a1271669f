"""Tests for the mint, swap and reset use cases."""

from __future__ import annotations

import math

import pytest

from aptostock.application.dto.trade_dto import RejectionReason
from aptostock.application.use_cases.mint_usecase import MintUseCase
from aptostock.application.use_cases.reset_demo_usecase import ResetDemoUseCase
from aptostock.application.use_cases.swap_usecase import SwapUseCase
from aptostock.domain.entities.pool import Pool
from aptostock.domain.events.domain_events import DemoReset, MintExecuted, SwapExecuted
from aptostock.domain.value_objects.units import Asset, PoolKey, Unit


@pytest.fixture
def mint(balances, paused_oracle) -> MintUseCase:
    return MintUseCase(balances=balances, oracle=paused_oracle)


@pytest.fixture
def swap(balances, pools) -> SwapUseCase:
    return SwapUseCase(balances=balances, pools=pools, fee_rate=0.003)


# ─── Mint ──────────────────────────────────────────────────────────────

def test_mint_at_oracle_price(mint, balances):
    result = mint.execute(Asset.TLSA, 500.0)

    assert result.accepted
    assert result.reason is None
    assert result.amount_out == 4.166667
    assert result.price == 120.0
    assert balances.get(Unit.USDA) == 9_500.0
    assert balances.get(Unit.TLSA) == 4.166667
    assert isinstance(result.event, MintExecuted)
    assert result.event.amount_out == 4.166667


def test_mint_preview_has_no_side_effects(mint, balances):
    assert mint.preview(Asset.CRCL, 480.0) == 2.0
    assert balances.get(Unit.USDA) == 10_000.0


@pytest.mark.parametrize("amount", [0.0, -1.0, math.nan, math.inf])
def test_mint_invalid_amount(mint, balances, amount):
    result = mint.execute(Asset.TLSA, amount)

    assert not result.accepted
    assert result.reason is RejectionReason.INVALID_AMOUNT
    assert result.event is None
    assert balances.get(Unit.USDA) == 10_000.0


def test_mint_insufficient_balance(mint, balances):
    result = mint.execute(Asset.CRCL, 10_000.01)

    assert result.reason is RejectionReason.INSUFFICIENT_BALANCE
    assert balances.to_dict() == {"USDA": 10_000.0, "TLSA": 0.0, "CRCL": 0.0}


def test_mint_without_price(balances):
    class NoPrice:
        def price(self, asset):
            return 0.0

    result = MintUseCase(balances=balances, oracle=NoPrice()).execute(Asset.TLSA, 10.0)

    assert result.reason is RejectionReason.PRICE_UNAVAILABLE
    assert balances.get(Unit.USDA) == 10_000.0


def test_mint_dust_produces_no_output(mint, balances):
    result = mint.execute(Asset.CRCL, 0.0000001)

    assert result.reason is RejectionReason.NO_OUTPUT
    assert balances.get(Unit.USDA) == 10_000.0


def test_mint_result_serialization(mint):
    data = mint.execute(Asset.TLSA, -5.0).to_dict()

    assert data["accepted"] is False
    assert data["reason"] == "invalid_amount"


# ─── Swap ──────────────────────────────────────────────────────────────

def test_swap_stable_to_asset(swap, balances, pools):
    result = swap.execute(Unit.USDA, Unit.TLSA, 1_000.0)

    assert result.accepted
    assert result.pool == "TLSA_USDA"
    assert result.quote.fee_paid == 3.0
    assert result.quote.amount_out == round(1_000 - 120_000_000 / 120_997, 6)
    assert balances.get(Unit.USDA) == 9_000.0
    assert balances.get(Unit.TLSA) == result.quote.amount_out
    assert pools.get_reserves(PoolKey.TLSA_USDA) == (
        round(1_000 - result.quote.amount_out, 6),
        120_997.0,
    )
    assert isinstance(result.event, SwapExecuted)


def test_swap_asset_to_stable_round_trip(swap, balances, pools):
    bought = swap.execute(Unit.USDA, Unit.CRCL, 2_400.0).quote.amount_out
    sold = swap.execute(Unit.CRCL, Unit.USDA, bought)

    assert sold.accepted
    assert balances.get(Unit.CRCL) == 0.0
    # Dos fees pagadas: se recupera menos de lo invertido
    assert balances.get(Unit.USDA) < 10_000.0
    assert balances.get(Unit.USDA) > 9_980.0


def test_quote_matches_execution(swap):
    preview = swap.quote(Unit.USDA, Unit.TLSA, 250.0)
    result = swap.execute(Unit.USDA, Unit.TLSA, 250.0)

    assert preview.supported
    assert preview.quote == result.quote


def test_swap_unsupported_pair_checked_first(swap, balances):
    result = swap.execute(Unit.TLSA, Unit.CRCL, -1.0)

    assert result.reason is RejectionReason.UNSUPPORTED_PAIR
    assert result.pool is None
    assert result.error == "Par no soportado: TLSA → CRCL"
    assert balances.get(Unit.TLSA) == 0.0


def test_swap_quote_for_unsupported_pair_is_zero(swap):
    preview = swap.quote(Unit.USDA, Unit.USDA, 10.0)

    assert not preview.supported
    assert preview.quote.amount_out == 0.0


@pytest.mark.parametrize("amount", [0.0, -3.0, math.nan])
def test_swap_invalid_amount(swap, amount):
    assert swap.execute(Unit.USDA, Unit.TLSA, amount).reason is RejectionReason.INVALID_AMOUNT


def test_swap_insufficient_balance(swap, balances, pools):
    result = swap.execute(Unit.TLSA, Unit.USDA, 1.0)

    assert result.reason is RejectionReason.INSUFFICIENT_BALANCE
    assert pools.get_reserves(PoolKey.TLSA_USDA) == (1_000.0, 120_000.0)


def test_swap_against_exhausted_pool(swap, balances, pools):
    pools.set({PoolKey.TLSA_USDA: Pool(asset=Asset.TLSA, reserve_asset=0.0, reserve_stable=120_000.0)})

    result = swap.execute(Unit.USDA, Unit.TLSA, 100.0)

    assert result.reason is RejectionReason.NO_OUTPUT
    assert balances.get(Unit.USDA) == 10_000.0


def test_swap_against_dust_pool_produces_no_output(swap, balances, pools):
    pools.set({PoolKey.TLSA_USDA: Pool(asset=Asset.TLSA, reserve_asset=0.000001, reserve_stable=1.0)})

    result = swap.execute(Unit.USDA, Unit.TLSA, 5_000.0)

    assert not result.accepted
    assert result.reason is RejectionReason.NO_OUTPUT
    assert pools.get_reserves(PoolKey.TLSA_USDA) == (0.000001, 1.0)
    assert balances.get(Unit.USDA) == 10_000.0


def test_swap_drains_but_never_empties_pool(swap, balances, pools):
    balances.set({Unit.USDA: 10_000_000.0})
    result = swap.execute(Unit.USDA, Unit.TLSA, 10_000_000.0)

    assert result.accepted
    reserve_asset, _ = pools.get_reserves(PoolKey.TLSA_USDA)
    assert reserve_asset > 0


# ─── Reset ─────────────────────────────────────────────────────────────

def test_reset_demo_restores_balances_and_pools(swap, balances, pools):
    swap.execute(Unit.USDA, Unit.TLSA, 1_000.0)

    event = ResetDemoUseCase(balances=balances, pools=pools).execute()

    assert isinstance(event, DemoReset)
    assert balances.to_dict() == {"USDA": 10_000.0, "TLSA": 0.0, "CRCL": 0.0}
    assert pools.get_reserves(PoolKey.TLSA_USDA) == (1_000.0, 120_000.0)
