# [TESTER] v1

from __future__ import annotations

from typing import Tuple

import pytest

from bootswap.core import EngineConfig, LiquidityAdded, LiquidityRemoved, SwapEngine
from bootswap.errors import AmountError, PairStateError
from bootswap.state import BalanceTable, PairMetadata, Trading

ASSET_A = "0x" + "01" * 32
ASSET_B = "0x" + "02" * 32
PROVIDER = "provider"
BOB = "bob"
CAROL = "carol"


def _engine() -> Tuple[SwapEngine, BalanceTable]:
    balances = BalanceTable()
    return SwapEngine(balances, EngineConfig()), balances


def _open_pair(engine: SwapEngine, balances: BalanceTable, reserve_a: int, reserve_b: int) -> int:
    engine.create_pair(ASSET_A, ASSET_B)
    balances.deposit(ASSET_A, PROVIDER, reserve_a)
    balances.deposit(ASSET_B, PROVIDER, reserve_b)
    return engine.add_liquidity(PROVIDER, ASSET_A, ASSET_B, reserve_a, reserve_b, 0, 0)


def test_first_deposit_mints_sqrt_of_product() -> None:
    engine, balances = _engine()
    minted = _open_pair(engine, balances, 1000, 4000)

    assert minted == 2000
    lp = engine.lp_asset_id(ASSET_A, ASSET_B)
    assert balances.get(PROVIDER, lp) == 2000
    assert engine.get_reserves(ASSET_A, ASSET_B) == (1000, 4000)
    assert engine.pair_status(ASSET_A, ASSET_B) == Trading(
        PairMetadata(engine.pair_account_id(ASSET_A, ASSET_B), 2000)
    )
    assert engine.events[-1] == LiquidityAdded(PROVIDER, ASSET_A, ASSET_B, 1000, 4000, 2000)


def test_second_deposit_is_sized_to_the_pool_ratio() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)
    balances.deposit(ASSET_A, BOB, 100)
    balances.deposit(ASSET_B, BOB, 1000)

    # Arguments in reverse asset order are reoriented to the canonical pair.
    minted = engine.add_liquidity(BOB, ASSET_B, ASSET_A, 1000, 100, 0, 0)

    assert minted == 200
    assert balances.get(BOB, ASSET_A) == 0
    assert balances.get(BOB, ASSET_B) == 600
    assert engine.get_reserves(ASSET_A, ASSET_B) == (1100, 4400)
    assert engine.pair_status(ASSET_A, ASSET_B).metadata.total_supply == 2200


def test_matched_amount_below_minimum_is_rejected() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)
    balances.deposit(ASSET_A, BOB, 100)
    balances.deposit(ASSET_B, BOB, 1000)

    with pytest.raises(AmountError, match="IncorrectAssetAmountRange"):
        engine.add_liquidity(BOB, ASSET_A, ASSET_B, 100, 1000, 0, 500)


def test_dust_deposit_mints_nothing() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)
    balances.deposit(ASSET_A, BOB, 1)
    balances.deposit(ASSET_B, BOB, 1)

    with pytest.raises(AmountError, match="ZeroLiquidity"):
        engine.add_liquidity(BOB, ASSET_A, ASSET_B, 1, 1, 0, 0)


def test_deposit_requires_trading_pair_and_funds() -> None:
    engine, balances = _engine()
    with pytest.raises(PairStateError, match="InvalidStatus"):
        engine.add_liquidity(BOB, ASSET_A, ASSET_B, 10, 10, 0, 0)

    _open_pair(engine, balances, 1000, 1000)
    with pytest.raises(AmountError, match="InsufficientAssetBalance"):
        engine.add_liquidity(BOB, ASSET_A, ASSET_B, 10, 10, 0, 0)


def test_remove_liquidity_pays_pro_rata_to_recipient() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)

    out = engine.remove_liquidity(PROVIDER, ASSET_A, ASSET_B, 1000, 0, 0, CAROL)

    assert out == (500, 2000)
    assert balances.get(CAROL, ASSET_A) == 500
    assert balances.get(CAROL, ASSET_B) == 2000
    assert balances.get(PROVIDER, engine.lp_asset_id(ASSET_A, ASSET_B)) == 1000
    assert engine.pair_status(ASSET_A, ASSET_B).metadata.total_supply == 1000
    assert engine.events[-1] == LiquidityRemoved(PROVIDER, CAROL, ASSET_A, ASSET_B, 500, 2000, 1000)


def test_remove_liquidity_min_bounds_follow_argument_order() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)

    with pytest.raises(AmountError, match="InsufficientTargetAmount"):
        engine.remove_liquidity(PROVIDER, ASSET_A, ASSET_B, 1000, 501, 0, CAROL)
    # (asset_b, asset_a) order: min 2000 of B, min 500 of A are exactly met
    assert engine.remove_liquidity(PROVIDER, ASSET_B, ASSET_A, 1000, 2000, 500, CAROL) == (500, 2000)


def test_burning_more_than_supply_fails_cleanly() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)
    root = engine.state_root()

    with pytest.raises(AmountError, match="InsufficientLiquidity"):
        engine.remove_liquidity(PROVIDER, ASSET_A, ASSET_B, 3000, 0, 0, CAROL)
    with pytest.raises(AmountError, match="InsufficientAssetBalance"):
        engine.remove_liquidity(BOB, ASSET_A, ASSET_B, 100, 0, 0, BOB)

    assert engine.state_root() == root


def test_deposit_then_withdraw_returns_no_more_than_deposited() -> None:
    engine, balances = _engine()
    _open_pair(engine, balances, 1000, 4000)
    balances.deposit(ASSET_A, BOB, 100)
    balances.deposit(ASSET_B, BOB, 400)

    minted = engine.add_liquidity(BOB, ASSET_A, ASSET_B, 100, 400, 0, 0)
    out = engine.remove_liquidity(BOB, ASSET_A, ASSET_B, minted, 0, 0, BOB)

    assert out[0] <= 100 and out[1] <= 400
    assert balances.get(BOB, ASSET_A) <= 100
    assert balances.get(BOB, ASSET_B) <= 400


def test_burning_from_an_empty_pair_is_insufficient_liquidity() -> None:
    engine, _ = _engine()
    engine.create_pair(ASSET_A, ASSET_B)
    root = engine.state_root()

    with pytest.raises(AmountError, match="InsufficientLiquidity"):
        engine.remove_liquidity(BOB, ASSET_A, ASSET_B, 10, 0, 0, BOB)

    assert engine.state_root() == root


def test_disabled_pair_is_named_in_the_status_error() -> None:
    engine, _ = _engine()
    with pytest.raises(PairStateError, match="is Disabled, not Trading"):
        engine.remove_liquidity(BOB, ASSET_A, ASSET_B, 10, 0, 0, BOB)
