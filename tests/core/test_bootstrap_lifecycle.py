# [TESTER] v1

from __future__ import annotations

from typing import Tuple

import pytest

from bootswap.core import (
    BootstrapClaim,
    BootstrapEnd,
    BootstrapRefund,
    DistributeReward,
    EngineConfig,
    SwapEngine,
)
from bootswap.errors import AmountError, ConsistencyError, PairStateError
from bootswap.state import BalanceTable, Bootstrap, PairMetadata, Trading

ASSET_A = "0x" + "01" * 32
ASSET_B = "0x" + "02" * 32
ASSET_C = "0x" + "03" * 32
REWARD = "0x" + "0f" * 32
ALICE = "alice"
ALICE_WALLET = "alice-wallet"
BOB = "bob"
CAROL = "carol"
SPONSOR = "sponsor"


def _launch(
    target: Tuple[int, int] = (1000, 1000),
    capacity: Tuple[int, int] = (2000, 2000),
    end_block: int = 10,
    **config,
) -> Tuple[SwapEngine, BalanceTable]:
    balances = BalanceTable()
    engine = SwapEngine(balances, EngineConfig(**config))
    engine.bootstrap_create(ASSET_A, ASSET_B, target, capacity, end_block, rewards=[REWARD])
    return engine, balances


def _fund(balances: BalanceTable, who: str, amount_a: int, amount_b: int) -> None:
    balances.deposit(ASSET_A, who, amount_a)
    balances.deposit(ASSET_B, who, amount_b)


def _accumulated(engine: SwapEngine) -> Tuple[int, int]:
    return engine.pair_status(ASSET_A, ASSET_B).params.accumulated_supply


def test_successful_bootstrap_end_and_claims() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 1000, 1000)
    _fund(balances, BOB, 1000, 1000)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 1000, 1000)
    engine.contribute(BOB, ASSET_A, ASSET_B, 1000, 1000)

    escrow = engine.config.pallet_account
    assert _accumulated(engine) == (2000, 2000)
    assert balances.get(escrow, ASSET_A) == 2000

    engine.set_block_number(9)
    with pytest.raises(PairStateError, match="UnqualifiedBootstrap"):
        engine.end_bootstrap(ASSET_A, ASSET_B)

    engine.set_block_number(10)
    assert engine.end_bootstrap(ASSET_A, ASSET_B) == 2000

    account = engine.pair_account_id(ASSET_A, ASSET_B)
    lp = engine.lp_asset_id(ASSET_A, ASSET_B)
    assert engine.pair_status(ASSET_A, ASSET_B) == Trading(PairMetadata(account, 2000))
    assert engine.get_reserves(ASSET_A, ASSET_B) == (2000, 2000)
    assert balances.get(account, lp) == 2000
    assert balances.get(escrow, ASSET_A) == 0
    assert engine.bootstrap_end_snapshot(ASSET_A, ASSET_B).params.accumulated_supply == (2000, 2000)
    assert BootstrapEnd(ASSET_A, ASSET_B, 2000, 2000, 2000) in engine.events

    assert engine.claim(ALICE, ALICE_WALLET, ASSET_A, ASSET_B) == 1000
    assert balances.get(ALICE_WALLET, lp) == 1000
    assert engine.events[-1] == BootstrapClaim(account, ALICE, ALICE_WALLET, ASSET_A, ASSET_B, 1000, 1000, 1000)
    with pytest.raises(AmountError, match="ZeroContribute"):
        engine.claim(ALICE, ALICE_WALLET, ASSET_A, ASSET_B)

    assert engine.claim(BOB, BOB, ASSET_B, ASSET_A) == 1000
    assert balances.get(account, lp) == 0


def test_contributions_close_at_the_deadline() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 10, 10)
    engine.set_block_number(10)
    with pytest.raises(PairStateError, match="NotInBootstrap"):
        engine.contribute(ALICE, ASSET_A, ASSET_B, 10, 10)


def test_end_requires_both_targets() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 1000, 500)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 1000, 500)
    engine.set_block_number(10)
    with pytest.raises(PairStateError, match="UnqualifiedBootstrap"):
        engine.end_bootstrap(ASSET_A, ASSET_B)


def test_operations_on_a_pair_outside_bootstrap() -> None:
    balances = BalanceTable()
    engine = SwapEngine(balances, EngineConfig())
    with pytest.raises(PairStateError, match="NotInBootstrap"):
        engine.end_bootstrap(ASSET_A, ASSET_B)
    with pytest.raises(PairStateError, match="NotInBootstrap"):
        engine.contribute(ALICE, ASSET_A, ASSET_B, 1, 1)
    with pytest.raises(PairStateError, match="NotInBootstrap"):
        engine.claim(ALICE, ALICE, ASSET_A, ASSET_B)


def test_contributions_are_clamped_to_capacity() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 1500, 1500)
    _fund(balances, BOB, 1000, 300)
    _fund(balances, CAROL, 100, 500)

    assert engine.contribute(ALICE, ASSET_A, ASSET_B, 1500, 1500) == (1500, 1500)
    assert engine.contribute(BOB, ASSET_A, ASSET_B, 1000, 300) == (500, 300)
    assert balances.get(BOB, ASSET_A) == 500
    assert engine.contribution_of(ASSET_A, ASSET_B, BOB) == (500, 300)
    assert _accumulated(engine) == (2000, 1800)

    with pytest.raises(AmountError, match="InvalidContributionAmount"):
        engine.contribute(CAROL, ASSET_A, ASSET_B, 100, 0)
    assert engine.contribute(CAROL, ASSET_A, ASSET_B, 100, 500) == (0, 200)
    assert _accumulated(engine) == (2000, 2000)


def test_repeat_contributions_accumulate() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 300, 300)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 100, 200)
    engine.contribute(ALICE, ASSET_B, ASSET_A, 100, 200)
    assert engine.contribution_of(ASSET_A, ASSET_B, ALICE) == (300, 300)


def test_refund_after_failed_bootstrap() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 500, 300)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 500, 300)

    engine.set_block_number(10)
    with pytest.raises(ConsistencyError, match="DenyRefund"):
        engine.refund(ALICE, ASSET_A, ASSET_B)

    engine.set_block_number(11)
    assert engine.is_bootstrap_disabled(ASSET_A, ASSET_B)
    assert engine.refund(ALICE, ASSET_A, ASSET_B) == (500, 300)
    assert balances.get(ALICE, ASSET_A) == 500
    assert balances.get(ALICE, ASSET_B) == 300
    assert _accumulated(engine) == (0, 0)
    assert engine.events[-1] == BootstrapRefund(engine.config.pallet_account, ALICE, ASSET_A, ASSET_B, 500, 300)

    with pytest.raises(AmountError, match="ZeroContribute"):
        engine.refund(ALICE, ASSET_A, ASSET_B)


def test_no_refund_after_successful_bootstrap() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 1000, 1000)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 1000, 1000)
    engine.set_block_number(10)
    engine.end_bootstrap(ASSET_A, ASSET_B)

    engine.set_block_number(100)
    with pytest.raises(ConsistencyError, match="DenyRefund"):
        engine.refund(ALICE, ASSET_A, ASSET_B)


def test_claim_needs_an_end_snapshot() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 500, 300)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 500, 300)

    # expired below target, then opened for trading by the admin
    engine.set_block_number(11)
    engine.create_pair(ASSET_A, ASSET_B)

    with pytest.raises(PairStateError, match="NotInBootstrap"):
        engine.claim(ALICE, ALICE, ASSET_A, ASSET_B)
    assert engine.contribution_of(ASSET_A, ASSET_B, ALICE) == (500, 300)


def test_claim_pays_pro_rata_rewards_to_contributor() -> None:
    engine, balances = _launch()
    balances.deposit(REWARD, SPONSOR, 300)
    engine.bootstrap_charge_reward(SPONSOR, ASSET_A, ASSET_B, {REWARD: 300})
    _fund(balances, ALICE, 1000, 1000)
    _fund(balances, BOB, 1000, 1000)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 1000, 1000)
    engine.contribute(BOB, ASSET_A, ASSET_B, 1000, 1000)
    engine.set_block_number(10)
    engine.end_bootstrap(ASSET_A, ASSET_B)

    escrow = engine.config.pallet_account
    engine.claim(ALICE, ALICE_WALLET, ASSET_A, ASSET_B)
    assert balances.get(ALICE, REWARD) == 150
    assert balances.get(ALICE_WALLET, REWARD) == 0
    assert DistributeReward(ASSET_A, ASSET_B, escrow, ((REWARD, 150),)) in engine.events

    engine.claim(BOB, BOB, ASSET_A, ASSET_B)
    assert balances.get(BOB, REWARD) == 150
    assert balances.get(escrow, REWARD) == 0
    # the pledged total is kept for pro-rata math of later claims
    assert engine.bootstrap_rewards(ASSET_A, ASSET_B) == {REWARD: 300}


def test_one_sided_contributions_share_by_value() -> None:
    engine, balances = _launch(target=(500, 500), capacity=(5000, 5000))
    _fund(balances, ALICE, 1000, 0)
    _fund(balances, BOB, 0, 4000)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 1000, 0)
    engine.contribute(BOB, ASSET_A, ASSET_B, 0, 4000)

    engine.set_block_number(10)
    assert engine.end_bootstrap(ASSET_A, ASSET_B) == 2000
    assert engine.claim(ALICE, ALICE, ASSET_A, ASSET_B) == 1000
    assert engine.claim(BOB, BOB, ASSET_A, ASSET_B) == 1000


def test_limits_are_enforced_when_configured() -> None:
    balances = BalanceTable()
    engine = SwapEngine(balances, EngineConfig(enforce_bootstrap_limits=True))
    engine.bootstrap_create(ASSET_A, ASSET_B, (1000, 1000), (2000, 2000), 10, limits={ASSET_C: 50})
    _fund(balances, ALICE, 10, 10)

    assert not engine.check_limits(ASSET_A, ASSET_B, ALICE)
    with pytest.raises(AmountError, match="ExceedLimits"):
        engine.contribute(ALICE, ASSET_A, ASSET_B, 10, 10)

    balances.deposit(ASSET_C, ALICE, 50)
    assert engine.check_limits(ASSET_A, ASSET_B, ALICE)
    assert engine.contribute(ALICE, ASSET_A, ASSET_B, 10, 10) == (10, 10)


def test_limits_are_advisory_by_default() -> None:
    balances = BalanceTable()
    engine = SwapEngine(balances, EngineConfig())
    engine.bootstrap_create(ASSET_A, ASSET_B, (1000, 1000), (2000, 2000), 10, limits={ASSET_C: 50})
    _fund(balances, ALICE, 10, 10)

    assert not engine.check_limits(ASSET_A, ASSET_B, ALICE)
    assert engine.contribute(ALICE, ASSET_A, ASSET_B, 10, 10) == (10, 10)
    assert isinstance(engine.pair_status(ASSET_A, ASSET_B), Bootstrap)


def test_contributing_to_a_saturated_bootstrap_fails() -> None:
    engine, balances = _launch()
    _fund(balances, ALICE, 2000, 2000)
    _fund(balances, BOB, 5, 5)
    engine.contribute(ALICE, ASSET_A, ASSET_B, 2000, 2000)

    with pytest.raises(AmountError, match="InvalidContributionAmount"):
        engine.contribute(BOB, ASSET_A, ASSET_B, 5, 5)

    assert _accumulated(engine) == (2000, 2000)
    assert balances.get(BOB, ASSET_A) == 5
    assert balances.get(BOB, ASSET_B) == 5
    assert engine.contribution_of(ASSET_A, ASSET_B, BOB) == (0, 0)
