"""
Bootstrap (crowdfunded pair launch) operations.

A pair in Bootstrap collects contributions of both assets into the engine's
escrow account until `end_block`. If both targets are met it can be ended:
the escrow moves into the pair's reserve account, sqrt(acc0 * acc1) LP is
minted there, and contributors later claim their share (plus any pledged
rewards). If the deadline passes below target the bootstrap is "disabled"
(a predicate, not a stored state) and contributors may refund.
"""

from __future__ import annotations

from typing import List, Tuple

from ..errors import AmountError, CheckedArithmeticError, ConsistencyError, PairStateError
from ..kernels.python.checked_math import balance_add, balance_sub, checked_sub
from ..kernels.python.lp_math import bootstrap_claim_liquidity, bootstrap_total_liquidity, pro_rata_reward
from ..state.balances import AccountId, Amount, AssetId
from ..state.pairs import (
    Bootstrap,
    BootstrapParameter,
    Pair,
    PairMetadata,
    Trading,
    canonical_pair,
    lp_asset_id,
    orient_amounts,
    pair_account_id,
)
from .context import ExecutionContext
from .events import BootstrapClaim, BootstrapContribute, BootstrapEnd, BootstrapRefund, DistributeReward


def _bootstrap_params(ctx: ExecutionContext, pair: Pair) -> BootstrapParameter:
    status = ctx.storage.pair_status(pair)
    if not isinstance(status, Bootstrap):
        raise PairStateError("NotInBootstrap", f"pair {pair[0]}/{pair[1]} is not in bootstrap")
    return status.params


def _clamp_to_capacity(amount: Amount, accumulated: Amount, capacity: Amount) -> Amount:
    if balance_add(amount, accumulated) > capacity:
        return checked_sub(capacity, accumulated)
    return amount


def check_limits(ctx: ExecutionContext, asset_a: AssetId, asset_b: AssetId, account: AccountId) -> bool:
    """True if `account` holds at least every minimum balance in the pair's limit map."""
    pair = canonical_pair(asset_a, asset_b)
    for asset, minimum in sorted(ctx.storage.bootstrap_limits(pair).items()):
        if ctx.ledger.balance_of(asset, account) < minimum:
            return False
    return True


def contribute(
    ctx: ExecutionContext,
    who: AccountId,
    asset_a: AssetId,
    asset_b: AssetId,
    amount_a: Amount,
    amount_b: Amount,
) -> Tuple[Amount, Amount]:
    """
    Contribute to an active bootstrap.

    Each side is clamped to the remaining capacity; the clamped excess is
    neither credited nor moved.

    Returns:
        (amount0, amount1) actually contributed, in canonical pair order
    """
    pair = canonical_pair(asset_a, asset_b)
    params = _bootstrap_params(ctx, pair)
    if not params.is_active(ctx.block_number):
        raise PairStateError(
            "NotInBootstrap",
            f"bootstrap of {pair[0]}/{pair[1]} ended at block {params.end_block}",
        )
    if ctx.config.enforce_bootstrap_limits and not check_limits(ctx, asset_a, asset_b, who):
        raise AmountError("ExceedLimits", f"{who} does not meet the bootstrap limits")

    amount0, amount1 = orient_amounts(pair, asset_a, amount_a, amount_b)
    amount0 = _clamp_to_capacity(amount0, params.accumulated_supply[0], params.capacity_supply[0])
    amount1 = _clamp_to_capacity(amount1, params.accumulated_supply[1], params.capacity_supply[1])
    if amount0 < 1 and amount1 < 1:
        raise AmountError("InvalidContributionAmount", "nothing left to contribute after capacity clamp")

    prior0, prior1 = ctx.storage.contribution(pair, who) or (0, 0)
    ctx.storage.set_contribution(pair, who, (balance_add(prior0, amount0), balance_add(prior1, amount1)))

    escrow = ctx.pallet_account
    ctx.ledger.transfer(pair[0], who, escrow, amount0)
    ctx.ledger.transfer(pair[1], who, escrow, amount1)

    accumulated = (
        balance_add(params.accumulated_supply[0], amount0),
        balance_add(params.accumulated_supply[1], amount1),
    )
    ctx.storage.set_pair_status(pair, Bootstrap(params.with_accumulated(accumulated)))

    ctx.emit(BootstrapContribute(who, pair[0], amount0, pair[1], amount1))
    return amount0, amount1


def end_bootstrap(ctx: ExecutionContext, asset_a: AssetId, asset_b: AssetId) -> Amount:
    """
    Finish a qualified bootstrap and open the pair for trading.

    Returns:
        total LP minted into the pair's reserve account
    """
    pair = canonical_pair(asset_a, asset_b)
    params = _bootstrap_params(ctx, pair)
    if not params.is_qualified(ctx.block_number):
        raise PairStateError(
            "UnqualifiedBootstrap",
            f"bootstrap of {pair[0]}/{pair[1]} has not reached its targets by block {params.end_block}",
        )

    acc0, acc1 = params.accumulated_supply
    total_lp = bootstrap_total_liquidity(acc0, acc1)
    if total_lp == 0:
        raise CheckedArithmeticError("Overflow", "bootstrap mints no LP")

    reserve_account = pair_account_id(*pair)
    ctx.ledger.transfer(pair[0], params.escrow_account, reserve_account, acc0)
    ctx.ledger.transfer(pair[1], params.escrow_account, reserve_account, acc1)
    ctx.ledger.deposit(lp_asset_id(*pair), reserve_account, total_lp)

    ctx.storage.set_pair_status(pair, Trading(PairMetadata(reserve_account, total_lp)))
    ctx.storage.set_bootstrap_end_status(pair, Bootstrap(params))

    ctx.emit(BootstrapEnd(pair[0], pair[1], acc0, acc1, total_lp))
    return total_lp


def _distribute_rewards(
    ctx: ExecutionContext,
    pair: Pair,
    owner: AccountId,
    reward_holder: AccountId,
    share_lp: Amount,
    total_lp: Amount,
) -> None:
    paid: List[Tuple[AssetId, Amount]] = []
    for asset, reward in sorted(ctx.storage.bootstrap_rewards(pair).items()):
        owner_reward = pro_rata_reward(share_lp, reward, total_lp)
        ctx.ledger.transfer(asset, reward_holder, owner, owner_reward)
        paid.append((asset, owner_reward))
    if paid:
        ctx.emit(DistributeReward(pair[0], pair[1], reward_holder, tuple(paid)))


def claim(ctx: ExecutionContext, who: AccountId, recipient: AccountId, asset_a: AssetId, asset_b: AssetId) -> Amount:
    """
    Claim the LP share (and pledged rewards) of a successful bootstrap.

    LP goes to `recipient`; rewards go to `who`. Each contribution can be
    claimed once.
    """
    pair = canonical_pair(asset_a, asset_b)
    if not isinstance(ctx.storage.pair_status(pair), Trading):
        raise PairStateError("NotInBootstrap", f"pair {pair[0]}/{pair[1]} is not trading")

    contribution = ctx.storage.take_contribution(pair, who)
    if contribution is None:
        raise AmountError("ZeroContribute", f"{who} has no contribution to {pair[0]}/{pair[1]}")
    contribution0, contribution1 = contribution

    snapshot = ctx.storage.bootstrap_end_status(pair)
    if snapshot is None:
        raise PairStateError("NotInBootstrap", f"pair {pair[0]}/{pair[1]} was not bootstrapped")
    params = snapshot.params
    if params.is_disabled(ctx.block_number):
        raise ConsistencyError("DisableBootstrap", f"bootstrap of {pair[0]}/{pair[1]} did not reach its targets")

    acc0, acc1 = params.accumulated_supply
    claim_lp = bootstrap_claim_liquidity(
        contribution0=contribution0,
        contribution1=contribution1,
        accumulated0=acc0,
        accumulated1=acc1,
    )

    reserve_account = pair_account_id(*pair)
    ctx.ledger.transfer(lp_asset_id(*pair), reserve_account, recipient, claim_lp)

    total_lp = bootstrap_total_liquidity(acc0, acc1)
    _distribute_rewards(ctx, pair, who, params.escrow_account, claim_lp, total_lp)

    ctx.emit(
        BootstrapClaim(reserve_account, who, recipient, pair[0], pair[1], contribution0, contribution1, claim_lp)
    )
    return claim_lp


def refund(ctx: ExecutionContext, who: AccountId, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
    """
    Return a contribution to a bootstrap that expired below target.

    Allowed only while the live (or, once the pair has moved on, the
    snapshotted) bootstrap is disabled.
    """
    pair = canonical_pair(asset_a, asset_b)
    now = ctx.block_number
    status = ctx.storage.pair_status(pair)
    if isinstance(status, Bootstrap):
        refundable = status.params.is_disabled(now)
    else:
        snapshot = ctx.storage.bootstrap_end_status(pair)
        refundable = snapshot is not None and snapshot.params.is_disabled(now)
    if not refundable:
        raise ConsistencyError("DenyRefund", f"bootstrap of {pair[0]}/{pair[1]} is not refundable")

    contribution = ctx.storage.take_contribution(pair, who)
    if contribution is None:
        raise AmountError("ZeroContribute", f"{who} has no contribution to {pair[0]}/{pair[1]}")
    amount0, amount1 = contribution

    escrow = ctx.pallet_account
    ctx.ledger.transfer(pair[0], escrow, who, amount0)
    ctx.ledger.transfer(pair[1], escrow, who, amount1)

    if isinstance(status, Bootstrap):
        params = status.params
        accumulated = (
            balance_sub(params.accumulated_supply[0], amount0),
            balance_sub(params.accumulated_supply[1], amount1),
        )
        ctx.storage.set_pair_status(pair, Bootstrap(params.with_accumulated(accumulated)))

    ctx.emit(BootstrapRefund(escrow, who, pair[0], pair[1], amount0, amount1))
    return amount0, amount1
