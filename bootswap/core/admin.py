"""
Administrative pair configuration.

Callers are assumed to be authorized already; these operations only check
that the requested transition is valid for the pair's current status.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple

from ..errors import AmountError, ConsistencyError, PairStateError
from ..kernels.python.checked_math import balance_add
from ..state.balances import AccountId, Amount, AssetId
from ..state.pairs import (
    Bootstrap,
    BootstrapParameter,
    Disabled,
    Pair,
    PairMetadata,
    Trading,
    canonical_pair,
    orient_amounts,
    pair_account_id,
)
from ..state.storage import FeeMeta
from .context import ExecutionContext
from .events import (
    BootstrapCreated,
    BootstrapUpdated,
    ChargeReward,
    FeeMetaUpdated,
    PairCreated,
    WithdrawReward,
)


def create_pair(ctx: ExecutionContext, asset_a: AssetId, asset_b: AssetId) -> Pair:
    """Open a pair for trading with empty reserves (also replaces a disabled bootstrap)."""
    pair = canonical_pair(asset_a, asset_b)
    status = ctx.storage.pair_status(pair)
    if isinstance(status, Trading) or (
        isinstance(status, Bootstrap) and not status.params.is_disabled(ctx.block_number)
    ):
        raise PairStateError("PairAlreadyExists", f"pair {pair[0]}/{pair[1]} already exists")

    ctx.storage.set_pair_status(pair, Trading(PairMetadata(pair_account_id(*pair), 0)))
    ctx.emit(PairCreated(pair[0], pair[1]))
    return pair


def _bootstrap_parameter(
    ctx: ExecutionContext,
    pair: Pair,
    asset_a: AssetId,
    target: Tuple[Amount, Amount],
    capacity: Tuple[Amount, Amount],
    accumulated: Tuple[Amount, Amount],
    end_block: int,
) -> BootstrapParameter:
    target0, target1 = orient_amounts(pair, asset_a, target[0], target[1])
    capacity0, capacity1 = orient_amounts(pair, asset_a, capacity[0], capacity[1])
    try:
        params = BootstrapParameter(
            target_supply=(target0, target1),
            capacity_supply=(capacity0, capacity1),
            accumulated_supply=accumulated,
            end_block=end_block,
            escrow_account=ctx.pallet_account,
        )
    except (TypeError, ValueError) as exc:
        raise AmountError("InvalidBootstrapParameter", str(exc)) from exc
    if target0 > capacity0 or target1 > capacity1:
        raise AmountError(
            "InvalidBootstrapParameter",
            f"target ({target0}, {target1}) exceeds capacity ({capacity0}, {capacity1})",
        )
    if accumulated[0] > capacity0 or accumulated[1] > capacity1:
        raise AmountError(
            "InvalidBootstrapParameter",
            f"accumulated {accumulated} exceeds capacity ({capacity0}, {capacity1})",
        )
    return params


def _install_bootstrap(
    ctx: ExecutionContext,
    pair: Pair,
    params: BootstrapParameter,
    rewards: Iterable[AssetId],
    limits: Mapping[AssetId, Amount],
) -> None:
    for asset, amount in ctx.storage.bootstrap_rewards(pair).items():
        if amount != 0:
            raise ConsistencyError(
                "ExistRewardsInBootstrap",
                f"pair {pair[0]}/{pair[1]} still holds {amount} {asset} of rewards",
            )
    for asset, minimum in limits.items():
        if not isinstance(minimum, int) or isinstance(minimum, bool) or minimum < 0:
            raise AmountError("InvalidBootstrapParameter", f"limit for {asset} must be a non-negative int")

    ctx.storage.set_pair_status(pair, Bootstrap(params))
    ctx.storage.set_bootstrap_rewards(pair, {asset: 0 for asset in rewards})
    ctx.storage.set_bootstrap_limits(pair, limits)


def bootstrap_create(
    ctx: ExecutionContext,
    asset_a: AssetId,
    asset_b: AssetId,
    target: Tuple[Amount, Amount],
    capacity: Tuple[Amount, Amount],
    end_block: int,
    rewards: Iterable[AssetId] = (),
    limits: Optional[Mapping[AssetId, Amount]] = None,
) -> BootstrapParameter:
    """
    Put a pair into Bootstrap.

    `target` and `capacity` are given in (asset_a, asset_b) order. A disabled
    bootstrap may be reconfigured; its accumulated supply is kept.
    """
    pair = canonical_pair(asset_a, asset_b)
    status = ctx.storage.pair_status(pair)
    if isinstance(status, Trading):
        raise PairStateError("PairAlreadyExists", f"pair {pair[0]}/{pair[1]} is already trading")
    if isinstance(status, Bootstrap):
        if not status.params.is_disabled(ctx.block_number):
            raise PairStateError("PairAlreadyExists", f"pair {pair[0]}/{pair[1]} is already in bootstrap")
        accumulated = status.params.accumulated_supply
    else:
        accumulated = (0, 0)

    params = _bootstrap_parameter(ctx, pair, asset_a, target, capacity, accumulated, end_block)
    _install_bootstrap(ctx, pair, params, rewards, dict(limits or {}))
    ctx.emit(BootstrapCreated(pair[0], pair[1], params.target_supply, params.capacity_supply, end_block))
    return params


def bootstrap_update(
    ctx: ExecutionContext,
    asset_a: AssetId,
    asset_b: AssetId,
    target: Tuple[Amount, Amount],
    capacity: Tuple[Amount, Amount],
    end_block: int,
    rewards: Iterable[AssetId] = (),
    limits: Optional[Mapping[AssetId, Amount]] = None,
) -> BootstrapParameter:
    """Reconfigure a pair already in Bootstrap (active or not), keeping its accumulated supply."""
    pair = canonical_pair(asset_a, asset_b)
    status = ctx.storage.pair_status(pair)
    if isinstance(status, Trading):
        raise PairStateError("PairAlreadyExists", f"pair {pair[0]}/{pair[1]} is already trading")
    if isinstance(status, Disabled):
        raise PairStateError("NotInBootstrap", f"pair {pair[0]}/{pair[1]} is not in bootstrap")

    params = _bootstrap_parameter(
        ctx, pair, asset_a, target, capacity, status.params.accumulated_supply, end_block
    )
    _install_bootstrap(ctx, pair, params, rewards, dict(limits or {}))
    ctx.emit(BootstrapUpdated(pair[0], pair[1], params.target_supply, params.capacity_supply, end_block))
    return params


def bootstrap_charge_reward(
    ctx: ExecutionContext,
    charger: AccountId,
    asset_a: AssetId,
    asset_b: AssetId,
    charge: Mapping[AssetId, Amount],
) -> None:
    """Pledge reward assets to a bootstrap; they are held by the escrow account."""
    pair = canonical_pair(asset_a, asset_b)
    if not isinstance(ctx.storage.pair_status(pair), Bootstrap):
        raise PairStateError("NotInBootstrap", f"pair {pair[0]}/{pair[1]} is not in bootstrap")

    rewards = ctx.storage.bootstrap_rewards(pair)
    charged: List[Tuple[AssetId, Amount]] = []
    for asset in sorted(charge):
        amount = charge[asset]
        if asset not in rewards:
            raise AmountError("InvalidBootstrapParameter", f"{asset} is not a reward asset of {pair[0]}/{pair[1]}")
        ctx.ledger.transfer(asset, charger, ctx.pallet_account, amount)
        rewards[asset] = balance_add(rewards[asset], amount)
        charged.append((asset, amount))
    ctx.storage.set_bootstrap_rewards(pair, rewards)

    ctx.emit(ChargeReward(pair[0], pair[1], charger, tuple(charged)))


def bootstrap_withdraw_reward(ctx: ExecutionContext, asset_a: AssetId, asset_b: AssetId, recipient: AccountId) -> None:
    """Return every recorded reward to `recipient` and zero the reward map."""
    pair = canonical_pair(asset_a, asset_b)
    rewards = ctx.storage.bootstrap_rewards(pair)
    withdrawn: List[Tuple[AssetId, Amount]] = []
    for asset in sorted(rewards):
        amount = rewards[asset]
        ctx.ledger.transfer(asset, ctx.pallet_account, recipient, amount)
        rewards[asset] = 0
        withdrawn.append((asset, amount))
    ctx.storage.set_bootstrap_rewards(pair, rewards)

    ctx.emit(WithdrawReward(pair[0], pair[1], recipient, tuple(withdrawn)))


def set_fee_receiver(ctx: ExecutionContext, receiver: Optional[AccountId]) -> FeeMeta:
    fee_meta = FeeMeta(receiver=receiver, fee_point=ctx.storage.fee_meta.fee_point)
    ctx.storage.set_fee_meta(fee_meta)
    ctx.emit(FeeMetaUpdated(fee_meta.receiver, fee_meta.fee_point))
    return fee_meta


def set_fee_point(ctx: ExecutionContext, fee_point: int) -> FeeMeta:
    fee_meta = FeeMeta(receiver=ctx.storage.fee_meta.receiver, fee_point=fee_point)
    ctx.storage.set_fee_meta(fee_meta)
    ctx.emit(FeeMetaUpdated(fee_meta.receiver, fee_meta.fee_point))
    return fee_meta
