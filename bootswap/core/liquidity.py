"""
Liquidity management operations: add/remove liquidity on a Trading pair.
"""

from __future__ import annotations

from typing import Tuple

from ..errors import AmountError
from ..kernels.python.checked_math import balance_add
from ..kernels.python.lp_math import mint_amount, optimal_add_amounts, share_amounts
from ..state.balances import AccountId, Amount, AssetId
from ..state.pairs import PairMetadata, Trading, canonical_pair, lp_asset_id, orient_amounts
from .context import ExecutionContext
from .events import LiquidityAdded, LiquidityRemoved
from .fees import apply_protocol_fee, update_k_last


def _require_amount(name: str, value: Amount) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise AmountError("InvalidAmount", f"{name} must be non-negative: {value}")


def add_liquidity(
    ctx: ExecutionContext,
    who: AccountId,
    asset_a: AssetId,
    asset_b: AssetId,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
) -> Amount:
    """
    Deposit both assets at the pool ratio and mint LP to `who`.

    Against empty reserves the desired amounts are taken as-is; otherwise one
    side is matched to the pool ratio and must stay within the caller's
    bounds.

    Returns:
        LP minted to `who`

    Raises:
        PairStateError: InvalidStatus if the pair is not Trading
        AmountError: IncorrectAssetAmountRange, InsufficientAssetBalance, ZeroLiquidity
    """
    for name, v in (
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
        ("amount_a_min", amount_a_min),
        ("amount_b_min", amount_b_min),
    ):
        _require_amount(name, v)

    pair = canonical_pair(asset_a, asset_b)
    meta = ctx.trading_metadata(pair)
    desired0, desired1 = orient_amounts(pair, asset_a, amount_a_desired, amount_b_desired)
    min0, min1 = orient_amounts(pair, asset_a, amount_a_min, amount_b_min)

    account = meta.reserve_account
    reserve0 = ctx.ledger.balance_of(pair[0], account)
    reserve1 = ctx.ledger.balance_of(pair[1], account)

    sized = optimal_add_amounts(
        amount0_desired=desired0,
        amount1_desired=desired1,
        amount0_min=min0,
        amount1_min=min1,
        reserve0=reserve0,
        reserve1=reserve1,
    )
    if not sized.within_bounds:
        raise AmountError(
            "IncorrectAssetAmountRange",
            f"matched deposit ({sized.amount0}, {sized.amount1}) violates bounds",
        )
    amount0, amount1 = sized.amount0, sized.amount1

    if ctx.ledger.balance_of(pair[0], who) < amount0 or ctx.ledger.balance_of(pair[1], who) < amount1:
        raise AmountError("InsufficientAssetBalance", f"{who} cannot cover ({amount0}, {amount1})")

    # Fee and mint are both priced against the pre-deposit reserves.
    total_supply = apply_protocol_fee(ctx, pair, reserve0, reserve1, meta.total_supply)
    minted = mint_amount(amount0, amount1, reserve0, reserve1, total_supply)
    if minted == 0:
        raise AmountError("ZeroLiquidity", f"deposit ({amount0}, {amount1}) mints no LP")
    total_supply = balance_add(total_supply, minted)

    ctx.ledger.deposit(lp_asset_id(*pair), who, minted)
    ctx.ledger.transfer(pair[0], who, account, amount0)
    ctx.ledger.transfer(pair[1], who, account, amount1)
    ctx.storage.set_pair_status(pair, Trading(PairMetadata(account, total_supply)))

    update_k_last(ctx, pair)

    ctx.emit(LiquidityAdded(who, pair[0], pair[1], amount0, amount1, minted))
    return minted


def remove_liquidity(
    ctx: ExecutionContext,
    who: AccountId,
    asset_a: AssetId,
    asset_b: AssetId,
    lp_amount: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
    recipient: AccountId,
) -> Tuple[Amount, Amount]:
    """
    Burn `lp_amount` LP from `who` and pay the pro-rata reserves to `recipient`.

    Returns:
        (amount0, amount1) withdrawn, in canonical pair order
    """
    for name, v in (("lp_amount", lp_amount), ("amount_a_min", amount_a_min), ("amount_b_min", amount_b_min)):
        _require_amount(name, v)

    pair = canonical_pair(asset_a, asset_b)
    meta = ctx.trading_metadata(pair)
    min0, min1 = orient_amounts(pair, asset_a, amount_a_min, amount_b_min)

    account = meta.reserve_account
    reserve0 = ctx.ledger.balance_of(pair[0], account)
    reserve1 = ctx.ledger.balance_of(pair[1], account)

    if meta.total_supply == 0:
        # Nothing to share out; a non-zero burn fails on the supply check below.
        amount0, amount1 = 0, 0
    else:
        amount0, amount1 = share_amounts(lp_amount, meta.total_supply, reserve0, reserve1)
    if amount0 < min0 or amount1 < min1:
        raise AmountError(
            "InsufficientTargetAmount",
            f"withdrawal ({amount0}, {amount1}) below minimum ({min0}, {min1})",
        )

    total_supply = apply_protocol_fee(ctx, pair, reserve0, reserve1, meta.total_supply)
    if lp_amount > total_supply:
        raise AmountError("InsufficientLiquidity", f"burn {lp_amount} exceeds total supply {total_supply}")
    total_supply -= lp_amount

    ctx.ledger.withdraw(lp_asset_id(*pair), who, lp_amount)
    ctx.ledger.transfer(pair[0], account, recipient, amount0)
    ctx.ledger.transfer(pair[1], account, recipient, amount1)
    ctx.storage.set_pair_status(pair, Trading(PairMetadata(account, total_supply)))

    update_k_last(ctx, pair)

    ctx.emit(LiquidityRemoved(who, recipient, pair[0], pair[1], amount0, amount1, lp_amount))
    return amount0, amount1
