"""
Multi-hop swap routing along an explicit asset path.

Quoting walks the path against live reserves (forward for exact-in, backward
for exact-out) and re-checks the constant-product invariant after every hop.
Execution only starts once the whole path has been quoted and the caller's
slippage bound holds; every hop pays straight from one reserve account into
the next, so intermediate amounts never touch the trader.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..errors import AmountError, PathError
from ..kernels.python.cpmm_swap import HopQuote, hop_exact_in, hop_exact_out
from ..state.balances import AccountId, Amount, AssetId
from ..state.pairs import canonical_pair, pair_account_id
from .context import ExecutionContext
from .events import AssetSwap


logger = logging.getLogger(__name__)


def _require_path(path: Sequence[AssetId]) -> Tuple[AssetId, ...]:
    path = tuple(path)
    if len(path) < 2:
        raise PathError("InvalidPath", f"path needs at least two assets, got {len(path)}")
    return path


def _hop_reserves(ctx: ExecutionContext, asset_in: AssetId, asset_out: AssetId) -> Tuple[Amount, Amount]:
    account = pair_account_id(asset_in, asset_out)
    reserve_in = ctx.ledger.balance_of(asset_in, account)
    reserve_out = ctx.ledger.balance_of(asset_out, account)
    if reserve_in == 0 or reserve_out == 0:
        raise PathError("InvalidPath", f"pair {asset_in}/{asset_out} has an empty reserve")
    return reserve_in, reserve_out


def _check_invariant(hop: HopQuote, asset_in: AssetId, asset_out: AssetId) -> None:
    if not hop.invariant_holds:
        raise PathError(
            "InvariantCheckFailed",
            f"hop {asset_in}->{asset_out}: k {hop.k_before} -> {hop.k_after}",
        )


def quote_path_out(ctx: ExecutionContext, amount_in: Amount, path: Sequence[AssetId]) -> List[Amount]:
    """
    Exact-in quote along `path`.

    Returns:
        amounts[i] entering hop i; amounts[-1] is the final output
    """
    path = _require_path(path)
    amounts = [amount_in]
    for asset_in, asset_out in zip(path, path[1:]):
        reserve_in, reserve_out = _hop_reserves(ctx, asset_in, asset_out)
        hop = hop_exact_in(amounts[-1], reserve_in, reserve_out)
        if hop.amount_out == 0:
            raise PathError("InvalidPath", f"hop {asset_in}->{asset_out} quotes zero output")
        _check_invariant(hop, asset_in, asset_out)
        logger.debug("quote hop %s->%s: in=%s out=%s", asset_in, asset_out, hop.amount_in, hop.amount_out)
        amounts.append(hop.amount_out)
    return amounts


def quote_path_in(ctx: ExecutionContext, amount_out: Amount, path: Sequence[AssetId]) -> List[Amount]:
    """
    Exact-out quote along `path`, walked backwards from the final output.

    Returns:
        amounts in path order; amounts[0] is the required input
    """
    path = _require_path(path)
    amounts = [amount_out]
    for asset_in, asset_out in reversed(list(zip(path, path[1:]))):
        reserve_in, reserve_out = _hop_reserves(ctx, asset_in, asset_out)
        hop = hop_exact_out(amounts[-1], reserve_in, reserve_out)
        if hop.amount_in <= 1:
            raise PathError("InvalidPath", f"hop {asset_in}->{asset_out} quotes input {hop.amount_in}")
        _check_invariant(hop, asset_in, asset_out)
        logger.debug("quote hop %s->%s: in=%s out=%s", asset_in, asset_out, hop.amount_in, hop.amount_out)
        amounts.append(hop.amount_in)
    amounts.reverse()
    return amounts


def _execute_path(ctx: ExecutionContext, amounts: Sequence[Amount], path: Tuple[AssetId, ...], recipient: AccountId) -> None:
    last = len(path) - 2
    for i, (asset_in, asset_out) in enumerate(zip(path, path[1:])):
        pair = canonical_pair(asset_in, asset_out)
        account = ctx.trading_metadata(pair).reserve_account
        amount_out = amounts[i + 1]
        reserve_out = ctx.ledger.balance_of(asset_out, account)
        if amount_out > reserve_out:
            raise AmountError(
                "InsufficientPairReserve",
                f"pair {pair[0]}/{pair[1]} holds {reserve_out} {asset_out}, owes {amount_out}",
            )
        dst = recipient if i == last else pair_account_id(asset_out, path[i + 2])
        if amount_out > 0:
            ctx.ledger.transfer(asset_out, account, dst, amount_out)


def swap_exact_for_path(
    ctx: ExecutionContext,
    who: AccountId,
    amount_in: Amount,
    amount_out_min: Amount,
    path: Sequence[AssetId],
    recipient: AccountId,
) -> List[Amount]:
    """
    Sell exactly `amount_in` of path[0] for at least `amount_out_min` of path[-1].

    Paying with the native asset first skims the origin fee
    (amount_in // native_fee_divisor) to the pot account.
    """
    path = _require_path(path)
    if path[0] == ctx.config.native_asset:
        fee = amount_in // ctx.config.native_fee_divisor
        amount_in -= fee
        ctx.ledger.transfer(path[0], who, ctx.pot_account, fee)

    amounts = quote_path_out(ctx, amount_in, path)
    if amounts[-1] < amount_out_min:
        raise AmountError("InsufficientTargetAmount", f"output {amounts[-1]} below minimum {amount_out_min}")

    ctx.ledger.transfer(path[0], who, pair_account_id(path[0], path[1]), amounts[0])
    _execute_path(ctx, amounts, path, recipient)

    ctx.emit(AssetSwap(who, recipient, path, tuple(amounts)))
    return amounts


def swap_for_exact_path(
    ctx: ExecutionContext,
    who: AccountId,
    amount_out: Amount,
    amount_in_max: Amount,
    path: Sequence[AssetId],
    recipient: AccountId,
) -> List[Amount]:
    """Buy exactly `amount_out` of path[-1] spending at most `amount_in_max` of path[0]."""
    path = _require_path(path)
    amounts = quote_path_in(ctx, amount_out, path)
    if amounts[0] > amount_in_max:
        raise AmountError("ExcessiveSoldAmount", f"input {amounts[0]} exceeds maximum {amount_in_max}")

    ctx.ledger.transfer(path[0], who, pair_account_id(path[0], path[1]), amounts[0])
    _execute_path(ctx, amounts, path, recipient)

    ctx.emit(AssetSwap(who, recipient, path, tuple(amounts)))
    return amounts
