"""
Protocol fee accrual (fee-on-mint).

Growth of sqrt(k) between liquidity events is fee income; when the fee
switch is on, a fraction of it is minted to the fee receiver as LP before
every add/remove. `k_last` records the product after the last such event.
"""

from __future__ import annotations

import logging

from ..kernels.python.checked_math import balance_add, checked_mul
from ..kernels.python.lp_math import protocol_fee_liquidity
from ..state.balances import Amount
from ..state.pairs import Pair, lp_asset_id
from .context import ExecutionContext


logger = logging.getLogger(__name__)


def mint_protocol_fee(ctx: ExecutionContext, pair: Pair, reserve0: Amount, reserve1: Amount, total_supply: Amount) -> Amount:
    """
    LP owed to the fee receiver for the given (pre-event) reserves.

    With no receiver configured a non-zero `k_last` is reset to 0 and nothing
    is owed.
    """
    fee_meta = ctx.storage.fee_meta
    k_last = ctx.storage.k_last(pair)

    if fee_meta.receiver is None:
        if k_last != 0:
            ctx.storage.set_k_last(pair, 0)
            logger.debug("k_last reset for %s/%s (no fee receiver)", pair[0], pair[1])
        return 0

    return protocol_fee_liquidity(
        reserve0=reserve0,
        reserve1=reserve1,
        total_supply=total_supply,
        k_last=k_last,
        fee_point=fee_meta.fee_point,
    )


def apply_protocol_fee(ctx: ExecutionContext, pair: Pair, reserve0: Amount, reserve1: Amount, total_supply: Amount) -> Amount:
    """Mint the protocol fee LP (if any) to the receiver; returns the new total supply."""
    fee = mint_protocol_fee(ctx, pair, reserve0, reserve1, total_supply)
    fee_meta = ctx.storage.fee_meta
    if fee > 0 and fee_meta.fee_on:
        ctx.ledger.deposit(lp_asset_id(*pair), fee_meta.receiver, fee)
        total_supply = balance_add(total_supply, fee)
        logger.debug("protocol fee: minted %s LP of %s/%s to %s", fee, pair[0], pair[1], fee_meta.receiver)
    return total_supply


def update_k_last(ctx: ExecutionContext, pair: Pair) -> None:
    """Record k = reserve0 * reserve1 from the live reserves when the fee switch is on."""
    if not ctx.storage.fee_meta.fee_on:
        return
    reserve0, reserve1 = ctx.reserves(pair)
    k = checked_mul(reserve0, reserve1)
    ctx.storage.set_k_last(pair, k)
    logger.debug("k_last for %s/%s = %s", pair[0], pair[1], k)
