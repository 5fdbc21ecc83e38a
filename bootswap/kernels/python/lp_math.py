"""
Liquidity math kernel.

Pure functions with explicit rounding rules (all floors):
- share_amount:         floor(amount * reserve / supply)
- mint_amount:          floor(sqrt(a0*a1)) for an empty supply, otherwise the
                        proportional min over both sides
- optimal_add_amounts:  ratio-preserving deposit sizing against live reserves
- protocol_fee_liquidity: Uniswap-v2 style fee-on-mint
- bootstrap_claim_liquidity: per-contributor LP share of a finished bootstrap

Intermediates live in the checked 256-bit domain; results are narrowed to the
balance width exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .checked_math import (
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    integer_sqrt,
    to_balance,
)


MAX_FEE_POINT = 30


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class OptimalAddResult:
    amount0: int
    amount1: int
    # False when the matched side falls outside the caller's [min, desired] window.
    within_bounds: bool


def share_amount(amount: int, supply: int, reserve: int) -> int:
    """floor(amount * reserve / supply)."""
    for name, v in (("amount", amount), ("supply", supply), ("reserve", reserve)):
        _require_int(name, v)
    return to_balance(checked_div(checked_mul(amount, reserve), supply))


def share_amounts(amount: int, supply: int, reserve0: int, reserve1: int) -> Tuple[int, int]:
    return share_amount(amount, supply, reserve0), share_amount(amount, supply, reserve1)


def mint_amount(amount0: int, amount1: int, reserve0: int, reserve1: int, total_supply: int) -> int:
    """
    LP to mint for a deposit of (amount0, amount1).

    For an empty supply the mint is floor(sqrt(amount0 * amount1)); no
    minimum liquidity is locked.
    """
    for name, v in (
        ("amount0", amount0),
        ("amount1", amount1),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        _require_int(name, v)

    if total_supply == 0:
        return to_balance(integer_sqrt(checked_mul(amount0, amount1)))
    return min(
        share_amount(amount0, reserve0, total_supply),
        share_amount(amount1, reserve1, total_supply),
    )


def optimal_add_amounts(
    *,
    amount0_desired: int,
    amount1_desired: int,
    amount0_min: int,
    amount1_min: int,
    reserve0: int,
    reserve1: int,
) -> OptimalAddResult:
    """
    Size a deposit so it matches the pool ratio.

    With an empty reserve on either side the desired amounts are used as-is.
    """
    for name, v in (
        ("amount0_desired", amount0_desired),
        ("amount1_desired", amount1_desired),
        ("amount0_min", amount0_min),
        ("amount1_min", amount1_min),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
    ):
        _require_int(name, v)

    if reserve0 == 0 or reserve1 == 0:
        return OptimalAddResult(amount0=amount0_desired, amount1=amount1_desired, within_bounds=True)

    amount1_optimal = share_amount(amount0_desired, reserve0, reserve1)
    if amount1_optimal <= amount1_desired:
        return OptimalAddResult(
            amount0=amount0_desired,
            amount1=amount1_optimal,
            within_bounds=amount1_optimal >= amount1_min,
        )

    amount0_optimal = share_amount(amount1_desired, reserve1, reserve0)
    return OptimalAddResult(
        amount0=amount0_optimal,
        amount1=amount1_desired,
        within_bounds=amount0_min <= amount0_optimal <= amount0_desired,
    )


def protocol_fee_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    k_last: int,
    fee_point: int,
) -> int:
    """
    LP owed to the protocol for fee growth since `k_last`.

        root_k      = sqrt(reserve0 * reserve1)
        root_k_last = sqrt(k_last)
        liquidity   = total_supply * (root_k - root_k_last)
                      / (root_k * ((30 - fee_point) // fee_point) + root_k_last)

    `(30 - fee_point) // fee_point` truncates before the multiplication; that
    ordering is part of the on-chain formula and must not be rearranged.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
        ("k_last", k_last),
        ("fee_point", fee_point),
    ):
        _require_int(name, v)
    if not (0 <= fee_point <= MAX_FEE_POINT):
        raise ValueError(f"fee_point must be in [0, {MAX_FEE_POINT}]: {fee_point}")

    if k_last == 0 or fee_point == 0:
        return 0

    root_k = integer_sqrt(checked_mul(reserve0, reserve1))
    root_k_last = integer_sqrt(k_last)
    if root_k <= root_k_last:
        return 0

    fix_fee_point = (MAX_FEE_POINT - fee_point) // fee_point
    numerator = checked_mul(total_supply, checked_sub(root_k, root_k_last))
    denominator = checked_add(checked_mul(root_k, fix_fee_point), root_k_last)
    return to_balance(checked_div(numerator, denominator))


def bootstrap_total_liquidity(accumulated0: int, accumulated1: int) -> int:
    """floor(sqrt(acc0 * acc1)): LP minted when a bootstrap ends."""
    return mint_amount(accumulated0, accumulated1, 0, 0, 0)


def bootstrap_claim_liquidity(
    *,
    contribution0: int,
    contribution1: int,
    accumulated0: int,
    accumulated1: int,
) -> int:
    """
    LP owed to one contributor, valuing both sides at the realized pool ratio.

        eff0 = (c0*acc1 + c1*acc0) / (2*acc1)
        eff1 = (c1*acc0 + c0*acc1) / (2*acc0)
        lp   = floor(sqrt(eff0 * eff1))
    """
    for name, v in (
        ("contribution0", contribution0),
        ("contribution1", contribution1),
        ("accumulated0", accumulated0),
        ("accumulated1", accumulated1),
    ):
        _require_int(name, v)

    cross = checked_add(checked_mul(contribution0, accumulated1), checked_mul(contribution1, accumulated0))
    effective0 = checked_div(cross, checked_mul(accumulated1, 2))
    effective1 = checked_div(cross, checked_mul(accumulated0, 2))
    return to_balance(integer_sqrt(checked_mul(effective0, effective1)))


def pro_rata_reward(share_lp: int, reward_amount: int, total_lp: int) -> int:
    """floor(share_lp * reward_amount / total_lp)."""
    for name, v in (("share_lp", share_lp), ("reward_amount", reward_amount), ("total_lp", total_lp)):
        _require_int(name, v)
    return to_balance(checked_div(checked_mul(share_lp, reward_amount), total_lp))
