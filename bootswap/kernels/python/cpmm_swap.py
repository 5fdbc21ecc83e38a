"""
CPMM quote kernel (fixed 0.3% fee, Uniswap-v2 pricing).

- `quote_out`: amount_out = floor(amount_in*997*reserve_out / (reserve_in*1000 + amount_in*997))
- `quote_in`:  amount_in  = floor(reserve_in*amount_out*1000 / ((reserve_out - amount_out)*997)) + 1

The fee stays in the pool. Every intermediate is computed in the checked
256-bit domain and narrowed to the balance width exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import CheckedArithmeticError
from .checked_math import (
    balance_add,
    balance_sub,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    to_balance,
)


FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class HopQuote:
    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int

    @property
    def invariant_holds(self) -> bool:
        return self.k_after >= self.k_before


def quote_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Exact-in quote. Raises CheckedArithmeticError if any input is zero."""
    for name, v in (("amount_in", amount_in), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_int(name, v)
    if amount_in == 0 or reserve_in == 0 or reserve_out == 0:
        raise CheckedArithmeticError("Overflow", "quote_out requires non-zero amount and reserves")

    amount_in_with_fee = checked_mul(amount_in, FEE_NUMERATOR)
    numerator = checked_mul(amount_in_with_fee, reserve_out)
    denominator = checked_add(checked_mul(reserve_in, FEE_DENOMINATOR), amount_in_with_fee)
    return to_balance(checked_div(numerator, denominator))


def quote_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Exact-out quote (rounded up by one). Fails if amount_out >= reserve_out."""
    for name, v in (("amount_out", amount_out), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_int(name, v)
    if amount_out == 0 or reserve_in == 0 or reserve_out == 0:
        raise CheckedArithmeticError("Overflow", "quote_in requires non-zero amount and reserves")

    numerator = checked_mul(checked_mul(reserve_in, amount_out), FEE_DENOMINATOR)
    denominator = checked_mul(checked_sub(reserve_out, amount_out), FEE_NUMERATOR)
    return to_balance(checked_add(checked_div(numerator, denominator), 1))


def _hop(amount_in: int, amount_out: int, reserve_in: int, reserve_out: int) -> HopQuote:
    new_reserve_in = balance_add(reserve_in, amount_in)
    new_reserve_out = balance_sub(reserve_out, amount_out)
    return HopQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=checked_mul(reserve_in, reserve_out),
        k_after=checked_mul(new_reserve_in, new_reserve_out),
    )


def hop_exact_in(amount_in: int, reserve_in: int, reserve_out: int) -> HopQuote:
    """Quote one exact-in hop and compute its post-hop reserves."""
    amount_out = quote_out(amount_in, reserve_in, reserve_out)
    return _hop(amount_in, amount_out, reserve_in, reserve_out)


def hop_exact_out(amount_out: int, reserve_in: int, reserve_out: int) -> HopQuote:
    """Quote one exact-out hop and compute its post-hop reserves."""
    amount_in = quote_in(amount_out, reserve_in, reserve_out)
    return _hop(amount_in, amount_out, reserve_in, reserve_out)
