"""
Checked wide-integer arithmetic.

Python ints never wrap, so the fixed widths of the ledger are enforced
explicitly:
- every intermediate product must fit in 256 bits (`U256_MAX`),
- balances are unsigned 128-bit values (`BALANCE_MAX`),
- narrowing from the wide accumulator to a balance is a checked operation.

All failures raise `CheckedArithmeticError`; nothing is truncated.
"""

from __future__ import annotations

import math

from ...errors import CheckedArithmeticError


U256_MAX = (1 << 256) - 1
BALANCE_MAX = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_u256(name: str, value: int) -> int:
    _require_int(name, value)
    if value < 0:
        raise CheckedArithmeticError("Underflow", f"{name} is negative: {value}")
    if value > U256_MAX:
        raise CheckedArithmeticError("Overflow", f"{name} exceeds 256 bits")
    return value


def checked_add(a: int, b: int) -> int:
    _require_u256("a", a)
    _require_u256("b", b)
    return _require_u256("sum", a + b)


def checked_sub(a: int, b: int) -> int:
    _require_u256("a", a)
    _require_u256("b", b)
    if b > a:
        raise CheckedArithmeticError("Underflow", f"{a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    _require_u256("a", a)
    _require_u256("b", b)
    return _require_u256("product", a * b)


def checked_div(a: int, b: int) -> int:
    """Floor division; a zero divisor is an arithmetic failure, not a ZeroDivisionError."""
    _require_u256("a", a)
    _require_u256("b", b)
    if b == 0:
        raise CheckedArithmeticError("DivisionByZero", f"{a} / 0")
    return a // b


def integer_sqrt(value: int) -> int:
    return math.isqrt(_require_u256("value", value))


def to_balance(value: int) -> int:
    """Narrow a wide intermediate to the balance width (fails instead of truncating)."""
    _require_int("value", value)
    if value < 0:
        raise CheckedArithmeticError("Underflow", f"negative balance: {value}")
    if value > BALANCE_MAX:
        raise CheckedArithmeticError("Narrowing", f"{value} does not fit in 128 bits")
    return value


def balance_add(a: int, b: int) -> int:
    total = to_balance(a) + to_balance(b)
    if total > BALANCE_MAX:
        raise CheckedArithmeticError("Overflow", f"{a} + {b} exceeds 128 bits")
    return total


def balance_sub(a: int, b: int) -> int:
    return checked_sub(to_balance(a), to_balance(b))
