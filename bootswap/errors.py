"""Exception types for the bootswap engine.

Every error carries a stable ``code`` (e.g. ``"InsufficientLiquidity"``) so
callers can branch on the failure reason without parsing messages.
"""

from __future__ import annotations

from typing import Optional


class SwapError(Exception):
    """Base class for every engine failure."""

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.code = code
        super().__init__(f"{code}: {message}" if message else code)


class PairStateError(SwapError):
    """Raised when a pair is not in the status required by an operation."""


class AmountError(SwapError):
    """Raised on zero/insufficient amounts and violated slippage bounds."""


class CheckedArithmeticError(SwapError, ArithmeticError):
    """Raised on overflow, underflow, division by zero or failed narrowing."""


class PathError(SwapError):
    """Raised on a degenerate or illiquid swap path."""


class ConsistencyError(SwapError):
    """Raised when bootstrap bookkeeping forbids the requested transition."""
