"""
Asset ledger collaborator interface.

The engine never stores balances itself; every value movement goes through
four primitives. Each primitive must be individually atomic: it either
applies fully or raises without effect.

`LedgerJournal` wraps a ledger for the duration of one top-level engine
operation and can undo everything it applied, in reverse order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .balances import AccountId, Amount, AssetId


logger = logging.getLogger(__name__)


class AssetLedger:
    """Interface for the external multi-asset ledger."""

    def balance_of(self, asset: AssetId, account: AccountId) -> Amount:
        raise NotImplementedError

    def transfer(self, asset: AssetId, src: AccountId, dst: AccountId, amount: Amount) -> None:
        raise NotImplementedError

    def deposit(self, asset: AssetId, to: AccountId, amount: Amount) -> None:
        """Mint `amount` of `asset` into `to`."""
        raise NotImplementedError

    def withdraw(self, asset: AssetId, src: AccountId, amount: Amount) -> None:
        """Burn `amount` of `asset` from `src`."""
        raise NotImplementedError


@dataclass(frozen=True)
class JournalEntry:
    kind: str  # "transfer" | "deposit" | "withdraw"
    asset: AssetId
    src: AccountId
    dst: AccountId
    amount: Amount


class LedgerJournal(AssetLedger):
    """
    Recording proxy around an `AssetLedger`.

    Only primitives that returned successfully are journaled, so rollback
    replays exactly the inverse of what reached the inner ledger.
    """

    def __init__(self, inner: AssetLedger) -> None:
        self._inner = inner
        self._entries: List[JournalEntry] = []

    @property
    def entries(self) -> List[JournalEntry]:
        return list(self._entries)

    def balance_of(self, asset: AssetId, account: AccountId) -> Amount:
        return self._inner.balance_of(asset, account)

    def transfer(self, asset: AssetId, src: AccountId, dst: AccountId, amount: Amount) -> None:
        self._inner.transfer(asset, src, dst, amount)
        self._entries.append(JournalEntry("transfer", asset, src, dst, amount))

    def deposit(self, asset: AssetId, to: AccountId, amount: Amount) -> None:
        self._inner.deposit(asset, to, amount)
        self._entries.append(JournalEntry("deposit", asset, "", to, amount))

    def withdraw(self, asset: AssetId, src: AccountId, amount: Amount) -> None:
        self._inner.withdraw(asset, src, amount)
        self._entries.append(JournalEntry("withdraw", asset, src, "", amount))

    def rollback(self) -> None:
        """Apply compensating primitives for every journaled entry, newest first."""
        while self._entries:
            entry = self._entries.pop()
            if entry.kind == "transfer":
                self._inner.transfer(entry.asset, entry.dst, entry.src, entry.amount)
            elif entry.kind == "deposit":
                self._inner.withdraw(entry.asset, entry.dst, entry.amount)
            elif entry.kind == "withdraw":
                self._inner.deposit(entry.asset, entry.src, entry.amount)
            else:
                raise AssertionError(f"unknown journal entry kind: {entry.kind}")
            logger.debug("ledger rollback: undid %s of %s %s", entry.kind, entry.amount, entry.asset)

    def clear(self) -> None:
        self._entries.clear()
