"""
Multi-asset balance tracking with deterministic ordering.

Implements BalanceTable[AccountId, AssetId] -> Amount, the in-memory
reference `AssetLedger`. LP shares are ordinary assets here (see
`lp_asset_id`), so one table covers reserves, escrow and LP positions.
"""

from typing import Dict, Tuple

from ..errors import AmountError, CheckedArithmeticError
from .ledger import AssetLedger


# Type aliases
AccountId = str  # opaque account identifier (derived accounts are 0x hex)
AssetId = str  # 32-byte hex string (0x...)
Amount = int  # unsigned 128-bit integer

BALANCE_MAX = (1 << 128) - 1

# Native asset identifier
NATIVE_ASSET = "0x" + "00" * 32


def _require_amount(amount: Amount) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError("amount must be an int")
    if amount < 0:
        raise AmountError("InvalidAmount", f"amount must be non-negative: {amount}")


class BalanceTable(AssetLedger):
    """
    Deterministic balance table mapping (account, asset) -> amount.

    Note: this class stores balances in a plain dict. Do not rely on dict
    iteration order for consensus-critical logic; callers should sort keys
    explicitly at serialization / hashing boundaries.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[AccountId, AssetId], Amount] = {}

    def get(self, account: AccountId, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            AmountError: If amount is negative
            CheckedArithmeticError: If amount exceeds the balance width
        """
        _require_amount(amount)
        if amount > BALANCE_MAX:
            raise CheckedArithmeticError("Overflow", f"balance exceeds 128 bits: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    # -- AssetLedger primitives ------------------------------------------

    def balance_of(self, asset: AssetId, account: AccountId) -> Amount:
        return self.get(account, asset)

    def transfer(self, asset: AssetId, src: AccountId, dst: AccountId, amount: Amount) -> None:
        """
        Move `amount` of `asset` from `src` to `dst`.

        Both sides are validated before either is written.
        """
        _require_amount(amount)
        if amount == 0 or src == dst:
            if self.get(src, asset) < amount:
                raise AmountError("InsufficientAssetBalance", f"{src} holds less than {amount} {asset}")
            return
        src_balance = self.get(src, asset)
        if src_balance < amount:
            raise AmountError(
                "InsufficientAssetBalance",
                f"{src} holds {src_balance} {asset}, needs {amount}",
            )
        dst_balance = self.get(dst, asset) + amount
        if dst_balance > BALANCE_MAX:
            raise CheckedArithmeticError("Overflow", f"balance of {dst} exceeds 128 bits")
        self.set(src, asset, src_balance - amount)
        self.set(dst, asset, dst_balance)

    def deposit(self, asset: AssetId, to: AccountId, amount: Amount) -> None:
        _require_amount(amount)
        new_balance = self.get(to, asset) + amount
        if new_balance > BALANCE_MAX:
            raise CheckedArithmeticError("Overflow", f"balance of {to} exceeds 128 bits")
        self.set(to, asset, new_balance)

    def withdraw(self, asset: AssetId, src: AccountId, amount: Amount) -> None:
        _require_amount(amount)
        current = self.get(src, asset)
        if current < amount:
            raise AmountError("InsufficientAssetBalance", f"{src} holds {current} {asset}, burns {amount}")
        self.set(src, asset, current - amount)

    # -- Introspection ---------------------------------------------------

    def total_issuance(self, asset: AssetId) -> Amount:
        return sum(amount for (_acct, a), amount in self._balances.items() if a == asset)

    def get_all_balances(self) -> Dict[Tuple[AccountId, AssetId], Amount]:
        """
        Get all balances as a dictionary.

        Returns:
            Dictionary mapping (account, asset) -> amount
        """
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
