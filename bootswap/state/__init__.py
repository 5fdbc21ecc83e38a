"""
State management for bootswap
"""

from .balances import NATIVE_ASSET, BalanceTable
from .ledger import AssetLedger, LedgerJournal
from .pairs import (
    DISABLED,
    Bootstrap,
    BootstrapParameter,
    Disabled,
    PairMetadata,
    PairStatus,
    Trading,
    canonical_pair,
    lp_asset_id,
    module_account_id,
    pair_account_id,
)
from .state_root import compute_state_root
from .storage import FeeMeta, SwapStorage

__all__ = [
    "NATIVE_ASSET",
    "BalanceTable",
    "AssetLedger",
    "LedgerJournal",
    "DISABLED",
    "Bootstrap",
    "BootstrapParameter",
    "Disabled",
    "PairMetadata",
    "PairStatus",
    "Trading",
    "canonical_pair",
    "lp_asset_id",
    "module_account_id",
    "pair_account_id",
    "compute_state_root",
    "FeeMeta",
    "SwapStorage",
]
