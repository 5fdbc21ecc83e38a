"""
Observable engine events.

Events are immutable records, buffered while an operation runs and published
(in emission order) only when the operation commits. Amounts are always in
canonical pair order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..state.balances import AccountId, Amount, AssetId


@dataclass(frozen=True)
class LiquidityAdded:
    who: AccountId
    asset0: AssetId
    asset1: AssetId
    amount0: Amount
    amount1: Amount
    minted_lp: Amount


@dataclass(frozen=True)
class LiquidityRemoved:
    who: AccountId
    recipient: AccountId
    asset0: AssetId
    asset1: AssetId
    amount0: Amount
    amount1: Amount
    burned_lp: Amount


@dataclass(frozen=True)
class AssetSwap:
    who: AccountId
    recipient: AccountId
    path: Tuple[AssetId, ...]
    amounts: Tuple[Amount, ...]


@dataclass(frozen=True)
class BootstrapContribute:
    who: AccountId
    asset0: AssetId
    amount0: Amount
    asset1: AssetId
    amount1: Amount


@dataclass(frozen=True)
class BootstrapEnd:
    asset0: AssetId
    asset1: AssetId
    accumulated0: Amount
    accumulated1: Amount
    total_lp: Amount


@dataclass(frozen=True)
class BootstrapClaim:
    reserve_account: AccountId
    who: AccountId
    recipient: AccountId
    asset0: AssetId
    asset1: AssetId
    contribution0: Amount
    contribution1: Amount
    claimed_lp: Amount


@dataclass(frozen=True)
class BootstrapRefund:
    escrow_account: AccountId
    who: AccountId
    asset0: AssetId
    asset1: AssetId
    amount0: Amount
    amount1: Amount


@dataclass(frozen=True)
class DistributeReward:
    asset0: AssetId
    asset1: AssetId
    reward_holder: AccountId
    rewards: Tuple[Tuple[AssetId, Amount], ...]


# -- admin ----------------------------------------------------------------


@dataclass(frozen=True)
class PairCreated:
    asset0: AssetId
    asset1: AssetId


@dataclass(frozen=True)
class BootstrapCreated:
    asset0: AssetId
    asset1: AssetId
    target_supply: Tuple[Amount, Amount]
    capacity_supply: Tuple[Amount, Amount]
    end_block: int


@dataclass(frozen=True)
class BootstrapUpdated:
    asset0: AssetId
    asset1: AssetId
    target_supply: Tuple[Amount, Amount]
    capacity_supply: Tuple[Amount, Amount]
    end_block: int


@dataclass(frozen=True)
class ChargeReward:
    asset0: AssetId
    asset1: AssetId
    charger: AccountId
    charged: Tuple[Tuple[AssetId, Amount], ...]


@dataclass(frozen=True)
class WithdrawReward:
    asset0: AssetId
    asset1: AssetId
    recipient: AccountId
    withdrawn: Tuple[Tuple[AssetId, Amount], ...]


@dataclass(frozen=True)
class FeeMetaUpdated:
    receiver: Optional[AccountId]
    fee_point: int


Event = Union[
    LiquidityAdded,
    LiquidityRemoved,
    AssetSwap,
    BootstrapContribute,
    BootstrapEnd,
    BootstrapClaim,
    BootstrapRefund,
    DistributeReward,
    PairCreated,
    BootstrapCreated,
    BootstrapUpdated,
    ChargeReward,
    WithdrawReward,
    FeeMetaUpdated,
]
