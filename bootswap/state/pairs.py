"""
Pair identity and pair status.

A pair is the canonical ordered tuple (low, high) of two distinct assets. Each
pair has exactly one status, a closed sum type:

    Disabled                      initial, nothing configured
    Bootstrap(BootstrapParameter) crowdfunding towards a target
    Trading(PairMetadata)         live reserves and LP supply

An expired, under-target bootstrap is *not* a stored state: it is detected on
demand by `BootstrapParameter.is_disabled(now)`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple, Union

from ..errors import PathError
from .balances import AccountId, Amount, AssetId
from .canonical import derive_id


Pair = Tuple[AssetId, AssetId]


def sort_asset_ids(asset_a: AssetId, asset_b: AssetId) -> Pair:
    if asset_a < asset_b:
        return asset_a, asset_b
    return asset_b, asset_a


def canonical_pair(asset_a: AssetId, asset_b: AssetId) -> Pair:
    """Sorted pair; identical assets do not form a pair."""
    if asset_a == asset_b:
        raise PathError("InvalidPath", f"pair requires two distinct assets, got {asset_a!r} twice")
    return sort_asset_ids(asset_a, asset_b)


def orient_amounts(pair: Pair, asset_a: AssetId, amount_a: Amount, amount_b: Amount) -> Tuple[Amount, Amount]:
    """Reorder amounts given for (asset_a, asset_b) into canonical pair order."""
    if asset_a == pair[0]:
        return amount_a, amount_b
    return amount_b, amount_a


def pair_account_id(asset_a: AssetId, asset_b: AssetId) -> AccountId:
    """
    Deterministic reserve account for a pair (order-insensitive).

        account = H("bootswap:pair-account:v1" || asset0 || asset1)
    """
    asset0, asset1 = canonical_pair(asset_a, asset_b)
    return derive_id("pair-account", asset0, asset1)


def lp_asset_id(asset_a: AssetId, asset_b: AssetId) -> AssetId:
    """Deterministic LP share asset for a pair (order-insensitive)."""
    asset0, asset1 = canonical_pair(asset_a, asset_b)
    return derive_id("lp-asset", asset0, asset1)


def module_account_id(seed: str) -> AccountId:
    """Account owned by the engine itself (escrow / reward holder, fee pot)."""
    return derive_id("module-account", seed)


def _require_pair_amounts(name: str, value: Tuple[Amount, Amount]) -> None:
    if not isinstance(value, tuple) or len(value) != 2:
        raise TypeError(f"{name} must be a 2-tuple")
    for v in value:
        if not isinstance(v, int) or isinstance(v, bool):
            raise TypeError(f"{name} entries must be ints")
        if v < 0:
            raise ValueError(f"{name} entries must be non-negative: {value}")


@dataclass(frozen=True)
class BootstrapParameter:
    """
    Bootstrap configuration and progress for one pair.

    Attributes:
        target_supply: per-asset minimum that must be reached to go live
        capacity_supply: per-asset maximum accepted
        accumulated_supply: running total contributed
        end_block: deadline block number
        escrow_account: holds contributions (and pledged rewards) until resolution
    """

    target_supply: Tuple[Amount, Amount]
    capacity_supply: Tuple[Amount, Amount]
    accumulated_supply: Tuple[Amount, Amount]
    end_block: int
    escrow_account: AccountId

    def __post_init__(self) -> None:
        _require_pair_amounts("target_supply", self.target_supply)
        _require_pair_amounts("capacity_supply", self.capacity_supply)
        _require_pair_amounts("accumulated_supply", self.accumulated_supply)
        if not isinstance(self.end_block, int) or isinstance(self.end_block, bool) or self.end_block < 0:
            raise ValueError(f"end_block must be a non-negative int: {self.end_block}")

    def is_disabled(self, now: int) -> bool:
        """Deadline passed while at least one side is still below target."""
        return now > self.end_block and (
            self.accumulated_supply[0] < self.target_supply[0]
            or self.accumulated_supply[1] < self.target_supply[1]
        )

    def is_active(self, now: int) -> bool:
        return now < self.end_block

    def is_qualified(self, now: int) -> bool:
        return (
            now >= self.end_block
            and self.accumulated_supply[0] >= self.target_supply[0]
            and self.accumulated_supply[1] >= self.target_supply[1]
        )

    def with_accumulated(self, accumulated: Tuple[Amount, Amount]) -> "BootstrapParameter":
        return replace(self, accumulated_supply=accumulated)


@dataclass(frozen=True)
class PairMetadata:
    reserve_account: AccountId
    total_supply: Amount

    def __post_init__(self) -> None:
        if not isinstance(self.total_supply, int) or isinstance(self.total_supply, bool):
            raise TypeError("total_supply must be an int")
        if self.total_supply < 0:
            raise ValueError(f"total_supply must be non-negative: {self.total_supply}")


@dataclass(frozen=True)
class Disabled:
    pass


@dataclass(frozen=True)
class Bootstrap:
    params: BootstrapParameter


@dataclass(frozen=True)
class Trading:
    metadata: PairMetadata


PairStatus = Union[Disabled, Bootstrap, Trading]

DISABLED = Disabled()


def status_name(status: PairStatus) -> str:
    if isinstance(status, Trading):
        return "Trading"
    if isinstance(status, Bootstrap):
        return "Bootstrap"
    if isinstance(status, Disabled):
        return "Disabled"
    raise TypeError(f"not a pair status: {status!r}")
