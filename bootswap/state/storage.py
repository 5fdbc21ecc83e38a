"""
Keyed engine storage.

Everything the engine persists lives here, addressed by canonical pair (and
account where relevant):

    pair_status[pair]            -> PairStatus (default Disabled)
    k_last[pair]                 -> int        (default 0, up to 256 bits)
    fee_meta                     -> FeeMeta
    contribution[(pair, acct)]   -> (amount0, amount1)
    bootstrap_rewards[pair]      -> {asset: amount}
    bootstrap_limits[pair]       -> {asset: min balance}
    bootstrap_end_status[pair]   -> Bootstrap snapshot taken at end

Nothing is module-global; `copy()` produces an independent working copy so
that an operation can be applied and committed (or discarded) as a unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .balances import AccountId, Amount, AssetId
from .pairs import DISABLED, Bootstrap, Pair, PairStatus


ContributionKey = Tuple[Pair, AccountId]


def _require_canonical(pair: Pair) -> None:
    if not isinstance(pair, tuple) or len(pair) != 2:
        raise TypeError("pair must be a 2-tuple")
    if not pair[0] < pair[1]:
        raise ValueError(f"pair must be in canonical order: {pair}")


@dataclass(frozen=True)
class FeeMeta:
    """Protocol fee switch: optional LP-fee receiver and fee point in [0, 30]."""

    receiver: Optional[AccountId] = None
    fee_point: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.fee_point, int) or isinstance(self.fee_point, bool):
            raise TypeError("fee_point must be an int")
        if not (0 <= self.fee_point <= 30):
            raise ValueError(f"fee_point must be in [0, 30]: {self.fee_point}")

    @property
    def fee_on(self) -> bool:
        return self.receiver is not None and self.fee_point > 0


class SwapStorage:
    """In-memory key-value store for pair, fee and bootstrap state."""

    def __init__(self, fee_meta: FeeMeta = FeeMeta()) -> None:
        self._pair_status: Dict[Pair, PairStatus] = {}
        self._k_last: Dict[Pair, int] = {}
        self._fee_meta: FeeMeta = fee_meta
        self._contributions: Dict[ContributionKey, Tuple[Amount, Amount]] = {}
        self._rewards: Dict[Pair, Dict[AssetId, Amount]] = {}
        self._limits: Dict[Pair, Dict[AssetId, Amount]] = {}
        self._end_status: Dict[Pair, Bootstrap] = {}

    # -- pair status -----------------------------------------------------

    def pair_status(self, pair: Pair) -> PairStatus:
        _require_canonical(pair)
        return self._pair_status.get(pair, DISABLED)

    def set_pair_status(self, pair: Pair, status: PairStatus) -> None:
        _require_canonical(pair)
        self._pair_status[pair] = status

    # -- protocol fee ----------------------------------------------------

    def k_last(self, pair: Pair) -> int:
        _require_canonical(pair)
        return self._k_last.get(pair, 0)

    def set_k_last(self, pair: Pair, value: int) -> None:
        _require_canonical(pair)
        if value < 0:
            raise ValueError(f"k_last must be non-negative: {value}")
        if value == 0:
            self._k_last.pop(pair, None)
        else:
            self._k_last[pair] = value

    @property
    def fee_meta(self) -> FeeMeta:
        return self._fee_meta

    def set_fee_meta(self, fee_meta: FeeMeta) -> None:
        self._fee_meta = fee_meta

    # -- bootstrap -------------------------------------------------------

    def contribution(self, pair: Pair, account: AccountId) -> Optional[Tuple[Amount, Amount]]:
        _require_canonical(pair)
        return self._contributions.get((pair, account))

    def set_contribution(self, pair: Pair, account: AccountId, amounts: Tuple[Amount, Amount]) -> None:
        _require_canonical(pair)
        self._contributions[(pair, account)] = amounts

    def take_contribution(self, pair: Pair, account: AccountId) -> Optional[Tuple[Amount, Amount]]:
        """Remove and return the record (None if absent)."""
        _require_canonical(pair)
        return self._contributions.pop((pair, account), None)

    def bootstrap_rewards(self, pair: Pair) -> Dict[AssetId, Amount]:
        _require_canonical(pair)
        return dict(self._rewards.get(pair, {}))

    def set_bootstrap_rewards(self, pair: Pair, rewards: Mapping[AssetId, Amount]) -> None:
        _require_canonical(pair)
        self._rewards[pair] = dict(rewards)

    def bootstrap_limits(self, pair: Pair) -> Dict[AssetId, Amount]:
        _require_canonical(pair)
        return dict(self._limits.get(pair, {}))

    def set_bootstrap_limits(self, pair: Pair, limits: Mapping[AssetId, Amount]) -> None:
        _require_canonical(pair)
        self._limits[pair] = dict(limits)

    def bootstrap_end_status(self, pair: Pair) -> Optional[Bootstrap]:
        _require_canonical(pair)
        return self._end_status.get(pair)

    def set_bootstrap_end_status(self, pair: Pair, snapshot: Bootstrap) -> None:
        _require_canonical(pair)
        if not isinstance(snapshot, Bootstrap):
            raise TypeError("end snapshot must be a Bootstrap status")
        self._end_status[pair] = snapshot

    # -- introspection ---------------------------------------------------

    def items(self) -> Dict[str, object]:
        """Raw tables, for hashing and debugging."""
        return {
            "pair_status": dict(self._pair_status),
            "k_last": dict(self._k_last),
            "fee_meta": self._fee_meta,
            "contributions": dict(self._contributions),
            "rewards": {p: dict(r) for p, r in self._rewards.items()},
            "limits": {p: dict(lim) for p, lim in self._limits.items()},
            "end_status": dict(self._end_status),
        }

    def copy(self) -> "SwapStorage":
        # Status values are frozen dataclasses; only the containers need copying.
        out = SwapStorage(self._fee_meta)
        out._pair_status = dict(self._pair_status)
        out._k_last = dict(self._k_last)
        out._contributions = dict(self._contributions)
        out._rewards = {p: dict(r) for p, r in self._rewards.items()}
        out._limits = {p: dict(lim) for p, lim in self._limits.items()}
        out._end_status = dict(self._end_status)
        return out

    def __repr__(self) -> str:
        return f"SwapStorage({len(self._pair_status)} pairs, {len(self._contributions)} contributions)"
