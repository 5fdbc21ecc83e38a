"""
Engine facade.

`SwapEngine` owns the live storage and a reference to the asset ledger, and
runs every operation in one atomic scope:

- storage: the operation mutates a copy, which replaces the live storage only
  on success;
- ledger: every primitive goes through a `LedgerJournal`, and a failure
  replays the journaled primitives' inverses in reverse;
- events: buffered per operation and published only on commit.

The first exception aborts the operation and is re-raised unchanged. An
exception from the rollback itself is raised chained to that first one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from ..errors import SwapError
from ..state.balances import AccountId, Amount, AssetId, BalanceTable
from ..state.ledger import AssetLedger, LedgerJournal
from ..state.pairs import Bootstrap, BootstrapParameter, Pair, PairStatus, canonical_pair
from ..state.pairs import lp_asset_id as _lp_asset_id
from ..state.pairs import pair_account_id as _pair_account_id
from ..state.state_root import compute_state_root
from ..state.storage import FeeMeta, SwapStorage
from . import admin, bootstrap, liquidity, routing
from .config import EngineConfig
from .context import ExecutionContext
from .events import Event


logger = logging.getLogger(__name__)

T = TypeVar("T")


class SwapEngine:
    """Sequential, atomic front end over the liquidity, routing, bootstrap and admin operations."""

    def __init__(
        self,
        ledger: AssetLedger,
        config: EngineConfig = EngineConfig(),
        storage: Optional[SwapStorage] = None,
        block_number: int = 0,
    ) -> None:
        if not isinstance(ledger, AssetLedger):
            raise TypeError("ledger must be an AssetLedger")
        if not isinstance(config, EngineConfig):
            raise TypeError("config must be an EngineConfig")
        self._ledger = ledger
        self._config = config
        self._storage = storage if storage is not None else SwapStorage(config.initial_fee_meta())
        self._block_number = 0
        self._events: List[Event] = []
        self.set_block_number(block_number)

    # -- plumbing --------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def ledger(self) -> AssetLedger:
        return self._ledger

    @property
    def storage(self) -> SwapStorage:
        return self._storage

    @property
    def block_number(self) -> int:
        return self._block_number

    def set_block_number(self, block_number: int) -> None:
        if not isinstance(block_number, int) or isinstance(block_number, bool) or block_number < 0:
            raise ValueError(f"block_number must be a non-negative int: {block_number!r}")
        self._block_number = block_number

    def advance_blocks(self, count: int = 1) -> int:
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValueError(f"count must be a non-negative int: {count!r}")
        self._block_number += count
        return self._block_number

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def drain_events(self) -> List[Event]:
        out, self._events = self._events, []
        return out

    def _read_context(self) -> ExecutionContext:
        return ExecutionContext(
            storage=self._storage,
            ledger=LedgerJournal(self._ledger),
            config=self._config,
            block_number=self._block_number,
        )

    def _execute(self, name: str, op: Callable[..., T], *args: Any) -> T:
        ctx = ExecutionContext(
            storage=self._storage.copy(),
            ledger=LedgerJournal(self._ledger),
            config=self._config,
            block_number=self._block_number,
        )
        try:
            result = op(ctx, *args)
        except Exception as exc:
            code = exc.code if isinstance(exc, SwapError) else type(exc).__name__
            logger.warning("%s rolled back: %s", name, code)
            try:
                ctx.ledger.rollback()
            except Exception as rollback_exc:
                logger.error("%s rollback failed after %s: %s", name, code, rollback_exc)
                raise rollback_exc from exc
            raise

        self._storage = ctx.storage
        ctx.ledger.clear()
        for event in ctx.events:
            logger.info("%s", event)
        self._events.extend(ctx.events)
        return result

    # -- liquidity -------------------------------------------------------

    def add_liquidity(
        self,
        who: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
    ) -> Amount:
        return self._execute(
            "add_liquidity",
            liquidity.add_liquidity,
            who,
            asset_a,
            asset_b,
            amount_a_desired,
            amount_b_desired,
            amount_a_min,
            amount_b_min,
        )

    def remove_liquidity(
        self,
        who: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        lp_amount: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        recipient: AccountId,
    ) -> Tuple[Amount, Amount]:
        return self._execute(
            "remove_liquidity",
            liquidity.remove_liquidity,
            who,
            asset_a,
            asset_b,
            lp_amount,
            amount_a_min,
            amount_b_min,
            recipient,
        )

    # -- swaps -----------------------------------------------------------

    def swap_exact_for_path(
        self,
        who: AccountId,
        amount_in: Amount,
        amount_out_min: Amount,
        path: Sequence[AssetId],
        recipient: AccountId,
    ) -> List[Amount]:
        return self._execute(
            "swap_exact_for_path", routing.swap_exact_for_path, who, amount_in, amount_out_min, path, recipient
        )

    def swap_for_exact_path(
        self,
        who: AccountId,
        amount_out: Amount,
        amount_in_max: Amount,
        path: Sequence[AssetId],
        recipient: AccountId,
    ) -> List[Amount]:
        return self._execute(
            "swap_for_exact_path", routing.swap_for_exact_path, who, amount_out, amount_in_max, path, recipient
        )

    # -- bootstrap -------------------------------------------------------

    def contribute(
        self, who: AccountId, asset_a: AssetId, asset_b: AssetId, amount_a: Amount, amount_b: Amount
    ) -> Tuple[Amount, Amount]:
        return self._execute("contribute", bootstrap.contribute, who, asset_a, asset_b, amount_a, amount_b)

    def end_bootstrap(self, asset_a: AssetId, asset_b: AssetId) -> Amount:
        return self._execute("end_bootstrap", bootstrap.end_bootstrap, asset_a, asset_b)

    def claim(self, who: AccountId, recipient: AccountId, asset_a: AssetId, asset_b: AssetId) -> Amount:
        return self._execute("claim", bootstrap.claim, who, recipient, asset_a, asset_b)

    def refund(self, who: AccountId, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
        return self._execute("refund", bootstrap.refund, who, asset_a, asset_b)

    # -- admin -----------------------------------------------------------

    def create_pair(self, asset_a: AssetId, asset_b: AssetId) -> Pair:
        return self._execute("create_pair", admin.create_pair, asset_a, asset_b)

    def bootstrap_create(
        self,
        asset_a: AssetId,
        asset_b: AssetId,
        target: Tuple[Amount, Amount],
        capacity: Tuple[Amount, Amount],
        end_block: int,
        rewards: Iterable[AssetId] = (),
        limits: Optional[Mapping[AssetId, Amount]] = None,
    ) -> BootstrapParameter:
        return self._execute(
            "bootstrap_create",
            admin.bootstrap_create,
            asset_a,
            asset_b,
            target,
            capacity,
            end_block,
            tuple(rewards),
            limits,
        )

    def bootstrap_update(
        self,
        asset_a: AssetId,
        asset_b: AssetId,
        target: Tuple[Amount, Amount],
        capacity: Tuple[Amount, Amount],
        end_block: int,
        rewards: Iterable[AssetId] = (),
        limits: Optional[Mapping[AssetId, Amount]] = None,
    ) -> BootstrapParameter:
        return self._execute(
            "bootstrap_update",
            admin.bootstrap_update,
            asset_a,
            asset_b,
            target,
            capacity,
            end_block,
            tuple(rewards),
            limits,
        )

    def bootstrap_charge_reward(
        self, charger: AccountId, asset_a: AssetId, asset_b: AssetId, charge: Mapping[AssetId, Amount]
    ) -> None:
        self._execute("bootstrap_charge_reward", admin.bootstrap_charge_reward, charger, asset_a, asset_b, charge)

    def bootstrap_withdraw_reward(self, asset_a: AssetId, asset_b: AssetId, recipient: AccountId) -> None:
        self._execute("bootstrap_withdraw_reward", admin.bootstrap_withdraw_reward, asset_a, asset_b, recipient)

    def set_fee_receiver(self, receiver: Optional[AccountId]) -> FeeMeta:
        return self._execute("set_fee_receiver", admin.set_fee_receiver, receiver)

    def set_fee_point(self, fee_point: int) -> FeeMeta:
        return self._execute("set_fee_point", admin.set_fee_point, fee_point)

    # -- queries ---------------------------------------------------------

    def pair_status(self, asset_a: AssetId, asset_b: AssetId) -> PairStatus:
        return self._storage.pair_status(canonical_pair(asset_a, asset_b))

    def get_reserves(self, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
        """Reserves in (asset_a, asset_b) order."""
        account = _pair_account_id(asset_a, asset_b)
        return self._ledger.balance_of(asset_a, account), self._ledger.balance_of(asset_b, account)

    def k_last(self, asset_a: AssetId, asset_b: AssetId) -> int:
        return self._storage.k_last(canonical_pair(asset_a, asset_b))

    def fee_meta(self) -> FeeMeta:
        return self._storage.fee_meta

    def contribution_of(self, asset_a: AssetId, asset_b: AssetId, account: AccountId) -> Tuple[Amount, Amount]:
        """Recorded contribution in canonical pair order ((0, 0) if none)."""
        return self._storage.contribution(canonical_pair(asset_a, asset_b), account) or (0, 0)

    def bootstrap_rewards(self, asset_a: AssetId, asset_b: AssetId) -> Dict[AssetId, Amount]:
        return self._storage.bootstrap_rewards(canonical_pair(asset_a, asset_b))

    def bootstrap_limits(self, asset_a: AssetId, asset_b: AssetId) -> Dict[AssetId, Amount]:
        return self._storage.bootstrap_limits(canonical_pair(asset_a, asset_b))

    def bootstrap_end_snapshot(self, asset_a: AssetId, asset_b: AssetId) -> Optional[Bootstrap]:
        return self._storage.bootstrap_end_status(canonical_pair(asset_a, asset_b))

    def is_bootstrap_disabled(self, asset_a: AssetId, asset_b: AssetId) -> bool:
        status = self.pair_status(asset_a, asset_b)
        return isinstance(status, Bootstrap) and status.params.is_disabled(self._block_number)

    def check_limits(self, asset_a: AssetId, asset_b: AssetId, account: AccountId) -> bool:
        return bootstrap.check_limits(self._read_context(), asset_a, asset_b, account)

    def get_amount_out_by_path(self, amount_in: Amount, path: Sequence[AssetId]) -> List[Amount]:
        return routing.quote_path_out(self._read_context(), amount_in, path)

    def get_amount_in_by_path(self, amount_out: Amount, path: Sequence[AssetId]) -> List[Amount]:
        return routing.quote_path_in(self._read_context(), amount_out, path)

    def lp_asset_id(self, asset_a: AssetId, asset_b: AssetId) -> AssetId:
        return _lp_asset_id(asset_a, asset_b)

    def pair_account_id(self, asset_a: AssetId, asset_b: AssetId) -> AccountId:
        return _pair_account_id(asset_a, asset_b)

    def state_root(self) -> str:
        """Digest of storage, plus balances when the ledger is the reference `BalanceTable`."""
        balances = self._ledger if isinstance(self._ledger, BalanceTable) else None
        return compute_state_root(storage=self._storage, balances=balances)
