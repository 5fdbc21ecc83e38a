"""
Per-operation execution context.

Every core operation receives an `ExecutionContext`: the working copy of
storage, the journaled ledger, the config, the current block number and the
event buffer. Nothing in the context is visible outside the operation until
the engine commits it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from ..errors import PairStateError
from ..state.balances import AccountId, Amount
from ..state.ledger import LedgerJournal
from ..state.pairs import Pair, PairMetadata, Trading, pair_account_id, status_name
from ..state.storage import SwapStorage
from .config import EngineConfig
from .events import Event


@dataclass
class ExecutionContext:
    storage: SwapStorage
    ledger: LedgerJournal
    config: EngineConfig
    block_number: int
    events: List[Event] = field(default_factory=list)

    def emit(self, event: Event) -> None:
        self.events.append(event)

    @property
    def pallet_account(self) -> AccountId:
        return self.config.pallet_account

    @property
    def pot_account(self) -> AccountId:
        return self.config.pot_account

    def trading_metadata(self, pair: Pair) -> PairMetadata:
        status = self.storage.pair_status(pair)
        if not isinstance(status, Trading):
            raise PairStateError(
                "InvalidStatus", f"pair {pair[0]}/{pair[1]} is {status_name(status)}, not Trading"
            )
        return status.metadata

    def reserves(self, pair: Pair) -> Tuple[Amount, Amount]:
        """Live reserves of a pair: the ledger balances of its reserve account."""
        account = pair_account_id(*pair)
        return (
            self.ledger.balance_of(pair[0], account),
            self.ledger.balance_of(pair[1], account),
        )
