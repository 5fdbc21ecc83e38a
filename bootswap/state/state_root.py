"""
Deterministic state root hashing (v1).

This is intended for:
- debugging / audit (stable hashes for the same logical state),
- checking that a failed operation left storage and balances untouched.
"""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

from .balances import BalanceTable
from .canonical import (
    domain_sep_bytes,
    encode_bytes,
    encode_optional_str,
    encode_str,
    encode_uvarint,
    sha256_hex,
)
from .pairs import Bootstrap, BootstrapParameter, Disabled, Pair, PairStatus, Trading
from .storage import SwapStorage


STATE_ROOT_VERSION = 1

_STATUS_CODE_DISABLED = 0
_STATUS_CODE_BOOTSTRAP = 1
_STATUS_CODE_TRADING = 2


def _encode_pair(pair: Pair) -> bytes:
    return encode_str(pair[0]) + encode_str(pair[1])


def _encode_amounts(amounts: Tuple[int, int]) -> bytes:
    return encode_uvarint(amounts[0]) + encode_uvarint(amounts[1])


def _encode_bootstrap_params(params: BootstrapParameter) -> bytes:
    return (
        _encode_amounts(params.target_supply)
        + _encode_amounts(params.capacity_supply)
        + _encode_amounts(params.accumulated_supply)
        + encode_uvarint(params.end_block)
        + encode_str(params.escrow_account)
    )


def _encode_status(status: PairStatus) -> bytes:
    if isinstance(status, Trading):
        meta = status.metadata
        return (
            encode_uvarint(_STATUS_CODE_TRADING)
            + encode_str(meta.reserve_account)
            + encode_uvarint(meta.total_supply)
        )
    if isinstance(status, Bootstrap):
        return encode_uvarint(_STATUS_CODE_BOOTSTRAP) + _encode_bootstrap_params(status.params)
    if isinstance(status, Disabled):
        return encode_uvarint(_STATUS_CODE_DISABLED)
    raise TypeError(f"unknown pair status: {status!r}")


def _encode_asset_map(entries: Mapping[str, int]) -> bytes:
    out = bytearray()
    out += encode_uvarint(len(entries))
    for asset in sorted(entries):
        out += encode_str(asset)
        out += encode_uvarint(entries[asset])
    return bytes(out)


def _encode_storage_section(storage: SwapStorage) -> bytes:
    tables = storage.items()
    out = bytearray()

    statuses = tables["pair_status"]
    out += encode_uvarint(len(statuses))
    for pair in sorted(statuses):
        out += _encode_pair(pair) + _encode_status(statuses[pair])

    k_last = tables["k_last"]
    out += encode_uvarint(len(k_last))
    for pair in sorted(k_last):
        out += _encode_pair(pair) + encode_uvarint(k_last[pair])

    fee_meta = tables["fee_meta"]
    out += encode_optional_str(fee_meta.receiver) + encode_uvarint(fee_meta.fee_point)

    contributions = tables["contributions"]
    out += encode_uvarint(len(contributions))
    for pair, account in sorted(contributions):
        out += _encode_pair(pair) + encode_str(account) + _encode_amounts(contributions[(pair, account)])

    for name in ("rewards", "limits"):
        per_pair = tables[name]
        out += encode_uvarint(len(per_pair))
        for pair in sorted(per_pair):
            out += _encode_pair(pair) + _encode_asset_map(per_pair[pair])

    end_status = tables["end_status"]
    out += encode_uvarint(len(end_status))
    for pair in sorted(end_status):
        out += _encode_pair(pair) + _encode_status(end_status[pair])

    return bytes(out)


def _encode_balances_section(balances: BalanceTable) -> bytes:
    out = bytearray()
    entries = sorted(balances.get_all_balances().items())
    out += encode_uvarint(len(entries))
    for (account, asset), amount in entries:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"invalid balance amount: {amount!r}")
        out += encode_str(account)
        out += encode_str(asset)
        out += encode_uvarint(amount)
    return bytes(out)


def compute_state_root(*, storage: SwapStorage, balances: Optional[BalanceTable] = None) -> str:
    """
    Compute a deterministic state root hash over engine storage (and, when
    given, the reference ledger).

    Returns a 0x-prefixed sha256 digest.
    """
    if not isinstance(storage, SwapStorage):
        raise TypeError("storage must be a SwapStorage")

    payload = (
        domain_sep_bytes("state_root", version=STATE_ROOT_VERSION)
        + b"STO"
        + encode_bytes(_encode_storage_section(storage))
    )
    if balances is not None:
        if not isinstance(balances, BalanceTable):
            raise TypeError("balances must be a BalanceTable")
        payload += b"BAL" + encode_bytes(_encode_balances_section(balances))
    return sha256_hex(payload)
