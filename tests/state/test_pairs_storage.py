from __future__ import annotations

import pytest

from bootswap.errors import PathError
from bootswap.state import (
    DISABLED,
    Bootstrap,
    BootstrapParameter,
    FeeMeta,
    PairMetadata,
    SwapStorage,
    Trading,
    canonical_pair,
    lp_asset_id,
    module_account_id,
    pair_account_id,
)
from bootswap.state.pairs import orient_amounts, status_name

ASSET_A = "0x" + "01" * 32
ASSET_B = "0x" + "02" * 32


def _params(acc=(0, 0), end_block: int = 10) -> BootstrapParameter:
    return BootstrapParameter(
        target_supply=(100, 100),
        capacity_supply=(200, 200),
        accumulated_supply=acc,
        end_block=end_block,
        escrow_account="escrow",
    )


def test_canonical_pair_sorts_and_rejects_identical_assets() -> None:
    assert canonical_pair(ASSET_B, ASSET_A) == (ASSET_A, ASSET_B)
    with pytest.raises(PathError, match="InvalidPath"):
        canonical_pair(ASSET_A, ASSET_A)


def test_orient_amounts_follows_canonical_order() -> None:
    pair = canonical_pair(ASSET_B, ASSET_A)
    assert orient_amounts(pair, ASSET_B, 5, 7) == (7, 5)
    assert orient_amounts(pair, ASSET_A, 5, 7) == (5, 7)


def test_derived_ids_are_order_insensitive_and_distinct() -> None:
    account = pair_account_id(ASSET_A, ASSET_B)
    assert account == pair_account_id(ASSET_B, ASSET_A)
    assert lp_asset_id(ASSET_A, ASSET_B) == lp_asset_id(ASSET_B, ASSET_A)
    assert account != lp_asset_id(ASSET_A, ASSET_B)
    assert account.startswith("0x") and len(account) == 66
    assert module_account_id("bootswap") != module_account_id("bootswap/pot")


def test_disable_predicate_boundaries() -> None:
    short = _params(acc=(50, 100))
    assert not short.is_disabled(10)  # deadline not yet passed
    assert short.is_disabled(11)
    met = _params(acc=(100, 100))
    assert not met.is_disabled(11)


def test_active_and_qualified_windows() -> None:
    params = _params(acc=(100, 150))
    assert params.is_active(9)
    assert not params.is_active(10)
    assert not params.is_qualified(9)
    assert params.is_qualified(10)
    assert not _params(acc=(99, 150)).is_qualified(10)


def test_bootstrap_parameter_validation() -> None:
    with pytest.raises(ValueError):
        _params(acc=(-1, 0))
    with pytest.raises(TypeError):
        _params(acc=[0, 0])


def test_status_names() -> None:
    assert status_name(DISABLED) == "Disabled"
    assert status_name(Bootstrap(_params())) == "Bootstrap"
    assert status_name(Trading(PairMetadata("acct", 0))) == "Trading"


def test_storage_defaults_and_canonical_keys() -> None:
    storage = SwapStorage()
    pair = canonical_pair(ASSET_A, ASSET_B)
    assert storage.pair_status(pair) == DISABLED
    assert storage.k_last(pair) == 0
    assert storage.contribution(pair, "alice") is None
    with pytest.raises(ValueError, match="canonical"):
        storage.pair_status((ASSET_B, ASSET_A))


def test_storage_copy_is_independent() -> None:
    storage = SwapStorage()
    pair = canonical_pair(ASSET_A, ASSET_B)
    storage.set_bootstrap_rewards(pair, {"R": 1})
    clone = storage.copy()
    clone.set_pair_status(pair, Bootstrap(_params()))
    clone.set_bootstrap_rewards(pair, {"R": 5})
    clone.set_contribution(pair, "alice", (1, 2))

    assert storage.pair_status(pair) == DISABLED
    assert storage.bootstrap_rewards(pair) == {"R": 1}
    assert storage.contribution(pair, "alice") is None


def test_take_contribution_removes_the_record() -> None:
    storage = SwapStorage()
    pair = canonical_pair(ASSET_A, ASSET_B)
    storage.set_contribution(pair, "alice", (3, 4))
    assert storage.take_contribution(pair, "alice") == (3, 4)
    assert storage.take_contribution(pair, "alice") is None


def test_zero_k_last_is_not_stored() -> None:
    storage = SwapStorage()
    pair = canonical_pair(ASSET_A, ASSET_B)
    storage.set_k_last(pair, 42)
    storage.set_k_last(pair, 0)
    assert storage.items()["k_last"] == {}


def test_fee_meta_validation() -> None:
    assert not FeeMeta().fee_on
    assert not FeeMeta(receiver="treasury", fee_point=0).fee_on
    assert FeeMeta(receiver="treasury", fee_point=5).fee_on
    with pytest.raises(ValueError, match="fee_point"):
        FeeMeta(receiver="treasury", fee_point=31)


def test_end_snapshot_must_be_a_bootstrap() -> None:
    storage = SwapStorage()
    pair = canonical_pair(ASSET_A, ASSET_B)
    with pytest.raises(TypeError):
        storage.set_bootstrap_end_status(pair, Trading(PairMetadata("acct", 0)))
