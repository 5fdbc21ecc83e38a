"""
Engine configuration.

`EngineConfig` is a frozen, self-validating dataclass. It can be built in code
or loaded from a YAML mapping:

    native_asset: "0x00...00"
    pallet_id: bootswap
    pot_id: bootswap/pot
    native_fee_divisor: 200
    fee_receiver: null
    fee_point: 0
    enforce_bootstrap_limits: false
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..state.balances import NATIVE_ASSET, AccountId, AssetId
from ..state.pairs import module_account_id
from ..state.storage import FeeMeta


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty str")


@dataclass(frozen=True)
class EngineConfig:
    # Paying with this asset on an exact-in swap costs the origin fee.
    native_asset: AssetId = NATIVE_ASSET
    # Seed of the module account holding bootstrap escrow and pledged rewards.
    pallet_id: str = "bootswap"
    # Seed of the account collecting the native origin fee.
    pot_id: str = "bootswap/pot"
    # Origin fee = amount_in // native_fee_divisor (0.5% by default).
    native_fee_divisor: int = 200

    # Initial protocol fee switch for fresh storage.
    fee_receiver: Optional[AccountId] = None
    fee_point: int = 0

    # If True, `contribute` rejects accounts that fail the bootstrap limits.
    enforce_bootstrap_limits: bool = False

    def __post_init__(self) -> None:
        _require_str("native_asset", self.native_asset)
        _require_str("pallet_id", self.pallet_id)
        _require_str("pot_id", self.pot_id)
        if self.pallet_id == self.pot_id:
            raise ValueError("pallet_id and pot_id must differ")
        if not isinstance(self.native_fee_divisor, int) or isinstance(self.native_fee_divisor, bool):
            raise ValueError("native_fee_divisor must be an int")
        if self.native_fee_divisor <= 0:
            raise ValueError(f"native_fee_divisor must be positive: {self.native_fee_divisor}")
        if self.fee_receiver is not None:
            _require_str("fee_receiver", self.fee_receiver)
        if not isinstance(self.fee_point, int) or isinstance(self.fee_point, bool):
            raise ValueError("fee_point must be an int")
        if not (0 <= self.fee_point <= 30):
            raise ValueError(f"fee_point must be in [0, 30]: {self.fee_point}")
        if not isinstance(self.enforce_bootstrap_limits, bool):
            raise ValueError("enforce_bootstrap_limits must be a bool")

    @property
    def pallet_account(self) -> AccountId:
        return module_account_id(self.pallet_id)

    @property
    def pot_account(self) -> AccountId:
        return module_account_id(self.pot_id)

    def initial_fee_meta(self) -> FeeMeta:
        return FeeMeta(receiver=self.fee_receiver, fee_point=self.fee_point)


def engine_config_from_mapping(obj: Any) -> EngineConfig:
    """Build an `EngineConfig` from an already-parsed mapping (unknown keys are rejected)."""
    if obj is None:
        return EngineConfig()
    if not isinstance(obj, Mapping):
        raise ValueError("engine config must be a mapping")
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(str(k) for k in obj if k not in known)
    if unknown:
        raise ValueError(f"unknown engine config keys: {', '.join(unknown)}")
    try:
        return EngineConfig(**{str(k): v for k, v in obj.items()})
    except TypeError as exc:
        raise ValueError(f"invalid engine config: {exc}") from exc


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """Load an `EngineConfig` from a YAML file."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    return engine_config_from_mapping(obj)
