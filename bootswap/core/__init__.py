"""
Core bootswap operations
"""

from .config import EngineConfig, engine_config_from_mapping, load_engine_config
from .context import ExecutionContext
from .engine import SwapEngine
from .events import (
    AssetSwap,
    BootstrapClaim,
    BootstrapContribute,
    BootstrapCreated,
    BootstrapEnd,
    BootstrapRefund,
    BootstrapUpdated,
    ChargeReward,
    DistributeReward,
    Event,
    FeeMetaUpdated,
    LiquidityAdded,
    LiquidityRemoved,
    PairCreated,
    WithdrawReward,
)

__all__ = [
    "EngineConfig",
    "engine_config_from_mapping",
    "load_engine_config",
    "ExecutionContext",
    "SwapEngine",
    "AssetSwap",
    "BootstrapClaim",
    "BootstrapContribute",
    "BootstrapCreated",
    "BootstrapEnd",
    "BootstrapRefund",
    "BootstrapUpdated",
    "ChargeReward",
    "DistributeReward",
    "Event",
    "FeeMetaUpdated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "PairCreated",
    "WithdrawReward",
]
