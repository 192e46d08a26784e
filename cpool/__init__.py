"""
cpool: exact-integer model of a two-asset constant-product pool.
"""

from .core import (
    ChainConstants,
    ConstantProductPool,
    ProtocolConfig,
    compute_pool_address,
    load_protocol_config,
)
from .errors import (
    AssetNotInPoolError,
    ChainMismatchError,
    CrossChainComparisonError,
    IdenticalAssetsError,
    InsufficientInputAmountError,
    InsufficientReservesError,
    LiquidityExceedsSupplyError,
    PoolError,
    TokenMismatchError,
    UnsupportedChainError,
)
from .kernels.python.lp_math import MINIMUM_LIQUIDITY
from .state import AmountOfAsset, Asset, Price, equals, sorts_before

__version__ = "0.1.0"

__all__ = [
    "AmountOfAsset",
    "Asset",
    "Price",
    "equals",
    "sorts_before",
    "ChainConstants",
    "ConstantProductPool",
    "ProtocolConfig",
    "compute_pool_address",
    "load_protocol_config",
    "MINIMUM_LIQUIDITY",
    "AssetNotInPoolError",
    "ChainMismatchError",
    "CrossChainComparisonError",
    "IdenticalAssetsError",
    "InsufficientInputAmountError",
    "InsufficientReservesError",
    "LiquidityExceedsSupplyError",
    "PoolError",
    "TokenMismatchError",
    "UnsupportedChainError",
]
