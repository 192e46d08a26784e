"""Exception types for constant-product pool operations.

Every error is deterministic: retrying with the same inputs raises the same
error again. All of them derive from ``ValueError`` so callers can treat them
as bad input.
"""

from __future__ import annotations


class PoolError(ValueError):
    """Base class for pool, asset and liquidity errors."""


class ChainMismatchError(PoolError):
    """Raised when two assets expected on the same chain are not."""


class CrossChainComparisonError(ChainMismatchError):
    """Raised when ordering two assets that live on different chains."""


class IdenticalAssetsError(PoolError):
    """Raised when a pair is built from the same asset twice."""


class AssetNotInPoolError(PoolError):
    """Raised when the queried asset is neither token0 nor token1."""


class TokenMismatchError(PoolError):
    """Raised when an amount's asset does not match the expected asset."""


class InsufficientInputAmountError(PoolError):
    """Raised when computed liquidity or output would be zero or negative."""


class InsufficientReservesError(PoolError):
    """Raised when a swap cannot be served by the pool's reserves."""


class LiquidityExceedsSupplyError(PoolError):
    """Raised when more liquidity is burned than the total supply."""


class UnsupportedChainError(PoolError):
    """Raised when no protocol constants are registered for a chain."""

    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id
        super().__init__(f"no protocol constants registered for chain {chain_id}")
