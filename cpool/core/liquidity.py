"""
Pool operations as explicit results.

Each operation returns a frozen result carrying either the payload
(`ok=True`) or the PoolError that rejected it (`ok=False`, with `code` set to
the error class name). Only PoolError is captured: TypeError and other bugs
propagate. The `*_or_raise` variants re-raise the captured error.

Deposits and burns also return the post-operation pool snapshot:

    add_liquidity:     reserves += deposit,  supply += minted
    remove_liquidity:  reserves -= payout,   supply -= liquidity
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from ..errors import PoolError
from ..kernels.python import lp_math
from ..state.assets import AmountOfAsset
from .pool import ConstantProductPool, LiquidityQuantity


@dataclass(frozen=True)
class MintResult:
    ok: bool
    liquidity_minted: int = 0
    new_total_supply: int = 0
    pool: Optional[ConstantProductPool] = None
    error: Optional[PoolError] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class BurnResult:
    ok: bool
    amount0: Optional[AmountOfAsset] = None
    amount1: Optional[AmountOfAsset] = None
    new_total_supply: int = 0
    pool: Optional[ConstantProductPool] = None
    error: Optional[PoolError] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class SwapResult:
    ok: bool
    amount_in: Optional[AmountOfAsset] = None
    amount_out: Optional[AmountOfAsset] = None
    pool: Optional[ConstantProductPool] = None
    error: Optional[PoolError] = None
    code: Optional[str] = None


R = TypeVar("R", MintResult, BurnResult, SwapResult)


def _capture(result_type: Callable[..., R], fn: Callable[[], R]) -> R:
    try:
        return fn()
    except PoolError as exc:
        return result_type(ok=False, error=exc, code=type(exc).__name__)


def _raise_if_rejected(result: R) -> R:
    if not result.ok:
        assert result.error is not None
        raise result.error
    return result


def add_liquidity(
    pool: ConstantProductPool,
    total_supply: LiquidityQuantity,
    amount_a: AmountOfAsset,
    amount_b: AmountOfAsset,
) -> MintResult:
    """
    Deposit both pool tokens.

    On the first deposit the returned supply includes the locked minimum
    liquidity.
    """

    def run() -> MintResult:
        minted = pool.get_liquidity_minted(total_supply, amount_a, amount_b)
        supply = pool.liquidity_quotient("total_supply", total_supply)
        locked = pool.minimum_liquidity if supply == 0 else 0
        reserve_a = pool.reserve_of(amount_a.asset) + amount_a
        reserve_b = pool.reserve_of(amount_b.asset) + amount_b
        return MintResult(
            ok=True,
            liquidity_minted=minted,
            new_total_supply=supply + locked + minted,
            pool=ConstantProductPool(reserve_a, reserve_b, pool.fee, pool.twap, config=pool.config),
        )

    return _capture(MintResult, run)


def add_liquidity_or_raise(
    pool: ConstantProductPool,
    total_supply: LiquidityQuantity,
    amount_a: AmountOfAsset,
    amount_b: AmountOfAsset,
) -> MintResult:
    return _raise_if_rejected(add_liquidity(pool, total_supply, amount_a, amount_b))


def remove_liquidity(
    pool: ConstantProductPool,
    total_supply: LiquidityQuantity,
    liquidity: LiquidityQuantity,
) -> BurnResult:
    """Burn `liquidity` tokens for both reserves (floor rounding on each side)."""

    def run() -> BurnResult:
        supply = pool.liquidity_quotient("total_supply", total_supply)
        burned = pool.liquidity_quotient("liquidity", liquidity)
        amount0_out, amount1_out = lp_math.burn_liquidity(
            reserve0=pool.reserve0.quotient,
            reserve1=pool.reserve1.quotient,
            total_supply=supply,
            liquidity=burned,
        )
        amount0 = AmountOfAsset(pool.token0, amount0_out)
        amount1 = AmountOfAsset(pool.token1, amount1_out)
        return BurnResult(
            ok=True,
            amount0=amount0,
            amount1=amount1,
            new_total_supply=supply - burned,
            pool=ConstantProductPool(
                pool.reserve0 - amount0,
                pool.reserve1 - amount1,
                pool.fee,
                pool.twap,
                config=pool.config,
            ),
        )

    return _capture(BurnResult, run)


def remove_liquidity_or_raise(
    pool: ConstantProductPool,
    total_supply: LiquidityQuantity,
    liquidity: LiquidityQuantity,
) -> BurnResult:
    return _raise_if_rejected(remove_liquidity(pool, total_supply, liquidity))


def swap_exact_in(pool: ConstantProductPool, amount_in: AmountOfAsset) -> SwapResult:
    def run() -> SwapResult:
        amount_out, next_pool = pool.get_output_amount(amount_in)
        return SwapResult(ok=True, amount_in=amount_in, amount_out=amount_out, pool=next_pool)

    return _capture(SwapResult, run)


def swap_exact_in_or_raise(pool: ConstantProductPool, amount_in: AmountOfAsset) -> SwapResult:
    return _raise_if_rejected(swap_exact_in(pool, amount_in))


def swap_exact_out(pool: ConstantProductPool, amount_out: AmountOfAsset) -> SwapResult:
    def run() -> SwapResult:
        amount_in, next_pool = pool.get_input_amount(amount_out)
        return SwapResult(ok=True, amount_in=amount_in, amount_out=amount_out, pool=next_pool)

    return _capture(SwapResult, run)


def swap_exact_out_or_raise(pool: ConstantProductPool, amount_out: AmountOfAsset) -> SwapResult:
    return _raise_if_rejected(swap_exact_out(pool, amount_out))
