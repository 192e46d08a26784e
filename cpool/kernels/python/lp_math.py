"""
Liquidity math kernel.

Mint and burn arithmetic for a two-reserve constant-product pool, written to
match the pool contract bit for bit:
- every division is floor division on nonnegative ints,
- square roots are exact integer floors (`math.isqrt`),
- the first deposit permanently locks `minimum_liquidity` tokens.
"""

from __future__ import annotations

import math

from ...errors import InsufficientInputAmountError, LiquidityExceedsSupplyError


MINIMUM_LIQUIDITY = 1000

# Protocol fee share of sqrt(k) growth is 1 / (PROTOCOL_FEE_DIVISOR + 1).
PROTOCOL_FEE_DIVISOR = 5


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_non_negative(**values: int) -> None:
    for name, v in values.items():
        _require_int(name, v)
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")


def sqrt_floor(n: int) -> int:
    """Exact floor(sqrt(n)) for arbitrary-precision n >= 0."""
    _require_non_negative(n=n)
    return math.isqrt(n)


def mint_liquidity_initial(
    *,
    amount0: int,
    amount1: int,
    minimum_liquidity: int = MINIMUM_LIQUIDITY,
) -> int:
    """
    Liquidity minted by the first deposit into a pool with zero supply.

        liquidity = floor(sqrt(amount0 * amount1)) - minimum_liquidity

    Raises InsufficientInputAmountError if the result is not strictly positive.
    """
    _require_non_negative(amount0=amount0, amount1=amount1, minimum_liquidity=minimum_liquidity)

    liquidity = sqrt_floor(amount0 * amount1) - minimum_liquidity
    if liquidity <= 0:
        raise InsufficientInputAmountError(
            f"initial liquidity must exceed the {minimum_liquidity} locked tokens: "
            f"sqrt({amount0} * {amount1}) - {minimum_liquidity} = {liquidity}"
        )
    return liquidity


def mint_liquidity_proportional(
    *,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    amount0: int,
    amount1: int,
) -> int:
    """
    Liquidity minted by a deposit into a pool with existing supply.

        liquidity = min(floor(amount0 * total_supply / reserve0),
                        floor(amount1 * total_supply / reserve1))

    Each term is floored independently before taking the minimum.
    """
    _require_non_negative(
        reserve0=reserve0,
        reserve1=reserve1,
        total_supply=total_supply,
        amount0=amount0,
        amount1=amount1,
    )
    if total_supply == 0:
        raise ValueError("total_supply must be positive for a proportional mint")
    if reserve0 == 0 or reserve1 == 0:
        raise InsufficientInputAmountError(
            f"cannot mint against an empty reserve: ({reserve0}, {reserve1})"
        )

    liquidity0 = (amount0 * total_supply) // reserve0
    liquidity1 = (amount1 * total_supply) // reserve1
    liquidity = min(liquidity0, liquidity1)
    if liquidity <= 0:
        raise InsufficientInputAmountError(
            f"deposit too small to mint liquidity: ({amount0}, {amount1}) against "
            f"reserves ({reserve0}, {reserve1}) and supply {total_supply}"
        )
    return liquidity


def mint_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    amount0: int,
    amount1: int,
    minimum_liquidity: int = MINIMUM_LIQUIDITY,
) -> int:
    """Dispatch to the bootstrap or proportional formula on `total_supply`."""
    _require_non_negative(total_supply=total_supply)
    if total_supply == 0:
        return mint_liquidity_initial(amount0=amount0, amount1=amount1, minimum_liquidity=minimum_liquidity)
    return mint_liquidity_proportional(
        reserve0=reserve0,
        reserve1=reserve1,
        total_supply=total_supply,
        amount0=amount0,
        amount1=amount1,
    )


def fee_adjusted_total_supply(*, total_supply: int, reserve0: int, reserve1: int, k_last: int) -> int:
    """
    Total supply including protocol fee liquidity not yet minted.

    When the protocol fee is on, the pool mints
        total_supply * (rootK - rootKLast) / (5 * rootK + rootKLast)
    on the next mint/burn, where rootK = sqrt(reserve0 * reserve1) and
    rootKLast = sqrt(k_last). No growth (or k_last == 0) means no adjustment.
    """
    _require_non_negative(total_supply=total_supply, reserve0=reserve0, reserve1=reserve1, k_last=k_last)
    if k_last == 0:
        return total_supply

    root_k = sqrt_floor(reserve0 * reserve1)
    root_k_last = sqrt_floor(k_last)
    if root_k <= root_k_last:
        return total_supply

    numerator = total_supply * (root_k - root_k_last)
    denominator = root_k * PROTOCOL_FEE_DIVISOR + root_k_last
    return total_supply + numerator // denominator


def liquidity_value(*, reserve: int, total_supply: int, liquidity: int) -> int:
    """
    Pro-rata claim of `liquidity` tokens on `reserve` (floor).
    """
    _require_non_negative(reserve=reserve, total_supply=total_supply, liquidity=liquidity)
    if liquidity > total_supply:
        raise LiquidityExceedsSupplyError(
            f"cannot value more liquidity than supply: {liquidity} > {total_supply}"
        )
    if total_supply == 0:
        raise InsufficientInputAmountError("total_supply must be positive to value liquidity")
    return (reserve * liquidity) // total_supply


def burn_liquidity(*, reserve0: int, reserve1: int, total_supply: int, liquidity: int) -> tuple[int, int]:
    """
    Amounts returned for burning `liquidity` tokens (floor rounding on each side).
    """
    amount0 = liquidity_value(reserve=reserve0, total_supply=total_supply, liquidity=liquidity)
    amount1 = liquidity_value(reserve=reserve1, total_supply=total_supply, liquidity=liquidity)
    return amount0, amount1
