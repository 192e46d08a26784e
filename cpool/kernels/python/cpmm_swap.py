"""
CPMM swap kernel.

Quotes for a two-reserve constant-product pool with the fee taken from the
input side (basis points out of `MAX_FEE`):

    in_with_fee = amount_in * (MAX_FEE - fee)
    amount_out  = floor(in_with_fee * reserve_out / (reserve_in * MAX_FEE + in_with_fee))

    amount_in   = floor(reserve_in * amount_out * MAX_FEE /
                        ((reserve_out - amount_out) * (MAX_FEE - fee))) + 1

The full input stays in the pool, so k never decreases.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientInputAmountError, InsufficientReservesError


MAX_FEE = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def validate_fee(fee: int) -> int:
    _require_int("fee", fee)
    if not (0 <= fee <= MAX_FEE):
        raise ValueError(f"fee must be in [0, {MAX_FEE}]: {fee}")
    return fee


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def _check_reserves(reserve_in: int, reserve_out: int) -> None:
    _require_int("reserve_in", reserve_in)
    _require_int("reserve_out", reserve_out)
    if reserve_in < 0 or reserve_out < 0:
        raise ValueError(f"reserves must be non-negative: ({reserve_in}, {reserve_out})")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientReservesError(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int, fee: int) -> SwapQuote:
    """Output for an exact input, plus the post-swap reserves."""
    _check_reserves(reserve_in, reserve_out)
    _require_int("amount_in", amount_in)
    validate_fee(fee)
    if amount_in < 0:
        raise ValueError(f"amount_in must be non-negative: {amount_in}")

    in_with_fee = amount_in * (MAX_FEE - fee)
    numerator = in_with_fee * reserve_out
    denominator = reserve_in * MAX_FEE + in_with_fee
    amount_out = numerator // denominator
    if amount_out <= 0:
        raise InsufficientInputAmountError(
            f"amount_in {amount_in} too small to produce output at fee {fee}"
        )

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )


def swap_exact_out(*, reserve_in: int, reserve_out: int, amount_out: int, fee: int) -> SwapQuote:
    """Input required for an exact output, plus the post-swap reserves."""
    _check_reserves(reserve_in, reserve_out)
    _require_int("amount_out", amount_out)
    validate_fee(fee)
    if amount_out < 0:
        raise ValueError(f"amount_out must be non-negative: {amount_out}")
    if amount_out >= reserve_out:
        raise InsufficientReservesError(
            f"amount_out ({amount_out}) must be below reserve_out ({reserve_out})"
        )
    if fee == MAX_FEE:
        raise ValueError("cannot compute input with a 100% fee")

    numerator = reserve_in * amount_out * MAX_FEE
    denominator = (reserve_out - amount_out) * (MAX_FEE - fee)
    amount_in = numerator // denominator + 1

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
