"""
Exact rational prices between two assets.

A Price of `base_asset` in `quote_asset` is numerator/denominator units of
quote per unit of base, kept as two ints and never reduced or converted to
float.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ChainMismatchError, TokenMismatchError
from .assets import AmountOfAsset, Asset, _require_int


@dataclass(frozen=True)
class Price:
    base_asset: Asset
    quote_asset: Asset
    denominator: int
    numerator: int

    def __post_init__(self) -> None:
        _require_int("denominator", self.denominator)
        _require_int("numerator", self.numerator)
        if self.denominator < 0 or self.numerator < 0:
            raise ValueError(
                f"price terms must be non-negative: {self.numerator}/{self.denominator}"
            )
        if self.base_asset.chain_id != self.quote_asset.chain_id:
            raise ChainMismatchError(
                f"price assets on different chains: "
                f"{self.base_asset.chain_id} != {self.quote_asset.chain_id}"
            )

    def invert(self) -> "Price":
        return Price(
            base_asset=self.quote_asset,
            quote_asset=self.base_asset,
            denominator=self.numerator,
            numerator=self.denominator,
        )

    def quote(self, amount: AmountOfAsset) -> AmountOfAsset:
        """Convert an amount of the base asset into the quote asset (floor)."""
        if not amount.asset.equals(self.base_asset):
            raise TokenMismatchError(
                f"expected an amount of {self.base_asset!r}, got {amount.asset!r}"
            )
        if self.denominator == 0:
            raise ZeroDivisionError("price has a zero denominator")
        return AmountOfAsset(self.quote_asset, (amount.quotient * self.numerator) // self.denominator)

    def same_ratio(self, other: "Price") -> bool:
        """Compare two prices over the same assets by cross-multiplication."""
        if not (self.base_asset.equals(other.base_asset) and self.quote_asset.equals(other.quote_asset)):
            return False
        return self.numerator * other.denominator == other.numerator * self.denominator

    def is_inverse_of(self, other: "Price") -> bool:
        return self.same_ratio(other.invert())

    def __repr__(self) -> str:
        return f"Price({self.numerator}/{self.denominator} {self.quote_asset!r} per {self.base_asset!r})"
