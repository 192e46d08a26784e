"""
Asset identity, ordering and tagged integer amounts.

Assets are identified by (chain_id, address). Ordering follows the pool
factory's own sort: lowercase hex address, ascending. Amounts are plain
Python ints tagged with their asset; there is no implicit conversion between
assets and no floating point anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from web3 import Web3

from ..errors import CrossChainComparisonError, IdenticalAssetsError, TokenMismatchError


ChainId = int
Address = str  # EIP-55 checksummed, 0x-prefixed, 20 bytes


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def checksum_address(address: str) -> Address:
    """Validate `address` and return its EIP-55 checksummed form."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValueError(f"invalid address: {address!r}")
    # mixed case must carry a valid EIP-55 checksum
    digits = address[2:] if address[:2].lower() == "0x" else address
    if digits != digits.lower() and digits != digits.upper() and not Web3.is_checksum_address(address):
        raise ValueError(f"invalid address: {address!r} (bad checksum)")
    return Web3.to_checksum_address(address)


@dataclass(frozen=True, eq=False)
class Asset:
    """
    An on-chain token.

    Attributes:
        chain_id: Chain the token lives on
        address: Token contract address (stored checksummed)
        decimals: Decimal precision, in [0, 255)
        symbol: Optional display symbol (ignored by equality)
        name: Optional display name (ignored by equality)
    """
    chain_id: ChainId
    address: Address
    decimals: int
    symbol: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        _require_int("chain_id", self.chain_id)
        _require_int("decimals", self.decimals)
        if not (0 <= self.decimals < 255):
            raise ValueError(f"decimals must be in [0, 255): {self.decimals}")
        object.__setattr__(self, "address", checksum_address(self.address))

    @property
    def sort_key(self) -> str:
        return self.address.lower()

    def equals(self, other: "Asset") -> bool:
        return equals(self, other)

    def sorts_before(self, other: "Asset") -> bool:
        return sorts_before(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return equals(self, other)

    def __hash__(self) -> int:
        return hash((self.chain_id, self.sort_key))

    def __repr__(self) -> str:
        label = self.symbol or self.address
        return f"Asset({label}@{self.chain_id})"


def equals(a: Asset, b: Asset) -> bool:
    """Identity equality on (chain_id, address); symbol, name and decimals are cosmetic."""
    return a.chain_id == b.chain_id and a.sort_key == b.sort_key


def sorts_before(a: Asset, b: Asset) -> bool:
    """
    Return True if `a` sorts before `b`.

    Raises:
        CrossChainComparisonError: If the assets are on different chains
        IdenticalAssetsError: If both arguments are the same asset
    """
    if a.chain_id != b.chain_id:
        raise CrossChainComparisonError(
            f"cannot order assets across chains: {a.chain_id} != {b.chain_id}"
        )
    if a.sort_key == b.sort_key:
        raise IdenticalAssetsError(f"identical asset addresses: {a.address}")
    return a.sort_key < b.sort_key


def sort_pair(a: Asset, b: Asset) -> tuple[Asset, Asset]:
    """Return (token0, token1) in canonical order."""
    return (a, b) if sorts_before(a, b) else (b, a)


@dataclass(frozen=True)
class AmountOfAsset:
    """A nonnegative integer quantity of a single asset, in its smallest unit."""

    asset: Asset
    quotient: int

    def __post_init__(self) -> None:
        _require_int("quotient", self.quotient)
        if self.quotient < 0:
            raise ValueError(f"amount must be non-negative: {self.quotient}")

    @classmethod
    def from_raw_amount(cls, asset: Asset, raw: Union[int, str]) -> "AmountOfAsset":
        if isinstance(raw, str):
            if not raw.isdigit():
                raise ValueError(f"raw amount must be a decimal integer string: {raw!r}")
            raw = int(raw)
        return cls(asset=asset, quotient=raw)

    def _require_same_asset(self, other: "AmountOfAsset") -> None:
        if not isinstance(other, AmountOfAsset):
            raise TypeError("can only combine AmountOfAsset values")
        if not self.asset.equals(other.asset):
            raise TokenMismatchError(
                f"cannot combine amounts of different assets: {self.asset!r} vs {other.asset!r}"
            )

    def __add__(self, other: "AmountOfAsset") -> "AmountOfAsset":
        self._require_same_asset(other)
        return AmountOfAsset(self.asset, self.quotient + other.quotient)

    def __sub__(self, other: "AmountOfAsset") -> "AmountOfAsset":
        self._require_same_asset(other)
        if other.quotient > self.quotient:
            raise ValueError(
                f"amount would go negative: {self.quotient} - {other.quotient}"
            )
        return AmountOfAsset(self.asset, self.quotient - other.quotient)

    def __repr__(self) -> str:
        return f"AmountOfAsset({self.quotient} {self.asset!r})"
