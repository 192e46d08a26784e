"""
Constant-product pool snapshot.

A ConstantProductPool is an immutable view of a two-asset pool's reserves at
one point in time. Construction sorts the two amounts so token0 is always the
asset that sorts first; operations that change reserves (swaps, deposits)
return a new snapshot instead of mutating this one.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

from ..errors import (
    AssetNotInPoolError,
    ChainMismatchError,
    InsufficientReservesError,
    LiquidityExceedsSupplyError,
    TokenMismatchError,
)
from ..kernels.python import cpmm_swap, lp_math
from ..state.assets import Address, AmountOfAsset, Asset, sorts_before
from ..state.price import Price
from .config import DEFAULT_FEE, EMPTY_CONFIG, ProtocolConfig

logger = logging.getLogger(__name__)

LIQUIDITY_TOKEN_DECIMALS = 18
LIQUIDITY_TOKEN_SYMBOL = "CPLP"
LIQUIDITY_TOKEN_NAME = "Constant Product LP Token"

LiquidityQuantity = Union[int, AmountOfAsset]


class ConstantProductPool:
    """
    Immutable two-reserve constant-product pool.

    Args:
        amount_a: Reserve of one asset
        amount_b: Reserve of the other asset, in any order
        fee: Swap fee in basis points (0-10000)
        twap: Whether the pool tracks time-weighted average prices
        config: Protocol constants used for the pool address, the liquidity
            token and the minimum liquidity; defaults to an empty config

    Raises:
        ChainMismatchError: If the two assets are on different chains
        IdenticalAssetsError: If both amounts are of the same asset
    """

    __slots__ = ("_reserves", "_fee", "_twap", "_config")

    def __init__(
        self,
        amount_a: AmountOfAsset,
        amount_b: AmountOfAsset,
        fee: int = DEFAULT_FEE,
        twap: bool = True,
        *,
        config: Optional[ProtocolConfig] = None,
    ) -> None:
        if amount_a.asset.chain_id != amount_b.asset.chain_id:
            raise ChainMismatchError(
                f"pool assets on different chains: "
                f"{amount_a.asset.chain_id} != {amount_b.asset.chain_id}"
            )
        if not isinstance(twap, bool):
            raise TypeError("twap must be a bool")
        cpmm_swap.validate_fee(fee)

        if sorts_before(amount_a.asset, amount_b.asset):
            reserves = (amount_a, amount_b)
        else:
            reserves = (amount_b, amount_a)

        object.__setattr__(self, "_reserves", reserves)
        object.__setattr__(self, "_fee", fee)
        object.__setattr__(self, "_twap", twap)
        object.__setattr__(self, "_config", EMPTY_CONFIG if config is None else config)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # -- identity -------------------------------------------------------------

    @property
    def token0(self) -> Asset:
        return self._reserves[0].asset

    @property
    def token1(self) -> Asset:
        return self._reserves[1].asset

    @property
    def assets(self) -> Tuple[Asset, Asset]:
        return self.token0, self.token1

    @property
    def chain_id(self) -> int:
        return self.token0.chain_id

    @property
    def fee(self) -> int:
        return self._fee

    @property
    def twap(self) -> bool:
        return self._twap

    @property
    def config(self) -> ProtocolConfig:
        return self._config

    @staticmethod
    def get_address(
        token_a: Asset,
        token_b: Asset,
        fee: int = DEFAULT_FEE,
        twap: bool = True,
        config: ProtocolConfig = EMPTY_CONFIG,
    ) -> Address:
        return config.compute_pool_address(token_a, token_b, fee, twap)

    @property
    def address(self) -> Address:
        """Raises UnsupportedChainError when the config has no constants for this chain."""
        return self.get_address(self.token0, self.token1, self._fee, self._twap, self._config)

    @property
    def liquidity_token(self) -> Asset:
        return Asset(
            chain_id=self.chain_id,
            address=self.address,
            decimals=LIQUIDITY_TOKEN_DECIMALS,
            symbol=LIQUIDITY_TOKEN_SYMBOL,
            name=LIQUIDITY_TOKEN_NAME,
        )

    @property
    def minimum_liquidity(self) -> int:
        constants = self._config.get(self.chain_id)
        return lp_math.MINIMUM_LIQUIDITY if constants is None else constants.minimum_liquidity

    def involves_token(self, asset: Asset) -> bool:
        return asset.equals(self.token0) or asset.equals(self.token1)

    # -- reserves and prices ---------------------------------------------------

    @property
    def reserve0(self) -> AmountOfAsset:
        return self._reserves[0]

    @property
    def reserve1(self) -> AmountOfAsset:
        return self._reserves[1]

    def reserve_of(self, asset: Asset) -> AmountOfAsset:
        """
        Reserve of `asset`.

        Raises:
            AssetNotInPoolError: If asset is neither token0 nor token1
        """
        return self._reserves[self._index_of(asset)]

    @property
    def token0_price(self) -> Price:
        """Price of token0 in token1: reserve1 / reserve0."""
        return Price(
            base_asset=self.token0,
            quote_asset=self.token1,
            denominator=self.reserve0.quotient,
            numerator=self.reserve1.quotient,
        )

    @property
    def token1_price(self) -> Price:
        """Price of token1 in token0: reserve0 / reserve1."""
        return Price(
            base_asset=self.token1,
            quote_asset=self.token0,
            denominator=self.reserve1.quotient,
            numerator=self.reserve0.quotient,
        )

    def price_of(self, asset: Asset) -> Price:
        """Price of `asset` in terms of the other pool asset."""
        return self.token0_price if self._index_of(asset) == 0 else self.token1_price

    def _index_of(self, asset: Asset) -> int:
        if asset.equals(self.token0):
            return 0
        if asset.equals(self.token1):
            return 1
        raise AssetNotInPoolError(f"{asset!r} is not in pool {self.token0!r}/{self.token1!r}")

    # -- liquidity -------------------------------------------------------------

    def liquidity_quotient(self, name: str, value: LiquidityQuantity) -> int:
        if isinstance(value, AmountOfAsset):
            if not value.asset.equals(self.liquidity_token):
                raise TokenMismatchError(f"{name} must be in the pool liquidity token, got {value.asset!r}")
            return value.quotient
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{name} must be an int or AmountOfAsset")
        if value < 0:
            raise ValueError(f"{name} must be non-negative: {value}")
        return value

    def _sorted_deposit(self, amount_a: AmountOfAsset, amount_b: AmountOfAsset) -> Tuple[int, int]:
        for amount in (amount_a, amount_b):
            if not self.involves_token(amount.asset):
                raise TokenMismatchError(f"{amount.asset!r} is not in pool {self.token0!r}/{self.token1!r}")
        if amount_a.asset.equals(amount_b.asset):
            raise TokenMismatchError(f"deposit needs both pool tokens, got {amount_a.asset!r} twice")
        if amount_a.asset.equals(self.token0):
            return amount_a.quotient, amount_b.quotient
        return amount_b.quotient, amount_a.quotient

    def get_liquidity_minted(
        self,
        total_supply: LiquidityQuantity,
        amount_a: AmountOfAsset,
        amount_b: AmountOfAsset,
    ) -> int:
        """
        Liquidity tokens minted for depositing `amount_a` and `amount_b`.

        With zero supply the first deposit locks `minimum_liquidity` tokens:
            floor(sqrt(amount0 * amount1)) - minimum_liquidity
        Otherwise:
            min(floor(amount0 * supply / reserve0), floor(amount1 * supply / reserve1))

        Raises:
            TokenMismatchError: If the deposit is not one amount of each pool token
            InsufficientInputAmountError: If the minted liquidity would be <= 0
        """
        supply = self.liquidity_quotient("total_supply", total_supply)
        amount0, amount1 = self._sorted_deposit(amount_a, amount_b)
        minted = lp_math.mint_liquidity(
            reserve0=self.reserve0.quotient,
            reserve1=self.reserve1.quotient,
            total_supply=supply,
            amount0=amount0,
            amount1=amount1,
            minimum_liquidity=self.minimum_liquidity,
        )
        logger.debug("mint %d liquidity for (%d, %d) at supply %d", minted, amount0, amount1, supply)
        return minted

    def get_liquidity_value(
        self,
        asset: Asset,
        total_supply: LiquidityQuantity,
        liquidity: LiquidityQuantity,
        fee_on: bool = False,
        k_last: Optional[int] = None,
    ) -> AmountOfAsset:
        """
        Amount of `asset` that `liquidity` tokens are redeemable for.

        With `fee_on`, the supply is first inflated by the protocol fee
        liquidity accrued since `k_last`.
        """
        reserve = self.reserve_of(asset)
        supply = self.liquidity_quotient("total_supply", total_supply)
        amount = self.liquidity_quotient("liquidity", liquidity)
        if amount > supply:
            # checked against the unadjusted supply, as the pool contract does
            raise LiquidityExceedsSupplyError(
                f"cannot value more liquidity than supply: {amount} > {supply}"
            )

        if fee_on:
            if k_last is None:
                raise ValueError("k_last is required when fee_on is set")
            supply = lp_math.fee_adjusted_total_supply(
                total_supply=supply,
                reserve0=self.reserve0.quotient,
                reserve1=self.reserve1.quotient,
                k_last=k_last,
            )

        value = lp_math.liquidity_value(reserve=reserve.quotient, total_supply=supply, liquidity=amount)
        return AmountOfAsset(asset=reserve.asset, quotient=value)

    # -- swaps -----------------------------------------------------------------

    def _with_reserves(self, amount_a: AmountOfAsset, amount_b: AmountOfAsset) -> "ConstantProductPool":
        return ConstantProductPool(amount_a, amount_b, self._fee, self._twap, config=self._config)

    def get_output_amount(self, input_amount: AmountOfAsset) -> Tuple[AmountOfAsset, "ConstantProductPool"]:
        """
        Exact-in quote: output amount and the post-swap pool.

        Raises:
            TokenMismatchError: If the input asset is not in the pool
            InsufficientReservesError: If either reserve is empty
            InsufficientInputAmountError: If the output would be zero
        """
        if not self.involves_token(input_amount.asset):
            raise TokenMismatchError(f"{input_amount.asset!r} is not in pool {self.token0!r}/{self.token1!r}")
        index = self._index_of(input_amount.asset)
        reserve_in, reserve_out = self._reserves[index], self._reserves[1 - index]

        quote = cpmm_swap.swap_exact_in(
            reserve_in=reserve_in.quotient,
            reserve_out=reserve_out.quotient,
            amount_in=input_amount.quotient,
            fee=self._fee,
        )
        output = AmountOfAsset(reserve_out.asset, quote.amount_out)
        pool = self._with_reserves(reserve_in + input_amount, reserve_out - output)
        return output, pool

    def get_input_amount(self, output_amount: AmountOfAsset) -> Tuple[AmountOfAsset, "ConstantProductPool"]:
        """
        Exact-out quote: required input amount and the post-swap pool.

        Raises:
            TokenMismatchError: If the output asset is not in the pool
            InsufficientReservesError: If reserves are empty or cannot cover the output
        """
        if not self.involves_token(output_amount.asset):
            raise TokenMismatchError(f"{output_amount.asset!r} is not in pool {self.token0!r}/{self.token1!r}")
        index = self._index_of(output_amount.asset)
        reserve_out, reserve_in = self._reserves[index], self._reserves[1 - index]
        if reserve_out.quotient == 0 or reserve_in.quotient == 0:
            raise InsufficientReservesError(
                f"cannot swap against an empty reserve: ({self.reserve0.quotient}, {self.reserve1.quotient})"
            )

        quote = cpmm_swap.swap_exact_out(
            reserve_in=reserve_in.quotient,
            reserve_out=reserve_out.quotient,
            amount_out=output_amount.quotient,
            fee=self._fee,
        )
        input_amount = AmountOfAsset(reserve_in.asset, quote.amount_in)
        pool = self._with_reserves(reserve_in + input_amount, reserve_out - output_amount)
        return input_amount, pool

    # -- dunder ----------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstantProductPool):
            return NotImplemented
        return (
            self._reserves == other._reserves
            and self._fee == other._fee
            and self._twap == other._twap
        )

    def __hash__(self) -> int:
        return hash((self._reserves, self._fee, self._twap))

    def __repr__(self) -> str:
        return (
            f"ConstantProductPool({self.token0!r}/{self.token1!r}, "
            f"reserves=({self.reserve0.quotient}, {self.reserve1.quotient}), "
            f"fee={self._fee}, twap={self._twap})"
        )
