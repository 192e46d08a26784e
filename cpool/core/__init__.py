"""
Core pool model: address derivation, protocol constants, the pool snapshot
and result-returning pool operations.
"""

from .address import compute_pool_address, encode_pool_salt, get_create2_address
from .config import ChainConstants, ProtocolConfig, load_protocol_config
from .pool import ConstantProductPool
from .liquidity import (
    BurnResult,
    MintResult,
    SwapResult,
    add_liquidity,
    add_liquidity_or_raise,
    remove_liquidity,
    remove_liquidity_or_raise,
    swap_exact_in,
    swap_exact_in_or_raise,
    swap_exact_out,
    swap_exact_out_or_raise,
)

__all__ = [
    "compute_pool_address",
    "encode_pool_salt",
    "get_create2_address",
    "ChainConstants",
    "ProtocolConfig",
    "load_protocol_config",
    "ConstantProductPool",
    "BurnResult",
    "MintResult",
    "SwapResult",
    "add_liquidity",
    "add_liquidity_or_raise",
    "remove_liquidity",
    "remove_liquidity_or_raise",
    "swap_exact_in",
    "swap_exact_in_or_raise",
    "swap_exact_out",
    "swap_exact_out_or_raise",
]
