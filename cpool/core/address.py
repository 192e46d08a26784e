"""
Deterministic pool address derivation.

A pool is deployed by its factory with CREATE2, so its address is a pure
function of the pool parameters:

    salt    = keccak256(abi.encode(token0, token1, fee, twap))
    address = keccak256(0xff ++ factory ++ salt ++ init_code_hash)[12:]

token0/token1 are the canonically ordered pair, so the address does not
depend on argument order.
"""

from __future__ import annotations

import logging
from typing import Union

from eth_abi import encode
from web3 import Web3

from ..kernels.python.cpmm_swap import validate_fee
from ..state.assets import Address, Asset, checksum_address, sort_pair

logger = logging.getLogger(__name__)

CREATE2_PREFIX = b"\xff"
POOL_SALT_TYPES = ["address", "address", "uint256", "bool"]

HexOrBytes = Union[str, bytes]


def _to_bytes(name: str, value: HexOrBytes, length: int) -> bytes:
    if isinstance(value, str):
        try:
            raw = bytes(Web3.to_bytes(hexstr=value))
        except ValueError as exc:
            raise ValueError(f"{name} is not valid hex: {value!r}") from exc
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise TypeError(f"{name} must be hex str or bytes")
    if len(raw) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(raw)}")
    return raw


def encode_pool_salt(token0: Asset, token1: Asset, fee: int, twap: bool) -> bytes:
    """ABI-encode the pool deploy data (4 x 32-byte words)."""
    if not isinstance(twap, bool):
        raise TypeError("twap must be a bool")
    validate_fee(fee)
    return encode(POOL_SALT_TYPES, [token0.address, token1.address, fee, twap])


def get_create2_address(deployer: HexOrBytes, salt: HexOrBytes, init_code_hash: HexOrBytes) -> Address:
    """EIP-1014 address for `deployer`, a 32-byte `salt` and the init code hash."""
    deployer_bytes = _to_bytes("deployer", deployer, 20)
    salt_bytes = _to_bytes("salt", salt, 32)
    code_hash_bytes = _to_bytes("init_code_hash", init_code_hash, 32)

    digest = bytes(Web3.keccak(CREATE2_PREFIX + deployer_bytes + salt_bytes + code_hash_bytes))
    return Web3.to_checksum_address("0x" + digest[12:].hex())


def compute_pool_address(
    factory_address: str,
    token_a: Asset,
    token_b: Asset,
    fee: int,
    twap: bool,
    init_code_hash: HexOrBytes,
) -> Address:
    """
    Canonical address of the constant-product pool for (token_a, token_b, fee, twap).

    Args:
        factory_address: Pool factory that deploys the pool
        token_a: One pool asset
        token_b: The other pool asset (same chain)
        fee: Swap fee in basis points
        twap: Whether the pool tracks time-weighted average prices
        init_code_hash: keccak256 of the pool contract's creation code

    Returns:
        Checksummed pool address

    Raises:
        ChainMismatchError: If the tokens are on different chains
        IdenticalAssetsError: If both tokens are the same asset
    """
    token0, token1 = sort_pair(token_a, token_b)
    factory = checksum_address(factory_address)
    salt = bytes(Web3.keccak(encode_pool_salt(token0, token1, fee, twap)))
    address = get_create2_address(factory, salt, init_code_hash)
    logger.debug(
        "derived pool %s for %s/%s fee=%d twap=%s via factory %s",
        address, token0.address, token1.address, fee, twap, factory,
    )
    return address
