"""
Per-chain protocol constants.

The integrating application supplies, per chain, the pool factory address and
the pool init code hash (plus optional default fee and minimum liquidity).
Constants are loaded once, validated, and treated as immutable afterwards.

YAML layout:

    chains:
      42:
        factory_address: "0x..."
        init_code_hash: "0x..."
        default_fee: 30
        minimum_liquidity: 1000
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import yaml

from ..errors import ChainMismatchError, UnsupportedChainError
from ..kernels.python.cpmm_swap import validate_fee
from ..kernels.python.lp_math import MINIMUM_LIQUIDITY
from ..state.assets import Address, Asset, checksum_address
from .address import _to_bytes, compute_pool_address

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CPOOL_PROTOCOL_CONFIG"
DEFAULT_FEE = 30


@dataclass(frozen=True)
class ChainConstants:
    chain_id: int
    factory_address: Address
    init_code_hash: bytes
    default_fee: int = DEFAULT_FEE
    minimum_liquidity: int = MINIMUM_LIQUIDITY

    def __post_init__(self) -> None:
        if not isinstance(self.chain_id, int) or isinstance(self.chain_id, bool):
            raise TypeError("chain_id must be an int")
        object.__setattr__(self, "factory_address", checksum_address(self.factory_address))
        object.__setattr__(self, "init_code_hash", _to_bytes("init_code_hash", self.init_code_hash, 32))
        validate_fee(self.default_fee)
        if not isinstance(self.minimum_liquidity, int) or self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity must be a non-negative int: {self.minimum_liquidity}")

    @classmethod
    def from_mapping(cls, chain_id: int, obj: Mapping[str, Any]) -> "ChainConstants":
        if not isinstance(obj, Mapping):
            raise ValueError(f"constants for chain {chain_id} must be a mapping")
        missing = [k for k in ("factory_address", "init_code_hash") if k not in obj]
        if missing:
            raise ValueError(f"constants for chain {chain_id} missing: {', '.join(missing)}")
        unknown = set(obj) - {"factory_address", "init_code_hash", "default_fee", "minimum_liquidity"}
        if unknown:
            raise ValueError(f"unknown keys for chain {chain_id}: {', '.join(sorted(unknown))}")
        return cls(
            chain_id=chain_id,
            factory_address=obj["factory_address"],
            init_code_hash=obj["init_code_hash"],
            default_fee=obj.get("default_fee", DEFAULT_FEE),
            minimum_liquidity=obj.get("minimum_liquidity", MINIMUM_LIQUIDITY),
        )


@dataclass(frozen=True)
class ProtocolConfig:
    """Immutable table of ChainConstants keyed by chain id."""

    chains: Mapping[int, ChainConstants] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for chain_id, constants in self.chains.items():
            if constants.chain_id != chain_id:
                raise ValueError(f"constants keyed under chain {chain_id} declare chain {constants.chain_id}")
        object.__setattr__(self, "chains", MappingProxyType(dict(self.chains)))

    def __hash__(self) -> int:
        # mappingproxy is unhashable; hash the frozen chain entries instead
        return hash(tuple(sorted(self.chains.items())))

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "ProtocolConfig":
        if not isinstance(obj, Mapping):
            raise ValueError("protocol config must be a mapping")
        raw_chains = obj.get("chains") or {}
        if not isinstance(raw_chains, Mapping):
            raise ValueError("protocol config 'chains' must be a mapping")
        chains = {}
        for key, value in raw_chains.items():
            try:
                chain_id = int(key)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"chain id must be an integer: {key!r}") from exc
            chains[chain_id] = ChainConstants.from_mapping(chain_id, value)
        return cls(chains=chains)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ProtocolConfig":
        path = Path(path)
        obj = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        config = cls.from_mapping(obj)
        logger.info("loaded protocol constants for chains %s from %s", sorted(config.chains), path)
        return config

    def get(self, chain_id: int) -> Optional[ChainConstants]:
        return self.chains.get(chain_id)

    def constants_for(self, chain_id: int) -> ChainConstants:
        constants = self.chains.get(chain_id)
        if constants is None:
            raise UnsupportedChainError(chain_id)
        return constants

    def supports(self, chain_id: int) -> bool:
        return chain_id in self.chains

    def compute_pool_address(
        self,
        token_a: Asset,
        token_b: Asset,
        fee: Optional[int] = None,
        twap: bool = True,
    ) -> Address:
        """Pool address using this chain's factory and init code hash."""
        if token_a.chain_id != token_b.chain_id:
            raise ChainMismatchError(
                f"pool tokens on different chains: {token_a.chain_id} != {token_b.chain_id}"
            )
        constants = self.constants_for(token_a.chain_id)
        return compute_pool_address(
            constants.factory_address,
            token_a,
            token_b,
            constants.default_fee if fee is None else fee,
            twap,
            constants.init_code_hash,
        )


EMPTY_CONFIG = ProtocolConfig()


@lru_cache(maxsize=None)
def _load_cached(path: str) -> ProtocolConfig:
    return ProtocolConfig.from_yaml(path)


def load_protocol_config(path: Optional[Union[str, Path]] = None) -> ProtocolConfig:
    """
    Load protocol constants from `path`, or from $CPOOL_PROTOCOL_CONFIG.

    Each file is parsed once per process. With neither set, returns an empty
    config (every chain lookup raises UnsupportedChainError).
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, "").strip() or None
    if path is None:
        logger.debug("no protocol config path set; using empty config")
        return EMPTY_CONFIG
    return _load_cached(str(Path(path).resolve()))
