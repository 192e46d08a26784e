from __future__ import annotations

from pathlib import Path

import pytest

from cpool import AmountOfAsset, Asset, ConstantProductPool, TokenMismatchError, UnsupportedChainError
from cpool.core.address import compute_pool_address
from cpool.core.config import CONFIG_ENV_VAR, ChainConstants, ProtocolConfig, load_protocol_config


FACTORY = "0x" + "11" * 20
INIT_CODE_HASH = "0x" + "22" * 32

TOKEN_A = Asset(42, "0x0000000000000000000000000000000000000001", 18)
TOKEN_B = Asset(42, "0x0000000000000000000000000000000000000002", 18)

CONFIG_YAML = f"""
chains:
  42:
    factory_address: "{FACTORY}"
    init_code_hash: "{INIT_CODE_HASH}"
    default_fee: 5
    minimum_liquidity: 10
  1:
    factory_address: "{FACTORY}"
    init_code_hash: "{INIT_CODE_HASH}"
"""


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "protocol.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


def _config(tmp_path: Path) -> ProtocolConfig:
    return ProtocolConfig.from_yaml(_write_config(tmp_path))


def test_from_yaml_parses_chains_and_defaults(tmp_path: Path) -> None:
    config = _config(tmp_path)
    assert sorted(config.chains) == [1, 42]

    kovan = config.constants_for(42)
    assert kovan.factory_address == FACTORY
    assert kovan.init_code_hash == bytes.fromhex("22" * 32)
    assert (kovan.default_fee, kovan.minimum_liquidity) == (5, 10)

    mainnet = config.constants_for(1)
    assert (mainnet.default_fee, mainnet.minimum_liquidity) == (30, 1000)


def test_unknown_chain_is_unsupported(tmp_path: Path) -> None:
    config = _config(tmp_path)
    assert not config.supports(3)
    with pytest.raises(UnsupportedChainError, match="chain 3"):
        config.constants_for(3)


def test_chain_table_is_read_only(tmp_path: Path) -> None:
    config = _config(tmp_path)
    with pytest.raises(TypeError):
        config.chains[3] = config.constants_for(1)  # type: ignore[index]


def test_config_is_hashable_and_compares_by_chains(tmp_path: Path) -> None:
    config = _config(tmp_path)
    again = ProtocolConfig.from_yaml(_write_config(tmp_path))
    assert config == again
    assert hash(config) == hash(again)
    assert {config, again} == {config}
    assert config != ProtocolConfig()
    assert isinstance(hash(ProtocolConfig()), int)


@pytest.mark.parametrize(
    "obj,message",
    [
        ({"chains": {42: {"factory_address": FACTORY}}}, "missing: init_code_hash"),
        ({"chains": {42: {"factory_address": FACTORY, "init_code_hash": INIT_CODE_HASH, "fee": 1}}}, "unknown keys"),
        ({"chains": {"kovan": {}}}, "chain id must be an integer"),
        ({"chains": {42: {"factory_address": "0x12", "init_code_hash": INIT_CODE_HASH}}}, "invalid address"),
        ({"chains": {42: {"factory_address": FACTORY, "init_code_hash": "0x22"}}}, "32 bytes"),
        ({"chains": [42]}, "must be a mapping"),
    ],
)
def test_from_mapping_rejects_bad_constants(obj: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ProtocolConfig.from_mapping(obj)


def test_constants_must_match_their_key() -> None:
    constants = ChainConstants(chain_id=1, factory_address=FACTORY, init_code_hash=INIT_CODE_HASH)
    with pytest.raises(ValueError, match="declare chain 1"):
        ProtocolConfig(chains={42: constants})


def test_config_pool_address_uses_chain_constants(tmp_path: Path) -> None:
    config = _config(tmp_path)
    expected = compute_pool_address(FACTORY, TOKEN_A, TOKEN_B, 5, True, INIT_CODE_HASH)
    assert config.compute_pool_address(TOKEN_B, TOKEN_A) == expected
    assert config.compute_pool_address(TOKEN_A, TOKEN_B, fee=5, twap=True) == expected
    assert config.compute_pool_address(TOKEN_A, TOKEN_B, fee=30) != expected


def test_load_protocol_config_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    config = load_protocol_config()
    assert config.supports(42)
    # parsed once per path
    assert load_protocol_config(path) is config


def test_load_protocol_config_without_path_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_protocol_config()
    assert dict(config.chains) == {}
    with pytest.raises(UnsupportedChainError):
        config.constants_for(1)


class TestPoolWithConfig:
    def test_address_and_liquidity_token(self, tmp_path: Path):
        config = _config(tmp_path)
        pool = ConstantProductPool(
            AmountOfAsset(TOKEN_B, 1000), AmountOfAsset(TOKEN_A, 1000), fee=30, twap=False, config=config
        )
        expected = compute_pool_address(FACTORY, TOKEN_A, TOKEN_B, 30, False, INIT_CODE_HASH)
        assert pool.address == expected
        assert ConstantProductPool.get_address(TOKEN_A, TOKEN_B, 30, False, config) == expected

        lp = pool.liquidity_token
        assert lp.address == expected
        assert (lp.chain_id, lp.decimals) == (42, 18)

    def test_minimum_liquidity_comes_from_chain_constants(self, tmp_path: Path):
        pool = ConstantProductPool(AmountOfAsset(TOKEN_A, 0), AmountOfAsset(TOKEN_B, 0), config=_config(tmp_path))
        assert pool.minimum_liquidity == 10
        assert pool.get_liquidity_minted(0, AmountOfAsset(TOKEN_A, 100), AmountOfAsset(TOKEN_B, 100)) == 90

    def test_liquidity_amounts_may_be_typed(self, tmp_path: Path):
        pool = ConstantProductPool(AmountOfAsset(TOKEN_A, 1000), AmountOfAsset(TOKEN_B, 1000), config=_config(tmp_path))
        lp = pool.liquidity_token
        value = pool.get_liquidity_value(TOKEN_B, AmountOfAsset(lp, 1000), AmountOfAsset(lp, 250))
        assert value == AmountOfAsset(TOKEN_B, 250)
        minted = pool.get_liquidity_minted(AmountOfAsset(lp, 1000), AmountOfAsset(TOKEN_A, 10), AmountOfAsset(TOKEN_B, 10))
        assert minted == 10

        with pytest.raises(TokenMismatchError, match="liquidity token"):
            pool.get_liquidity_value(TOKEN_B, AmountOfAsset(TOKEN_A, 1000), 250)
