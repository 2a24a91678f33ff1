"""Tests for engine configuration."""

import pytest

from amm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from amm.constants import PRICE_SCALE


class TestEngineConfig:
    def test_defaults(self):
        assert DEFAULT_ENGINE_CONFIG.price_scale == PRICE_SCALE == 10**18
        assert DEFAULT_ENGINE_CONFIG.swap_fee_bps == 0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_ENGINE_CONFIG.swap_fee_bps = 30  # type: ignore[misc]

    @pytest.mark.parametrize("fee", [-1, 10_000, 20_000])
    def test_invalid_fee(self, fee):
        with pytest.raises(ValueError):
            EngineConfig(swap_fee_bps=fee)

    @pytest.mark.parametrize("scale", [0, -1])
    def test_invalid_scale(self, scale):
        with pytest.raises(ValueError):
            EngineConfig(price_scale=scale)


class TestFromEnv:
    def test_unset(self, monkeypatch):
        monkeypatch.delenv("AMM_SWAP_FEE_BPS", raising=False)
        monkeypatch.delenv("AMM_PRICE_SCALE", raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("AMM_SWAP_FEE_BPS", "30")
        monkeypatch.setenv("AMM_PRICE_SCALE", "1000000")
        config = EngineConfig.from_env()
        assert (config.swap_fee_bps, config.price_scale) == (30, 10**6)

    def test_rejects_out_of_range(self, monkeypatch):
        monkeypatch.setenv("AMM_SWAP_FEE_BPS", "10000")
        with pytest.raises(ValueError):
            EngineConfig.from_env()
