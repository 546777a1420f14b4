"""Tests for engine configuration."""

from __future__ import annotations

import pytest

from alu import ALUEngine
from config import EngineConfig


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.history_capacity == 10
        assert config.word_bits == 32
        assert config.log_level == "INFO"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("ALU_HISTORY_CAPACITY", "ALU_WORD_BITS", "ALU_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ALU_HISTORY_CAPACITY", "5")
        monkeypatch.setenv("ALU_WORD_BITS", "16")
        monkeypatch.setenv("ALU_LOG_LEVEL", "debug")
        config = EngineConfig.from_env()
        assert config.history_capacity == 5
        assert config.word_bits == 16
        assert config.log_level == "debug"

    @pytest.mark.parametrize("kwargs", [
        {"history_capacity": 0},
        {"word_bits": 1},
        {"word_bits": 128},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_non_numeric_env_rejected(self, monkeypatch):
        monkeypatch.setenv("ALU_HISTORY_CAPACITY", "ten")
        with pytest.raises(ValueError):
            EngineConfig.from_env()

    def test_engine_from_config(self):
        engine = ALUEngine.from_config(EngineConfig(history_capacity=3, word_bits=8))
        assert engine.bounds.bits == 8
        for i in range(5):
            engine.execute("ADD", i, 0)
        assert len(engine.get_history()) == 3
