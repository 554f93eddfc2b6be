"""Tests for decoder configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tether.models.config import ENV_UNKNOWN_TYPE_POLICY, DecoderConfig, UnknownTypePolicy


class TestDecoderConfig:
    def test_default_is_dependency_fallback(self) -> None:
        config = DecoderConfig()
        assert config.unknown_type_policy is UnknownTypePolicy.DEPENDENCY
        assert not config.strict

    def test_policy_from_string(self) -> None:
        config = DecoderConfig(unknown_type_policy="strict")
        assert config.strict

    def test_invalid_policy(self) -> None:
        with pytest.raises(ValidationError):
            DecoderConfig(unknown_type_policy="lenient")

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DecoderConfig().unknown_type_policy = UnknownTypePolicy.STRICT

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv(ENV_UNKNOWN_TYPE_POLICY, " STRICT ")
        assert DecoderConfig.from_env().strict

    def test_from_env_unset(self, monkeypatch) -> None:
        monkeypatch.delenv(ENV_UNKNOWN_TYPE_POLICY, raising=False)
        assert DecoderConfig.from_env() == DecoderConfig()
