# tests/unit/contracts/test_config.py
"""Tests for run configuration models."""

import math

import pytest
from pydantic import ValidationError

from fuzzloom.contracts.config import ModelConfig, PropertyConfig, RunConfig
from fuzzloom.contracts.errors import ConfigurationError


class TestRunConfigDefaults:
    def test_defaults(self) -> None:
        config = PropertyConfig()
        assert config.seed is None
        assert config.runs == 100
        assert config.max_shrinks == 1000

    def test_model_defaults(self) -> None:
        config = ModelConfig()
        assert config.max_commands == 20
        assert config.max_shrinks == 1000

    def test_frozen(self) -> None:
        config = RunConfig(runs=5)
        with pytest.raises(ValidationError):
            config.runs = 6  # type: ignore[misc]


class TestRunConfigValidation:
    """Invalid counts are rejected rather than coerced."""

    @pytest.mark.parametrize("runs", [0, -1, 1.5, math.nan, True, "10"])
    def test_invalid_runs(self, runs: object) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration for PropertyConfig"):
            PropertyConfig.from_dict({"runs": runs})

    @pytest.mark.parametrize("field", ["max_shrinks", "max_commands"])
    def test_invalid_model_limits(self, field: str) -> None:
        with pytest.raises(ConfigurationError):
            ModelConfig.from_dict({field: 0})

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict({"runz": 10})

    def test_non_dict_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="config must be a dict"):
            RunConfig.from_dict([("runs", 1)])  # type: ignore[arg-type]

    def test_seed_must_be_int(self) -> None:
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict({"seed": "42"})

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RunConfig.from_dict({"runs": -1})


class TestResolve:
    """Tests for layering keyword overrides onto a config object."""

    def test_overrides_win(self) -> None:
        base = PropertyConfig(runs=5, seed=1)
        resolved = PropertyConfig.resolve(base, {"runs": 9})
        assert resolved.runs == 9
        assert resolved.seed == 1

    def test_none_config_uses_defaults(self) -> None:
        assert PropertyConfig.resolve(None, {}).runs == 100

    def test_only_set_fields_carried_across_models(self) -> None:
        """A RunConfig can seed a ModelConfig without dragging defaults along."""
        resolved = ModelConfig.resolve(RunConfig(seed=4), {"max_commands": 3})
        assert resolved.seed == 4
        assert resolved.max_commands == 3

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            PropertyConfig.resolve(PropertyConfig(), {"runs": 0})
