# src/fuzzloom/contracts/config.py
"""Run configuration models.

Uses Pydantic for validation with frozen (immutable) models. All counts are
strict integers: ``runs=1.5``, ``runs=float("nan")`` and ``runs=True`` are
rejected rather than coerced. Validation happens when the model is built,
which the runners do before generating anything.

Configuration precedence (see fuzzloom.core.config_loader):
keyword overrides > YAML file > preset > defaults.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError

from fuzzloom.contracts.errors import ConfigurationError


class RunConfig(BaseModel):
    """Seed and trial count shared by every runner."""

    model_config = {"frozen": True, "extra": "forbid"}

    seed: int | None = Field(
        default=None,
        strict=True,
        description="RNG seed (lower 32 bits used). None derives a seed from the clock.",
    )
    runs: int = Field(
        default=100,
        gt=0,
        strict=True,
        description="Number of trials to execute",
    )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with a clear error on validation failure.

        Args:
            config: Dictionary of configuration values.

        Returns:
            Validated configuration instance.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: {e}") from e

    @classmethod
    def resolve(cls, config: RunConfig | None, overrides: dict[str, Any]) -> Self:
        """Layer keyword overrides on top of an optional config object.

        Only fields explicitly set on ``config`` are carried over, so a
        PropertyConfig can be narrowed into a RunConfig and vice versa as
        long as the set fields exist on the target model.
        """
        base: dict[str, Any] = {}
        if config is not None:
            base = config.model_dump(exclude_unset=True)
        return cls.from_dict({**base, **overrides})


class PropertyConfig(RunConfig):
    """Configuration for property runs."""

    max_shrinks: int = Field(
        default=1000,
        gt=0,
        strict=True,
        description="Maximum number of shrink attempts per failing case",
    )


class ModelConfig(RunConfig):
    """Configuration for model-based runs."""

    max_commands: int = Field(
        default=20,
        gt=0,
        strict=True,
        description="Upper bound on commands generated per iteration",
    )
    max_shrinks: int = Field(
        default=1000,
        gt=0,
        strict=True,
        description="Maximum number of sequence replays spent on shrinking",
    )
