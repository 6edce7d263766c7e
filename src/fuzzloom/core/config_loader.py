# src/fuzzloom/core/config_loader.py
"""Run configuration loading with presets.

Provides YAML preset loading and deep merge for configuration precedence
(CLI > config file > preset > defaults). Bundled presets live next to this
module in ``presets/``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from fuzzloom.contracts.config import RunConfig

PRESETS_DIR = Path(__file__).parent / "presets"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Args:
        base: Base configuration dict.
        override: Override values (takes precedence).

    Returns:
        Merged configuration dict (new dict, does not mutate inputs).
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def list_presets(presets_dir: Path = PRESETS_DIR) -> list[str]:
    """List available preset names from a directory.

    Returns:
        Sorted list of preset names (without .yaml extension).
    """
    if not presets_dir.exists():
        return []
    return sorted(p.stem for p in presets_dir.glob("*.yaml"))


def load_preset(preset_name: str, presets_dir: Path = PRESETS_DIR) -> dict[str, Any]:
    """Load a preset configuration by name.

    Raises:
        FileNotFoundError: If preset does not exist.
        yaml.YAMLError: If preset YAML is malformed.
        ValueError: If preset is not a YAML mapping.
    """
    preset_path = presets_dir / f"{preset_name}.yaml"

    if not preset_path.exists():
        available = list_presets(presets_dir)
        raise FileNotFoundError(f"Preset '{preset_name}' not found. Available presets: {available}")

    with preset_path.open() as f:
        loaded = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"Preset '{preset_name}' must be a YAML mapping, got {type(loaded).__name__}")
        return loaded


def _filter_fields(config_cls: type[RunConfig], values: dict[str, Any]) -> dict[str, Any]:
    # Presets carry keys for every runner; a PropertyConfig has no max_commands.
    return {key: value for key, value in values.items() if key in config_cls.model_fields}


def load_config[ConfigT: RunConfig](
    config_cls: type[ConfigT],
    *,
    preset: str | None = None,
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
    presets_dir: Path = PRESETS_DIR,
) -> ConfigT:
    """Load a run configuration with precedence handling.

    Precedence (highest to lowest):
    1. cli_overrides - Direct overrides (None values are ignored)
    2. config_file - User's YAML configuration file
    3. preset - Named preset configuration
    4. defaults - Built-in Pydantic defaults

    Preset keys unknown to ``config_cls`` are dropped; unknown keys in the
    user's config file or overrides are rejected.

    Raises:
        FileNotFoundError: If preset or config_file not found.
        yaml.YAMLError: If YAML is malformed.
        ConfigurationError: If final config fails validation.
    """
    config_dict: dict[str, Any] = {}

    if preset is not None:
        config_dict = _filter_fields(config_cls, load_preset(preset, presets_dir))

    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        with config_file.open() as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {config_file} must be a YAML mapping, got {type(file_config).__name__}")
        config_dict = deep_merge(config_dict, file_config)

    if cli_overrides is not None:
        config_dict = deep_merge(config_dict, {k: v for k, v in cli_overrides.items() if v is not None})

    return config_cls.from_dict(config_dict)
