# src/fuzzloom/core/__init__.py
"""Core infrastructure: RandomSource, canonical rendering, config loading, logging."""

from fuzzloom.core.canonical import canonical_json, compact_repr, pretty_repr, shrink_score, truncate
from fuzzloom.core.config_loader import deep_merge, list_presets, load_config, load_preset
from fuzzloom.core.logging import configure_logging, get_logger
from fuzzloom.core.random_source import RandomSource, normalize_seed

__all__ = [
    "RandomSource",
    "canonical_json",
    "compact_repr",
    "configure_logging",
    "deep_merge",
    "get_logger",
    "list_presets",
    "load_config",
    "load_preset",
    "normalize_seed",
    "pretty_repr",
    "shrink_score",
    "truncate",
]
