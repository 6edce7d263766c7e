# tests/conftest.py
"""Shared test fixtures and helpers.

Model Fixtures:
- Counter: a tiny mutable system under test
- counter_spec(): ModelSpec with ``increment(n)`` and a deliberately buggy
  ``reset`` that clears the system but not the model

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from fuzzloom import Command, ModelSpec, gen

# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """configure_logging (and every CLI invocation) rewires global logging; undo it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


# =============================================================================
# Model fixtures
# =============================================================================


@dataclass
class Counter:
    """System under test for model-based tests."""

    count: int = 0
    closed: bool = False
    history: list[str] = field(default_factory=list)


def _increment(system: Counter, model: dict[str, int], n: int) -> None:
    system.count += n
    system.history.append(f"increment({n})")
    model["count"] += n


def _buggy_reset(system: Counter, model: dict[str, int], _: Any) -> None:
    system.count = 0
    system.history.append("reset")


def _counts_match(system: Counter, model: dict[str, int], _: Any) -> bool:
    return system.count == model["count"]


def counter_spec(*, teardown: Any = None, buggy: bool = True) -> ModelSpec[dict[str, int], Counter]:
    """Counter model; with ``buggy`` the reset command forgets the model."""

    def reset(system: Counter, model: dict[str, int], param: Any) -> None:
        _buggy_reset(system, model, param)
        if not buggy:
            model["count"] = 0

    return ModelSpec(
        state=lambda: {"count": 0},
        setup=Counter,
        commands=[
            Command("increment", run=_increment, check=_counts_match, arbitrary=gen.integers(1, 10)),
            Command("reset", run=reset, check=_counts_match),
        ],
        teardown=teardown,
    )


@pytest.fixture
def buggy_counter_spec() -> ModelSpec[dict[str, int], Counter]:
    return counter_spec()


@pytest.fixture
def correct_counter_spec() -> ModelSpec[dict[str, int], Counter]:
    return counter_spec(buggy=False)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
