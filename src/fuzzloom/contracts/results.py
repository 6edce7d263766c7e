# src/fuzzloom/contracts/results.py
"""Run outcomes.

These types answer: "What did a property or model run find?"

IMPORTANT:
- Failures are created once, after shrinking completes, and never mutated.
- ``iterations`` is the 1-based index of the first failing trial.
- ``error`` holds the exception raised by the predicate/command for the final
  counterexample, or None when the failure was a plain ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PropertyFailure[T]:
    """Shrunk counterexample for a failing property."""

    seed: int
    runs: int
    iterations: int
    shrinks: int
    counterexample: T
    error: BaseException | None = None


@dataclass(frozen=True, slots=True)
class PropertyResult[T]:
    """Outcome of a property run. ``failure`` is set exactly when ``ok`` is False."""

    ok: bool
    failure: PropertyFailure[T] | None = None

    @classmethod
    def passed(cls) -> PropertyResult[T]:
        return cls(ok=True)

    @classmethod
    def failed(cls, failure: PropertyFailure[T]) -> PropertyResult[T]:
        return cls(ok=False, failure=failure)


@dataclass(frozen=True, slots=True)
class ExecutedStep:
    """Minimal recording needed to replay one step on a fresh model/system pair."""

    command_index: int
    param: Any = None


@dataclass(frozen=True, slots=True)
class SequenceStep:
    """A named step of a reported command sequence."""

    name: str
    param: Any = None


@dataclass(frozen=True, slots=True)
class ModelFailure:
    """Shrunk failing command sequence for a model-based run.

    Attributes:
        failed_step: Index into ``sequence`` of the step whose run/check
            failed, or -1 if none.
    """

    seed: int
    runs: int
    iterations: int
    shrinks: int
    sequence: tuple[SequenceStep, ...]
    failed_step: int
    error: BaseException | None = None


@dataclass(frozen=True, slots=True)
class ModelResult:
    """Outcome of a model run. ``failure`` is set exactly when ``ok`` is False."""

    ok: bool
    failure: ModelFailure | None = None

    @classmethod
    def passed(cls) -> ModelResult:
        return cls(ok=True)

    @classmethod
    def failed(cls, failure: ModelFailure) -> ModelResult:
        return cls(ok=False, failure=failure)
