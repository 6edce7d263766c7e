# src/fuzzloom/contracts/errors.py
"""Exception hierarchy and serialized failure payloads.

Error taxonomy:
- ConfigurationError: invalid run settings or arbitrary parameters. Raised
  synchronously at call time, before anything is generated.
- GenerationError: a generator exhausted its retry budget (filter, unique
  collections). Unrecoverable for the whole run - there is no failing value
  to shrink yet.
- PropertyFailedError / ModelFailedError: raised only by the assert family,
  after shrinking has finished. The original predicate/command exception is
  chained as ``__cause__``.
- UnsupportedSchemaError: the schema adapter met a schema kind it cannot
  translate into an arbitrary.

Predicate and command failures are never exceptions in the non-asserting
API; they come back as structured results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from fuzzloom.contracts.results import ModelFailure, PropertyFailure


class FuzzloomError(Exception):
    """Base class for all fuzzloom errors."""


class ConfigurationError(FuzzloomError, ValueError):
    """Raised when run settings or arbitrary parameters are invalid."""


class GenerationError(FuzzloomError, RuntimeError):
    """Raised when a generator cannot produce a value within its retry budget."""


class PropertyFailedError(FuzzloomError, AssertionError):
    """Raised by assert_property when a counterexample is found.

    Attributes:
        failure: The shrunk failure the message was rendered from.
    """

    def __init__(self, message: str, failure: PropertyFailure[Any]) -> None:
        self.failure = failure
        super().__init__(message)


class ModelFailedError(FuzzloomError, AssertionError):
    """Raised by assert_model when a failing command sequence is found.

    Attributes:
        failure: The shrunk failure the message was rendered from.
    """

    def __init__(self, message: str, failure: ModelFailure) -> None:
        self.failure = failure
        super().__init__(message)


class UnsupportedSchemaError(FuzzloomError, TypeError):
    """Raised when no arbitrary can be derived from a schema node.

    Attributes:
        kind: Name of the unsupported schema kind.
    """

    def __init__(self, kind: str, detail: str | None = None) -> None:
        self.kind = kind
        message = f"Unsupported schema kind: {kind}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


# =============================================================================
# Serialized payloads (consumed by reporting / CI tooling)
# =============================================================================


class SerializedFailure(TypedDict):
    """JSON-friendly rendering of a property failure."""

    seed: int
    runs: int
    iterations: int
    shrinks: int
    counterexample: Any  # JSON-normalized counterexample
    message: str
    replay: str


class SerializedStep(TypedDict):
    """One command of a serialized model failure sequence."""

    name: str
    param: Any  # JSON-normalized parameter (None for parameterless commands)


class SerializedModelFailure(TypedDict):
    """JSON-friendly rendering of a model failure."""

    seed: int
    runs: int
    iterations: int
    shrinks: int
    sequence: list[SerializedStep]
    failed_step: int
    message: str
    replay: str
