# src/fuzzloom/arbitraries/base.py
"""Arbitrary base class and parameter validation shared by all constructors.

An Arbitrary pairs a generator (``generate(source)``) with a shrinker
(``shrink(value)``). Built-ins validate their parameters in ``__init__`` and
hold no mutable state, so a single instance can be reused across any number
of runs.

Shrinkers are lazy: ``shrink`` returns an iterator and callers may stop
consuming it at any point (the runners do, when the shrink budget runs out).
Every candidate must be a legal value of the same arbitrary, and a value the
arbitrary could not have produced yields no candidates at all.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from fuzzloom.contracts.errors import ConfigurationError
from fuzzloom.core.random_source import RandomSource

if TYPE_CHECKING:
    from fuzzloom.arbitraries.combinators import Filtered, Mapped


class Arbitrary[T](ABC):
    """Generator + shrinker pair for one value domain."""

    @abstractmethod
    def generate(self, source: RandomSource) -> T:
        """Produce a value, consuming draws from ``source`` only."""

    @abstractmethod
    def shrink(self, value: T) -> Iterator[T]:
        """Yield smaller legal values of this domain."""

    def map[U](self, to: Callable[[T], U], from_: Callable[[U], T | None] | None = None) -> Mapped[T, U]:
        """Shortcut for ``gen.mapped(self, to, from_)``."""
        from fuzzloom.arbitraries.combinators import Mapped

        return Mapped(self, to, from_)

    def filter(self, predicate: Callable[[T], bool], max_attempts: int = 100) -> Filtered[T]:
        """Shortcut for ``gen.filtered(self, predicate, max_attempts)``."""
        from fuzzloom.arbitraries.combinators import Filtered

        return Filtered(self, predicate, max_attempts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FunctionArbitrary[T](Arbitrary[T]):
    """Wraps a bare ``source -> value`` callable. Never shrinks."""

    def __init__(self, generator: Callable[[RandomSource], T]) -> None:
        self._generator = generator

    def generate(self, source: RandomSource) -> T:
        return self._generator(source)

    def shrink(self, value: T) -> Iterator[T]:
        return iter(())

    def __repr__(self) -> str:
        name = getattr(self._generator, "__qualname__", repr(self._generator))
        return f"FunctionArbitrary({name})"


type ArbitraryLike[T] = Arbitrary[T] | Callable[[RandomSource], T]


def to_arbitrary[T](item: ArbitraryLike[T]) -> Arbitrary[T]:
    """Accept an Arbitrary or a bare generator callable.

    Raises:
        ConfigurationError: If ``item`` is neither.
    """
    if isinstance(item, Arbitrary):
        return item
    if callable(item):
        return FunctionArbitrary(item)
    raise ConfigurationError(f"Expected an Arbitrary or a generator callable, got {type(item).__name__}")


# =============================================================================
# Parameter validation
# =============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def require_range(min_value: Any, max_value: Any, label: str) -> None:
    """Bounds must be finite numbers with ``min_value <= max_value``."""
    if not _is_number(min_value) or not _is_number(max_value):
        raise ConfigurationError(f"{label} range must be numbers, got {min_value!r}..{max_value!r}")
    if not math.isfinite(min_value) or not math.isfinite(max_value):
        raise ConfigurationError(f"{label} range must be finite numbers, got {min_value!r}..{max_value!r}")
    if min_value > max_value:
        raise ConfigurationError(f"{label} range must have min <= max, got {min_value!r}..{max_value!r}")


def require_int_range(min_value: Any, max_value: Any, label: str) -> None:
    """Integer bounds with ``min_value <= max_value`` (any magnitude)."""
    for bound in (min_value, max_value):
        if not isinstance(bound, int) or isinstance(bound, bool):
            raise ConfigurationError(f"{label} bounds must be integers, got {bound!r}")
    if min_value > max_value:
        raise ConfigurationError(f"{label} range must have min <= max, got {min_value}..{max_value}")


def require_non_negative_int(value: Any, label: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigurationError(f"{label} must be a non-negative integer, got {value!r}")
    return value


def require_positive_int(value: Any, label: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigurationError(f"{label} must be a positive integer, got {value!r}")
    return value


def require_probability(value: Any, label: str) -> float:
    if not _is_number(value) or not math.isfinite(value) or not 0 <= value <= 1:
        raise ConfigurationError(f"{label} must be between 0 and 1, got {value!r}")
    return float(value)


def resolve_size_bounds(
    length: int | None,
    min_size: int | None,
    max_size: int | None,
    *,
    default_max: int,
    label: str,
) -> tuple[int, int]:
    """Resolve ``(min, max)`` from either a fixed ``length`` or explicit bounds.

    A fixed length is the degenerate range ``(length, length)``. Without an
    explicit maximum the range is ``min..max(min, default_max)``.

    Raises:
        ConfigurationError: On negative sizes, ``min > max``, or a fixed
            length combined with explicit bounds.
    """
    if length is not None:
        if min_size is not None or max_size is not None:
            raise ConfigurationError(f"{label}: pass either length or min/max bounds, not both")
        fixed = require_non_negative_int(length, f"{label} length")
        return fixed, fixed

    low = 0 if min_size is None else require_non_negative_int(min_size, f"{label} minimum size")
    high = max(low, default_max) if max_size is None else require_non_negative_int(max_size, f"{label} maximum size")
    if high < low:
        raise ConfigurationError(f"{label} maximum size must be >= minimum size, got {low}..{high}")
    return low, high
