# src/fuzzloom/arbitraries/numeric.py
"""Numeric, boolean and date arbitraries.

All of them shrink by bisection toward a target: 0 (or the epoch, for dates)
when the range contains it, otherwise the bound nearer to it.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

from fuzzloom.arbitraries.base import Arbitrary, require_int_range, require_range
from fuzzloom.arbitraries.shrinking import integer_target, shrink_float, shrink_integer, shrink_toward
from fuzzloom.contracts.errors import ConfigurationError
from fuzzloom.core.canonical import EPOCH, epoch_millis
from fuzzloom.core.random_source import RandomSource

# int_between is exact for spans up to one 32-bit word.
_SINGLE_DRAW_SPAN = 2**32


class Integers(Arbitrary[int]):
    """Uniform integers in the inclusive range ``[min_value, max_value]``."""

    def __init__(self, min_value: int = 0, max_value: int = 100) -> None:
        require_int_range(min_value, max_value, "integers")
        self.min_value = min_value
        self.max_value = max_value

    def generate(self, source: RandomSource) -> int:
        if self.max_value - self.min_value + 1 <= _SINGLE_DRAW_SPAN:
            return source.int_between(self.min_value, self.max_value)
        return source.big_int_between(self.min_value, self.max_value)

    def shrink(self, value: int) -> Iterator[int]:
        return shrink_integer(value, self.min_value, self.max_value)

    def __repr__(self) -> str:
        return f"integers({self.min_value}, {self.max_value})"


class BigIntegers(Integers):
    """Integers of any magnitude, always drawn word by word."""

    def generate(self, source: RandomSource) -> int:
        return source.big_int_between(self.min_value, self.max_value)

    def __repr__(self) -> str:
        return f"big_integers({self.min_value}, {self.max_value})"


class Floats(Arbitrary[float]):
    """Uniform floats in the half-open range ``[min_value, max_value)``."""

    def __init__(self, min_value: float = 0.0, max_value: float = 1.0) -> None:
        require_range(min_value, max_value, "floats")
        self.min_value = float(min_value)
        self.max_value = float(max_value)

    def generate(self, source: RandomSource) -> float:
        value = source.draw() * (self.max_value - self.min_value) + self.min_value
        # Rounding can land on max_value when the span is tiny next to the bounds.
        if value >= self.max_value and self.max_value > self.min_value:
            value = math.nextafter(self.max_value, -math.inf)
        return value

    def shrink(self, value: float) -> Iterator[float]:
        return shrink_float(value, self.min_value, self.max_value)

    def __repr__(self) -> str:
        return f"floats({self.min_value}, {self.max_value})"


class Booleans(Arbitrary[bool]):
    def generate(self, source: RandomSource) -> bool:
        return source.draw() >= 0.5

    def shrink(self, value: bool) -> Iterator[bool]:
        if value is True:
            yield False

    def __repr__(self) -> str:
        return "booleans()"


DEFAULT_MIN_DATE = datetime(1970, 1, 1, tzinfo=UTC)
DEFAULT_MAX_DATE = datetime(2100, 1, 1, tzinfo=UTC)


def _as_utc(value: Any, label: str) -> datetime:
    if not isinstance(value, datetime):
        raise ConfigurationError(f"dates {label} must be a datetime, got {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Dates(Arbitrary[datetime]):
    """UTC datetimes with millisecond resolution, bounds inclusive.

    Naive bounds and values are treated as UTC.
    """

    def __init__(self, min_value: datetime = DEFAULT_MIN_DATE, max_value: datetime = DEFAULT_MAX_DATE) -> None:
        self.min_value = _as_utc(min_value, "min_value")
        self.max_value = _as_utc(max_value, "max_value")
        if self.min_value > self.max_value:
            raise ConfigurationError(f"dates range must have min <= max, got {self.min_value.isoformat()}..{self.max_value.isoformat()}")
        self._low = epoch_millis(self.min_value)
        self._high = epoch_millis(self.max_value)

    def generate(self, source: RandomSource) -> datetime:
        if self._high - self._low + 1 <= _SINGLE_DRAW_SPAN:
            offset = source.int_between(self._low, self._high)
        else:
            offset = source.big_int_between(self._low, self._high)
        return EPOCH + timedelta(milliseconds=offset)

    def shrink(self, value: datetime) -> Iterator[datetime]:
        if not isinstance(value, datetime):
            return
        millis = epoch_millis(value)
        if not self._low <= millis <= self._high:
            return
        for shrunk in shrink_toward(millis, integer_target(self._low, self._high)):
            yield EPOCH + timedelta(milliseconds=shrunk)

    def __repr__(self) -> str:
        return f"dates({self.min_value.isoformat()}, {self.max_value.isoformat()})"


# =============================================================================
# Constructors
# =============================================================================


def integers(min_value: int = 0, max_value: int = 100) -> Integers:
    """Integers in ``[min_value, max_value]``, shrinking toward 0."""
    return Integers(min_value, max_value)


def big_integers(min_value: int = 0, max_value: int = 100) -> BigIntegers:
    """Integers of unbounded magnitude in ``[min_value, max_value]``."""
    return BigIntegers(min_value, max_value)


def floats(min_value: float = 0.0, max_value: float = 1.0) -> Floats:
    """Floats in ``[min_value, max_value)``, shrinking toward 0."""
    return Floats(min_value, max_value)


def booleans() -> Booleans:
    return Booleans()


def dates(min_value: datetime = DEFAULT_MIN_DATE, max_value: datetime = DEFAULT_MAX_DATE) -> Dates:
    """UTC datetimes in ``[min_value, max_value]``, shrinking toward the epoch."""
    return Dates(min_value, max_value)
