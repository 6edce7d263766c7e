# src/fuzzloom/arbitraries/combinators.py
"""Combinators: constants, unions, optional values, map and filter.

Union shrinking chains the shrink candidates of every option, not just the
option that produced the value, so a failing value can move across
structurally compatible variants.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Sequence
from itertools import chain

from fuzzloom.arbitraries.base import (
    Arbitrary,
    ArbitraryLike,
    require_positive_int,
    require_probability,
    to_arbitrary,
)
from fuzzloom.contracts.errors import ConfigurationError, GenerationError
from fuzzloom.core.random_source import RandomSource


class Constant[T](Arbitrary[T]):
    def __init__(self, value: T) -> None:
        self.value = value

    def generate(self, source: RandomSource) -> T:
        return self.value

    def shrink(self, value: T) -> Iterator[T]:
        return iter(())

    def __repr__(self) -> str:
        return f"constant({self.value!r})"


class ConstantFrom[T](Arbitrary[T]):
    """One of a fixed list of values; shrinks toward the first."""

    def __init__(self, *values: T) -> None:
        if not values:
            raise ConfigurationError("constant_from requires at least one value")
        self.values = values

    def generate(self, source: RandomSource) -> T:
        return self.values[source.int_between(0, len(self.values) - 1)]

    def shrink(self, value: T) -> Iterator[T]:
        first = self.values[0]
        if value is first or value == first or value not in self.values:
            return
        yield first

    def __repr__(self) -> str:
        return f"constant_from{self.values!r}"


class OneOf[T](Arbitrary[T]):
    """Uniform choice among options."""

    def __init__(self, *options: ArbitraryLike[T]) -> None:
        if not options:
            raise ConfigurationError("one_of requires at least one option")
        self.options = tuple(to_arbitrary(option) for option in options)

    def generate(self, source: RandomSource) -> T:
        chosen = self.options[source.int_between(0, len(self.options) - 1)]
        return chosen.generate(source)

    def shrink(self, value: T) -> Iterator[T]:
        return chain.from_iterable(option.shrink(value) for option in self.options)

    def __repr__(self) -> str:
        return f"one_of{self.options!r}"


class WeightedOneOf[T](Arbitrary[T]):
    """Weight-proportional choice among options.

    A single draw scaled by the total weight is compared against the running
    cumulative weight; the first option whose cumulative weight reaches the
    roll is chosen.
    """

    def __init__(self, options: Sequence[tuple[float, ArbitraryLike[T]]]) -> None:
        if not options:
            raise ConfigurationError("weighted_one_of requires at least one option")
        weights: list[float] = []
        arbitraries: list[Arbitrary[T]] = []
        for entry in options:
            if not isinstance(entry, tuple) or len(entry) != 2:
                raise ConfigurationError(f"weighted_one_of options must be (weight, arbitrary) pairs, got {entry!r}")
            weight, option = entry
            if not isinstance(weight, int | float) or isinstance(weight, bool) or not math.isfinite(weight) or weight <= 0:
                raise ConfigurationError(f"weighted_one_of weights must be finite and positive, got {weight!r}")
            weights.append(float(weight))
            arbitraries.append(to_arbitrary(option))
        total_weight = sum(weights)
        if not math.isfinite(total_weight):
            raise ConfigurationError("weighted_one_of total weight must be finite")
        self.weights = tuple(weights)
        self.options = tuple(arbitraries)
        self.total_weight = total_weight

    def generate(self, source: RandomSource) -> T:
        roll = source.draw() * self.total_weight
        threshold = 0.0
        for weight, option in zip(self.weights, self.options, strict=True):
            threshold += weight
            if roll <= threshold:
                return option.generate(source)
        # Float accumulation can fall just short of total_weight
        return self.options[-1].generate(source)

    def shrink(self, value: T) -> Iterator[T]:
        return chain.from_iterable(option.shrink(value) for option in self.options)

    def __repr__(self) -> str:
        pairs = ", ".join(f"({weight}, {option!r})" for weight, option in zip(self.weights, self.options, strict=True))
        return f"weighted_one_of([{pairs}])"


class OptionalOf[T](Arbitrary[T | None]):
    """``None`` with probability ``absent_probability``, else a value of ``item``."""

    def __init__(self, item: ArbitraryLike[T], absent_probability: float = 0.5) -> None:
        self.item = to_arbitrary(item)
        self.absent_probability = require_probability(absent_probability, "absent_probability")

    def generate(self, source: RandomSource) -> T | None:
        if source.draw() < self.absent_probability:
            return None
        return self.item.generate(source)

    def shrink(self, value: T | None) -> Iterator[T | None]:
        if value is None:
            return
        yield None
        yield from self.item.shrink(value)

    def __repr__(self) -> str:
        return f"optional({self.item!r}, {self.absent_probability})"


class Mapped[T, U](Arbitrary[U]):
    """Values of ``item`` passed through ``to``.

    Shrinking needs the inverse ``from_``: without it, or when it returns
    None for a value, no candidates are produced.
    """

    def __init__(
        self,
        item: ArbitraryLike[T],
        to: Callable[[T], U],
        from_: Callable[[U], T | None] | None = None,
    ) -> None:
        if not callable(to):
            raise ConfigurationError("mapped requires a callable 'to'")
        if from_ is not None and not callable(from_):
            raise ConfigurationError("mapped 'from_' must be callable")
        self.item = to_arbitrary(item)
        self.to = to
        self.from_ = from_

    def generate(self, source: RandomSource) -> U:
        return self.to(self.item.generate(source))

    def shrink(self, value: U) -> Iterator[U]:
        if self.from_ is None:
            return
        original = self.from_(value)
        if original is None:
            return
        for shrunk in self.item.shrink(original):
            yield self.to(shrunk)

    def __repr__(self) -> str:
        return f"mapped({self.item!r})"


class Filtered[T](Arbitrary[T]):
    """Values of ``item`` satisfying ``predicate``.

    Generation retries lazily up to ``max_attempts`` times; shrinking drops
    candidates the predicate rejects.
    """

    def __init__(self, item: ArbitraryLike[T], predicate: Callable[[T], bool], max_attempts: int = 100) -> None:
        if not callable(predicate):
            raise ConfigurationError("filtered requires a callable predicate")
        self.item = to_arbitrary(item)
        self.predicate = predicate
        self.max_attempts = require_positive_int(max_attempts, "max_attempts")

    def generate(self, source: RandomSource) -> T:
        for _ in range(self.max_attempts):
            candidate = self.item.generate(source)
            if self.predicate(candidate):
                return candidate
        raise GenerationError(f"filter predicate rejected all {self.max_attempts} generated values")

    def shrink(self, value: T) -> Iterator[T]:
        return (candidate for candidate in self.item.shrink(value) if self.predicate(candidate))

    def __repr__(self) -> str:
        return f"filtered({self.item!r}, max_attempts={self.max_attempts})"


# =============================================================================
# Constructors
# =============================================================================


def constant[T](value: T) -> Constant[T]:
    return Constant(value)


def constant_from[T](*values: T) -> ConstantFrom[T]:
    """Pick one of ``values``; shrinks toward ``values[0]``."""
    return ConstantFrom(*values)


def one_of[T](*options: ArbitraryLike[T]) -> OneOf[T]:
    return OneOf(*options)


def weighted_one_of[T](options: Sequence[tuple[float, ArbitraryLike[T]]]) -> WeightedOneOf[T]:
    """Choose among ``(weight, arbitrary)`` pairs proportionally to weight.

    Raises:
        ConfigurationError: If there are no options or a weight is not a
            finite positive number.
    """
    return WeightedOneOf(options)


frequency = weighted_one_of


def optional[T](item: ArbitraryLike[T], absent_probability: float = 0.5) -> OptionalOf[T]:
    return OptionalOf(item, absent_probability)


def mapped[T, U](
    item: ArbitraryLike[T],
    to: Callable[[T], U],
    from_: Callable[[U], T | None] | None = None,
) -> Mapped[T, U]:
    """Transform generated values; pass ``from_`` to keep shrinking."""
    return Mapped(item, to, from_)


def filtered[T](item: ArbitraryLike[T], predicate: Callable[[T], bool], max_attempts: int = 100) -> Filtered[T]:
    return Filtered(item, predicate, max_attempts)