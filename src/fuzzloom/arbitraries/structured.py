# src/fuzzloom/arbitraries/structured.py
"""Fixed-shape arbitraries: dicts with a known key set, and tuples.

Both shrink one field at a time, holding the others fixed.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from fuzzloom.arbitraries.base import Arbitrary, ArbitraryLike, to_arbitrary
from fuzzloom.arbitraries.shrinking import replace_at
from fuzzloom.contracts.errors import ConfigurationError
from fuzzloom.core.random_source import RandomSource


class Objects(Arbitrary[dict[str, Any]]):
    """Dicts whose fields are generated in ``shape`` order."""

    def __init__(self, shape: Mapping[str, ArbitraryLike[Any]]) -> None:
        if not isinstance(shape, Mapping):
            raise ConfigurationError(f"objects shape must be a mapping, got {type(shape).__name__}")
        self.shape: dict[str, Arbitrary[Any]] = {key: to_arbitrary(item) for key, item in shape.items()}

    def generate(self, source: RandomSource) -> dict[str, Any]:
        return {key: item.generate(source) for key, item in self.shape.items()}

    def shrink(self, value: dict[str, Any]) -> Iterator[dict[str, Any]]:
        if not isinstance(value, dict):
            return
        for key, item in self.shape.items():
            if key not in value:
                continue
            for shrunk in item.shrink(value[key]):
                yield {**value, key: shrunk}

    def __repr__(self) -> str:
        return f"objects({self.shape!r})"


class Tuples(Arbitrary[tuple[Any, ...]]):
    """Heterogeneous fixed-length tuples."""

    def __init__(self, *items: ArbitraryLike[Any]) -> None:
        self.items = tuple(to_arbitrary(item) for item in items)

    def generate(self, source: RandomSource) -> tuple[Any, ...]:
        return tuple(item.generate(source) for item in self.items)

    def shrink(self, value: tuple[Any, ...]) -> Iterator[tuple[Any, ...]]:
        if not isinstance(value, tuple) or len(value) != len(self.items):
            return
        for index, item in enumerate(self.items):
            for shrunk in item.shrink(value[index]):
                yield tuple(replace_at(value, index, shrunk))

    def __repr__(self) -> str:
        return f"tuples{self.items!r}"


def objects(shape: Mapping[str, ArbitraryLike[Any]]) -> Objects:
    """Dicts with one generated value per key of ``shape``."""
    return Objects(shape)


def tuples(*items: ArbitraryLike[Any]) -> Tuples:
    return Tuples(*items)
