# src/fuzzloom/arbitraries/containers.py
"""Collection arbitraries: lists, unique lists, sets and string-keyed dicts.

Every collection shrinks in two stages: first by size (prefix halving,
clamped to the configured minimum), then element by element. Unique
collections sample with a bounded number of attempts per slot and never
yield a shrink candidate that would reintroduce a duplicate.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any

from fuzzloom.arbitraries.base import Arbitrary, ArbitraryLike, resolve_size_bounds, to_arbitrary
from fuzzloom.arbitraries.shrinking import replace_at, shrink_elements, shrink_lengths
from fuzzloom.contracts.errors import GenerationError
from fuzzloom.core.canonical import compact_repr
from fuzzloom.core.random_source import RandomSource

# Generation attempts per requested element of a unique collection.
ATTEMPTS_PER_SLOT = 20

DEFAULT_MAX_ARRAY_LENGTH = 5
DEFAULT_MAX_UNIQUE_SIZE = 3


def _draw_size(source: RandomSource, low: int, high: int) -> int:
    if low == high:
        return low
    return source.int_between(low, high)


def sample_unique[T](item: Arbitrary[T], source: RandomSource, target: int) -> list[T]:
    """Up to ``target`` distinct values, giving up after ATTEMPTS_PER_SLOT tries per slot."""
    values: list[T] = []
    for _ in range(target * ATTEMPTS_PER_SLOT):
        if len(values) >= target:
            break
        candidate = item.generate(source)
        if candidate not in values:
            values.append(candidate)
    return values


def _require_minimum(label: str, values: list[Any], minimum: int) -> None:
    if len(values) < minimum:
        raise GenerationError(
            f"{label} could not satisfy minimum size {minimum} with unique values "
            f"(found {len(values)} after {minimum * ATTEMPTS_PER_SLOT} attempts)"
        )


def _has_duplicates(items: list[Any]) -> bool:
    return any(item in items[:index] for index, item in enumerate(items))


class Arrays[T](Arbitrary[list[T]]):
    """Lists of a fixed ``length`` or of ``min_length..max_length`` items."""

    def __init__(
        self,
        item: ArbitraryLike[T],
        length: int | None = None,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        self.item = to_arbitrary(item)
        self.min_length, self.max_length = resolve_size_bounds(
            length, min_length, max_length, default_max=DEFAULT_MAX_ARRAY_LENGTH, label="arrays"
        )

    def generate(self, source: RandomSource) -> list[T]:
        length = _draw_size(source, self.min_length, self.max_length)
        return [self.item.generate(source) for _ in range(length)]

    def shrink(self, value: list[T]) -> Iterator[list[T]]:
        if not isinstance(value, list) or not self.min_length <= len(value) <= self.max_length:
            return
        for length in shrink_lengths(len(value), self.min_length):
            yield value[:length]
        yield from shrink_elements(value, self.item.shrink)

    def __repr__(self) -> str:
        return f"arrays({self.item!r}, min_length={self.min_length}, max_length={self.max_length})"


class UniqueArrays[T](Arbitrary[list[T]]):
    """Lists without duplicate elements (compared with ``==``)."""

    def __init__(self, item: ArbitraryLike[T], *, min_length: int = 0, max_length: int | None = None) -> None:
        self.item = to_arbitrary(item)
        self.min_length, self.max_length = resolve_size_bounds(
            None, min_length, max_length, default_max=DEFAULT_MAX_UNIQUE_SIZE, label="unique_arrays"
        )

    def generate(self, source: RandomSource) -> list[T]:
        target = _draw_size(source, self.min_length, self.max_length)
        values = sample_unique(self.item, source, target)
        _require_minimum("unique_arrays", values, self.min_length)
        return values

    def shrink(self, value: list[T]) -> Iterator[list[T]]:
        if not isinstance(value, list) or not self.min_length <= len(value) <= self.max_length:
            return
        if _has_duplicates(value):
            return
        for length in shrink_lengths(len(value), self.min_length):
            yield value[:length]
        for index, element in enumerate(value):
            for shrunk in self.item.shrink(element):
                if shrunk not in value:
                    yield replace_at(value, index, shrunk)

    def __repr__(self) -> str:
        return f"unique_arrays({self.item!r}, min_length={self.min_length}, max_length={self.max_length})"


class Sets[T: Hashable](Arbitrary[set[T]]):
    """Python sets. Elements are shrunk in canonical-JSON order."""

    def __init__(self, item: ArbitraryLike[T], *, min_size: int = 0, max_size: int | None = None) -> None:
        self.item = to_arbitrary(item)
        self.min_size, self.max_size = resolve_size_bounds(
            None, min_size, max_size, default_max=DEFAULT_MAX_UNIQUE_SIZE, label="sets"
        )

    def generate(self, source: RandomSource) -> set[T]:
        target = _draw_size(source, self.min_size, self.max_size)
        values = sample_unique(self.item, source, target)
        _require_minimum("sets", values, self.min_size)
        return set(values)

    def shrink(self, value: set[T]) -> Iterator[set[T]]:
        if not isinstance(value, set | frozenset) or not self.min_size <= len(value) <= self.max_size:
            return
        ordered = sorted(value, key=compact_repr)
        for length in shrink_lengths(len(ordered), self.min_size):
            yield set(ordered[:length])
        for index, element in enumerate(ordered):
            for shrunk in self.item.shrink(element):
                if shrunk not in value:
                    yield set(replace_at(ordered, index, shrunk))

    def __repr__(self) -> str:
        return f"sets({self.item!r}, min_size={self.min_size}, max_size={self.max_size})"


def _dict_prefixes[V](value: dict[Any, V], minimum: int) -> Iterator[dict[Any, V]]:
    entries = list(value.items())
    for length in shrink_lengths(len(entries), minimum):
        yield dict(entries[:length])


def _dict_value_shrinks[V](value: dict[Any, V], values: Arbitrary[V]) -> Iterator[dict[Any, V]]:
    for key, entry in value.items():
        for shrunk in values.shrink(entry):
            yield {**value, key: shrunk}


class Records[V](Arbitrary[dict[str, V]]):
    """String-keyed dicts with generated ``key_<index>_<n>`` keys.

    Keys are drawn before values. Only sizes and values shrink; keys are
    opaque labels.
    """

    def __init__(self, value: ArbitraryLike[V], *, min_keys: int = 0, max_keys: int | None = None) -> None:
        self.value = to_arbitrary(value)
        self.min_keys, self.max_keys = resolve_size_bounds(
            None, min_keys, max_keys, default_max=DEFAULT_MAX_UNIQUE_SIZE, label="records"
        )

    def generate(self, source: RandomSource) -> dict[str, V]:
        count = _draw_size(source, self.min_keys, self.max_keys)
        keys = [f"key_{index}_{source.int_between(0, 999_999)}" for index in range(count)]
        return {key: self.value.generate(source) for key in keys}

    def shrink(self, value: dict[str, V]) -> Iterator[dict[str, V]]:
        if not isinstance(value, dict) or not self.min_keys <= len(value) <= self.max_keys:
            return
        yield from _dict_prefixes(value, self.min_keys)
        yield from _dict_value_shrinks(value, self.value)

    def __repr__(self) -> str:
        return f"records({self.value!r}, min_keys={self.min_keys}, max_keys={self.max_keys})"


class Dictionaries[K: Hashable, V](Arbitrary[dict[K, V]]):
    """Dicts with keys from one arbitrary and values from another.

    Shrinks size, then values, then keys; a shrunk key that collides with an
    existing key is skipped.
    """

    def __init__(
        self,
        keys: ArbitraryLike[K],
        values: ArbitraryLike[V],
        *,
        min_keys: int = 0,
        max_keys: int | None = None,
    ) -> None:
        self.keys = to_arbitrary(keys)
        self.values = to_arbitrary(values)
        self.min_keys, self.max_keys = resolve_size_bounds(
            None, min_keys, max_keys, default_max=DEFAULT_MAX_UNIQUE_SIZE, label="dictionaries"
        )

    def generate(self, source: RandomSource) -> dict[K, V]:
        target = _draw_size(source, self.min_keys, self.max_keys)
        keys = sample_unique(self.keys, source, target)
        _require_minimum("dictionaries", keys, self.min_keys)
        return {key: self.values.generate(source) for key in keys}

    def shrink(self, value: dict[K, V]) -> Iterator[dict[K, V]]:
        if not isinstance(value, dict) or not self.min_keys <= len(value) <= self.max_keys:
            return
        yield from _dict_prefixes(value, self.min_keys)
        yield from _dict_value_shrinks(value, self.values)
        for key in value:
            for shrunk in self.keys.shrink(key):
                if shrunk in value:
                    continue
                yield {(shrunk if existing == key else existing): entry for existing, entry in value.items()}

    def __repr__(self) -> str:
        return f"dictionaries({self.keys!r}, {self.values!r}, min_keys={self.min_keys}, max_keys={self.max_keys})"


# =============================================================================
# Constructors
# =============================================================================


def arrays[T](
    item: ArbitraryLike[T],
    length: int | None = None,
    *,
    min_length: int | None = None,
    max_length: int | None = None,
) -> Arrays[T]:
    """Lists of ``item`` values.

    Args:
        item: Element arbitrary (or generator callable).
        length: Fixed length. Mutually exclusive with min/max bounds.
        min_length: Minimum length (default 0).
        max_length: Maximum length (default max(min_length, 5)).
    """
    return Arrays(item, length, min_length=min_length, max_length=max_length)


def unique_arrays[T](item: ArbitraryLike[T], *, min_length: int = 0, max_length: int | None = None) -> UniqueArrays[T]:
    """Lists of distinct ``item`` values (default max length: max(min_length, 3))."""
    return UniqueArrays(item, min_length=min_length, max_length=max_length)


def sets[T: Hashable](item: ArbitraryLike[T], *, min_size: int = 0, max_size: int | None = None) -> Sets[T]:
    """Sets of ``item`` values (default max size: max(min_size, 3))."""
    return Sets(item, min_size=min_size, max_size=max_size)


def records[V](value: ArbitraryLike[V], *, min_keys: int = 0, max_keys: int | None = None) -> Records[V]:
    return Records(value, min_keys=min_keys, max_keys=max_keys)


def dictionaries[K: Hashable, V](
    keys: ArbitraryLike[K],
    values: ArbitraryLike[V],
    *,
    min_keys: int = 0,
    max_keys: int | None = None,
) -> Dictionaries[K, V]:
    """Dicts with distinct keys (default max size: max(min_keys, 3))."""
    return Dictionaries(keys, values, min_keys=min_keys, max_keys=max_keys)
