# src/fuzzloom/arbitraries/shrinking.py
"""Shrink primitives reused by the built-in arbitraries.

All helpers are generators or return small lists; none of them touch a
RandomSource.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

# Bisection steps tried for a float before giving up on convergence.
FLOAT_SHRINK_STEPS = 20


def integer_target(low: int, high: int) -> int:
    """0 when the range contains it, otherwise the bound nearer 0."""
    if low <= 0 <= high:
        return 0
    return low if low > 0 else high


def float_target(low: float, high: float) -> float:
    if low <= 0 <= high:
        return 0.0
    return low if low > 0 else high


def shrink_toward(value: int, target: int) -> Iterator[int]:
    """Bisect ``value`` toward ``target``, yielding each intermediate value.

    Floor when moving down and ceil when moving up, so every step makes
    strict progress and the last value yielded is ``target`` itself.
    """
    current = value
    while current != target:
        if current > target:
            current = (current + target) // 2
        else:
            current = -((-(current + target)) // 2)
        yield current


def shrink_integer(value: Any, low: int, high: int) -> Iterator[int]:
    """Integer candidates for ``value`` within ``[low, high]``."""
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        return
    yield from shrink_toward(value, integer_target(low, high))


def shrink_float(value: Any, low: float, high: float) -> Iterator[float]:
    """Float candidates for ``value`` within the half-open ``[low, high)``.

    At most FLOAT_SHRINK_STEPS halvings; stops early once the midpoint stops
    moving or would land outside the range.
    """
    if not isinstance(value, float | int) or isinstance(value, bool):
        return
    if not _in_half_open(value, low, high):
        return
    target = float_target(low, high)
    current = float(value)
    for _ in range(FLOAT_SHRINK_STEPS):
        following = (current + target) / 2
        if following == current or not _in_half_open(following, low, high):
            break
        current = following
        yield current


def _in_half_open(value: float, low: float, high: float) -> bool:
    return low <= value < high or value == low


def shrink_lengths(length: int, minimum: int = 0) -> list[int]:
    """Candidate prefix lengths for a container of ``length`` items.

    Halves repeatedly down to 0, clamps each length to ``minimum`` and drops
    lengths that are not shorter than ``length`` or already listed.
    """
    lengths: list[int] = []
    current = length // 2
    while True:
        clamped = max(current, minimum)
        if clamped < length and clamped not in lengths:
            lengths.append(clamped)
        if current == 0:
            break
        current //= 2
    return lengths


def replace_at[T](items: Sequence[T], index: int, value: T) -> list[T]:
    """Copy of ``items`` with position ``index`` replaced."""
    replaced = list(items)
    replaced[index] = value
    return replaced


def shrink_elements[T](items: Sequence[T], shrink_item: Callable[[T], Iterable[T]]) -> Iterator[list[T]]:
    """Substitute each shrink of each element, one position at a time."""
    for index, item in enumerate(items):
        for shrunk in shrink_item(item):
            yield replace_at(items, index, shrunk)
