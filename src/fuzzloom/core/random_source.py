# src/fuzzloom/core/random_source.py
"""Deterministic random stream with independent sub-stream forking.

RandomSource is an xorshift32 generator over an unsigned 32-bit state. It is
integer-only so the same seed yields the same stream on every interpreter and
platform, which is what makes a printed seed a complete replay recipe.

Usage:
    source = RandomSource(42)
    source.draw()              # float in [0, 1)
    child = source.fork()      # consumes exactly one draw from ``source``
    source.int_between(1, 6)   # inclusive, one draw

Forking is how trials and command parameters stay isolated: a sub-generator
that consumes any number of draws from its child stream does not perturb the
draws the parent makes afterwards.
"""

from __future__ import annotations

import time

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 0x100000000

# xorshift32 has an all-zero fixed point; zero seeds are remapped here.
ZERO_SEED_REPLACEMENT = 0x9E3779B9


def normalize_seed(seed: int | None) -> int:
    """Reduce a seed to its lower 32 bits, deriving one from the clock if absent."""
    if seed is None:
        return (time.time_ns() // 1_000_000) & _MASK32
    return seed & _MASK32


def _fmix32(value: int) -> int:
    """murmur3 finalizer: decorrelates a drawn word before it seeds a child stream."""
    value ^= value >> 16
    value = (value * 0x85EBCA6B) & _MASK32
    value ^= value >> 13
    value = (value * 0xC2B2AE35) & _MASK32
    value ^= value >> 16
    return value


class RandomSource:
    """Seeded xorshift32 stream.

    Not thread-safe. Each run owns its top-level source and forks a child
    per trial.
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        self._seed = seed & _MASK32
        self._state = self._seed if self._seed != 0 else ZERO_SEED_REPLACEMENT

    @property
    def seed(self) -> int:
        """The normalized seed this stream was created from."""
        return self._seed

    def next_word(self) -> int:
        """Advance the state and return it as an unsigned 32-bit integer."""
        state = self._state
        state ^= (state << 13) & _MASK32
        state ^= state >> 17
        state ^= (state << 5) & _MASK32
        self._state = state
        return state

    def draw(self) -> float:
        """Return the next value in [0, 1)."""
        return self.next_word() / _TWO_POW_32

    def fork(self) -> RandomSource:
        """Create an independent child stream, consuming exactly one draw."""
        return RandomSource(_fmix32(self.next_word()))

    def int_between(self, low: int, high: int) -> int:
        """Uniform integer in [low, high] from a single draw.

        Precise for spans up to 2**32; wider spans should use
        big_int_between.
        """
        result = int(self.draw() * (high - low + 1)) + low
        return min(result, high)

    def big_int_between(self, low: int, high: int) -> int:
        """Uniform-ish integer in [low, high] for spans of any width.

        Draws enough 32-bit words to cover the span plus one extra word to
        keep the modulo bias negligible.
        """
        span = high - low + 1
        words = (span.bit_length() + 31) // 32 + 1
        accumulated = 0
        for _ in range(words):
            accumulated = (accumulated << 32) | self.next_word()
        return low + accumulated % span

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._seed})"
