# src/fuzzloom/arbitraries/__init__.py
"""Arbitraries: generator + shrinker pairs and the combinators that compose them.

- base: Arbitrary ABC, bare-callable wrapping, parameter validation
- numeric: integers, big_integers, floats, booleans, dates
- text: strings, uuids, emails
- containers: arrays, unique_arrays, sets, records, dictionaries
- structured: objects, tuples
- combinators: constant, constant_from, one_of, weighted_one_of, optional,
  mapped, filtered

User code normally reaches these through ``fuzzloom.gen``.
"""

from fuzzloom.arbitraries.base import Arbitrary, ArbitraryLike, FunctionArbitrary, to_arbitrary
from fuzzloom.arbitraries.combinators import (
    Constant,
    ConstantFrom,
    Filtered,
    Mapped,
    OneOf,
    OptionalOf,
    WeightedOneOf,
)
from fuzzloom.arbitraries.containers import Arrays, Dictionaries, Records, Sets, UniqueArrays
from fuzzloom.arbitraries.numeric import BigIntegers, Booleans, Dates, Floats, Integers
from fuzzloom.arbitraries.structured import Objects, Tuples
from fuzzloom.arbitraries.text import Emails, Strings, Uuids

__all__ = [
    "Arbitrary",
    "ArbitraryLike",
    "Arrays",
    "BigIntegers",
    "Booleans",
    "Constant",
    "ConstantFrom",
    "Dates",
    "Dictionaries",
    "Emails",
    "Filtered",
    "Floats",
    "FunctionArbitrary",
    "Integers",
    "Mapped",
    "Objects",
    "OneOf",
    "OptionalOf",
    "Records",
    "Sets",
    "Strings",
    "Tuples",
    "UniqueArrays",
    "Uuids",
    "WeightedOneOf",
    "to_arbitrary",
]
