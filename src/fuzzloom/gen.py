# src/fuzzloom/gen.py
"""Built-in arbitrary constructors.

Usage:
    from fuzzloom import gen

    people = gen.objects({"name": gen.strings(min_length=1), "age": gen.integers(0, 120)})
    ids = gen.unique_arrays(gen.uuids(), min_length=1)
"""

from fuzzloom.arbitraries.combinators import (
    constant,
    constant_from,
    filtered,
    frequency,
    mapped,
    one_of,
    optional,
    weighted_one_of,
)
from fuzzloom.arbitraries.containers import arrays, dictionaries, records, sets, unique_arrays
from fuzzloom.arbitraries.numeric import big_integers, booleans, dates, floats, integers
from fuzzloom.arbitraries.structured import objects, tuples
from fuzzloom.arbitraries.text import emails, strings, uuids

__all__ = [
    "arrays",
    "big_integers",
    "booleans",
    "constant",
    "constant_from",
    "dates",
    "dictionaries",
    "emails",
    "filtered",
    "floats",
    "frequency",
    "integers",
    "mapped",
    "objects",
    "one_of",
    "optional",
    "records",
    "sets",
    "strings",
    "tuples",
    "unique_arrays",
    "uuids",
    "weighted_one_of",
]
