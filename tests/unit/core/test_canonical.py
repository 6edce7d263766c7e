# tests/unit/core/test_canonical.py
"""Tests for canonical JSON rendering and shrink scores."""

import enum
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID

import pytest
from pydantic import BaseModel

from fuzzloom.core.canonical import (
    EPOCH,
    canonical_json,
    compact_repr,
    epoch_millis,
    normalize_for_json,
    pretty_repr,
    shrink_score,
    truncate,
)


class Colour(enum.Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class Item(BaseModel):
    name: str
    qty: int


class TestNormalizeForJson:
    """Tests for value normalization."""

    def test_primitives_pass_through(self) -> None:
        assert normalize_for_json({"a": 1, "b": "x", "c": None, "d": True}) == {"a": 1, "b": "x", "c": None, "d": True}

    def test_tuple_becomes_list(self) -> None:
        assert normalize_for_json((1, 2)) == [1, 2]

    def test_set_is_sorted_canonically(self) -> None:
        assert normalize_for_json({3, 1, 2}) == [1, 2, 3]

    def test_datetime_rendered_in_utc(self) -> None:
        value = datetime(2024, 1, 1, tzinfo=UTC)
        assert normalize_for_json(value) == "2024-01-01T00:00:00+00:00"

    def test_naive_datetime_treated_as_utc(self) -> None:
        assert normalize_for_json(datetime(2024, 1, 1)) == "2024-01-01T00:00:00+00:00"

    def test_bytes_wrapped_as_base64(self) -> None:
        assert normalize_for_json(b"hi") == {"__bytes__": "aGk="}

    def test_decimal_and_uuid_become_strings(self) -> None:
        uid = UUID("12345678-1234-4234-8234-123456789abc")
        assert normalize_for_json([Decimal("1.50"), uid]) == ["1.50", str(uid)]

    def test_enum_uses_value(self) -> None:
        assert normalize_for_json(Colour.RED) == "red"

    def test_dataclass_and_model_become_dicts(self) -> None:
        assert normalize_for_json(Point(1, 2)) == {"x": 1, "y": 2}
        assert normalize_for_json(Item(name="a", qty=3)) == {"name": "a", "qty": 3}

    def test_unsafe_integer_becomes_string(self) -> None:
        assert normalize_for_json(2**60) == str(2**60)

    def test_non_finite_float_becomes_string(self) -> None:
        assert normalize_for_json(math.inf) == "inf"
        assert normalize_for_json(math.nan) == "nan"

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(TypeError):
            normalize_for_json(object())


class TestCanonicalJson:
    """Tests for compact canonical rendering."""

    def test_keys_sorted_without_whitespace(self) -> None:
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_same_input_same_output(self) -> None:
        assert canonical_json({"x": {3, 2, 1}}) == canonical_json({"x": {1, 2, 3}})

    def test_compact_repr_falls_back_to_repr(self) -> None:
        marker = object()
        assert compact_repr(marker) == repr(marker)

    def test_pretty_repr_indents(self) -> None:
        assert pretty_repr({"a": 1}) == '{\n  "a": 1\n}'

    def test_pretty_repr_of_scalar(self) -> None:
        assert pretty_repr(1) == "1"


class TestTruncate:
    """Tests for text truncation."""

    def test_short_text_unchanged(self) -> None:
        assert truncate("abc") == "abc"

    def test_exact_length_unchanged(self) -> None:
        assert truncate("x" * 80) == "x" * 80

    def test_long_text_cut_with_ellipsis(self) -> None:
        result = truncate("x" * 100)
        assert len(result) == 80
        assert result.endswith("...")


class TestEpochMillis:
    def test_epoch_is_zero(self) -> None:
        assert epoch_millis(EPOCH) == 0

    def test_millisecond_resolution(self) -> None:
        assert epoch_millis(EPOCH + timedelta(seconds=1.5)) == 1500

    def test_before_epoch_is_negative(self) -> None:
        assert epoch_millis(EPOCH - timedelta(milliseconds=3)) == -3


class TestShrinkScore:
    """Tests for the shrink ranking heuristic."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, 0),
            (True, 1),
            (False, 0),
            (-7, 7),
            (2.5, 2.5),
            ("abc", 3),
            ([1, 2], 2),
            ((1,), 1),
            ({1, 2, 3}, 3),
        ],
    )
    def test_scores(self, value: object, expected: float) -> None:
        assert shrink_score(value) == expected

    def test_datetime_scores_by_distance_from_epoch(self) -> None:
        assert shrink_score(EPOCH - timedelta(milliseconds=10)) == 10

    def test_dict_scores_by_rendering_length(self) -> None:
        assert shrink_score({"a": 1}) == len('{"a":1}')

    def test_nan_scores_as_infinite(self) -> None:
        assert shrink_score(math.nan) == math.inf
