# src/fuzzloom/core/canonical.py
"""
Canonical JSON rendering for counterexamples, parameters and shrink scores.

Two-phase approach:
1. Normalize: Convert Python values (sets, tuples, datetimes, bytes, models)
   into JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Unlike an audit hash, a failure report must never crash on odd values, so
non-finite floats and integers outside the JavaScript-safe range are rendered
as strings instead of being rejected, and callers fall back to repr() for
anything normalization cannot handle.
"""

from __future__ import annotations

import base64
import dataclasses
import json
import math
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

import rfc8785
from pydantic import BaseModel

# RFC 8785 (JCS) uses JavaScript-safe integers: -(2^53-1) to (2^53-1)
MAX_SAFE_INT = 2**53 - 1

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Raises:
        TypeError: If the value has no JSON representation
    """
    # bool before int: bool is an int subclass
    if obj is None or isinstance(obj, bool | str):
        return obj

    if isinstance(obj, int):
        if abs(obj) > MAX_SAFE_INT:
            return str(obj)
        return obj

    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return repr(obj)
        return obj

    if isinstance(obj, datetime):
        # Naive datetimes assumed UTC (explicit policy)
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=UTC)
        return obj.astimezone(UTC).isoformat()

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, bytes):
        return {"__bytes__": base64.b64encode(obj).decode("ascii")}

    if isinstance(obj, Decimal | UUID):
        return str(obj)

    if isinstance(obj, Enum):
        return _normalize_value(obj.value)

    raise TypeError(f"Cannot render {type(obj).__name__} as JSON")


def normalize_for_json(data: Any) -> Any:
    """Recursively normalize a data structure for JSON rendering.

    Sets are emitted as lists ordered by the canonical form of their
    elements, so the rendering does not depend on hash randomization.

    Raises:
        TypeError: If data contains values with no JSON representation
    """
    if isinstance(data, dict):
        return {str(k): normalize_for_json(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [normalize_for_json(v) for v in data]
    if isinstance(data, set | frozenset):
        items = [normalize_for_json(v) for v in data]
        return sorted(items, key=_canonical_dumps)
    if isinstance(data, BaseModel):
        return normalize_for_json(data.model_dump(mode="json"))
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return normalize_for_json(dataclasses.asdict(data))
    return _normalize_value(data)


def _canonical_dumps(normalized: Any) -> str:
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def canonical_json(obj: Any) -> str:
    """Produce compact canonical JSON (no whitespace, sorted keys).

    Raises:
        TypeError: If data contains types that cannot be rendered
    """
    return _canonical_dumps(normalize_for_json(obj))


def compact_repr(obj: Any) -> str:
    """Compact JSON if possible, repr() otherwise."""
    try:
        return canonical_json(obj)
    except (TypeError, ValueError):
        return repr(obj)


def pretty_repr(obj: Any) -> str:
    """Indented JSON if possible, repr() otherwise. Preserves dict order."""
    try:
        return json.dumps(normalize_for_json(obj), indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(obj)


def truncate(text: str, max_length: int = 80) -> str:
    """Cut ``text`` to ``max_length`` characters, ending in '...' when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch. Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - EPOCH) // timedelta(milliseconds=1)


def shrink_score(value: Any) -> float:
    """Heuristic size used to rank failing shrink candidates within a round.

    Numbers score by magnitude, sized containers by length, and everything
    else (including dicts) by the length of its compact rendering. This is a
    ranking heuristic, not a total order across types.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return abs(value)
    if isinstance(value, float):
        return math.inf if math.isnan(value) else abs(value)
    if isinstance(value, datetime):
        return abs(epoch_millis(value))
    if isinstance(value, str | bytes | list | tuple | set | frozenset):
        return len(value)
    return len(compact_repr(value))
