# src/fuzzloom/adapters/pydantic_schema.py
"""Derive arbitraries from pydantic models and type annotations.

Usage:
    class Order(BaseModel):
        sku: Annotated[str, MinLen(3), MaxLen(12)]
        quantity: int = Field(ge=1, le=50)
        tags: list[str] = Field(default_factory=list, max_length=4)

    orders = arbitrary_for(Order)   # yields validated Order instances

Supported: BaseModel subclasses, int, float, str, bool, None, datetime,
uuid.UUID, Literal, Enum, list/set/frozenset/tuple/dict, unions (including
Optional), Any and Annotated. Bounds come from annotated-types metadata
(Gt, Ge, Lt, Le, MinLen, MaxLen), which is also what pydantic's Field()
produces. Anything else raises UnsupportedSchemaError naming the kind.

Models are built with ``model_validate`` and shrink through
``model_dump``, so shrunk counterexamples are still valid instances.
"""

from __future__ import annotations

import enum
import math
import types
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Annotated, Any, Literal, Union, get_args, get_origin

import annotated_types
from pydantic import BaseModel

from fuzzloom.arbitraries.base import Arbitrary
from fuzzloom.arbitraries.combinators import constant, constant_from, mapped, one_of, optional
from fuzzloom.arbitraries.containers import arrays, dictionaries, sets
from fuzzloom.arbitraries.numeric import DEFAULT_MAX_DATE, DEFAULT_MIN_DATE, booleans, dates, floats, integers
from fuzzloom.arbitraries.structured import objects, tuples
from fuzzloom.arbitraries.text import strings, uuids
from fuzzloom.contracts.errors import UnsupportedSchemaError

DEFAULT_INT_SPAN = 100
DEFAULT_FLOAT_SPAN = 1.0


@dataclass(frozen=True, slots=True)
class _Constraints:
    """Bounds collected from annotated-types metadata."""

    gt: Any = None
    ge: Any = None
    lt: Any = None
    le: Any = None
    min_length: int | None = None
    max_length: int | None = None


def _flatten(metadata: Iterable[Any]) -> list[Any]:
    flat: list[Any] = []
    for item in metadata:
        if isinstance(item, annotated_types.GroupedMetadata):
            flat.extend(_flatten(item))
        else:
            flat.append(item)
    return flat


def _collect(metadata: Iterable[Any]) -> _Constraints:
    bounds: dict[str, Any] = {}
    for item in _flatten(metadata):
        if isinstance(item, annotated_types.Gt):
            bounds["gt"] = item.gt
        elif isinstance(item, annotated_types.Ge):
            bounds["ge"] = item.ge
        elif isinstance(item, annotated_types.Lt):
            bounds["lt"] = item.lt
        elif isinstance(item, annotated_types.Le):
            bounds["le"] = item.le
        elif isinstance(item, annotated_types.MinLen):
            bounds["min_length"] = item.min_length
        elif isinstance(item, annotated_types.MaxLen):
            bounds["max_length"] = item.max_length
        elif isinstance(item, annotated_types.MultipleOf):
            raise UnsupportedSchemaError("multiple_of", "step constraints cannot be generated")
        elif getattr(item, "pattern", None) is not None:
            raise UnsupportedSchemaError("pattern", f"regex {item.pattern!r} cannot be generated")
    return _Constraints(**bounds)


def _kind(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)


# =============================================================================
# Scalars
# =============================================================================


def _int_arbitrary(constraints: _Constraints) -> Arbitrary[int]:
    low = constraints.ge if constraints.ge is not None else None
    if constraints.gt is not None:
        low = math.floor(constraints.gt) + 1
    high = constraints.le if constraints.le is not None else None
    if constraints.lt is not None:
        high = math.ceil(constraints.lt) - 1
    if low is None and high is None:
        return integers()
    if low is None:
        low = high - DEFAULT_INT_SPAN
    if high is None:
        high = low + DEFAULT_INT_SPAN
    return integers(int(low), int(high))


def _float_arbitrary(constraints: _Constraints) -> Arbitrary[float]:
    low = constraints.ge
    if constraints.gt is not None:
        low = math.nextafter(float(constraints.gt), math.inf)
    high = constraints.le if constraints.le is not None else constraints.lt
    if low is None and high is None:
        return floats()
    if low is None:
        low = high - DEFAULT_FLOAT_SPAN
    if high is None:
        high = low + DEFAULT_FLOAT_SPAN
    return floats(float(low), float(high))


def _date_arbitrary(constraints: _Constraints) -> Arbitrary[datetime]:
    low = constraints.ge if constraints.ge is not None else DEFAULT_MIN_DATE
    if constraints.gt is not None:
        low = constraints.gt + timedelta(milliseconds=1)
    high = constraints.le if constraints.le is not None else DEFAULT_MAX_DATE
    if constraints.lt is not None:
        high = constraints.lt - timedelta(milliseconds=1)
    return dates(low, high)


def _sized(constraints: _Constraints) -> dict[str, int]:
    bounds: dict[str, int] = {}
    if constraints.min_length is not None:
        bounds["min"] = constraints.min_length
    if constraints.max_length is not None:
        bounds["max"] = constraints.max_length
    return bounds


# =============================================================================
# Models and containers
# =============================================================================


def _dump_model(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, dict):
        return value
    return None


def _model_arbitrary(model: type[BaseModel]) -> Arbitrary[Any]:
    shape: dict[str, Arbitrary[Any]] = {}
    for name, field in model.model_fields.items():
        shape[field.alias or name] = _build(field.annotation, field.metadata)
    return mapped(objects(shape), model.model_validate, _dump_model)


def _union_arbitrary(members: tuple[Any, ...]) -> Arbitrary[Any]:
    present = [member for member in members if member is not type(None)]
    if len(present) == 1:
        inner = _build(present[0], ())
    else:
        inner = one_of(*(_build(member, ()) for member in present))
    if len(present) < len(members):
        return optional(inner)
    return inner


def _tuple_arbitrary(args: tuple[Any, ...], constraints: _Constraints) -> Arbitrary[Any]:
    if len(args) == 2 and args[1] is Ellipsis:
        sized = _sized(constraints)
        items = arrays(_build(args[0], ()), min_length=sized.get("min"), max_length=sized.get("max"))
        return mapped(items, tuple, list)
    if not args or args == ((),):
        return constant(())
    return tuples(*(_build(arg, ()) for arg in args))


def _build(annotation: Any, metadata: Iterable[Any]) -> Arbitrary[Any]:
    origin = get_origin(annotation)

    if origin is Annotated:
        base, *extra = get_args(annotation)
        return _build(base, [*metadata, *extra])

    constraints = _collect(metadata)

    if annotation is Any:
        return one_of(integers(), strings(), booleans(), constant(None))
    if annotation is None or annotation is type(None):
        return constant(None)
    if annotation is bool:
        return booleans()
    if annotation is int:
        return _int_arbitrary(constraints)
    if annotation is float:
        return _float_arbitrary(constraints)
    if annotation is str:
        sized = _sized(constraints)
        return strings(min_length=sized.get("min"), max_length=sized.get("max"))
    if annotation is datetime:
        return _date_arbitrary(constraints)
    if annotation is uuid.UUID:
        return mapped(uuids(), uuid.UUID, str)
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return constant_from(*annotation)
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return _model_arbitrary(annotation)

    if origin is Literal:
        return constant_from(*get_args(annotation))
    if origin is Union or origin is types.UnionType:
        return _union_arbitrary(get_args(annotation))

    args = get_args(annotation)
    sized = _sized(constraints)
    if origin is list:
        if not args:
            raise UnsupportedSchemaError("list", "item type required")
        return arrays(_build(args[0], ()), min_length=sized.get("min"), max_length=sized.get("max"))
    if origin is set or origin is frozenset:
        if not args:
            raise UnsupportedSchemaError(origin.__name__, "item type required")
        items = sets(_build(args[0], ()), min_size=sized.get("min", 0), max_size=sized.get("max"))
        return items if origin is set else mapped(items, frozenset, set)
    if origin is tuple:
        return _tuple_arbitrary(args, constraints)
    if origin is dict:
        if len(args) != 2:
            raise UnsupportedSchemaError("dict", "key and value types required")
        return dictionaries(
            _build(args[0], ()),
            _build(args[1], ()),
            min_keys=sized.get("min", 0),
            max_keys=sized.get("max"),
        )

    raise UnsupportedSchemaError(_kind(annotation))


def arbitrary_for(schema: Any) -> Arbitrary[Any]:
    """Build an arbitrary producing values valid for ``schema``.

    Args:
        schema: A BaseModel subclass or a type annotation.

    Raises:
        UnsupportedSchemaError: If some part of the schema has no arbitrary.
    """
    return _build(schema, ())
