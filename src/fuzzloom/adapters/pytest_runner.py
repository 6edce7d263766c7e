# src/fuzzloom/adapters/pytest_runner.py
"""pytest integration.

Usage:
    from fuzzloom import gen
    from fuzzloom.adapters.pytest_runner import fuzz_each, fuzz_test, model_test

    @fuzz_test(gen.integers(0, 1000), runs=200)
    def test_double_is_even(n):
        assert (n * 2) % 2 == 0

    test_counter = model_test(counter_spec, max_commands=30)

    @fuzz_each(gen.strings(min_length=1), 5, seed=42, name="non-empty: %s")
    def test_not_empty(value):
        assert value

fuzz_test and model_test produce zero-argument test functions, so pytest
does not try to resolve the predicate's parameter as a fixture. Failures
surface as PropertyFailedError / ModelFailedError, both AssertionErrors,
carrying the formatted report. Async predicates and async model specs are
run to completion with asyncio.run.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

import pytest

from fuzzloom.arbitraries.base import ArbitraryLike
from fuzzloom.contracts.config import ModelConfig, PropertyConfig
from fuzzloom.engine.model import ModelSpec, assert_model, assert_model_async
from fuzzloom.engine.property import Property, assert_property, assert_property_async, generate_samples
from fuzzloom.engine.reporting import format_test_name

type TestFunction = Callable[[], None]


def _as_test(test: TestFunction, name: str, doc: str | None, module: str | None) -> TestFunction:
    test.__name__ = name
    test.__qualname__ = name
    test.__doc__ = doc
    if module is not None:
        test.__module__ = module
    test.__signature__ = inspect.Signature()  # type: ignore[attr-defined]
    return test


def fuzz_test[T](
    arbitrary: ArbitraryLike[T],
    config: PropertyConfig | None = None,
    **options: Any,
) -> Callable[[Callable[[T], Any]], TestFunction]:
    """Decorate a predicate into a pytest test that asserts the property.

    Options are validated when the decorator is applied, so a bad ``runs``
    fails at collection time rather than inside the test.

    The returned test carries ``fuzz_property`` (the Property it checks).
    """
    PropertyConfig.resolve(config, options)

    def decorator(predicate: Callable[[T], Any]) -> TestFunction:
        prop = Property(name=predicate.__name__, arbitrary=arbitrary, predicate=predicate)

        if prop.is_async:

            def test() -> None:
                asyncio.run(assert_property_async(prop.arbitrary, predicate, config, **options))

        else:

            def test() -> None:
                assert_property(prop.arbitrary, predicate, config, **options)

        wrapped = _as_test(test, predicate.__name__, predicate.__doc__, predicate.__module__)
        wrapped.fuzz_property = prop  # type: ignore[attr-defined]
        return wrapped

    return decorator


def model_test(
    spec: ModelSpec[Any, Any],
    config: ModelConfig | None = None,
    *,
    name: str = "test_model",
    **options: Any,
) -> TestFunction:
    """Build a pytest test that asserts a model spec.

    Assign the result to a ``test_*`` module attribute for collection.
    Specs with any ``async def`` callback run through assert_model_async.
    """
    ModelConfig.resolve(config, options)

    if spec.is_async:

        def test() -> None:
            asyncio.run(assert_model_async(spec, config, **options))

    else:

        def test() -> None:
            assert_model(spec, config, **options)

    return _as_test(test, name, f"Model-based test over {len(spec.commands)} commands.", None)


def fuzz_each[T](
    arbitrary: ArbitraryLike[T],
    count: int,
    *,
    seed: int | None = None,
    name: str = "%s",
    argname: str = "value",
) -> pytest.MarkDecorator:
    """Parametrize a test over ``count`` generated values.

    Test ids come from format_test_name(name, value). Without a seed the
    values (and ids) change between sessions, which breaks pytest-xdist
    collection; pass one when running distributed.
    """
    samples = generate_samples(arbitrary, count, seed=seed)
    return pytest.mark.parametrize(argname, samples, ids=[format_test_name(name, sample) for sample in samples])
