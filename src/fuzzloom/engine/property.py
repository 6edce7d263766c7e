# src/fuzzloom/engine/property.py
"""Property runner: sample, check, and shrink the first failure.

Trials run one after another. Each forks its own stream from the run's
top-level RandomSource, so how many draws one trial consumes never changes
the values of the next. The first failing trial is shrunk and returned;
later trials are never attempted.

Config is validated before anything is generated. Generation errors (filter
or unique-collection exhaustion) propagate unchanged. Predicate failures
only ever come back as a PropertyResult, except through the assert family.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from fuzzloom.arbitraries.base import Arbitrary, ArbitraryLike, require_non_negative_int, to_arbitrary
from fuzzloom.contracts.config import PropertyConfig
from fuzzloom.contracts.errors import ConfigurationError, PropertyFailedError
from fuzzloom.contracts.results import PropertyFailure, PropertyResult
from fuzzloom.core.logging import get_logger
from fuzzloom.core.random_source import RandomSource, normalize_seed
from fuzzloom.engine.evaluation import Verdict, evaluate, evaluate_async
from fuzzloom.engine.reporting import format_failure
from fuzzloom.engine.shrinker import ShrinkOutcome, drive_plan, drive_plan_async, shrink_plan

logger = get_logger(__name__)

type Predicate[T] = Callable[[T], Any]


def _prepare[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    config: PropertyConfig | None,
    options: dict[str, Any],
) -> tuple[Arbitrary[T], PropertyConfig, int]:
    settings = PropertyConfig.resolve(config, options)
    if not callable(predicate):
        raise ConfigurationError(f"predicate must be callable, got {type(predicate).__name__}")
    return to_arbitrary(arbitrary), settings, normalize_seed(settings.seed)


def _failure[T](settings: PropertyConfig, seed: int, iteration: int, outcome: ShrinkOutcome[T]) -> PropertyResult[T]:
    logger.info(
        "Property failed",
        seed=seed,
        iteration=iteration,
        runs=settings.runs,
        shrinks=outcome.shrinks,
    )
    return PropertyResult.failed(
        PropertyFailure(
            seed=seed,
            runs=settings.runs,
            iterations=iteration,
            shrinks=outcome.shrinks,
            counterexample=outcome.counterexample,
            error=outcome.error,
        )
    )


def run_property[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    config: PropertyConfig | None = None,
    **options: Any,
) -> PropertyResult[T]:
    """Check ``predicate`` against ``runs`` generated values.

    Args:
        arbitrary: Input space (an Arbitrary or a bare generator callable).
        predicate: Fails by returning False or raising an Exception.
        config: Optional PropertyConfig; keyword options override its fields.
        **options: ``seed``, ``runs``, ``max_shrinks``.

    Returns:
        PropertyResult with the shrunk failure, if any.

    Raises:
        ConfigurationError: Invalid options, raised before any generation.
        GenerationError: The arbitrary could not produce a value.
    """
    arb, settings, seed = _prepare(arbitrary, predicate, config, options)
    source = RandomSource(seed)
    for iteration in range(1, settings.runs + 1):
        value = arb.generate(source.fork())
        verdict = evaluate(predicate, value)
        if verdict.failed:
            logger.debug("Trial failed, shrinking", seed=seed, iteration=iteration)
            plan = shrink_plan(arb, value, verdict.error, settings.max_shrinks)
            outcome = drive_plan(plan, partial(evaluate, predicate))
            return _failure(settings, seed, iteration, outcome)
    return PropertyResult.passed()


async def run_property_async[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    config: PropertyConfig | None = None,
    **options: Any,
) -> PropertyResult[T]:
    """Async twin of run_property; the predicate may return an awaitable.

    Trials and shrink candidates are awaited strictly one at a time.
    """
    arb, settings, seed = _prepare(arbitrary, predicate, config, options)
    source = RandomSource(seed)

    async def check(value: T) -> Verdict:
        return await evaluate_async(predicate, value)

    for iteration in range(1, settings.runs + 1):
        value = arb.generate(source.fork())
        verdict = await check(value)
        if verdict.failed:
            logger.debug("Trial failed, shrinking", seed=seed, iteration=iteration)
            plan = shrink_plan(arb, value, verdict.error, settings.max_shrinks)
            outcome = await drive_plan_async(plan, check)
            return _failure(settings, seed, iteration, outcome)
    return PropertyResult.passed()


def _raise_for(result: PropertyResult[Any]) -> None:
    if result.failure is not None:
        raise PropertyFailedError(format_failure(result.failure), result.failure) from result.failure.error


def assert_property[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    config: PropertyConfig | None = None,
    **options: Any,
) -> None:
    """Run the property and raise PropertyFailedError on failure.

    The error message is the formatted report; the predicate's exception,
    if any, is chained as ``__cause__``.
    """
    _raise_for(run_property(arbitrary, predicate, config, **options))


async def assert_property_async[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    config: PropertyConfig | None = None,
    **options: Any,
) -> None:
    _raise_for(await run_property_async(arbitrary, predicate, config, **options))


def _require_seed(seed: Any) -> None:
    if seed is None:
        raise ConfigurationError("replay requires an explicit seed")


def replay[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    *,
    seed: int,
    config: PropertyConfig | None = None,
    **options: Any,
) -> PropertyResult[T]:
    """run_property with a mandatory seed, as printed in failure reports."""
    _require_seed(seed)
    return run_property(arbitrary, predicate, config, seed=seed, **options)


async def replay_async[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    *,
    seed: int,
    config: PropertyConfig | None = None,
    **options: Any,
) -> PropertyResult[T]:
    _require_seed(seed)
    return await run_property_async(arbitrary, predicate, config, seed=seed, **options)


def assert_replay[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    *,
    seed: int,
    config: PropertyConfig | None = None,
    **options: Any,
) -> None:
    _require_seed(seed)
    assert_property(arbitrary, predicate, config, seed=seed, **options)


async def assert_replay_async[T](
    arbitrary: ArbitraryLike[T],
    predicate: Predicate[T],
    *,
    seed: int,
    config: PropertyConfig | None = None,
    **options: Any,
) -> None:
    _require_seed(seed)
    await assert_property_async(arbitrary, predicate, config, seed=seed, **options)


def generate_samples[T](arbitrary: ArbitraryLike[T], count: int, seed: int | None = None) -> list[T]:
    """``count`` values drawn in order from one source seeded with ``seed``."""
    require_non_negative_int(count, "count")
    arb = to_arbitrary(arbitrary)
    source = RandomSource(normalize_seed(seed))
    return [arb.generate(source) for _ in range(count)]


@dataclass(frozen=True)
class Property[T]:
    """A named arbitrary + predicate pair.

    This is what ``fuzzloom check module:attribute`` and the pytest adapter
    look for.
    """

    name: str
    arbitrary: Arbitrary[T]
    predicate: Predicate[T]

    def __post_init__(self) -> None:
        object.__setattr__(self, "arbitrary", to_arbitrary(self.arbitrary))
        if not callable(self.predicate):
            raise ConfigurationError(f"Property {self.name!r}: predicate must be callable")

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.predicate)

    def run(self, config: PropertyConfig | None = None, **options: Any) -> PropertyResult[T]:
        return run_property(self.arbitrary, self.predicate, config, **options)

    async def run_async(self, config: PropertyConfig | None = None, **options: Any) -> PropertyResult[T]:
        return await run_property_async(self.arbitrary, self.predicate, config, **options)
