# src/fuzzloom/engine/shrinker.py
"""Counterexample shrinking as a resumable plan.

The shrink loop is written once, as a generator that yields candidates and
receives verdicts through ``send()``. drive_plan() and drive_plan_async()
feed it verdicts from a sync or an async evaluator, so both runners make the
exact same decisions in the exact same order. The sequence shrinker uses the
same drivers.

Algorithm (round-based hill climbing):
    Each round asks the arbitrary for the candidates of ``current`` and
    evaluates them until the round or the budget is exhausted. Among the
    failing candidates of the round, the one with the smallest shrink_score
    wins (the first one seen wins ties). It replaces ``current`` when its
    score does not exceed the score of ``current``, unless an equal-score
    winner has already been ``current`` once. The loop stops after a round
    without such a candidate or when the budget runs out. Every
    evaluation, passing or failing, costs one unit of budget.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass

from fuzzloom.arbitraries.base import Arbitrary
from fuzzloom.core.canonical import compact_repr, shrink_score
from fuzzloom.core.logging import get_logger
from fuzzloom.engine.evaluation import Verdict

logger = get_logger(__name__)

type Plan[C, V, R] = Generator[C, V, R]


@dataclass(frozen=True, slots=True)
class ShrinkOutcome[T]:
    """Final state of a property shrink.

    Attributes:
        counterexample: Smallest failing value found.
        shrinks: Evaluations spent.
        error: Exception raised for ``counterexample`` (None if it failed by
            returning False).
    """

    counterexample: T
    shrinks: int
    error: BaseException | None


def shrink_plan[T](
    arbitrary: Arbitrary[T],
    value: T,
    error: BaseException | None,
    max_shrinks: int,
) -> Plan[T, Verdict, ShrinkOutcome[T]]:
    """Shrink ``value`` (already known to fail with ``error``)."""
    current = value
    current_error = error
    current_score = shrink_score(value)
    shrinks = 0
    visited = {compact_repr(value)}

    while shrinks < max_shrinks:
        best: tuple[float, T, BaseException | None] | None = None
        for candidate in arbitrary.shrink(current):
            if shrinks >= max_shrinks:
                break
            verdict = yield candidate
            shrinks += 1
            if not verdict.failed:
                continue
            score = shrink_score(candidate)
            if best is None or score < best[0]:
                best = (score, candidate, verdict.error)
        if best is None or best[0] > current_score:
            break
        key = compact_repr(best[1])
        if best[0] == current_score and key in visited:
            break
        visited.add(key)
        current_score, current, current_error = best

    logger.debug("Shrink finished", shrinks=shrinks, score=current_score)
    return ShrinkOutcome(counterexample=current, shrinks=shrinks, error=current_error)


def drive_plan[C, V, R](plan: Plan[C, V, R], evaluate: Callable[[C], V]) -> R:
    """Run a plan to completion with a synchronous evaluator."""
    try:
        candidate = next(plan)
    except StopIteration as stop:
        return stop.value
    while True:
        verdict = evaluate(candidate)
        try:
            candidate = plan.send(verdict)
        except StopIteration as stop:
            return stop.value


async def drive_plan_async[C, V, R](plan: Plan[C, V, R], evaluate: Callable[[C], Awaitable[V]]) -> R:
    """Run a plan to completion, awaiting each evaluation in turn."""
    try:
        candidate = next(plan)
    except StopIteration as stop:
        return stop.value
    while True:
        verdict = await evaluate(candidate)
        try:
            candidate = plan.send(verdict)
        except StopIteration as stop:
            return stop.value
