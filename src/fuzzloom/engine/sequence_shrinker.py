# src/fuzzloom/engine/sequence_shrinker.py
"""Two-phase shrinking of failing command sequences.

Phase 1, chunk removal (delta debugging): try removing each contiguous
chunk of the current chunk size, left to right. A removal that still fails
is kept. After a pass that removed something the chunk size restarts at
half the new length; after a pass that removed nothing it halves. The phase
ends at chunk size 0. Empty candidates are skipped without cost.

Phase 2, parameter shrinking: for each step whose command declares an
arbitrary, try the shrinks of its parameter with every other step held
fixed. The first one that still fails replaces the parameter and the pass
restarts from the first step. The phase ends after a pass without a
substitution.

The two phases alternate until neither makes progress. Each replay costs
one unit of the shared budget and the plan stops the moment the budget is
spent, even mid-phase. Like the property shrinker this is a generator plan
(yielding candidate sequences, receiving ExecutionOutcome verdicts) driven
by fuzzloom.engine.shrinker.drive_plan / drive_plan_async.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fuzzloom.arbitraries.shrinking import replace_at
from fuzzloom.contracts.results import ExecutedStep
from fuzzloom.core.logging import get_logger
from fuzzloom.engine.shrinker import Plan

if TYPE_CHECKING:
    from fuzzloom.engine.model import Command

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Result of executing or replaying a sequence.

    Attributes:
        failed: Whether some step's run or check failed.
        failed_step: Index of that step, or -1.
        error: Exception raised by run/check, if any.
    """

    failed: bool
    failed_step: int = -1
    error: BaseException | None = None


NOT_FAILED = ExecutionOutcome(failed=False)


@dataclass(slots=True)
class ShrinkState:
    """Accumulator threaded through both phases."""

    steps: list[ExecutedStep]
    failed_step: int
    error: BaseException | None
    shrinks: int = 0

    def accept(self, candidate: list[ExecutedStep], outcome: ExecutionOutcome) -> None:
        self.steps = candidate
        self.failed_step = outcome.failed_step
        self.error = outcome.error


type SequencePlan[R] = Plan[list[ExecutedStep], ExecutionOutcome, R]


def _chunk_removal(state: ShrinkState, max_shrinks: int) -> SequencePlan[bool]:
    improved = False
    chunk_size = len(state.steps) // 2

    while chunk_size >= 1 and state.shrinks < max_shrinks:
        removed_in_pass = False
        start = 0
        while start + chunk_size <= len(state.steps) and state.shrinks < max_shrinks:
            candidate = state.steps[:start] + state.steps[start + chunk_size :]
            if not candidate:
                start += 1
                continue
            outcome = yield candidate
            state.shrinks += 1
            if outcome.failed:
                state.accept(candidate, outcome)
                improved = removed_in_pass = True
            else:
                start += 1
        chunk_size = len(state.steps) // 2 if removed_in_pass else chunk_size // 2

    return improved


def _parameter_shrinking(state: ShrinkState, commands: Sequence[Command], max_shrinks: int) -> SequencePlan[bool]:
    improved = False
    pass_improved = True

    while pass_improved and state.shrinks < max_shrinks:
        pass_improved = False
        for position, step in enumerate(state.steps):
            if state.shrinks >= max_shrinks:
                break
            arbitrary = commands[step.command_index].parameters
            if arbitrary is None:
                continue
            for shrunk in arbitrary.shrink(step.param):
                if state.shrinks >= max_shrinks:
                    break
                candidate = replace_at(state.steps, position, ExecutedStep(step.command_index, shrunk))
                outcome = yield candidate
                state.shrinks += 1
                if outcome.failed:
                    state.accept(candidate, outcome)
                    improved = pass_improved = True
                    break
            if pass_improved:
                break

    return improved


def sequence_shrink_plan(
    commands: Sequence[Command],
    steps: Sequence[ExecutedStep],
    outcome: ExecutionOutcome,
    max_shrinks: int,
) -> SequencePlan[ShrinkState]:
    """Shrink a failing sequence; returns the final ShrinkState."""
    state = ShrinkState(steps=list(steps), failed_step=outcome.failed_step, error=outcome.error)
    original_length = len(state.steps)

    progressed = True
    while progressed and state.shrinks < max_shrinks:
        removed = yield from _chunk_removal(state, max_shrinks)
        substituted = yield from _parameter_shrinking(state, commands, max_shrinks)
        progressed = removed or substituted

    logger.debug(
        "Sequence shrink finished",
        original_length=original_length,
        length=len(state.steps),
        shrinks=state.shrinks,
    )
    return state
