# tests/unit/engine/test_sequence_shrinker.py
"""Tests for two-phase command sequence shrinking."""

from collections.abc import Callable, Sequence

from fuzzloom import Command, gen
from fuzzloom.contracts.results import ExecutedStep
from fuzzloom.engine.sequence_shrinker import NOT_FAILED, ExecutionOutcome, sequence_shrink_plan
from fuzzloom.engine.shrinker import drive_plan


def _noop(system: object, model: object, param: object) -> None:
    return None


NOOP = Command("noop", run=_noop, check=_noop)
BOOM = Command("boom", run=_noop, check=_noop)
PUSH = Command("push", run=_noop, check=_noop, arbitrary=gen.integers(0, 100))

Oracle = Callable[[list[ExecutedStep]], ExecutionOutcome]


def _contains_boom(candidate: list[ExecutedStep]) -> ExecutionOutcome:
    for position, step in enumerate(candidate):
        if step.command_index == 1:
            return ExecutionOutcome(failed=True, failed_step=position)
    return NOT_FAILED


def _big_push(candidate: list[ExecutedStep]) -> ExecutionOutcome:
    for position, step in enumerate(candidate):
        if step.param is not None and step.param >= 10:
            return ExecutionOutcome(failed=True, failed_step=position, error=ValueError(step.param))
    return NOT_FAILED


def _shrink(commands: Sequence[Command], steps: list[ExecutedStep], oracle: Oracle, max_shrinks: int = 1000):
    plan = sequence_shrink_plan(commands, steps, oracle(steps), max_shrinks)
    return drive_plan(plan, oracle)


class TestChunkRemoval:
    def test_removes_irrelevant_steps(self) -> None:
        """[noop, noop, boom, noop] -> [boom, noop] -> [boom]."""
        steps = [ExecutedStep(0), ExecutedStep(0), ExecutedStep(1), ExecutedStep(0)]
        state = _shrink([NOOP, BOOM], steps, _contains_boom)

        assert state.steps == [ExecutedStep(1)]
        assert state.failed_step == 0
        assert state.shrinks == 3

    def test_single_step_costs_nothing(self) -> None:
        state = _shrink([NOOP, BOOM], [ExecutedStep(1)], _contains_boom)

        assert state.steps == [ExecutedStep(1)]
        assert state.shrinks == 0

    def test_budget_stops_mid_phase(self) -> None:
        steps = [ExecutedStep(0)] * 6 + [ExecutedStep(1)]
        state = _shrink([NOOP, BOOM], steps, _contains_boom, max_shrinks=1)

        assert state.shrinks == 1
        assert len(state.steps) == 4


class TestParameterShrinking:
    def test_takes_first_failing_shrink(self) -> None:
        """50 -> 25 -> 12; the shrinks of 12 all pass, twice over."""
        state = _shrink([PUSH], [ExecutedStep(0, 50)], _big_push)

        assert state.steps == [ExecutedStep(0, 12)]
        assert state.shrinks == 10
        assert str(state.error) == "12"

    def test_shared_budget(self) -> None:
        state = _shrink([PUSH], [ExecutedStep(0, 50)], _big_push, max_shrinks=2)

        assert state.steps == [ExecutedStep(0, 12)]
        assert state.shrinks == 2

    def test_commands_without_arbitrary_skipped(self) -> None:
        state = _shrink([NOOP, PUSH], [ExecutedStep(0), ExecutedStep(1, 40)], _big_push)

        assert state.steps == [ExecutedStep(1, 10)]
        assert state.failed_step == 0

    def test_failed_step_follows_accepted_candidate(self) -> None:
        steps = [ExecutedStep(0, 3), ExecutedStep(0, 20)]
        state = _shrink([PUSH], steps, _big_push)

        assert state.steps == [ExecutedStep(0, 10)]
        assert state.failed_step == 0
