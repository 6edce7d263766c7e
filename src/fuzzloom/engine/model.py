# src/fuzzloom/engine/model.py
"""Model-based runner: random command sequences against a system and a model.

Per iteration:
    1. Fork a stream, build a fresh model (``state()``) and system (``setup()``).
    2. Draw a step count in ``[1, max_commands]``.
    3. Each step keeps the commands whose precondition holds for the model
       (stopping early if none do), picks one uniformly, draws its parameter
       from a forked stream when the command declares an arbitrary, then runs
       and checks it. A raising run, or a check that returns False or raises,
       fails the sequence.
    4. ``teardown(system)`` always runs. Its errors are logged and dropped so
       they never mask the real failure.

A failing sequence is shrunk by fuzzloom.engine.sequence_shrinker, replaying
each candidate on a fresh model/system pair. During replay a command whose
precondition no longer holds makes the candidate non-failing.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from functools import partial
from typing import Any

from fuzzloom.arbitraries.base import Arbitrary, ArbitraryLike, to_arbitrary
from fuzzloom.contracts.config import ModelConfig
from fuzzloom.contracts.errors import ConfigurationError, ModelFailedError
from fuzzloom.contracts.results import ExecutedStep, ModelFailure, ModelResult, SequenceStep
from fuzzloom.core.logging import get_logger
from fuzzloom.core.random_source import RandomSource, normalize_seed
from fuzzloom.engine.evaluation import reject_awaitable, resolve
from fuzzloom.engine.reporting import format_model_failure
from fuzzloom.engine.sequence_shrinker import (
    NOT_FAILED,
    ExecutionOutcome,
    ShrinkState,
    sequence_shrink_plan,
)
from fuzzloom.engine.shrinker import drive_plan, drive_plan_async

logger = get_logger(__name__)

_ASYNC_HINT = "run_model_async"


@dataclass(frozen=True)
class Command[M, S, P]:
    """One operation of a model-based test.

    ``run(system, model, param)`` applies the operation to both sides;
    ``check(system, model, param)`` fails by returning False or raising.
    ``param`` is None for commands without an arbitrary.
    """

    name: str
    run: Callable[[S, M, P], Any]
    check: Callable[[S, M, P], Any]
    arbitrary: ArbitraryLike[P] | None = None
    precondition: Callable[[M], bool] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError("Command name must be a non-empty string")
        if not callable(self.run) or not callable(self.check):
            raise ConfigurationError(f"Command {self.name!r}: run and check must be callable")
        if self.precondition is not None and not callable(self.precondition):
            raise ConfigurationError(f"Command {self.name!r}: precondition must be callable")
        if self.arbitrary is not None:
            object.__setattr__(self, "arbitrary", to_arbitrary(self.arbitrary))

    @property
    def parameters(self) -> Arbitrary[P] | None:
        """The normalized parameter arbitrary, if any."""
        return self.arbitrary  # type: ignore[return-value]

    def is_enabled(self, model: M) -> bool:
        return self.precondition is None or bool(self.precondition(model))


@dataclass(frozen=True)
class ModelSpec[M, S]:
    """Factories for model and system plus the command set.

    Command order only matters for the indices recorded in ExecutedStep.
    """

    state: Callable[[], M]
    setup: Callable[[], S]
    commands: Sequence[Command[M, S, Any]]
    teardown: Callable[[S], Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))
        if not self.commands:
            raise ConfigurationError("Model spec requires at least one command")
        for command in self.commands:
            if not isinstance(command, Command):
                raise ConfigurationError(f"Model spec commands must be Command instances, got {type(command).__name__}")
        if not callable(self.state) or not callable(self.setup):
            raise ConfigurationError("Model spec state and setup must be callable")
        if self.teardown is not None and not callable(self.teardown):
            raise ConfigurationError("Model spec teardown must be callable")

    @property
    def is_async(self) -> bool:
        """True when any callback is an ``async def``."""
        callbacks: list[Any] = [self.setup, self.teardown]
        for command in self.commands:
            callbacks.extend((command.run, command.check))
        return any(inspect.iscoroutinefunction(callback) for callback in callbacks if callback is not None)


# =============================================================================
# Step execution
# =============================================================================


def _run_step(command: Command[Any, Any, Any], system: Any, model: Any, param: Any) -> ExecutionOutcome:
    try:
        result = command.run(system, model, param)
    except Exception as exc:
        return ExecutionOutcome(failed=True, error=exc)
    reject_awaitable(result, _ASYNC_HINT)
    try:
        verdict = command.check(system, model, param)
    except Exception as exc:
        return ExecutionOutcome(failed=True, error=exc)
    reject_awaitable(verdict, _ASYNC_HINT)
    return ExecutionOutcome(failed=True) if verdict is False else NOT_FAILED


async def _run_step_async(command: Command[Any, Any, Any], system: Any, model: Any, param: Any) -> ExecutionOutcome:
    try:
        await resolve(command.run(system, model, param))
    except Exception as exc:
        return ExecutionOutcome(failed=True, error=exc)
    try:
        verdict = await resolve(command.check(system, model, param))
    except Exception as exc:
        return ExecutionOutcome(failed=True, error=exc)
    return ExecutionOutcome(failed=True) if verdict is False else NOT_FAILED


def _log_teardown_error(exc: Exception) -> None:
    logger.warning(
        "Teardown failed, ignoring",
        error_type=type(exc).__name__,
        error=str(exc),
    )


def _safe_teardown(spec: ModelSpec[Any, Any], system: Any) -> None:
    """Best-effort cleanup: teardown errors are logged and discarded."""
    if spec.teardown is None:
        return
    try:
        result = spec.teardown(system)
    except Exception as exc:
        _log_teardown_error(exc)
        return
    reject_awaitable(result, _ASYNC_HINT)


async def _safe_teardown_async(spec: ModelSpec[Any, Any], system: Any) -> None:
    if spec.teardown is None:
        return
    try:
        await resolve(spec.teardown(system))
    except Exception as exc:
        _log_teardown_error(exc)


def _choose_step(spec: ModelSpec[Any, Any], model: Any, source: RandomSource) -> ExecutedStep | None:
    """Pick an enabled command and draw its parameter, or None if none is enabled."""
    eligible = [index for index, command in enumerate(spec.commands) if command.is_enabled(model)]
    if not eligible:
        return None
    index = eligible[source.int_between(0, len(eligible) - 1)]
    arbitrary = spec.commands[index].parameters
    param = arbitrary.generate(source.fork()) if arbitrary is not None else None
    return ExecutedStep(command_index=index, param=param)


def _execute_iteration(
    spec: ModelSpec[Any, Any], source: RandomSource, max_commands: int
) -> tuple[list[ExecutedStep], ExecutionOutcome]:
    model = spec.state()
    system = reject_awaitable(spec.setup(), _ASYNC_HINT)
    steps: list[ExecutedStep] = []
    try:
        for _ in range(source.int_between(1, max_commands)):
            step = _choose_step(spec, model, source)
            if step is None:
                break
            steps.append(step)
            outcome = _run_step(spec.commands[step.command_index], system, model, step.param)
            if outcome.failed:
                return steps, replace(outcome, failed_step=len(steps) - 1)
        return steps, NOT_FAILED
    finally:
        _safe_teardown(spec, system)


async def _execute_iteration_async(
    spec: ModelSpec[Any, Any], source: RandomSource, max_commands: int
) -> tuple[list[ExecutedStep], ExecutionOutcome]:
    model = spec.state()
    system = await resolve(spec.setup())
    steps: list[ExecutedStep] = []
    try:
        for _ in range(source.int_between(1, max_commands)):
            step = _choose_step(spec, model, source)
            if step is None:
                break
            steps.append(step)
            outcome = await _run_step_async(spec.commands[step.command_index], system, model, step.param)
            if outcome.failed:
                return steps, replace(outcome, failed_step=len(steps) - 1)
        return steps, NOT_FAILED
    finally:
        await _safe_teardown_async(spec, system)


def replay_sequence(spec: ModelSpec[Any, Any], steps: Sequence[ExecutedStep]) -> ExecutionOutcome:
    """Re-execute ``steps`` on a fresh model/system pair."""
    model = spec.state()
    system = reject_awaitable(spec.setup(), _ASYNC_HINT)
    try:
        for position, step in enumerate(steps):
            command = spec.commands[step.command_index]
            if not command.is_enabled(model):
                return NOT_FAILED
            outcome = _run_step(command, system, model, step.param)
            if outcome.failed:
                return replace(outcome, failed_step=position)
        return NOT_FAILED
    finally:
        _safe_teardown(spec, system)


async def replay_sequence_async(spec: ModelSpec[Any, Any], steps: Sequence[ExecutedStep]) -> ExecutionOutcome:
    model = spec.state()
    system = await resolve(spec.setup())
    try:
        for position, step in enumerate(steps):
            command = spec.commands[step.command_index]
            if not command.is_enabled(model):
                return NOT_FAILED
            outcome = await _run_step_async(command, system, model, step.param)
            if outcome.failed:
                return replace(outcome, failed_step=position)
        return NOT_FAILED
    finally:
        await _safe_teardown_async(spec, system)


# =============================================================================
# Runners
# =============================================================================


def _prepare(spec: ModelSpec[Any, Any], config: ModelConfig | None, options: dict[str, Any]) -> tuple[ModelConfig, int]:
    settings = ModelConfig.resolve(config, options)
    if not isinstance(spec, ModelSpec):
        raise ConfigurationError(f"Expected a ModelSpec, got {type(spec).__name__}")
    return settings, normalize_seed(settings.seed)


def _failure(
    spec: ModelSpec[Any, Any], settings: ModelConfig, seed: int, iteration: int, shrunk: ShrinkState
) -> ModelResult:
    sequence = tuple(SequenceStep(name=spec.commands[step.command_index].name, param=step.param) for step in shrunk.steps)
    logger.info(
        "Model-based test failed",
        seed=seed,
        iteration=iteration,
        runs=settings.runs,
        shrinks=shrunk.shrinks,
        length=len(sequence),
    )
    return ModelResult.failed(
        ModelFailure(
            seed=seed,
            runs=settings.runs,
            iterations=iteration,
            shrinks=shrunk.shrinks,
            sequence=sequence,
            failed_step=shrunk.failed_step,
            error=shrunk.error,
        )
    )


def run_model(spec: ModelSpec[Any, Any], config: ModelConfig | None = None, **options: Any) -> ModelResult:
    """Run ``runs`` random command sequences and shrink the first failing one.

    Args:
        spec: Model, system and commands.
        config: Optional ModelConfig; keyword options override its fields.
        **options: ``seed``, ``runs``, ``max_commands``, ``max_shrinks``.

    Raises:
        ConfigurationError: Invalid options, raised before any execution.
    """
    settings, seed = _prepare(spec, config, options)
    source = RandomSource(seed)
    for iteration in range(1, settings.runs + 1):
        steps, outcome = _execute_iteration(spec, source.fork(), settings.max_commands)
        if not outcome.failed:
            continue
        logger.debug("Sequence failed, shrinking", seed=seed, iteration=iteration, length=len(steps))
        plan = sequence_shrink_plan(spec.commands, steps, outcome, settings.max_shrinks)
        shrunk = drive_plan(plan, partial(replay_sequence, spec))
        return _failure(spec, settings, seed, iteration, shrunk)
    return ModelResult.passed()


async def run_model_async(spec: ModelSpec[Any, Any], config: ModelConfig | None = None, **options: Any) -> ModelResult:
    """Async twin of run_model; setup, run, check and teardown may be awaitable."""
    settings, seed = _prepare(spec, config, options)
    source = RandomSource(seed)

    async def replay_candidate(candidate: list[ExecutedStep]) -> ExecutionOutcome:
        return await replay_sequence_async(spec, candidate)

    for iteration in range(1, settings.runs + 1):
        steps, outcome = await _execute_iteration_async(spec, source.fork(), settings.max_commands)
        if not outcome.failed:
            continue
        logger.debug("Sequence failed, shrinking", seed=seed, iteration=iteration, length=len(steps))
        plan = sequence_shrink_plan(spec.commands, steps, outcome, settings.max_shrinks)
        shrunk = await drive_plan_async(plan, replay_candidate)
        return _failure(spec, settings, seed, iteration, shrunk)
    return ModelResult.passed()


def _raise_for(result: ModelResult) -> None:
    if result.failure is not None:
        raise ModelFailedError(format_model_failure(result.failure), result.failure) from result.failure.error


def assert_model(spec: ModelSpec[Any, Any], config: ModelConfig | None = None, **options: Any) -> None:
    """Run the model test and raise ModelFailedError with the formatted report on failure."""
    _raise_for(run_model(spec, config, **options))


async def assert_model_async(spec: ModelSpec[Any, Any], config: ModelConfig | None = None, **options: Any) -> None:
    _raise_for(await run_model_async(spec, config, **options))


def replay_model(spec: ModelSpec[Any, Any], *, seed: int, config: ModelConfig | None = None, **options: Any) -> ModelResult:
    """run_model with a mandatory seed, as printed in failure reports."""
    if seed is None:
        raise ConfigurationError("replay_model requires an explicit seed")
    return run_model(spec, config, seed=seed, **options)


async def replay_model_async(
    spec: ModelSpec[Any, Any], *, seed: int, config: ModelConfig | None = None, **options: Any
) -> ModelResult:
    if seed is None:
        raise ConfigurationError("replay_model_async requires an explicit seed")
    return await run_model_async(spec, config, seed=seed, **options)
