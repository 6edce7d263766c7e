# tests/unit/engine/test_property.py
"""Tests for the property runner."""

import asyncio
import math

import pytest
from structlog.testing import capture_logs

import fuzzloom
from fuzzloom import gen
from fuzzloom.contracts.config import PropertyConfig
from fuzzloom.contracts.errors import ConfigurationError, GenerationError, PropertyFailedError
from fuzzloom.core.random_source import RandomSource
from fuzzloom.engine.property import (
    Property,
    assert_property,
    assert_property_async,
    assert_replay,
    assert_replay_async,
    generate_samples,
    replay,
    replay_async,
    run_property,
    run_property_async,
)
from fuzzloom.engine.reporting import format_failure


class TestRunProperty:
    """Tests for run_property."""

    def test_always_failing_shrinks_to_range_minimum(self) -> None:
        result = run_property(gen.integers(1, 100), lambda _: False, seed=123, runs=1, max_shrinks=100)

        assert not result.ok
        assert result.failure is not None
        assert result.failure.counterexample == 1

    def test_passing_property_runs_every_trial(self) -> None:
        seen: list[int] = []

        def predicate(value: int) -> bool:
            seen.append(value)
            return True

        result = run_property(gen.integers(0, 10), predicate, seed=1, runs=37)

        assert result.ok
        assert result.failure is None
        assert len(seen) == 37

    def test_iterations_are_one_based(self) -> None:
        calls: list[int] = []

        def predicate(value: int) -> bool:
            calls.append(value)
            return len(calls) < 3

        result = run_property(gen.integers(0, 10), predicate, seed=1, runs=10)

        assert result.failure is not None
        assert result.failure.iterations == 3
        assert result.failure.runs == 10

    def test_each_trial_uses_a_forked_stream(self) -> None:
        source = RandomSource(9)
        expected = [source.fork().next_word() for _ in range(5)]
        seen: list[int] = []

        run_property(lambda s: s.next_word(), lambda value: seen.append(value) is None, seed=9, runs=5)

        assert seen == expected

    def test_exception_is_a_failure(self) -> None:
        def predicate(value: int) -> None:
            if value > 0:
                raise ValueError(f"too big: {value}")

        result = run_property(gen.integers(0, 100), predicate, seed=4, runs=50)

        assert result.failure is not None
        assert result.failure.counterexample == 1
        assert isinstance(result.failure.error, ValueError)
        assert str(result.failure.error) == "too big: 1"

    def test_shrinks_within_budget(self) -> None:
        result = run_property(gen.arrays(gen.integers(0, 1000), min_length=5), lambda _: False, seed=2, runs=1, max_shrinks=7)

        assert result.failure is not None
        assert result.failure.shrinks <= 7

    def test_clock_seed_recorded(self) -> None:
        result = run_property(gen.integers(0, 10), lambda _: False, runs=1)

        assert result.failure is not None
        assert 0 <= result.failure.seed <= 0xFFFFFFFF

    def test_seed_reduced_to_32_bits(self) -> None:
        result = run_property(gen.integers(0, 10), lambda _: False, seed=2**32 + 5, runs=1)

        assert result.failure is not None
        assert result.failure.seed == 5

    def test_config_object_with_overrides(self) -> None:
        config = PropertyConfig(seed=3, runs=50)
        result = run_property(gen.integers(0, 10), lambda _: False, config, runs=2)

        assert result.failure is not None
        assert result.failure.runs == 2
        assert result.failure.seed == 3

    def test_logs_failure(self) -> None:
        with capture_logs() as logs:
            run_property(gen.integers(0, 10), lambda _: False, seed=8, runs=1)

        events = [entry["event"] for entry in logs]
        assert "Property failed" in events
        failed = next(entry for entry in logs if entry["event"] == "Property failed")
        assert failed["seed"] == 8
        assert failed["log_level"] == "info"


class TestConfigValidation:
    """Invalid configuration is rejected before any generation."""

    @pytest.mark.parametrize("runs", [0, -1, 1.5, math.nan, True])
    def test_invalid_runs_rejected_without_generation(self, runs: object) -> None:
        generated: list[int] = []

        def arbitrary(source: RandomSource) -> int:
            generated.append(1)
            return 0

        with pytest.raises(ConfigurationError):
            run_property(arbitrary, lambda _: True, runs=runs)

        assert generated == []

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            run_property(gen.booleans(), lambda _: True, max_commands=3)

    def test_non_callable_predicate(self) -> None:
        with pytest.raises(ConfigurationError):
            run_property(gen.booleans(), "nope")  # type: ignore[arg-type]

    def test_async_predicate_rejected_in_sync_run(self) -> None:
        async def predicate(_: bool) -> bool:
            return True

        with pytest.raises(ConfigurationError, match="run_property_async"):
            run_property(gen.booleans(), predicate, runs=1)

    def test_generation_error_propagates(self) -> None:
        with pytest.raises(GenerationError):
            run_property(gen.filtered(gen.booleans(), lambda _: False), lambda _: True, runs=1)


class TestAssertProperty:
    def test_message_contains_seed(self) -> None:
        with pytest.raises(PropertyFailedError, match="seed: 77"):
            assert_property(gen.integers(1, 10), lambda _: False, seed=77, runs=1, max_shrinks=50)

    def test_error_carries_failure_and_cause(self) -> None:
        def predicate(_: int) -> None:
            raise KeyError("missing")

        with pytest.raises(PropertyFailedError) as exc_info:
            assert_property(gen.integers(0, 5), predicate, seed=1, runs=1)

        assert exc_info.value.failure.counterexample == 0
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_passing_property_returns_none(self) -> None:
        assert assert_property(gen.integers(0, 5), lambda n: n <= 5, seed=1) is None

    def test_message_is_formatted_report(self) -> None:
        with pytest.raises(PropertyFailedError) as exc_info:
            assert_property(gen.integers(0, 5), lambda _: False, seed=1, runs=3)

        assert str(exc_info.value) == format_failure(exc_info.value.failure)


class TestReplay:
    def test_replay_requires_seed(self) -> None:
        with pytest.raises(ConfigurationError, match="explicit seed"):
            replay(gen.booleans(), lambda _: True, seed=None)  # type: ignore[arg-type]

    def test_replay_matches_original_run(self) -> None:
        original = run_property(gen.strings(), lambda s: len(s) < 4, seed=31, runs=100)
        replayed = replay(gen.strings(), lambda s: len(s) < 4, seed=31, runs=100)

        assert original.failure is not None
        assert replayed.failure is not None
        assert format_failure(replayed.failure) == format_failure(original.failure)

    def test_assert_replay_reports_are_byte_identical(self) -> None:
        arbitrary = gen.arrays(gen.integers(0, 50))
        messages: list[str] = []
        for _ in range(2):
            with pytest.raises(PropertyFailedError) as exc_info:
                assert_replay(arbitrary, lambda xs: sum(xs) < 40, seed=1234, runs=200)
            messages.append(str(exc_info.value))

        assert messages[0].encode() == messages[1].encode()

    def test_top_level_replay_export(self) -> None:
        assert fuzzloom.replay is replay


class TestGenerateSamples:
    def test_deterministic_with_seed(self) -> None:
        assert generate_samples(gen.integers(0, 1000), 10, seed=4) == generate_samples(gen.integers(0, 1000), 10, seed=4)

    def test_draws_from_one_stream(self) -> None:
        source = RandomSource(4)
        expected = [source.int_between(0, 1000) for _ in range(5)]
        assert generate_samples(gen.integers(0, 1000), 5, seed=4) == expected

    def test_zero_count(self) -> None:
        assert generate_samples(gen.booleans(), 0) == []

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            generate_samples(gen.booleans(), -1)


class TestPropertyBundle:
    def test_run_delegates(self) -> None:
        prop = Property(name="positive", arbitrary=gen.integers(0, 10), predicate=lambda n: n < 1)
        result = prop.run(seed=1, runs=100)

        assert result.failure is not None
        assert result.failure.counterexample == 1

    def test_callable_arbitrary_normalized(self) -> None:
        prop = Property(name="p", arbitrary=lambda s: 1, predicate=lambda _: True)
        assert prop.arbitrary.generate(RandomSource(1)) == 1

    def test_predicate_must_be_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            Property(name="p", arbitrary=gen.booleans(), predicate=None)  # type: ignore[arg-type]

    def test_is_async(self) -> None:
        async def predicate(_: bool) -> bool:
            return True

        assert Property(name="p", arbitrary=gen.booleans(), predicate=predicate).is_async
        assert not Property(name="p", arbitrary=gen.booleans(), predicate=bool).is_async


class TestAsyncRunner:
    @pytest.mark.asyncio
    async def test_async_matches_sync(self) -> None:
        async def predicate(values: list[int]) -> bool:
            return sum(values) < 40

        sync_result = run_property(gen.arrays(gen.integers(0, 50)), lambda xs: sum(xs) < 40, seed=12, runs=100)
        async_result = await run_property_async(gen.arrays(gen.integers(0, 50)), predicate, seed=12, runs=100)

        assert sync_result.failure is not None
        assert async_result.failure is not None
        assert format_failure(async_result.failure) == format_failure(sync_result.failure)

    @pytest.mark.asyncio
    async def test_trials_run_sequentially(self) -> None:
        active: list[int] = []
        overlaps: list[int] = []

        async def predicate(value: int) -> bool:
            active.append(value)
            if len(active) > 1:
                overlaps.append(value)
            await asyncio.sleep(0)
            active.pop()
            return True

        result = await run_property_async(gen.integers(0, 10), predicate, seed=3, runs=20)

        assert result.ok
        assert overlaps == []

    @pytest.mark.asyncio
    async def test_assert_property_async_raises(self) -> None:
        async def predicate(_: int) -> bool:
            return False

        with pytest.raises(PropertyFailedError, match="seed: 6"):
            await assert_property_async(gen.integers(0, 5), predicate, seed=6, runs=1)

    @pytest.mark.asyncio
    async def test_replay_async_requires_seed(self) -> None:
        with pytest.raises(ConfigurationError):
            await replay_async(gen.booleans(), bool, seed=None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_assert_replay_async(self) -> None:
        async def predicate(n: int) -> bool:
            return n < 1

        with pytest.raises(PropertyFailedError, match="counterexample: 1"):
            await assert_replay_async(gen.integers(0, 10), predicate, seed=2, runs=100)

    @pytest.mark.asyncio
    async def test_property_run_async(self) -> None:
        async def predicate(_: bool) -> bool:
            return True

        prop = Property(name="p", arbitrary=gen.booleans(), predicate=predicate)
        assert (await prop.run_async(seed=1, runs=5)).ok
