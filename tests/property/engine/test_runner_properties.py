# tests/property/engine/test_runner_properties.py
"""Property-based tests for the property and model runners."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from fuzzloom import gen, run_model, run_property
from fuzzloom.arbitraries.shrinking import integer_target
from fuzzloom.engine.reporting import format_failure, format_model_failure
from tests.conftest import counter_spec
from tests.property.conftest import int_ranges, seeds
from tests.property.settings import DETERMINISM_SETTINGS, SLOW_SETTINGS


class TestShrinkOutcome:
    @given(seed=seeds, threshold=st.integers(min_value=1, max_value=1000))
    @SLOW_SETTINGS
    def test_counterexample_still_fails(self, seed: int, threshold: int) -> None:
        """Shrinking never trades a failing value for a passing one."""
        result = run_property(gen.integers(0, 1000), lambda n: n < threshold, seed=seed, runs=50)
        if result.failure is not None:
            assert result.failure.counterexample >= threshold

    @given(seed=seeds, bounds=int_ranges)
    @SLOW_SETTINGS
    def test_always_failing_reaches_target(self, seed: int, bounds: tuple[int, int]) -> None:
        result = run_property(gen.integers(*bounds), lambda _: False, seed=seed, runs=1)

        assert result.failure is not None
        assert result.failure.counterexample == integer_target(*bounds)

    @given(seed=seeds, budget=st.integers(min_value=1, max_value=20))
    @SLOW_SETTINGS
    def test_budget_never_exceeded(self, seed: int, budget: int) -> None:
        arbitrary = gen.arrays(gen.integers(0, 1000), min_length=1)
        result = run_property(arbitrary, lambda _: False, seed=seed, runs=1, max_shrinks=budget)

        assert result.failure is not None
        assert result.failure.shrinks <= budget


class TestReplay:
    @given(seed=seeds)
    @DETERMINISM_SETTINGS
    def test_property_report_reproducible(self, seed: int) -> None:
        arbitrary = gen.arrays(gen.integers(0, 50))
        first = run_property(arbitrary, lambda xs: sum(xs) < 60, seed=seed, runs=30)
        second = run_property(arbitrary, lambda xs: sum(xs) < 60, seed=seed, runs=30)

        assert first.ok == second.ok
        if first.failure is not None and second.failure is not None:
            assert format_failure(first.failure) == format_failure(second.failure)

    @given(seed=seeds)
    @SLOW_SETTINGS
    def test_model_report_reproducible(self, seed: int) -> None:
        first = run_model(counter_spec(), seed=seed, runs=20)
        second = run_model(counter_spec(), seed=seed, runs=20)

        assert first.ok == second.ok
        if first.failure is not None and second.failure is not None:
            assert format_model_failure(first.failure) == format_model_failure(second.failure)

    @given(seed=seeds)
    @SLOW_SETTINGS
    def test_buggy_reset_always_minimal(self, seed: int) -> None:
        result = run_model(counter_spec(), seed=seed, runs=50)
        if result.failure is not None:
            assert [step.name for step in result.failure.sequence] == ["increment", "reset"]
            assert result.failure.sequence[0].param == 1
