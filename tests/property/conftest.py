# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import seeds, int_ranges

    @given(seed=seeds, bounds=int_ranges)
    def test_generated_values_in_range(seed: int, bounds: tuple[int, int]) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STANDARD (100), SLOW (50), QUICK (20)
# =============================================================================

from __future__ import annotations

import math

from hypothesis import strategies as st

# Any seed a user could pass; only the lower 32 bits matter
seeds = st.integers(min_value=0, max_value=2**32 - 1)


@st.composite
def _int_range(draw: st.DrawFn, limit: int = 10_000) -> tuple[int, int]:
    low = draw(st.integers(min_value=-limit, max_value=limit))
    high = draw(st.integers(min_value=low, max_value=limit))
    return low, high


@st.composite
def _length_range(draw: st.DrawFn, limit: int = 6) -> tuple[int, int]:
    low = draw(st.integers(min_value=0, max_value=limit))
    high = draw(st.integers(min_value=low, max_value=limit))
    return low, high


@st.composite
def _float_range(draw: st.DrawFn, limit: float = 1e6) -> tuple[float, float]:
    low = draw(st.floats(min_value=-limit, max_value=limit))
    if draw(st.booleans()):
        high = low
        for _ in range(draw(st.integers(min_value=0, max_value=4))):
            high = math.nextafter(high, math.inf)
        return low, high
    return low, draw(st.floats(min_value=low, max_value=limit))


# Inclusive (low, high) integer bounds, possibly excluding 0
int_ranges = _int_range()

# Very wide bounds that need multi-word draws
wide_int_ranges = _int_range(limit=2**80)

# (min_length, max_length) for collections and strings
length_ranges = _length_range()

# (low, high) float bounds, half of them only a few ulps apart
float_ranges = _float_range()
