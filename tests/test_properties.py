"""Property-based checks for the sampler floor and threshold ordering."""

from __future__ import annotations

import pytest

pytest.importorskip("hypothesis")
from hypothesis import given, settings
from hypothesis import strategies as st

from journey_core.classification import classify_by_threshold
from journey_core.config import SegmentStat
from journey_core.sampling import DurationSampler, SequenceUniformSource

TABLE = (2.038, 2.128, 2.285, 2.358)


@settings(max_examples=200, deadline=None)
@given(
    mean=st.floats(min_value=1e-3, max_value=1e6),
    std_dev=st.floats(min_value=0.0, max_value=1e6),
    u1=st.floats(min_value=1e-300, max_value=1.0),
    u2=st.floats(min_value=1e-12, max_value=1.0),
)
def test_samples_never_fall_below_floor(mean: float, std_dev: float, u1: float, u2: float) -> None:
    sampler = DurationSampler(SequenceUniformSource([u1, u2]))

    assert sampler.sample(SegmentStat(mean, std_dev)) >= 100.0


@given(
    first=st.floats(min_value=0.0, max_value=10_000.0),
    second=st.floats(min_value=0.0, max_value=10_000.0),
)
def test_threshold_rating_is_monotonic(first: float, second: float) -> None:
    shorter, longer = sorted((first, second))

    assert (
        classify_by_threshold(shorter, TABLE).index
        <= classify_by_threshold(longer, TABLE).index
    )
