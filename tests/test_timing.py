"""Tests for gravity timing."""

import pytest

from blockfall_core.errors import ConfigurationError
from blockfall_core.timing import TimingPolicy


def test_fall_interval_by_level():
    """Interval shrinks 80ms per level down to the floor."""
    timing = TimingPolicy()
    assert timing.fall_interval(1) == 1000
    assert timing.fall_interval(2) == 920
    assert timing.fall_interval(12) == 120
    assert timing.fall_interval(13) == 100, "Should clamp at the minimum"
    assert timing.fall_interval(50) == 100


def test_soft_drop_clamps_interval():
    """Soft drop uses the short interval regardless of level."""
    timing = TimingPolicy()
    assert timing.effective_interval(1, soft_drop=True) == 50
    assert timing.effective_interval(20, soft_drop=True) == 50
    assert timing.effective_interval(3, soft_drop=False) == 840


def test_soft_drop_never_slows_gravity():
    """A soft-drop interval longer than gravity keeps gravity's pace."""
    timing = TimingPolicy(base_interval=300, min_interval=100, soft_drop_interval=500)
    assert timing.effective_interval(1, soft_drop=True) == 300


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_interval": 0},
        {"min_interval": -5},
        {"soft_drop_interval": 0},
        {"level_step": -1},
        {"base_interval": 50, "min_interval": 100},
    ],
)
def test_invalid_timing_rejected(kwargs):
    """Unusable timing values fail validation."""
    with pytest.raises(ConfigurationError):
        TimingPolicy(**kwargs).validate()
