"""Tests for the two-regime propagation schedule."""

import numpy as np
import pytest

from shoaling.models.profile import build_profile
from shoaling.models.propagation import build_schedule, deep_water_speed


def make_schedule(slope, depth, canvas):
    return build_schedule(build_profile(slope, depth, canvas), depth)


class TestDeepWaterSpeed:
    """Tests for the sqrt(depth) speed law."""

    def test_reference_depth(self):
        assert deep_water_speed(40) == pytest.approx(0.6)

    def test_speed_ratio_shallow_to_deep(self):
        """10 m of water travels at about 0.354 of the 80 m speed."""
        ratio = deep_water_speed(10) / deep_water_speed(80)

        assert ratio == pytest.approx(0.35355, abs=1e-4)

    def test_faster_than_slope_regime(self):
        """Deep-water speed beats the slope speed across the depth range."""
        assert deep_water_speed(10) > 0.2


class TestSchedule:
    """Tests for schedule construction."""

    def test_gentle_slope_budget(self, canvas):
        schedule = make_schedule(1, 40, canvas)

        assert schedule.deep_dist == pytest.approx(50)
        assert schedule.slope_dist == pytest.approx(500)
        assert schedule.time_deep == pytest.approx(50 / 0.6)
        assert schedule.time_slope == pytest.approx(2500)
        assert schedule.total_time_units == pytest.approx(50 / 0.6 + 2500)

    def test_steep_slope_budget(self, canvas):
        schedule = make_schedule(10, 40, canvas)

        assert schedule.time_deep == pytest.approx(520 / 0.6)
        assert schedule.time_slope == pytest.approx(150)
        assert schedule.knee_progress == pytest.approx((520 / 0.6) / (520 / 0.6 + 150))

    def test_deeper_water_reaches_knee_sooner(self, canvas):
        shallow = make_schedule(5, 10, canvas)
        deep = make_schedule(5, 80, canvas)

        assert deep.time_deep < shallow.time_deep


class TestPositionAt:
    """Tests for the progress-to-position mapping."""

    @pytest.mark.parametrize("slope", [1, 5, 10])
    @pytest.mark.parametrize("depth", [10, 40, 80])
    def test_endpoints(self, canvas, slope, depth):
        schedule = make_schedule(slope, depth, canvas)

        assert schedule.position_at(0.0) == 0.0
        assert schedule.position_at(1.0) == pytest.approx(schedule.shore_x)

    @pytest.mark.parametrize("slope", [1, 5, 10])
    def test_non_decreasing(self, canvas, slope):
        schedule = make_schedule(slope, 40, canvas)
        x = schedule.position_at(np.linspace(0, 1, 501))

        assert np.all(np.diff(x) >= 0)
        assert np.all(x <= schedule.shore_x)

    def test_reaches_knee_at_knee_progress(self, canvas):
        schedule = make_schedule(6, 40, canvas)

        assert schedule.position_at(schedule.knee_progress) == pytest.approx(schedule.deep_dist)

    def test_slows_on_the_slope(self, canvas):
        """The packet covers less distance per unit of progress after the knee."""
        schedule = make_schedule(8, 40, canvas)
        k = schedule.knee_progress
        dt = 0.01

        deep_rate = (schedule.position_at(k) - schedule.position_at(k - dt)) / dt
        slope_rate = (schedule.position_at(k + dt) - schedule.position_at(k)) / dt

        assert deep_rate > slope_rate

    def test_progress_is_clipped(self, canvas):
        schedule = make_schedule(3, 40, canvas)

        assert schedule.position_at(-0.2) == 0.0
        assert schedule.position_at(1.5) == pytest.approx(schedule.shore_x)

    def test_scalar_and_array_results(self, canvas):
        schedule = make_schedule(3, 40, canvas)

        assert isinstance(schedule.position_at(0.5), float)
        assert schedule.position_at([0.0, 0.5, 1.0]).shape == (3,)
