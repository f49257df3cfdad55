"""Tests for the shoaling height model."""

import numpy as np
import pytest

from shoaling.core.types import SimulationInputs
from shoaling.models.profile import build_profile
from shoaling.models.shoaling import (
    ShoalingModel,
    depth_ratio,
    height_at,
    shoaling_factor,
    steep_factor,
    wave_amplitude,
)

GREEN_MAX = 10**0.25  # factor at the 0.1 depth-ratio floor


class TestAmplitude:
    """Tests for base amplitude and the steep-slope correction."""

    @pytest.mark.parametrize(
        "intensity,gain,expected",
        [(5, 1.0, 15), (10, 3.0, 90), (1, 0.5, 1.5)],
    )
    def test_wave_amplitude(self, intensity, gain, expected):
        assert wave_amplitude(intensity, gain) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "slope,expected",
        [(1, 0.0), (6, 0.0), (7, 0.15), (9, 0.45), (10, 0.6)],
    )
    def test_steep_factor(self, slope, expected):
        assert steep_factor(slope) == pytest.approx(expected)


class TestDepthRatio:
    """Tests for the normalized depth along the slope."""

    def test_one_before_knee(self, canvas):
        profile = build_profile(3, 40, canvas)
        x = np.linspace(0, profile.shelf_knee_x, 20)

        np.testing.assert_allclose(depth_ratio(x, profile), 1.0)

    @pytest.mark.parametrize("slope", range(1, 11))
    def test_floor_at_shore(self, canvas, slope):
        profile = build_profile(slope, 40, canvas)
        x = np.linspace(0, canvas.width, 601)
        ratio = depth_ratio(x, profile)

        assert np.all(ratio >= 0.1)
        assert np.all(ratio <= 1.0)
        assert depth_ratio(profile.shore_x, profile) == pytest.approx(0.1)


class TestShoalingFactor:
    """Tests for Green's-law amplification."""

    def test_gentle_slope_keeps_full_shoaling(self, canvas):
        """Slope 1 has no correction and grows steadily to the shore."""
        profile = build_profile(1, 40, canvas)
        x = np.linspace(profile.shelf_knee_x, profile.shore_x, 200)
        factor = shoaling_factor(x, profile)

        assert factor[0] == pytest.approx(1.0)
        assert factor[-1] == pytest.approx(GREEN_MAX)
        assert np.all(np.diff(factor) >= 0)

    def test_steep_slope_is_cut(self, canvas):
        """Slope 10 keeps 40% of the raw Green's-law factor."""
        profile = build_profile(10, 40, canvas)
        shore = profile.shore_x

        raw = shoaling_factor(shore, profile, corrected=False)
        assert raw == pytest.approx(GREEN_MAX)
        assert shoaling_factor(shore, profile) == pytest.approx(0.4 * raw)

    @pytest.mark.parametrize("gentle,steep", [(2, 9), (1, 10)])
    @pytest.mark.parametrize("depth", [10, 40, 80])
    def test_gentle_beats_steep_everywhere(self, canvas, gentle, steep, depth):
        """At any x, a gentle slope amplifies more than a steep one."""
        gentle_profile = build_profile(gentle, depth, canvas)
        steep_profile = build_profile(steep, depth, canvas)
        x = np.linspace(0, canvas.shore_x, 551)

        assert np.all(shoaling_factor(x, gentle_profile) > shoaling_factor(x, steep_profile))

    def test_height_scales_amplitude(self, canvas):
        profile = build_profile(4, 40, canvas)
        x = 400.0

        assert height_at(x, profile, 15.0) == pytest.approx(15.0 * shoaling_factor(x, profile))


class TestShoalingModel:
    """Tests for the combined per-input model."""

    def test_start_of_run(self, canvas):
        """The packet starts at x=0 with the base amplitude on a mild slope."""
        model = ShoalingModel.create(SimulationInputs(slope=5, intensity=5, depth=40), canvas)
        x, height = model.sample(0.0)

        assert x == 0.0
        assert height == pytest.approx(15.0)

    def test_peak_height_gentle(self, canvas):
        model = ShoalingModel.create(SimulationInputs(slope=1, intensity=5, depth=40), canvas)

        assert model.peak_height == pytest.approx(15.0 * GREEN_MAX)

    def test_gentle_taller_than_steep_at_shore(self, canvas):
        gentle = ShoalingModel.create(SimulationInputs(slope=2, intensity=5, depth=40), canvas)
        steep = ShoalingModel.create(SimulationInputs(slope=9, intensity=5, depth=40), canvas)

        assert gentle.peak_height > steep.peak_height

    def test_visual_gain_scales_height_only(self, canvas):
        base = ShoalingModel.create(SimulationInputs(slope=3, intensity=6, depth=40), canvas)
        boosted = ShoalingModel.create(
            SimulationInputs(slope=3, intensity=6, depth=40, visual_gain=2.0), canvas
        )
        x_base, h_base = base.sample(0.7)
        x_boost, h_boost = boosted.sample(0.7)

        assert x_boost == pytest.approx(x_base)
        assert h_boost == pytest.approx(2 * h_base)

    def test_sample_series(self, canvas):
        model = ShoalingModel.create(SimulationInputs(slope=4, intensity=5, depth=30), canvas)
        series = model.sample_series(n=51)

        assert set(series) == {"t", "x", "seabed_y", "depth_ratio", "shoaling_factor", "height"}
        assert all(len(values) == 51 for values in series.values())
        assert series["x"][-1] == pytest.approx(model.profile.shore_x)
        assert series["height"][-1] == pytest.approx(model.peak_height)
