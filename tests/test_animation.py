"""
Unit Tests for Animation Module
Tests stage labels, gauge interpolation and piston stroke.
"""

import math

import numpy as np
import pytest

from cycle_simulator.animation import (
    animation_frames,
    crank_angle,
    crank_pin,
    cycle_stage,
    gas_colour,
    gauge_values,
    geometric_compression_ratio,
    interpolate,
    interpolate_colour,
    piston_position,
    wrap_progress,
)
from cycle_simulator.cycle_config import CycleType
from cycle_simulator.thermodynamics import (
    calculate_diesel_cycle,
    calculate_otto_cycle,
    calculate_rankine_cycle,
    zeroed_result,
)


class TestHelpers:

    def test_interpolate(self):
        assert interpolate(2.0, 4.0, 0.25) == 2.5

    def test_wrap_progress(self):
        assert wrap_progress(1.25) == pytest.approx(0.25)
        assert wrap_progress(-0.25) == pytest.approx(0.75)

    def test_wrap_progress_nan_raises(self):
        with pytest.raises(ValueError):
            wrap_progress(math.nan)

    def test_interpolate_colour_endpoints(self):
        assert interpolate_colour("#000000", "#ffffff", 0.0) == "#000000"
        assert interpolate_colour("#000000", "#ffffff", 1.0) == "#ffffff"
        assert interpolate_colour("#000000", "#ffffff", 0.5) == "#808080"

    def test_interpolate_colour_bad_input(self):
        with pytest.raises(ValueError):
            interpolate_colour("#fff", "#ffffff", 0.5)

    def test_gas_colour_phases(self):
        assert gas_colour(0.0) == "#ccccff"
        assert gas_colour(0.3) == "#ff3333"
        assert gas_colour(0.9) == "#ccccff"

    def test_crank(self):
        assert crank_angle(0.5) == pytest.approx(math.pi)
        x, y = crank_pin(0.25, radius=2.0)
        assert x == pytest.approx(2.0)
        assert y == pytest.approx(0.0, abs=1e-12)


class TestCycleStage:

    @pytest.mark.parametrize(
        "progress, expected",
        [
            (0.0, "Compression Stroke"),
            (0.3, "Combustion (Constant Volume)"),
            (0.6, "Power Stroke"),
            (0.8, "Exhaust/Intake Stroke"),
        ],
    )
    def test_otto(self, progress, expected):
        assert cycle_stage("otto", progress) == expected

    def test_diesel_longer_power_stroke(self):
        assert cycle_stage(CycleType.DIESEL, 0.8) == "Power Stroke"
        assert cycle_stage(CycleType.DIESEL, 0.3) == "Combustion (Constant Pressure)"
        assert cycle_stage(CycleType.DIESEL, 0.9) == "Exhaust/Intake Stroke"

    def test_rankine(self):
        assert cycle_stage("rankine", 0.1) == "Pump (Compression)"
        assert cycle_stage("rankine", 0.99) == "Condenser (Heat Rejection)"


class TestGaugeValues:

    def setup_method(self):
        self.result = calculate_otto_cycle(
            {
                "initialPressure": 0.1,
                "initialTemperature": 25.0,
                "compressionRatio": 8.0,
                "heatInput": 1800.0,
            }
        )

    def test_vertices(self):
        """Quarter-cycle boundaries land exactly on the diagram vertices."""
        for i, progress in enumerate([0.0, 0.25, 0.5, 0.75]):
            reading = gauge_values(self.result, progress)
            assert reading.pressure == pytest.approx(self.result.pv_data[i].y)
            assert reading.temperature == pytest.approx(self.result.ts_data[i].y)

    def test_midpoint(self):
        reading = gauge_values(self.result, 0.125)
        expected = 0.5 * (self.result.pv_data[0].y + self.result.pv_data[1].y)
        assert reading.pressure == pytest.approx(expected)

    def test_levels(self):
        peak = gauge_values(self.result, 0.5)
        assert peak.pressure_level == pytest.approx(1.0)
        assert peak.temperature_level == pytest.approx(1.0)
        start = gauge_values(self.result, 0.0)
        assert start.temperature_level == pytest.approx(0.0)

    def test_empty_result_neutral(self):
        reading = gauge_values(zeroed_result("otto"), 0.4)
        assert reading.pressure_level == 0.5
        assert reading.temperature_level == 0.5


class TestPistonPosition:

    def setup_method(self):
        self.otto = calculate_otto_cycle(
            {
                "initialPressure": 0.1,
                "initialTemperature": 25.0,
                "compressionRatio": 8.0,
                "heatInput": 1800.0,
            }
        )
        self.diesel = calculate_diesel_cycle(
            {
                "initialPressure": 0.1,
                "initialTemperature": 25.0,
                "compressionRatio": 16.0,
                "cutoffRatio": 2.0,
                "heatInput": 1800.0,
            }
        )

    def test_geometric_ratio(self):
        assert geometric_compression_ratio(self.otto.pv_data) == pytest.approx(8.0)

    def test_otto_stroke(self):
        assert piston_position("otto", self.otto, 0.0) == pytest.approx(1.0)
        assert piston_position("otto", self.otto, 0.3) == pytest.approx(1.0 / 8.0)
        assert piston_position("otto", self.otto, 0.75) == pytest.approx(1.0)

    def test_diesel_expansion_ends_later(self):
        assert piston_position("diesel", self.diesel, 0.75) < 1.0
        assert piston_position("diesel", self.diesel, 0.85) == pytest.approx(1.0)

    def test_rankine_schematic(self):
        rankine = calculate_rankine_cycle(
            {
                "boilerPressure": 8.0,
                "boilerTemperature": 500.0,
                "condenserPressure": 0.008,
                "pumpEfficiency": 0.85,
                "turbineEfficiency": 0.87,
            }
        )
        assert piston_position("rankine", rankine, 0.0) == pytest.approx(0.8)
        assert piston_position("rankine", rankine, 0.4) == pytest.approx(0.65)

    def test_empty_result_does_not_raise(self):
        assert piston_position("otto", zeroed_result("otto"), 0.3) == pytest.approx(1.0)


class TestAnimationFrames:

    def test_frame_arrays(self):
        result = calculate_otto_cycle(
            {
                "initialPressure": 0.1,
                "initialTemperature": 25.0,
                "compressionRatio": 8.0,
                "heatInput": 1800.0,
            }
        )
        frames = animation_frames(result, num_frames=40)
        for key in ["progress", "piston_position", "pressure", "temperature", "crank_angle"]:
            assert frames[key].shape == (40,)
        assert frames["progress"][-1] < 1.0
        assert np.max(frames["pressure"]) == pytest.approx(result.max_pressure)

    def test_invalid_frame_count(self):
        with pytest.raises(ValueError):
            animation_frames(zeroed_result("otto"), num_frames=0)
