"""
Physiological bounds across the whole input space.

Sweeps RGB/lux/time grids and every simulated scenario through the engine
and the recommendation layer, checking that each metric stays inside its
documented range and that no input makes anything raise.
"""

import itertools

import pytest

from circadian_light.engine import compute_metrics
from circadian_light.scoring.therapy import generate_light_therapy_recommendation
from circadian_light.simulator import SimulatedSensor
from circadian_light.types import LightSample, TherapyRecommendation

CHANNELS = (0, 1, 64, 128, 255, 400)
LUX_LEVELS = (0, 1, 10, 100, 1000, 10000, 100000)
HOURS = (0, 2.5, 6, 8, 11.75, 12, 15, 17.5, 20, 22, 23.9)


def assert_metrics_in_bounds(metrics) -> None:
    assert metrics.melanopic_lux >= 0
    assert -3.0 <= metrics.circadian_phase <= 2.0
    assert 0 <= metrics.blue_exposure <= 100
    assert 0 <= metrics.cognitive_impact <= 100
    assert 0 <= metrics.melatonin_suppression <= 70
    assert 0 <= metrics.retinal_stress <= 100
    assert 1800 <= metrics.color_temp <= 10000


class TestMetricBounds:
    """Every valid sample yields bounded metrics."""

    @pytest.mark.parametrize("hour", HOURS)
    def test_grid(self, hour) -> None:
        for r, g, b in itertools.product(CHANNELS, repeat=3):
            for lux in LUX_LEVELS:
                result = compute_metrics(LightSample(r=r, g=g, b=b, lux=lux), hour)
                assert result.ok
                assert_metrics_in_bounds(result.metrics)

    def test_melanopic_never_exceeds_medi_ceiling(self) -> None:
        """Green-only light is the most melanopic: ratio 0.754 x 1.3262 < 1."""
        for lux in LUX_LEVELS:
            result = compute_metrics(LightSample(r=0, g=255, b=0, lux=lux), 12)
            assert result.metrics.melanopic_lux <= lux + 1


class TestScenarioSweep:
    """Simulated days run cleanly through the whole pipeline."""

    @pytest.mark.parametrize("age", [20, 45, 75])
    def test_every_scenario_and_hour(self, age) -> None:
        sensor = SimulatedSensor(seed=11)
        for scenario, hour, frame in sensor.scenario_sweep():
            result = compute_metrics(frame.to_sample(), hour, age=age)
            assert result.ok, scenario
            assert_metrics_in_bounds(result.metrics)

            rec = generate_light_therapy_recommendation(
                result.metrics, {"age": age}, hour
            )
            assert isinstance(rec, TherapyRecommendation)
            assert rec.main.duration >= 0
            assert rec.main.safety.level in ("safe", "caution", "dangerous")

    def test_every_hour_has_a_recommendation(self) -> None:
        sensor = SimulatedSensor("indoor_only", seed=3)
        for hour in range(24):
            result = compute_metrics(sensor.generate_sample(hour), hour)
            rec = generate_light_therapy_recommendation(result.metrics, None, hour + 0.5)
            assert rec.main.type in (
                "normal",
                "morning_boost",
                "morning_optimization",
                "daytime_boost",
                "evening_transition",
                "night_protection",
            )
