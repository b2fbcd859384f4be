"""Tests for the clock-time light phase response curve."""

import pytest

from circadian_light.science.prc import LightPRC, calculate_phase_shift
from circadian_light.types import PhaseShiftResult


class TestPRCWindows:
    """Tests for advance/delay window membership."""

    def test_advance_window_is_inclusive(self) -> None:
        assert LightPRC.in_advance_window(6)
        assert LightPRC.in_advance_window(12)
        assert not LightPRC.in_advance_window(12.5)

    def test_delay_window_wraps_midnight(self) -> None:
        assert LightPRC.in_delay_window(22)
        assert LightPRC.in_delay_window(0)
        assert LightPRC.in_delay_window(5.9)
        assert not LightPRC.in_delay_window(15)

    def test_six_am_is_advance_not_delay(self) -> None:
        """Both windows touch 06:00; the advance window wins."""
        assert LightPRC.in_advance_window(6)
        assert not LightPRC.in_delay_window(6)


class TestCalculatePhaseShift:
    """Tests for phase-shift estimates."""

    def test_dead_zone(self) -> None:
        """Midday light produces no shift."""
        result = calculate_phase_shift(500, 13)
        assert result.direction == "none"
        assert result.magnitude == 0
        assert result.recommendation == "Light levels appropriate for this time"

    def test_morning_advance(self) -> None:
        """log10(1000 / 10) x 0.5 = 1.0h advance."""
        result = calculate_phase_shift(1000, 8)
        assert result.direction == "advance"
        assert result.magnitude == 1.0
        assert result.recommendation.startswith("Good morning light exposure")

    def test_advance_at_six_am(self) -> None:
        assert calculate_phase_shift(1000, 6).direction == "advance"

    def test_dim_morning_prompts_brighter_light(self) -> None:
        result = calculate_phase_shift(10, 8)
        assert result.direction == "none"
        assert result.recommendation == "Morning light too low - seek brighter light"

    def test_bright_evening_delay(self) -> None:
        """log10(100 / 10) x 0.8 = 0.8h delay."""
        result = calculate_phase_shift(100, 23)
        assert result.direction == "delay"
        assert result.magnitude == 0.8
        assert result.recommendation.startswith("High evening light")

    def test_moderate_evening_delay(self) -> None:
        result = calculate_phase_shift(30, 23)
        assert result.direction == "delay"
        assert result.magnitude == 0.4
        assert result.recommendation == "Moderate evening light - consider dimming further"

    def test_early_morning_delay_generic_text(self) -> None:
        result = calculate_phase_shift(100, 2)
        assert result.direction == "delay"
        assert result.recommendation == "Monitor light exposure for optimal circadian alignment"

    def test_caps(self) -> None:
        assert calculate_phase_shift(1_000_000, 8).magnitude == 2.0
        assert calculate_phase_shift(1_000_000, 23).magnitude == 3.0

    def test_small_shift_reported_as_none(self) -> None:
        """log10(1.2) x 0.5 = 0.04h, below the 0.1h reporting threshold."""
        result = calculate_phase_shift(12, 8)
        assert result.direction == "none"
        assert result.magnitude == 0.0

    @pytest.mark.parametrize("lux,hour", [(float("nan"), 8), (-5, 8), (100, None)])
    def test_invalid_input(self, lux, hour) -> None:
        result = calculate_phase_shift(lux, hour)
        assert result == PhaseShiftResult("none", 0.0, "Invalid light measurement")

    @pytest.mark.parametrize("hour", [0, 3, 6, 8, 11, 12, 15, 20, 22, 23.5])
    @pytest.mark.parametrize("lux", [0, 5, 50, 500, 5000, 1e6])
    def test_bounds_and_consistency(self, lux, hour) -> None:
        """Magnitude stays within caps; "none" only for sub-threshold shifts."""
        result = calculate_phase_shift(lux, hour)
        assert 0 <= result.magnitude <= 3.0
        if result.direction == "advance":
            assert result.magnitude <= 2.0
        if result.direction == "none":
            assert result.magnitude <= 0.1


class TestSignedMagnitude:
    """Tests for the signed view used by Metrics.circadian_phase."""

    def test_advance_is_positive(self) -> None:
        assert PhaseShiftResult("advance", 1.2, "").signed_magnitude == 1.2

    def test_delay_is_negative(self) -> None:
        assert calculate_phase_shift(100, 23).signed_magnitude == -0.8

    def test_none_is_zero(self) -> None:
        assert calculate_phase_shift(500, 13).signed_magnitude == 0.0
