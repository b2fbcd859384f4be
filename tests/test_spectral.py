"""Tests for the spectral model (RGB -> melanopic and colorimetric quantities)."""

import math

import pytest

from circadian_light.science.spectral import (
    CCT_MAX,
    CCT_MIN,
    analyze_spectral_power_distribution,
    calculate_blue_exposure,
    calculate_blue_light_hazard,
    calculate_chromaticity,
    calculate_color_temperature,
    calculate_melanopic_lux,
    estimate_color_temperature_coarse,
    nearest_illuminant,
)


class TestMelanopicLux:
    """Tests for melanopic EDI conversion."""

    def test_white_light_at_1000_lux(self) -> None:
        """Equal channels give a ratio of 1/3: 1000 x 1/3 x 1.3262 = 442."""
        assert calculate_melanopic_lux(255, 255, 255, 1000) == 442

    def test_all_dark_channels_is_zero(self) -> None:
        """Zero channel sum has no spectral information."""
        assert calculate_melanopic_lux(0, 0, 0, 500) == 0

    def test_green_is_most_melanopic(self) -> None:
        """Green carries the 0.754 weight, blue 0.245, red 0.001."""
        green = calculate_melanopic_lux(0, 255, 0, 100)
        blue = calculate_melanopic_lux(0, 0, 255, 100)
        red = calculate_melanopic_lux(255, 0, 0, 100)
        assert green == 100
        assert blue == 32
        assert red == 0
        assert green > blue > red

    def test_channels_above_255_are_clamped(self) -> None:
        """Over-range channels behave like full scale."""
        assert calculate_melanopic_lux(510, 510, 510, 1000) == 442

    def test_negative_lux_never_goes_below_zero(self) -> None:
        assert calculate_melanopic_lux(255, 255, 255, -100) == 0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), None, "bright", True])
    def test_invalid_input_is_zero(self, bad) -> None:
        """NaN, infinity, non-numbers and booleans all yield 0."""
        assert calculate_melanopic_lux(bad, 100, 100, 500) == 0
        assert calculate_melanopic_lux(100, 100, 100, bad) == 0

    def test_scales_linearly_with_lux(self) -> None:
        assert calculate_melanopic_lux(255, 255, 255, 2000) == 884


class TestColorTemperature:
    """Tests for McCamy CCT estimation."""

    def test_white_is_near_d65(self) -> None:
        """Equal sRGB channels sit at the D65 white point (~6500K)."""
        assert 6400 <= calculate_color_temperature(255, 255, 255) <= 6600

    def test_warm_is_lower_than_cool(self) -> None:
        warm = calculate_color_temperature(255, 150, 50)
        white = calculate_color_temperature(255, 255, 255)
        cool = calculate_color_temperature(150, 200, 255)
        assert warm < white < cool

    def test_dark_reading_falls_back(self) -> None:
        assert calculate_color_temperature(0, 0, 0) == 5500

    def test_invalid_input_falls_back(self) -> None:
        assert calculate_color_temperature(float("nan"), 100, 100) == 5500

    @pytest.mark.parametrize(
        "rgb",
        [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0), (0, 255, 255), (1, 0, 0)],
    )
    def test_result_is_clamped(self, rgb) -> None:
        """Saturated primaries stay inside [1800, 10000]."""
        assert CCT_MIN <= calculate_color_temperature(*rgb) <= CCT_MAX

    def test_returns_integer(self) -> None:
        assert isinstance(calculate_color_temperature(200, 180, 160), int)


class TestChromaticity:
    """Tests for chromaticity and illuminant matching."""

    def test_white_chromaticity(self) -> None:
        x, y = calculate_chromaticity(255, 255, 255)
        assert x == pytest.approx(0.3127, abs=1e-3)
        assert y == pytest.approx(0.3290, abs=1e-3)

    def test_dark_has_no_chromaticity(self) -> None:
        assert calculate_chromaticity(0, 0, 0) is None

    def test_white_is_daylight(self) -> None:
        assert nearest_illuminant(255, 255, 255) == "D65"

    def test_warm_is_incandescent(self) -> None:
        assert nearest_illuminant(255, 150, 50) == "A"

    def test_dark_has_no_illuminant(self) -> None:
        assert nearest_illuminant(0, 0, 0) is None


class TestCoarseColorTemperature:
    """Tests for the blue/red ratio estimator."""

    @pytest.mark.parametrize(
        "blue,expected",
        [(40, 2700), (80, 4000), (120, 5500), (200, 6500)],
    )
    def test_ratio_buckets(self, blue, expected) -> None:
        assert estimate_color_temperature_coarse(100, 100, blue) == expected

    def test_zero_channel_fallback(self) -> None:
        assert estimate_color_temperature_coarse(0, 100, 100) == 5000
        assert estimate_color_temperature_coarse(100, 0, 100) == 5000


class TestBlueExposure:
    """Tests for blue share and blue-light hazard."""

    def test_dark_is_zero(self) -> None:
        """The +1 denominator keeps an all-dark reading at 0."""
        assert calculate_blue_exposure(0, 0, 0) == 0

    def test_pure_blue_rounds_to_100(self) -> None:
        assert calculate_blue_exposure(0, 0, 255) == 100

    def test_white_is_one_third(self) -> None:
        assert calculate_blue_exposure(255, 255, 255) == 33

    def test_hazard(self) -> None:
        """255 / 765 x 0.85 x 100 = 28."""
        assert calculate_blue_light_hazard(255, 765) == 28

    def test_hazard_zero_total(self) -> None:
        assert calculate_blue_light_hazard(255, 0) == 0


class TestSpectralPowerDistribution:
    """Tests for channel power split and balance classification."""

    def test_dark_is_neutral(self) -> None:
        result = analyze_spectral_power_distribution(0, 0, 0)
        assert result.red_power == 33.3
        assert result.green_power == 33.3
        assert result.blue_power == 33.3
        assert result.spectral_balance == "neutral"
        assert result.dominant_wavelength == 500

    def test_invalid_is_unknown(self) -> None:
        result = analyze_spectral_power_distribution(float("nan"), 0, 0)
        assert result.spectral_balance == "unknown"
        assert result.red_power == 0

    def test_red_heavy_is_warm(self) -> None:
        result = analyze_spectral_power_distribution(200, 100, 50)
        assert result.spectral_balance == "warm-red-dominant"
        assert result.red_power == 57.1
        assert result.dominant_wavelength == 556

    def test_green_dominant(self) -> None:
        result = analyze_spectral_power_distribution(50, 200, 50)
        assert result.spectral_balance == "green-dominant"
        assert result.dominant_wavelength == 470

    def test_balanced(self) -> None:
        result = analyze_spectral_power_distribution(100, 100, 100)
        assert result.spectral_balance == "balanced-spectrum"

    def test_pure_blue_wavelength_is_clamped(self) -> None:
        """470 - 200 would be 270 nm; the visible floor is 380."""
        result = analyze_spectral_power_distribution(0, 0, 255)
        assert result.spectral_balance == "cool-blue-dominant"
        assert result.dominant_wavelength == 380

    def test_powers_sum_to_about_100(self) -> None:
        result = analyze_spectral_power_distribution(123, 45, 210)
        total = result.red_power + result.green_power + result.blue_power
        assert math.isclose(total, 100, abs_tol=0.2)

    def test_over_range_channels_clamped(self) -> None:
        result = analyze_spectral_power_distribution(300, 0, 0)
        assert result.red_power == 100
