"""Tests for numeric/time helpers and input coercion."""

from datetime import datetime

import pytest
import time_machine
from helpers import ms_at

from circadian_light.circadian_math import (
    current_timestamp_ms,
    get_current_datetime_in_tz,
    hour_of_timestamp,
    is_valid_number,
    round_half_up,
    round_int,
    time_decimal,
    timestamp_to_local,
)
from circadian_light.types import LightSample, Metrics, Reading, UserProfile, coerce_reading


class TestValidation:
    """Tests for is_valid_number."""

    @pytest.mark.parametrize("value", [0, 1, -3.5, 1e12])
    def test_finite_numbers(self, value) -> None:
        assert is_valid_number(value)

    @pytest.mark.parametrize(
        "value", [None, "1", True, False, float("nan"), float("inf"), -float("inf"), [1]]
    )
    def test_rejected(self, value) -> None:
        assert not is_valid_number(value)


class TestRounding:
    """Half-up rounding, unlike Python's banker's round()."""

    def test_halves_go_up(self) -> None:
        assert round_int(2.5) == 3
        assert round_int(3.5) == 4
        assert round_int(-2.5) == -2

    def test_decimals(self) -> None:
        assert round_half_up(0.25, 1) == 0.3
        assert round_half_up(1.04, 1) == 1.0


class TestTime:
    """Tests for timestamp conversion and the clock wrappers."""

    def test_time_decimal(self) -> None:
        assert time_decimal(datetime(2026, 1, 15, 7, 30)) == 7.5

    def test_timestamp_to_local(self) -> None:
        local = timestamp_to_local(ms_at(12), "Asia/Tokyo")
        assert local == datetime(2026, 1, 15, 21, 0)
        assert local.tzinfo is None

    def test_hour_of_timestamp_dst(self) -> None:
        """Summer time in London is UTC+1."""
        summer = ms_at(12, day=(2026, 7, 1))
        assert hour_of_timestamp(summer, "Europe/London") == 13
        assert hour_of_timestamp(summer, "UTC") == 12

    @pytest.mark.parametrize("bad", [None, 0, float("nan"), "1700000000000", 1e20])
    def test_hour_of_unusable_timestamp(self, bad) -> None:
        assert hour_of_timestamp(bad, "UTC") is None

    @time_machine.travel("2026-07-01T12:15:00Z", tick=False)
    def test_current_datetime_in_tz(self) -> None:
        assert get_current_datetime_in_tz("America/Los_Angeles") == datetime(2026, 7, 1, 5, 15)
        assert current_timestamp_ms() == ms_at(12, 15, day=(2026, 7, 1))


class TestCoercion:
    """Tests for building dataclasses from wire-format mappings."""

    def test_coerce_reading_variants(self) -> None:
        assert coerce_reading({"timestamp": 1, "melanopicLux": 5}) == Reading(1, 5)
        assert coerce_reading({"timestamp": 1, "melanopic_lux": 5}) == Reading(1, 5)
        assert coerce_reading(Reading(2, 6)) == Reading(2, 6)
        sample = LightSample(1, 2, 3, 4, timestamp=9).with_derived(7, 3000)
        assert coerce_reading(sample) == Reading(9, 7)
        assert coerce_reading(42) == Reading(None, None)

    def test_light_sample_defaults(self) -> None:
        sample = LightSample.from_mapping({"r": 10, "lux": 50})
        assert (sample.r, sample.g, sample.b, sample.lux) == (10, 0, 0, 50)
        assert sample.timestamp is None

    def test_user_profile_defaults(self) -> None:
        profile = UserProfile.from_mapping({"chronotype": None, "goals": []})
        assert profile == UserProfile()

    def test_metrics_from_mapping(self) -> None:
        metrics = Metrics.from_mapping({"melanopicLux": 120, "cognitiveImpact": 70})
        assert metrics.melanopic_lux == 120
        assert metrics.cognitive_impact == 70
        assert metrics.retinal_stress == 0
