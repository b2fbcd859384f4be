"""
Simulated light sensor.

Produces sensor frames for a given hour from a natural-daylight base curve,
optional noise, and a scenario overlay (office day, night shift, winter,
summer, indoor only). No hardware I/O; frames are generated on demand.

Noise comes from a private random.Random, so a seeded sensor reproduces the
same frames across runs.
"""

import random
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional

import pytz
import structlog

from .circadian_math import round_int
from .config import settings
from .science.spectral import calculate_melanopic_lux
from .types import LightSample, Reading, SensorValidation

logger = structlog.get_logger()

NOISE_FRACTION = 0.1  # Full width, i.e. +/-5%
COLOR_TEMP_NOISE_SCALE = 0.05
MIN_COLOR_TEMP = 1500

SWEEP_HOURS = (6, 9, 12, 15, 18, 21)

# Sensor range limits for validate_reading
CHANNEL_MAX = 255
LUX_MAX = 100000
COLOR_TEMP_RANGE = (1500, 15000)


@dataclass(frozen=True)
class SensorFrame:
    """One frame as the acquisition layer reports it."""

    red: float
    green: float
    blue: float
    clear: float
    photopic: float
    melanopic: float
    color_temp: float
    timestamp: Optional[int] = None  # Milliseconds since epoch

    def rounded(self) -> "SensorFrame":
        return SensorFrame(
            red=round_int(self.red),
            green=round_int(self.green),
            blue=round_int(self.blue),
            clear=round_int(self.clear),
            photopic=round_int(self.photopic),
            melanopic=round_int(self.melanopic),
            color_temp=round_int(self.color_temp),
            timestamp=self.timestamp,
        )

    def to_sample(self) -> LightSample:
        """Engine input: RGB channels plus photopic lux."""
        return LightSample(
            r=self.red, g=self.green, b=self.blue, lux=self.photopic, timestamp=self.timestamp
        )


# (start_hour, end_hour, frame) - end exclusive
BASE_PROFILE = (
    (0, 6, SensorFrame(10, 8, 5, 23, 15, 8, 2200)),  # Night
    (6, 8, SensorFrame(120, 100, 60, 280, 180, 95, 3200)),  # Sunrise
    (8, 10, SensorFrame(180, 220, 280, 680, 450, 380, 5500)),  # Morning daylight
    (10, 14, SensorFrame(250, 320, 420, 990, 650, 580, 6200)),  # Midday
    (14, 17, SensorFrame(220, 280, 360, 860, 550, 490, 5800)),  # Afternoon
    (17, 19, SensorFrame(180, 150, 100, 430, 320, 180, 3800)),  # Golden hour
    (19, 21, SensorFrame(80, 70, 50, 200, 140, 65, 2900)),  # Indoor evening
)
LATE_EVENING = SensorFrame(30, 25, 15, 70, 50, 25, 2400)


def base_frame_for_hour(hour: int) -> SensorFrame:
    """Natural daylight frame for an hour of the day (no noise, no scenario)."""
    hour = hour % 24
    for start, end, frame in BASE_PROFILE:
        if start <= hour < end:
            return frame
    return LATE_EVENING


def _office_day(frame: SensorFrame, hour: int) -> SensorFrame:
    if 8 <= hour <= 17:
        # Fluorescent office lighting instead of daylight
        return replace(
            frame,
            red=frame.red * 0.6,
            green=frame.green * 0.8,
            blue=frame.blue * 0.9,
            photopic=frame.photopic * 0.7,
            melanopic=frame.melanopic * 0.6,
            color_temp=min(frame.color_temp, 4500),
        )
    return frame


def _night_shift(frame: SensorFrame, hour: int) -> SensorFrame:
    if hour >= 20 or hour <= 6:
        return replace(
            frame,
            red=max(frame.red, 120),
            green=max(frame.green, 150),
            blue=max(frame.blue, 180),
            photopic=max(frame.photopic, 350),
            melanopic=max(frame.melanopic, 280),
            color_temp=max(frame.color_temp, 4200),
        )
    return frame


def _winter_day(frame: SensorFrame, hour: int) -> SensorFrame:
    if 6 <= hour <= 18:
        return replace(
            frame,
            red=frame.red * 0.7,
            green=frame.green * 0.8,
            blue=frame.blue * 0.9,
            photopic=frame.photopic * 0.6,
            melanopic=frame.melanopic * 0.7,
            color_temp=frame.color_temp + 300,
        )
    return frame


def _summer_day(frame: SensorFrame, hour: int) -> SensorFrame:
    if 5 <= hour <= 20:
        return replace(
            frame,
            red=frame.red * 1.2,
            green=frame.green * 1.1,
            blue=frame.blue * 1.1,
            photopic=frame.photopic * 1.3,
            melanopic=frame.melanopic * 1.2,
            color_temp=frame.color_temp - 200,
        )
    return frame


def _indoor_only(frame: SensorFrame, hour: int) -> SensorFrame:
    return replace(
        frame,
        red=min(frame.red, 150),
        green=min(frame.green, 180),
        blue=min(frame.blue, 200),
        photopic=min(frame.photopic, 400),
        melanopic=min(frame.melanopic, 300),
        color_temp=min(max(frame.color_temp, 2700), 5000),
    )


SCENARIOS: Mapping[str, Callable[[SensorFrame, int], SensorFrame]] = MappingProxyType({
    "office_day": _office_day,
    "night_shift": _night_shift,
    "winter_day": _winter_day,
    "summer_day": _summer_day,
    "indoor_only": _indoor_only,
})


def available_scenarios() -> list[str]:
    return list(SCENARIOS)


def validate_reading(data: Any) -> SensorValidation:
    """
    Range-check a sensor frame (SensorFrame or wire-format mapping).

    Channels must be 0-255, photopic and melanopic lux 0-100000, color
    temperature 1500-15000 K. Missing fields are treated as out of range.
    """
    if isinstance(data, SensorFrame):
        values = {
            "red": data.red,
            "green": data.green,
            "blue": data.blue,
            "photopic": data.photopic,
            "melanopic": data.melanopic,
            "colorTemp": data.color_temp,
        }
    else:
        values = {
            key: data.get(key)
            for key in ("red", "green", "blue", "photopic", "melanopic", "colorTemp")
        }

    def out_of_range(value: Any, low: float, high: float) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return True
        return not (low <= value <= high)

    errors = []
    for key, label in (("red", "Red"), ("green", "Green"), ("blue", "Blue")):
        if out_of_range(values[key], 0, CHANNEL_MAX):
            errors.append(f"{label} value out of range: {values[key]}")
    if out_of_range(values["photopic"], 0, LUX_MAX):
        errors.append(f"Photopic lux out of range: {values['photopic']}")
    if out_of_range(values["melanopic"], 0, LUX_MAX):
        errors.append(f"Melanopic lux out of range: {values['melanopic']}")
    if out_of_range(values["colorTemp"], *COLOR_TEMP_RANGE):
        errors.append(f"Color temperature out of range: {values['colorTemp']}")

    return SensorValidation(is_valid=not errors, errors=tuple(errors))


class SimulatedSensor:
    """
    Scenario-driven stand-in for the ambient light sensor.

    Example:
        sensor = SimulatedSensor("winter_day", seed=7)
        frame = sensor.generate_frame(hour=8)
        result = analyze_sample(frame.to_sample(), time_of_day=8)
    """

    def __init__(
        self,
        scenario: str = "office_day",
        seed: Optional[int] = None,
        noise: bool = True,
        tz_name: Optional[str] = None,
    ):
        self.noise = noise
        self.tz_name = tz_name or settings.timezone
        self._rng = random.Random(seed)
        self.set_scenario(scenario)

    def set_scenario(self, scenario: str) -> None:
        # Unknown scenarios fall through to the plain daylight curve
        if scenario not in SCENARIOS:
            logger.debug("unknown_scenario", scenario=scenario)
        self.scenario = scenario

    def _jitter(self) -> float:
        return (self._rng.random() - 0.5) * NOISE_FRACTION

    def _add_noise(self, frame: SensorFrame) -> SensorFrame:
        return replace(
            frame,
            red=max(0, frame.red * (1 + self._jitter())),
            green=max(0, frame.green * (1 + self._jitter())),
            blue=max(0, frame.blue * (1 + self._jitter())),
            clear=max(0, frame.clear * (1 + self._jitter())),
            photopic=max(0, frame.photopic * (1 + self._jitter())),
            melanopic=max(0, frame.melanopic * (1 + self._jitter())),
            color_temp=max(
                MIN_COLOR_TEMP, frame.color_temp * (1 + self._jitter() * COLOR_TEMP_NOISE_SCALE)
            ),
        )

    def generate_frame(self, hour: int, timestamp: Optional[int] = None) -> SensorFrame:
        """
        Frame for an hour of day under the current scenario.

        Args:
            hour: Hour of day; wrapped into 0-23
            timestamp: Epoch milliseconds to stamp on the frame

        Returns:
            SensorFrame with every value rounded to an integer
        """
        hour = hour % 24
        frame = base_frame_for_hour(hour)
        if self.noise:
            frame = self._add_noise(frame)
        overlay = SCENARIOS.get(self.scenario)
        if overlay is not None:
            frame = overlay(frame, hour)
        return replace(frame.rounded(), timestamp=timestamp)

    def generate_sample(self, hour: int, timestamp: Optional[int] = None) -> LightSample:
        return self.generate_frame(hour, timestamp).to_sample()

    def generate_day(self, day: date, interval_minutes: int = 60) -> list[SensorFrame]:
        """Frames for a whole local day at a fixed interval, timestamped in tz_name."""
        if interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

        tz = pytz.timezone(self.tz_name)
        start = datetime(day.year, day.month, day.day)
        frames = []
        for minute in range(0, 24 * 60, interval_minutes):
            local = tz.localize(start + timedelta(minutes=minute))
            timestamp = int(local.timestamp() * 1000)
            frames.append(self.generate_frame(local.hour, timestamp))
        return frames

    def generate_history(self, day: date, interval_minutes: int = 60) -> list[Reading]:
        """A day of frames reduced to persisted readings (timestamp + melanopic lux)."""
        history = []
        for frame in self.generate_day(day, interval_minutes):
            melanopic = calculate_melanopic_lux(frame.red, frame.green, frame.blue, frame.photopic)
            history.append(Reading(timestamp=frame.timestamp, melanopic_lux=melanopic))
        return history

    def scenario_sweep(self) -> Iterator[tuple[str, int, SensorFrame]]:
        """Yield (scenario, hour, frame) across every scenario at the sweep hours."""
        original = self.scenario
        try:
            for scenario in SCENARIOS:
                self.scenario = scenario
                for hour in SWEEP_HOURS:
                    yield scenario, hour, self.generate_frame(hour)
        finally:
            self.scenario = original
