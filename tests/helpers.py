"""
Test helper functions for building light histories and metrics.

These functions can be imported by test modules for history construction.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytz

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circadian_light.types import Metrics

TEST_DAY = (2026, 1, 15)


def ms_at(hour: int, minute: int = 0, tz_name: str = "UTC", day: tuple = TEST_DAY) -> int:
    """
    Epoch milliseconds for a local wall-clock time on the test day.

    Args:
        hour: Local hour (0-23)
        minute: Local minute
        tz_name: IANA timezone the wall-clock time is in
        day: (year, month, day)

    Returns:
        Milliseconds since the Unix epoch
    """
    tz = pytz.timezone(tz_name)
    local = tz.localize(datetime(*day, hour, minute))
    return int(local.timestamp() * 1000)


def readings(hour: int, melanopic_lux: float, count: int, tz_name: str = "UTC") -> list[dict]:
    """
    `count` one-minute readings starting at `hour`:00, in persistence wire format.

    Counts above 60 spill into the following hours, so keep them within the
    bucket being tested.
    """
    result = []
    for i in range(count):
        h, m = divmod(hour * 60 + i, 60)
        result.append({"timestamp": ms_at(h % 24, m, tz_name), "melanopicLux": melanopic_lux})
    return result


def make_metrics(
    melanopic_lux: float = 200,
    circadian_phase: float = 0.0,
    blue_exposure: int = 30,
    cognitive_impact: int = 80,
    melatonin_suppression: int = 0,
    retinal_stress: int = 10,
    color_temp: Optional[int] = None,
) -> Metrics:
    """Metrics with benign defaults; override only what the test is about."""
    return Metrics(
        melanopic_lux=melanopic_lux,
        circadian_phase=circadian_phase,
        blue_exposure=blue_exposure,
        cognitive_impact=cognitive_impact,
        melatonin_suppression=melatonin_suppression,
        retinal_stress=retinal_stress,
        color_temp=color_temp,
    )
