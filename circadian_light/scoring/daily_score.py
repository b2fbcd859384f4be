"""
Daily light hygiene scoring and pattern insights.

Scores a day of readings by rewarding bright mornings and dark nights:

| Bucket      | Hours  | Reward                                   | Penalty        |
|-------------|--------|------------------------------------------|----------------|
| Morning     | 6-10   | >=250 lux +1.5 (counted), >=100 +0.5      |                |
| Daytime     | 10-18  | >=200 lux +0.5, >=100 +0.3                |                |
| Evening     | 18-22  | <=50 lux +0.5 (counted), <=100 +0.2       | otherwise -0.5 |
| Night       | 22-6   | <=10 lux +0.3, <=30 +0.1                  | otherwise -1   |

Bonuses: 30+ counted bright-morning readings +10, 120+ counted dark-evening
readings +10. At one reading per minute the counts are minutes.

Only the newest `history_max_points` entries of a history are scored.
"""

from collections.abc import Sequence
from typing import Optional

import structlog

from ..circadian_math import clamp, hour_of_timestamp, is_valid_number, round_int
from ..config import settings
from ..types import DailyExposureSummary, HistoryEntry, Insight, coerce_reading

logger = structlog.get_logger()

MORNING_BRIGHT_LUX = 250
EVENING_DARK_LUX = 50

MORNING_BONUS_MINUTES = 30
EVENING_BONUS_MINUTES = 120
PATTERN_BONUS = 10

LOW_MORNING_AVERAGE_LUX = 200
HIGH_EVENING_AVERAGE_LUX = 100


def _valid_readings(history: Sequence[HistoryEntry], tz_name: Optional[str]):
    """Yield (hour, melanopic_lux) for entries with a usable timestamp and value."""
    for entry in history:
        reading = coerce_reading(entry)
        if not is_valid_number(reading.melanopic_lux):
            continue
        hour = hour_of_timestamp(reading.timestamp, tz_name)
        if hour is None:
            continue
        yield hour, reading.melanopic_lux


def _is_sequence(history: object) -> bool:
    return isinstance(history, Sequence) and not isinstance(history, (str, bytes))


def _recent(history: Sequence[HistoryEntry]) -> Sequence[HistoryEntry]:
    """Trim to the newest history_max_points entries (the list is oldest first)."""
    return history[-settings.history_max_points:]


def score_reading(hour: int, melanopic_lux: float) -> float:
    """Score contribution of a single reading in its hour bucket."""
    if 6 <= hour < 10:
        if melanopic_lux >= MORNING_BRIGHT_LUX:
            return 1.5
        elif melanopic_lux >= 100:
            return 0.5
    elif 10 <= hour < 18:
        if melanopic_lux >= 200:
            return 0.5
        elif melanopic_lux >= 100:
            return 0.3
    elif 18 <= hour < 22:
        if melanopic_lux <= EVENING_DARK_LUX:
            return 0.5
        elif melanopic_lux <= 100:
            return 0.2
        return -0.5  # Bright evening light
    else:
        if melanopic_lux <= 10:
            return 0.3
        elif melanopic_lux <= 30:
            return 0.1
        return -1.0  # Light at night
    return 0.0


def calculate_daily_light_score(
    history: Sequence[HistoryEntry], tz_name: Optional[str] = None
) -> int:
    """
    Aggregate a day of readings into a 0-100 light score.

    Args:
        history: Readings carrying timestamp (epoch ms) and melanopic lux
        tz_name: Timezone used to bucket timestamps into hours

    Returns:
        Integer score clamped to [0, 100]; 0 for an empty history. Entries
        with a missing timestamp or non-finite lux are skipped.
    """
    if not _is_sequence(history) or not history:
        return 0
    history = _recent(history)

    score = 0.0
    morning_bright = 0
    evening_dark = 0

    for hour, lux in _valid_readings(history, tz_name):
        score += score_reading(hour, lux)
        if 6 <= hour < 10 and lux >= MORNING_BRIGHT_LUX:
            morning_bright += 1
        elif 18 <= hour < 22 and lux <= EVENING_DARK_LUX:
            evening_dark += 1

    if morning_bright >= MORNING_BONUS_MINUTES:
        score += PATTERN_BONUS
    if evening_dark >= EVENING_BONUS_MINUTES:
        score += PATTERN_BONUS

    return int(clamp(round_int(score), 0, 100))


def summarize_daily_exposure(
    history: Sequence[HistoryEntry], tz_name: Optional[str] = None
) -> Optional[DailyExposureSummary]:
    """
    Average / peak / minimum melanopic lux and the light score for a day.

    Missing or invalid lux values count as 0, matching how the dashboard
    plots gaps. Returns None for an empty history.
    """
    if not _is_sequence(history) or not history:
        return None
    history = _recent(history)

    values = []
    for entry in history:
        lux = coerce_reading(entry).melanopic_lux
        values.append(lux if is_valid_number(lux) else 0)

    return DailyExposureSummary(
        avg_melanopic=round_int(sum(values) / len(values)),
        max_melanopic=max(values),
        min_melanopic=min(values),
        light_score=calculate_daily_light_score(history, tz_name),
        reading_count=len(values),
    )


def generate_insights(
    history: Sequence[HistoryEntry], tz_name: Optional[str] = None
) -> list[Insight]:
    """
    Spot recurring patterns in a day of readings.

    - Morning (6-10h) average below 200 melanopic lux -> low morning pattern
    - Evening (20-23h) average above 100 melanopic lux -> evening warning
    """
    if not _is_sequence(history) or not history:
        return []
    history = _recent(history)

    morning: list[float] = []
    evening: list[float] = []
    for hour, lux in _valid_readings(history, tz_name):
        if 6 <= hour < 10:
            morning.append(lux)
        elif 20 <= hour <= 23:
            evening.append(lux)

    insights = []

    if morning and sum(morning) / len(morning) < LOW_MORNING_AVERAGE_LUX:
        insights.append(Insight(
            type="pattern",
            title="Low Morning Light Pattern",
            description="Your morning light exposure is consistently low. This may affect "
                        "your energy levels and mood throughout the day.",
            suggestion="Try to get bright light within 30 minutes of waking.",
        ))

    if evening and sum(evening) / len(evening) > HIGH_EVENING_AVERAGE_LUX:
        insights.append(Insight(
            type="warning",
            title="High Evening Light Exposure",
            description="Your evening light levels may be interfering with sleep quality.",
            suggestion='Implement a "sunset routine" starting 2 hours before bed.',
        ))

    logger.debug("insights_generated", count=len(insights), readings=len(history))
    return insights
