"""
Biological time estimation from recent light history.

Each recent exposure nudges the internal clock by a tenth of its PRC
response; chronotype sets a fixed offset on top. The estimate answers
"what time does your body think it is?" relative to the wall clock.
"""

from collections.abc import Sequence
from datetime import datetime
from types import MappingProxyType
from typing import Optional

import structlog

from ..circadian_math import hour_of_timestamp, is_valid_number, round_half_up, time_decimal
from ..config import settings
from ..types import Alignment, BiologicalTime, Chronotype, HistoryEntry, coerce_reading
from .prc import calculate_phase_shift

logger = structlog.get_logger()

# Hours the internal clock runs ahead (+) or behind (-) for each chronotype
CHRONOTYPE_OFFSETS = MappingProxyType({
    "morning": 1.0,
    "intermediate": 0.0,
    "evening": -1.0,
})

# Fraction of a single exposure's PRC response carried into the running estimate
EXPOSURE_WEIGHT = 0.1

ALIGNMENT_TOLERANCE = 0.5  # hours


def classify_alignment(phase_shift: float) -> Alignment:
    """Classify a signed cumulative shift. Exactly +/-0.5 reads as delayed."""
    if abs(phase_shift) < ALIGNMENT_TOLERANCE:
        return "well-aligned"
    elif phase_shift > ALIGNMENT_TOLERANCE:
        return "phase-advanced"
    return "phase-delayed"


def calculate_biological_time(
    history: Sequence[HistoryEntry],
    chronotype: Chronotype,
    now: datetime,
    tz_name: Optional[str] = None,
    window: Optional[int] = None,
) -> BiologicalTime:
    """
    Estimate biological time from the most recent readings.

    Args:
        history: Time-ordered readings ({timestamp, melanopicLux} or Reading)
        chronotype: "morning", "intermediate" or "evening"
        now: Current local time (passed explicitly, never read here)
        tz_name: Timezone used to bucket reading timestamps into hours
        window: Number of trailing readings to use (default from settings, 24)

    Returns:
        BiologicalTime. With no usable history, biological time equals clock
        time and alignment is "unknown".
    """
    clock_time = time_decimal(now)
    window = window or settings.biological_time_window

    unknown = BiologicalTime(
        biological_time=clock_time,
        clock_time=clock_time,
        phase_shift=0.0,
        alignment="unknown",
    )

    if isinstance(history, (str, bytes)) or not isinstance(history, Sequence) or not history:
        logger.debug("empty_history", operation="biological_time")
        return unknown

    cumulative_shift = 0.0
    used = 0

    for entry in history[-window:]:
        reading = coerce_reading(entry)
        if not is_valid_number(reading.melanopic_lux) or not reading.melanopic_lux:
            continue
        hour = hour_of_timestamp(reading.timestamp, tz_name)
        if hour is None:
            continue

        used += 1
        shift = calculate_phase_shift(reading.melanopic_lux, hour)
        cumulative_shift += shift.signed_magnitude * EXPOSURE_WEIGHT

    if used == 0:
        logger.debug("no_valid_readings", operation="biological_time", size=len(history))
        return unknown

    offset = CHRONOTYPE_OFFSETS.get(chronotype, 0.0)
    biological_time = (clock_time + cumulative_shift + offset + 24) % 24

    return BiologicalTime(
        biological_time=biological_time,
        clock_time=clock_time,
        phase_shift=round_half_up(cumulative_shift, 1),
        alignment=classify_alignment(cumulative_shift),
    )
