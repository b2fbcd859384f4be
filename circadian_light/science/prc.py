"""
Phase Response Curve for ambient light exposure.

Scientific basis: Khalsa SBS et al. (2003). A phase response curve to single
bright light pulses in human subjects. J Physiol, 549(3), 945-952.

Simplified to clock-time windows for a habitual (roughly 23:00-07:00) sleeper:
- Morning light (06:00-12:00) advances the clock, up to ~2h
- Late evening / night light (22:00-06:00) delays the clock, up to ~3h
- Midday and early evening form a dead zone with no net shift

The response grows with log10 of melanopic lux above a 10 lux threshold.
"""

import math

from ..circadian_math import is_valid_number, round_half_up
from ..types import PhaseDirection, PhaseShiftResult


class LightPRC:
    """
    Clock-time light PRC windows and dose scaling.

    Window bounds are inclusive decimal hours. The delay window wraps
    midnight; at 06:00 the advance window takes precedence.
    """

    ADVANCE_START = 6
    ADVANCE_PEAK = 8
    ADVANCE_END = 12

    DELAY_START = 22
    DELAY_PEAK = 2
    DELAY_END = 6

    THRESHOLD_LUX = 10  # No shift at or below this

    ADVANCE_GAIN = 0.5  # Hours per log10 unit above threshold
    DELAY_GAIN = 0.8  # Evening light is more potent

    MAX_ADVANCE = 2.0  # hours
    MAX_DELAY = 3.0  # hours

    REPORTING_THRESHOLD = 0.1  # Shifts at or below this are reported as "none"

    @staticmethod
    def in_advance_window(hour: float) -> bool:
        """True if light at this hour falls in the advance zone."""
        return LightPRC.ADVANCE_START <= hour <= LightPRC.ADVANCE_END

    @staticmethod
    def in_delay_window(hour: float) -> bool:
        """True if light at this hour falls in the delay zone (wraps midnight)."""
        if LightPRC.in_advance_window(hour):
            return False
        return hour >= LightPRC.DELAY_START or hour <= LightPRC.DELAY_END

    @staticmethod
    def shift_magnitude(melanopic_lux: float, gain: float, cap: float) -> float:
        """Log-dose response, clamped to [0, cap]. Zero at or below threshold."""
        if melanopic_lux <= LightPRC.THRESHOLD_LUX:
            return 0.0
        magnitude = math.log10(melanopic_lux / LightPRC.THRESHOLD_LUX) * gain
        return min(cap, max(0.0, magnitude))


def get_phase_shift_recommendation(
    direction: PhaseDirection, hour: float, melanopic_lux: float
) -> str:
    """User-facing text for a phase-shift estimate."""
    if direction == "advance" and hour < 10:
        return "Good morning light exposure - helping align your circadian rhythm"
    elif direction == "delay" and hour > 20:
        if melanopic_lux > 50:
            return "High evening light - may delay sleep time. Reduce light exposure"
        return "Moderate evening light - consider dimming further"
    elif direction == "none":
        if 6 <= hour < 10 and melanopic_lux < 100:
            return "Morning light too low - seek brighter light"
        return "Light levels appropriate for this time"
    return "Monitor light exposure for optimal circadian alignment"


def calculate_phase_shift(melanopic_lux: float, hour: float) -> PhaseShiftResult:
    """
    Estimate the circadian phase shift produced by light at a given hour.

    Args:
        melanopic_lux: Melanopic EDI of the exposure
        hour: Hour of day (0-23, decimals allowed)

    Returns:
        PhaseShiftResult with a non-negative magnitude (1 decimal). The
        direction stays "none" unless the magnitude exceeds 0.1h.
    """
    if not is_valid_number(melanopic_lux) or melanopic_lux < 0 or not is_valid_number(hour):
        return PhaseShiftResult(
            direction="none",
            magnitude=0.0,
            recommendation="Invalid light measurement",
        )

    direction: PhaseDirection = "none"
    magnitude = 0.0

    if LightPRC.in_advance_window(hour):
        magnitude = LightPRC.shift_magnitude(
            melanopic_lux, LightPRC.ADVANCE_GAIN, LightPRC.MAX_ADVANCE
        )
        if magnitude > LightPRC.REPORTING_THRESHOLD:
            direction = "advance"
    elif LightPRC.in_delay_window(hour):
        magnitude = LightPRC.shift_magnitude(
            melanopic_lux, LightPRC.DELAY_GAIN, LightPRC.MAX_DELAY
        )
        if magnitude > LightPRC.REPORTING_THRESHOLD:
            direction = "delay"

    return PhaseShiftResult(
        direction=direction,
        magnitude=round_half_up(magnitude, 1),
        recommendation=get_phase_shift_recommendation(direction, hour, melanopic_lux),
    )
