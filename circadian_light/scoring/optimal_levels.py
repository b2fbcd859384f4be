"""
Time-of-day light targets.

Target curve:
- 06:00-09:00 morning ramp: 100 -> 250 melanopic lux, 3000K -> 5000K
- 09:00-17:00 daytime plateau: 200 lux, 4500K
- 17:00-20:00 evening ramp down: 200 -> 50 lux, 4500K -> 2700K
- 20:00-22:00 pre-sleep: 30 lux, 2700K
- otherwise night: 5 lux, 2200K
"""

from ..circadian_math import round_int
from ..types import OptimalLightLevels, TimingWindow


def get_optimal_light_levels(time_of_day: float) -> OptimalLightLevels:
    """
    Target melanopic lux and color temperature for a decimal hour.

    Args:
        time_of_day: Decimal hour (e.g. 7.5 for 07:30)

    Returns:
        OptimalLightLevels with user-facing description and next transition
    """
    if 6 <= time_of_day < 9:
        progress = (time_of_day - 6) / 3
        return OptimalLightLevels(
            melanopic_lux=round_int(100 + progress * 150),
            color_temp=round_int(3000 + progress * 2000),
            description="Bright, cool light for morning activation",
            next_transition="Maintain bright light until 5 PM",
        )
    elif 9 <= time_of_day < 17:
        return OptimalLightLevels(
            melanopic_lux=200,
            color_temp=4500,
            description="Moderate bright light for sustained alertness",
            next_transition="Begin dimming after 5 PM",
        )
    elif 17 <= time_of_day < 20:
        progress = (time_of_day - 17) / 3
        return OptimalLightLevels(
            melanopic_lux=round_int(200 - progress * 150),
            color_temp=round_int(4500 - progress * 1800),
            description="Dimming warm light for evening transition",
            next_transition="Minimize light after 8 PM",
        )
    elif 20 <= time_of_day < 22:
        return OptimalLightLevels(
            melanopic_lux=30,
            color_temp=2700,
            description="Low warm light for melatonin production",
            next_transition="Sleep preparation",
        )
    return OptimalLightLevels(
        melanopic_lux=5,
        color_temp=2200,
        description="Minimal light for sleep",
        next_transition="Morning light after 6 AM",
    )


def get_optimal_timing_recommendation(time_of_day: float) -> TimingWindow:
    """Best window to act on the current light phase."""
    if 6 <= time_of_day < 10:
        return TimingWindow(
            phase="morning_activation",
            optimal_start=6.5,
            optimal_end=9,
            optimal_duration=20,
            next_window="Maintain bright light until 5 PM",
        )
    elif 10 <= time_of_day < 17:
        return TimingWindow(
            phase="daytime_maintenance",
            optimal_start=10,
            optimal_end=17,
            optimal_duration=5,
            next_window="Begin dimming after 6 PM",
        )
    elif 17 <= time_of_day < 22:
        return TimingWindow(
            phase="evening_transition",
            optimal_start=17,
            optimal_end=22,
            optimal_duration=60,
            next_window="Minimize light after 10 PM",
        )
    return TimingWindow(
        phase="night_protection",
        optimal_start=22,
        optimal_end=6,
        optimal_duration=480,
        next_window="Morning light after 6 AM",
    )
