"""
Rule-based advice list for the dashboard.

Merges three sources into one prioritized list:
1. The headline therapy recommendation (skipped when it is "normal")
2. Its evidence-based protocols
3. Rule checks over the current metrics: time-of-day light targets,
   distance from the optimal level, color temperature, phase delay,
   blue light, cognitive dip, melatonin suppression and retinal stress

Entries are de-duplicated by id (first one wins), sorted critical > high >
medium > low, and trimmed to the top few. Rule hours are whole clock hours,
so 17:45 still counts as hour 17.
"""

from collections.abc import Callable
from typing import Any, Mapping, Optional, Union

import structlog

from ..circadian_math import is_valid_number, round_int
from ..science.dose_response import estimate_cognitive_performance
from ..science.prc import get_phase_shift_recommendation
from ..types import (
    Advice,
    AdviceAction,
    InterventionSuggestion,
    Metrics,
    TherapyRecommendation,
    UserProfile,
)
from .optimal_levels import get_optimal_light_levels
from .therapy import generate_light_therapy_recommendation

logger = structlog.get_logger()

DEFAULT_ADVICE_LIMIT = 3

PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}

THERAPY_TITLES = {
    "morning_boost": "Critical Morning Light Needed",
    "morning_optimization": "Optimize Morning Light",
    "daytime_boost": "Boost Daytime Alertness",
    "evening_transition": "Evening Light Too Bright",
    "night_protection": "Night Light Protection",
}

PROTOCOL_TITLES = {
    "bright_light_therapy": "Bright Light Therapy",
    "blue_light_therapy": "Blue Light Therapy",
    "light_reduction": "Light Reduction Protocol",
    "circadian_alignment": "Circadian Alignment",
}

# Rule thresholds
MORNING_MIN_LUX = 250
AFTERNOON_MIN_LUX = 150
EVENING_MAX_LUX = 50
OPTIMAL_TOLERANCE_LUX = 100
PHASE_DELAY_WARNING_HOURS = 1.0
LOW_COGNITIVE_PERFORMANCE = 60
MELATONIN_WARNING = 30
RETINAL_CAUTION = 60
RETINAL_CRITICAL = 80

Rule = Callable[[Metrics, float, int], Optional[Advice]]


# =============================================================================
# Rule checks
# =============================================================================


def check_time_based(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    """Morning boost, afternoon slump and evening wind-down targets."""
    lux = metrics.melanopic_lux
    if 6 <= hour < 10 and lux < MORNING_MIN_LUX:
        return Advice(
            id="morning_light",
            type="time_based",
            priority="high",
            title="Boost Morning Light",
            message="Get bright light exposure to kickstart your day. "
                    "Aim for 15-30 minutes near a window or outside.",
            action=AdviceAction(kind="timer", duration=900, target=250),
        )
    if 14 <= hour < 16 and lux < AFTERNOON_MIN_LUX:
        return Advice(
            id="afternoon_boost",
            type="time_based",
            priority="medium",
            title="Combat Afternoon Slump",
            message="Increase light exposure to maintain alertness. "
                    "A short walk outside can help.",
            action=AdviceAction(kind="timer", duration=600, target=200),
        )
    if 20 <= hour < 22 and lux > EVENING_MAX_LUX:
        return Advice(
            id="evening_dimming",
            type="time_based",
            priority="high",
            title="Prepare for Sleep",
            message="Reduce bright light exposure. "
                    "Use dim, warm lighting to support melatonin production.",
            action=AdviceAction(kind="reduce", target=30),
        )
    return None


def check_light_level(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    """Compare the current level with the optimal curve (±100 lux tolerance)."""
    optimal = get_optimal_light_levels(time_of_day)
    difference = metrics.melanopic_lux - optimal.melanopic_lux

    if abs(difference) <= OPTIMAL_TOLERANCE_LUX:
        return None

    if difference < 0:
        return Advice(
            id="increase_light",
            type="light_level",
            priority="high" if 9 <= hour <= 17 else "medium",
            title="Insufficient Light",
            message=f"Your light levels are {round_int(-difference)} mel-lux below optimal. "
                    f"{optimal.description}",
            action=AdviceAction(kind="increase", target=optimal.melanopic_lux),
        )
    elif hour >= 20 or hour < 6:
        return Advice(
            id="decrease_light",
            type="light_level",
            priority="high",
            title="Excessive Evening Light",
            message="High light levels may interfere with sleep. "
                    "Consider dimming lights or using blue light filters.",
            action=AdviceAction(kind="reduce", target=optimal.melanopic_lux),
        )
    return None


def check_color_temperature(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    color_temp = metrics.color_temp
    if not is_valid_number(color_temp):
        return None

    if 6 <= hour < 12 and color_temp < 4000:
        return Advice(
            id="cool_morning",
            type="color_temperature",
            priority="medium",
            title="Add Cool Light",
            message="Cooler, bluer light in the morning helps with alertness. "
                    "Try daylight bulbs or natural sunlight.",
        )
    elif hour >= 20 and color_temp > 3000:
        return Advice(
            id="warm_evening",
            type="color_temperature",
            priority="high",
            title="Switch to Warm Light",
            message='Use warmer, redder light in the evening. Consider "sunset" bulbs '
                    "or candlelight.",
        )
    return None


def check_phase_delay(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    """Warn when the exposure delays the clock by more than an hour."""
    phase = metrics.circadian_phase
    if not is_valid_number(phase) or -phase <= PHASE_DELAY_WARNING_HOURS:
        return None

    return Advice(
        id="phase_delay_warning",
        type="phase",
        priority="high",
        title="Circadian Delay Risk",
        message="Current light exposure may delay your sleep time. Reduce light exposure now.",
        action=AdviceAction(
            kind="alert",
            message=get_phase_shift_recommendation("delay", time_of_day, metrics.melanopic_lux),
        ),
    )


def check_blue_light(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    blue = metrics.blue_exposure
    if not is_valid_number(blue):
        return None

    if hour >= 21 and blue > 30:
        return Advice(
            id="blue_light_alert",
            type="blue_light",
            priority="high",
            title="High Blue Light",
            message="Excessive blue light can suppress melatonin. "
                    "Use night mode on devices or blue light glasses.",
        )
    elif 9 <= hour <= 15 and blue < 20:
        return Advice(
            id="blue_light_boost",
            type="blue_light",
            priority="low",
            title="Increase Blue Light",
            message="Blue light during the day supports alertness. "
                    "Consider brighter, cooler lighting.",
        )
    return None


def check_cognitive_performance(
    metrics: Metrics, time_of_day: float, hour: int
) -> Optional[Advice]:
    """
    Work-hours dip below 60.

    Metrics without a cognitive score fall back to the quick estimate from
    light and time alone.
    """
    if not 9 <= hour <= 17:
        return None

    performance = metrics.cognitive_impact
    if not is_valid_number(performance) or performance <= 0:
        performance = estimate_cognitive_performance(metrics.melanopic_lux, time_of_day)
    if performance >= LOW_COGNITIVE_PERFORMANCE:
        return None

    return Advice(
        id="cognitive-boost",
        type="cognitive_enhancement",
        priority="medium",
        title="Boost Cognitive Performance",
        message=f"Current performance: {performance}%. "
                "Light optimization could improve focus by up to 25%.",
        actions=(
            "Take a 5-10 minute break outdoors",
            "Position near window or bright light source",
            "Use task lighting with 5000K+ temperature",
        ),
        benefits=("Enhanced focus", "Improved alertness", "Better problem-solving"),
        duration=10,
    )


def check_melatonin_suppression(
    metrics: Metrics, time_of_day: float, hour: int
) -> Optional[Advice]:
    suppression = metrics.melatonin_suppression
    if not is_valid_number(suppression) or suppression <= MELATONIN_WARNING:
        return None
    if not (hour >= 20 or hour <= 6):
        return None

    return Advice(
        id="melatonin-protection",
        type="melatonin_protection",
        priority="high",
        title="Protect Melatonin Production",
        message=f"Current light is suppressing melatonin by {suppression}%. "
                "This can significantly impact sleep quality.",
        actions=(
            "Dim all lights to <10 melanopic lux",
            "Use red spectrum lighting only",
            "Implement complete screen curfew",
            "Consider blackout curtains",
        ),
        benefits=("Natural sleep onset", "Improved sleep quality", "Better recovery"),
    )


def check_retinal_stress(metrics: Metrics, time_of_day: float, hour: int) -> Optional[Advice]:
    stress = metrics.retinal_stress
    if not is_valid_number(stress) or stress <= RETINAL_CAUTION:
        return None

    return Advice(
        id="retinal-protection",
        type="retinal_protection",
        priority="critical" if stress > RETINAL_CRITICAL else "medium",
        title="Retinal Stress Warning",
        message=f"High retinal stress detected ({stress}/100). "
                "Prolonged exposure may cause eye strain or damage.",
        actions=(
            "Reduce screen brightness immediately",
            "Take frequent breaks (20-20-20 rule)",
            "Use blue light filtering glasses",
            "Increase distance from bright sources",
            "Consider professional eye examination",
        ),
        benefits=("Prevent eye strain", "Reduce headaches", "Protect long-term vision"),
    )


RULES: tuple[Rule, ...] = (
    check_time_based,
    check_light_level,
    check_color_temperature,
    check_phase_delay,
    check_blue_light,
    check_cognitive_performance,
    check_melatonin_suppression,
    check_retinal_stress,
)


# =============================================================================
# Assembly
# =============================================================================


def _therapy_advice(therapy: TherapyRecommendation) -> list[Advice]:
    advice = []
    main = therapy.main
    if main.type != "normal":
        advice.append(Advice(
            id="therapy-main",
            type=main.type,
            priority=main.urgency,
            title=THERAPY_TITLES.get(main.type, "Light Optimization"),
            message=main.message,
            actions=main.actions,
            benefits=main.benefits,
            duration=main.duration,
            safety=main.safety,
        ))

    for protocol in therapy.recommendations:
        advice.append(Advice(
            id=f"research-{protocol.type}",
            type=protocol.type,
            priority="medium",
            title=PROTOCOL_TITLES.get(protocol.type, "Research-Based Protocol"),
            message=protocol.evidence,
            actions=(
                f"{protocol.duration}min session",
                f"Target: {protocol.target_lux} lux",
                f"Timing: {protocol.timing}",
            ),
            benefits=("Evidence-based intervention",),
            duration=protocol.duration,
        ))
    return advice


def generate_recommendations(
    metrics: Union[Metrics, Mapping[str, Any], None],
    user_profile: Union[UserProfile, Mapping[str, Any], None],
    time_of_day: float,
    limit: int = DEFAULT_ADVICE_LIMIT,
) -> list[Advice]:
    """
    Build the prioritized advice list for the current reading.

    Args:
        metrics: Current Metrics (or a UI dict with camelCase keys)
        user_profile: UserProfile (or a stored dict); None/{} uses defaults
        time_of_day: Decimal local hour
        limit: Maximum number of entries returned

    Returns:
        Up to `limit` Advice entries, most urgent first. Empty when the
        metrics or the time cannot be interpreted.
    """
    if isinstance(metrics, Mapping):
        metrics = Metrics.from_mapping(metrics)
    if (
        metrics is None
        or not is_valid_number(metrics.melanopic_lux)
        or not is_valid_number(time_of_day)
    ):
        logger.debug("invalid_metrics", operation="generate_recommendations")
        return []

    time_of_day = time_of_day % 24
    hour = int(time_of_day)

    therapy = generate_light_therapy_recommendation(metrics, user_profile, time_of_day)
    candidates = _therapy_advice(therapy)
    for rule in RULES:
        advice = rule(metrics, time_of_day, hour)
        if advice is not None:
            candidates.append(advice)

    seen: set[str] = set()
    unique = []
    for advice in candidates:
        if advice.id not in seen:
            seen.add(advice.id)
            unique.append(advice)

    unique.sort(key=lambda a: PRIORITY_ORDER[a.priority])

    logger.debug(
        "recommendations_generated",
        candidates=len(candidates),
        returned=[a.id for a in unique[:max(0, limit)]],
    )
    return unique[:max(0, limit)]


def get_intervention_suggestions(
    metrics: Union[Metrics, Mapping[str, Any], None], time_of_day: float
) -> list[InterventionSuggestion]:
    """
    Practical quick fixes: daylight during dim work hours, dimming late at night.

    - < 50 melanopic lux between 9h and 17h: go outside, sit by a window
    - > 100 melanopic lux from 21h: dim the lights, switch to candlelight
    """
    if isinstance(metrics, Mapping):
        metrics = Metrics.from_mapping(metrics)
    if (
        metrics is None
        or not is_valid_number(metrics.melanopic_lux)
        or not is_valid_number(time_of_day)
    ):
        return []

    hour = int(time_of_day % 24)
    lux = metrics.melanopic_lux
    suggestions = []

    if lux < 50 and 9 <= hour <= 17:
        suggestions.append(InterventionSuggestion(
            action="Go outside for a walk",
            duration="10-15 minutes",
            benefit="Natural sunlight provides 10,000+ mel-lux",
        ))
        suggestions.append(InterventionSuggestion(
            action="Sit by a window",
            duration="20-30 minutes",
            benefit="Window light provides 500-2000 mel-lux",
        ))

    if lux > 100 and hour >= 21:
        suggestions.append(InterventionSuggestion(
            action="Dim all lights",
            duration="Until bedtime",
            benefit="Supports melatonin production",
        ))
        suggestions.append(InterventionSuggestion(
            action="Use candlelight or salt lamp",
            duration="Evening hours",
            benefit="Provides <10 mel-lux",
        ))

    return suggestions
