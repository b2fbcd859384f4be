"""
Tool implementations for the display layer.

Dict in, dict out. Arguments use Python names; results are serialised with
the camelCase field names the UI renders:

1. analyze_sample - Metrics for one RGB + lux reading
2. daily_light_score - Score, summary and insights for a day of readings
3. biological_time - Internal time estimate from recent history
4. therapy_recommendation - Structured light therapy recommendation
5. optimal_light_levels - Target light and timing window for a time of day
6. spectral_analysis - Spectral breakdown of an RGB reading
7. light_recommendations - Prioritized advice list and quick interventions
"""

from dataclasses import fields, is_dataclass
from datetime import datetime
from typing import Any, Optional

from .circadian_math import get_current_datetime_in_tz
from .engine import analyze_sample as analyze_light_sample
from .science.markers import calculate_biological_time
from .science.spectral import (
    analyze_spectral_power_distribution,
    calculate_chromaticity,
    calculate_color_temperature,
    nearest_illuminant,
)
from .scoring.daily_score import (
    calculate_daily_light_score,
    generate_insights,
    summarize_daily_exposure,
)
from .scoring.advisor import generate_recommendations, get_intervention_suggestions
from .scoring.optimal_levels import get_optimal_light_levels, get_optimal_timing_recommendation
from .scoring.therapy import generate_light_therapy_recommendation
from .types import LightSample


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_wire(obj: Any) -> Any:
    """Convert dataclass results to JSON-ready dicts with camelCase keys, recursively."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {snake_to_camel(f.name): to_wire(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, (list, tuple)):
        return [to_wire(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: to_wire(value) for key, value in obj.items()}
    return obj


def _parse_now(value: Optional[str], tz_name: Optional[str]) -> datetime:
    if value:
        return datetime.fromisoformat(value)
    return get_current_datetime_in_tz(tz_name)


def analyze_sample(
    sample: dict[str, Any],
    time_of_day: Optional[float] = None,
    timezone: Optional[str] = None,
    age: Optional[float] = None,
    exposure_minutes: Optional[float] = None,
) -> dict[str, Any]:
    """
    Analyze one sensor reading.

    time_of_day wins over the sample's own timestamp; with neither, the
    result is {"ok": false, "reason": ...}.
    """
    result = analyze_light_sample(
        LightSample.from_mapping(sample),
        time_of_day=time_of_day,
        tz_name=timezone,
        age=age,
        exposure_minutes=exposure_minutes,
    )
    return to_wire(result)


def daily_light_score(history: list[Any], timezone: Optional[str] = None) -> dict[str, Any]:
    """Light score plus the exposure summary and insights for the same readings."""
    return {
        "lightScore": calculate_daily_light_score(history, timezone),
        "summary": to_wire(summarize_daily_exposure(history, timezone)),
        "insights": to_wire(generate_insights(history, timezone)),
    }


def biological_time(
    history: list[Any],
    chronotype: str = "intermediate",
    now: Optional[str] = None,
    timezone: Optional[str] = None,
) -> dict[str, Any]:
    """Estimate biological time; now is an ISO local datetime (default: current time)."""
    estimate = calculate_biological_time(
        history, chronotype, _parse_now(now, timezone), tz_name=timezone
    )
    return to_wire(estimate)


def therapy_recommendation(
    metrics: dict[str, Any],
    time_of_day: float,
    user_profile: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return to_wire(generate_light_therapy_recommendation(metrics, user_profile, time_of_day))


def optimal_light_levels(time_of_day: float) -> dict[str, Any]:
    return {
        "levels": to_wire(get_optimal_light_levels(time_of_day)),
        "timing": to_wire(get_optimal_timing_recommendation(time_of_day)),
    }


def spectral_analysis(r: float, g: float, b: float) -> dict[str, Any]:
    """Channel split and balance, plus color temperature and chromaticity."""
    result = to_wire(analyze_spectral_power_distribution(r, g, b))
    chromaticity = calculate_chromaticity(r, g, b)
    result["colorTemp"] = calculate_color_temperature(r, g, b)
    result["chromaticity"] = list(chromaticity) if chromaticity is not None else None
    result["nearestIlluminant"] = nearest_illuminant(r, g, b)
    return result


def light_recommendations(
    metrics: dict[str, Any],
    time_of_day: float,
    user_profile: Optional[dict[str, Any]] = None,
    limit: int = 3,
) -> dict[str, Any]:
    """Top advice entries plus practical interventions for the current reading."""
    return {
        "recommendations": to_wire(
            generate_recommendations(metrics, user_profile, time_of_day, limit)
        ),
        "interventions": to_wire(get_intervention_suggestions(metrics, time_of_day)),
    }


def invoke_tool(tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Router function for CLI/subprocess invocation."""
    if tool_name == "analyze_sample":
        return analyze_sample(**arguments)
    elif tool_name == "daily_light_score":
        return daily_light_score(**arguments)
    elif tool_name == "biological_time":
        return biological_time(**arguments)
    elif tool_name == "therapy_recommendation":
        return therapy_recommendation(**arguments)
    elif tool_name == "optimal_light_levels":
        return optimal_light_levels(**arguments)
    elif tool_name == "spectral_analysis":
        return spectral_analysis(**arguments)
    elif tool_name == "light_recommendations":
        return light_recommendations(**arguments)
    else:
        raise ValueError(f"Unknown tool: {tool_name}")
