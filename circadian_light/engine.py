"""
Engine facade: one LightSample in, one tagged Metrics result out.

Composes the science layer into the Metrics record the display layer
renders. Invalid samples come back as MetricsInvalid rather than raising,
so a bad sensor frame never takes the UI down.
"""

from typing import Optional

import structlog

from .circadian_math import (
    current_timestamp_ms,
    get_current_datetime_in_tz,
    hour_of_timestamp,
    is_valid_number,
    time_decimal,
    timestamp_to_local,
)
from .config import settings
from .science.dose_response import (
    calculate_melatonin_suppression,
    calculate_retinal_stress_score,
    estimate_pupil_diameter,
    predict_cognitive_performance,
)
from .science.prc import calculate_phase_shift
from .science.spectral import (
    calculate_blue_exposure,
    calculate_color_temperature,
    calculate_melanopic_lux,
)
from .types import LightSample, Metrics, MetricsInvalid, MetricsOk, MetricsResult

logger = structlog.get_logger()


def validate_sample(sample: LightSample) -> Optional[str]:
    """Return a reason string if the sample cannot be analyzed, else None."""
    for name in ("r", "g", "b", "lux"):
        if not is_valid_number(getattr(sample, name)):
            return f"Invalid {name} value: {getattr(sample, name)!r}"
    return None


def compute_metrics(
    sample: LightSample,
    time_of_day: float,
    age: Optional[float] = None,
    exposure_minutes: Optional[float] = None,
) -> MetricsResult:
    """
    Compute display metrics for one sample at an explicit time of day.

    Args:
        sample: Raw RGB + lux reading
        time_of_day: Decimal hour the sample was taken (local time)
        age: Viewer age in years (settings default when missing or not finite)
        exposure_minutes: Assumed continuous exposure length (settings default
            when missing or not finite)

    Returns:
        MetricsOk with the derived sample, metrics and phase shift, or
        MetricsInvalid with a reason.
    """
    reason = validate_sample(sample)
    if reason is None and not is_valid_number(time_of_day):
        reason = f"Invalid time of day: {time_of_day!r}"
    if reason is not None:
        logger.debug("invalid_light_sample", reason=reason)
        return MetricsInvalid(reason=reason)

    # Missing or non-finite viewer inputs fall back to the configured defaults
    if not is_valid_number(age):
        age = settings.default_age
    if not is_valid_number(exposure_minutes):
        exposure_minutes = settings.default_exposure_minutes

    melanopic_lux = calculate_melanopic_lux(sample.r, sample.g, sample.b, sample.lux)
    color_temp = calculate_color_temperature(sample.r, sample.g, sample.b)
    phase_shift = calculate_phase_shift(melanopic_lux, time_of_day)
    pupil = estimate_pupil_diameter(melanopic_lux, age)

    metrics = Metrics(
        melanopic_lux=melanopic_lux,
        circadian_phase=phase_shift.signed_magnitude,
        blue_exposure=calculate_blue_exposure(sample.r, sample.g, sample.b),
        cognitive_impact=predict_cognitive_performance(melanopic_lux, time_of_day, pupil, age),
        melatonin_suppression=calculate_melatonin_suppression(melanopic_lux, exposure_minutes),
        retinal_stress=calculate_retinal_stress_score(
            sample.r, sample.g, sample.b, exposure_minutes
        ),
        color_temp=color_temp,
    )

    return MetricsOk(
        sample=sample.with_derived(melanopic_lux, color_temp),
        metrics=metrics,
        phase_shift=phase_shift,
    )


def analyze_sample(
    sample: LightSample,
    time_of_day: Optional[float] = None,
    tz_name: Optional[str] = None,
    age: Optional[float] = None,
    exposure_minutes: Optional[float] = None,
) -> MetricsResult:
    """
    Compute metrics, taking the time of day from the sample when not given.

    The sample's own timestamp is converted to local time in tz_name (or the
    configured timezone). A sample with neither is rejected.
    """
    if time_of_day is None:
        if hour_of_timestamp(sample.timestamp, tz_name) is None:
            return MetricsInvalid(reason="Sample has no usable timestamp")
        time_of_day = time_decimal(timestamp_to_local(sample.timestamp, tz_name))

    return compute_metrics(sample, time_of_day, age=age, exposure_minutes=exposure_minutes)


def analyze_sample_now(
    sample: LightSample,
    tz_name: Optional[str] = None,
    age: Optional[float] = None,
    exposure_minutes: Optional[float] = None,
) -> MetricsResult:
    """
    Analyze a live sample against the wall clock.

    Thin wrapper for call sites: stamps the sample with "now" if it has no
    timestamp and uses the current local time of day.
    """
    if sample.timestamp is None:
        sample = LightSample(
            r=sample.r, g=sample.g, b=sample.b, lux=sample.lux, timestamp=current_timestamp_ms()
        )
    now = get_current_datetime_in_tz(tz_name)
    return compute_metrics(sample, time_decimal(now), age=age, exposure_minutes=exposure_minutes)
