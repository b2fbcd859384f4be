"""
Dose-response model: melanopic light to physiological effect.

Scientific basis:
- Melatonin suppression: Zeitzer JM et al. (2000). J Physiol, 526(3), 695-702.
- Circadian stimulus: Rea MS et al. (2005). J Circadian Rhythms, 3, 13.
- Blue-light hazard: IEC 62471 photobiological safety of lamps.
- Pupil diameter: Winn B et al. (1994). Invest Ophthalmol Vis Sci, 35(3), 1132-1137.
- Time-of-day alertness: Monk TH et al. (1997). J Sleep Res, 6(1), 9-18.
- Light and alertness: Cajochen C et al. (2000). Behav Brain Res, 115(1), 75-83.

Key findings encoded here:
- No measurable melatonin suppression below ~10 melanopic lux
- Suppression saturates near 70%, half-max around 100 melanopic lux
- Full suppression needs ~2 hours of continuous exposure
- Pupils shrink with luminance and with age (~0.6%/year after 20)
"""

import math
from typing import Optional

from ..circadian_math import clamp, is_valid_number, normalize_channel, round_half_up, round_int

# Melatonin suppression (Hill equation)
SUPPRESSION_THRESHOLD_LUX = 10
MAX_SUPPRESSION = 70  # Percent
HALF_MAX_LUX = 100
HILL_COEFFICIENT = 1.5
FULL_EFFECT_MINUTES = 120

# Circadian stimulus
CS_THRESHOLD_LUX = 30
CS_SATURATION_LUX = 1000
CS_MAX = 0.7

# Retinal stress (blue-light hazard weighting)
HAZARD_BLUE_WEIGHT = 0.85
HAZARD_GREEN_WEIGHT = 0.15
HAZARD_REFERENCE_MINUTES = 60

# Pupil model
PUPIL_MIN_MM = 2.0
PUPIL_MAX_MM = 8.0
PUPIL_DARK_ADAPTED_MM = 7.5
PUPIL_DEFAULT_MM = 4.0  # Invalid input
LUX_PER_LUMINANCE = 3.14  # Approximate melanopic lux -> cd/m^2
DARK_LUMINANCE = 0.1  # cd/m^2

# Hour-of-day baseline alertness, first matching (start, end) wins
BASELINE_PERFORMANCE = (
    (8, 10, 95),  # Morning peak
    (10, 12, 90),  # Late morning
    (12, 14, 75),  # Post-lunch dip start
    (14, 16, 65),  # Post-lunch dip
    (16, 19, 85),  # Evening recovery
    (19, 22, 70),  # Evening decline
)
NIGHT_PERFORMANCE = 40
NEUTRAL_PERFORMANCE = 50  # Invalid input


def calculate_melatonin_suppression(melanopic_lux: float, duration_minutes: float = 60) -> int:
    """
    Estimate melatonin suppression (%) from a melanopic exposure.

    suppression = 70 / (1 + (100 / L)^1.5), scaled by
    min(1, sqrt(duration / 120)).

    Args:
        melanopic_lux: Melanopic EDI of the exposure
        duration_minutes: Continuous exposure length

    Returns:
        Integer percent, 0-70. 0 below the 10 lux threshold or for invalid input.
    """
    if not is_valid_number(melanopic_lux) or melanopic_lux < 0:
        return 0
    if melanopic_lux < SUPPRESSION_THRESHOLD_LUX:
        return 0
    if not is_valid_number(duration_minutes):
        return 0

    # Equal to 70 x L^1.5 / (100^1.5 + L^1.5) without overflowing for huge L
    suppression = MAX_SUPPRESSION / (1 + (HALF_MAX_LUX / melanopic_lux) ** HILL_COEFFICIENT)

    duration_factor = min(1.0, math.sqrt(max(0, duration_minutes) / FULL_EFFECT_MINUTES))
    return round_int(suppression * duration_factor)


def calculate_circadian_stimulus(melanopic_lux: float) -> float:
    """
    Circadian stimulus (0-0.7): normalized acute effect of an exposure.

    Exponential approach to saturation above a 30 melanopic lux threshold.
    """
    if not is_valid_number(melanopic_lux) or melanopic_lux <= CS_THRESHOLD_LUX:
        return 0.0

    span = CS_SATURATION_LUX - CS_THRESHOLD_LUX
    cs = CS_MAX * (1 - math.exp(-(melanopic_lux - CS_THRESHOLD_LUX) / span))
    return round_half_up(cs, 3)


def calculate_retinal_stress_score(
    r: float, g: float, b: float, duration_minutes: float = 60
) -> int:
    """
    Retinal stress score (0-100) after IEC 62471 blue-light hazard weighting.

    hazard = 0.85 x B + 0.15 x G (normalized channels), scaled by
    sqrt(duration / 60). Red contributes nothing to the hazard.
    """
    if not (is_valid_number(r) and is_valid_number(g) and is_valid_number(b)):
        return 0
    if not is_valid_number(duration_minutes):
        return 0

    hazard = normalize_channel(b) * HAZARD_BLUE_WEIGHT + normalize_channel(g) * HAZARD_GREEN_WEIGHT
    duration_factor = math.sqrt(max(0, duration_minutes) / HAZARD_REFERENCE_MINUTES)

    return int(clamp(round_int(hazard * duration_factor * 100), 0, 100))


def estimate_pupil_diameter(melanopic_lux: float, age: float = 25) -> float:
    """
    Estimate pupil diameter (mm) with the Winn et al. model.

    D = 7.75 - 5.75 x |log10(L) / log10(40)|^0.41, L in cd/m^2

    Below 0.1 cd/m^2 the pupil is fully dark-adapted: 7.5 mm at any age.
    Otherwise the diameter is scaled by the age factor
    max(0.7, 1 - (age - 20) x 0.006).

    Returns:
        Diameter to 1 decimal, clamped to [2.0, 8.0]. 4.0 for invalid input.
    """
    if not is_valid_number(melanopic_lux) or melanopic_lux < 0:
        return PUPIL_DEFAULT_MM
    if not is_valid_number(age):
        age = 25

    raw_luminance = melanopic_lux / LUX_PER_LUMINANCE

    if raw_luminance < DARK_LUMINANCE:
        return PUPIL_DARK_ADAPTED_MM

    log_ratio = math.log10(raw_luminance) / math.log10(40)
    diameter = 7.75 - 5.75 * abs(log_ratio) ** 0.41
    diameter *= age_factor_for_pupil(age)

    return clamp(round_half_up(diameter, 1), PUPIL_MIN_MM, PUPIL_MAX_MM)


def age_factor_for_pupil(age: float) -> float:
    """Senile miosis: about 0.6% smaller per year past 20, floored at 70%."""
    return max(0.7, 1 - (age - 20) * 0.006)


def calculate_retinal_illuminance(melanopic_lux: float, pupil_diameter: float) -> int:
    """Retinal illuminance proxy: melanopic lux x pupil area / 100."""
    if not (is_valid_number(melanopic_lux) and is_valid_number(pupil_diameter)):
        return 0

    pupil_area = math.pi * (pupil_diameter / 2) ** 2
    return round_int(melanopic_lux * pupil_area / 100)


def baseline_performance(hour: float) -> int:
    """Circadian alertness baseline for a decimal hour."""
    for start, end, value in BASELINE_PERFORMANCE:
        if start <= hour <= end:
            return value
    return NIGHT_PERFORMANCE


def predict_cognitive_performance(
    melanopic_lux: float,
    hour: float,
    pupil_diameter: Optional[float] = None,
    age: float = 25,
) -> int:
    """
    Predict cognitive performance (0-100) from light, time of day, pupil and age.

    total = (baseline(hour) + light_bonus + pupil_bonus) x age_factor

    - light_bonus: >=250 lux up to +20 (log-scaled), 100-249 lux +10,
      <50 lux during 9-17h -15
    - pupil_bonus: (8 - diameter) x 2, smaller pupils read as better focus
    - age_factor: 1 - |age - 27.5| x 0.005, peak around 25-30

    Args:
        melanopic_lux: Current melanopic EDI
        hour: Decimal hour of day (e.g. 14.5)
        pupil_diameter: Estimated pupil diameter in mm, if known
        age: Age in years

    Returns:
        Integer score clamped to [0, 100]; 50 for invalid light input.
        An invalid age counts as 25 and an invalid pupil adds no bonus.
    """
    if not is_valid_number(melanopic_lux) or not is_valid_number(hour):
        return NEUTRAL_PERFORMANCE
    if not is_valid_number(age) or age < 0:
        age = 25

    base = baseline_performance(hour)

    light_bonus = 0.0
    if melanopic_lux >= 250:
        light_bonus = min(20, math.log10(melanopic_lux / 100) * 15)
    elif melanopic_lux >= 100:
        light_bonus = 10
    elif melanopic_lux < 50 and 9 <= int(hour) <= 17:
        light_bonus = -15  # Insufficient daylight during work hours

    pupil_bonus = 0.0
    if is_valid_number(pupil_diameter) and pupil_diameter > 0:
        pupil_bonus = (8 - pupil_diameter) * 2

    age_factor = 1 - abs(age - 27.5) * 0.005

    total = (base + light_bonus + pupil_bonus) * age_factor
    return int(clamp(round_int(total), 0, 100))


def estimate_cognitive_performance(melanopic_lux: float, hour: float) -> int:
    """
    Quick cognitive estimate from light and time of day only.

    Coarser than predict_cognitive_performance (no pupil or age terms),
    used for at-a-glance advice. Baseline: 90 at 9-11h, 60 at 14-16h,
    80 at 17-19h, 40 from 22h to 6h, otherwise 70. Between 6h and 22h
    light adds up to +15 (>=250 lux, log-scaled) or +5 (>=100 lux), and
    dim light below 50 lux costs 10 plus 1 point per 5 lux of shortfall.
    """
    if not is_valid_number(melanopic_lux) or not is_valid_number(hour):
        return NEUTRAL_PERFORMANCE

    if 9 <= hour <= 11:
        base = 90
    elif 14 <= hour <= 16:
        base = 60
    elif 17 <= hour <= 19:
        base = 80
    elif hour >= 22 or hour <= 6:
        base = NIGHT_PERFORMANCE
    else:
        base = 70

    modifier = 0.0
    if 6 <= hour <= 22:
        if melanopic_lux >= 250:
            modifier = min(15, math.log10(melanopic_lux / 100) * 10)
        elif melanopic_lux >= 100:
            modifier = 5
        elif melanopic_lux < 50:
            modifier = -10 - (50 - melanopic_lux) / 5

    return int(clamp(round_int(base + modifier), 0, 100))
