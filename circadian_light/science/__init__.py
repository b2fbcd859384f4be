"""
Circadian Light Science Layer.

Pure photometric and circadian science functions with no notion of users or
recommendations. Every function is deterministic and takes time explicitly.

Modules:
- spectral: RGB -> melanopic lux, color temperature, spectral balance
- dose_response: melatonin suppression, circadian stimulus, retinal stress,
  pupil diameter, cognitive performance
- prc: Light phase response curve (Khalsa 2003, clock-time simplification)
- markers: Biological time estimation from recent exposure history
"""

from .dose_response import (
    calculate_circadian_stimulus,
    calculate_melatonin_suppression,
    calculate_retinal_illuminance,
    calculate_retinal_stress_score,
    estimate_cognitive_performance,
    estimate_pupil_diameter,
    predict_cognitive_performance,
)
from .markers import calculate_biological_time, classify_alignment
from .prc import LightPRC, calculate_phase_shift, get_phase_shift_recommendation
from .spectral import (
    analyze_spectral_power_distribution,
    calculate_blue_exposure,
    calculate_blue_light_hazard,
    calculate_chromaticity,
    calculate_color_temperature,
    calculate_melanopic_lux,
    estimate_color_temperature_coarse,
    nearest_illuminant,
)

__all__ = [
    # Spectral
    "calculate_melanopic_lux",
    "calculate_color_temperature",
    "calculate_chromaticity",
    "nearest_illuminant",
    "estimate_color_temperature_coarse",
    "calculate_blue_light_hazard",
    "calculate_blue_exposure",
    "analyze_spectral_power_distribution",
    # Dose-response
    "calculate_melatonin_suppression",
    "calculate_circadian_stimulus",
    "calculate_retinal_stress_score",
    "estimate_pupil_diameter",
    "calculate_retinal_illuminance",
    "predict_cognitive_performance",
    "estimate_cognitive_performance",
    # Phase
    "LightPRC",
    "calculate_phase_shift",
    "get_phase_shift_recommendation",
    "calculate_biological_time",
    "classify_alignment",
]
