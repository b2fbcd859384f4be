"""
Spectral model: RGB sensor channels to melanopic and colorimetric quantities.

Scientific basis:
- Melanopic action spectrum: CIE S 026/E:2018 (peak ~480 nm)
- M-EDI conversion factor 1.3262: CIE S 026/E:2018, D65 melanopic efficacy ratio
- sRGB -> XYZ matrix: IEC 61966-2-1 (linear, D65 white point)
- CCT approximation: McCamy CS (1992). Color Res Appl, 17(2), 142-144.

The sensor only reports three broad channels, so each result here is an
approximation of the true spectral quantity, not a measurement.
"""

import math
from types import MappingProxyType
from typing import Optional, Tuple

import structlog

from ..circadian_math import clamp, is_valid_number, normalize_channel, round_half_up, round_int
from ..types import SpectralAnalysis

logger = structlog.get_logger()

# Per-channel melanopic sensitivity
MELANOPIC_WEIGHTS = MappingProxyType({
    "red": 0.001,  # 630-700 nm: negligible melanopsin response
    "green": 0.754,  # 500-565 nm: overlaps the 480 nm peak tail heavily
    "blue": 0.245,  # 450-485 nm
})

MEDI_CONVERSION_FACTOR = 1.3262

# Linear sRGB -> CIE XYZ (rows: X, Y, Z)
SRGB_TO_XYZ = (
    (0.412453, 0.357580, 0.180423),
    (0.212671, 0.715160, 0.072169),
    (0.019334, 0.119193, 0.950227),
)

# CIE standard illuminant chromaticities, for reference comparisons
ILLUMINANTS = MappingProxyType({
    "D65": (0.31271, 0.32902),  # Daylight
    "A": (0.44757, 0.40745),  # Incandescent
    "F2": (0.37208, 0.37529),  # Cool white fluorescent
})

CCT_MIN = 1800
CCT_MAX = 10000
CCT_NO_SIGNAL = 5500  # Invalid input / no chromaticity
CCT_ZERO_CHANNEL = 5000  # Coarse estimator: a channel reads zero

BLUE_HAZARD_WEIGHT = 0.85  # Blue-light hazard function peaks at 435-440 nm

WAVELENGTH_MIN = 380
WAVELENGTH_MAX = 700


def _all_valid(*values: object) -> bool:
    return all(is_valid_number(v) for v in values)


def calculate_melanopic_lux(r: float, g: float, b: float, visible_lux: float) -> int:
    """
    Convert an RGB + lux reading to melanopic EDI (equivalent daylight illuminance).

    melanopic_ratio = weighted channel response / channel sum
    M-EDI = lux x melanopic_ratio x 1.3262

    Args:
        r, g, b: Channel readings, nominally 0-255 (clamped)
        visible_lux: Photopic illuminance

    Returns:
        Melanopic lux rounded to an integer, never negative. 0 for invalid
        input or an all-dark reading.
    """
    if not _all_valid(r, g, b, visible_lux):
        logger.debug("invalid_light_sample", r=r, g=g, b=b, lux=visible_lux)
        return 0

    r_norm = normalize_channel(r)
    g_norm = normalize_channel(g)
    b_norm = normalize_channel(b)

    total = r_norm + g_norm + b_norm
    if total == 0:
        return 0

    response = (
        r_norm * MELANOPIC_WEIGHTS["red"]
        + g_norm * MELANOPIC_WEIGHTS["green"]
        + b_norm * MELANOPIC_WEIGHTS["blue"]
    )
    melanopic_ratio = response / total

    medi = visible_lux * melanopic_ratio * MEDI_CONVERSION_FACTOR
    return max(0, round_int(medi))


def calculate_color_temperature(r: float, g: float, b: float) -> int:
    """
    Estimate correlated color temperature (Kelvin) from RGB.

    RGB -> XYZ -> chromaticity (x, y) -> McCamy cubic:
        n = (x - 0.3320) / (0.1858 - y)
        CCT = 437n^3 + 3601n^2 + 6861n + 5517

    Returns:
        Kelvin clamped to [1800, 10000]; 5500 when there is no usable signal.
    """
    if not _all_valid(r, g, b):
        return CCT_NO_SIGNAL

    chromaticity = calculate_chromaticity(r, g, b)
    if chromaticity is None:
        return CCT_NO_SIGNAL
    x, y = chromaticity

    denominator = 0.1858 - y
    if denominator == 0:
        return CCT_NO_SIGNAL

    n = (x - 0.3320) / denominator
    # Repeated multiplication saturates to inf instead of raising OverflowError
    cct = 437 * n * n * n + 3601 * n * n + 6861 * n + 5517
    if math.isnan(cct):
        return CCT_NO_SIGNAL

    return round_int(clamp(cct, CCT_MIN, CCT_MAX))


def calculate_chromaticity(r: float, g: float, b: float) -> Optional[Tuple[float, float]]:
    """
    CIE 1931 (x, y) chromaticity of an RGB reading.

    Returns:
        (x, y) tuple, or None for invalid input or an all-dark reading
    """
    if not _all_valid(r, g, b):
        return None

    rgb = (normalize_channel(r), normalize_channel(g), normalize_channel(b))
    x_, y_, z_ = (sum(w * c for w, c in zip(row, rgb)) for row in SRGB_TO_XYZ)

    total = x_ + y_ + z_
    if total == 0:
        return None
    return (x_ / total, y_ / total)


def nearest_illuminant(r: float, g: float, b: float) -> Optional[str]:
    """
    Name the CIE standard illuminant closest in chromaticity to the reading.

    Useful for labelling a source as daylight (D65), incandescent (A) or
    fluorescent (F2). Returns None when the reading has no chromaticity.
    """
    chromaticity = calculate_chromaticity(r, g, b)
    if chromaticity is None:
        return None

    x, y = chromaticity
    return min(
        ILLUMINANTS,
        key=lambda name: math.hypot(x - ILLUMINANTS[name][0], y - ILLUMINANTS[name][1]),
    )


def estimate_color_temperature_coarse(r: float, g: float, b: float) -> int:
    """
    Bucket color temperature from the blue/red ratio alone.

    Cheap sanity estimate for sensors without a calibrated green channel.
    Any zero (or invalid) channel yields the 5000K fallback.
    """
    if not _all_valid(r, g, b) or r == 0 or g == 0 or b == 0:
        return CCT_ZERO_CHANNEL

    ratio = b / r
    if ratio < 0.5:
        return 2700
    elif ratio < 1.0:
        return 4000
    elif ratio < 1.5:
        return 5500
    return 6500


def calculate_blue_light_hazard(b: float, total_light: float) -> int:
    """
    Blue-light hazard weighted share of the reading (0-100).

    The blue channel (~450-485 nm) sits just above the 435-440 nm hazard
    peak, so it is weighted at 0.85.
    """
    if not _all_valid(b, total_light) or total_light == 0:
        return 0

    blue_ratio = clamp(b, 0, 255) / max(1, total_light)
    hazard = blue_ratio * BLUE_HAZARD_WEIGHT * 100
    return int(clamp(round_int(hazard), 0, 100))


def calculate_blue_exposure(r: float, g: float, b: float) -> int:
    """
    Blue share of the reading as a percentage (0-100).

    The +1 in the denominator keeps an all-dark reading at 0.
    """
    if not _all_valid(r, g, b):
        return 0

    r_c, g_c, b_c = clamp(r, 0, 255), clamp(g, 0, 255), clamp(b, 0, 255)
    share = b_c / (r_c + g_c + b_c + 1) * 100
    return int(clamp(round_int(share), 0, 100))


def _classify_balance(red: float, green: float, blue: float) -> str:
    # Precedence order matters: a red-heavy reading is warm even if blue > 40
    if red > 50:
        return "warm-red-dominant"
    if blue > 40:
        return "cool-blue-dominant"
    if green > 45:
        return "green-dominant"
    if abs(red - blue) < 10:
        return "balanced-spectrum"
    return "mixed-spectrum"


def analyze_spectral_power_distribution(r: float, g: float, b: float) -> SpectralAnalysis:
    """
    Split a reading into channel power percentages and classify it.

    Args:
        r, g, b: Channel readings, nominally 0-255 (clamped)

    Returns:
        SpectralAnalysis with percentages to 1 decimal and a dominant
        wavelength estimate of 470 + (red% - blue%) x 2, clamped to 380-700 nm.
    """
    if not _all_valid(r, g, b):
        return SpectralAnalysis(
            red_power=0,
            green_power=0,
            blue_power=0,
            spectral_balance="unknown",
            dominant_wavelength=500,
        )

    r_c, g_c, b_c = clamp(r, 0, 255), clamp(g, 0, 255), clamp(b, 0, 255)
    total = r_c + g_c + b_c
    if total == 0:
        return SpectralAnalysis(
            red_power=33.3,
            green_power=33.3,
            blue_power=33.3,
            spectral_balance="neutral",
            dominant_wavelength=500,
        )

    red = r_c / total * 100
    green = g_c / total * 100
    blue = b_c / total * 100

    wavelength = 470 + (red - blue) * 2

    return SpectralAnalysis(
        red_power=round_half_up(red, 1),
        green_power=round_half_up(green, 1),
        blue_power=round_half_up(blue, 1),
        spectral_balance=_classify_balance(red, green, blue),
        dominant_wavelength=int(clamp(round_int(wavelength), WAVELENGTH_MIN, WAVELENGTH_MAX)),
    )
