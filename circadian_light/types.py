"""
Data structures for light analysis.

Inputs (LightSample, Reading, UserProfile) are plain dataclasses the
collaborators build; everything else is an engine output record.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Literal, Mapping, Optional, Union

from .circadian_math import is_valid_number

# =============================================================================
# Literal Types
# =============================================================================

PhaseDirection = Literal["advance", "delay", "none"]

Chronotype = Literal["morning", "intermediate", "evening"]

Alignment = Literal["well-aligned", "phase-advanced", "phase-delayed", "unknown"]

SpectralBalance = Literal[
    "warm-red-dominant",
    "cool-blue-dominant",
    "green-dominant",
    "balanced-spectrum",
    "mixed-spectrum",
    "neutral",  # Zero-sum reading (all channels dark)
    "unknown",  # Invalid reading
]

Urgency = Literal["low", "medium", "high", "critical"]

RecommendationType = Literal[
    "normal",
    "morning_boost",
    "morning_optimization",
    "daytime_boost",
    "evening_transition",
    "night_protection",
]

ProtocolType = Literal[
    "bright_light_therapy",
    "light_reduction",
    "blue_light_therapy",
    "circadian_alignment",
]

TimingPhase = Literal[
    "morning_activation",
    "daytime_maintenance",
    "evening_transition",
    "night_protection",
]

SafetyLevel = Literal["safe", "caution", "dangerous"]

AdviceActionKind = Literal["timer", "reduce", "increase", "alert"]


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class LightSample:
    """
    One instantaneous sensor reading.

    r, g, b are nominally 0-255 (out-of-range values are clamped by the
    calculations, never rejected). The two derived fields stay None until
    with_derived() fills them in.
    """

    r: float
    g: float
    b: float
    lux: float
    timestamp: Optional[int] = None  # Milliseconds since epoch

    # Derived
    melanopic_lux: Optional[int] = None
    color_temp: Optional[int] = None

    def with_derived(self, melanopic_lux: int, color_temp: int) -> "LightSample":
        """Return a copy with the derived fields attached."""
        return replace(self, melanopic_lux=melanopic_lux, color_temp=color_temp)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LightSample":
        """Build a sample from a sensor payload (missing channels read as 0)."""
        return cls(
            r=data.get("r", 0),
            g=data.get("g", 0),
            b=data.get("b", 0),
            lux=data.get("lux", 0),
            timestamp=data.get("timestamp"),
        )


@dataclass(frozen=True)
class Reading:
    """A stored history point: what the persistence layer hands back."""

    timestamp: Optional[int]  # Milliseconds since epoch
    melanopic_lux: Optional[float]


HistoryEntry = Union[Reading, LightSample, Mapping[str, Any]]


def coerce_reading(entry: Any) -> Reading:
    """
    Normalize one history entry into a Reading.

    Accepts Reading/LightSample objects or mappings using either the wire
    name ("melanopicLux") or the Python name ("melanopic_lux"). Anything
    else becomes an empty Reading that the callers skip.
    """
    if isinstance(entry, Reading):
        return entry
    if isinstance(entry, LightSample):
        return Reading(timestamp=entry.timestamp, melanopic_lux=entry.melanopic_lux)
    if isinstance(entry, Mapping):
        lux = entry.get("melanopicLux", entry.get("melanopic_lux"))
        return Reading(timestamp=entry.get("timestamp"), melanopic_lux=lux)
    return Reading(timestamp=None, melanopic_lux=None)


@dataclass(frozen=True)
class UserProfile:
    """User preferences owned by the UI/storage layer. Never mutated here."""

    chronotype: Chronotype = "intermediate"
    goals: tuple[str, ...] = ("general_wellness",)
    conditions: tuple[str, ...] = ()
    age: int = 25

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "UserProfile":
        """
        Build a profile from a stored dict, falling back to defaults for empty fields.

        An age that is not a positive finite number counts as 25.
        """
        data = data or {}
        return cls(
            chronotype=data.get("chronotype") or "intermediate",
            goals=tuple(data.get("goals") or ("general_wellness",)),
            conditions=tuple(data.get("conditions") or ()),
            age=data["age"] if is_valid_number(data.get("age")) and data["age"] > 0 else 25,
        )


# =============================================================================
# Engine Outputs
# =============================================================================


@dataclass(frozen=True)
class Metrics:
    """
    Engine output for one LightSample.

    All bounded fields are clamped before construction; the UI renders them as-is.
    circadian_phase is signed: positive = advance, negative = delay.
    """

    melanopic_lux: float
    circadian_phase: float
    blue_exposure: int  # 0-100 %
    cognitive_impact: int  # 0-100
    melatonin_suppression: int  # 0-100 %
    retinal_stress: int  # 0-100
    color_temp: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Metrics":
        """Build metrics from a UI dict (camelCase keys, missing fields read as 0)."""
        return cls(
            melanopic_lux=data.get("melanopicLux"),
            circadian_phase=data.get("circadianPhase", 0),
            blue_exposure=data.get("blueExposure", 0),
            cognitive_impact=data.get("cognitiveImpact", data.get("cognitivePerformance", 0)),
            melatonin_suppression=data.get("melatoninSuppression", 0),
            retinal_stress=data.get("retinalStress", 0),
            color_temp=data.get("colorTemp"),
        )


@dataclass(frozen=True)
class MetricsOk:
    """Successful analysis of one sample."""

    sample: LightSample  # With derived fields filled
    metrics: Metrics
    phase_shift: "PhaseShiftResult"
    ok: Literal[True] = True


@dataclass(frozen=True)
class MetricsInvalid:
    """Sample rejected as invalid input; the caller decides how to surface it."""

    reason: str
    ok: Literal[False] = False


MetricsResult = Union[MetricsOk, MetricsInvalid]


@dataclass(frozen=True)
class SpectralAnalysis:
    """Channel power split and coarse spectral classification."""

    red_power: float  # Percent of total
    green_power: float
    blue_power: float
    spectral_balance: SpectralBalance
    dominant_wavelength: int  # nm, clamped 380-700


@dataclass(frozen=True)
class PhaseShiftResult:
    """
    Phase-shift estimate for a single exposure.

    magnitude is always >= 0; direction carries the sign. direction == "none"
    means the magnitude is at or below the 0.1h reporting threshold.
    """

    direction: PhaseDirection
    magnitude: float  # Hours, 1 decimal
    recommendation: str

    @property
    def signed_magnitude(self) -> float:
        """Magnitude with sign applied (+advance, -delay, 0 for none)."""
        if self.direction == "advance":
            return self.magnitude
        if self.direction == "delay":
            return -self.magnitude
        return 0.0


@dataclass(frozen=True)
class BiologicalTime:
    """Estimated internal time against wall-clock time."""

    biological_time: float  # Hours, [0, 24)
    clock_time: float  # Hours, [0, 24)
    phase_shift: float  # Signed hours, 1 decimal
    alignment: Alignment


@dataclass(frozen=True)
class OptimalLightLevels:
    """Target light for a time of day."""

    melanopic_lux: float
    color_temp: int
    description: str
    next_transition: str


@dataclass(frozen=True)
class TimingWindow:
    """When the current light phase is best acted on."""

    phase: TimingPhase
    optimal_start: float  # Decimal hour
    optimal_end: float  # Decimal hour (night window wraps past midnight)
    optimal_duration: int  # Minutes
    next_window: str


@dataclass(frozen=True)
class SafetyAssessment:
    """Light safety level with user-facing warnings."""

    level: SafetyLevel
    warnings: tuple[str, ...]
    max_safe_exposure: int  # Minutes


@dataclass(frozen=True)
class TherapyProtocol:
    """Structured evidence-backed protocol attached to a recommendation."""

    type: ProtocolType
    duration: int  # Minutes
    target_lux: int
    timing: str  # "immediate", "gradual", "morning", "evening"
    evidence: str


@dataclass(frozen=True)
class MainRecommendation:
    """The single headline recommendation for the current reading."""

    type: RecommendationType
    urgency: Urgency
    message: str
    actions: tuple[str, ...]
    benefits: tuple[str, ...]
    duration: int  # Minutes
    target: OptimalLightLevels
    timing: TimingWindow
    safety: SafetyAssessment


@dataclass(frozen=True)
class TherapyRecommendation:
    """Headline recommendation plus any attached protocols."""

    main: MainRecommendation
    recommendations: tuple[TherapyProtocol, ...]
    user_profile: UserProfile


@dataclass(frozen=True)
class InvalidRecommendation:
    """Degraded result when the metrics cannot be interpreted."""

    message: str
    type: Literal["invalid"] = "invalid"
    actions: tuple[str, ...] = ()
    recommendations: tuple[TherapyProtocol, ...] = ()


@dataclass(frozen=True)
class AdviceAction:
    """Follow-up the UI can attach to a piece of advice."""

    kind: AdviceActionKind
    target: Optional[float] = None  # Melanopic lux
    duration: Optional[int] = None  # Seconds, for timers
    message: Optional[str] = None


@dataclass(frozen=True)
class Advice:
    """
    One entry in the user-facing recommendation list.

    Built from the therapy recommendation, its protocols, or one of the
    rule checks. id is unique within a list; the first entry for an id wins.
    """

    id: str
    type: str
    priority: Urgency
    title: str
    message: str
    actions: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    duration: Optional[int] = None  # Minutes
    action: Optional[AdviceAction] = None
    safety: Optional[SafetyAssessment] = None


@dataclass(frozen=True)
class InterventionSuggestion:
    """A quick practical fix for the current light level."""

    action: str
    duration: str
    benefit: str


@dataclass(frozen=True)
class DailyExposureSummary:
    """Aggregate statistics for one day of readings."""

    avg_melanopic: int
    max_melanopic: float
    min_melanopic: float
    light_score: int
    reading_count: int


@dataclass(frozen=True)
class Insight:
    """A pattern noticed across a day of readings."""

    type: Literal["pattern", "warning"]
    title: str
    description: str
    suggestion: str


@dataclass(frozen=True)
class SensorValidation:
    """Range check result for a raw sensor payload."""

    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)
