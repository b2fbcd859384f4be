"""
Circadian Light Analysis

Converts ambient RGB + lux readings into circadian metrics (melanopic lux,
phase shift, melatonin suppression, cognitive performance) and turns them
into daily scores and light therapy recommendations.

Main entry point: analyze_sample (engine facade)
"""

from .engine import analyze_sample, analyze_sample_now, compute_metrics
from .scoring import (
    calculate_daily_light_score,
    generate_insights,
    generate_light_therapy_recommendation,
    generate_recommendations,
    get_optimal_light_levels,
    summarize_daily_exposure,
)
from .simulator import SensorFrame, SimulatedSensor
from .types import (
    Advice,
    BiologicalTime,
    InvalidRecommendation,
    LightSample,
    Metrics,
    MetricsInvalid,
    MetricsOk,
    PhaseShiftResult,
    Reading,
    TherapyRecommendation,
    UserProfile,
)

__all__ = [
    # Types
    "Advice",
    "LightSample",
    "Reading",
    "UserProfile",
    "Metrics",
    "MetricsOk",
    "MetricsInvalid",
    "PhaseShiftResult",
    "BiologicalTime",
    "TherapyRecommendation",
    "InvalidRecommendation",
    # Engine
    "compute_metrics",
    "analyze_sample",
    "analyze_sample_now",
    # Scoring
    "calculate_daily_light_score",
    "summarize_daily_exposure",
    "generate_insights",
    "get_optimal_light_levels",
    "generate_light_therapy_recommendation",
    "generate_recommendations",
    # Simulation
    "SimulatedSensor",
    "SensorFrame",
]
