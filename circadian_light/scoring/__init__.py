"""
Scoring & Recommendation Layer.

Turns science-layer outputs into user-facing targets, scores and advice.

Modules:
- optimal_levels: Target light and timing window for a time of day
- daily_score: Daily light hygiene score, exposure summary, pattern insights
- therapy: Light therapy recommendation state machine and safety assessment
- advisor: Prioritized advice list and quick intervention suggestions
"""

from .advisor import generate_recommendations, get_intervention_suggestions
from .daily_score import calculate_daily_light_score, generate_insights, summarize_daily_exposure
from .optimal_levels import get_optimal_light_levels, get_optimal_timing_recommendation
from .therapy import (
    TherapyPlanner,
    assess_light_safety,
    generate_light_therapy_recommendation,
    predict_performance_improvement,
)

__all__ = [
    "get_optimal_light_levels",
    "get_optimal_timing_recommendation",
    "calculate_daily_light_score",
    "summarize_daily_exposure",
    "generate_insights",
    "TherapyPlanner",
    "assess_light_safety",
    "predict_performance_improvement",
    "generate_light_therapy_recommendation",
    "generate_recommendations",
    "get_intervention_suggestions",
]
