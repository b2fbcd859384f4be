"""Tests for the dict-in / dict-out tool implementations."""

import json

import pytest
from helpers import readings

from circadian_light.tools import invoke_tool, snake_to_camel, to_wire
from circadian_light.types import SafetyAssessment


class TestWireFormat:
    """Tests for camelCase serialisation."""

    def test_snake_to_camel(self) -> None:
        assert snake_to_camel("max_safe_exposure") == "maxSafeExposure"
        assert snake_to_camel("ok") == "ok"

    def test_dataclass_to_dict(self) -> None:
        wire = to_wire(SafetyAssessment("caution", ("a", "b"), 30))
        assert wire == {"level": "caution", "warnings": ["a", "b"], "maxSafeExposure": 30}

    def test_none_passes_through(self) -> None:
        assert to_wire(None) is None


class TestInvokeTool:
    """Tests for the tool router."""

    def test_unknown_tool(self) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            invoke_tool("calculate_everything", {})

    def test_missing_argument(self) -> None:
        with pytest.raises(TypeError):
            invoke_tool("analyze_sample", {})

    def test_analyze_sample(self) -> None:
        result = invoke_tool(
            "analyze_sample",
            {"sample": {"r": 255, "g": 255, "b": 255, "lux": 1000}, "time_of_day": 8},
        )
        assert result["ok"] is True
        assert result["metrics"]["melanopicLux"] == 442
        assert result["metrics"]["circadianPhase"] == 0.8
        assert result["phaseShift"]["direction"] == "advance"
        assert result["sample"]["melanopicLux"] == 442

    def test_analyze_sample_invalid(self) -> None:
        result = invoke_tool("analyze_sample", {"sample": {"r": 255, "g": 255, "b": 255}})
        assert result == {"reason": "Sample has no usable timestamp", "ok": False}

    def test_daily_light_score(self) -> None:
        result = invoke_tool(
            "daily_light_score", {"history": readings(7, 300, 30), "timezone": "UTC"}
        )
        assert result["lightScore"] == 55
        assert result["summary"]["avgMelanopic"] == 300
        assert result["summary"]["readingCount"] == 30
        assert result["insights"] == []

    def test_daily_light_score_empty(self) -> None:
        result = invoke_tool("daily_light_score", {"history": []})
        assert result == {"lightScore": 0, "summary": None, "insights": []}

    def test_biological_time(self) -> None:
        result = invoke_tool(
            "biological_time",
            {
                "history": readings(8, 1000, 10),
                "chronotype": "intermediate",
                "now": "2026-01-15T12:00:00",
                "timezone": "UTC",
            },
        )
        assert result["clockTime"] == 12.0
        assert result["phaseShift"] == 1.0
        assert result["alignment"] == "phase-advanced"

    def test_therapy_recommendation(self) -> None:
        result = invoke_tool(
            "therapy_recommendation",
            {
                "metrics": {"melanopicLux": 5, "retinalStress": 10},
                "time_of_day": 7.0,
                "user_profile": {"conditions": ["SAD"]},
            },
        )
        assert result["main"]["type"] == "morning_boost"
        assert result["main"]["target"]["melanopicLux"] == 150
        assert result["main"]["timing"]["optimalStart"] == 6.5
        assert [r["type"] for r in result["recommendations"]] == [
            "bright_light_therapy",
            "blue_light_therapy",
        ]
        assert result["recommendations"][0]["targetLux"] == 500
        assert result["userProfile"]["conditions"] == ["SAD"]

    def test_therapy_recommendation_invalid(self) -> None:
        result = invoke_tool("therapy_recommendation", {"metrics": {}, "time_of_day": 7.0})
        assert result["type"] == "invalid"
        assert result["actions"] == []
        assert result["recommendations"] == []

    def test_optimal_light_levels(self) -> None:
        result = invoke_tool("optimal_light_levels", {"time_of_day": 12})
        assert result["levels"]["melanopicLux"] == 200
        assert result["levels"]["nextTransition"] == "Begin dimming after 5 PM"
        assert result["timing"]["phase"] == "daytime_maintenance"

    def test_spectral_analysis(self) -> None:
        result = invoke_tool("spectral_analysis", {"r": 255, "g": 255, "b": 255})
        assert result["spectralBalance"] == "balanced-spectrum"
        assert result["nearestIlluminant"] == "D65"
        assert len(result["chromaticity"]) == 2
        assert 6400 <= result["colorTemp"] <= 6600

    def test_spectral_analysis_dark(self) -> None:
        result = invoke_tool("spectral_analysis", {"r": 0, "g": 0, "b": 0})
        assert result["chromaticity"] is None
        assert result["nearestIlluminant"] is None

    def test_light_recommendations(self) -> None:
        result = invoke_tool(
            "light_recommendations",
            {"metrics": {"melanopicLux": 5, "retinalStress": 10}, "time_of_day": 7.0},
        )
        assert [r["id"] for r in result["recommendations"]] == [
            "therapy-main",
            "morning_light",
            "research-bright_light_therapy",
        ]
        assert result["recommendations"][1]["action"] == {
            "kind": "timer",
            "target": 250,
            "duration": 900,
            "message": None,
        }
        assert result["interventions"] == []

    def test_light_recommendations_interventions(self) -> None:
        result = invoke_tool(
            "light_recommendations",
            {"metrics": {"melanopicLux": 30}, "time_of_day": 11.0, "limit": 1},
        )
        assert len(result["recommendations"]) == 1
        assert result["interventions"][1]["benefit"] == "Window light provides 500-2000 mel-lux"

    def test_results_are_json_serialisable(self) -> None:
        result = invoke_tool(
            "therapy_recommendation",
            {"metrics": {"melanopicLux": 400, "retinalStress": 85}, "time_of_day": 19.0},
        )
        assert json.loads(json.dumps(result)) == result
