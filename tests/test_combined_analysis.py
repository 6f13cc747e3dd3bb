"""Tests for combined_analysis.py."""

import pytest

from combined_analysis import (
    combine_analyses,
    conversion_score,
    gemini_quality,
    quality_score,
    vertex_quality,
)
from models import (
    Face,
    Label,
    ObjectTracking,
    Shot,
    TextAnnotation,
    TextSegment,
    TimeSegment,
    TrackedFrame,
    VertexAIAnalysis,
    VideoAnalysisResult,
)


@pytest.fixture()
def vertex():
    return VertexAIAnalysis(
        shots=[Shot(0, 4), Shot(4, 12)],
        labels=[Label(entity="gym", confidence=0.8), Label(entity="person", confidence=0.9)],
        faces=[Face(segments=[TimeSegment(1.0, 3.5)]), Face(), Face()],
        text=[TextAnnotation(text="FREE CONSULTATION", segments=[TextSegment(30.0, 34.0, 0.97)])],
        objects=[
            ObjectTracking(
                entity="person", confidence=0.95,
                frames=[TrackedFrame(2.0, {"left": 0.1, "top": 0.2, "right": 0.6, "bottom": 0.9})],
            ),
        ],
    )


class TestQuality:
    def test_gemini_mean(self, sample_analysis):
        assert gemini_quality(sample_analysis) == pytest.approx(63)

    def test_vertex_mean_scaled(self, vertex):
        assert vertex_quality(vertex) == pytest.approx(85)

    def test_weighted_blend(self, sample_analysis, vertex):
        assert quality_score(sample_analysis, vertex) == pytest.approx(71.8)

    def test_only_gemini(self, sample_analysis):
        assert quality_score(sample_analysis, VertexAIAnalysis()) == pytest.approx(63)

    def test_only_vertex(self, vertex):
        assert quality_score(VideoAnalysisResult(), vertex) == pytest.approx(85)

    def test_nothing(self):
        assert quality_score(VideoAnalysisResult(), VertexAIAnalysis()) == 0.0


class TestConversion:
    def test_ptd_overall_wins(self, ptd_analysis):
        assert conversion_score(ptd_analysis, 50) == 77

    def test_penalty_per_urgent_recommendation(self, sample_analysis):
        # one recommendation with priority >= 8
        assert conversion_score(sample_analysis, 80) == pytest.approx(76.0)

    def test_penalty_capped(self):
        from models import Recommendation
        analysis = VideoAnalysisResult(recommendations=[Recommendation(priority=10)] * 20)
        assert conversion_score(analysis, 80) == pytest.approx(40.0)


class TestCombine:
    def test_combined_view(self, sample_analysis, vertex):
        combined = combine_analyses(sample_analysis, vertex).combined
        assert combined["summary"] == sample_analysis.summary
        assert len(combined["scenes"]) == 5
        assert "shots" not in combined
        assert len(combined["faces"]) == 3
        assert combined["faces"][0]["segments"] == [{"startTime": 1.0, "endTime": 3.5}]
        assert combined["text"] == [{
            "text": "FREE CONSULTATION",
            "segments": [{"startTime": 30.0, "endTime": 34.0, "confidence": 0.97}],
        }]
        assert combined["objects"][0]["entity"] == "person"
        assert combined["objects"][0]["frames"][0]["boundingBox"]["right"] == 0.6
        assert combined["qualityScore"] == pytest.approx(71.8)
        assert combined["conversionScore"] == pytest.approx(68.2)

    def test_to_dict_has_both_sources(self, sample_analysis):
        data = combine_analyses(sample_analysis, VertexAIAnalysis()).to_dict()
        assert set(data) == {"gemini", "vertex", "combined"}
        assert data["vertex"]["labels"] == []
