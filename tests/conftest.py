"""Shared test fixtures."""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Ensure project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Override env vars BEFORE importing app modules so module-level config is predictable
os.environ["GEMINI_API_KEY"] = ""
os.environ["GEMINI_USE_VERTEXAI"] = "false"
os.environ["GCS_BUCKET_NAME"] = ""
os.environ["ALERT_WEBHOOK_URL"] = ""
os.environ["SLACK_WEBHOOK_URL"] = ""
os.environ["ENVIRONMENT"] = "test"

from models import (  # noqa: E402
    EmotionData,
    ObjectDetection,
    PTDScores,
    Recommendation,
    Scene,
    Timestamp,
    VideoAnalysisResult,
)


# ---------------------------------------------------------------------------
# Web app fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_analyzer():
    """A VideoAnalyzer stand-in returned by web_app.get_analyzer."""
    return MagicMock()


@pytest.fixture()
def client(mock_analyzer, monkeypatch):
    """FastAPI TestClient with the analyzer replaced and empty stores."""
    from fastapi.testclient import TestClient

    import web_app

    monkeypatch.setattr(web_app, "get_analyzer", lambda config: mock_analyzer)
    web_app.results_store.clear()
    web_app.video_store.clear()
    # Clear rate-limit buckets between tests
    web_app.limiter.reset()

    with TestClient(web_app.app) as c:
        yield c

    web_app.results_store.clear()
    web_app.video_store.clear()


# ---------------------------------------------------------------------------
# Analysis fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_scenes():
    return [
        Scene(start_time=0, end_time=4, description="Man stares into camera",
              dominant_emotion="confident", objects=["dumbbell"], score=70),
        Scene(start_time=4, end_time=12, description="Tired at office desk",
              dominant_emotion="sad", objects=[], score=55),
        Scene(start_time=12, end_time=22, description="Training with coach",
              dominant_emotion="determined", objects=["kettlebell", "coach"], score=90),
        Scene(start_time=22, end_time=30, description="Family dinner",
              dominant_emotion="happy", objects=[], score=60),
        Scene(start_time=30, end_time=35, description="Free consultation end card",
              dominant_emotion="excited", objects=["logo"], score=40),
    ]


@pytest.fixture()
def sample_analysis(sample_scenes):
    return VideoAnalysisResult(
        summary="A fitness ad for busy executives.",
        scenes=sample_scenes,
        timestamps=[
            Timestamp(time=1, description="Hook line", importance="high", actionable=True),
            Timestamp(time=31, description="CTA appears", importance="medium", actionable=False),
        ],
        recommendations=[
            Recommendation(type="hook", description="Open with the audience callout", priority=9,
                           implementation="Add 'Dubai Men Over 40' text at 0s"),
            Recommendation(type="audio", description="Lower music under voiceover", priority=4,
                           implementation="Duck music by 6dB"),
        ],
        emotions=[
            EmotionData(timestamp=0, emotion="confident", intensity=70),
            EmotionData(timestamp=15, emotion="determined", intensity=85),
        ],
        objects=[ObjectDetection(name="dumbbell", confidence=92, timestamps=[1.5])],
        transcription="Dubai men over 40, listen up.",
    )


@pytest.fixture()
def ptd_analysis(sample_analysis):
    sample_analysis.ptd_scores = PTDScores(
        hook_strength=80, problem_agitation=70, solution_clarity=75,
        transformation_appeal=65, cta_effectiveness=85, overall=77,
    )
    return sample_analysis


@pytest.fixture()
def analysis_json():
    """A raw model response: fenced JSON with camelCase keys."""
    return """Here is the analysis:
```json
{
  "summary": "A gym ad.",
  "scenes": [
    {"startTime": 0, "endTime": 5, "description": "Hook", "dominantEmotion": "excited",
     "objects": ["dumbbell"], "score": 88}
  ],
  "timestamps": [{"time": 2, "description": "Text overlay", "importance": "high", "actionable": true}],
  "emotions": [{"timestamp": 1, "emotion": "excited", "intensity": 80}],
  "objects": [{"name": "dumbbell", "confidence": 95, "timestamps": [1, 3]}],
  "transcription": "Stop scrolling."
}
```
"""
