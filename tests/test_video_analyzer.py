"""Tests for video_analyzer.py: the Gemini service is mocked."""

import base64
from unittest.mock import MagicMock, patch

import pytest

from configuration import Configuration
from models import AnalysisOptions, VideoGenerationOptions
from video_analyzer import VideoAnalysisError, VideoAnalyzer, VideoGenerationError

RECOMMENDATIONS_JSON = (
    '[{"type": "hook", "description": "Tighter open", "priority": 9, "implementation": "Cut 1s"}]'
)


@pytest.fixture()
def service():
    return MagicMock()


@pytest.fixture()
def analyzer(service):
    config = Configuration()
    config.set_parameters(api_key="k")
    return VideoAnalyzer(config, service=service)


@pytest.fixture()
def video_file(tmp_path):
    path = tmp_path / "ad.mp4"
    path.write_bytes(b"fake-mp4")
    return str(path)


class TestBuildAnalysisRequest:
    def test_video_then_frames(self, analyzer):
        frames = [base64.b64encode(b"f1").decode(), base64.b64encode(b"f2").decode()]
        request = analyzer.build_analysis_request(b"video", "video/mp4", frames, AnalysisOptions())
        assert [a.mime_type for a in request.attachments] == ["video/mp4", "image/jpeg", "image/jpeg"]
        assert request.attachments[0].data == b"video"
        assert request.attachments[2].data == b"f2"
        assert "**Scenes**" in request.prompt


class TestAnalyzeVideo:
    def test_full_flow(self, analyzer, service, video_file, analysis_json):
        service.execute_gemini.side_effect = [analysis_json, RECOMMENDATIONS_JSON]
        with patch("video_analyzer.frame_extractor.extract_video_frames",
                   return_value=[base64.b64encode(b"jpg").decode()]) as extract:
            result = analyzer.analyze_video(video_file, options=AnalysisOptions(extract_frames=12))

        extract.assert_called_once_with(video_file, 12, max_width=1280)
        assert result.summary == "A gym ad."
        assert len(result.scenes) == 1
        assert result.recommendations[0].description == "Tighter open"

        first_prompt, first_params = service.execute_gemini.call_args_list[0].args
        assert first_prompt.attachments[0].data == b"fake-mp4"
        assert first_prompt.attachments[0].mime_type == "video/mp4"
        assert len(first_prompt.attachments) == 2
        assert first_params is analyzer.config.llm_params
        second_params = service.execute_gemini.call_args_list[1].args[1]
        assert second_params is analyzer.config.recommendation_llm_params

    def test_ptd_option_changes_both_prompts(self, analyzer, service, video_file):
        service.execute_gemini.side_effect = ['{"summary": "s"}', "[]"]
        with patch("video_analyzer.frame_extractor.extract_video_frames", return_value=[]):
            analyzer.analyze_video(video_file, options=AnalysisOptions(ptd_fitness_optimized=True))
        first, second = (c.args[0].prompt for c in service.execute_gemini.call_args_list)
        assert "PTD FITNESS" in first
        assert "PTD Fitness ads" in second

    def test_analysis_failure_raises(self, analyzer, service, video_file):
        service.execute_gemini.side_effect = RuntimeError("model unavailable")
        with patch("video_analyzer.frame_extractor.extract_video_frames", return_value=[]):
            with pytest.raises(VideoAnalysisError, match="Failed to analyze video: model unavailable"):
                analyzer.analyze_video(video_file)

    def test_recommendation_failure_keeps_analysis(self, analyzer, service, video_file, analysis_json):
        service.execute_gemini.side_effect = [analysis_json, RuntimeError("rate limited")]
        with patch("video_analyzer.frame_extractor.extract_video_frames", return_value=[]):
            result = analyzer.analyze_video(video_file)
        assert result.summary == "A gym ad."
        assert result.recommendations == []

    def test_unparseable_response(self, analyzer, service, video_file):
        service.execute_gemini.side_effect = ["Sorry, I cannot help.", "[]"]
        with patch("video_analyzer.frame_extractor.extract_video_frames", return_value=[]):
            result = analyzer.analyze_video(video_file)
        assert result.summary == "Sorry, I cannot help."
        assert result.scenes == []


class TestGenerateVideo:
    def test_progress_and_enhanced_prompt(self, analyzer, service):
        service.generate_video.return_value = b"mp4"
        messages = []
        data = analyzer.generate_video(
            "Sunrise run", VideoGenerationOptions(style="documentary", duration=8),
            on_progress=messages.append,
        )
        assert data == b"mp4"
        assert messages[0] == "Initializing video generation..."
        prompt, options = service.generate_video.call_args.args
        assert prompt.startswith("Sunrise run. Style: documentary. Duration: approximately 8 seconds.")
        assert options.duration == 8

    def test_generation_error_propagates(self, analyzer, service):
        service.generate_video.side_effect = VideoGenerationError("Video generation failed")
        with pytest.raises(VideoGenerationError):
            analyzer.generate_video("x")
