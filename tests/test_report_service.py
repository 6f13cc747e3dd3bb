"""Tests for report_service module."""

import pytest

from models import PTDScores
from report_service import (
    _emotion_chart_html,
    _sanitize_pdf_text,
    _score_color,
    format_time,
    generate_report_html,
    generate_report_pdf,
)


@pytest.fixture()
def report_data(sample_analysis):
    return {
        "report_id": "abc123def456",
        "timestamp": "2026-02-22T19:00:00",
        "video_name": "Ad_<Alpha>.mp4",
        "result": sample_analysis.to_dict(),
    }


class TestHelpers:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"), (5, "0:05"), (65.4, "1:05"), (600, "10:00"), (None, "0:00"), (-3, "0:00"),
    ])
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_score_colors(self):
        assert _score_color(90) == "#16a34a"
        assert _score_color(70) == "#d97706"
        assert _score_color(10) == "#dc2626"

    def test_sanitize_replaces_unrenderable(self):
        assert _sanitize_pdf_text(" café \U0001F4AA ") == "café ?"

    def test_emotion_chart_needs_two_points(self):
        assert _emotion_chart_html([{"timestamp": 0, "intensity": 50}]) == ""
        svg = _emotion_chart_html([
            {"timestamp": 10, "emotion": "calm", "intensity": 20},
            {"timestamp": 0, "emotion": "excited", "intensity": 90},
        ])
        assert svg.startswith("<svg")
        assert svg.count("<circle") == 2


class TestGenerateReportHtml:
    def test_contains_sections(self, report_data):
        html = generate_report_html(report_data, "http://localhost/report/abc123def456")
        assert "<h1>Video Analysis</h1>" in html
        assert "A fitness ad for busy executives." in html
        assert "<h2>Scenes</h2>" in html
        assert "<h2>Key Moments</h2>" in html
        assert "<h2>Emotional Arc</h2>" in html
        assert "<h2>Transcription</h2>" in html
        assert "/api/report/abc123def456/pdf" in html
        assert "http://localhost/report/abc123def456" in html

    def test_video_name_escaped(self, report_data):
        html = generate_report_html(report_data)
        assert "Ad_&lt;Alpha&gt;.mp4" in html
        assert "Ad_<Alpha>" not in html

    def test_recommendations_sorted_by_priority(self, report_data):
        html = generate_report_html(report_data)
        assert html.index("Open with the audience callout") < html.index("Lower music under voiceover")

    def test_average_engagement(self, report_data):
        assert "Avg. Engagement" in generate_report_html(report_data)

    def test_ptd_scores_only_when_present(self, report_data, sample_analysis):
        assert "Conversion Funnel Scores" not in generate_report_html(report_data)
        sample_analysis.ptd_scores = PTDScores(hook_strength=80, overall=77)
        report_data["result"] = sample_analysis.to_dict()
        html = generate_report_html(report_data)
        assert "Conversion Funnel Scores" in html
        assert "Hook Strength" in html

    def test_video_embedded_when_url_known(self, report_data):
        assert "<video" not in generate_report_html(report_data)
        report_data["video_url"] = "/api/video/job1"
        assert 'src="/api/video/job1"' in generate_report_html(report_data)

    def test_empty_result(self):
        html = generate_report_html({"report_id": "x", "result": {}})
        assert "<h2>Scenes</h2>" not in html
        assert "Avg. Engagement" not in html


class TestGenerateReportPdf:
    def test_returns_pdf_bytes(self, report_data):
        pdf = generate_report_pdf(report_data)
        assert isinstance(pdf, bytes)
        assert pdf.startswith(b"%PDF")

    def test_ptd_and_unicode(self, report_data, ptd_analysis):
        ptd_analysis.summary = "Strong hook \u2014 weak CTA \U0001F4AA"
        report_data["result"] = ptd_analysis.to_dict()
        assert generate_report_pdf(report_data).startswith(b"%PDF")

    def test_empty_result(self):
        assert generate_report_pdf({"result": {}}).startswith(b"%PDF")
