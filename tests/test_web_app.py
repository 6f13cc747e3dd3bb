"""Tests for web_app.py endpoints (analyzer and Google services mocked)."""

import json

import pytest

import frame_extractor
import web_app
from video_analyzer import VideoAnalysisError, VideoGenerationError


def _upload(name="ad.mp4", content=b"fake-mp4", content_type="video/mp4"):
    return {"file": (name, content, content_type)}


def _sse_messages(response):
    return [
        json.loads(line[len("data: "):])
        for line in response.text.splitlines()
        if line.startswith("data: ")
    ]


@pytest.fixture()
def stored_report(client, mock_analyzer, sample_analysis):
    mock_analyzer.analyze_video.return_value = sample_analysis
    resp = client.post("/api/analyze", files=_upload(), data={"api_key": "k"})
    assert resp.status_code == 200
    return resp.json()["report_id"]


@pytest.fixture()
def ptd_report(client, mock_analyzer, sample_analysis):
    mock_analyzer.analyze_video.return_value = sample_analysis
    resp = client.post("/api/analyze", files=_upload(), data={"api_key": "k", "ptd_optimized": "true"})
    assert resp.status_code == 200
    return resp.json()["report_id"]


# ---------------------------------------------------------------------------
# Pages and health
# ---------------------------------------------------------------------------

class TestPages:
    def test_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Video AI Studio" in resp.text
        assert "/api/analyze_batch" in resp.text
        assert "multiple" in resp.text

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["credentials"] == "missing"
        assert data["storage"] == "missing"

    def test_security_headers(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    @pytest.mark.parametrize("name,expected", [
        ("../../etc/passwd.mp4", "passwd.mp4"),
        ("my video (1).mp4", "my_video__1_.mp4"),
    ])
    def test_safe_filename(self, name, expected):
        assert web_app._safe_filename(name) == expected

    def test_hidden_filename_replaced(self):
        assert web_app._safe_filename(".env").startswith("upload_")

    def test_frame_count_clamped(self):
        assert web_app._analysis_options(500, False).extract_frames == 120
        assert web_app._analysis_options(-4, True).extract_frames == 0

    def test_build_config_keeps_server_settings(self):
        config = web_app.build_config(" user-key ")
        assert config.api_key == "user-key"
        assert config.max_upload_mb == web_app.CONFIG.max_upload_mb


# ---------------------------------------------------------------------------
# /api/analyze
# ---------------------------------------------------------------------------

class TestAnalyze:
    def test_missing_api_key(self, client):
        resp = client.post("/api/analyze", files=_upload())
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide API key and select a video file"

    def test_missing_file(self, client):
        resp = client.post("/api/analyze", data={"api_key": "k"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "missing_input"

    def test_unsupported_format(self, client, mock_analyzer):
        resp = client.post("/api/analyze", files=_upload("notes.txt", b"x", "text/plain"),
                           data={"api_key": "k"})
        assert resp.status_code == 415
        mock_analyzer.analyze_video.assert_not_called()

    def test_too_large(self, client, monkeypatch):
        monkeypatch.setattr(web_app.CONFIG, "max_upload_mb", 0)
        resp = client.post("/api/analyze", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 413

    def test_success(self, client, mock_analyzer, sample_analysis):
        mock_analyzer.analyze_video.return_value = sample_analysis
        resp = client.post("/api/analyze", files=_upload(),
                           data={"api_key": "k", "ptd_optimized": "true", "extract_frames": "12"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["report_url"] == f"/report/{body['report_id']}"
        assert body["result"]["summary"] == sample_analysis.summary
        assert len(body["result"]["recommendations"]) == 2

        path, mime, options = mock_analyzer.analyze_video.call_args.args
        assert path.endswith("ad.mp4")
        assert mime == "video/mp4"
        assert options.extract_frames == 12
        assert options.ptd_fitness_optimized is True
        assert web_app.results_store[body["report_id"]]["ptd_optimized"] is True

    def test_generic_content_type_falls_back_to_filename(self, client, mock_analyzer, sample_analysis):
        mock_analyzer.analyze_video.return_value = sample_analysis
        resp = client.post("/api/analyze", files=_upload(name="ad.mov", content_type="application/octet-stream"),
                           data={"api_key": "k"})
        assert resp.status_code == 200
        path, mime, _ = mock_analyzer.analyze_video.call_args.args
        assert path.endswith("ad.mov")
        assert mime is None

    def test_invalid_video(self, client, mock_analyzer):
        mock_analyzer.analyze_video.side_effect = frame_extractor.FrameExtractionError("Failed to load video")
        resp = client.post("/api/analyze", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 422
        assert resp.json() == {"error": "invalid_video", "message": "Failed to load video"}

    def test_analysis_failure(self, client, mock_analyzer):
        mock_analyzer.analyze_video.side_effect = VideoAnalysisError("Failed to analyze video: quota")
        resp = client.post("/api/analyze", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 502
        assert resp.json()["error"] == "analysis_failed"


# ---------------------------------------------------------------------------
# /api/analyze_batch and /api/analyze_combined
# ---------------------------------------------------------------------------

class TestBatchAndCombined:
    def test_batch_isolates_failures(self, client, mock_analyzer, sample_analysis):
        def analyze(path, mime, options):
            if path.endswith("broken.mp4"):
                raise VideoAnalysisError("Failed to analyze video: bad")
            return sample_analysis
        mock_analyzer.analyze_video.side_effect = analyze

        files = [
            ("files", ("one.mp4", b"1", "video/mp4")),
            ("files", ("broken.mp4", b"2", "video/mp4")),
            ("files", ("notes.txt", b"3", "text/plain")),
        ]
        resp = client.post("/api/analyze_batch", files=files, data={"api_key": "k"})
        assert resp.status_code == 200
        body = resp.json()
        assert [r["filename"] for r in body["results"]] == ["one.mp4", "broken.mp4", "notes.txt"]
        assert [r["ok"] for r in body["results"]] == [True, False, False]
        assert body["succeeded"] == 1
        assert body["failed"] == 2
        assert "Unsupported file format" in body["results"][2]["error"]
        assert body["results"][0]["report_id"] in web_app.results_store

    def test_batch_needs_api_key(self, client):
        resp = client.post("/api/analyze_batch", files=[("files", ("a.mp4", b"1", "video/mp4"))])
        assert resp.status_code == 400

    def test_combined_needs_bucket(self, client):
        resp = client.post("/api/analyze_combined", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "storage_not_configured"

    def test_combined_success(self, client, mock_analyzer, sample_analysis, monkeypatch):
        from models import Label, VertexAIAnalysis
        monkeypatch.setattr(web_app.CONFIG, "bucket_name", "studio-bucket")
        monkeypatch.setattr(web_app.gcs_api_service, "upload_file",
                            lambda config, path, name, content_type=None: f"gs://studio-bucket/{name}")
        monkeypatch.setattr(web_app.video_intelligence_service, "annotate_video",
                            lambda uri: VertexAIAnalysis(labels=[Label("gym", 0.9)]))
        mock_analyzer.analyze_video.return_value = sample_analysis

        resp = client.post("/api/analyze_combined", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["analysis"]["combined"]["qualityScore"] == pytest.approx(73.8)
        stored = web_app.results_store[body["report_id"]]
        assert stored["video_uri"].startswith("gs://studio-bucket/uploads/")

    def test_combined_survives_annotation_failure(self, client, mock_analyzer, sample_analysis, monkeypatch):
        def fail(uri):
            raise RuntimeError("permission denied")
        monkeypatch.setattr(web_app.CONFIG, "bucket_name", "studio-bucket")
        monkeypatch.setattr(web_app.gcs_api_service, "upload_file", lambda *a, **k: "gs://studio-bucket/x")
        monkeypatch.setattr(web_app.video_intelligence_service, "annotate_video", fail)
        mock_analyzer.analyze_video.return_value = sample_analysis

        resp = client.post("/api/analyze_combined", files=_upload(), data={"api_key": "k"})
        assert resp.status_code == 200
        assert resp.json()["analysis"]["vertex"]["labels"] == []


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class TestReports:
    def test_results(self, client, stored_report):
        data = client.get(f"/api/results/{stored_report}").json()
        assert data["video_name"] == "ad.mp4"
        assert data["result"]["transcription"] == "Dubai men over 40, listen up."

    def test_html_report(self, client, stored_report):
        resp = client.get(f"/report/{stored_report}")
        assert resp.status_code == 200
        assert "Video Analysis" in resp.text

    def test_pdf(self, client, stored_report):
        resp = client.get(f"/api/report/{stored_report}/pdf")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF")
        assert f"video_analysis_ad_{stored_report}.pdf" in resp.headers["content-disposition"]

    @pytest.mark.parametrize("url", ["/api/results/nope", "/report/nope", "/api/report/nope/pdf"])
    def test_unknown_report(self, client, url):
        assert client.get(url).status_code == 404


# ---------------------------------------------------------------------------
# Video generation
# ---------------------------------------------------------------------------

class TestGenerateVideo:
    def test_missing_api_key(self, client):
        resp = client.post("/api/generate_video", json={"prompt": "A run"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide API key"

    def test_missing_prompt(self, client):
        resp = client.post("/api/generate_video", json={"api_key": "k", "prompt": "  "})
        assert resp.status_code == 400
        assert resp.json()["error"] == "missing_prompt"

    def test_stream_and_serve(self, client, mock_analyzer):
        def generate(prompt, options, on_progress=None):
            on_progress("Initializing video generation...")
            return b"mp4-bytes"
        mock_analyzer.generate_video.side_effect = generate

        resp = client.post("/api/generate_video", json={
            "api_key": "k", "prompt": "A run", "options": {"aspectRatio": "16:9"},
        })
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        messages = _sse_messages(resp)
        assert messages[0] == {"step": "progress", "message": "Initializing video generation..."}
        assert messages[-1]["step"] == "done"
        assert mock_analyzer.generate_video.call_args.args[1].aspect_ratio == "16:9"

        video = client.get(messages[-1]["video_url"])
        assert video.status_code == 200
        assert video.content == b"mp4-bytes"
        assert video.headers["content-type"] == "video/mp4"

    def test_stream_error(self, client, mock_analyzer):
        mock_analyzer.generate_video.side_effect = VideoGenerationError("Video generation failed")
        resp = client.post("/api/generate_video", json={"api_key": "k", "prompt": "A run"})
        assert _sse_messages(resp)[-1] == {"step": "error", "message": "Video generation failed"}

    def test_video_store_evicts_oldest(self, client, monkeypatch):
        monkeypatch.setattr(web_app, "MAX_STORED_VIDEOS", 2)
        urls = [web_app._store_video(data) for data in (b"one", b"two", b"three")]
        assert len(web_app.video_store) == 2
        assert client.get(urls[0]).status_code == 404
        assert client.get(urls[2]).content == b"three"

    def test_unknown_video(self, client):
        assert client.get("/api/video/nope").status_code == 404


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TestTemplates:
    def test_list(self, client):
        templates = client.get("/api/templates").json()["templates"]
        assert {t["id"] for t in templates} == {"dubai-men-40plus", "dubai-ladies-50plus"}

    def test_detail_includes_prompt(self, client):
        data = client.get("/api/templates/dubai-men-40plus").json()
        assert data["duration"] == 40
        assert data["prompt"].startswith("Dubai Men 40+")

    def test_unknown(self, client):
        assert client.get("/api/templates/nope").status_code == 404
        assert client.post("/api/templates/nope/generate", json={"api_key": "k"}).status_code == 404

    def test_generate_uses_template_settings(self, client, mock_analyzer):
        mock_analyzer.generate_video.return_value = b"mp4"
        resp = client.post("/api/templates/dubai-ladies-50plus/generate", json={"api_key": "k"})
        done = _sse_messages(resp)[-1]
        assert done["step"] == "done"
        assert done["template_id"] == "dubai-ladies-50plus"
        prompt, options = mock_analyzer.generate_video.call_args.args
        assert options.duration == 45
        assert options.aspect_ratio == "9:16"
        assert "Dubai Ladies Over 50" in prompt


# ---------------------------------------------------------------------------
# Reconstruction
# ---------------------------------------------------------------------------

class TestReconstruct:
    def test_plan(self, client, stored_report):
        resp = client.post(f"/api/reconstruct/{stored_report}", json={"options": {"targetDuration": 20}})
        assert resp.status_code == 200
        plan = resp.json()["plan"]
        assert plan["selectedScenes"] == [1, 3, 5]
        assert plan["duration"] == 19
        assert "Kept 3 of 5 scenes" in plan["improvements"]

    def test_generate(self, client, stored_report, mock_analyzer):
        mock_analyzer.generate_video.return_value = b"re-edit"
        resp = client.post(f"/api/reconstruct/{stored_report}",
                           json={"generate": True, "api_key": "k", "options": {"targetDuration": 20}})
        assert resp.status_code == 200
        video = resp.json()["video"]
        assert video["metadata"]["scenes"] == 3
        assert client.get(video["videoUrl"]).content == b"re-edit"
        assert web_app.results_store[stored_report]["video_url"] == video["videoUrl"]

    def test_generation_failure(self, client, stored_report, mock_analyzer):
        mock_analyzer.generate_video.side_effect = VideoGenerationError("Video generation failed")
        resp = client.post(f"/api/reconstruct/{stored_report}", json={"generate": True, "api_key": "k"})
        assert resp.status_code == 502

    def test_everything_excluded(self, client, stored_report):
        resp = client.post(f"/api/reconstruct/{stored_report}",
                           json={"options": {"excludeScenes": [1, 2, 3, 4, 5]}})
        assert resp.status_code == 400

    def test_unknown_report(self, client):
        assert client.post("/api/reconstruct/nope", json={}).status_code == 404

    def test_non_numeric_scene_number(self, client, stored_report):
        resp = client.post(f"/api/reconstruct/{stored_report}", json={"options": {"includeScenes": ["two"]}})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_options"

    def test_options_must_be_object(self, client, stored_report):
        resp = client.post(f"/api/reconstruct/{stored_report}", json={"options": [1, 2]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_options"

    def test_ptd_flag_defaults_to_report(self, client, ptd_report):
        resp = client.post(f"/api/reconstruct/{ptd_report}", json={})
        assert "free consultation offer" in resp.json()["plan"]["prompt"]

    @pytest.mark.parametrize("key", ["ptdFitnessOptimized", "ptd_fitness_optimized"])
    def test_ptd_flag_override(self, client, ptd_report, key):
        resp = client.post(f"/api/reconstruct/{ptd_report}", json={"options": {key: False}})
        assert resp.status_code == 200
        assert "free consultation offer" not in resp.json()["plan"]["prompt"]


# ---------------------------------------------------------------------------
# Integrations
# ---------------------------------------------------------------------------

class TestIntegrations:
    def test_crm_merges_report_scores(self, client, stored_report, monkeypatch):
        calls = []
        monkeypatch.setattr(web_app.crm_service, "upsert_contact",
                            lambda config, email, props: calls.append((email, props)) or True)
        resp = client.post("/api/integrations/crm", json={"email": "a@b.com", "report_id": stored_report})
        assert resp.json() == {"integration": "crm", "sent": True}
        email, props = calls[0]
        assert email == "a@b.com"
        assert props["video_scene_count"] == 5
        assert props["video_engagement_score"] == 63

    def test_crm_requires_email(self, client):
        assert client.post("/api/integrations/crm", json={}).status_code == 400

    def test_crm_properties_must_be_object(self, client):
        resp = client.post("/api/integrations/crm", json={"email": "a@b.c", "properties": ["x"]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_payload"

    def test_webhook_data_must_be_object(self, client):
        resp = client.post("/api/integrations/webhook", json={"event": "x", "data": "payload"})
        assert resp.status_code == 400

    def test_webhook_unconfigured_not_sent(self, client):
        resp = client.post("/api/integrations/webhook", json={"event": "x"})
        assert resp.json() == {"integration": "webhook", "sent": False}

    def test_conversion(self, client, monkeypatch):
        seen = {}

        def send(config, event_name, **kwargs):
            seen.update(kwargs, event_name=event_name)
            return True
        monkeypatch.setattr(web_app.conversion_service, "send_conversion_event", send)
        resp = client.post("/api/integrations/conversion", json={"email": "a@b.com"})
        assert resp.json()["sent"] is True
        assert seen["event_name"] == "Lead"
        assert seen["email"] == "a@b.com"

    def test_unknown_integration(self, client):
        assert client.post("/api/integrations/fax", json={}).status_code == 404
