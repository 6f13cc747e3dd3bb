#!/usr/bin/env python3

"""FastAPI web application for Video AI Studio"""

import asyncio
import datetime
import json
import logging
import os
import queue
import re
import tempfile
import uuid
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response, StreamingResponse

from configuration import Configuration, load_env_file

# Load .env file if present (no dependency on python-dotenv)
load_env_file()

import batch_processor
import combined_analysis
import frame_extractor
import report_service
import scene_selection
import video_templates
from gcp_api_services import gcs_api_service
from gcp_api_services import video_intelligence_service
from integrations import conversion_service, crm_service, workflow_webhook_service
from models import (
    AnalysisOptions,
    ReconstructionOptions,
    VertexAIAnalysis,
    VideoAnalysisResult,
    VideoGenerationOptions,
)
from video_analyzer import VideoAnalysisError, VideoAnalyzer, VideoGenerationError

# ---------------------------------------------------------------------------
# Environment mode
# ---------------------------------------------------------------------------
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
_is_production = ENVIRONMENT == "production"

# ---------------------------------------------------------------------------
# Structured logging (JSON for Cloud Run -> Cloud Logging)
# ---------------------------------------------------------------------------
if _is_production:

  class _CloudJsonFormatter(logging.Formatter):
    """Emit JSON lines compatible with Cloud Logging structured logs."""
    def format(self, record):
      log_entry = {
          "severity": record.levelname,
          "message": record.getMessage(),
          "module": record.module,
          "function": record.funcName,
          "line": record.lineno,
      }
      if record.exc_info and record.exc_info[0]:
        log_entry["exception"] = self.formatException(record.exc_info)
      return json.dumps(log_entry)

  _handler = logging.StreamHandler()
  _handler.setFormatter(_CloudJsonFormatter())
  logging.root.handlers = [_handler]
  logging.root.setLevel(logging.INFO)
else:
  logging.basicConfig(level=logging.INFO)

# Attach webhook error handler: ERROR/CRITICAL logs become alerts.
import error_logging
if error_logging.install():
  logging.info("Error alerting enabled")
else:
  logging.warning("ALERT_WEBHOOK_URL not set, error alerts disabled")

app = FastAPI(
    title="Video AI Studio",
    version="1.0",
    docs_url=None if _is_production else "/docs",
    redoc_url=None if _is_production else "/redoc",
)


# ---------------------------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------------------------
_ALLOWED_ORIGINS = os.environ.get(
    "ALLOWED_ORIGINS",
    "http://localhost:8080,http://localhost:3000" if not _is_production else "",
).split(",")
_ALLOWED_ORIGINS = [o.strip() for o in _ALLOWED_ORIGINS if o.strip()]

if _ALLOWED_ORIGINS:
  app.add_middleware(
      CORSMiddleware,
      allow_origins=_ALLOWED_ORIGINS,
      allow_credentials=True,
      allow_methods=["GET", "POST"],
      allow_headers=["*"],
  )


# ---------------------------------------------------------------------------
# Security headers middleware
# ---------------------------------------------------------------------------
from starlette.middleware.base import BaseHTTPMiddleware

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
  async def dispatch(self, request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
    if _is_production:
      response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response

app.add_middleware(SecurityHeadersMiddleware)


# ---------------------------------------------------------------------------
# Rate limiting (slowapi)
# ---------------------------------------------------------------------------
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=["200/minute"])
app.state.limiter = limiter

@app.exception_handler(RateLimitExceeded)
async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
  return JSONResponse(
      {"error": "rate_limited", "message": "Too many requests. Please slow down."},
      status_code=429,
  )


# ---------------------------------------------------------------------------
# Configuration and in-memory stores
# ---------------------------------------------------------------------------
CONFIG = Configuration.from_env()

MISSING_INPUT_MESSAGE = "Please provide API key and select a video file"

_ALLOWED_VIDEO_EXTENSIONS = {
    ".mp4", ".m4v", ".mov", ".webm", ".avi", ".mkv", ".mpeg", ".mpg", ".3gp",
}

# Oldest entries are evicted past these sizes.
MAX_STORED_REPORTS = 500
MAX_STORED_VIDEOS = 20

# report_id -> stored report (see _store_report)
results_store: OrderedDict[str, dict] = OrderedDict()
# job_id -> generated MP4 bytes
video_store: OrderedDict[str, bytes] = OrderedDict()


def build_config(api_key: Optional[str] = None) -> Configuration:
  """Server configuration, with the dashboard-supplied API key if any."""
  return CONFIG.with_api_key(api_key)


def get_analyzer(config: Configuration) -> VideoAnalyzer:
  return VideoAnalyzer(config)


def _error(error: str, message: str, status_code: int) -> JSONResponse:
  return JSONResponse({"error": error, "message": message}, status_code=status_code)


def _new_id() -> str:
  return uuid.uuid4().hex[:12]


def _remember(store: OrderedDict, key: str, value, limit: int) -> None:
  store[key] = value
  while len(store) > limit:
    evicted, _ = store.popitem(last=False)
    logging.info("Evicted %s from the in-memory store", evicted)


def _video_mime_type(upload: UploadFile) -> Optional[str]:
  """The client-declared type when it is a video type, else None (use the filename)."""
  content_type = (upload.content_type or "").lower()
  return content_type if content_type.startswith("video/") else None


def _safe_filename(filename: Optional[str]) -> str:
  """Strip path components and keep only safe characters."""
  raw_name = Path(filename or "upload.mp4").name
  safe_name = re.sub(r"[^a-zA-Z0-9._-]", "_", raw_name)
  if not safe_name or safe_name.startswith("."):
    safe_name = f"upload_{uuid.uuid4().hex[:8]}.mp4"
  return safe_name


def _check_upload(filename: str, size_bytes: int, config: Configuration) -> Optional[JSONResponse]:
  """Return an error response for an unsupported or oversized upload."""
  ext = Path(filename.lower()).suffix
  if ext not in _ALLOWED_VIDEO_EXTENSIONS:
    return _error(
        "unsupported_format",
        f"Unsupported file format ({ext or 'unknown'}). "
        f"Supported: {', '.join(sorted(_ALLOWED_VIDEO_EXTENSIONS))}",
        415,
    )
  size_mb = size_bytes / (1024 * 1024)
  if size_mb > config.max_upload_mb:
    return _error(
        "file_too_large",
        f"File size {size_mb:.1f}MB exceeds {config.max_upload_mb}MB limit",
        413,
    )
  return None


def _save_upload(content: bytes, filename: str) -> tuple[str, str]:
  """Write an upload to a fresh temp dir; returns (tmp_dir, path)."""
  tmp_dir = tempfile.mkdtemp(prefix="studio_upload_")
  path = os.path.join(tmp_dir, _safe_filename(filename))
  with open(path, "wb") as f:
    f.write(content)
  return tmp_dir, path


def _store_report(video_name: str, result: VideoAnalysisResult, ptd_optimized: bool, **extra) -> dict:
  report_id = _new_id()
  entry = {
      "report_id": report_id,
      "timestamp": datetime.datetime.now().isoformat(timespec="seconds"),
      "video_name": video_name,
      "ptd_optimized": ptd_optimized,
      "result": result.to_dict(),
      **extra,
  }
  _remember(results_store, report_id, entry, MAX_STORED_REPORTS)
  return entry


def _store_video(video_bytes: bytes) -> str:
  """Keep generated bytes in memory and return the URL that serves them."""
  job_id = _new_id()
  _remember(video_store, job_id, video_bytes, MAX_STORED_VIDEOS)
  return f"/api/video/{job_id}"


def _analysis_options(extract_frames: int, ptd_optimized: bool) -> AnalysisOptions:
  return AnalysisOptions(
      extract_frames=max(0, min(int(extract_frames), 120)),
      ptd_fitness_optimized=ptd_optimized,
  )


async def _json_body(request: Request) -> dict:
  try:
    body = await request.json()
  except (ValueError, UnicodeDecodeError):
    return {}
  return body if isinstance(body, dict) else {}


# ---------------------------------------------------------------------------
# Pages and health
# ---------------------------------------------------------------------------

@app.get("/", response_class=HTMLResponse)
async def serve_frontend():
  """Serve the dashboard page."""
  html_path = Path(__file__).parent / "static" / "index.html"
  return HTMLResponse(content=html_path.read_text())


@app.get("/health")
async def health_check():
  """Health check for uptime monitoring and load balancer probes."""
  return JSONResponse({
      "status": "healthy",
      "version": app.version,
      "credentials": "configured" if CONFIG.has_credentials else "missing",
      "storage": "configured" if CONFIG.bucket_name else "missing",
  })


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

@app.post("/api/analyze", response_model=None)
@limiter.limit("10/minute")
async def analyze(
    request: Request,
    file: Optional[UploadFile] = File(None),
    api_key: str = Form(""),
    ptd_optimized: bool = Form(False),
    extract_frames: int = Form(30),
):
  """Analyze one uploaded video and return the dashboard data."""
  config = build_config(api_key)
  if not config.has_credentials or file is None or not file.filename:
    return _error("missing_input", MISSING_INPUT_MESSAGE, 400)

  content = await file.read()
  upload_error = _check_upload(file.filename, len(content), config)
  if upload_error:
    return upload_error

  logging.info("Received file: %s (%.2f MB)", file.filename, len(content) / (1024 * 1024))
  tmp_dir, path = _save_upload(content, file.filename)
  options = _analysis_options(extract_frames, ptd_optimized)
  try:
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(
        None, get_analyzer(config).analyze_video, path, _video_mime_type(file), options,
    )
  except frame_extractor.FrameExtractionError as ex:
    return _error("invalid_video", str(ex), 422)
  except VideoAnalysisError as ex:
    return _error("analysis_failed", str(ex), 502)
  finally:
    frame_extractor.cleanup_temp_dir(tmp_dir)

  entry = _store_report(file.filename, result, ptd_optimized)
  report_id = entry["report_id"]
  return JSONResponse({
      "report_id": report_id,
      "report_url": f"/report/{report_id}",
      "result": entry["result"],
  })


@app.post("/api/analyze_batch", response_model=None)
@limiter.limit("10/minute")
async def analyze_batch(
    request: Request,
    files: list[UploadFile] = File(...),
    api_key: str = Form(""),
    ptd_optimized: bool = Form(False),
    extract_frames: int = Form(30),
):
  """Analyze several videos, a few at a time; one failure never stops the rest."""
  config = build_config(api_key)
  if not config.has_credentials or not files:
    return _error("missing_input", MISSING_INPUT_MESSAGE, 400)

  options = _analysis_options(extract_frames, ptd_optimized)
  uploads = []
  for upload in files:
    content = await upload.read()
    uploads.append((upload.filename or "upload.mp4", _video_mime_type(upload), content))

  analyzer = get_analyzer(config)

  def _worker(item):
    filename, content_type, content = item
    rejected = _check_upload(filename, len(content), config)
    if rejected:
      raise ValueError(json.loads(rejected.body)["message"])
    tmp_dir, path = _save_upload(content, filename)
    try:
      return analyzer.analyze_video(path, content_type, options)
    finally:
      frame_extractor.cleanup_temp_dir(tmp_dir)

  loop = asyncio.get_event_loop()
  outcomes = await loop.run_in_executor(
      None, batch_processor.process_batch, uploads, _worker, config.batch_max_concurrency,
  )

  items = []
  for outcome in outcomes:
    filename = outcome.item[0]
    item = {"filename": filename, "ok": outcome.ok}
    if outcome.ok:
      entry = _store_report(filename, outcome.result, ptd_optimized)
      item["report_id"] = entry["report_id"]
      item["result"] = entry["result"]
    else:
      item["error"] = outcome.error
    items.append(item)

  return JSONResponse({
      "results": items,
      "succeeded": sum(1 for i in items if i["ok"]),
      "failed": sum(1 for i in items if not i["ok"]),
  })


@app.post("/api/analyze_combined", response_model=None)
@limiter.limit("10/minute")
async def analyze_combined(
    request: Request,
    file: Optional[UploadFile] = File(None),
    api_key: str = Form(""),
    ptd_optimized: bool = Form(False),
    extract_frames: int = Form(30),
):
  """Gemini analysis plus Video Intelligence annotations, merged."""
  config = build_config(api_key)
  if not config.has_credentials or file is None or not file.filename:
    return _error("missing_input", MISSING_INPUT_MESSAGE, 400)
  if not config.bucket_name:
    return _error("storage_not_configured", "Set GCS_BUCKET_NAME to run the combined analysis", 400)

  content = await file.read()
  upload_error = _check_upload(file.filename, len(content), config)
  if upload_error:
    return upload_error

  tmp_dir, path = _save_upload(content, file.filename)
  options = _analysis_options(extract_frames, ptd_optimized)
  mime_type = _video_mime_type(file)

  def _run():
    blob_name = f"uploads/{_new_id()}_{_safe_filename(file.filename)}"
    gcs_uri = gcs_api_service.upload_file(config, path, blob_name, mime_type)
    with ThreadPoolExecutor(max_workers=2) as pool:
      gemini_future = pool.submit(get_analyzer(config).analyze_video, path, mime_type, options)
      vertex_future = pool.submit(video_intelligence_service.annotate_video, gcs_uri)
      try:
        vertex = vertex_future.result()
      except Exception as ex:
        logging.error("Video Intelligence annotation failed: %s", ex)
        vertex = VertexAIAnalysis()
      gemini = gemini_future.result()
    return gcs_uri, combined_analysis.combine_analyses(gemini, vertex)

  try:
    loop = asyncio.get_event_loop()
    gcs_uri, combined = await loop.run_in_executor(None, _run)
  except frame_extractor.FrameExtractionError as ex:
    return _error("invalid_video", str(ex), 422)
  except VideoAnalysisError as ex:
    return _error("analysis_failed", str(ex), 502)
  except Exception as ex:
    logging.error("Combined analysis failed: %s", ex, exc_info=True)
    return _error("analysis_failed", f"Combined analysis failed: {ex}", 502)
  finally:
    frame_extractor.cleanup_temp_dir(tmp_dir)

  entry = _store_report(
      file.filename, combined.gemini, ptd_optimized,
      video_uri=gcs_uri, combined=combined.to_dict(),
  )
  return JSONResponse({
      "report_id": entry["report_id"],
      "report_url": f"/report/{entry['report_id']}",
      "analysis": entry["combined"],
  })


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@app.get("/api/results/{report_id}")
async def get_results(report_id: str):
  """Get stored results for a report."""
  data = results_store.get(report_id)
  if data:
    return JSONResponse(data)
  return JSONResponse({"error": "No results found"}, status_code=404)


@app.get("/report/{report_id}", response_class=HTMLResponse)
async def serve_report(report_id: str):
  """Serve a shareable standalone HTML report."""
  data = results_store.get(report_id)
  if not data:
    return HTMLResponse("<h1>Report not found</h1>", status_code=404)
  html = report_service.generate_report_html(data, report_url=f"/report/{report_id}")
  return HTMLResponse(content=html)


@app.get("/api/report/{report_id}/pdf")
async def download_pdf(report_id: str):
  """Generate and download a PDF of the analysis report."""
  data = results_store.get(report_id)
  if not data:
    return JSONResponse({"error": "Report not found"}, status_code=404)

  try:
    loop = asyncio.get_event_loop()
    pdf_bytes = await loop.run_in_executor(
        None, report_service.generate_report_pdf, data
    )
  except Exception as ex:
    logging.error("PDF generation failed for %s: %s", report_id, ex, exc_info=True)
    return JSONResponse({"error": f"PDF generation failed: {ex}"}, status_code=500)

  video_name = Path(data.get("video_name", "report")).stem.replace(" ", "_")
  filename = f"video_analysis_{video_name}_{report_id}.pdf"
  return Response(
      content=pdf_bytes,
      media_type="application/pdf",
      headers={"Content-Disposition": f'attachment; filename="{filename}"'},
  )


# ---------------------------------------------------------------------------
# Video generation (Server-Sent Events)
# ---------------------------------------------------------------------------

def _sse(msg: dict) -> str:
  return f"data: {json.dumps(msg)}\n\n"


def _generation_stream(run):
  """Stream progress of run(on_progress) -> dict as SSE, ending in done/error."""
  progress_q: queue.Queue = queue.Queue()

  def on_progress(message: str):
    progress_q.put({"step": "progress", "message": message})

  async def event_stream():
    loop = asyncio.get_event_loop()
    task = loop.run_in_executor(None, run, on_progress)
    while True:
      try:
        while True:
          yield _sse(progress_q.get_nowait())
      except queue.Empty:
        pass

      if task.done():
        while not progress_q.empty():
          yield _sse(progress_q.get_nowait())
        try:
          final = task.result()
        except Exception as ex:
          logging.error("Video generation failed: %s", ex)
          yield _sse({"step": "error", "message": str(ex) or "Video generation failed"})
          return
        yield _sse({"step": "done", **final})
        return
      await asyncio.sleep(0.5)

  return StreamingResponse(event_stream(), media_type="text/event-stream")


@app.post("/api/generate_video", response_model=None)
@limiter.limit("10/minute")
async def generate_video(request: Request):
  """Generate a video from a prompt; progress streamed as SSE."""
  body = await _json_body(request)
  prompt = str(body.get("prompt") or "").strip()
  config = build_config(body.get("api_key"))
  if not config.has_credentials:
    return _error("missing_api_key", "Please provide API key", 400)
  if not prompt:
    return _error("missing_prompt", "Please provide a prompt", 400)
  options = VideoGenerationOptions.from_dict(body.get("options") or body)

  def _run(on_progress):
    video_bytes = get_analyzer(config).generate_video(prompt, options, on_progress=on_progress)
    url = _store_video(video_bytes)
    return {"job_id": url.rsplit("/", 1)[-1], "video_url": url}

  return _generation_stream(_run)


@app.get("/api/video/{job_id}")
async def serve_video(job_id: str):
  """Serve a generated video."""
  video_bytes = video_store.get(job_id)
  if video_bytes is None:
    return JSONResponse({"error": "Video not found"}, status_code=404)
  return Response(
      content=video_bytes,
      media_type="video/mp4",
      headers={"Content-Disposition": f'inline; filename="generated_{job_id}.mp4"'},
  )


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@app.get("/api/templates")
async def get_templates():
  """List the ad script templates."""
  return JSONResponse({
      "templates": [
          {
              "id": t.id,
              "name": t.name,
              "targetAudience": t.target_audience,
              "duration": t.duration,
              "aspectRatio": t.aspect_ratio,
              "optimizationScore": t.optimization_score.to_dict(),
          }
          for t in video_templates.list_templates()
      ]
  })


@app.get("/api/templates/{template_id}")
async def get_template(template_id: str):
  template = video_templates.get_template(template_id)
  if template is None:
    return JSONResponse({"error": "Template not found"}, status_code=404)
  data = template.to_dict()
  data["prompt"] = video_templates.template_to_prompt(template)
  return JSONResponse(data)


@app.post("/api/templates/{template_id}/generate", response_model=None)
@limiter.limit("10/minute")
async def generate_from_template(template_id: str, request: Request):
  """Generate a video from a template's composed prompt (SSE)."""
  template = video_templates.get_template(template_id)
  if template is None:
    return JSONResponse({"error": "Template not found"}, status_code=404)
  body = await _json_body(request)
  config = build_config(body.get("api_key"))
  if not config.has_credentials:
    return _error("missing_api_key", "Please provide API key", 400)

  overrides = body.get("options") or {}
  options = VideoGenerationOptions.from_dict({
      "aspectRatio": template.aspect_ratio,
      "duration": template.duration,
      **overrides,
  })
  prompt = video_templates.template_to_prompt(template)

  def _run(on_progress):
    video_bytes = get_analyzer(config).generate_video(prompt, options, on_progress=on_progress)
    url = _store_video(video_bytes)
    return {"job_id": url.rsplit("/", 1)[-1], "video_url": url, "template_id": template.id}

  return _generation_stream(_run)


# ---------------------------------------------------------------------------
# Reconstruction
# ---------------------------------------------------------------------------

@app.post("/api/reconstruct/{report_id}", response_model=None)
@limiter.limit("10/minute")
async def reconstruct(report_id: str, request: Request):
  """Plan (and optionally generate) a re-edit built from the best scenes."""
  entry = results_store.get(report_id)
  if not entry:
    return JSONResponse({"error": "Report not found"}, status_code=404)

  body = await _json_body(request)
  analysis = VideoAnalysisResult.from_dict(entry["result"])
  raw_options = body.get("options") or {}
  if not isinstance(raw_options, dict):
    return _error("invalid_options", "options must be a JSON object", 400)
  try:
    options = ReconstructionOptions.from_dict(raw_options)
  except (TypeError, ValueError) as ex:
    return _error("invalid_options", f"Invalid reconstruction options: {ex}", 400)
  if all(raw_options.get(k) is None for k in ("ptdFitnessOptimized", "ptd_fitness_optimized")):
    options.ptd_fitness_optimized = bool(entry.get("ptd_optimized"))

  selected = scene_selection.select_scenes(analysis.scenes, options)
  if not selected:
    return _error("no_scenes", "No scenes available for reconstruction", 400)
  plan = {
      "selectedScenes": [
          i + 1 for i, s in enumerate(analysis.scenes) if any(s is x for x in selected)
      ],
      "duration": sum(s.duration for s in selected),
      "prompt": scene_selection.build_reconstruction_prompt(analysis, selected, options),
      "improvements": scene_selection.describe_improvements(analysis, selected, options),
  }
  if not body.get("generate"):
    return JSONResponse({"report_id": report_id, "plan": plan})

  config = build_config(body.get("api_key"))
  if not config.has_credentials:
    return _error("missing_api_key", "Please provide API key", 400)
  try:
    loop = asyncio.get_event_loop()
    video = await loop.run_in_executor(
        None, scene_selection.reconstruct_video,
        get_analyzer(config), analysis, options, _store_video,
    )
  except VideoGenerationError as ex:
    return _error("generation_failed", str(ex), 502)
  except ValueError as ex:
    return _error("no_scenes", str(ex), 400)

  entry["video_url"] = video.video_url
  return JSONResponse({"report_id": report_id, "plan": plan, "video": video.to_dict()})


# ---------------------------------------------------------------------------
# Integrations
# ---------------------------------------------------------------------------

def _report_scores(report_id: Optional[str]) -> dict:
  """Headline numbers of a stored report, for CRM properties and webhooks."""
  entry = results_store.get(report_id or "")
  if not entry:
    return {}
  result = entry["result"]
  scenes = result.get("scenes", [])
  scores = {
      "video_report_id": report_id,
      "video_scene_count": len(scenes),
  }
  if scenes:
    scores["video_engagement_score"] = round(
        sum(float(s.get("score", 0) or 0) for s in scenes) / len(scenes), 1
    )
  if result.get("ptdScores"):
    scores["video_conversion_score"] = result["ptdScores"].get("overall", 0)
  return scores


@app.post("/api/integrations/{integration}", response_model=None)
async def run_integration(integration: str, request: Request):
  """Push results to a CRM, a workflow webhook or a conversion pixel."""
  body = await _json_body(request)
  scores = _report_scores(body.get("report_id"))
  for key in ("properties", "data", "custom_data"):
    if body.get(key) is not None and not isinstance(body[key], dict):
      return _error("invalid_payload", f"{key} must be a JSON object", 400)
  loop = asyncio.get_event_loop()

  if integration == "crm":
    email = str(body.get("email") or "").strip()
    if not email:
      return _error("missing_email", "email is required", 400)
    properties = {**scores, **(body.get("properties") or {})}
    sent = await loop.run_in_executor(None, crm_service.upsert_contact, CONFIG, email, properties)
  elif integration == "webhook":
    event = str(body.get("event") or "analysis_completed")
    data = {**scores, **(body.get("data") or {})}
    sent = await loop.run_in_executor(None, workflow_webhook_service.trigger_workflow, CONFIG, event, data)
  elif integration == "conversion":
    sent = await loop.run_in_executor(
        None,
        lambda: conversion_service.send_conversion_event(
            CONFIG,
            str(body.get("event_name") or "Lead"),
            email=str(body.get("email") or ""),
            phone=str(body.get("phone") or ""),
            custom_data=body.get("custom_data") or None,
            event_source_url=str(body.get("event_source_url") or ""),
        ),
    )
  else:
    return JSONResponse({"error": "Unknown integration"}, status_code=404)

  return JSONResponse({"integration": integration, "sent": bool(sent)})


if __name__ == "__main__":
  import uvicorn
  uvicorn.run(app, host="0.0.0.0", port=8080)
