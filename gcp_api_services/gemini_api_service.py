"""Thin wrapper around the GenAI SDK: content generation and Veo video jobs."""

from __future__ import annotations

import logging
import mimetypes
import time
from typing import Callable, Optional
from urllib.parse import urlparse

import requests
from google.genai import types

from configuration import Configuration
from gcp_api_services import gcs_api_service
from gcp_api_services.gcp_connection import get_genai_client
from models import LLMParameters, PromptConfig, VideoGenerationOptions

_VIDEO_MIME_TYPES = {
    "mp4": "video/mp4",
    "m4v": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "avi": "video/x-msvideo",
    "mkv": "video/x-matroska",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "3gp": "video/3gpp",
}

ProgressCallback = Optional[Callable[[str], None]]


class VideoGenerationError(Exception):
  """Raised when a video generation job finishes without a video."""


class GeminiAPIService:
  """Executes prompts and long-running video jobs against the Gemini API."""

  def __init__(self, config: Configuration):
    self.config = config

  @property
  def client(self):
    return get_genai_client(self.config)

  @staticmethod
  def _resolve_video_mime_type(uri: str) -> str:
    """Return a valid video MIME type for a file name, path or URL."""
    parsed = urlparse(uri)
    host = (parsed.netloc or "").lower()
    if "youtube.com" in host or "youtu.be" in host:
      return "video/mp4"
    path = parsed.path or uri
    ext = path.rsplit(".", 1)[-1].lower() if "." in path.rsplit("/", 1)[-1] else ""
    if ext in _VIDEO_MIME_TYPES:
      return _VIDEO_MIME_TYPES[ext]
    guessed, _ = mimetypes.guess_type(path)
    if guessed and guessed.startswith("video/"):
      return guessed
    return f"video/{ext}" if ext else "video/mp4"

  @staticmethod
  def build_parts(prompt_config: PromptConfig) -> list[types.Part]:
    """Prompt text first, then every inline attachment in order."""
    parts = [types.Part.from_text(text=prompt_config.prompt)]
    for attachment in prompt_config.attachments:
      parts.append(
          types.Part.from_bytes(data=attachment.data, mime_type=attachment.mime_type)
      )
    return parts

  def execute_gemini(
      self,
      prompt_config: PromptConfig,
      llm_params: LLMParameters,
  ) -> str:
    """Send a prompt (plus inline binary payloads) and return the response text.

    Args:
      prompt_config: Prompt text and inline attachments.
      llm_params: Model name and generation config.
    Returns:
      The raw response text ("" when the model returned nothing).
    """
    generation_config = dict(llm_params.generation_config)
    response = self.client.models.generate_content(
        model=llm_params.model_name,
        contents=self.build_parts(prompt_config),
        config=types.GenerateContentConfig(**generation_config),
    )
    text = response.text or ""
    logging.info(
        "%s returned %d chars (%d attachments sent)",
        llm_params.model_name, len(text), len(prompt_config.attachments),
    )
    return text

  # ------------------------------------------------------------------
  # Video generation
  # ------------------------------------------------------------------

  def start_video_generation(
      self,
      prompt: str,
      options: VideoGenerationOptions,
  ):
    """Start a long-running video generation job and return its operation."""
    return self.client.models.generate_videos(
        model=self.config.video_model,
        prompt=prompt,
        config=types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=options.resolution,
            aspect_ratio=options.aspect_ratio,
        ),
    )

  def wait_for_operation(
      self,
      operation,
      on_progress: ProgressCallback = None,
      sleep: Callable[[float], None] = time.sleep,
  ):
    """Poll a long-running operation until it is done.

    Sleeps config.video_poll_interval seconds between checks. There is no
    timeout; the caller owns cancellation.
    """
    while not operation.done:
      if on_progress:
        on_progress("Processing video... This may take a few minutes.")
      sleep(self.config.video_poll_interval)
      operation = self.client.operations.get(operation)
    return operation

  def download_generated_video(self, operation) -> bytes:
    """Return the bytes of the first generated video of a finished job."""
    error = getattr(operation, "error", None)
    if error:
      logging.error("Video generation job failed: %s", error)
      raise VideoGenerationError("Video generation failed")

    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    generated = getattr(response, "generated_videos", None) or []
    video = generated[0].video if generated else None
    if video is None:
      raise VideoGenerationError("Video generation failed")

    if getattr(video, "video_bytes", None):
      return video.video_bytes

    uri = getattr(video, "uri", None)
    if not uri:
      raise VideoGenerationError("Video generation failed")

    if uri.startswith("gs://"):
      return gcs_api_service.download_bytes(self.config, uri)

    resp = requests.get(uri, params={"key": self.config.api_key}, timeout=300)
    if resp.status_code != 200:
      logging.error("Generated video download failed (%d): %s", resp.status_code, resp.text[:200])
      raise VideoGenerationError(f"Failed to fetch generated video (HTTP {resp.status_code})")
    return resp.content

  def generate_video(
      self,
      prompt: str,
      options: VideoGenerationOptions,
      on_progress: ProgressCallback = None,
      sleep: Callable[[float], None] = time.sleep,
  ) -> bytes:
    """Start a job, poll it to completion and fetch the resulting MP4 bytes."""
    operation = self.start_video_generation(prompt, options)
    operation = self.wait_for_operation(operation, on_progress=on_progress, sleep=sleep)
    if on_progress:
      on_progress("Fetching generated video...")
    return self.download_generated_video(operation)


def get_gemini_api_service(config: Configuration) -> GeminiAPIService:
  return GeminiAPIService(config)
