"""Analyzes uploaded videos with Gemini and generates new ones with Veo."""

from __future__ import annotations

import base64
import logging
import time
from typing import Callable

import analysis_prompts
import frame_extractor
import response_parser
from configuration import Configuration
from gcp_api_services.gemini_api_service import (
    GeminiAPIService,
    ProgressCallback,
    VideoGenerationError,
    get_gemini_api_service,
)
from models import (
    AnalysisOptions,
    InlinePayload,
    PromptConfig,
    Recommendation,
    VideoAnalysisResult,
    VideoGenerationOptions,
)

__all__ = ["VideoAnalysisError", "VideoAnalyzer", "VideoGenerationError"]


class VideoAnalysisError(Exception):
  """Raised when the analysis call to the model fails."""


class VideoAnalyzer:
  """Builds analysis requests (prompt + video + frames) and parses the replies."""

  def __init__(self, config: Configuration, service: GeminiAPIService | None = None):
    self.config = config
    self.service = service or get_gemini_api_service(config)

  def build_analysis_request(
      self,
      video_bytes: bytes,
      mime_type: str,
      frames: list[str],
      options: AnalysisOptions,
  ) -> PromptConfig:
    """Prompt text, then the inline video, then every frame as image/jpeg."""
    attachments = [InlinePayload(data=video_bytes, mime_type=mime_type)]
    for frame in frames:
      attachments.append(InlinePayload(data=base64.b64decode(frame), mime_type="image/jpeg"))
    return PromptConfig(
        prompt=analysis_prompts.build_analysis_prompt(options),
        attachments=attachments,
    )

  def analyze_video(
      self,
      video_path: str,
      mime_type: str | None = None,
      options: AnalysisOptions | None = None,
  ) -> VideoAnalysisResult:
    """Run the full analysis of a local video file.

    Args:
      video_path: Path of the uploaded video.
      mime_type: MIME type of the video; derived from the file name if empty.
      options: Frame count and which optional sections to request.
    Returns:
      The parsed analysis, with recommendations from the second model call.
    Raises:
      FrameExtractionError: the video cannot be probed.
      VideoAnalysisError: the analysis call itself failed.
    """
    options = options or AnalysisOptions()
    mime_type = mime_type or GeminiAPIService._resolve_video_mime_type(video_path)
    start = time.time()

    frames = frame_extractor.extract_video_frames(
        video_path, options.extract_frames, max_width=self.config.frame_max_width,
    )
    with open(video_path, "rb") as f:
      video_bytes = f.read()

    prompt_config = self.build_analysis_request(video_bytes, mime_type, frames, options)
    try:
      response_text = self.service.execute_gemini(prompt_config, self.config.llm_params)
    except Exception as ex:
      logging.error("Video analysis failed for %s: %s", video_path, ex)
      raise VideoAnalysisError(f"Failed to analyze video: {ex}") from ex

    result = response_parser.parse_analysis_response(response_text)
    result.recommendations = self.generate_recommendations(
        result, ptd_fitness_optimized=options.ptd_fitness_optimized,
    )
    logging.info(
        "Analyzed %s in %.1fs: %d scenes, %d recommendations",
        video_path, time.time() - start, len(result.scenes), len(result.recommendations),
    )
    return result

  def generate_recommendations(
      self,
      analysis: VideoAnalysisResult,
      ptd_fitness_optimized: bool = False,
  ) -> list[Recommendation]:
    """Ask the flash model for improvements; [] when the call or parse fails."""
    prompt = analysis_prompts.build_recommendation_prompt(analysis, ptd_fitness_optimized)
    try:
      response_text = self.service.execute_gemini(
          PromptConfig(prompt=prompt), self.config.recommendation_llm_params,
      )
    except Exception as ex:
      logging.error("Recommendation generation failed: %s", ex)
      return []
    return response_parser.parse_recommendations(response_text)

  def generate_video(
      self,
      prompt: str,
      options: VideoGenerationOptions | None = None,
      on_progress: ProgressCallback = None,
      sleep: Callable[[float], None] = time.sleep,
  ) -> bytes:
    """Generate a video from a text prompt and return the MP4 bytes.

    Raises:
      VideoGenerationError: the job finished without a video or the
        download failed.
    """
    options = options or VideoGenerationOptions()
    if on_progress:
      on_progress("Initializing video generation...")
    enhanced = analysis_prompts.enhance_video_prompt(prompt, options)
    logging.info("Starting video generation (%s, %s)", options.aspect_ratio, options.resolution)
    return self.service.generate_video(enhanced, options, on_progress=on_progress, sleep=sleep)
