"""Best-effort JSON extraction from model responses."""

from __future__ import annotations

import json
import logging
import re

from models import Recommendation, VideoAnalysisResult

_JSON_FENCE = re.compile(r"```json\s*\n([\s\S]*?)\n\s*```")

SUMMARY_FALLBACK_CHARS = 500


def extract_json_text(response_text: str) -> str:
  """Return the body of the first ```json fenced block, or the whole text."""
  match = _JSON_FENCE.search(response_text or "")
  return match.group(1) if match else (response_text or "")


def parse_analysis_response(response_text: str) -> VideoAnalysisResult:
  """Parse the analysis JSON, falling back to an empty result.

  On a parse failure the first 500 characters of the raw text become the
  summary so the user still sees what the model said.
  """
  try:
    parsed = json.loads(extract_json_text(response_text))
    if not isinstance(parsed, dict):
      raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    result = VideoAnalysisResult.from_dict(parsed)
    result.recommendations = []
    return result
  except (ValueError, TypeError) as ex:
    logging.error("Failed to parse analysis response: %s", ex)
    return VideoAnalysisResult(summary=(response_text or "")[:SUMMARY_FALLBACK_CHARS])


def parse_recommendations(response_text: str) -> list[Recommendation]:
  """Parse a JSON array of recommendations; [] on any failure."""
  try:
    parsed = json.loads(extract_json_text(response_text))
  except (ValueError, TypeError) as ex:
    logging.error("Failed to parse recommendations: %s", ex)
    return []

  if isinstance(parsed, dict):
    parsed = parsed.get("recommendations", [])
  if not isinstance(parsed, list):
    logging.error("Recommendations response is not a list: %s", type(parsed).__name__)
    return []
  return [Recommendation.from_dict(r) for r in parsed if isinstance(r, dict)]
