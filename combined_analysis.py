"""Merges a Gemini analysis and Video Intelligence annotations into one view."""

from __future__ import annotations

from models import CombinedAnalysis, VertexAIAnalysis, VideoAnalysisResult

GEMINI_WEIGHT = 0.6
VERTEX_WEIGHT = 0.4
HIGH_PRIORITY = 8
PENALTY_PER_ISSUE = 0.05
MAX_PENALTY = 0.5


def gemini_quality(analysis: VideoAnalysisResult) -> float | None:
  """Mean scene score, or None when the model returned no scenes."""
  if not analysis.scenes:
    return None
  return sum(s.score for s in analysis.scenes) / len(analysis.scenes)


def vertex_quality(vertex: VertexAIAnalysis) -> float | None:
  """Mean label confidence on a 0-100 scale, or None without labels."""
  if not vertex.labels:
    return None
  return 100 * sum(l.confidence for l in vertex.labels) / len(vertex.labels)


def quality_score(analysis: VideoAnalysisResult, vertex: VertexAIAnalysis) -> float:
  gemini = gemini_quality(analysis)
  annotations = vertex_quality(vertex)
  if gemini is None and annotations is None:
    return 0.0
  if gemini is None:
    return round(annotations, 1)
  if annotations is None:
    return round(gemini, 1)
  return round(GEMINI_WEIGHT * gemini + VERTEX_WEIGHT * annotations, 1)


def conversion_score(analysis: VideoAnalysisResult, quality: float) -> float:
  """PTD overall score when present, else quality reduced per urgent issue."""
  if analysis.ptd_scores is not None and analysis.ptd_scores.overall > 0:
    return round(analysis.ptd_scores.overall, 1)
  issues = sum(1 for r in analysis.recommendations if r.priority >= HIGH_PRIORITY)
  penalty = min(MAX_PENALTY, PENALTY_PER_ISSUE * issues)
  return round(quality * (1 - penalty), 1)


def combine_analyses(gemini: VideoAnalysisResult, vertex: VertexAIAnalysis) -> CombinedAnalysis:
  quality = quality_score(gemini, vertex)
  combined = {
      "summary": gemini.summary,
      "scenes": [s.to_dict() for s in gemini.scenes],
      "timestamps": [t.to_dict() for t in gemini.timestamps],
      "recommendations": [r.to_dict() for r in gemini.recommendations],
      "labels": [l.to_dict() for l in vertex.labels],
      "faces": [f.to_dict() for f in vertex.faces],
      "text": [t.to_dict() for t in vertex.text],
      "objects": [o.to_dict() for o in vertex.objects],
      "qualityScore": quality,
      "conversionScore": conversion_score(gemini, quality),
  }
  return CombinedAnalysis(gemini=gemini, vertex=vertex, combined=combined)
