"""Picks the best scenes of an analyzed video and rebuilds it around them."""

from __future__ import annotations

import logging
from typing import Callable

from gcp_api_services.gemini_api_service import ProgressCallback
from models import (
    OptimizeFor,
    ReconstructedVideo,
    ReconstructionOptions,
    Scene,
    VideoAnalysisResult,
    VideoGenerationOptions,
)

HOOK_WINDOW_SECONDS = 5.0
HOOK_BONUS = 15.0
CTA_BONUS = 15.0
EMOTION_BONUS = 10.0
BRAND_OBJECT_BONUS = 20.0
HIGH_PRIORITY = 8

CONVERSION_EMOTIONS = {
    "excited",
    "inspired",
    "confident",
    "motivated",
    "determined",
    "happy",
    "urgent",
}


def score_scene(scene: Scene, index: int, total: int, optimize_for: str) -> float:
  """Weighted score of a scene for the given goal.

  engagement: the model's score as is.
  conversion: 70% of the score, plus bonuses for the opening hook, the
    closing call-to-action and conversion-friendly emotions.
  brand: 80% of the score, plus a bonus when objects are on screen.
  """
  goal = (optimize_for or OptimizeFor.ENGAGEMENT.value).lower()
  if goal == OptimizeFor.CONVERSION.value:
    weighted = 0.7 * scene.score
    if scene.start_time < HOOK_WINDOW_SECONDS:
      weighted += HOOK_BONUS
    if index == total - 1:
      weighted += CTA_BONUS
    if scene.dominant_emotion.lower() in CONVERSION_EMOTIONS:
      weighted += EMOTION_BONUS
    return weighted
  if goal == OptimizeFor.BRAND.value:
    return 0.8 * scene.score + (BRAND_OBJECT_BONUS if scene.objects else 0.0)
  return scene.score


def select_scenes(scenes: list[Scene], options: ReconstructionOptions) -> list[Scene]:
  """Choose the scenes for a reconstruction.

  Scenes listed in options.include_scenes (1-based) are always kept and
  those in options.exclude_scenes never are; exclusion wins. The remaining
  scenes are added greedily by weighted score while they still fit in
  options.target_duration. Without a target every non-excluded scene is
  kept. The selection is returned in chronological order.
  """
  total = len(scenes)
  excluded = {n for n in options.exclude_scenes if 1 <= n <= total}
  forced = [n for n in dict.fromkeys(options.include_scenes) if 1 <= n <= total and n not in excluded]
  ignored = [n for n in options.include_scenes + options.exclude_scenes if not 1 <= n <= total]
  if ignored:
    logging.warning("Ignoring out-of-range scene numbers: %s", ignored)

  candidates = [n for n in range(1, total + 1) if n not in excluded]
  if options.target_duration is None:
    chosen = set(candidates)
  else:
    chosen = set(forced)
    used = sum(scenes[n - 1].duration for n in forced)
    ranked = sorted(
        (n for n in candidates if n not in chosen),
        key=lambda n: score_scene(scenes[n - 1], n - 1, total, options.optimize_for),
        reverse=True,
    )
    for n in ranked:
      duration = scenes[n - 1].duration
      if used + duration <= options.target_duration:
        chosen.add(n)
        used += duration

  return sorted((scenes[n - 1] for n in chosen), key=lambda s: s.start_time)


def build_reconstruction_prompt(
    analysis: VideoAnalysisResult,
    selected: list[Scene],
    options: ReconstructionOptions,
) -> str:
  """Describe the selected scenes as a single generation prompt."""
  goal = options.optimize_for or OptimizeFor.ENGAGEMENT.value
  lines = [
      f"Recreate this video as a tighter {options.target_aspect_ratio} edit optimized for {goal}.",
  ]
  if analysis.summary:
    lines.append(f"Original video: {analysis.summary}")
  lines.append("Scenes, in order:")
  for i, scene in enumerate(selected, start=1):
    mood = f" Mood: {scene.dominant_emotion}." if scene.dominant_emotion else ""
    lines.append(f"{i}. ({scene.duration:g}s) {scene.description}.{mood}")
  if options.add_text_overlays:
    lines.append("Add bold, readable text overlays for the key messages.")
  if options.add_music:
    lines.append("Add energetic background music matching the pacing.")
  if options.ptd_fitness_optimized:
    lines.append(
        "Follow the hook, problem agitation, solution, benefits, call-to-action "
        "structure of a fitness ad and end on a clear free consultation offer."
    )
  return "\n".join(lines)


def describe_improvements(
    analysis: VideoAnalysisResult,
    selected: list[Scene],
    options: ReconstructionOptions,
) -> list[str]:
  improvements = []
  if len(selected) < len(analysis.scenes):
    improvements.append(f"Kept {len(selected)} of {len(analysis.scenes)} scenes")
  improvements.append(f"Optimized for {options.optimize_for}")
  if options.add_text_overlays:
    improvements.append("Added text overlays")
  if options.add_music:
    improvements.append("Added background music")
  for rec in analysis.recommendations:
    if rec.priority >= HIGH_PRIORITY and rec.description:
      improvements.append(rec.description)
  return improvements


def reconstruct_video(
    analyzer,
    analysis: VideoAnalysisResult,
    options: ReconstructionOptions,
    publish: Callable[[bytes], str],
    on_progress: ProgressCallback = None,
) -> ReconstructedVideo:
  """Generate a new video from the best scenes of an analysis.

  Args:
    analyzer: A VideoAnalyzer used for the generation call.
    analysis: The analysis holding the source scenes.
    options: Selection and styling options.
    publish: Stores the generated bytes and returns their URL.
    on_progress: Optional progress callback forwarded to the generation.
  Raises:
    ValueError: no scene survives the selection.
    VideoGenerationError: the generation job failed.
  """
  selected = select_scenes(analysis.scenes, options)
  if not selected:
    raise ValueError("No scenes selected for reconstruction")

  duration = sum(s.duration for s in selected)
  if options.target_duration:
    duration = min(duration, options.target_duration) or options.target_duration
  prompt = build_reconstruction_prompt(analysis, selected, options)
  gen_options = VideoGenerationOptions(
      aspect_ratio=options.target_aspect_ratio,
      duration=int(round(duration)) or VideoGenerationOptions().duration,
  )
  video_bytes = analyzer.generate_video(prompt, gen_options, on_progress=on_progress)
  return ReconstructedVideo(
      video_url=publish(video_bytes),
      duration=duration,
      scenes=len(selected),
      improvements=describe_improvements(analysis, selected, options),
  )
