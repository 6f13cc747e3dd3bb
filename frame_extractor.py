#!/usr/bin/env python3

"""Sample still frames from a local video with ffmpeg/ffprobe."""

from __future__ import annotations

import base64
import json
import logging
import os
import shutil
import subprocess
import tempfile

JPEG_QUALITY = 3  # ffmpeg -q:v scale, 2 (best) .. 31 (worst)


class FrameExtractionError(Exception):
  """Raised when a video cannot be opened for frame sampling."""


def find_ffmpeg() -> str:
  """Find ffmpeg binary in common locations."""
  ffmpeg = shutil.which("ffmpeg")
  if ffmpeg:
    return ffmpeg
  for path in ("/opt/homebrew/bin/ffmpeg", "/usr/local/bin/ffmpeg", "/usr/bin/ffmpeg"):
    if os.path.exists(path):
      return path
  logging.warning("ffmpeg not found in PATH or common locations")
  return "ffmpeg"


def find_ffprobe() -> str:
  """Find ffprobe, preferring the one installed next to ffmpeg."""
  ffprobe = shutil.which("ffprobe")
  if ffprobe:
    return ffprobe
  candidate = find_ffmpeg().replace("ffmpeg", "ffprobe")
  return candidate if os.path.exists(candidate) else "ffprobe"


def probe_duration(video_path: str, ffprobe_path: str | None = None) -> float:
  """Return the video duration in seconds, or -1.0 when it cannot be read."""
  if not video_path or not os.path.exists(video_path):
    return -1.0
  try:
    result = subprocess.run(
        [
            ffprobe_path or find_ffprobe(),
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            video_path,
        ],
        capture_output=True,
        text=True,
        timeout=30,
    )
    if result.returncode != 0:
      logging.error("ffprobe failed: %s", result.stderr)
      return -1.0
    info = json.loads(result.stdout or "{}")
    return float(info.get("format", {}).get("duration", -1))
  except Exception as ex:
    logging.error("Duration detection failed for %s: %s", video_path, ex)
    return -1.0


def frame_timestamps(duration: float, num_frames: int) -> list[float]:
  """Evenly spaced sample times: i * duration / num_frames for i in [0, n)."""
  if duration <= 0 or num_frames <= 0:
    return []
  interval = duration / num_frames
  return [round(i * interval, 3) for i in range(num_frames)]


def extract_video_frames(
    video_path: str,
    num_frames: int,
    max_width: int = 1280,
    ffmpeg_path: str | None = None,
    ffprobe_path: str | None = None,
) -> list[str]:
  """Extract num_frames JPEG frames at regular intervals.

  Args:
    video_path: Local path to the video file.
    num_frames: How many frames to sample across the whole duration.
    max_width: Frames wider than this are scaled down (aspect preserved).
    ffmpeg_path: Optional path to ffmpeg binary. Auto-detected if not provided.
    ffprobe_path: Optional path to ffprobe binary. Auto-detected if not provided.
  Returns:
    List of base64-encoded JPEG strings in chronological order. Frames that
    fail to decode are skipped.
  Raises:
    FrameExtractionError: the video cannot be probed.
  """
  if num_frames <= 0:
    return []

  duration = probe_duration(video_path, ffprobe_path)
  if duration <= 0:
    raise FrameExtractionError("Failed to load video")

  ffmpeg_path = ffmpeg_path or find_ffmpeg()
  tmp_dir = tempfile.mkdtemp(prefix="studio_frames_")
  frames: list[str] = []
  try:
    for i, seconds in enumerate(frame_timestamps(duration, num_frames)):
      frame_path = os.path.join(tmp_dir, f"frame_{i:03d}.jpg")
      try:
        subprocess.run(
            [
                ffmpeg_path, "-y",
                "-ss", str(seconds),
                "-i", video_path,
                "-vframes", "1",
                "-q:v", str(JPEG_QUALITY),
                "-vf", f"scale='min({max_width},iw)':-2",
                frame_path,
            ],
            capture_output=True,
            timeout=30,
        )
        if os.path.exists(frame_path) and os.path.getsize(frame_path) > 0:
          with open(frame_path, "rb") as img:
            frames.append(base64.b64encode(img.read()).decode("ascii"))
        else:
          logging.warning("No frame decoded at %.2fs of %s", seconds, video_path)
      except Exception as ex:
        logging.warning("Failed to extract frame %d at %.2fs: %s", i + 1, seconds, ex)
  finally:
    cleanup_temp_dir(tmp_dir)

  logging.info("Extracted %d/%d frames from %s", len(frames), num_frames, video_path)
  return frames


def file_to_base64(file_path: str) -> str:
  """Read a file and return its base64 text."""
  with open(file_path, "rb") as f:
    return base64.b64encode(f.read()).decode("ascii")


def cleanup_temp_dir(tmp_dir: str) -> None:
  """Remove a temporary directory and all its contents."""
  if not tmp_dir or not os.path.isdir(tmp_dir):
    return
  shutil.rmtree(tmp_dir, ignore_errors=True)
