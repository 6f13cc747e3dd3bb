"""Video Intelligence API annotation, converted into VertexAIAnalysis records."""

import base64
import logging

from google.cloud import videointelligence

from gcp_api_services.gcp_connection import get_video_intelligence_client
from models import (
    ExplicitContentFrame,
    Face,
    Label,
    ObjectTracking,
    Shot,
    TextAnnotation,
    TextSegment,
    TimeSegment,
    TrackedFrame,
    VertexAIAnalysis,
)

ANNOTATION_TIMEOUT_SECONDS = 900

FEATURES = [
    videointelligence.Feature.SHOT_CHANGE_DETECTION,
    videointelligence.Feature.LABEL_DETECTION,
    videointelligence.Feature.FACE_DETECTION,
    videointelligence.Feature.TEXT_DETECTION,
    videointelligence.Feature.OBJECT_TRACKING,
    videointelligence.Feature.EXPLICIT_CONTENT_DETECTION,
]


def _seconds(offset) -> float:
  """Convert a proto duration (timedelta or seconds/nanos pair) to seconds."""
  if offset is None:
    return 0.0
  if hasattr(offset, "total_seconds"):
    return round(offset.total_seconds(), 3)
  seconds = getattr(offset, "seconds", 0) or 0
  nanos = getattr(offset, "nanos", 0) or getattr(offset, "microseconds", 0) * 1000
  return round(seconds + nanos / 1e9, 3)


def _segment(segment) -> TimeSegment:
  return TimeSegment(
      start_time=_seconds(segment.start_time_offset),
      end_time=_seconds(segment.end_time_offset),
  )


def _likelihood_name(value) -> str:
  name = getattr(value, "name", None)
  if name:
    return name
  try:
    return videointelligence.Likelihood(value).name
  except (TypeError, ValueError):
    return str(value)


def parse_annotation_results(annotation) -> VertexAIAnalysis:
  """Map one VideoAnnotationResults message to a VertexAIAnalysis."""
  analysis = VertexAIAnalysis()

  for shot in annotation.shot_annotations:
    seg = _segment(shot)
    analysis.shots.append(Shot(start_time=seg.start_time, end_time=seg.end_time))

  for label in annotation.segment_label_annotations:
    segments = [_segment(s.segment) for s in label.segments]
    confidence = max((s.confidence for s in label.segments), default=0.0)
    analysis.labels.append(
        Label(entity=label.entity.description, confidence=round(confidence, 3), segments=segments)
    )

  for face in annotation.face_detection_annotations:
    thumbnails = []
    if face.thumbnail:
      thumbnails.append(base64.b64encode(face.thumbnail).decode("ascii"))
    analysis.faces.append(
        Face(thumbnails=thumbnails, segments=[_segment(t.segment) for t in face.tracks])
    )

  for text in annotation.text_annotations:
    analysis.text.append(
        TextAnnotation(
            text=text.text,
            segments=[
                TextSegment(
                    start_time=_seconds(s.segment.start_time_offset),
                    end_time=_seconds(s.segment.end_time_offset),
                    confidence=round(s.confidence, 3),
                )
                for s in text.segments
            ],
        )
    )

  for obj in annotation.object_annotations:
    frames = []
    for frame in obj.frames:
      box = frame.normalized_bounding_box
      frames.append(
          TrackedFrame(
              time=_seconds(frame.time_offset),
              bounding_box={
                  "left": box.left,
                  "top": box.top,
                  "right": box.right,
                  "bottom": box.bottom,
              },
          )
      )
    analysis.objects.append(
        ObjectTracking(
            entity=obj.entity.description,
            confidence=round(obj.confidence, 3),
            frames=frames,
        )
    )

  for frame in annotation.explicit_annotation.frames:
    analysis.explicit_content.append(
        ExplicitContentFrame(
            time=_seconds(frame.time_offset),
            pornography_likelihood=_likelihood_name(frame.pornography_likelihood),
        )
    )

  return analysis


def annotate_video(gcs_uri: str, timeout: int = ANNOTATION_TIMEOUT_SECONDS) -> VertexAIAnalysis:
  """Run shot/label/face/text/object/explicit-content annotation on a gs:// video.

  Blocks until the long-running operation completes.
  """
  client = get_video_intelligence_client()
  logging.info("Starting Video Intelligence annotation for %s", gcs_uri)
  operation = client.annotate_video(
      request={"features": FEATURES, "input_uri": gcs_uri}
  )
  result = operation.result(timeout=timeout)
  if not result.annotation_results:
    logging.warning("Video Intelligence returned no annotations for %s", gcs_uri)
    return VertexAIAnalysis()
  analysis = parse_annotation_results(result.annotation_results[0])
  logging.info(
      "Video Intelligence: %d shots, %d labels, %d objects for %s",
      len(analysis.shots), len(analysis.labels), len(analysis.objects), gcs_uri,
  )
  return analysis
