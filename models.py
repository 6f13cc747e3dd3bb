"""Data records exchanged between the studio, the AI provider and the dashboard"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

PRO_MODEL = "gemini-2.5-pro"
FLASH_MODEL = "gemini-2.5-flash"
VIDEO_MODEL = "veo-3.1-fast-generate-preview"


class RecommendationType(Enum):
  """Enum that represents recommendation categories"""

  HOOK = "hook"
  CTA = "cta"
  VISUAL = "visual"
  AUDIO = "audio"
  PACING = "pacing"


class Importance(Enum):
  """Enum that represents the importance of a key moment"""

  HIGH = "high"
  MEDIUM = "medium"
  LOW = "low"


class AspectRatio(Enum):
  """Enum that represents the supported aspect ratios"""

  LANDSCAPE = "16:9"
  PORTRAIT = "9:16"
  SQUARE = "1:1"


class OptimizeFor(Enum):
  """Enum that represents the goal of a reconstruction"""

  ENGAGEMENT = "engagement"
  CONVERSION = "conversion"
  BRAND = "brand"


def _pick(data: dict, *keys, default=None):
  """Return the first present key, so camelCase and snake_case both work."""
  for key in keys:
    if key in data and data[key] is not None:
      return data[key]
  return default


def _as_float(value, default: float = 0.0) -> float:
  try:
    return float(value)
  except (TypeError, ValueError):
    return default


def _as_list(value) -> list:
  return list(value) if isinstance(value, (list, tuple)) else []


@dataclass
class Scene:
  """A time range of the video described by the model"""

  start_time: float = 0.0
  end_time: float = 0.0
  description: str = ""
  keyframes: list[str] = field(default_factory=list)
  dominant_emotion: str = ""
  objects: list[str] = field(default_factory=list)
  score: float = 0.0

  @property
  def duration(self) -> float:
    return max(0.0, self.end_time - self.start_time)

  @classmethod
  def from_dict(cls, data: dict) -> Scene:
    return cls(
        start_time=_as_float(_pick(data, "startTime", "start_time")),
        end_time=_as_float(_pick(data, "endTime", "end_time")),
        description=str(_pick(data, "description", default="")),
        keyframes=[str(k) for k in _as_list(data.get("keyframes"))],
        dominant_emotion=str(_pick(data, "dominantEmotion", "dominant_emotion", default="")),
        objects=[str(o) for o in _as_list(data.get("objects"))],
        score=_as_float(data.get("score")),
    )

  def to_dict(self) -> dict:
    return {
        "startTime": self.start_time,
        "endTime": self.end_time,
        "description": self.description,
        "keyframes": self.keyframes,
        "dominantEmotion": self.dominant_emotion,
        "objects": self.objects,
        "score": self.score,
    }


@dataclass
class Timestamp:
  """A key moment of the video"""

  time: float = 0.0
  description: str = ""
  importance: str = Importance.MEDIUM.value
  actionable: bool = False

  @classmethod
  def from_dict(cls, data: dict) -> Timestamp:
    importance = str(data.get("importance", Importance.MEDIUM.value)).lower()
    return cls(
        time=_as_float(data.get("time")),
        description=str(data.get("description", "")),
        importance=importance,
        actionable=bool(data.get("actionable", False)),
    )

  def to_dict(self) -> dict:
    return {
        "time": self.time,
        "description": self.description,
        "importance": self.importance,
        "actionable": self.actionable,
    }


@dataclass
class Recommendation:
  """A model-generated suggestion to improve the video"""

  type: str = RecommendationType.VISUAL.value
  description: str = ""
  priority: float = 5
  implementation: str = ""

  @classmethod
  def from_dict(cls, data: dict) -> Recommendation:
    return cls(
        type=str(_pick(data, "type", "category", default=RecommendationType.VISUAL.value)).lower(),
        description=str(data.get("description", "")),
        priority=_as_float(data.get("priority"), 5),
        implementation=str(data.get("implementation", "")),
    )

  def to_dict(self) -> dict:
    return {
        "type": self.type,
        "description": self.description,
        "priority": self.priority,
        "implementation": self.implementation,
    }


@dataclass
class EmotionData:
  """Emotion detected at a point in time"""

  timestamp: float = 0.0
  emotion: str = ""
  intensity: float = 0.0

  @classmethod
  def from_dict(cls, data: dict) -> EmotionData:
    return cls(
        timestamp=_as_float(data.get("timestamp")),
        emotion=str(data.get("emotion", "")),
        intensity=_as_float(data.get("intensity")),
    )

  def to_dict(self) -> dict:
    return {"timestamp": self.timestamp, "emotion": self.emotion, "intensity": self.intensity}


@dataclass
class ObjectDetection:
  """An object seen in the video"""

  name: str = ""
  confidence: float = 0.0
  timestamps: list[float] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> ObjectDetection:
    return cls(
        name=str(data.get("name", "")),
        confidence=_as_float(data.get("confidence")),
        timestamps=[_as_float(t) for t in _as_list(data.get("timestamps"))],
    )

  def to_dict(self) -> dict:
    return {"name": self.name, "confidence": self.confidence, "timestamps": self.timestamps}


@dataclass
class PTDScores:
  """Marketing-funnel scores requested by the PTD-optimized analysis"""

  hook_strength: float = 0.0
  problem_agitation: float = 0.0
  solution_clarity: float = 0.0
  transformation_appeal: float = 0.0
  cta_effectiveness: float = 0.0
  overall: float = 0.0

  @classmethod
  def from_dict(cls, data: dict) -> PTDScores:
    return cls(
        hook_strength=_as_float(_pick(data, "hookStrength", "hook_strength")),
        problem_agitation=_as_float(_pick(data, "problemAgitation", "problem_agitation")),
        solution_clarity=_as_float(_pick(data, "solutionClarity", "solution_clarity")),
        transformation_appeal=_as_float(_pick(data, "transformationAppeal", "transformation_appeal")),
        cta_effectiveness=_as_float(_pick(data, "ctaEffectiveness", "cta_effectiveness")),
        overall=_as_float(_pick(data, "overall", "overallConversionScore", "overall_conversion_score")),
    )

  def to_dict(self) -> dict:
    return {
        "hookStrength": self.hook_strength,
        "problemAgitation": self.problem_agitation,
        "solutionClarity": self.solution_clarity,
        "transformationAppeal": self.transformation_appeal,
        "ctaEffectiveness": self.cta_effectiveness,
        "overall": self.overall,
    }


@dataclass
class VideoAnalysisResult:
  """Everything the dashboard renders for one analyzed video"""

  summary: str = ""
  scenes: list[Scene] = field(default_factory=list)
  timestamps: list[Timestamp] = field(default_factory=list)
  recommendations: list[Recommendation] = field(default_factory=list)
  emotions: list[EmotionData] = field(default_factory=list)
  objects: list[ObjectDetection] = field(default_factory=list)
  transcription: str = ""
  ptd_scores: PTDScores | None = None

  @classmethod
  def from_dict(cls, data: dict) -> VideoAnalysisResult:
    ptd = _pick(data, "ptdScores", "ptd_scores")
    return cls(
        summary=str(data.get("summary") or ""),
        scenes=[Scene.from_dict(s) for s in _as_list(data.get("scenes")) if isinstance(s, dict)],
        timestamps=[Timestamp.from_dict(t) for t in _as_list(data.get("timestamps")) if isinstance(t, dict)],
        recommendations=[
            Recommendation.from_dict(r) for r in _as_list(data.get("recommendations")) if isinstance(r, dict)
        ],
        emotions=[EmotionData.from_dict(e) for e in _as_list(data.get("emotions")) if isinstance(e, dict)],
        objects=[ObjectDetection.from_dict(o) for o in _as_list(data.get("objects")) if isinstance(o, dict)],
        transcription=_transcription_text(data.get("transcription")),
        ptd_scores=PTDScores.from_dict(ptd) if isinstance(ptd, dict) else None,
    )

  def to_dict(self, include_recommendations: bool = True) -> dict:
    data = {
        "summary": self.summary,
        "scenes": [s.to_dict() for s in self.scenes],
        "timestamps": [t.to_dict() for t in self.timestamps],
        "emotions": [e.to_dict() for e in self.emotions],
        "objects": [o.to_dict() for o in self.objects],
        "transcription": self.transcription,
    }
    if include_recommendations:
      data["recommendations"] = [r.to_dict() for r in self.recommendations]
    if self.ptd_scores is not None:
      data["ptdScores"] = self.ptd_scores.to_dict()
    return data


def _transcription_text(value) -> str:
  """The model sometimes returns the transcription as a list of timed lines."""
  if not value:
    return ""
  if isinstance(value, str):
    return value
  if isinstance(value, list):
    lines = []
    for item in value:
      if isinstance(item, dict):
        ts = _pick(item, "timestamp", "time", "start", "startTime")
        text = _pick(item, "text", "transcript", default="")
        lines.append(f"[{ts}] {text}" if ts is not None else str(text))
      else:
        lines.append(str(item))
    return "\n".join(lines)
  return str(value)


@dataclass
class AnalysisOptions:
  """Options of a single analysis run"""

  extract_frames: int = 30
  analyze_emotions: bool = True
  detect_objects: bool = True
  generate_timestamps: bool = True
  ptd_fitness_optimized: bool = False


@dataclass
class VideoGenerationOptions:
  """Options of a video generation call"""

  aspect_ratio: str = AspectRatio.PORTRAIT.value
  resolution: str = "1080p"
  duration: int = 30
  style: str = "cinematic"

  @classmethod
  def from_dict(cls, data: dict | None) -> VideoGenerationOptions:
    data = data or {}
    return cls(
        aspect_ratio=str(_pick(data, "aspectRatio", "aspect_ratio", default=AspectRatio.PORTRAIT.value)),
        resolution=str(data.get("resolution", "1080p")),
        duration=int(_as_float(data.get("duration"), 30)),
        style=str(data.get("style", "cinematic")),
    )


# ----- Video Intelligence records -----


def _records(cls, value) -> list:
  return [cls.from_dict(item) for item in _as_list(value) if isinstance(item, dict)]


@dataclass
class TimeSegment:
  start_time: float = 0.0
  end_time: float = 0.0

  @classmethod
  def from_dict(cls, data: dict) -> TimeSegment:
    return cls(
        start_time=_as_float(_pick(data, "startTime", "start_time")),
        end_time=_as_float(_pick(data, "endTime", "end_time")),
    )

  def to_dict(self) -> dict:
    return {"startTime": self.start_time, "endTime": self.end_time}


@dataclass
class Shot:
  start_time: float = 0.0
  end_time: float = 0.0

  @classmethod
  def from_dict(cls, data: dict) -> Shot:
    return cls(
        start_time=_as_float(_pick(data, "startTime", "start_time")),
        end_time=_as_float(_pick(data, "endTime", "end_time")),
    )

  def to_dict(self) -> dict:
    return {"startTime": self.start_time, "endTime": self.end_time}


@dataclass
class Label:
  entity: str = ""
  confidence: float = 0.0
  segments: list[TimeSegment] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> Label:
    return cls(
        entity=str(data.get("entity", "")),
        confidence=_as_float(data.get("confidence")),
        segments=_records(TimeSegment, data.get("segments")),
    )

  def to_dict(self) -> dict:
    return {
        "entity": self.entity,
        "confidence": self.confidence,
        "segments": [s.to_dict() for s in self.segments],
    }


@dataclass
class Face:
  thumbnails: list[str] = field(default_factory=list)
  segments: list[TimeSegment] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> Face:
    return cls(
        thumbnails=[str(t) for t in _as_list(data.get("thumbnails"))],
        segments=_records(TimeSegment, data.get("segments")),
    )

  def to_dict(self) -> dict:
    return {"thumbnails": self.thumbnails, "segments": [s.to_dict() for s in self.segments]}


@dataclass
class TextSegment:
  start_time: float = 0.0
  end_time: float = 0.0
  confidence: float = 0.0

  @classmethod
  def from_dict(cls, data: dict) -> TextSegment:
    return cls(
        start_time=_as_float(_pick(data, "startTime", "start_time")),
        end_time=_as_float(_pick(data, "endTime", "end_time")),
        confidence=_as_float(data.get("confidence")),
    )

  def to_dict(self) -> dict:
    return {"startTime": self.start_time, "endTime": self.end_time, "confidence": self.confidence}


@dataclass
class TextAnnotation:
  text: str = ""
  segments: list[TextSegment] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> TextAnnotation:
    return cls(text=str(data.get("text", "")), segments=_records(TextSegment, data.get("segments")))

  def to_dict(self) -> dict:
    return {"text": self.text, "segments": [s.to_dict() for s in self.segments]}


@dataclass
class TrackedFrame:
  time: float = 0.0
  bounding_box: dict = field(default_factory=dict)

  @classmethod
  def from_dict(cls, data: dict) -> TrackedFrame:
    box = _pick(data, "boundingBox", "bounding_box", default={})
    return cls(time=_as_float(data.get("time")), bounding_box=dict(box) if isinstance(box, dict) else {})

  def to_dict(self) -> dict:
    return {"time": self.time, "boundingBox": self.bounding_box}


@dataclass
class ObjectTracking:
  entity: str = ""
  confidence: float = 0.0
  frames: list[TrackedFrame] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> ObjectTracking:
    return cls(
        entity=str(data.get("entity", "")),
        confidence=_as_float(data.get("confidence")),
        frames=_records(TrackedFrame, data.get("frames")),
    )

  def to_dict(self) -> dict:
    return {
        "entity": self.entity,
        "confidence": self.confidence,
        "frames": [f.to_dict() for f in self.frames],
    }


@dataclass
class ExplicitContentFrame:
  time: float = 0.0
  pornography_likelihood: str = "UNKNOWN"

  @classmethod
  def from_dict(cls, data: dict) -> ExplicitContentFrame:
    return cls(
        time=_as_float(data.get("time")),
        pornography_likelihood=str(
            _pick(data, "pornographyLikelihood", "pornography_likelihood", default="UNKNOWN")
        ),
    )

  def to_dict(self) -> dict:
    return {"time": self.time, "pornographyLikelihood": self.pornography_likelihood}


@dataclass
class VertexAIAnalysis:
  """Annotations returned by the Video Intelligence API"""

  shots: list[Shot] = field(default_factory=list)
  labels: list[Label] = field(default_factory=list)
  faces: list[Face] = field(default_factory=list)
  text: list[TextAnnotation] = field(default_factory=list)
  objects: list[ObjectTracking] = field(default_factory=list)
  explicit_content: list[ExplicitContentFrame] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict | None) -> VertexAIAnalysis:
    data = data or {}
    return cls(
        shots=_records(Shot, data.get("shots")),
        labels=_records(Label, data.get("labels")),
        faces=_records(Face, data.get("faces")),
        text=_records(TextAnnotation, data.get("text")),
        objects=_records(ObjectTracking, data.get("objects")),
        explicit_content=_records(
            ExplicitContentFrame, _pick(data, "explicitContent", "explicit_content")
        ),
    )

  def to_dict(self) -> dict:
    return {
        "shots": [s.to_dict() for s in self.shots],
        "labels": [l.to_dict() for l in self.labels],
        "faces": [f.to_dict() for f in self.faces],
        "text": [t.to_dict() for t in self.text],
        "objects": [o.to_dict() for o in self.objects],
        "explicitContent": [e.to_dict() for e in self.explicit_content],
    }


@dataclass
class CombinedAnalysis:
  """Gemini and Video Intelligence results merged into one view"""

  gemini: VideoAnalysisResult
  vertex: VertexAIAnalysis
  combined: dict = field(default_factory=dict)

  @classmethod
  def from_dict(cls, data: dict | None) -> CombinedAnalysis:
    data = data or {}
    combined = data.get("combined")
    return cls(
        gemini=VideoAnalysisResult.from_dict(data.get("gemini") or {}),
        vertex=VertexAIAnalysis.from_dict(data.get("vertex")),
        combined=dict(combined) if isinstance(combined, dict) else {},
    )

  def to_dict(self) -> dict:
    return {
        "gemini": self.gemini.to_dict(),
        "vertex": self.vertex.to_dict(),
        "combined": self.combined,
    }


# ----- Reconstruction -----


@dataclass
class ReconstructionOptions:
  """How to rebuild a video from its best scenes"""

  target_duration: float | None = None
  target_aspect_ratio: str = AspectRatio.PORTRAIT.value
  optimize_for: str = OptimizeFor.ENGAGEMENT.value
  include_scenes: list[int] = field(default_factory=list)
  exclude_scenes: list[int] = field(default_factory=list)
  add_text_overlays: bool = True
  add_music: bool = True
  ptd_fitness_optimized: bool = False

  @classmethod
  def from_dict(cls, data: dict | None) -> ReconstructionOptions:
    data = data or {}
    target = _pick(data, "targetDuration", "target_duration")
    return cls(
        target_duration=_as_float(target) if target is not None else None,
        target_aspect_ratio=str(_pick(data, "targetAspectRatio", "target_aspect_ratio",
                                      default=AspectRatio.PORTRAIT.value)),
        optimize_for=str(_pick(data, "optimizeFor", "optimize_for",
                               default=OptimizeFor.ENGAGEMENT.value)).lower(),
        include_scenes=[int(i) for i in _as_list(_pick(data, "includeScenes", "include_scenes"))],
        exclude_scenes=[int(i) for i in _as_list(_pick(data, "excludeScenes", "exclude_scenes"))],
        add_text_overlays=bool(_pick(data, "addTextOverlays", "add_text_overlays", default=True)),
        add_music=bool(_pick(data, "addMusic", "add_music", default=True)),
        ptd_fitness_optimized=bool(_pick(data, "ptdFitnessOptimized", "ptd_fitness_optimized", default=False)),
    )


@dataclass
class ReconstructedVideo:
  video_url: str
  duration: float
  scenes: int
  improvements: list[str] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> ReconstructedVideo:
    metadata = data.get("metadata")
    metadata = metadata if isinstance(metadata, dict) else {}
    return cls(
        video_url=str(_pick(data, "videoUrl", "video_url", default="")),
        duration=_as_float(metadata.get("duration")),
        scenes=int(_as_float(metadata.get("scenes"))),
        improvements=[str(i) for i in _as_list(metadata.get("improvements"))],
    )

  def to_dict(self) -> dict:
    return {
        "videoUrl": self.video_url,
        "metadata": {
            "duration": self.duration,
            "scenes": self.scenes,
            "improvements": self.improvements,
        },
    }


# ----- Templates -----


@dataclass
class TextOverlay:
  text: str
  time: float
  duration: float
  style: str | None = None

  @classmethod
  def from_dict(cls, data: dict) -> TextOverlay:
    style = data.get("style")
    return cls(
        text=str(data.get("text", "")),
        time=_as_float(data.get("time")),
        duration=_as_float(data.get("duration")),
        style=str(style) if style else None,
    )

  def to_dict(self) -> dict:
    data = {"text": self.text, "time": self.time, "duration": self.duration}
    if self.style:
      data["style"] = self.style
    return data


@dataclass
class TemplateSection:
  duration: float
  prompt: str
  text_overlays: list[TextOverlay] = field(default_factory=list)
  conversion_words: list[str] = field(default_factory=list)

  @classmethod
  def from_dict(cls, data: dict) -> TemplateSection:
    return cls(
        duration=_as_float(data.get("duration")),
        prompt=str(data.get("prompt", "")),
        text_overlays=_records(TextOverlay, _pick(data, "textOverlays", "text_overlays")),
        conversion_words=[str(w) for w in _as_list(_pick(data, "conversionWords", "conversion_words"))],
    )

  def to_dict(self) -> dict:
    return {
        "duration": self.duration,
        "prompt": self.prompt,
        "textOverlays": [o.to_dict() for o in self.text_overlays],
        "conversionWords": self.conversion_words,
    }


TEMPLATE_SECTION_ORDER = ("hook", "problem_agitation", "solution", "benefits", "cta")


@dataclass
class VideoTemplate:
  """A static ad script: five funnel sections plus style guidelines"""

  id: str
  name: str
  target_audience: str
  duration: float
  aspect_ratio: str
  hook: TemplateSection
  problem_agitation: TemplateSection
  solution: TemplateSection
  benefits: TemplateSection
  cta: TemplateSection
  visual_style: dict = field(default_factory=dict)
  audio_guidelines: dict = field(default_factory=dict)
  optimization_score: PTDScores = field(default_factory=PTDScores)

  @classmethod
  def from_dict(cls, data: dict) -> VideoTemplate:
    structure = data.get("structure")
    structure = structure if isinstance(structure, dict) else {}

    def section(*keys) -> TemplateSection:
      value = _pick(structure, *keys, default={})
      return TemplateSection.from_dict(value if isinstance(value, dict) else {})

    visual_style = _pick(data, "visualStyle", "visual_style", default={})
    audio_guidelines = _pick(data, "audioGuidelines", "audio_guidelines", default={})
    score = _pick(data, "optimizationScore", "optimization_score", default={})
    return cls(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        target_audience=str(_pick(data, "targetAudience", "target_audience", default="")),
        duration=_as_float(data.get("duration")),
        aspect_ratio=str(_pick(data, "aspectRatio", "aspect_ratio", default=AspectRatio.PORTRAIT.value)),
        hook=section("hook"),
        problem_agitation=section("problemAgitation", "problem_agitation"),
        solution=section("solution"),
        benefits=section("benefits"),
        cta=section("cta"),
        visual_style=dict(visual_style) if isinstance(visual_style, dict) else {},
        audio_guidelines=dict(audio_guidelines) if isinstance(audio_guidelines, dict) else {},
        optimization_score=PTDScores.from_dict(score if isinstance(score, dict) else {}),
    )

  def sections(self) -> list[tuple[str, TemplateSection]]:
    return [(name, getattr(self, name)) for name in TEMPLATE_SECTION_ORDER]

  def to_dict(self) -> dict:
    return {
        "id": self.id,
        "name": self.name,
        "targetAudience": self.target_audience,
        "duration": self.duration,
        "aspectRatio": self.aspect_ratio,
        "structure": {
            "hook": self.hook.to_dict(),
            "problemAgitation": self.problem_agitation.to_dict(),
            "solution": self.solution.to_dict(),
            "benefits": self.benefits.to_dict(),
            "cta": self.cta.to_dict(),
        },
        "visualStyle": self.visual_style,
        "audioGuidelines": self.audio_guidelines,
        "optimizationScore": self.optimization_score.to_dict(),
    }


# ----- LLM request plumbing -----


@dataclass
class LLMParameters:
  """Class that represents the required params to make a prediction to the LLM"""

  model_name: str = PRO_MODEL
  generation_config: dict = field(
      default_factory=lambda: {
          "max_output_tokens": 8192,
          "temperature": 0.4,
          "top_p": 0.95,
          "top_k": 40,
      }
  )


@dataclass
class InlinePayload:
  """Binary content sent inline with a prompt (video bytes, frame images)"""

  data: bytes
  mime_type: str


@dataclass
class PromptConfig:
  """Class that represents a prompt with its inline attachments"""

  prompt: str
  attachments: list[InlinePayload] = field(default_factory=list)
