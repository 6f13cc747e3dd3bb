"""Application configuration.

Values come from environment variables (optionally loaded from a local
.env file) and can be overridden per request, e.g. with an API key typed
into the dashboard.
"""

from __future__ import annotations

import os
from pathlib import Path

import models

_DEFAULT_LOCATION = "us-central1"


def load_env_file(path: str | Path | None = None) -> None:
  """Load KEY=VALUE lines from a .env file into os.environ.

  Existing environment variables win. No dependency on python-dotenv.
  """
  env_path = Path(path) if path else Path(__file__).parent / ".env"
  if not env_path.is_file():
    return
  for line in env_path.read_text().splitlines():
    line = line.strip()
    if line and not line.startswith("#") and "=" in line:
      key, value = line.split("=", 1)
      os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))


def _env_bool(name: str, default: bool = False) -> bool:
  raw = os.environ.get(name)
  if raw is None:
    return default
  return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
  try:
    return int(os.environ.get(name, default))
  except (TypeError, ValueError):
    return default


def _env_float(name: str, default: float) -> float:
  try:
    return float(os.environ.get(name, default))
  except (TypeError, ValueError):
    return default


class Configuration:
  """Class that holds the runtime parameters of the studio"""

  def __init__(self):
    self.api_key: str = ""
    self.use_vertexai: bool = False
    self.project_id: str = ""
    self.project_zone: str = _DEFAULT_LOCATION
    self.bucket_name: str = ""
    self.pro_model: str = models.PRO_MODEL
    self.flash_model: str = models.FLASH_MODEL
    self.video_model: str = models.VIDEO_MODEL
    self.video_poll_interval: float = 10.0
    self.batch_max_concurrency: int = 3
    self.max_upload_mb: int = 200
    self.frame_max_width: int = 1280
    self.hubspot_access_token: str = ""
    self.workflow_webhook_url: str = ""
    self.meta_pixel_id: str = ""
    self.meta_access_token: str = ""
    self.llm_params = models.LLMParameters()
    self.recommendation_llm_params = models.LLMParameters(
        model_name=models.FLASH_MODEL,
        generation_config={
            "temperature": 0.7,
            "max_output_tokens": 2048,
        },
    )

  def set_parameters(
      self,
      api_key: str,
      project_id: str = "",
      project_zone: str | None = None,
      bucket_name: str = "",
      use_vertexai: bool = False,
      video_poll_interval: float = 10.0,
      batch_max_concurrency: int = 3,
      max_upload_mb: int = 200,
  ) -> None:
    """Set the core parameters"""
    self.api_key = (api_key or "").strip()
    self.project_id = project_id or ""
    self.project_zone = project_zone or _DEFAULT_LOCATION
    self.bucket_name = bucket_name or ""
    self.use_vertexai = use_vertexai
    self.video_poll_interval = max(0.0, float(video_poll_interval))
    self.batch_max_concurrency = max(1, int(batch_max_concurrency))
    self.max_upload_mb = max_upload_mb

  def set_llm_params(
      self,
      llm_name: str,
      max_output_tokens: int = 8192,
      temperature: float = 0.4,
      top_p: float = 0.95,
      top_k: int = 40,
  ) -> None:
    """Set the parameters of the main (pro) analysis call"""
    self.pro_model = llm_name
    self.llm_params.model_name = llm_name
    self.llm_params.generation_config = {
        "max_output_tokens": max_output_tokens,
        "temperature": temperature,
        "top_p": top_p,
        "top_k": top_k,
    }

  def set_integrations(
      self,
      hubspot_access_token: str = "",
      workflow_webhook_url: str = "",
      meta_pixel_id: str = "",
      meta_access_token: str = "",
  ) -> None:
    """Set the credentials of the optional third-party integrations"""
    self.hubspot_access_token = hubspot_access_token or ""
    self.workflow_webhook_url = workflow_webhook_url or ""
    self.meta_pixel_id = meta_pixel_id or ""
    self.meta_access_token = meta_access_token or ""

  def with_api_key(self, api_key: str | None) -> "Configuration":
    """Return a shallow copy using a request-supplied API key, if any."""
    if not api_key or not api_key.strip():
      return self
    clone = Configuration()
    clone.__dict__.update(self.__dict__)
    clone.api_key = api_key.strip()
    return clone

  @property
  def has_credentials(self) -> bool:
    return bool(self.api_key) or (self.use_vertexai and bool(self.project_id))

  @classmethod
  def from_env(cls) -> "Configuration":
    """Build a Configuration from environment variables."""
    config = cls()
    config.set_parameters(
        api_key=os.environ.get("GEMINI_API_KEY", ""),
        project_id=os.environ.get("GCP_PROJECT_ID", ""),
        project_zone=os.environ.get("GCP_LOCATION", _DEFAULT_LOCATION),
        bucket_name=os.environ.get("GCS_BUCKET_NAME", ""),
        use_vertexai=_env_bool("GEMINI_USE_VERTEXAI"),
        video_poll_interval=_env_float("VIDEO_POLL_INTERVAL_SECONDS", 10.0),
        batch_max_concurrency=_env_int("BATCH_MAX_CONCURRENCY", 3),
        max_upload_mb=_env_int("MAX_UPLOAD_MB", 200),
    )
    config.set_llm_params(llm_name=os.environ.get("PRO_MODEL", models.PRO_MODEL))
    config.flash_model = os.environ.get("FLASH_MODEL", models.FLASH_MODEL)
    config.recommendation_llm_params.model_name = config.flash_model
    config.video_model = os.environ.get("VIDEO_MODEL", models.VIDEO_MODEL)
    config.frame_max_width = _env_int("FRAME_MAX_WIDTH", 1280)
    config.set_integrations(
        hubspot_access_token=os.environ.get("HUBSPOT_ACCESS_TOKEN", ""),
        workflow_webhook_url=os.environ.get("WORKFLOW_WEBHOOK_URL", ""),
        meta_pixel_id=os.environ.get("META_PIXEL_ID", ""),
        meta_access_token=os.environ.get("META_ACCESS_TOKEN", ""),
    )
    return config
