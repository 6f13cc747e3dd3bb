"""Static ad script templates, addressable by id."""

from __future__ import annotations

from analysis_prompts import template_to_prompt
from models import VideoTemplate
from video_templates.dubai_ladies_50plus import get_dubai_ladies_50plus_template
from video_templates.dubai_men_40plus import get_dubai_men_40plus_template

DUBAI_MEN_40_PLUS = get_dubai_men_40plus_template()
DUBAI_LADIES_50_PLUS = get_dubai_ladies_50plus_template()

_TEMPLATES = {t.id: t for t in (DUBAI_MEN_40_PLUS, DUBAI_LADIES_50_PLUS)}

__all__ = [
    "DUBAI_LADIES_50_PLUS",
    "DUBAI_MEN_40_PLUS",
    "get_template",
    "list_templates",
    "template_to_prompt",
]


def get_template(template_id: str) -> VideoTemplate | None:
  return _TEMPLATES.get((template_id or "").strip().lower())


def list_templates() -> list[VideoTemplate]:
  return list(_TEMPLATES.values())
