"""Server-side conversion events for the Meta Conversions API.

User identifiers never leave the server in clear text: email and phone are
normalized and SHA-256 hashed before sending.
"""

from __future__ import annotations

import hashlib
import logging
import re
import time

import requests

from configuration import Configuration

GRAPH_API_VERSION = "v19.0"
CONVERSIONS_URL = "https://graph.facebook.com/{version}/{pixel_id}/events"


def hash_identifier(value: str) -> str:
  return hashlib.sha256(value.encode("utf-8")).hexdigest()


def normalize_email(email: str) -> str:
  return (email or "").strip().lower()


def normalize_phone(phone: str) -> str:
  """Digits only, country code included (e.g. "+971 50-123" -> "97150123")."""
  return re.sub(r"\D", "", phone or "")


def build_user_data(email: str = "", phone: str = "") -> dict:
  user_data = {}
  if normalize_email(email):
    user_data["em"] = [hash_identifier(normalize_email(email))]
  if normalize_phone(phone):
    user_data["ph"] = [hash_identifier(normalize_phone(phone))]
  return user_data


def build_event(
    event_name: str,
    email: str = "",
    phone: str = "",
    custom_data: dict | None = None,
    event_source_url: str = "",
    event_time: int | None = None,
) -> dict:
  event = {
      "event_name": event_name,
      "event_time": int(event_time if event_time is not None else time.time()),
      "action_source": "website",
      "user_data": build_user_data(email, phone),
  }
  if custom_data:
    event["custom_data"] = custom_data
  if event_source_url:
    event["event_source_url"] = event_source_url
  return event


def send_conversion_event(
    config: Configuration,
    event_name: str,
    email: str = "",
    phone: str = "",
    custom_data: dict | None = None,
    event_source_url: str = "",
) -> bool:
  """Send one event (e.g. "Lead") to the configured pixel.

  Returns False when the pixel or token is missing, when there is no
  identifier to match on, or when the API rejects the call.
  """
  if not config.meta_pixel_id or not config.meta_access_token:
    return False

  event = build_event(event_name, email, phone, custom_data, event_source_url)
  if not event["user_data"]:
    logging.warning("Conversion event '%s' skipped: no email or phone", event_name)
    return False

  url = CONVERSIONS_URL.format(version=GRAPH_API_VERSION, pixel_id=config.meta_pixel_id)
  try:
    resp = requests.post(
        url,
        json={"data": [event]},
        params={"access_token": config.meta_access_token},
        timeout=10,
    )
  except requests.RequestException as ex:
    logging.error("Conversion event '%s' failed: %s", event_name, ex)
    return False

  if resp.status_code != 200:
    logging.error("Conversion event '%s' returned %d: %s", event_name, resp.status_code, resp.text[:300])
    return False
  return True
