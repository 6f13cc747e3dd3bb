"""CRM contact updates through the HubSpot batch upsert API.

No-op when HUBSPOT_ACCESS_TOKEN is not configured.
"""

from __future__ import annotations

import logging

import requests

from configuration import Configuration

HUBSPOT_UPSERT_URL = "https://api.hubapi.com/crm/v3/objects/contacts/batch/upsert"


def build_contact_input(email: str, properties: dict | None = None) -> dict:
  """One upsert input keyed by email; None-valued properties are dropped."""
  props = {k: str(v) for k, v in (properties or {}).items() if v is not None}
  props["email"] = email
  return {"idProperty": "email", "id": email, "properties": props}


def upsert_contact(
    config: Configuration,
    email: str,
    properties: dict | None = None,
) -> bool:
  """Create or update a contact, e.g. with the latest analysis scores.

  Args:
    config: Holds the HubSpot private app token.
    email: Contact email, used as the unique id.
    properties: Extra contact properties to set.
  Returns:
    True when HubSpot accepted the update, False otherwise.
  """
  if not config.hubspot_access_token or not email:
    return False

  try:
    resp = requests.post(
        HUBSPOT_UPSERT_URL,
        json={"inputs": [build_contact_input(email.strip().lower(), properties)]},
        headers={
            "Authorization": f"Bearer {config.hubspot_access_token}",
            "Content-Type": "application/json",
        },
        timeout=10,
    )
  except requests.RequestException as ex:
    logging.error("CRM contact upsert failed: %s", ex)
    return False

  if resp.status_code not in (200, 201, 207):
    logging.error("CRM contact upsert returned %d: %s", resp.status_code, resp.text[:300])
    return False
  logging.info("CRM contact upserted for %s", email)
  return True
