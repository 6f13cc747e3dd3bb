"""Triggers an external automation workflow (Zapier, Make, n8n...) by webhook."""

from __future__ import annotations

import datetime
import logging

import requests

from configuration import Configuration


def trigger_workflow(config: Configuration, event: str, data: dict | None = None) -> bool:
  """POST {"event", "timestamp", "data"} to WORKFLOW_WEBHOOK_URL.

  Returns False when no webhook is configured or the call fails.
  """
  if not config.workflow_webhook_url:
    return False

  payload = {
      "event": event,
      "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
      "data": data or {},
  }
  try:
    resp = requests.post(config.workflow_webhook_url, json=payload, timeout=10)
  except requests.RequestException as ex:
    logging.error("Workflow webhook '%s' failed: %s", event, ex)
    return False

  if resp.status_code >= 300:
    logging.error("Workflow webhook '%s' returned %d", event, resp.status_code)
    return False
  return True
