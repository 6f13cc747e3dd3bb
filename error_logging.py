"""Error alerting through an incoming webhook.

A logging.Handler that forwards ERROR / CRITICAL records to a chat webhook
(Slack-compatible payload), so failed analyses and generation jobs are
noticed without tailing logs.

  - The same message from the same module is sent at most once per minute
  - Posting happens in a daemon thread; logging never blocks or raises
  - Without a webhook URL install() does nothing

Environment variables:
  ALERT_WEBHOOK_URL  - Webhook for error alerts (falls back to SLACK_WEBHOOK_URL)
"""

from __future__ import annotations

import logging
import os
import threading
import time
import traceback

import requests

ALERT_WEBHOOK_URL = (
    os.environ.get("ALERT_WEBHOOK_URL")
    or os.environ.get("SLACK_WEBHOOK_URL", "")
)

_DEDUP_WINDOW_SECONDS = 60


class AlertWebhookHandler(logging.Handler):
  """logging.Handler that posts ERROR+ records to a webhook."""

  def __init__(self, webhook_url: str = "", level: int = logging.ERROR):
    super().__init__(level)
    self.webhook_url = webhook_url or ALERT_WEBHOOK_URL
    self._last_sent: dict[str, float] = {}
    self._lock = threading.Lock()

  def should_send(self, record: logging.LogRecord, now: float | None = None) -> bool:
    """False when an identical alert went out inside the dedup window."""
    key = f"{record.module}:{record.getMessage()[:120]}"
    now = time.time() if now is None else now
    with self._lock:
      if now - self._last_sent.get(key, 0) < _DEDUP_WINDOW_SECONDS:
        return False
      self._last_sent[key] = now
      for k in [k for k, t in self._last_sent.items() if now - t > _DEDUP_WINDOW_SECONDS * 5]:
        del self._last_sent[k]
    return True

  def emit(self, record: logging.LogRecord) -> None:
    if not self.webhook_url or not self.should_send(record):
      return
    threading.Thread(target=self._post, args=(record,), daemon=True).start()

  def build_payload(self, record: logging.LogRecord) -> dict:
    where = f"{record.module}.{record.funcName}" if record.funcName else record.module
    message = record.getMessage()
    text = f"{record.levelname} in {where} (line {record.lineno}): {message[:1000]}"
    if record.exc_info and record.exc_info[0]:
      tb = "".join(traceback.format_exception(*record.exc_info))
      text += f"\n```{tb[-2500:]}```"
    return {"text": text, "unfurl_links": False}

  def _post(self, record: logging.LogRecord) -> None:
    try:
      requests.post(self.webhook_url, json=self.build_payload(record), timeout=10)
    except Exception:
      # A failing alert must never take logging down with it.
      pass


def install(webhook_url: str = "") -> AlertWebhookHandler | None:
  """Attach an AlertWebhookHandler to the root logger.

  Returns the handler, or None when no webhook URL is available.
  """
  url = webhook_url or ALERT_WEBHOOK_URL
  if not url:
    return None
  handler = AlertWebhookHandler(webhook_url=url)
  logging.getLogger().addHandler(handler)
  return handler
