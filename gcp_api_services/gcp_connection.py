"""Centralized Google API connection module.

Provides cached clients for the Gemini API (GenAI SDK, either with an API
key or through Vertex AI), Cloud Storage and the Video Intelligence API.
All other service modules should use this instead of creating their own
clients.
"""

import threading
from collections import OrderedDict

from google import genai
from google.cloud import storage
from google.cloud import videointelligence

from configuration import Configuration


MAX_GENAI_CLIENTS = 16


class _ClientCache:
  """Thread-safe lazy cache for Google API clients."""

  def __init__(self, max_genai_clients: int = MAX_GENAI_CLIENTS):
    self._lock = threading.Lock()
    self._max_genai_clients = max(1, max_genai_clients)
    # least recently used first
    self._genai_clients: OrderedDict[tuple, genai.Client] = OrderedDict()
    self._storage_client: storage.Client | None = None
    self._video_intelligence_client: videointelligence.VideoIntelligenceServiceClient | None = None

  def get_genai_client(self, config: Configuration) -> genai.Client:
    # One client per credential set: users can type their own key in the dashboard.
    if config.use_vertexai:
      key = ("vertexai", config.project_id, config.project_zone)
    else:
      key = ("api_key", config.api_key)
    with self._lock:
      client = self._genai_clients.get(key)
      if client is not None:
        self._genai_clients.move_to_end(key)
        return client
      if config.use_vertexai:
        client = genai.Client(
            vertexai=True,
            project=config.project_id,
            location=config.project_zone,
        )
      else:
        client = genai.Client(api_key=config.api_key)
      self._genai_clients[key] = client
      while len(self._genai_clients) > self._max_genai_clients:
        self._genai_clients.popitem(last=False)
    return client

  def get_storage_client(self, config: Configuration) -> storage.Client:
    if self._storage_client is None:
      with self._lock:
        if self._storage_client is None:
          self._storage_client = storage.Client(project=config.project_id or None)
    return self._storage_client

  def get_video_intelligence_client(self) -> videointelligence.VideoIntelligenceServiceClient:
    if self._video_intelligence_client is None:
      with self._lock:
        if self._video_intelligence_client is None:
          self._video_intelligence_client = videointelligence.VideoIntelligenceServiceClient()
    return self._video_intelligence_client

  def clear(self) -> None:
    with self._lock:
      self._genai_clients.clear()
      self._storage_client = None
      self._video_intelligence_client = None


_cache = _ClientCache()

get_genai_client = _cache.get_genai_client
get_storage_client = _cache.get_storage_client
get_video_intelligence_client = _cache.get_video_intelligence_client
clear_clients = _cache.clear
