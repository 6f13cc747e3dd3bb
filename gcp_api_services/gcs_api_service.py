"""Cloud Storage helpers: upload analyzed/generated videos and fetch gs:// objects."""

import logging

from configuration import Configuration
from gcp_api_services.gcp_connection import get_storage_client


def split_gcs_uri(uri: str) -> tuple[str, str]:
  """Split gs://bucket/path/to/blob into (bucket, blob name)."""
  if not uri.startswith("gs://"):
    raise ValueError(f"Not a Cloud Storage URI: {uri}")
  bucket, _, name = uri[len("gs://"):].partition("/")
  if not bucket or not name:
    raise ValueError(f"Incomplete Cloud Storage URI: {uri}")
  return bucket, name


def upload_file(
    config: Configuration,
    file_path: str,
    destination_name: str,
    content_type: str | None = None,
) -> str | None:
  """Upload a local file to the configured bucket and return the gs:// URI.

  Returns None when no bucket is configured.
  """
  if not config.bucket_name:
    logging.info("GCS_BUCKET_NAME not set, skipping upload of %s", destination_name)
    return None
  bucket = get_storage_client(config).bucket(config.bucket_name)
  blob = bucket.blob(destination_name)
  blob.upload_from_filename(file_path, content_type=content_type)
  uri = f"gs://{config.bucket_name}/{destination_name}"
  logging.info("Uploaded %s to %s", file_path, uri)
  return uri


def upload_bytes(
    config: Configuration,
    data: bytes,
    destination_name: str,
    content_type: str = "video/mp4",
) -> str | None:
  """Upload raw bytes to the configured bucket and return the gs:// URI."""
  if not config.bucket_name:
    logging.info("GCS_BUCKET_NAME not set, skipping upload of %s", destination_name)
    return None
  bucket = get_storage_client(config).bucket(config.bucket_name)
  blob = bucket.blob(destination_name)
  blob.upload_from_string(data, content_type=content_type)
  return f"gs://{config.bucket_name}/{destination_name}"


def download_bytes(config: Configuration, uri: str) -> bytes:
  """Download a gs:// object into memory."""
  bucket_name, blob_name = split_gcs_uri(uri)
  blob = get_storage_client(config).bucket(bucket_name).blob(blob_name)
  return blob.download_as_bytes()
