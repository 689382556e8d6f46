"""
Cloud Storage helpers.

Audio sent to the recogniser, published minutes documents and the
key‑value records that link a user to their transcripts and minutes all
live in one bucket:

* ``Processed/<timestamp>-<file>.mp3`` – audio handed to Speech‑to‑Text.
* ``Minutes/<file>.docx`` – publicly readable minutes documents.
* ``records/<collection>/<uid>/<push id>.json`` – one JSON record each.

Push ids start with a zero‑padded millisecond timestamp so listing a user's
records returns them oldest first.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from google.api_core import exceptions as api_exceptions
from google.cloud import storage

from . import config
from .documents import DOCX_MIME_TYPE
from .errors import StorageError

logger = logging.getLogger(__name__)

TRANSCRIPTIONS = "transcriptions"
SUMMARIES = "summaries"


def now_ms() -> int:
    return int(time.time() * 1000)


def upload_audio(bucket: storage.Bucket, data: bytes, filename: str) -> str:
    """Upload MP3 bytes under the processed prefix and return their ``gs://`` URI."""
    blob_name = f"{config.PROCESSED_PREFIX}{filename}"
    try:
        bucket.blob(blob_name).upload_from_string(data, content_type="audio/mpeg")
    except api_exceptions.GoogleAPIError as exc:
        raise StorageError(f"Could not upload {blob_name}: {exc}", operation="upload_audio") from exc
    logger.info("Uploaded audio to %s", blob_name)
    return f"gs://{bucket.name}/{blob_name}"


def publish_document(bucket: storage.Bucket, data: bytes, filename: str) -> str:
    """Upload a ``.docx``, make it readable by anyone and return its link."""
    blob = bucket.blob(f"{config.DOCUMENTS_PREFIX}{filename}")
    try:
        blob.upload_from_string(data, content_type=DOCX_MIME_TYPE)
        blob.make_public()
    except api_exceptions.GoogleAPIError as exc:
        raise StorageError(f"Could not publish {filename}: {exc}", operation="publish_document") from exc
    return blob.public_url


def download_bytes(bucket: storage.Bucket, name: str) -> bytes:
    """Download a blob's content."""
    try:
        return bucket.blob(name).download_as_bytes()
    except api_exceptions.GoogleAPIError as exc:
        raise StorageError(f"Could not download {name}: {exc}", operation="download") from exc


def read_text(bucket: storage.Bucket, name: str) -> Optional[Tuple[str, Dict[str, str]]]:
    """Return a text blob's content and metadata, or ``None`` if it does not exist."""
    try:
        blob = bucket.get_blob(name)
        if blob is None:
            return None
        return blob.download_as_text(), dict(blob.metadata or {})
    except api_exceptions.GoogleAPIError as exc:
        raise StorageError(f"Could not read {name}: {exc}", operation="read_text") from exc


def save_text(
    bucket: storage.Bucket,
    name: str,
    data: str,
    content_type: str = "text/plain",
    metadata: Optional[Dict[str, str]] = None,
) -> None:
    """Write ``data`` to ``name``, attaching custom ``metadata`` if given."""
    blob = bucket.blob(name)
    if metadata:
        blob.metadata = metadata
    try:
        blob.upload_from_string(data, content_type=content_type)
    except api_exceptions.GoogleAPIError as exc:
        raise StorageError(f"Could not write {name}: {exc}", operation="save_text") from exc
    logger.info("Saved %s", name)


def new_push_id() -> str:
    return f"{now_ms():013d}-{uuid.uuid4().hex[:8]}"


class RecordStore:
    """Per‑user collections of JSON records kept as Cloud Storage blobs."""

    def __init__(self, bucket: storage.Bucket, prefix: Optional[str] = None) -> None:
        self.bucket = bucket
        self.prefix = config.RECORDS_PREFIX if prefix is None else prefix

    def _collection(self, collection: str, uid: str) -> str:
        return f"{self.prefix}{collection}/{uid}/"

    def push(self, collection: str, uid: str, record: Dict[str, Any]) -> str:
        """Store ``record`` under a fresh push id and return the id."""
        key = new_push_id()
        name = f"{self._collection(collection, uid)}{key}.json"
        try:
            self.bucket.blob(name).upload_from_string(json.dumps(record), content_type="application/json")
        except api_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Could not write {name}: {exc}", uid=uid, operation="push") from exc
        logger.info("Saved record %s", name)
        return key

    def entries(self, collection: str, uid: str) -> List[Tuple[str, Dict[str, Any]]]:
        """Return ``(key, record)`` pairs of a collection, oldest first."""
        prefix = self._collection(collection, uid)
        try:
            blobs = sorted(self.bucket.list_blobs(prefix=prefix), key=lambda b: b.name)
            entries = []
            for blob in blobs:
                if not blob.name.endswith(".json"):
                    continue
                key = blob.name[len(prefix):-len(".json")]
                entries.append((key, json.loads(blob.download_as_text())))
        except api_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Could not list {prefix}: {exc}", uid=uid, operation="list") from exc
        return entries

    def push_transcription(self, uid: str, record: Dict[str, Any]) -> str:
        return self.push(TRANSCRIPTIONS, uid, record)

    def push_summary(self, uid: str, record: Dict[str, Any]) -> str:
        return self.push(SUMMARIES, uid, record)

    def list_minutes(self, uid: str) -> List[Dict[str, Any]]:
        """All minutes records of a user, each tagged with its ``summaryId``."""
        return [{"summaryId": key, **record} for key, record in self.entries(SUMMARIES, uid)]

    def latest_transcription(self, uid: str) -> Optional[Dict[str, Any]]:
        """The most recent transcription record of a user, if any."""
        entries = self.entries(TRANSCRIPTIONS, uid)
        return entries[-1][1] if entries else None
