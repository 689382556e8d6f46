"""
Orchestration layer for the transcription relay.

This module defines the functions called from the Cloud Storage entrypoint
in :mod:`smart_minutes.main`.  They coordinate the steps of the pipeline:

* When an audio file is uploaded to **Audios/<uid>/**, the pipeline
  downloads it, converts it to MP3 if needed, uploads the MP3 for the
  recogniser, runs speech‑to‑text, assembles the speaker‑segmented
  transcript, applies the correction table, and stores the transcript with a
  transcription record for the user.
* When a transcript lands in **Transcripts/<uid>/** (written by the step
  above or dropped there by hand), the pipeline turns it into the three
  minutes documents, publishes them and records their links.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google.cloud import storage

from . import audio_processor, config, corrections, documents, stt_service, summarizer
from .storage import RecordStore, download_bytes, now_ms, publish_document, read_text, save_text, upload_audio
from .transcript_formatter import assemble, flatten_word_info

logger = logging.getLogger(__name__)

RAW_JSON_PREFIX = "JSON_"
AUDIO_FILE_NAME_KEY = "audioFileName"
DEFAULT_AUDIO_FILE_NAME = "Transcription"


def _load_corrections() -> List[corrections.CorrectionRule]:
    if config.CORRECTIONS_FILE:
        return corrections.load_rules(config.CORRECTIONS_FILE)
    return list(corrections.DEFAULT_CORRECTIONS)


CORRECTIONS = _load_corrections()


def _log_event(event: str, **fields: Any) -> None:
    logger.info(json.dumps({"event": event, **fields}))


def _split_user_path(file_name: str, prefix: str) -> Optional[Tuple[str, str]]:
    """Split ``<prefix><uid>/<file>`` into ``(uid, file)``."""
    if not file_name.startswith(prefix):
        return None
    parts = file_name[len(prefix):].split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def _output_bucket(client: storage.Client, bucket_name: str) -> storage.Bucket:
    return client.bucket(config.OUTPUT_BUCKET or bucket_name)


def transcribe_to_text(gcs_uri: str, rules: Sequence[corrections.CorrectionRule]) -> Tuple[Dict[str, Any], str]:
    """Run speech recognition and return the raw response and corrected transcript."""
    response = stt_service.transcribe(gcs_uri)
    raw_transcript = assemble(flatten_word_info(response))
    return response, corrections.apply_corrections(raw_transcript, rules)


def process_audio_upload(
    bucket_name: str,
    file_name: str,
    *,
    rules: Optional[Sequence[corrections.CorrectionRule]] = None,
) -> Optional[Dict[str, Any]]:
    """Process an uploaded audio file.

    This function is intended to be called when a file is added to
    **Audios/<uid>/** in Cloud Storage.  It performs the following steps:

    1. Download the recording.
    2. Convert it to 16 kHz mono MP3 unless it already is MP3.
    3. Upload the MP3 as ``<timestamp>-<file>.mp3`` under the processed prefix.
    4. Transcribe it with speaker diarisation.
    5. Assemble the speaker segments and apply the correction table.
    6. Save the raw JSON response and the transcript under **Transcripts/<uid>/**
       and push a transcription record for the user.

    Args:
        bucket_name: Name of the Cloud Storage bucket.
        file_name: Full path of the uploaded file relative to the bucket.
        rules: Correction table; defaults to the table loaded at start‑up.

    Returns:
        The transcription record, or ``None`` when the upload was skipped.
    """
    user_path = _split_user_path(file_name, config.AUDIO_PREFIX)
    if user_path is None:
        _log_event("skip_prefix", file=file_name)
        return None
    uid, original_name = user_path
    if not audio_processor.is_supported_audio(original_name):
        _log_event("skip_type", file=file_name)
        return None
    _log_event("audio_upload", uid=uid, file=file_name)

    client = storage.Client()
    data = download_bytes(client.bucket(bucket_name), file_name)
    final_name = original_name
    if audio_processor.needs_transcode(original_name):
        data = audio_processor.convert_to_mp3(data, source_format=Path(original_name).suffix)
        final_name = audio_processor.mp3_filename(original_name)

    bucket = _output_bucket(client, bucket_name)
    gcs_uri = upload_audio(bucket, data, f"{now_ms()}-{final_name}")
    _log_event("start_transcription", uid=uid, gcs_uri=gcs_uri)
    response, transcript = transcribe_to_text(gcs_uri, CORRECTIONS if rules is None else rules)
    _log_event("transcription_complete", uid=uid, gcs_uri=gcs_uri, characters=len(transcript))

    base_name = Path(final_name).stem
    user_prefix = f"{config.TRANSCRIPTS_PREFIX}{uid}/"
    save_text(
        bucket,
        f"{user_prefix}{RAW_JSON_PREFIX}{base_name}.json",
        json.dumps(response),
        content_type="application/json",
    )
    text_name = f"{user_prefix}{base_name}.txt"
    save_text(bucket, text_name, transcript, metadata={AUDIO_FILE_NAME_KEY: final_name})
    _log_event("transcript_saved", uid=uid, path=text_name)

    record = {
        "filename": final_name,
        "text": transcript,
        "gcsUri": gcs_uri,
        "status": "Completed",
        "createdAt": now_ms(),
    }
    RecordStore(bucket).push_transcription(uid, record)
    return record


def generate_minutes(
    bucket: storage.Bucket,
    uid: str,
    transcript: str,
    audio_file_name: str = DEFAULT_AUDIO_FILE_NAME,
) -> Dict[str, Any]:
    """Create, publish and record the minutes documents for a transcript.

    Every template in :data:`smart_minutes.summarizer.TEMPLATES` is rendered
    by the generative model, turned into a ``.docx`` and published.  One
    summary record holding all links is pushed once every template succeeded.

    Returns:
        ``{"results": [{"template", "link"}, ...], "tableRecordId": <id>}``
    """
    results: List[Dict[str, str]] = []
    links: Dict[str, str] = {}
    for template in summarizer.TEMPLATES:
        summary = summarizer.summarise(transcript, template)
        doc_bytes = documents.build_minutes_document(summary, template.name)
        file_name = documents.document_filename(audio_file_name, template.name, now_ms())
        link = publish_document(bucket, doc_bytes, file_name)
        links[template.field] = link
        results.append({"template": template.name, "link": link})
        _log_event("minutes_published", uid=uid, template=template.name, link=link)

    record_id = RecordStore(bucket).push_summary(
        uid,
        {AUDIO_FILE_NAME_KEY: audio_file_name, "createdAt": now_ms(), **links},
    )
    return {"results": results, "tableRecordId": record_id}


def process_transcript_upload(bucket_name: str, file_name: str) -> Optional[Dict[str, Any]]:
    """Generate minutes for a newly stored transcript.

    Skips raw JSON responses and non‑text files.  An empty transcript falls
    back to the user's latest transcription record; without one it is skipped.

    Returns:
        The :func:`generate_minutes` result, or ``None`` when skipped.
    """
    user_path = _split_user_path(file_name, config.TRANSCRIPTS_PREFIX)
    if user_path is None:
        _log_event("skip_prefix", file=file_name)
        return None
    uid, base_name = user_path
    if base_name.startswith(RAW_JSON_PREFIX) or not base_name.endswith(".txt"):
        _log_event("skip_auxiliary", file=file_name)
        return None

    client = storage.Client()
    stored = read_text(client.bucket(bucket_name), file_name)
    if stored is None:
        _log_event("skip_missing", file=file_name)
        return None
    text, metadata = stored
    audio_file_name = metadata.get(AUDIO_FILE_NAME_KEY) or os.path.splitext(base_name)[0]
    bucket = _output_bucket(client, bucket_name)
    if not text.strip():
        latest = RecordStore(bucket).latest_transcription(uid)
        if not latest or not latest.get("text", "").strip():
            _log_event("skip_empty", file=file_name)
            return None
        _log_event("transcript_fallback", uid=uid, file=file_name)
        text = latest["text"]
        audio_file_name = latest.get("filename") or audio_file_name
    return generate_minutes(bucket, uid, text, audio_file_name)
