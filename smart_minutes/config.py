"""
Runtime configuration read from environment variables.

Values are read once at import time, mirroring how Cloud Functions inject
configuration.  Tests override individual names with ``monkeypatch``.

* ``OUTPUT_BUCKET`` – Bucket that receives processed audio, transcripts,
  minutes documents and records (defaults to the event bucket when empty).
* ``AUDIO_PREFIX`` / ``TRANSCRIPTS_PREFIX`` – Folders watched for uploads.
* ``PROCESSED_PREFIX`` – Folder for the MP3 copy sent to Speech-to-Text.
* ``DOCUMENTS_PREFIX`` – Folder for published ``.docx`` minutes.
* ``RECORDS_PREFIX`` – Folder holding the JSON record store.
* ``STT_LANGUAGE_CODE``, ``STT_ALTERNATIVE_LANGUAGES``, ``STT_SPEAKER_COUNT``,
  ``STT_TIMEOUT_SECONDS`` – Speech recognition settings.
* ``GENAI_API_KEY`` / ``GENAI_MODEL`` – Generative model used for minutes.
* ``CORRECTIONS_FILE`` – Optional JSON correction table replacing the
  bundled one.
* ``LOG_LEVEL`` – Root logging level.
"""

import os
from typing import Optional, Tuple


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


def _split_codes(value: str) -> Tuple[str, ...]:
    return tuple(code.strip() for code in value.split(",") if code.strip())


OUTPUT_BUCKET = os.environ.get("OUTPUT_BUCKET", "")

AUDIO_PREFIX = os.environ.get("AUDIO_PREFIX", "Audios/")
TRANSCRIPTS_PREFIX = os.environ.get("TRANSCRIPTS_PREFIX", "Transcripts/")
PROCESSED_PREFIX = os.environ.get("PROCESSED_PREFIX", "Processed/")
DOCUMENTS_PREFIX = os.environ.get("DOCUMENTS_PREFIX", "Minutes/")
RECORDS_PREFIX = os.environ.get("RECORDS_PREFIX", "records/")

STT_LANGUAGE_CODE = os.environ.get("STT_LANGUAGE_CODE", "fil-PH")
STT_ALTERNATIVE_LANGUAGES = _split_codes(os.environ.get("STT_ALTERNATIVE_LANGUAGES", "en-US"))
STT_SPEAKER_COUNT = int(os.environ.get("STT_SPEAKER_COUNT", "2"))
STT_TIMEOUT_SECONDS = _optional_float(os.environ.get("STT_TIMEOUT_SECONDS"))

GENAI_API_KEY = os.environ.get("GENAI_API_KEY")
GENAI_MODEL = os.environ.get("GENAI_MODEL", "models/gemini-pro")

CORRECTIONS_FILE = os.environ.get("CORRECTIONS_FILE")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
