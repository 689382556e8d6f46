"""
Google Speech‑to‑Text service wrapper.

This module encapsulates interaction with the Google Cloud Speech API.  The
``transcribe`` function takes a Cloud Storage URI for an MP3 file and
returns the API response as a dictionary, ready for
:func:`smart_minutes.transcript_formatter.flatten_word_info`.

Usage::

    from smart_minutes.stt_service import transcribe

    response = transcribe("gs://my-bucket/Processed/1700000000000-meeting.mp3")
    print(response["results"])
"""

import concurrent.futures
import logging
from typing import Any, Dict, Optional, Sequence

from google.api_core import exceptions as api_exceptions
from google.cloud import speech_v1p1beta1 as speech
from google.protobuf.json_format import MessageToDict

from . import config
from .audio_processor import TARGET_SAMPLE_RATE
from .errors import TranscriptionError

logger = logging.getLogger(__name__)


def build_config(
    *,
    language_code: str,
    alternative_language_codes: Sequence[str],
    speaker_count: int,
) -> speech.RecognitionConfig:
    """Recognition config for diarised 16 kHz MP3 audio."""
    diarisation_config = speech.SpeakerDiarizationConfig(
        enable_speaker_diarization=True,
        min_speaker_count=1,
        max_speaker_count=speaker_count,
    )
    return speech.RecognitionConfig(
        encoding=speech.RecognitionConfig.AudioEncoding.MP3,
        sample_rate_hertz=TARGET_SAMPLE_RATE,
        language_code=language_code,
        alternative_language_codes=list(alternative_language_codes),
        diarization_config=diarisation_config,
        model="default",
    )


def transcribe(
    gcs_uri: str,
    *,
    language_code: Optional[str] = None,
    alternative_language_codes: Optional[Sequence[str]] = None,
    speaker_count: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """Transcribe an audio file stored in Cloud Storage.

    Args:
        gcs_uri: A ``gs://`` URI pointing to the MP3 file to transcribe.
        language_code: BCP‑47 language tag (default: ``STT_LANGUAGE_CODE``).
        alternative_language_codes: Further languages the speakers may switch
            to (default: ``STT_ALTERNATIVE_LANGUAGES``).
        speaker_count: Maximum number of speakers to detect.
        timeout: Seconds to wait for the long‑running operation; ``None``
            waits until it finishes.

    Returns:
        A dictionary representation of the full Speech‑to‑Text response.

    Raises:
        TranscriptionError: If the request is rejected, the operation fails or
            the timeout elapses.
    """
    recognition_config = build_config(
        language_code=language_code or config.STT_LANGUAGE_CODE,
        alternative_language_codes=(
            config.STT_ALTERNATIVE_LANGUAGES
            if alternative_language_codes is None
            else alternative_language_codes
        ),
        speaker_count=speaker_count or config.STT_SPEAKER_COUNT,
    )
    audio = speech.RecognitionAudio(uri=gcs_uri)
    client = speech.SpeechClient()
    logger.info("Starting STT job for %s", gcs_uri)
    try:
        operation = client.long_running_recognize(config=recognition_config, audio=audio)
        response = operation.result(timeout=timeout if timeout is not None else config.STT_TIMEOUT_SECONDS)
    except (api_exceptions.GoogleAPIError, concurrent.futures.TimeoutError, TimeoutError) as exc:
        raise TranscriptionError(f"Speech recognition failed: {exc}", gcs_uri=gcs_uri) from exc
    logger.info("STT job complete for %s", gcs_uri)
    return MessageToDict(response._pb)
