"""
Audio conversion utilities.

The recogniser is configured for MP3 input, while uploads recorded on phones
usually arrive as M4A.  This module converts such audio to MP3 before it is
stored.  Conversions are performed locally using the `pydub` library which in turn
relies on `ffmpeg`.  Output is mono and sampled at 16 kHz to match the
recognition config in :mod:`smart_minutes.stt_service`.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError, CouldntEncodeError

from .errors import TranscodeError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".mp3", ".m4a", ".flac", ".wav", ".mp4"}
TRANSCODE_EXTENSIONS = SUPPORTED_EXTENSIONS - {".mp3"}
TARGET_SAMPLE_RATE = 16_000


def is_supported_audio(path: str) -> bool:
    """Check whether the file at ``path`` has a supported audio extension."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def needs_transcode(path: str) -> bool:
    """Whether an upload has to be converted to MP3 before transcription."""
    return Path(path).suffix.lower() in TRANSCODE_EXTENSIONS


def mp3_filename(name: str) -> str:
    """Replace the extension of ``name`` with ``.mp3``."""
    return str(Path(name).with_suffix(".mp3"))


def _temp_path(suffix: str) -> str:
    fd, tmp_path = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return tmp_path


def convert_to_mp3(
    data: bytes,
    *,
    source_format: str = "m4a",
    target_sample_rate: int = TARGET_SAMPLE_RATE,
) -> bytes:
    """Convert audio bytes to 16 kHz mono MP3 bytes.

    Args:
        data: Raw bytes of the source recording.
        source_format: Container/codec name understood by ffmpeg, e.g.
            ``m4a``.
        target_sample_rate: Desired sample rate for the output MP3.

    Returns:
        The encoded MP3 bytes.  Temporary files used for the conversion are
        removed before returning.

    Raises:
        TranscodeError: If ffmpeg cannot decode or encode the audio.
    """
    source_format = source_format.lstrip(".").lower()
    input_path = _temp_path(f".{source_format}")
    output_path: Optional[str] = None
    try:
        with open(input_path, "wb") as f:
            f.write(data)
        audio = AudioSegment.from_file(input_path, format=source_format)
        audio = audio.set_channels(1).set_frame_rate(target_sample_rate)
        output_path = _temp_path(".mp3")
        audio.export(output_path, format="mp3", codec="libmp3lame")
        with open(output_path, "rb") as f:
            converted = f.read()
    except (CouldntDecodeError, CouldntEncodeError) as exc:
        raise TranscodeError(f"Could not convert {source_format} audio: {exc}", source_format=source_format) from exc
    finally:
        cleanup_temp_file(input_path)
        cleanup_temp_file(output_path)
    logger.info("Converted %d bytes of %s to %d bytes of mp3", len(data), source_format, len(converted))
    return converted


def cleanup_temp_file(path: Optional[str]) -> None:
    """Remove a temporary file if it exists.

    Args:
        path: Path to the temporary file.  Nothing happens if ``path`` is
            ``None`` or the file does not exist.
    """
    if path and os.path.exists(path):
        try:
            os.remove(path)
        except OSError:
            logger.warning("Could not remove temporary file %s", path)
