"""
Cloud Function entrypoint for the transcription relay.

``gcs_event`` is a background function triggered by Cloud Storage events.
It inspects the object path to decide whether an audio recording or a
transcript was uploaded and dispatches processing accordingly:

* ``Audios/<uid>/<file>`` – transcribe, assemble and correct.
* ``Transcripts/<uid>/<file>.txt`` – generate and publish the minutes.

Configuration comes from environment variables, see
:mod:`smart_minutes.config`.  Deployment uses ``gcs_event`` as the
entrypoint.
"""

import json
import logging
from typing import Any, Dict

from . import config, tasks
from .errors import SmartMinutesError

logger = logging.getLogger(__name__)
logging.basicConfig(level=config.LOG_LEVEL, format="%(message)s")


def gcs_event(event: Dict[str, Any], context: Any) -> None:
    """Background function triggered by Cloud Storage.

    The event contains the ``bucket`` and ``name`` of the uploaded file.
    Pipeline errors (``SmartMinutesError``) are logged and not re-raised, so
    the platform does not redeliver the event.  Any other exception
    propagates.
    """
    bucket = event.get("bucket")
    name = event.get("name")
    if not bucket or not name:
        logger.warning("Received event with missing bucket or name: %s", event)
        return
    logger.info(json.dumps({"event": "gcs_trigger", "bucket": bucket, "file": name}))
    try:
        if name.startswith(config.AUDIO_PREFIX):
            tasks.process_audio_upload(bucket, name)
        elif name.startswith(config.TRANSCRIPTS_PREFIX):
            tasks.process_transcript_upload(bucket, name)
        else:
            logger.info("Unhandled upload path: %s", name)
    except SmartMinutesError:
        logger.exception("Error processing %s", name)
