"""
Minutes‑of‑meeting generation.

This module asks a generative model to reformat a corrected transcript into
each of three fixed minutes templates.  It uses the ``google-generativeai``
library (Gemini).  You must specify a ``GENAI_API_KEY`` environment variable
for this module to produce any minutes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import google.generativeai as genai

from . import config
from .errors import SummarisationError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = "You are a helpful assistant who formats meeting transcriptions."
TEMPERATURE = 0.4


@dataclass(frozen=True)
class Template:
    """A minutes layout: display name, record field and prompt."""

    name: str
    field: str
    prompt: str

    def render(self, transcript: str) -> str:
        return self.prompt.format(transcript=transcript)


FORMAL_PROMPT = """Summarize the following transcription and format it like this formal Minutes of the Meeting:

[MEETING NAME:]
[DATE:]
[TIME:]
[VENUE:]
[PRESENT:]

[CALL TO ORDER:]
[Who started the meeting and at what time.]

[MATTERS ARISING:]
• Bullet points of major topics.

[MEETING AGENDA:]
• Agenda Title
   - Discussion points
   - Action points

[ANNOUNCEMENTS:]
[List]

[ADJOURNMENT:]
[Closing remarks]

Here is the transcription:
"{transcript}\""""

SIMPLE_PROMPT = """Summarize and format this as a simple MoM:

Meeting Title:
Date:
Time:
Venue:
Attendees:

Key Points Discussed:
- ...

Action Items:
- ...

Closing Notes:
"{transcript}\""""

DETAILED_PROMPT = """Summarize this transcript into a detailed Minutes of the Meeting with:

Meeting Information
- Name
- Date
- Time
- Venue
- Participants

Detailed Agenda:
For each item:
• Title
• Discussions
• Decisions
• Action points

Other Announcements:
Closing:
"{transcript}\""""

TEMPLATES: Tuple[Template, ...] = (
    Template("Template-Formal", "formal_template", FORMAL_PROMPT),
    Template("Template-Simple", "simple_template", SIMPLE_PROMPT),
    Template("Template-Detailed", "detailed_template", DETAILED_PROMPT),
)


def summarise(text: str, template: Template) -> str:
    """Format a transcript into the minutes layout of ``template``.

    Args:
        text: The corrected transcript.
        template: One of :data:`TEMPLATES`.

    Returns:
        The minutes text produced by the model.

    Raises:
        SummarisationError: If no API key is configured, the model call
            fails or the model returns no text.
    """
    if not config.GENAI_API_KEY:
        raise SummarisationError("GENAI_API_KEY is not set", template=template.name)
    genai.configure(api_key=config.GENAI_API_KEY)
    try:
        logger.info("Calling generative model %s for %s", config.GENAI_MODEL, template.name)
        model = genai.GenerativeModel(config.GENAI_MODEL, system_instruction=SYSTEM_INSTRUCTION)
        response = model.generate_content(
            template.render(text),
            generation_config={"temperature": TEMPERATURE},
        )
        summary = response.text.strip()
    except Exception as exc:  # network and blocked-response errors
        raise SummarisationError(f"Model call failed: {exc}", template=template.name) from exc
    if not summary:
        raise SummarisationError("Model returned an empty summary", template=template.name)
    return summary
