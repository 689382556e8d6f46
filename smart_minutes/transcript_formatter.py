"""
Transcript formatting utilities.

The Speech‑to‑Text API returns a deeply nested structure where words are
nested within alternatives and results.  The functions in this module
flatten that structure into :class:`WordToken` objects and rebuild them into
a human‑readable, speaker‑segmented transcript such as::

    Speaker 1:
    hello world

    Speaker 2:
    hi
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .errors import MalformedTokenSequence

# Tag given to words when diarisation is disabled and the API sends none.
UNDIARISED_SPEAKER_TAG = 0


@dataclass(frozen=True)
class WordToken:
    """One recognised spoken word and the speaker it was attributed to."""

    text: str
    speaker_tag: Optional[int]


def flatten_word_info(data: Dict[str, Any]) -> List[WordToken]:
    """Extract the speaker‑tagged words from a STT response.

    With speaker diarisation enabled, the recogniser repeats every word of
    the recording, tagged with its speaker, in the final result.  Earlier
    results carry the same words without tags, so only the first
    alternative of the last result is read.

    Args:
        data: Parsed JSON dictionary returned from the Speech‑to‑Text API.

    Returns:
        Word tokens in the order they were spoken.  Words without a
        ``speakerTag`` receive :data:`UNDIARISED_SPEAKER_TAG`.
    """
    results = data.get("results") or []
    if not results:
        return []
    alternatives = results[-1].get("alternatives") or []
    if not alternatives:
        return []
    return [
        WordToken(text=wi["word"], speaker_tag=wi.get("speakerTag", UNDIARISED_SPEAKER_TAG))
        for wi in alternatives[0].get("words", [])
        if "word" in wi
    ]


def _check_token(index: int, token: Any) -> WordToken:
    if not isinstance(token, WordToken):
        raise MalformedTokenSequence(f"expected WordToken, got {type(token).__name__}", index)
    if not isinstance(token.text, str) or not token.text:
        raise MalformedTokenSequence("token text is missing", index)
    if token.speaker_tag is None:
        raise MalformedTokenSequence("token has no speaker tag", index)
    return token


def assemble(tokens: Iterable[WordToken]) -> str:
    """Convert time‑ordered word tokens into a speaker‑segmented transcript.

    A ``Speaker <tag>:`` header opens a new segment whenever a token's
    speaker differs from the one before it.  Token text is kept verbatim and
    each word is followed by a single space.

    Args:
        tokens: Word tokens in spoken order.  They are never reordered.

    Returns:
        The transcript with surrounding whitespace stripped, or ``""`` for
        no tokens.

    Raises:
        MalformedTokenSequence: If ``tokens`` is not iterable or a token is
            missing its text or speaker tag.
    """
    try:
        iterator = iter(tokens)
    except TypeError as exc:
        raise MalformedTokenSequence(f"tokens are not iterable: {exc}") from exc

    parts: List[str] = []
    current_speaker: Optional[int] = None
    for index, raw in enumerate(iterator):
        token = _check_token(index, raw)
        if index == 0 or token.speaker_tag != current_speaker:
            current_speaker = token.speaker_tag
            parts.append(f"\n\nSpeaker {current_speaker}:\n")
        parts.append(token.text + " ")
    return "".join(parts).strip()
