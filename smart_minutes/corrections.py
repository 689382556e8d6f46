"""
Lexical corrections for recognised transcripts.

The recogniser consistently mishears a handful of words and phrases spoken
in the meetings.  :func:`apply_corrections` fixes them with an ordered table
of whole‑word/phrase substitutions.  Order matters: every rule runs against
the output of the rules before it, so a replacement can itself be matched
by a later rule.

Usage::

    from smart_minutes.corrections import DEFAULT_CORRECTIONS, apply_corrections

    text = apply_corrections("Young adults", DEFAULT_CORRECTIONS)
    # -> "yoong adults"
"""

import json
import logging
import re
from functools import lru_cache
from typing import Any, List, Pattern, Sequence, Tuple

from .errors import MalformedRuleTable

logger = logging.getLogger(__name__)

CorrectionRule = Tuple[str, str]

DEFAULT_CORRECTIONS: Tuple[CorrectionRule, ...] = (
    ("Thank you, sir. Have a good day in the", "Thank you sa pag attend"),
    ("young", "yoong"),
)


@lru_cache(maxsize=256)
def _rule_regex(pattern: str) -> Pattern[str]:
    # Neither neighbour may be a letter or digit.
    return re.compile(rf"(?<![^\W_]){re.escape(pattern)}(?![^\W_])", re.IGNORECASE)


def validate_rules(rules: Any) -> List[CorrectionRule]:
    """Check a correction table and return it as a list of pairs.

    Raises:
        MalformedRuleTable: If ``rules`` is not a sequence of
            ``(pattern, replacement)`` string pairs with non‑empty patterns.
    """
    if isinstance(rules, (str, bytes, dict)) or not isinstance(rules, Sequence):
        raise MalformedRuleTable(f"expected an ordered sequence of rules, got {type(rules).__name__}")
    checked: List[CorrectionRule] = []
    for index, rule in enumerate(rules):
        if isinstance(rule, (str, bytes)) or not isinstance(rule, Sequence) or len(rule) != 2:
            raise MalformedRuleTable("expected a (pattern, replacement) pair", index)
        pattern, replacement = rule
        if not isinstance(pattern, str) or not pattern:
            raise MalformedRuleTable("pattern is missing", index)
        if not isinstance(replacement, str):
            raise MalformedRuleTable("replacement is missing", index)
        checked.append((pattern, replacement))
    return checked


def apply_corrections(text: str, rules: Sequence[CorrectionRule]) -> str:
    """Apply an ordered table of whole‑word substitutions to ``text``.

    Each pattern is matched literally and case‑insensitively, only where it
    is not preceded or followed by a letter or digit, and every
    non‑overlapping occurrence is replaced verbatim.

    Args:
        text: The transcript to correct.
        rules: Ordered ``(pattern, replacement)`` pairs.

    Returns:
        The corrected text.  An empty table leaves ``text`` unchanged.

    Raises:
        MalformedRuleTable: If any rule lacks a pattern or replacement.
    """
    for pattern, replacement in validate_rules(rules):
        text, count = _rule_regex(pattern).subn(lambda _match, r=replacement: r, text)
        if count:
            logger.debug("Corrected %d occurrence(s) of %r", count, pattern)
    return text


def load_rules(path: str) -> List[CorrectionRule]:
    """Load a correction table from a JSON file.

    The file holds a list of ``[pattern, replacement]`` pairs in the order
    they should be applied.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    rules = validate_rules(data)
    logger.info("Loaded %d correction rules from %s", len(rules), path)
    return rules
