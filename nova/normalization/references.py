"""Document-reference normalization for upstream step text.

The upstream backend refers to generated documents with a few different
inline markups. Before any step reaches a client, the first recognized
reference in each text step is rewritten to the canonical form
``<DOCUMENTID>{id}</DOCUMENTID>``. Everything here is pure text processing.

Recognized forms, in priority order:

1. ``<DOCUMENTID>abc123</DOCUMENTID>`` (also ``<document>`` / ``<doc>`` pairs)
2. ``<doc id="abc123">``, ``<document id='abc123'/>`` or ``<doc id="abc123">text</doc>``
   (the inner text is kept after the canonical tag)
3. ``[DOCUMENT: abc123]`` (also ``[DOC=abc123]``, ``[DOCUMENTID:abc123]``)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

CANONICAL_TAG = "DOCUMENTID"
TEXT_STEP_TYPES = frozenset({"text", "speak"})

_ID = r"[\w-]+"
_TAG_NAMES = r"DOCUMENTID|DOCUMENT|DOC"


def canonical_reference(document_id: str) -> str:
    return f"<{CANONICAL_TAG}>{document_id}</{CANONICAL_TAG}>"


@dataclass(frozen=True)
class ReferencePattern:
    """One recognized markup form and how to pull the id out of a match."""

    name: str
    regex: re.Pattern[str]
    extractor: Callable[[re.Match[str]], str]
    # Text inside the matched markup that stays visible after the canonical tag.
    trailing: Optional[Callable[[re.Match[str]], str]] = None

    def search(self, text: str) -> Optional[re.Match[str]]:
        return self.regex.search(text)


def _group(name: str) -> Callable[[re.Match[str]], str]:
    return lambda match: match.group(name)


REFERENCE_PATTERNS: Tuple[ReferencePattern, ...] = (
    ReferencePattern(
        name="paired_tag",
        regex=re.compile(
            rf"<(?P<tag>{_TAG_NAMES})>\s*(?P<id>{_ID})\s*</(?P=tag)>", re.IGNORECASE
        ),
        extractor=_group("id"),
    ),
    ReferencePattern(
        name="attribute_tag",
        regex=re.compile(
            rf"<(?P<tag>{_TAG_NAMES})\s+id\s*=\s*(?P<quote>[\"'])(?P<id>{_ID})(?P=quote)\s*"
            rf"(?:/>|>(?:(?P<body>[^<]*)</(?P=tag)>)?)",
            re.IGNORECASE,
        ),
        extractor=_group("id"),
        trailing=lambda match: match.group("body") or "",
    ),
    ReferencePattern(
        name="bracket_marker",
        regex=re.compile(rf"\[(?:{_TAG_NAMES})\s*[:=]\s*(?P<id>{_ID})\s*\]", re.IGNORECASE),
        extractor=_group("id"),
    ),
)

_CANONICAL_RE = re.compile(rf"<{CANONICAL_TAG}>(?P<id>{_ID})</{CANONICAL_TAG}>")
_CLOSING_PUNCTUATION = frozenset(".,;:!?)]")


def normalize_message(
    message: str, patterns: Sequence[ReferencePattern] = REFERENCE_PATTERNS
) -> str:
    """Rewrite the first reference of the first matching pattern; else return message."""
    for pattern in patterns:
        match = pattern.search(message)
        if match is None:
            continue
        replacement = canonical_reference(pattern.extractor(match))
        if pattern.trailing is not None:
            replacement += pattern.trailing(match)
        return message[: match.start()] + replacement + message[match.end():]
    return message


def _step_message(step: Any) -> Optional[str]:
    if not isinstance(step, dict) or step.get("type") not in TEXT_STEP_TYPES:
        return None
    payload = step.get("payload")
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    return message if isinstance(message, str) else None


def normalize_steps(
    steps: Sequence[Dict[str, Any]],
    patterns: Sequence[ReferencePattern] = REFERENCE_PATTERNS,
) -> List[Dict[str, Any]]:
    """Return steps with document references in text/speak messages canonicalized.

    Count and order are preserved. Steps that are not text, or whose message
    holds no recognized reference, are returned as the very same objects.
    Rewritten steps are shallow copies; the inputs are never mutated.
    """
    normalized: List[Dict[str, Any]] = []
    for step in steps:
        message = _step_message(step)
        if message is None:
            normalized.append(step)
            continue
        rewritten = normalize_message(message, patterns)
        if rewritten == message:
            normalized.append(step)
            continue
        normalized.append({**step, "payload": {**step["payload"], "message": rewritten}})
    return normalized


def split_canonical_reference(message: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a normalized message into (display_text, document_id).

    The canonical tag is removed from the text. Display text is None when
    nothing but the tag was present; document_id is None when no tag exists.
    """
    match = _CANONICAL_RE.search(message)
    if match is None:
        return message, None
    before = message[: match.start()].rstrip()
    after = message[match.end():].lstrip()
    if before and after:
        separator = "" if after[0] in _CLOSING_PUNCTUATION else " "
        text = f"{before}{separator}{after}"
    else:
        text = before or after
    return (text or None), match.group("id")
