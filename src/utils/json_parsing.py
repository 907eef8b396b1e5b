"""JSON parsing utilities for LLM responses."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")

# End of one array element followed by the start of the next: },{
_ELEMENT_BOUNDARY = re.compile(r"\}\s*,\s*\{")

# Closes the words array and the top-level object
_CLOSING_SEQUENCE = "]}"


@dataclass(frozen=True)
class ParsedJSON:
    """Decoded model output. ``repaired`` marks a salvaged truncated payload."""
    data: Any
    repaired: bool = False


def strip_markdown_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    text = content.strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def repair_truncated_json(text: str) -> Any | None:
    """Salvage a truncated ``{"...": ..., "words": [{...}, {...}, {...`` payload.

    Cuts the text after the last complete array element, closes the array
    and the enclosing object, and parses the result. Boundaries are tried
    from the end backwards, so a cut inside a nested array (e.g. the
    morphemes of a half-written word) falls back to the previous word.
    Elements after the cut are dropped; nothing is invented.

    Returns:
        The parsed payload, or None if no boundary yields valid JSON.
    """
    boundaries = [m.start() for m in _ELEMENT_BOUNDARY.finditer(text)]
    for position in reversed(boundaries):
        candidate = text[:position + 1] + _CLOSING_SEQUENCE
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


def parse_model_json(content: str) -> ParsedJSON | None:
    """Parse model output, falling back to truncation repair.

    Returns:
        ParsedJSON, or None when the text is neither valid nor repairable.
    """
    text = strip_markdown_fences(content)
    try:
        return ParsedJSON(json.loads(text))
    except ValueError as e:
        logger.debug("Direct JSON parse failed, attempting truncation repair", extra={
            "error": str(e),
            "content_length": len(text),
        })

    repaired = repair_truncated_json(text)
    if repaired is None:
        logger.debug("Truncation repair failed", extra={
            "content_preview": text[:200],
        })
        return None
    return ParsedJSON(repaired, repaired=True)


def parse_json_content(content: str) -> Any | None:
    """Parse JSON from LLM response content without any repair.

    Handles plain JSON and JSON wrapped in markdown code fences.
    """
    try:
        return json.loads(strip_markdown_fences(content))
    except ValueError as e:
        logger.debug("Failed to parse JSON from content", extra={
            "error": str(e),
            "content_preview": content[:200]
        })
        return None
