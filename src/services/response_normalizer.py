"""Response normalizer — repairs predictable shape drift in model output.

Runs after JSON parsing and before validation. It only coerces and fills
defaults; rejecting a payload is the validator's job.
"""

import copy
import logging
from typing import Any

from domain.model.schema import GROUP_FIELDS

logger = logging.getLogger(__name__)

SYNTHESIZED_ROOT_MEANING = "core lexical meaning"


def _has_root(morphemes: list) -> bool:
    return any(isinstance(m, dict) and m.get("type") == "root" for m in morphemes)


def _coerce_id(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return value


def _normalize_word(word: dict[str, Any], index: int) -> list[str]:
    """Normalize one word in place. Returns the names of applied fixes."""
    fixes: list[str] = []

    if "id" not in word:
        word["id"] = str(index)
        fixes.append("id_default")
    else:
        coerced = _coerce_id(word["id"])
        if coerced is not word["id"]:
            word["id"] = coerced
            fixes.append("id_coerced")

    if "isPunctuation" not in word:
        word["isPunctuation"] = False
        fixes.append("punctuation_default")

    if not word.get("lemma") and isinstance(word.get("original"), str):
        word["lemma"] = word["original"]
        fixes.append("lemma_from_original")

    if not isinstance(word.get("morphemes"), list):
        word["morphemes"] = []
        fixes.append("morphemes_default")

    if not word["isPunctuation"] and not _has_root(word["morphemes"]):
        lemma = word.get("lemma")
        original = word.get("original")
        if isinstance(lemma, str) and lemma.strip():
            root_text = lemma
        elif isinstance(original, str):
            root_text = original
        else:
            root_text = ""
        word["morphemes"].append({
            "text": root_text,
            "type": "root",
            "meaning": SYNTHESIZED_ROOT_MEANING,
        })
        fixes.append("root_synthesized")

    for name in GROUP_FIELDS:
        if word.get(name) == "":
            del word[name]
            fixes.append(f"{name}_empty_removed")

    return fixes


def normalize_analysis_payload(data: Any) -> Any:
    """Return a normalized copy of a parsed analysis payload.

    Non-object payloads, a non-list ``words`` and non-object word entries are
    passed through untouched for the validator to reject.
    """
    if not isinstance(data, dict):
        return data

    result = copy.deepcopy(data)
    words = result.get("words")
    if not isinstance(words, list):
        return result

    applied: dict[str, int] = {}
    for index, word in enumerate(words):
        if not isinstance(word, dict):
            continue
        for fix in _normalize_word(word, index):
            applied[fix] = applied.get(fix, 0) + 1

    if applied:
        logger.info("Normalized model response", extra={"fixes": applied})

    return result
