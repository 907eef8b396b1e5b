"""Strict structural validation of parsed model output.

The validators never mutate their input. They stop at the first violation
and report the failing field path (e.g. ``words[2].morphemes[0].type``).
"""

from dataclasses import dataclass
from typing import Any

from domain.model.schema import (
    ENUM_FIELDS,
    GROUP_FIELDS,
    MORPHEME_FIELD_TYPES,
    WORD_FIELD_TYPES,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation. ``field_path``/``reason`` are set on failure."""
    valid: bool
    field_path: str | None = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(True)


class _Invalid(Exception):
    def __init__(self, field_path: str, reason: str):
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"{field_path}: {reason}")


_PY_TYPES = {
    "string": (str,),
    "array": (list,),
    "boolean": (bool,),
    "object": (dict,),
}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _require(container: dict, name: str, json_type: str, path: str) -> Any:
    field_path = f"{path}.{name}" if path else name
    if name not in container:
        raise _Invalid(field_path, "is missing")
    value = container[name]
    if not isinstance(value, _PY_TYPES[json_type]):
        raise _Invalid(field_path, f"expected {json_type}, got {_type_name(value)}")
    return value


def _optional(container: dict, name: str, json_type: str, path: str) -> None:
    if name in container:
        _require(container, name, json_type, path)


def _require_enum(container: dict, name: str, path: str) -> None:
    field_path = f"{path}.{name}"
    value = container.get(name)
    if value not in ENUM_FIELDS[name]:
        raise _Invalid(field_path, f"{value!r} is not an allowed value")


def _validate_morpheme(morpheme: Any, path: str) -> None:
    if not isinstance(morpheme, dict):
        raise _Invalid(path, f"expected object, got {_type_name(morpheme)}")
    _require(morpheme, "text", MORPHEME_FIELD_TYPES["text"], path)
    _require_enum(morpheme, "type", path)
    _require(morpheme, "meaning", MORPHEME_FIELD_TYPES["meaning"], path)
    _optional(morpheme, "translationUk", MORPHEME_FIELD_TYPES["translationUk"], path)


def _validate_word(word: Any, path: str) -> None:
    if not isinstance(word, dict):
        raise _Invalid(path, f"expected object, got {_type_name(word)}")
    for name in ("id", "original", "lemma", "isPunctuation"):
        _require(word, name, WORD_FIELD_TYPES[name], path)
    _optional(word, "translation", WORD_FIELD_TYPES["translation"], path)
    _require_enum(word, "partOfSpeech", path)
    morphemes = _require(word, "morphemes", WORD_FIELD_TYPES["morphemes"], path)
    for name in GROUP_FIELDS:
        _optional(word, name, WORD_FIELD_TYPES[name], path)

    if not word["isPunctuation"]:
        if not any(isinstance(m, dict) and m.get("type") == "root" for m in morphemes):
            raise _Invalid(f"{path}.morphemes", f"word {word['original']!r} has no root morpheme")

    for i, morpheme in enumerate(morphemes):
        _validate_morpheme(morpheme, f"{path}.morphemes[{i}]")


def _check_analysis(data: Any) -> None:
    if not isinstance(data, dict):
        raise _Invalid("$", f"expected object, got {_type_name(data)}")
    _require(data, "sentence", "string", "")
    _optional(data, "sentenceTranslation", "string", "")
    words = _require(data, "words", "array", "")
    for i, word in enumerate(words):
        _validate_word(word, f"words[{i}]")


def validate_analysis_payload(data: Any) -> ValidationResult:
    """Check a (normalized) analysis payload against the full contract.

    Rules, in order: top level is an object with a string ``sentence``, an
    optional string ``sentenceTranslation`` and a ``words`` array; every
    word has string id/original/lemma, boolean isPunctuation, optional
    string translation, a known partOfSpeech, a morphemes array and
    optional string group fields; non-punctuation words have a root
    morpheme; every morpheme has string text, a known type, string meaning
    and optional string translationUk.
    """
    try:
        _check_analysis(data)
    except _Invalid as e:
        return ValidationResult(False, e.field_path, e.reason)
    return VALID


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _check_word_tree(data: Any) -> None:
    if not isinstance(data, dict):
        raise _Invalid("$", f"expected object, got {_type_name(data)}")
    _require(data, "root", "string", "")
    _require(data, "rootMeaning", "string", "")
    derivatives = _require(data, "derivatives", "array", "")
    for i, entry in enumerate(derivatives):
        path = f"derivatives[{i}]"
        if not isinstance(entry, dict):
            raise _Invalid(path, f"expected object, got {_type_name(entry)}")
        _require(entry, "word", "string", path)
        _require(entry, "meaning", "string", path)
        highlight = _require(entry, "rootHighlight", "array", path)
        if len(highlight) != 2 or not all(_is_integral(v) for v in highlight):
            raise _Invalid(f"{path}.rootHighlight", "expected [startIndex, length] integers")


def validate_word_tree_payload(data: Any) -> ValidationResult:
    """Check a word derivation tree payload.

    The highlight range is not checked against the word's length; renderers
    clamp it.
    """
    try:
        _check_word_tree(data)
    except _Invalid as e:
        return ValidationResult(False, e.field_path, e.reason)
    return VALID
