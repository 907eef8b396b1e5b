"""Canonical vocabularies and response shapes for model output.

Both the structured-output schema sent to the provider and the local
validators are derived from the definitions in this module.
"""

from types import MappingProxyType
from typing import Any

PARTS_OF_SPEECH: tuple[str, ...] = (
    "noun",
    "verb",
    "auxiliary_verb",
    "adjective",
    "adverb",
    "pronoun",
    "preposition",
    "conjunction",
    "interjection",
    "determiner",
    "particle",
    "numeral",
    "phrasal_verb",
    "idiom",
    "modal_structure",
    "unknown",
)

MORPHEME_TYPES: tuple[str, ...] = ("prefix", "root", "suffix", "ending", "infix")

# Part-of-speech tags used for multi-word expressions
GROUP_PARTS_OF_SPEECH: frozenset[str] = frozenset({"phrasal_verb", "idiom", "modal_structure"})

GROUP_FIELDS: tuple[str, ...] = ("groupId", "groupMeaning", "groupTranslation")

# Fields the provider is asked to always emit. Looser than the local contract:
# the normalizer fills the gap before validation.
REQUIRED_RESULT_FIELDS: tuple[str, ...] = ("sentence", "sentenceTranslation", "words")
REQUIRED_WORD_FIELDS: tuple[str, ...] = (
    "id",
    "original",
    "lemma",
    "partOfSpeech",
    "morphemes",
    "isPunctuation",
)
REQUIRED_MORPHEME_FIELDS: tuple[str, ...] = ("text", "type", "meaning")

MORPHEME_FIELD_TYPES = MappingProxyType({
    "text": "string",
    "type": "string",
    "meaning": "string",
    "translationUk": "string",
})

WORD_FIELD_TYPES = MappingProxyType({
    "id": "string",
    "original": "string",
    "lemma": "string",
    "partOfSpeech": "string",
    "translation": "string",
    "morphemes": "array",
    "isPunctuation": "boolean",
    "groupId": "string",
    "groupMeaning": "string",
    "groupTranslation": "string",
})

ENUM_FIELDS = MappingProxyType({
    "partOfSpeech": PARTS_OF_SPEECH,
    "type": MORPHEME_TYPES,
})


def _object_schema(field_types, required, items=None) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for name, json_type in field_types.items():
        prop: dict[str, Any] = {"type": json_type}
        if name in ENUM_FIELDS:
            prop["enum"] = list(ENUM_FIELDS[name])
        if json_type == "array" and items is not None:
            prop["items"] = items
        properties[name] = prop
    return {"type": "object", "properties": properties, "required": list(required)}


def analysis_response_schema() -> dict[str, Any]:
    """JSON schema for the sentence analysis structured-output constraint."""
    morpheme = _object_schema(MORPHEME_FIELD_TYPES, REQUIRED_MORPHEME_FIELDS)
    word = _object_schema(WORD_FIELD_TYPES, REQUIRED_WORD_FIELDS, items=morpheme)
    return {
        "type": "object",
        "properties": {
            "sentence": {"type": "string"},
            "sentenceTranslation": {"type": "string"},
            "words": {"type": "array", "items": word},
        },
        "required": list(REQUIRED_RESULT_FIELDS),
    }


def word_tree_response_schema() -> dict[str, Any]:
    """JSON schema describing a word derivation tree."""
    return {
        "type": "object",
        "properties": {
            "root": {"type": "string"},
            "rootMeaning": {"type": "string"},
            "derivatives": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "word": {"type": "string"},
                        "meaning": {"type": "string"},
                        "rootHighlight": {
                            "type": "array",
                            "items": {"type": "integer"},
                            "minItems": 2,
                            "maxItems": 2,
                        },
                    },
                    "required": ["word", "meaning", "rootHighlight"],
                },
            },
        },
        "required": ["root", "rootMeaning", "derivatives"],
    }
