"""Pydantic models for API request/response.

Responses use camelCase field names, the shape the UI consumes.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.model.analysis import AnalysisResult, AnalyzedWord, Morpheme, WordTreeResult

MAX_SENTENCE_LENGTH = 200


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests

class AnalyzeRequest(BaseModel):
    """Request model for sentence analysis."""
    sentence: Optional[str] = Field(None, validate_default=True, description="Sentence to analyze")

    @field_validator('sentence', mode='before')
    @classmethod
    def check_sentence(cls, v: Any) -> str:
        """Require a non-blank string of at most 200 characters; return it trimmed."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Sentence is required and must be a non-empty string")
        if len(v) > MAX_SENTENCE_LENGTH:
            raise ValueError(f"Sentence must be {MAX_SENTENCE_LENGTH} characters or fewer")
        return v.strip()


class WordTreeRequest(BaseModel):
    """Request model for a root derivation tree."""
    root: Optional[str] = Field(None, validate_default=True, description="Root morpheme")
    word: Optional[str] = Field(None, validate_default=True, description="Word the root appeared in")

    @field_validator('root', mode='before')
    @classmethod
    def check_root(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Root is required")
        return v.strip()

    @field_validator('word', mode='before')
    @classmethod
    def check_word(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Word is required")
        return v.strip()


# Responses

class MorphemeResponse(_CamelModel):
    text: str
    type: str
    meaning: str
    translation_uk: Optional[str] = None

    @classmethod
    def from_domain(cls, morpheme: Morpheme) -> 'MorphemeResponse':
        return cls(
            text=morpheme.text,
            type=morpheme.type,
            meaning=morpheme.meaning,
            translation_uk=morpheme.translation_uk,
        )


class AnalyzedWordResponse(_CamelModel):
    id: str
    original: str
    lemma: str
    part_of_speech: str
    morphemes: list[MorphemeResponse]
    is_punctuation: bool
    translation: Optional[str] = None
    group_id: Optional[str] = None
    group_meaning: Optional[str] = None
    group_translation: Optional[str] = None

    @classmethod
    def from_domain(cls, word: AnalyzedWord) -> 'AnalyzedWordResponse':
        return cls(
            id=word.id,
            original=word.original,
            lemma=word.lemma,
            part_of_speech=word.part_of_speech,
            morphemes=[MorphemeResponse.from_domain(m) for m in word.morphemes],
            is_punctuation=word.is_punctuation,
            translation=word.translation,
            group_id=word.group_id,
            group_meaning=word.group_meaning,
            group_translation=word.group_translation,
        )


class AnalysisResponse(_CamelModel):
    """Response model for sentence analysis."""
    id: str = Field(..., description="Analysis ID (UUID)")
    sentence: str
    sentence_translation: Optional[str] = None
    words: list[AnalyzedWordResponse]
    analyzed_at: datetime
    partial: Optional[bool] = Field(
        None, description="True when trailing words were dropped from a truncated response"
    )

    @classmethod
    def from_domain(cls, result: AnalysisResult) -> 'AnalysisResponse':
        return cls(
            id=result.id,
            sentence=result.sentence,
            sentence_translation=result.sentence_translation,
            words=[AnalyzedWordResponse.from_domain(w) for w in result.words],
            analyzed_at=result.analyzed_at,
            partial=True if result.partial else None,
        )


class WordTreeEntryResponse(_CamelModel):
    word: str
    meaning: str
    root_highlight: tuple[int, int]


class WordTreeResponse(_CamelModel):
    """Response model for a word derivation tree."""
    root: str
    root_meaning: str
    derivatives: list[WordTreeEntryResponse]

    @classmethod
    def from_domain(cls, result: WordTreeResult) -> 'WordTreeResponse':
        return cls(
            root=result.root,
            root_meaning=result.root_meaning,
            derivatives=[
                WordTreeEntryResponse(word=e.word, meaning=e.meaning, root_highlight=e.root_highlight)
                for e in result.derivatives
            ],
        )


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str
