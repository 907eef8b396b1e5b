# domain/model/analysis.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class Morpheme:
    """Smallest meaningful unit of a word."""
    text: str
    type: str
    meaning: str
    translation_uk: str | None = None

    @staticmethod
    def from_payload(data: dict[str, Any]) -> 'Morpheme':
        return Morpheme(
            text=data["text"],
            type=data["type"],
            meaning=data["meaning"],
            translation_uk=data.get("translationUk"),
        )


@dataclass(frozen=True)
class AnalyzedWord:
    """One token of the analyzed sentence, punctuation included."""
    id: str
    original: str
    lemma: str
    part_of_speech: str
    morphemes: tuple[Morpheme, ...]
    is_punctuation: bool
    translation: str | None = None
    group_id: str | None = None
    group_meaning: str | None = None
    group_translation: str | None = None

    @staticmethod
    def from_payload(data: dict[str, Any]) -> 'AnalyzedWord':
        return AnalyzedWord(
            id=data["id"],
            original=data["original"],
            lemma=data["lemma"],
            part_of_speech=data["partOfSpeech"],
            morphemes=tuple(Morpheme.from_payload(m) for m in data["morphemes"]),
            is_punctuation=data["isPunctuation"],
            translation=data.get("translation"),
            group_id=data.get("groupId"),
            group_meaning=data.get("groupMeaning"),
            group_translation=data.get("groupTranslation"),
        )

    @property
    def root_morphemes(self) -> tuple[Morpheme, ...]:
        return tuple(m for m in self.morphemes if m.type == "root")

    @property
    def is_grouped(self) -> bool:
        return self.group_id is not None


@dataclass(frozen=True)
class WordTreeEntry:
    """A word derived from the root, with the root's position inside it."""
    word: str
    meaning: str
    root_highlight: tuple[int, int]

    def clamped_highlight(self) -> tuple[int, int]:
        """Return (start, length) clamped to the bounds of ``word``."""
        start, length = self.root_highlight
        start = max(0, min(start, len(self.word)))
        length = max(0, min(length, len(self.word) - start))
        return start, length


@dataclass(frozen=True)
class WordTreeResult:
    """Words sharing one root morpheme, simplest first."""
    root: str
    root_meaning: str
    derivatives: tuple[WordTreeEntry, ...]

    @staticmethod
    def from_payload(data: dict[str, Any]) -> 'WordTreeResult':
        return WordTreeResult(
            root=data["root"],
            root_meaning=data["rootMeaning"],
            derivatives=tuple(
                WordTreeEntry(
                    word=entry["word"],
                    meaning=entry["meaning"],
                    root_highlight=(int(entry["rootHighlight"][0]), int(entry["rootHighlight"][1])),
                )
                for entry in data["derivatives"]
            ),
        )


# ── AnalysisResult ───────────────────────────────────────


@dataclass(frozen=True)
class AnalysisResult:
    """Result of one successful sentence analysis.

    ``partial`` is True when trailing words were dropped while salvaging a
    truncated model response.
    """
    id: str
    sentence: str
    words: tuple[AnalyzedWord, ...]
    analyzed_at: datetime
    sentence_translation: str | None = None
    partial: bool = False
    model: str | None = field(default=None, compare=False)

    @staticmethod
    def create(
        payload: dict[str, Any],
        partial: bool = False,
        model: str | None = None,
    ) -> 'AnalysisResult':
        """Build a result from a validated payload with a fresh id and timestamp."""
        return AnalysisResult(
            id=str(uuid.uuid4()),
            sentence=payload["sentence"],
            words=tuple(AnalyzedWord.from_payload(w) for w in payload["words"]),
            analyzed_at=datetime.now(timezone.utc),
            sentence_translation=payload.get("sentenceTranslation"),
            partial=partial,
            model=model,
        )

    def groups(self) -> dict[str, list[AnalyzedWord]]:
        """Words of each multi-word expression, keyed by group id, in sentence order."""
        result: dict[str, list[AnalyzedWord]] = {}
        for word in self.words:
            if word.group_id is not None:
                result.setdefault(word.group_id, []).append(word)
        return result
