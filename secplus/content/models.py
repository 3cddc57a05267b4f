"""
Study Data Models.

These models represent the records flowing through the pipeline: the raw
corpus read from disk, and the concepts, flashcards and questions written
back out. ``to_dict`` emits the exact key names of the JSON file contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Confidence(str, Enum):
    """How much an extracted concept definition can be trusted."""
    HIGH = "high"      # Curated, or a long well-formed source sentence
    MEDIUM = "medium"  # Short copula sentence from the notes


class QuestionType(str, Enum):
    MCQ = "mcq"
    SHORT = "short"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


# =============================================================================
# Raw Corpus Models
# =============================================================================


@dataclass(frozen=True)
class CorpusSection:
    """One section of a domain: a heading plus its bullet points."""

    section_num: str
    name: str
    bullets: tuple[str, ...] = ()


@dataclass(frozen=True)
class CorpusDomain:
    """One exam domain of the raw corpus."""

    domain_num: int | None
    name: str
    sections: tuple[CorpusSection, ...] = ()

    @property
    def display(self) -> str:
        """Domain label used by concepts, e.g. '2.0'."""
        return f"{self.domain_num}.0" if self.domain_num is not None else ""


@dataclass(frozen=True)
class RawCorpus:
    """Parsed raw study corpus. Read-only input of the generators."""

    domains: tuple[CorpusDomain, ...] = ()
    practice_questions: dict[str, Any] = field(default_factory=dict)

    @property
    def total_bullets(self) -> int:
        return sum(len(s.bullets) for d in self.domains for s in d.sections)


# =============================================================================
# Generated Records
# =============================================================================


@dataclass
class Concept:
    """An atomic term -> definition pair with provenance."""

    concept_id: str
    term: str
    definition: str
    domain: str
    section: str
    confidence: Confidence = Confidence.HIGH
    notes: str = ""
    source_type: str = "pdf"

    def to_dict(self) -> dict:
        return {
            "conceptId": self.concept_id,
            "term": self.term,
            "definition": self.definition,
            "domain": self.domain,
            "section": self.section,
            "notes": self.notes,
            "source": {"type": self.source_type, "confidence": self.confidence.value},
        }


@dataclass
class Flashcard:
    """A question/answer study unit with domain and tag metadata."""

    id: str
    question: str
    answer: str
    tags: list[str] = field(default_factory=list)
    source: str = ""
    domain: str | None = None
    section: str | None = None

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return (
            " ".join(self.question.split()).lower(),
            " ".join(self.answer.split()).lower(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "tags": list(self.tags),
            "source": self.source,
            "domain": self.domain,
            "section": self.section,
        }


@dataclass
class McqQuestion:
    """Multiple-choice item; choices[answer_index] is the correct answer."""

    id: str
    source_card_id: str
    prompt: str
    choices: list[str]
    answer_index: int
    explanation: str
    domain: str
    tags: list[str] = field(default_factory=list)
    difficulty: int = 1

    @property
    def type(self) -> QuestionType:
        return QuestionType.MCQ

    @property
    def correct_answer(self) -> str:
        return self.choices[self.answer_index]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceCardId": self.source_card_id,
            "type": self.type.value,
            "prompt": self.prompt,
            "choices": list(self.choices),
            "answerIndex": self.answer_index,
            "explanation": self.explanation,
            "domain": self.domain,
            "tags": list(self.tags),
            "difficulty": self.difficulty,
        }


@dataclass
class ShortQuestion:
    """Short-answer item: define the term."""

    id: str
    source_card_id: str
    prompt: str
    answer: str
    domain: str
    tags: list[str] = field(default_factory=list)
    difficulty: int = 1

    @property
    def type(self) -> QuestionType:
        return QuestionType.SHORT

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceCardId": self.source_card_id,
            "type": self.type.value,
            "prompt": self.prompt,
            "answer": self.answer,
            "domain": self.domain,
            "tags": list(self.tags),
            "difficulty": self.difficulty,
        }


@dataclass
class PracticeQuestion:
    """Lettered practice question re-extracted by the merge tool."""

    id: str
    question: str
    options: list[str]
    correct_index: int
    explanation: str
    domain: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "correct_index": self.correct_index,
            "explanation": self.explanation,
            "domain": self.domain,
        }


@dataclass
class MergedCard:
    """Normalised front/back record of the merged corpus."""

    front: str
    back: str
    tags: list[str] = field(default_factory=list)
    domain: str | None = None

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return (self.front.lower(), self.back.lower())

    def to_dict(self) -> dict:
        data = {"front": self.front, "back": self.back, "tags": list(self.tags)}
        if self.domain:
            data["domain"] = self.domain
        return data
