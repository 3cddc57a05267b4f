"""
Study data merge tool.

Prepends a new batch of cards to the existing corpus file, optionally
dropping exact (case-insensitive) front/back duplicates, and re-extracts any
lettered practice questions embedded in the new batch into a side file.

Accepted card shapes (new and existing files alike):
- [ {front, back, tags?}, ... ]
- { cards: [...] } / { flashcards: [...] }
- { flashcards: { "Domain N: ...": [...] } }   (cards tagged with domain N)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from .domains import DEFAULT_DOMAIN, domain_from_name
from .errors import UnsupportedFormatError
from .models import MergedCard, PracticeQuestion
from .parser import read_json, write_json

DEFAULT_TAGS = ("security-plus", "sy0-701")
OPTION_LETTERS = ("A", "B", "C", "D")
MIN_OPTIONS = 2

ACCEPTED_SHAPES = [
    "an array of cards",
    "an object with { cards: [...] }",
    "an object with { flashcards: [...] }",
    'an object with { flashcards: { "Domain N": [...] } }',
]


@dataclass
class MergeResult:
    """Merged card list plus the sizes of its two inputs."""

    cards: list[MergedCard]
    new_count: int
    existing_count: int
    practice_questions: list[PracticeQuestion] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cards)

    @property
    def duplicates_dropped(self) -> int:
        return self.new_count + self.existing_count - self.total

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self.cards]


class StudyDataMerger:
    """
    Merge card batches into the study corpus.

    Usage:
        merger = StudyDataMerger(dedupe=True)
        result = merger.run(new_path, existing_path, out_path, practice_path)
    """

    def __init__(self, dedupe: bool = True):
        self.dedupe = dedupe

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------

    @staticmethod
    def to_cards(data: Any, source_path: Path | str | None = None) -> list[tuple[dict, str | None]]:
        """Flatten an input payload to (record, domain) pairs."""
        if isinstance(data, list):
            return [(c, None) for c in data]
        if isinstance(data, dict):
            if isinstance(data.get("cards"), list):
                return [(c, None) for c in data["cards"]]
            flashcards = data.get("flashcards")
            if isinstance(flashcards, list):
                return [(c, None) for c in flashcards]
            if isinstance(flashcards, dict):
                out = []
                for domain_label, records in flashcards.items():
                    if not isinstance(records, list):
                        continue
                    domain = domain_from_name(domain_label)
                    out.extend((c, domain) for c in records)
                return out
        raise UnsupportedFormatError(ACCEPTED_SHAPES, source_path, what="card JSON")

    @staticmethod
    def normalize(record: Any, domain: str | None = None) -> MergedCard | None:
        """front|question and back|answer, trimmed. None when either is missing."""
        if not isinstance(record, dict):
            return None
        front = str(record.get("front") or record.get("question") or "").strip()
        back = str(record.get("back") or record.get("answer") or "").strip()
        if not front or not back:
            return None

        raw_tags = record.get("tags")
        tags = list(raw_tags) if isinstance(raw_tags, list) else list(DEFAULT_TAGS)
        if domain and f"domain-{domain}" not in tags:
            tags.append(f"domain-{domain}")
        return MergedCard(front=front, back=back, tags=tags, domain=domain)

    def load(self, data: Any, source_path: Path | str | None = None) -> list[MergedCard]:
        cards = (self.normalize(record, domain) for record, domain in self.to_cards(data, source_path))
        return [c for c in cards if c is not None]

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    @staticmethod
    def dedupe_cards(cards: list[MergedCard]) -> list[MergedCard]:
        seen: set[tuple[str, str]] = set()
        out = []
        for card in cards:
            if card.dedupe_key in seen:
                continue
            seen.add(card.dedupe_key)
            out.append(card)
        return out

    def merge(self, new_data: Any, existing_data: Any = None) -> MergeResult:
        """New cards first, then existing ones; deduped when enabled."""
        new_cards = self.load(new_data)
        existing_cards = self.load(existing_data) if existing_data is not None else []
        return self._combine(new_cards, existing_cards)

    def _combine(self, new_cards: list[MergedCard], existing_cards: list[MergedCard]) -> MergeResult:
        merged = [*new_cards, *existing_cards]
        if self.dedupe:
            merged = self.dedupe_cards(merged)
        return MergeResult(
            cards=merged,
            new_count=len(new_cards),
            existing_count=len(existing_cards),
        )

    # ------------------------------------------------------------------
    # Practice questions
    # ------------------------------------------------------------------

    @staticmethod
    def extract_practice_questions(data: Any) -> list[PracticeQuestion]:
        """Re-extract lettered A-D practice questions from { practice_questions: {...} }."""
        if not isinstance(data, dict):
            return []
        practice = data.get("practice_questions")
        if not isinstance(practice, dict):
            return []

        questions = []
        for domain_label, records in practice.items():
            if not isinstance(records, list):
                continue
            domain = domain_from_name(domain_label) or DEFAULT_DOMAIN

            for i, record in enumerate(records):
                if not isinstance(record, dict) or not isinstance(record.get("options"), dict):
                    continue
                raw_options = record["options"]
                options = [str(raw_options[k]) for k in OPTION_LETTERS if raw_options.get(k)]
                if len(options) < MIN_OPTIONS:
                    continue

                letter = str(record.get("correct") or "A").upper()
                index = OPTION_LETTERS.index(letter) if letter in OPTION_LETTERS else 0
                correct_index = min(index, len(options) - 1)
                explanation = str(record.get("explanation") or "").strip()

                questions.append(
                    PracticeQuestion(
                        id=f"static-{domain}-{i}",
                        question=str(record.get("question") or "").strip(),
                        options=options,
                        correct_index=correct_index,
                        explanation=explanation or options[correct_index],
                        domain=domain,
                    )
                )
        return questions

    # ------------------------------------------------------------------
    # File run
    # ------------------------------------------------------------------

    def run(
        self,
        new_path: Path | str,
        existing_path: Path | str,
        out_path: Path | str,
        practice_path: Path | str,
    ) -> MergeResult:
        """Read, merge and write. The practice side file is written only when non-empty."""
        new_data = read_json(new_path)
        new_cards = self.load(new_data, new_path)

        existing_path = Path(existing_path)
        if existing_path.exists():
            existing_cards = self.load(read_json(existing_path), existing_path)
        else:
            logger.info(f"Existing file not found ({existing_path}), using new file only")
            existing_cards = []

        result = self._combine(new_cards, existing_cards)
        write_json(out_path, result.to_list())
        logger.info(
            f"Merged {result.new_count} new + {result.existing_count} existing -> {result.total} total"
        )

        result.practice_questions = self.extract_practice_questions(new_data)
        if result.practice_questions:
            write_json(
                practice_path,
                {
                    "questions": [q.to_dict() for q in result.practice_questions],
                    "count": len(result.practice_questions),
                },
            )
            logger.info(f"Extracted {len(result.practice_questions)} practice questions -> {practice_path}")

        return result
