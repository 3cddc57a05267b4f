"""
Flashcard Generator.

Normalises two input shapes into one flashcard schema:

1. Card array:  [ { front, back, tags?, domain?, id?, source?, section? } ]
   (also accepted wrapped as { cards: [...] })
2. Raw corpus:  { domains: [ { domain_num, name, sections: [ { name, bullets } ] } ] }

Every card gets a domain (explicit or keyword-inferred), duplicates are
dropped and a domain-stratified sample is drawn.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from ..cleaning.thresholds import FLASHCARD_BULLET_CHARS_MIN
from ..domains import (
    FLASHCARD_FILL_ORDER,
    FLASHCARD_TARGETS,
    FLASHCARD_TOTAL,
    as_domain_id,
    infer_domain,
)
from ..errors import UnsupportedFormatError
from ..models import Flashcard, utc_timestamp
from ..parser import CorpusParser
from ..sampling import StratifiedSampler
from ..text import content_id, normalize_whitespace, slugify

CORPUS_TAGS = ("security-plus", "sy0-701")
CARD_SOURCE = "messer-practice-exams"
NOTES_SOURCE = "secplus-notes"
BULLET_QUESTION = "What should you know about: {bullet}?"

MUST_CONTAIN_LETTER = re.compile(r"[A-Za-z]")
DENYLIST = re.compile(
    r"\b(continued|example|types|overview|many and varied|and much more)\b", re.IGNORECASE
)

ACCEPTED_SHAPES = [
    "an array of { front, back, tags }",
    "an object with { domains: [...] }",
    "an object with { cards: [...] }",
]


@dataclass
class FlashcardSet:
    """Generator output: the sampled cards plus a generation timestamp."""

    cards: list[Flashcard]
    generated_at: str = field(default_factory=utc_timestamp)

    @property
    def count(self) -> int:
        return len(self.cards)

    def distribution(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for card in self.cards:
            counts[card.domain] = counts.get(card.domain, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at,
            "count": self.count,
            "cards": [c.to_dict() for c in self.cards],
        }


def is_usable_bullet(bullet: str) -> bool:
    """Long enough, has letters, and isn't a heading-like line."""
    return (
        len(bullet) >= FLASHCARD_BULLET_CHARS_MIN
        and MUST_CONTAIN_LETTER.search(bullet) is not None
        and DENYLIST.search(bullet) is None
    )


class FlashcardGenerator:
    """Normalise, dedupe and sample flashcards."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self.parser = CorpusParser()

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------

    def from_payload(self, data: Any, source_path: Path | str | None = None) -> list[Flashcard]:
        """Detect the input shape and convert it to flashcards."""
        if isinstance(data, list):
            return self.from_card_array(data)
        if isinstance(data, dict) and isinstance(data.get("domains"), list):
            return self.from_corpus(data, source_path)
        if isinstance(data, dict) and isinstance(data.get("cards"), list):
            return self.from_card_array(data["cards"])
        raise UnsupportedFormatError(ACCEPTED_SHAPES, source_path, what="flashcard JSON")

    def from_card_array(self, records: list[Any]) -> list[Flashcard]:
        cards = []
        for record in records:
            if not isinstance(record, dict):
                continue

            front = normalize_whitespace(record.get("front"))
            back = normalize_whitespace(record.get("back"))
            if not front or not back:
                continue

            raw_tags = record.get("tags")
            tags = [normalize_whitespace(t) for t in raw_tags] if isinstance(raw_tags, list) else []
            card_id = record.get("id")

            cards.append(
                Flashcard(
                    id=str(card_id) if card_id else content_id("messer", front, back),
                    question=front,
                    answer=back,
                    tags=[t for t in tags if t],
                    source=str(record["source"]) if record.get("source") else CARD_SOURCE,
                    domain=infer_domain(front, back, record.get("domain")),
                    section=record.get("section"),
                )
            )
        return cards

    def from_corpus(self, data: dict, source_path: Path | str | None = None) -> list[Flashcard]:
        corpus = self.parser.parse(data, source=source_path)
        cards = []

        for domain in corpus.domains:
            domain_name = normalize_whitespace(domain.name)
            for section in domain.sections:
                section_name = normalize_whitespace(section.name)
                for raw_bullet in section.bullets:
                    bullet = normalize_whitespace(raw_bullet)
                    if not is_usable_bullet(bullet):
                        continue

                    question = BULLET_QUESTION.format(bullet=bullet)
                    tags = list(CORPUS_TAGS)
                    if domain_name:
                        tags.append(slugify(domain_name))
                    if section_name:
                        tags.append(slugify(section_name))

                    cards.append(
                        Flashcard(
                            id=content_id("secplus", domain_name, section_name, bullet),
                            question=question,
                            answer=bullet,
                            tags=tags,
                            source=NOTES_SOURCE,
                            domain=infer_domain(question, bullet, as_domain_id(domain.domain_num)),
                            section=section_name or None,
                        )
                    )
        return cards

    # ------------------------------------------------------------------
    # Dedupe / sampling
    # ------------------------------------------------------------------

    @staticmethod
    def dedupe(cards: list[Flashcard]) -> list[Flashcard]:
        """Drop later cards whose normalised (question, answer) was already seen."""
        seen: set[tuple[str, str]] = set()
        out = []
        for card in cards:
            key = card.dedupe_key
            if key in seen:
                continue
            seen.add(key)
            out.append(card)
        return out

    def sample(self, cards: list[Flashcard], total: int = FLASHCARD_TOTAL) -> list[Flashcard]:
        sampler = StratifiedSampler(
            FLASHCARD_TARGETS,
            total,
            fill_order=FLASHCARD_FILL_ORDER,
            rng=self.rng,
        )
        return sampler.sample(cards)

    def generate(
        self,
        data: Any,
        source_path: Path | str | None = None,
        total: int = FLASHCARD_TOTAL,
    ) -> FlashcardSet:
        cards = self.from_payload(data, source_path)
        unique = self.dedupe(cards)
        if len(unique) < len(cards):
            logger.info(f"Dropped {len(cards) - len(unique)} duplicate flashcards")
        sampled = self.sample(unique, total)
        logger.info(f"Sampled {len(sampled)} of {len(unique)} flashcards (target {total})")
        return FlashcardSet(cards=sampled)
