"""
Practice Question Generator.

Builds multiple-choice and short-answer items from a flashcard set. No exam
questions are copied; every item is derived from a flashcard.

- Distractors come from the curated DISTRACTOR_BANK when the card's term (or
  answer) names a known concept, else from other answers in the corpus.
- Prompts rotate through scenario stems; cards that aren't "What is X?" get a
  generic describe-this-definition stem.
- The final set is a domain-stratified sample of the MCQs.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from ..cleaning.thresholds import (
    ANSWER_CHARS_MIN,
    CHOICES_PER_MCQ,
    DISTRACTOR_CHARS_MIN,
    DISTRACTOR_KEY_CHARS,
    PADDING_CHARS_MIN,
    STEM_SNIPPET_CHARS,
)
from ..domains import QUESTION_TARGETS, QUESTION_TOTAL, infer_domain
from ..errors import UnsupportedFormatError
from ..models import Flashcard, McqQuestion, ShortQuestion, utc_timestamp
from ..sampling import StratifiedSampler, shuffled
from ..text import content_id, normalize_whitespace
from .curated import (
    DISTRACTOR_BANK,
    GENERIC_STEM,
    SCENARIO_STEMS,
    SHORT_ANSWER_STEM,
)

DEFAULT_TAGS = ("security-plus", "sy0-701")
DEFAULT_MAX_CARDS = 600
DISTRACTORS_PER_MCQ = CHOICES_PER_MCQ - 1

WHAT_IS = re.compile(r"^What is\s+(.+?)\s*\??$", re.IGNORECASE)

ACCEPTED_SHAPES = [
    "an object with { cards: [...] }",
    "an object with { flashcards: [...] }",
    "an array of { question|front, answer|back }",
]


def extract_term(question: str) -> str | None:
    """'What is DMARC?' -> 'DMARC'. None for any other question shape."""
    match = WHAT_IS.match(question or "")
    return match.group(1).strip() if match else None


def lookup_key(text: str) -> str:
    return re.sub(r"\s+", " ", text.lower())[:DISTRACTOR_KEY_CHARS]


def pick_random(items: list[str], n: int, exclude: list[str], rng: random.Random) -> list[str]:
    return shuffled([x for x in items if x not in exclude], rng)[:n]


@dataclass
class QuestionSet:
    """Generator output: the sampled MCQs plus run counters."""

    questions: list[McqQuestion]
    generated_mcq: int = 0
    generated_short: int = 0
    skipped_cards: int = 0
    generated_at: str = field(default_factory=utc_timestamp)

    @property
    def count(self) -> int:
        return len(self.questions)

    def distribution(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for q in self.questions:
            counts[q.domain] = counts.get(q.domain, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at,
            "count": self.count,
            "questions": [q.to_dict() for q in self.questions],
        }


class QuestionGenerator:
    """
    Generate MCQ and short-answer items from flashcards.

    Usage:
        generator = QuestionGenerator(rng=random.Random(7))
        question_set = generator.generate(read_json("flashcards.generated.json"))
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        distractor_bank: dict[str, list[str]] | None = None,
    ):
        self.rng = rng or random.Random()
        self.distractor_bank = DISTRACTOR_BANK if distractor_bank is None else distractor_bank
        self._bank_keys = sorted(self.distractor_bank, key=len, reverse=True)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def load_cards(self, data: Any, source_path: str | None = None) -> list[Flashcard]:
        """Read generator output ({cards}) or a {flashcards}/array card list."""
        if isinstance(data, dict):
            records = data.get("cards")
            if records is None:
                records = data.get("flashcards")
        else:
            records = data
        if not isinstance(records, list):
            raise UnsupportedFormatError(ACCEPTED_SHAPES, source_path, what="flashcard JSON")

        cards = []
        for record in records:
            if not isinstance(record, dict):
                continue
            question = record.get("question") or record.get("front") or ""
            answer = record.get("answer") or record.get("back") or ""
            tags = record.get("tags")
            cards.append(
                Flashcard(
                    id=str(record.get("id") or content_id("card", str(question), str(answer))),
                    question=str(question),
                    answer=str(answer),
                    tags=list(tags) if isinstance(tags, list) else list(DEFAULT_TAGS),
                    source=str(record.get("source") or ""),
                    domain=record.get("domain"),
                    section=record.get("section"),
                )
            )
        return cards

    # ------------------------------------------------------------------
    # Distractors
    # ------------------------------------------------------------------

    def bank_entry(self, text: str) -> list[str]:
        """Curated distractors for ``text``: exact key first, then the longest whole-word key."""
        key = lookup_key(text)
        if key in self.distractor_bank:
            return list(self.distractor_bank[key])
        for bank_key in self._bank_keys:
            if re.search(rf"\b{re.escape(bank_key)}\b", key):
                return list(self.distractor_bank[bank_key])
        return []

    def get_distractors(self, correct: str, answer_pool: list[str], term: str | None = None) -> list[str]:
        """Three wrong answers: curated first, corpus answers as fallback."""
        pool = self.bank_entry(term or correct)

        if len(pool) < DISTRACTORS_PER_MCQ:
            pool = [
                a for a in answer_pool
                if a != correct and not correct.startswith(a) and len(a) > DISTRACTOR_CHARS_MIN
            ]

        exclude = [correct]
        picked = pick_random(pool, DISTRACTORS_PER_MCQ, exclude, self.rng)
        if len(picked) < DISTRACTORS_PER_MCQ:
            extra = [
                a for a in answer_pool
                if a not in exclude and a not in picked and len(a) > DISTRACTOR_CHARS_MIN
            ]
            for candidate in shuffled(extra, self.rng):
                if len(picked) >= DISTRACTORS_PER_MCQ:
                    break
                picked.append(candidate)
        return picked[:DISTRACTORS_PER_MCQ]

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def generate_mcq(self, card: Flashcard, answer_pool: list[str], index: int) -> McqQuestion | None:
        """
        Build one MCQ, or None if the corpus can't supply four distinct choices.

        choices[answer_index] is always the card's whitespace-normalised answer.
        """
        correct = normalize_whitespace(card.answer)
        term = extract_term(card.question)
        distractors = self.get_distractors(correct, answer_pool, term)

        if term:
            prompt = f"{SCENARIO_STEMS[index % len(SCENARIO_STEMS)]} {term}?"
        else:
            prompt = GENERIC_STEM.format(snippet=card.answer[:STEM_SNIPPET_CHARS])

        choices: list[str] = []
        for choice in [correct, *distractors]:
            if choice and choice not in choices:
                choices.append(choice)
        for filler in answer_pool:
            if len(choices) >= CHOICES_PER_MCQ:
                break
            if filler not in choices and len(filler) > PADDING_CHARS_MIN:
                choices.append(filler)

        if len(choices) < CHOICES_PER_MCQ:
            logger.debug(f"Not enough distinct choices for card {card.id}")
            return None

        options = shuffled(choices[:CHOICES_PER_MCQ], self.rng)
        try:
            answer_index = options.index(correct)
        except ValueError:
            answer_index = self.rng.randrange(len(options))
            options[answer_index] = correct

        definition = card.answer.strip()
        if term:
            explanation = f"{term} is the correct answer. {definition}"
        else:
            explanation = f"The correct answer is: {definition}"

        return McqQuestion(
            id=f"q-{card.id}-mcq",
            source_card_id=card.id,
            prompt=prompt,
            choices=options,
            answer_index=answer_index,
            explanation=explanation,
            domain=infer_domain(card.question, card.answer, card.domain),
            tags=list(card.tags),
            difficulty=1 + index % 3,
        )

    def generate_short(self, card: Flashcard, index: int) -> ShortQuestion | None:
        """Define-the-term item; only for "What is X?" cards."""
        term = extract_term(card.question)
        if not term:
            return None
        return ShortQuestion(
            id=f"q-{card.id}-short",
            source_card_id=card.id,
            prompt=SHORT_ANSWER_STEM.format(term=term),
            answer=card.answer,
            domain=infer_domain(card.question, card.answer, card.domain),
            tags=list(card.tags),
            difficulty=1 + index % 3,
        )

    def build_items(self, cards: list[Flashcard]) -> tuple[list[McqQuestion], list[ShortQuestion], int]:
        """All MCQ and short items for ``cards``, plus the number of skipped cards."""
        answer_pool = list(dict.fromkeys(
            a for a in (normalize_whitespace(c.answer) for c in cards) if a
        ))

        mcqs: list[McqQuestion] = []
        shorts: list[ShortQuestion] = []
        skipped = 0
        for index, card in enumerate(cards):
            if not card.question or not card.answer or len(card.answer) < ANSWER_CHARS_MIN:
                skipped += 1
                continue

            mcq = self.generate_mcq(card, answer_pool, index)
            if mcq is None:
                skipped += 1
            else:
                mcqs.append(mcq)

            short = self.generate_short(card, index)
            if short:
                shorts.append(short)

        return mcqs, shorts, skipped

    def sample(self, mcqs: list[McqQuestion], total: int = QUESTION_TOTAL) -> list[McqQuestion]:
        return StratifiedSampler(QUESTION_TARGETS, total, rng=self.rng).sample(mcqs)

    def generate(
        self,
        data: Any,
        max_cards: int = DEFAULT_MAX_CARDS,
        total: int = QUESTION_TOTAL,
        source_path: str | None = None,
    ) -> QuestionSet:
        cards = self.load_cards(data, source_path)[:max_cards]
        mcqs, shorts, skipped = self.build_items(cards)
        sampled = self.sample(mcqs, total)

        logger.info(
            f"Generated {len(mcqs)} MCQs and {len(shorts)} short items from "
            f"{len(cards)} cards; sampled {len(sampled)} MCQs"
        )
        return QuestionSet(
            questions=sampled,
            generated_mcq=len(mcqs),
            generated_short=len(shorts),
            skipped_cards=skipped,
        )
