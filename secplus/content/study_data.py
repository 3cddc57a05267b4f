"""
Study data view.

Assembles the read-only data the study UI consumes (flashcards, practice
questions, per-domain stats) from whatever generated files are present.
Every file is optional: missing ones fall back to the base corpus or to
empty collections, so the view can always be built.

Usage:
    sources = load_sources(settings.data_dir, settings.corpus_path)
    data = build_study_data(sources)
    data.filter_flashcards("3")
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from .domains import DOMAIN_IDS, DOMAIN_NAMES, domain_name
from .parser import read_json
from .sampling import shuffled

ALL_DOMAINS = "all"
DEFAULT_METADATA = {"source": "Security+ Study", "exam": "SY0-701"}

FLASHCARDS_FILE = "flashcards.generated.json"
QUESTIONS_FILE = "questions.generated.json"
PRACTICE_STATIC_FILE = "practice_questions.static.json"


@dataclass(frozen=True)
class StudyDataSources:
    """Raw JSON payloads; None where the file does not exist."""

    base: Any = None
    flashcards: Any = None
    questions: Any = None
    practice_static: Any = None


@dataclass(frozen=True)
class StudyData:
    """Immutable view over flashcards, practice questions and stats."""

    flashcards: tuple[dict, ...] = ()
    practice_questions: tuple[dict, ...] = ()
    stats: dict = field(default_factory=dict)
    domains: tuple[dict, ...] = ()
    metadata: dict = field(default_factory=lambda: dict(DEFAULT_METADATA))

    def filter_flashcards(self, domain: str = ALL_DOMAINS) -> list[dict]:
        return _filter(self.flashcards, domain)

    def filter_questions(self, domain: str = ALL_DOMAINS) -> list[dict]:
        return _filter(self.practice_questions, domain)


def _filter(items: tuple[dict, ...], domain: str) -> list[dict]:
    if str(domain) == ALL_DOMAINS:
        return list(items)
    return [item for item in items if str(item.get("domain")) == str(domain)]


def _load_optional(path: Path) -> Any:
    if not path.exists():
        logger.debug(f"Optional study data file not found: {path}")
        return None
    return read_json(path)


def load_sources(data_dir: Path | str, corpus_path: Path | str) -> StudyDataSources:
    """Read the base corpus and the generated files that exist."""
    data_dir = Path(data_dir)
    return StudyDataSources(
        base=_load_optional(Path(corpus_path)),
        flashcards=_load_optional(data_dir / FLASHCARDS_FILE),
        questions=_load_optional(data_dir / QUESTIONS_FILE),
        practice_static=_load_optional(data_dir / PRACTICE_STATIC_FILE),
    )


# =============================================================================
# Flashcards
# =============================================================================


def _generated_cards(payload: Any) -> list:
    if not isinstance(payload, dict):
        return []
    cards = payload.get("cards") or payload.get("flashcards") or []
    return cards if isinstance(cards, list) else []


def _flashcards(sources: StudyDataSources, base_is_array: bool) -> list[dict]:
    generated = [c for c in _generated_cards(sources.flashcards) if isinstance(c, dict)]
    if generated:
        cards = []
        for c in generated:
            question = c.get("question") or c.get("front")
            domain = str(c.get("domain") or ALL_DOMAINS)
            cards.append({
                "id": c.get("id") or f"card-{str(question or '')[:8]}",
                "question": question,
                "answer": c.get("answer") or c.get("back"),
                "domain": domain,
                "domain_name": c.get("domain_name") or domain_name(domain),
                "section": c.get("section"),
            })
        return cards

    if base_is_array:
        return [
            {
                "id": f"card-{i}",
                "question": c.get("front") or c.get("question"),
                "answer": c.get("back") or c.get("answer"),
                "domain": ALL_DOMAINS,
                "domain_name": domain_name(ALL_DOMAINS),
            }
            for i, c in enumerate(sources.base)
            if isinstance(c, dict)
        ]

    if isinstance(sources.base, dict) and isinstance(sources.base.get("flashcards"), list):
        return [c for c in sources.base["flashcards"] if isinstance(c, dict)]
    return []


# =============================================================================
# Practice questions
# =============================================================================


def _reshuffle_options(options: list, correct: Any, rng: random.Random) -> tuple[list, int]:
    """Shuffle options and return the new index of ``correct`` (0 when absent)."""
    options = shuffled(options, rng)
    try:
        return options, options.index(correct)
    except ValueError:
        return options, 0


def _generated_questions(payload: Any, rng: random.Random) -> list[dict]:
    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        return []
    out = []
    for q in payload["questions"]:
        if not isinstance(q, dict) or q.get("type") != "mcq":
            continue
        choices = list(q.get("choices") or [])
        index = q.get("answerIndex", 0)
        correct = choices[index] if isinstance(index, int) and 0 <= index < len(choices) else None
        options, correct_index = _reshuffle_options(choices, correct, rng)
        out.append({
            "id": q.get("id"),
            "question": q.get("prompt"),
            "options": options,
            "correct_index": correct_index,
            "correct_answer": correct,
            "explanation": q.get("explanation") or correct,
            "domain": str(q.get("domain") or ALL_DOMAINS),
        })
    return out


def _static_questions(payload: Any, rng: random.Random) -> list[dict]:
    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        return []
    out = []
    for q in payload["questions"]:
        if not isinstance(q, dict):
            continue
        opts = list(q.get("options") or [])
        index = q.get("correct_index") or 0
        correct = opts[index] if isinstance(index, int) and 0 <= index < len(opts) else None
        options, correct_index = _reshuffle_options(opts, correct, rng)
        out.append({**q, "options": options, "correct_index": correct_index})
    return out


def _practice_questions(sources: StudyDataSources, base_is_array: bool, rng: random.Random) -> list[dict]:
    combined = [
        *_static_questions(sources.practice_static, rng),
        *_generated_questions(sources.questions, rng),
    ]
    if combined:
        return shuffled(combined, rng)

    if base_is_array or not isinstance(sources.base, dict):
        return []
    embedded = sources.base.get("practice_questions")
    if isinstance(embedded, dict):
        flat = [q for qs in embedded.values() if isinstance(qs, list) for q in qs if isinstance(q, dict)]
        return shuffled(flat, rng)
    if isinstance(embedded, list):
        return shuffled([q for q in embedded if isinstance(q, dict)], rng)
    return []


# =============================================================================
# Stats
# =============================================================================


def _count_by_domain(items: list[dict]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in items:
        d = str(item.get("domain") or ALL_DOMAINS)
        counts[d] = counts.get(d, 0) + 1
    return counts


def _domain_count(counts: dict[str, int], domain: str, total: int) -> int:
    # Untagged sets (every item in "all") get an even split as an estimate
    if any(d in DOMAIN_IDS for d in counts):
        return counts.get(domain, 0)
    return total // len(DOMAIN_IDS)


def _by_domain(base_stats: dict | None, flashcards: list[dict], questions: list[dict]) -> list[dict]:
    if base_stats and isinstance(base_stats.get("by_domain"), list):
        rows = [dict(r) for r in base_stats["by_domain"] if isinstance(r, dict)]
    else:
        rows = [
            {"domain": d, "name": name, "flashcards": 0, "questions": 0}
            for d, name in DOMAIN_NAMES.items()
        ]

    card_counts = _count_by_domain(flashcards)
    question_counts = _count_by_domain(questions)
    for row in rows:
        d = str(row.get("domain"))
        row["flashcards"] = _domain_count(card_counts, d, len(flashcards))
        if questions:
            row["questions"] = _domain_count(question_counts, d, len(questions))
        else:
            row["questions"] = row.get("questions", 0)
    return rows


def build_study_data(sources: StudyDataSources, rng: random.Random | None = None) -> StudyData:
    """
    Build the study view from loaded sources.

    Flashcards come from the generated file, else from a flat-array base
    corpus, else from the base corpus's own ``flashcards``. Practice questions
    are the static side file plus the generated MCQs (options reshuffled);
    when both are empty the base corpus's embedded questions are used.
    """
    rng = rng or random.Random()
    base = sources.base
    base_is_array = isinstance(base, list)
    base_dict = base if isinstance(base, dict) else {}
    base_stats = base_dict.get("stats") if isinstance(base_dict.get("stats"), dict) else None

    flashcards = shuffled(_flashcards(sources, base_is_array), rng)
    questions = _practice_questions(sources, base_is_array, rng)
    by_domain = _by_domain(base_stats, flashcards, questions)

    total_questions = len(questions) or (base_stats or {}).get("total_questions", 0)
    stats = {
        "total_flashcards": len(flashcards),
        "total_questions": total_questions,
        "by_domain": by_domain,
    }

    if isinstance(base_dict.get("domains"), list):
        domains = tuple(base_dict["domains"])
    else:
        domains = tuple(
            {"domain_num": row["domain"], "name": row.get("name", ""), "sections": []}
            for row in by_domain
        )

    metadata = base_dict.get("metadata") if isinstance(base_dict.get("metadata"), dict) else None
    logger.debug(f"Study data: {len(flashcards)} flashcards, {len(questions)} practice questions")

    return StudyData(
        flashcards=tuple(flashcards),
        practice_questions=tuple(questions),
        stats=stats,
        domains=domains,
        metadata=dict(metadata or DEFAULT_METADATA),
    )
