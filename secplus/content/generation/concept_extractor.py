"""
Concept Dictionary Extractor.

Turns each bullet of the raw study corpus into at most one atomic
term -> definition concept. ONE concept = ONE bullet; nothing is merged.

Extraction per section:
1. Curated section match: a section whose title has a curated definition
   becomes a concept directly.
2. Rule A (dash form):   "Term - definition"
3. Rule B (copula form): "Term is/are definition"

Anything else is counted as skipped. The first concept to claim a conceptId
wins; later candidates with the same slug are dropped.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field

from loguru import logger

from ..cleaning import (
    DISALLOWED_PREDICATE_OPENERS,
    MIXED_CASE_NOISE,
    check_definition,
    check_term,
)
from ..cleaning.thresholds import (
    BULLET_CHARS_MIN,
    HIGH_CONFIDENCE_CHARS,
    PREDICATE_CHARS_MIN,
)
from ..models import Concept, Confidence, CorpusDomain, CorpusSection, RawCorpus
from ..text import to_kebab, to_title_case
from .curated import CURATED_DEFINITIONS, get_curated_definition

DASH_FORM = re.compile(r"^(.+?)\s+[-–—]\s+(.+)$", re.DOTALL)
COPULA_FORM = re.compile(r"^(.+?)\s+(?:is|are)\s+(.+)$", re.DOTALL | re.IGNORECASE)
CONTINUED_MARKER = re.compile(r"\s*\(continued\)\s*", re.IGNORECASE)


@dataclass
class ExtractionStats:
    """Run diagnostics. Not part of the output file."""

    total_bullets: int = 0
    skipped_quality: int = 0
    curated: int = 0
    rule_a: int = 0
    rule_b: int = 0
    reject_reasons: dict[str, int] = field(default_factory=dict)

    def reject(self, reason: str) -> None:
        self.skipped_quality += 1
        self.reject_reasons[reason] = self.reject_reasons.get(reason, 0) + 1

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ExtractionResult:
    concepts: list[Concept]
    stats: ExtractionStats

    def by_domain(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for concept in self.concepts:
            d = concept.domain.split(".")[0]
            counts[d] = counts.get(d, 0) + 1
        return dict(sorted(counts.items()))

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self.concepts]


class ConceptExtractor:
    """
    Build the concept dictionary from a parsed corpus.

    Usage:
        result = ConceptExtractor().extract(CorpusParser().parse_file(path))
        write_json(out, result.to_list())
    """

    def __init__(self, curated: dict[str, str] | None = None):
        self.curated = CURATED_DEFINITIONS if curated is None else curated

    def extract(self, corpus: RawCorpus) -> ExtractionResult:
        by_key: dict[str, Concept] = {}
        stats = ExtractionStats()

        for domain in corpus.domains:
            for section in domain.sections:
                self._extract_section(domain, section, by_key, stats)

        # sorted() is stable: insertion order breaks (domain, section) ties
        concepts = sorted(by_key.values(), key=lambda c: (c.domain, c.section))

        logger.info(
            f"Extracted {len(concepts)} concepts from {stats.total_bullets} bullets "
            f"(curated={stats.curated}, rule_a={stats.rule_a}, rule_b={stats.rule_b}, "
            f"skipped={stats.skipped_quality})"
        )
        return ExtractionResult(concepts=concepts, stats=stats)

    def _extract_section(
        self,
        domain: CorpusDomain,
        section: CorpusSection,
        by_key: dict[str, Concept],
        stats: ExtractionStats,
    ) -> None:
        section_name = CONTINUED_MARKER.sub("", section.name).strip()
        section_key = to_kebab(section_name)
        if section_key:
            curated = get_curated_definition(section_key, self.curated)
            if curated and section_key not in by_key:
                by_key[section_key] = self._concept(
                    section_key, section_name, curated, domain, section, Confidence.HIGH
                )
                stats.curated += 1

        for bullet in section.bullets:
            stats.total_bullets += 1
            self._extract_bullet(bullet, domain, section, by_key, stats)

    def _extract_bullet(
        self,
        bullet: str,
        domain: CorpusDomain,
        section: CorpusSection,
        by_key: dict[str, Concept],
        stats: ExtractionStats,
    ) -> None:
        text = (bullet or "").strip()
        if len(text) < BULLET_CHARS_MIN:
            stats.reject("TOO_SHORT")
            return

        dash = DASH_FORM.match(text)
        if dash:
            term, definition = dash.group(1).strip(), dash.group(2).strip()
            reason = check_term(term) or check_definition(definition)
            if reason:
                logger.debug(f"Rule A rejected ({reason.value}): {text[:60]}")
                stats.reject(reason.value)
                return
            key = to_kebab(term)
            if key and key not in by_key:
                final = get_curated_definition(key, self.curated) or definition
                by_key[key] = self._concept(key, term, final, domain, section, Confidence.HIGH)
                stats.rule_a += 1
            return

        copula = COPULA_FORM.match(text)
        if copula:
            subject, predicate = copula.group(1).strip(), copula.group(2).strip()
            reason = self._check_copula(text, subject, predicate)
            if reason:
                logger.debug(f"Rule B rejected ({reason}): {text[:60]}")
                stats.reject(reason)
                return
            key = to_kebab(subject)
            if key and key not in by_key:
                curated = get_curated_definition(key, self.curated)
                if curated or len(text) > HIGH_CONFIDENCE_CHARS:
                    confidence = Confidence.HIGH
                else:
                    confidence = Confidence.MEDIUM
                by_key[key] = self._concept(
                    key, subject, curated or text, domain, section, confidence
                )
                stats.rule_b += 1
            return

        stats.reject("NO_PATTERN")

    def _check_copula(self, sentence: str, subject: str, predicate: str) -> str | None:
        if len(predicate) < PREDICATE_CHARS_MIN:
            return "PREDICATE_TOO_SHORT"
        if DISALLOWED_PREDICATE_OPENERS.search(predicate):
            return "PREDICATE_CONNECTOR"
        term_reason = check_term(subject)
        if term_reason:
            return term_reason.value
        if MIXED_CASE_NOISE.search(sentence):
            return "MIXED_CASE_NOISE"
        definition_reason = check_definition(sentence)
        return definition_reason.value if definition_reason else None

    @staticmethod
    def _concept(
        key: str,
        term: str,
        definition: str,
        domain: CorpusDomain,
        section: CorpusSection,
        confidence: Confidence,
    ) -> Concept:
        return Concept(
            concept_id=key,
            term=to_title_case(term),
            definition=definition,
            domain=domain.display,
            section=section.section_num,
            confidence=confidence,
        )
