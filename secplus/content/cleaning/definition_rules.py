"""
Term / Definition Quality Rules

Declarative rule tables deciding whether a "term: definition" candidate pulled
from the study notes is a complete, atomic concept. Each table is an ordered
list of (reason, predicate) pairs; a candidate is rejected with the reason of
the first predicate that fires.

Tuned to one input shape (bulleted exam notes). Not a general NLP filter.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from .thresholds import (
    BULLET_CHARS_MIN,
    DEFINITION_CHARS_MIN,
    FRAGMENT_WORDS_HARD_MAX,
    FRAGMENT_WORDS_MAX,
    LIST_PART_AVG_CHARS_MAX,
    LIST_PARTS_MIN,
    TERM_CHARS_MAX,
    TERM_CHARS_MIN,
    TERM_WORDS_MAX,
)


class RejectReason(str, Enum):
    """Why a term or definition candidate was rejected."""

    # Term issues
    TERM_LENGTH = "TERM_LENGTH"  # Outside 2-50 chars
    PRONOUN_OPENER = "PRONOUN_OPENER"  # "Most ...", "They ...", "Someone ..."
    BARE_ARTICLE_NOUN = "BARE_ARTICLE_NOUN"  # "the attacker"
    GENERIC_SUBJECT = "GENERIC_SUBJECT"  # "The database ..."
    CONNECTOR_OPENER = "CONNECTOR_OPENER"  # "Once ...", "Ensure ..."
    TOO_MANY_WORDS = "TOO_MANY_WORDS"  # > 6 words
    GENERIC_SINGLE_WORD = "GENERIC_SINGLE_WORD"  # single lowercase word

    # Definition issues
    TOO_SHORT = "TOO_SHORT"
    HEADING_LIKE = "HEADING_LIKE"  # "Example ...", "Overview ...", "Types:"
    COMMA_LIST = "COMMA_LIST"  # "SPF, DKIM, DMARC"
    FRAGMENT = "FRAGMENT"
    NO_VERB = "NO_VERB"
    DANGLING_CAPITAL = "DANGLING_CAPITAL"  # Trails into a capitalised word


@dataclass(frozen=True)
class TextRule:
    """A single rejection rule: fires when predicate(text) is True."""

    reason: RejectReason
    predicate: Callable[[str], bool]


# =============================================================================
# Patterns
# =============================================================================

VERB_PATTERN = re.compile(
    r"\b(is|are|was|were|have|has|had|do|does|did|can|cannot|could|will|would|may|might|"
    r"must|prevent|ensures?|protects?|allows?|den(?:y|ies)|provides?|requires?|means?|"
    r"refers?|describes?|includes?|covers?|applies?|implements?|manages?|determines?|"
    r"validates?|identifies?|monitors?|blocks?|captures?|exchanges?|binds?|mimics?)\b",
    re.IGNORECASE,
)

TERM_PRONOUN_OPENERS = re.compile(
    r"^(most|some|many|where|what|how|that|this|these|those|we|they|there|someone|"
    r"everyone|nothing|no system)\b",
    re.IGNORECASE,
)
TERM_BARE_ARTICLE_NOUN = re.compile(r"^(the|a|an)\s+\w+$")
TERM_GENERIC_SUBJECT = re.compile(
    r"^the\s+(database|vulnerabilities|attackers|good|bad)\b", re.IGNORECASE
)
TERM_CONNECTOR_OPENERS = re.compile(
    r"^(once|ensure|manages|automatically|no|attackers|other|stronger)\s", re.IGNORECASE
)

HEADING_OPENERS = re.compile(
    r"^(example|examples|types|overview|continued|and much more)\b", re.IGNORECASE
)
FILLER_OPENERS = re.compile(r"^(this may|there's a|get ready|time to)\b", re.IGNORECASE)
DEFINITION_PRONOUN_OPENERS = re.compile(r"^(they|we|there)\s+", re.IGNORECASE)
DANGLING_CAPITAL = re.compile(r"\s+[A-Z][a-z]+\s*$")
COMMA_SPLIT = re.compile(r",\s*")

# Copula-form noise: camelCase joins and mid-word capitals from OCR/markup
MIXED_CASE_NOISE = re.compile(r"[a-z][A-Z]|[A-Z][a-z]{2,}[A-Z]")
# Copula predicates that continue a previous sentence rather than define
DISALLOWED_PREDICATE_OPENERS = re.compile(r"^(cascading|something else)", re.IGNORECASE)


# =============================================================================
# Predicates
# =============================================================================


def word_count(text: str) -> int:
    return len(text.split())


def has_verb(text: str) -> bool:
    return VERB_PATTERN.search(text) is not None


def is_heading_like(text: str) -> bool:
    """Section titles, list intros and filler lines from the notes."""
    t = (text or "").strip()
    if not t or len(t) < BULLET_CHARS_MIN:
        return True
    if HEADING_OPENERS.search(t) or FILLER_OPENERS.search(t):
        return True
    return t.endswith(":") or t.startswith("?")


def is_comma_list(text: str) -> bool:
    parts = COMMA_SPLIT.split(text)
    if len(parts) < LIST_PARTS_MIN:
        return False
    avg_len = sum(len(p.strip()) for p in parts) / len(parts)
    return avg_len < LIST_PART_AVG_CHARS_MAX


def is_fragment(text: str) -> bool:
    words = word_count(text)
    return (words <= FRAGMENT_WORDS_MAX and not has_verb(text)) or words <= FRAGMENT_WORDS_HARD_MAX


def has_dangling_capital(text: str) -> bool:
    return DANGLING_CAPITAL.search(text) is not None and not text.strip().endswith(".")


def _is_single_lowercase_word(text: str) -> bool:
    return word_count(text) == 1 and text[:1].islower()


# =============================================================================
# Rule Tables
# =============================================================================

TERM_RULES: list[TextRule] = [
    TextRule(RejectReason.TERM_LENGTH, lambda t: not (TERM_CHARS_MIN <= len(t) <= TERM_CHARS_MAX)),
    TextRule(RejectReason.PRONOUN_OPENER, lambda t: TERM_PRONOUN_OPENERS.search(t) is not None),
    TextRule(RejectReason.BARE_ARTICLE_NOUN, lambda t: TERM_BARE_ARTICLE_NOUN.search(t) is not None),
    TextRule(RejectReason.GENERIC_SUBJECT, lambda t: TERM_GENERIC_SUBJECT.search(t) is not None),
    TextRule(RejectReason.CONNECTOR_OPENER, lambda t: TERM_CONNECTOR_OPENERS.search(t) is not None),
    TextRule(RejectReason.TOO_MANY_WORDS, lambda t: word_count(t) > TERM_WORDS_MAX),
    TextRule(RejectReason.GENERIC_SINGLE_WORD, _is_single_lowercase_word),
]

DEFINITION_RULES: list[TextRule] = [
    TextRule(RejectReason.HEADING_LIKE, is_heading_like),
    TextRule(RejectReason.COMMA_LIST, is_comma_list),
    TextRule(RejectReason.FRAGMENT, is_fragment),
    TextRule(RejectReason.NO_VERB, lambda t: not has_verb(t)),
    TextRule(RejectReason.TOO_SHORT, lambda t: len(t) < DEFINITION_CHARS_MIN),
    TextRule(
        RejectReason.PRONOUN_OPENER,
        lambda t: DEFINITION_PRONOUN_OPENERS.search(t.strip()) is not None,
    ),
    TextRule(RejectReason.DANGLING_CAPITAL, has_dangling_capital),
]


def first_failure(text: str, rules: Sequence[TextRule]) -> RejectReason | None:
    """Return the reason of the first rule that fires, or None if all pass."""
    for rule in rules:
        if rule.predicate(text):
            return rule.reason
    return None


def check_term(text: str) -> RejectReason | None:
    t = (text or "").strip()
    if not t:
        return RejectReason.TERM_LENGTH
    return first_failure(t, TERM_RULES)


def check_definition(text: str) -> RejectReason | None:
    return first_failure(text or "", DEFINITION_RULES)


def is_valid_term(text: str) -> bool:
    return check_term(text) is None


def is_complete_definition(text: str) -> bool:
    return check_definition(text) is None
