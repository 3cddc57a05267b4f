"""
Extraction quality rules.

Declarative term/definition checks used by the concept extractor.
"""

from .definition_rules import (
    DEFINITION_RULES,
    DISALLOWED_PREDICATE_OPENERS,
    MIXED_CASE_NOISE,
    TERM_RULES,
    RejectReason,
    TextRule,
    check_definition,
    check_term,
    is_complete_definition,
    is_valid_term,
)

__all__ = [
    "RejectReason",
    "TextRule",
    "TERM_RULES",
    "DEFINITION_RULES",
    "MIXED_CASE_NOISE",
    "DISALLOWED_PREDICATE_OPENERS",
    "check_term",
    "check_definition",
    "is_valid_term",
    "is_complete_definition",
]
