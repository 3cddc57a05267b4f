"""
Unit tests for the term/definition quality rules.
"""

import pytest

from secplus.content.cleaning import (
    RejectReason,
    check_definition,
    check_term,
    is_complete_definition,
    is_valid_term,
)
from secplus.content.cleaning.definition_rules import (
    has_verb,
    is_comma_list,
    is_fragment,
    is_heading_like,
)


class TestTermRules:
    """Tests for term validity."""

    @pytest.mark.parametrize("term", ["Zero Trust", "Non-repudiation", "SQL injection", "DMARC"])
    def test_valid_terms(self, term):
        assert is_valid_term(term)

    @pytest.mark.parametrize(
        "term,reason",
        [
            ("", RejectReason.TERM_LENGTH),
            ("X", RejectReason.TERM_LENGTH),
            ("A" * 51, RejectReason.TERM_LENGTH),
            ("Most attackers", RejectReason.PRONOUN_OPENER),
            ("they", RejectReason.PRONOUN_OPENER),
            ("the attacker", RejectReason.BARE_ARTICLE_NOUN),
            ("The database server", RejectReason.GENERIC_SUBJECT),
            ("Once installed", RejectReason.CONNECTOR_OPENER),
            ("One two three four five six seven", RejectReason.TOO_MANY_WORDS),
            ("malware", RejectReason.GENERIC_SINGLE_WORD),
        ],
    )
    def test_rejected_terms(self, term, reason):
        assert check_term(term) == reason


class TestDefinitionRules:
    """Tests for definition completeness."""

    def test_complete_definition(self):
        assert is_complete_definition(
            "the assurance that a party cannot deny having performed an action."
        )

    @pytest.mark.parametrize(
        "text,reason",
        [
            ("Too short to matter", RejectReason.HEADING_LIKE),
            ("Examples of common attacks used by threat actors", RejectReason.HEADING_LIKE),
            ("The following controls apply to this section:", RejectReason.HEADING_LIKE),
            ("SPF, DKIM, DMARC, S/MIME, TLS, IPsec, SSH", RejectReason.COMMA_LIST),
            ("Extraordinarily unverifiable configuration parameters", RejectReason.FRAGMENT),
            ("Many different kinds of malicious software exist today", RejectReason.NO_VERB),
            ("They can bypass the filter and reach users.", RejectReason.PRONOUN_OPENER),
            ("Attackers can pivot from here into the Network", RejectReason.DANGLING_CAPITAL),
        ],
    )
    def test_rejected_definitions(self, text, reason):
        assert check_definition(text) == reason

    def test_too_short_after_structure_checks(self):
        # 30+ chars with a verb, but under the 40 char definition minimum
        assert check_definition("A firewall blocks all bad traffic") == RejectReason.TOO_SHORT


class TestPredicates:
    """Tests for the individual predicates."""

    def test_has_verb(self):
        assert has_verb("Integrity ensures data is unchanged")
        assert has_verb("a party cannot deny an action")
        assert not has_verb("Network segmentation overview")

    def test_heading_like(self):
        assert is_heading_like("")
        assert is_heading_like("Get ready for the next section of the course")
        assert is_heading_like("? what else could go wrong in this scenario")
        assert not is_heading_like("A honeypot is a decoy system designed to attract attackers.")

    def test_comma_list(self):
        assert is_comma_list("IDS, IPS, SIEM")
        assert not is_comma_list("Confidentiality, integrity")
        assert not is_comma_list(
            "Controls are preventive in nature, detective after the fact, "
            "and corrective once an incident has happened"
        )

    def test_fragment(self):
        assert is_fragment("Two words")
        assert is_fragment("Five words without any verbs")
        assert not is_fragment("Five words that is verbed")
