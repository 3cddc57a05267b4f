"""
Unit tests for the concept dictionary extractor.

Tests the dash and copula extraction rules, curated overrides, first-claim
dedupe and output ordering on small in-memory corpora.
"""

import pytest

from secplus.content.generation import ConceptExtractor
from secplus.content.generation.curated import CURATED_DEFINITIONS
from secplus.content.models import Confidence
from secplus.content.parser import CorpusParser


def corpus_with(bullets, domain_num=1, section_name="Basics", section_num="1.1"):
    return CorpusParser().parse({
        "domains": [
            {
                "domain_num": domain_num,
                "name": "Domain",
                "sections": [{"section_num": section_num, "name": section_name, "bullets": bullets}],
            }
        ]
    })


@pytest.fixture
def extractor():
    return ConceptExtractor()


class TestDashRule:
    """Tests for "Term - definition" bullets."""

    def test_curated_override(self, extractor):
        """A dash bullet for a curated term takes the curated definition."""
        corpus = corpus_with(
            ["Non-repudiation - the assurance that a party cannot deny having performed an action."]
        )
        result = extractor.extract(corpus)

        assert len(result.concepts) == 1
        concept = result.concepts[0]
        assert concept.concept_id == "non-repudiation"
        assert concept.confidence == Confidence.HIGH
        assert concept.definition == CURATED_DEFINITIONS["non-repudiation"]
        assert concept.domain == "1.0"
        assert concept.section == "1.1"
        assert result.stats.rule_a == 1

    def test_uncurated_keeps_extracted_text(self, extractor):
        corpus = corpus_with(
            ["Geofencing - a control that determines access based on the physical location of a device."]
        )
        concept = extractor.extract(corpus).concepts[0]

        assert concept.concept_id == "geofencing"
        assert concept.definition.startswith("a control that determines access")
        assert concept.confidence == Confidence.HIGH

    def test_invalid_definition_is_skipped(self, extractor):
        corpus = corpus_with(["Malware types - viruses, worms, trojans, rootkits, spyware"])
        result = extractor.extract(corpus)

        assert result.concepts == []
        assert result.stats.skipped_quality == 1
        assert result.stats.reject_reasons == {"COMMA_LIST": 1}


class TestCopulaRule:
    """Tests for "Term is/are definition" bullets."""

    def test_short_sentence_is_medium_confidence(self, extractor):
        corpus = corpus_with(["Tailgating is following someone through a secure door."])
        concept = extractor.extract(corpus).concepts[0]

        assert concept.concept_id == "tailgating"
        assert concept.term == "Tailgating"
        assert concept.definition == "Tailgating is following someone through a secure door."
        assert concept.confidence == Confidence.MEDIUM

    def test_long_sentence_is_high_confidence(self, extractor):
        sentence = "Geofencing is a control that determines access based on the physical location of a device."
        concept = extractor.extract(corpus_with([sentence])).concepts[0]

        assert concept.confidence == Confidence.HIGH
        assert concept.definition == sentence

    def test_curated_subject(self, extractor):
        corpus = corpus_with(["Zero trust is a model where no implicit trust is granted to a device."])
        concept = extractor.extract(corpus).concepts[0]

        assert concept.definition == CURATED_DEFINITIONS["zero trust"]
        assert concept.confidence == Confidence.HIGH

    def test_short_predicate_rejected(self, extractor):
        result = extractor.extract(corpus_with(["Encryption of this data is very important."]))

        assert result.concepts == []
        assert result.stats.reject_reasons == {"PREDICATE_TOO_SHORT": 1}

    def test_mixed_case_noise_rejected(self, extractor):
        result = extractor.extract(
            corpus_with(["SecurityOnion is a platform that monitors networks for intrusions."])
        )

        assert result.concepts == []
        assert result.stats.reject_reasons == {"MIXED_CASE_NOISE": 1}

    @pytest.mark.parametrize(
        "bullet",
        [
            "Failures are cascading through every dependent system when one node fails.",
            "Outages are something else entirely when the backup site is unavailable.",
        ],
    )
    def test_connector_predicate_rejected(self, extractor, bullet):
        result = extractor.extract(corpus_with([bullet]))

        assert result.concepts == []
        assert result.stats.reject_reasons == {"PREDICATE_CONNECTOR": 1}


class TestExtraction:
    """Tests for whole-corpus extraction."""

    def test_heading_bullet_discarded(self, extractor):
        result = extractor.extract(corpus_with(["Example overview of threats"]))

        assert result.concepts == []
        assert result.stats.total_bullets == 1
        assert result.stats.skipped_quality == 1

    def test_sample_corpus(self, extractor, sample_corpus):
        result = extractor.extract(CorpusParser().parse(sample_corpus))

        ids = [c.concept_id for c in result.concepts]
        assert ids == ["zero-trust", "non-repudiation", "tailgating", "phishing"]

        stats = result.stats
        assert stats.total_bullets == 5
        assert stats.curated == 1
        assert stats.rule_a == 2
        assert stats.rule_b == 1
        assert stats.skipped_quality == 2
        assert stats.reject_reasons == {"TOO_SHORT": 1, "NO_PATTERN": 1}
        assert result.by_domain() == {"1": 2, "2": 2}

    def test_first_claim_wins(self, extractor):
        corpus = CorpusParser().parse({
            "domains": [
                {"domain_num": 1, "name": "One", "sections": [
                    {"section_num": "1.1", "name": "A", "bullets": [
                        "Geofencing - a control that determines access based on device location.",
                    ]},
                ]},
                {"domain_num": 3, "name": "Three", "sections": [
                    {"section_num": "3.1", "name": "B", "bullets": [
                        "Geofencing - a different control that validates where a device is located.",
                    ]},
                ]},
            ]
        })
        result = extractor.extract(corpus)

        assert len(result.concepts) == 1
        assert result.concepts[0].domain == "1.0"

    def test_concept_ids_unique(self, extractor, sample_corpus):
        concepts = extractor.extract(CorpusParser().parse(sample_corpus)).concepts
        ids = [c.concept_id for c in concepts]
        assert len(ids) == len(set(ids))

    def test_to_list_shape(self, extractor):
        corpus = corpus_with(["Tailgating is following someone through a secure door."])
        record = extractor.extract(corpus).to_list()[0]

        assert record == {
            "conceptId": "tailgating",
            "term": "Tailgating",
            "definition": "Tailgating is following someone through a secure door.",
            "domain": "1.0",
            "section": "1.1",
            "notes": "",
            "source": {"type": "pdf", "confidence": "medium"},
        }

    def test_continued_section_title(self, extractor):
        corpus = corpus_with([], section_name="Zero Trust (continued)")
        result = extractor.extract(corpus)

        assert [c.concept_id for c in result.concepts] == ["zero-trust"]
        assert result.concepts[0].term == "Zero Trust"
