"""
Unit tests for the study data view.
"""

import dataclasses
import json

import pytest

from secplus.content.study_data import (
    DEFAULT_METADATA,
    StudyDataSources,
    build_study_data,
    load_sources,
)


@pytest.fixture
def generated_flashcards():
    return {
        "generatedAt": "2026-01-01T00:00:00.000Z",
        "count": 3,
        "cards": [
            {"id": "c1", "question": "What is phishing?", "answer": "An email attack.", "domain": "2", "section": "2.2"},
            {"id": "c2", "question": "What is RTO?", "answer": "Recovery time objective.", "domain": "4"},
            {"id": "c3", "front": "What is SLE?", "back": "Single loss expectancy.", "domain": "5"},
        ],
    }


@pytest.fixture
def generated_questions():
    return {
        "questions": [
            {
                "id": "q-c1-mcq",
                "type": "mcq",
                "prompt": "Which of the following best describes phishing?",
                "choices": ["Wrong A", "An email attack.", "Wrong B", "Wrong C"],
                "answerIndex": 1,
                "explanation": "Phishing is the correct answer.",
                "domain": "2",
            },
            {"id": "q-c1-short", "type": "short", "prompt": "Define phishing", "answer": "x", "domain": "2"},
        ]
    }


class TestFlashcards:
    """Tests for flashcard selection."""

    def test_generated_cards(self, rng, generated_flashcards):
        data = build_study_data(StudyDataSources(flashcards=generated_flashcards), rng)

        by_id = {c["id"]: c for c in data.flashcards}
        assert set(by_id) == {"c1", "c2", "c3"}
        assert by_id["c1"]["domain_name"] == "Threats, Vulnerabilities, and Mitigations"
        assert by_id["c1"]["section"] == "2.2"
        assert by_id["c3"]["question"] == "What is SLE?"
        assert by_id["c3"]["answer"] == "Single loss expectancy."

    def test_flat_array_base(self, rng):
        base = [{"front": "A", "back": "B"}, {"question": "C", "answer": "D"}]
        data = build_study_data(StudyDataSources(base=base), rng)

        assert sorted(c["id"] for c in data.flashcards) == ["card-0", "card-1"]
        assert all(c["domain"] == "all" for c in data.flashcards)
        assert data.filter_flashcards("all") == list(data.flashcards)

    def test_base_object_flashcards(self, rng):
        base = {"flashcards": [{"id": "b1", "question": "Q", "answer": "A", "domain": "1"}]}
        data = build_study_data(StudyDataSources(base=base), rng)

        assert [c["id"] for c in data.flashcards] == ["b1"]

    def test_base_object_skips_non_dict_cards(self, rng):
        base = {"flashcards": ["oops", {"id": "b1", "question": "Q", "answer": "A", "domain": "1"}, None]}
        data = build_study_data(StudyDataSources(base=base), rng)

        assert [c["id"] for c in data.flashcards] == ["b1"]
        assert data.stats["total_flashcards"] == 1

    def test_filter(self, rng, generated_flashcards):
        data = build_study_data(StudyDataSources(flashcards=generated_flashcards), rng)

        assert [c["id"] for c in data.filter_flashcards("4")] == ["c2"]
        assert data.filter_flashcards("3") == []
        assert len(data.filter_flashcards()) == 3


class TestPracticeQuestions:
    """Tests for practice question assembly."""

    def test_generated_mcqs_only(self, rng, generated_questions):
        data = build_study_data(StudyDataSources(questions=generated_questions), rng)

        assert len(data.practice_questions) == 1
        q = data.practice_questions[0]
        assert q["question"] == "Which of the following best describes phishing?"
        assert q["options"][q["correct_index"]] == "An email attack."
        assert q["correct_answer"] == "An email attack."
        assert sorted(q["options"]) == sorted(["Wrong A", "An email attack.", "Wrong B", "Wrong C"])

    def test_static_and_generated_combined(self, rng, generated_questions):
        static = {
            "questions": [
                {"id": "static-1-0", "question": "Q", "options": ["One", "Two", "Three"],
                 "correct_index": 2, "explanation": "Three", "domain": "1"},
            ],
            "count": 1,
        }
        data = build_study_data(
            StudyDataSources(questions=generated_questions, practice_static=static), rng
        )

        ids = sorted(q["id"] for q in data.practice_questions)
        assert ids == ["q-c1-mcq", "static-1-0"]
        static_q = next(q for q in data.practice_questions if q["id"] == "static-1-0")
        assert static_q["options"][static_q["correct_index"]] == "Three"
        assert [q["id"] for q in data.filter_questions("1")] == ["static-1-0"]

    def test_embedded_base_questions(self, rng):
        base = {
            "domains": [],
            "practice_questions": {
                "Domain 1": [{"question": "Q1"}],
                "Domain 2": [{"question": "Q2"}, {"question": "Q3"}],
            },
        }
        data = build_study_data(StudyDataSources(base=base), rng)

        assert sorted(q["question"] for q in data.practice_questions) == ["Q1", "Q2", "Q3"]

    def test_embedded_base_questions_skip_non_dicts(self, rng):
        base = {"practice_questions": {"Domain 1": [{"question": "Q1"}, "junk"]}}
        data = build_study_data(StudyDataSources(base=base), rng)

        assert [q["question"] for q in data.practice_questions] == ["Q1"]

    def test_flat_array_base_has_no_embedded_questions(self, rng):
        data = build_study_data(StudyDataSources(base=[{"front": "A", "back": "B"}]), rng)
        assert data.practice_questions == ()


class TestStats:
    """Tests for stats, domains and metadata."""

    def test_empty_sources(self, rng):
        data = build_study_data(StudyDataSources(), rng)

        assert data.flashcards == ()
        assert data.practice_questions == ()
        assert data.stats["total_flashcards"] == 0
        assert data.stats["total_questions"] == 0
        assert [row["domain"] for row in data.stats["by_domain"]] == ["1", "2", "3", "4", "5"]
        assert [d["domain_num"] for d in data.domains] == ["1", "2", "3", "4", "5"]
        assert data.metadata == DEFAULT_METADATA

    def test_counts_by_domain(self, rng, generated_flashcards, generated_questions):
        data = build_study_data(
            StudyDataSources(flashcards=generated_flashcards, questions=generated_questions), rng
        )

        rows = {row["domain"]: row for row in data.stats["by_domain"]}
        assert rows["2"]["flashcards"] == 1
        assert rows["2"]["questions"] == 1
        assert rows["3"]["flashcards"] == 0
        assert data.stats["total_flashcards"] == 3
        assert data.stats["total_questions"] == 1

    def test_untagged_cards_split_evenly(self, rng):
        base = [{"front": f"Q{i}", "back": "A"} for i in range(10)]
        data = build_study_data(StudyDataSources(base=base), rng)

        assert all(row["flashcards"] == 2 for row in data.stats["by_domain"])

    def test_base_metadata_and_domains(self, rng):
        base = {
            "metadata": {"source": "Notes", "exam": "SY0-701"},
            "domains": [{"domain_num": 1, "name": "General", "sections": []}],
            "stats": {"total_questions": 42},
        }
        data = build_study_data(StudyDataSources(base=base), rng)

        assert data.metadata == {"source": "Notes", "exam": "SY0-701"}
        assert data.domains == ({"domain_num": 1, "name": "General", "sections": []},)
        assert data.stats["total_questions"] == 42

    def test_frozen(self, rng):
        data = build_study_data(StudyDataSources(), rng)
        with pytest.raises(dataclasses.FrozenInstanceError):
            data.flashcards = ()


class TestLoadSources:
    """Tests for load_sources."""

    def test_missing_files_are_none(self, tmp_path):
        sources = load_sources(tmp_path, tmp_path / "corpus.json")

        assert sources == StudyDataSources()

    def test_reads_present_files(self, tmp_path, generated_flashcards):
        (tmp_path / "flashcards.generated.json").write_text(json.dumps(generated_flashcards), encoding="utf-8")
        corpus = tmp_path / "corpus.json"
        corpus.write_text(json.dumps([{"front": "A", "back": "B"}]), encoding="utf-8")

        sources = load_sources(tmp_path, corpus)

        assert sources.flashcards["count"] == 3
        assert sources.base == [{"front": "A", "back": "B"}]
        assert sources.questions is None
        assert sources.practice_static is None
