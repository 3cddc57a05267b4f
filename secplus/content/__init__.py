"""
Content: Security+ corpus parsing, quality rules, and generation.

Subpackages:
- cleaning/: Term/definition quality rules, thresholds
- generation/: Concept, flashcard and question generators

Core modules:
- parser: Corpus parsing and JSON file I/O
- domains: Exam domains, sampling targets, domain inference
- sampling: Domain-stratified sampler
- merge: Study data merge tool
- study_data: Read-only view for the study UI
"""

# Re-export from subpackages for convenience
from .cleaning import RejectReason, check_definition, check_term
from .domains import Domain, infer_domain
from .errors import StudyDataError, UnsupportedFormatError
from .generation import (
    ConceptExtractor,
    FlashcardGenerator,
    FlashcardSet,
    QuestionGenerator,
    QuestionSet,
)
from .merge import MergeResult, StudyDataMerger
from .models import Concept, Flashcard, McqQuestion, PracticeQuestion, ShortQuestion
from .parser import CorpusParser, read_json, write_json
from .sampling import StratifiedSampler
from .study_data import StudyData, StudyDataSources, build_study_data, load_sources

__all__ = [
    # Core content modules
    "CorpusParser",
    "read_json",
    "write_json",
    "Domain",
    "infer_domain",
    "StratifiedSampler",
    "StudyDataMerger",
    "MergeResult",
    "StudyData",
    "StudyDataSources",
    "build_study_data",
    "load_sources",
    # Models
    "Concept",
    "Flashcard",
    "McqQuestion",
    "ShortQuestion",
    "PracticeQuestion",
    # Errors
    "StudyDataError",
    "UnsupportedFormatError",
    # Quality rules
    "RejectReason",
    "check_term",
    "check_definition",
    # Generation
    "ConceptExtractor",
    "FlashcardGenerator",
    "FlashcardSet",
    "QuestionGenerator",
    "QuestionSet",
]
