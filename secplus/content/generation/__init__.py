"""Study material generation from the raw corpus.

Pipeline:
1. ConceptExtractor turns corpus bullets into a term -> definition dictionary
2. FlashcardGenerator normalises corpus bullets or card arrays into flashcards
3. QuestionGenerator builds MCQ and short-answer items from flashcards

Usage:
    from secplus.content.generation import FlashcardGenerator

    flashcard_set = FlashcardGenerator().generate(read_json(path), source_path=path)
    for card in flashcard_set.cards:
        print(f"Q: {card.question}")
        print(f"A: {card.answer}")
"""

from .concept_extractor import ConceptExtractor, ExtractionResult, ExtractionStats
from .curated import CURATED_DEFINITIONS, DISTRACTOR_BANK, get_curated_definition
from .flashcard_generator import FlashcardGenerator, FlashcardSet
from .question_generator import QuestionGenerator, QuestionSet, extract_term

__all__ = [
    "ConceptExtractor",
    "ExtractionResult",
    "ExtractionStats",
    "CURATED_DEFINITIONS",
    "DISTRACTOR_BANK",
    "get_curated_definition",
    "FlashcardGenerator",
    "FlashcardSet",
    "QuestionGenerator",
    "QuestionSet",
    "extract_term",
]
