"""
Extraction Quality Thresholds

Limits used by the concept extractor and flashcard generator to reject
heading fragments, lists and truncated sentences from the study notes.
"""

# ============================================================================
# Term (left-hand side) thresholds
# ============================================================================
TERM_CHARS_MIN = 2
TERM_CHARS_MAX = 50
TERM_WORDS_MAX = 6

# ============================================================================
# Definition (right-hand side) thresholds
# ============================================================================
BULLET_CHARS_MIN = 30  # Bullets shorter than this are never concepts
DEFINITION_CHARS_MIN = 40
PREDICATE_CHARS_MIN = 25  # "X is <predicate>" form
FRAGMENT_WORDS_MAX = 5  # <= 5 words without a verb is a fragment
FRAGMENT_WORDS_HARD_MAX = 2  # <= 2 words is always a fragment

# Comma lists: >= 3 parts whose average length is below the limit
LIST_PARTS_MIN = 3
LIST_PART_AVG_CHARS_MAX = 30

# ============================================================================
# Confidence
# ============================================================================
HIGH_CONFIDENCE_CHARS = 60  # Uncurated copula sentences longer than this are "high"

# ============================================================================
# Flashcard bullet filters
# ============================================================================
FLASHCARD_BULLET_CHARS_MIN = 20

# ============================================================================
# Question generation
# ============================================================================
ANSWER_CHARS_MIN = 10  # Cards with shorter answers yield no questions
DISTRACTOR_CHARS_MIN = 15  # Corpus answers usable as distractors are longer than this
PADDING_CHARS_MIN = 20  # Corpus answers usable as padding choices are longer than this
DISTRACTOR_KEY_CHARS = 50
STEM_SNIPPET_CHARS = 60
CHOICES_PER_MCQ = 4
