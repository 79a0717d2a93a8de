"""Learning materials: flashcards, study summaries and search queries."""

from .errors import FlashcardFormatError
from .generator import MaterialConfig, MaterialGenerator, merge_flashcard_sets, parse_flashcards
from .models import Flashcard, FlashcardSet, MaterialResult

__all__ = [
    "Flashcard",
    "FlashcardFormatError",
    "FlashcardSet",
    "MaterialConfig",
    "MaterialGenerator",
    "MaterialResult",
    "merge_flashcard_sets",
    "parse_flashcards",
]
