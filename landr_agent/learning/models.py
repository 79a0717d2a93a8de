"""Data models for learning-material generation."""

from typing import List, Optional

from pydantic import BaseModel, Field


class Flashcard(BaseModel):
    """A single question and answer pair."""
    question: str = Field(..., description="Prompt side of the card")
    answer: str = Field(..., description="Answer side of the card")


class FlashcardSet(BaseModel):
    """Flashcards extracted from one piece of material."""
    title: str = Field("", description="Short descriptive title for the material")
    tags: List[str] = Field(default_factory=list, description="Topic tags, first-seen order")
    flashcards: List[Flashcard] = Field(default_factory=list)


class MaterialResult(BaseModel):
    """Everything generated for a learning material."""
    title: str = ""
    tags: List[str] = Field(default_factory=list)
    flashcards: List[Flashcard] = Field(default_factory=list)
    summary: Optional[str] = Field(None, description="None when summary generation failed")
