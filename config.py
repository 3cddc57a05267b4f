"""
Configuration settings for the secplus-study data pipeline.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum loguru level written to stderr",
    )

    # ========================================
    # Source corpus
    # ========================================
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the generated JSON files",
    )
    corpus_path: Path = Field(
        default=Path("SECPLUS_COMPLETE_STUDY_DATA.json"),
        description="Raw study corpus (domains/sections/bullets or card array)",
    )

    # ========================================
    # Concept dictionary
    # ========================================
    concept_dictionary_path: Path = Field(
        default=Path("data/concept_dictionary.json"),
        description="Output path of the concept dictionary",
    )

    # ========================================
    # Flashcards
    # ========================================
    flashcards_input: Path | None = Field(
        default=None,
        description="Flashcard generator input (defaults to corpus_path)",
    )
    flashcards_output: Path = Field(
        default=Path("data/flashcards.generated.json"),
        description="Flashcard generator output",
    )
    flashcards_max: int = Field(
        default=300,
        description="Total number of flashcards drawn by the stratified sampler",
        ge=1,
    )

    # ========================================
    # Questions
    # ========================================
    questions_output: Path = Field(
        default=Path("data/questions.generated.json"),
        description="Question generator output",
    )
    questions_max_cards: int = Field(
        default=600,
        description="Maximum number of flashcards read by the question generator",
        ge=1,
    )
    questions_total: int = Field(
        default=295,
        description="Total number of MCQs drawn by the stratified sampler",
        ge=1,
    )

    # ========================================
    # Merge tool
    # ========================================
    practice_questions_path: Path = Field(
        default=Path("data/practice_questions.static.json"),
        description="Side file for practice questions embedded in merged input",
    )

    @property
    def flashcards_source(self) -> Path:
        """Input of the flashcard generator, falling back to the raw corpus."""
        return self.flashcards_input or self.corpus_path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
