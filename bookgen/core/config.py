"""
Typed configuration for book generation, content scoring, and verification.

Every section has defaults so a missing or partial YAML file still produces a
usable config; `load_book_config` only fails on values that are present and
wrong.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ValidationFailure
from .validation import validation

DEFAULT_CHAPTER_EXTENSION = ".mdx"


class BookSettings(BaseModel):
    """Where and how the book skeleton is written."""

    model_config = ConfigDict(extra="ignore")

    label: str = Field(default="Physical AI & Humanoid Robotics", description="Root sidebar category label.")
    output_dir: Path = Field(default=Path("docs"))
    chapters_dir_name: str = Field(default="chapters")
    chapter_extension: str = Field(default=DEFAULT_CHAPTER_EXTENSION)
    group_by_category: bool = True
    sidebar_filename: str = Field(default="sidebar.js")

    @field_validator("chapter_extension", mode="before")
    @classmethod
    def ensure_dot(cls, value: Any) -> Any:
        if isinstance(value, str) and value and not value.startswith("."):
            return f".{value}"
        return value

    @field_validator("output_dir", mode="before")
    @classmethod
    def coerce_path(cls, value: Any) -> Path:
        return Path(value).expanduser()

    @property
    def chapters_dir(self) -> Path:
        return self.output_dir / self.chapters_dir_name


class ScoringWeights(BaseModel):
    """Points each signal contributes to the 0-100 compliance score."""

    title: float = Field(default=20.0, ge=0.0)
    objectives: float = Field(default=30.0, ge=0.0)
    structure: float = Field(default=15.0, ge=0.0)
    length: float = Field(default=5.0, ge=0.0)
    verification: float = Field(default=30.0, ge=0.0)

    @model_validator(mode="after")
    def check_total(self) -> "ScoringWeights":
        total = self.title + self.objectives + self.structure + self.length + self.verification
        if abs(total - 100.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 100, got {total}")
        return self


class ScoringConfig(BaseModel):
    """Weights, classification bands, and hard gates for content compliance."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    min_content_length: int = Field(default=100, ge=0)
    keyword_coverage: float = Field(default=0.5, ge=0.0, le=1.0)
    objective_warning_ratio: float = Field(default=0.7, ge=0.0, le=1.0)
    objective_gate_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    verification_warning_score: float = Field(default=70.0, ge=0.0, le=100.0)
    verification_gate_score: float = Field(default=50.0, ge=0.0, le=100.0)
    valid_score: int = Field(default=50, ge=0, le=100)
    good_score: int = Field(default=75, ge=0, le=100)
    excellent_score: int = Field(default=90, ge=0, le=100)

    @model_validator(mode="after")
    def check_bands(self) -> "ScoringConfig":
        if not self.valid_score <= self.good_score <= self.excellent_score:
            raise ValueError("Expected valid_score <= good_score <= excellent_score")
        return self


class VerificationConfig(BaseModel):
    """Selects and configures the documentation-verification collaborator."""

    model_config = ConfigDict(extra="ignore")

    mode: Literal["structural", "keyword", "remote"] = "structural"
    api_base: str | None = None
    api_key_env: str = Field(default="BOOKGEN_VERIFY_API_KEY")
    timeout: float = Field(default=30.0, gt=0.0)
    default_sources: List[str] = Field(default_factory=list)

    @field_validator("default_sources", mode="before")
    @classmethod
    def strip_items(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item.strip() if isinstance(item, str) else item for item in value]
        return value

    @model_validator(mode="after")
    def require_base_for_remote(self) -> "VerificationConfig":
        if self.mode == "remote" and not self.api_base:
            raise ValueError("verification.api_base is required when mode is 'remote'")
        return self

    @property
    def api_key(self) -> str | None:
        return os.getenv(self.api_key_env) or None


class BookConfig(BaseModel):
    """Top-level configuration for generation and validation runs."""

    book: BookSettings = Field(default_factory=BookSettings)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)

    @model_validator(mode="before")
    @classmethod
    def drop_null_sections(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {key: value for key, value in data.items() if value is not None}


def read_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return a dictionary."""
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at root of {path}, received {type(data)}")
    return data


def load_book_config(path: Path | None = None, *, base_dir: Path | None = None) -> BookConfig:
    """Load the book config; ``None`` returns the defaults.

    A relative ``book.output_dir`` is resolved against ``base_dir`` (defaults
    to the directory holding the config file).
    """
    if path is None:
        return BookConfig()
    path = path.expanduser().resolve()
    data = read_yaml_file(path)
    book = data.get("book")
    if isinstance(book, dict) and book.get("output_dir"):
        output_dir = Path(book["output_dir"]).expanduser()
        if not output_dir.is_absolute():
            book["output_dir"] = str(((base_dir or path.parent) / output_dir).resolve())
    result = validation.validate_pydantic_model(data, BookConfig)
    if not result.valid:
        raise ValidationFailure(result.errors, message=f"Invalid book config in {path}: {'; '.join(result.errors)}")
    return result.data


__all__ = [
    "BookConfig",
    "BookSettings",
    "DEFAULT_CHAPTER_EXTENSION",
    "ScoringConfig",
    "ScoringWeights",
    "VerificationConfig",
    "load_book_config",
    "read_yaml_file",
]
