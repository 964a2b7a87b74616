"""
Foundational configuration, error, and logging utilities for bookgen.

Higher layers (syllabus, generation, content, CLI, API) depend on these
modules; nothing here imports from those layers.
"""

from .config import BookConfig, BookSettings, ScoringConfig, VerificationConfig, load_book_config
from .errors import (
    BookGenError,
    CircularDependencyError,
    MappingError,
    UnknownPrerequisiteError,
    ValidationFailure,
    VerificationError,
)
from .provenance import ProvenanceEvent, ProvenanceLogger

__all__ = [
    "BookConfig",
    "BookGenError",
    "BookSettings",
    "CircularDependencyError",
    "MappingError",
    "ProvenanceEvent",
    "ProvenanceLogger",
    "ScoringConfig",
    "UnknownPrerequisiteError",
    "ValidationFailure",
    "VerificationConfig",
    "VerificationError",
    "load_book_config",
]
