"""Syllabus model, parsing, and dependency resolution."""

from .models import DEFAULT_CATEGORY, Syllabus, SyllabusStats, Topic
from .parser import (
    ParsedSyllabus,
    load_syllabus,
    normalize_syllabus,
    normalize_topic,
    parse_syllabus,
    syllabus_stats,
    validate_syllabus,
)
from .resolver import resolve_dependencies, resolve_order, teaching_order

__all__ = [
    "DEFAULT_CATEGORY",
    "ParsedSyllabus",
    "Syllabus",
    "SyllabusStats",
    "Topic",
    "load_syllabus",
    "normalize_syllabus",
    "normalize_topic",
    "parse_syllabus",
    "resolve_dependencies",
    "resolve_order",
    "syllabus_stats",
    "teaching_order",
    "validate_syllabus",
]
