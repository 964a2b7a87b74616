"""Normalize, validate, and load raw syllabus payloads."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from bookgen.core.errors import ValidationFailure
from bookgen.core.validation import ValidationResult, strict_validation

from .models import DEFAULT_CATEGORY, Syllabus, SyllabusStats

LOGGER = logging.getLogger(__name__)

_TOPIC_STRING_FIELDS = ("id", "title", "description", "category")
_SYLLABUS_STRING_FIELDS = ("title", "description", "author")
_PATH_SEPARATORS = ("/", "\\")
_DOT_SEGMENTS = {".", ".."}


@dataclass
class ParsedSyllabus:
    syllabus: Syllabus
    stats: SyllabusStats
    validation: ValidationResult


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _strip_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [_strip(item) for item in value]
    return value


def normalize_topic(topic: Any) -> Any:
    """Topic-level half of `normalize_syllabus`; non-mappings pass through."""
    if not isinstance(topic, Mapping):
        return topic
    normalized: Dict[str, Any] = dict(topic)
    for key in _TOPIC_STRING_FIELDS:
        if key in normalized:
            normalized[key] = _strip(normalized[key])
    normalized["learningObjectives"] = _strip_list(normalized.get("learningObjectives"))
    normalized["prerequisites"] = _strip_list(normalized.get("prerequisites"))
    if not normalized.get("category"):
        normalized["category"] = DEFAULT_CATEGORY
    position = normalized.get("position")
    if not isinstance(position, int) or isinstance(position, bool) or position < 0:
        normalized["position"] = 0
    return normalized


def normalize_syllabus(raw: Any) -> Any:
    """Coerce a raw syllabus into canonical shape without rejecting anything.

    Strings are trimmed, list fields default to ``[]``, ``category`` defaults
    to ``"Uncategorized"`` and ``position`` to ``0``. Unknown keys are kept
    and values of the wrong type are left for `validate_syllabus` to report.
    Running it twice gives the same result as running it once.
    """
    if not isinstance(raw, Mapping):
        return raw
    normalized: Dict[str, Any] = copy.deepcopy(dict(raw))
    for key in _SYLLABUS_STRING_FIELDS:
        if key in normalized:
            normalized[key] = _strip(normalized[key])
    topics = normalized.get("topics")
    if isinstance(topics, list):
        normalized["topics"] = [normalize_topic(topic) for topic in topics]
    return normalized


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_path_segment(value: str) -> bool:
    """True when ``value`` can name one file or directory under the book root."""
    return not any(sep in value for sep in _PATH_SEPARATORS) and value.strip().lower() not in _DOT_SEGMENTS


def validate_syllabus(data: Any) -> ValidationResult:
    """Collect every structural problem in a (normalized) syllabus."""
    errors: List[str] = []

    if not isinstance(data, Mapping):
        return ValidationResult(valid=False, errors=[f"Syllabus must be an object, got {type(data).__name__}"])

    if not _is_non_empty_str(data.get("title")):
        errors.append("Missing or invalid title")
    if not _is_non_empty_str(data.get("description")):
        errors.append("Missing or invalid description")
    author = data.get("author")
    if author is not None and not isinstance(author, str):
        errors.append("Invalid author: expected a string")

    topics = data.get("topics")
    if not isinstance(topics, list):
        errors.append("Missing or invalid topics array")
    elif not topics:
        errors.append("Topics array is empty")
    else:
        seen: set[str] = set()
        for index, topic in enumerate(topics):
            if not isinstance(topic, Mapping):
                errors.append(f"Topic {index}: must be an object")
                continue
            topic_id = topic.get("id")
            if not _is_non_empty_str(topic_id):
                errors.append(f"Topic {index}: Missing or invalid id")
            elif not _is_path_segment(topic_id):
                errors.append(f"Topic {index}: Invalid id {topic_id!r} (must be a single path segment)")
            elif topic_id in seen:
                errors.append(f"Topic {index}: Duplicate id {topic_id}")
            else:
                seen.add(topic_id)
            if not _is_non_empty_str(topic.get("title")):
                errors.append(f"Topic {index}: Missing or invalid title")
            if not _is_non_empty_str(topic.get("description")):
                errors.append(f"Topic {index}: Missing or invalid description")

            objectives = topic.get("learningObjectives")
            if not isinstance(objectives, list):
                errors.append(f"Topic {index}: Missing or invalid learningObjectives")
            elif not objectives:
                errors.append(f"Topic {index}: learningObjectives array is empty")
            elif not all(isinstance(item, str) for item in objectives):
                errors.append(f"Topic {index}: learningObjectives must contain only strings")

            prerequisites = topic.get("prerequisites")
            if prerequisites is not None:
                if not isinstance(prerequisites, list):
                    errors.append(f"Topic {index}: prerequisites must be an array")
                elif not all(isinstance(item, str) for item in prerequisites):
                    errors.append(f"Topic {index}: prerequisites must contain only strings")

            category = topic.get("category")
            if category is not None and not isinstance(category, str):
                errors.append(f"Topic {index}: category must be a string")
            elif isinstance(category, str) and not _is_path_segment(category):
                errors.append(f"Topic {index}: Invalid category {category!r} (must be a single path segment)")

    return ValidationResult(valid=not errors, errors=errors, data=data)


def load_syllabus(raw: Any) -> Syllabus:
    """Normalize + validate ``raw`` and return the typed syllabus.

    Raises:
        ValidationFailure: with every violation found, when the input is invalid.
    """
    normalized = normalize_syllabus(raw)
    result = validate_syllabus(normalized)
    if not result.valid:
        LOGGER.warning("Syllabus rejected with %d error(s)", len(result.errors))
        raise ValidationFailure(result.errors, message=f"Syllabus validation failed: {', '.join(result.errors)}")
    return Syllabus.model_validate(normalized)


def syllabus_stats(syllabus: Syllabus) -> SyllabusStats:
    categories: List[str] = []
    for topic in syllabus.topics:
        if topic.category not in categories:
            categories.append(topic.category)
    return SyllabusStats(
        topic_count=len(syllabus.topics),
        categories=categories,
        category_count=len(categories),
        total_learning_objectives=sum(len(topic.learning_objectives) for topic in syllabus.topics),
        has_prerequisites=any(topic.prerequisites for topic in syllabus.topics),
    )


def parse_syllabus(path: Path) -> ParsedSyllabus:
    """Read a JSON or YAML syllabus file and return the validated syllabus with stats."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    loaded = strict_validation.load_structured_file(path)
    normalized = normalize_syllabus(loaded.data)
    result = validate_syllabus(normalized)
    if not result.valid:
        raise ValidationFailure(result.errors, message=f"Syllabus validation failed for {path}: {', '.join(result.errors)}")
    syllabus = Syllabus.model_validate(normalized)
    LOGGER.info("Parsed syllabus %r with %d topics from %s", syllabus.title, len(syllabus.topics), path)
    return ParsedSyllabus(syllabus=syllabus, stats=syllabus_stats(syllabus), validation=result)


__all__ = [
    "ParsedSyllabus",
    "load_syllabus",
    "normalize_syllabus",
    "normalize_topic",
    "parse_syllabus",
    "syllabus_stats",
    "validate_syllabus",
]
