"""Check that syllabus topics and generated chapter files map one-to-one."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from bookgen.core.config import DEFAULT_CHAPTER_EXTENSION
from bookgen.core.errors import MappingError
from bookgen.syllabus.models import Topic

LOGGER = logging.getLogger(__name__)


@dataclass
class MappingReport:
    topic_count: int
    chapter_count: int
    missing_chapters: List[str] = field(default_factory=list)
    extra_chapters: List[str] = field(default_factory=list)
    duplicate_topics: List[str] = field(default_factory=list)
    duplicate_files: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not (self.missing_chapters or self.extra_chapters or self.duplicate_topics or self.duplicate_files)

    def describe(self) -> str:
        if self.is_valid:
            return f"Mapping valid: {self.topic_count} topics, {self.chapter_count} chapters"
        parts = []
        if self.missing_chapters:
            parts.append(f"missing chapters for topics: {', '.join(self.missing_chapters)}")
        if self.extra_chapters:
            parts.append(f"extra chapters without topic: {', '.join(self.extra_chapters)}")
        if self.duplicate_topics:
            parts.append(f"duplicate topic ids: {', '.join(self.duplicate_topics)}")
        if self.duplicate_files:
            parts.append(f"duplicate chapter files: {', '.join(self.duplicate_files)}")
        return "Mapping invalid: " + "; ".join(parts)

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise MappingError(self)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "mapping": {"topicCount": self.topic_count, "chapterCount": self.chapter_count},
            "issues": {
                "missingChapters": self.missing_chapters,
                "extraChapters": self.extra_chapters,
                "duplicateTopics": self.duplicate_topics,
                "duplicateFiles": self.duplicate_files,
            },
        }


def find_chapter_files(chapters_dir: Path, extension: str = DEFAULT_CHAPTER_EXTENSION) -> List[Path]:
    if not chapters_dir.is_dir():
        raise FileNotFoundError(chapters_dir)
    return sorted(path for path in chapters_dir.rglob(f"*{extension}") if path.is_file())


def _duplicates(values: Iterable[str]) -> List[str]:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


def validate_mapping(
    topics: Sequence[Topic],
    chapters_dir: Path,
    extension: str = DEFAULT_CHAPTER_EXTENSION,
) -> MappingReport:
    """Compare topic ids against chapter basenames found recursively under ``chapters_dir``."""
    files = find_chapter_files(chapters_dir, extension)
    topic_ids = [topic.id for topic in topics]
    chapter_ids = [path.stem for path in files]
    topic_set = set(topic_ids)
    chapter_set = set(chapter_ids)

    report = MappingReport(
        topic_count=len(topic_ids),
        chapter_count=len(files),
        missing_chapters=[topic_id for topic_id in dict.fromkeys(topic_ids) if topic_id not in chapter_set],
        extra_chapters=[chapter_id for chapter_id in dict.fromkeys(chapter_ids) if chapter_id not in topic_set],
        duplicate_topics=_duplicates(topic_ids),
        duplicate_files=_duplicates(chapter_ids),
    )
    if not report.is_valid:
        LOGGER.warning("%s", report.describe())
    return report


__all__ = ["MappingReport", "find_chapter_files", "validate_mapping"]
