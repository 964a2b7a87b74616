"""Validate every chapter file of a generated book against its syllabus topic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from bookgen.syllabus.models import Topic

from .reports import BookValidationResult, ChapterValidation
from .scorer import ContentValidator
from .text import round_half_up

LOGGER = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".md", ".mdx")


def find_content_files(book_dir: Path, suffixes: Sequence[str] = CONTENT_SUFFIXES) -> List[Path]:
    """All Markdown/MDX files below ``book_dir``, sorted for stable reports."""
    if not book_dir.is_dir():
        raise FileNotFoundError(book_dir)
    return sorted(path for path in book_dir.rglob("*") if path.is_file() and path.suffix in suffixes)


def _squash(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isascii() and ch.isalnum())


def find_matching_topic(path: Path, topics: Sequence[Topic]) -> Topic | None:
    """Match by id (file stem) first, then by containment of squashed title and stem."""
    stem = path.stem
    for topic in topics:
        if topic.id == stem:
            return topic
    squashed_stem = _squash(stem)
    if not squashed_stem:
        return None
    for topic in topics:
        squashed_title = _squash(topic.title)
        if squashed_title and (squashed_stem in squashed_title or squashed_title in squashed_stem):
            return topic
    return None


def _status_for(score: int) -> str:
    if score >= 75:
        return "PASS"
    if score >= 50:
        return "PARTIAL"
    return "FAIL"


def validate_book_content(
    book_dir: Path,
    topics: Sequence[Topic],
    validator: ContentValidator | None = None,
    *,
    sources: Sequence[str] = (),
) -> BookValidationResult:
    validator = validator or ContentValidator()
    chapter_results: List[ChapterValidation] = []
    unmatched: List[str] = []

    for path in find_content_files(book_dir):
        topic = find_matching_topic(path, topics)
        if topic is None:
            LOGGER.info("No syllabus topic matches %s; skipping", path)
            unmatched.append(str(path))
            continue
        report = validator.validate(path.read_text(encoding="utf-8"), topic, sources)
        chapter_results.append(ChapterValidation(file=str(path), topic_id=topic.id, report=report))

    overall = 0
    if chapter_results:
        overall = round_half_up(sum(item.report.compliance_score for item in chapter_results) / len(chapter_results))
    status = _status_for(overall)

    summary = "\n".join(
        [
            "Book Validation Summary:",
            f"  - Total Chapters in Syllabus: {len(topics)}",
            f"  - Chapters Validated: {len(chapter_results)}",
            f"  - Overall Compliance Score: {overall}/100",
            f"  - Status: {status}",
        ]
    )
    return BookValidationResult(
        overall_compliance_score=overall,
        total_chapters=len(topics),
        validated_chapters=len(chapter_results),
        chapter_results=chapter_results,
        unmatched_files=unmatched,
        status=status,
        summary_report=summary,
    )


__all__ = ["CONTENT_SUFFIXES", "find_content_files", "find_matching_topic", "validate_book_content"]
