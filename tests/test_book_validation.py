from __future__ import annotations

from pathlib import Path

import pytest

from bookgen.content.book import find_content_files, find_matching_topic, validate_book_content
from bookgen.content.scorer import ContentValidator
from bookgen.core.config import BookSettings
from bookgen.generation import generate_book
from bookgen.syllabus import load_syllabus
from tests.mocks.syllabus_data import FixedVerifier, sample_syllabus


@pytest.fixture()
def topics():
    return load_syllabus(sample_syllabus()).topics


def test_generated_book_passes_validation(tmp_path: Path, topics) -> None:
    settings = BookSettings(output_dir=tmp_path / "docs")
    generate_book(sample_syllabus(), settings)

    result = validate_book_content(settings.output_dir, topics)

    assert result.validated_chapters == 3
    assert result.total_chapters == 3
    assert result.unmatched_files == []
    assert result.status == "PASS"
    assert {chapter.topic_id for chapter in result.chapter_results} == {
        "ros2-basics",
        "gazebo-simulation",
        "isaac-sim",
    }
    assert "Chapters Validated: 3" in result.summary_report


def test_matches_by_title_and_reports_unmatched(tmp_path: Path, topics) -> None:
    (tmp_path / "Gazebo-Simulation.md").write_text("# Gazebo Simulation\n\nlaunch a robot\n", encoding="utf-8")
    (tmp_path / "appendix.md").write_text("# Appendix\n", encoding="utf-8")

    verifier = FixedVerifier(100)
    result = validate_book_content(tmp_path, topics, ContentValidator(verifier), sources=["gazebo-docs"])

    assert [chapter.topic_id for chapter in result.chapter_results] == ["gazebo-simulation"]
    assert result.unmatched_files == [str(tmp_path / "appendix.md")]
    assert verifier.calls == [{"topic": "Gazebo Simulation", "sources": ["gazebo-docs"]}]


def test_empty_book_fails(tmp_path: Path, topics) -> None:
    result = validate_book_content(tmp_path, topics)
    assert result.overall_compliance_score == 0
    assert result.status == "FAIL"


def test_find_matching_topic(topics) -> None:
    assert find_matching_topic(Path("isaac-sim.mdx"), topics).id == "isaac-sim"
    assert find_matching_topic(Path("ros2fundamentals.md"), topics).id == "ros2-basics"
    assert find_matching_topic(Path("---.md"), topics) is None
    assert find_matching_topic(Path("unrelated.md"), topics) is None


def test_find_content_files_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        find_content_files(tmp_path / "missing")
