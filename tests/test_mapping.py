from __future__ import annotations

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from bookgen.core.errors import MappingError
from bookgen.generation import validate_mapping
from bookgen.syllabus import Topic
from tests.mocks.syllabus_data import make_topic


def _topics(*ids: str) -> list[Topic]:
    return [Topic.model_validate(make_topic(topic_id)) for topic_id in ids]


class MappingTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.chapters = Path(tmp.name) / "chapters"
        self.chapters.mkdir()

    def _touch(self, *relative: str) -> None:
        for name in relative:
            path = self.chapters / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("# stub\n", encoding="utf-8")

    def test_one_to_one_mapping_is_valid(self) -> None:
        self._touch("basics/a.mdx", "basics/b.mdx", "advanced/c.mdx")

        report = validate_mapping(_topics("a", "b", "c"), self.chapters)

        self.assertTrue(report.is_valid)
        self.assertEqual(report.topic_count, 3)
        self.assertEqual(report.chapter_count, 3)
        self.assertEqual(report.describe(), "Mapping valid: 3 topics, 3 chapters")
        report.raise_if_invalid()

    def test_missing_and_extra_chapters(self) -> None:
        self._touch("a.mdx", "b.mdx", "d.mdx")

        report = validate_mapping(_topics("a", "b", "c"), self.chapters)

        self.assertFalse(report.is_valid)
        self.assertEqual(report.missing_chapters, ["c"])
        self.assertEqual(report.extra_chapters, ["d"])
        self.assertIn("missing chapters for topics: c", report.describe())
        with self.assertRaises(MappingError) as ctx:
            report.raise_if_invalid()
        self.assertIs(ctx.exception.report, report)

    def test_duplicate_chapter_files_in_different_directories(self) -> None:
        self._touch("one/a.mdx", "two/a.mdx")

        report = validate_mapping(_topics("a"), self.chapters)

        self.assertEqual(report.duplicate_files, ["a"])
        self.assertEqual(report.missing_chapters, [])
        self.assertFalse(report.is_valid)

    def test_duplicate_topic_ids(self) -> None:
        self._touch("a.mdx")
        report = validate_mapping(_topics("a", "a"), self.chapters)
        self.assertEqual(report.duplicate_topics, ["a"])

    def test_other_extensions_are_ignored(self) -> None:
        self._touch("a.mdx", "notes.md", "_category_.json")

        self.assertTrue(validate_mapping(_topics("a"), self.chapters).is_valid)
        md_report = validate_mapping(_topics("notes"), self.chapters, ".md")
        self.assertTrue(md_report.is_valid)

    def test_missing_directory(self) -> None:
        with self.assertRaises(FileNotFoundError):
            validate_mapping(_topics("a"), self.chapters / "absent")

    def test_payload_shape(self) -> None:
        self._touch("a.mdx", "d.mdx")
        payload = validate_mapping(_topics("a", "c"), self.chapters).to_payload()
        self.assertEqual(
            payload,
            {
                "isValid": False,
                "mapping": {"topicCount": 2, "chapterCount": 2},
                "issues": {
                    "missingChapters": ["c"],
                    "extraChapters": ["d"],
                    "duplicateTopics": [],
                    "duplicateFiles": [],
                },
            },
        )


if __name__ == "__main__":
    unittest.main()
