"""Pure planning of the book skeleton: chapter MDX files, category descriptors, sidebar.

Nothing in this module touches the filesystem; `bookgen.generation.writer`
executes the resulting `BookPlan`.
"""

from __future__ import annotations

import json
import os
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal

import yaml

from bookgen.core.config import BookSettings
from bookgen.core.errors import ValidationFailure
from bookgen.content.text import slugify
from bookgen.syllabus.models import Syllabus, Topic
from bookgen.syllabus.resolver import resolve_dependencies

FileKind = Literal["chapter", "category", "sidebar"]


@dataclass(frozen=True)
class PlannedFile:
    path: Path
    content: str
    kind: FileKind
    overwrite: bool = True


@dataclass
class BookPlan:
    root: Path
    syllabus: Syllabus
    files: List[PlannedFile] = field(default_factory=list)

    @property
    def chapters(self) -> List[PlannedFile]:
        return [planned for planned in self.files if planned.kind == "chapter"]


def group_topics_by_category(topics: List[Topic]) -> "OrderedDict[str, List[Topic]]":
    """Group topics by category, preserving position order inside and across groups."""
    grouped: "OrderedDict[str, List[Topic]]" = OrderedDict()
    for topic in sorted(topics, key=lambda item: item.position):
        grouped.setdefault(topic.category, []).append(topic)
    return grouped


def _front_matter(data: Dict[str, Any]) -> str:
    return "---\n" + yaml.safe_dump(data, sort_keys=False, allow_unicode=True) + "---\n"


def render_chapter(topic: Topic, syllabus: Syllabus | None = None) -> str:
    """MDX stub for one topic; prerequisites are listed by title when ``syllabus`` knows them."""
    front_matter = _front_matter(
        {
            "id": topic.id,
            "title": topic.title,
            "description": topic.description,
            "sidebar_position": topic.position + 1,
            "keywords": [topic.title, *topic.learning_objectives[:3]],
        }
    )
    objectives = "\n".join(f"- {objective}" for objective in topic.learning_objectives)

    if topic.prerequisites:
        prereq_lines = []
        for prereq_id in topic.prerequisites:
            prereq = syllabus.get_topic(prereq_id) if syllabus is not None else None
            prereq_lines.append(f"- {prereq.title} (`{prereq_id}`)" if prereq else f"- `{prereq_id}`")
        prerequisites = "\n".join(prereq_lines)
    else:
        prerequisites = "No prerequisites required for this topic."

    lowered = topic.title.lower()
    return (
        f"{front_matter}\n"
        f"# {topic.title}\n\n"
        f"{topic.description}\n\n"
        f"## Learning Objectives\n\n{objectives}\n\n"
        f"## Prerequisites\n\n{prerequisites}\n\n"
        "## Introduction\n\n"
        f"This chapter covers the fundamentals of {lowered}. It builds upon the concepts introduced in "
        "previous chapters and prepares you for the topics covered in subsequent chapters.\n\n"
        "## Content\n\n"
        f"{{/* Content for {topic.title} will be generated here */}}\n\n"
        "## Summary\n\n"
        f"In this chapter, you learned about {lowered}. The concepts covered here are the basis for "
        "the more advanced topics in the following chapters.\n\n"
        "## Exercises\n\n"
        f"1. Exercise related to {topic.title}\n"
        "2. Practical application of the concepts learned\n"
        f"3. Problem-solving using {topic.title} principles\n"
    )


def category_descriptor(label: str, position: int, book_label: str) -> Dict[str, Any]:
    return {
        "label": label,
        "position": position,
        "collapsible": True,
        "collapsed": False,
        "link": {
            "type": "generated-index",
            "title": f"{label} Overview",
            "description": f"Learn about {label} in {book_label}",
        },
    }


def _dump_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def chapter_doc_id(topic: Topic, settings: BookSettings) -> str:
    parts = [settings.chapters_dir_name]
    if settings.group_by_category:
        parts.append(slugify(topic.category))
    parts.append(topic.id)
    return "/".join(parts)


def build_sidebar_config(syllabus: Syllabus, settings: BookSettings) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = []
    for category, topics in group_topics_by_category(syllabus.topics).items():
        docs = [{"type": "doc", "id": chapter_doc_id(topic, settings), "label": topic.title} for topic in topics]
        if settings.group_by_category:
            items.append({"type": "category", "label": category, "collapsed": False, "items": docs})
        else:
            items.extend(docs)
    return {"chapters": [{"type": "category", "label": settings.label, "collapsed": False, "items": items}]}


def render_sidebar_module(config: Dict[str, Any]) -> str:
    return f"module.exports = {json.dumps(config, indent=2, ensure_ascii=False)};\n"


def _ensure_inside_root(plan: BookPlan) -> None:
    root = Path(os.path.normpath(plan.root))
    escaped = [
        str(planned.path)
        for planned in plan.files
        if root not in Path(os.path.normpath(planned.path)).parents
    ]
    if escaped:
        raise ValidationFailure([f"Planned file escapes the book root: {path}" for path in escaped])


def plan_book(syllabus: Syllabus, settings: BookSettings | None = None) -> BookPlan:
    """Plan every file of the book skeleton; topics are (re)ordered by prerequisites first."""
    settings = settings or BookSettings()
    resolved = resolve_dependencies(syllabus)
    root = settings.output_dir
    chapters_dir = settings.chapters_dir
    plan = BookPlan(root=root, syllabus=resolved)

    grouped = group_topics_by_category(resolved.topics)
    for category_position, (category, topics) in enumerate(grouped.items(), start=1):
        target_dir = chapters_dir / slugify(category) if settings.group_by_category else chapters_dir
        if settings.group_by_category:
            plan.files.append(
                PlannedFile(
                    path=target_dir / "_category_.json",
                    content=_dump_json(category_descriptor(category, category_position, settings.label)),
                    kind="category",
                )
            )
        for topic in topics:
            plan.files.append(
                PlannedFile(
                    path=target_dir / f"{topic.id}{settings.chapter_extension}",
                    content=render_chapter(topic, resolved),
                    kind="chapter",
                )
            )

    plan.files.append(
        PlannedFile(
            path=chapters_dir / "_category_.json",
            content=_dump_json(
                {
                    "label": "Chapters",
                    "position": 2,
                    "link": {
                        "type": "generated-index",
                        "description": "Learn about the various topics in this technical book.",
                    },
                }
            ),
            kind="category",
        )
    )
    plan.files.append(
        PlannedFile(
            path=root / "_category_.json",
            content=_dump_json(
                {
                    "label": "Home",
                    "position": 1,
                    "link": {"type": "generated-index", "description": f"Welcome to the {settings.label} book."},
                }
            ),
            kind="category",
            overwrite=False,
        )
    )
    plan.files.append(
        PlannedFile(
            path=root / settings.sidebar_filename,
            content=render_sidebar_module(build_sidebar_config(resolved, settings)),
            kind="sidebar",
        )
    )
    _ensure_inside_root(plan)
    return plan


__all__ = [
    "BookPlan",
    "PlannedFile",
    "build_sidebar_config",
    "category_descriptor",
    "chapter_doc_id",
    "group_topics_by_category",
    "plan_book",
    "render_chapter",
    "render_sidebar_module",
]
