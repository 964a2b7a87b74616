"""End-to-end book generation: syllabus payload in, files on disk out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bookgen.core.config import BookSettings
from bookgen.core.errors import CircularDependencyError, ValidationFailure
from bookgen.core.provenance import ProvenanceLogger
from bookgen.syllabus.parser import load_syllabus

from .plan import plan_book
from .writer import write_plan

LOGGER = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["success"] = "success"
    book_path: str
    chapter_count: int
    message: str
    generated_files: List[str] = Field(default_factory=list)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


def generate_book(
    raw_syllabus: Any,
    settings: BookSettings | None = None,
    *,
    run_log: ProvenanceLogger | None = None,
) -> GenerationResult:
    """Normalize, validate, order, plan, and write the book for ``raw_syllabus``.

    Raises:
        ValidationFailure: the syllabus is malformed; nothing is written.
        CircularDependencyError: prerequisites cannot be ordered; nothing is written.
        OSError: writing failed part-way.
    """
    settings = settings or BookSettings()
    run_log = run_log or ProvenanceLogger(None)

    try:
        syllabus = load_syllabus(raw_syllabus)
    except ValidationFailure as exc:
        run_log.log({"stage": "parse", "message": str(exc), "status": "error", "payload": {"errors": exc.errors}})
        raise
    run_log.log({"stage": "parse", "message": f"Loaded {len(syllabus.topics)} topics", "payload": {"title": syllabus.title}})

    try:
        plan = plan_book(syllabus, settings)
    except CircularDependencyError as exc:
        run_log.log(
            {"stage": "resolve", "message": str(exc), "status": "error", "payload": {"unresolved": exc.unresolved_ids}}
        )
        raise
    run_log.log(
        {
            "stage": "resolve",
            "message": "Resolved teaching order",
            "payload": {"order": plan.syllabus.topic_ids},
        }
    )

    written = write_plan(plan)
    chapter_count = len(plan.chapters)
    run_log.log(
        {
            "stage": "generate",
            "message": f"Wrote {len(written)} files",
            "payload": {"files": [str(path) for path in written]},
        }
    )
    LOGGER.info("Generated %d chapters under %s", chapter_count, settings.output_dir)
    return GenerationResult(
        book_path=str(Path(settings.output_dir)),
        chapter_count=chapter_count,
        message=f"Successfully generated {chapter_count} chapters",
        generated_files=[str(path) for path in written],
    )


__all__ = ["GenerationResult", "generate_book"]
