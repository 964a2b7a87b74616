"""Book skeleton planning, writing, and topic/chapter mapping checks."""

from .mapping import MappingReport, find_chapter_files, validate_mapping
from .pipeline import GenerationResult, generate_book
from .plan import (
    BookPlan,
    PlannedFile,
    build_sidebar_config,
    group_topics_by_category,
    plan_book,
    render_chapter,
    render_sidebar_module,
)
from .writer import write_plan

__all__ = [
    "BookPlan",
    "GenerationResult",
    "MappingReport",
    "PlannedFile",
    "build_sidebar_config",
    "find_chapter_files",
    "generate_book",
    "group_topics_by_category",
    "plan_book",
    "render_chapter",
    "render_sidebar_module",
    "validate_mapping",
    "write_plan",
]
