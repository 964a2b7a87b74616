"""Typed syllabus records.

JSON payloads use camelCase (``learningObjectives``); Python code uses the
snake_case attribute names. Both spellings are accepted on input and
``to_payload`` always emits the camelCase form.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CATEGORY = "Uncategorized"


class Topic(BaseModel):
    """One chapter-sized unit of the syllabus."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str
    learning_objectives: List[str] = Field(default_factory=list, alias="learningObjectives")
    category: str = DEFAULT_CATEGORY
    prerequisites: List[str] = Field(default_factory=list)
    position: int = Field(default=0, ge=0)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Syllabus(BaseModel):
    """Ordered collection of topics plus book-level metadata."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    title: str
    description: str
    author: Optional[str] = None
    topics: List[Topic] = Field(default_factory=list)

    @property
    def topic_ids(self) -> List[str]:
        return [topic.id for topic in self.topics]

    def get_topic(self, topic_id: str) -> Topic | None:
        for topic in self.topics:
            if topic.id == topic_id:
                return topic
        return None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class SyllabusStats(BaseModel):
    """Summary counts shown by the CLI after parsing."""

    topic_count: int
    categories: List[str]
    category_count: int
    total_learning_objectives: int
    has_prerequisites: bool


__all__ = ["DEFAULT_CATEGORY", "Syllabus", "SyllabusStats", "Topic"]
