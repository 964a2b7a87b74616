"""Exception taxonomy shared by the syllabus, generation, and content layers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from bookgen.generation.mapping import MappingReport


class BookGenError(Exception):
    """Base class for every error raised by bookgen."""


class ValidationFailure(BookGenError, ValueError):
    """Malformed input; carries the itemized list of violations."""

    def __init__(self, errors: Sequence[str] | str, *, message: str | None = None) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__(message or f"Validation failed: {'; '.join(self.errors)}")


class CircularDependencyError(BookGenError):
    """The resolver could not place every topic."""

    def __init__(self, unresolved_ids: Iterable[str], *, message: str | None = None) -> None:
        self.unresolved_ids: List[str] = list(unresolved_ids)
        super().__init__(message or f"Circular dependency detected: {', '.join(self.unresolved_ids)}")


class UnknownPrerequisiteError(CircularDependencyError):
    """A prerequisite id does not match any topic in the syllabus."""

    def __init__(self, unresolved_ids: Iterable[str], unknown: Dict[str, List[str]]) -> None:
        self.unknown = {topic_id: list(missing) for topic_id, missing in unknown.items()}
        details = "; ".join(f"{topic_id} -> {', '.join(missing)}" for topic_id, missing in self.unknown.items())
        super().__init__(unresolved_ids, message=f"Unknown prerequisites: {details}")


class MappingError(BookGenError):
    """Syllabus topics and chapter files are not one-to-one."""

    def __init__(self, report: "MappingReport") -> None:
        self.report = report
        super().__init__(report.describe())


class VerificationError(BookGenError):
    """The verification service failed or returned an unusable payload."""


__all__ = [
    "BookGenError",
    "CircularDependencyError",
    "MappingError",
    "UnknownPrerequisiteError",
    "ValidationFailure",
    "VerificationError",
]
