"""Report records produced by content validation and verification.

All models serialize with camelCase keys (``complianceScore``,
``suggestedFix``) to match the HTTP contract.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

IssueType = Literal[
    "content-mismatch",
    "completeness",
    "formatting",
    "source-verification",
    "low-confidence",
    "verification-error",
]
Severity = Literal["low", "medium", "high", "critical"]
ComplianceStatus = Literal["excellent", "good", "partial", "poor"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Issue(_CamelModel):
    type: IssueType
    severity: Severity
    description: str
    suggested_fix: str


class VerificationResult(_CamelModel):
    """What a verification collaborator says about one content/topic pair."""

    is_verified: bool
    verified_sources: List[str] = Field(default_factory=list)
    confidence_score: float = Field(..., ge=0.0, le=100.0)
    issues: List[Issue] = Field(default_factory=list)
    verification_date: datetime = Field(default_factory=_utcnow)
    topic: str = ""


class DocumentVerification(_CamelModel):
    """Aggregate of verifying one document against several topics."""

    overall_verification: bool
    total_topics: int
    verified_topics: int
    overall_confidence: int
    topic_results: List[VerificationResult] = Field(default_factory=list)
    verification_date: datetime = Field(default_factory=_utcnow)


class ValidationReport(_CamelModel):
    """Compliance verdict for one piece of content against one topic."""

    is_valid: bool
    compliance_score: int = Field(..., ge=0, le=100)
    compliance_status: ComplianceStatus
    issues: List[Issue] = Field(default_factory=list)
    verified_sources: List[str] = Field(default_factory=list)
    verification_score: float = 0.0
    title_covered: bool = False
    objective_ratio: float = 0.0
    structure_valid: bool = False
    adequate_length: bool = False
    validation_report: str = ""
    validation_date: datetime = Field(default_factory=_utcnow)


class ChapterValidation(_CamelModel):
    file: str
    topic_id: str
    report: ValidationReport


class BookValidationResult(_CamelModel):
    overall_compliance_score: int = 0
    total_chapters: int = 0
    validated_chapters: int = 0
    chapter_results: List[ChapterValidation] = Field(default_factory=list)
    unmatched_files: List[str] = Field(default_factory=list)
    status: Literal["PASS", "PARTIAL", "FAIL"] = "FAIL"
    summary_report: str = ""


__all__ = [
    "BookValidationResult",
    "ChapterValidation",
    "ComplianceStatus",
    "DocumentVerification",
    "Issue",
    "IssueType",
    "Severity",
    "ValidationReport",
    "VerificationResult",
]
