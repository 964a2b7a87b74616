"""Content compliance scoring and documentation verification."""

from .book import find_matching_topic, validate_book_content
from .reports import BookValidationResult, DocumentVerification, Issue, ValidationReport, VerificationResult
from .scorer import (
    ContentValidator,
    calculate_compliance_score,
    check_content_structure,
    check_objectives_coverage,
    check_title_coverage,
    classify_compliance,
)
from .verification import (
    KeywordVerifier,
    RemoteVerifier,
    RemoteVerifierConfig,
    StructuralVerifier,
    Verifier,
    build_verifier,
    verify_document,
)

__all__ = [
    "BookValidationResult",
    "ContentValidator",
    "DocumentVerification",
    "Issue",
    "KeywordVerifier",
    "RemoteVerifier",
    "RemoteVerifierConfig",
    "StructuralVerifier",
    "ValidationReport",
    "VerificationResult",
    "Verifier",
    "build_verifier",
    "calculate_compliance_score",
    "check_content_structure",
    "check_objectives_coverage",
    "check_title_coverage",
    "classify_compliance",
    "find_matching_topic",
    "validate_book_content",
    "verify_document",
]
