"""Lexical compliance scoring of generated chapter text against a syllabus topic."""

from __future__ import annotations

import logging
import re
from typing import Any, List, Sequence

from bookgen.core.config import ScoringConfig
from bookgen.syllabus.models import Topic

from .reports import ComplianceStatus, Issue, ValidationReport
from .text import TITLE_STOP_WORDS, normalize_text, round_half_up, significant_words
from .verification import StructuralVerifier, Verifier

LOGGER = logging.getLogger(__name__)

_HEADING = re.compile(r"#{1,6}\s")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

DEFAULT_SCORING = ScoringConfig()


def check_title_coverage(content: str, title: str, *, threshold: float = 0.5) -> bool:
    normalized_content = normalize_text(content)
    words = significant_words(title, stop_words=TITLE_STOP_WORDS)
    if not words:
        # "ROS 2" or "AI": nothing to match, so never covered.
        return False
    covered = sum(1 for word in words if word in normalized_content)
    return covered / len(words) >= threshold


def check_objectives_coverage(content: str, objectives: Sequence[str], *, threshold: float = 0.5) -> float:
    """Share of objectives whose keywords are at least ``threshold`` present in the content."""
    if not objectives:
        return 1.0
    lowered = content.lower()
    covered = 0
    for objective in objectives:
        keywords = significant_words(objective)
        if not keywords:
            continue
        matched = sum(1 for keyword in keywords if keyword in lowered)
        if matched / len(keywords) >= threshold:
            covered += 1
    return covered / len(objectives)


def check_content_structure(content: str) -> bool:
    return bool(_HEADING.search(content) or _PARAGRAPH_BREAK.search(content))


def has_adequate_length(content: str, *, min_length: int = 100) -> bool:
    return len(content) > min_length


def calculate_compliance_score(
    title_covered: bool,
    objective_ratio: float,
    structure_valid: bool,
    adequate_length: bool,
    verification_score: float,
    *,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    weights = config.weights
    score = (
        (weights.title if title_covered else 0.0)
        + objective_ratio * weights.objectives
        + (weights.structure if structure_valid else 0.0)
        + (weights.length if adequate_length else 0.0)
        + (verification_score / 100.0) * weights.verification
    )
    return max(0, min(100, round_half_up(score)))


def classify_compliance(score: int, *, config: ScoringConfig = DEFAULT_SCORING) -> ComplianceStatus:
    if score >= config.excellent_score:
        return "excellent"
    if score >= config.good_score:
        return "good"
    if score >= config.valid_score:
        return "partial"
    return "poor"


def render_validation_report(score: int, issues: Sequence[Issue], topic_title: str) -> str:
    lines = [f'Validation report for topic: "{topic_title}"', f"Compliance Score: {score}/100", ""]
    if not issues:
        lines.append("No issues found. Content meets all requirements.")
    else:
        lines.append(f"Found {len(issues)} issue(s):")
        for idx, issue in enumerate(issues, start=1):
            lines.append(f"  {idx}. [{issue.severity.upper()}] {issue.type}: {issue.description}")
    return "\n".join(lines) + "\n"


class ContentValidator:
    """Scores content against a topic and layers hard gates on top of the weighted score.

    The content is invalid when any of these hold, whatever the composite:
    the title is not covered, fewer than ``objective_gate_ratio`` of the
    objectives are covered, the verifier confidence is below
    ``verification_gate_score``, or the composite is below ``valid_score``.
    """

    def __init__(self, verifier: Verifier | None = None, *, config: ScoringConfig | None = None) -> None:
        self.verifier = verifier or StructuralVerifier()
        self.config = config or DEFAULT_SCORING

    def close(self) -> None:
        """Release the verifier's resources (the remote verifier's HTTP client)."""
        close = getattr(self.verifier, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "ContentValidator":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def validate(self, content: str, topic: Topic, sources: Sequence[str] = ()) -> ValidationReport:
        cfg = self.config
        issues: List[Issue] = []
        is_valid = True

        title_covered = check_title_coverage(content, topic.title, threshold=cfg.keyword_coverage)
        if not title_covered:
            issues.append(
                Issue(
                    type="content-mismatch",
                    severity="high",
                    description=f"Content does not adequately cover the main topic: {topic.title}",
                    suggested_fix=f"Ensure the content directly addresses the topic title: {topic.title}",
                )
            )
            is_valid = False

        objective_ratio = check_objectives_coverage(
            content, topic.learning_objectives, threshold=cfg.keyword_coverage
        )
        if objective_ratio < cfg.objective_warning_ratio:
            issues.append(
                Issue(
                    type="completeness",
                    severity="medium",
                    description=f"Content covers only {round_half_up(objective_ratio * 100)}% of learning objectives",
                    suggested_fix=(
                        "Expand content to cover all learning objectives: " + ", ".join(topic.learning_objectives)
                    ),
                )
            )
            if objective_ratio < cfg.objective_gate_ratio:
                is_valid = False

        structure_valid = check_content_structure(content)
        if not structure_valid:
            issues.append(
                Issue(
                    type="formatting",
                    severity="medium",
                    description="Content does not follow proper MDX/Markdown structure",
                    suggested_fix="Ensure content has proper headings, paragraphs, and formatting",
                )
            )

        verification = self.verifier.verify(content, topic.title, sources)
        issues.extend(verification.issues)
        if verification.confidence_score < cfg.verification_warning_score:
            issues.append(
                Issue(
                    type="source-verification",
                    severity="high",
                    description=(
                        f"Content has low verification confidence ({verification.confidence_score:g}%) "
                        "against official documentation sources"
                    ),
                    suggested_fix="Ground the content in the approved documentation sources",
                )
            )
            if verification.confidence_score < cfg.verification_gate_score:
                is_valid = False

        adequate_length = has_adequate_length(content, min_length=cfg.min_content_length)
        score = calculate_compliance_score(
            title_covered,
            objective_ratio,
            structure_valid,
            adequate_length,
            verification.confidence_score,
            config=cfg,
        )
        if score < cfg.valid_score:
            is_valid = False

        LOGGER.debug(
            "Scored content for %s: score=%s title=%s objectives=%.2f verification=%s",
            topic.id,
            score,
            title_covered,
            objective_ratio,
            verification.confidence_score,
        )
        return ValidationReport(
            is_valid=is_valid,
            compliance_score=score,
            compliance_status=classify_compliance(score, config=cfg),
            issues=issues,
            verified_sources=verification.verified_sources,
            verification_score=verification.confidence_score,
            title_covered=title_covered,
            objective_ratio=objective_ratio,
            structure_valid=structure_valid,
            adequate_length=adequate_length,
            validation_report=render_validation_report(score, issues, topic.title),
        )


__all__ = [
    "ContentValidator",
    "calculate_compliance_score",
    "check_content_structure",
    "check_objectives_coverage",
    "check_title_coverage",
    "classify_compliance",
    "has_adequate_length",
    "render_validation_report",
]
