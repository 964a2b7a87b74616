"""Documentation-verification collaborators.

The content validator only depends on the `Verifier` protocol. Two local,
deterministic heuristics ship with the package, plus an HTTP client for a
real verification service.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable

import httpx
from pydantic import ValidationError

from bookgen.core.config import VerificationConfig
from bookgen.core.errors import VerificationError

from .reports import DocumentVerification, Issue, VerificationResult
from .text import extract_keywords, round_half_up, slugify

LOGGER = logging.getLogger(__name__)

VERIFIED_THRESHOLD = 70
LOW_CONFIDENCE_THRESHOLD = 50
MAX_VERIFIED_SOURCES = 2

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_HEADING = re.compile(r"^#+\s", re.MULTILINE)
_LINK = re.compile(r"\[.*\]\(.*\)")


@runtime_checkable
class Verifier(Protocol):
    def verify(self, content: str, topic: str, sources: Sequence[str] = ()) -> VerificationResult:
        ...


class StructuralVerifier:
    """Confidence from how documentation-like the content looks.

    Starts at 50 and adds 20 for more than 500 characters, then 10 each for a
    fenced code block, a heading, and a Markdown link (capped at 100).
    """

    DEFAULT_SOURCES = (
        "official-docusaurus-docs",
        "ros2-documentation",
        "gazebo-simulation-guide",
        "nvidia-isaac-manual",
        "unity-robotics-docs",
        "technical-writer-reference",
    )

    def __init__(self, default_sources: Sequence[str] | None = None) -> None:
        self.default_sources = list(default_sources or self.DEFAULT_SOURCES)

    def verify(self, content: str, topic: str, sources: Sequence[str] = ()) -> VerificationResult:
        score = 50
        if len(content) > 500:
            score += 20
        if _CODE_BLOCK.search(content):
            score += 10
        if _HEADING.search(content):
            score += 10
        if _LINK.search(content):
            score += 10
        score = min(score, 100)

        verified = list(sources) if sources else self.default_sources[:MAX_VERIFIED_SOURCES]
        return VerificationResult(
            is_verified=score >= VERIFIED_THRESHOLD,
            verified_sources=verified,
            confidence_score=score,
            topic=topic,
        )


class KeywordVerifier:
    """Confidence from topic keyword overlap plus content length.

    Half the score comes from length (saturating at 500 characters), half from
    the share of topic keywords present in the content.
    """

    def verify(self, content: str, topic: str, sources: Sequence[str] = ()) -> VerificationResult:
        topic_keywords = extract_keywords(topic)
        content_keywords = set(extract_keywords(content))
        matching = sum(1 for keyword in topic_keywords if keyword in content_keywords)

        keyword_ratio = matching / max(len(topic_keywords), 1)
        length_score = min(len(content) / 1000, 0.5)
        confidence = round_half_up((length_score + keyword_ratio * 0.5) * 100)

        issues: List[Issue] = []
        if confidence < LOW_CONFIDENCE_THRESHOLD:
            issues.append(
                Issue(
                    type="low-confidence",
                    severity="high",
                    description=f'Content has low confidence score ({confidence}%) for topic "{topic}"',
                    suggested_fix="Add more content related to the topic keywords",
                )
            )

        if sources:
            verified = list(sources)[:MAX_VERIFIED_SOURCES]
        else:
            verified = [f"official-{slugify(topic)}-docs", "general-technical-reference"]

        return VerificationResult(
            is_verified=confidence >= LOW_CONFIDENCE_THRESHOLD,
            verified_sources=verified,
            confidence_score=confidence,
            issues=issues,
            topic=topic,
        )


@dataclass
class RemoteVerifierConfig:
    base_url: str
    api_key: str | None = None
    timeout: float = 30.0


class RemoteVerifier:
    """Calls ``POST {base_url}/api/verify`` on a documentation-verification service."""

    def __init__(
        self,
        config: RemoteVerifierConfig,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        if client is None:
            self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

    def verify(self, content: str, topic: str, sources: Sequence[str] = ()) -> VerificationResult:
        payload = {"content": content, "topic": topic, "sources": list(sources)}
        try:
            response = self._client.post("/api/verify", json=payload, headers=self._build_headers())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            LOGGER.error("Verification request for %r failed: %s", topic, exc)
            raise VerificationError(f"Verification service request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise VerificationError("Verification service returned non-JSON payload") from exc
        if not isinstance(data, dict):
            raise VerificationError(f"Expected a JSON object from verification service, got {type(data).__name__}")
        data.setdefault("topic", topic)
        try:
            return VerificationResult.model_validate(data)
        except ValidationError as exc:
            raise VerificationError(f"Malformed verification payload: {exc}") from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _build_headers(self) -> Dict[str, str] | None:
        if not self._config.api_key:
            return None
        return {"Authorization": f"Bearer {self._config.api_key}"}

    def __enter__(self) -> "RemoteVerifier":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def build_verifier(config: VerificationConfig | None = None) -> Verifier:
    """Instantiate the verifier selected by ``config.mode``."""
    config = config or VerificationConfig()
    if config.mode == "keyword":
        return KeywordVerifier()
    if config.mode == "remote":
        return RemoteVerifier(
            RemoteVerifierConfig(base_url=config.api_base or "", api_key=config.api_key, timeout=config.timeout)
        )
    return StructuralVerifier(config.default_sources or None)


def verify_document(
    verifier: Verifier,
    content: str,
    topics: Sequence[str],
    sources: Sequence[str] = (),
) -> DocumentVerification:
    """Verify one document against several topic titles, one call at a time."""
    results = [verifier.verify(content, topic, sources) for topic in topics]
    verified = sum(1 for result in results if result.is_verified)
    overall = round_half_up(sum(result.confidence_score for result in results) / len(results)) if results else 0
    return DocumentVerification(
        overall_verification=verified == len(results),
        total_topics=len(results),
        verified_topics=verified,
        overall_confidence=overall,
        topic_results=results,
    )


__all__ = [
    "KeywordVerifier",
    "RemoteVerifier",
    "RemoteVerifierConfig",
    "StructuralVerifier",
    "Verifier",
    "build_verifier",
    "verify_document",
]
