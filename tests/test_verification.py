from __future__ import annotations

import json
from typing import Iterator

import httpx
import pytest

from bookgen.content.verification import (
    KeywordVerifier,
    RemoteVerifier,
    RemoteVerifierConfig,
    StructuralVerifier,
    Verifier,
    build_verifier,
    verify_document,
)
from bookgen.core.config import VerificationConfig
from bookgen.core.errors import VerificationError
from tests.mocks.verification_api import VerificationAPIMock

RICH_CONTENT = (
    "# Isaac Sim\n\n"
    + "Isaac Sim renders photorealistic scenes for robot learning. " * 10
    + "\n\n```python\nimport omni\n```\n\n"
    + "See [the manual](https://docs.omniverse.nvidia.com) for details.\n"
)


@pytest.fixture()
def verify_api() -> Iterator[tuple[VerificationAPIMock, httpx.Client]]:
    server = VerificationAPIMock()
    client = server.build_httpx_client()
    try:
        yield server, client
    finally:
        client.close()
        server.close()


class TestStructuralVerifier:
    def test_plain_short_content_scores_baseline(self) -> None:
        result = StructuralVerifier().verify("short text", "Isaac Sim")

        assert result.confidence_score == 50
        assert result.is_verified is False
        assert result.verified_sources == ["official-docusaurus-docs", "ros2-documentation"]
        assert result.topic == "Isaac Sim"

    def test_documentation_like_content_is_capped_at_100(self) -> None:
        result = StructuralVerifier().verify(RICH_CONTENT, "Isaac Sim", ["nvidia-isaac-manual"])

        assert result.confidence_score == 100
        assert result.is_verified is True
        assert result.verified_sources == ["nvidia-isaac-manual"]

    def test_heading_alone_reaches_sixty(self) -> None:
        assert StructuralVerifier().verify("intro\n## Setup\nsteps", "Isaac Sim").confidence_score == 60

    def test_configured_default_sources(self) -> None:
        verifier = StructuralVerifier(["a-docs", "b-docs", "c-docs"])
        assert verifier.verify("text", "Topic").verified_sources == ["a-docs", "b-docs"]


class TestKeywordVerifier:
    def test_empty_content_is_low_confidence(self) -> None:
        result = KeywordVerifier().verify("", "Gazebo Simulation")

        assert result.confidence_score == 0
        assert result.is_verified is False
        assert [issue.type for issue in result.issues] == ["low-confidence"]
        assert result.verified_sources == ["official-gazebo-simulation-docs", "general-technical-reference"]

    def test_keyword_overlap_and_length(self) -> None:
        content = "Gazebo simulation " + "x" * 1000
        result = KeywordVerifier().verify(content, "Gazebo Simulation")

        assert result.confidence_score == 100
        assert result.is_verified is True
        assert result.issues == []

    def test_short_matching_content(self) -> None:
        result = KeywordVerifier().verify("gazebo simulation", "Gazebo Simulation", ["a", "b", "c"])

        assert result.confidence_score == 52
        assert result.is_verified is True
        assert result.verified_sources == ["a", "b"]


def test_verifiers_satisfy_protocol() -> None:
    assert isinstance(StructuralVerifier(), Verifier)
    assert isinstance(KeywordVerifier(), Verifier)


def test_verify_document_aggregates_topics() -> None:
    result = verify_document(StructuralVerifier(), RICH_CONTENT, ["Isaac Sim", "Omniverse"])

    assert result.total_topics == 2
    assert result.verified_topics == 2
    assert result.overall_verification is True
    assert result.overall_confidence == 100
    assert [item.topic for item in result.topic_results] == ["Isaac Sim", "Omniverse"]


def test_verify_document_without_topics() -> None:
    result = verify_document(KeywordVerifier(), "text", [])
    assert result.total_topics == 0
    assert result.overall_confidence == 0
    assert result.overall_verification is True


class TestRemoteVerifier:
    def test_posts_payload_and_parses_result(
        self, verify_api: tuple[VerificationAPIMock, httpx.Client]
    ) -> None:
        server, client = verify_api
        verifier = RemoteVerifier(
            RemoteVerifierConfig(base_url=server.base_url, api_key=server.token), client=client
        )

        result = verifier.verify("Built on ros2-documentation", "ROS 2", ["ros2-documentation", "gazebo-guide"])

        assert result.confidence_score == 50.0
        assert result.verified_sources == ["ros2-documentation"]
        assert result.is_verified is False
        assert server.requests[0]["authorization"] == "Bearer test-token"
        assert server.requests[0]["payload"]["topic"] == "ROS 2"

    def test_http_error_raises_verification_error(
        self, verify_api: tuple[VerificationAPIMock, httpx.Client]
    ) -> None:
        server, client = verify_api
        server.fail_with = 503
        verifier = RemoteVerifier(
            RemoteVerifierConfig(base_url=server.base_url, api_key=server.token), client=client
        )

        with pytest.raises(VerificationError):
            verifier.verify("content", "ROS 2")

    def test_missing_token_is_rejected(self, verify_api: tuple[VerificationAPIMock, httpx.Client]) -> None:
        server, client = verify_api
        verifier = RemoteVerifier(RemoteVerifierConfig(base_url=server.base_url), client=client)

        with pytest.raises(VerificationError):
            verifier.verify("content", "ROS 2")

    def test_malformed_payload(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["payload"] = json.loads(request.content.decode("utf-8"))
            return httpx.Response(200, json={"confidenceScore": 250})

        http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="https://verify.test")
        verifier = RemoteVerifier(RemoteVerifierConfig(base_url="https://verify.test"), client=http_client)

        with pytest.raises(VerificationError):
            verifier.verify("content", "Topic", ["src"])
        assert captured["url"].endswith("/api/verify")
        assert captured["payload"] == {"content": "content", "topic": "Topic", "sources": ["src"]}

    def test_non_object_payload(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["not", "an", "object"]))
        http_client = httpx.Client(transport=transport, base_url="https://verify.test")
        verifier = RemoteVerifier(RemoteVerifierConfig(base_url="https://verify.test"), client=http_client)

        with pytest.raises(VerificationError, match="JSON object"):
            verifier.verify("content", "Topic")


def test_build_verifier_selects_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    assert isinstance(build_verifier(), StructuralVerifier)
    assert isinstance(build_verifier(VerificationConfig(mode="keyword")), KeywordVerifier)

    structural = build_verifier(VerificationConfig(default_sources=["only-source"]))
    assert structural.verify("text", "Topic").verified_sources == ["only-source"]

    monkeypatch.setenv("BOOKGEN_VERIFY_API_KEY", "secret")
    remote = build_verifier(VerificationConfig(mode="remote", api_base="https://verify.test"))
    assert isinstance(remote, RemoteVerifier)
    assert remote._build_headers() == {"Authorization": "Bearer secret"}
    remote.close()
