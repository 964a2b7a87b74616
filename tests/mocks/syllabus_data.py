"""Shared syllabus payloads and a fixed-confidence verifier for tests."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Sequence

from bookgen.content.reports import VerificationResult

SAMPLE_SYLLABUS: Dict[str, Any] = {
    "title": "Physical AI & Humanoid Robotics",
    "description": "A hands-on introduction to embodied intelligence.",
    "author": "Robotics Lab",
    "topics": [
        {
            "id": "gazebo-simulation",
            "title": "Gazebo Simulation",
            "description": "Simulating robots in Gazebo.",
            "learningObjectives": ["Launch a simulated robot", "Attach sensors to a model"],
            "category": "Simulation",
            "prerequisites": ["ros2-basics"],
        },
        {
            "id": "ros2-basics",
            "title": "ROS 2 Fundamentals",
            "description": "Nodes, topics, and services.",
            "learningObjectives": ["Create ROS 2 nodes", "Publish messages on topics"],
            "category": "Robot Middleware",
        },
        {
            "id": "isaac-sim",
            "title": "NVIDIA Isaac Sim",
            "description": "Photorealistic simulation with Isaac Sim.",
            "learningObjectives": ["Import a robot description", "Generate synthetic camera data"],
            "category": "Simulation",
            "prerequisites": ["gazebo-simulation"],
        },
    ],
}


def sample_syllabus() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_SYLLABUS)


def make_topic(topic_id: str, *, prerequisites: Sequence[str] = (), category: str = "General") -> Dict[str, Any]:
    return {
        "id": topic_id,
        "title": f"Topic {topic_id}",
        "description": f"About {topic_id}",
        "learningObjectives": [f"Understand {topic_id}"],
        "category": category,
        "prerequisites": list(prerequisites),
    }


def make_syllabus(topics: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"title": "Test Book", "description": "Generated in tests", "topics": topics}


class FixedVerifier:
    """Verifier stub returning the same confidence for every call."""

    def __init__(self, confidence: float, *, sources: Sequence[str] = ("fixture-docs",)) -> None:
        self.confidence = confidence
        self.sources = list(sources)
        self.calls: List[Dict[str, Any]] = []

    def verify(self, content: str, topic: str, sources: Sequence[str] = ()) -> VerificationResult:
        self.calls.append({"topic": topic, "sources": list(sources)})
        return VerificationResult(
            is_verified=self.confidence >= 70,
            verified_sources=list(sources) or self.sources,
            confidence_score=self.confidence,
            topic=topic,
        )
