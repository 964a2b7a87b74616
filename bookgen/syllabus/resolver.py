"""Teaching-order resolution for syllabus topics.

Kahn's in-degree bookkeeping, released pass by pass: each pass walks the
unplaced topics in input order and places every topic whose prerequisites are
already placed, including ones placed earlier in the same pass. A syllabus
without prerequisites keeps its order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from bookgen.core.errors import CircularDependencyError, UnknownPrerequisiteError, ValidationFailure

from .models import Syllabus, Topic

LOGGER = logging.getLogger(__name__)


def _index_topics(topics: Sequence[Topic]) -> Dict[str, int]:
    index: Dict[str, int] = {}
    duplicates: List[str] = []
    for idx, topic in enumerate(topics):
        if topic.id in index:
            duplicates.append(topic.id)
            continue
        index[topic.id] = idx
    if duplicates:
        raise ValidationFailure([f"Duplicate topic id: {topic_id}" for topic_id in duplicates])
    return index


def resolve_order(topics: Sequence[Topic]) -> List[Topic]:
    """Return ``topics`` ordered so each one follows all of its prerequisites.

    Raises:
        UnknownPrerequisiteError: a prerequisite id names no topic.
        CircularDependencyError: the prerequisites contain a cycle.
        ValidationFailure: two topics share an id.
    """
    index = _index_topics(topics)

    unknown: Dict[str, List[str]] = {}
    in_degree = [0] * len(topics)
    dependents: Dict[int, List[int]] = defaultdict(list)
    for idx, topic in enumerate(topics):
        # A repeated prerequisite counts once.
        for prereq in dict.fromkeys(topic.prerequisites):
            in_degree[idx] += 1
            prereq_idx = index.get(prereq)
            if prereq_idx is None:
                # Never decremented, so the topic is never released.
                unknown.setdefault(topic.id, []).append(prereq)
                continue
            dependents[prereq_idx].append(idx)

    ordered: List[int] = []
    remaining = list(range(len(topics)))
    while remaining:
        # One pass in input order; a topic placed here can unblock a later one in the same pass.
        blocked: List[int] = []
        for idx in remaining:
            if in_degree[idx]:
                blocked.append(idx)
                continue
            ordered.append(idx)
            for dependent in dependents[idx]:
                in_degree[dependent] -= 1
        if len(blocked) == len(remaining):
            break
        remaining = blocked

    if remaining:
        stuck = [topics[idx].id for idx in remaining]
        if unknown:
            LOGGER.error("Unknown prerequisites block %d topic(s): %s", len(stuck), unknown)
            raise UnknownPrerequisiteError(stuck, unknown)
        LOGGER.error("Circular dependency among topics: %s", stuck)
        raise CircularDependencyError(stuck)

    return [topics[idx] for idx in ordered]


def teaching_order(topics: Sequence[Topic]) -> List[str]:
    return [topic.id for topic in resolve_order(topics)]


def resolve_dependencies(syllabus: Syllabus) -> Syllabus:
    """Return a copy of ``syllabus`` with topics reordered and ``position`` assigned."""
    ordered = resolve_order(syllabus.topics)
    positioned = [topic.model_copy(update={"position": position}) for position, topic in enumerate(ordered)]
    LOGGER.debug("Resolved teaching order: %s", [topic.id for topic in positioned])
    return syllabus.model_copy(update={"topics": positioned})


__all__ = ["resolve_dependencies", "resolve_order", "teaching_order"]
