from __future__ import annotations

import pytest

from bookgen.core.errors import CircularDependencyError, UnknownPrerequisiteError, ValidationFailure
from bookgen.syllabus import Topic, load_syllabus, resolve_dependencies, resolve_order, teaching_order
from tests.mocks.syllabus_data import make_syllabus, make_topic, sample_syllabus


def _topics(*specs) -> list[Topic]:
    return [Topic.model_validate(make_topic(topic_id, prerequisites=prereqs)) for topic_id, prereqs in specs]


def test_prerequisite_comes_first_and_positions_are_dense() -> None:
    syllabus = load_syllabus(make_syllabus([make_topic("b", prerequisites=["a"]), make_topic("a")]))

    resolved = resolve_dependencies(syllabus)

    assert resolved.topic_ids == ["a", "b"]
    assert [topic.position for topic in resolved.topics] == [0, 1]
    # the input is left untouched
    assert syllabus.topic_ids == ["b", "a"]


def test_sample_syllabus_order() -> None:
    resolved = resolve_dependencies(load_syllabus(sample_syllabus()))
    assert resolved.topic_ids == ["ros2-basics", "gazebo-simulation", "isaac-sim"]
    assert [topic.position for topic in resolved.topics] == [0, 1, 2]


def test_independent_topics_keep_input_order() -> None:
    topics = _topics(("c", []), ("a", []), ("b", []))
    assert teaching_order(topics) == ["c", "a", "b"]


@pytest.mark.parametrize(
    "specs, expected",
    [
        ((("c", []), ("a", []), ("b", ["a"])), ["c", "a", "b"]),
        ((("b", ["a"]), ("c", []), ("a", [])), ["c", "a", "b"]),
        ((("d", ["b", "c"]), ("c", ["a"]), ("b", ["a"]), ("a", [])), ["a", "c", "b", "d"]),
    ],
)
def test_ties_are_broken_by_input_order(specs, expected) -> None:
    assert teaching_order(_topics(*specs)) == expected


@pytest.mark.parametrize(
    "specs, expected",
    [
        ((("b", ["c"]), ("c", []), ("a", [])), ["c", "a", "b"]),
        ((("c", []), ("b", ["c"]), ("a", [])), ["c", "b", "a"]),
        ((("x", ["y"]), ("y", ["z"]), ("z", []), ("w", [])), ["z", "w", "y", "x"]),
    ],
)
def test_topics_are_released_pass_by_pass(specs, expected) -> None:
    # A topic unblocked by a later entry waits for the next sweep over the input.
    assert teaching_order(_topics(*specs)) == expected


def test_every_topic_follows_its_prerequisites() -> None:
    topics = _topics(
        ("e", ["d", "a"]),
        ("d", ["b", "c"]),
        ("c", ["a"]),
        ("b", ["a"]),
        ("a", []),
        ("f", []),
    )
    order = teaching_order(topics)
    assert sorted(order) == sorted(topic.id for topic in topics)
    for topic in topics:
        for prereq in topic.prerequisites:
            assert order.index(prereq) < order.index(topic.id)


def test_resolution_is_idempotent() -> None:
    once = resolve_dependencies(load_syllabus(sample_syllabus()))
    twice = resolve_dependencies(once)
    assert twice.topic_ids == once.topic_ids
    assert [topic.position for topic in twice.topics] == [topic.position for topic in once.topics]


def test_repeated_prerequisite_counts_once() -> None:
    assert teaching_order(_topics(("b", ["a", "a"]), ("a", []))) == ["a", "b"]


def test_cycle_raises_with_unresolved_ids() -> None:
    topics = _topics(("a", ["b"]), ("b", ["a"]), ("c", []))

    with pytest.raises(CircularDependencyError) as excinfo:
        resolve_order(topics)

    assert excinfo.value.unresolved_ids == ["a", "b"]
    assert not isinstance(excinfo.value, UnknownPrerequisiteError)
    assert "Circular dependency detected" in str(excinfo.value)


def test_self_dependency_is_a_cycle() -> None:
    with pytest.raises(CircularDependencyError) as excinfo:
        resolve_order(_topics(("a", ["a"])))
    assert excinfo.value.unresolved_ids == ["a"]


def test_unknown_prerequisite_is_reported_separately() -> None:
    topics = _topics(("a", ["ghost"]), ("b", ["a"]), ("c", []))

    with pytest.raises(UnknownPrerequisiteError) as excinfo:
        resolve_order(topics)

    error = excinfo.value
    assert isinstance(error, CircularDependencyError)
    assert error.unknown == {"a": ["ghost"]}
    assert error.unresolved_ids == ["a", "b"]
    assert "ghost" in str(error)


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(ValidationFailure) as excinfo:
        resolve_order(_topics(("a", []), ("a", [])))
    assert excinfo.value.errors == ["Duplicate topic id: a"]
