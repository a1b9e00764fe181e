"""
Theme Park Wait Times - Wait Time Extractor
Derives a wait time in minutes from the loosely-typed `queue` payload of a
ThemeParks.wiki live data entry.

Payloads are first classified into one of the known queue shapes, then the
shape is mapped to a wait time. Anything not recognized degrades to None.
"""

from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class NoQueue:
    """No queue payload at all."""


@dataclass(frozen=True)
class ScalarWait:
    """Legacy shape: the queue payload is the wait time itself."""
    minutes: Real


@dataclass(frozen=True)
class StandbyWait:
    """{"STANDBY": {"waitTime": n}}"""
    minutes: Real


@dataclass(frozen=True)
class PaidStandbyWait:
    """{"PAID_STANDBY": {"waitTime": n}}"""
    minutes: Real


@dataclass(frozen=True)
class FlatWait:
    """{"waitTime": n}"""
    minutes: Real


@dataclass(frozen=True)
class UnrecognizedQueue:
    """Any other payload (return-time queues only, boarding groups, junk)."""
    payload: Any


QueueShape = Union[NoQueue, ScalarWait, StandbyWait, PaidStandbyWait, FlatWait, UnrecognizedQueue]


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a wait time
    return isinstance(value, Real) and not isinstance(value, bool)


def _nested_wait(queue: Mapping, key: str) -> Optional[Real]:
    entry = queue.get(key)
    if isinstance(entry, Mapping) and _is_number(entry.get("waitTime")):
        return entry["waitTime"]
    return None


def classify_queue(queue: Any) -> QueueShape:
    """
    Classify a queue payload into a known shape.

    Mapping payloads are checked in priority order: STANDBY, then PAID_STANDBY,
    then a flat waitTime. A queue type whose waitTime is null falls through to
    the next candidate.
    """
    if queue is None:
        return NoQueue()
    if _is_number(queue):
        return ScalarWait(queue)
    if isinstance(queue, Mapping):
        standby = _nested_wait(queue, "STANDBY")
        if standby is not None:
            return StandbyWait(standby)
        paid_standby = _nested_wait(queue, "PAID_STANDBY")
        if paid_standby is not None:
            return PaidStandbyWait(paid_standby)
        if _is_number(queue.get("waitTime")):
            return FlatWait(queue["waitTime"])
    return UnrecognizedQueue(queue)


def wait_minutes_for(shape: QueueShape) -> Optional[Real]:
    """Map a classified queue shape to its wait time in minutes."""
    if isinstance(shape, (ScalarWait, StandbyWait, PaidStandbyWait, FlatWait)):
        return shape.minutes
    if isinstance(shape, (NoQueue, UnrecognizedQueue)):
        return None
    raise TypeError(f"Unknown queue shape: {shape!r}")


def extract_wait_minutes(queue: Any) -> Optional[Real]:
    """
    Extract a numeric wait from a live data queue payload.

    Examples:
        >>> extract_wait_minutes(None) is None
        True
        >>> extract_wait_minutes(42)
        42
        >>> extract_wait_minutes({"STANDBY": {"waitTime": 10}})
        10
        >>> extract_wait_minutes({"PAID_STANDBY": {"waitTime": 5}})
        5
        >>> extract_wait_minutes({"waitTime": 7})
        7
        >>> extract_wait_minutes({}) is None
        True
    """
    return wait_minutes_for(classify_queue(queue))


def extract_status(record: Any) -> Optional[str]:
    """Return the status string of an attraction record, or None."""
    status = getattr(record, "status", None)
    if status is None and isinstance(record, Mapping):
        status = record.get("status")
    if isinstance(status, str) and status:
        return status
    return None
