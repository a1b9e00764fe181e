"""
Theme Park Wait Times - Wait Time Extractor Unit Tests

Tests classification of live queue payloads and the derived wait minutes:
- Scalar, STANDBY, PAID_STANDBY and flat waitTime shapes
- Priority between shapes and fall-through on null waits
- Degradation to None for anything unrecognized
- Status extraction from records and mappings
"""

import pytest

from collector.wait_time_extractor import (
    NoQueue, ScalarWait, StandbyWait, PaidStandbyWait, FlatWait, UnrecognizedQueue,
    classify_queue, wait_minutes_for, extract_wait_minutes, extract_status
)
from models.wait_time import AttractionRecord


class TestClassifyQueue:
    """Test classify_queue() shape detection."""

    def test_none_is_no_queue(self):
        assert classify_queue(None) == NoQueue()

    def test_number_is_scalar_wait(self):
        assert classify_queue(42) == ScalarWait(42)
        assert classify_queue(0) == ScalarWait(0)

    def test_standby(self):
        assert classify_queue({"STANDBY": {"waitTime": 10}}) == StandbyWait(10)

    def test_paid_standby(self):
        assert classify_queue({"PAID_STANDBY": {"waitTime": 5}}) == PaidStandbyWait(5)

    def test_flat_wait_time(self):
        assert classify_queue({"waitTime": 7}) == FlatWait(7)

    def test_standby_wins_over_paid_standby_and_flat(self):
        """
        Given: A payload carrying all three wait shapes
        When: classify_queue() is called
        Then: STANDBY is chosen
        """
        queue = {
            "waitTime": 99,
            "PAID_STANDBY": {"waitTime": 5},
            "STANDBY": {"waitTime": 25},
        }
        assert classify_queue(queue) == StandbyWait(25)

    def test_null_standby_falls_through_to_paid_standby(self):
        queue = {"STANDBY": {"waitTime": None}, "PAID_STANDBY": {"waitTime": 15}}
        assert classify_queue(queue) == PaidStandbyWait(15)

    def test_null_standby_falls_through_to_flat_wait(self):
        queue = {"STANDBY": {"waitTime": None}, "waitTime": 3}
        assert classify_queue(queue) == FlatWait(3)

    def test_return_time_only_is_unrecognized(self):
        queue = {"RETURN_TIME": {"state": "AVAILABLE", "returnStart": "2025-07-04T17:00:00Z"}}
        assert isinstance(classify_queue(queue), UnrecognizedQueue)

    @pytest.mark.parametrize("queue", [{}, "soon", [10], True, {"STANDBY": 10}, {"waitTime": "10"}])
    def test_junk_is_unrecognized(self, queue):
        assert isinstance(classify_queue(queue), UnrecognizedQueue)


class TestExtractWaitMinutes:
    """Test extract_wait_minutes() end to end."""

    @pytest.mark.parametrize("queue,expected", [
        (None, None),
        (42, 42),
        ({"STANDBY": {"waitTime": 10}}, 10),
        ({"PAID_STANDBY": {"waitTime": 5}}, 5),
        ({"waitTime": 7}, 7),
        ({}, None),
        ({"STANDBY": {"waitTime": None}}, None),
        ({"BOARDING_GROUP": {"allocationStatus": "CLOSED"}}, None),
    ])
    def test_extract_wait_minutes(self, queue, expected):
        assert extract_wait_minutes(queue) == expected

    def test_float_wait_is_kept(self):
        assert extract_wait_minutes({"STANDBY": {"waitTime": 12.5}}) == 12.5

    def test_bool_is_never_a_wait(self):
        assert extract_wait_minutes(True) is None
        assert extract_wait_minutes({"waitTime": False}) is None

    def test_unknown_shape_type_raises(self):
        with pytest.raises(TypeError):
            wait_minutes_for("not a shape")


class TestExtractStatus:
    """Test extract_status() on records and mappings."""

    def test_status_from_attraction_record(self):
        record = AttractionRecord(id="space", name="Space Mountain", status="DOWN")
        assert extract_status(record) == "DOWN"

    def test_status_from_mapping(self):
        assert extract_status({"status": "OPERATING"}) == "OPERATING"

    @pytest.mark.parametrize("record", [
        {},
        {"status": None},
        {"status": ""},
        {"status": 3},
        AttractionRecord(id="x", name="X", status=None),
        None,
    ])
    def test_missing_or_invalid_status_is_none(self, record):
        assert extract_status(record) is None
