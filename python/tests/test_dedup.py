"""
Tests for FrameDeduplicator.
"""

import logging

import pytest

from errtree.dedup import Duplicate, FrameDeduplicator, Fresh
from errtree.tree_types import ContextFrame


class TestObserve:
    """observe() numbers fresh identities and back-references repeats."""

    def test_first_sighting_is_fresh(self):
        dedup = FrameDeduplicator(4)
        assert dedup.observe("a") == Fresh(0)
        assert dedup.observe("b") == Fresh(1)

    def test_repeat_points_at_first_index(self):
        dedup = FrameDeduplicator(4)
        dedup.observe("a")
        dedup.observe("b")

        assert dedup.observe("b") == Duplicate(1)
        assert dedup.observe("a") == Duplicate(0)

    def test_duplicates_do_not_consume_numbers(self):
        dedup = FrameDeduplicator(4)
        dedup.observe("a")
        dedup.observe("a")

        assert dedup.observe("c") == Fresh(1)
        assert len(dedup) == 2

    def test_frame_identity_ignores_fields(self):
        """Same target, name and location with different field values collapse."""
        dedup = FrameDeduplicator(4)
        first = ContextFrame("billing", "charge", "amount=1", ("billing.py", 10))
        second = ContextFrame("billing", "charge", "amount=2", ("billing.py", 10))

        dedup.observe(first.identity)

        assert dedup.observe(second.identity) == Duplicate(0)

    def test_callsite_overrides_identity(self):
        first = ContextFrame("a", "x", callsite="site-1")
        second = ContextFrame("b", "y", callsite="site-1")
        assert first.identity == second.identity


class TestCapacity:
    """A full table degrades to fresh frames, never an error."""

    def test_full_table_reports_fresh_without_storing(self):
        dedup = FrameDeduplicator(1)
        dedup.observe("a")

        assert dedup.is_full
        assert dedup.observe("b") == Fresh(1)
        # "b" was never stored, so it is fresh again
        assert dedup.observe("b") == Fresh(2)
        # "a" is still remembered
        assert dedup.observe("a") == Duplicate(0)

    def test_zero_capacity_never_deduplicates(self):
        dedup = FrameDeduplicator(0)
        assert dedup.observe("a") == Fresh(0)
        assert dedup.observe("a") == Fresh(1)

    def test_full_table_logs_once(self, caplog):
        caplog.set_level(logging.DEBUG, logger="errtree.dedup")
        dedup = FrameDeduplicator(0)

        dedup.observe("a")
        dedup.observe("b")

        messages = [r.getMessage() for r in caplog.records if r.name == "errtree.dedup"]
        assert len(messages) == 1
        assert "Frame table full" in messages[0]

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            FrameDeduplicator(-1)

    def test_repr_counts(self):
        dedup = FrameDeduplicator(1)
        dedup.observe("a")
        dedup.observe("b")
        assert repr(dedup) == "FrameDeduplicator(stored=1/1, fresh=2, dropped=1)"
