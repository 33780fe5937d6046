"""Tests for token usage aggregation."""

from arena.usage import UsageTotals, UsageTracker


class TestUsageTracker:
    """Tests for the usage tracker."""

    def test_empty(self):
        """Test a fresh tracker."""
        tracker = UsageTracker()
        assert len(tracker) == 0
        assert tracker.summary() == "Token usage by model:"

    def test_accumulates_per_model(self):
        """Test totals are summed by model id."""
        tracker = UsageTracker()
        tracker.add_usage("a/model", 10, 2, 12)
        tracker.add_usage("a/model", 5, 1, 6)
        tracker.add_usage("b/model", 1, 1, 2)

        snapshot = tracker.snapshot()
        assert snapshot["a/model"] == UsageTotals(15, 3, 18)
        assert snapshot["b/model"] == UsageTotals(1, 1, 2)

    def test_snapshot_is_a_copy(self):
        """Test mutating a snapshot does not touch the tracker."""
        tracker = UsageTracker()
        tracker.add_usage("a/model", 1, 1, 2)
        tracker.snapshot().clear()
        assert len(tracker) == 1

    def test_summary_sorted(self):
        """Test summary lines are sorted by model."""
        tracker = UsageTracker()
        tracker.add_usage("z/last", 1, 2, 3)
        tracker.add_usage("a/first", 4, 5, 9)
        assert tracker.summary().splitlines() == [
            "Token usage by model:",
            "a/first: input=4, output=5, total=9",
            "z/last: input=1, output=2, total=3",
        ]
