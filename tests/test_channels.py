"""
Observation Channel Tests
=========================

Tests for HistoryChannel (bounded, drop-oldest) and LatestValue.
"""

import threading

import pytest

from ssd1306_monitor.driver.channels import HistoryChannel, LatestValue


# =============================================================================
# HistoryChannel Tests
# =============================================================================

class TestHistoryChannel:
    """Test the drop-oldest history."""

    def test_empty(self):
        ch = HistoryChannel(5)
        assert ch.snapshot() == []
        assert ch.latest() is None
        assert len(ch) == 0

    def test_publish_order(self):
        """Values come back oldest first."""
        ch = HistoryChannel(5)
        for v in "abc":
            ch.publish(v)
        assert ch.snapshot() == ["a", "b", "c"]
        assert ch.latest() == "c"

    def test_drop_oldest(self):
        """At capacity the oldest value is dropped, never the newest."""
        ch = HistoryChannel(3)
        for v in range(10):
            ch.publish(v)
        assert ch.snapshot() == [7, 8, 9]
        assert ch.published == 10

    def test_default_capacity(self):
        assert HistoryChannel().capacity == 100

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValueError):
            HistoryChannel(capacity)

    def test_snapshot_is_copy(self):
        ch = HistoryChannel(3)
        ch.publish(1)
        snap = ch.snapshot()
        snap.append(99)
        assert ch.snapshot() == [1]

    def test_clear(self):
        ch = HistoryChannel(3)
        ch.publish(1)
        ch.clear()
        assert len(ch) == 0
        assert ch.published == 1

    def test_concurrent_publish_and_read(self):
        """A reader thread never sees more than capacity entries."""
        ch = HistoryChannel(10)
        oversized = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                if len(ch.snapshot()) > 10:
                    oversized.append(True)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for i in range(5000):
                ch.publish(i)
        finally:
            done.set()
            thread.join()
        assert oversized == []
        assert ch.snapshot() == list(range(4990, 5000))


# =============================================================================
# LatestValue Tests
# =============================================================================

class TestLatestValue:
    """Test the latest-value cell."""

    def test_initial(self):
        assert LatestValue(None).value is None

    def test_publish_replaces(self):
        cell = LatestValue(0)
        cell.publish(1)
        cell.publish(2)
        assert cell.value == 2

    def test_published_counts(self):
        """Every publish is counted, including an unchanged value."""
        cell = LatestValue(0)
        assert cell.published == 0
        cell.publish(1)
        cell.publish(1)
        assert cell.published == 2
        assert cell.value == 1
