"""
Screen Snapshot Tests
=====================

Tests for ScreenSnapshot pixel addressing and rendering helpers.
"""

import pytest

from ssd1306_monitor.driver import ScreenSnapshot


def frame_with(offset: int, value: int) -> bytes:
    frame = bytearray(1024)
    frame[offset] = value
    return bytes(frame)


# =============================================================================
# Construction Tests
# =============================================================================

class TestSnapshotConstruction:
    """Test snapshot validation and immutability."""

    @pytest.mark.parametrize("size", [0, 1023, 1025])
    def test_wrong_size(self, size):
        with pytest.raises(ValueError):
            ScreenSnapshot(bytes(size))

    def test_bytearray_frozen(self):
        """A bytearray is copied into bytes."""
        buf = bytearray(1024)
        snap = ScreenSnapshot(buf)
        buf[0] = 0xFF
        assert isinstance(snap.data, bytes)
        assert snap.data[0] == 0

    def test_frozen(self):
        snap = ScreenSnapshot(bytes(1024), 1.0)
        with pytest.raises(AttributeError):
            snap.data = bytes(1024)

    def test_timestamp_default(self):
        """Without an explicit time the snapshot is stamped now."""
        assert ScreenSnapshot(bytes(1024)).timestamp > 0

    def test_timestamp_ms(self):
        assert ScreenSnapshot(bytes(1024), 1700000000.1234).timestamp_ms == 1700000000123

    def test_equality_by_value(self):
        assert ScreenSnapshot(bytes(1024), 1.0) == ScreenSnapshot(bytes(1024), 1.0)


# =============================================================================
# Pixel Addressing Tests
# =============================================================================

class TestPixelAddressing:
    """Test the page-format pixel mapping."""

    @pytest.mark.parametrize("offset,value,row,col", [
        (0, 0x01, 0, 0),            # top-left
        (0, 0x80, 7, 0),            # bottom of page 0
        (127, 0x01, 0, 127),        # top-right
        (128, 0x01, 8, 0),          # first row of page 1
        (1023, 0x80, 63, 127),      # bottom-right
        (7 * 128 + 64, 0x10, 60, 64),
    ])
    def test_single_pixel(self, offset, value, row, col):
        snap = ScreenSnapshot(frame_with(offset, value))
        assert snap.pixel(row, col) is True
        assert sum(sum(r) for r in snap.grid()) == 1

    @pytest.mark.parametrize("row,col", [(-1, 0), (64, 0), (0, -1), (0, 128)])
    def test_out_of_range(self, row, col):
        snap = ScreenSnapshot(bytes(1024))
        with pytest.raises(ValueError, match="Invalid position"):
            snap.pixel(row, col)

    def test_grid_shape(self):
        grid = ScreenSnapshot(bytes(1024)).grid()
        assert len(grid) == 64
        assert {len(row) for row in grid} == {128}

    def test_full_frame(self):
        snap = ScreenSnapshot(bytes([0xFF]) * 1024)
        assert all(all(row) for row in snap.grid())
        assert not snap.is_blank()


# =============================================================================
# Text Rendering Tests
# =============================================================================

class TestRowsAsText:

    def test_default_characters(self):
        rows = ScreenSnapshot(frame_with(2, 0x01)).rows_as_text()
        assert rows[0] == "..#" + "." * 125
        assert rows[1] == "." * 128

    def test_custom_characters(self):
        rows = ScreenSnapshot(bytes([0xFF]) * 1024).rows_as_text(on="X", off=" ")
        assert rows == ["X" * 128] * 64

    def test_blank(self):
        assert ScreenSnapshot(bytes(1024)).is_blank()
