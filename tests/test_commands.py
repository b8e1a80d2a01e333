"""
Command Table Tests
===================

Checks the SSD1306 protocol constants byte for byte.
"""

import pytest

from ssd1306_monitor.driver.commands import (
    CHUNK_SIZE,
    CMD_STREAM,
    DATA_STREAM,
    FRAME_SIZE,
    HEIGHT,
    INIT_SEQUENCE,
    PAGES,
    WIDTH,
    WRITE_PREFIX,
    Command,
    command_frame,
    data_frame,
)


# =============================================================================
# Protocol Constant Tests
# =============================================================================

class TestGeometry:
    """Panel geometry constants."""

    def test_dimensions(self):
        assert (WIDTH, HEIGHT, PAGES) == (128, 64, 8)

    def test_frame_size(self):
        assert FRAME_SIZE == 1024

    def test_frame_splits_into_whole_chunks(self):
        """16 chunks of 64 bytes, none straddling the end of the frame."""
        assert CHUNK_SIZE == 64
        assert FRAME_SIZE % CHUNK_SIZE == 0
        assert FRAME_SIZE // CHUNK_SIZE == 16


class TestControlBytes:
    """Test control bytes and opcodes."""

    def test_stream_markers(self):
        assert CMD_STREAM == 0x00
        assert DATA_STREAM == 0x40
        assert Command.CTRL_CMD_SINGLE == 0x80

    @pytest.mark.parametrize("command,code", [
        (Command.SET_CONTRAST, 0x81),
        (Command.DISPLAY_NORMAL, 0xA6),
        (Command.DISPLAY_INVERTED, 0xA7),
        (Command.DISPLAY_OFF, 0xAE),
        (Command.DISPLAY_ON, 0xAF),
        (Command.SET_MEMORY_ADDR_MODE, 0x20),
        (Command.SET_COLUMN_RANGE, 0x21),
        (Command.SET_PAGE_RANGE, 0x22),
        (Command.SET_CHARGE_PUMP, 0x8D),
    ])
    def test_opcodes(self, command, code):
        assert command == code


# =============================================================================
# Sequence Tests
# =============================================================================

class TestSequences:
    """Fixed init and write-prefix sequences."""

    def test_init_sequence_bytes(self):
        assert INIT_SEQUENCE.hex(" ") == (
            "00 ae a8 3f d3 00 40 a1 c8 da 12 81 1f a4 a6 "
            "d5 80 8d 14 d9 22 db 30 20 00 af"
        )

    def test_init_sequence_is_command_stream(self):
        assert INIT_SEQUENCE[0] == CMD_STREAM

    def test_init_selects_horizontal_addressing(self):
        """Frame packing depends on horizontal addressing mode (0x20 0x00)."""
        idx = INIT_SEQUENCE.index(bytes([Command.SET_MEMORY_ADDR_MODE, 0x00]))
        assert idx > 0

    def test_init_ends_with_display_on(self):
        assert INIT_SEQUENCE[-1] == Command.DISPLAY_ON

    def test_write_prefix_bytes(self):
        """Columns 0-127 and pages 0-7."""
        assert WRITE_PREFIX == bytes([0x00, 0x21, 0x00, 0x7F, 0x22, 0x00, 0x07])

    def test_sequences_are_immutable(self):
        assert isinstance(INIT_SEQUENCE, bytes)
        assert isinstance(WRITE_PREFIX, bytes)


class TestFrameBuilders:
    """Test command_frame() and data_frame()."""

    def test_command_frame(self):
        assert command_frame(Command.SET_CONTRAST, 0x80) == b"\x00\x81\x80"

    def test_command_frame_single_opcode(self):
        assert command_frame(Command.DISPLAY_INVERTED) == b"\x00\xa7"

    def test_data_frame(self):
        assert data_frame(b"\x01\x02") == b"\x40\x01\x02"

    def test_data_frame_accepts_bytearray(self):
        assert data_frame(bytearray(3)) == b"\x40\x00\x00\x00"
