"""
SSD1306 Command Table
=====================

Protocol constants for the SSD1306 128x64 OLED controller.

Every I2C transfer to the controller starts with a control byte:
- 0x00: the rest of the transfer is a stream of commands
- 0x40: the rest of the transfer is a stream of GDDRAM data
- 0x80: a single command byte follows

Page numbers in the comments refer to the SSD1306 datasheet (rev 1.1).

GDDRAM Layout
-------------
The panel is 128 columns by 64 rows, organized as 8 pages of 8 rows.
In horizontal addressing mode each data byte fills one column of one page,
bit 0 being the top row of the page:

    byte i  ->  column i % 128, rows (i // 128) * 8 .. + 7
    bit b   ->  row (i // 128) * 8 + b

The frame size is therefore 128 * 8 = 1024 bytes.
"""

from enum import IntEnum
from typing import Final


# =============================================================================
# Geometry
# =============================================================================

WIDTH: Final[int] = 128
HEIGHT: Final[int] = 64
PAGES: Final[int] = HEIGHT // 8
FRAME_SIZE: Final[int] = WIDTH * PAGES

# Maximum data payload per I2C transfer (excluding the control byte)
CHUNK_SIZE: Final[int] = 64


# =============================================================================
# Command Codes
# =============================================================================

class Command(IntEnum):
    """SSD1306 control bytes and command opcodes."""

    # Control bytes
    CTRL_CMD_SINGLE = 0x80
    CTRL_CMD_STREAM = 0x00
    CTRL_DATA_STREAM = 0x40

    # Fundamental commands (page 28)
    SET_CONTRAST = 0x81
    DISPLAY_RAM = 0xA4
    DISPLAY_ALLON = 0xA5
    DISPLAY_NORMAL = 0xA6
    DISPLAY_INVERTED = 0xA7
    DISPLAY_OFF = 0xAE
    DISPLAY_ON = 0xAF

    # Addressing commands (page 30)
    SET_MEMORY_ADDR_MODE = 0x20
    SET_COLUMN_RANGE = 0x21
    SET_PAGE_RANGE = 0x22

    # Hardware configuration (page 31)
    SET_DISPLAY_START_LINE = 0x40
    SET_SEGMENT_REMAP = 0xA1
    SET_MUX_RATIO = 0xA8
    SET_COM_SCAN_MODE = 0xC8
    SET_DISPLAY_OFFSET = 0xD3
    SET_COM_PIN_MAP = 0xDA
    NOP = 0xE3

    # Timing and driving scheme (page 32)
    SET_DISPLAY_CLK_DIV = 0xD5
    SET_PRECHARGE = 0xD9
    SET_VCOMH_DESELECT = 0xDB

    # Charge pump (page 62)
    SET_CHARGE_PUMP = 0x8D


# Leading bytes of command-stream and data-stream frames
CMD_STREAM: Final[int] = Command.CTRL_CMD_STREAM
DATA_STREAM: Final[int] = Command.CTRL_DATA_STREAM


# =============================================================================
# Fixed Sequences
# =============================================================================

INIT_SEQUENCE: Final[bytes] = bytes([
    Command.CTRL_CMD_STREAM,
    Command.DISPLAY_OFF,
    Command.SET_MUX_RATIO, 0x3F,
    # Display offset 0
    Command.SET_DISPLAY_OFFSET, 0x00,
    # Display start line 0
    Command.SET_DISPLAY_START_LINE,
    # Mirror the x-axis (pins north). 0xA0 when pins are south.
    Command.SET_SEGMENT_REMAP,
    # Mirror the y-axis (pins north). 0xC0 when pins are south.
    Command.SET_COM_SCAN_MODE,
    # Alternate COM pin map
    Command.SET_COM_PIN_MAP, 0x12,
    Command.SET_CONTRAST, 0x1F,
    # Render from GDDRAM
    Command.DISPLAY_RAM,
    Command.DISPLAY_NORMAL,
    # Default oscillator clock
    Command.SET_DISPLAY_CLK_DIV, 0x80,
    # Enable the charge pump
    Command.SET_CHARGE_PUMP, 0x14,
    # Precharge cycles for high cap type
    Command.SET_PRECHARGE, 0x22,
    # V_COMH deselect voltage to max
    Command.SET_VCOMH_DESELECT, 0x30,
    # 00 = horizontal, 01 = vertical, 10 = page addressing.
    # push_frame() relies on horizontal mode.
    Command.SET_MEMORY_ADDR_MODE, 0x00,
    Command.DISPLAY_ON,
])

# Selects columns 0-127 and pages 0-7, resetting the GDDRAM pointer to (0, 0)
WRITE_PREFIX: Final[bytes] = bytes([
    Command.CTRL_CMD_STREAM,
    Command.SET_COLUMN_RANGE, 0x00, WIDTH - 1,
    Command.SET_PAGE_RANGE, 0x00, PAGES - 1,
])


def command_frame(*codes: int) -> bytes:
    """
    Build a command-stream frame from command bytes.

    Example:
        >>> command_frame(Command.SET_CONTRAST, 0x80).hex()
        '008180'
    """
    return bytes([Command.CTRL_CMD_STREAM, *codes])


def data_frame(payload: bytes) -> bytes:
    """Build a data-stream frame carrying payload."""
    return bytes([Command.CTRL_DATA_STREAM]) + bytes(payload)
