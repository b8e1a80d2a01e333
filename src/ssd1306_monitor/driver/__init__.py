"""
SSD1306 Display Driver Package
==============================

- **commands**: command table, fixed sequences and panel geometry
- **display**: SSD1306Display, the framing and transmission driver
- **screen**: ScreenSnapshot, the reconstructed screen image
- **channels**: thread-safe observation channels

Quick Start
-----------

    >>> from ssd1306_monitor.driver import SSD1306Display
    >>> from ssd1306_monitor.transport import TraceTransport
    >>> display = SSD1306Display(TraceTransport())
    >>> display.init()
    >>> display.push_frame(bytes(1024))
    >>> display.screen.pixel(0, 0)
    False
"""

from ssd1306_monitor.driver.channels import HistoryChannel, LatestValue
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
from ssd1306_monitor.driver.display import (
    DEFAULT_CONTRAST,
    DEFAULT_HISTORY_SIZE,
    SSD1306Display,
    contrast_to_level,
    display_id,
)
from ssd1306_monitor.driver.screen import ScreenSnapshot

__all__ = [
    # Display driver
    "SSD1306Display",
    "display_id",
    "contrast_to_level",
    "DEFAULT_CONTRAST",
    "DEFAULT_HISTORY_SIZE",
    # Screen reconstruction
    "ScreenSnapshot",
    # Channels
    "HistoryChannel",
    "LatestValue",
    # Command table
    "Command",
    "command_frame",
    "data_frame",
    "INIT_SEQUENCE",
    "WRITE_PREFIX",
    "CMD_STREAM",
    "DATA_STREAM",
    # Geometry
    "WIDTH",
    "HEIGHT",
    "PAGES",
    "FRAME_SIZE",
    "CHUNK_SIZE",
]
