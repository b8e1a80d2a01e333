"""
SSD1306 Monitor - Driver and Live Monitor for SSD1306 OLED Displays
===================================================================

This package drives 128x64 monochrome SSD1306 displays over I2C and
exposes what each display shows, reconstructed from the bytes sent to it,
through a small web front end.

Main Components
---------------
- **driver**: SSD1306 command table, display driver and screen reconstruction
- **transport**: bus transports (Linux I2C via smbus2, discarding trace)
- **service**: device registry and per-display render loops
- **web**: FastAPI monitoring front end
- **content**: Pillow image <-> frame conversion and sample content
- **cli**: the ssd1306-monitor command

Quick Start
-----------
Drive a display directly:
    >>> from ssd1306_monitor import SSD1306Display, open_transport, parse_device_spec
    >>> display = SSD1306Display(open_transport(parse_device_spec("trace")))
    >>> display.init()
    >>> display.push_frame(bytes(1024))
    >>> display.screen.is_blank()
    True

Or run the monitor:
    $ ssd1306-monitor linux:1:3c
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ssd1306_monitor.errors import (
    DeviceSpecError,
    DisplayError,
    InvalidArgumentError,
    NotInitializedError,
    TransportError,
    UnknownDeviceError,
)
from ssd1306_monitor.driver import (
    FRAME_SIZE,
    HEIGHT,
    WIDTH,
    Command,
    ScreenSnapshot,
    SSD1306Display,
    display_id,
)
from ssd1306_monitor.transport import (
    DeviceSpec,
    I2CTransport,
    TraceTransport,
    Transport,
    TransportKind,
    open_transport,
    parse_device_spec,
)
from ssd1306_monitor.config import MonitorConfig

__all__ = [
    # Version
    "__version__",
    # Errors
    "DisplayError",
    "InvalidArgumentError",
    "NotInitializedError",
    "DeviceSpecError",
    "UnknownDeviceError",
    "TransportError",
    # Driver
    "SSD1306Display",
    "ScreenSnapshot",
    "Command",
    "display_id",
    "WIDTH",
    "HEIGHT",
    "FRAME_SIZE",
    # Transport
    "Transport",
    "I2CTransport",
    "TraceTransport",
    "TransportKind",
    "DeviceSpec",
    "open_transport",
    "parse_device_spec",
    # Configuration
    "MonitorConfig",
]
