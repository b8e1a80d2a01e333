"""
SSD1306 Display Driver
======================

Translates a 1024-byte monochrome frame into SSD1306 command and data
transfers, tracks contrast and polarity, and reconstructs what the panel
shows from the bytes it sends.

Framing
-------
Every transfer passes through write(), which inspects the control byte:

    0x00 (command stream)  the shadow cursor returns to 0 (ADDRESSED)
    0x40 (data stream)     the payload is copied into the shadow buffer at
                           the cursor, which advances (ACCUMULATING)
    anything else          forwarded with no effect on the shadow buffer

When the cursor first reaches 1024 after a command frame, the shadow buffer
is copied into a ScreenSnapshot and published. Further data before the next
command frame wraps around to the start of the buffer, as GDDRAM does in
horizontal addressing mode, but does not publish another snapshot.

The shadow buffer is updated only after the transport accepted the frame,
so a failed transfer never shows up in a snapshot.

Threading
---------
The driver is not synchronized. One thread (the render loop) drives it;
callers that also change contrast or polarity from another thread must
serialize access themselves (see service.registry.ManagedDisplay). The
observation channels may be read from any thread.

Example:
    >>> from ssd1306_monitor.transport import TraceTransport
    >>> display = SSD1306Display(TraceTransport())
    >>> display.init()
    >>> display.set_contrast(0.5)
    >>> display.writes.latest().hex()
    '008180'
    >>> display.push_frame(bytes(1024))
    >>> display.screen.is_blank()
    True
"""

import logging
import math
import numbers
import time
import zlib
from typing import Optional, Union

from ssd1306_monitor.driver.channels import HistoryChannel, LatestValue
from ssd1306_monitor.driver.commands import (
    CHUNK_SIZE,
    CMD_STREAM,
    DATA_STREAM,
    FRAME_SIZE,
    INIT_SEQUENCE,
    WRITE_PREFIX,
    Command,
    command_frame,
    data_frame,
)
from ssd1306_monitor.driver.screen import ScreenSnapshot
from ssd1306_monitor.errors import InvalidArgumentError, NotInitializedError
from ssd1306_monitor.transport.base import Transport

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

DEFAULT_CONTRAST = 0.1
DEFAULT_HISTORY_SIZE = 100


def display_id(name: str) -> str:
    """
    Compute the short fingerprint used to reference a display.

    CRC-32 of the UTF-8 name, rendered as the four checksum bytes in
    little-endian order (8 hex digits). The same name always yields the
    same id.

    Example:
        >>> display_id("trace")
        'a1d55b31'
    """
    crc = zlib.crc32(name.encode("utf-8"))
    return crc.to_bytes(4, "little").hex()


def contrast_to_level(value: float) -> int:
    """
    Scale a contrast fraction in [0, 1] to the controller's 0-255 range.

    Halves round up: (k + 0.5) / 255 maps to k + 1.
    """
    return math.floor(255 * value + 0.5)


def _validate_contrast(value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"contrast must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or not (0.0 <= value <= 1.0):
        raise InvalidArgumentError(f"contrast must be within [0.0, 1.0], got {value}")
    return value


class SSD1306Display:
    """
    Driver for one SSD1306 128x64 panel.

    Attributes:
        writes: Recent raw frames, oldest first (HistoryChannel[bytes])
        latencies: Recent push_frame() durations in ms (HistoryChannel[float])
        screens: Latest reconstructed screen (LatestValue[Optional[ScreenSnapshot]])
    """

    def __init__(
        self,
        transport: Transport,
        contrast: float = DEFAULT_CONTRAST,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        """
        Create a driver; nothing is sent until init().

        Args:
            transport: Bus transport for this panel
            contrast: Contrast applied by init(), in [0, 1]
            history_size: Capacity of the writes and latencies channels
        """
        self._transport = transport
        self._name = transport.name
        self._id = display_id(self._name)

        self._contrast = LatestValue(_validate_contrast(contrast))
        self._invert = LatestValue(False)
        self._initialized = False

        self._shadow = bytearray(FRAME_SIZE)
        self._cursor = 0
        self._frame_complete = False
        self.frames_pushed = 0

        self.writes: HistoryChannel[bytes] = HistoryChannel(history_size)
        self.latencies: HistoryChannel[float] = HistoryChannel(history_size)
        self.screens: LatestValue[Optional[ScreenSnapshot]] = LatestValue(None)

    # =========================================================================
    # Identity and State
    # =========================================================================

    @property
    def name(self) -> str:
        """Human-readable identity, e.g. "linux:bus_1:dev_3c" or "trace"."""
        return self._name

    @property
    def id(self) -> str:
        """CRC-32 fingerprint of name."""
        return self._id

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def contrast(self) -> float:
        """Current contrast fraction in [0, 1]."""
        return self._contrast.value

    @property
    def contrast_level(self) -> int:
        """Current contrast as sent to the controller (0-255)."""
        return contrast_to_level(self._contrast.value)

    @property
    def invert(self) -> bool:
        """True if the display polarity is inverted."""
        return self._invert.value

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def write_cursor(self) -> int:
        """Offset in the shadow buffer where the next data byte lands."""
        return self._cursor

    @property
    def screen(self) -> Optional[ScreenSnapshot]:
        """Latest reconstructed screen, or None before the first full frame."""
        return self.screens.value

    # =========================================================================
    # Controller Operations
    # =========================================================================

    def init(self) -> None:
        """
        Send the power-on sequence, then re-apply the stored contrast.

        The display counts as initialized only once both transfers went out.

        Raises:
            TransportError: If the transport fails (the display is left
                uninitialized)
        """
        logger.info("Initializing display %s (id %s)", self._name, self._id)
        self._initialized = False
        self.write(INIT_SEQUENCE)
        # The power-on sequence selects normal polarity
        self._invert.publish(False)
        self._apply_contrast(self.contrast)
        self._initialized = True

    def set_contrast(self, value: float) -> None:
        """
        Set the contrast.

        Args:
            value: Fraction in [0, 1]; sent as 255 * value rounded half up

        Raises:
            InvalidArgumentError: If value is outside [0, 1] (nothing is sent)
            NotInitializedError: If init() has not been called
            TransportError: If the transport fails (stored contrast unchanged)
        """
        value = _validate_contrast(value)
        self._require_init("set_contrast")
        self._apply_contrast(value)

    def set_invert(self, value: bool) -> None:
        """
        Select inverted (True) or normal (False) polarity.

        Raises:
            NotInitializedError: If init() has not been called
            TransportError: If the transport fails (stored polarity unchanged)
        """
        self._require_init("set_invert")
        value = bool(value)
        opcode = Command.DISPLAY_INVERTED if value else Command.DISPLAY_NORMAL
        self.write(command_frame(opcode))
        self._invert.publish(value)

    def push_frame(self, pixels: BytesLike) -> None:
        """
        Send a full frame to GDDRAM.

        The addressing prefix goes out first, then the frame in 16 data
        transfers of 64 bytes each. On success exactly one snapshot is
        published and the elapsed time is recorded in latencies.

        Args:
            pixels: 1024 bytes in page format (see driver.commands)

        Raises:
            InvalidArgumentError: If pixels is not 1024 bytes (nothing is sent)
            NotInitializedError: If init() has not been called
            TransportError: If any transfer fails; the remaining chunks are
                not sent and no snapshot is published
        """
        frame = bytes(pixels)
        if len(frame) != FRAME_SIZE:
            raise InvalidArgumentError(
                f"pixel buffer must be {FRAME_SIZE} bytes, got {len(frame)}"
            )
        self._require_init("push_frame")

        started = time.perf_counter()
        self.write(WRITE_PREFIX)
        for offset in range(0, FRAME_SIZE, CHUNK_SIZE):
            self.write(data_frame(frame[offset:offset + CHUNK_SIZE]))
        self.latencies.publish((time.perf_counter() - started) * 1000.0)
        self.frames_pushed += 1

    def write(self, data: BytesLike) -> None:
        """
        Send one framed transfer and track its effect on GDDRAM.

        The frame is recorded in writes before it is sent, whatever its
        outcome. The shadow buffer is only updated once the transport has
        accepted it.

        Args:
            data: Control byte followed by commands or pixel data

        Raises:
            InvalidArgumentError: If data is empty
            TransportError: If the transport fails
        """
        frame = bytes(data)
        if not frame:
            raise InvalidArgumentError("cannot write an empty frame")

        self.writes.publish(frame)
        self._transport.write(frame, 0, len(frame))

        control = frame[0]
        if control == CMD_STREAM:
            self._cursor = 0
            self._frame_complete = False
        elif control == DATA_STREAM:
            self._accumulate(memoryview(frame)[1:])

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    # =========================================================================
    # Screen Reconstruction
    # =========================================================================

    def _accumulate(self, payload: memoryview) -> None:
        pos = 0
        while pos < len(payload):
            if self._cursor == FRAME_SIZE:
                self._cursor = 0
            count = min(len(payload) - pos, FRAME_SIZE - self._cursor)
            self._shadow[self._cursor:self._cursor + count] = payload[pos:pos + count]
            self._cursor += count
            pos += count

            if self._cursor == FRAME_SIZE and not self._frame_complete:
                self._frame_complete = True
                self.screens.publish(ScreenSnapshot(bytes(self._shadow), time.time()))

    def _apply_contrast(self, value: float) -> None:
        self.write(command_frame(Command.SET_CONTRAST, contrast_to_level(value)))
        self._contrast.publish(value)

    def _require_init(self, operation: str) -> None:
        if not self._initialized:
            raise NotInitializedError(operation, self._name)

    def __repr__(self) -> str:
        return f"SSD1306Display(name={self._name!r}, id={self._id!r})"
