"""
Shared Test Fixtures
====================

Transports and displays used across the test suite. No hardware is
needed: RecordingTransport keeps every frame it receives and can be armed
to fail on a chosen write.
"""

from typing import List, Optional

import pytest

from ssd1306_monitor.driver import SSD1306Display
from ssd1306_monitor.errors import TransportError
from ssd1306_monitor.transport import TraceTransport, Transport


class RecordingTransport(Transport):
    """
    Transport that records frames and can simulate a bus failure.

    Attributes:
        frames: Every frame accepted, in order
        attempts: Number of write attempts (including failed ones)
    """

    def __init__(self, name: str = "recording"):
        super().__init__()
        self._name = name
        self.frames: List[bytes] = []
        self.attempts = 0
        self._fail_at: Optional[int] = None

    @property
    def name(self) -> str:
        return self._name

    def fail_on(self, nth: int) -> None:
        """Make the nth write from now fail (1 = the next write)."""
        self._fail_at = self.attempts + nth

    def _write_impl(self, data: bytes) -> None:
        self.attempts += 1
        if self._fail_at is not None and self.attempts == self._fail_at:
            self._fail_at = None
            raise TransportError("simulated bus failure", self._name)
        self.frames.append(data)

    def data_frames(self) -> List[bytes]:
        return [f for f in self.frames if f[0] == 0x40]

    def command_frames(self) -> List[bytes]:
        return [f for f in self.frames if f[0] == 0x00]


@pytest.fixture
def transport() -> RecordingTransport:
    """Fresh recording transport."""
    return RecordingTransport()


@pytest.fixture
def display(transport: RecordingTransport) -> SSD1306Display:
    """Initialized display on a recording transport, with frames cleared."""
    d = SSD1306Display(transport)
    d.init()
    transport.frames.clear()
    return d


@pytest.fixture
def trace_display() -> SSD1306Display:
    """Initialized display on the trace transport."""
    d = SSD1306Display(TraceTransport())
    d.init()
    return d


@pytest.fixture
def checkerboard() -> bytes:
    """Frame with a distinct, asymmetric pattern in every byte."""
    return bytes((i * 37 + (i >> 7)) & 0xFF for i in range(1024))
