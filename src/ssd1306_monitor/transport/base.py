"""
Bus Transport Interface
=======================

A transport delivers one framed byte sequence to one addressed device.
The display driver only ever calls write() and reads name, so real and
discarding transports are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ssd1306_monitor.errors import TransportError


class Transport(ABC):
    """
    Abstract byte sink for one display.

    Subclasses implement _write_impl(); write() validates the slice and
    rejects writes after close().
    """

    def __init__(self) -> None:
        self._closed = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identity of the transport, e.g. "linux:bus_1:dev_3c"."""

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes, offset: int = 0, length: Optional[int] = None) -> None:
        """
        Transfer data[offset:offset + length] to the device.

        Args:
            data: Framed bytes (control byte first)
            offset: Start of the slice to send
            length: Number of bytes to send (default: rest of data)

        Raises:
            TransportError: If the transport is closed or the transfer fails
            ValueError: If the slice lies outside data
        """
        if length is None:
            length = len(data) - offset
        if offset < 0 or length < 0 or offset + length > len(data):
            raise ValueError(
                f"slice [{offset}:{offset + length}] outside buffer of {len(data)} bytes"
            )
        if self._closed:
            raise TransportError("transport is closed", self.name)
        self._write_impl(bytes(data[offset:offset + length]))

    @abstractmethod
    def _write_impl(self, data: bytes) -> None:
        """Perform the physical transfer of data."""

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
