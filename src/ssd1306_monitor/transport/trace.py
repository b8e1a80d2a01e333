"""
Trace Transport
===============

A transport with no hardware behind it. Every frame is accepted and
discarded; with DEBUG logging enabled each frame is logged as hex, which
is handy when checking the command stream by eye.
"""

import logging

from ssd1306_monitor.transport.base import Transport

logger = logging.getLogger(__name__)


class TraceTransport(Transport):
    """Discarding transport; writes always succeed."""

    def __init__(self) -> None:
        super().__init__()
        self.frames_written = 0
        self.bytes_written = 0

    @property
    def name(self) -> str:
        return "trace"

    def _write_impl(self, data: bytes) -> None:
        self.frames_written += 1
        self.bytes_written += len(data)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", data.hex(" "))
