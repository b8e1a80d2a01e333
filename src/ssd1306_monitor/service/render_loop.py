"""
Render Loop
===========

One background thread per display: render a frame, push it, wait, repeat.

A TransportError on one frame is logged and counted, and the loop carries
on with the next frame; the driver itself never retries. Other exceptions
(a broken frame source, for instance) stop the loop and are kept in
RenderLoop.error.
"""

import logging
import threading
from typing import Optional

from ssd1306_monitor.content import FrameSource
from ssd1306_monitor.errors import TransportError
from ssd1306_monitor.service.registry import ManagedDisplay

logger = logging.getLogger(__name__)


class RenderLoop(threading.Thread):
    """
    Background thread driving one display at a fixed cadence.

    Example:
        >>> loop = RenderLoop(device, ClockFrameSource(device.name), interval=0.025)
        >>> loop.start()
        >>> ...
        >>> loop.stop()
        >>> loop.join()
    """

    def __init__(
        self,
        device: ManagedDisplay,
        source: FrameSource,
        interval: float = 0.025,
        max_frames: Optional[int] = None,
    ):
        """
        Args:
            device: Display to drive
            source: Callable returning the next 1024-byte frame
            interval: Seconds to wait after each frame
            max_frames: Stop after this many attempts (None = run until stopped)
        """
        super().__init__(name=f"render-{device.id}", daemon=True)
        self.device = device
        self.source = source
        self.interval = interval
        self.max_frames = max_frames

        self.frames = 0
        self.failures = 0
        self.last_failure: Optional[TransportError] = None
        self.error: Optional[BaseException] = None
        self._stop_event = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to exit after the current frame."""
        self._stop_event.set()

    def render_once(self) -> bool:
        """
        Render and push a single frame.

        Returns:
            True if the frame was sent, False if the transport failed
        """
        pixels = self.source()
        try:
            self.device.push_frame(pixels)
        except TransportError as e:
            self.failures += 1
            self.last_failure = e
            logger.warning("%s: frame dropped: %s", self.device.name, e)
            return False
        self.frames += 1
        return True

    def run(self) -> None:
        logger.info("Render loop started for %s (every %.0f ms)",
                    self.device.name, self.interval * 1000)
        attempts = 0
        try:
            while not self._stop_event.is_set():
                self.render_once()
                attempts += 1
                if self.max_frames is not None and attempts >= self.max_frames:
                    break
                self._stop_event.wait(self.interval)
        except Exception as e:
            self.error = e
            logger.exception("Render loop for %s stopped", self.device.name)
        else:
            logger.info("Render loop for %s finished after %d frame(s)",
                        self.device.name, self.frames)
