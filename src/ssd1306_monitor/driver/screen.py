"""
Screen Reconstruction
=====================

A ScreenSnapshot is the driver's view of what the panel shows: a copy of
the 1024 bytes most recently streamed to GDDRAM, taken when the last byte
of a full-frame write went out, together with the wall-clock time.

Pixel addressing follows the controller's horizontal addressing mode:
row r, column c is lit iff bit (r % 8) of byte (r // 8) * 128 + c is set.
"""

from dataclasses import dataclass, field
import time
from typing import List

from ssd1306_monitor.driver.commands import FRAME_SIZE, HEIGHT, WIDTH


@dataclass(frozen=True)
class ScreenSnapshot:
    """
    Immutable, timestamped copy of the shadow buffer.

    Attributes:
        data: 1024 bytes of GDDRAM content (bytes, never an alias of the
              driver's mutable shadow buffer)
        timestamp: Seconds since the epoch when the frame completed
    """
    data: bytes
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if len(self.data) != FRAME_SIZE:
            raise ValueError(
                f"snapshot must hold {FRAME_SIZE} bytes, got {len(self.data)}"
            )
        # bytearray/memoryview input is frozen into bytes
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def timestamp_ms(self) -> int:
        """Timestamp in milliseconds since the epoch."""
        return int(self.timestamp * 1000)

    def pixel(self, row: int, col: int) -> bool:
        """
        Return True if the pixel at (row, col) is lit.

        Raises:
            ValueError: If the position is outside 64x128
        """
        if not (0 <= row < HEIGHT and 0 <= col < WIDTH):
            raise ValueError(f"Invalid position ({row}, {col})")
        return bool((self.data[(row // 8) * WIDTH + col] >> (row % 8)) & 1)

    def grid(self) -> List[List[bool]]:
        """Return the screen as 64 rows of 128 booleans."""
        data = self.data
        rows = []
        for row in range(HEIGHT):
            base = (row // 8) * WIDTH
            bit = row % 8
            rows.append([bool((data[base + col] >> bit) & 1) for col in range(WIDTH)])
        return rows

    def rows_as_text(self, on: str = "#", off: str = ".") -> List[str]:
        """Return the screen as 64 strings, one character per pixel."""
        return [
            "".join(on if lit else off for lit in row)
            for row in self.grid()
        ]

    def is_blank(self) -> bool:
        return not any(self.data)
