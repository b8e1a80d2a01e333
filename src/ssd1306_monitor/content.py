"""
Frame Content
=============

Conversion between Pillow images and SSD1306 page-format frames, plus the
sample content shown by the monitor's render loops.

Page Format
-----------
A frame is 1024 bytes: 8 pages of 128 columns. Byte (page * 128 + x)
holds the 8 pixels of column x in rows page*8 .. page*8+7, bit 0 on top.

    >>> from PIL import Image
    >>> img = Image.new("1", (128, 64))
    >>> img.putpixel((3, 9), 1)
    >>> frame = pack_image(img)
    >>> frame[128 + 3]
    2
"""

import io
import time
from datetime import datetime
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont

from ssd1306_monitor.driver.commands import FRAME_SIZE, HEIGHT, WIDTH
from ssd1306_monitor.driver.screen import ScreenSnapshot
from ssd1306_monitor.errors import InvalidArgumentError

# A frame source renders the next frame each time it is called
FrameSource = Callable[[], bytes]


# =============================================================================
# Image <-> Frame Conversion
# =============================================================================

def pack_image(image: Image.Image) -> bytes:
    """
    Convert a 128x64 image into a 1024-byte frame.

    Any image mode is accepted; it is reduced to 1 bit per pixel with
    Pillow's default dithering-free threshold for mode "1".

    Raises:
        InvalidArgumentError: If the image is not 128x64
    """
    if image.size != (WIDTH, HEIGHT):
        raise InvalidArgumentError(
            f"image must be {WIDTH}x{HEIGHT}, got {image.size[0]}x{image.size[1]}"
        )
    mono = image if image.mode == "1" else image.convert("1", dither=Image.Dither.NONE)
    # One byte per pixel (0 or 255), row-major
    pixels = mono.convert("L").tobytes()

    frame = bytearray(FRAME_SIZE)
    for row in range(HEIGHT):
        base = (row // 8) * WIDTH
        mask = 1 << (row % 8)
        offset = row * WIDTH
        for col in range(WIDTH):
            if pixels[offset + col]:
                frame[base + col] |= mask
    return bytes(frame)


def unpack_frame(frame: bytes) -> Image.Image:
    """
    Convert a 1024-byte frame into a mode "1" image.

    Raises:
        InvalidArgumentError: If frame is not 1024 bytes
    """
    if len(frame) != FRAME_SIZE:
        raise InvalidArgumentError(
            f"frame must be {FRAME_SIZE} bytes, got {len(frame)}"
        )
    pixels = bytearray(WIDTH * HEIGHT)
    for row in range(HEIGHT):
        base = (row // 8) * WIDTH
        shift = row % 8
        offset = row * WIDTH
        for col in range(WIDTH):
            if (frame[base + col] >> shift) & 1:
                pixels[offset + col] = 255
    return Image.frombytes("L", (WIDTH, HEIGHT), bytes(pixels)).convert("1")


def render_snapshot_png(
    snapshot: ScreenSnapshot,
    scale: int = 4,
    invert: bool = False,
) -> bytes:
    """
    Render a snapshot as a PNG image.

    Args:
        snapshot: Screen to render
        scale: Pixel scale factor (default 4, giving 512x256)
        invert: Render with inverted polarity, as the panel shows it
            after DISPLAY_INVERTED

    Returns:
        PNG image bytes
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    img = unpack_frame(snapshot.data).convert("L")
    if invert:
        img = img.point(lambda v: 255 - v)
    if scale > 1:
        img = img.resize((WIDTH * scale, HEIGHT * scale), Image.Resampling.NEAREST)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


# =============================================================================
# Sample Content
# =============================================================================

class ClockFrameSource:
    """
    Renders the display name, the wall-clock time and a frame counter,
    with a marker sweeping along the bottom row.

    Example:
        >>> source = ClockFrameSource("trace")
        >>> len(source())
        1024
    """

    def __init__(
        self,
        label: str,
        clock: Optional[Callable[[], float]] = None,
        font: Optional[ImageFont.ImageFont] = None,
    ):
        self.label = label
        self.frame_count = 0
        self._clock = clock or time.time
        self._font = font or ImageFont.load_default()

    def render(self) -> Image.Image:
        """Draw the next frame as a mode "1" image."""
        now = datetime.fromtimestamp(self._clock())
        img = Image.new("1", (WIDTH, HEIGHT), 0)
        draw = ImageDraw.Draw(img)

        draw.rectangle((0, 0, WIDTH - 1, HEIGHT - 1), outline=1)
        draw.text((4, 3), self.label[:20], font=self._font, fill=1)
        draw.text((4, 20), now.strftime("%H:%M:%S"), font=self._font, fill=1)
        draw.text((4, 36), f"frame {self.frame_count}", font=self._font, fill=1)

        x = 2 + self.frame_count % (WIDTH - 12)
        draw.rectangle((x, HEIGHT - 8, x + 7, HEIGHT - 4), fill=1)

        self.frame_count += 1
        return img

    def __call__(self) -> bytes:
        return pack_image(self.render())
