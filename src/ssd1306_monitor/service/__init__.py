"""
Monitor Service
===============

- **registry**: DeviceRegistry and ManagedDisplay (serialized bus access,
  observation surface)
- **render_loop**: RenderLoop, one background thread per display
"""

from ssd1306_monitor.service.registry import (
    CONTRAST_LEVEL_MAX,
    DeviceRegistry,
    ManagedDisplay,
)
from ssd1306_monitor.service.render_loop import RenderLoop

__all__ = [
    "DeviceRegistry",
    "ManagedDisplay",
    "RenderLoop",
    "CONTRAST_LEVEL_MAX",
]
