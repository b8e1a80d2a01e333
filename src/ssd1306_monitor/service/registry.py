"""
Device Registry
===============

Holds the displays served by one monitor process and the per-display lock
that keeps bus access single-writer.

Architecture:
    DeviceRegistry
        └── ManagedDisplay (one per device spec, keyed by display id)
                ├── SSD1306Display
                └── threading.Lock (held for each bus operation)

The render loop and the web front end both go through ManagedDisplay, so a
contrast change from a web request is sent between two frames, never in
the middle of one.
"""

import logging
import threading
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ssd1306_monitor.config import MonitorConfig
from ssd1306_monitor.driver.display import SSD1306Display
from ssd1306_monitor.errors import InvalidArgumentError, UnknownDeviceError
from ssd1306_monitor.transport import open_transport, parse_device_spec

logger = logging.getLogger(__name__)

# Upper bound of the integer contrast scale used by the web front end
CONTRAST_LEVEL_MAX = 255


class ManagedDisplay:
    """
    A display plus the lock that serializes its bus operations.

    Observation methods read the driver's channels and never take the lock.
    """

    def __init__(self, display: SSD1306Display, spec: Optional[str] = None):
        self.display = display
        self.spec = spec or display.name
        self.lock = threading.Lock()

    @property
    def id(self) -> str:
        return self.display.id

    @property
    def name(self) -> str:
        return self.display.name

    # =========================================================================
    # Mutations (serialized)
    # =========================================================================

    def init(self) -> None:
        with self.lock:
            self.display.init()

    def push_frame(self, pixels: bytes) -> None:
        with self.lock:
            self.display.push_frame(pixels)

    def set_contrast_level(self, level: int) -> None:
        """
        Set contrast from an integer 0-255.

        Raises:
            InvalidArgumentError: If level is outside 0-255
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise InvalidArgumentError(f"contrast level must be an integer, got {level!r}")
        if not (0 <= level <= CONTRAST_LEVEL_MAX):
            raise InvalidArgumentError(
                f"contrast level must be within 0-{CONTRAST_LEVEL_MAX}, got {level}"
            )
        with self.lock:
            self.display.set_contrast(level / CONTRAST_LEVEL_MAX)
        logger.info("%s: contrast set to %d", self.name, level)

    def set_invert(self, value: bool) -> None:
        with self.lock:
            self.display.set_invert(value)
        logger.info("%s: invert set to %s", self.name, value)

    # =========================================================================
    # Observation
    # =========================================================================

    def status(self, include_screen: bool = True) -> Dict[str, Any]:
        """
        Return the observation surface as plain data.

        Keys:
            id, name, spec, initialized, contrast, contrast_level, invert,
            frames_pushed, latencies_ms, writes (hex strings, oldest first),
            screen (None, or {"timestamp_ms", "rows"} with rows as 64 strings
            of '#' and '.'), only when include_screen is True
        """
        display = self.display
        result: Dict[str, Any] = {
            "id": display.id,
            "name": display.name,
            "spec": self.spec,
            "initialized": display.initialized,
            "contrast": display.contrast,
            "contrast_level": display.contrast_level,
            "invert": display.invert,
            "frames_pushed": display.frames_pushed,
            "latencies_ms": [round(ms, 3) for ms in display.latencies.snapshot()],
            "writes": [frame.hex() for frame in display.writes.snapshot()],
        }
        if include_screen:
            screen = display.screen
            result["screen"] = None if screen is None else {
                "timestamp_ms": screen.timestamp_ms,
                "rows": screen.rows_as_text(),
            }
        return result


class DeviceRegistry:
    """
    Ordered collection of managed displays, keyed by display id.

    Example:
        >>> registry = DeviceRegistry.from_specs(["trace"])
        >>> [device.name for device in registry]
        ['trace']
    """

    def __init__(self) -> None:
        self._devices: Dict[str, ManagedDisplay] = {}

    def add(self, device: ManagedDisplay) -> ManagedDisplay:
        """
        Register a device.

        Raises:
            ValueError: If a device with the same id is already registered
        """
        if device.id in self._devices:
            existing = self._devices[device.id]
            raise ValueError(
                f"device '{device.name}' has the same id ({device.id}) as '{existing.name}'"
            )
        self._devices[device.id] = device
        logger.debug("Registered %s as %s", device.name, device.id)
        return device

    def get(self, device_id: str) -> ManagedDisplay:
        """
        Look up a device by id.

        Raises:
            UnknownDeviceError: If no device has this id
        """
        try:
            return self._devices[device_id]
        except KeyError:
            raise UnknownDeviceError(device_id) from None

    def ids(self) -> List[str]:
        return list(self._devices)

    def close(self) -> None:
        """Close every device's transport."""
        for device in self._devices.values():
            device.display.close()

    def __iter__(self) -> Iterator[ManagedDisplay]:
        return iter(list(self._devices.values()))

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    @classmethod
    def from_specs(
        cls,
        specs: Sequence[str],
        config: Optional[MonitorConfig] = None,
    ) -> "DeviceRegistry":
        """
        Build and initialize displays from device specification strings.

        Each spec is parsed, its transport opened, and the display
        initialized with config.initial_contrast.

        Raises:
            DeviceSpecError: If a spec is malformed
            TransportError: If a bus cannot be opened or initialization fails
            ValueError: If two specs resolve to the same device
        """
        config = config or MonitorConfig()
        registry = cls()
        try:
            for text in specs:
                spec = parse_device_spec(text)
                transport = open_transport(spec)
                display = SSD1306Display(
                    transport,
                    contrast=config.initial_contrast,
                    history_size=config.history_size,
                )
                device = ManagedDisplay(display, spec=str(spec))
                try:
                    registry.add(device)
                except ValueError:
                    transport.close()
                    raise
                device.init()
                logger.info("Display %s ready (id %s)", device.name, device.id)
        except Exception:
            registry.close()
            raise
        return registry
