"""
Device Specifications
=====================

A display is selected on the command line with a short specification
string:

    linux:<bus>:<device>    I2C bus number and 7-bit device address, in hex
    trace                   no hardware; frames are discarded (and logged)

Examples:
    linux:1:3c     -> /dev/i2c-1, address 0x3C
    linux:0:3d     -> /dev/i2c-0, address 0x3D
    trace

Specifications are validated against a static table of kinds and the
number of address fields each kind takes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional

from ssd1306_monitor.errors import DeviceSpecError


class TransportKind(Enum):
    """Supported bus transports."""
    LINUX = "linux"  # Linux i2c-dev bus
    TRACE = "trace"  # Discarding sink for development and tests


# Number of hexadecimal address fields each kind takes after the kind token
KIND_ARITY: Final[Dict[TransportKind, int]] = {
    TransportKind.LINUX: 2,
    TransportKind.TRACE: 0,
}

# 7-bit I2C addresses; 0x00-0x07 and 0x78-0x7F are reserved
MIN_DEVICE_ADDRESS: Final[int] = 0x08
MAX_DEVICE_ADDRESS: Final[int] = 0x77


@dataclass(frozen=True)
class DeviceSpec:
    """
    Parsed device specification.

    Attributes:
        kind: Transport kind
        bus: I2C bus number (None for TRACE)
        device: 7-bit device address (None for TRACE)
    """
    kind: TransportKind
    bus: Optional[int] = None
    device: Optional[int] = None

    @property
    def name(self) -> str:
        """
        Stable human-readable identity, e.g. "linux:bus_1:dev_3c".

        Display ids are derived from this string, so its format must not
        change.
        """
        if self.kind is TransportKind.LINUX:
            return f"{self.kind.value}:bus_{self.bus}:dev_{self.device:x}"
        return self.kind.value

    def __str__(self) -> str:
        if self.kind is TransportKind.LINUX:
            return f"{self.kind.value}:{self.bus:x}:{self.device:x}"
        return self.kind.value


def _parse_hex(spec: str, label: str, text: str) -> int:
    try:
        return int(text, 16)
    except ValueError:
        raise DeviceSpecError(spec, f"{label} '{text}' is not a hexadecimal number")


def parse_device_spec(spec: str) -> DeviceSpec:
    """
    Parse a "<kind>[:<bus>:<device>]" string.

    Args:
        spec: Device specification from the command line

    Returns:
        The parsed DeviceSpec

    Raises:
        DeviceSpecError: If the kind is unknown, the field count does not
            match the kind, or an address is out of range

    Example:
        >>> parse_device_spec("linux:1:3c")
        DeviceSpec(kind=<TransportKind.LINUX: 'linux'>, bus=1, device=60)
    """
    parts = spec.strip().split(":")
    token = parts[0].lower()

    try:
        kind = TransportKind(token)
    except ValueError:
        known = ", ".join(k.value for k in TransportKind)
        raise DeviceSpecError(spec, f"unknown kind '{parts[0]}' (expected one of: {known})")

    fields = parts[1:]
    arity = KIND_ARITY[kind]
    if len(fields) != arity:
        raise DeviceSpecError(
            spec, f"kind '{kind.value}' takes {arity} address field(s), got {len(fields)}"
        )

    if kind is TransportKind.TRACE:
        return DeviceSpec(kind)

    bus = _parse_hex(spec, "bus", fields[0])
    device = _parse_hex(spec, "device", fields[1])
    if bus < 0:
        raise DeviceSpecError(spec, f"bus must not be negative, got {bus}")
    if not (MIN_DEVICE_ADDRESS <= device <= MAX_DEVICE_ADDRESS):
        raise DeviceSpecError(
            spec,
            f"device address 0x{device:02x} outside "
            f"0x{MIN_DEVICE_ADDRESS:02x}-0x{MAX_DEVICE_ADDRESS:02x}",
        )
    return DeviceSpec(kind, bus=bus, device=device)
