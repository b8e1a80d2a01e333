"""
Bus Transports
==============

- **devices**: device specification strings and the TransportKind table
- **base**: abstract Transport interface
- **i2c**: Linux i2c-dev transport (smbus2)
- **trace**: discarding transport for development and tests

Use open_transport() to turn a DeviceSpec into a transport:

    >>> from ssd1306_monitor.transport import open_transport, parse_device_spec
    >>> transport = open_transport(parse_device_spec("trace"))
    >>> transport.name
    'trace'
"""

from ssd1306_monitor.transport.base import Transport
from ssd1306_monitor.transport.i2c import I2CTransport
from ssd1306_monitor.transport.devices import (
    KIND_ARITY,
    DeviceSpec,
    TransportKind,
    parse_device_spec,
)
from ssd1306_monitor.transport.trace import TraceTransport


def open_transport(spec: DeviceSpec) -> Transport:
    """
    Create the transport selected by spec.kind.

    Raises:
        TransportError: If a physical bus cannot be opened
    """
    if spec.kind is TransportKind.LINUX:
        return I2CTransport(spec.bus, spec.device)
    elif spec.kind is TransportKind.TRACE:
        return TraceTransport()
    raise ValueError(f"Unsupported transport kind: {spec.kind}")


__all__ = [
    "Transport",
    "I2CTransport",
    "TraceTransport",
    "TransportKind",
    "DeviceSpec",
    "KIND_ARITY",
    "parse_device_spec",
    "open_transport",
]
