"""
SSD1306 Monitor Error Hierarchy
===============================

All exceptions raised by the package inherit from DisplayError, so callers
can catch every display-related failure with a single except clause.

Exception Hierarchy
-------------------
DisplayError (base)
├── InvalidArgumentError - bad contrast value or pixel buffer (also ValueError)
├── NotInitializedError - operation issued before init()
├── DeviceSpecError - malformed device specification (also ValueError)
├── UnknownDeviceError - no device with the requested id (also LookupError)
└── TransportError - the bus write (or bus open) did not complete

Propagation
-----------
The driver never retries. A TransportError raised while pushing a frame
aborts the whole frame; the render loop (or any other caller) decides
whether to skip, retry, or stop.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class DisplayError(Exception):
    """
    Base exception for all SSD1306 monitor errors.

        try:
            display.push_frame(pixels)
        except DisplayError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Argument and State Errors
# =============================================================================

class InvalidArgumentError(DisplayError, ValueError):
    """
    Argument rejected before any bus write was attempted.

    Raised when:
    - contrast is outside [0.0, 1.0] (or not a finite number)
    - a pixel buffer is not exactly 1024 bytes
    - a frame handed to write() is empty
    """
    pass


class NotInitializedError(DisplayError):
    """
    Operation issued before the controller was initialized.

    set_contrast(), set_invert() and push_frame() require init() to have
    been called first. Raw write() is always allowed.
    """

    def __init__(self, operation: str, name: str):
        self.operation = operation
        self.name = name
        super().__init__(
            f"{operation}() called on '{name}' before init()"
        )


class DeviceSpecError(DisplayError, ValueError):
    """
    Malformed device specification string.

    Expected forms are "<kind>:<bus>:<device>" (hexadecimal bus and device)
    or "<kind>" for kinds that take no address.
    """

    def __init__(self, spec: str, reason: str):
        self.spec = spec
        self.reason = reason
        super().__init__(f"invalid device '{spec}': {reason}")


class UnknownDeviceError(DisplayError, LookupError):
    """No registered device matches the requested id."""

    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(f"unknown device id '{device_id}'")


# =============================================================================
# Transport Errors
# =============================================================================

class TransportError(DisplayError):
    """
    The underlying bus write did not complete.

    Raised when:
    - the I2C bus device node does not exist
    - the write fails with an I/O error (NACK, device busy)
    - the transport has already been closed

    Attributes:
        transport: Name of the transport that failed (e.g. "linux:bus_1:dev_3c")
    """

    def __init__(self, message: str, transport: Optional[str] = None):
        self.transport = transport
        if transport:
            message = f"{transport}: {message}"
        super().__init__(message)
