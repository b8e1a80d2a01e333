"""
Linux I2C Transport
===================

Writes frames to an SSD1306 on a Linux i2c-dev bus using smbus2.

Each frame is sent as one I2C write message (START, address, bytes, STOP)
through the I2C_RDWR ioctl, so a 65-byte data frame reaches the controller
as a single transaction. SMBus block writes are limited to 32 bytes and
cannot be used for the 64-byte chunks the driver sends.

Permissions
-----------
/dev/i2c-N is usually owned by the 'i2c' group:

    sudo usermod -a -G i2c $USER

On a Raspberry Pi the bus must be enabled first (raspi-config > Interface
Options > I2C).
"""

import errno
import logging
from typing import Optional

from smbus2 import SMBus, i2c_msg

from ssd1306_monitor.errors import TransportError
from ssd1306_monitor.transport.base import Transport

logger = logging.getLogger(__name__)


def _describe_os_error(error: OSError, bus: int, device: int) -> str:
    """Turn common errno values into actionable messages."""
    if error.errno == errno.ENOENT:
        return (
            f"I2C bus {bus} not found (/dev/i2c-{bus}). "
            "Check that the bus is enabled and the i2c-dev module is loaded."
        )
    if error.errno in (errno.EACCES, errno.EPERM):
        return (
            f"Permission denied accessing /dev/i2c-{bus}. "
            "You may need to add your user to the 'i2c' group."
        )
    if error.errno == errno.EREMOTEIO or error.errno == errno.ENXIO:
        return f"no acknowledge from device 0x{device:02x} on bus {bus}"
    if error.errno == errno.EBUSY:
        return f"device 0x{device:02x} on bus {bus} is busy"
    return f"I/O error on bus {bus}, device 0x{device:02x}: {error}"


class I2CTransport(Transport):
    """
    Transport writing to a device on a Linux I2C bus.

    The bus is opened on construction; a missing bus or a permission
    problem raises TransportError immediately rather than on the first
    frame.

    Example:
        >>> transport = I2CTransport(bus=1, device=0x3C)
        >>> transport.write(bytes([0x00, 0xAF]))  # display on
        >>> transport.close()
    """

    def __init__(self, bus: int, device: int):
        super().__init__()
        self.bus = bus
        self.device = device
        self._name = f"linux:bus_{bus}:dev_{device:x}"

        logger.info("Opening I2C bus %d for device 0x%02x", bus, device)
        try:
            self._smbus: Optional[SMBus] = SMBus(bus)
        except OSError as e:
            raise TransportError(_describe_os_error(e, bus, device), self._name) from e

    @property
    def name(self) -> str:
        return self._name

    def _write_impl(self, data: bytes) -> None:
        msg = i2c_msg.write(self.device, data)
        try:
            self._smbus.i2c_rdwr(msg)
        except OSError as e:
            raise TransportError(
                _describe_os_error(e, self.bus, self.device), self._name
            ) from e

    def close(self) -> None:
        """Close the bus. Errors during close are logged, not raised."""
        if self._closed:
            return
        super().close()
        if self._smbus is None:
            return
        try:
            self._smbus.close()
            logger.debug("I2C bus %d closed", self.bus)
        except OSError as e:
            logger.warning("Error closing I2C bus %d: %s", self.bus, e)
        self._smbus = None
