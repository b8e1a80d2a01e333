"""
SSD1306 Monitor - Configuration
===============================

Runtime settings for the monitor service. Values come from:
- Default values (defined here)
- Environment variables (MonitorConfig.from_env)
- Command-line options, which override both

Timing is in seconds. The default frame interval of 25ms gives roughly
40 frames per second, which a 400kHz I2C bus can sustain (one frame is
about 1.1KB on the wire).
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_PREFIX = "SSD1306_MONITOR_"


@dataclass
class MonitorConfig:
    """
    Configuration for the monitor service.

    Attributes:
        host: Interface the web front end binds to (default: all)
        port: Web front end port (default: 8087)
        frame_interval: Delay between frames per display, in seconds
        history_size: Entries kept in each write/latency history
        initial_contrast: Contrast applied at startup, fraction in [0, 1]
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # WEB FRONT END
    # ═══════════════════════════════════════════════════════════════════════════

    host: str = "0.0.0.0"
    port: int = 8087

    # ═══════════════════════════════════════════════════════════════════════════
    # DISPLAYS
    # ═══════════════════════════════════════════════════════════════════════════

    frame_interval: float = 0.025  # 25ms between frames
    history_size: int = 100
    initial_contrast: float = 0.1

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "MonitorConfig":
        """
        Create MonitorConfig from environment variables.

        Environment variables (all optional):
            SSD1306_MONITOR_HOST: Bind address
            SSD1306_MONITOR_PORT: Port number
            SSD1306_MONITOR_FRAME_INTERVAL: Seconds between frames
            SSD1306_MONITOR_HISTORY: History size per channel
            SSD1306_MONITOR_CONTRAST: Initial contrast (0.0 - 1.0)

        Invalid values are logged and the default is kept.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            MonitorConfig with values from the environment
        """
        env = os.environ if environ is None else environ
        config = cls()

        if host := env.get(ENV_PREFIX + "HOST"):
            config.host = host

        config.port = _read(env, "PORT", int, config.port,
                            lambda v: 0 < v < 65536)
        config.frame_interval = _read(env, "FRAME_INTERVAL", float, config.frame_interval,
                                      lambda v: math.isfinite(v) and v >= 0)
        config.history_size = _read(env, "HISTORY", int, config.history_size,
                                    lambda v: v > 0)
        config.initial_contrast = _read(env, "CONTRAST", float, config.initial_contrast,
                                        lambda v: 0.0 <= v <= 1.0)
        return config


def _read(
    env,
    key: str,
    convert: Callable[[str], T],
    default: T,
    valid: Callable[[T], bool],
) -> T:
    """Read and validate one variable, falling back to default."""
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw == "":
        return default
    try:
        value = convert(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r: not a valid %s",
                       ENV_PREFIX, key, raw, convert.__name__)
        return default
    if not valid(value):
        logger.warning("Ignoring %s%s=%r: out of range", ENV_PREFIX, key, raw)
        return default
    return value
