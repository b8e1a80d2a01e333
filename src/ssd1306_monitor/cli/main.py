"""
ssd1306-monitor - Command-Line Interface
========================================

Drives one or more SSD1306 displays with sample content and serves their
live state over HTTP.

Usage Examples
--------------
One display on I2C bus 1, address 0x3C:
    $ ssd1306-monitor linux:1:3c

No hardware (frames are discarded, state is still reconstructed):
    $ ssd1306-monitor trace

Two displays, higher contrast, web front end on port 9000:
    $ ssd1306-monitor linux:1:3c linux:1:3d --contrast 200 --port 9000

Headless run of 100 frames, then exit:
    $ ssd1306-monitor trace --no-web --frames 100

Device Specifications
---------------------
    linux:<bus>:<device>    bus number and 7-bit address, both hexadecimal
    trace                   discarding transport

Exit Codes
----------
0 - Success
1 - Device error (bus missing, write failed)
2 - Invalid arguments
3 - Internal error
"""

import logging
from typing import Optional

import click
import uvicorn

from ssd1306_monitor import __version__
from ssd1306_monitor.cli.errors import ExitCode, handle_cli_exception
from ssd1306_monitor.config import MonitorConfig
from ssd1306_monitor.content import ClockFrameSource
from ssd1306_monitor.service import CONTRAST_LEVEL_MAX, DeviceRegistry, RenderLoop
from ssd1306_monitor.transport import KIND_ARITY
from ssd1306_monitor.web import create_app

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s" if verbose else "%(message)s",
    )


def format_kinds() -> str:
    lines = []
    for kind, arity in KIND_ARITY.items():
        usage = kind.value + ":<bus>:<device>" if arity else kind.value
        lines.append(f"  {usage}")
    return "\n".join(lines)


@click.command()
@click.argument("devices", nargs=-1)
@click.option(
    "--host",
    type=str,
    default=None,
    help="Address the web front end binds to (default: 0.0.0.0)",
)
@click.option(
    "-p", "--port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Web front end port (default: 8087)",
)
@click.option(
    "-i", "--interval",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Seconds between frames per display (default: 0.025)",
)
@click.option(
    "-c", "--contrast",
    type=click.IntRange(0, CONTRAST_LEVEL_MAX),
    default=None,
    help="Initial contrast, 0-255 (default: 26, i.e. 10%)",
)
@click.option(
    "--frames",
    type=click.IntRange(min=1),
    default=None,
    help="Stop each display after this many frames",
)
@click.option(
    "--no-web",
    is_flag=True,
    help="Only drive the displays; do not start the web front end",
)
@click.option(
    "--list-kinds",
    is_flag=True,
    help="List supported device kinds and exit",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output (logs every frame on trace devices)",
)
@click.version_option(version=__version__, prog_name="ssd1306-monitor")
def main(
    devices: tuple,
    host: Optional[str],
    port: Optional[int],
    interval: Optional[float],
    contrast: Optional[int],
    frames: Optional[int],
    no_web: bool,
    list_kinds: bool,
    verbose: bool,
) -> None:
    """
    Drive SSD1306 displays and monitor them over HTTP.

    DEVICES are device specifications such as linux:1:3c or trace.

    Settings default to the SSD1306_MONITOR_* environment variables;
    command-line options take precedence.
    """
    if list_kinds:
        click.echo("Supported device kinds:")
        click.echo(format_kinds())
        return

    if not devices:
        raise click.UsageError("at least one DEVICE is required (e.g. linux:1:3c or trace)")

    setup_logging(verbose)

    config = MonitorConfig.from_env()
    if host is not None:
        config.host = host
    if port is not None:
        config.port = port
    if interval is not None:
        config.frame_interval = interval
    if contrast is not None:
        config.initial_contrast = contrast / CONTRAST_LEVEL_MAX

    try:
        registry = DeviceRegistry.from_specs(devices, config)
    except Exception as e:
        handle_cli_exception(e, verbose, "Device")

    loops = [
        RenderLoop(device, ClockFrameSource(device.name),
                   interval=config.frame_interval, max_frames=frames)
        for device in registry
    ]
    for loop in loops:
        loop.start()

    try:
        if no_web:
            while any(loop.is_alive() for loop in loops):
                for loop in loops:
                    loop.join(timeout=0.5)
        else:
            app = create_app(registry)
            click.echo(f"Monitor running on http://{config.host}:{config.port}/")
            uvicorn.run(
                app,
                host=config.host,
                port=config.port,
                log_level="debug" if verbose else "info",
            )
    except KeyboardInterrupt:
        click.echo("\nInterrupted.")
    finally:
        for loop in loops:
            loop.stop()
        for loop in loops:
            loop.join()
        registry.close()

    for loop in loops:
        click.echo(
            f"{loop.device.name} ({loop.device.id}): "
            f"{loop.frames} frame(s) sent, {loop.failures} dropped"
        )

    if any(loop.error is not None for loop in loops):
        raise SystemExit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
