"""Allow running the monitor with python -m ssd1306_monitor."""

from ssd1306_monitor.cli.main import main

main()
