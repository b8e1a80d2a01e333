"""
SSD1306 Monitor Command-Line Interface
======================================

This package provides the command-line entry point:

- **ssd1306-monitor**: drive displays and serve their state over HTTP
  (ssd1306_monitor.cli.main)

It is implemented as a Click application with unified error reporting
(ssd1306_monitor.cli.errors).
"""

__all__ = ["main", "errors"]
