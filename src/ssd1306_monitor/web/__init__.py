"""
Monitor Web Front End Package
=============================

Usage:
    from ssd1306_monitor.service import DeviceRegistry
    from ssd1306_monitor.web import create_app

    app = create_app(DeviceRegistry.from_specs(["trace"]))
    uvicorn.run(app, port=8087)
"""

from ssd1306_monitor.web.app import create_app

__all__ = ["create_app"]
