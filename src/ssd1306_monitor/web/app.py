"""
Monitor Web Front End
=====================

FastAPI application exposing each display's observation and mutation
surface.

Routes:
    GET  /                              HTML index of displays
    GET  /devices/{id}                  HTML status page with the screen
    GET  /devices/{id}/screen.png       PNG of the latest screen
    GET  /api/devices                   JSON list of displays
    GET  /api/devices/{id}              JSON status of one display
    POST /api/devices/{id}/contrast     {"value": 0-255}
    POST /api/devices/{id}/invert       {"value": true|false}

Handlers are plain functions, so FastAPI runs them in its thread pool;
bus writes from mutations block only the worker handling the request.
"""

import html
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from ssd1306_monitor import __version__
from ssd1306_monitor.content import render_snapshot_png
from ssd1306_monitor.errors import (
    InvalidArgumentError,
    NotInitializedError,
    TransportError,
    UnknownDeviceError,
)
from ssd1306_monitor.service.registry import DeviceRegistry
from ssd1306_monitor.web.models import (
    ContrastRequest,
    DeviceStatus,
    DeviceSummary,
    ErrorResponse,
    InvertRequest,
)

logger = logging.getLogger(__name__)

# Seconds between automatic reloads of the HTML status page
PAGE_REFRESH_SECONDS = 1

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Unknown device id"},
    409: {"model": ErrorResponse, "description": "Display not initialized"},
    502: {"model": ErrorResponse, "description": "Bus write failed"},
}


def create_app(registry: DeviceRegistry) -> FastAPI:
    """
    Build the web application for a registry.

    Args:
        registry: Displays to expose

    Returns:
        Configured FastAPI application (registry in app.state.registry)
    """
    app = FastAPI(title="SSD1306 Monitor", version=__version__)
    app.state.registry = registry

    # =========================================================================
    # Error Mapping
    # =========================================================================

    @app.exception_handler(UnknownDeviceError)
    async def unknown_device(request: Request, exc: UnknownDeviceError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotInitializedError)
    async def not_initialized(request: Request, exc: NotInitializedError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument(request: Request, exc: InvalidArgumentError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(TransportError)
    async def transport_failed(request: Request, exc: TransportError) -> JSONResponse:
        logger.warning("Bus write failed during %s %s: %s",
                       request.method, request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    # =========================================================================
    # JSON API
    # =========================================================================

    @app.get("/api/devices", response_model=list[DeviceSummary])
    def list_devices() -> list[DeviceSummary]:
        return [
            DeviceSummary(**device.status(include_screen=False))
            for device in registry
        ]

    @app.get("/api/devices/{device_id}", response_model=DeviceStatus,
             responses=ERROR_RESPONSES)
    def get_device(device_id: str) -> DeviceStatus:
        return DeviceStatus(**registry.get(device_id).status())

    @app.post("/api/devices/{device_id}/contrast", response_model=DeviceSummary,
              responses=ERROR_RESPONSES)
    def set_contrast(device_id: str, payload: ContrastRequest) -> DeviceSummary:
        device = registry.get(device_id)
        device.set_contrast_level(payload.value)
        return DeviceSummary(**device.status(include_screen=False))

    @app.post("/api/devices/{device_id}/invert", response_model=DeviceSummary,
              responses=ERROR_RESPONSES)
    def set_invert(device_id: str, payload: InvertRequest) -> DeviceSummary:
        device = registry.get(device_id)
        device.set_invert(payload.value)
        return DeviceSummary(**device.status(include_screen=False))

    # =========================================================================
    # HTML Pages
    # =========================================================================

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        items = []
        for device in registry:
            items.append(
                f'<li><a href="/devices/{device.id}">{html.escape(device.name)}</a>'
                f" <code>{device.id}</code></li>"
            )
        body = "<ul>" + "".join(items) + "</ul>" if items else "<p>No displays.</p>"
        return HTMLResponse(_page("SSD1306 Monitor", f"<h1>Displays</h1>{body}"))

    @app.get("/devices/{device_id}", response_class=HTMLResponse,
             responses=ERROR_RESPONSES)
    def device_page(device_id: str) -> HTMLResponse:
        status = registry.get(device_id).status()
        return HTMLResponse(_page(
            status["name"],
            _render_device(status),
            refresh=PAGE_REFRESH_SECONDS,
        ))

    @app.get("/devices/{device_id}/screen.png", responses={
        200: {"content": {"image/png": {}}},
        **ERROR_RESPONSES,
    })
    def screen_png(device_id: str, scale: int = 4) -> Response:
        display = registry.get(device_id).display
        screen = display.screen
        if screen is None:
            return JSONResponse(status_code=404, content={"detail": "no frame yet"})
        if not (1 <= scale <= 16):
            raise InvalidArgumentError(f"scale must be within 1-16, got {scale}")
        png = render_snapshot_png(screen, scale=scale, invert=display.invert)
        return Response(content=png, media_type="image/png")

    return app


# =============================================================================
# HTML Rendering
# =============================================================================

def _page(title: str, body: str, refresh: int = 0) -> str:
    meta = f'<meta http-equiv="refresh" content="{refresh}">' if refresh else ""
    return (
        "<!DOCTYPE html><html><head>"
        '<meta charset="utf-8">'
        f"{meta}<title>{html.escape(title)}</title>"
        "<style>pre.screen{line-height:0.6;font-size:8px}</style>"
        f"</head><body>{body}</body></html>"
    )


def _render_device(status: dict) -> str:
    latencies = status["latencies_ms"]
    mean = sum(latencies) / len(latencies) if latencies else 0.0
    parts = [
        f"<h1>{html.escape(status['name'])}</h1>",
        "<table>",
        f"<tr><th>id</th><td><code>{status['id']}</code></td></tr>",
        f"<tr><th>contrast</th><td>{status['contrast_level']} / 255</td></tr>",
        f"<tr><th>invert</th><td>{'yes' if status['invert'] else 'no'}</td></tr>",
        f"<tr><th>frames</th><td>{status['frames_pushed']}</td></tr>",
        f"<tr><th>mean latency</th><td>{mean:.2f} ms over {len(latencies)} frame(s)</td></tr>",
        "</table>",
    ]

    screen = status["screen"]
    if screen is None:
        parts.append("<p>No frame received yet.</p>")
    else:
        taken = datetime.fromtimestamp(screen["timestamp_ms"] / 1000, tz=timezone.utc)
        parts.append(f"<h2>Screen at {taken.isoformat(timespec='milliseconds')}</h2>")
        parts.append(f'<img src="/devices/{status["id"]}/screen.png" alt="screen">')
        parts.append('<pre class="screen">' + "\n".join(screen["rows"]) + "</pre>")

    writes = status["writes"][-16:]
    parts.append(f"<h2>Last {len(writes)} write(s)</h2>")
    parts.append("<pre>" + "\n".join(writes) + "</pre>")
    return "".join(parts)
