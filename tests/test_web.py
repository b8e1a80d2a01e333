"""
Web Front End Tests
===================

Tests for the FastAPI monitor application, using FastAPI's TestClient.
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from ssd1306_monitor.driver import SSD1306Display
from ssd1306_monitor.service import DeviceRegistry, ManagedDisplay
from ssd1306_monitor.web import create_app

from conftest import RecordingTransport

TRACE_ID = "a1d55b31"
LINUX_ID = "3ef75c33"


@pytest.fixture
def registry():
    registry = DeviceRegistry.from_specs(["trace"])
    yield registry
    registry.close()


@pytest.fixture
def client(registry):
    return TestClient(create_app(registry))


@pytest.fixture
def flaky(registry):
    """Second display, named like a Linux device, whose bus can be made to fail."""
    transport = RecordingTransport("linux:bus_1:dev_3c")
    device = registry.add(ManagedDisplay(SSD1306Display(transport)))
    device.init()
    return transport


# =============================================================================
# JSON API Tests
# =============================================================================

class TestDeviceApi:
    """Test the read side of the JSON API."""

    def test_list(self, client):
        response = client.get("/api/devices")
        assert response.status_code == 200
        devices = response.json()
        assert len(devices) == 1
        assert devices[0]["id"] == TRACE_ID
        assert devices[0]["name"] == "trace"
        assert devices[0]["contrast_level"] == 26
        assert devices[0]["invert"] is False

    def test_status(self, client):
        status = client.get(f"/api/devices/{TRACE_ID}").json()
        assert status["initialized"] is True
        assert status["screen"] is None
        assert status["writes"][-1] == "00811a"

    def test_status_with_screen(self, client, registry, checkerboard):
        registry.get(TRACE_ID).push_frame(checkerboard)
        status = client.get(f"/api/devices/{TRACE_ID}").json()
        assert len(status["screen"]["rows"]) == 64
        assert status["frames_pushed"] == 1

    def test_unknown_device(self, client):
        response = client.get("/api/devices/00000000")
        assert response.status_code == 404
        assert "unknown device id" in response.json()["detail"]


class TestMutationApi:
    """Test contrast and invert requests."""

    def test_set_contrast(self, client, registry):
        response = client.post(f"/api/devices/{TRACE_ID}/contrast", json={"value": 128})
        assert response.status_code == 200
        assert response.json()["contrast_level"] == 128
        assert registry.get(TRACE_ID).display.writes.latest() == bytes([0x00, 0x81, 0x80])

    @pytest.mark.parametrize("payload", [
        {"value": 256},
        {"value": -1},
        {"value": "bright"},
        {},
    ])
    def test_set_contrast_invalid(self, client, registry, payload):
        response = client.post(f"/api/devices/{TRACE_ID}/contrast", json=payload)
        assert response.status_code == 422
        assert registry.get(TRACE_ID).display.contrast_level == 26

    def test_set_invert(self, client, registry):
        response = client.post(f"/api/devices/{TRACE_ID}/invert", json={"value": True})
        assert response.status_code == 200
        assert response.json()["invert"] is True
        assert registry.get(TRACE_ID).display.writes.latest() == bytes([0x00, 0xA7])

    def test_mutation_unknown_device(self, client):
        response = client.post("/api/devices/00000000/invert", json={"value": True})
        assert response.status_code == 404

    def test_bus_failure(self, client, registry, flaky):
        """A failed bus write maps to 502 and leaves the state unchanged."""
        flaky.fail_on(1)
        response = client.post(f"/api/devices/{LINUX_ID}/invert", json={"value": True})
        assert response.status_code == 502
        assert "simulated bus failure" in response.json()["detail"]
        assert registry.get(LINUX_ID).display.invert is False

    def test_not_initialized(self, client, registry):
        registry.add(ManagedDisplay(SSD1306Display(RecordingTransport("uninit"))))
        device_id = registry.ids()[-1]
        response = client.post(f"/api/devices/{device_id}/invert", json={"value": True})
        assert response.status_code == 409
        assert "before init()" in response.json()["detail"]


# =============================================================================
# HTML and Image Tests
# =============================================================================

class TestPages:
    """Test the HTML pages and the screen image."""

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert f'href="/devices/{TRACE_ID}"' in response.text

    def test_device_page_before_frame(self, client):
        response = client.get(f"/devices/{TRACE_ID}")
        assert response.status_code == 200
        assert 'http-equiv="refresh"' in response.text
        assert "No frame received yet." in response.text

    def test_device_page_with_screen(self, client, registry):
        registry.get(TRACE_ID).push_frame(bytes([0xFF]) * 1024)
        text = client.get(f"/devices/{TRACE_ID}").text
        assert "#" * 128 in text
        assert f"/devices/{TRACE_ID}/screen.png" in text

    def test_device_page_unknown(self, client):
        assert client.get("/devices/00000000").status_code == 404

    def test_png_before_frame(self, client):
        response = client.get(f"/devices/{TRACE_ID}/screen.png")
        assert response.status_code == 404
        assert response.json()["detail"] == "no frame yet"

    def test_png(self, client, registry, checkerboard):
        registry.get(TRACE_ID).push_frame(checkerboard)
        response = client.get(f"/devices/{TRACE_ID}/screen.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(response.content)).size == (512, 256)

    def test_png_scale(self, client, registry):
        registry.get(TRACE_ID).push_frame(bytes(1024))
        response = client.get(f"/devices/{TRACE_ID}/screen.png", params={"scale": 1})
        assert Image.open(io.BytesIO(response.content)).size == (128, 64)

    @pytest.mark.parametrize("scale", [0, 17])
    def test_png_bad_scale(self, client, registry, scale):
        registry.get(TRACE_ID).push_frame(bytes(1024))
        response = client.get(f"/devices/{TRACE_ID}/screen.png", params={"scale": scale})
        assert response.status_code == 422

    def test_png_follows_invert(self, client, registry):
        device = registry.get(TRACE_ID)
        device.push_frame(bytes(1024))
        device.set_invert(True)
        response = client.get(f"/devices/{TRACE_ID}/screen.png", params={"scale": 1})
        img = Image.open(io.BytesIO(response.content)).convert("L")
        assert img.getpixel((0, 0)) == 255
