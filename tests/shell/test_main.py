"""Tests for the FastAPI service.

Shell collaborators are mocked; requests go through FastAPI's TestClient.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from src.core.config import Config, ControlsConfig
from src.core.town import parse_towns
from src.main import create_app
from src.orchestrator import Orchestrator
from src.shell.static_map_client import MapImageResult
from src.shell.towns_client import TownsHTTPError


SAMPLE_RECORDS = [
    {"Town": "A", "County": "X", "Population": 100, "lat": 51, "lng": -1},
    {"Town": "B", "County": "Y", "lat": 0, "lng": 0},
]


@pytest.fixture
def config():
    return Config(controls=ControlsConfig(initial_town_count=2, slider_min=1, slider_max=100))


@pytest.fixture
def mock_towns_client():
    client = Mock()
    client.fetch_towns.return_value = parse_towns(SAMPLE_RECORDS)
    return client


@pytest.fixture
def mock_snapshot_client():
    client = Mock()
    client.generate_map.return_value = MapImageResult(success=True, image_bytes=b"PNG")
    return client


@pytest.fixture
def orchestrator(config, mock_towns_client, timers):
    return Orchestrator(config, towns_client=mock_towns_client, timer_factory=timers)


@pytest.fixture
def client(config, orchestrator, mock_snapshot_client):
    app = create_app(
        config=config,
        orchestrator=orchestrator,
        snapshot_client=mock_snapshot_client,
        initial_load=False,
    )
    return TestClient(app)


class TestIndex:
    def test_serves_map_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'id="townSlider"' in response.text

    def test_page_shows_drawn_markers(self, client, orchestrator):
        orchestrator.fetch_and_render()

        response = client.get("/")

        assert "<b>A</b>" in response.text


class TestState:
    def test_initial_state(self, client):
        body = client.get("/api/state").json()

        assert body == {
            "town_count": 2,
            "count_display": "2",
            "loading": False,
            "render_version": 0,
            "markers": [],
            "notifications": [],
        }

    def test_state_after_reload(self, client):
        client.post("/api/reload")

        body = client.get("/api/state").json()

        assert body["render_version"] == 1
        assert body["markers"] == [{
            "town": "A",
            "county": "X",
            "population": 100.0,
            "lat": 51.0,
            "lng": -1.0,
            "radius": 0.5,
        }]

    def test_notifications_are_drained(self, client, mock_towns_client):
        mock_towns_client.fetch_towns.side_effect = TownsHTTPError("HTTP error! status: 500", 500)
        client.post("/api/reload")

        first = client.get("/api/state").json()
        second = client.get("/api/state").json()

        assert first["notifications"] == ["Unable to load towns. Please try again later."]
        assert second["notifications"] == []


class TestReload:
    def test_reload_runs_cycle(self, client, mock_towns_client):
        response = client.post("/api/reload")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["markers_drawn"] == 1
        assert body["skipped"] == ["B"]
        mock_towns_client.fetch_towns.assert_called_once_with(2)

    def test_reload_failure_reports_error(self, client, mock_towns_client):
        mock_towns_client.fetch_towns.side_effect = TownsHTTPError("HTTP error! status: 503", 503)

        body = client.post("/api/reload").json()

        assert body["status"] == "error"
        assert "503" in body["error"]


class TestSlider:
    def test_slider_is_debounced(self, client, mock_towns_client, timers):
        for value in (5, 6, 7):
            response = client.post("/api/slider", params={"value": value})
            assert response.status_code == 202

        mock_towns_client.fetch_towns.assert_not_called()

        timers.latest.fire()

        mock_towns_client.fetch_towns.assert_called_once_with(7)
        body = client.get("/api/state").json()
        assert body["town_count"] == 7
        assert body["count_display"] == "7"

    @pytest.mark.parametrize("value", [0, 101])
    def test_out_of_range_rejected(self, client, value):
        response = client.post("/api/slider", params={"value": value})

        assert response.status_code == 422

    def test_non_integer_rejected(self, client):
        response = client.post("/api/slider", params={"value": "many"})

        assert response.status_code == 422


class TestSnapshot:
    def test_returns_png(self, client):
        response = client.get("/snapshot.png")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"PNG"

    def test_failure_is_bad_gateway(self, client, mock_snapshot_client):
        mock_snapshot_client.generate_map.return_value = MapImageResult(
            success=False,
            error="tile server down",
        )

        response = client.get("/snapshot.png")

        assert response.status_code == 502


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
