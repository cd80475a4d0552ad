"""Town Map Service Entry Point.

This module provides the FastAPI application serving the interactive
map page and the control endpoints its buttons and slider call. It's a
thin wrapper that loads configuration and delegates to the orchestrator.
"""

import logging
import os
import threading
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from src.core.config import Config, validate_config
from src.core.static_map import create_snapshot_config
from src.orchestrator import CycleResult, Orchestrator
from src.shell.animator import LeafletPulseAnimator, NullAnimator
from src.shell.config_loader import load_config, load_config_from_env
from src.shell.map_renderer import LeafletPageRenderer
from src.shell.static_map_client import StaticMapClient


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ===== Response Models =====

class MarkerOut(BaseModel):
    town: str
    county: str
    population: float | None
    lat: float
    lng: float
    radius: float


class StateOut(BaseModel):
    town_count: int
    count_display: str
    loading: bool
    render_version: int
    markers: list[MarkerOut]
    notifications: list[str]


class CycleOut(BaseModel):
    status: str
    sequence: int
    town_count: int
    towns_fetched: int
    markers_drawn: int
    skipped: list[str]
    applied: bool
    error: str | None = None


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("TOWNS_API_URL"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _cycle_response(result: CycleResult) -> CycleOut:
    return CycleOut(
        status="success" if result.success else "error",
        sequence=result.sequence,
        town_count=result.town_count,
        towns_fetched=result.towns_fetched,
        markers_drawn=result.markers_drawn,
        skipped=result.skipped,
        applied=result.applied,
        error=result.error,
    )


def create_app(
    config: Config | None = None,
    orchestrator: Orchestrator | None = None,
    renderer: LeafletPageRenderer | None = None,
    snapshot_client: StaticMapClient | None = None,
    initial_load: bool = True,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration (loaded if not provided)
        orchestrator: Orchestrator (created if not provided)
        renderer: Page renderer (created if not provided)
        snapshot_client: Snapshot client (created if not provided)
        initial_load: Fetch towns once at startup

    Returns:
        Configured FastAPI app
    """
    config = config or _get_config()

    validation = validate_config(config)
    for error in validation.errors:
        if error.severity == "error":
            logger.error("Config error in %s: %s", error.field, error.message)
        else:
            logger.warning("Config warning in %s: %s", error.field, error.message)

    orchestrator = orchestrator or Orchestrator(config)
    renderer = renderer or LeafletPageRenderer(
        map_config=config.map,
        controls_config=config.controls,
        animator=(
            LeafletPulseAnimator(config.pulse)
            if config.pulse.enabled
            else NullAnimator()
        ),
    )
    snapshot_client = snapshot_client or StaticMapClient()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if initial_load:
            # Initial fetch runs in the background
            threading.Thread(
                target=orchestrator.fetch_and_render,
                name="initial-town-load",
                daemon=True,
            ).start()
        yield
        orchestrator.shutdown()

    app = FastAPI(
        title="UK Town Map",
        description="Interactive map of towns sized by population",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator
    app.state.renderer = renderer

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        """Serve the interactive map page."""
        return HTMLResponse(renderer.render_html(orchestrator.state))

    @app.get("/api/state", response_model=StateOut)
    def get_state() -> dict[str, Any]:
        """Current map state; pending notifications are drained."""
        state = orchestrator.state
        return {
            "town_count": state.town_count,
            "count_display": orchestrator.ui.count_display.text,
            "loading": orchestrator.ui.loading.visible,
            "render_version": state.render_version,
            "markers": [
                {
                    "town": m.town.name,
                    "county": m.town.county,
                    "population": m.town.population,
                    "lat": m.latitude,
                    "lng": m.longitude,
                    "radius": m.radius,
                }
                for m in state.markers
            ],
            "notifications": orchestrator.ui.notifications.drain(),
        }

    @app.post("/api/reload", response_model=CycleOut)
    def reload() -> CycleOut:
        """Reload button: rerun the fetch with the current town count."""
        return _cycle_response(orchestrator.reload())

    @app.post("/api/slider", status_code=202)
    def slider(value: int = Query(...)) -> dict[str, Any]:
        """Slider input: debounced count update and fetch."""
        controls = config.controls
        if not controls.slider_min <= value <= controls.slider_max:
            raise HTTPException(
                status_code=422,
                detail=(
                    f"Town count must be between {controls.slider_min} "
                    f"and {controls.slider_max}"
                ),
            )
        orchestrator.on_slider_input(value)
        return {"status": "accepted", "value": value}

    @app.get("/snapshot.png")
    def snapshot() -> Response:
        """Static PNG of the current marker set."""
        snapshot_config = create_snapshot_config(
            orchestrator.state.markers,
            center_latitude=config.map.center_latitude,
            center_longitude=config.map.center_longitude,
            zoom=config.map.zoom,
        )
        result = snapshot_client.generate_map(snapshot_config)
        if not result.success:
            raise HTTPException(status_code=502, detail=result.error)
        return Response(content=result.image_bytes, media_type="image/png")

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


# For local testing
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(),
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
    )
