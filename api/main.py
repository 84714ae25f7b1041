from __future__ import annotations

import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from api.errors import ApiError, api_error_handler
from api.routes import get_api_router
from pipwatch import __version__
from pipwatch.core.config import Config
from pipwatch.core.logging import configure_logging


def create_app(config: Config | None = None) -> FastAPI:
    start = time.monotonic()
    config = config or Config.load(Path.cwd())
    configure_logging(config.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = start
        # Tests may pre-seed config / price_source / alert_sink.
        app.state.config = getattr(app.state, "config", None) or config
        yield

    openapi_tags = [
        {"name": "health", "description": "Liveness and version metadata."},
        {"name": "signals", "description": "Signal-annotated price window per strategy."},
        {"name": "trades", "description": "Performance stats per strategy."},
        {"name": "simulation", "description": "Position replay of a strategy's signals."},
        {"name": "monitor", "description": "Best-strategy selection and signal alerts."},
    ]

    app = FastAPI(
        title="pipwatch API",
        description="Hourly FX signals and simulated P&L",
        version=__version__,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(get_api_router(), prefix="/api/v1")
    return app


# Module-level app for uvicorn (e.g. `uvicorn api.main:app`).
app = create_app()
