"""FastAPI application factory for the telemetry service."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_telemetry import __version__
from campus_telemetry.services import Services

logger = logging.getLogger(__name__)


def create_app(services: Services) -> FastAPI:
    """Create and configure the FastAPI application.

    The app's lifespan owns the broker consumer and broadcast scheduler
    tasks, so they run exactly as long as the server does.
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        tasks = [
            asyncio.create_task(services.broker.run(), name="broker"),
            asyncio.create_task(services.scheduler.run(), name="scheduler"),
        ]
        try:
            yield
        finally:
            services.scheduler.stop()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    config = services.config
    app = FastAPI(
        title=config.server.name,
        description="Synthetic campus energy telemetry",
        version=__version__,
        lifespan=lifespan,
    )

    # Store services in app state for access in routes
    app.state.services = services
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    from campus_telemetry.api.routes.catalog import router as catalog_router
    from campus_telemetry.api.routes.energy import router as energy_router
    from campus_telemetry.api.routes.health import router as health_router
    from campus_telemetry.api.routes.sse import router as sse_router
    from campus_telemetry.api.routes.websocket import router as websocket_router

    app.include_router(health_router, prefix="/api")
    app.include_router(catalog_router, prefix="/api")
    app.include_router(energy_router, prefix="/api")
    app.include_router(sse_router, prefix="/api")
    app.include_router(websocket_router)

    return app
