"""FastAPI application: CORS, session lifecycle, route registration, health check."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neowatch.config import Settings
from neowatch.health import latency_grade
from neowatch.models import HealthResponse, HealthSampleModel
from neowatch.routes import get_session
from neowatch.routes.neos import router as neos_router
from neowatch.routes.simulation import router as simulation_router
from neowatch.session import DashboardSession
from neowatch.sorting import use_environment_collation

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session: DashboardSession | None = None,
    autostart: bool = True,
) -> FastAPI:
    """Build the app. With autostart the probe timer, animation loop and an
    initial feed fetch start with the app and stop with it."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session = session or DashboardSession(settings)
        initial_fetch: asyncio.Task | None = None
        if autostart:
            app.state.session.start()
            initial_fetch = asyncio.create_task(app.state.session.refresh_feed())
        try:
            yield
        finally:
            if initial_fetch is not None and not initial_fetch.done():
                initial_fetch.cancel()
            await app.state.session.close()

    app = FastAPI(
        title="NEO Watch",
        description="Near-Earth object risk manifest, health probe and orbital animation",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(neos_router)
    app.include_router(simulation_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check(session: DashboardSession = Depends(get_session)):
        sample = session.probe.sample
        return HealthResponse(
            status="ok",
            api=HealthSampleModel(
                status=sample.status,
                latency_ms=sample.latency_ms,
                grade=latency_grade(sample.latency_ms),
            ),
        )

    return app


def _configure() -> FastAPI:
    # Load .env before anything else
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    use_environment_collation()
    return create_app()


app = _configure()
