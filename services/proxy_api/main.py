"""API Proxy - single-hop JSON proxy for dog images, weather and sample data."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import Settings
from shared.models import ProbeResponse
from shared.telemetry import setup_telemetry
from shared.upstream_client import UpstreamClient
from proxy_api.routes import router as proxy_router
from proxy_api.routing import EndpointRegistry

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the proxy app. Settings default to the process environment."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Default httpx timeouts apply; no retries
        upstream = UpstreamClient(httpx.AsyncClient())
        app.state.registry = EndpointRegistry(settings, upstream)
        logger.info("Proxy started with endpoints %s", app.state.registry.available())
        try:
            yield
        finally:
            await upstream.aclose()

    app = FastAPI(
        title="API Proxy",
        description="Single-hop proxy for public JSON APIs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _, meter = setup_telemetry(app, settings)

    app.state.settings = settings
    app.state.request_counter = meter.create_counter("proxy_requests_total")
    app.state.latency_histogram = meter.create_histogram("proxy_request_duration_ms")

    if settings.openweather_api_key is None:
        logger.warning("OPENWEATHER_API_KEY is not set; /api/weather will fail")

    app.include_router(proxy_router)

    # --------------- Health endpoints ---------------
    @app.get("/startup", response_model=ProbeResponse)
    async def startup():
        """Startup probe - returns 200 once app is alive."""
        return ProbeResponse(status="started", service=settings.service_name)

    @app.get("/health", response_model=ProbeResponse)
    async def health():
        """Liveness probe - returns 200 if event loop is responsive."""
        return ProbeResponse(status="healthy", service=settings.service_name)

    @app.get("/ready", response_model=ProbeResponse)
    async def ready():
        """Readiness probe - reports which endpoints are registered."""
        return ProbeResponse(
            status="ready",
            service=settings.service_name,
            details={"endpoints": app.state.registry.available()},
        )

    return app


def run():
    """Console entry point: serve the proxy with uvicorn on $PORT."""
    settings = Settings.from_env()
    uvicorn.run(
        lambda: create_app(settings),
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
