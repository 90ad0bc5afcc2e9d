"""FastAPI routes - /api/dog, /api/weather, /api/sample and /ops/endpoints."""

import time
import uuid
from typing import List, Optional

from fastapi import APIRouter, Request, Header
from fastapi.responses import JSONResponse
from opentelemetry import trace

from shared.models import DogImageResponse, EndpointInfo, ErrorResponse, WeatherResponse
from proxy_api.spans import set_endpoint_attributes

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


async def _proxy(name: str, request: Request, x_correlation_id: Optional[str]) -> JSONResponse:
    """Run the named endpoint's handler and wrap its result."""
    start_time = time.time()
    correlation_id = x_correlation_id or str(uuid.uuid4())

    handler = request.app.state.registry.get(name)

    set_endpoint_attributes(
        trace.get_current_span(),
        endpoint=name,
        upstream_host=handler.config.upstream_host,
        correlation_id=correlation_id,
    )

    result = await handler.handle(request.query_params)

    latency_ms = (time.time() - start_time) * 1000
    request.app.state.request_counter.add(1, {"endpoint": name, "outcome": result.outcome})
    request.app.state.latency_histogram.record(latency_ms, {"endpoint": name})

    return JSONResponse(
        status_code=result.status_code,
        content=result.body,
        headers={
            "X-Correlation-ID": correlation_id,
            "X-Latency-Ms": str(int(latency_ms)),
        },
    )


@router.get("/api/dog", response_model=DogImageResponse, responses=ERROR_RESPONSES)
async def dog_image(
    request: Request,
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-ID"),
):
    """Random dog image URL."""
    return await _proxy("dog", request, x_correlation_id)


@router.get("/api/weather", response_model=WeatherResponse, responses=ERROR_RESPONSES)
async def weather(
    request: Request,
    city: Optional[str] = None,
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-ID"),
):
    """
    Current weather for a city.

    Query:
        city: City name (required; 400 when missing or blank)

    Errors from the weather provider are returned with the provider's own
    status code and message.
    """
    return await _proxy("weather", request, x_correlation_id)


@router.get("/api/sample", responses=ERROR_RESPONSES)
async def sample(
    request: Request,
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-ID"),
):
    """Upstream sample JSON, passed through unchanged."""
    return await _proxy("sample", request, x_correlation_id)


@router.get("/ops/endpoints", response_model=List[EndpointInfo], tags=["operations"])
async def list_endpoints(request: Request):
    """List the proxied endpoints. Credentials are reported only as set/unset."""
    registry = request.app.state.registry
    endpoints = []
    for name in registry.available():
        config = registry.config(name)
        endpoints.append(EndpointInfo(
            name=name,
            path=config.path,
            upstream_host=config.upstream_host,
            required_params=[p.name for p in config.required],
            credential_configured=(
                config.credential_param is None or bool(config.credential)
            ),
        ))
    return endpoints
