"""Pydantic models for proxy responses."""

from pydantic import BaseModel
from typing import Any, Dict, List


class ErrorResponse(BaseModel):
    """Error body returned on every failure path."""
    error: str


class DogImageResponse(BaseModel):
    """Dog image projection."""
    imageUrl: str  # noqa: N815


class WeatherResponse(BaseModel):
    """Current weather projection."""
    city: str
    temperature: float
    description: str


class EndpointInfo(BaseModel):
    """Registered proxy endpoint, as listed by /ops/endpoints."""
    name: str
    path: str
    upstream_host: str
    required_params: List[str]
    credential_configured: bool


class ProbeResponse(BaseModel):
    status: str
    service: str
    details: Dict[str, Any] = {}
