"""Async upstream client - one GET per call, JSON body out."""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from opentelemetry import trace

from shared.logging_config import redact_secrets


def _reject_constant(name: str):
    # NaN and Infinity are not JSON and cannot be re-encoded for callers
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_finite(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text}")
    return value


class UpstreamUnavailable(Exception):
    """The upstream could not be reached or returned a body that is not JSON.

    The message is for logs only; it can contain upstream detail that must not
    be shown to callers.
    """


@dataclass(frozen=True)
class UpstreamReply:
    """Status and decoded JSON body of an upstream response."""
    status_code: int
    data: Any


class UpstreamClient:
    """Thin wrapper around a shared httpx.AsyncClient.

    No retries and no explicit timeout: whatever the underlying client was
    built with applies.
    """

    def __init__(self, http: Optional[httpx.AsyncClient] = None):
        self._http = http or httpx.AsyncClient()
        self.tracer = trace.get_tracer(__name__)

    async def get_json(self, url: str, params: Dict[str, str]) -> UpstreamReply:
        """
        Issue a single GET and decode the JSON body.

        Args:
            url: Upstream URL without query string
            params: Query parameters, credential included

        Returns:
            UpstreamReply with the HTTP status and parsed JSON

        Raises:
            UpstreamUnavailable: On any transport error or undecodable body
        """
        with self.tracer.start_as_current_span("upstream_call") as span:
            span.set_attribute("http.method", "GET")
            span.set_attribute("peer.service", httpx.URL(url).host)

            try:
                resp = await self._http.get(url, params=params)
            except httpx.HTTPError as e:
                span.set_attribute("proxy.upstream.error_type", type(e).__name__)
                raise UpstreamUnavailable(
                    f"{type(e).__name__}: {redact_secrets(str(e))}"
                ) from e

            span.set_attribute("http.url", redact_secrets(str(resp.request.url)))
            span.set_attribute("proxy.upstream.status", resp.status_code)

            try:
                data = json.loads(
                    resp.content,
                    parse_constant=_reject_constant,
                    parse_float=_parse_finite,
                )
            except (ValueError, UnicodeDecodeError) as e:
                span.set_attribute("proxy.upstream.error_type", "invalid_json")
                raise UpstreamUnavailable(
                    f"non-JSON body from {resp.request.url.host} "
                    f"(status {resp.status_code})"
                ) from e

            return UpstreamReply(status_code=resp.status_code, data=data)

    async def aclose(self):
        await self._http.aclose()
