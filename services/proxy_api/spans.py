"""Proxy span attributes.

Sets proxy.* attributes on the ingress span (endpoint, outcome) so each
request can be found by what it proxied and how it ended.
"""

from opentelemetry import trace
from typing import Optional


def set_endpoint_attributes(
    span: trace.Span,
    endpoint: str,
    upstream_host: str,
    correlation_id: str,
):
    """Set routing attributes on the ingress span."""
    span.set_attribute("proxy.endpoint", endpoint)
    span.set_attribute("proxy.upstream.host", upstream_host)
    span.set_attribute("correlation_id", correlation_id)


def set_outcome_attributes(
    span: trace.Span,
    outcome: str,
    status_code: int,
    error_type: Optional[str] = None,
):
    """Record how the request ended."""
    span.set_attribute("proxy.outcome", outcome)
    span.set_attribute("proxy.response.status", status_code)
    if error_type:
        span.set_attribute("error.type", error_type)
