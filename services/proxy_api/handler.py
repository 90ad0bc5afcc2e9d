"""Single-hop proxy handler.

One handler instance per endpoint. A request is validated, turned into one
upstream GET, and the reply is either projected into the endpoint's success
shape or mapped to a JSON error. Handlers hold only immutable configuration
and the shared upstream client, so concurrent requests never see each other.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import httpx
from opentelemetry import trace

from shared.upstream_client import UpstreamClient, UpstreamReply, UpstreamUnavailable
from proxy_api.errors import (
    MissingCredentialError,
    ProxyError,
    UpstreamLogicalError,
    UpstreamTransportError,
    ValidationError,
)
from proxy_api.spans import set_outcome_attributes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiredParam:
    """A query parameter that must be present and non-blank."""
    name: str
    label: str


@dataclass(frozen=True)
class EndpointConfig:
    """Everything that differs between proxied endpoints."""
    name: str
    path: str
    url: str
    project: Callable[[Any], Any]
    failure_message: str
    required: Tuple[RequiredParam, ...] = ()
    # Values are str.format templates over the validated params
    params_template: Mapping[str, str] = field(default_factory=dict)
    credential_param: Optional[str] = None
    credential: Optional[str] = field(default=None, repr=False)
    # Raises UpstreamLogicalError when the upstream reports a failure
    check_reply: Optional[Callable[[UpstreamReply], None]] = None

    @property
    def upstream_host(self) -> str:
        return httpx.URL(self.url).host


@dataclass(frozen=True)
class ProxyResult:
    """Outbound response: status, JSON body and the outcome label."""
    status_code: int
    body: Any
    outcome: str = "success"


class ProxyHandler:
    """Validates, calls the upstream once, and shapes the reply."""

    def __init__(self, config: EndpointConfig, client: UpstreamClient):
        self.config = config
        self.client = client

    async def handle(self, query: Mapping[str, str]) -> ProxyResult:
        """
        Produce exactly one outbound response for an inbound request.

        Args:
            query: Inbound query parameters

        Returns:
            ProxyResult; never raises for validation or upstream failures
        """
        span = trace.get_current_span()
        try:
            values = self.validate(query)
            params = self.build_params(values)
            reply = await self._call_upstream(params)
            body = self.interpret(reply)
        except ProxyError as e:
            set_outcome_attributes(span, e.outcome, e.status_code, type(e).__name__)
            result = ProxyResult(e.status_code, {"error": e.message}, e.outcome)
        else:
            set_outcome_attributes(span, "success", 200)
            result = ProxyResult(200, body)

        logger.info(
            "%s request finished with %d",
            self.config.name, result.status_code,
            extra={"proxy_attributes": {
                "proxy.endpoint": self.config.name,
                "proxy.outcome": result.outcome,
                "proxy.response.status": result.status_code,
            }},
        )
        return result

    def validate(self, query: Mapping[str, str]) -> Dict[str, str]:
        """Return the required params, stripped; raise on the first missing one."""
        values = {}
        for param in self.config.required:
            value = (query.get(param.name) or "").strip()
            if not value:
                logger.info(
                    "Rejected %s request: missing %s",
                    self.config.name, param.name,
                )
                raise ValidationError(f"{param.label} is required")
            values[param.name] = value
        return values

    def build_params(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Render the upstream query string, credential last."""
        params = {
            key: template.format(**values)
            for key, template in self.config.params_template.items()
        }
        if self.config.credential_param:
            if not self.config.credential:
                logger.error(
                    "Endpoint %s has no credential configured", self.config.name
                )
                raise MissingCredentialError(self.config.failure_message)
            params[self.config.credential_param] = self.config.credential
        return params

    def interpret(self, reply: UpstreamReply) -> Any:
        """Map an upstream reply to the success body, or raise a ProxyError."""
        if self.config.check_reply is not None:
            self.config.check_reply(reply)
        elif not 200 <= reply.status_code < 300:
            logger.warning(
                "Upstream for %s answered %d", self.config.name, reply.status_code
            )
            raise UpstreamLogicalError(self.config.failure_message, 502)

        try:
            return self.config.project(reply.data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(
                "Unexpected upstream body for %s: %s: %s",
                self.config.name, type(e).__name__, e,
            )
            raise UpstreamTransportError(self.config.failure_message) from e

    async def _call_upstream(self, params: Dict[str, str]) -> UpstreamReply:
        try:
            return await self.client.get_json(self.config.url, params)
        except UpstreamUnavailable as e:
            logger.warning("Upstream for %s unavailable: %s", self.config.name, e)
            raise UpstreamTransportError(self.config.failure_message) from e
