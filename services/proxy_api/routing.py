"""Endpoint registry - maps endpoint names to their proxy handlers."""

from typing import Dict, List, Optional

from shared.config import Settings
from shared.upstream_client import UpstreamClient
from proxy_api.endpoints import build_endpoints
from proxy_api.handler import EndpointConfig, ProxyHandler


class EndpointRegistry:
    """Holds one ProxyHandler per configured endpoint."""

    def __init__(self, settings: Settings, client: UpstreamClient):
        self.handlers: Dict[str, ProxyHandler] = {
            name: ProxyHandler(config, client)
            for name, config in build_endpoints(settings).items()
        }

    def get(self, name: str) -> Optional[ProxyHandler]:
        """Get the handler for an endpoint."""
        return self.handlers.get(name)

    def config(self, name: str) -> Optional[EndpointConfig]:
        handler = self.handlers.get(name)
        return handler.config if handler else None

    def available(self) -> List[str]:
        """Return the names of all registered endpoints."""
        return list(self.handlers.keys())
