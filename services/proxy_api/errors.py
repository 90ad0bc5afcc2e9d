"""Proxy error taxonomy.

Every error carries the HTTP status and the message the caller is allowed to
see. The handler converts them to ``{"error": message}`` bodies; nothing here
is raised past the handler boundary.
"""


class ProxyError(Exception):
    """Base class for failures mapped to a JSON error response."""
    status_code = 500
    outcome = "error"

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ProxyError):
    """A required query parameter is missing or empty."""
    status_code = 400
    outcome = "validation_error"


class UpstreamTransportError(ProxyError):
    """The upstream could not be reached, or its body could not be used."""
    status_code = 500
    outcome = "upstream_transport_error"


class UpstreamLogicalError(ProxyError):
    """The upstream answered but reported a failure of its own."""
    status_code = 502
    outcome = "upstream_logical_error"


class MissingCredentialError(ProxyError):
    """An endpoint needs a credential the process was started without."""
    status_code = 500
    outcome = "missing_credential"
