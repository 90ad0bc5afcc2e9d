"""Structured logging configuration with OTEL context propagation.

JSON formatter that injects trace_id and span_id from the current
OpenTelemetry context into every log record so proxy logs can be joined
with upstream-call traces. Credential query parameters are masked in every
message before it is emitted; httpx logs full request URLs at INFO.
"""

import json
import logging
import re
from datetime import datetime, timezone

from opentelemetry import trace

SECRET_PARAMS = ("appid", "api_key", "apikey", "key", "token")

_SECRET_RE = re.compile(
    r"(?P<name>\b(?:%s))=(?P<value>[^&\s\"']+)" % "|".join(SECRET_PARAMS),
    re.IGNORECASE,
)


def redact_secrets(text: str) -> str:
    """Mask the value of any credential-looking query parameter."""
    return _SECRET_RE.sub(lambda m: f"{m.group('name')}=***", text)


class OTelJSONFormatter(logging.Formatter):
    """JSON formatter with OTel trace correlation."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        span = trace.get_current_span()
        ctx = span.get_span_context() if span else None

        log_dict = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "severity": record.levelname,
            "message": redact_secrets(record.getMessage()),
            "logger": record.name,
            "service.name": self.service_name,
        }

        if ctx and ctx.is_valid:
            log_dict["trace_id"] = format(ctx.trace_id, "032x")
            log_dict["span_id"] = format(ctx.span_id, "016x")

        if hasattr(record, "proxy_attributes"):
            log_dict.update(record.proxy_attributes)

        if record.exc_info:
            log_dict["error.type"] = record.exc_info[0].__name__
            log_dict["error.message"] = redact_secrets(str(record.exc_info[1]))

        return json.dumps(log_dict)


def configure_logging(service_name: str, level: str = "INFO"):
    """Configure JSON logging with OTel correlation."""
    handler = logging.StreamHandler()
    handler.setFormatter(OTelJSONFormatter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    return root
