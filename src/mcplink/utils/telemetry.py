"""OpenTelemetry tracing helpers for mcplink.

The client calls ``get_tracer()`` unconditionally.  Until the SDK is
configured the API hands back no-op tracers, so spans cost next to nothing.

Usage::

    from mcplink.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcp.request") as span:
        span.set_attribute(ATTR_METHOD, "tools/list")

To export spans, call :func:`configure_telemetry` once at startup with the
config file's ``telemetry`` section
(requires the ``otel`` extra: ``pip install mcplink[otel]``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from mcplink.config import TelemetrySettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Semantic attribute keys used by the client instrumentation
# ---------------------------------------------------------------------------

ATTR_SERVER_URL = "mcp.server.url"
ATTR_METHOD = "mcp.method"
ATTR_REQUEST_ID = "mcp.request_id"
ATTR_SESSION_ID = "mcp.session_id"
ATTR_OUTCOME = "mcp.outcome"
ATTR_HTTP_STATUS = "mcp.http.status_code"
ATTR_TOOL_NAME = "mcp.tool.name"
ATTR_TOOL_IS_ERROR = "mcp.tool.is_error"

_INSTRUMENTATION_NAME = "mcplink"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(settings: TelemetrySettings, *, service_name: str = "mcplink") -> None:
    """Install an SDK tracer provider for *settings* (requires ``mcplink[otel]``).

    Spans go to the OTLP/gRPC collector at ``settings.otlp_endpoint`` when
    one is configured, otherwise to stdout.

    Raises
    ------
    ImportError
        If the SDK, or the OTLP exporter an endpoint needs, is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = "opentelemetry-sdk is required for tracing. Install it with: pip install mcplink[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    if settings.otlp_endpoint:
        processor = BatchSpanProcessor(_otlp_exporter(settings.otlp_endpoint))
    else:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

        processor = SimpleSpanProcessor(ConsoleSpanExporter())
    provider.add_span_processor(processor)  # pyright: ignore[reportUnknownMemberType]
    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]
    logger.debug("Tracing enabled for %s (otlp=%s)", service_name, settings.otlp_endpoint)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = "opentelemetry-exporter-otlp is required for OTLP export. Install it with: pip install mcplink[otel]"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
