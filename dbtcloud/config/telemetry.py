"""Logging and tracing for resource operations.

Every log record carries the resource type, composite id and operation of
the call that emitted it, plus the active trace and span ids. Call
:func:`configure_telemetry` once at process start (``dbtcloud.main`` does).
"""

from __future__ import annotations

import contextvars
import logging
from dataclasses import dataclass, replace

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger.json import JsonFormatter

from dbtcloud.config.settings import Settings, get_settings

_CORRELATION_FIELDS = ("resource_type", "resource_id", "operation")


@dataclass(frozen=True)
class _OperationContext:
    resource_type: str = ""
    resource_id: str = ""
    operation: str = ""


_operation_ctx: contextvars.ContextVar[_OperationContext] = contextvars.ContextVar(
    "operation_ctx",
    default=_OperationContext(),
)


def set_correlation_context(
    *,
    resource_type: str | None = None,
    resource_id: str | None = None,
    operation: str | None = None,
) -> None:
    """Update the correlation fields of the current context; ``None`` keeps a field as is."""
    changes = {
        name: value
        for name, value in zip(_CORRELATION_FIELDS, (resource_type, resource_id, operation))
        if value is not None
    }
    _operation_ctx.set(replace(_operation_ctx.get(), **changes))


class CorrelationFilter(logging.Filter):
    """Copies the current operation context onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _operation_ctx.get()
        for name in _CORRELATION_FIELDS:
            setattr(record, name, getattr(ctx, name))
        return True


def _tracer_provider(settings: Settings) -> TracerProvider:
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.OTEL_SERVICE_NAME,
                "service.version": settings.APP_COMMIT_SHA or "unknown",
            }
        )
    )
    exporter = OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def _json_handler() -> logging.Handler:
    fields = " ".join(f"%({name})s" for name in _CORRELATION_FIELDS)
    formatter = JsonFormatter(
        fmt=f"%(asctime)s %(levelname)s %(name)s %(message)s "
        f"%(otelTraceID)s %(otelSpanID)s {fields}",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "otelTraceID": "trace_id",
            "otelSpanID": "span_id",
        },
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationFilter())
    return handler


_configured = False


def configure_telemetry(settings: Settings | None = None) -> None:
    """Install the OTLP tracer provider and the JSON log handler.

    Reads ``OTEL_SERVICE_NAME``, ``APP_COMMIT_SHA``,
    ``OTEL_EXPORTER_OTLP_ENDPOINT`` and ``LOG_LEVEL`` from *settings*
    (default: :func:`get_settings`). Only the first call has any effect.
    """
    global _configured
    if _configured:
        return
    _configured = True

    settings = settings or get_settings()

    trace.set_tracer_provider(_tracer_provider(settings))
    # Adds otelTraceID / otelSpanID to every record
    LoggingInstrumentor().instrument(set_logging_format=False)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_json_handler())
    root.setLevel(settings.LOG_LEVEL.upper())
