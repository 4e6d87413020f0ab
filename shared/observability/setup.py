import logging
import uuid

import structlog
from fastapi import FastAPI, Request
from prometheus_fastapi_instrumentator import Instrumentator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME as RESOURCE_SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from shared.config.settings import LOG_LEVEL, OTLP_ENDPOINT

# Scrape and liveness traffic stays out of the latency histograms
UNINSTRUMENTED_PATHS = ["/metrics", "/api/health"]


def attach_trace_context(logger, method_name, event_dict):
    """Copy the active span's ids onto the log event so lines can be joined to traces."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = trace.format_trace_id(span_context.trace_id)
        event_dict["span_id"] = trace.format_span_id(span_context.span_id)
    return event_dict


def configure_logging(service_name: str):
    level = logging.getLevelName(LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            attach_trace_context,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)


def configure_tracing(app: FastAPI, service_name: str):
    provider = TracerProvider(resource=Resource.create({RESOURCE_SERVICE_NAME: service_name}))
    if OTLP_ENDPOINT:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True))
        )
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app, excluded_urls=",".join(UNINSTRUMENTED_PATHS))


def configure_request_context(app: FastAPI, service_name: str):
    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            service=service_name,
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def configure_metrics(app: FastAPI):
    Instrumentator(excluded_handlers=UNINSTRUMENTED_PATHS).instrument(app).expose(
        app, include_in_schema=False
    )


def setup_observability(app: FastAPI, service_name: str):
    """
    Wire JSON logging, request-scoped log context, OTLP tracing and the
    Prometheus /metrics endpoint onto the app. Call once, at import of main.py.
    """
    configure_logging(service_name)
    configure_request_context(app, service_name)
    configure_tracing(app, service_name)
    configure_metrics(app)
