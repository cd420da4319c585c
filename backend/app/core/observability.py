from __future__ import annotations

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from sentry_sdk import init as sentry_init
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from .config import Settings

logger = logging.getLogger(__name__)


def configure_observability(app: FastAPI, settings: Settings) -> Instrumentator:
    if settings.sentry_dsn:
        sentry_init(dsn=settings.sentry_dsn, release=settings.app_version)
        app.add_middleware(SentryAsgiMiddleware)
        logger.info("Sentry error reporting enabled")

    if settings.otel_endpoint:
        resource = Resource.create({"service.name": settings.app_name})
        provider = TracerProvider(resource=resource)
        processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_endpoint))
        provider.add_span_processor(processor)
        trace.set_tracer_provider(provider)
        logger.info("OpenTelemetry tracing configured", extra={"endpoint": settings.otel_endpoint})

    # One registry per application so several apps can live in one process.
    instrumentator = Instrumentator(
        excluded_handlers=[settings.prometheus_endpoint],
        registry=CollectorRegistry(),
    ).instrument(app)
    instrumentator.expose(app, endpoint=settings.prometheus_endpoint, include_in_schema=False)
    return instrumentator
