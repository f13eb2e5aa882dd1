"""
OpenTelemetry tracing for the catalog service.

Modules take their tracer from ``trace.get_tracer(__name__)``; until
``setup_opentelemetry`` installs a provider those tracers are no-ops.
"""

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "dataset-catalog-api"
DEFAULT_ENDPOINT = "http://localhost:4318"


def tracing_enabled() -> bool:
    return os.getenv("OTEL_TRACES_ENABLED", "true").lower() in ("true", "1", "yes")


def setup_opentelemetry() -> Optional[TracerProvider]:
    """
    Install an OTLP/HTTP tracer provider.

    Environment:
    - OTEL_TRACES_ENABLED: false turns tracing off (default: true)
    - OTEL_SERVICE_NAME: Service name (default: dataset-catalog-api)
    - OTEL_EXPORTER_OTLP_ENDPOINT: Collector base URL (default: http://localhost:4318)

    Returns:
        The installed provider, or None when tracing is off or setup failed
    """
    if not tracing_enabled():
        logger.info("OpenTelemetry tracing is disabled")
        return None

    service_name = os.getenv("OTEL_SERVICE_NAME", DEFAULT_SERVICE_NAME)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_ENDPOINT).rstrip("/")

    try:
        provider = TracerProvider(
            resource=Resource(attributes={SERVICE_NAME: service_name})
        )
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
        )
        trace.set_tracer_provider(provider)

        # Adds trace and span ids to log records
        LoggingInstrumentor().instrument(set_logging_format=False)
    except Exception as e:
        logger.warning("Failed to initialize OpenTelemetry: %s", str(e))
        return None

    logger.info("OpenTelemetry initialized: service=%s, endpoint=%s", service_name, endpoint)
    return provider


def shutdown_opentelemetry(provider: Optional[TracerProvider]) -> None:
    """Flush pending spans before the process exits."""
    if provider is None:
        return
    try:
        provider.shutdown()
    except Exception as e:
        logger.warning("Failed to flush traces on shutdown: %s", str(e))
