"""
OpenTelemetry initialization and instrumentation for Product Service
"""
import os
import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor

logger = logging.getLogger(__name__)


def traces_endpoint() -> str:
    """
    Full OTLP/HTTP traces URL.

    An endpoint passed to the exporter is used verbatim, so the signal path
    is appended here.
    """
    base = os.environ.get('OTEL_EXPORTER_OTLP_ENDPOINT', 'http://localhost:4318')
    return f"{base.rstrip('/')}/v1/traces"


def init_telemetry(app) -> Optional[TracerProvider]:
    """
    Set up tracing for the app when ENABLE_TRACING is on.

    Spans go to the OTLP HTTP endpoint in OTEL_EXPORTER_OTLP_ENDPOINT; Flask
    requests and SQLAlchemy statements are instrumented.

    Returns:
        TracerProvider instance if tracing is enabled, None otherwise
    """
    if not app.config.get('ENABLE_TRACING'):
        logger.info("OpenTelemetry tracing is disabled")
        return None

    service_name = os.environ.get('NAME', 'product-service')
    service_version = os.environ.get('VERSION', '1.0.0')
    environment = os.environ.get('FLASK_ENV', 'development')

    resource = Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: service_version,
        "service.environment": environment,
    })
    provider = TracerProvider(resource=resource)

    otlp_endpoint = traces_endpoint()
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, timeout=30)))
    trace.set_tracer_provider(provider)

    LoggingInstrumentor().instrument(set_logging_format=False)
    FlaskInstrumentor().instrument_app(app)

    # Must run after db.init_app(app)
    from product_service.database import db
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(
            engine=db.engine,
            enable_commenter=True,
            commenter_options={"db_framework": "flask-sqlalchemy"}
        )

    logger.info(f"OpenTelemetry tracing initialized for {service_name} -> {otlp_endpoint}")
    return provider
