# wikiportraits/shared/observability.py
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from wikiportraits import __version__
from wikiportraits.shared.config import settings

# Orchestrator health checks would drown the request traces
UNTRACED_URLS = "health/live,health/ready"


def service_resource() -> Resource:
    return Resource.create(attributes={
        "service.name": settings.OTEL_SERVICE_NAME,
        "service.version": __version__,
        "deployment.environment": settings.APP_ENV.value,
    })


def setup_observability(app: FastAPI) -> TracerProvider:
    """
    Installs a TracerProvider tagged with the service identity and
    instruments the app so each request (health checks aside) gets a span.
    Spans are printed to the console only when DEBUG is on.
    """
    provider = TracerProvider(resource=service_resource())
    if settings.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider, excluded_urls=UNTRACED_URLS)
    return provider


def get_tracer(name: str):
    """
    Tracer for manual spans in use cases.

        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("use_case.upload_image"):
            ...
    """
    return trace.get_tracer(name)
