"""
OpenTelemetry Trace Context Management

Provides tracer setup, span creation and W3C trace context propagation into outbound HTTP headers.
"""

import logging
from typing import Dict, Any, MutableMapping

from opentelemetry import trace, propagate
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)

def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer
    
    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
    """
    # Create TracerProvider
    provider = TracerProvider(sampler=ALWAYS_ON)
    
    # Create OTLP exporter
    otlp_exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
    
    # Add batch span processor
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    
    # Set global TracerProvider
    trace.set_tracer_provider(provider)
    
    tracer = trace.get_tracer(service_name)
    
    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")
    
    return tracer

def inject_trace_headers(headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
    """Inject the active span's trace context into ``headers``
    
    Uses the globally configured propagator (W3C ``traceparent`` by default).
    Nothing is added when no valid span is active.
    
    Returns:
        The same mapping, for chaining
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return headers
    
    propagate.inject(headers)
    return headers

def create_span(name: str, attributes: Dict[str, Any] = None, tracer_name: str = __name__):
    """Create new span
    
    Args:
        name: Span name
        attributes: Span attributes
        tracer_name: Instrumentation scope the span is reported under
        
    Returns:
        Context manager yielding the span
    """
    tracer = trace.get_tracer(tracer_name)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=trace.SpanKind.CLIENT,
    )
