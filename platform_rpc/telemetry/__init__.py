"""
OpenTelemetry Integration Module

Provides distributed tracing and metrics collection capabilities:
- tracer: Tracer setup, spans, and trace context propagation into HTTP headers
- metrics: Client request counters and latency histograms
"""

from .tracer import (
    setup_tracer,
    inject_trace_headers,
    create_span,
)
from .metrics import (
    setup_metrics,
    increment_counter,
    record_latency,
)

__all__ = [
    "setup_tracer",
    "inject_trace_headers",
    "create_span",
    "setup_metrics",
    "increment_counter",
    "record_latency",
]
