"""
OpenTelemetry Metrics Collection

Provides functionality for collecting and exporting client request metrics.
"""

import logging
import threading
from typing import Any, Dict, Tuple

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

# Instruments cached per (kind, meter name, instrument name), shared across threads
_instruments: Dict[Tuple[str, str, str], Any] = {}
_instruments_lock = threading.Lock()

def setup_metrics(service_name: str, otlp_endpoint: str = "localhost:4317", export_interval_ms: int = 5000):
    """Configure OpenTelemetry metrics collection
    
    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds
    """
    otlp_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=otlp_endpoint),
        export_interval_millis=export_interval_ms
    )
    
    provider = MeterProvider(metric_readers=[otlp_reader])
    metrics.set_meter_provider(provider)
    
    meter = metrics.get_meter(service_name)
    
    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")
    
    return meter

def _get_instrument(kind: str, name: str, meter_name: str, unit: str):
    key = (kind, meter_name, name)
    instrument = _instruments.get(key)
    if instrument is not None:
        return instrument
    
    with _instruments_lock:
        instrument = _instruments.get(key)
        if instrument is None:
            meter = metrics.get_meter(meter_name)
            if kind == "counter":
                instrument = meter.create_counter(name=name, description=f"RPC client count of {name}", unit=unit)
            else:
                instrument = meter.create_histogram(name=name, description=f"RPC client latency of {name}", unit=unit)
            _instruments[key] = instrument
    return instrument

def get_counter(name: str, meter_name: str = __name__):
    """Get or create the counter ``name`` on meter ``meter_name``"""
    return _get_instrument("counter", name, meter_name, "1")

def get_histogram(name: str, meter_name: str = __name__):
    """Get or create the millisecond histogram ``name`` on meter ``meter_name``"""
    return _get_instrument("histogram", name, meter_name, "ms")

def increment_counter(name: str, amount: int = 1, attributes: Dict[str, Any] = None,
                      meter_name: str = __name__):
    """Increment counter value
    
    Args:
        name: Counter name
        amount: Amount to increment
        attributes: Attribute labels
        meter_name: Meter the counter belongs to, usually the service name
    """
    get_counter(name, meter_name).add(amount, attributes or {})

def record_latency(name: str, value_ms: float, attributes: Dict[str, Any] = None,
                   meter_name: str = __name__):
    """Record a latency in milliseconds on histogram ``name``"""
    get_histogram(name, meter_name).record(value_ms, attributes or {})
