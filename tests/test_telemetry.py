"""
Tests for OpenTelemetry integration
"""
import threading
from unittest.mock import MagicMock, patch

from opentelemetry.sdk.trace import TracerProvider

from platform_rpc.telemetry import metrics as rpc_metrics
from platform_rpc.telemetry.tracer import create_span, inject_trace_headers, setup_tracer


class TestTracer:
    """Test tracer setup and trace header propagation"""

    def test_no_span_no_headers(self):
        """Test nothing is injected without an active span"""
        assert inject_trace_headers({"Accept": "application/json"}) == {"Accept": "application/json"}

    def test_active_span_injects_traceparent(self):
        """Test the W3C traceparent header carries the active span"""
        tracer = TracerProvider().get_tracer(__name__)
        with tracer.start_as_current_span("caller") as span:
            headers = inject_trace_headers({})

        trace_id = format(span.get_span_context().trace_id, "032x")
        assert headers["traceparent"].split("-")[1] == trace_id

    def test_create_span_is_context_manager(self):
        with create_span("rpc.test", {"http.url": "https://rpc.example.com"}):
            pass

    def test_create_span_uses_tracer_name(self):
        """Test spans are reported under the requested tracer name"""
        with patch("platform_rpc.telemetry.tracer.trace.get_tracer") as mock_get_tracer:
            create_span("rpc.test", tracer_name="wallet.rpc")

        mock_get_tracer.assert_called_once_with("wallet.rpc")
        mock_get_tracer.return_value.start_as_current_span.assert_called_once()

    def test_setup_tracer(self):
        """Test the provider is configured with an OTLP exporter"""
        with patch("platform_rpc.telemetry.tracer.OTLPSpanExporter") as mock_exporter, \
                patch("platform_rpc.telemetry.tracer.BatchSpanProcessor") as mock_processor, \
                patch("platform_rpc.telemetry.tracer.trace.set_tracer_provider") as mock_set_provider:
            tracer = setup_tracer("test-service", otlp_endpoint="collector:4317")

        mock_exporter.assert_called_once_with(endpoint="collector:4317")
        mock_processor.assert_called_once_with(mock_exporter.return_value)
        mock_set_provider.assert_called_once()
        assert tracer is not None


class TestMetrics:
    """Test metric instruments"""

    def test_counter_cached(self):
        """Test counters are created once per name and meter"""
        first = rpc_metrics.get_counter("rpc.test.counter")
        second = rpc_metrics.get_counter("rpc.test.counter")
        other_meter = rpc_metrics.get_counter("rpc.test.counter", meter_name="wallet.rpc")
        assert first is second
        assert other_meter is not first

    def test_instruments_created_once_across_threads(self):
        """Test concurrent lookups share a single instrument"""
        seen = []
        threads = [
            threading.Thread(target=lambda: seen.append(rpc_metrics.get_histogram("rpc.test.threaded")))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert len(seen) == 8
        assert all(instrument is seen[0] for instrument in seen)

    def test_increment_counter_uses_meter_name(self):
        """Test counters are looked up on the requested meter"""
        counter = MagicMock()
        key = ("counter", "wallet.rpc", "rpc.test.increment")
        with patch.dict(rpc_metrics._instruments, {key: counter}):
            rpc_metrics.increment_counter("rpc.test.increment", 2, {"url": "u"}, meter_name="wallet.rpc")
        counter.add.assert_called_once_with(2, {"url": "u"})

    def test_record_latency(self):
        histogram = MagicMock()
        key = ("histogram", rpc_metrics.__name__, "rpc.test.latency")
        with patch.dict(rpc_metrics._instruments, {key: histogram}):
            rpc_metrics.record_latency("rpc.test.latency", 12.5)
        histogram.record.assert_called_once_with(12.5, {})

    def test_setup_metrics(self):
        """Test the meter provider is configured with an OTLP reader"""
        with patch("platform_rpc.telemetry.metrics.OTLPMetricExporter") as mock_exporter, \
                patch("platform_rpc.telemetry.metrics.PeriodicExportingMetricReader") as mock_reader, \
                patch("platform_rpc.telemetry.metrics.MeterProvider") as mock_provider, \
                patch("platform_rpc.telemetry.metrics.metrics.set_meter_provider") as mock_set_provider:
            rpc_metrics.setup_metrics("test-service", otlp_endpoint="collector:4317", export_interval_ms=1000)

        mock_exporter.assert_called_once_with(endpoint="collector:4317")
        mock_reader.assert_called_once_with(mock_exporter.return_value, export_interval_millis=1000)
        mock_provider.assert_called_once_with(metric_readers=[mock_reader.return_value])
        mock_set_provider.assert_called_once_with(mock_provider.return_value)
