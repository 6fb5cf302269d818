"""
JSON-RPC requester

Sends a JSON payload to an RPC endpoint with a single blocking POST and hands
the response body to a completion callback.
"""

import time
import logging
from contextlib import nullcontext
from typing import Any, Callable, Mapping, Optional

from requests.structures import CaseInsensitiveDict

from platform_rpc.config import RequesterConfig
from platform_rpc.context import ExecutionContext, ensure_blocking_allowed
from platform_rpc.errors import TransportFailure
from platform_rpc.headers import AppHeaderProvider, HeaderProvider
from platform_rpc.messages import JSON_MEDIA_TYPE, RpcRequest, RpcResult, RpcStatus
from platform_rpc.telemetry.metrics import increment_counter, record_latency
from platform_rpc.telemetry.tracer import create_span, inject_trace_headers
from platform_rpc.transport.http_transport import HttpTransport
from platform_rpc.transport.transport_interface import TransportInterface
from platform_rpc.utils.serialization import payload_to_json, preview, redact_json_text

logger = logging.getLogger(__name__)

MANDATORY_HEADERS = {
    "Content-Type": JSON_MEDIA_TYPE,
    "Accept": JSON_MEDIA_TYPE,
}
_MANDATORY_NAMES = frozenset(name.lower() for name in MANDATORY_HEADERS)


def _validate_endpoint(endpoint) -> None:
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValueError("RPC endpoint must be a non-empty URL")


__all__ = ["RpcRequester", "RpcRequest", "RpcResult", "RpcStatus", "MANDATORY_HEADERS"]


class RpcRequester:
    """
    Blocking JSON-RPC requester

    Each ``send`` performs exactly one attempt and returns its own ``RpcResult``.
    ``last_response`` keeps the body of the most recent successful call; it is
    shared per instance and not thread-safe, so concurrent callers should rely
    on the returned result instead.
    """

    def __init__(self,
                 transport: Optional[TransportInterface] = None,
                 header_provider: Optional[HeaderProvider] = None,
                 config: Optional[RequesterConfig] = None):
        """Initialize the requester

        Args:
            transport: Transport used to send requests; the shared HttpTransport by default
            header_provider: Source of extra headers when ``send`` is given none
            config: Requester configuration
        """
        self.config = config or RequesterConfig()
        self.transport = transport or HttpTransport.get_instance(self.config.transport)
        self.header_provider = header_provider or AppHeaderProvider(self.config.identity)
        self._last_response = None

    @classmethod
    def from_env(cls, transport: Optional[TransportInterface] = None) -> "RpcRequester":
        """Create a requester configured from environment variables"""
        return cls(transport=transport, config=RequesterConfig.from_env())

    @property
    def last_response(self) -> Optional[str]:
        """Body of the most recent successful call, None before the first one"""
        return self._last_response

    def get_response_string(self) -> Optional[str]:
        return self._last_response

    def build_request(self,
                      endpoint: str,
                      payload: Any,
                      headers: Optional[Mapping[str, str]] = None) -> RpcRequest:
        """Build the outbound request without sending it

        Args:
            endpoint: Target URL
            payload: JSON document or Protobuf message
            headers: Extra headers; the header provider is asked when None

        Returns:
            RpcRequest: Immutable request descriptor

        Raises:
            ValueError: Empty endpoint
            PayloadSerializationError: Payload is not JSON-serializable
        """
        _validate_endpoint(endpoint)
        body = payload_to_json(payload)
        if headers is None:
            headers = self.header_provider.get_headers()

        merged = self._merge_headers(headers)
        if self.config.enable_tracing:
            inject_trace_headers(merged)

        return RpcRequest(url=endpoint, body=body, header_items=tuple(merged.items()))

    def _merge_headers(self, extra: Mapping[str, str]) -> CaseInsensitiveDict:
        merged = CaseInsensitiveDict(MANDATORY_HEADERS)
        for name, value in extra.items():
            if name.lower() in _MANDATORY_NAMES and not self.config.allow_header_override:
                if value.lower() != merged[name].lower():
                    logger.warning(f"Ignoring header {name}: {value}, keeping {merged[name]}")
                continue
            merged[name] = value
        return merged

    def send(self,
             endpoint: str,
             payload: Any,
             headers: Optional[Mapping[str, str]] = None,
             on_complete: Optional[Callable[[str], None]] = None,
             context: Optional[ExecutionContext] = None) -> RpcResult:
        """POST ``payload`` to ``endpoint`` and wait for the response

        Args:
            endpoint: Target URL
            payload: JSON document or Protobuf message
            headers: Extra headers; the header provider is asked when None
            on_complete: Called once with the response body, only when the round trip succeeds
            context: Execution context of the caller; the bound context is used when None

        Returns:
            RpcResult: SUCCESS or EMPTY with status code, headers and body, or FAILURE with the error

        Raises:
            RestrictedContextViolation: Called from a context that forbids blocking
            ValueError: Empty endpoint or payload that cannot be serialized
        """
        ensure_blocking_allowed(context, "RpcRequester.send")
        _validate_endpoint(endpoint)

        if self.config.enable_tracing:
            span = create_span("rpc.send", {"http.url": endpoint}, tracer_name=self.config.service_name)
        else:
            span = nullcontext()
        with span:
            request = self.build_request(endpoint, payload, headers)
            self._log_payload("JSON params ->", request.body)

            increment_counter("rpc.client.requests", 1, {"url": endpoint}, meter_name=self.config.service_name)
            start_time = time.time()
            try:
                response = self.transport.send_request(request, critical=True, retry_count=0)
            except TransportFailure as e:
                elapsed_ms = (time.time() - start_time) * 1000
                logger.error(f"RPC request to {endpoint} failed after {elapsed_ms:.2f}ms: {e}")
                increment_counter("rpc.client.errors", 1, {"url": endpoint}, meter_name=self.config.service_name)
                return RpcResult(
                    status=RpcStatus.FAILURE,
                    url=endpoint,
                    error=e,
                    elapsed_ms=elapsed_ms,
                )

            elapsed_ms = (time.time() - start_time) * 1000
            record_latency("rpc.client.latency", elapsed_ms, {"url": endpoint}, meter_name=self.config.service_name)

        body = response.body or ""
        self._log_payload("RPC response ->", body)

        if body:
            status = RpcStatus.SUCCESS
            increment_counter("rpc.client.success", 1, {"url": endpoint}, meter_name=self.config.service_name)
        else:
            status = RpcStatus.EMPTY
            logger.warning(f"RPC request to {endpoint} returned an empty body (HTTP {response.status_code})")
            increment_counter("rpc.client.empty", 1, {"url": endpoint}, meter_name=self.config.service_name)

        self._last_response = body
        if on_complete is not None:
            on_complete(body)

        return RpcResult(
            status=status,
            url=endpoint,
            body=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            elapsed_ms=elapsed_ms,
        )

    def _log_payload(self, label: str, text: str) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        if self.config.log_payloads:
            logger.debug(f"{label} {preview(redact_json_text(text), self.config.log_preview_chars)}")
        else:
            logger.debug(f"{label} {len(text)} chars")
