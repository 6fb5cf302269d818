"""
HTTP transport

Shared requests-based transport. One instance per process is obtained with
``HttpTransport.get_instance()``; its Session keeps connections alive across calls.
"""

import time
import logging
import threading
from typing import Optional

import requests

from platform_rpc.config import TransportConfig
from platform_rpc.errors import TransportFailure
from platform_rpc.messages import RpcRequest, TransportResponse
from platform_rpc.transport.transport_interface import TransportInterface
from platform_rpc.telemetry.metrics import increment_counter, record_latency

logger = logging.getLogger(__name__)

class HttpTransport(TransportInterface):
    """
    HTTP transport backed by a requests Session
    Retries only connection-level errors, and only as many times as the caller asks
    """
    
    _instance = None
    _instance_lock = threading.Lock()
    
    def __init__(self,
                 config: Optional[TransportConfig] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the transport
        
        Args:
            config: Transport configuration
            session: Session to use; a new one is created when omitted
        """
        self.config = config or TransportConfig()
        self.session = session or requests.Session()
        logger.info(f"HTTP transport created, timeout: {self.config.timeout_seconds}s")
    
    @classmethod
    def get_instance(cls, config: Optional[TransportConfig] = None) -> "HttpTransport":
        """Return the process-wide shared transport, creating it on first use
        
        ``config`` only applies when the instance is created.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(config)
        return cls._instance
    
    @classmethod
    def reset_instance(cls) -> None:
        """Close and drop the shared transport"""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None
    
    def close(self) -> None:
        """Close the underlying session"""
        if self.session is not None:
            self.session.close()
    
    def send_request(self,
                     request: RpcRequest,
                     critical: bool = True,
                     retry_count: int = 0) -> TransportResponse:
        """Send ``request`` and read the whole response body
        
        Args:
            request: Fully built request
            critical: Failures log at error level when True, warning otherwise
            retry_count: Additional attempts on connection errors, capped at config.max_retries
            
        Returns:
            TransportResponse: Status code, headers and decoded body
            
        Raises:
            TransportFailure: Invalid URL or header, connection failure, timeout or unreadable body
        """
        retry_count = max(0, min(retry_count, self.config.max_retries))
        try:
            prepared = self.session.prepare_request(requests.Request(
                method=request.method,
                url=request.url,
                data=request.encoded_body(),
                headers=dict(request.header_items),
            ))
            # CA bundle and proxy variables apply as they would for Session.request
            settings = self.session.merge_environment_settings(
                prepared.url, {}, None, self.config.verify_ssl, None
            )
        except requests.RequestException as e:
            # Malformed URL or header value; nothing was sent, so no retry
            increment_counter("rpc.transport.errors", 1, {"type": type(e).__name__})
            self._fail(request, critical, e)
        
        attempts = retry_count + 1
        last_error = None
        for attempt in range(1, attempts + 1):
            start_time = time.time()
            try:
                response = self.session.send(
                    prepared,
                    timeout=self.config.timeout_seconds,
                    **settings,
                )
                if response.encoding is None:
                    response.encoding = "utf-8"
                body = response.text
            except requests.ConnectionError as e:
                last_error = e
                increment_counter("rpc.transport.errors", 1, {"type": "connection"})
                if attempt < attempts:
                    logger.warning(f"Connection to {request.url} failed (attempt {attempt}/{attempts}): {e}")
                    continue
                break
            except requests.RequestException as e:
                last_error = e
                increment_counter("rpc.transport.errors", 1, {"type": type(e).__name__})
                break
            
            record_latency("rpc.transport.latency", (time.time() - start_time) * 1000)
            return TransportResponse(
                status_code=response.status_code,
                body=body,
                headers=dict(response.headers),
            )
        
        self._fail(request, critical, last_error)
    
    def _fail(self, request: RpcRequest, critical: bool, error: Exception) -> None:
        """Log ``error`` at the level matching ``critical`` and raise TransportFailure"""
        message = f"{request.method} {request.url} failed: {error}"
        if critical:
            logger.error(message)
        else:
            logger.warning(message)
        raise TransportFailure(message, url=request.url, cause=error) from error
