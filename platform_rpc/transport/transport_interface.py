"""
Transport interface

Defines the interface every transport implements, so the requester can be
driven by the shared HTTP transport in production and by fakes in tests.
"""

import abc

from platform_rpc.messages import RpcRequest, TransportResponse


class TransportInterface(abc.ABC):
    """Transport interface, the methods every transport must implement"""
    
    @abc.abstractmethod
    def send_request(self,
                     request: RpcRequest,
                     critical: bool = True,
                     retry_count: int = 0) -> TransportResponse:
        """Send a request and block until the full response is read
        
        Args:
            request: Fully built request
            critical: Whether a failure is reported at error level
            retry_count: Additional attempts on connection-level errors
            
        Returns:
            TransportResponse: Status code, headers and body text
            
        Raises:
            TransportFailure: Invalid URL or header, connection failure, timeout or unreadable body
        """
        pass
    
    @abc.abstractmethod
    def close(self) -> None:
        """Release connections held by the transport"""
        pass
