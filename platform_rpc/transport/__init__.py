"""
Transport Module

Transports issue fully built RPC requests and return the raw HTTP response:
- http_transport: process-wide shared transport built on a requests Session
"""

from .transport_interface import TransportInterface
from .http_transport import HttpTransport

__all__ = [
    "TransportInterface",
    "HttpTransport",
]
