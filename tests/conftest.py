"""
Shared fixtures for platform_rpc tests
"""
import pytest

from platform_rpc.messages import TransportResponse
from platform_rpc.transport.http_transport import HttpTransport
from platform_rpc.transport.transport_interface import TransportInterface


class RecordingTransport(TransportInterface):
    """Transport spy: records every request and replays a canned outcome"""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else TransportResponse(
            status_code=200,
            body='{"result":42}',
            headers={"Content-Type": "application/json"},
        )
        self.error = error
        self.calls = []
        self.closed = False

    def send_request(self, request, critical=True, retry_count=0):
        self.calls.append((request, critical, retry_count))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class EchoTransport(RecordingTransport):
    """Returns the request body as the response body"""

    def send_request(self, request, critical=True, retry_count=0):
        self.calls.append((request, critical, retry_count))
        return TransportResponse(status_code=200, body=request.body)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture(autouse=True)
def reset_shared_transport():
    """Drop the process-wide transport between tests"""
    HttpTransport.reset_instance()
    yield
    HttpTransport.reset_instance()


@pytest.fixture
def make_transport():
    """Factory for transport spies with a custom response or error"""
    return RecordingTransport


@pytest.fixture
def make_echo_transport():
    return EchoTransport
