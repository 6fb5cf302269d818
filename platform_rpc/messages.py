"""
Request and response records exchanged between the requester and transports.
"""

import json
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from requests.structures import CaseInsensitiveDict

from platform_rpc.errors import TransportFailure

JSON_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class RpcRequest:
    """Immutable outbound request: POST of a JSON body to ``url``"""
    url: str
    body: str
    header_items: Tuple[Tuple[str, str], ...] = ()
    method: str = "POST"

    @property
    def headers(self) -> CaseInsensitiveDict:
        """Copy of the request headers with case-insensitive lookup"""
        return CaseInsensitiveDict(self.header_items)

    @property
    def payload(self) -> Any:
        """The JSON document carried in the body"""
        return json.loads(self.body)

    def encoded_body(self) -> bytes:
        return self.body.encode("utf-8")


@dataclass
class TransportResponse:
    """Raw HTTP response returned by a transport, body fully read"""
    status_code: int
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)


class RpcStatus(Enum):
    """Outcome of a single RPC exchange"""
    SUCCESS = "success"
    EMPTY = "empty"  # Round trip completed but the body was empty
    FAILURE = "failure"


@dataclass
class RpcResult:
    """Per-call result returned by ``RpcRequester.send``"""
    status: RpcStatus
    url: str
    body: Optional[str] = None
    status_code: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[TransportFailure] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is not RpcStatus.FAILURE

    @property
    def is_empty(self) -> bool:
        return self.status is RpcStatus.EMPTY

    def json(self) -> Any:
        """Parse the body as JSON

        Raises:
            ValueError: No body is available or it is not valid JSON
        """
        if self.status is not RpcStatus.SUCCESS:
            raise ValueError(f"No JSON body for {self.status.value} result from {self.url}")
        return json.loads(self.body)
