"""
Payload serialization tools

Provides conversion of JSON documents and Protobuf messages to request bodies,
and redaction helpers for logging payload traffic.
"""

import json
from typing import Any, Dict, Iterable

from google.protobuf.message import Message
from google.protobuf.json_format import MessageToDict

from platform_rpc.errors import PayloadSerializationError

SENSITIVE_KEYS = frozenset({
    "password",
    "passphrase",
    "secret",
    "token",
    "access_token",
    "refresh_token",
    "authorization",
    "api_key",
    "private_key",
    "seed",
    "mnemonic",
})

REDACTED = "***"


def protobuf_to_dict(message: Message) -> Dict[str, Any]:
    """Convert Protobuf message to dictionary
    
    Args:
        message: Protobuf message object
        
    Returns:
        Dict: Dictionary containing message fields
    """
    if message is None:
        return {}
    
    return MessageToDict(message, preserving_proto_field_name=True)

def payload_to_json(payload: Any) -> str:
    """Serialize a payload into the JSON text sent as request body
    
    Args:
        payload: JSON document (dict/list/scalar tree) or Protobuf message
        
    Returns:
        str: Compact JSON text, non-ASCII characters preserved
        
    Raises:
        PayloadSerializationError: Payload is not JSON-serializable
    """
    if isinstance(payload, Message):
        payload = protobuf_to_dict(payload)
    
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise PayloadSerializationError(f"Payload is not JSON-serializable: {e}") from e

def redact(document: Any, keys: Iterable[str] = SENSITIVE_KEYS) -> Any:
    """Return a copy of ``document`` with values of sensitive keys masked
    
    Matching is case-insensitive and applies at every nesting level.
    """
    lowered = {k.lower() for k in keys}
    
    def _walk(node):
        if isinstance(node, dict):
            return {
                k: (REDACTED if isinstance(k, str) and k.lower() in lowered else _walk(v))
                for k, v in node.items()
            }
        if isinstance(node, (list, tuple)):
            return [_walk(item) for item in node]
        return node
    
    return _walk(document)

def redact_json_text(text: str, keys: Iterable[str] = SENSITIVE_KEYS) -> str:
    """Redact a JSON text; text that is not JSON is returned unchanged"""
    try:
        document = json.loads(text)
    except (TypeError, ValueError):
        return text
    return json.dumps(redact(document, keys), ensure_ascii=False, separators=(",", ":"))

def preview(text: str, limit: int = 200) -> str:
    """Truncate text for log output"""
    if text is None:
        return ""
    if limit <= 0 or len(text) <= limit:
        return text
    return f"{text[:limit]}... ({len(text)} chars)"
