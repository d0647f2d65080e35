import json
from typing import Any, Dict, Tuple

from network.protocol import (
    ClientMessage,
    ProtocolError,
    ServerMessage,
    client_message_type,
    server_message_type,
)


def _decode_frame(line: str) -> Tuple[int, Dict[str, Any]]:
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Invalid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise ProtocolError("Frame must be a JSON object.")
    raw_type = obj.get("type")
    if not isinstance(raw_type, int) or isinstance(raw_type, bool):
        raise ProtocolError(f"Missing or non-integer type tag: {raw_type!r}")
    payload = obj.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ProtocolError("Payload must be a JSON object.")
    return raw_type, payload


def _encode_frame(type_tag: int, payload: Dict[str, Any]) -> bytes:
    obj = {"type": int(type_tag), "payload": payload}
    return (json.dumps(obj, separators=(",", ":")) + "\n").encode("utf-8")


def decode_client_message(line: str) -> ClientMessage:
    """
    Parse one JSON line from a player into a ClientMessage.
    line should NOT contain the trailing newline.
    """
    raw_type, payload = _decode_frame(line)
    try:
        message_type = client_message_type(raw_type)
    except ValueError as exc:
        raise ProtocolError(f"Unknown client message type: {raw_type}") from exc
    return ClientMessage(type=message_type, payload=payload)


def encode_client_message(msg: ClientMessage) -> bytes:
    return _encode_frame(msg.type, msg.payload)


def decode_server_message(line: str) -> ServerMessage:
    """
    Parse one JSON line from the host into a ServerMessage.
    line should NOT contain the trailing newline.
    """
    raw_type, payload = _decode_frame(line)
    try:
        message_type = server_message_type(raw_type)
    except ValueError as exc:
        raise ProtocolError(f"Unknown server message type: {raw_type}") from exc
    return ServerMessage(type=message_type, payload=payload)


def encode_server_message(msg: ServerMessage) -> bytes:
    """
    Serialize ServerMessage to newline-terminated JSON bytes.
    """
    return _encode_frame(msg.type, msg.payload)
