"""Wire codec — encodes envelopes and decodes response bodies.

A response body is decoded by a :class:`ResponseDecoder` picked from the
``Content-Type`` header: :class:`JsonDecoder` for ``application/json`` and
:class:`SseDecoder` for ``text/event-stream``.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from mcplink.models import (
    JsonRpcErrorResponse,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcSuccess,
)

JSON_CONTENT_TYPE = "application/json"
SSE_CONTENT_TYPE = "text/event-stream"

# SSE lines end only at CRLF, CR or LF; U+2028 and U+0085 may appear raw in data.
_SSE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ProtocolViolationError(ValueError):
    """The response body could not be read as exactly one JSON-RPC response."""


def encode(envelope: JsonRpcRequest | JsonRpcNotification) -> bytes:
    """Serialize an envelope to a UTF-8 JSON body."""
    return json.dumps(envelope.to_wire()).encode()


@runtime_checkable
class ResponseDecoder(Protocol):
    """Turns a raw response body into one JSON object."""

    def decode(self, body: bytes) -> dict[str, Any]: ...


class JsonDecoder:
    """Decodes a body holding a single JSON object."""

    def decode(self, body: bytes) -> dict[str, Any]:
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProtocolViolationError(f"Invalid JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise ProtocolViolationError("JSON body is not an object")
        return data  # pyright: ignore[reportUnknownVariableType]


class SseDecoder:
    """Decodes a Server-Sent-Events body.

    Only ``data:`` lines are considered; blank lines, ``:`` comments and
    other fields are skipped.  The first ``data:`` payload that parses as a
    JSON object is returned and scanning stops there.
    """

    def decode(self, body: bytes) -> dict[str, Any]:
        try:
            text = body.decode()
        except UnicodeDecodeError as exc:
            raise ProtocolViolationError(f"SSE body is not UTF-8: {exc}") from exc

        for line in _SSE_LINE_BREAK.split(text):
            if not line.startswith("data:"):
                continue
            payload = line[len("data:"):]
            if payload.startswith(" "):
                payload = payload[1:]
            if not payload.strip():
                continue
            try:
                data = json.loads(payload)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict):
                return data  # pyright: ignore[reportUnknownVariableType]

        raise ProtocolViolationError("No valid JSON response found in SSE stream")


def select_decoder(content_type: str) -> ResponseDecoder:
    """Return the decoder for *content_type* (parameters like charset are ignored)."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == JSON_CONTENT_TYPE:
        return JsonDecoder()
    if media_type == SSE_CONTENT_TYPE:
        return SseDecoder()
    raise ProtocolViolationError(f"Unsupported content type: {content_type or '(none)'}")


def parse_response(data: dict[str, Any]) -> JsonRpcResponse:
    """Validate *data* as exactly one of a success or an error response."""
    has_result = "result" in data
    has_error = "error" in data
    if has_result == has_error:
        raise ProtocolViolationError("Response must carry exactly one of 'result' or 'error'")
    try:
        if has_error:
            return JsonRpcErrorResponse.model_validate(data)
        return JsonRpcSuccess.model_validate(data)
    except ValidationError as exc:
        raise ProtocolViolationError(f"Malformed JSON-RPC response: {exc}") from exc
