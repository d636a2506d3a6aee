"""JSON-RPC 2.0 batch encoding and reply decoding."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable

from .errors import EncodeError, ParseError

JSONRPC_VERSION = "2.0"

Arguments = Sequence[Any] | Mapping[str, Any] | None


@dataclass(frozen=True)
class ResponseError:
    code: int
    message: str
    data: Any = None


@dataclass(frozen=True)
class Response:
    """One decoded reply, correlated to a query by ``id``."""

    id: Any
    result: Any = None
    error: ResponseError | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@runtime_checkable
class BatchCodec(Protocol):
    def notify(self, method: str, arguments: Arguments = None) -> Any: ...

    def query(self, id: Any, method: str, arguments: Arguments = None) -> Any: ...

    def encode(self) -> bytes: ...

    def decode(self, payload: bytes) -> list[Response]: ...


class JsonRpcBatch:
    """Queue of JSON-RPC calls that is drained by :meth:`encode`."""

    def __init__(self) -> None:
        self._requests: list[dict[str, Any]] = []

    def notify(self, method: str, arguments: Arguments = None) -> "JsonRpcBatch":
        self._requests.append(_build_request(method, arguments))
        return self

    def query(self, id: Any, method: str, arguments: Arguments = None) -> "JsonRpcBatch":
        request = _build_request(method, arguments)
        request["id"] = id
        self._requests.append(request)
        return self

    def __len__(self) -> int:
        return len(self._requests)

    def encode(self) -> bytes:
        if not self._requests:
            return b""

        requests = [_prepare_request(request) for request in self._requests]
        payload: Any = requests[0] if len(requests) == 1 else requests
        try:
            encoded = json.dumps(payload, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Cannot encode JSON-RPC batch: {exc}", context=payload) from exc

        self._requests = []
        return encoded.encode("utf-8")

    def decode(self, payload: bytes) -> list[Response]:
        return decode_reply(payload)


def _build_request(method: str, arguments: Arguments) -> dict[str, Any]:
    request: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if arguments is None:
        return request
    if isinstance(arguments, Iterable) and not isinstance(arguments, (str, bytes, bytearray, Mapping)):
        arguments = list(arguments)
    request["params"] = arguments
    return request


def _prepare_request(request: dict[str, Any]) -> dict[str, Any]:
    if "params" not in request:
        return request

    # params must serialize as a JSON array or object
    arguments = request["params"]
    if isinstance(arguments, list):
        return request
    if isinstance(arguments, Mapping):
        return {**request, "params": dict(arguments)}
    raise EncodeError(
        f"Arguments for {request.get('method')!r} must be a sequence or a mapping, "
        f"got {type(arguments).__name__}",
        context=request,
    )


def decode_reply(payload: bytes | str) -> list[Response]:
    if isinstance(payload, bytes):
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Reply is not valid UTF-8: {exc}", context=payload) from exc
    else:
        text = payload
    if not text.strip():
        return []

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON reply: {exc}", context=text) from exc

    if isinstance(parsed, dict):
        return [parse_response(parsed)]
    if isinstance(parsed, list):
        return [parse_response(item) for item in parsed]
    raise ParseError(f"Unexpected JSON-RPC reply: {text[:200]}", context=text)


def parse_response(item: Any) -> Response:
    if not isinstance(item, dict):
        raise ParseError(f"Invalid JSON-RPC response object: {item!r}", context=item)
    if item.get("jsonrpc") != JSONRPC_VERSION:
        raise ParseError("Missing or unsupported jsonrpc version", context=item)
    if "id" not in item:
        raise ParseError("JSON-RPC response has no id", context=item)

    if "result" in item:
        return Response(id=item["id"], result=item["result"])

    error = item.get("error")
    if not isinstance(error, dict):
        raise ParseError("JSON-RPC response has neither result nor error", context=item)

    code = error.get("code")
    message = error.get("message")
    if not isinstance(code, int) or isinstance(code, bool) or not isinstance(message, str):
        raise ParseError("Malformed JSON-RPC error object", context=item)
    return Response(id=item["id"], error=ResponseError(code=code, message=message, data=error.get("data")))


__all__ = [
    "BatchCodec",
    "JsonRpcBatch",
    "Response",
    "ResponseError",
    "decode_reply",
    "parse_response",
]
