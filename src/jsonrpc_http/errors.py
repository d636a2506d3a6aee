"""Custom exceptions raised by the JSON-RPC HTTP client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .status import ResponseStatus


class JsonRpcHttpError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ConfigurationError(JsonRpcHttpError):
    """Raised when the target URI or the transport options are unusable."""


class TransportException(JsonRpcHttpError):
    """Raised when no HTTP response could be obtained from the server."""


class HttpException(JsonRpcHttpError):
    """Raised when the server answered with a failure HTTP status."""

    def __init__(self, status: "ResponseStatus", message: str | None = None) -> None:
        super().__init__(message or f"HTTP error {status.status_code}", context=status)
        self.status = status

    @property
    def status_code(self) -> int:
        return self.status.status_code


class ParseError(JsonRpcHttpError):
    """Raised when a status line or a reply body cannot be parsed."""


class EncodeError(JsonRpcHttpError):
    """Raised when the queued batch cannot be serialized."""


__all__ = [
    "ConfigurationError",
    "EncodeError",
    "HttpException",
    "JsonRpcHttpError",
    "ParseError",
    "TransportException",
]
