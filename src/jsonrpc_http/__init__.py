"""Public surface for the JSON-RPC over HTTP client."""

from .batch import BatchCodec, JsonRpcBatch, Response, ResponseError
from .client import JsonRpcHttpClient, SendResult
from .config import HttpOptions, SslOptions, TransportOptions
from .errors import (
    ConfigurationError,
    EncodeError,
    HttpException,
    JsonRpcHttpError,
    ParseError,
    TransportException,
)
from .headers import REQUIRED_HEADERS, HeaderSet
from .status import ResponseStatus
from .transport import ExchangeAttempt, HttpxExecutor
from .version import __version__

__all__ = [
    "__version__",
    "BatchCodec",
    "ConfigurationError",
    "EncodeError",
    "ExchangeAttempt",
    "HeaderSet",
    "HttpException",
    "HttpOptions",
    "HttpxExecutor",
    "JsonRpcBatch",
    "JsonRpcHttpClient",
    "JsonRpcHttpError",
    "ParseError",
    "REQUIRED_HEADERS",
    "Response",
    "ResponseError",
    "ResponseStatus",
    "SendResult",
    "SslOptions",
    "TransportException",
    "TransportOptions",
]
