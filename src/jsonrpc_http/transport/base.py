"""Transport context, exchange records and outcome classification."""

from __future__ import annotations

import ssl
from dataclasses import dataclass, field
from typing import Protocol, Union, runtime_checkable

from ..config import TransportOptions
from ..errors import ConfigurationError, TransportException
from ..headers import HEADER_ENCODING
from ..status import ResponseStatus


@dataclass(frozen=True)
class RequestSettings:
    method: str
    header: bytes
    content: bytes


class TransportContext:
    """Connection settings plus the request committed for the next exchange."""

    def __init__(self, options: TransportOptions | None = None) -> None:
        self.options = options or TransportOptions()
        self.verify = _build_verify(self.options)
        self.request: RequestSettings | None = None

    def configure(self, *, method: str, header: bytes | str, content: bytes) -> RequestSettings:
        if not isinstance(method, str) or not method:
            raise ConfigurationError(f"Invalid request method: {method!r}")
        if isinstance(header, str):
            try:
                header = header.encode(HEADER_ENCODING)
            except UnicodeEncodeError as exc:
                raise ConfigurationError(f"Header block is not {HEADER_ENCODING} encodable") from exc
        if not isinstance(header, bytes):
            raise ConfigurationError(f"Header block must be bytes, got {type(header).__name__}")
        if not isinstance(content, bytes):
            raise ConfigurationError(f"Request content must be bytes, got {type(content).__name__}")

        self.request = RequestSettings(method=method.upper(), header=header, content=content)
        return self.request


def _build_verify(options: TransportOptions) -> ssl.SSLContext | bool:
    settings = options.ssl
    if not settings.verify_peer and not settings.local_cert:
        return False

    try:
        context = ssl.create_default_context(cafile=settings.cafile)
        if not settings.verify_peer:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        elif not settings.verify_peer_name:
            context.check_hostname = False
        if settings.local_cert:
            context.load_cert_chain(settings.local_cert, settings.local_pk)
    except (OSError, ssl.SSLError) as exc:
        raise ConfigurationError(f"Cannot load TLS configuration: {exc}") from exc
    return context


@dataclass
class ExchangeAttempt:
    """What the HTTP primitive captured while performing one exchange."""

    header_lines: list[str] = field(default_factory=list)
    body: bytes | None = None
    error: TransportException | None = None


@dataclass(frozen=True)
class Success:
    header_lines: list[str]
    body: bytes


@dataclass(frozen=True)
class ErrorStatus:
    status: ResponseStatus
    cause: TransportException


@dataclass(frozen=True)
class NoResponse:
    cause: TransportException


ExchangeOutcome = Union[Success, ErrorStatus, NoResponse]


def classify(attempt: ExchangeAttempt) -> ExchangeOutcome:
    """Collapse an attempt into one of the three outcome kinds.

    Header lines captured alongside an error mean the server did answer, so
    the status is reported instead of the raw transport error.
    """
    if attempt.error is not None:
        if ResponseStatus.is_available(attempt.header_lines):
            return ErrorStatus(status=ResponseStatus(attempt.header_lines), cause=attempt.error)
        return NoResponse(cause=attempt.error)
    return Success(header_lines=list(attempt.header_lines), body=attempt.body or b"")


@runtime_checkable
class Executor(Protocol):
    def execute(self, uri: str, context: TransportContext) -> ExchangeAttempt: ...


__all__ = [
    "ErrorStatus",
    "ExchangeAttempt",
    "ExchangeOutcome",
    "Executor",
    "NoResponse",
    "RequestSettings",
    "Success",
    "TransportContext",
    "classify",
]
