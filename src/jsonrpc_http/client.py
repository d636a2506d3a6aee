"""JSON-RPC 2.0 client speaking to a single HTTP endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar
from urllib.parse import urlparse

from .batch import Arguments, BatchCodec, JsonRpcBatch, Response
from .config import TransportOptions
from .errors import ConfigurationError, HttpException, JsonRpcHttpError
from .headers import HeaderSet
from .logger import LogLevel, create_logger
from .status import ResponseStatus
from .transport import ErrorStatus, Executor, HttpxExecutor, NoResponse, TransportContext, classify

HTTP_METHOD = "POST"
SUCCESS_STATUS = 200

T = TypeVar("T")


@dataclass
class SendResult(Generic[T]):
    """Outcome of :meth:`JsonRpcHttpClient.send_safe`; ``error`` is set when ``ok`` is false."""

    ok: bool
    data: T | None = None
    error: Exception | None = None


@dataclass
class ClientOptions:
    uri: str
    headers: Mapping[str, str] | None = None
    options: Mapping[str, Any] | None = None
    batch: BatchCodec | None = None
    executor: Executor | None = None
    logger: object | None = None
    log_level: LogLevel = "info"


class JsonRpcHttpClient:
    """Queues JSON-RPC calls and delivers them as one HTTP POST per :meth:`send`.

    ``headers`` are extra HTTP headers sent with every request (e.g.
    ``{"Authorization": "Basic ..."}``). ``Accept``, ``Content-Type`` and
    ``Connection`` are required and always sent with fixed values.

    ``options`` holds the ``http`` and ``ssl`` option groups, e.g.
    ``{"http": {"timeout": 5}, "ssl": {"verify_peer": False}}``.
    """

    def __init__(
        self,
        uri: str,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        batch: BatchCodec | None = None,
        executor: Executor | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        config = ClientOptions(
            uri=uri,
            headers=headers,
            options=options,
            batch=batch,
            executor=executor,
            logger=logger,
            log_level=log_level,
        )
        self._logger = create_logger(logger=config.logger, level=config.log_level)
        self.uri = self._validate_uri(config.uri)
        self._logger.info("Initializing JsonRpcHttpClient for %s", self.uri)

        self._headers = HeaderSet(config.headers)
        self._options = TransportOptions.from_mapping(config.options, self._logger)
        self._context = TransportContext(self._options)
        self._batch: BatchCodec = config.batch if config.batch is not None else JsonRpcBatch()
        self._executor: Executor = config.executor or HttpxExecutor(logger=self._logger)

    @property
    def options(self) -> TransportOptions:
        return self._options

    def notify(self, method: str, arguments: Arguments = None) -> "JsonRpcHttpClient":
        self._batch.notify(method, arguments)
        return self

    def query(self, id: Any, method: str, arguments: Arguments = None) -> "JsonRpcHttpClient":
        self._batch.query(id, method, arguments)
        return self

    def get_headers(self) -> dict[str, str]:
        return self._headers.snapshot()

    def set_header(self, name: str, value: str) -> bool:
        return self._headers.set(name, value)

    def unset_header(self, name: str) -> bool:
        return self._headers.unset(name)

    def send(self) -> list[Response]:
        """Deliver the queued calls and return the decoded responses.

        Raises :class:`~jsonrpc_http.errors.HttpException` when the server
        answered with a failure status and
        :class:`~jsonrpc_http.errors.TransportException` when no answer could
        be obtained at all.
        """
        calls = len(self._batch) if hasattr(self._batch, "__len__") else None
        content = self._batch.encode()
        header = self._headers.render(extra={"Content-Length": len(content)})
        self._context.configure(method=HTTP_METHOD, header=header, content=content)

        self._logger.debug("Sending calls=%s bytes=%d to %s", calls, len(content), self.uri)
        attempt = self._executor.execute(self.uri, self._context)
        outcome = classify(attempt)

        if isinstance(outcome, NoResponse):
            self._logger.warn("No response from %s: %s", self.uri, outcome.cause)
            raise outcome.cause
        if isinstance(outcome, ErrorStatus):
            self._logger.warn("HTTP error from %s: %s", self.uri, outcome.status.status_line)
            raise HttpException(outcome.status) from outcome.cause

        if not ResponseStatus.is_available(outcome.header_lines):
            self._logger.debug("No response headers captured from %s", self.uri)
            return []

        status = ResponseStatus(outcome.header_lines)
        self._logger.debug("Reply from %s status=%d bytes=%d", self.uri, status.status_code, len(outcome.body))
        if status.status_code != SUCCESS_STATUS:
            self._logger.debug("Ignoring reply with status %d from %s", status.status_code, self.uri)
            return []

        responses = self._batch.decode(outcome.body)
        self._logger.debug("Decoded %d responses bytes=%d", len(responses), len(outcome.body))
        return responses

    def send_safe(self) -> SendResult[list[Response]]:
        try:
            return SendResult(ok=True, data=self.send())
        except JsonRpcHttpError as exc:
            return SendResult(ok=False, error=exc)

    def _validate_uri(self, uri: str) -> str:
        if not isinstance(uri, str) or not uri:
            raise ConfigurationError(f"Endpoint URI must be a non-empty string, got {uri!r}")
        parsed = urlparse(uri)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ConfigurationError(f"Unsupported endpoint URI: {uri}")
        return uri


__all__ = ["ClientOptions", "JsonRpcHttpClient", "SendResult"]
