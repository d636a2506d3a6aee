"""HTTP execution primitive built on top of httpx."""

from __future__ import annotations

import httpx

from ..errors import ConfigurationError, TransportException
from ..headers import parse_header_block
from ..logger import BoundLogger, create_logger
from .base import ExchangeAttempt, TransportContext


class HttpxExecutor:
    """Performs one non-persistent HTTP exchange per call.

    A fresh :class:`httpx.Client` is opened and closed for every exchange.
    ``transport`` lets callers substitute an httpx transport, such as
    :class:`httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._transport = transport
        self._logger = (logger or create_logger()).child("http")

    def execute(self, uri: str, context: TransportContext) -> ExchangeAttempt:
        request_settings = context.request
        if request_settings is None:
            raise ConfigurationError("No request has been configured on the transport context")

        http_options = context.options.http
        headers = parse_header_block(request_settings.header)
        if http_options.user_agent and not any(name.lower() == "user-agent" for name, _ in headers):
            headers.append(("User-Agent", http_options.user_agent))

        attempt = ExchangeAttempt()
        self._logger.debug("HTTP %s %s bytes=%d", request_settings.method, uri, len(request_settings.content))
        try:
            with self._open_client(context) as client:
                request = client.build_request(
                    request_settings.method,
                    uri,
                    headers=headers,
                    content=request_settings.content,
                )
                response = client.send(request, stream=True)
                try:
                    attempt.header_lines = _header_lines(response)
                    self._logger.debug("HTTP <- %s %s", uri, attempt.header_lines[0])
                    if response.status_code >= 400 and not http_options.ignore_errors:
                        attempt.error = TransportException(
                            f"HTTP request failed! {attempt.header_lines[0]}",
                            context=uri,
                        )
                        return attempt
                    attempt.body = response.read()
                    self._logger.trace("HTTP <- %s body bytes=%d", uri, len(attempt.body))
                finally:
                    response.close()
        except httpx.TimeoutException as exc:
            attempt.error = TransportException(
                f"HTTP request timeout after {http_options.timeout}s",
                context=uri,
            )
            attempt.error.__cause__ = exc
        except httpx.HTTPError as exc:
            attempt.error = TransportException(f"Cannot complete request to {uri}: {exc}", context=uri)
            attempt.error.__cause__ = exc
        return attempt

    def _open_client(self, context: TransportContext) -> httpx.Client:
        http_options = context.options.http
        kwargs = {
            "timeout": httpx.Timeout(http_options.timeout),
            "verify": context.verify,
            "follow_redirects": http_options.follow_location,
            "max_redirects": http_options.max_redirects,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        elif http_options.proxy:
            kwargs["proxy"] = http_options.proxy
        return httpx.Client(**kwargs)


def _header_lines(response: httpx.Response) -> list[str]:
    reason = response.reason_phrase
    status_line = f"{response.http_version} {response.status_code}"
    lines = [f"{status_line} {reason}" if reason else status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return lines


__all__ = ["HttpxExecutor"]
