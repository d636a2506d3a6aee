import pytest

from jsonrpc_http import (
    ConfigurationError,
    ExchangeAttempt,
    HttpException,
    JsonRpcHttpClient,
    ParseError,
    Response,
    TransportException,
)
from jsonrpc_http.headers import parse_header_block
from jsonrpc_http.transport.base import TransportContext


class DummyExecutor:
    def __init__(self, attempt: ExchangeAttempt) -> None:
        self.attempt = attempt
        self.uris: list[str] = []
        self.requests: list = []

    def execute(self, uri: str, context: TransportContext) -> ExchangeAttempt:
        self.uris.append(uri)
        self.requests.append(context.request)
        return self.attempt


class DummyBatch:
    def __init__(self, payload: bytes = b"", responses=None) -> None:
        self.payload = payload
        self.responses = list(responses or [])
        self.calls: list[tuple] = []
        self.decoded: list[bytes] = []

    def notify(self, method, arguments=None):
        self.calls.append(("notify", method, arguments))

    def query(self, id, method, arguments=None):
        self.calls.append(("query", id, method, arguments))

    def encode(self) -> bytes:
        return self.payload

    def decode(self, payload: bytes):
        self.decoded.append(payload)
        return self.responses


def ok_attempt(body: bytes, status_line: str = "HTTP/1.1 200 OK") -> ExchangeAttempt:
    return ExchangeAttempt(header_lines=[status_line, "content-type: application/json"], body=body)


def make_client(executor, **kwargs) -> JsonRpcHttpClient:
    return JsonRpcHttpClient("https://api.example.com/rpc", executor=executor, **kwargs)


def test_send_decodes_query_result() -> None:
    executor = DummyExecutor(ok_attempt(b'{"jsonrpc":"2.0","id":1,"result":5}'))
    client = make_client(executor)

    responses = client.query(1, "sum", [2, 3]).send()

    assert responses == [Response(id=1, result=5)]
    assert executor.uris == ["https://api.example.com/rpc"]
    assert executor.requests[0].method == "POST"
    assert executor.requests[0].content == b'{"jsonrpc":"2.0","method":"sum","params":[2,3],"id":1}'


def test_send_writes_required_headers_and_content_length() -> None:
    executor = DummyExecutor(ok_attempt(b'{"jsonrpc":"2.0","id":1,"result":5}'))
    client = make_client(executor, headers={"Authorization": "Basic abc"})

    client.query(1, "sum", [2, 3]).send()

    request = executor.requests[0]
    headers = dict(parse_header_block(request.header))
    assert headers == {
        "Authorization": "Basic abc",
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Connection": "close",
        "Content-Length": str(len(request.content)),
    }


def test_content_length_is_not_persisted() -> None:
    client = make_client(DummyExecutor(ok_attempt(b"")))
    client.notify("ping").send()
    assert "Content-Length" not in client.get_headers()


def test_empty_batch_sends_empty_body() -> None:
    executor = DummyExecutor(ok_attempt(b""))
    client = make_client(executor)

    assert client.send() == []
    assert executor.requests[0].content == b""
    assert dict(parse_header_block(executor.requests[0].header))["Content-Length"] == "0"


def test_send_drains_the_batch() -> None:
    executor = DummyExecutor(ok_attempt(b""))
    client = make_client(executor)

    client.notify("log", {"message": "hi"}).send()
    client.send()

    assert executor.requests[0].content == b'{"jsonrpc":"2.0","method":"log","params":{"message":"hi"}}'
    assert executor.requests[1].content == b""


def test_connection_failure_raises_transport_exception() -> None:
    error = TransportException("Connection refused")
    client = make_client(DummyExecutor(ExchangeAttempt(error=error)))
    client.query(1, "sum", [2, 3])

    with pytest.raises(TransportException) as excinfo:
        client.send()

    assert excinfo.value is error
    assert not isinstance(excinfo.value, HttpException)


def test_error_with_captured_headers_raises_http_exception() -> None:
    error = TransportException("HTTP request failed! HTTP/1.1 404 Not Found")
    attempt = ExchangeAttempt(header_lines=["HTTP/1.1 404 Not Found", "content-length: 0"], error=error)
    client = make_client(DummyExecutor(attempt))

    with pytest.raises(HttpException) as excinfo:
        client.query(1, "sum", [2, 3]).send()

    assert excinfo.value.status_code == 404
    assert excinfo.value.status.reason_phrase == "Not Found"
    assert excinfo.value.__cause__ is error


def test_non_200_without_error_returns_empty_list() -> None:
    batch = DummyBatch(b"[]", responses=[Response(id=1, result=5)])
    attempt = ExchangeAttempt(header_lines=["HTTP/1.1 500 Internal Server Error"], body=b"oops")
    client = make_client(DummyExecutor(attempt), batch=batch)

    assert client.send() == []
    assert batch.decoded == []


def test_missing_header_lines_returns_empty_list() -> None:
    batch = DummyBatch(b"[]", responses=[Response(id=1, result=5)])
    client = make_client(DummyExecutor(ExchangeAttempt(body=b"{}")), batch=batch)

    assert client.send() == []
    assert batch.decoded == []


def test_calls_are_delegated_to_the_batch() -> None:
    batch = DummyBatch(b"payload", responses=[Response(id="a", result=True)])
    executor = DummyExecutor(ok_attempt(b"reply"))
    client = make_client(executor, batch=batch)

    result = client.notify("log").query("a", "check", {"x": 1}).send()

    assert result == [Response(id="a", result=True)]
    assert batch.calls == [("notify", "log", None), ("query", "a", "check", {"x": 1})]
    assert batch.decoded == [b"reply"]
    assert executor.requests[0].content == b"payload"


def test_decode_errors_propagate() -> None:
    client = make_client(DummyExecutor(ok_attempt(b"not json")))
    with pytest.raises(ParseError):
        client.query(1, "sum", [2, 3]).send()


def test_send_safe_wraps_exceptions() -> None:
    client = make_client(DummyExecutor(ExchangeAttempt(error=TransportException("refused"))))
    result = client.send_safe()
    assert result.ok is False
    assert isinstance(result.error, TransportException)


def test_send_safe_returns_data() -> None:
    client = make_client(DummyExecutor(ok_attempt(b'{"jsonrpc":"2.0","id":7,"result":"pong"}')))
    result = client.query(7, "ping").send_safe()
    assert result.ok is True
    assert result.data == [Response(id=7, result="pong")]


def test_header_mutation_through_client() -> None:
    client = make_client(DummyExecutor(ok_attempt(b"")))

    assert client.set_header("X-Trace", "abc") is True
    assert client.get_headers()["X-Trace"] == "abc"
    assert client.set_header("Connection", "keep-alive") is False
    assert client.get_headers()["Connection"] == "close"
    assert client.unset_header("X-Trace") is True
    assert "X-Trace" not in client.get_headers()
    assert client.unset_header("Accept") is False


def test_get_headers_returns_a_copy() -> None:
    client = make_client(DummyExecutor(ok_attempt(b"")))
    headers = client.get_headers()
    headers["Connection"] = "keep-alive"
    assert client.get_headers()["Connection"] == "close"


@pytest.mark.parametrize("uri", ["", "ftp://example.com/rpc", "api.example.com/rpc", "http://"])
def test_invalid_uri_is_rejected(uri: str) -> None:
    with pytest.raises(ConfigurationError):
        JsonRpcHttpClient(uri)


def test_unknown_option_groups_are_dropped() -> None:
    client = JsonRpcHttpClient(
        "http://localhost:8080/rpc",
        options={"http": {"timeout": 5}, "ftp": {"overwrite": True}},
    )
    assert client.options.http.timeout == 5
    assert not hasattr(client.options, "ftp")


def test_invalid_options_fail_at_construction() -> None:
    with pytest.raises(ConfigurationError):
        JsonRpcHttpClient("http://localhost:8080/rpc", options={"http": {"timeout": "soon"}})


class RecordingLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def _record(self, level: str, msg: str, *args) -> None:
        self.messages.append((level, msg % args))

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._record("debug", msg, *args)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._record("info", msg, *args)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._record("warning", msg, *args)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._record("error", msg, *args)


def test_send_logs_request_size_and_status() -> None:
    logger = RecordingLogger()
    client = make_client(
        DummyExecutor(ok_attempt(b'{"jsonrpc":"2.0","id":1,"result":5}')),
        logger=logger,
        log_level="debug",
    )

    client.query(1, "sum", [2, 3]).send()

    debug = [message for level, message in logger.messages if level == "debug"]
    assert any(message.startswith("Sending calls=1 bytes=") for message in debug)
    assert any("status=200" in message for message in debug)


def test_non_latin1_header_is_refused_and_send_still_works() -> None:
    executor = DummyExecutor(ok_attempt(b""))
    client = make_client(executor)

    assert client.set_header("X-User", "Łukasz") is False
    assert client.send() == []
    assert "X-User" not in dict(parse_header_block(executor.requests[0].header))
