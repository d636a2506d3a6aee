"""End-to-end scenario demonstrating the JSON-RPC HTTP client API."""

from __future__ import annotations

import os

from jsonrpc_http import HttpException, JsonRpcHttpClient, Response, TransportException

BASE_URL = os.getenv("JSONRPC_DEMO_URL", "http://localhost:8080/rpc")
AUTH_TOKEN = os.getenv("JSONRPC_DEMO_TOKEN")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def print_responses(responses: list[Response]) -> None:
    if not responses:
        print("  (no responses)")
        return
    for response in responses:
        if response.is_error:
            assert response.error is not None
            print(f"  id={response.id!r} error {response.error.code}: {response.error.message}")
        else:
            print(f"  id={response.id!r} result={response.result!r}")


def build_client() -> JsonRpcHttpClient:
    headers = {"Authorization": f"Bearer {AUTH_TOKEN}"} if AUTH_TOKEN else None
    return JsonRpcHttpClient(BASE_URL, headers, {"http": {"timeout": 5}}, log_level="debug")


def main() -> None:
    client = build_client()

    log_section("Headers sent with every request")
    for name, value in client.get_headers().items():
        print(f"  {name}: {value}")
    print(f"  override Connection -> {client.set_header('Connection', 'keep-alive')}")

    log_section("Single query")
    try:
        print_responses(client.query(1, "add", [2, 3]).send())
    except HttpException as exc:
        print(f"  server answered with status {exc.status_code}")
        return
    except TransportException as exc:
        print(f"  cannot reach {BASE_URL}: {exc}")
        return

    log_section("Batch of notifications and queries")
    client.notify("log", {"message": "batch start"})
    client.query("a", "add", [1, 1]).query("b", "subtract", {"minuend": 5, "subtrahend": 2})
    result = client.send_safe()
    if result.ok:
        print_responses(result.data or [])
    else:
        print(f"  batch failed: {result.error}")


if __name__ == "__main__":
    main()
