"""HTTP header bookkeeping for outgoing requests."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

JSON_CONTENT_TYPE = "application/json"
CONNECTION_TYPE = "close"

REQUIRED_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Accept": JSON_CONTENT_TYPE,
        "Content-Type": JSON_CONTENT_TYPE,
        "Connection": CONNECTION_TYPE,
    }
)

HEADER_ENCODING = "latin-1"


def _is_encodable(text: str) -> bool:
    try:
        text.encode(HEADER_ENCODING)
    except UnicodeEncodeError:
        return False
    return True


def is_valid_header_name(name: Any) -> bool:
    if not isinstance(name, str) or not name:
        return False
    if name != name.strip():
        return False
    if any(char in name for char in ":\r\n"):
        return False
    return _is_encodable(name)


def is_valid_header_value(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    if "\r" in value or "\n" in value:
        return False
    return _is_encodable(value)


def is_valid_header(name: Any, value: Any) -> bool:
    return is_valid_header_name(name) and is_valid_header_value(value)


class HeaderSet:
    """Headers sent with every request, some of which are pinned.

    The pinned (required) headers are applied after the caller's headers, so
    they win on collision, and can never be changed or removed afterwards.
    Mutation reports failure through its boolean result rather than raising.
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        *,
        required: Mapping[str, str] = REQUIRED_HEADERS,
    ) -> None:
        self._required = dict(required)
        self._required_names = {name.lower(): name for name in self._required}
        self._entries: dict[str, str] = {}

        if isinstance(headers, Mapping):
            for name, value in headers.items():
                if is_valid_header(name, value) and not self.is_required(name):
                    self._entries[name] = value
        self._entries.update(self._required)

    def is_required(self, name: str) -> bool:
        return name.lower() in self._required_names

    def set(self, name: str, value: str) -> bool:
        if not is_valid_header(name, value):
            return False

        if self.is_required(name):
            return self._required[self._required_names[name.lower()]] == value

        self._entries[name] = value
        return True

    def unset(self, name: str) -> bool:
        if not is_valid_header_name(name):
            return True

        if self.is_required(name):
            return False

        self._entries.pop(name, None)
        return True

    def snapshot(self) -> dict[str, str]:
        return dict(self._entries)

    def render(self, extra: Mapping[str, Any] | None = None) -> bytes:
        """Serialize the headers as ``Name: value`` lines, CRLF terminated.

        ``extra`` holds per-request headers (``Content-Length``); they replace
        stored entries of the same name and are not remembered.
        """
        overrides = {str(name): str(value) for name, value in (extra or {}).items()}
        replaced = {name.lower() for name in overrides}

        lines = [
            f"{name}: {value}\r\n"
            for name, value in self._entries.items()
            if name.lower() not in replaced
        ]
        lines.extend(f"{name}: {value}\r\n" for name, value in overrides.items())
        return "".join(lines).encode(HEADER_ENCODING)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HeaderSet({self._entries!r})"


def parse_header_block(block: bytes | str) -> list[tuple[str, str]]:
    """Split a rendered header block back into ``(name, value)`` pairs."""
    text = block.decode(HEADER_ENCODING) if isinstance(block, bytes) else block
    pairs: list[tuple[str, str]] = []
    for line in text.split("\r\n"):
        if not line:
            continue
        name, separator, value = line.partition(":")
        if not separator:
            raise ValueError(f"Malformed header line: {line!r}")
        pairs.append((name, value[1:] if value.startswith(" ") else value))
    return pairs


__all__ = [
    "HeaderSet",
    "REQUIRED_HEADERS",
    "is_valid_header",
    "is_valid_header_name",
    "is_valid_header_value",
    "parse_header_block",
]
