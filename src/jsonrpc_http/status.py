"""Parsing of the raw response header lines captured by a transport."""

from __future__ import annotations

import re
from typing import Any, Sequence

from .errors import ParseError

STATUS_LINE = re.compile(r"^HTTP/(?P<version>\d+(?:\.\d+)?) (?P<code>\d{3})(?: (?P<reason>.*))?$")


def _is_line_sequence(lines: Any) -> bool:
    return isinstance(lines, Sequence) and not isinstance(lines, (str, bytes))


class ResponseStatus:
    """Status line and headers of one HTTP response.

    ``lines`` is what the transport captured: the status line first, then
    ``Name: value`` header lines.
    """

    def __init__(self, lines: Sequence[str]) -> None:
        if not self.is_available(lines):
            raise ParseError("No HTTP response header lines available", context=lines)

        first = lines[0]
        match = STATUS_LINE.match(first.strip()) if isinstance(first, str) else None
        if match is None:
            raise ParseError(f"Invalid HTTP status line: {first!r}", context=lines)

        self.http_version = match.group("version")
        self.status_code = int(match.group("code"))
        self.reason_phrase = match.group("reason") or ""
        self.headers = _parse_header_lines(lines[1:])

    @staticmethod
    def is_available(lines: Any) -> bool:
        return _is_line_sequence(lines) and len(lines) > 0

    @property
    def status_line(self) -> str:
        line = f"HTTP/{self.http_version} {self.status_code}"
        return f"{line} {self.reason_phrase}" if self.reason_phrase else line

    def __repr__(self) -> str:
        return f"ResponseStatus({self.status_line!r})"


def _parse_header_lines(lines: Sequence[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in lines:
        if not isinstance(line, str):
            continue
        name, separator, value = line.partition(":")
        if separator and name.strip():
            headers[name.strip().lower()] = value.strip()
    return headers


__all__ = ["ResponseStatus", "STATUS_LINE"]
