"""Transport options accepted by the client constructor.

Options come in as a plain mapping of option groups, for example::

    {
        "http": {"timeout": 5},
        "ssl": {"verify_peer": False, "verify_peer_name": False},
    }

Only the ``http`` and ``ssl`` groups are recognized; other groups are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .errors import ConfigurationError
from .logger import BoundLogger

DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_REDIRECTS = 20


@dataclass(frozen=True)
class HttpOptions:
    timeout: float = DEFAULT_TIMEOUT
    ignore_errors: bool = False
    follow_location: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    proxy: str | None = None
    user_agent: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigurationError(f"http.timeout must be a positive number, got {self.timeout!r}")
        _require_bool("http.ignore_errors", self.ignore_errors)
        _require_bool("http.follow_location", self.follow_location)
        if isinstance(self.max_redirects, bool) or not isinstance(self.max_redirects, int) or self.max_redirects < 0:
            raise ConfigurationError(f"http.max_redirects must be a non-negative integer, got {self.max_redirects!r}")
        _require_optional_str("http.proxy", self.proxy)
        _require_optional_str("http.user_agent", self.user_agent)


@dataclass(frozen=True)
class SslOptions:
    verify_peer: bool = True
    verify_peer_name: bool = True
    cafile: str | None = None
    local_cert: str | None = None
    local_pk: str | None = None

    def __post_init__(self) -> None:
        _require_bool("ssl.verify_peer", self.verify_peer)
        _require_bool("ssl.verify_peer_name", self.verify_peer_name)
        _require_optional_str("ssl.cafile", self.cafile)
        _require_optional_str("ssl.local_cert", self.local_cert)
        _require_optional_str("ssl.local_pk", self.local_pk)
        if self.local_pk and not self.local_cert:
            raise ConfigurationError("ssl.local_pk requires ssl.local_cert")


@dataclass(frozen=True)
class TransportOptions:
    http: HttpOptions = field(default_factory=HttpOptions)
    ssl: SslOptions = field(default_factory=SslOptions)

    @classmethod
    def from_mapping(
        cls,
        options: Mapping[str, Any] | None,
        logger: BoundLogger | None = None,
    ) -> "TransportOptions":
        if options is None:
            return cls()
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Transport options must be a mapping, got {type(options).__name__}")

        groups = {"http": HttpOptions, "ssl": SslOptions}
        parsed: dict[str, Any] = {}
        for name, group in options.items():
            group_cls = groups.get(name)
            if group_cls is None:
                if logger:
                    logger.debug("Dropping unsupported option group %r", name)
                continue
            parsed[name] = _parse_group(name, group, group_cls, logger)
        return cls(**parsed)


def _parse_group(name: str, group: Any, group_cls: type, logger: BoundLogger | None) -> Any:
    if not isinstance(group, Mapping):
        raise ConfigurationError(f"Option group {name!r} must be a mapping, got {type(group).__name__}")

    known = {item.name for item in fields(group_cls)}
    values = {}
    for key, value in group.items():
        if key in known:
            values[key] = value
        elif logger:
            logger.debug("Ignoring unknown option %s.%s", name, key)
    return group_cls(**values)


def _require_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _require_optional_str(name: str, value: Any) -> None:
    if value is not None and (not isinstance(value, str) or not value):
        raise ConfigurationError(f"{name} must be a non-empty string, got {value!r}")


__all__ = ["HttpOptions", "SslOptions", "TransportOptions"]
