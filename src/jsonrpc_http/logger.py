"""Level-filtered logging wrapper used by the client and its transports."""

from __future__ import annotations

import logging
from typing import Any, Literal, Protocol

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

DEFAULT_LOGGER_NAME = "jsonrpc_http"

# level name -> (filter priority, stdlib level, duck-typed method name)
_LEVELS: dict[LogLevel, tuple[int, int, str]] = {
    "trace": (0, TRACE_LEVEL, "trace"),
    "debug": (1, logging.DEBUG, "debug"),
    "info": (2, logging.INFO, "info"),
    "warn": (3, logging.WARNING, "warning"),
    "error": (4, logging.ERROR, "error"),
}


class LoggerProtocol(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


class BoundLogger:
    """Filters records by level before handing them to the wrapped logger.

    The wrapped object is normally a :class:`logging.Logger`; anything exposing
    ``debug``/``info``/``warning``/``error`` methods is accepted as well.
    """

    def __init__(self, logger: Any | None = None, *, level: LogLevel = "info") -> None:
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        self._logger = logger if logger is not None else _default_logger()
        self._level = level

    @property
    def level(self) -> LogLevel:
        return self._level

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("trace", msg, args, kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("debug", msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("info", msg, args, kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("warn", msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("error", msg, args, kwargs)

    def child(self, name: str) -> "BoundLogger":
        """Return a logger for a sub-component, sharing this logger's level."""
        if isinstance(self._logger, logging.Logger):
            return BoundLogger(self._logger.getChild(name), level=self._level)
        return BoundLogger(self._logger, level=self._level)

    def _emit(self, level: LogLevel, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        priority, stdlib_level, method_name = _LEVELS[level]
        if priority < _LEVELS[self._level][0]:
            return
        try:
            if isinstance(self._logger, logging.Logger):
                self._logger.log(stdlib_level, msg, *args, **kwargs)
                return
            method = getattr(self._logger, method_name, None)
            if method is None and level == "warn":
                method = getattr(self._logger, "warn", None)
            if method is not None:
                method(msg, *args, **kwargs)
        except Exception:
            # Logging must never break a request
            pass


def _default_logger() -> logging.Logger:
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(TRACE_LEVEL)
    return logger


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogLevel", "LoggerProtocol", "TRACE_LEVEL", "create_logger"]
