"""Transport implementations exposed to users."""

from .base import (
    ErrorStatus,
    ExchangeAttempt,
    ExchangeOutcome,
    Executor,
    NoResponse,
    RequestSettings,
    Success,
    TransportContext,
    classify,
)
from .http import HttpxExecutor

__all__ = [
    "ErrorStatus",
    "ExchangeAttempt",
    "ExchangeOutcome",
    "Executor",
    "HttpxExecutor",
    "NoResponse",
    "RequestSettings",
    "Success",
    "TransportContext",
    "classify",
]
