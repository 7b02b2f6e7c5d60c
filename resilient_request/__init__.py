"""Resilient HTTP request client with classified, backed-off retries."""

from .client import Request
from .config import ClientConfig, ConfigError, load_config, resolve_config
from .runner import ExecutionResult, FailureKind, classify, should_retry
from .transport import (
    AttemptOutcome,
    BackoffPolicy,
    Failure,
    HttpTransport,
    RequestOptions,
    RequestSpec,
    Success,
)

__version__ = "0.1.0"

__all__ = [
    "Request",
    "ClientConfig",
    "ConfigError",
    "load_config",
    "resolve_config",
    "ExecutionResult",
    "FailureKind",
    "classify",
    "should_retry",
    "AttemptOutcome",
    "BackoffPolicy",
    "Failure",
    "HttpTransport",
    "RequestOptions",
    "RequestSpec",
    "Success",
]
