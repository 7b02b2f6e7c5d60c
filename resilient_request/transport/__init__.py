"""Transport module - HTTP communication."""

from .http_client import INTERFACE_HEADER, HttpTransport
from .models import (
    AttemptOutcome,
    Failure,
    RequestOptions,
    RequestSpec,
    Success,
)
from .retry_policy import BackoffPolicy

__all__ = [
    "INTERFACE_HEADER",
    "HttpTransport",
    "AttemptOutcome",
    "Failure",
    "RequestOptions",
    "RequestSpec",
    "Success",
    "BackoffPolicy",
]
