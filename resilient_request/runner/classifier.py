"""Failure classification for retry decisions."""

from enum import Enum
from typing import Optional

from ..config.schema import ClientConfig
from ..transport.models import AttemptOutcome, Failure

CONNECT_ERROR_MARKERS = ("ENOTFOUND", "ECONNREFUSED", "ETIMEDOUT", "ECONNRESET")
DECODE_ERROR_PREFIX = "Invalid JSON response"


class FailureKind(str, Enum):
    """Failure taxonomy, used for reporting only."""
    CONNECT = "connect"
    TIMEOUT = "timeout"
    SERVER = "server"
    CLIENT = "client"
    DECODE = "decode"
    OTHER = "other"


def should_retry(outcome: AttemptOutcome, config: ClientConfig) -> bool:
    """Decide whether a completed attempt should be retried.

    The connect-error, 5xx and timeout checks are each gated by their own
    config flag and OR-combined. 4xx statuses are never retryable.

    Args:
        outcome: Result of one attempt.
        config: Client configuration.

    Returns:
        True if another attempt should be made (attempt budget aside).
    """
    if not isinstance(outcome, Failure) or not outcome.err_message:
        return False

    if is_client_error(outcome.status_code):
        return False

    message = outcome.err_message
    return (
        (config.retry_on_connect_error and is_connect_error(message))
        or (config.retry_on_5xx and is_server_error(outcome.status_code))
        or (config.retry_on_timeout and is_timeout(message))
    )


def is_connect_error(message: str) -> bool:
    return any(marker in message for marker in CONNECT_ERROR_MARKERS)


def is_timeout(message: str) -> bool:
    return "timeout" in message.lower()


def is_server_error(status_code) -> bool:
    status = _status_as_int(status_code)
    return status is not None and 500 <= status <= 599


def is_client_error(status_code) -> bool:
    status = _status_as_int(status_code)
    return status is not None and 400 <= status <= 499


def classify(outcome: AttemptOutcome) -> Optional[FailureKind]:
    """Map a Failure onto the failure taxonomy. Successes map to None."""
    if not isinstance(outcome, Failure):
        return None

    status = _status_as_int(outcome.status_code)
    if status is not None:
        if status >= 500:
            return FailureKind.SERVER
        if 400 <= status <= 499:
            return FailureKind.CLIENT
        return FailureKind.OTHER

    message = outcome.err_message or ""
    if is_connect_error(message):
        return FailureKind.CONNECT
    if is_timeout(message):
        return FailureKind.TIMEOUT
    if message.startswith(DECODE_ERROR_PREFIX):
        return FailureKind.DECODE
    return FailureKind.OTHER


def _status_as_int(status_code) -> Optional[int]:
    """Accept numeric and string-encoded statuses."""
    if status_code is None or isinstance(status_code, bool):
        return None
    try:
        return int(status_code)
    except (TypeError, ValueError):
        return None
