"""Client configuration models.

Defines the immutable retry/timeout policy shared by every call made
through one client, plus the result types produced by override validation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

# Field name -> default. Hooks are not listed: they default to None and
# can only be supplied programmatically.
DEFAULTS: dict[str, Any] = {
    "max_retries": 4,
    "backoff_factor": 2,
    "min_timeout_ms": 1000,
    "max_timeout_ms": None,
    "attempt_timeout_ms": 60000,
    "retry_on_5xx": True,
    "retry_on_timeout": False,
    "retry_on_connect_error": True,
}

INT_FIELDS = {"max_retries"}
NUMBER_FIELDS = {"backoff_factor", "min_timeout_ms", "attempt_timeout_ms"}
OPTIONAL_NUMBER_FIELDS = {"max_timeout_ms"}
FLAG_FIELDS = {"retry_on_5xx", "retry_on_timeout", "retry_on_connect_error"}
HOOK_FIELDS = {"before_send", "after_send"}

VALID_FIELDS = set(DEFAULTS) | HOOK_FIELDS


class ConfigError(ValueError):
    """Raised when client overrides fail validation."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        details = "; ".join(f"{e.path}: {e.message}" for e in result.errors)
        super().__init__(f"Invalid client configuration: {details}")


@dataclass(frozen=True)
class ClientConfig:
    """Resolved retry and timeout policy for a client instance."""
    max_retries: int = DEFAULTS["max_retries"]
    backoff_factor: float = DEFAULTS["backoff_factor"]
    min_timeout_ms: float = DEFAULTS["min_timeout_ms"]
    max_timeout_ms: Optional[float] = DEFAULTS["max_timeout_ms"]
    # Passed to requests as its connect/read timeout; it bounds each socket
    # operation, not the total duration of an attempt.
    attempt_timeout_ms: float = DEFAULTS["attempt_timeout_ms"]
    retry_on_5xx: bool = DEFAULTS["retry_on_5xx"]
    retry_on_timeout: bool = DEFAULTS["retry_on_timeout"]
    retry_on_connect_error: bool = DEFAULTS["retry_on_connect_error"]
    before_send: Optional[Callable] = field(default=None, compare=False)
    after_send: Optional[Callable] = field(default=None, compare=False)

    @property
    def max_attempts(self) -> int:
        """Total attempts allowed for one logical call (at least one)."""
        return max(1, self.max_retries + 1)

    def to_dict(self) -> dict[str, Any]:
        """Convert the non-hook fields to a plain dictionary."""
        return {name: getattr(self, name) for name in DEFAULTS}


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str


@dataclass
class ValidationResult:
    """Result of override validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        if self.valid:
            return "Valid"
        return f"Invalid: {self.error_count} errors"
