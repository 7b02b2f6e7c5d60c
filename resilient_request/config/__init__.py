"""Config module - client retry/timeout policy."""

from .schema import (
    DEFAULTS,
    ClientConfig,
    ConfigError,
    ValidationError,
    ValidationResult,
)
from .parser import (
    load_config,
    overrides_from_env,
    parse_config_data,
    resolve_config,
)
from .validator import validate_overrides

__all__ = [
    "DEFAULTS",
    "ClientConfig",
    "ConfigError",
    "ValidationError",
    "ValidationResult",
    "load_config",
    "overrides_from_env",
    "parse_config_data",
    "resolve_config",
    "validate_overrides",
]
