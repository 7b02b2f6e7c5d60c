"""Configuration loading for resilient-request.

Builds ClientConfig objects from keyword overrides, YAML files and
environment variables.
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .schema import (
    DEFAULTS,
    FLAG_FIELDS,
    INT_FIELDS,
    NUMBER_FIELDS,
    OPTIONAL_NUMBER_FIELDS,
    ClientConfig,
    ConfigError,
)
from .validator import validate_overrides

ENV_PREFIX = "RESILIENT_REQUEST_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def resolve_config(
    overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> ClientConfig:
    """Overlay overrides onto the default configuration.

    Args:
        overrides: Mapping of field name -> value.
        **kwargs: Additional overrides; these win over ``overrides``.

    Returns:
        A new immutable ClientConfig.

    Raises:
        ConfigError: If any override has an unknown name or a wrong type.
    """
    merged = dict(overrides or {})
    merged.update(kwargs)

    validation = validate_overrides(merged)
    if not validation.valid:
        raise ConfigError(validation)

    return replace(ClientConfig(), **merged)


def load_config(file_path: Union[str, Path]) -> dict[str, Any]:
    """Load configuration overrides from a YAML file.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Validated overrides mapping (possibly empty).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is not YAML or its content is invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise ValueError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    return parse_config_data(data, source=str(file_path))


def parse_config_data(data: Any, source: str = "<inline>") -> dict[str, Any]:
    """Validate an already-loaded configuration mapping.

    Hooks cannot be declared in data files.

    Raises:
        ValueError: If the data is not a mapping or fails validation.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__}")

    hooks = [name for name in ("before_send", "after_send") if name in data]
    if hooks:
        raise ValueError(f"Hooks cannot be set from {source}: {', '.join(hooks)}")

    validation = validate_overrides(data)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        raise ValueError(f"Invalid config in {source}: {errors_str}")

    return dict(data)


def overrides_from_env(
    environ: Optional[Mapping[str, str]] = None,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Read configuration overrides from environment variables.

    ``RESILIENT_REQUEST_MAX_RETRIES=2`` becomes ``{"max_retries": 2}``.
    Unset variables are skipped.

    Raises:
        ValueError: If a variable holds a value of the wrong type.
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    for name in DEFAULTS:
        key = prefix + name.upper()
        raw = environ.get(key)
        if raw is None or raw.strip() == "":
            continue
        overrides[name] = _coerce(name, raw.strip(), key)

    return overrides


def _coerce(name: str, raw: str, key: str) -> Any:
    """Convert an environment string to the field's type."""
    try:
        if name in INT_FIELDS:
            return int(raw)
        if name in NUMBER_FIELDS or name in OPTIONAL_NUMBER_FIELDS:
            number = float(raw)
            return int(number) if number.is_integer() else number
    except ValueError:
        raise ValueError(f"{key} must be numeric, got {raw!r}") from None

    if name in FLAG_FIELDS:
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"{key} must be a boolean, got {raw!r}")

    return raw
