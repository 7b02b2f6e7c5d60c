"""Request and outcome models for the HTTP transport.

A logical call is described by a RequestSpec; every attempt produces
exactly one outcome, either a Success or a Failure.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional, Union

JSON_ACCEPT = "application/json"


@dataclass
class RequestOptions:
    """Method-level request options."""
    http_method: str
    accept: Optional[str] = None
    body_encoding: str = "json"
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.http_method = self.http_method.lower()
        self.body_encoding = self.body_encoding.lower()

    @classmethod
    def default_for(cls, http_method: str) -> "RequestOptions":
        """Options used when a caller supplies none."""
        return cls(http_method=http_method, accept=JSON_ACCEPT, body_encoding="json")


@dataclass
class RequestSpec:
    """One logical call, reused (copied per attempt) across retries."""
    url: str = ""
    query: Optional[dict[str, Any]] = None
    body: Any = None
    interface_name: Optional[str] = None
    server: Optional[str] = None
    request_id: Optional[str] = None
    options: Optional[RequestOptions] = None
    current_attempt: int = 1

    @property
    def resolved_interface_name(self) -> str:
        """Interface name, defaulting to the last path segment of the url."""
        if self.interface_name:
            return self.interface_name
        path = self.url.split("?", 1)[0].split("#", 1)[0]
        return path.split("/")[-1]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestSpec":
        """Build a spec from a mapping.

        ``options`` may itself be a mapping of RequestOptions fields.

        Raises:
            ValueError: If ``data`` or its ``options`` mapping has unknown keys.
        """
        values = dict(data)
        _reject_unknown(values, {f.name for f in fields(cls)}, "request")
        options = values.get("options")
        if isinstance(options, Mapping):
            _reject_unknown(options, set(RequestOptions.__dataclass_fields__), "options")
            values["options"] = RequestOptions(**options)
        return cls(**values)


def _reject_unknown(data: Mapping[str, Any], known: set, label: str) -> None:
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown {label} field(s): {', '.join(map(str, unknown))}. "
            f"Valid fields: {', '.join(sorted(known))}"
        )


@dataclass(frozen=True)
class Success:
    """A decoded success payload."""
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return dict(self.payload)


@dataclass(frozen=True)
class Failure:
    """A failed attempt.

    ``status_code`` is None for transport-level failures (connect, timeout,
    decode) and set for HTTP-level failures.
    """
    err_message: str
    status_code: Optional[Union[int, str]] = None

    @property
    def is_success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"err": self.err_message, "status": self.status_code}


AttemptOutcome = Union[Success, Failure]
