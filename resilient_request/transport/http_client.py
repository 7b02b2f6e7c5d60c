"""HTTP transport adapter.

Performs exactly one HTTP attempt for a RequestSpec and normalizes the
result into an outcome:

- 2xx responses        -> Success with the decoded payload
- non-2xx responses    -> Failure(reason phrase, status code)
- connection failures  -> Failure("getaddrinfo ENOTFOUND host", ...)
- attempt timeouts     -> Failure("Timeout of <N>ms exceeded")
- undecodable bodies   -> Failure("Invalid JSON response: ...")
- unencodable bodies   -> Failure("Invalid request body: ...")

Transport exceptions never escape ``attempt``.
"""

import logging
import socket
from http import HTTPStatus
from typing import Any, Iterator, Optional
from urllib.parse import urlsplit

import requests

from .models import AttemptOutcome, Failure, RequestOptions, RequestSpec, Success

logger = logging.getLogger(__name__)

INTERFACE_HEADER = "X-Interface-Name"

BODY_ENCODINGS = {"json", "form", "text"}

# Message fragments seen in requests/urllib3 errors when the underlying
# OS error is not reachable through the exception chain.
_RESOLVE_FRAGMENTS = (
    "Failed to resolve",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
)
_REFUSED_FRAGMENTS = ("Connection refused", "actively refused")
_RESET_FRAGMENTS = ("Connection reset", "Connection aborted", "RemoteDisconnected")
_READ_TIMEOUT_FRAGMENTS = ("Read timed out",)


class HttpTransport:
    """Single-attempt HTTP adapter over a requests session."""

    def __init__(self, session: Optional[requests.Session] = None):
        """Initialize the transport.

        Args:
            session: Session to send through. A new one is created (and
                owned, so closed by ``close``) when omitted.
        """
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def attempt(self, spec: RequestSpec, attempt_timeout_ms: float) -> AttemptOutcome:
        """Perform one HTTP round-trip.

        Args:
            spec: Request to send. ``spec.options`` must be set.
            attempt_timeout_ms: Timeout handed to requests. It bounds the
                connect and each socket read separately, not the attempt as
                a whole, so a server trickling its reply can run past it.

        Returns:
            Success or Failure. A body that cannot be encoded yields
            ``Failure("Invalid request body: ...")``.

        Raises:
            ValueError: If the spec has no options or an unknown body encoding.
        """
        options = spec.options
        if options is None:
            raise ValueError("RequestSpec.options must be set before sending")
        if options.body_encoding not in BODY_ENCODINGS:
            raise ValueError(
                f"Unsupported body encoding '{options.body_encoding}'. "
                f"Must be one of: {', '.join(sorted(BODY_ENCODINGS))}"
            )

        interface_name = spec.resolved_interface_name
        logger.info(
            "request to %s",
            spec.url,
            extra={
                "http_method": options.http_method,
                "interface_name": interface_name,
                "attempt": spec.current_attempt,
                "request_id": spec.request_id,
            },
        )

        try:
            response = self._send(spec, options, interface_name, attempt_timeout_ms)
            outcome = self._decode(response, options)
        except requests.ConnectTimeout:
            outcome = Failure(f"connect ETIMEDOUT {_host_port(spec.url)}")
        except requests.Timeout:
            outcome = Failure(_timeout_message(attempt_timeout_ms))
        except requests.ConnectionError as e:
            outcome = Failure(_describe_connection_error(e, spec.url, attempt_timeout_ms))
        except requests.RequestException as e:
            outcome = Failure(str(e) or type(e).__name__)
        except (TypeError, ValueError) as e:
            # raised by requests while serializing an unencodable body
            outcome = Failure(f"Invalid request body: {e}")

        if isinstance(outcome, Failure):
            target = spec.url or interface_name or spec.server or "none"
            logger.error("request err %s %s", target, outcome.err_message)

        return outcome

    def _send(
        self,
        spec: RequestSpec,
        options: RequestOptions,
        interface_name: str,
        attempt_timeout_ms: float,
    ) -> requests.Response:
        headers: dict[str, str] = {}
        if options.accept:
            headers["Accept"] = options.accept
        if interface_name:
            headers[INTERFACE_HEADER] = interface_name
        headers.update(options.headers or {})

        timeout = attempt_timeout_ms / 1000.0
        kwargs: dict[str, Any] = {"headers": headers, "timeout": timeout}

        if options.http_method == "get":
            params = spec.query if spec.query is not None else spec.body
            if params is not None:
                kwargs["params"] = params
        else:
            if spec.query is not None:
                kwargs["params"] = spec.query
            if spec.body is not None:
                if options.body_encoding == "json":
                    kwargs["json"] = spec.body
                elif options.body_encoding == "form":
                    kwargs["data"] = spec.body
                else:
                    kwargs["data"] = spec.body if isinstance(spec.body, (str, bytes)) else str(spec.body)
                    headers.setdefault("Content-Type", "text/plain")

        return self._session.request(options.http_method.upper(), spec.url, **kwargs)

    def _decode(self, response: requests.Response, options: RequestOptions) -> AttemptOutcome:
        status = response.status_code
        if not 200 <= status < 300:
            return Failure(_reason_phrase(response), status_code=status)

        if not _declares_json(options.accept):
            return Success({"text": response.text})

        if not response.content or not response.text.strip():
            return Success({})

        try:
            value = response.json()
        except ValueError as e:
            return Failure(f"Invalid JSON response: {e}")

        if isinstance(value, dict):
            return Success(value)
        return Success({"data": value})

    def close(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _declares_json(accept: Optional[str]) -> bool:
    return bool(accept) and "json" in accept.lower()


def _reason_phrase(response: requests.Response) -> str:
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return f"HTTP {response.status_code}"


def _format_ms(ms: float) -> str:
    return str(int(ms)) if float(ms).is_integer() else str(ms)


def _timeout_message(attempt_timeout_ms: float) -> str:
    return f"Timeout of {_format_ms(attempt_timeout_ms)}ms exceeded"


def _host_port(url: str) -> str:
    parts = urlsplit(url)
    host = parts.hostname or ""
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is None:
        port = 443 if parts.scheme == "https" else 80
    return f"{host}:{port}"


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk an exception, its args, causes, contexts and urllib3 reasons."""
    pending = [exc]
    seen: set[int] = set()
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        candidates = list(current.args) + [
            current.__cause__,
            current.__context__,
            getattr(current, "reason", None),
        ]
        pending.extend(c for c in candidates if isinstance(c, BaseException))


def _describe_connection_error(
    exc: requests.ConnectionError, url: str, attempt_timeout_ms: float
) -> str:
    """Render a connection error with its Node-style marker substring."""
    host = urlsplit(url).hostname or ""

    for cause in _iter_causes(exc):
        if isinstance(cause, socket.gaierror):
            return f"getaddrinfo ENOTFOUND {host}"
        if isinstance(cause, ConnectionRefusedError):
            return f"connect ECONNREFUSED {_host_port(url)}"
        if isinstance(cause, ConnectionResetError):
            return "read ECONNRESET"

    text = str(exc)
    if any(fragment in text for fragment in _RESOLVE_FRAGMENTS):
        return f"getaddrinfo ENOTFOUND {host}"
    if any(fragment in text for fragment in _REFUSED_FRAGMENTS):
        return f"connect ECONNREFUSED {_host_port(url)}"
    if any(fragment in text for fragment in _RESET_FRAGMENTS):
        return "read ECONNRESET"
    if any(fragment in text for fragment in _READ_TIMEOUT_FRAGMENTS):
        return _timeout_message(attempt_timeout_ms)
    return text or type(exc).__name__
