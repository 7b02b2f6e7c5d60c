"""Public request client.

``get``, ``post`` and ``put`` fill in method defaults and hand the request
to the retry executor. Ordinary failures come back as ``Failure`` values;
only hook errors are raised.

Example:
    >>> from resilient_request import Request
    >>> client = Request(max_retries=2, retry_on_timeout=True)
    >>> outcome = client.post("https://api.example.com/widgets", {"body": {"name": "w"}})
    >>> if outcome.is_success:
    ...     print(outcome.payload)
    ... else:
    ...     print(outcome.err_message, outcome.status_code)
"""

import copy
import time
from typing import Any, Callable, Mapping, Optional, Union

from .config import ClientConfig, resolve_config
from .runner.classifier import should_retry
from .runner.executor import ExecutionResult, RetryExecutor, Transport
from .transport.http_client import HttpTransport
from .transport.models import AttemptOutcome, RequestOptions, RequestSpec

SpecInput = Optional[Union[RequestSpec, Mapping[str, Any]]]


class Request:
    """Resilient HTTP client.

    The configuration is resolved once here and never changes afterwards,
    so a single instance can be shared by concurrent callers.
    """

    def __init__(
        self,
        config: Optional[Union[ClientConfig, Mapping[str, Any]]] = None,
        transport: Optional[Transport] = None,
        sleep: Callable[[float], None] = time.sleep,
        **overrides: Any,
    ):
        """Initialize the client.

        Args:
            config: A ClientConfig, or a mapping of overrides.
            transport: Single-attempt transport. Defaults to HttpTransport.
            sleep: Backoff sleep function, in seconds.
            **overrides: Extra configuration overrides (win over ``config``).

        Raises:
            ConfigError: If the configuration is invalid.
        """
        if isinstance(config, ClientConfig):
            if overrides:
                base = dict(config.to_dict(), before_send=config.before_send, after_send=config.after_send)
                config = resolve_config(base, **overrides)
            self.config = config
        else:
            self.config = resolve_config(config, **overrides)

        self.transport = transport if transport is not None else HttpTransport()
        self._executor = RetryExecutor(self.config, self.transport, sleep=sleep)

    def get(self, url: str, spec: SpecInput = None) -> AttemptOutcome:
        """Send a GET request; ``query`` becomes the query string."""
        return self._call("get", url, spec)

    def post(self, url: str, spec: SpecInput = None) -> AttemptOutcome:
        """Send a POST request with ``body`` encoded per ``body_encoding``."""
        return self._call("post", url, spec)

    def put(self, url: str, spec: SpecInput = None) -> AttemptOutcome:
        """Send a PUT request with ``body`` encoded per ``body_encoding``."""
        return self._call("put", url, spec)

    def send(self, spec: RequestSpec) -> ExecutionResult:
        """Run a fully built spec (``options`` set) through the executor."""
        return self._executor.execute(spec)

    def should_retry(self, outcome: AttemptOutcome) -> bool:
        """Retry decision for ``outcome`` under this client's configuration."""
        return should_retry(outcome, self.config)

    def build_spec(self, http_method: str, url: str, spec: SpecInput = None) -> RequestSpec:
        """Copy the caller's spec, set the url and fill default options.

        Defaults replace ``options`` only when it is entirely absent;
        caller-supplied options are kept as given.
        """
        if spec is None:
            built = RequestSpec()
        elif isinstance(spec, RequestSpec):
            built = copy.deepcopy(spec)
        else:
            built = RequestSpec.from_dict(spec)

        built.url = url
        if built.options is None:
            built.options = RequestOptions.default_for(http_method)
        return built

    def _call(self, http_method: str, url: str, spec: SpecInput) -> AttemptOutcome:
        return self.send(self.build_spec(http_method, url, spec)).outcome

    def close(self) -> None:
        """Close the underlying transport, if it supports closing."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
