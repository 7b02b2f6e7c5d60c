"""Retry executor - orchestrates attempts for one logical call.

Coordinates, per attempt:
1. before_send hook
2. Transport attempt
3. after_send hook
4. Retry decision
5. Backoff delay
"""

import copy
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..config.schema import ClientConfig
from ..transport.models import AttemptOutcome, RequestSpec, Success
from ..transport.retry_policy import BackoffPolicy
from .classifier import classify, should_retry
from .hooks import HookPipeline

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def attempt(self, spec: RequestSpec, attempt_timeout_ms: float) -> AttemptOutcome: ...


@dataclass
class ExecutionResult:
    """Final state of a logical call."""
    outcome: AttemptOutcome
    attempts: int = 0
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Success)


class RetryExecutor:
    """Runs a RequestSpec through the transport until it succeeds, fails
    with a non-retryable outcome, or exhausts ``max_retries + 1`` attempts.

    Holds no per-call state, so one executor may serve concurrent calls.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        backoff: Optional[BackoffPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the executor.

        Args:
            config: Resolved client configuration.
            transport: Object performing single attempts.
            backoff: Delay policy. Derived from ``config`` when omitted.
            sleep: Called with the delay in seconds between attempts.
        """
        self.config = config
        self.transport = transport
        self.backoff = backoff or BackoffPolicy.from_config(config)
        self.hooks = HookPipeline(config.before_send, config.after_send)
        self._sleep = sleep

    def execute(self, spec: RequestSpec) -> ExecutionResult:
        """Execute one logical call.

        Each attempt works on a deep copy of ``spec`` carrying the attempt
        number in ``current_attempt``; the caller's spec is not modified.

        Returns:
            ExecutionResult with the last observed outcome.

        Raises:
            Exception: Whatever a before_send/after_send hook raises.
        """
        start_time = time.monotonic()
        max_attempts = self.config.max_attempts
        attempt = 1

        while True:
            attempt_spec = copy.deepcopy(spec)
            attempt_spec.current_attempt = attempt
            attempt_spec = self.hooks.run_before(attempt_spec)
            outcome = self.transport.attempt(attempt_spec, self.config.attempt_timeout_ms)
            outcome = self.hooks.run_after(outcome)

            if not should_retry(outcome, self.config):
                break

            if attempt >= max_attempts:
                logger.warning(
                    "Giving up on %s after %d attempts (%s): %s",
                    spec.url, attempt, classify(outcome).value, outcome.err_message,
                )
                break

            delay = self.backoff.delay_seconds(attempt)
            logger.debug(
                "Attempt %d/%d for %s failed: %s; retrying in %.3fs",
                attempt, max_attempts, spec.url, outcome.err_message, delay,
            )
            if delay > 0:
                self._sleep(delay)
            attempt += 1

        return ExecutionResult(
            outcome=outcome,
            attempts=attempt,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
