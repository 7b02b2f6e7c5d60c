"""Per-attempt request/response hooks.

Exceptions raised by a hook are not caught here; they abort the logical
call.
"""

from typing import Callable, Optional

from ..transport.models import AttemptOutcome, Failure, RequestSpec, Success

BeforeSend = Callable[[RequestSpec], RequestSpec]
AfterSend = Callable[[AttemptOutcome], AttemptOutcome]


class HookPipeline:
    """Runs optional before/after transforms around a single attempt."""

    def __init__(
        self,
        before_send: Optional[BeforeSend] = None,
        after_send: Optional[AfterSend] = None,
    ):
        self.before_send = before_send
        self.after_send = after_send

    def run_before(self, spec: RequestSpec) -> RequestSpec:
        if self.before_send is None:
            return spec
        result = self.before_send(spec)
        if not isinstance(result, RequestSpec):
            raise TypeError(
                f"before_send must return a RequestSpec, got {type(result).__name__}"
            )
        return result

    def run_after(self, outcome: AttemptOutcome) -> AttemptOutcome:
        if self.after_send is None:
            return outcome
        result = self.after_send(outcome)
        if not isinstance(result, (Success, Failure)):
            raise TypeError(
                f"after_send must return a Success or Failure, got {type(result).__name__}"
            )
        return result
