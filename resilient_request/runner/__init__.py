"""Runner module - retry orchestration."""

from .classifier import FailureKind, classify, should_retry
from .executor import ExecutionResult, RetryExecutor
from .hooks import HookPipeline

__all__ = [
    "FailureKind",
    "classify",
    "should_retry",
    "ExecutionResult",
    "RetryExecutor",
    "HookPipeline",
]
