"""Retry operations with escalating backoff."""

from .callers import TenaciousCaller, TenaciousFunction, tenacious
from .engine import RecoveryMode, RetryEngine, RetryState, run_with_retry
from .errors import (
    ErrorCode,
    InvalidConfigurationError,
    RetryAbortedError,
    TenaciousError,
    UnrecoverableError,
)
from .predicates import always, never, retry_on
from .sleeper import InterruptibleSleeper
from .wait_config import MAX_ITERATIONS, TimeUnit, WaitConfiguration

__all__ = [
    "always",
    "ErrorCode",
    "InterruptibleSleeper",
    "InvalidConfigurationError",
    "MAX_ITERATIONS",
    "never",
    "RecoveryMode",
    "retry_on",
    "RetryAbortedError",
    "RetryEngine",
    "RetryState",
    "run_with_retry",
    "tenacious",
    "TenaciousCaller",
    "TenaciousError",
    "TenaciousFunction",
    "TimeUnit",
    "UnrecoverableError",
    "WaitConfiguration",
]
