"""Retry engine with escalating backoff for recoverable operations."""

from __future__ import annotations

import functools
import inspect
import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from tenacious.errors import UnrecoverableError
from tenacious.reporting import RetryReporter
from tenacious.sleeper import AsyncSleeper, InterruptibleSleeper, Sleeper, async_sleep
from tenacious.wait_config import WaitConfiguration

T = TypeVar("T")

FailurePredicate = Callable[[Exception], "bool | None"]

logger = py_logging.getLogger(__name__)


class RecoveryMode(Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


class _PhaseExhausted:
    def __repr__(self) -> str:
        return "PHASE_EXHAUSTED"


PHASE_EXHAUSTED = _PhaseExhausted()

PhaseResult = Union[Success[T], _PhaseExhausted]


@dataclass
class RetryState:
    """Mutable progress of a single engine call.

    ``mode`` switches to ``DISABLED`` when a phase is exhausted at the capped
    interval; from then on every failure is unrecoverable.
    """

    config: WaitConfiguration
    predicate: FailurePredicate
    sleeper: Sleeper = field(default_factory=InterruptibleSleeper)
    mode: RecoveryMode = RecoveryMode.ENABLED
    phase: int = 1
    attempts: int = 0

    def cancel(self) -> None:
        if not isinstance(self.sleeper, InterruptibleSleeper):
            raise TypeError(f"Sleeper {self.sleeper!r} does not support cancellation")
        self.sleeper.cancel()

    def is_recoverable(self, failure: Exception) -> bool:
        if self.mode is RecoveryMode.DISABLED:
            return False
        return bool(self.predicate(failure))

    def advance(self, reporter: RetryReporter) -> None:
        if self.config.can_escalate:
            previous = self.config
            self.config = previous.escalate()
            reporter.escalated(previous, self.config)
        else:
            self.mode = RecoveryMode.DISABLED
            reporter.final_attempts(self.config)
        self.phase += 1


class RetryEngine:
    def __init__(
        self,
        config: WaitConfiguration,
        predicate: FailurePredicate,
        *,
        sleeper: Sleeper | None = None,
        async_sleeper: AsyncSleeper | None = None,
        reporter: RetryReporter | None = None,
    ) -> None:
        self.config = config
        self.predicate = predicate
        self.sleeper = sleeper
        self.async_sleeper: AsyncSleeper = async_sleeper or async_sleep
        self.reporter = reporter or RetryReporter()

    def new_state(self) -> RetryState:
        # Without an injected sleeper every call gets its own cancellation handle.
        sleeper = self.sleeper if self.sleeper is not None else InterruptibleSleeper()
        return RetryState(config=self.config, predicate=self.predicate, sleeper=sleeper)

    def _on_failure(self, state: RetryState, attempt: int, failure: Exception) -> None:
        if not state.is_recoverable(failure):
            logger.debug(
                "Unrecoverable failure on attempt=%s phase=%s: %r",
                attempt,
                state.phase,
                failure,
            )
            raise UnrecoverableError(failure) from failure
        self.reporter.recoverable(attempt, state.config, failure)

    def run_phase(self, state: RetryState, thunk: Callable[[], T]) -> PhaseResult[T]:
        attempt = 0
        while attempt < state.config.iterations:
            attempt += 1
            state.attempts += 1
            try:
                return Success(thunk())
            except Exception as exc:
                self._on_failure(state, attempt, exc)
            state.sleeper(state.config.start_interval, state.config.unit)
        return PHASE_EXHAUSTED

    async def run_phase_async(self, state: RetryState, thunk: Callable[[], Any]) -> PhaseResult[Any]:
        attempt = 0
        while attempt < state.config.iterations:
            attempt += 1
            state.attempts += 1
            try:
                value = thunk()
                if inspect.isawaitable(value):
                    value = await value
                return Success(value)
            except Exception as exc:
                self._on_failure(state, attempt, exc)
            await self.async_sleeper(state.config.start_interval, state.config.unit)
        return PHASE_EXHAUSTED

    def call(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return self.run(self.new_state(), operation, *args, **kwargs)

    def run(self, state: RetryState, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Drive ``operation`` with a caller-held state, which can be cancelled from another thread."""
        thunk = functools.partial(operation, *args, **kwargs)
        while True:
            result = self.run_phase(state, thunk)
            if isinstance(result, Success):
                return result.value
            state.advance(self.reporter)

    async def call_async(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        thunk = functools.partial(operation, *args, **kwargs)
        state = self.new_state()
        while True:
            result = await self.run_phase_async(state, thunk)
            if isinstance(result, Success):
                return result.value
            state.advance(self.reporter)


def run_with_retry(
    operation: Callable[[], T],
    *,
    config: WaitConfiguration,
    predicate: FailurePredicate,
    sleeper: Sleeper | None = None,
) -> T:
    return RetryEngine(config, predicate, sleeper=sleeper).call(operation)
