"""Error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    UNRECOVERABLE = 4
    ABORTED = 5
    COMMAND_ERROR = 6


@dataclass
class TenaciousError(Exception):
    message: str
    code: ErrorCode = ErrorCode.UNRECOVERABLE
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class InvalidConfigurationError(TenaciousError):
    """A wait configuration or retry setting violates its invariants."""

    code: ErrorCode = ErrorCode.CONFIG_ERROR


@dataclass
class RetryAbortedError(TenaciousError):
    """A pending backoff pause was cancelled before it elapsed."""

    code: ErrorCode = ErrorCode.ABORTED


class UnrecoverableError(TenaciousError):
    """Retrying stopped for good; ``failure`` is the last exception observed."""

    def __init__(self, failure: BaseException, *, hint: str = "") -> None:
        super().__init__(f"Unrecoverable failure: {failure!r}", ErrorCode.UNRECOVERABLE, hint)
        self.failure = failure
        self.__cause__ = failure


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
