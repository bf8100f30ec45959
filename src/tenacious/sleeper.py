"""Backoff pause primitives."""

from __future__ import annotations

import asyncio
import logging as py_logging
import threading
from typing import Protocol

from tenacious.errors import RetryAbortedError
from tenacious.wait_config import TimeUnit

logger = py_logging.getLogger(__name__)


class Sleeper(Protocol):
    def __call__(self, duration: int, unit: TimeUnit) -> None: ...


class AsyncSleeper(Protocol):
    async def __call__(self, duration: int, unit: TimeUnit) -> None: ...


class InterruptibleSleeper:
    """Blocking pause that another thread can cut short with :meth:`cancel`.

    Once cancelled, the pending pause and every later one raise
    :class:`RetryAbortedError` until :meth:`reset` is called.
    """

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        logger.debug("Backoff sleeper cancelled")
        self._cancelled.set()

    def reset(self) -> None:
        self._cancelled.clear()

    def __call__(self, duration: int, unit: TimeUnit) -> None:
        timeout = min(unit.to_seconds(duration), threading.TIMEOUT_MAX)
        if self._cancelled.wait(timeout=timeout):
            raise RetryAbortedError(
                "Retry backoff was cancelled.",
                hint="Reset the sleeper before retrying again.",
            )


async def async_sleep(duration: int, unit: TimeUnit) -> None:
    await asyncio.sleep(unit.to_seconds(duration))
