"""Log lines emitted while retrying."""

from __future__ import annotations

import logging as py_logging

from tenacious.wait_config import WaitConfiguration

logger = py_logging.getLogger(__name__)

TERMINAL_WARNING = "Retrying for the last time."


class RetryReporter:
    def __init__(self, log: py_logging.Logger | None = None) -> None:
        self.log = log or logger

    def recoverable(self, attempt: int, config: WaitConfiguration, failure: Exception) -> None:
        # Only the first failure of a phase carries the traceback.
        with_trace = config.log_first_stack_trace and attempt == 1
        self.log.info(
            "A recoverable exception occurred. %r\n\tRetrying in %s %s.",
            failure,
            config.start_interval,
            config.unit.name,
            exc_info=failure if with_trace else None,
        )

    def escalated(self, previous: WaitConfiguration, current: WaitConfiguration) -> None:
        self.log.debug(
            "Escalating backoff from %s to %s %s (iterations=%s)",
            previous.start_interval,
            current.start_interval,
            current.unit.name,
            current.iterations,
        )

    def final_attempts(self, config: WaitConfiguration) -> None:
        self.log.warning(TERMINAL_WARNING)
        self.log.debug("Recovery disabled at capped interval %s", config.describe())
