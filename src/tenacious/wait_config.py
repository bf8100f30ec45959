"""Wait configuration values and the interval escalation rule."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from tenacious.errors import InvalidConfigurationError

MAX_ITERATIONS = 2**63 - 1


class TimeUnit(Enum):
    NANOSECONDS = "ns"
    MICROSECONDS = "us"
    MILLISECONDS = "ms"
    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"
    DAYS = "d"

    @property
    def nanos(self) -> int:
        return _NANOS_PER_UNIT[self]

    def to_seconds(self, amount: int) -> float:
        return amount * self.nanos / 1_000_000_000

    @classmethod
    def parse(cls, value: str | TimeUnit) -> TimeUnit:
        if isinstance(value, TimeUnit):
            return value
        normalized = str(value).strip()
        for unit in cls:
            if normalized.upper() == unit.name or normalized.lower() == unit.value:
                return unit
        accepted = ", ".join(unit.name for unit in cls)
        raise InvalidConfigurationError(
            f"Invalid time unit: {value}",
            hint=f"Use one of: {accepted}.",
        )


_NANOS_PER_UNIT = {
    TimeUnit.NANOSECONDS: 1,
    TimeUnit.MICROSECONDS: 1_000,
    TimeUnit.MILLISECONDS: 1_000_000,
    TimeUnit.SECONDS: 1_000_000_000,
    TimeUnit.MINUTES: 60 * 1_000_000_000,
    TimeUnit.HOURS: 3_600 * 1_000_000_000,
    TimeUnit.DAYS: 86_400 * 1_000_000_000,
}


def _require_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"{name} must be an integer.")


@dataclass(frozen=True)
class WaitConfiguration:
    """One phase of backoff.

    ``start_interval`` is how long to pause after each recoverable failure in this
    phase and ``end_interval`` is the cap that escalation doubles toward. After
    ``iterations`` attempts without success the phase is exhausted. When ``infinite``
    is set, reaching the cap lifts the iteration budget to ``MAX_ITERATIONS``.
    """

    unit: TimeUnit
    start_interval: int
    end_interval: int
    iterations: int
    infinite: bool = True
    log_first_stack_trace: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit", TimeUnit.parse(self.unit))
        _require_int("startInterval", self.start_interval)
        _require_int("endInterval", self.end_interval)
        _require_int("iterations", self.iterations)
        if self.start_interval <= 0:
            raise InvalidConfigurationError("startInterval must be greater than 0.")
        if self.end_interval < self.start_interval:
            raise InvalidConfigurationError(
                "endInterval must be greater than or equal to startInterval."
            )
        if self.iterations <= 0:
            raise InvalidConfigurationError("iterations must be greater than 0.")

    @classmethod
    def fixed(cls, unit: TimeUnit | str, interval: int, iterations: int) -> WaitConfiguration:
        return cls(unit, interval, interval, iterations, infinite=False)

    @classmethod
    def unbounded(cls, unit: TimeUnit | str, interval: int) -> WaitConfiguration:
        return cls(unit, interval, interval, MAX_ITERATIONS, infinite=True)

    @property
    def is_capped(self) -> bool:
        return self.start_interval == self.end_interval

    @property
    def can_escalate(self) -> bool:
        return self.start_interval < self.end_interval

    @property
    def sleep_seconds(self) -> float:
        return self.unit.to_seconds(self.start_interval)

    def escalate(self) -> WaitConfiguration:
        """Return the next phase: interval doubled and clamped to ``end_interval``.

        The iteration budget is carried forward unchanged, except that an ``infinite``
        configuration reaching the cap gets ``MAX_ITERATIONS``. Only the caller's own
        configuration logs a first stack trace.
        """
        iterations = self.iterations
        start_interval = self.start_interval * 2
        if start_interval >= self.end_interval:
            start_interval = self.end_interval
            if self.infinite:
                iterations = MAX_ITERATIONS
        return replace(
            self,
            start_interval=start_interval,
            iterations=iterations,
            log_first_stack_trace=False,
        )

    def escalations_to_cap(self) -> int:
        count = 0
        interval = self.start_interval
        while interval < self.end_interval:
            interval *= 2
            count += 1
        return count

    def describe(self) -> str:
        budget = "unbounded" if self.iterations == MAX_ITERATIONS else str(self.iterations)
        return (
            f"{self.start_interval}-{self.end_interval} {self.unit.name} "
            f"iterations={budget} infinite={self.infinite}"
        )
