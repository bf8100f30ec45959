"""Call-site adapters around :class:`RetryEngine`."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from tenacious.engine import FailurePredicate, RetryEngine
from tenacious.predicates import always
from tenacious.sleeper import AsyncSleeper, Sleeper
from tenacious.wait_config import WaitConfiguration

R = TypeVar("R")


class TenaciousCaller:
    """Holds a configuration and predicate and calls arbitrary functions tenaciously."""

    def __init__(
        self,
        wait_config: WaitConfiguration,
        error_predicate: FailurePredicate,
        *,
        sleeper: Sleeper | None = None,
        async_sleeper: AsyncSleeper | None = None,
    ) -> None:
        self.wait_config = wait_config
        self.error_predicate = error_predicate
        self.engine = RetryEngine(
            wait_config, error_predicate, sleeper=sleeper, async_sleeper=async_sleeper
        )

    def call(self, func: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        return self.engine.call(func, *args, **kwargs)

    async def call_async(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await self.engine.call_async(func, *args, **kwargs)


class TenaciousFunction(Generic[R]):
    """Wraps one function so that every call to the wrapper retries it."""

    def __init__(
        self,
        wait_config: WaitConfiguration,
        error_predicate: FailurePredicate,
        func: Callable[..., R],
        *,
        sleeper: Sleeper | None = None,
    ) -> None:
        self.wait_config = wait_config
        self.error_predicate = error_predicate
        self.func = func
        self.engine = RetryEngine(wait_config, error_predicate, sleeper=sleeper)
        functools.update_wrapper(self, func)

    def __call__(self, *args: Any, **kwargs: Any) -> R:
        return self.engine.call(self.func, *args, **kwargs)

    def __get__(self, instance: object, owner: type | None = None) -> Callable[..., R]:
        if instance is None:
            return self
        return functools.partial(self, instance)


def tenacious(
    wait_config: WaitConfiguration,
    error_predicate: FailurePredicate = always,
    *,
    sleeper: Sleeper | None = None,
    async_sleeper: AsyncSleeper | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):
            engine = RetryEngine(wait_config, error_predicate, async_sleeper=async_sleeper)

            @functools.wraps(func)
            async def wrapper(*args: Any, **kwargs: Any) -> Any:
                return await engine.call_async(func, *args, **kwargs)

            return wrapper
        return TenaciousFunction(wait_config, error_predicate, func, sleeper=sleeper)

    return decorate
