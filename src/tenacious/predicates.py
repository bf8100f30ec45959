"""Ready-made failure classifiers."""

from __future__ import annotations

from collections.abc import Callable

from tenacious.errors import InvalidConfigurationError


def always(failure: Exception) -> bool:
    del failure
    return True


def never(failure: Exception) -> bool:
    del failure
    return False


def retry_on(*exception_types: type[BaseException]) -> Callable[[Exception], bool]:
    if not exception_types:
        raise InvalidConfigurationError(
            "retry_on requires at least one exception type.",
            hint="Pass the exception classes that should be retried.",
        )
    for item in exception_types:
        if not (isinstance(item, type) and issubclass(item, BaseException)):
            raise InvalidConfigurationError(f"Not an exception type: {item!r}")

    def predicate(failure: Exception) -> bool:
        return isinstance(failure, exception_types)

    return predicate
